"""Quote resolution through the trading backend."""

import logging

from directswap.backend.client import TradingBackendClient
from directswap.errors import BackendError, QuoteUnavailable
from directswap.models import Quote, SwapIntent

logger = logging.getLogger(__name__)


class QuoteResolver:
    """Turns a swap intent into expected output and routing path."""

    def __init__(self, backend: TradingBackendClient):
        self.backend = backend

    async def resolve(self, intent: SwapIntent) -> Quote:
        """Query the pool-routed quote for an intent.

        Raises:
            QuoteUnavailable: Service unreachable, non-success answer or
                missing amountOut / exchangeContractPath
        """
        logger.info(f"Requesting quote: {intent.amount_in} {intent.asset_in} -> {intent.asset_out}")
        try:
            swap_info = await self.backend.get_swap_info(
                intent.asset_in, intent.asset_out, intent.amount_in
            )
        except BackendError as e:
            raise QuoteUnavailable(
                f"No quote for {intent.asset_in}->{intent.asset_out}", cause=e
            ) from e

        quote = Quote(
            asset_in=intent.asset_in,
            asset_out=intent.asset_out,
            amount_in=intent.amount_in,
            amount_out=swap_info.amount_out,
            routing_path=list(swap_info.exchange_contract_path),
        )
        logger.info(
            f"Quote: {quote.amount_in} {quote.asset_in} -> {quote.amount_out} {quote.asset_out} "
            f"(rate {quote.effective_rate}) via {len(quote.routing_path)} hop(s)"
        )
        logger.debug(f"Routing path: {quote.routing_path}")
        return quote
