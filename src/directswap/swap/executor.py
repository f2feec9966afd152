"""Swap execution pipeline.

One linear run per swap intent:
    trading info -> allowance -> quote -> swap request -> calldata
    -> assembled transaction -> signed, broadcast, confirmed transaction

Every stage fails fast. A failure after the approval leaves the allowance
on-chain; the caller restarts with a fresh quote.
"""

import logging
from typing import Optional

from directswap.backend.client import TradingBackendClient
from directswap.chain.rpc import ChainClient
from directswap.config import Settings, get_settings
from directswap.errors import BackendError, TradingInfoUnavailable
from directswap.models import SwapIntent, SwapResult, TradingInfo
from directswap.signing.base import TransactionSigner
from directswap.signing.local import LocalSigner
from directswap.swap.allowance import AllowanceManager
from directswap.swap.assembler import TransactionAssembler
from directswap.swap.calldata import CalldataGenerator
from directswap.swap.quote import QuoteResolver
from directswap.swap.request_builder import build_swap_request, validate_slippage_tolerance
from directswap.swap.submitter import TransactionSubmitter

logger = logging.getLogger(__name__)


class SwapExecutor:
    """Executes one swap intent end to end."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        backend: Optional[TradingBackendClient] = None,
        chain: Optional[ChainClient] = None,
        signer: Optional[TransactionSigner] = None,
    ):
        self.settings = settings or get_settings()
        self.backend = backend or TradingBackendClient(
            self.settings.api_url, timeout=self.settings.http_timeout
        )
        self.chain = chain or ChainClient(self.settings.rpc_url)
        self._signer = signer

    @property
    def signer(self) -> TransactionSigner:
        """Lazy derive the signer so parameter errors surface before key handling."""
        if self._signer is None:
            self._signer = LocalSigner.from_seed_phrase(
                self.settings.wallet_seed_phrase, self.settings.derivation_index
            )
        return self._signer

    def intent_from_settings(self) -> SwapIntent:
        return SwapIntent(
            asset_in=self.settings.asset_in,
            asset_out=self.settings.asset_out,
            amount_in=self.settings.amount_in,
        )

    async def _load_trading_info(self) -> tuple[TradingInfo, int]:
        try:
            info = await self.backend.get_trading_info()
            gas_price = await self.backend.get_gas_price()
        except BackendError as e:
            raise TradingInfoUnavailable("Trading backend info unavailable", cause=e) from e
        logger.debug(
            f"Exchange {info.exchange_contract_address}, executor "
            f"{info.swap_executor_contract_address}, gas price {gas_price} wei"
        )
        return info, gas_price

    async def execute(self, intent: Optional[SwapIntent] = None) -> SwapResult:
        """Run the pipeline for an intent (defaults to the configured one).

        Raises:
            SwapPipelineError: First failing stage, with its cause
            KeyNotFoundError: No usable wallet seed phrase
        """
        settings = self.settings
        intent = intent or self.intent_from_settings()
        tolerance = validate_slippage_tolerance(settings.slippage_tolerance)

        signer = self.signer
        logger.info(f"Wallet {signer.address}")

        info, gas_price = await self._load_trading_info()
        asset_in_address = info.address_for(intent.asset_in)

        allowance = AllowanceManager(
            self.chain,
            signer,
            gas_limit=settings.approval_gas_limit,
            wait_for_confirmation=settings.wait_for_approval,
            confirmation_timeout=settings.confirmation_timeout,
            poll_interval=settings.poll_interval,
        )
        approval = await allowance.approve(
            asset_in_address,
            info.exchange_contract_address,
            intent.amount_in,
            settings.asset_in_decimals,
            gas_price,
        )

        quote = await QuoteResolver(self.backend).resolve(intent)

        swap_request = build_swap_request(
            quote, tolerance, signer.address, decimals=settings.decimals
        )

        payload = await CalldataGenerator(self.backend).generate(swap_request)

        assembler = TransactionAssembler(self.chain, signer.address, gas_limit=settings.swap_gas_limit)
        tx = assembler.assemble(info, payload, gas_price, approval)

        submitter = TransactionSubmitter(
            self.chain,
            signer,
            confirmation_timeout=settings.confirmation_timeout,
            poll_interval=settings.poll_interval,
        )
        receipt = await submitter.submit(tx)

        logger.info(
            f"Success swap: {intent.amount_in} {intent.asset_in} -> {intent.asset_out} ({receipt.tx_hash})"
        )
        return SwapResult(
            wallet_address=signer.address,
            approval=approval,
            quote=quote,
            swap_request=swap_request,
            transaction=tx,
            receipt=receipt,
        )


def get_swap_executor(settings: Optional[Settings] = None) -> SwapExecutor:
    """Create a swap executor from settings."""
    return SwapExecutor(settings=settings)
