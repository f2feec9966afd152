"""Calldata generation through the trading backend.

Trust boundary: the backend is trusted to return calldata and a
swapDescription consistent with the request it was given. Only the shape of
the answer is checked, never its content.
"""

import logging

from directswap.abi import missing_swap_description_fields
from directswap.backend.client import TradingBackendClient
from directswap.errors import BackendError, CalldataGenerationFailed
from directswap.models import SwapExecutionPayload, SwapRequest

logger = logging.getLogger(__name__)


class CalldataGenerator:
    """Exchanges a swap request for executable calldata."""

    def __init__(self, backend: TradingBackendClient):
        self.backend = backend

    async def generate(self, request: SwapRequest) -> SwapExecutionPayload:
        """POST the swap request and return the execution payload.

        Raises:
            CalldataGenerationFailed: Non-success response or missing
                calldata / swapDescription fields
        """
        try:
            response = await self.backend.generate_swap_calldata(request.to_payload())
        except BackendError as e:
            raise CalldataGenerationFailed("Backend did not generate swap calldata", cause=e) from e

        if not response.calldata.startswith("0x"):
            raise CalldataGenerationFailed(f"calldata is not hex encoded: {response.calldata[:20]}")

        missing = missing_swap_description_fields(response.swap_description)
        if missing:
            raise CalldataGenerationFailed(
                f"swapDescription is missing field(s): {', '.join(missing)}"
            )

        logger.info(f"Received swap calldata ({(len(response.calldata) - 2) // 2} bytes)")
        logger.debug(f"swapDescription: {response.swap_description}")
        return SwapExecutionPayload(
            calldata=response.calldata,
            swap_description=response.swap_description,
        )
