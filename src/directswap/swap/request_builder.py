"""Swap request construction.

Pure computation: the quote and slippage tolerance become a fixed-point
request with a minimum acceptable return.
"""

import logging
from decimal import Decimal
from typing import Union

from directswap.errors import InvalidSwapParameters
from directswap.models import Quote, SwapRequest
from directswap.utils.units import to_decimal, to_fixed_point

logger = logging.getLogger(__name__)

# Fixed-point precision the swap backend expects for every asset
DEFAULT_DECIMALS = 8


def validate_slippage_tolerance(slippage_tolerance: Union[Decimal, str, float]) -> Decimal:
    """Return slippage tolerance as Decimal, rejecting values outside (0, 1]."""
    value = to_decimal(slippage_tolerance)
    if value <= 0 or value > 1:
        raise InvalidSwapParameters(f"slippage_tolerance must be in (0, 1], got {value}")
    return value


def min_return_amount(amount_out: Decimal, slippage_tolerance: Decimal, decimals: int) -> int:
    """Minimum output in fixed-point units: floor(amount_out * tolerance * 10**decimals)."""
    return to_fixed_point(to_decimal(amount_out) * to_decimal(slippage_tolerance), decimals)


def build_swap_request(
    quote: Quote,
    slippage_tolerance: Union[Decimal, str, float],
    receiver_address: str,
    decimals: int = DEFAULT_DECIMALS,
) -> SwapRequest:
    """Build the request sent to the calldata backend.

    Both amounts are scaled to the protocol precision, not to the input
    asset's native decimals.

    Example:
        0.1 USDT quoted at 0.095 ORN with tolerance 0.99 and 8 decimals
        -> amount=10000000, min_return_amount=9405000

    Raises:
        InvalidSwapParameters: Non-positive amount_in, negative amount_out,
            tolerance outside (0, 1] or negative precision
    """
    tolerance = validate_slippage_tolerance(slippage_tolerance)

    if decimals < 0:
        raise InvalidSwapParameters(f"Precision must be >= 0, got {decimals}")
    if quote.amount_in <= 0:
        raise InvalidSwapParameters(f"amount_in must be positive, got {quote.amount_in}")
    if quote.amount_out < 0:
        raise InvalidSwapParameters(f"amount_out cannot be negative, got {quote.amount_out}")
    if not receiver_address:
        raise InvalidSwapParameters("receiver_address is required")

    request = SwapRequest(
        amount=to_fixed_point(quote.amount_in, decimals),
        min_return_amount=min_return_amount(quote.amount_out, tolerance, decimals),
        receiver_address=receiver_address,
        path=list(quote.routing_path),
    )
    logger.info(
        f"Swap request: amount={request.amount} minReturnAmount={request.min_return_amount} "
        f"(tolerance {tolerance}, {decimals} decimals)"
    )
    return request
