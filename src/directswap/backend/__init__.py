"""Trading backend API client."""

from directswap.backend.client import TradingBackendClient
from directswap.backend.contracts import (
    SwapCalldataResponse,
    SwapInfoResponse,
    TradingInfoResponse,
)

__all__ = [
    "TradingBackendClient",
    "SwapCalldataResponse",
    "SwapInfoResponse",
    "TradingInfoResponse",
]
