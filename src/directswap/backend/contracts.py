"""Response contracts of the trading backend API."""

from decimal import Decimal
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class TradingInfoResponse(BaseModel):
    """GET /api/info"""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    exchange_contract_address: str = Field(..., alias="exchangeContractAddress")
    asset_to_address: dict[str, str] = Field(..., alias="assetToAddress")
    swap_executor_contract_address: str = Field(..., alias="swapExecutorContractAddress")


class SwapInfoResponse(BaseModel):
    """GET /backend/api/v1/swap"""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    amount_out: Decimal = Field(..., ge=0, alias="amountOut")
    exchange_contract_path: list[Any] = Field(..., alias="exchangeContractPath")


class SwapCalldataResponse(BaseModel):
    """POST /api/trade/generate-swap-calldata"""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    calldata: str = Field(..., min_length=2)
    swap_description: dict[str, Any] = Field(..., alias="swapDescription")
