"""Trading backend HTTP client.

Wraps the four endpoints the swap pipeline needs:
- GET  /api/info                          contract addresses and asset map
- GET  /api/gasPrice                      gas price in wei
- GET  /backend/api/v1/swap               quote (amountOut + exchangeContractPath)
- POST /api/trade/generate-swap-calldata  swap calldata + swapDescription
"""

import logging
from decimal import Decimal
from typing import Any, Callable, Optional

import httpx
from pydantic import BaseModel, ValidationError

from directswap.backend.contracts import (
    SwapCalldataResponse,
    SwapInfoResponse,
    TradingInfoResponse,
)
from directswap.errors import BackendError
from directswap.models import TradingInfo

logger = logging.getLogger(__name__)

INFO_PATH = "/api/info"
GAS_PRICE_PATH = "/api/gasPrice"
SWAP_INFO_PATH = "/backend/api/v1/swap"
GENERATE_CALLDATA_PATH = "/api/trade/generate-swap-calldata"

# Route through liquidity pools only
POOLS_EXCHANGES = "pools"


class TradingBackendClient:
    """Async client for the trading backend."""

    def __init__(
        self,
        api_url: str,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """Initialize backend client.

        Args:
            api_url: Backend base URL (e.g. https://trade.orion.xyz/bsc-mainnet)
            timeout: Request timeout in seconds
            transport: Optional httpx transport (tests use httpx.MockTransport)
        """
        self.api_url = api_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    def _get_headers(self) -> dict:
        return {"Accept": "application/json"}

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self.timeout, transport=self._transport)

    async def _send(self, method: str, path: str, **kwargs) -> httpx.Response:
        url = f"{self.api_url}{path}"
        try:
            async with self._client() as client:
                response = await client.request(method, url, headers=self._get_headers(), **kwargs)
        except httpx.HTTPError as e:
            raise BackendError(f"{method} {path} failed: {type(e).__name__}: {e}") from e

        if response.status_code < 200 or response.status_code >= 300:
            logger.warning(f"Backend error: {method} {path} -> {response.status_code} - {response.text[:200]}")
            raise BackendError(
                f"{method} {path} returned HTTP {response.status_code}",
                status_code=response.status_code,
            )
        return response

    @staticmethod
    def _decode(
        response: httpx.Response,
        path: str,
        parse_float: Callable[[str], Any] = Decimal,
    ) -> Any:
        try:
            # Decimal keeps amounts exact (amountOut 0.095 must not become 0.09499999...)
            return response.json(parse_float=parse_float)
        except ValueError as e:
            raise BackendError(f"{path} returned invalid JSON", status_code=response.status_code) from e

    async def _request(self, method: str, path: str, **kwargs) -> Any:
        response = await self._send(method, path, **kwargs)
        return self._decode(response, path)

    @staticmethod
    def _parse(model: type[BaseModel], data: Any, path: str) -> Any:
        try:
            return model.model_validate(data)
        except ValidationError as e:
            raise BackendError(f"Malformed response from {path}: {e.error_count()} invalid field(s)") from e

    async def get_trading_info(self) -> TradingInfo:
        """Get exchange, executor and asset contract addresses."""
        data = await self._request("GET", INFO_PATH)
        info = self._parse(TradingInfoResponse, data, INFO_PATH)
        return TradingInfo(
            exchange_contract_address=info.exchange_contract_address,
            swap_executor_contract_address=info.swap_executor_contract_address,
            asset_to_address={k.upper(): v for k, v in info.asset_to_address.items()},
        )

    async def get_gas_price(self) -> int:
        """Get current gas price in wei."""
        data = await self._request("GET", GAS_PRICE_PATH)
        if isinstance(data, bool):
            raise BackendError(f"Malformed gas price: {data!r}")
        try:
            gas_price = int(Decimal(str(data)))
        except (ArithmeticError, ValueError) as e:
            raise BackendError(f"Malformed gas price: {data!r}") from e
        if gas_price <= 0:
            raise BackendError(f"Gas price must be positive, got {gas_price}")
        return gas_price

    async def get_swap_info(self, asset_in: str, asset_out: str, amount_in: Decimal) -> SwapInfoResponse:
        """Get a pool-routed quote for amount_in of asset_in.

        amountOut is read as Decimal. exchangeContractPath is read with plain
        JSON numbers: it goes back to the backend as-is in the calldata request.
        """
        params = {
            "amountIn": format(amount_in.normalize(), "f"),
            "assetIn": asset_in,
            "assetOut": asset_out,
            "exchanges": POOLS_EXCHANGES,
        }
        response = await self._send("GET", SWAP_INFO_PATH, params=params)
        info = self._parse(SwapInfoResponse, self._decode(response, SWAP_INFO_PATH), SWAP_INFO_PATH)

        raw = self._parse(
            SwapInfoResponse,
            self._decode(response, SWAP_INFO_PATH, parse_float=float),
            SWAP_INFO_PATH,
        )
        return info.model_copy(update={"exchange_contract_path": raw.exchange_contract_path})

    async def generate_swap_calldata(self, payload: dict) -> SwapCalldataResponse:
        """Exchange a swap request body for executable calldata."""
        data = await self._request("POST", GENERATE_CALLDATA_PATH, json=payload)
        return self._parse(SwapCalldataResponse, data, GENERATE_CALLDATA_PATH)
