"""Pytest configuration and fixtures."""

import json
import os
from decimal import Decimal
from typing import Callable, Optional

import httpx
import pytest
from web3.exceptions import ContractLogicError

# Set test environment
os.environ["RPC_URL"] = "http://127.0.0.1:8545"
os.environ["API_URL"] = "https://backend.test/bsc-mainnet"
os.environ["DEBUG"] = "false"
os.environ.pop("WALLET_SEED_PHRASE", None)

from directswap.backend.client import TradingBackendClient
from directswap.config import Settings
from directswap.signing.local import LocalSigner

API_URL = "https://backend.test/bsc-mainnet"

# Hardhat account #0
TEST_MNEMONIC = "test test test test test test test test test test test junk"
TEST_PRIVATE_KEY = "ac0974bec39a17e36ba4a6b4d238ff944bacb478cbed5efcae784d7bf4f2ff80"
TEST_ADDRESS = "0xf39Fd6e51aad88F6F4ce6aB8827279cffFb92266"

EXCHANGE_ADDRESS = "0x1111111111111111111111111111111111111111"
EXECUTOR_ADDRESS = "0x2222222222222222222222222222222222222222"
USDT_ADDRESS = "0x55d398326f99059fF775485246999027B3197955"
ORN_ADDRESS = "0x3333333333333333333333333333333333333333"

# ABI encoded bool true, as returned by approve
TRUE_WORD = (1).to_bytes(32, "big")

ROUTING_PATH = [
    {"pool": "0x4444444444444444444444444444444444444444", "assetIn": "USDT", "assetOut": "ORN"}
]


def trading_info_body() -> dict:
    return {
        "exchangeContractAddress": EXCHANGE_ADDRESS,
        "swapExecutorContractAddress": EXECUTOR_ADDRESS,
        "assetToAddress": {"USDT": USDT_ADDRESS, "ORN": ORN_ADDRESS},
    }


def calldata_body(receiver: str = TEST_ADDRESS) -> dict:
    return {
        "calldata": "0xdeadbeef",
        "swapDescription": {
            "srcToken": USDT_ADDRESS,
            "dstToken": ORN_ADDRESS,
            "srcReceiver": EXECUTOR_ADDRESS,
            "dstReceiver": receiver,
            "amount": "10000000",
            "minReturnAmount": "9405000",
            "flags": 0,
        },
    }


class MockBackend:
    """Routes trading backend requests to canned responses.

    Each route maps a path suffix to (status_code, body). Requests are
    recorded in order.
    """

    def __init__(self, **overrides):
        self.routes = {
            "/api/info": (200, trading_info_body()),
            "/api/gasPrice": (200, 3000000000),
            "/backend/api/v1/swap": (200, {"amountOut": 0.095, "exchangeContractPath": ROUTING_PATH}),
            "/api/trade/generate-swap-calldata": (200, calldata_body()),
        }
        self.routes.update(overrides)
        self.requests: list[httpx.Request] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        for suffix, (status, body) in self.routes.items():
            if request.url.path.endswith(suffix):
                if isinstance(body, Exception):
                    raise body
                if isinstance(body, str):
                    return httpx.Response(status, text=body)
                return httpx.Response(status, content=json.dumps(body).encode(), headers={"Content-Type": "application/json"})
        return httpx.Response(404, json={"error": "not found"})

    def paths(self) -> list[str]:
        return [r.url.path for r in self.requests]

    def client(self) -> TradingBackendClient:
        return TradingBackendClient(API_URL, timeout=5.0, transport=httpx.MockTransport(self.handler))


class FakeChain:
    """In-memory stand-in for ChainClient.

    Every broadcast bumps the pending nonce. Receipt status per broadcast
    index can be set through `statuses` (default 1). A call simulated before
    broadcast index i reverts when statuses[i] is 0, unless
    `simulation_reverts` says otherwise.
    """

    def __init__(
        self,
        chain_id: int = 56,
        start_nonce: int = 7,
        statuses: Optional[dict[int, int]] = None,
        send_errors: Optional[dict[int, Exception]] = None,
        simulation_reverts: Optional[bool] = None,
        simulation_result: bytes = TRUE_WORD,
    ):
        self.chain_id = chain_id
        self.pending_nonce = start_nonce
        self.statuses = statuses or {}
        self.send_errors = send_errors or {}
        self.simulation_reverts = simulation_reverts
        self.simulation_result = simulation_result
        self.sent: list[bytes] = []
        self.hashes: list[str] = []
        self.events: list[tuple] = []
        self.index_pending_nonce = True

    def get_chain_id(self) -> int:
        self.events.append(("chain_id", self.chain_id))
        return self.chain_id

    def get_pending_nonce(self, address: str) -> int:
        self.events.append(("nonce", self.pending_nonce))
        return self.pending_nonce

    def simulate(self, tx_params: dict) -> bytes:
        self.events.append(("simulate", tx_params["to"]))
        reverts = self.simulation_reverts
        if reverts is None:
            reverts = self.statuses.get(len(self.sent), 1) == 0
        if reverts:
            raise ContractLogicError("execution reverted: SafeERC20: approve from non-zero to non-zero allowance")
        return self.simulation_result

    def send_raw_transaction(self, raw_transaction: bytes) -> str:
        index = len(self.sent)
        if index in self.send_errors:
            self.events.append(("send_error", index))
            raise self.send_errors[index]
        tx_hash = "0x" + f"{index + 1:064x}"
        self.sent.append(raw_transaction)
        self.hashes.append(tx_hash)
        if self.index_pending_nonce:
            self.pending_nonce += 1
        self.events.append(("send", tx_hash))
        return tx_hash

    async def wait_for_receipt(self, tx_hash: str, timeout: float = 300.0, poll_interval: float = 2.0, confirmations: int = 1) -> dict:
        index = self.hashes.index(tx_hash)
        self.events.append(("receipt", tx_hash))
        return {
            "transactionHash": tx_hash,
            "status": self.statuses.get(index, 1),
            "blockNumber": 1000 + index,
            "gasUsed": 21000 + index,
        }


@pytest.fixture
def signer() -> LocalSigner:
    return LocalSigner(bytes.fromhex(TEST_PRIVATE_KEY))


@pytest.fixture
def chain() -> FakeChain:
    return FakeChain()


@pytest.fixture
def mock_backend() -> MockBackend:
    return MockBackend()


@pytest.fixture
def make_settings() -> Callable[..., Settings]:
    def _make(**overrides) -> Settings:
        values = {
            "api_url": API_URL,
            "rpc_url": "http://127.0.0.1:8545",
            "amount_in": Decimal("0.1"),
            "asset_in": "USDT",
            "asset_in_decimals": 18,
            "asset_out": "ORN",
            "slippage_tolerance": Decimal("0.99"),
            "decimals": 8,
            "poll_interval": 0.01,
            "confirmation_timeout": 5,
        }
        values.update(overrides)
        return Settings(**values)

    return _make
