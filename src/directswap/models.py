"""Data objects passed between pipeline stages.

Each object is created by one stage and consumed by the next. Only
UnsignedTransaction is mutable: the assembler fills it field by field.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Optional

from eth_utils import to_checksum_address

from directswap.errors import InvalidSwapParameters
from directswap.utils.units import to_decimal


@dataclass(frozen=True)
class SwapIntent:
    """Intent to sell amount_in of asset_in for asset_out."""

    asset_in: str
    asset_out: str
    amount_in: Decimal

    def __post_init__(self):
        amount = to_decimal(self.amount_in)
        asset_in = (self.asset_in or "").strip().upper()
        asset_out = (self.asset_out or "").strip().upper()

        if not asset_in or not asset_out:
            raise InvalidSwapParameters("Both asset_in and asset_out are required")
        if asset_in == asset_out:
            raise InvalidSwapParameters(f"Cannot swap {asset_in} for itself")
        if amount <= 0:
            raise InvalidSwapParameters(f"amount_in must be positive, got {amount}")

        object.__setattr__(self, "amount_in", amount)
        object.__setattr__(self, "asset_in", asset_in)
        object.__setattr__(self, "asset_out", asset_out)


@dataclass(frozen=True)
class TradingInfo:
    """Contract addresses published by the trading backend."""

    exchange_contract_address: str
    swap_executor_contract_address: str
    asset_to_address: dict[str, str] = field(default_factory=dict)

    def address_for(self, asset: str) -> str:
        """Get the token contract address of an asset symbol."""
        address = self.asset_to_address.get(asset.upper())
        if not address:
            raise InvalidSwapParameters(f"Asset {asset} is not listed by the trading backend")
        return address


@dataclass(frozen=True)
class Quote:
    """Expected output and routing path for a swap intent."""

    asset_in: str
    asset_out: str
    amount_in: Decimal
    amount_out: Decimal
    routing_path: list[Any] = field(default_factory=list)

    @property
    def effective_rate(self) -> Decimal:
        """Output units per input unit."""
        if self.amount_in == 0:
            return Decimal("0")
        return self.amount_out / self.amount_in


@dataclass(frozen=True)
class ApprovalReceipt:
    """Marker that the allowance transaction was broadcast.

    The swap transaction must use nonce + 1.
    """

    tx_hash: str
    nonce: int
    token_address: str
    spender: str
    amount: int
    confirmed: bool = False

    @property
    def next_nonce(self) -> int:
        return self.nonce + 1


@dataclass(frozen=True)
class SwapRequest:
    """Fixed-point swap intent sent to the calldata backend."""

    amount: int
    min_return_amount: int
    receiver_address: str
    path: list[Any] = field(default_factory=list)

    def to_payload(self) -> dict:
        """JSON body of the calldata request (integers as decimal strings)."""
        return {
            "amount": str(self.amount),
            "minReturnAmount": str(self.min_return_amount),
            "receiverAddress": self.receiver_address,
            "path": list(self.path),
        }


@dataclass(frozen=True)
class SwapExecutionPayload:
    """Backend-built call data. Passed through to the exchange contract unmodified."""

    calldata: str
    swap_description: dict[str, Any]


@dataclass
class UnsignedTransaction:
    """Transaction being assembled before signing."""

    to: str
    data: str
    value: int = 0
    chain_id: Optional[int] = None
    gas_price: Optional[int] = None
    gas_limit: Optional[int] = None
    nonce: Optional[int] = None
    from_address: Optional[str] = None

    @property
    def missing_fields(self) -> list[str]:
        return [
            name
            for name in ("chain_id", "gas_price", "gas_limit", "nonce", "from_address")
            if getattr(self, name) is None
        ]

    @property
    def is_complete(self) -> bool:
        return not self.missing_fields

    def to_tx_params(self) -> dict:
        """Convert to the legacy transaction dict eth_account signs."""
        if not self.is_complete:
            raise ValueError(f"Transaction is missing fields: {', '.join(self.missing_fields)}")
        return {
            "to": to_checksum_address(self.to),
            "data": self.data,
            "value": self.value,
            "chainId": self.chain_id,
            "gasPrice": self.gas_price,
            "gas": self.gas_limit,
            "nonce": self.nonce,
            "from": to_checksum_address(self.from_address),
        }


@dataclass(frozen=True)
class TransactionReceipt:
    """Inclusion record of a mined transaction."""

    tx_hash: str
    status: int
    block_number: Optional[int] = None
    gas_used: Optional[int] = None

    @property
    def succeeded(self) -> bool:
        return self.status == 1

    @classmethod
    def from_web3(cls, tx_hash: str, receipt: dict) -> "TransactionReceipt":
        return cls(
            tx_hash=tx_hash,
            status=int(receipt.get("status", 0)),
            block_number=receipt.get("blockNumber"),
            gas_used=receipt.get("gasUsed"),
        )


@dataclass
class SwapResult:
    """Outcome of one pipeline run."""

    wallet_address: str
    approval: ApprovalReceipt
    quote: Quote
    swap_request: SwapRequest
    transaction: UnsignedTransaction
    receipt: TransactionReceipt

    @property
    def tx_hash(self) -> str:
        return self.receipt.tx_hash

    def to_dict(self) -> dict:
        """Convert to dictionary for display."""
        return {
            "wallet": self.wallet_address,
            "approval_tx_hash": self.approval.tx_hash,
            "approval_nonce": self.approval.nonce,
            "amount_in": str(self.quote.amount_in),
            "asset_in": self.quote.asset_in,
            "expected_amount_out": str(self.quote.amount_out),
            "asset_out": self.quote.asset_out,
            "swap_request": self.swap_request.to_payload(),
            "swap_nonce": self.transaction.nonce,
            "tx_hash": self.receipt.tx_hash,
            "block_number": self.receipt.block_number,
            "gas_used": self.receipt.gas_used,
        }
