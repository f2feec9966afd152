"""Call encoding for the external ERC20 and exchange contracts.

Only the two entry points the pipeline calls are described here:
- ERC20 approve(address spender, uint256 amount)
- Exchange swap(address executor, SwapDescription desc, bytes permit, bytes data)
"""

from typing import Any

from eth_abi import encode
from eth_utils import function_signature_to_4byte_selector, to_checksum_address

APPROVE_SIGNATURE = "approve(address,uint256)"
ERC20_APPROVE_SELECTOR = "0x095ea7b3"

# Field order of the exchange contract's SwapDescription struct
SWAP_DESCRIPTION_FIELDS: list[tuple[str, str]] = [
    ("srcToken", "address"),
    ("dstToken", "address"),
    ("srcReceiver", "address"),
    ("dstReceiver", "address"),
    ("amount", "uint256"),
    ("minReturnAmount", "uint256"),
    ("flags", "uint256"),
]

SWAP_DESCRIPTION_TYPE = "(" + ",".join(t for _, t in SWAP_DESCRIPTION_FIELDS) + ")"
SWAP_SIGNATURE = f"swap(address,{SWAP_DESCRIPTION_TYPE},bytes,bytes)"


def _selector(signature: str) -> bytes:
    return function_signature_to_4byte_selector(signature)


def _to_bytes(value: Any) -> bytes:
    """Accept raw bytes or a 0x-prefixed hex string."""
    if isinstance(value, (bytes, bytearray)):
        return bytes(value)
    if isinstance(value, str):
        text = value[2:] if value.startswith(("0x", "0X")) else value
        return bytes.fromhex(text)
    raise TypeError(f"Expected bytes or hex string, got {type(value).__name__}")


def _to_uint(value: Any) -> int:
    """Backend integers may arrive as JSON numbers, decimal or hex strings."""
    if isinstance(value, bool):
        raise TypeError("Boolean is not a uint256")
    if isinstance(value, int):
        result = value
    elif isinstance(value, str):
        result = int(value, 0) if value.lower().startswith("0x") else int(value)
    elif isinstance(value, dict) and "hex" in value:
        # ethers BigNumber JSON shape: {"type": "BigNumber", "hex": "0x.."}
        result = int(value["hex"], 16)
    else:
        raise TypeError(f"Cannot convert {type(value).__name__} to uint256")
    if result < 0:
        raise ValueError(f"uint256 cannot be negative: {result}")
    return result


def missing_swap_description_fields(description: Any) -> list[str]:
    """Return the SwapDescription fields absent from a backend object."""
    if not isinstance(description, dict):
        return [name for name, _ in SWAP_DESCRIPTION_FIELDS]
    return [name for name, _ in SWAP_DESCRIPTION_FIELDS if description.get(name) is None]


def swap_description_args(description: dict) -> tuple:
    """Convert the backend's SwapDescription object to the ABI tuple."""
    values = []
    for name, abi_type in SWAP_DESCRIPTION_FIELDS:
        raw = description[name]
        if abi_type == "address":
            values.append(to_checksum_address(raw))
        else:
            values.append(_to_uint(raw))
    return tuple(values)


def encode_approve_call(spender: str, amount: int) -> str:
    """Encode ERC20 approve(spender, amount) call data."""
    args = encode(["address", "uint256"], [to_checksum_address(spender), int(amount)])
    return "0x" + (_selector(APPROVE_SIGNATURE) + args).hex()


def encode_swap_call(
    executor: str,
    swap_description: dict,
    permit: bytes,
    calldata: Any,
) -> str:
    """Encode exchange swap(executor, desc, permit, data) call data."""
    args = encode(
        ["address", SWAP_DESCRIPTION_TYPE, "bytes", "bytes"],
        [
            to_checksum_address(executor),
            swap_description_args(swap_description),
            _to_bytes(permit),
            _to_bytes(calldata),
        ],
    )
    return "0x" + (_selector(SWAP_SIGNATURE) + args).hex()
