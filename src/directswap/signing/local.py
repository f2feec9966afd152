"""Local signing backend.

Derives the EVM key from a BIP39 recovery phrase and keeps it in memory.

WARNING: The private key lives in process memory for the duration of the run.
"""

import logging
from typing import Optional

from bip_utils import Bip39SeedGenerator, Bip44, Bip44Changes, Bip44Coins
from eth_account import Account

from directswap.signing.base import KeyNotFoundError, SigningError, TransactionSigner

logger = logging.getLogger(__name__)


def derive_private_key(seed_phrase: str, index: int = 0) -> bytes:
    """Derive the EVM private key at m/44'/60'/0'/0/index."""
    seed = Bip39SeedGenerator(seed_phrase).Generate()
    bip44 = Bip44.FromSeed(seed, Bip44Coins.ETHEREUM)
    account = bip44.Purpose().Coin().Account(0).Change(Bip44Changes.CHAIN_EXT)
    return account.AddressIndex(index).PrivateKey().Raw().ToBytes()


class LocalSigner(TransactionSigner):
    """Signer holding one private key in memory."""

    def __init__(self, private_key: bytes):
        self._account = Account.from_key(private_key)

    @classmethod
    def from_seed_phrase(cls, seed_phrase: Optional[str], index: int = 0) -> "LocalSigner":
        """Create signer from a 12/24 word recovery phrase."""
        if not seed_phrase or not seed_phrase.strip():
            raise KeyNotFoundError("No wallet seed phrase configured (set WALLET_SEED_PHRASE)")
        try:
            private_key = derive_private_key(" ".join(seed_phrase.split()), index)
        except Exception as e:
            raise KeyNotFoundError(f"Cannot derive key from seed phrase: {type(e).__name__}") from e
        signer = cls(private_key)
        logger.debug(f"Derived signer {signer.address} at index {index}")
        return signer

    @property
    def address(self) -> str:
        return self._account.address

    def sign_transaction(self, tx_params: dict) -> bytes:
        """Sign transaction params with the local key."""
        try:
            signed_tx = self._account.sign_transaction(tx_params)
        except Exception as e:
            raise SigningError(f"Failed to sign transaction: {type(e).__name__}: {e}") from e

        # eth-account >= 0.13 uses raw_transaction, older versions use rawTransaction
        raw_tx = getattr(signed_tx, "raw_transaction", None) or signed_tx.rawTransaction
        return bytes(raw_tx)
