"""Base interface for transaction signing.

Signing flow:
1. Assemble unsigned transaction params
2. Submit to signer
3. Signer returns the raw signed transaction (private key never leaves it)
4. Broadcast raw transaction
"""

import logging
from abc import ABC, abstractmethod

logger = logging.getLogger(__name__)


class TransactionSigner(ABC):
    """Abstract signing identity: one address, one signing capability."""

    @property
    @abstractmethod
    def address(self) -> str:
        """Checksum address of the signing account."""
        pass

    @abstractmethod
    def sign_transaction(self, tx_params: dict) -> bytes:
        """Sign a transaction dict.

        Args:
            tx_params: Legacy transaction params (to, data, value, chainId,
                gasPrice, gas, nonce, from)

        Returns:
            Raw signed transaction bytes ready for broadcast
        """
        pass

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(address={self.address})"


class SigningError(Exception):
    """Exception raised when signing fails."""
    pass


class KeyNotFoundError(SigningError):
    """Exception raised when no signing key is configured."""
    pass
