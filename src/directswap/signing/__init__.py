"""Transaction signing.

- TransactionSigner: signing identity interface
- LocalSigner: key derived from a recovery phrase, held in memory
"""

from directswap.signing.base import KeyNotFoundError, SigningError, TransactionSigner
from directswap.signing.local import LocalSigner

__all__ = [
    "KeyNotFoundError",
    "LocalSigner",
    "SigningError",
    "TransactionSigner",
]
