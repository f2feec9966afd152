"""Error taxonomy of the swap pipeline.

Every stage fails fast by raising a SwapPipelineError subclass. The error
carries the stage name and the underlying cause; nothing is retried, the
caller restarts the whole pipeline with a fresh quote.
"""

from typing import Optional


class SwapPipelineError(Exception):
    """Base class for all pipeline failures."""

    stage = "pipeline"

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.message = message
        self.cause = cause

    def __str__(self) -> str:
        text = f"[{self.stage}] {self.message}"
        if self.cause is not None:
            text += f" ({type(self.cause).__name__}: {self.cause})"
        return text


class InvalidSwapParameters(SwapPipelineError, ValueError):
    """Swap intent or swap request parameters are out of range."""

    stage = "swap_request"


class TradingInfoUnavailable(SwapPipelineError):
    """Backend info or gas price lookup failed."""

    stage = "trading_info"


class QuoteUnavailable(SwapPipelineError):
    """Quote service unreachable or answered with a malformed quote."""

    stage = "quote"


class ApprovalSubmissionFailed(SwapPipelineError):
    """Approval transaction could not be broadcast."""

    stage = "allowance"


class ApprovalRejected(SwapPipelineError):
    """Approval call reverted on-chain."""

    stage = "allowance"

    def __init__(self, message: str, tx_hash: Optional[str] = None, cause: Optional[BaseException] = None):
        super().__init__(message, cause)
        self.tx_hash = tx_hash


class CalldataGenerationFailed(SwapPipelineError):
    """Backend could not produce swap calldata."""

    stage = "calldata"


class ChainQueryFailed(SwapPipelineError):
    """An RPC query (chain id, nonce) failed or returned inconsistent state."""

    stage = "chain"


class SubmissionRejected(SwapPipelineError):
    """Node refused the swap transaction at broadcast."""

    stage = "submit"


class TransactionReverted(SwapPipelineError):
    """Transaction was mined with status 0. Gas is already spent."""

    stage = "confirm"

    def __init__(self, message: str, tx_hash: str, receipt: Optional[dict] = None):
        super().__init__(message)
        self.tx_hash = tx_hash
        self.receipt = receipt or {}


class ConfirmationTimeout(SwapPipelineError):
    """Transaction was not mined within the configured timeout."""

    stage = "confirm"

    def __init__(self, message: str, tx_hash: str, timeout: float):
        super().__init__(message)
        self.tx_hash = tx_hash
        self.timeout = timeout


class BackendError(Exception):
    """Low-level trading backend failure (transport, status or payload shape)."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code
