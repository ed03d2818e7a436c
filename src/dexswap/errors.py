"""Error taxonomy for the quote-and-execute pipeline.

Every failure surfaces as exactly one of these. Input errors are raised
before any network call. Aggregator rejections are kept apart from
transport failures so callers can retry only the latter.
"""

from typing import Optional


class SwapError(Exception):
    """Base class for all pipeline errors."""
    pass


class InputError(SwapError):
    """Raised for user-supplied values that fail validation."""
    pass


class InvalidTokenFormat(InputError):
    """Token identifier is not a 40-hex-digit address."""

    def __init__(self, value: str):
        self.value = value
        super().__init__(f"Invalid token address: {value!r}")


class InvalidAmount(InputError):
    """Human amount cannot be turned into a positive base-unit amount."""

    def __init__(self, value: str, reason: str = "must be a positive decimal number"):
        self.value = value
        self.reason = reason
        super().__init__(f"Invalid amount {value!r}: {reason}")


class AggregatorRejected(SwapError):
    """The aggregator answered, but with an error payload."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class QuoteFailed(AggregatorRejected):
    """Rate endpoint returned an error instead of a price route."""
    pass


class BuildFailed(AggregatorRejected):
    """Transaction endpoint returned an error instead of tx params."""
    pass


class NetworkError(SwapError):
    """Transport failure talking to the aggregator (timeout, DNS, 5xx)."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class StaleQuote(SwapError):
    """Quote cannot be used to build a transaction."""

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"Stale quote: {reason}")


class InvalidTransactionData(SwapError):
    """Aggregator tx params are missing or malformed."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class WalletError(SwapError):
    """Raised when the wallet provider fails to sign or broadcast."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class SignerRejected(WalletError):
    """User cancelled, or the wallet refused by policy."""
    pass


class SubmitFailed(WalletError):
    """Broadcast failed (nonce conflict, underpriced gas, bad hash)."""
    pass
