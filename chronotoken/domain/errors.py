"""
Error taxonomy for chronotoken.

Permanent errors (bad input, missing tokens, corrupt descriptors) are never
retried. TransientReadError is the only retryable failure; the inventory
retries it with bounded backoff and then reports it per token.
"""

from enum import Enum


class ChronoTokenError(Exception):
    """Base exception for all chronotoken errors."""

    pass


# =============================================================================
# Offsets
# =============================================================================


class OffsetRejection(Enum):
    NOT_INTEGER = "not_integer"
    OUT_OF_RANGE = "out_of_range"
    BAD_GRANULARITY = "bad_granularity"


class InvalidOffsetError(ChronoTokenError, ValueError):
    """Raised when a timezone offset fails validation."""

    def __init__(self, offset: object, reason: OffsetRejection, detail: str = ""):
        self.offset = offset
        self.reason = reason
        message = f"Invalid timezone offset {offset!r}: {reason.value}"
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message)


# =============================================================================
# Ledger reads
# =============================================================================


class TokenNotFoundError(ChronoTokenError, LookupError):
    """Raised when a token id has no owner."""

    def __init__(self, token_id: int):
        self.token_id = token_id
        super().__init__(f"Token {token_id} does not exist")


class TransientReadError(ChronoTokenError):
    """The external store was unreachable or too slow. Safe to retry."""

    pass


class MintRejection(Enum):
    INSUFFICIENT_PAYMENT = "insufficient_payment"
    INVALID_OFFSET = "invalid_offset"
    SUPPLY_CAP_REACHED = "supply_cap_reached"


class MintRejectedError(ChronoTokenError):
    """Raised by a ledger when a mint is refused."""

    def __init__(self, reason: MintRejection, detail: str = ""):
        self.reason = reason
        message = f"Mint rejected: {reason.value}"
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message)


# =============================================================================
# Descriptor decoding
# =============================================================================


class DecodeErrorKind(Enum):
    BAD_PREFIX = "bad_prefix"
    BAD_BASE64 = "bad_base64"
    MALFORMED_JSON = "malformed_json"


class DecodeError(ChronoTokenError, ValueError):
    """Base class for descriptor decoding failures."""

    kind: DecodeErrorKind

    def __init__(self, message: str):
        super().__init__(f"{self.kind.value}: {message}")


class BadPrefixError(DecodeError):
    """The string does not start with the expected data URI prefix."""

    kind = DecodeErrorKind.BAD_PREFIX


class BadBase64Error(DecodeError):
    """The prefix matched but the payload is not valid base64."""

    kind = DecodeErrorKind.BAD_BASE64


class MalformedJsonError(DecodeError):
    """The payload decoded but is not a well-formed descriptor document."""

    kind = DecodeErrorKind.MALFORMED_JSON
