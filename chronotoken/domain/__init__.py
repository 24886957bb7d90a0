from .types import AccountId, TimePoint, TimezoneOffset, TokenId
from .errors import (
    BadBase64Error,
    BadPrefixError,
    ChronoTokenError,
    DecodeError,
    DecodeErrorKind,
    InvalidOffsetError,
    MalformedJsonError,
    MintRejectedError,
    MintRejection,
    OffsetRejection,
    TokenNotFoundError,
    TransientReadError,
)
from .offset import (
    TIMEZONE_PRESETS,
    TimezonePreset,
    check_granularity,
    find_preset,
    load_presets,
    format_offset,
    validate_offset,
)
from .time import LocalTimeBreakdown, TimeState, classify, state_for_hour
from .token import (
    LOCAL_TIME_TRAIT,
    STATE_TRAIT,
    TIMEZONE_TRAIT,
    UTC_TIME_TRAIT,
    MetadataDescriptor,
    TokenRecord,
    TraitAttribute,
    descriptor_state,
)

__all__ = [
    # Types
    "AccountId",
    "TimePoint",
    "TimezoneOffset",
    "TokenId",
    # Errors
    "BadBase64Error",
    "BadPrefixError",
    "ChronoTokenError",
    "DecodeError",
    "DecodeErrorKind",
    "InvalidOffsetError",
    "MalformedJsonError",
    "MintRejectedError",
    "MintRejection",
    "OffsetRejection",
    "TokenNotFoundError",
    "TransientReadError",
    # Offsets
    "TIMEZONE_PRESETS",
    "TimezonePreset",
    "check_granularity",
    "find_preset",
    "load_presets",
    "format_offset",
    "validate_offset",
    # Time
    "LocalTimeBreakdown",
    "TimeState",
    "classify",
    "state_for_hour",
    # Tokens
    "LOCAL_TIME_TRAIT",
    "STATE_TRAIT",
    "TIMEZONE_TRAIT",
    "UTC_TIME_TRAIT",
    "MetadataDescriptor",
    "TokenRecord",
    "TraitAttribute",
    "descriptor_state",
]
