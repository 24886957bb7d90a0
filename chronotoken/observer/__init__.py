from .api import CollectionObserverAPI, MintFailedError, ObserverError, TokenUnavailableError
from .snapshots import (
    STATE_THEMES,
    UNAVAILABLE,
    CollectionDisplaySnapshot,
    StateTheme,
    TokenDisplaySnapshot,
    theme_for,
)

__all__ = [
    "CollectionObserverAPI",
    "MintFailedError",
    "ObserverError",
    "TokenUnavailableError",
    "STATE_THEMES",
    "UNAVAILABLE",
    "CollectionDisplaySnapshot",
    "StateTheme",
    "TokenDisplaySnapshot",
    "theme_for",
]
