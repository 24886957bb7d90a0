"""
chronotoken - time-of-day collectible tokens.

Tokens carry a fixed timezone offset chosen at mint time. Their state
(Night, Morning, Day) and metadata are recomputed from wall-clock time on
every read:

- domain: offset validation and the time-state classifier
- codec: descriptor data URIs and the per-state SVG artwork
- ledger: the external ledger protocol and an in-memory reference ledger
- services: inventory reads and re-entrant refresh
- observer: display snapshots for a presentation layer

Example usage:
    from chronotoken import CollectionInventory, InMemoryLedger, classify

    ledger = InMemoryLedger()
    token_id = await ledger.mint(330, payment=10**16, minter="0xabc")
    batch = await CollectionInventory(ledger).refresh_all()
"""

__version__ = "0.1.0"

from .domain import (
    LocalTimeBreakdown,
    MetadataDescriptor,
    TimeState,
    classify,
    format_offset,
    validate_offset,
)
from .codec import decode, encode
from .ledger import InMemoryLedger, TokenLedger
from .services import CollectionInventory, RefreshCoordinator, RefreshPolicy
from .observer import CollectionObserverAPI
from .logging_config import setup_logging

__all__ = [
    "LocalTimeBreakdown",
    "MetadataDescriptor",
    "TimeState",
    "classify",
    "format_offset",
    "validate_offset",
    "decode",
    "encode",
    "InMemoryLedger",
    "TokenLedger",
    "CollectionInventory",
    "RefreshCoordinator",
    "RefreshPolicy",
    "CollectionObserverAPI",
    "setup_logging",
]
