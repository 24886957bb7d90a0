from .retry import backoff_delay, with_retry
from .inventory import CollectionInventory, ReadFailure, RefreshBatch, TokenReadResult
from .refresh import RefreshClosedError, RefreshCoordinator, RefreshPolicy

__all__ = [
    "backoff_delay",
    "with_retry",
    "CollectionInventory",
    "ReadFailure",
    "RefreshBatch",
    "TokenReadResult",
    "RefreshClosedError",
    "RefreshCoordinator",
    "RefreshPolicy",
]
