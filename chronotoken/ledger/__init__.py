from .protocol import TokenLedger
from .memory import InMemoryLedger, system_clock

__all__ = [
    "TokenLedger",
    "InMemoryLedger",
    "system_clock",
]
