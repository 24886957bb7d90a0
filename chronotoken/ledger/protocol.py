"""
TokenLedger - the external ledger as seen by the core.

The ledger owns ownership, supply and offsets. The core only reads from it
(and forwards mint requests). Transports that talk to a real chain implement
this protocol; InMemoryLedger is the in-process reference implementation.
"""

from typing import Protocol, runtime_checkable

from chronotoken.domain import AccountId, LocalTimeBreakdown, TimeState, TokenId


@runtime_checkable
class TokenLedger(Protocol):
    """
    Read-only ledger view plus the single mint write.

    Reads raise TokenNotFoundError for ids with no owner, and
    TransientReadError when the store cannot be reached.
    """

    async def owner_of(self, token_id: TokenId) -> AccountId:
        ...

    async def total_supply(self) -> int:
        ...

    async def balance_of(self, account: AccountId) -> int:
        ...

    async def timezone_offset_of(self, token_id: TokenId) -> int:
        ...

    async def descriptor_of(self, token_id: TokenId) -> str:
        """Encoded descriptor, built with the ledger's "now"."""
        ...

    async def current_state(self, token_id: TokenId) -> TimeState:
        ...

    async def detailed_time_info(self, token_id: TokenId) -> LocalTimeBreakdown:
        ...

    async def mint(self, offset_minutes: int, payment: int, minter: AccountId) -> TokenId:
        """
        Mint a token with a fixed timezone offset.

        Raises:
            MintRejectedError: Insufficient payment, invalid offset, or cap reached
        """
        ...
