"""
CollectionObserverAPI - Clean interface for a presentation layer.

All methods are either:
- Queries (get_*): Read-only, safe to call any number of times
- Commands (do_*): Forward a write to the ledger, may raise ObserverError

Queries never surface a wrong or default state: a token that cannot be
read comes back as an explicit "unavailable" placeholder.
"""

from __future__ import annotations

import logging

from chronotoken.domain import (
    TIMEZONE_PRESETS,
    AccountId,
    ChronoTokenError,
    MintRejectedError,
    TimezonePreset,
    TokenId,
    TokenNotFoundError,
)
from chronotoken.ledger import TokenLedger
from chronotoken.services import CollectionInventory

from .snapshots import CollectionDisplaySnapshot, TokenDisplaySnapshot

logger = logging.getLogger(__name__)


# =============================================================================
# Exceptions
# =============================================================================


class ObserverError(Exception):
    """Base exception for Observer API errors."""

    pass


class TokenUnavailableError(ObserverError):
    """Raised when a token doesn't exist or can't be read right now."""

    def __init__(self, token_id: int, message: str):
        self.token_id = token_id
        super().__init__(f"Token {token_id} unavailable: {message}")


class MintFailedError(ObserverError):
    """Raised when a mint is rejected."""

    def __init__(self, error: MintRejectedError):
        self.reason = error.reason
        super().__init__(str(error))


# =============================================================================
# Observer API
# =============================================================================


class CollectionObserverAPI:
    """
    Query facade over a ledger and its inventory.

    Usage:
        api = CollectionObserverAPI(inventory)
        snapshot = await api.get_collection_snapshot(viewer="0xabc")
        detail = await api.get_token_snapshot(TokenId(3), viewer="0xabc")
    """

    def __init__(self, inventory: CollectionInventory, max_supply: int | None = None):
        self._inventory = inventory
        self._max_supply = max_supply

    @property
    def ledger(self) -> TokenLedger:
        return self._inventory.ledger

    # =========================================================================
    # QUERIES (Read-Only)
    # =========================================================================

    async def get_total_supply(self) -> int:
        return await self._inventory.total_supply()

    async def get_account_balance(self, account: AccountId) -> int:
        """Number of tokens an account owns."""
        return await self._inventory.balance_of(account)

    def get_timezone_presets(self) -> tuple[TimezonePreset, ...]:
        return TIMEZONE_PRESETS

    async def get_collection_snapshot(
        self,
        viewer: str | None = None,
        as_of: int | None = None,
    ) -> CollectionDisplaySnapshot:
        """Get every live token for display, plus collection stats."""
        total_supply = await self.get_total_supply()
        ids = self._inventory.list_live_ids(total_supply)
        batch = await self._inventory.refresh_many(ids, as_of)

        viewer_balance = None
        if viewer is not None:
            try:
                viewer_balance = await self.get_account_balance(AccountId(viewer))
            except ChronoTokenError as e:
                logger.warning(f"Balance unavailable for {viewer}: {e}")

        return CollectionDisplaySnapshot(
            total_supply=total_supply,
            max_supply=self._max_supply,
            viewer=viewer,
            viewer_balance=viewer_balance,
            as_of=batch.as_of,
            tokens=tuple(
                TokenDisplaySnapshot.from_read(batch[token_id], viewer)
                for token_id in ids
            ),
        )

    async def get_token_snapshot(
        self,
        token_id: TokenId,
        viewer: str | None = None,
        as_of: int | None = None,
    ) -> TokenDisplaySnapshot:
        """
        Get a single token for the detail view.

        Raises:
            TokenUnavailableError: The token does not exist
        """
        result = await self._inventory.read_token(token_id, as_of)
        if result.error is not None and isinstance(result.error.error, TokenNotFoundError):
            raise TokenUnavailableError(token_id, "this token does not exist")
        return TokenDisplaySnapshot.from_read(result, viewer)

    # =========================================================================
    # COMMANDS
    # =========================================================================

    async def do_mint(self, offset_minutes: int, payment: int, minter: AccountId) -> TokenId:
        """
        Mint a token for `minter` with a fixed offset.

        Raises:
            MintFailedError: The ledger rejected the mint
        """
        logger.info(f"OBSERVER_CMD | mint | minter={minter} | offset={offset_minutes}")
        try:
            return await self.ledger.mint(offset_minutes, payment, minter)
        except MintRejectedError as e:
            raise MintFailedError(e) from e
