"""
RefreshCoordinator - re-entrant, cancellable refresh of a page of tokens.

Every refresh that actually starts gets a sequence number. Results are
applied last-writer-wins by sequence number, never by arrival order, and
nothing is applied once a refresh has been abandoned.

Policies:
- SUPERSEDE: a new refresh cancels the in-flight one; its result is
  discarded even if it still arrives.
- COALESCE: a refresh requested while one is in flight joins it and
  returns the same result.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Callable, Iterable
from enum import Enum

from chronotoken.domain import TokenId
from chronotoken.logging_config import log_refresh

from .inventory import CollectionInventory, RefreshBatch

logger = logging.getLogger(__name__)


class RefreshPolicy(Enum):
    SUPERSEDE = "supersede"
    COALESCE = "coalesce"


class RefreshClosedError(RuntimeError):
    """Raised when refreshing through a coordinator that has been closed."""

    pass


class RefreshCoordinator:
    """
    Owns the in-flight refresh for one view of the collection.

    Usage:
        coordinator = RefreshCoordinator(inventory, on_result=render)
        batch = await coordinator.refresh(ids)  # None if superseded
        ...
        await coordinator.close()  # view torn down
    """

    def __init__(
        self,
        inventory: CollectionInventory,
        policy: RefreshPolicy = RefreshPolicy.SUPERSEDE,
        on_result: Callable[[int, RefreshBatch], None] | None = None,
    ):
        self._inventory = inventory
        self._policy = policy
        self._on_result = on_result

        self._sequence = 0
        self._applied_sequence = 0
        self._latest: RefreshBatch | None = None
        self._inflight: asyncio.Task[RefreshBatch | None] | None = None
        self._inflight_sequence = 0
        self._abandoned: set[int] = set()
        self._closed = False

    @property
    def policy(self) -> RefreshPolicy:
        return self._policy

    @property
    def latest(self) -> RefreshBatch | None:
        """Most recently applied batch."""
        return self._latest

    @property
    def latest_sequence(self) -> int:
        """Sequence number of the applied batch (0 if none)."""
        return self._applied_sequence

    @property
    def sequence(self) -> int:
        """Sequence number of the most recently started refresh."""
        return self._sequence

    @property
    def in_flight(self) -> bool:
        return self._inflight is not None and not self._inflight.done()

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def abandoned_in_flight(self) -> int:
        """Abandoned refreshes whose reads are still unwinding."""
        return len(self._abandoned)

    async def refresh(self, ids: Iterable[TokenId]) -> RefreshBatch | None:
        """
        Refresh the given ids.

        Returns:
            The applied batch, or None if this refresh was superseded or
            abandoned before it could be applied.
        """
        if self._closed:
            raise RefreshClosedError("Refresh coordinator is closed")

        if self._policy == RefreshPolicy.COALESCE and self.in_flight:
            task = self._inflight
            log_refresh(logger, self._inflight_sequence, "coalesced")
            return await self._await_refresh(task, shielded=True)

        if self.in_flight:
            self._abandon(self._inflight_sequence, "superseded")

        self._sequence += 1
        sequence = self._sequence
        ids = list(ids)
        task = asyncio.create_task(self._run(sequence, ids), name=f"refresh-{sequence}")
        task.add_done_callback(lambda _: self._abandoned.discard(sequence))
        self._inflight = task
        self._inflight_sequence = sequence
        log_refresh(logger, sequence, "started", token_count=len(ids))

        return await self._await_refresh(task, shielded=False)

    def cancel(self) -> None:
        """Abandon the in-flight refresh, if any. Its result is never applied."""
        if self.in_flight:
            self._abandon(self._inflight_sequence, "cancelled")

    async def close(self) -> None:
        """Abandon any in-flight refresh and wait for its reads to unwind."""
        self._closed = True
        task = self._inflight
        self.cancel()
        if task is not None:
            await asyncio.gather(task, return_exceptions=True)
        self._inflight = None
        log_refresh(logger, self._sequence, "closed")

    # =========================================================================
    # Internals
    # =========================================================================

    def _abandon(self, sequence: int, action: str) -> None:
        self._abandoned.add(sequence)
        if self._inflight is not None:
            self._inflight.cancel()
        log_refresh(logger, sequence, action)

    async def _await_refresh(
        self,
        task: asyncio.Task[RefreshBatch | None],
        shielded: bool,
    ) -> RefreshBatch | None:
        try:
            if shielded:
                # A joining caller going away must not cancel the shared refresh
                return await asyncio.shield(task)
            return await task
        except asyncio.CancelledError:
            current = asyncio.current_task()
            if current is not None and current.cancelling() > 0:
                raise
            # Only abandonment cancels a refresh the caller is still awaiting
            return None

    async def _run(self, sequence: int, ids: list[TokenId]) -> RefreshBatch | None:
        start = time.perf_counter()
        batch = await self._inventory.refresh_many(ids, as_of=self._inventory.now())
        duration_ms = int((time.perf_counter() - start) * 1000)
        return self._apply(sequence, batch, duration_ms)

    def _apply(self, sequence: int, batch: RefreshBatch, duration_ms: int) -> RefreshBatch | None:
        if self._closed or sequence in self._abandoned or sequence <= self._applied_sequence:
            log_refresh(logger, sequence, "discarded", token_count=len(batch), duration_ms=duration_ms)
            return None

        self._applied_sequence = sequence
        self._latest = batch
        log_refresh(
            logger, sequence, "applied",
            token_count=len(batch),
            duration_ms=duration_ms,
            details=f"failed={len(batch.errors)}",
        )
        if self._on_result is not None:
            self._on_result(sequence, batch)
        return batch
