"""
CollectionInventory - enumerates live tokens and re-reads their state.

Reads fan out in parallel (bounded by a semaphore) and fan back in per
token: one slow or failing read never blocks or fails its siblings. Each
ledger call runs under its own timeout and bounded retry policy; permanent
errors (missing token, corrupt descriptor, an offset off the configured
granularity) are reported without retrying.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from typing import Awaitable, TypeVar

from chronotoken import codec
from chronotoken.config import InventoryConfig
from chronotoken.domain import (
    AccountId,
    LocalTimeBreakdown,
    MetadataDescriptor,
    TimeState,
    TokenId,
    TransientReadError,
    classify,
    descriptor_state,
    validate_offset,
)
from chronotoken.ledger import TokenLedger, system_clock
from chronotoken.logging_config import log_read

from .retry import with_retry

logger = logging.getLogger(__name__)

T = TypeVar("T")


# =============================================================================
# Results
# =============================================================================


@dataclass(frozen=True)
class ReadFailure:
    """Why a token could not be read."""

    token_id: TokenId
    error_type: str
    message: str
    retryable: bool
    error: BaseException | None = field(default=None, compare=False, repr=False)

    @classmethod
    def from_exception(cls, token_id: TokenId, error: BaseException) -> "ReadFailure":
        return cls(
            token_id=token_id,
            error_type=type(error).__name__,
            message=str(error),
            retryable=isinstance(error, TransientReadError),
            error=error,
        )


@dataclass(frozen=True)
class TokenReadResult:
    """Everything one refresh learned about one token."""

    token_id: TokenId
    owner: AccountId | None = None
    offset_minutes: int | None = None
    breakdown: LocalTimeBreakdown | None = None
    descriptor: MetadataDescriptor | None = None
    error: ReadFailure | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def descriptor_state(self) -> TimeState | None:
        """State the ledger's descriptor claims."""
        if self.descriptor is None:
            return None
        return descriptor_state(self.descriptor)

    @property
    def state_mismatch(self) -> bool:
        """True when the descriptor disagrees with the freshly classified state.

        Expected briefly around state boundaries, since the ledger encodes
        with its own "now".
        """
        claimed = self.descriptor_state
        return (
            self.breakdown is not None
            and claimed is not None
            and claimed != self.breakdown.state
        )

    @classmethod
    def failed(cls, token_id: TokenId, error: BaseException) -> "TokenReadResult":
        return cls(token_id=token_id, error=ReadFailure.from_exception(token_id, error))


@dataclass(frozen=True)
class RefreshBatch:
    """Per-token results of one refresh, in request order."""

    as_of: int
    results: dict[TokenId, TokenReadResult]

    @property
    def breakdowns(self) -> dict[TokenId, LocalTimeBreakdown]:
        """id -> breakdown for every token that read successfully."""
        return {
            token_id: result.breakdown
            for token_id, result in self.results.items()
            if result.ok and result.breakdown is not None
        }

    @property
    def errors(self) -> dict[TokenId, ReadFailure]:
        return {
            token_id: result.error
            for token_id, result in self.results.items()
            if result.error is not None
        }

    def __len__(self) -> int:
        return len(self.results)

    def __getitem__(self, token_id: TokenId) -> TokenReadResult:
        return self.results[token_id]

    def __contains__(self, token_id: object) -> bool:
        return token_id in self.results


# =============================================================================
# Inventory
# =============================================================================


class CollectionInventory:
    """
    Enumerates token ids and reads their derived state from a ledger.

    Usage:
        inventory = CollectionInventory(ledger)
        ids = inventory.list_live_ids(await inventory.total_supply())
        batch = await inventory.refresh_many(ids)
        batch.breakdowns  # successful reads
        batch.errors      # per-token failures
    """

    def __init__(
        self,
        ledger: TokenLedger,
        config: InventoryConfig | None = None,
        clock: Callable[[], int] = system_clock,
    ):
        self._ledger = ledger
        self._config = config or InventoryConfig()
        self._clock = clock
        self._semaphore = asyncio.Semaphore(self._config.max_concurrent_reads)

    @property
    def ledger(self) -> TokenLedger:
        return self._ledger

    @property
    def config(self) -> InventoryConfig:
        return self._config

    def now(self) -> int:
        return self._clock()

    @staticmethod
    def list_live_ids(total_supply: int) -> list[TokenId]:
        """
        Token ids 1..total_supply.

        The ledger allocates ids densely from 1 and never burns, so the
        supply count alone determines the live set.
        """
        if total_supply < 0:
            raise ValueError(f"total_supply must be non-negative, got {total_supply}")
        return [TokenId(i) for i in range(1, total_supply + 1)]

    async def read_token(self, token_id: TokenId, as_of: int | None = None) -> TokenReadResult:
        """
        Read one token and classify it at `as_of` (default: now).

        Never raises for ledger or decode failures; they come back as a
        failed TokenReadResult.
        """
        if as_of is None:
            as_of = self._clock()

        try:
            owner = await self._read(token_id, "owner_of", lambda: self._ledger.owner_of(token_id))
            offset = await self._read(
                token_id, "timezone_offset_of", lambda: self._ledger.timezone_offset_of(token_id)
            )
            raw_descriptor = await self._read(
                token_id, "descriptor_of", lambda: self._ledger.descriptor_of(token_id)
            )
            offset = validate_offset(offset, self._config.offset_granularity_minutes)
            breakdown = classify(as_of, offset)
            descriptor = codec.decode(raw_descriptor)
        except Exception as e:
            log_read(logger, token_id, "read_token", success=False, details=f"{type(e).__name__}: {e}")
            return TokenReadResult.failed(token_id, e)

        result = TokenReadResult(
            token_id=token_id,
            owner=owner,
            offset_minutes=offset,
            breakdown=breakdown,
            descriptor=descriptor,
        )
        if result.state_mismatch:
            logger.warning(
                f"Descriptor state differs from classified state | token={token_id} | "
                f"descriptor={result.descriptor_state} | classified={breakdown.state}"
            )
        log_read(logger, token_id, "read_token", details=f"state={breakdown.state_name}")
        return result

    async def refresh_many(self, ids: Iterable[TokenId], as_of: int | None = None) -> RefreshBatch:
        """
        Read and classify many tokens in parallel.

        A failure on one id is attached to that id; the others still
        complete. Duplicate ids are read once.
        """
        if as_of is None:
            as_of = self._clock()
        unique_ids = list(dict.fromkeys(ids))

        results = await asyncio.gather(
            *[self.read_token(token_id, as_of) for token_id in unique_ids],
            return_exceptions=True,
        )

        by_id: dict[TokenId, TokenReadResult] = {}
        for token_id, result in zip(unique_ids, results):
            if isinstance(result, BaseException):
                if not isinstance(result, Exception):
                    raise result
                logger.error(f"Read failed for token {token_id}: {result}")
                result = TokenReadResult.failed(token_id, result)
            by_id[token_id] = result

        failed = sum(1 for r in by_id.values() if not r.ok)
        logger.info(f"Refreshed {len(by_id)} tokens | as_of={as_of} | failed={failed}")
        return RefreshBatch(as_of=as_of, results=by_id)

    async def total_supply(self) -> int:
        """Number of minted tokens, read under the timeout and retry policy."""
        return await self._read(TokenId(0), "total_supply", self._ledger.total_supply)

    async def balance_of(self, account: AccountId) -> int:
        """Number of tokens an account owns, read under the timeout and retry policy."""
        return await self._read(TokenId(0), "balance_of", lambda: self._ledger.balance_of(account))

    async def refresh_all(self, as_of: int | None = None) -> RefreshBatch:
        """Refresh every live token."""
        supply = await self.total_supply()
        return await self.refresh_many(self.list_live_ids(supply), as_of)

    async def _read(self, token_id: TokenId, operation: str, call: Callable[[], Awaitable[T]]) -> T:
        """One ledger call under the semaphore, timeout and retry policy."""
        config = self._config

        async def attempt() -> T:
            async with self._semaphore:
                try:
                    return await asyncio.wait_for(call(), timeout=config.read_timeout_seconds)
                except asyncio.TimeoutError as e:
                    raise TransientReadError(
                        f"{operation} timed out after {config.read_timeout_seconds}s"
                    ) from e

        def on_retry(attempt_no: int, delay: float, exc: Exception) -> None:
            log_read(
                logger, token_id, operation,
                success=False, attempt=attempt_no,
                details=f"retrying in {delay:.2f}s | {exc}",
            )

        return await with_retry(
            attempt,
            attempts=config.read_attempts,
            base_delay_seconds=config.retry_base_delay_seconds,
            max_delay_seconds=config.retry_max_delay_seconds,
            on_retry=on_retry,
        )
