"""Shared pytest fixtures for chronotoken tests."""

import asyncio
from dataclasses import dataclass, field

import pytest
import pytest_asyncio

from chronotoken.config import InventoryConfig
from chronotoken.domain import (
    AccountId,
    LocalTimeBreakdown,
    TimeState,
    TokenId,
    TransientReadError,
    classify,
)
from chronotoken.ledger import InMemoryLedger
from chronotoken.services import CollectionInventory

# 2024-06-15T00:00:00Z
MIDNIGHT_UTC = 1718409600
NOON_UTC = MIDNIGHT_UTC + 12 * 3600

ALICE = AccountId("0xA11CE")
BOB = AccountId("0xB0B")
PRICE = 10**16


# =============================================================================
# Fakes
# =============================================================================


@dataclass
class FixedClock:
    """Settable clock returning whole UTC seconds."""

    now: int = NOON_UTC

    def __call__(self) -> int:
        return self.now

    def advance(self, seconds: int) -> None:
        self.now += seconds


@dataclass
class FlakyLedger:
    """
    TokenLedger wrapper that injects failures per token id.

    - transient_failures: descriptor_of raises TransientReadError this many times
    - broken: descriptor_of always raises TransientReadError
    - corrupt: descriptor_of returns this string instead
    - gates: descriptor_of waits for the event before answering
    - supply_failures / balance_failures: total_supply / balance_of raise
      TransientReadError this many times
    """

    inner: InMemoryLedger
    transient_failures: dict[int, int] = field(default_factory=dict)
    broken: set[int] = field(default_factory=set)
    corrupt: dict[int, str] = field(default_factory=dict)
    gates: dict[int, asyncio.Event] = field(default_factory=dict)
    descriptor_calls: dict[int, int] = field(default_factory=dict)
    cancelled_reads: list[int] = field(default_factory=list)
    supply_failures: int = 0
    balance_failures: int = 0

    async def owner_of(self, token_id: TokenId) -> AccountId:
        return await self.inner.owner_of(token_id)

    async def total_supply(self) -> int:
        if self.supply_failures > 0:
            self.supply_failures -= 1
            raise TransientReadError("supply read blipped")
        return await self.inner.total_supply()

    async def balance_of(self, account: AccountId) -> int:
        if self.balance_failures > 0:
            self.balance_failures -= 1
            raise TransientReadError("balance read blipped")
        return await self.inner.balance_of(account)

    async def timezone_offset_of(self, token_id: TokenId) -> int:
        return await self.inner.timezone_offset_of(token_id)

    async def descriptor_of(self, token_id: TokenId) -> str:
        self.descriptor_calls[token_id] = self.descriptor_calls.get(token_id, 0) + 1
        gate = self.gates.get(token_id)
        if gate is not None:
            try:
                await gate.wait()
            except asyncio.CancelledError:
                self.cancelled_reads.append(token_id)
                raise
        if token_id in self.broken:
            raise TransientReadError(f"store unreachable for token {token_id}")
        remaining = self.transient_failures.get(token_id, 0)
        if remaining > 0:
            self.transient_failures[token_id] = remaining - 1
            raise TransientReadError(f"flaky read for token {token_id}")
        if token_id in self.corrupt:
            return self.corrupt[token_id]
        return await self.inner.descriptor_of(token_id)

    async def current_state(self, token_id: TokenId) -> TimeState:
        return await self.inner.current_state(token_id)

    async def detailed_time_info(self, token_id: TokenId) -> LocalTimeBreakdown:
        return await self.inner.detailed_time_info(token_id)

    async def mint(self, offset_minutes: int, payment: int, minter: AccountId) -> TokenId:
        return await self.inner.mint(offset_minutes, payment, minter)


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def clock() -> FixedClock:
    """Clock pinned to 12:00 UTC on 2024-06-15."""
    return FixedClock()


@pytest.fixture
def fast_config() -> InventoryConfig:
    """Inventory config with short timeouts and no backoff sleeps."""
    return InventoryConfig(
        max_concurrent_reads=4,
        read_timeout_seconds=0.5,
        read_attempts=3,
        retry_base_delay_seconds=0.0,
        retry_max_delay_seconds=0.0,
    )


@pytest.fixture
def ledger(clock: FixedClock) -> InMemoryLedger:
    """Empty in-memory ledger on the fixed clock."""
    return InMemoryLedger(clock=clock)


@pytest_asyncio.fixture
async def populated_ledger(ledger: InMemoryLedger) -> InMemoryLedger:
    """Ledger with three tokens: UTC+0 (Alice), UTC+5:30 (Bob), UTC-9 (Alice)."""
    await ledger.mint(0, PRICE, ALICE)
    await ledger.mint(330, PRICE, BOB)
    await ledger.mint(-540, PRICE, ALICE)
    return ledger


@pytest.fixture
def flaky_ledger(populated_ledger: InMemoryLedger) -> FlakyLedger:
    return FlakyLedger(inner=populated_ledger)


@pytest.fixture
def inventory(
    flaky_ledger: FlakyLedger,
    fast_config: InventoryConfig,
    clock: FixedClock,
) -> CollectionInventory:
    return CollectionInventory(flaky_ledger, config=fast_config, clock=clock)


@pytest.fixture
def noon_breakdown() -> LocalTimeBreakdown:
    """UTC noon seen from UTC+5:30 (17:30, Day)."""
    return classify(NOON_UTC, 330)


@pytest.fixture
def night_breakdown() -> LocalTimeBreakdown:
    """UTC midnight seen from UTC+0 (00:00, Night)."""
    return classify(MIDNIGHT_UTC, 0)
