"""Tests for chronotoken.observer.api module."""

import pytest

from chronotoken.domain import AccountId, MintRejection, TokenId, TransientReadError, classify
from chronotoken.observer import (
    CollectionObserverAPI,
    MintFailedError,
    ObserverError,
    TokenUnavailableError,
)
from chronotoken.services import CollectionInventory

MIDNIGHT = 1718409600
NOON = MIDNIGHT + 12 * 3600
PRICE = 10**16


@pytest.fixture
def api(inventory: CollectionInventory) -> CollectionObserverAPI:
    return CollectionObserverAPI(inventory, max_supply=1000)


class TestQueries:
    """Tests for the get_* queries."""

    @pytest.mark.asyncio
    async def test_supply_and_balance(self, api: CollectionObserverAPI):
        assert await api.get_total_supply() == 3
        assert await api.get_account_balance(AccountId("0xA11CE")) == 2

    def test_presets(self, api: CollectionObserverAPI):
        presets = api.get_timezone_presets()

        assert len(presets) == 25
        assert presets[0].offset_minutes == -720

    @pytest.mark.asyncio
    async def test_collection_snapshot(self, api: CollectionObserverAPI):
        snapshot = await api.get_collection_snapshot(viewer="0xA11CE", as_of=NOON)

        assert snapshot.total_supply == 3
        assert snapshot.max_supply == 1000
        assert snapshot.viewer_balance == 2
        assert snapshot.as_of == NOON
        assert [t.token_id for t in snapshot.tokens] == [1, 2, 3]
        assert [t.token_id for t in snapshot.owned] == [1, 3]
        assert snapshot.unavailable_count == 0

    @pytest.mark.asyncio
    async def test_supply_blip_is_retried(self, api: CollectionObserverAPI, flaky_ledger):
        """Test a transient supply read does not fail the whole snapshot."""
        flaky_ledger.supply_failures = 1

        snapshot = await api.get_collection_snapshot(viewer="0xA11CE", as_of=NOON)

        assert snapshot.total_supply == 3
        assert len(snapshot.tokens) == 3
        assert flaky_ledger.supply_failures == 0

    @pytest.mark.asyncio
    async def test_balance_blip_is_retried(self, api: CollectionObserverAPI, flaky_ledger):
        flaky_ledger.balance_failures = 2

        assert await api.get_account_balance(AccountId("0xA11CE")) == 2

    @pytest.mark.asyncio
    async def test_supply_outage_surfaces(self, api: CollectionObserverAPI, flaky_ledger):
        flaky_ledger.supply_failures = 10

        with pytest.raises(TransientReadError):
            await api.get_collection_snapshot(as_of=NOON)

    @pytest.mark.asyncio
    async def test_collection_snapshot_without_viewer(self, api: CollectionObserverAPI):
        snapshot = await api.get_collection_snapshot(as_of=NOON)

        assert snapshot.viewer is None
        assert snapshot.viewer_balance is None
        assert snapshot.owned == ()

    @pytest.mark.asyncio
    async def test_unreadable_token_is_placeholder(self, api: CollectionObserverAPI, flaky_ledger):
        """Test a failing token shows as unavailable, never as a default state."""
        flaky_ledger.broken.add(2)

        snapshot = await api.get_collection_snapshot(as_of=NOON)
        tile = snapshot.tokens[1]

        assert snapshot.unavailable_count == 1
        assert not tile.available
        assert tile.state is None
        assert "unreachable" in tile.error
        assert snapshot.tokens[0].available
        assert snapshot.tokens[2].available

    @pytest.mark.asyncio
    async def test_empty_collection(self, ledger, fast_config, clock):
        api = CollectionObserverAPI(CollectionInventory(ledger, config=fast_config, clock=clock))

        snapshot = await api.get_collection_snapshot(as_of=NOON)

        assert snapshot.total_supply == 0
        assert snapshot.tokens == ()

    @pytest.mark.asyncio
    async def test_token_snapshot(self, api: CollectionObserverAPI):
        detail = await api.get_token_snapshot(TokenId(2), viewer="0xb0b", as_of=MIDNIGHT)
        breakdown = classify(MIDNIGHT, 330)

        assert detail.available
        assert detail.is_owned
        assert detail.timezone == "UTC+5:30"
        assert detail.local_time == breakdown.local_time == "05:30"
        assert detail.state == "Night"

    @pytest.mark.asyncio
    async def test_missing_token_raises(self, api: CollectionObserverAPI):
        with pytest.raises(TokenUnavailableError) as exc_info:
            await api.get_token_snapshot(TokenId(9))

        assert exc_info.value.token_id == 9
        assert "does not exist" in str(exc_info.value)
        assert isinstance(exc_info.value, ObserverError)

    @pytest.mark.asyncio
    async def test_transient_failure_is_placeholder(self, api: CollectionObserverAPI, flaky_ledger):
        flaky_ledger.broken.add(1)

        detail = await api.get_token_snapshot(TokenId(1))

        assert not detail.available
        assert detail.error is not None


class TestCommands:
    """Tests for the do_* commands."""

    @pytest.mark.asyncio
    async def test_mint(self, api: CollectionObserverAPI):
        token_id = await api.do_mint(-300, PRICE, AccountId("0xC0DE"))

        assert token_id == 4
        assert await api.get_total_supply() == 4

    @pytest.mark.asyncio
    @pytest.mark.parametrize("offset,payment,reason", [
        (0, PRICE - 1, MintRejection.INSUFFICIENT_PAYMENT),
        (900, PRICE, MintRejection.INVALID_OFFSET),
    ])
    async def test_rejected_mint(self, api: CollectionObserverAPI, offset, payment, reason):
        with pytest.raises(MintFailedError) as exc_info:
            await api.do_mint(offset, payment, AccountId("0xC0DE"))

        assert exc_info.value.reason == reason
        assert await api.get_total_supply() == 3
