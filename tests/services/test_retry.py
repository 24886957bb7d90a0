"""Tests for chronotoken.services.retry module."""

import pytest

from chronotoken.domain import TokenNotFoundError, TransientReadError
from chronotoken.services import backoff_delay, with_retry


class Recorder:
    """Callable that fails a set number of times before succeeding."""

    def __init__(self, failures: int, error: Exception | None = None):
        self.failures = failures
        self.error = error or TransientReadError("flaky")
        self.calls = 0

    async def __call__(self) -> str:
        self.calls += 1
        if self.calls <= self.failures:
            raise self.error
        return "ok"


class FakeSleep:
    def __init__(self):
        self.delays: list[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)


class TestBackoffDelay:
    @pytest.mark.parametrize("attempt,expected", [(1, 0.2), (2, 0.4), (3, 0.8), (4, 1.6), (5, 2.0), (9, 2.0)])
    def test_exponential_and_capped(self, attempt: int, expected: float):
        assert backoff_delay(attempt, 0.2, 2.0) == pytest.approx(expected)


class TestWithRetry:
    """Tests for with_retry."""

    @pytest.mark.asyncio
    async def test_first_try(self):
        func = Recorder(failures=0)
        sleep = FakeSleep()

        assert await with_retry(func, sleep=sleep) == "ok"
        assert func.calls == 1
        assert sleep.delays == []

    @pytest.mark.asyncio
    async def test_recovers_after_transient_failures(self):
        func = Recorder(failures=2)
        sleep = FakeSleep()
        retries = []

        result = await with_retry(
            func,
            attempts=3,
            base_delay_seconds=0.1,
            max_delay_seconds=1.0,
            on_retry=lambda attempt, delay, exc: retries.append((attempt, delay)),
            sleep=sleep,
        )

        assert result == "ok"
        assert func.calls == 3
        assert sleep.delays == pytest.approx([0.1, 0.2])
        assert [a for a, _ in retries] == [1, 2]

    @pytest.mark.asyncio
    async def test_gives_up_after_bounded_attempts(self):
        func = Recorder(failures=10)

        with pytest.raises(TransientReadError):
            await with_retry(func, attempts=3, sleep=FakeSleep())

        assert func.calls == 3

    @pytest.mark.asyncio
    async def test_permanent_errors_not_retried(self):
        func = Recorder(failures=1, error=TokenNotFoundError(5))

        with pytest.raises(TokenNotFoundError):
            await with_retry(func, attempts=5, sleep=FakeSleep())

        assert func.calls == 1

    @pytest.mark.asyncio
    async def test_single_attempt(self):
        func = Recorder(failures=1)

        with pytest.raises(TransientReadError):
            await with_retry(func, attempts=1, sleep=FakeSleep())

        assert func.calls == 1

    @pytest.mark.asyncio
    async def test_rejects_zero_attempts(self):
        with pytest.raises(ValueError):
            await with_retry(Recorder(0), attempts=0)
