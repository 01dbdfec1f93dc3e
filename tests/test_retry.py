import pytest

from coachbook.core.errors import InvalidBookingInput, StoreUnavailableError
from coachbook.core.retry import RetryPolicy


class Flaky:
    def __init__(self, failures: int, exc: Exception | None = None) -> None:
        self.failures = failures
        self.exc = exc or StoreUnavailableError("down")
        self.calls = 0

    async def __call__(self) -> str:
        self.calls += 1
        if self.calls <= self.failures:
            raise self.exc
        return "ok"


@pytest.mark.asyncio
async def test_recovers_within_retry_budget():
    fn = Flaky(failures=2)
    assert await RetryPolicy(retries=2, delay_seconds=0).run(fn) == "ok"
    assert fn.calls == 3


@pytest.mark.asyncio
async def test_gives_up_after_retry_budget():
    fn = Flaky(failures=3)
    with pytest.raises(StoreUnavailableError):
        await RetryPolicy(retries=2, delay_seconds=0).run(fn)
    assert fn.calls == 3


@pytest.mark.asyncio
async def test_validation_errors_are_not_retried():
    fn = Flaky(failures=1, exc=InvalidBookingInput("nope"))
    with pytest.raises(InvalidBookingInput):
        await RetryPolicy(retries=2, delay_seconds=0).run(fn)
    assert fn.calls == 1


@pytest.mark.asyncio
async def test_waits_fixed_delay_between_attempts(monkeypatch):
    delays = []

    async def fake_sleep(seconds):
        delays.append(seconds)

    monkeypatch.setattr("coachbook.core.retry.asyncio.sleep", fake_sleep)
    await RetryPolicy(retries=2, delay_seconds=1.5).run(Flaky(failures=2))
    assert delays == [1.5, 1.5]
