from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timedelta, timezone

from ecoswap.app.services.url_parsing.usage_governor import UsageGovernor


class FakeClock:
    def __init__(self):
        self.now = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)

    def __call__(self):
        return self.now

    def advance(self, **kwargs):
        self.now += timedelta(**kwargs)


def make_governor(max_requests=3, max_daily_cost=2.0, has_credential=True, clock=None):
    return UsageGovernor(
        max_requests=max_requests,
        max_daily_cost=max_daily_cost,
        has_credential=has_credential,
        clock=clock or FakeClock(),
    )


def test_rejects_without_credential():
    governor = make_governor(has_credential=False)
    assert governor.reserve() is False
    assert governor.snapshot().request_count == 0


def test_commit_records_cost_and_returns_snapshot():
    governor = make_governor()
    assert governor.reserve()
    snapshot = governor.commit(0.002, tokens_used=1500)

    assert snapshot.request_count == 1
    assert snapshot.daily_cost == 0.002
    assert snapshot.max_requests == 3
    assert snapshot.tokens_used == 1500
    assert snapshot.cost_this_call == 0.002
    assert governor.snapshot().cost_this_call is None


def test_in_flight_reservations_count_against_ceiling():
    governor = make_governor(max_requests=2)
    assert governor.reserve()
    assert governor.reserve()
    assert governor.reserve() is False

    governor.release()
    assert governor.reserve()


def test_release_does_not_charge():
    governor = make_governor()
    governor.reserve()
    governor.release()
    snapshot = governor.snapshot()
    assert snapshot.request_count == 0
    assert snapshot.daily_cost == 0.0


def test_cost_ceiling_rejects():
    governor = make_governor(max_requests=50, max_daily_cost=0.01)
    governor.reserve()
    governor.commit(0.01)
    assert governor.reserve() is False


def test_counters_reset_after_24_hours():
    clock = FakeClock()
    governor = make_governor(max_requests=1, clock=clock)
    governor.reserve()
    governor.commit(0.5)
    assert governor.reserve() is False

    clock.advance(hours=23, minutes=59)
    assert governor.reserve() is False

    clock.advance(minutes=1)
    assert governor.reserve() is True
    assert governor.last_reset_time == clock.now


def test_mark_exhausted_blocks_until_reset():
    clock = FakeClock()
    governor = make_governor(max_requests=10, clock=clock)
    governor.reserve()
    governor.mark_exhausted()

    assert governor.snapshot().request_count == 10
    assert governor.reserve() is False
    clock.advance(hours=24)
    assert governor.reserve() is True


def test_manual_reset_clears_counters():
    clock = FakeClock()
    governor = make_governor(max_requests=1, clock=clock)
    governor.reserve()
    governor.commit(0.25)
    clock.advance(hours=1)

    governor.reset()

    snapshot = governor.snapshot()
    assert snapshot.request_count == 0
    assert snapshot.daily_cost == 0.0
    assert governor.last_reset_time == clock.now
    assert governor.reserve() is True


def test_concurrent_reservations_never_exceed_ceiling():
    governor = make_governor(max_requests=5)
    with ThreadPoolExecutor(max_workers=8) as pool:
        results = list(pool.map(lambda _: governor.reserve(), range(40)))
    assert results.count(True) == 5
