import pytest

from travel_api.core.rate_limiter import InMemoryRateLimiterService


class FakeClock:
    def __init__(self, now: float = 1000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now


def test_allows_up_to_limit_then_blocks():
    limiter = InMemoryRateLimiterService(limit=3, window_seconds=60)

    decisions = [limiter.check(client_key="1.2.3.4") for _ in range(4)]

    assert [decision.allowed for decision in decisions] == [True, True, True, False]
    assert [decision.remaining for decision in decisions] == [2, 1, 0, 0]
    assert decisions[-1].retry_after_seconds >= 1


def test_window_slides_forward():
    clock = FakeClock(100.0)
    limiter = InMemoryRateLimiterService(limit=1, window_seconds=10, clock=clock)

    assert limiter.check(client_key="a").allowed
    clock.now = 104.0
    blocked = limiter.check(client_key="a")
    assert not blocked.allowed
    assert blocked.retry_after_seconds == 6

    clock.now = 110.5
    assert limiter.check(client_key="a").allowed


def test_clients_are_counted_separately():
    limiter = InMemoryRateLimiterService(limit=1, window_seconds=60)

    assert limiter.check(client_key="a").allowed
    assert limiter.check(client_key="b").allowed
    assert not limiter.check(client_key="a").allowed


def test_idle_clients_are_forgotten_after_a_window():
    clock = FakeClock(0.0)
    limiter = InMemoryRateLimiterService(limit=5, window_seconds=60, clock=clock)
    for i in range(50):
        limiter.check(client_key=f"10.0.0.{i}")
    assert limiter.tracked_clients == 50

    clock.now = 61.0
    limiter.check(client_key="10.0.1.1")

    assert limiter.tracked_clients == 1


def test_recently_active_clients_survive_the_sweep():
    clock = FakeClock(0.0)
    limiter = InMemoryRateLimiterService(limit=2, window_seconds=60, clock=clock)
    limiter.check(client_key="old")
    clock.now = 30.0
    limiter.check(client_key="recent")
    limiter.check(client_key="recent")

    clock.now = 70.0
    assert not limiter.check(client_key="recent").allowed
    assert limiter.tracked_clients == 1


@pytest.mark.parametrize("limit, window", [(0, 60), (5, 0)])
def test_rejects_non_positive_settings(limit, window):
    with pytest.raises(ValueError):
        InMemoryRateLimiterService(limit=limit, window_seconds=window)
