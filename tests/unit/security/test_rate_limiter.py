import threading

from bakery.domain.security.rate_limiter import GeneralRateLimiter


def test_counts_down_remaining_quota(clock):
    limiter = GeneralRateLimiter(max_requests=3, window_seconds=900, clock=clock)

    decisions = [limiter.can_request("10.0.0.1") for _ in range(3)]

    assert [d.remaining for d in decisions] == [2, 1, 0]
    assert all(d.allowed and d.limit == 3 for d in decisions)


def test_denies_once_quota_is_used(clock):
    limiter = GeneralRateLimiter(max_requests=2, window_seconds=900, clock=clock)
    limiter.can_request("10.0.0.1")
    limiter.can_request("10.0.0.1")

    clock.advance(60)
    decision = limiter.can_request("10.0.0.1")

    assert decision.allowed is False
    assert decision.remaining is None
    assert decision.remaining_minutes == 14


def test_addresses_have_independent_windows(clock):
    limiter = GeneralRateLimiter(max_requests=1, window_seconds=900, clock=clock)
    limiter.can_request("10.0.0.1")

    assert limiter.can_request("10.0.0.1").allowed is False
    assert limiter.can_request("10.0.0.2").allowed is True


def test_new_window_after_expiry(clock):
    limiter = GeneralRateLimiter(max_requests=1, window_seconds=900, clock=clock)
    limiter.can_request("10.0.0.1")

    clock.advance(901)

    assert limiter.can_request("10.0.0.1").allowed is True


def test_cleanup(clock):
    limiter = GeneralRateLimiter(max_requests=5, window_seconds=900, clock=clock)
    limiter.can_request("10.0.0.1")
    limiter.can_request("10.0.0.2")

    clock.advance(901)

    assert limiter.cleanup() == 2
    assert len(limiter) == 0


def test_concurrent_requests_never_exceed_the_quota(clock):
    limiter = GeneralRateLimiter(max_requests=150, window_seconds=900, clock=clock)
    barrier = threading.Barrier(8)
    decisions = []

    def hammer():
        barrier.wait()
        local = [limiter.can_request("10.0.0.1") for _ in range(25)]
        decisions.extend(local)

    threads = [threading.Thread(target=hammer) for _ in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    allowed = [d for d in decisions if d.allowed]
    assert len(decisions) == 200
    assert len(allowed) == 150
    assert sorted(d.remaining for d in allowed) == list(range(150))
