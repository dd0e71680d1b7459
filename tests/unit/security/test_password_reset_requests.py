from bakery.domain.security.password_reset_requests import PasswordResetRequestTracker


def test_allows_three_requests_then_denies(clock):
    tracker = PasswordResetRequestTracker(max_requests=3, window_seconds=3600, clock=clock)

    decisions = [tracker.can_request("maria@example.com") for _ in range(3)]
    denied = tracker.can_request("maria@example.com")

    assert [d.allowed for d in decisions] == [True, True, True]
    assert [d.attempts_left for d in decisions] == [2, 1, 0]
    assert denied.allowed is False
    assert denied.remaining_minutes == 60


def test_denial_reports_time_left_in_window(clock):
    tracker = PasswordResetRequestTracker(max_requests=1, window_seconds=3600, clock=clock)
    tracker.can_request("maria@example.com")

    clock.advance(30 * 60)

    assert tracker.can_request("maria@example.com").remaining_minutes == 30


def test_window_expiry_resets_quota(clock):
    tracker = PasswordResetRequestTracker(max_requests=3, window_seconds=3600, clock=clock)
    for _ in range(4):
        tracker.can_request("maria@example.com")

    clock.advance(3601)
    decision = tracker.can_request("MARIA@example.com")

    assert decision.allowed is True
    assert decision.attempts_left == 2


def test_identifiers_are_counted_separately(clock):
    tracker = PasswordResetRequestTracker(max_requests=1, window_seconds=3600, clock=clock)
    tracker.can_request("maria@example.com")

    assert tracker.can_request("ana@example.com").allowed is True


def test_cleanup_removes_expired_windows(clock):
    tracker = PasswordResetRequestTracker(max_requests=3, window_seconds=3600, clock=clock)
    tracker.can_request("old@example.com")
    clock.advance(3000)
    tracker.can_request("recent@example.com")

    clock.advance(700)

    assert tracker.cleanup() == 1
    assert len(tracker) == 1
