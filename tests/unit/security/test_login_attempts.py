import threading

import pytest

from bakery.domain.security.login_attempts import LoginAttemptTracker

from fakes import FakeClock


@pytest.fixture
def tracker(clock):
    return LoginAttemptTracker(
        max_attempts=5, window_seconds=900, lockout_seconds=900, retention_seconds=3600, clock=clock
    )


def test_failures_below_threshold_report_attempts_left(tracker):
    results = [tracker.record_failed_attempt("maria@example.com") for _ in range(4)]

    assert [r.attempts_left for r in results] == [4, 3, 2, 1]
    assert not any(r.is_locked for r in results)
    assert tracker.is_locked("maria@example.com").locked is False


def test_fifth_failure_locks_for_lockout_period(tracker, clock):
    for _ in range(4):
        tracker.record_failed_attempt("maria@example.com")

    result = tracker.record_failed_attempt("maria@example.com")

    assert result.is_locked is True
    assert result.attempts_left == 0
    assert result.locked_until == clock.now + 900
    assert result.remaining_minutes == 15
    status = tracker.is_locked("maria@example.com")
    assert status.locked is True
    assert status.remaining_minutes == 15


def test_identifier_is_normalized(tracker):
    tracker.record_failed_attempt("  Maria@Example.COM ")
    result = tracker.record_failed_attempt("maria@example.com")

    assert result.attempts_left == 3


def test_remaining_minutes_rounds_up(tracker, clock):
    for _ in range(5):
        tracker.record_failed_attempt("maria@example.com")

    clock.advance(14 * 60 + 1)

    assert tracker.is_locked("maria@example.com").remaining_minutes == 1


def test_lock_lifts_after_expiry_and_record_is_dropped(tracker, clock):
    for _ in range(5):
        tracker.record_failed_attempt("maria@example.com")

    clock.advance(901)

    assert tracker.is_locked("maria@example.com").locked is False
    assert len(tracker) == 0
    assert tracker.record_failed_attempt("maria@example.com").attempts_left == 4


def test_failure_after_window_starts_new_count(tracker, clock):
    for _ in range(3):
        tracker.record_failed_attempt("maria@example.com")

    clock.advance(901)
    result = tracker.record_failed_attempt("maria@example.com")

    assert result.attempts_left == 4
    assert result.is_locked is False


def test_clear_attempts_resets_counter(tracker):
    for _ in range(3):
        tracker.record_failed_attempt("maria@example.com")

    tracker.clear_attempts("maria@example.com")

    assert tracker.record_failed_attempt("maria@example.com").attempts_left == 4


def test_cleanup_drops_records_past_retention_regardless_of_lock():
    clock = FakeClock(start=0.0)
    tracker = LoginAttemptTracker(
        max_attempts=2, window_seconds=60, lockout_seconds=7200, retention_seconds=600, clock=clock
    )
    tracker.record_failed_attempt("stale@example.com")
    tracker.record_failed_attempt("locked@example.com")
    tracker.record_failed_attempt("locked@example.com")

    clock.advance(300)
    assert tracker.cleanup() == 0

    clock.advance(301)
    removed = tracker.cleanup()

    assert removed == 2
    assert tracker.is_locked("locked@example.com").locked is False
    assert len(tracker) == 0


def test_failures_spread_over_minutes_lock_from_last_failure(tracker, clock):
    for minute in range(5):
        if minute:
            clock.advance(60)
        result = tracker.record_failed_attempt("a@b.com")

    assert result.is_locked is True

    clock.advance(6 * 60)
    assert tracker.is_locked("a@b.com").locked is True

    clock.advance(10 * 60)
    assert tracker.is_locked("a@b.com").locked is False


def test_concurrent_failures_are_each_counted_once(clock):
    tracker = LoginAttemptTracker(
        max_attempts=1000, window_seconds=900, lockout_seconds=900, retention_seconds=3600, clock=clock
    )
    barrier = threading.Barrier(8)

    def hammer():
        barrier.wait()
        for _ in range(25):
            tracker.record_failed_attempt("a@b.com")

    threads = [threading.Thread(target=hammer) for _ in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert tracker.record_failed_attempt("a@b.com").attempts_left == 1000 - 201
