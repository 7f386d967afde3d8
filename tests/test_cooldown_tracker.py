import pytest

from arisa.cache.cooldown_tracker import CooldownKey, CooldownTracker
from arisa.errors import Throttled


@pytest.fixture
def tracker(clock):
    return CooldownTracker(clock=clock)


def test_first_call_is_recorded(tracker, clock):
    clock.now = 100.0
    tracker.check_and_record("hash", 1, 5)
    assert tracker.last_used("hash", 1) == 100.0
    assert len(tracker) == 1


def test_five_second_window_scenario(tracker, clock):
    tracker.check_and_record("hash", 1, 5)

    clock.advance(2)
    with pytest.raises(Throttled) as excinfo:
        tracker.check_and_record("hash", 1, 5)
    assert excinfo.value.remaining_seconds == 3
    assert excinfo.value.user_message() == "⏰ Command on cooldown for 3 seconds"

    clock.advance(4)
    tracker.check_and_record("hash", 1, 5)
    assert tracker.last_used("hash", 1) == 6


def test_throttled_attempt_does_not_extend_window(tracker, clock):
    tracker.check_and_record("rot", 1, 3)
    clock.advance(1)
    with pytest.raises(Throttled):
        tracker.check_and_record("rot", 1, 3)
    assert tracker.last_used("rot", 1) == 0
    clock.advance(2)
    tracker.check_and_record("rot", 1, 3)


def test_remaining_rounds_up_and_is_at_least_one(tracker, clock):
    tracker.check_and_record("color", 1, 2)
    clock.advance(1.9)
    with pytest.raises(Throttled) as excinfo:
        tracker.check_and_record("color", 1, 2)
    assert excinfo.value.remaining_seconds == 1

    clock.advance(-1.4)
    with pytest.raises(Throttled) as excinfo:
        tracker.check_and_record("color", 1, 2)
    assert excinfo.value.remaining_seconds == 2


def test_exact_window_boundary_allows_call(tracker, clock):
    tracker.check_and_record("url", 1, 3)
    clock.advance(3)
    tracker.check_and_record("url", 1, 3)


def test_keys_are_independent(tracker):
    tracker.check_and_record("hash", 1, 5)
    tracker.check_and_record("hash", 2, 5)
    tracker.check_and_record("checksum", 1, 5)
    assert len(tracker) == 3


def test_zero_window_never_throttles(tracker):
    for _ in range(5):
        tracker.check_and_record("help", 1, 0)
    assert len(tracker) == 1


@pytest.mark.parametrize("window, user_id", [(-1, 1), (5, -1), (5, 2**64)])
def test_invalid_arguments_rejected(tracker, window, user_id):
    with pytest.raises(ValueError):
        tracker.check_and_record("hash", user_id, window)
    assert len(tracker) == 0


def test_max_snowflake_accepted(tracker):
    tracker.check_and_record("hash", 2**64 - 1, 5)
    assert tracker.last_used("hash", 2**64 - 1) is not None


def test_remaining_reports_without_recording(tracker, clock):
    assert tracker.remaining("hash", 1, 5) == 0.0
    tracker.check_and_record("hash", 1, 5)
    clock.advance(1.5)
    assert tracker.remaining("hash", 1, 5) == pytest.approx(3.5)
    assert tracker.last_used("hash", 1) == 0


def test_cleanup_removes_entries_at_or_past_horizon(tracker, clock):
    tracker.check_and_record("hash", 1, 5)
    clock.advance(1800)
    tracker.check_and_record("hash", 2, 5)
    clock.advance(1800)

    removed = tracker.cleanup(3600)

    assert removed == 1
    assert tracker.last_used("hash", 1) is None
    assert tracker.last_used("hash", 2) == 1800


def test_cleanup_on_empty_tracker(tracker):
    assert tracker.cleanup(3600) == 0


def test_cleanup_does_not_break_live_windows(tracker, clock):
    tracker.check_and_record("github", 1, 10)
    clock.advance(5)
    tracker.cleanup(3600)
    with pytest.raises(Throttled):
        tracker.check_and_record("github", 1, 10)


def test_cooldown_key_fields():
    key = CooldownKey("hash", 7)
    assert key.command == "hash"
    assert key.user_id == 7
