"""Tests for topline data models."""

from datetime import datetime

from topline.models import StatusText, SystemSnapshot


def make_snapshot() -> SystemSnapshot:
    return SystemSnapshot(
        uptime_seconds=5000.12,
        load_average=(0.5, 1.25, 2.0),
        active_sessions=3,
        sampled_at=datetime(2024, 1, 1, 12, 0, 0),
    )


def test_system_snapshot_creation():
    """Test SystemSnapshot dataclass creation."""
    snapshot = make_snapshot()

    assert snapshot.uptime_seconds == 5000.12
    assert snapshot.load_average == (0.5, 1.25, 2.0)
    assert snapshot.active_sessions == 3
    assert snapshot.sampled_at == datetime(2024, 1, 1, 12, 0, 0)


def test_system_snapshot_is_frozen():
    """Test that SystemSnapshot is immutable (frozen)."""
    snapshot = make_snapshot()

    try:
        snapshot.active_sessions = 99
        raise AssertionError("Should have raised FrozenInstanceError")
    except AttributeError:
        pass  # Expected behavior for frozen dataclass


def test_system_snapshot_uses_slots():
    """Test that SystemSnapshot uses __slots__."""
    assert not hasattr(make_snapshot(), "__dict__")


def test_status_text_is_frozen():
    """Test that StatusText is immutable (frozen)."""
    status = StatusText(text=" 12:00:00 up 1 day\n", sampled_at=datetime(2024, 1, 1))

    assert status.text == " 12:00:00 up 1 day\n"
    try:
        status.text = "changed"
        raise AssertionError("Should have raised FrozenInstanceError")
    except AttributeError:
        pass
