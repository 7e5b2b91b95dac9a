"""Shared fixtures for topline tests."""

from datetime import datetime

import pytest

from topline.models import SystemSnapshot

NOW = datetime(2024, 3, 5, 9, 7, 3)


class ScriptedReader:
    """Reader that replays a list of snapshots or errors and counts calls."""

    def __init__(self, *results) -> None:
        self._results = list(results)
        self.calls = 0

    def sample(self) -> SystemSnapshot:
        result = self._results[min(self.calls, len(self._results) - 1)]
        self.calls += 1
        if isinstance(result, Exception):
            raise result
        return result


@pytest.fixture
def now() -> datetime:
    """Fixed wall-clock time used as the dashboard clock."""
    return NOW


@pytest.fixture
def make_snapshot():
    """Factory for snapshots matching the 1:23 / 0.50, 1.25, 2.00 example."""

    def factory(sessions: int = 3) -> SystemSnapshot:
        return SystemSnapshot(
            uptime_seconds=5000.12,
            load_average=(0.5, 1.25, 2.0),
            active_sessions=sessions,
            sampled_at=NOW,
        )

    return factory


@pytest.fixture
def scripted_reader():
    """Factory for ScriptedReader instances."""
    return ScriptedReader
