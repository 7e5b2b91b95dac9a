"""Data models for topline."""

from dataclasses import dataclass
from datetime import datetime


@dataclass(slots=True, frozen=True)
class SystemSnapshot:
    """Immutable snapshot of the host facts shown in the status line."""

    uptime_seconds: float
    load_average: tuple[float, float, float]  # 1, 5 and 15 minutes
    active_sessions: int
    sampled_at: datetime


@dataclass(slots=True, frozen=True)
class StatusText:
    """Raw output of an external status command, shown verbatim."""

    text: str
    sampled_at: datetime


Snapshot = SystemSnapshot | StatusText
