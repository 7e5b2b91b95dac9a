"""Startup configuration for topline."""

from dataclasses import dataclass, field
from pathlib import Path

SOURCES = ("proc", "psutil", "command")

MIN_INTERVAL = 0.1  # seconds


@dataclass(slots=True, frozen=True)
class DashboardConfig:
    """
    Options fixed for the lifetime of one dashboard session.

    Attributes:
        interval: Seconds between refreshes. Clamped to MIN_INTERVAL.
        source: Name of the metrics strategy, one of SOURCES.
        uptime_path: File holding seconds since boot as its first token.
        loadavg_path: File starting with the 1/5/15 minute load averages.
        sessions_dir: Directory tree with one regular file per login session.
        status_command: Command whose stdout is shown by the "command" source.
        command_timeout: Seconds to wait for status_command before failing.
    """

    interval: float = 3.0
    source: str = "proc"
    uptime_path: Path = Path("/proc/uptime")
    loadavg_path: Path = Path("/proc/loadavg")
    sessions_dir: Path = Path("/run/systemd/sessions")
    status_command: tuple[str, ...] = field(default=("uptime",))
    command_timeout: float = 5.0

    def __post_init__(self) -> None:
        if self.source not in SOURCES:
            raise ValueError(f"unknown metrics source: {self.source!r}")
        if not self.status_command:
            raise ValueError("status_command must not be empty")
        # Frozen dataclass, so bypass __setattr__ for the clamp
        object.__setattr__(self, "interval", max(MIN_INTERVAL, self.interval))
