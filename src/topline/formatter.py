"""Status line formatting for topline."""

from datetime import datetime

from topline.models import Snapshot, StatusText


def format_uptime(seconds: float) -> str:
    """Format seconds since boot as H:MM (hours unpadded, minutes padded)."""
    hours = int(seconds // 3600)
    minutes = int((seconds % 3600) // 60)
    return f"{hours}:{minutes:02d}"


def render(snapshot: Snapshot, now: datetime) -> str:
    """
    Render a snapshot as the single status line.

    Raw command output is passed through untouched.
    """
    if isinstance(snapshot, StatusText):
        return snapshot.text

    one, five, fifteen = snapshot.load_average
    return (
        f"top - {now:%H:%M:%S} up {format_uptime(snapshot.uptime_seconds)},  "
        f"{snapshot.active_sessions} users,  "
        f"load average: {one:.2f}, {five:.2f}, {fifteen:.2f}"
    )
