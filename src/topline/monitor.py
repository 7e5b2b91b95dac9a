"""Metrics sources for topline."""

import logging
import math
import os
import stat
import subprocess
import time
from datetime import datetime
from pathlib import Path
from typing import Protocol

import psutil

from topline.config import DashboardConfig
from topline.errors import MalformedData, SourceUnavailable
from topline.models import Snapshot, StatusText, SystemSnapshot

logger = logging.getLogger(__name__)


class MetricsReader(Protocol):
    """Anything that can produce a fresh snapshot on demand."""

    def sample(self) -> Snapshot:
        """Take one snapshot. Raises MetricsError on failure."""
        ...


def _read_text(path: Path) -> str:
    try:
        raw = path.read_bytes()
    except OSError as e:
        raise SourceUnavailable(f"cannot read {path}: {e}") from e
    try:
        return raw.decode("ascii")
    except UnicodeDecodeError as e:
        raise MalformedData(f"{path}: not ASCII text: {e}") from e


def _parse_float(token: str, path: Path) -> float:
    # float() also takes digit separators such as "5_000"
    if "_" in token:
        raise MalformedData(f"{path}: not a number: {token!r}")
    try:
        value = float(token)
    except ValueError as e:
        raise MalformedData(f"{path}: not a number: {token!r}") from e
    if not math.isfinite(value) or value < 0:
        raise MalformedData(f"{path}: out of range: {token!r}")
    return value


def parse_uptime(content: str, path: Path = Path("/proc/uptime")) -> float:
    """Parse seconds since boot from the first token of an uptime file."""
    tokens = content.split()
    if not tokens:
        raise MalformedData(f"{path}: empty content")
    return _parse_float(tokens[0], path)


def parse_loadavg(
    content: str, path: Path = Path("/proc/loadavg")
) -> tuple[float, float, float]:
    """Parse the 1, 5 and 15 minute load averages, in that order."""
    tokens = content.split()
    if len(tokens) < 3:
        raise MalformedData(f"{path}: expected 3 load averages, got {len(tokens)}")
    one, five, fifteen = (_parse_float(token, path) for token in tokens[:3])
    return (one, five, fifteen)


def _raise_walk_error(error: OSError) -> None:
    raise error


def count_sessions(root: Path) -> int:
    """
    Count regular files anywhere under root.

    Symlinks are not followed or counted. Any error while walking the tree,
    including on nested entries, fails the whole count.
    """
    try:
        is_dir = root.is_dir()
    except OSError as e:
        raise SourceUnavailable(f"cannot stat {root}: {e}") from e
    if not is_dir:
        raise SourceUnavailable(f"session directory not accessible: {root}")

    count = 0
    try:
        for dirpath, _dirnames, filenames in os.walk(root, onerror=_raise_walk_error):
            for name in filenames:
                if stat.S_ISREG(os.lstat(os.path.join(dirpath, name)).st_mode):
                    count += 1
    except OSError as e:
        raise SourceUnavailable(f"cannot walk {root}: {e}") from e
    return count


class ProcMetricsReader:
    """
    Structured reader backed by the Linux /proc files and systemd sessions.

    Every call re-reads all three sources; a snapshot is all-or-nothing.
    """

    def __init__(
        self,
        uptime_path: Path = Path("/proc/uptime"),
        loadavg_path: Path = Path("/proc/loadavg"),
        sessions_dir: Path = Path("/run/systemd/sessions"),
    ) -> None:
        self._uptime_path = uptime_path
        self._loadavg_path = loadavg_path
        self._sessions_dir = sessions_dir

    def sample(self) -> SystemSnapshot:
        uptime = parse_uptime(_read_text(self._uptime_path), self._uptime_path)
        load = parse_loadavg(_read_text(self._loadavg_path), self._loadavg_path)
        sessions = count_sessions(self._sessions_dir)
        logger.debug("sampled uptime=%.2f load=%s sessions=%d", uptime, load, sessions)
        return SystemSnapshot(
            uptime_seconds=uptime,
            load_average=load,
            active_sessions=sessions,
            sampled_at=datetime.now(),
        )


class PsutilMetricsReader:
    """Structured reader using psutil, for hosts without the /proc layout."""

    def sample(self) -> SystemSnapshot:
        try:
            uptime = max(0.0, time.time() - psutil.boot_time())
            one, five, fifteen = psutil.getloadavg()
            sessions = len(psutil.users())
        except (OSError, psutil.Error) as e:
            raise SourceUnavailable(f"psutil failed: {e}") from e
        logger.debug("sampled uptime=%.2f sessions=%d via psutil", uptime, sessions)
        return SystemSnapshot(
            uptime_seconds=uptime,
            load_average=(one, five, fifteen),
            active_sessions=sessions,
            sampled_at=datetime.now(),
        )


class StatusCommandReader:
    """Opaque reader that shows the stdout of a status command verbatim."""

    def __init__(
        self,
        command: tuple[str, ...] = ("uptime",),
        timeout: float | None = 5.0,
    ) -> None:
        self._command = command
        self._timeout = timeout

    @property
    def command(self) -> tuple[str, ...]:
        return self._command

    def sample(self) -> StatusText:
        name = self._command[0]
        try:
            result = subprocess.run(
                list(self._command),
                capture_output=True,
                timeout=self._timeout,
            )
        except FileNotFoundError as e:
            raise SourceUnavailable(f"{name}: command not found") from e
        except subprocess.TimeoutExpired as e:
            raise SourceUnavailable(f"{name}: timed out after {self._timeout}s") from e
        except OSError as e:
            raise SourceUnavailable(f"{name}: {e}") from e

        if result.returncode != 0:
            detail = result.stderr.decode("utf-8", errors="replace").strip()
            raise SourceUnavailable(f"{name}: {detail or f'exit status {result.returncode}'}")
        # Undecodable bytes are shown as U+FFFD rather than failing the sample
        text = result.stdout.decode("utf-8", errors="replace")
        return StatusText(text=text, sampled_at=datetime.now())


def create_reader(config: DashboardConfig) -> MetricsReader:
    """Build the metrics strategy named by config.source."""
    if config.source == "proc":
        return ProcMetricsReader(
            uptime_path=config.uptime_path,
            loadavg_path=config.loadavg_path,
            sessions_dir=config.sessions_dir,
        )
    if config.source == "psutil":
        return PsutilMetricsReader()
    if config.source == "command":
        return StatusCommandReader(
            command=config.status_command,
            timeout=config.command_timeout,
        )
    raise ValueError(f"unknown metrics source: {config.source!r}")
