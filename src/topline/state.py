"""Dashboard state machine for topline."""

import logging
from collections.abc import Callable
from datetime import datetime
from enum import Enum

from topline.errors import MetricsError
from topline.formatter import render
from topline.monitor import MetricsReader

logger = logging.getLogger(__name__)


class Phase(Enum):
    """Lifecycle phases of a dashboard session."""

    UNINITIALIZED = "uninitialized"
    READY = "ready"
    QUITTING = "quitting"


class DashboardState:
    """
    The last rendered status line and the error that ended the session, if any.

    Only the transition methods mutate the state; the render step reads it
    through view(). QUITTING is terminal.
    """

    def __init__(
        self,
        reader: MetricsReader,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self._reader = reader
        self._clock = clock
        self._phase = Phase.UNINITIALIZED
        self._rendered_line = ""
        self._last_error: Exception | None = None

    @property
    def phase(self) -> Phase:
        return self._phase

    @property
    def reader(self) -> MetricsReader:
        return self._reader

    @property
    def rendered_line(self) -> str:
        return self._rendered_line

    @property
    def last_error(self) -> Exception | None:
        return self._last_error

    @property
    def is_quitting(self) -> bool:
        return self._phase is Phase.QUITTING

    @property
    def exit_code(self) -> int:
        """Process exit status for this session: 1 if it ended on an error."""
        return 0 if self._last_error is None else 1

    def init(self) -> Phase:
        """Take the first sample. Only acts while UNINITIALIZED."""
        if self._phase is Phase.UNINITIALIZED:
            self._refresh()
        return self._phase

    def tick(self) -> Phase:
        """Re-sample on a timer tick. Ignored unless READY."""
        if self._phase is Phase.READY:
            self._refresh()
        return self._phase

    def quit_request(self) -> Phase:
        """Move straight to QUITTING without sampling."""
        if self._phase is not Phase.QUITTING:
            logger.debug("quit requested in phase %s", self._phase.value)
            self._phase = Phase.QUITTING
        return self._phase

    def view(self) -> str:
        """Text for the render step."""
        if self._last_error is not None:
            return f"encountered error: {self._last_error}"
        return self._rendered_line

    def _refresh(self) -> None:
        try:
            snapshot = self._reader.sample()
        except MetricsError as e:
            logger.error("sampling failed: %s", e)
            self._last_error = e
            self._phase = Phase.QUITTING
            return
        self._rendered_line = render(snapshot, self._clock())
        self._phase = Phase.READY
