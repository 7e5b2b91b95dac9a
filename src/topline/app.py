"""topline - Main Textual application."""

import argparse
import logging
from collections.abc import Callable, Sequence
from datetime import datetime

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.logging import TextualHandler
from textual.timer import Timer
from textual.widgets import Static

from topline.config import SOURCES, DashboardConfig
from topline.errors import TerminalFailure
from topline.monitor import MetricsReader, create_reader
from topline.state import DashboardState

logger = logging.getLogger(__name__)


class StatusLine(Static):
    """Single-line widget showing the current status line or the final error."""

    DEFAULT_CSS = """
    StatusLine {
        height: auto;
        padding: 0 1;
    }
    """

    def __init__(self, **kwargs) -> None:
        """Initialize StatusLine with markup disabled, since command output is shown verbatim."""
        super().__init__("", markup=False, **kwargs)
        self._text = ""

    @property
    def text(self) -> str:
        """The text currently displayed."""
        return self._text

    def show(self, text: str) -> None:
        """Replace the displayed text."""
        self._text = text
        self.update(text)


class ToplineApp(App[None]):
    """
    Full-screen dashboard that redraws the status line on every tick.

    Timer ticks and key presses are handled one at a time on Textual's message
    loop; each one drives a single DashboardState transition followed by a
    redraw. The app exits once the state reaches QUITTING.
    """

    TITLE = "topline"

    BINDINGS = [
        Binding("q", "quit_request", "Quit"),
        Binding("escape", "quit_request", "Quit", show=False, priority=True),
        Binding("ctrl+c", "quit_request", "Quit", show=False, priority=True),
    ]

    def __init__(
        self,
        config: DashboardConfig | None = None,
        reader: MetricsReader | None = None,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        """
        Initialize the ToplineApp.

        Args:
            config: Startup options. Defaults to DashboardConfig().
            reader: Metrics strategy. Built from config.source when omitted.
            clock: Source of the wall-clock time shown in the status line.
        """
        super().__init__()
        self.dashboard_config = config if config is not None else DashboardConfig()
        if reader is None:
            reader = create_reader(self.dashboard_config)
        self.dashboard = DashboardState(reader, clock=clock)
        self._refresh_timer: Timer | None = None

    def compose(self) -> ComposeResult:
        """Compose the application layout."""
        yield StatusLine(id="status-line")

    def on_mount(self) -> None:
        """Take the first sample and start the refresh timer."""
        self.dashboard.init()
        self._redraw()
        if not self.dashboard.is_quitting:
            self._refresh_timer = self.set_interval(
                self.dashboard_config.interval, self._on_tick, name="refresh"
            )

    def _on_tick(self) -> None:
        self.dashboard.tick()
        self._redraw()

    def action_quit_request(self) -> None:
        """Handle the quit keys."""
        self.dashboard.quit_request()
        self._redraw()

    def _redraw(self) -> None:
        """Draw the state, and shut down after drawing a terminal state."""
        self.query_one("#status-line", StatusLine).show(self.dashboard.view())
        if self.dashboard.is_quitting:
            if self._refresh_timer is not None:
                self._refresh_timer.stop()
                self._refresh_timer = None
            self.exit(return_code=self.dashboard.exit_code)


def build_parser() -> argparse.ArgumentParser:
    """Build the command line parser."""
    parser = argparse.ArgumentParser(
        prog="topline",
        description="Show uptime, logged-in users and load average like the top header.",
    )
    parser.add_argument(
        "--source",
        choices=SOURCES,
        default="proc",
        help="where metrics come from (default: %(default)s)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="log every sample at debug level",
    )
    return parser


def parse_args(argv: Sequence[str] | None = None) -> tuple[DashboardConfig, bool]:
    """Parse the command line into a config and the verbose flag."""
    parser = build_parser()
    args = parser.parse_args(argv)
    config = DashboardConfig(source=args.source)
    return config, args.verbose


def configure_logging(verbose: bool = False) -> None:
    """Route log records through Textual so they never draw over the screen."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        handlers=[TextualHandler()],
        force=True,
    )


def main(argv: Sequence[str] | None = None) -> None:
    """Entry point for topline application."""
    config, verbose = parse_args(argv)
    configure_logging(verbose)

    app = ToplineApp(config)
    try:
        app.run()
    except Exception as e:
        failure = TerminalFailure(f"terminal failure: {e}")
        logger.error("%s", failure)
        raise SystemExit(1) from e

    return_code = app.return_code or 0
    if return_code != 0:
        error = app.dashboard.last_error
        if error is None:
            error = TerminalFailure(f"exited with status {return_code}")
        logger.error("%s", error)
        raise SystemExit(return_code)


if __name__ == "__main__":
    main()
