"""Error types raised by topline."""


class ToplineError(OSError):
    """Base class for every failure that ends a topline session."""


class MetricsError(ToplineError):
    """A metrics source could not produce a snapshot."""


class SourceUnavailable(MetricsError):
    """The file, directory or command behind a metric cannot be used."""


class MalformedData(MetricsError):
    """A metrics source was readable but its content did not parse."""


class TerminalFailure(ToplineError):
    """The terminal rendering surface failed."""
