"""Exception hierarchy for healthreporter.

Adapters translate third-party and OS errors into these types at the seam
where they occur, so callers only need to handle the package's own errors.
"""


class HealthReporterError(Exception):
    """Base class for all healthreporter errors."""


class ConfigError(HealthReporterError):
    """Configuration is missing, malformed or out of range."""


class QuerySourceUnavailable(HealthReporterError):
    """An OS metric could not be read.

    Args:
        query: Metric name ("cpu", "memory", "disk") or "processes".
        detail: Description of the underlying failure.
    """

    def __init__(self, query: str, detail: str) -> None:
        super().__init__(f"{query} query unavailable: {detail}")
        self.query = query
        self.detail = detail


class TransferFailure(HealthReporterError):
    """The synchronisation tool did not complete successfully.

    Args:
        detail: Error text from the tool, or a description of the failure.
        returncode: Exit status of the tool, None when it never exited.
    """

    def __init__(self, detail: str, returncode: int | None = None) -> None:
        super().__init__(detail)
        self.detail = detail
        self.returncode = returncode


class LogWriteFailure(HealthReporterError):
    """An event line could not be appended to the log file."""

    def __init__(self, path: str, detail: str) -> None:
        super().__init__(f"cannot write to {path}: {detail}")
        self.path = path
        self.detail = detail
