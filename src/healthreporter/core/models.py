"""Core domain models for health and backup reporting."""

from dataclasses import dataclass, field
from enum import Enum


class MetricName(str, Enum):
    """Resources sampled by a health check."""

    CPU = "cpu"
    MEMORY = "memory"
    DISK = "disk"


class BackupStatus(str, Enum):
    """Outcome of a single backup transfer."""

    SUCCESS = "success"
    FAILURE = "failure"


@dataclass(frozen=True)
class LogEntry:
    """A single event line.

    Attributes:
        timestamp: Unix timestamp in seconds.
        message: The event message.
        level: Log level (e.g., INFO, WARN, ERROR). Not written to log files.
        attributes: Additional structured fields. Not written to log files.
    """

    timestamp: float
    message: str
    level: str = "INFO"
    attributes: dict[str, str | int | float | bool] = field(default_factory=dict)


@dataclass(frozen=True)
class MetricSample:
    """A point-in-time utilisation measurement.

    Attributes:
        name: Which resource was measured.
        value: Utilisation percentage in [0, 100].
        timestamp: Unix timestamp in seconds.
        labels: Key-value pairs describing the sample (e.g., mount point).
    """

    name: MetricName
    value: float
    timestamp: float
    labels: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class ProcessInfo:
    """One row of the top memory-consuming processes snapshot."""

    pid: int
    command: str
    memory_percent: float


@dataclass(frozen=True)
class SampleFailure:
    """A query that could not be answered during a health check.

    Attributes:
        query: Metric name ("cpu", "memory", "disk") or "processes".
        detail: Why the query failed.
    """

    query: str
    detail: str


@dataclass(frozen=True)
class BackupOutcome:
    """Result of one backup invocation.

    Attributes:
        timestamp: Unix timestamp at completion.
        source: Local directory that was transferred.
        destination: Remote destination descriptor (e.g., user@host:/path).
        status: Success or failure.
        detail: Error text for failures, empty on success.
    """

    timestamp: float
    source: str
    destination: str
    status: BackupStatus
    detail: str = ""

    @property
    def succeeded(self) -> bool:
        return self.status is BackupStatus.SUCCESS


@dataclass
class HealthCheckResult:
    """Everything one health check run produced."""

    samples: list[MetricSample] = field(default_factory=list)
    alerts: list[str] = field(default_factory=list)
    failures: list[SampleFailure] = field(default_factory=list)
    processes: list[ProcessInfo] = field(default_factory=list)

    @property
    def exit_code(self) -> int:
        """Process exit status: 0 when every metric was sampled, 1 otherwise.

        Alerts never affect the exit status.
        """
        return 1 if self.failures else 0
