"""Port interfaces for metric sources and log storage.

These protocols define the contracts that adapters must implement.
The core domain depends only on these interfaces, not concrete implementations.
"""

from collections.abc import Iterable
from typing import Protocol, runtime_checkable

from healthreporter.core.models import LogEntry, ProcessInfo


@runtime_checkable
class MetricSourcePort(Protocol):
    """Port for reading live resource utilisation.

    Each method answers one query independently and raises
    QuerySourceUnavailable when that query cannot be answered.
    Examples: PsutilMetricSource, CommandMetricSource.
    """

    def sample_cpu(self) -> float:
        """Return the CPU busy percentage (100 minus idle)."""
        ...

    def sample_memory(self) -> float:
        """Return the memory-used percentage, floor(used / total * 100)."""
        ...

    def sample_disk(self, mount: str) -> float:
        """Return the used percentage of the filesystem mounted at mount."""
        ...

    def list_top_processes(self, limit: int) -> list[ProcessInfo]:
        """Return up to limit processes, highest memory share first."""
        ...


@runtime_checkable
class LogStoragePort(Protocol):
    """Port for event log storage.

    Adapters implementing this protocol append and read back event lines.
    Examples: InMemoryLogStorage, FileLogStorage.
    """

    def write(self, entry: LogEntry) -> None:
        """Append a log entry to storage."""
        ...

    def read(self, since: float = 0) -> Iterable[LogEntry]:
        """Read log entries since the given timestamp.

        Args:
            since: Unix timestamp. Returns entries with timestamp >= since.
                   Default 0 returns all entries.

        Returns:
            Iterable of LogEntry objects in the order they were written.
        """
        ...
