"""In-memory storage adapter for event logs."""

from collections.abc import Iterable

from healthreporter.core.models import LogEntry


class InMemoryLogStorage:
    """In-memory implementation of LogStoragePort.

    Stores log entries in a list. Suitable for testing and dry runs
    where nothing should touch the filesystem.
    """

    def __init__(self) -> None:
        self._entries: list[LogEntry] = []

    def write(self, entry: LogEntry) -> None:
        """Append a log entry to storage."""
        self._entries.append(entry)

    def read(self, since: float = 0) -> Iterable[LogEntry]:
        """Read log entries since the given timestamp, in write order."""
        return [e for e in self._entries if e.timestamp >= since]

    def messages(self) -> list[str]:
        """Messages of every stored entry, in write order."""
        return [e.message for e in self._entries]
