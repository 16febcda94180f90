"""Append-only flat file storage adapter for event logs."""

import logging
from collections.abc import Iterator
from pathlib import Path

from healthreporter.core.errors import LogWriteFailure
from healthreporter.core.logs import format_line, parse_line
from healthreporter.core.models import LogEntry

logger = logging.getLogger(__name__)


class FileLogStorage:
    """Flat file implementation of LogStoragePort.

    Each write appends one ``<timestamp>: <message>`` line and closes the
    file again, so lines from sequential writes land in call order. There
    is no locking: concurrent processes writing the same file may
    interleave lines. Rotation is left to external tools.

    Args:
        path: Log file location. The file and its parent directory are
              created on first write.
    """

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def write(self, entry: LogEntry) -> None:
        """Append one line.

        Raises:
            LogWriteFailure: If the directory or file cannot be written.
        """
        line = format_line(entry) + "\n"
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            with self._path.open("a", encoding="utf-8") as fh:
                fh.write(line)
        except OSError as exc:
            raise LogWriteFailure(str(self._path), exc.strerror or str(exc)) from exc

    def read(self, since: float = 0) -> Iterator[LogEntry]:
        """Read entries with timestamp >= since, in file order.

        Lines that do not follow the log format are skipped. Level and
        attributes are not persisted, so entries come back with defaults.
        A missing file reads as empty.
        """
        if not self._path.exists():
            return
        with self._path.open(encoding="utf-8", errors="replace") as fh:
            for lineno, line in enumerate(fh, start=1):
                entry = parse_line(line)
                if entry is None:
                    logger.debug(
                        "Skipping unparseable line %d in %s", lineno, self._path
                    )
                    continue
                if entry.timestamp >= since:
                    yield entry
