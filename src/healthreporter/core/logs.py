"""Log helper functions for creating and formatting LogEntry objects."""

import time
from datetime import datetime

from healthreporter.core.models import LogEntry

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"

# Separator between timestamp and message in a log line
LINE_SEPARATOR = ": "


def log(
    level: str,
    message: str,
    **attributes: str | int | float | bool,
) -> LogEntry:
    """Create a log entry with automatic timestamp.

    Args:
        level: Log level (e.g., "INFO", "ERROR", "WARN")
        message: The log message
        **attributes: Additional structured fields

    Returns:
        LogEntry with current timestamp
    """
    return LogEntry(
        timestamp=time.time(),
        message=message,
        level=level,
        attributes=dict(attributes),
    )


def info(message: str, **attributes: str | int | float | bool) -> LogEntry:
    """Create an INFO log entry with automatic timestamp."""
    return log("INFO", message, **attributes)


def warn(message: str, **attributes: str | int | float | bool) -> LogEntry:
    """Create a WARN log entry with automatic timestamp."""
    return log("WARN", message, **attributes)


def error(message: str, **attributes: str | int | float | bool) -> LogEntry:
    """Create an ERROR log entry with automatic timestamp."""
    return log("ERROR", message, **attributes)


def format_line(entry: LogEntry) -> str:
    """Render an entry as ``<timestamp>: <message>`` without a newline.

    Newlines inside the message are flattened so one entry is one line.
    """
    stamp = datetime.fromtimestamp(entry.timestamp).strftime(TIMESTAMP_FORMAT)
    message = " ".join(entry.message.splitlines())
    return f"{stamp}{LINE_SEPARATOR}{message}"


def parse_line(line: str) -> LogEntry | None:
    """Parse a ``<timestamp>: <message>`` line back into a LogEntry.

    Returns:
        LogEntry with the parsed timestamp and message, or None when the
        line does not follow the format.
    """
    stamp, sep, message = line.rstrip("\n").partition(LINE_SEPARATOR)
    if not sep:
        return None
    try:
        parsed = datetime.strptime(stamp, TIMESTAMP_FORMAT)
    except ValueError:
        return None
    return LogEntry(timestamp=parsed.timestamp(), message=message)
