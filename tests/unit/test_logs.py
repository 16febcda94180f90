"""Tests for log helper functions and line formatting."""

import time
from datetime import datetime

import pytest

from healthreporter.core.logs import (
    error,
    format_line,
    info,
    log,
    parse_line,
    warn,
)
from healthreporter.core.models import LogEntry


class TestLog:
    """Tests for log() helper function."""

    @pytest.mark.core
    def test_log_creates_log_entry_with_level_and_message(self) -> None:
        """Log creates a LogEntry with the given level and message."""
        entry = log("INFO", "Backup started")
        assert entry.level == "INFO"
        assert entry.message == "Backup started"

    @pytest.mark.core
    def test_log_returns_log_entry_type(self) -> None:
        """Log returns a LogEntry instance."""
        assert isinstance(log("INFO", "Test message"), LogEntry)

    @pytest.mark.core
    def test_log_auto_captures_timestamp(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Log automatically captures current timestamp."""
        monkeypatch.setattr(time, "time", lambda: 1702300000.0)
        entry = log("INFO", "Test message")
        assert entry.timestamp == 1702300000.0

    @pytest.mark.core
    def test_log_accepts_attributes_as_kwargs(self) -> None:
        """Log accepts attributes as keyword arguments."""
        entry = log("WARN", "CPU usage is high: 85%", metric="cpu", threshold=80)
        assert entry.attributes == {"metric": "cpu", "threshold": 80}

    @pytest.mark.core
    def test_log_defaults_to_empty_attributes(self) -> None:
        """Log defaults to empty attributes dict."""
        assert log("INFO", "message").attributes == {}


class TestLevelHelpers:
    """Tests for info(), warn() and error() helpers."""

    @pytest.mark.core
    @pytest.mark.parametrize(
        ("helper", "level"),
        [(info, "INFO"), (warn, "WARN"), (error, "ERROR")],
    )
    def test_helper_sets_level(self, helper, level: str) -> None:
        """Each helper creates an entry at its own level."""
        entry = helper("message", key="value")
        assert entry.level == level
        assert entry.attributes == {"key": "value"}


class TestFormatLine:
    """Tests for format_line()."""

    @pytest.mark.core
    def test_format_is_timestamp_colon_message(self) -> None:
        """Lines render as '<timestamp>: <message>'."""
        ts = datetime(2024, 3, 1, 14, 5, 9).timestamp()
        entry = LogEntry(timestamp=ts, message="CPU usage is high: 85%")
        assert format_line(entry) == "2024-03-01 14:05:09: CPU usage is high: 85%"

    @pytest.mark.core
    def test_level_and_attributes_are_not_rendered(self) -> None:
        """Only timestamp and message appear in the line."""
        ts = datetime(2024, 3, 1, 14, 5, 9).timestamp()
        entry = LogEntry(
            timestamp=ts, message="msg", level="ERROR", attributes={"k": "v"}
        )
        assert format_line(entry) == "2024-03-01 14:05:09: msg"

    @pytest.mark.core
    def test_multiline_message_is_flattened(self) -> None:
        """Embedded newlines never split one entry across lines."""
        entry = LogEntry(timestamp=time.time(), message="Backup failed: a\nb\n")
        line = format_line(entry)
        assert "\n" not in line
        assert line.endswith("Backup failed: a b")


class TestParseLine:
    """Tests for parse_line()."""

    @pytest.mark.core
    def test_parses_formatted_line(self) -> None:
        """A formatted line parses back to timestamp and message."""
        ts = datetime(2024, 3, 1, 14, 5, 9).timestamp()
        entry = parse_line("2024-03-01 14:05:09: Disk usage is high: 95% on /\n")
        assert entry is not None
        assert entry.timestamp == ts
        assert entry.message == "Disk usage is high: 95% on /"

    @pytest.mark.core
    def test_message_may_contain_separator(self) -> None:
        """Only the first ': ' separates timestamp from message."""
        entry = parse_line("2024-03-01 14:05:09: Backup failed: connection refused")
        assert entry is not None
        assert entry.message == "Backup failed: connection refused"

    @pytest.mark.core
    @pytest.mark.parametrize(
        "line",
        ["", "\n", "no separator here", "yesterday: something happened"],
    )
    def test_rejects_malformed_lines(self, line: str) -> None:
        """Lines that do not follow the format parse to None."""
        assert parse_line(line) is None
