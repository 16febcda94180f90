"""Metric source that shells out to top, free, df and ps.

The parsers are plain functions over command output so they can be tested
against captured text.
"""

import logging
import re
import subprocess
from collections.abc import Callable, Sequence
from typing import TypeVar

from healthreporter.adapters.commands import (
    CommandRunner,
    describe_failure,
    run_command,
)
from healthreporter.core.errors import QuerySourceUnavailable
from healthreporter.core.metrics import cpu_busy_percent, memory_used_percent
from healthreporter.core.models import ProcessInfo

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_COMMAND_TIMEOUT = 10.0

TOP_COMMAND = ("top", "-bn1")
FREE_COMMAND = ("free", "-b")
DF_COMMAND = ("df", "-P")
PS_COMMAND = ("ps", "-eo", "pid,%mem,comm", "--sort=-%mem")

# Matches "91.2 id" (procps-ng) and "91.2%id" (older procps); some locales
# use a decimal comma.
_IDLE_PATTERN = re.compile(r"(\d+(?:[.,]\d+)?)\s*%?\s*id\b")


def parse_top_idle(output: str) -> float:
    """Extract the idle CPU percentage from ``top -bn1`` output.

    Raises:
        ValueError: If no CPU summary line is present.
    """
    for line in output.splitlines():
        if "Cpu(s)" not in line:
            continue
        match = _IDLE_PATTERN.search(line)
        if match:
            return float(match.group(1).replace(",", "."))
    raise ValueError("no Cpu(s) idle figure in top output")


def parse_free(output: str) -> tuple[int, int]:
    """Extract (used, total) bytes from the ``Mem:`` row of ``free`` output.

    Raises:
        ValueError: If the row is missing or malformed.
    """
    for line in output.splitlines():
        parts = line.split()
        if parts and parts[0] == "Mem:":
            if len(parts) < 3:
                raise ValueError(f"malformed Mem row: {line!r}")
            return int(parts[2]), int(parts[1])
    raise ValueError("no Mem: row in free output")


def parse_df_capacity(output: str) -> float:
    """Extract the capacity percentage from ``df -P <mount>`` output.

    Raises:
        ValueError: If no data row with a capacity column is present.
    """
    rows = [line for line in output.splitlines()[1:] if line.strip()]
    if not rows:
        raise ValueError("no filesystem row in df output")
    for token in rows[-1].split()[1:]:
        if token.endswith("%") and token[:-1].isdigit():
            return float(token[:-1])
    raise ValueError(f"no capacity column in df row: {rows[-1]!r}")


def parse_ps(output: str, limit: int) -> list[ProcessInfo]:
    """Parse ``ps -eo pid,%mem,comm`` output, keeping the first limit rows.

    Rows are expected already sorted by memory share; malformed rows are
    skipped.
    """
    if limit <= 0:
        return []
    processes: list[ProcessInfo] = []
    for line in output.splitlines()[1:]:
        parts = line.split(None, 2)
        if len(parts) < 3:
            continue
        try:
            pid, mem = int(parts[0]), float(parts[1].replace(",", "."))
        except ValueError:
            logger.debug("Skipping malformed ps row %r", line)
            continue
        processes.append(ProcessInfo(pid=pid, command=parts[2], memory_percent=mem))
        if len(processes) >= limit:
            break
    return processes


class CommandMetricSource:
    """Implementation of MetricSourcePort over the procps/coreutils tools.

    Args:
        timeout: Seconds allowed per command.
        runner: subprocess.run-compatible callable.
    """

    def __init__(
        self,
        timeout: float = DEFAULT_COMMAND_TIMEOUT,
        runner: CommandRunner = subprocess.run,
    ) -> None:
        self._timeout = timeout
        self._runner = runner

    def sample_cpu(self) -> float:
        output = self._output("cpu", TOP_COMMAND)
        return cpu_busy_percent(self._parse("cpu", parse_top_idle, output))

    def sample_memory(self) -> float:
        output = self._output("memory", FREE_COMMAND)
        used, total = self._parse("memory", parse_free, output)
        try:
            return float(memory_used_percent(used, total))
        except ValueError as exc:
            raise QuerySourceUnavailable("memory", str(exc)) from exc

    def sample_disk(self, mount: str) -> float:
        output = self._output("disk", (*DF_COMMAND, mount))
        return self._parse("disk", parse_df_capacity, output)

    def list_top_processes(self, limit: int) -> list[ProcessInfo]:
        output = self._output("processes", PS_COMMAND)
        return parse_ps(output, limit)

    def _output(self, query: str, args: Sequence[str]) -> str:
        try:
            completed = run_command(args, timeout=self._timeout, runner=self._runner)
        except subprocess.CalledProcessError as exc:
            raise QuerySourceUnavailable(
                query, f"{args[0]} failed: {describe_failure(exc)}"
            ) from exc
        except subprocess.TimeoutExpired as exc:
            raise QuerySourceUnavailable(
                query, f"{args[0]} timed out after {exc.timeout:g}s"
            ) from exc
        except OSError as exc:
            raise QuerySourceUnavailable(
                query, f"{args[0]} unavailable: {exc}"
            ) from exc
        return completed.stdout

    @staticmethod
    def _parse(query: str, parser: Callable[[str], T], output: str) -> T:
        try:
            return parser(output)
        except ValueError as exc:
            raise QuerySourceUnavailable(query, str(exc)) from exc
