"""Shared test fixtures for all test modules."""

import subprocess
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import pytest

from healthreporter.adapters.storage.in_memory import InMemoryLogStorage
from healthreporter.core.errors import QuerySourceUnavailable
from healthreporter.core.models import ProcessInfo


@pytest.fixture
def log_path(tmp_path: Path) -> Path:
    """Provide a temporary event log path."""
    return tmp_path / "logs" / "system_health.log"


@pytest.fixture
def log_storage() -> InMemoryLogStorage:
    """Fixture providing an empty in-memory event log."""
    return InMemoryLogStorage()


# === Metric Source Fixtures ===


@dataclass
class FakeMetricSource:
    """MetricSourcePort double returning fixed values.

    Queries named in ``unavailable`` raise QuerySourceUnavailable.
    """

    cpu: float = 10.0
    memory: float = 20.0
    disk: float = 30.0
    processes: list[ProcessInfo] = field(default_factory=list)
    unavailable: set[str] = field(default_factory=set)
    disk_mounts: list[str] = field(default_factory=list)
    process_limits: list[int] = field(default_factory=list)

    def _check(self, query: str) -> None:
        if query in self.unavailable:
            raise QuerySourceUnavailable(query, f"{query} source offline")

    def sample_cpu(self) -> float:
        self._check("cpu")
        return self.cpu

    def sample_memory(self) -> float:
        self._check("memory")
        return self.memory

    def sample_disk(self, mount: str) -> float:
        self.disk_mounts.append(mount)
        self._check("disk")
        return self.disk

    def list_top_processes(self, limit: int) -> list[ProcessInfo]:
        self.process_limits.append(limit)
        self._check("processes")
        return list(self.processes)


@pytest.fixture
def fake_source() -> Callable[..., FakeMetricSource]:
    """Factory fixture for FakeMetricSource.

    Usage:
        def test_something(fake_source):
            source = fake_source(cpu=85.0, unavailable={"disk"})
    """

    def _source(**kwargs: Any) -> FakeMetricSource:
        return FakeMetricSource(**kwargs)

    return _source


# === Command Runner Fixtures ===


@dataclass
class FakeRunner:
    """subprocess.run double keyed by executable name.

    ``outputs`` maps an executable to its stdout; ``errors`` maps it to an
    exception to raise instead; ``returncodes`` maps it to a non-zero exit
    status, reported with ``stderr``.
    """

    outputs: dict[str, str] = field(default_factory=dict)
    errors: dict[str, BaseException] = field(default_factory=dict)
    returncodes: dict[str, int] = field(default_factory=dict)
    stderr: str = ""
    calls: list[list[str]] = field(default_factory=list)
    kwargs: list[dict[str, Any]] = field(default_factory=list)

    def __call__(self, args: list[str], **kwargs: Any) -> subprocess.CompletedProcess:
        self.calls.append(list(args))
        self.kwargs.append(kwargs)
        executable = args[0]
        if executable in self.errors:
            raise self.errors[executable]
        returncode = self.returncodes.get(executable, 0)
        stdout = self.outputs.get(executable, "")
        if returncode and kwargs.get("check"):
            raise subprocess.CalledProcessError(
                returncode, args, output=stdout, stderr=self.stderr
            )
        return subprocess.CompletedProcess(args, returncode, stdout, self.stderr)


@pytest.fixture
def fake_runner() -> Callable[..., FakeRunner]:
    """Factory fixture for FakeRunner.

    Usage:
        def test_something(fake_runner):
            runner = fake_runner(returncodes={"rsync": 1}, stderr="boom")
    """

    def _runner(**kwargs: Any) -> FakeRunner:
        return FakeRunner(**kwargs)

    return _runner
