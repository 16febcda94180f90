"""BDD step definitions for health check and backup features."""

import subprocess
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import pytest
from pytest_bdd import given, parsers, then, when

from healthreporter.adapters.rsync import BackupRunner
from healthreporter.adapters.storage.file_log import FileLogStorage
from healthreporter.core.health_check import HealthCheck
from healthreporter.core.models import BackupOutcome, HealthCheckResult
from healthreporter.core.thresholds import ThresholdConfig


@dataclass
class ReporterScenarioContext:
    """Shared state between steps in a reporter scenario."""

    storage: FileLogStorage
    thresholds: dict[str, int] = field(default_factory=dict)
    usage: dict[str, float] = field(default_factory=dict)
    unavailable: set[str] = field(default_factory=set)
    runner: Any = None
    results: list[HealthCheckResult] = field(default_factory=list)
    outcome: BackupOutcome | None = None

    def lines(self) -> list[str]:
        path = self.storage.path
        if not path.exists():
            return []
        return path.read_text(encoding="utf-8").splitlines()


@pytest.fixture
def ctx(tmp_path: Path) -> ReporterScenarioContext:
    """Fresh scenario context for each test."""
    return ReporterScenarioContext(storage=FileLogStorage(tmp_path / "events.log"))


# === Health Check Steps ===
@given(parsers.parse("a {metric} threshold of {limit:d}%"))
def step_threshold(ctx: ReporterScenarioContext, metric: str, limit: int) -> None:
    ctx.thresholds[metric.lower()] = limit


@given(parsers.parse("{metric} usage of {value:g}%"))
def step_usage(ctx: ReporterScenarioContext, metric: str, value: float) -> None:
    ctx.usage[metric.lower()] = value


@given(parsers.parse("the {query} query is unavailable"))
def step_unavailable(ctx: ReporterScenarioContext, query: str) -> None:
    ctx.unavailable.add(query)


@when("the health check runs")
def step_run_check(ctx: ReporterScenarioContext, fake_source) -> None:
    source = fake_source(unavailable=ctx.unavailable, **ctx.usage)
    check = HealthCheck(
        source, ctx.storage, thresholds=ThresholdConfig(**ctx.thresholds)
    )
    ctx.results.append(check.run())


@then(parsers.parse("the exit code is {code:d}"))
def step_exit_code(ctx: ReporterScenarioContext, code: int) -> None:
    assert ctx.results[-1].exit_code == code


# === Backup Steps ===
@given("a reachable backup destination")
def step_reachable(ctx: ReporterScenarioContext, fake_runner) -> None:
    ctx.runner = fake_runner()


@given(
    parsers.parse(
        'the transfer tool exits with status {status:d} and stderr "{stderr}"'
    )
)
def step_transfer_fails(
    ctx: ReporterScenarioContext, fake_runner, status: int, stderr: str
) -> None:
    ctx.runner = fake_runner(returncodes={"rsync": status}, stderr=stderr)


@given(parsers.parse("the transfer tool does not finish within {seconds:d} seconds"))
def step_transfer_hangs(
    ctx: ReporterScenarioContext, fake_runner, seconds: int
) -> None:
    ctx.runner = fake_runner(
        errors={"rsync": subprocess.TimeoutExpired(["rsync"], seconds)}
    )


@when("the backup runs")
def step_run_backup(ctx: ReporterScenarioContext) -> None:
    runner = BackupRunner(
        "/srv/data", "backup@invalid-host:/backups", ctx.storage, runner=ctx.runner
    )
    ctx.outcome = runner.run()


@then(parsers.parse('the backup outcome is "{status}"'))
def step_outcome(ctx: ReporterScenarioContext, status: str) -> None:
    assert ctx.outcome is not None
    assert ctx.outcome.status.value == status


# === Log Steps ===
@then(parsers.re(r'the log has (?P<count>\d+) lines? containing "(?P<text>[^"]+)"'))
def step_line_count(ctx: ReporterScenarioContext, count: str, text: str) -> None:
    matching = [line for line in ctx.lines() if text in line]
    assert len(matching) == int(count), ctx.lines()


@then(parsers.parse('a log line contains both "{first}" and "{second}"'))
def step_line_contains_both(
    ctx: ReporterScenarioContext, first: str, second: str
) -> None:
    assert any(first in line and second in line for line in ctx.lines())
