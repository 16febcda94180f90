"""healthreporter - one-shot system health alerts and rsync backups."""

from healthreporter.adapters.rsync import BackupRunner
from healthreporter.adapters.sources import CommandMetricSource, PsutilMetricSource
from healthreporter.adapters.storage import FileLogStorage, InMemoryLogStorage
from healthreporter.config import BackupConfig, ReporterConfig, load_config
from healthreporter.core.errors import (
    ConfigError,
    HealthReporterError,
    LogWriteFailure,
    QuerySourceUnavailable,
    TransferFailure,
)
from healthreporter.core.health_check import HealthCheck
from healthreporter.core.models import (
    BackupOutcome,
    BackupStatus,
    HealthCheckResult,
    LogEntry,
    MetricName,
    MetricSample,
    ProcessInfo,
    SampleFailure,
)
from healthreporter.core.ports import LogStoragePort, MetricSourcePort
from healthreporter.core.thresholds import ThresholdConfig

__all__ = [
    "BackupConfig",
    "BackupOutcome",
    "BackupRunner",
    "BackupStatus",
    "CommandMetricSource",
    "ConfigError",
    "FileLogStorage",
    "HealthCheck",
    "HealthCheckResult",
    "HealthReporterError",
    "InMemoryLogStorage",
    "LogEntry",
    "LogStoragePort",
    "LogWriteFailure",
    "MetricName",
    "MetricSample",
    "MetricSourcePort",
    "ProcessInfo",
    "PsutilMetricSource",
    "QuerySourceUnavailable",
    "ReporterConfig",
    "SampleFailure",
    "ThresholdConfig",
    "TransferFailure",
    "load_config",
]
