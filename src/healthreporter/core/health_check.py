"""Health check: sample, evaluate against thresholds, log alerts."""

import logging

from healthreporter.core.logs import info, warn
from healthreporter.core.metrics import format_percent
from healthreporter.core.models import HealthCheckResult, ProcessInfo
from healthreporter.core.ports import LogStoragePort, MetricSourcePort
from healthreporter.core.sampler import MetricSampler
from healthreporter.core.thresholds import ThresholdConfig, alert_message, evaluate

logger = logging.getLogger(__name__)


def process_line(process: ProcessInfo) -> str:
    """Render one process snapshot row."""
    return (
        f"pid={process.pid} mem={format_percent(process.memory_percent)}% "
        f"cmd={process.command}"
    )


class HealthCheck:
    """One-shot health check run.

    Every sample above its threshold produces a new alert line on every
    run; there is no debouncing between runs.
    """

    def __init__(
        self,
        source: MetricSourcePort,
        storage: LogStoragePort,
        thresholds: ThresholdConfig | None = None,
        disk_mount: str = "/",
        top_processes: int = 10,
    ) -> None:
        self._storage = storage
        self._thresholds = thresholds or ThresholdConfig()
        self._sampler = MetricSampler(
            source,
            storage,
            disk_mount=disk_mount,
            top_processes=top_processes,
        )

    def run(self) -> HealthCheckResult:
        """Sample, evaluate and log. Returns what the run produced."""
        result = self._sampler.sample()

        for sample in result.samples:
            limit = self._thresholds.limit_for(sample.name)
            if evaluate(sample, self._thresholds):
                message = alert_message(sample)
                result.alerts.append(message)
                self._storage.write(
                    warn(
                        message,
                        metric=sample.name.value,
                        value=sample.value,
                        threshold=limit,
                    )
                )
            logger.info(
                "%s at %s%% (threshold %d%%)",
                sample.name.value,
                format_percent(sample.value),
                limit,
            )

        if result.processes:
            self._storage.write(
                info(f"Top {len(result.processes)} memory-consuming processes:")
            )
            for process in result.processes:
                self._storage.write(info(process_line(process), pid=process.pid))

        logger.info(
            "Health check finished: %d alert(s), %d failure(s)",
            len(result.alerts),
            len(result.failures),
        )
        return result
