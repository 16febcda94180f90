"""Metric sampling with per-query failure isolation."""

import logging
from collections.abc import Callable
from typing import TypeVar

from healthreporter.core.errors import QuerySourceUnavailable
from healthreporter.core.logs import error
from healthreporter.core.metrics import gauge
from healthreporter.core.models import (
    HealthCheckResult,
    MetricName,
    SampleFailure,
)
from healthreporter.core.ports import LogStoragePort, MetricSourcePort

logger = logging.getLogger(__name__)

T = TypeVar("T")

PROCESSES_QUERY = "processes"


class MetricSampler:
    """Queries a metric source once per metric.

    A query that raises QuerySourceUnavailable is recorded as a
    SampleFailure and written to the event log; the remaining queries
    still run.
    """

    def __init__(
        self,
        source: MetricSourcePort,
        storage: LogStoragePort,
        disk_mount: str = "/",
        top_processes: int = 10,
    ) -> None:
        self._source = source
        self._storage = storage
        self._disk_mount = disk_mount
        self._top_processes = top_processes

    def sample(self) -> HealthCheckResult:
        """Take one sample of every metric and the process snapshot."""
        result = HealthCheckResult()

        cpu = self._query(result, MetricName.CPU.value, self._source.sample_cpu)
        if cpu is not None:
            result.samples.append(gauge(MetricName.CPU, cpu))

        memory = self._query(
            result, MetricName.MEMORY.value, self._source.sample_memory
        )
        if memory is not None:
            result.samples.append(gauge(MetricName.MEMORY, memory))

        disk = self._query(
            result,
            MetricName.DISK.value,
            lambda: self._source.sample_disk(self._disk_mount),
        )
        if disk is not None:
            result.samples.append(
                gauge(MetricName.DISK, disk, labels={"mount": self._disk_mount})
            )

        if self._top_processes > 0:
            processes = self._query(
                result,
                PROCESSES_QUERY,
                lambda: self._source.list_top_processes(self._top_processes),
            )
            if processes is not None:
                result.processes.extend(processes[: self._top_processes])

        return result

    def _query(
        self, result: HealthCheckResult, query: str, fn: Callable[[], T]
    ) -> T | None:
        try:
            value = fn()
        except QuerySourceUnavailable as exc:
            logger.warning("Query %s failed: %s", query, exc.detail)
            result.failures.append(SampleFailure(query=query, detail=exc.detail))
            self._storage.write(
                error(f"Unable to read {query}: {exc.detail}", query=query)
            )
            return None
        logger.debug("Query %s returned %r", query, value)
        return value
