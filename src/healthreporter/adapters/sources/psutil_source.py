"""Metric source backed by psutil."""

import logging

import psutil

from healthreporter.core.errors import QuerySourceUnavailable
from healthreporter.core.metrics import (
    cpu_busy_percent,
    disk_used_percent,
    memory_used_percent,
)
from healthreporter.core.models import ProcessInfo

logger = logging.getLogger(__name__)

_PROCESS_ATTRS = ["pid", "name", "memory_percent"]


class PsutilMetricSource:
    """Implementation of MetricSourcePort using psutil.

    Args:
        cpu_interval: Seconds to block while measuring CPU times.
    """

    def __init__(self, cpu_interval: float = 1.0) -> None:
        self._cpu_interval = cpu_interval

    def sample_cpu(self) -> float:
        try:
            times = psutil.cpu_times_percent(interval=self._cpu_interval)
        except (psutil.Error, OSError) as exc:
            raise QuerySourceUnavailable("cpu", str(exc)) from exc
        return cpu_busy_percent(times.idle)

    def sample_memory(self) -> float:
        try:
            memory = psutil.virtual_memory()
            return float(memory_used_percent(memory.used, memory.total))
        except (psutil.Error, OSError, ValueError) as exc:
            raise QuerySourceUnavailable("memory", str(exc)) from exc

    def sample_disk(self, mount: str) -> float:
        try:
            usage = psutil.disk_usage(mount)
            return disk_used_percent(usage.used, usage.free)
        except (psutil.Error, OSError, ValueError) as exc:
            raise QuerySourceUnavailable("disk", f"{mount}: {exc}") from exc

    def list_top_processes(self, limit: int) -> list[ProcessInfo]:
        processes: list[ProcessInfo] = []
        try:
            for proc in psutil.process_iter(_PROCESS_ATTRS, ad_value=None):
                details = proc.info
                if details.get("memory_percent") is None:
                    # access denied or exited while iterating
                    continue
                processes.append(
                    ProcessInfo(
                        pid=details["pid"],
                        command=details.get("name") or "?",
                        memory_percent=details["memory_percent"],
                    )
                )
        except (psutil.Error, OSError) as exc:
            raise QuerySourceUnavailable("processes", str(exc)) from exc
        processes.sort(key=lambda p: p.memory_percent, reverse=True)
        logger.debug("Collected %d processes", len(processes))
        return processes[:limit]
