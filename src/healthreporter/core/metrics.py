"""Metric helper functions for creating MetricSample objects."""

import math
import time

from healthreporter.core.models import MetricName, MetricSample


def gauge(
    name: MetricName,
    value: float,
    labels: dict[str, str] | None = None,
) -> MetricSample:
    """Create a utilisation sample.

    Args:
        name: Which resource was measured
        value: Utilisation percentage
        labels: Optional dimension labels (e.g., {"mount": "/"})

    Returns:
        MetricSample with current timestamp
    """
    return MetricSample(
        name=name,
        value=value,
        timestamp=time.time(),
        labels=labels or {},
    )


def cpu_busy_percent(idle_percent: float) -> float:
    """CPU busy share as 100 minus idle.

    Only the idle share is subtracted; time spent waiting on I/O counts as
    busy.
    """
    return round(min(100.0, max(0.0, 100.0 - idle_percent)), 1)


def memory_used_percent(used: int, total: int) -> int:
    """Memory-used percentage, floor(used / total * 100).

    Raises:
        ValueError: If total is not positive or used is outside [0, total].
    """
    if total <= 0:
        raise ValueError(f"total memory must be positive, got {total}")
    if not 0 <= used <= total:
        raise ValueError(f"used memory {used} outside [0, {total}]")
    return (used * 100) // total


def disk_used_percent(used: int, free: int) -> float:
    """Disk-used percentage as reported by df, rounded up.

    Reserved blocks are excluded, so the share is taken over used + free
    rather than the filesystem's total size.
    """
    capacity = used + free
    if capacity <= 0:
        raise ValueError(f"filesystem reports no capacity (used={used}, free={free})")
    return float(math.ceil(used * 100 / capacity))


def format_percent(value: float) -> str:
    """Render a percentage without a trailing ``.0`` (85.0 -> "85")."""
    return f"{round(value, 1):g}"
