"""Static thresholds and the alert decision."""

from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType

from healthreporter.core.errors import ConfigError
from healthreporter.core.metrics import format_percent
from healthreporter.core.models import MetricName, MetricSample

DEFAULT_CPU_THRESHOLD = 80
DEFAULT_MEMORY_THRESHOLD = 80
DEFAULT_DISK_THRESHOLD = 90


@dataclass(frozen=True)
class ThresholdConfig:
    """Integer percentage limit per metric, read once at startup.

    Raises:
        ConfigError: If a limit is not an integer in [0, 100].
    """

    cpu: int = DEFAULT_CPU_THRESHOLD
    memory: int = DEFAULT_MEMORY_THRESHOLD
    disk: int = DEFAULT_DISK_THRESHOLD

    def __post_init__(self) -> None:
        for name in MetricName:
            limit = getattr(self, name.value)
            # bool is an int subclass but never a valid limit
            if isinstance(limit, bool) or not isinstance(limit, int):
                raise ConfigError(
                    f"{name.value} threshold must be an integer, got {limit!r}"
                )
            if not 0 <= limit <= 100:
                raise ConfigError(
                    f"{name.value} threshold must be within [0, 100], got {limit}"
                )

    def limit_for(self, name: MetricName) -> int:
        """Return the configured limit for a metric."""
        return int(getattr(self, MetricName(name).value))

    def as_mapping(self) -> Mapping[MetricName, int]:
        """Read-only view of the limits keyed by metric name."""
        return MappingProxyType({name: self.limit_for(name) for name in MetricName})


def exceeds(value: float, threshold: float) -> bool:
    """Alert decision: strictly greater than the threshold."""
    return value > threshold


def evaluate(sample: MetricSample, thresholds: ThresholdConfig) -> bool:
    """Return True when the sample should raise an alert."""
    return exceeds(sample.value, thresholds.limit_for(sample.name))


def alert_message(sample: MetricSample) -> str:
    """Human-readable alert line for a sample that exceeded its limit."""
    value = format_percent(sample.value)
    if sample.name is MetricName.CPU:
        return f"CPU usage is high: {value}%"
    if sample.name is MetricName.MEMORY:
        return f"Memory usage is high: {value}%"
    mount = sample.labels.get("mount", "/")
    return f"Disk usage is high: {value}% on {mount}"
