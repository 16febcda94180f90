"""Metric source adapters implementing MetricSourcePort."""

from healthreporter.adapters.sources.command_source import CommandMetricSource
from healthreporter.adapters.sources.psutil_source import PsutilMetricSource

__all__ = ["CommandMetricSource", "PsutilMetricSource"]
