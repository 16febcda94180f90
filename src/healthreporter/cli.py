"""Command line entry point.

Usage::

    healthreporter check [--config PATH] [--verbose]
    healthreporter backup [--config PATH] [--verbose]

Exit status:
    0  check: every metric sampled (alerts do not count); backup: transferred
    1  check: a metric was unavailable; backup: transfer failed
    2  configuration error or the event log could not be written
"""

import argparse
import logging
import sys
from collections.abc import Sequence

from healthreporter.adapters.rsync import BackupRunner
from healthreporter.adapters.sources.command_source import CommandMetricSource
from healthreporter.adapters.sources.psutil_source import PsutilMetricSource
from healthreporter.adapters.storage.file_log import FileLogStorage
from healthreporter.config import ReporterConfig, load_config
from healthreporter.core.errors import ConfigError, LogWriteFailure
from healthreporter.core.health_check import HealthCheck
from healthreporter.core.ports import MetricSourcePort

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_FATAL = 2


def build_source(config: ReporterConfig) -> MetricSourcePort:
    """Create the metric source selected by configuration."""
    if config.metric_source == "command":
        return CommandMetricSource(timeout=config.command_timeout)
    return PsutilMetricSource(cpu_interval=config.cpu_interval)


def run_check(config: ReporterConfig) -> int:
    check = HealthCheck(
        build_source(config),
        FileLogStorage(config.log_file),
        thresholds=config.thresholds,
        disk_mount=config.disk_mount,
        top_processes=config.top_processes,
    )
    return check.run().exit_code


def build_backup_runner(config: ReporterConfig) -> BackupRunner:
    """Create the backup runner for the configured source and destination."""
    source, destination = config.backup.require_endpoints()
    return BackupRunner(
        source,
        destination,
        FileLogStorage(config.backup.log_file),
        timeout=config.backup.timeout,
        options=config.backup.options,
    )


def run_backup(config: ReporterConfig) -> int:
    outcome = build_backup_runner(config).run()
    return EXIT_OK if outcome.succeeded else EXIT_FAILURE


COMMANDS = {
    "check": run_check,
    "backup": run_backup,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="healthreporter",
        description="Log system health alerts and run rsync backups.",
    )
    parser.add_argument(
        "command",
        choices=sorted(COMMANDS),
        help="check: sample CPU/memory/disk and log alerts; backup: run rsync",
    )
    parser.add_argument(
        "--config",
        metavar="PATH",
        help="JSON config file (default: $HEALTHREPORTER_CONFIG, if set)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="print debug diagnostics to stderr",
    )
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s - %(levelname)s - %(name)s - %(message)s",
        stream=sys.stderr,
    )

    try:
        config = load_config(args.config)
        return COMMANDS[args.command](config)
    except ConfigError as exc:
        logger.error("Configuration error: %s", exc)
        return EXIT_FATAL
    except LogWriteFailure as exc:
        logger.critical("Event log unavailable: %s", exc)
        return EXIT_FATAL


if __name__ == "__main__":
    sys.exit(main())
