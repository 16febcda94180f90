"""Configuration loading for healthreporter.

Settings are resolved once at startup, in increasing precedence:

1. built-in defaults
2. a JSON config file (``--config`` or ``HEALTHREPORTER_CONFIG``)
3. ``HEALTHREPORTER_*`` environment variables, optionally from a ``.env`` file

Example config file::

    {
        "thresholds": {"cpu": 80, "memory": 80, "disk": 90},
        "disk_mount": "/",
        "log_file": "/var/log/system_health.log",
        "top_processes": 10,
        "metric_source": "psutil",
        "backup": {
            "source": "/srv/data",
            "destination": "backup@nas:/volume1/backups/data",
            "log_file": "/var/log/backup.log",
            "timeout": 3600,
            "options": ["--delete"]
        }
    }
"""

import json
import logging
import os
import shlex
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from dotenv import find_dotenv, load_dotenv

from healthreporter.adapters.rsync import DEFAULT_TRANSFER_TIMEOUT
from healthreporter.adapters.sources.command_source import DEFAULT_COMMAND_TIMEOUT
from healthreporter.core.errors import ConfigError
from healthreporter.core.thresholds import ThresholdConfig

logger = logging.getLogger(__name__)

ENV_PREFIX = "HEALTHREPORTER_"

METRIC_SOURCES = ("psutil", "command")

DEFAULT_LOG_FILE = "system_health.log"
DEFAULT_BACKUP_LOG_FILE = "backup.log"


@dataclass(frozen=True)
class BackupConfig:
    """Settings for the backup runner.

    Attributes:
        source: Local directory to transfer. Required to run a backup.
        destination: rsync destination. Required to run a backup.
        log_file: Event log for backup outcomes.
        timeout: Seconds before the transfer is abandoned.
        options: Extra rsync options after ``-avz``.
    """

    source: str | None = None
    destination: str | None = None
    log_file: str = DEFAULT_BACKUP_LOG_FILE
    timeout: float = DEFAULT_TRANSFER_TIMEOUT
    options: tuple[str, ...] = ()

    def require_endpoints(self) -> tuple[str, str]:
        """Return (source, destination).

        Raises:
            ConfigError: If either is unset.
        """
        if not self.source:
            raise ConfigError(
                f"backup source is not configured (set {ENV_PREFIX}BACKUP_SOURCE)"
            )
        if not self.destination:
            raise ConfigError(
                "backup destination is not configured "
                f"(set {ENV_PREFIX}BACKUP_DESTINATION)"
            )
        return self.source, self.destination


@dataclass(frozen=True)
class ReporterConfig:
    """Immutable settings passed to each component at construction."""

    thresholds: ThresholdConfig = field(default_factory=ThresholdConfig)
    disk_mount: str = "/"
    log_file: str = DEFAULT_LOG_FILE
    top_processes: int = 10
    metric_source: str = "psutil"
    cpu_interval: float = 1.0
    command_timeout: float = DEFAULT_COMMAND_TIMEOUT
    backup: BackupConfig = field(default_factory=BackupConfig)

    def __post_init__(self) -> None:
        if self.metric_source not in METRIC_SOURCES:
            raise ConfigError(
                f"metric_source must be one of {', '.join(METRIC_SOURCES)}, "
                f"got {self.metric_source!r}"
            )
        if self.top_processes < 0:
            raise ConfigError(
                f"top_processes must not be negative, got {self.top_processes}"
            )
        if self.cpu_interval < 0:
            raise ConfigError("cpu_interval must not be negative")
        if self.command_timeout <= 0:
            raise ConfigError("command_timeout must be positive")
        if self.backup.timeout <= 0:
            raise ConfigError("backup timeout must be positive")


def _as_int(name: str, value: Any) -> int:
    if isinstance(value, bool):
        raise ConfigError(f"{name} must be an integer, got {value!r}")
    if isinstance(value, int):
        return value
    try:
        return int(str(value).strip())
    except ValueError:
        raise ConfigError(f"{name} must be an integer, got {value!r}") from None


def _as_float(name: str, value: Any) -> float:
    if isinstance(value, bool):
        raise ConfigError(f"{name} must be a number, got {value!r}")
    try:
        return float(value)
    except (TypeError, ValueError):
        raise ConfigError(f"{name} must be a number, got {value!r}") from None


def _as_optional_str(name: str, value: Any) -> str | None:
    if value is None or isinstance(value, str):
        return value or None
    raise ConfigError(f"{name} must be a string, got {value!r}")


def _read_file(path: str | Path) -> dict[str, Any]:
    try:
        with open(path, encoding="utf-8") as fh:
            data = json.load(fh)
    except FileNotFoundError:
        raise ConfigError(f"config file not found: {path}") from None
    except json.JSONDecodeError as exc:
        raise ConfigError(f"config file {path} is not valid JSON: {exc}") from exc
    except OSError as exc:
        raise ConfigError(f"cannot read config file {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"config file {path} must contain a JSON object")
    return data


def _section(data: Mapping[str, Any], key: str) -> Mapping[str, Any]:
    value = data.get(key, {})
    if not isinstance(value, Mapping):
        raise ConfigError(f"'{key}' must be a JSON object")
    return value


def _merge_env(settings: dict[str, Any], environ: Mapping[str, str]) -> None:
    """Overlay HEALTHREPORTER_* variables onto the flat settings dict."""
    for key in list(settings):
        env_name = ENV_PREFIX + key.upper()
        if env_name in environ:
            settings[key] = environ[env_name]


def load_config(
    path: str | Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> ReporterConfig:
    """Resolve the configuration for one invocation.

    Args:
        path: JSON config file. Falls back to HEALTHREPORTER_CONFIG, then to
              defaults only.
        environ: Environment to read. Defaults to os.environ after loading
                 a ``.env`` file from the working directory, if any.

    Raises:
        ConfigError: If any setting is missing, malformed or out of range.
    """
    if environ is None:
        load_dotenv(find_dotenv(usecwd=True))
        environ = os.environ

    if path is None:
        path = environ.get(ENV_PREFIX + "CONFIG") or None

    data: dict[str, Any] = _read_file(path) if path is not None else {}
    if path is not None:
        logger.debug("Loaded config file %s", path)

    thresholds = _section(data, "thresholds")
    backup = _section(data, "backup")
    base = ReporterConfig()
    defaults = base.thresholds

    settings: dict[str, Any] = {
        "cpu_threshold": thresholds.get("cpu", defaults.cpu),
        "memory_threshold": thresholds.get("memory", defaults.memory),
        "disk_threshold": thresholds.get("disk", defaults.disk),
        "disk_mount": data.get("disk_mount", base.disk_mount),
        "log_file": data.get("log_file", base.log_file),
        "top_processes": data.get("top_processes", base.top_processes),
        "metric_source": data.get("metric_source", base.metric_source),
        "cpu_interval": data.get("cpu_interval", base.cpu_interval),
        "command_timeout": data.get("command_timeout", base.command_timeout),
        "backup_source": backup.get("source"),
        "backup_destination": backup.get("destination"),
        "backup_log_file": backup.get("log_file", base.backup.log_file),
        "backup_timeout": backup.get("timeout", base.backup.timeout),
        "rsync_options": backup.get("options", []),
    }
    _merge_env(settings, environ)

    options = settings["rsync_options"]
    if isinstance(options, str):
        options = shlex.split(options)
    if not isinstance(options, list) or not all(isinstance(o, str) for o in options):
        raise ConfigError("backup options must be a list of strings")

    return ReporterConfig(
        thresholds=ThresholdConfig(
            cpu=_as_int("cpu threshold", settings["cpu_threshold"]),
            memory=_as_int("memory threshold", settings["memory_threshold"]),
            disk=_as_int("disk threshold", settings["disk_threshold"]),
        ),
        disk_mount=str(settings["disk_mount"]),
        log_file=str(settings["log_file"]),
        top_processes=_as_int("top_processes", settings["top_processes"]),
        metric_source=str(settings["metric_source"]).strip().lower(),
        cpu_interval=_as_float("cpu_interval", settings["cpu_interval"]),
        command_timeout=_as_float("command_timeout", settings["command_timeout"]),
        backup=BackupConfig(
            source=_as_optional_str("backup source", settings["backup_source"]),
            destination=_as_optional_str(
                "backup destination", settings["backup_destination"]
            ),
            log_file=str(settings["backup_log_file"]),
            timeout=_as_float("backup timeout", settings["backup_timeout"]),
            options=tuple(options),
        ),
    )
