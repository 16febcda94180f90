"""Backup runner that mirrors a directory with rsync."""

import logging
import subprocess
import time
from collections.abc import Sequence

from healthreporter.adapters.commands import (
    CommandRunner,
    describe_failure,
    run_command,
)
from healthreporter.core.errors import TransferFailure
from healthreporter.core.logs import error, info
from healthreporter.core.models import BackupOutcome, BackupStatus
from healthreporter.core.ports import LogStoragePort

logger = logging.getLogger(__name__)

RSYNC_EXECUTABLE = "rsync"

# archive, compress, verbose
DEFAULT_TRANSFER_MODE = "-avz"

DEFAULT_TRANSFER_TIMEOUT = 3600.0


class BackupRunner:
    """Synchronises a source directory to a remote destination.

    A failed transfer is written to the event log and returned as a
    failure outcome rather than raised.

    Args:
        source: Local directory to transfer.
        destination: rsync destination (e.g., "user@host:/backups/data").
        storage: Event log for the outcome line.
        timeout: Seconds before the transfer is killed and reported failed.
        options: Extra rsync options appended after the transfer mode.
        runner: subprocess.run-compatible callable.
    """

    def __init__(
        self,
        source: str,
        destination: str,
        storage: LogStoragePort,
        timeout: float = DEFAULT_TRANSFER_TIMEOUT,
        options: Sequence[str] = (),
        runner: CommandRunner = subprocess.run,
        executable: str = RSYNC_EXECUTABLE,
    ) -> None:
        self.source = source
        self.destination = destination
        self._storage = storage
        self._timeout = timeout
        self._options = list(options)
        self._runner = runner
        self._executable = executable

    def command(self) -> list[str]:
        """Full argument vector of the transfer."""
        return [
            self._executable,
            DEFAULT_TRANSFER_MODE,
            *self._options,
            self.source,
            self.destination,
        ]

    def run(self) -> BackupOutcome:
        """Run the transfer once and log exactly one outcome line."""
        try:
            self._transfer()
        except TransferFailure as exc:
            logger.error("Backup of %s failed: %s", self.source, exc.detail)
            self._storage.write(
                error(
                    f"Backup failed: {exc.detail}",
                    source=self.source,
                    destination=self.destination,
                )
            )
            return self._outcome(BackupStatus.FAILURE, exc.detail)

        self._storage.write(
            info(
                f"Backup completed successfully: {self.source} -> {self.destination}",
                source=self.source,
                destination=self.destination,
            )
        )
        return self._outcome(BackupStatus.SUCCESS)

    def _transfer(self) -> None:
        try:
            completed = run_command(
                self.command(), timeout=self._timeout, runner=self._runner
            )
        except subprocess.CalledProcessError as exc:
            raise TransferFailure(describe_failure(exc), exc.returncode) from exc
        except subprocess.TimeoutExpired as exc:
            raise TransferFailure(f"timed out after {exc.timeout:g}s") from exc
        except FileNotFoundError as exc:
            raise TransferFailure(
                f"{self._executable} executable not found"
            ) from exc
        except OSError as exc:
            raise TransferFailure(f"could not start {self._executable}: {exc}") from exc
        logger.debug("rsync output:\n%s", completed.stdout)

    def _outcome(self, status: BackupStatus, detail: str = "") -> BackupOutcome:
        return BackupOutcome(
            timestamp=time.time(),
            source=self.source,
            destination=self.destination,
            status=status,
            detail=detail,
        )
