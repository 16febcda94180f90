"""Blocking execution of external commands."""

import logging
import subprocess
from collections.abc import Callable, Sequence
from typing import Any

logger = logging.getLogger(__name__)

# Signature-compatible with subprocess.run; tests inject fakes.
CommandRunner = Callable[..., "subprocess.CompletedProcess[str]"]


def run_command(
    args: Sequence[str],
    timeout: float | None,
    runner: CommandRunner = subprocess.run,
    **kwargs: Any,
) -> "subprocess.CompletedProcess[str]":
    """Run a command to completion, capturing text output.

    Raises:
        subprocess.CalledProcessError: If the command exits non-zero.
        subprocess.TimeoutExpired: If the command outlives timeout.
        FileNotFoundError: If the executable does not exist.
    """
    logger.debug("Running %s (timeout=%s)", " ".join(args), timeout)
    return runner(
        list(args),
        capture_output=True,
        text=True,
        check=True,
        timeout=timeout,
        **kwargs,
    )


def describe_failure(exc: subprocess.CalledProcessError) -> str:
    """Error text of a failed command: stderr if any, else the exit status."""
    stderr = exc.stderr or ""
    if isinstance(stderr, bytes):
        stderr = stderr.decode(errors="replace")
    stderr = " ".join(stderr.split())
    if stderr:
        return stderr
    return f"exit status {exc.returncode}"
