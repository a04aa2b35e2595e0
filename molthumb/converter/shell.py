"""Run an external converter under a memory ceiling and a wall-clock timeout."""

from __future__ import annotations

import logging
import os
import signal
import subprocess
from dataclasses import dataclass

logger = logging.getLogger(__name__)

try:
    import resource
except ImportError:
    resource = None  # type: ignore[assignment]
    logger.warning("resource module unavailable; converter memory limits disabled")


@dataclass
class ShellResult:
    """Exit status and combined stdout/stderr of a shell command."""

    returncode: int
    output: str
    timed_out: bool = False


def _memory_limiter(memory_kib: int):
    if resource is None or memory_kib <= 0:
        return None
    limit = memory_kib * 1024

    def _apply() -> None:
        resource.setrlimit(resource.RLIMIT_AS, (limit, limit))

    return _apply


def _kill_group(proc: subprocess.Popen) -> None:
    """SIGKILL the whole session so pipelines in the command template die too."""
    try:
        os.killpg(proc.pid, signal.SIGKILL)
    except ProcessLookupError:
        pass


def run_with_limits(command: str, memory_kib: int, timeout: int) -> ShellResult:
    """Run command through the shell, capturing stderr together with stdout.

    The shell gets its own process group, so a timeout kills every process it
    started. Launch errors and timeouts are reported as a non-zero
    ShellResult rather than raised.
    """
    try:
        proc = subprocess.Popen(
            command,
            shell=True,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            text=True,
            errors="replace",
            preexec_fn=_memory_limiter(memory_kib),
            start_new_session=True,
        )
    except OSError as e:
        return ShellResult(returncode=-1, output=f"failed to launch converter: {e}")

    try:
        output, _ = proc.communicate(timeout=timeout)
    except subprocess.TimeoutExpired:
        _kill_group(proc)
        output, _ = proc.communicate()
        logger.warning("converter killed after %ss: %s", timeout, command)
        return ShellResult(
            returncode=-1,
            output=f"{output or ''}converter timed out after {timeout}s",
            timed_out=True,
        )

    return ShellResult(returncode=proc.returncode, output=output or "")
