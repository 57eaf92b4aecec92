"""Subprocess helpers with explicit timeouts.

No shell=True; commands are always argument lists. Start/end of every
command is logged at DEBUG with its duration.
"""
from __future__ import annotations

import logging
import shlex
import subprocess
from time import perf_counter
from typing import Any, Sequence

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 60.0


def _flatten_cmd(cmd: Any) -> Sequence[str]:
    if isinstance(cmd, (list, tuple)):
        return [str(p) for p in cmd]
    return shlex.split(str(cmd))


def run_with_timeout(cmd, timeout: float | None = None, **kwargs):
    """Run a subprocess with a timeout.

    Args:
        cmd: Command list passed through to ``subprocess.run``.
        timeout: Seconds before the command is killed (default: 60).
        **kwargs: Additional arguments forwarded to ``subprocess.run``.

    Returns:
        CompletedProcess from ``subprocess.run``.

    Raises:
        subprocess.TimeoutExpired: When the command exceeds ``timeout``.
        FileNotFoundError: When the executable is not on PATH.
    """
    argv = list(_flatten_cmd(cmd))
    effective_timeout = DEFAULT_TIMEOUT_SECONDS if timeout is None else float(timeout)
    start = perf_counter()
    logger.debug("subprocess.start argv=%s timeout=%.1fs", argv, effective_timeout)
    try:
        result = subprocess.run(argv, timeout=effective_timeout, **kwargs)
    except subprocess.TimeoutExpired:
        logger.debug(
            "subprocess.timeout argv=%s after %.1fms", argv, (perf_counter() - start) * 1000.0
        )
        raise
    logger.debug(
        "subprocess.end argv=%s returncode=%s duration=%.1fms",
        argv,
        result.returncode,
        (perf_counter() - start) * 1000.0,
    )
    return result


__all__ = ["run_with_timeout", "DEFAULT_TIMEOUT_SECONDS"]
