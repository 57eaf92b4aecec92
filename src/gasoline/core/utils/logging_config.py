from __future__ import annotations

import logging
import sys
from pathlib import Path

from gasoline.core.utils.io import ensure_directory

_GASOLINE_HANDLER: logging.Handler | None = None
_JSON_MODE_NULL_HANDLER: logging.Handler | None = None

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def _level_from_name(name: str) -> int:
    level = logging.getLevelName(str(name).upper())
    return level if isinstance(level, int) else logging.INFO


def configure_cli_logging(*, level: str = "WARNING", log_path: Path | None = None) -> None:
    """Configure stdlib logging for a CLI invocation.

    Installs a single Gasoline-owned handler on the root logger: a file handler
    when ``log_path`` is given, otherwise a stderr stream handler. Calling again
    replaces the previously installed handler.
    """
    global _GASOLINE_HANDLER

    root = logging.getLogger()
    root.setLevel(_level_from_name(level))

    if _GASOLINE_HANDLER is not None:
        root.removeHandler(_GASOLINE_HANDLER)
        _GASOLINE_HANDLER.close()
        _GASOLINE_HANDLER = None

    handler: logging.Handler
    if log_path is not None:
        resolved = Path(log_path).resolve()
        ensure_directory(resolved.parent)
        handler = logging.FileHandler(resolved, encoding="utf-8")
    else:
        handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(_level_from_name(level))
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root.addHandler(handler)
    _GASOLINE_HANDLER = handler


def reset_logging_for_tests() -> None:
    """Test-only: remove the Gasoline-installed handlers."""
    global _GASOLINE_HANDLER, _JSON_MODE_NULL_HANDLER
    root = logging.getLogger()
    for handler in (_GASOLINE_HANDLER, _JSON_MODE_NULL_HANDLER):
        if handler is not None:
            root.removeHandler(handler)
            handler.close()
    _GASOLINE_HANDLER = None
    _JSON_MODE_NULL_HANDLER = None
    root.setLevel(logging.WARNING)


def suppress_lastresort_in_json_mode() -> None:
    """Prevent stdlib logging's lastResort handler from polluting JSON output.

    With no handlers configured, WARNING+ records go to stderr through the
    implicit ``lastResort`` handler. A NullHandler on the root logger keeps
    ``--json`` output machine-readable without disabling logging levels.
    """
    global _JSON_MODE_NULL_HANDLER

    root = logging.getLogger()
    if root.handlers or _JSON_MODE_NULL_HANDLER is not None:
        return
    _JSON_MODE_NULL_HANDLER = logging.NullHandler()
    root.addHandler(_JSON_MODE_NULL_HANDLER)


__all__ = [
    "LOG_FORMAT",
    "configure_cli_logging",
    "reset_logging_for_tests",
    "suppress_lastresort_in_json_mode",
]
