"""Shared CLI utility functions.

This module provides common utilities used across CLI commands to reduce
duplication and ensure consistent behavior.
"""
from __future__ import annotations

import argparse
from pathlib import Path
from typing import Any, Dict, Tuple

from gasoline.core.config import ConfigManager, LoggingConfig, StateConfig
from gasoline.core.utils.logging_config import (
    configure_cli_logging,
    suppress_lastresort_in_json_mode,
)
from gasoline.core.utils.paths import resolve_project_root


def get_repo_root(args: argparse.Namespace) -> Path:
    """Get project root from ``--repo-root`` or auto-detect."""
    if getattr(args, "repo_root", None):
        return Path(getattr(args, "repo_root")).resolve()
    return resolve_project_root()


def load_command_context(args: argparse.Namespace) -> Tuple[Path, Dict[str, Any]]:
    """Resolve the project root, load config and configure logging.

    Raises:
        ConfigError: Invalid configuration.
        ProjectRootError: ``GASOLINE_PROJECT_ROOT`` points nowhere.
    """
    json_mode = bool(getattr(args, "json", False))
    if json_mode:
        suppress_lastresort_in_json_mode()

    repo_root = get_repo_root(args)
    config = ConfigManager(repo_root).load_config()

    logging_cfg = LoggingConfig(repo_root, config=config)
    level = "DEBUG" if getattr(args, "verbose", False) else logging_cfg.level
    if getattr(args, "verbose", False) or logging_cfg.file is not None or not json_mode:
        configure_cli_logging(level=level, log_path=logging_cfg.file)
    return repo_root, config


def get_state_file(args: argparse.Namespace, repo_root: Path, config: Dict[str, Any]) -> Path:
    raw = getattr(args, "state_file", None)
    if raw:
        path = Path(raw).expanduser()
        return path if path.is_absolute() else (Path.cwd() / path).resolve()
    return StateConfig(repo_root, config=config).snapshot_path


__all__ = ["get_repo_root", "load_command_context", "get_state_file"]
