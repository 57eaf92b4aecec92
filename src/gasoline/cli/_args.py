"""Common CLI argument registration utilities.

This module provides reusable argument registration functions to reduce
duplication across CLI commands.
"""
from __future__ import annotations

import argparse


def add_json_flag(parser: argparse.ArgumentParser) -> None:
    """Add --json flag for JSON output mode."""
    parser.add_argument(
        "--json",
        action="store_true",
        help="Output as JSON",
    )


def add_repo_root_flag(parser: argparse.ArgumentParser) -> None:
    """Add --repo-root flag for project root override."""
    parser.add_argument(
        "--repo-root",
        type=str,
        help="Override project root path",
    )


def add_container_dir_flag(parser: argparse.ArgumentParser) -> None:
    """Add repeatable --container-dir flag overriding resources.container_dirs."""
    parser.add_argument(
        "--container-dir",
        dest="container_dirs",
        action="append",
        metavar="DIR",
        help="Resource container directory relative to the project root (repeatable)",
    )


def add_state_file_flag(parser: argparse.ArgumentParser) -> None:
    """Add --state-file flag overriding state.file."""
    parser.add_argument(
        "--state-file",
        type=str,
        help="Snapshot file (default: state.file, usually gas.up.json)",
    )


def add_dry_run_flag(parser: argparse.ArgumentParser) -> None:
    """Add --dry-run flag."""
    parser.add_argument(
        "--dry-run",
        "-n",
        action="store_true",
        help="Show what would be done without making changes",
    )


def add_verbose_flag(parser: argparse.ArgumentParser) -> None:
    """Add --verbose flag (DEBUG logging)."""
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable debug logging",
    )


def add_standard_flags(parser: argparse.ArgumentParser) -> None:
    """Add standard flags that most commands use.

    Adds: --json, --repo-root, --verbose
    """
    add_json_flag(parser)
    add_repo_root_flag(parser)
    add_verbose_flag(parser)


__all__ = [
    "add_json_flag",
    "add_repo_root_flag",
    "add_container_dir_flag",
    "add_state_file_flag",
    "add_dry_run_flag",
    "add_verbose_flag",
    "add_standard_flags",
]
