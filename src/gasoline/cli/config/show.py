"""
gas config show command.

SUMMARY: Show current configuration

Displays the merged configuration from bundled defaults, the project's
gasoline.config.yaml and GASOLINE_* environment overrides.
"""

from __future__ import annotations

import argparse

from gasoline.cli import OutputFormatter, add_standard_flags, load_command_context
from gasoline.core.config import ConfigManager
from gasoline.core.exceptions import GasolineError
from gasoline.core.utils.io import dump_yaml_string

SUMMARY = "Show current configuration"


def _nest_key(key: str, value):
    """Nest a dot-notation key into a YAML/JSON-friendly mapping."""
    parts = [p for p in str(key).split(".") if p]
    out = value
    for part in reversed(parts):
        out = {part: out}
    return out


def register_args(parser: argparse.ArgumentParser) -> None:
    """Register command-specific arguments."""
    parser.add_argument(
        "key",
        nargs="?",
        help="Specific configuration key to show (e.g., 'graph.on_cycle')",
    )
    add_standard_flags(parser)


def main(args: argparse.Namespace) -> int:
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))

    try:
        repo_root, config = load_command_context(args)
    except GasolineError as exc:
        formatter.error(exc)
        return 1

    if args.key:
        value = ConfigManager(repo_root).get(args.key)
        if value is None:
            formatter.text(f"Key not found: {args.key}")
            return 1
        data = _nest_key(args.key, value)
    else:
        data = config

    if formatter.json_mode:
        formatter.json_output(data)
    else:
        formatter.text(dump_yaml_string(data).rstrip())
    return 0
