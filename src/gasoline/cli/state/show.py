"""
gas state show command.

SUMMARY: Show the last deployed snapshot
"""

from __future__ import annotations

import argparse

from gasoline.cli import (
    OutputFormatter,
    add_standard_flags,
    add_state_file_flag,
    get_state_file,
    load_command_context,
)
from gasoline.core.exceptions import GasolineError
from gasoline.core.resources import load_snapshot

SUMMARY = "Show the last deployed snapshot"


def register_args(parser: argparse.ArgumentParser) -> None:
    """Register command-specific arguments."""
    parser.add_argument(
        "--nested",
        action="store_true",
        help="Group resources as entityGroup > entity > kind",
    )
    add_state_file_flag(parser)
    add_standard_flags(parser)


def main(args: argparse.Namespace) -> int:
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))

    try:
        repo_root, config = load_command_context(args)
        state_file = get_state_file(args, repo_root, config)
        snapshot = load_snapshot(state_file)
        payload = snapshot.to_nested() if getattr(args, "nested", False) else snapshot.to_dict()
    except GasolineError as exc:
        formatter.error(exc)
        return 1

    if formatter.json_mode:
        formatter.json_output(payload)
        return 0

    if not len(snapshot):
        formatter.text(f"No snapshot at {state_file} (nothing deployed yet).")
        return 0
    formatter.text(f"Snapshot: {state_file}")
    for rid in snapshot:
        entry = snapshot.get(rid)
        formatter.text(rid)
        formatter.text_kv("kind", entry.kind)
        formatter.text_kv("name", entry.name)
        formatter.text_kv("dependencies", ", ".join(entry.dependencies) or "-")
    return 0
