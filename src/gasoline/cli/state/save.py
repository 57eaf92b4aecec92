"""
gas state save command.

SUMMARY: Record the current scan as the deployed snapshot

Refuses to save a graph with dependency cycles.
"""

from __future__ import annotations

import argparse

from gasoline.cli import (
    OutputFormatter,
    add_container_dir_flag,
    add_dry_run_flag,
    add_standard_flags,
    add_state_file_flag,
    get_state_file,
    load_command_context,
)
from gasoline.core.exceptions import GasolineError
from gasoline.core.resources import build_resource_graph, save_snapshot

SUMMARY = "Record the current scan as the deployed snapshot"


def register_args(parser: argparse.ArgumentParser) -> None:
    """Register command-specific arguments."""
    add_state_file_flag(parser)
    add_dry_run_flag(parser)
    add_container_dir_flag(parser)
    add_standard_flags(parser)


def main(args: argparse.Namespace) -> int:
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))
    dry_run = bool(getattr(args, "dry_run", False))

    try:
        repo_root, config = load_command_context(args)
        state_file = get_state_file(args, repo_root, config)
        graph = build_resource_graph(
            repo_root,
            config=config,
            on_cycle="error",
            container_dirs=getattr(args, "container_dirs", None),
        )
        manifest = graph.manifest()
        if not dry_run:
            save_snapshot(state_file, manifest)
    except GasolineError as exc:
        formatter.error(exc)
        return 1

    data = {"stateFile": str(state_file), "resources": len(manifest), "dryRun": dry_run}
    if dry_run:
        data["snapshot"] = manifest.to_dict()
    verb = "Would save" if dry_run else "Saved"
    formatter.success(
        data,
        f"{verb} snapshot of {len(manifest)} resource(s) to {state_file}",
    )
    return 0
