"""
gas resources endpoints command.

SUMMARY: List endpoint resources (have dependencies, nothing depends on them)
"""

from __future__ import annotations

import argparse

from gasoline.cli import (
    OutputFormatter,
    add_container_dir_flag,
    add_standard_flags,
    load_command_context,
)
from gasoline.core.exceptions import GasolineError
from gasoline.core.resources import build_resource_graph

SUMMARY = "List endpoint resources (have dependencies, nothing depends on them)"


def register_args(parser: argparse.ArgumentParser) -> None:
    """Register command-specific arguments."""
    add_container_dir_flag(parser)
    add_standard_flags(parser)


def main(args: argparse.Namespace) -> int:
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))

    try:
        repo_root, config = load_command_context(args)
        graph = build_resource_graph(
            repo_root,
            config=config,
            container_dirs=getattr(args, "container_dirs", None),
        )
    except GasolineError as exc:
        formatter.error(exc)
        return 1

    endpoints = list(graph.endpoints)
    if formatter.json_mode:
        formatter.json_output(
            {
                "endpoints": endpoints,
                "upstream": {rid: graph.upstream[rid] for rid in endpoints},
            }
        )
        return 0

    if not endpoints:
        formatter.text("No endpoint resources.")
        return 0
    for rid in endpoints:
        formatter.text(rid)
        formatter.text_kv("upstream", ", ".join(graph.upstream[rid]))
    return 0
