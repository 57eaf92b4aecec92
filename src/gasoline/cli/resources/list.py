"""
gas resources list command.

SUMMARY: List scanned resources
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

SUMMARY = "List scanned resources"


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
            on_cycle="warn",
            container_dirs=getattr(args, "container_dirs", None),
        )
    except GasolineError as exc:
        formatter.error(exc)
        return 1

    rows = graph.records()
    if formatter.json_mode:
        formatter.json_output({"resources": rows, "count": len(rows)})
        return 0

    if not rows:
        formatter.text("No resources found.")
        return 0
    for row in rows:
        formatter.text(f"{row['id']}")
        formatter.text_kv("kind", row["kind"])
        formatter.text_kv("name", row["name"])
        formatter.text_kv("package", row["package"])
        formatter.text_kv("directory", row["directory"])
    formatter.text(f"\n{len(rows)} resource(s)")
    return 0
