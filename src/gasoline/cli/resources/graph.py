"""
gas resources graph command.

SUMMARY: Show direct and upstream dependencies

With --nested, prints the manifest grouped by entity group, entity and
resource kind instead.
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

SUMMARY = "Show direct and upstream dependencies"


def register_args(parser: argparse.ArgumentParser) -> None:
    """Register command-specific arguments."""
    parser.add_argument(
        "--nested",
        action="store_true",
        help="Print the manifest grouped as entityGroup > entity > kind",
    )
    parser.add_argument(
        "--on-cycle",
        choices=["error", "warn"],
        help="Override graph.on_cycle for this run",
    )
    add_container_dir_flag(parser)
    add_standard_flags(parser)


def _print_tree(formatter: OutputFormatter, nested: dict) -> None:
    for group, entities in nested.items():
        formatter.text(group)
        for entity, kinds in entities.items():
            formatter.text(f"  {entity}")
            for kind, entries in kinds.items():
                formatter.text(f"    {kind}")
                for rid, entry in entries.items():
                    deps = ", ".join(entry["dependencies"]) or "-"
                    formatter.text(f"      {rid} ({entry['name']}) <- {deps}")


def main(args: argparse.Namespace) -> int:
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))

    try:
        repo_root, config = load_command_context(args)
        graph = build_resource_graph(
            repo_root,
            config=config,
            on_cycle=getattr(args, "on_cycle", None),
            container_dirs=getattr(args, "container_dirs", None),
        )
        nested = graph.manifest().to_nested() if args.nested else None
    except GasolineError as exc:
        formatter.error(exc)
        return 1

    if nested is not None:
        if formatter.json_mode:
            formatter.json_output(nested)
        else:
            _print_tree(formatter, nested)
        return 0

    if formatter.json_mode:
        formatter.json_output(
            {
                "direct": graph.direct,
                "upstream": graph.upstream,
                "endpoints": list(graph.endpoints),
                "cycles": [list(c) for c in graph.cycles],
            }
        )
        return 0

    for rid in graph.direct:
        formatter.text(rid)
        formatter.text_kv("direct", ", ".join(graph.direct[rid]) or "-")
        formatter.text_kv("upstream", ", ".join(graph.upstream.get(rid, [])) or "-")
    return 0
