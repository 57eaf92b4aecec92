"""
gas resources validate command.

SUMMARY: Check resources for duplicate names/IDs and dependency cycles

Exits 1 when any problem is found, so it can gate CI.
"""

from __future__ import annotations

import argparse

from gasoline.cli import (
    OutputFormatter,
    add_container_dir_flag,
    add_standard_flags,
    load_command_context,
)
from gasoline.core.exceptions import (
    DuplicateResourceIdError,
    DuplicateResourceNameError,
    GasolineError,
)
from gasoline.core.resources import build_resource_graph

SUMMARY = "Check resources for duplicate names/IDs and dependency cycles"


def register_args(parser: argparse.ArgumentParser) -> None:
    """Register command-specific arguments."""
    add_container_dir_flag(parser)
    add_standard_flags(parser)


def main(args: argparse.Namespace) -> int:
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))

    problems: list[dict] = []
    count = 0
    try:
        repo_root, config = load_command_context(args)
        graph = build_resource_graph(
            repo_root,
            config=config,
            on_cycle="warn",
            container_dirs=getattr(args, "container_dirs", None),
        )
        count = len(graph.descriptors)
        for cycle in graph.cycles:
            problems.append(
                {
                    "code": "CycleDetectedError",
                    "message": "Dependency cycle: " + " -> ".join(list(cycle) + [cycle[0]]),
                    "resources": list(cycle),
                }
            )
    except (DuplicateResourceNameError, DuplicateResourceIdError) as exc:
        problems.append(exc.to_json_error())
    except GasolineError as exc:
        formatter.error(exc)
        return 1

    valid = not problems
    if formatter.json_mode:
        formatter.json_output({"valid": valid, "resources": count, "problems": problems})
    elif valid:
        formatter.text(f"OK: {count} resource(s), no duplicates, no cycles")
    else:
        for problem in problems:
            formatter.text(f"Error: {problem['message']}")
    return 0 if valid else 1
