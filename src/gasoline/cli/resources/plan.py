"""
gas resources plan command.

SUMMARY: Diff the current scan against the snapshot and print deploy waves

The plan is read-only; `gas state save` records the scan as deployed.
"""

from __future__ import annotations

import argparse

from gasoline.cli import (
    OutputFormatter,
    add_container_dir_flag,
    add_standard_flags,
    add_state_file_flag,
    get_state_file,
    load_command_context,
)
from gasoline.core.exceptions import GasolineError
from gasoline.core.resources import DeployPlanner, build_resource_graph, load_snapshot
from gasoline.core.resources.state import ResourceState, ids_by_state

SUMMARY = "Diff the current scan against the snapshot and print deploy waves"


def register_args(parser: argparse.ArgumentParser) -> None:
    """Register command-specific arguments."""
    add_state_file_flag(parser)
    add_container_dir_flag(parser)
    add_standard_flags(parser)


def main(args: argparse.Namespace) -> int:
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))

    try:
        repo_root, config = load_command_context(args)
        state_file = get_state_file(args, repo_root, config)
        previous = load_snapshot(state_file)
        graph = build_resource_graph(
            repo_root,
            config=config,
            on_cycle="warn",
            container_dirs=getattr(args, "container_dirs", None),
        )
        plan = DeployPlanner().build_plan(previous, graph.manifest())
    except GasolineError as exc:
        formatter.error(exc)
        return 1

    if formatter.json_mode:
        formatter.json_output({"stateFile": str(state_file), **plan.to_dict()})
        return 0

    by_state = ids_by_state(plan.states)
    formatter.text(f"Snapshot: {state_file}")
    for state in ResourceState:
        formatter.text_kv(state.value, len(by_state[state]))

    if not plan.has_changes:
        formatter.text("\nNo changes.")
        return 0

    for wave in plan.teardown_waves:
        formatter.text(f"\nTeardown wave {wave.wave}:")
        for rid in wave.resources:
            formatter.text(f"  - {rid}")
    for wave in plan.deploy_waves:
        formatter.text(f"\nDeploy wave {wave.wave}:")
        for rid in wave.resources:
            formatter.text(f"  {plan.states[rid].value.lower():<8} {rid}")
    if plan.blocked:
        formatter.text("\nBlocked by dependency cycles:")
        for rid in plan.blocked:
            formatter.text(f"  ! {rid}")
    return 0
