"""Deployment planning from a previous snapshot and the current scan.

The plan is the hand-off to whatever performs provider operations. It
carries the merged dependency graph, each resource's state, and ordered
waves: every resource in a wave may be deployed in parallel once all
earlier waves have finished.

- ``deploy_waves`` contain CREATED and UPDATED resources, dependencies first.
- ``teardown_waves`` contain DELETED resources, dependents first.

Resources on a dependency cycle, and changed resources that depend on one,
are reported as blocked and left out of every wave.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Mapping, Sequence, Set

from .graph import (
    depths,
    find_cycles,
    group_depth_index,
    groups,
    merge_direct_dependency_maps,
    resolve_upstream,
)
from .manifest import ResourceManifest
from .models import DirectDependencyMap, ResourceId, UpstreamDependencyMap
from .state import CHANGED_STATES, ResourceState, diff_states, ids_by_state


@dataclass(frozen=True)
class DeployWave:
    wave: int
    resources: tuple[ResourceId, ...]

    def to_dict(self) -> dict[str, Any]:
        return {"wave": self.wave, "resources": list(self.resources)}


@dataclass(frozen=True)
class DeployPlan:
    direct: DirectDependencyMap
    upstream: UpstreamDependencyMap
    states: Dict[ResourceId, ResourceState]
    groups: Dict[ResourceId, int]
    depths: Dict[ResourceId, int]
    deploy_waves: tuple[DeployWave, ...]
    teardown_waves: tuple[DeployWave, ...]
    blocked: tuple[ResourceId, ...]
    cycles: tuple[tuple[ResourceId, ...], ...]
    changed_groups: tuple[int, ...]

    @property
    def has_changes(self) -> bool:
        return bool(self.deploy_waves or self.teardown_waves or self.blocked)

    def to_dict(self) -> dict[str, Any]:
        by_state = ids_by_state(self.states)
        return {
            "states": {rid: s.value for rid, s in self.states.items()},
            "byState": {s.value: ids for s, ids in by_state.items()},
            "direct": {rid: list(deps) for rid, deps in self.direct.items()},
            "upstream": {rid: list(deps) for rid, deps in self.upstream.items()},
            "groups": dict(self.groups),
            "depths": dict(self.depths),
            "groupDepthIndex": {
                str(g): {str(d): ids for d, ids in by_depth.items()}
                for g, by_depth in group_depth_index(self.groups, self.depths).items()
            },
            "changedGroups": list(self.changed_groups),
            "deployWaves": [w.to_dict() for w in self.deploy_waves],
            "teardownWaves": [w.to_dict() for w in self.teardown_waves],
            "blocked": list(self.blocked),
            "cycles": [list(c) for c in self.cycles],
        }


def _layer(
    members: Iterable[ResourceId],
    direct: Mapping[ResourceId, Sequence[ResourceId]],
    *,
    dependencies_first: bool,
) -> List[DeployWave]:
    """Kahn layering restricted to ``members``.

    Edges to resources outside ``members`` are already satisfied.
    """
    universe: Set[ResourceId] = set(members)
    # waits_on[x]: members that must be handled before x.
    waits_on: Dict[ResourceId, Set[ResourceId]] = {rid: set() for rid in universe}
    for rid in universe:
        for dep in direct.get(rid, ()):
            if dep == rid or dep not in universe:
                continue
            if dependencies_first:
                waits_on[rid].add(dep)
            else:
                waits_on[dep].add(rid)

    waves: List[DeployWave] = []
    remaining = set(universe)
    while remaining:
        ready = sorted(rid for rid in remaining if not (waits_on[rid] & remaining))
        if not ready:
            # Only reachable when members still contain a cycle.
            break
        waves.append(DeployWave(wave=len(waves) + 1, resources=tuple(ready)))
        remaining.difference_update(ready)
    return waves


class DeployPlanner:
    """Compute a wave plan for moving from ``previous`` to ``current``."""

    def build_plan(self, previous: ResourceManifest, current: ResourceManifest) -> DeployPlan:
        direct = merge_direct_dependency_maps(
            previous.direct_dependencies(), current.direct_dependencies()
        )
        upstream = resolve_upstream(direct)
        states = diff_states(previous, current)
        resource_groups = groups(direct)
        resource_depths = depths(direct)

        cycles = find_cycles(direct)
        on_cycle: Set[ResourceId] = {rid for cycle in cycles for rid in cycle}
        changed = {rid for rid, s in states.items() if s in CHANGED_STATES}
        blocked = {
            rid
            for rid in changed
            if rid in on_cycle or on_cycle.intersection(upstream.get(rid, ()))
        }

        deploy = [
            rid
            for rid, s in states.items()
            if s in (ResourceState.CREATED, ResourceState.UPDATED) and rid not in blocked
        ]
        teardown = [
            rid for rid, s in states.items() if s == ResourceState.DELETED and rid not in blocked
        ]

        changed_groups = sorted({resource_groups[rid] for rid in changed if rid in resource_groups})

        return DeployPlan(
            direct=direct,
            upstream=upstream,
            states=states,
            groups=resource_groups,
            depths=resource_depths,
            deploy_waves=tuple(_layer(deploy, direct, dependencies_first=True)),
            teardown_waves=tuple(_layer(teardown, direct, dependencies_first=False)),
            blocked=tuple(sorted(blocked)),
            cycles=tuple(tuple(c) for c in cycles),
            changed_groups=tuple(changed_groups),
        )


__all__ = ["DeployPlanner", "DeployPlan", "DeployWave"]
