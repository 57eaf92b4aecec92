"""Dependency graph resolution over flat ``ResourceId -> [ResourceId]`` maps.

Every function here is pure: inputs are never mutated and no function raises
for well-formed maps except :func:`ensure_acyclic`. A dependency that is not
itself a key of the map is treated as a resource with no dependencies.

Edge direction follows the manifests: ``direct[a] = [b]`` means ``a``
requires ``b`` to exist first.
"""
from __future__ import annotations

from typing import Dict, Iterator, List, Mapping, Sequence, Set, Tuple

from gasoline.core.exceptions import CycleDetectedError

from .models import DirectDependencyMap, ResourceId, UpstreamDependencyMap


def _nodes(direct: Mapping[ResourceId, Sequence[ResourceId]]) -> List[ResourceId]:
    """All resources mentioned by the map, as keys or as dependencies (sorted)."""
    seen: Set[ResourceId] = set(direct)
    for deps in direct.values():
        seen.update(deps)
    return sorted(seen)


def resolve_upstream(direct: Mapping[ResourceId, Sequence[ResourceId]]) -> UpstreamDependencyMap:
    """Compute each resource's transitive dependency closure.

    Each key gets an independent depth-first walk. A dependency is appended
    after its own dependencies, so every list is ordered dependencies-first.
    The walked resource never appears in its own closure and a cycle is cut
    at the first repeat visit. The walk keeps its own stack, so chain depth
    is not bounded by the interpreter's recursion limit.
    """
    upstream: UpstreamDependencyMap = {}
    for resource_id in direct:
        walked: List[ResourceId] = []
        entered: Set[ResourceId] = {resource_id}
        stack: List[Tuple[ResourceId, Iterator[ResourceId]]] = [
            (resource_id, iter(direct.get(resource_id, ())))
        ]
        while stack:
            node, deps = stack[-1]
            for dep in deps:
                if dep not in entered:
                    entered.add(dep)
                    stack.append((dep, iter(direct.get(dep, ()))))
                    break
            else:
                stack.pop()
                if stack:
                    walked.append(node)
        upstream[resource_id] = walked
    return upstream


def merge_direct_dependency_maps(
    prev: Mapping[ResourceId, Sequence[ResourceId]],
    curr: Mapping[ResourceId, Sequence[ResourceId]],
) -> DirectDependencyMap:
    """Union by key; ``curr`` wins on shared keys, ``prev``-only keys are kept."""
    merged: DirectDependencyMap = {rid: list(deps) for rid, deps in prev.items()}
    for rid, deps in curr.items():
        merged[rid] = list(deps)
    return merged


def find_endpoint_resources(upstream: Mapping[ResourceId, Sequence[ResourceId]]) -> List[ResourceId]:
    """Resources that have dependencies but that nothing depends on.

    Isolated resources (no dependencies, no dependents) are not endpoints.
    """
    depended_on: Set[ResourceId] = set()
    for rid, deps in upstream.items():
        depended_on.update(d for d in deps if d != rid)
    return [rid for rid, deps in upstream.items() if deps and rid not in depended_on]


def find_cycles(direct: Mapping[ResourceId, Sequence[ResourceId]]) -> List[List[ResourceId]]:
    """Report every distinct cycle reachable through a back edge.

    Traversal starts from keys in sorted order, so results are deterministic.
    Each cycle is rotated to begin at its smallest member and listed once.
    """
    cycles: List[List[ResourceId]] = []
    seen_keys: Set[tuple[ResourceId, ...]] = set()
    done: Set[ResourceId] = set()

    for start in sorted(direct):
        if start in done:
            continue
        # path[i] is the node whose remaining dependencies are frames[i].
        path: List[ResourceId] = [start]
        frames: List[Iterator[ResourceId]] = [iter(direct.get(start, ()))]
        on_path: Dict[ResourceId, int] = {start: 0}
        while frames:
            for dep in frames[-1]:
                if dep in on_path:
                    cycle = path[on_path[dep]:]
                    pivot = cycle.index(min(cycle))
                    rotated = cycle[pivot:] + cycle[:pivot]
                    key = tuple(rotated)
                    if key not in seen_keys:
                        seen_keys.add(key)
                        cycles.append(rotated)
                elif dep not in done:
                    on_path[dep] = len(path)
                    path.append(dep)
                    frames.append(iter(direct.get(dep, ())))
                    break
            else:
                frames.pop()
                node = path.pop()
                del on_path[node]
                done.add(node)
    return cycles


def ensure_acyclic(direct: Mapping[ResourceId, Sequence[ResourceId]]) -> None:
    """Raise :class:`CycleDetectedError` naming the resources on any cycle."""
    cycles = find_cycles(direct)
    if cycles:
        raise CycleDetectedError(cycles)


def in_degrees(direct: Mapping[ResourceId, Sequence[ResourceId]]) -> Dict[ResourceId, int]:
    """Number of resources that directly depend on each resource."""
    degrees: Dict[ResourceId, int] = {rid: 0 for rid in _nodes(direct)}
    for rid, deps in direct.items():
        for dep in dict.fromkeys(deps):
            if dep != rid:
                degrees[dep] += 1
    return degrees


def roots(direct: Mapping[ResourceId, Sequence[ResourceId]]) -> List[ResourceId]:
    """Resources nothing depends on (in-degree zero), sorted."""
    return [rid for rid, degree in in_degrees(direct).items() if degree == 0]


def depths(direct: Mapping[ResourceId, Sequence[ResourceId]]) -> Dict[ResourceId, int]:
    """Longest distance from any root.

    A resource is always strictly deeper than every resource depending on
    it, so deploying from the deepest level upward respects every edge.
    Resources on or below a cycle get a best-effort depth.
    """
    degrees = in_degrees(direct)
    remaining = dict(degrees)
    result: Dict[ResourceId, int] = {}
    frontier = [rid for rid, degree in degrees.items() if degree == 0]
    for rid in frontier:
        result[rid] = 0

    while frontier:
        next_frontier: List[ResourceId] = []
        for rid in frontier:
            for dep in dict.fromkeys(direct.get(rid, ())):
                if dep == rid:
                    continue
                result[dep] = max(result.get(dep, 0), result[rid] + 1)
                remaining[dep] -= 1
                if remaining[dep] == 0:
                    next_frontier.append(dep)
        frontier = sorted(next_frontier)

    for rid in sorted(degrees):
        if rid not in result:
            dependents = [r for r, deps in direct.items() if rid in deps and r in result]
            result[rid] = max((result[r] + 1 for r in dependents), default=0)
    return {rid: result[rid] for rid in sorted(result)}


def groups(direct: Mapping[ResourceId, Sequence[ResourceId]]) -> Dict[ResourceId, int]:
    """Connected components of the undirected graph.

    Resources sharing any relative land in the same group. Groups are
    numbered from 0 in order of their smallest member ID.
    """
    nodes = _nodes(direct)
    parent: Dict[ResourceId, ResourceId] = {rid: rid for rid in nodes}

    def _find(x: ResourceId) -> ResourceId:
        while parent[x] != x:
            parent[x] = parent[parent[x]]
            x = parent[x]
        return x

    def _union(a: ResourceId, b: ResourceId) -> None:
        ra, rb = _find(a), _find(b)
        if ra == rb:
            return
        # Deterministic union: the lexicographically smaller root survives.
        parent[max(ra, rb)] = min(ra, rb)

    for rid, deps in direct.items():
        for dep in deps:
            _union(rid, dep)

    numbering: Dict[ResourceId, int] = {}
    for rid in nodes:
        numbering.setdefault(_find(rid), len(numbering))
    return {rid: numbering[_find(rid)] for rid in nodes}


def group_depth_index(
    resource_groups: Mapping[ResourceId, int],
    resource_depths: Mapping[ResourceId, int],
) -> Dict[int, Dict[int, List[ResourceId]]]:
    """``{group: {depth: [ids...]}}`` with groups, depths and ids sorted."""
    index: Dict[int, Dict[int, List[ResourceId]]] = {}
    for rid in sorted(resource_groups):
        depth = resource_depths.get(rid, 0)
        index.setdefault(resource_groups[rid], {}).setdefault(depth, []).append(rid)
    return {g: dict(sorted(index[g].items())) for g in sorted(index)}


__all__ = [
    "resolve_upstream",
    "merge_direct_dependency_maps",
    "find_endpoint_resources",
    "find_cycles",
    "ensure_acyclic",
    "in_degrees",
    "roots",
    "depths",
    "groups",
    "group_depth_index",
]
