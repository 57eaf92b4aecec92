"""Resource discovery and dependency graph resolution.

Data flows scanner -> identity -> mapper -> graph; :func:`build_resource_graph`
runs the whole pipeline. :mod:`.state` and :mod:`.planning` compare a scan
with the last deployed snapshot.
"""
from __future__ import annotations

from .graph import (
    depths,
    ensure_acyclic,
    find_cycles,
    find_endpoint_resources,
    group_depth_index,
    groups,
    in_degrees,
    merge_direct_dependency_maps,
    resolve_upstream,
    roots,
)
from .identity import IdentityExtractor, JsonExportLoader, NodeExportLoader, find_identity_export
from .manifest import ManifestEntry, ResourceManifest
from .mapper import build_manifest_name_index, internal_manifest_names, map_dependencies
from .models import (
    PackageManifest,
    ResourceDescriptor,
    ResourceIdParts,
    ScannedResource,
    parse_resource_id,
)
from .planning import DeployPlan, DeployPlanner, DeployWave
from .resolution import ResourceGraph, build_resource_graph
from .scanner import ResourceScanner
from .state import (
    ResourceState,
    diff_states,
    has_changes,
    ids_by_state,
    load_snapshot,
    save_snapshot,
)

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
    "IdentityExtractor",
    "JsonExportLoader",
    "NodeExportLoader",
    "find_identity_export",
    "ManifestEntry",
    "ResourceManifest",
    "build_manifest_name_index",
    "internal_manifest_names",
    "map_dependencies",
    "PackageManifest",
    "ResourceDescriptor",
    "ResourceIdParts",
    "ScannedResource",
    "parse_resource_id",
    "DeployPlan",
    "DeployPlanner",
    "DeployWave",
    "ResourceGraph",
    "build_resource_graph",
    "ResourceScanner",
    "ResourceState",
    "diff_states",
    "has_changes",
    "ids_by_state",
    "load_snapshot",
    "save_snapshot",
]
