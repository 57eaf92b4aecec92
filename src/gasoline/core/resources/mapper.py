"""Turn package manifest dependencies into resource dependency edges.

A manifest dependency becomes an edge only when it names another scanned
resource's package. Everything else is an external library and ignored.
"""
from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Mapping, Sequence, Set

from gasoline.core.exceptions import DuplicateResourceIdError, DuplicateResourceNameError

from .models import (
    DirectDependencyMap,
    ManifestName,
    PackageManifest,
    ResourceDescriptor,
    ResourceId,
)

logger = logging.getLogger(__name__)


def internal_manifest_names(manifests: Iterable[PackageManifest]) -> Set[ManifestName]:
    """Package names belonging to scanned resources."""
    return {m.name for m in manifests}


def build_manifest_name_index(
    manifests: Sequence[PackageManifest],
    descriptors: Sequence[ResourceDescriptor],
) -> Dict[ManifestName, ResourceId]:
    """Pair manifest ``i`` with descriptor ``i`` into a name -> ID lookup.

    Raises:
        DuplicateResourceNameError: Two manifests share a package name.
        DuplicateResourceIdError: Two artifacts export the same resource ID.
        ValueError: The two sequences differ in length.
    """
    if len(manifests) != len(descriptors):
        raise ValueError(
            f"Expected one descriptor per manifest, got {len(descriptors)} "
            f"descriptors for {len(manifests)} manifests"
        )

    index: Dict[ManifestName, ResourceId] = {}
    name_paths: Dict[ManifestName, PackageManifest] = {}
    id_paths: Dict[ResourceId, PackageManifest] = {}
    for manifest, descriptor in zip(manifests, descriptors):
        if manifest.name in name_paths:
            raise DuplicateResourceNameError(
                manifest.name, [name_paths[manifest.name].path, manifest.path]
            )
        if descriptor.id in id_paths:
            raise DuplicateResourceIdError(
                descriptor.id, [id_paths[descriptor.id].path, manifest.path]
            )
        name_paths[manifest.name] = manifest
        id_paths[descriptor.id] = manifest
        index[manifest.name] = descriptor.id
    return index


def map_dependencies(
    manifests: Sequence[PackageManifest],
    resource_ids_by_manifest_name: Mapping[ManifestName, ResourceId],
    internal_names: Set[ManifestName] | frozenset[ManifestName],
) -> DirectDependencyMap:
    """Build the direct dependency map, one entry per indexed manifest.

    Dependencies are visited in declaration order and duplicate edges are
    collapsed. An internal package name with no resource ID yet is skipped
    (partial scans are expected during incremental work).

    A manifest whose own name is missing from ``resource_ids_by_manifest_name``
    has no key to file its edges under, so it is left out of the result and
    logged at DEBUG. Pass the index from :func:`build_manifest_name_index`,
    which pairs every scanned manifest, to get one entry per resource.
    """
    direct: DirectDependencyMap = {}
    for manifest in manifests:
        own_id = resource_ids_by_manifest_name.get(manifest.name)
        if own_id is None:
            logger.debug("manifest %s has no resource ID; skipping", manifest.name)
            continue

        edges: List[ResourceId] = []
        for dep_name in manifest.dependencies or {}:
            if dep_name not in internal_names:
                continue
            target = resource_ids_by_manifest_name.get(dep_name)
            if target is None:
                logger.debug(
                    "unresolved dependency %s -> %s (no resource ID yet)", manifest.name, dep_name
                )
                continue
            if target not in edges:
                edges.append(target)
        direct[own_id] = edges
    return direct


__all__ = ["internal_manifest_names", "build_manifest_name_index", "map_dependencies"]
