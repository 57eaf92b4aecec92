"""End-to-end resource graph construction: scan, extract, map, resolve."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from gasoline.core.exceptions import CycleDetectedError

from .graph import find_cycles, find_endpoint_resources, resolve_upstream
from .identity import IdentityExtractor
from .manifest import ResourceManifest
from .mapper import build_manifest_name_index, internal_manifest_names, map_dependencies
from .models import (
    DirectDependencyMap,
    ResourceDescriptor,
    ResourceId,
    ScannedResource,
    UpstreamDependencyMap,
)
from .scanner import ResourceScanner

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResourceGraph:
    project_root: Path
    resources: tuple[ScannedResource, ...]
    descriptors: tuple[ResourceDescriptor, ...]
    direct: DirectDependencyMap
    upstream: UpstreamDependencyMap
    endpoints: tuple[ResourceId, ...]
    cycles: tuple[tuple[ResourceId, ...], ...]

    @property
    def descriptors_by_id(self) -> Dict[ResourceId, ResourceDescriptor]:
        return {d.id: d for d in self.descriptors}

    def manifest(self) -> ResourceManifest:
        return ResourceManifest.from_descriptors(self.descriptors, self.direct)

    def records(self) -> List[Dict[str, Any]]:
        """One summary row per resource, in scan order."""
        rows: List[Dict[str, Any]] = []
        for scanned, descriptor in zip(self.resources, self.descriptors):
            directory = scanned.directory
            try:
                directory = directory.relative_to(self.project_root)
            except ValueError:
                pass
            rows.append(
                {
                    "id": descriptor.id,
                    "kind": descriptor.kind,
                    "name": descriptor.name,
                    "package": scanned.manifest.name,
                    "directory": str(directory),
                }
            )
        return rows

    def to_dict(self) -> Dict[str, Any]:
        return {
            "resources": self.records(),
            "direct": {rid: list(deps) for rid, deps in self.direct.items()},
            "upstream": {rid: list(deps) for rid, deps in self.upstream.items()},
            "endpoints": list(self.endpoints),
            "cycles": [list(c) for c in self.cycles],
        }


def build_resource_graph(
    project_root: Path,
    *,
    config: Optional[Dict[str, Any]] = None,
    on_cycle: Optional[str] = None,
    container_dirs: Optional[Sequence[str]] = None,
    extractor: Optional[IdentityExtractor] = None,
) -> ResourceGraph:
    """Scan the project and resolve its dependency graph.

    Any scan or extraction failure aborts before resolution, so a partial
    graph is never returned.

    Args:
        project_root: Project root directory.
        config: Loaded configuration; loaded via ``ConfigManager`` when omitted.
        on_cycle: ``"error"`` raises :class:`CycleDetectedError`, ``"warn"``
            logs and keeps the cycles on the result. Defaults to ``graph.on_cycle``.
        container_dirs: Overrides ``resources.container_dirs``.
        extractor: Overrides the configured identity extractor.
    """
    from gasoline.core.config import ConfigManager, GraphConfig

    root = Path(project_root)
    cfg = config if config is not None else ConfigManager(repo_root=root).load_config()
    mode = (on_cycle or GraphConfig(root, config=cfg).on_cycle).lower()
    if mode not in ("error", "warn"):
        raise ValueError(f"on_cycle must be 'error' or 'warn', got {on_cycle!r}")

    scanned = ResourceScanner.from_config(root, cfg, container_dirs=container_dirs).scan()
    extractor = extractor or IdentityExtractor.from_config(root, cfg)
    descriptors = extractor.extract_all([s.artifact_path for s in scanned])

    manifests = [s.manifest for s in scanned]
    name_index = build_manifest_name_index(manifests, descriptors)
    direct = map_dependencies(manifests, name_index, internal_manifest_names(manifests))
    upstream = resolve_upstream(direct)

    cycles = find_cycles(direct)
    if cycles:
        if mode == "error":
            raise CycleDetectedError(cycles)
        logger.warning(
            "dependency cycle(s) detected: %s",
            "; ".join(" -> ".join(c + c[:1]) for c in cycles),
        )

    graph = ResourceGraph(
        project_root=root,
        resources=tuple(scanned),
        descriptors=tuple(descriptors),
        direct=direct,
        upstream=upstream,
        endpoints=tuple(find_endpoint_resources(upstream)),
        cycles=tuple(tuple(c) for c in cycles),
    )
    logger.info(
        "resolved %d resources (%d endpoints)", len(graph.descriptors), len(graph.endpoints)
    )
    return graph


__all__ = ["ResourceGraph", "build_resource_graph"]
