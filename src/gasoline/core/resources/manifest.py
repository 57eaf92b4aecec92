"""The project-wide resource manifest.

The manifest is flat (``ResourceId -> ManifestEntry``). The hierarchical
``entityGroup -> entity -> resourceKind -> {id: entry}`` shape only exists
as an export projection via :meth:`ResourceManifest.to_nested`. The flat
``to_dict`` form is also the persisted snapshot format.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Mapping, Optional, Sequence

from .models import DirectDependencyMap, ResourceDescriptor, ResourceId, parse_resource_id


@dataclass(frozen=True)
class ManifestEntry:
    kind: str
    name: str
    config: Mapping[str, Any] = field(default_factory=dict)
    dependencies: tuple[ResourceId, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": self.kind,
            "name": self.name,
            "config": dict(self.config),
            "dependencies": list(self.dependencies),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ManifestEntry":
        return cls(
            kind=str(data.get("kind") or ""),
            name=str(data.get("name") or ""),
            config=dict(data.get("config") or {}),
            dependencies=tuple(str(d) for d in data.get("dependencies") or ()),
        )


@dataclass(frozen=True)
class ResourceManifest:
    entries: Mapping[ResourceId, ManifestEntry] = field(default_factory=dict)

    @classmethod
    def from_descriptors(
        cls,
        descriptors: Sequence[ResourceDescriptor],
        direct: Mapping[ResourceId, Sequence[ResourceId]],
    ) -> "ResourceManifest":
        entries = {
            d.id: ManifestEntry(
                kind=d.kind,
                name=d.name,
                config=dict(d.raw_config),
                dependencies=tuple(direct.get(d.id, ())),
            )
            for d in descriptors
        }
        return cls(entries=dict(sorted(entries.items())))

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ResourceManifest":
        return cls(entries={str(rid): ManifestEntry.from_dict(e) for rid, e in data.items()})

    def __contains__(self, resource_id: object) -> bool:
        return resource_id in self.entries

    def __iter__(self) -> Iterator[ResourceId]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    def get(self, resource_id: ResourceId) -> Optional[ManifestEntry]:
        return self.entries.get(resource_id)

    def ids(self) -> List[ResourceId]:
        return list(self.entries)

    def direct_dependencies(self) -> DirectDependencyMap:
        return {rid: list(e.dependencies) for rid, e in self.entries.items()}

    def to_dict(self) -> dict[str, Any]:
        return {rid: e.to_dict() for rid, e in sorted(self.entries.items())}

    def to_nested(self) -> Dict[str, Dict[str, Dict[str, Dict[ResourceId, Any]]]]:
        """``{entityGroup: {entity: {resourceKind: {id: entry}}}}``."""
        nested: Dict[str, Dict[str, Dict[str, Dict[ResourceId, Any]]]] = {}
        for rid in sorted(self.entries):
            parts = parse_resource_id(rid)
            (
                nested.setdefault(parts.entity_group, {})
                .setdefault(parts.entity, {})
                .setdefault(parts.kind, {})
            )[rid] = self.entries[rid].to_dict()
        return nested


__all__ = ["ManifestEntry", "ResourceManifest"]
