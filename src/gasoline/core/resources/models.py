"""Value types shared across resource discovery and graph resolution."""
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping

from gasoline.core.exceptions import InvalidResourceIdError

ResourceId = str
ManifestName = str
DirectDependencyMap = Dict[ResourceId, List[ResourceId]]
UpstreamDependencyMap = Dict[ResourceId, List[ResourceId]]

ID_SEPARATOR = ":"
MIN_ID_SEGMENTS = 4


@dataclass(frozen=True)
class ResourceIdParts:
    entity_group: str
    entity: str
    kind: str
    suffix: str
    extra: tuple[str, ...] = ()


def looks_like_resource_id(value: Any) -> bool:
    """Loose check used on artifact exports: a string with at least three colons."""
    return isinstance(value, str) and value.count(ID_SEPARATOR) >= MIN_ID_SEGMENTS - 1


def parse_resource_id(resource_id: str) -> ResourceIdParts:
    """Split ``entityGroup:entity:resourceKind:uniqueSuffix[:...]``.

    Raises:
        InvalidResourceIdError: Fewer than four segments or an empty entity group.
    """
    if not isinstance(resource_id, str):
        raise InvalidResourceIdError(
            f"Resource ID must be a string, got {type(resource_id).__name__}",
            context={"resource_id": repr(resource_id)},
        )
    segments = resource_id.split(ID_SEPARATOR)
    if len(segments) < MIN_ID_SEGMENTS or not segments[0]:
        raise InvalidResourceIdError(
            f"Invalid resource ID '{resource_id}': expected at least "
            f"{MIN_ID_SEGMENTS} colon-delimited segments",
            context={"resource_id": resource_id},
        )
    return ResourceIdParts(
        entity_group=segments[0],
        entity=segments[1],
        kind=segments[2],
        suffix=segments[3],
        extra=tuple(segments[4:]),
    )


@dataclass(frozen=True)
class ResourceDescriptor:
    id: ResourceId
    kind: str
    name: str
    raw_config: Mapping[str, Any] = field(default_factory=dict, compare=False, hash=False)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "kind": self.kind,
            "name": self.name,
            "config": dict(self.raw_config),
        }


@dataclass(frozen=True)
class PackageManifest:
    """The parts of a resource's ``package.json`` used for dependency mapping."""

    name: ManifestName
    path: Path
    dependencies: Mapping[str, str] = field(default_factory=dict, compare=False, hash=False)


@dataclass(frozen=True)
class ResourceLocation:
    directory: Path
    manifest_path: Path
    artifact_path: Path


@dataclass(frozen=True)
class ScannedResource:
    location: ResourceLocation
    manifest: PackageManifest

    @property
    def directory(self) -> Path:
        return self.location.directory

    @property
    def artifact_path(self) -> Path:
        return self.location.artifact_path


__all__ = [
    "ResourceId",
    "ManifestName",
    "DirectDependencyMap",
    "UpstreamDependencyMap",
    "ResourceIdParts",
    "looks_like_resource_id",
    "parse_resource_id",
    "ResourceDescriptor",
    "PackageManifest",
    "ResourceLocation",
    "ScannedResource",
]
