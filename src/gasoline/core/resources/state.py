"""Compare the current scan with the last deployed snapshot."""
from __future__ import annotations

import json
import logging
from enum import Enum
from pathlib import Path
from typing import Dict, List, Mapping

from gasoline.core.exceptions import StateError
from gasoline.core.schemas.validation import SchemaValidationError, validate_payload
from gasoline.core.utils.io import read_json, write_json_atomic

from .manifest import ManifestEntry, ResourceManifest
from .models import ResourceId

logger = logging.getLogger(__name__)

SNAPSHOT_SCHEMA = "snapshot.schema.yaml"


class ResourceState(str, Enum):
    CREATED = "CREATED"
    DELETED = "DELETED"
    UNCHANGED = "UNCHANGED"
    UPDATED = "UPDATED"


CHANGED_STATES = frozenset({ResourceState.CREATED, ResourceState.DELETED, ResourceState.UPDATED})


def _same(prev: ManifestEntry, curr: ManifestEntry) -> bool:
    return (
        prev.kind == curr.kind
        and dict(prev.config) == dict(curr.config)
        and set(prev.dependencies) == set(curr.dependencies)
    )


def diff_states(
    previous: ResourceManifest, current: ResourceManifest
) -> Dict[ResourceId, ResourceState]:
    """State of every resource in either manifest, keyed in sorted ID order."""
    states: Dict[ResourceId, ResourceState] = {}
    for rid in sorted(set(previous.entries) | set(current.entries)):
        prev = previous.get(rid)
        curr = current.get(rid)
        if curr is None:
            states[rid] = ResourceState.DELETED
        elif prev is None:
            states[rid] = ResourceState.CREATED
        elif _same(prev, curr):
            states[rid] = ResourceState.UNCHANGED
        else:
            states[rid] = ResourceState.UPDATED
    return states


def ids_by_state(states: Mapping[ResourceId, ResourceState]) -> Dict[ResourceState, List[ResourceId]]:
    grouped: Dict[ResourceState, List[ResourceId]] = {s: [] for s in ResourceState}
    for rid in sorted(states):
        grouped[states[rid]].append(rid)
    return grouped


def has_changes(states: Mapping[ResourceId, ResourceState]) -> bool:
    return any(s in CHANGED_STATES for s in states.values())


def load_snapshot(path: Path) -> ResourceManifest:
    """Read a snapshot; a missing file is an empty (never deployed) manifest.

    Raises:
        StateError: The file is unreadable, not JSON or fails schema validation.
    """
    path = Path(path)
    if not path.exists():
        logger.debug("no snapshot at %s; treating as empty", path)
        return ResourceManifest()
    try:
        data = read_json(path)
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise StateError(f"Cannot read snapshot {path}: {exc}", path=path) from exc
    try:
        validate_payload(data, SNAPSHOT_SCHEMA)
    except SchemaValidationError as exc:
        raise StateError(
            f"Invalid snapshot {path}: {'; '.join(exc.errors)}",
            path=path,
            context={"errors": exc.errors},
        ) from exc
    return ResourceManifest.from_dict(data)


def save_snapshot(path: Path, manifest: ResourceManifest) -> Path:
    path = Path(path)
    try:
        write_json_atomic(path, manifest.to_dict())
    except OSError as exc:
        raise StateError(f"Cannot write snapshot {path}: {exc}", path=path) from exc
    logger.info("saved snapshot of %d resources to %s", len(manifest), path)
    return path


__all__ = [
    "ResourceState",
    "CHANGED_STATES",
    "diff_states",
    "ids_by_state",
    "has_changes",
    "load_snapshot",
    "save_snapshot",
]
