"""Extract resource identities from built entry-point artifacts.

An artifact is loaded into a mapping of ``{export name: value}``; the first
export that is a mapping with an ID-shaped ``id`` string becomes the
resource's :class:`ResourceDescriptor`.

Two loaders are provided:

- :class:`NodeExportLoader` imports ES/CommonJS bundles with ``node``. One
  process handles a whole batch and imports every artifact concurrently.
- :class:`JsonExportLoader` reads ``.json`` build outputs directly.
"""
from __future__ import annotations

import json
import logging
import subprocess
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional, Protocol, Sequence, Tuple

from gasoline.core.exceptions import IdentityExtractionError, IdentityNotFoundError
from gasoline.core.utils.io import read_json
from gasoline.core.utils.subprocess import run_with_timeout
from gasoline.data import get_data_path

from .models import ResourceDescriptor, looks_like_resource_id, parse_resource_id

logger = logging.getLogger(__name__)

ExportMap = Mapping[str, Any]


class ExportLoader(Protocol):
    def supports(self, path: Path) -> bool: ...

    def load(self, paths: Sequence[Path]) -> Dict[Path, ExportMap]: ...


class JsonExportLoader:
    """Loads ``.json`` artifacts whose top-level object maps export names to values."""

    suffixes = (".json",)

    def supports(self, path: Path) -> bool:
        return Path(path).suffix in self.suffixes

    def load(self, paths: Sequence[Path]) -> Dict[Path, ExportMap]:
        loaded: Dict[Path, ExportMap] = {}
        for path in paths:
            try:
                data = read_json(path)
            except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
                raise IdentityExtractionError(
                    f"Cannot load artifact {path}: {exc}", artifact=path
                ) from exc
            if not isinstance(data, dict):
                raise IdentityExtractionError(
                    f"Artifact {path} must contain a JSON object of exports", artifact=path
                )
            loaded[Path(path)] = data
        return loaded


class NodeExportLoader:
    """Imports JavaScript artifacts with Node.js and reads their exports as JSON."""

    suffixes = (".js", ".mjs", ".cjs")

    def __init__(self, node_binary: str = "node", timeout_seconds: float = 30.0) -> None:
        self.node_binary = node_binary
        self.timeout_seconds = timeout_seconds
        self.script_path = get_data_path("embed", "extract_exports.mjs")

    def supports(self, path: Path) -> bool:
        return Path(path).suffix in self.suffixes

    def _parse_failure(self, stderr: str) -> Tuple[str, Optional[str]]:
        try:
            payload = json.loads(stderr)
        except json.JSONDecodeError:
            return stderr.strip() or "node exited with an error", None
        if not isinstance(payload, dict):
            return stderr.strip(), None
        return str(payload.get("error") or "import failed"), payload.get("artifact")

    def load(self, paths: Sequence[Path]) -> Dict[Path, ExportMap]:
        if not paths:
            return {}
        resolved = [Path(p).resolve() for p in paths]
        cmd = [self.node_binary, str(self.script_path), *[str(p) for p in resolved]]
        try:
            proc = run_with_timeout(
                cmd,
                timeout=self.timeout_seconds,
                capture_output=True,
                text=True,
                check=False,
            )
        except FileNotFoundError as exc:
            raise IdentityExtractionError(
                f"Node.js executable not found: {self.node_binary}",
                context={"node_binary": self.node_binary},
            ) from exc
        except subprocess.TimeoutExpired as exc:
            raise IdentityExtractionError(
                f"Loading {len(resolved)} artifact(s) timed out after {self.timeout_seconds}s",
                context={"artifacts": [str(p) for p in resolved]},
            ) from exc

        if proc.returncode != 0:
            message, artifact = self._parse_failure(proc.stderr or "")
            target = f"artifact {artifact}" if artifact else "artifacts"
            raise IdentityExtractionError(
                f"Cannot load {target}: {message}",
                artifact=artifact,
                context={"returncode": proc.returncode},
            )

        try:
            payload = json.loads(proc.stdout or "")
        except json.JSONDecodeError as exc:
            raise IdentityExtractionError(
                f"Invalid export listing from node: {exc}",
                context={"artifacts": [str(p) for p in resolved]},
            ) from exc
        if not isinstance(payload, dict):
            raise IdentityExtractionError("Invalid export listing from node: expected an object")

        loaded: Dict[Path, ExportMap] = {}
        for original, path in zip(paths, resolved):
            exports = payload.get(str(path))
            if not isinstance(exports, dict):
                raise IdentityExtractionError(
                    f"No exports reported for artifact {path}", artifact=path
                )
            loaded[Path(original)] = exports
        return loaded


def find_identity_export(exports: ExportMap) -> Optional[Tuple[str, Mapping[str, Any]]]:
    """Return ``(export name, value)`` of the first ID-shaped export, if any."""
    for export_name, value in exports.items():
        if isinstance(value, Mapping) and looks_like_resource_id(value.get("id")):
            return export_name, value
    return None


def descriptor_from_export(export_name: str, value: Mapping[str, Any]) -> ResourceDescriptor:
    resource_id = str(value["id"])
    parts = parse_resource_id(resource_id)
    name = value.get("name")
    return ResourceDescriptor(
        id=resource_id,
        kind=parts.kind,
        name=name if isinstance(name, str) and name else export_name,
        raw_config=dict(value),
    )


class IdentityExtractor:
    """Turn artifact paths into resource descriptors using the first loader that fits."""

    def __init__(self, loaders: Optional[Iterable[ExportLoader]] = None) -> None:
        self.loaders: List[ExportLoader] = (
            list(loaders) if loaders is not None else [JsonExportLoader(), NodeExportLoader()]
        )

    @classmethod
    def from_config(cls, project_root: Path, config: Dict[str, Any]) -> "IdentityExtractor":
        from gasoline.core.config.domains import IdentityConfig

        identity = IdentityConfig(project_root, config=config)
        return cls(
            [
                JsonExportLoader(),
                NodeExportLoader(identity.node_binary, identity.timeout_seconds),
            ]
        )

    def _loader_for(self, path: Path) -> ExportLoader:
        for loader in self.loaders:
            if loader.supports(path):
                return loader
        raise IdentityExtractionError(
            f"No loader for artifact type '{Path(path).suffix}': {path}", artifact=path
        )

    def _describe(self, path: Path, exports: ExportMap) -> ResourceDescriptor:
        found = find_identity_export(exports)
        if found is None:
            raise IdentityNotFoundError(
                f"No export with a resource ID (entityGroup:entity:kind:suffix) in {path}",
                artifact=path,
                context={"exports": list(exports)},
            )
        return descriptor_from_export(*found)

    def extract(self, path: Path) -> ResourceDescriptor:
        return self.extract_all([path])[0]

    def extract_all(self, paths: Sequence[Path]) -> List[ResourceDescriptor]:
        """Load every artifact (batched per loader) and describe each, in input order.

        Raises:
            IdentityExtractionError: A loader failed.
            IdentityNotFoundError: The first artifact (in input order) with no
                ID-shaped export.
        """
        batches: Dict[int, List[Path]] = {}
        for path in paths:
            loader = self._loader_for(path)
            batches.setdefault(id(loader), []).append(Path(path))

        exports_by_path: Dict[Path, ExportMap] = {}
        for loader in self.loaders:
            batch = batches.get(id(loader))
            if batch:
                logger.debug("%s: loading %d artifact(s)", type(loader).__name__, len(batch))
                exports_by_path.update(loader.load(batch))

        return [self._describe(Path(p), exports_by_path[Path(p)]) for p in paths]


__all__ = [
    "ExportLoader",
    "JsonExportLoader",
    "NodeExportLoader",
    "IdentityExtractor",
    "find_identity_export",
    "descriptor_from_export",
]
