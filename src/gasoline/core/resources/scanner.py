"""Discover resource packages under the project's container directories.

Layout::

    <project>/<container_dir>/<resource_dir>/package.json
    <project>/<container_dir>/<resource_dir>/build/_group.entity.kind.index.js
"""
from __future__ import annotations

import concurrent.futures
import json
import logging
import re
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from gasoline.core.config.domains.resources import DEFAULT_ARTIFACT_PATTERN
from gasoline.core.exceptions import ManifestError, ScanError
from gasoline.core.utils.io import read_json

from .models import PackageManifest, ResourceLocation, ScannedResource

logger = logging.getLogger(__name__)


class ResourceScanner:
    """Locate every resource's manifest and built artifact, then read manifests."""

    def __init__(
        self,
        project_root: Path,
        *,
        container_dirs: Sequence[str] = ("gasoline",),
        manifest_filename: str = "package.json",
        artifact_dirs: Sequence[str] = ("build", "dist"),
        artifact_pattern: str = DEFAULT_ARTIFACT_PATTERN,
        max_workers: int = 8,
    ) -> None:
        self.project_root = Path(project_root)
        self.container_dirs = list(container_dirs)
        self.manifest_filename = manifest_filename
        self.artifact_dirs = list(artifact_dirs)
        self.artifact_re = re.compile(artifact_pattern)
        self.max_workers = max(1, int(max_workers))

    @classmethod
    def from_config(
        cls,
        project_root: Path,
        config: Dict[str, Any],
        *,
        container_dirs: Optional[Sequence[str]] = None,
    ) -> "ResourceScanner":
        from gasoline.core.config.domains import ResourcesConfig, ScanConfig

        resources = ResourcesConfig(project_root, config=config)
        scan = ScanConfig(project_root, config=config)
        return cls(
            project_root,
            container_dirs=list(container_dirs) if container_dirs else resources.container_dirs,
            manifest_filename=resources.manifest_filename,
            artifact_dirs=resources.artifact_dirs,
            artifact_pattern=resources.artifact_pattern,
            max_workers=scan.max_workers,
        )

    def resource_dirs(self) -> List[Path]:
        """Immediate subdirectories of each container dir, sorted per container.

        Raises:
            ScanError: A container directory does not exist.
        """
        found: List[Path] = []
        for container in self.container_dirs:
            container_path = self.project_root / container
            if not container_path.is_dir():
                raise ScanError(
                    f"Resource container directory not found: {container_path}",
                    directory=container_path,
                )
            children = sorted(
                p for p in container_path.iterdir() if p.is_dir() and not p.name.startswith(".")
            )
            logger.debug("container %s: %d resource dirs", container_path, len(children))
            found.extend(children)
        return found

    def _find_artifact(self, resource_dir: Path) -> Path:
        for name in self.artifact_dirs:
            artifact_dir = resource_dir / name
            if not artifact_dir.is_dir():
                continue
            matches = sorted(
                p for p in artifact_dir.iterdir() if p.is_file() and self.artifact_re.match(p.name)
            )
            if len(matches) == 1:
                return matches[0]
            if len(matches) > 1:
                listed = ", ".join(p.name for p in matches)
                raise ScanError(
                    f"Multiple built artifacts in {artifact_dir}: {listed}",
                    directory=resource_dir,
                    context={"artifacts": [str(p) for p in matches]},
                )
        searched = ", ".join(self.artifact_dirs)
        raise ScanError(
            f"No built artifact matching '{self.artifact_re.pattern}' in {resource_dir} "
            f"(searched: {searched})",
            directory=resource_dir,
        )

    def locate(self, resource_dir: Path) -> ResourceLocation:
        """Find the manifest and built artifact of one resource directory.

        Raises:
            ScanError: The manifest is missing, or zero or several artifacts match.
        """
        resource_dir = Path(resource_dir)
        manifest_path = resource_dir / self.manifest_filename
        if not manifest_path.is_file():
            raise ScanError(
                f"Missing {self.manifest_filename} in resource directory {resource_dir}",
                directory=resource_dir,
                path=manifest_path,
            )
        return ResourceLocation(
            directory=resource_dir,
            manifest_path=manifest_path,
            artifact_path=self._find_artifact(resource_dir),
        )

    def read_manifest(self, path: Path) -> PackageManifest:
        """Parse the package manifest.

        Raises:
            ManifestError: Unreadable file, invalid JSON, missing ``name`` or a
                non-object ``dependencies`` section.
        """
        path = Path(path)
        try:
            data = read_json(path)
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise ManifestError(
                f"Cannot read manifest {path}: {exc}", directory=path.parent, path=path
            ) from exc

        if not isinstance(data, dict):
            raise ManifestError(
                f"Manifest {path} must be a JSON object", directory=path.parent, path=path
            )
        name = data.get("name")
        if not isinstance(name, str) or not name.strip():
            raise ManifestError(
                f"Manifest {path} has no package name", directory=path.parent, path=path
            )
        dependencies = data.get("dependencies") or {}
        if not isinstance(dependencies, dict):
            raise ManifestError(
                f"Manifest {path} has a non-object 'dependencies' section",
                directory=path.parent,
                path=path,
            )
        return PackageManifest(
            name=name.strip(),
            path=path,
            dependencies={str(k): str(v) for k, v in dependencies.items()},
        )

    def _scan_one(self, resource_dir: Path) -> ScannedResource:
        try:
            location = self.locate(resource_dir)
        except OSError as exc:
            raise ScanError(
                f"Cannot read resource directory {resource_dir}: {exc}", directory=resource_dir
            ) from exc
        return ScannedResource(location=location, manifest=self.read_manifest(location.manifest_path))

    def scan(self) -> List[ScannedResource]:
        """Locate and read every resource concurrently.

        Any failure aborts the whole scan and pending reads are cancelled; of
        the failures observed, the earliest in directory order is raised.
        Results keep directory order.
        """
        dirs = self.resource_dirs()
        if not dirs:
            return []

        results: List[Optional[ScannedResource]] = [None] * len(dirs)
        errors: Dict[int, BaseException] = {}
        with concurrent.futures.ThreadPoolExecutor(
            max_workers=min(self.max_workers, len(dirs))
        ) as executor:
            futures = {executor.submit(self._scan_one, d): i for i, d in enumerate(dirs)}
            for future in concurrent.futures.as_completed(futures):
                i = futures[future]
                try:
                    results[i] = future.result()
                except ScanError as exc:
                    errors[i] = exc
                    for pending in futures:
                        pending.cancel()

        if errors:
            raise errors[min(errors)]
        scanned = [r for r in results if r is not None]
        logger.info("scanned %d resources", len(scanned))
        return scanned


__all__ = ["ResourceScanner"]
