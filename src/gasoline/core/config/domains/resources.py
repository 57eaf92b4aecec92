"""Domain-specific configuration for resource discovery.

Covers three sections that together drive a scan:
- ``resources``: where resource packages live and what their files look like
- ``scan``: manifest-read concurrency
- ``identity``: how built artifacts are loaded
"""
from __future__ import annotations

from functools import cached_property
from typing import List

from ..base import BaseDomainConfig

DEFAULT_ARTIFACT_PATTERN = r"^[^.]+\.[^.]+\.[^.]+\.[^.]+\.(js|mjs|cjs|json)$"


class ResourcesConfig(BaseDomainConfig):
    def _config_section(self) -> str:
        return "resources"

    @cached_property
    def container_dirs(self) -> List[str]:
        dirs = self.section.get("container_dirs") or ["gasoline"]
        return [str(d) for d in dirs]

    @cached_property
    def manifest_filename(self) -> str:
        return str(self.section.get("manifest_filename") or "package.json")

    @cached_property
    def artifact_dirs(self) -> List[str]:
        dirs = self.section.get("artifact_dirs") or ["build", "dist"]
        return [str(d) for d in dirs]

    @cached_property
    def artifact_pattern(self) -> str:
        return str(self.section.get("artifact_pattern") or DEFAULT_ARTIFACT_PATTERN)


class ScanConfig(BaseDomainConfig):
    def _config_section(self) -> str:
        return "scan"

    @cached_property
    def max_workers(self) -> int:
        return int(self.section.get("max_workers", 8))


class IdentityConfig(BaseDomainConfig):
    def _config_section(self) -> str:
        return "identity"

    @cached_property
    def node_binary(self) -> str:
        return str(self.section.get("node_binary") or "node")

    @cached_property
    def timeout_seconds(self) -> float:
        """Upper bound for one batched Node.js import run."""
        return float(self.section.get("timeout_seconds", 30))


__all__ = ["ResourcesConfig", "ScanConfig", "IdentityConfig", "DEFAULT_ARTIFACT_PATTERN"]
