"""Domain-specific configuration for the persisted deployment snapshot."""
from __future__ import annotations

from functools import cached_property
from pathlib import Path

from ..base import BaseDomainConfig


class StateConfig(BaseDomainConfig):
    def _config_section(self) -> str:
        return "state"

    @cached_property
    def file(self) -> str:
        return str(self.section.get("file") or "gas.up.json")

    @cached_property
    def snapshot_path(self) -> Path:
        """Snapshot path, resolved against the project root when relative."""
        path = Path(self.file).expanduser()
        return path if path.is_absolute() else self.repo_root / path


__all__ = ["StateConfig"]
