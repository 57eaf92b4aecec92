"""Domain-specific configuration for dependency graph checks."""
from __future__ import annotations

from functools import cached_property

from ..base import BaseDomainConfig

ON_CYCLE_MODES = ("error", "warn")


class GraphConfig(BaseDomainConfig):
    def _config_section(self) -> str:
        return "graph"

    @cached_property
    def on_cycle(self) -> str:
        """``error`` raises CycleDetectedError; ``warn`` logs and continues."""
        mode = str(self.section.get("on_cycle") or "error").strip().lower()
        return mode if mode in ON_CYCLE_MODES else "error"


__all__ = ["GraphConfig", "ON_CYCLE_MODES"]
