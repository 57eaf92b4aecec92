"""Domain-specific configuration accessors."""
from __future__ import annotations

from .graph import GraphConfig
from .logging import LoggingConfig
from .resources import IdentityConfig, ResourcesConfig, ScanConfig
from .state import StateConfig

__all__ = [
    "ResourcesConfig",
    "ScanConfig",
    "IdentityConfig",
    "GraphConfig",
    "StateConfig",
    "LoggingConfig",
]
