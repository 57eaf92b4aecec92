"""Gasoline configuration system.

Usage:
    from gasoline.core.config import ConfigManager
    from gasoline.core.config.domains import ResourcesConfig

    manager = ConfigManager(repo_root=Path("/path/to/project"))
    config = manager.load_config()

    resources = ResourcesConfig(repo_root=Path("/path/to/project"))
    dirs = resources.container_dirs
"""
from __future__ import annotations

from .base import BaseDomainConfig
from .cache import clear_all_caches, get_cached_config, is_cached
from .domains import (
    GraphConfig,
    IdentityConfig,
    LoggingConfig,
    ResourcesConfig,
    ScanConfig,
    StateConfig,
)
from .manager import ConfigManager

__all__ = [
    "ConfigManager",
    "BaseDomainConfig",
    "get_cached_config",
    "clear_all_caches",
    "is_cached",
    "ResourcesConfig",
    "ScanConfig",
    "IdentityConfig",
    "GraphConfig",
    "StateConfig",
    "LoggingConfig",
]
