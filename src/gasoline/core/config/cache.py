"""Centralized configuration caching.

Domain configs share one loaded configuration per project root. The cache
key fingerprints ``GASOLINE_*`` environment variables and the project config
file's mtime so that edits within a long-running process are picked up.
"""
from __future__ import annotations

import hashlib
import os
from pathlib import Path
from typing import Any, Dict, Optional

from gasoline.core.utils.paths import find_project_config_file, resolve_project_root

_config_cache: Dict[str, Dict[str, Any]] = {}


def _normalize_repo_root(repo_root: Optional[Path]) -> Path:
    if repo_root is None:
        return resolve_project_root()
    return Path(repo_root).expanduser().resolve()


def _cache_key(root: Path) -> str:
    env_items = sorted(
        (k, os.environ.get(k, "")) for k in os.environ.keys() if k.startswith("GASOLINE_")
    )
    env_fp = hashlib.sha256(repr(env_items).encode("utf-8")).hexdigest()[:12]

    project_file = find_project_config_file(root)
    file_fp = ""
    if project_file is not None:
        st = project_file.stat()
        file_fp = f"{project_file.name}:{st.st_mtime_ns}:{st.st_size}"
    return f"{root}|{env_fp}|{file_fp}"


def get_cached_config(repo_root: Optional[Path] = None) -> Dict[str, Any]:
    """Return the validated configuration for ``repo_root`` (cached).

    The returned dict is shared; treat it as read-only.
    """
    from .manager import ConfigManager

    root = _normalize_repo_root(repo_root)
    key = _cache_key(root)
    cached = _config_cache.get(key)
    if cached is None:
        cached = ConfigManager(repo_root=root).load_config(validate=True)
        _config_cache[key] = cached
    return cached


def is_cached(repo_root: Optional[Path] = None) -> bool:
    return _cache_key(_normalize_repo_root(repo_root)) in _config_cache


def clear_all_caches() -> None:
    _config_cache.clear()


__all__ = ["get_cached_config", "is_cached", "clear_all_caches"]
