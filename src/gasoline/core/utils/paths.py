"""Project root resolution.

Resolution priority:
1. ``GASOLINE_PROJECT_ROOT`` environment variable
2. Nearest ancestor of the working directory holding a ``gasoline.config``
   file (``.yaml`` or ``.yml``)
3. Nearest ancestor holding a ``.git`` directory
4. The working directory itself
"""
from __future__ import annotations

import os
from pathlib import Path
from typing import Optional

from gasoline.core.exceptions import ProjectRootError

PROJECT_ROOT_ENV = "GASOLINE_PROJECT_ROOT"
CONFIG_FILENAMES = ("gasoline.config.yaml", "gasoline.config.yml")


def find_project_config_file(root: Path) -> Optional[Path]:
    """Return the project config file in ``root`` (``.yaml`` preferred)."""
    for name in CONFIG_FILENAMES:
        candidate = Path(root) / name
        if candidate.is_file():
            return candidate
    return None


def resolve_project_root(start: Optional[Path] = None) -> Path:
    """Resolve the project root directory.

    Raises:
        ProjectRootError: If ``GASOLINE_PROJECT_ROOT`` points at a missing path.
    """
    env_root = os.environ.get(PROJECT_ROOT_ENV)
    if env_root:
        path = Path(env_root).expanduser().resolve()
        if not path.is_dir():
            raise ProjectRootError(
                f"{PROJECT_ROOT_ENV} points at missing directory: {path}",
                context={"path": str(path)},
            )
        return path

    cwd = Path(start or Path.cwd()).resolve()
    candidates = [cwd, *cwd.parents]
    for candidate in candidates:
        if find_project_config_file(candidate) is not None:
            return candidate
    for candidate in candidates:
        if (candidate / ".git").exists():
            return candidate
    return cwd


__all__ = [
    "PROJECT_ROOT_ENV",
    "CONFIG_FILENAMES",
    "find_project_config_file",
    "resolve_project_root",
]
