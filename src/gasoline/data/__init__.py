"""
Gasoline data resource helpers.

Provides utilities for accessing bundled configuration files, schemas and
the embedded Node.js export loader using importlib.resources.
"""

from __future__ import annotations

from importlib import resources
from pathlib import Path


def get_data_path(subpackage: str, filename: str = "") -> Path:
    """
    Get absolute path to a data file or directory.

    Args:
        subpackage: Name of the data subpackage (e.g., "config", "schemas")
        filename: Optional filename within the subpackage

    Returns:
        Absolute path to the file or directory

    Example:
        >>> get_data_path("embed", "extract_exports.mjs")
        PosixPath('/path/to/gasoline/data/embed/extract_exports.mjs')
    """
    pkg = resources.files("gasoline.data")
    base = Path(str(pkg / subpackage))
    return base / filename if filename else base


__all__ = ["get_data_path"]
