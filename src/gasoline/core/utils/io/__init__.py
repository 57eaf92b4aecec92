"""I/O utilities for Gasoline.

This package provides safe, atomic file operations:
- Core: atomic writes, directory management
- JSON: read/write with locking
- YAML: locked reads, string dumps
"""
from __future__ import annotations

from .core import (
    atomic_write,
    ensure_directory,
    ensure_parent_dir,
)
from .json import (
    read_json,
    write_json_atomic,
)
from .yaml import (
    dump_yaml_string,
    iter_yaml_files,
    read_yaml,
)

__all__ = [
    # core
    "ensure_parent_dir",
    "ensure_directory",
    "atomic_write",
    # json
    "read_json",
    "write_json_atomic",
    # yaml
    "read_yaml",
    "dump_yaml_string",
    "iter_yaml_files",
]
