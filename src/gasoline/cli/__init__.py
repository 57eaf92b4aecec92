"""
Gasoline CLI package.

Provides the ``gas`` command-line interface with auto-discovery of commands
from subfolders (resources/, state/, config/).

Framework utilities for building CLI commands:
- _output: Output formatting (JSON/text modes)
- _args: Common argument registration helpers
- _utils: Shared CLI utilities
"""
from ._output import OutputFormatter
from ._args import (
    add_container_dir_flag,
    add_dry_run_flag,
    add_json_flag,
    add_repo_root_flag,
    add_standard_flags,
    add_state_file_flag,
    add_verbose_flag,
)
from ._utils import get_repo_root, get_state_file, load_command_context

__all__ = [
    # Output formatting
    "OutputFormatter",
    # Argument helpers
    "add_json_flag",
    "add_repo_root_flag",
    "add_container_dir_flag",
    "add_state_file_flag",
    "add_dry_run_flag",
    "add_verbose_flag",
    "add_standard_flags",
    # Utilities
    "get_repo_root",
    "get_state_file",
    "load_command_context",
]
