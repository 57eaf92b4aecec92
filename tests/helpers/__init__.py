"""Test helper modules for the Gasoline test suite.

- resource_project: writes fake resource packages (manifest + built artifact)
"""
from __future__ import annotations
