"""Shared utilities for Gasoline core modules."""
