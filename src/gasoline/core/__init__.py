"""Core (non-CLI) building blocks for Gasoline."""
