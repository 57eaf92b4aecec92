"""
Gasoline - resource graph tooling for serverless monorepos

Gasoline discovers the resources of a project, resolves the dependency
graph between them and computes the order in which they must be deployed.
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
