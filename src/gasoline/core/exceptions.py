from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Iterable, Mapping


class GasolineError(Exception):
    """Base exception for Gasoline."""

    context: Dict[str, Any]

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        super().__init__(message)
        if context is not None:
            # Store a shallow copy to avoid accidental mutation.
            self.context = dict(context)
        else:
            self.context = {}

    def to_json_error(self) -> Dict[str, Any]:
        """Return a JSON-serializable error payload."""
        return {
            "message": str(self),
            "code": self.__class__.__name__,
            "context": self.context,
        }


class ConfigError(GasolineError, ValueError):
    """Raised when project configuration is invalid."""

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        GasolineError.__init__(self, message, context=context)
        ValueError.__init__(self, message)


class ProjectRootError(GasolineError, ValueError):
    """Raised when the project root cannot be resolved."""

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        GasolineError.__init__(self, message, context=context)
        ValueError.__init__(self, message)


class ScanError(GasolineError):
    """Raised when a resource directory is missing an expected file."""

    def __init__(
        self,
        message: str,
        *,
        directory: Path | str | None = None,
        path: Path | str | None = None,
        context: Mapping[str, Any] | None = None,
    ) -> None:
        ctx = dict(context or {})
        if directory is not None:
            ctx["directory"] = str(directory)
        if path is not None:
            ctx["path"] = str(path)
        super().__init__(message, context=ctx)


class ManifestError(ScanError):
    """Raised when a resource package manifest cannot be read or parsed."""


class IdentityExtractionError(GasolineError):
    """Raised when a built artifact cannot be loaded."""

    def __init__(
        self,
        message: str,
        *,
        artifact: Path | str | None = None,
        context: Mapping[str, Any] | None = None,
    ) -> None:
        ctx = dict(context or {})
        if artifact is not None:
            ctx["artifact"] = str(artifact)
        super().__init__(message, context=ctx)


class IdentityNotFoundError(IdentityExtractionError):
    """Raised when a built artifact exports nothing shaped like a resource ID."""


class InvalidResourceIdError(GasolineError, ValueError):
    """Raised when a resource ID has fewer than four segments."""

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        GasolineError.__init__(self, message, context=context)
        ValueError.__init__(self, message)


class DuplicateResourceNameError(GasolineError):
    """Raised when two scanned resources share a manifest package name."""

    def __init__(self, name: str, paths: Iterable[Path | str]) -> None:
        listed = [str(p) for p in paths]
        super().__init__(
            f"Duplicate resource name '{name}' declared by: {', '.join(listed)}",
            context={"name": name, "paths": listed},
        )
        self.name = name


class DuplicateResourceIdError(GasolineError):
    """Raised when two scanned resources export the same resource ID."""

    def __init__(self, resource_id: str, paths: Iterable[Path | str]) -> None:
        listed = [str(p) for p in paths]
        super().__init__(
            f"Duplicate resource ID '{resource_id}' exported by: {', '.join(listed)}",
            context={"resource_id": resource_id, "paths": listed},
        )
        self.resource_id = resource_id


class CycleDetectedError(GasolineError):
    """Raised when resource dependencies form at least one cycle."""

    def __init__(self, cycles: Iterable[Iterable[str]]) -> None:
        self.cycles = [list(c) for c in cycles]
        involved: list[str] = []
        for cycle in self.cycles:
            for rid in cycle:
                if rid not in involved:
                    involved.append(rid)
        self.involved_resources = involved
        rendered = "; ".join(" -> ".join(c + c[:1]) for c in self.cycles)
        super().__init__(
            f"Dependency cycle detected: {rendered}",
            context={"cycles": self.cycles, "involved_resources": involved},
        )


class StateError(GasolineError):
    """Raised when the deployment snapshot cannot be read or written."""

    def __init__(
        self,
        message: str,
        *,
        path: Path | str | None = None,
        context: Mapping[str, Any] | None = None,
    ) -> None:
        ctx = dict(context or {})
        if path is not None:
            ctx["path"] = str(path)
        super().__init__(message, context=ctx)


__all__ = [
    "GasolineError",
    "ConfigError",
    "ProjectRootError",
    "ScanError",
    "ManifestError",
    "IdentityExtractionError",
    "IdentityNotFoundError",
    "InvalidResourceIdError",
    "DuplicateResourceNameError",
    "DuplicateResourceIdError",
    "CycleDetectedError",
    "StateError",
]
