"""
Gasoline configuration management (YAML-only).
"""
from __future__ import annotations

import json
import logging
import os
import re
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Tuple, Union

import yaml

from gasoline.core.exceptions import ConfigError
from gasoline.core.schemas.validation import SchemaValidationError, validate_payload
from gasoline.core.utils.io import iter_yaml_files, read_yaml
from gasoline.core.utils.merge import deep_merge as _deep_merge
from gasoline.core.utils.paths import find_project_config_file, resolve_project_root
from gasoline.data import get_data_path

logger = logging.getLogger(__name__)

ENV_PREFIX = "GASOLINE_"
# Not a config override even though it shares the prefix.
_RESERVED_ENV_KEYS = frozenset({"GASOLINE_PROJECT_ROOT"})


class ConfigManager:
    """Load, merge, and validate Gasoline configuration.

    Configuration sources (highest to lowest priority):
    1. Environment variables: GASOLINE_<section>__<key>
    2. Project config: <project-root>/gasoline.config.yaml (or .yml)
    3. Bundled defaults: gasoline.data/config/*.yaml (alphabetical order)
    """

    def __init__(self, repo_root: Optional[Path] = None) -> None:
        self.repo_root = Path(repo_root) if repo_root else resolve_project_root()
        self.core_config_dir = get_data_path("config")

    @property
    def project_config_file(self) -> Optional[Path]:
        return find_project_config_file(self.repo_root)

    def deep_merge(self, base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
        """Recursively merge dictionaries. Delegates to shared implementation."""
        return _deep_merge(base, override)

    def load_yaml(self, path: Path) -> Dict[str, Any]:
        try:
            data = read_yaml(path, default={}, raise_on_error=True)
        except (OSError, yaml.YAMLError) as exc:
            raise ConfigError(
                f"Invalid YAML in {path}: {exc}", context={"path": str(path)}
            ) from exc
        if not isinstance(data, dict):
            raise ConfigError(
                f"Config file {path} must contain a mapping, got {type(data).__name__}",
                context={"path": str(path)},
            )
        return data

    def validate_schema(self, config: Dict[str, Any]) -> None:
        try:
            validate_payload(config, "config.schema.yaml")
        except SchemaValidationError as exc:
            raise ConfigError(
                f"Invalid configuration: {'; '.join(exc.errors) or exc}",
                context={"errors": exc.errors},
            ) from exc

    ARRAY_APPEND_MARKER = object()

    def _as_bool(self, v: str) -> Optional[bool]:
        low = v.strip().lower()
        if low in {"true", "false"}:
            return low == "true"
        return None

    def _as_int(self, v: str) -> Optional[int]:
        if re.fullmatch(r"[-+]?\d+", v.strip() or " "):
            return int(v)
        return None

    def _as_float(self, v: str) -> Optional[float]:
        s = v.strip()
        if re.fullmatch(r"[-+]?\d*\.\d+", s) or re.fullmatch(r"[-+]?\d+\.\d*", s):
            return float(s)
        return None

    def _as_json(self, v: str) -> Optional[Any]:
        s = v.strip()
        if (s.startswith("{") and s.endswith("}")) or (s.startswith("[") and s.endswith("]")):
            try:
                return json.loads(s)
            except json.JSONDecodeError:
                return None
        return None

    def _coerce_type(self, value: str) -> Any:
        for caster in (self._as_bool, self._as_int, self._as_float, self._as_json):
            result = caster(value)
            if result is not None:
                return result
        if value.strip().lower() in {"null", "none"}:
            return None
        return value.strip()

    def _parse_env_key(self, raw: str, *, strict: bool) -> List[Union[str, int, object]]:
        if not raw:
            return []
        segs = raw.split("__")
        processed: List[Union[str, int, object]] = []
        for seg in segs:
            if seg == "":
                if strict:
                    raise ConfigError(
                        f"Malformed {ENV_PREFIX}* key: empty segment in '{raw}'.",
                        context={"key": ENV_PREFIX + raw},
                    )
                return []
            if seg.isdigit():
                processed.append(int(seg))
            elif seg.upper() == "APPEND":
                processed.append(self.ARRAY_APPEND_MARKER)
            else:
                processed.append(seg.lower())
        return processed

    def _iter_env_overrides(
        self, *, strict: bool
    ) -> Iterator[Tuple[List[Union[str, int, object]], Any, str]]:
        for key in sorted(os.environ.keys()):
            if not key.startswith(ENV_PREFIX) or key in _RESERVED_ENV_KEYS:
                continue
            raw = key[len(ENV_PREFIX) :]
            path = self._parse_env_key(raw, strict=strict)
            if not path:
                continue
            yield path, self._coerce_type(os.environ[key]), raw

    def _set_nested(self, root: Dict[str, Any], path: List[Union[str, int, object]], value: Any) -> None:
        cur: Any = root
        for i, part in enumerate(path[:-1]):
            nxt = path[i + 1]
            if isinstance(part, int) or part is self.ARRAY_APPEND_MARKER:
                raise ConfigError("Invalid override path: list index/APPEND may only appear at leaf")
            if not isinstance(cur, dict):
                raise ConfigError("Invalid override path: traverses a non-mapping value")
            if part not in cur or cur[part] is None:
                cur[part] = [] if (isinstance(nxt, int) or nxt is self.ARRAY_APPEND_MARKER) else {}
            cur = cur[part]

        leaf = path[-1]
        if leaf is self.ARRAY_APPEND_MARKER:
            if not isinstance(cur, list):
                raise ConfigError("APPEND requires a list")
            cur.append(value)
        elif isinstance(leaf, int):
            if not isinstance(cur, list):
                raise ConfigError("Index assignment requires a list")
            while len(cur) <= leaf:
                cur.append(None)
            cur[leaf] = value
        else:
            if not isinstance(cur, dict):
                raise ConfigError("Key assignment requires a mapping")
            cur[leaf] = value

    def apply_env_overrides(self, cfg: Dict[str, Any], *, strict: bool) -> None:
        for path, typed_value, raw in self._iter_env_overrides(strict=strict):
            logger.debug("config env override %s%s", ENV_PREFIX, raw)
            self._set_nested(cfg, path, typed_value)

    def load_config(self, validate: bool = True) -> Dict[str, Any]:
        """Load and merge configuration from every layer.

        Args:
            validate: If True, validate the merged result against the bundled
                JSON schema and parse env override keys strictly.

        Raises:
            ConfigError: On invalid YAML, malformed overrides or schema violations.
        """
        cfg: Dict[str, Any] = {}
        for path in iter_yaml_files(self.core_config_dir):
            cfg = self.deep_merge(cfg, self.load_yaml(path))

        project_file = self.project_config_file
        if project_file is not None:
            logger.debug("loading project config %s", project_file)
            cfg = self.deep_merge(cfg, self.load_yaml(project_file))

        self.apply_env_overrides(cfg, strict=validate)

        if validate:
            self.validate_schema(cfg)
        return cfg

    def get(self, dotted_key: str, default: Any = None) -> Any:
        """Return a config value by dotted path (e.g. ``"graph.on_cycle"``)."""
        cur: Any = self.load_config()
        for part in dotted_key.split("."):
            if not isinstance(cur, dict) or part not in cur:
                return default
            cur = cur[part]
        return cur


__all__ = ["ConfigManager", "ENV_PREFIX"]
