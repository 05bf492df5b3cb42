"""
Trellis engine configuration management (YAML + environment overrides).
"""
from __future__ import annotations

import json
import logging
import os
import re
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Tuple

from trellis.core.exceptions import ConfigError
from trellis.core.schemas import SchemaValidationError, validate_payload
from trellis.core.utils.io import read_yaml
from trellis.core.utils.merge import deep_merge as _deep_merge
from trellis.data import get_data_path

logger = logging.getLogger(__name__)

PROJECT_CONFIG_FILENAME = "trellis.yaml"
ENV_PREFIX = "TRELLIS_"
CONFIG_SCHEMA = "config.schema"


class ConfigManager:
    """Load, merge, and validate engine configuration.

    Configuration sources (highest to lowest priority):
    1. Environment variables: TRELLIS_<SECTION>__<KEY>
    2. Project config: an explicit file, or <project-root>/trellis.yaml
    3. Bundled defaults: trellis.data/config/defaults.yaml

    Relative ``templates.paths`` entries are resolved against the directory
    of the file that declared them.
    """

    def __init__(
        self,
        project_root: Optional[Path] = None,
        config_file: Optional[Path] = None,
    ) -> None:
        self.project_root = Path(project_root) if project_root else Path.cwd()
        self.core_config_path = get_data_path("config", "defaults.yaml")
        if config_file is not None:
            self.project_config_path: Optional[Path] = Path(config_file)
            self._explicit = True
        else:
            self.project_config_path = self.project_root / PROJECT_CONFIG_FILENAME
            self._explicit = False

    def deep_merge(self, base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
        """Recursively merge dictionaries. Delegates to shared implementation."""
        return _deep_merge(base, override)

    def load_yaml(self, path: Path) -> Dict[str, Any]:
        # Fail closed: configuration must never silently ignore invalid YAML.
        data = read_yaml(path, default={}, raise_on_error=True)
        if not isinstance(data, dict):
            raise ConfigError(
                f"Configuration file must hold a mapping: {path}",
                context={"path": str(path)},
            )
        return data

    def load_config(self, *, validate: bool = True) -> Dict[str, Any]:
        """Return the merged configuration.

        Raises:
            ConfigError: If an explicit config file is missing, a file is not
                a mapping, or the merged result fails schema validation.
        """
        cfg = self.load_yaml(self.core_config_path)

        project_path = self.project_config_path
        if project_path is not None:
            if project_path.exists():
                logger.debug("Loading project configuration from %s", project_path)
                project_cfg = self._anchor_template_paths(self.load_yaml(project_path), project_path.parent)
                cfg = self.deep_merge(cfg, project_cfg)
            elif self._explicit:
                raise ConfigError(
                    f"Configuration file not found: {project_path}",
                    context={"path": str(project_path)},
                )

        self.apply_env_overrides(cfg)

        if validate:
            try:
                validate_payload(cfg, CONFIG_SCHEMA)
            except SchemaValidationError as exc:
                raise ConfigError(str(exc), context={"errors": exc.errors}) from exc
        return cfg

    def _anchor_template_paths(self, cfg: Dict[str, Any], base: Path) -> Dict[str, Any]:
        templates = cfg.get("templates")
        if not isinstance(templates, dict) or not isinstance(templates.get("paths"), list):
            return cfg
        anchored = [
            p if not isinstance(p, str) or Path(p).is_absolute() else str((base / p).resolve())
            for p in templates["paths"]
        ]
        return {**cfg, "templates": {**templates, "paths": anchored}}

    # ========== Environment overrides ==========

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
        return value.strip()

    def _parse_env_key(self, raw: str) -> List[str]:
        segs = raw.split("__") if "__" in raw else raw.split("_", 1)
        if any(seg == "" for seg in segs):
            raise ConfigError(f"Malformed {ENV_PREFIX}* key: empty segment in '{raw}'.")
        return [seg.lower() for seg in segs]

    def _iter_env_overrides(self) -> Iterator[Tuple[List[str], Any]]:
        for key in sorted(os.environ.keys()):
            if not key.startswith(ENV_PREFIX):
                continue
            raw = key[len(ENV_PREFIX):]
            if not raw:
                continue
            yield self._parse_env_key(raw), self._coerce_type(os.environ[key])

    def _set_nested(self, root: Dict[str, Any], path: List[str], value: Any) -> None:
        cur = root
        for part in path[:-1]:
            nxt = cur.get(part)
            if not isinstance(nxt, dict):
                nxt = {}
                cur[part] = nxt
            cur = nxt
        cur[path[-1]] = value

    def apply_env_overrides(self, cfg: Dict[str, Any]) -> None:
        for path, typed_value in self._iter_env_overrides():
            logger.debug("Applying environment override %s", ".".join(path))
            self._set_nested(cfg, path, typed_value)


__all__ = ["ConfigManager", "PROJECT_CONFIG_FILENAME"]
