"""Typed accessors for the ``templates``, ``jinja`` and ``logging`` sections."""
from __future__ import annotations

from functools import cached_property
from pathlib import Path
from typing import Any, Dict, List, Mapping


class TemplatesConfig:
    """Typed view over a merged engine configuration mapping.

    Usage:
        cfg = TemplatesConfig(ConfigManager(root).load_config())
        cfg.paths       # [Path(...), ...]
        cfg.extension   # ".j2"
    """

    def __init__(self, config: Mapping[str, Any]) -> None:
        self._config = config

    def _section(self, name: str) -> Mapping[str, Any]:
        value = self._config.get(name) or {}
        return value if isinstance(value, Mapping) else {}

    @cached_property
    def paths(self) -> List[Path]:
        return [Path(p) for p in self._section("templates").get("paths", [])]

    @cached_property
    def extension(self) -> str:
        return str(self._section("templates").get("extension", ".j2"))

    @cached_property
    def setup_file(self) -> str:
        return str(self._section("templates").get("setup_file", "setup.py"))

    @cached_property
    def manifest_file(self) -> str:
        return str(self._section("templates").get("manifest_file", "template.yaml"))

    @cached_property
    def jinja(self) -> Dict[str, Any]:
        section = self._section("jinja")
        return {
            "trim_blocks": bool(section.get("trim_blocks", True)),
            "lstrip_blocks": bool(section.get("lstrip_blocks", True)),
            "keep_trailing_newline": bool(section.get("keep_trailing_newline", True)),
            "strict_undefined": bool(section.get("strict_undefined", True)),
            "cache_size": int(section.get("cache_size", 256)),
        }

    @cached_property
    def log_level(self) -> str:
        return str(self._section("logging").get("level", "WARNING"))


__all__ = ["TemplatesConfig"]
