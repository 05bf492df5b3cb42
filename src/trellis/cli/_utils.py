"""Shared CLI utilities."""
from __future__ import annotations

import argparse
from pathlib import Path
from typing import Any, Dict, Iterable, Optional

import yaml

from trellis.core.config import ConfigManager, TemplatesConfig
from trellis.core.exceptions import ConfigError
from trellis.core.stdlib_logging import configure_logging
from trellis.core.templates import TemplateRegistry


def load_engine_config(args: argparse.Namespace) -> TemplatesConfig:
    """Load merged configuration for the --config/--project-root flags."""
    project_root = getattr(args, "project_root", None)
    config_file = getattr(args, "config", None)
    manager = ConfigManager(
        Path(project_root) if project_root else None,
        Path(config_file) if config_file else None,
    )
    return TemplatesConfig(manager.load_config())


def setup_cli_logging(args: argparse.Namespace, config: Optional[TemplatesConfig] = None) -> None:
    if getattr(args, "verbose", False):
        configure_logging("DEBUG")
    elif config is not None:
        configure_logging(config.log_level)


def build_registry(args: argparse.Namespace, config: TemplatesConfig) -> TemplateRegistry:
    """Registry over --templates roots followed by configured roots."""
    registry = TemplateRegistry.from_config(config)
    explicit = [Path(p) for p in getattr(args, "templates", []) or []]
    registry.paths = [*explicit, *[p for p in registry.paths if p not in explicit]]
    return registry


def parse_options(pairs: Iterable[str]) -> Dict[str, Any]:
    """Parse ``KEY=VALUE`` pairs; values are read as YAML scalars.

    Raises:
        ConfigError: If a pair has no ``=`` or an empty key.
    """
    options: Dict[str, Any] = {}
    for pair in pairs:
        key, sep, raw = pair.partition("=")
        key = key.strip()
        if not sep or not key:
            raise ConfigError(f"Invalid option '{pair}': expected KEY=VALUE", context={"option": pair})
        try:
            value = yaml.safe_load(raw) if raw.strip() else ""
        except yaml.YAMLError:
            value = raw
        options[key] = raw if value is None else value
    return options


__all__ = ["load_engine_config", "setup_cli_logging", "build_registry", "parse_options"]
