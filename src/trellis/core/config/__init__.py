"""Engine configuration: layered YAML loading and typed accessors."""
from __future__ import annotations

from .manager import PROJECT_CONFIG_FILENAME, ConfigManager
from .templates import TemplatesConfig

__all__ = ["ConfigManager", "TemplatesConfig", "PROJECT_CONFIG_FILENAME"]
