"""Shared utilities (I/O, merging, dynamic loading)."""
from __future__ import annotations

from .io import PathLike, read_text, read_yaml
from .loader import load_module_from_path, module_name_for
from .merge import deep_merge

__all__ = [
    "PathLike",
    "read_text",
    "read_yaml",
    "load_module_from_path",
    "module_name_for",
    "deep_merge",
]
