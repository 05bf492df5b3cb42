"""Dynamic module loading for per-template extension files.

A template directory may ship a Python module that customizes its
definition. The module is executed from its file path without being
registered in ``sys.modules``; errors propagate to the caller, which decides
how to report them.
"""
from __future__ import annotations

import importlib.util
import logging
import re
from pathlib import Path
from types import ModuleType

logger = logging.getLogger(__name__)

_UNSAFE_CHARS = re.compile(r"[^0-9a-zA-Z_]")


def module_name_for(namespace: str, key: str) -> str:
    """Build a dotted module name from a namespace and an arbitrary key."""
    parts = [_UNSAFE_CHARS.sub("_", p) for p in key.split("/") if p]
    return ".".join([namespace, *parts])


def load_module_from_path(path: Path, module_name: str) -> ModuleType:
    """Execute the Python file at ``path`` as a fresh module.

    Args:
        path: Path to the .py file
        module_name: Fully-qualified name given to the module

    Returns:
        The executed module

    Raises:
        ImportError: If no import spec can be built for ``path``
        Any exception raised while executing the module body
    """
    spec = importlib.util.spec_from_file_location(module_name, path)
    if spec is None or spec.loader is None:
        raise ImportError(f"cannot build import spec for {path}")
    module = importlib.util.module_from_spec(spec)
    logger.debug("Executing module %s from %s", module_name, path)
    spec.loader.exec_module(module)
    return module


__all__ = ["load_module_from_path", "module_name_for"]
