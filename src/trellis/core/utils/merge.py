"""Layering of configuration mappings.

Later layers win. Nested mappings are merged key by key; any other value,
lists included, replaces the one from the lower layer.
"""
from __future__ import annotations

from typing import Any, Dict, Mapping


def deep_merge(base: Mapping[str, Any], override: Mapping[str, Any]) -> Dict[str, Any]:
    """Return ``base`` with ``override`` layered on top; inputs are left untouched.

    Example:
        >>> deep_merge({"templates": {"paths": ["a"], "extension": ".j2"}},
        ...            {"templates": {"paths": ["b"]}})
        {'templates': {'paths': ['b'], 'extension': '.j2'}}
    """
    merged: Dict[str, Any] = dict(base)
    for key, value in (override or {}).items():
        current = merged.get(key)
        if isinstance(current, Mapping) and isinstance(value, Mapping):
            merged[key] = deep_merge(current, value)
        else:
            merged[key] = value
    return merged


__all__ = ["deep_merge"]
