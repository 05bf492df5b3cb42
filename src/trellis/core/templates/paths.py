"""Search-path resolution for template files.

A definition's search path is its own directory followed by the directories
of every definition composed into it. Lookups walk the path in order and
return the first regular file with the requested name, so a definition
always shadows what it inherits.
"""
from __future__ import annotations

from pathlib import Path
from typing import Iterable, List, Optional

from .errors import MissingExplicitFileError


def find_file(search_paths: Iterable[Path], name: str) -> Optional[Path]:
    """Return the first ``<dir>/<name>`` that is a regular file.

    Missing directories are treated as "not found". No caching happens at
    this layer; callers cache what they need.
    """
    for directory in search_paths:
        candidate = Path(directory) / name
        if candidate.is_file():
            return candidate
    return None


def merge_search_paths(*groups: Iterable[Path]) -> List[Path]:
    """Flatten path groups, dropping duplicates and keeping first-seen order."""
    seen: set[Path] = set()
    merged: List[Path] = []
    for group in groups:
        for path in group:
            if path in seen:
                continue
            seen.add(path)
            merged.append(path)
    return merged


def require_file(search_paths: Iterable[Path], name: str, template_path: str) -> Path:
    """Like :func:`find_file` but raise when nothing matches."""
    found = find_file(search_paths, name)
    if found is None:
        raise MissingExplicitFileError(name, template_path)
    return found


__all__ = ["find_file", "merge_search_paths", "require_file"]
