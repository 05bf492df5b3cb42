"""Section trees.

A section tree is a flat list of entries. An entry is a leaf (a section
name, a template definition, or a template instance) or a list holding the
subtree of the leaf right before it::

    ["header", "body", ["title", "items", ["item"]], "footer"]

``"body"`` owns ``["title", "items", ["item"]]`` and ``"items"`` owns
``["item"]``. A ``(name, subtree)`` tuple is accepted as a shorthand and is
expanded to the flat form when the tree is assigned, and split in place when
``run`` walks a list that holds one. Subtrees are never
rendered on their own; they are reachable only through the continuation
handed to the leaf that owns them.
"""
from __future__ import annotations

from typing import Any, List, Optional, Sequence, Tuple

from .base import is_template
from .errors import InvalidSectionEntryError

SectionList = List[Any]


def is_subtree(entry: Any) -> bool:
    return isinstance(entry, list)


def is_leaf(entry: Any) -> bool:
    return isinstance(entry, str) or is_template(entry)


def is_branch(entry: Any) -> bool:
    return isinstance(entry, tuple)


def split_branch(entry: Tuple[Any, ...], *, where: str = "sections", position: int = 0) -> Tuple[Any, SectionList]:
    """Return ``(leaf, subtree)`` for a ``(name, subtree)`` entry.

    Raises:
        InvalidSectionEntryError: If the tuple is not a leaf and a list.
    """
    if len(entry) != 2 or not is_leaf(entry[0]) or not isinstance(entry[1], (list, tuple)):
        raise InvalidSectionEntryError(
            f"branch entry #{position} in {where} must be (name, [subsections]), got {entry!r}",
            context={"where": where, "position": position},
        )
    return entry[0], normalize_tree(entry[1], where=f"{where}/{entry[0]}")


def normalize_tree(entries: Sequence[Any], *, where: str = "sections") -> SectionList:
    """Return ``entries`` in flat form, validating every entry.

    A list with no leaf before it (at the start, or after another list)
    belongs to no section and is kept only as a placeholder.

    Raises:
        InvalidSectionEntryError: For an entry of an unsupported kind.
    """
    flat: SectionList = []
    for position, entry in enumerate(entries):
        if is_branch(entry):
            flat.extend(split_branch(entry, where=where, position=position))
        elif is_subtree(entry):
            owner = flat[-1] if flat and is_leaf(flat[-1]) else "-"
            flat.append(normalize_tree(entry, where=f"{where}/{owner}"))
        elif is_leaf(entry):
            flat.append(entry)
        else:
            raise InvalidSectionEntryError(
                f"unsupported section entry #{position} in {where}: {entry!r}",
                context={"where": where, "position": position},
            )
    return flat


def subtree_after(entries: Sequence[Any], index: int) -> Optional[SectionList]:
    """Return the subtree owned by ``entries[index]``, if any."""
    following = index + 1
    if following < len(entries) and is_subtree(entries[following]):
        return entries[following]
    return None


def next_leaf(entries: Optional[Sequence[Any]], index: int) -> int:
    """Return the index of the first non-subtree entry at or after ``index``.

    Returns ``len(entries)`` when only subtrees remain. Used by
    continuations so that successive calls visit one leaf each.
    """
    while entries is not None and index < len(entries) and is_subtree(entries[index]):
        index += 1
    return index


__all__ = [
    "SectionList",
    "is_subtree",
    "is_leaf",
    "is_branch",
    "split_branch",
    "normalize_tree",
    "subtree_after",
    "next_leaf",
]
