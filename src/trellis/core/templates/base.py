"""Marker base shared by template definitions and template instances."""
from __future__ import annotations

from abc import ABC


class Template(ABC):
    """Anything produced by the composition mechanism.

    Both :class:`~trellis.core.templates.definition.TemplateDefinition` and
    :class:`~trellis.core.templates.instance.TemplateInstance` derive from
    this class, so ``isinstance(obj, Template)`` answers true for any
    definition or instance regardless of which definition produced it.
    """

    __slots__ = ()


def is_template(obj: object) -> bool:
    return isinstance(obj, Template)


__all__ = ["Template", "is_template"]
