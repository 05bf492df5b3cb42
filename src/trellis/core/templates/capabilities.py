"""Output-format capability sets.

A template instance picks at most one format capability set, by exact match
on its ``format`` option, plus any extra sets registered on the registry.
A capability set contributes:

- helpers: callables exposed to template files (``{{ h(title) }}``)
- section operations: methods marked with :func:`section_operation`, which
  take precedence over the definition's own operations and over files when a
  section of the same name is dispatched.
"""
from __future__ import annotations

import textwrap
from typing import TYPE_CHECKING, Any, Callable, ClassVar, Dict, Iterable, List, Optional, Tuple, Type

from markupsafe import escape

if TYPE_CHECKING:
    from .continuation import Continuation
    from .instance import TemplateInstance


def section_operation(func: Callable[..., Any]) -> Callable[..., Any]:
    """Mark a capability method as dispatchable by section name."""
    func.__section_operation__ = True  # type: ignore[attr-defined]
    return func


class CapabilitySet:
    """Base class for capability sets bound to one template instance."""

    name: ClassVar[str] = ""
    HELPERS: ClassVar[Tuple[str, ...]] = ()

    def __init__(self, template: "TemplateInstance") -> None:
        self.template = template

    def helpers(self) -> Dict[str, Callable[..., Any]]:
        return {name: getattr(self, name) for name in self.HELPERS}

    def operations(self) -> Dict[str, Callable[["Continuation"], Optional[str]]]:
        ops: Dict[str, Callable[["Continuation"], Optional[str]]] = {}
        for name in dir(type(self)):
            if getattr(getattr(type(self), name, None), "__section_operation__", False):
                ops[name] = getattr(self, name)
        return ops

    def __repr__(self) -> str:
        return f"<{type(self).__name__} for {self.template!r}>"


class HtmlCapabilities(CapabilitySet):
    name = "html"
    HELPERS = ("h", "tag")

    def h(self, text: Any) -> str:
        return str(escape("" if text is None else text))

    def tag(self, name: str, content: Any = "", **attrs: Any) -> str:
        rendered = "".join(
            f' {key.rstrip("_")}="{self.h(value)}"' for key, value in attrs.items() if value is not None
        )
        return f"<{name}{rendered}>{content}</{name}>"

    @section_operation
    def separator(self, continuation: "Continuation") -> str:
        return "<hr />\n"


class TextCapabilities(CapabilitySet):
    name = "text"
    HELPERS = ("wrap", "indent", "hr")

    def _width(self, width: Optional[int]) -> int:
        return int(width if width is not None else self.template.options.get("width", 72))

    def wrap(self, text: str, width: Optional[int] = None) -> str:
        return "\n".join(textwrap.wrap(str(text), self._width(width)))

    def indent(self, text: str, prefix: str = "  ") -> str:
        return textwrap.indent(str(text), prefix)

    def hr(self, width: Optional[int] = None, char: str = "-") -> str:
        return char * self._width(width)

    @section_operation
    def separator(self, continuation: "Continuation") -> str:
        return self.hr() + "\n"


class GraphCapabilities(CapabilitySet):
    """Helpers for Graphviz DOT output."""

    name = "graph"
    HELPERS = ("quote", "node", "edge")

    def quote(self, value: Any) -> str:
        return '"' + str(value).replace("\\", "\\\\").replace('"', '\\"') + '"'

    def _attrs(self, attrs: Dict[str, Any]) -> str:
        if not attrs:
            return ""
        return " [" + ", ".join(f"{k}={self.quote(v)}" for k, v in attrs.items()) + "]"

    def node(self, name: Any, **attrs: Any) -> str:
        return f"{self.quote(name)}{self._attrs(attrs)};"

    def edge(self, source: Any, target: Any, **attrs: Any) -> str:
        return f"{self.quote(source)} -> {self.quote(target)}{self._attrs(attrs)};"

    @section_operation
    def separator(self, continuation: "Continuation") -> str:
        return "\n"


FORMAT_CAPABILITIES: Dict[str, Type[CapabilitySet]] = {
    HtmlCapabilities.name: HtmlCapabilities,
    TextCapabilities.name: TextCapabilities,
    GraphCapabilities.name: GraphCapabilities,
}


def capabilities_for(
    template: "TemplateInstance",
    fmt: Any,
    extras: Iterable[Type[CapabilitySet]] = (),
) -> List[CapabilitySet]:
    """Instantiate the capability sets for ``template`` in lookup order.

    Extra sets come first; unknown formats add nothing.
    """
    sets: List[CapabilitySet] = [cls(template) for cls in extras]
    cls = FORMAT_CAPABILITIES.get(fmt) if isinstance(fmt, str) else None
    if cls is not None:
        sets.append(cls(template))
    return sets


__all__ = [
    "CapabilitySet",
    "HtmlCapabilities",
    "TextCapabilities",
    "GraphCapabilities",
    "FORMAT_CAPABILITIES",
    "capabilities_for",
    "section_operation",
]
