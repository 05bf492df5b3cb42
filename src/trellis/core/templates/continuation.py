"""The callable handed to a section's render action."""
from __future__ import annotations

from typing import Any, Callable, Mapping, Optional

RenderNext = Callable[[Optional[Mapping[str, Any]]], str]


class Continuation:
    """Renders the next subsection of the section currently being rendered.

    Each call renders exactly one more entry of the owning section's subtree,
    walking it left to right, with ``overrides`` (and keyword options)
    applied only for the duration of that call. Calling it zero times
    renders no subsections at all.

    Example (custom operation rendering one subsection per item)::

        def items(template, continuation):
            return "".join(continuation(item=i) for i in template.options["items"])
    """

    __slots__ = ("_render_next", "calls")

    def __init__(self, render_next: RenderNext) -> None:
        self._render_next = render_next
        self.calls = 0

    def __call__(self, overrides: Optional[Mapping[str, Any]] = None, **options: Any) -> str:
        if options:
            overrides = {**(overrides or {}), **options}
        self.calls += 1
        return self._render_next(overrides)

    def __repr__(self) -> str:
        return f"<Continuation calls={self.calls}>"


__all__ = ["Continuation", "RenderNext"]
