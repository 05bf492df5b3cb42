"""Section dispatch: turn a section entry into rendered text.

A section name resolves to one render action, in this order:

1. a section operation of one of the instance's capability sets
2. a section operation registered by the definition or anything it composes
3. the section's template file (``<name><extension>``) in the search path

A template definition or instance used as a section is rendered on its own
with the current options; the continuation is not passed to it.
Resolutions for names are cached per instance.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, Dict, Optional, Union

from .base import Template, is_template
from .continuation import Continuation
from .errors import InvalidSectionEntryError

if TYPE_CHECKING:
    from .instance import TemplateInstance

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CustomOperation:
    name: str
    func: Callable[[Continuation], Optional[str]]


@dataclass(frozen=True)
class FileBacked:
    name: str


@dataclass(frozen=True)
class NestedTemplate:
    target: Template


RenderAction = Union[CustomOperation, FileBacked, NestedTemplate]


class SectionRenderer:
    def __init__(self, template: "TemplateInstance") -> None:
        self.template = template
        self._actions: Dict[str, RenderAction] = {}

    def resolve(self, section: Any) -> RenderAction:
        if isinstance(section, str):
            action = self._actions.get(section)
            if action is None:
                action = self._resolve_name(section)
                self._actions[section] = action
            return action
        if is_template(section):
            return NestedTemplate(section)
        raise InvalidSectionEntryError(
            f"cannot render section entry {section!r} in {self.template.definition.path}",
            context={"template": self.template.definition.path},
        )

    def _resolve_name(self, name: str) -> RenderAction:
        operation = self.template.lookup_operation(name)
        if operation is not None:
            return CustomOperation(name, operation)
        return FileBacked(name)

    def render(self, section: Any, continuation: Continuation) -> str:
        logger.debug("Templates: inside %r", self.template)
        action = self.resolve(section)
        if isinstance(action, CustomOperation):
            result = action.func(continuation)
        elif isinstance(action, FileBacked):
            result = self.template.render_file(action.name, continuation)
        else:
            result = action.target.run(self.template.options)  # type: ignore[attr-defined]
        return "" if result is None else str(result)


__all__ = ["SectionRenderer", "RenderAction", "CustomOperation", "FileBacked", "NestedTemplate"]
