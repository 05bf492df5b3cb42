"""Text rendering of template files (Jinja2).

The engine hands a file's text, a mapping of bindings and the active
continuation to a text renderer. The default renderer compiles the text with
Jinja2 and exposes the continuation to the markup as ``subsection``::

    <ul>
    {% for item in items %}
      {{ subsection(item=item) }}
    {% endfor %}
    </ul>

Syntax errors surface as :class:`jinja2.TemplateSyntaxError` carrying the
source file name and line number.
"""
from __future__ import annotations

import logging
from functools import lru_cache
from typing import Any, Mapping, Protocol

from jinja2 import Environment, StrictUndefined, Template, Undefined

from trellis.core.config.templates import TemplatesConfig

from .continuation import Continuation

logger = logging.getLogger(__name__)


class TextRenderer(Protocol):
    def render(
        self,
        text: str,
        bindings: Mapping[str, Any],
        continuation: Continuation,
        *,
        filename: str = "<string>",
    ) -> str: ...


class JinjaTextRenderer:
    """Render template text with Jinja2.

    Compiled templates are cached by (file name, text); at most
    ``cache_size`` are kept, least recently used first out.
    """

    def __init__(
        self,
        *,
        trim_blocks: bool = True,
        lstrip_blocks: bool = True,
        keep_trailing_newline: bool = True,
        strict_undefined: bool = True,
        cache_size: int = 256,
    ) -> None:
        self.environment = Environment(
            autoescape=False,
            undefined=StrictUndefined if strict_undefined else Undefined,
            trim_blocks=trim_blocks,
            lstrip_blocks=lstrip_blocks,
            keep_trailing_newline=keep_trailing_newline,
        )
        self.cache_size = max(1, cache_size)
        self._compiled = lru_cache(maxsize=self.cache_size)(self._compile)

    @classmethod
    def from_config(cls, config: TemplatesConfig) -> "JinjaTextRenderer":
        return cls(**config.jinja)

    def compile(self, text: str, filename: str) -> Template:
        return self._compiled(filename, text)

    def _compile(self, filename: str, text: str) -> Template:
        logger.debug("Compiling template text from %s", filename)
        code = self.environment.compile(text, name=filename, filename=filename)
        return self.environment.template_class.from_code(
            self.environment, code, self.environment.make_globals(None)
        )

    def render(
        self,
        text: str,
        bindings: Mapping[str, Any],
        continuation: Continuation,
        *,
        filename: str = "<string>",
    ) -> str:
        context = dict(bindings)
        context["subsection"] = continuation
        return self.compile(text, filename).render(context)


__all__ = ["TextRenderer", "JinjaTextRenderer"]
