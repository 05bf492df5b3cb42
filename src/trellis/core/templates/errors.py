"""Template composition error classes."""
from __future__ import annotations

from typing import Any, Mapping

from jinja2 import TemplateSyntaxError

from trellis.core.exceptions import TrellisError


class TemplateError(TrellisError):
    """Raised when composing or rendering a template fails."""
    pass


class TemplateNotFoundError(TemplateError, LookupError):
    """Raised when no template root holds a logical path."""

    def __init__(self, path: str, roots: Any = ()) -> None:
        searched = [str(r) for r in roots]
        super().__init__(
            f"no template '{path}' in any template root: {searched}",
            context={"path": path, "roots": searched},
        )
        self.path = path


class MissingFileError(TemplateError):
    """Raised when a section resolves to no file anywhere in the search path."""

    def __init__(self, section: str, template_path: str) -> None:
        super().__init__(
            f"no template for section '{section}' in {template_path}",
            context={"section": section, "template": template_path},
        )
        self.section = section
        self.template_path = template_path


class MissingExplicitFileError(TemplateError):
    """Raised when an explicit file lookup finds nothing."""

    def __init__(self, basename: str, template_path: str) -> None:
        super().__init__(
            f"no file for '{basename}' in {template_path}",
            context={"file": basename, "template": template_path},
        )
        self.basename = basename
        self.template_path = template_path


class InvalidSectionEntryError(TemplateError):
    """Raised when a section tree entry is malformed."""

    def __init__(self, message: str, *, context: Mapping[str, Any] | None = None) -> None:
        super().__init__(message, context=context)


class DefinitionLoadError(TemplateError):
    """Raised when a definition's extension (manifest or setup module) fails."""

    def __init__(self, path: str, source: Any, reason: str) -> None:
        super().__init__(
            f"failed to load template '{path}' from {source}: {reason}",
            context={"path": path, "source": str(source)},
        )
        self.path = path
        self.source = source


__all__ = [
    "TemplateError",
    "TemplateNotFoundError",
    "MissingFileError",
    "MissingExplicitFileError",
    "InvalidSectionEntryError",
    "DefinitionLoadError",
    "TemplateSyntaxError",
]
