"""Hierarchical template composition and rendering.

Templates live in directories under one or more template roots. A template
directory holds one file per section (``<section>.j2``) and may extend its
definition with a ``template.yaml`` manifest or a ``setup.py`` module.
Nested directories compose their parents, so ``default/html`` sees every
file and operation of ``default`` unless it overrides them.
"""
from __future__ import annotations

from .base import Template, is_template
from .capabilities import (
    FORMAT_CAPABILITIES,
    CapabilitySet,
    GraphCapabilities,
    HtmlCapabilities,
    TextCapabilities,
    section_operation,
)
from .continuation import Continuation
from .definition import DefinitionBuilder, TemplateDefinition
from .errors import (
    DefinitionLoadError,
    InvalidSectionEntryError,
    MissingExplicitFileError,
    MissingFileError,
    TemplateError,
    TemplateNotFoundError,
    TemplateSyntaxError,
)
from .instance import TemplateInstance
from .registry import TemplateRegistry
from .text import JinjaTextRenderer, TextRenderer

__all__ = [
    "Template",
    "is_template",
    "TemplateDefinition",
    "DefinitionBuilder",
    "TemplateInstance",
    "TemplateRegistry",
    "Continuation",
    "CapabilitySet",
    "HtmlCapabilities",
    "TextCapabilities",
    "GraphCapabilities",
    "FORMAT_CAPABILITIES",
    "section_operation",
    "TextRenderer",
    "JinjaTextRenderer",
    "TemplateError",
    "TemplateNotFoundError",
    "MissingFileError",
    "MissingExplicitFileError",
    "InvalidSectionEntryError",
    "DefinitionLoadError",
    "TemplateSyntaxError",
]
