"""Per-template extensions, applied once when a definition is loaded.

Three sources, applied in this order so later ones can refine earlier ones:

1. ``template.yaml`` manifest (``mixins``, ``sections``, ``defaults``),
   validated against the bundled ``template-manifest`` schema
2. ``setup.py`` module exposing ``setup(builder)``
3. initializers registered on the registry for the template's path

Any failure is reported as :class:`DefinitionLoadError`.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any, Callable, Dict

from trellis.core.schemas import SchemaValidationError, validate_payload
from trellis.core.utils.io import read_yaml
from trellis.core.utils.loader import load_module_from_path, module_name_for

from .definition import DefinitionBuilder, TemplateDefinition
from .errors import DefinitionLoadError

if TYPE_CHECKING:
    from .registry import TemplateRegistry

logger = logging.getLogger(__name__)

MANIFEST_SCHEMA = "template-manifest.schema"
MODULE_NAMESPACE = "trellis.templates"


def _load_manifest(builder: DefinitionBuilder, path: Path) -> None:
    data = read_yaml(path, default={}, raise_on_error=True)
    if data is None:
        data = {}
    try:
        validate_payload(data, MANIFEST_SCHEMA)
    except SchemaValidationError as exc:
        raise DefinitionLoadError(builder.path, path, "; ".join(exc.errors) or str(exc)) from exc

    manifest: Dict[str, Any] = data
    for mixin in manifest.get("mixins", []):
        builder.add_mixin(mixin)
    if "sections" in manifest:
        builder.set_sections(manifest["sections"])
    if manifest.get("defaults"):
        builder.set_defaults(manifest["defaults"])


def _load_setup_module(builder: DefinitionBuilder, path: Path) -> None:
    module = load_module_from_path(path, module_name_for(MODULE_NAMESPACE, builder.path))
    setup = getattr(module, "setup", None)
    if not callable(setup):
        raise DefinitionLoadError(builder.path, path, "module defines no setup(builder) function")
    setup(builder)


def load_extensions(definition: TemplateDefinition, registry: "TemplateRegistry") -> None:
    """Apply every extension found for ``definition``.

    Raises:
        DefinitionLoadError: If a manifest is invalid, a setup module fails
            to execute, or any extension raises.
    """
    builder = DefinitionBuilder(definition)
    steps = [
        (definition.location / registry.manifest_file, _load_manifest),
        (definition.location / registry.setup_file, _load_setup_module),
    ]
    for source, step in steps:
        if not source.is_file():
            continue
        logger.debug("Applying %s to template %s", source.name, definition.path)
        _guarded(definition.path, source, lambda: step(builder, source))

    for initializer in registry.initializers_for(definition.path):
        _guarded(definition.path, initializer, lambda: initializer(builder))


def _guarded(path: str, source: Any, action: Callable[[], None]) -> None:
    try:
        action()
    except DefinitionLoadError:
        raise
    except Exception as exc:
        raise DefinitionLoadError(path, source, f"{type(exc).__name__}: {exc}") from exc


__all__ = ["load_extensions", "MANIFEST_SCHEMA"]
