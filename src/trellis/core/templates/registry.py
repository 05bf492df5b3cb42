"""Template registry: resolves logical paths to composed definitions.

Usage::

    registry = TemplateRegistry(["templates", "vendor/templates"])
    print(registry.run("default/html", {"format": "html", "title": "Hi"}))

A logical path such as ``"default/html"`` resolves against the first
template root holding a directory of that name. The definition for
``"default/html"`` automatically composes ``"default"`` (its parent
directory, in the same root) before any explicit mixins. Definitions are
memoized per path; a path whose extensions failed to load keeps failing.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Set, Type, Union

from trellis.core.config.templates import TemplatesConfig
from trellis.core.utils.io import PathLike, read_text

from .capabilities import CapabilitySet
from .definition import DefinitionBuilder, TemplateDefinition, join_template_path, parent_template_path
from .errors import DefinitionLoadError, TemplateNotFoundError
from .extensions import load_extensions
from .text import JinjaTextRenderer, TextRenderer

logger = logging.getLogger(__name__)

Reader = Callable[[Path], str]
Initializer = Callable[[DefinitionBuilder], None]


class TemplateRegistry:
    """Resolve, compose and memoize template definitions.

    Args:
        paths: Template roots, searched in order
        extension: Appended to a section name to find its file
        setup_file: Per-template Python extension module name
        manifest_file: Per-template YAML manifest name
        reader: Reads a template file's text (injectable for tests)
        text_renderer: Renders template file text; Jinja2 by default
    """

    def __init__(
        self,
        paths: Iterable[PathLike] = (),
        *,
        extension: str = ".j2",
        setup_file: str = "setup.py",
        manifest_file: str = "template.yaml",
        reader: Reader = read_text,
        text_renderer: Optional[TextRenderer] = None,
    ) -> None:
        self.paths: List[Path] = [Path(p) for p in paths]
        self.extension = extension
        self.setup_file = setup_file
        self.manifest_file = manifest_file
        self.reader = reader
        self.text_renderer: TextRenderer = text_renderer or JinjaTextRenderer()
        self.extra_capabilities: List[Type[CapabilitySet]] = []
        self._definitions: Dict[str, TemplateDefinition] = {}
        self._failures: Dict[str, DefinitionLoadError] = {}
        self._initializers: Dict[str, List[Initializer]] = {}
        self._loading: Set[str] = set()

    @classmethod
    def from_config(cls, config: Union[Mapping[str, Any], TemplatesConfig], **kwargs: Any) -> "TemplateRegistry":
        """Build a registry from a merged configuration mapping."""
        cfg = config if isinstance(config, TemplatesConfig) else TemplatesConfig(config)
        kwargs.setdefault("text_renderer", JinjaTextRenderer.from_config(cfg))
        return cls(
            cfg.paths,
            extension=cfg.extension,
            setup_file=cfg.setup_file,
            manifest_file=cfg.manifest_file,
            **kwargs,
        )

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------
    def add_path(self, path: PathLike) -> None:
        """Append a template root; it is searched after existing roots."""
        root = Path(path)
        if root not in self.paths:
            self.paths.append(root)

    def register_initializer(self, path: str, initializer: Initializer) -> None:
        """Run ``initializer(builder)`` when ``path`` is loaded.

        Raises:
            RuntimeError: If ``path`` was already resolved.
        """
        key = join_template_path(path)
        if key in self._definitions:
            raise RuntimeError(f"template '{key}' is already loaded")
        self._initializers.setdefault(key, []).append(initializer)

    def initializers_for(self, path: str) -> List[Initializer]:
        return list(self._initializers.get(path, []))

    def register_capabilities(self, capability_set: Type[CapabilitySet]) -> None:
        """Add a capability set to every instance created afterwards."""
        if capability_set not in self.extra_capabilities:
            self.extra_capabilities.append(capability_set)

    # ------------------------------------------------------------------
    # Resolution
    # ------------------------------------------------------------------
    def locate(self, path: str) -> Optional[Path]:
        """Return the first root's directory for ``path``, if any."""
        for root in self.paths:
            candidate = root / path
            if candidate.is_dir():
                return candidate
        return None

    def resolve(self, *parts: Any) -> TemplateDefinition:
        """Return the memoized definition for a logical path.

        Raises:
            TemplateNotFoundError: If no root holds the path.
            DefinitionLoadError: If the definition (or one it composes) failed
                to load, now or on an earlier attempt.
        """
        path = join_template_path(*parts)
        cached = self._cached(path)
        if cached is not None:
            return cached
        location = self.locate(path) if path else None
        if location is None:
            raise TemplateNotFoundError(path, self.paths)
        return self._build(path, location)

    def resolve_at(self, path: str, location: PathLike) -> TemplateDefinition:
        """Like :meth:`resolve` but with an explicit backing directory."""
        path = join_template_path(path)
        cached = self._cached(path)
        if cached is not None:
            return cached
        return self._build(path, Path(location))

    def _cached(self, path: str) -> Optional[TemplateDefinition]:
        failure = self._failures.get(path)
        if failure is not None:
            raise DefinitionLoadError(path, failure.source, f"earlier load failed: {failure}") from failure
        return self._definitions.get(path)

    def _build(self, path: str, location: Path) -> TemplateDefinition:
        if path in self._loading:
            raise DefinitionLoadError(path, location, "circular composition")

        definition = TemplateDefinition(path, location, self)
        self._loading.add(path)
        try:
            parent = parent_template_path(path)
            if parent is not None:
                definition.add_mixin(self.resolve_at(parent, location.parent))
            load_extensions(definition, self)
        except DefinitionLoadError as exc:
            self._failures[path] = exc
            raise
        finally:
            self._loading.discard(path)

        definition.freeze()
        self._definitions[path] = definition
        logger.debug("Loaded template %s from %s", path, location)
        return definition

    def clear(self) -> None:
        """Forget every memoized definition and recorded failure."""
        self._definitions.clear()
        self._failures.clear()

    # ------------------------------------------------------------------
    # Convenience
    # ------------------------------------------------------------------
    def run(self, path: str, options: Optional[Mapping[str, Any]] = None) -> str:
        return self.resolve(path).run(options)

    def __contains__(self, path: object) -> bool:
        return isinstance(path, str) and join_template_path(path) in self._definitions

    def __repr__(self) -> str:
        return f"TemplateRegistry(paths={[str(p) for p in self.paths]!r})"


__all__ = ["TemplateRegistry", "Reader", "Initializer"]
