"""Template definitions: one per logical template path.

A definition is the composed, immutable description of a template: its
directory, the definitions mixed into it (its parent directory first, then
any explicit mixins), the section operations it registers, and the section
tree builder it installs. Instances are created from a definition and carry
all per-render state.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any, Callable, Dict, List, Mapping, Optional, Sequence, Union

from .base import Template
from .paths import find_file, merge_search_paths

if TYPE_CHECKING:
    from .continuation import Continuation
    from .instance import TemplateInstance
    from .registry import TemplateRegistry

logger = logging.getLogger(__name__)

OperationFunc = Callable[["TemplateInstance", "Continuation"], Optional[str]]
TreeBuilder = Callable[["TemplateInstance"], None]
FileNameHook = Callable[["TemplateInstance", Any], str]


def join_template_path(*parts: Any) -> str:
    """Join path parts into a normalized logical path (``a/b/c``)."""
    pieces: List[str] = []
    for part in parts:
        if part is None:
            continue
        pieces.extend(p for p in str(part).split("/") if p)
    return "/".join(pieces)


def parent_template_path(path: str) -> Optional[str]:
    """Return the logical path one level up, or None at the top."""
    head, sep, _ = path.rpartition("/")
    return head if sep else None


class TemplateDefinition(Template):
    """Composed definition for one logical template path.

    Attributes:
        path: Logical path (``"default/html"``)
        location: Directory backing the definition
        registry: Registry that resolved it
        mixins: Definitions composed into this one, highest priority first
    """

    def __init__(self, path: str, location: Path, registry: "TemplateRegistry") -> None:
        self.path = path
        self.location = Path(location)
        self.registry = registry
        self.mixins: List[TemplateDefinition] = []
        self.operations: Dict[str, OperationFunc] = {}
        self.tree_builder: Optional[TreeBuilder] = None
        self.section_filename: Optional[FileNameHook] = None
        self.defaults: Dict[str, Any] = {}
        self._frozen = False
        self._search_paths: Optional[List[Path]] = None
        self._ancestors: Optional[List[TemplateDefinition]] = None

    # ------------------------------------------------------------------
    # Composition (only while loading)
    # ------------------------------------------------------------------
    def _check_mutable(self) -> None:
        if self._frozen:
            raise RuntimeError(f"template definition '{self.path}' is already loaded")

    def add_mixin(self, other: "TemplateDefinition") -> None:
        """Compose ``other`` into this definition ahead of earlier mixins."""
        self._check_mutable()
        if other is self:
            return
        if other in self.mixins:
            self.mixins.remove(other)
        self.mixins.insert(0, other)

    def freeze(self) -> None:
        self._frozen = True
        self._search_paths = None
        self._ancestors = None

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------
    def ancestors(self) -> List["TemplateDefinition"]:
        """Every definition composed into this one, depth first, deduplicated."""
        if self._ancestors is not None:
            return list(self._ancestors)
        seen: List[TemplateDefinition] = []
        stack = list(reversed(self.mixins))
        while stack:
            current = stack.pop()
            if current is self or current in seen:
                continue
            seen.append(current)
            stack.extend(reversed(current.mixins))
        if self._frozen:
            self._ancestors = seen
        return list(seen)

    def search_paths(self) -> List[Path]:
        """Own directory first, then every ancestor's directory, in priority order."""
        if self._search_paths is not None:
            return list(self._search_paths)
        paths = merge_search_paths([self.location], *[m.search_paths() for m in self.mixins])
        if self._frozen:
            self._search_paths = paths
        return list(paths)

    def find_file(self, basename: str) -> Optional[Path]:
        return find_file(self.search_paths(), basename)

    def _chain(self) -> List["TemplateDefinition"]:
        return [self, *self.ancestors()]

    def lookup_operation(self, name: str) -> Optional[OperationFunc]:
        for definition in self._chain():
            operation = definition.operations.get(name)
            if operation is not None:
                return operation
        return None

    def lookup_tree_builder(self) -> Optional[TreeBuilder]:
        for definition in self._chain():
            if definition.tree_builder is not None:
                return definition.tree_builder
        return None

    def lookup_section_filename(self) -> Optional[FileNameHook]:
        for definition in self._chain():
            if definition.section_filename is not None:
                return definition.section_filename
        return None

    def lookup_defaults(self) -> Dict[str, Any]:
        """Option defaults from the whole chain; nearer definitions win."""
        merged: Dict[str, Any] = {}
        for definition in reversed(self._chain()):
            merged.update(definition.defaults)
        return merged

    def find_template(self, *parts: Any) -> "TemplateDefinition":
        return self.registry.resolve(join_template_path(*parts))

    # ------------------------------------------------------------------
    # Instantiation
    # ------------------------------------------------------------------
    def create(self, options: Optional[Mapping[str, Any]] = None) -> "TemplateInstance":
        from .instance import TemplateInstance

        return TemplateInstance(self, options)

    def run(self, options: Optional[Mapping[str, Any]] = None) -> str:
        return self.create(options).run()

    def __repr__(self) -> str:
        return f"TemplateDefinition({self.path})"


class DefinitionBuilder:
    """Write access to a definition while it is being loaded.

    Handed to ``setup(builder)`` functions in template ``setup.py`` modules
    and to initializers registered on the registry.

    Example::

        def setup(builder):
            builder.add_mixin("shared/layout")
            builder.set_section_tree_builder(
                lambda t: t.sections("header", "body", ["title"], "footer")
            )

            @builder.register_operation
            def title(template, continuation):
                return template.options["title"]
    """

    def __init__(self, definition: TemplateDefinition) -> None:
        self._definition = definition

    @property
    def definition(self) -> TemplateDefinition:
        return self._definition

    @property
    def path(self) -> str:
        return self._definition.path

    @property
    def location(self) -> Path:
        return self._definition.location

    def add_mixin(self, *targets: Union[str, TemplateDefinition]) -> None:
        """Compose other definitions in; later calls take priority."""
        for target in targets:
            other = target if isinstance(target, TemplateDefinition) else self.find_template(target)
            logger.debug("Template %s includes %s", self.path, other.path)
            self._definition.add_mixin(other)

    def find_template(self, *parts: Any) -> TemplateDefinition:
        return self._definition.registry.resolve(join_template_path(*parts))

    def set_section_tree_builder(self, builder: TreeBuilder) -> None:
        self._definition._check_mutable()
        self._definition.tree_builder = builder

    def set_section_filename(self, hook: FileNameHook) -> FileNameHook:
        """Map section names to template file names for this definition.

        ``hook(template, section)`` returns the basename looked up along
        the search path. Nearer definitions override composed ones. Returns
        ``hook`` so it can be used as a decorator.
        """
        self._definition._check_mutable()
        self._definition.section_filename = hook
        return hook

    def set_sections(self, entries: Sequence[Any]) -> None:
        """Install a tree builder that assigns a fixed section tree."""
        fixed = list(entries)
        self.set_section_tree_builder(lambda template: template.sections(*fixed))

    def set_defaults(self, defaults: Mapping[str, Any]) -> None:
        self._definition._check_mutable()
        self._definition.defaults.update(defaults)

    def register_operation(self, name: Union[str, OperationFunc], func: Optional[OperationFunc] = None) -> Any:
        """Register a section operation.

        Usable directly (``register_operation("title", fn)``) or as a
        decorator, with or without an explicit name.
        """
        self._definition._check_mutable()
        if callable(name) and func is None:
            self._definition.operations[name.__name__] = name
            return name
        if func is None:
            def decorator(fn: OperationFunc) -> OperationFunc:
                self._definition.operations[str(name)] = fn
                return fn
            return decorator
        self._definition.operations[str(name)] = func
        return func


__all__ = [
    "TemplateDefinition",
    "DefinitionBuilder",
    "OperationFunc",
    "TreeBuilder",
    "FileNameHook",
    "join_template_path",
    "parent_template_path",
]
