"""Template instances: per-render state and the section-tree run engine."""
from __future__ import annotations

import functools
import logging
from types import MappingProxyType, SimpleNamespace
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple, TypeVar

from .base import Template
from .capabilities import CapabilitySet, capabilities_for
from .continuation import Continuation
from .definition import TemplateDefinition, join_template_path
from .errors import MissingFileError
from .paths import require_file
from .renderer import SectionRenderer
from .sections import SectionList, is_branch, is_subtree, next_leaf, normalize_tree, split_branch, subtree_after

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Marks "use the instance's own section tree" in run().
_OWN_TREE: Any = object()


class TemplateInstance(Template):
    """A single renderable instance of a template definition.

    Holds the instance's options, its section tree, the section cursor
    (``section`` and ``subsections``) and its caches. Instances are not
    meant to be shared between threads.

    Attributes:
        definition: The definition this instance was created from
        section: The section entry currently being rendered
        capabilities: Capability sets bound to this instance, lookup order
        vars: Attribute-style view of ``options``
    """

    def __init__(self, definition: TemplateDefinition, options: Optional[Mapping[str, Any]] = None) -> None:
        self.definition = definition
        self.section: Any = None
        self._subsections: Optional[SectionList] = None
        self._sections: SectionList = []
        self._options: Mapping[str, Any] = MappingProxyType({})
        self.vars = SimpleNamespace()
        self._files: Dict[str, Tuple[str, str]] = {}
        self._renderer = SectionRenderer(self)

        self.apply_options({**definition.lookup_defaults(), **dict(options or {})})
        self.capabilities: List[CapabilitySet] = capabilities_for(
            self, self.options.get("format"), definition.registry.extra_capabilities
        )
        self.init()

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------
    @property
    def options(self) -> Mapping[str, Any]:
        return self._options

    @options.setter
    def options(self, value: Mapping[str, Any]) -> None:
        self._options = MappingProxyType(dict(value))
        self.vars = SimpleNamespace(**{k: v for k, v in self._options.items() if isinstance(k, str) and k.isidentifier()})

    @property
    def subsections(self) -> Optional[SectionList]:
        return self._subsections

    @subsections.setter
    def subsections(self, value: Any) -> None:
        self._subsections = value if is_subtree(value) else None

    def init(self) -> None:
        """Install the section tree from the nearest definition that has one."""
        builder = self.definition.lookup_tree_builder()
        if builder is not None:
            builder(self)

    def sections(self, *entries: Any) -> SectionList:
        """Return the section tree, replacing it first when entries are given.

        Raises:
            InvalidSectionEntryError: If the new tree is malformed.
        """
        if entries:
            self._sections = normalize_tree(entries, where=self.definition.path)
        return self._sections

    # ------------------------------------------------------------------
    # Options
    # ------------------------------------------------------------------
    def apply_options(self, overrides: Optional[Mapping[str, Any]], body: Optional[Callable[[], T]] = None) -> Optional[T]:
        """Merge ``overrides`` into the options.

        Without ``body`` the merge is persistent. With ``body`` the merged
        options are visible only while it runs and the previous options are
        restored afterwards, also when it raises.
        """
        if body is not None and not overrides:
            return body()
        previous = self._options
        self.options = {**previous, **dict(overrides or {})}
        if body is None:
            return None
        try:
            return body()
        finally:
            self.options = previous

    def with_section(self, body: Callable[[], T]) -> T:
        """Run ``body`` and restore the section cursor afterwards."""
        section, subsections = self.section, self._subsections
        try:
            return body()
        finally:
            self.section, self._subsections = section, subsections

    # ------------------------------------------------------------------
    # Running
    # ------------------------------------------------------------------
    def run(
        self,
        overrides: Optional[Mapping[str, Any]] = None,
        sections: Any = _OWN_TREE,
        start_at: int = 0,
        break_first: bool = False,
        continuation: Optional[Continuation] = None,
    ) -> str:
        """Render a section list and return the concatenated text.

        Args:
            overrides: Options applied only for this call
            sections: Section list to walk; defaults to the instance's tree,
                and ``None`` renders nothing
            start_at: Index of the first entry to consider
            break_first: Stop after the first rendered leaf
            continuation: Outer continuation, kept for nested runs

        Subtree entries are never rendered directly; each leaf gets a fresh
        continuation that walks the subtree following it. A ``(name,
        subtree)`` entry renders ``name`` with ``subtree`` as its subsections.
        """
        if sections is _OWN_TREE:
            sections = self._sections
        if sections is None:
            return ""
        return self.apply_options(
            overrides, lambda: self._render_list(sections, start_at, break_first, continuation)
        ) or ""

    def _render_list(
        self,
        sections: SectionList,
        start_at: int,
        break_first: bool,
        outer: Optional[Continuation],
    ) -> str:
        entries = sections[start_at:] if start_at > 0 else sections
        out: List[str] = []
        for index, entry in enumerate(entries):
            if is_subtree(entry):
                continue
            if is_branch(entry):
                self.section, self.subsections = split_branch(
                    entry, where=self.definition.path, position=start_at + index
                )
            else:
                self.section = entry
                self.subsections = subtree_after(entries, index)
            out.append(self._renderer.render(self.section, self._continuation(outer)))
            if break_first:
                break
        return "".join(out)

    def _continuation(self, outer: Optional[Continuation]) -> Continuation:
        subsection_index = 0

        def render_next(overrides: Optional[Mapping[str, Any]]) -> str:
            nonlocal subsection_index
            subsections = self._subsections
            start = next_leaf(subsections, subsection_index)
            text = self.with_section(lambda: self.run(overrides, subsections, start, True, outer))
            subsection_index = start + 1
            return text

        return Continuation(render_next)

    def yieldall(self, overrides: Optional[Mapping[str, Any]] = None, **options: Any) -> str:
        """Render every entry of the current subtree in one call."""
        if options:
            overrides = {**(overrides or {}), **options}
        subsections = self._subsections
        logger.debug("Templates: yielding from %r", self)
        return self.with_section(lambda: self.run(overrides, subsections))

    # ------------------------------------------------------------------
    # Dispatch support
    # ------------------------------------------------------------------
    def lookup_operation(self, name: str) -> Optional[Callable[[Continuation], Optional[str]]]:
        for capability in self.capabilities:
            operation = capability.operations().get(name)
            if operation is not None:
                return operation
        found = self.definition.lookup_operation(name)
        if found is not None:
            return functools.partial(found, self)
        return None

    def section_filename(self, section: Any) -> str:
        """File basename for ``section``; a definition may install its own mapping."""
        hook = self.definition.lookup_section_filename()
        if hook is not None:
            return hook(self, section)
        return f"{section}{self.definition.registry.extension}"

    def cached_file(self, section: Any) -> Tuple[str, str]:
        """Return ``(text, filename)`` for a section, reading it at most once.

        Raises:
            MissingFileError: If no directory in the search path has the file.
        """
        key = str(section)
        cached = self._files.get(key)
        if cached is not None:
            return cached
        path = self.definition.find_file(self.section_filename(key))
        if path is None:
            raise MissingFileError(key, self.definition.path)
        logger.debug("Templates: reading %s for section %s", path, key)
        entry = (self.definition.registry.reader(path), str(path))
        self._files[key] = entry
        return entry

    def render_file(self, section: Any, continuation: Continuation) -> str:
        text, filename = self.cached_file(section)
        return self.definition.registry.text_renderer.render(
            text, self.bindings(), continuation, filename=filename
        )

    def bindings(self) -> Dict[str, Any]:
        """Names visible to template files.

        Capability helpers and options come first; the fixed names below
        always win over an option of the same name.
        """
        values: Dict[str, Any] = {}
        for capability in reversed(self.capabilities):
            values.update(capability.helpers())
        values.update(self._options)
        values.update(
            template=self,
            options=self._options,
            vars=self.vars,
            section=self.section,
            yieldall=self.yieldall,
            file=self.file,
            find_template=self.find_template,
        )
        return values

    # ------------------------------------------------------------------
    # Files and other templates
    # ------------------------------------------------------------------
    def file(self, basename: str) -> str:
        """Return the raw text of the first ``basename`` in the search path.

        Raises:
            MissingExplicitFileError: If no directory has the file.
        """
        path = require_file(self.definition.search_paths(), basename, self.definition.path)
        return self.definition.registry.reader(path)

    def find_template(self, *parts: Any) -> TemplateDefinition:
        """Resolve ``<options.template>/<parts...>/<options.format>``."""
        return self.definition.find_template(
            join_template_path(self._options.get("template"), *parts, self._options.get("format"))
        )

    def __repr__(self) -> str:
        return f"Template({self.definition.path}) [section={self.section}]"


__all__ = ["TemplateInstance"]
