from __future__ import annotations

import pytest

from trellis.core.templates import (
    CapabilitySet,
    GraphCapabilities,
    HtmlCapabilities,
    TemplateRegistry,
    TextCapabilities,
    section_operation,
)


@pytest.fixture
def page(make_template, registry: TemplateRegistry):
    def _page(tree, files=None, ops=None):
        make_template("page", files)

        def init(builder) -> None:
            builder.set_sections(tree)
            for name, fn in (ops or {}).items():
                builder.register_operation(name, fn)

        registry.register_initializer("page", init)
        return registry.resolve("page")

    return _page


class TestFormatSelection:
    @pytest.mark.parametrize(
        "fmt, expected",
        [("html", HtmlCapabilities), ("text", TextCapabilities), ("graph", GraphCapabilities)],
    )
    def test_format_picks_capability_set(self, page, fmt, expected) -> None:
        instance = page([]).create({"format": fmt})
        assert [type(c) for c in instance.capabilities] == [expected]

    def test_unknown_format_adds_nothing(self, page) -> None:
        definition = page([])
        assert definition.create({"format": "pdf"}).capabilities == []
        assert definition.create().capabilities == []

    def test_capability_operation_outranks_definition_and_file(self, page) -> None:
        definition = page(["separator"], {"separator.j2": "file"}, {"separator": lambda t, c: "op"})
        assert definition.run({"format": "html"}) == "<hr />\n"
        assert definition.run({"format": "text", "width": 3}) == "---\n"
        assert definition.run({"format": "pdf"}) == "op"


class TestHelpers:
    def test_html_escape_helper(self, page) -> None:
        definition = page(["title"], {"title.j2": "<h1>{{ h(title) }}</h1>"})
        assert definition.run({"format": "html", "title": "a<b & c"}) == "<h1>a&lt;b &amp; c</h1>"

    def test_html_tag_helper(self, page) -> None:
        instance = page([]).create({"format": "html"})
        html = instance.capabilities[0]
        assert html.tag("a", "x", href="/?a=1&b=2", class_="link") == '<a href="/?a=1&amp;b=2" class="link">x</a>'

    def test_text_helpers(self, page) -> None:
        definition = page(["body"], {"body.j2": "{{ wrap(text, 10) }}\n{{ indent('x') }}\n{{ hr(4, '=') }}"})
        assert definition.run({"format": "text", "text": "one two three four"}) == "one two\nthree four\n  x\n===="

    def test_graph_helpers(self, page) -> None:
        definition = page(["graph"], {"graph.j2": "{{ node('a', label='A') }} {{ edge('a', 'b') }}"})
        assert definition.run({"format": "graph"}) == '"a" [label="A"]; "a" -> "b";'

    def test_graph_quote_escapes(self, page) -> None:
        graph = page([]).create({"format": "graph"}).capabilities[0]
        assert graph.quote('say "hi"') == '"say \\"hi\\""'

    def test_helpers_are_missing_without_format(self, page) -> None:
        from jinja2 import UndefinedError

        definition = page(["title"], {"title.j2": "{{ h('x') }}"})
        with pytest.raises(UndefinedError):
            definition.run()


class Badges(CapabilitySet):
    name = "badges"
    HELPERS = ("badge",)

    def badge(self, label: str) -> str:
        return f"[{label}]"

    @section_operation
    def separator(self, continuation) -> str:
        return "~~~"


def test_extra_capabilities_apply_to_every_format(page, registry: TemplateRegistry) -> None:
    registry.register_capabilities(Badges)
    definition = page(["separator", "title"], {"title.j2": "{{ badge(h('<')) }}"})
    assert definition.run({"format": "html"}) == "~~~[&lt;]"


def test_operations_only_include_marked_methods(page) -> None:
    instance = page([]).create({"format": "text"})
    text = instance.capabilities[0]
    assert set(text.operations()) == {"separator"}
    assert set(text.helpers()) == {"wrap", "indent", "hr"}
