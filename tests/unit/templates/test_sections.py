from __future__ import annotations

import pytest

from trellis.core.templates.errors import InvalidSectionEntryError
from trellis.core.templates.sections import (
    next_leaf,
    normalize_tree,
    split_branch,
    subtree_after,
)


class TestNormalizeTree:
    def test_flat_tree_is_kept(self) -> None:
        tree = ["header", "body", ["title", "items", ["item"]], "footer"]
        assert normalize_tree(tree) == tree

    def test_tuple_branches_expand_to_flat_form(self) -> None:
        tree = ["header", ("body", ["title", ("items", ["item"])]), "footer"]
        assert normalize_tree(tree) == ["header", "body", ["title", "items", ["item"]], "footer"]

    def test_leading_subtree_is_kept_as_placeholder(self) -> None:
        assert normalize_tree([["orphan"], "a"]) == [["orphan"], "a"]
        assert normalize_tree([("x", [["a"], ["b"]])]) == ["x", [["a"], ["b"]]]

    def test_placeholder_after_subtree_is_allowed(self) -> None:
        assert normalize_tree(["a", ["x"], ["y"], "b"]) == ["a", ["x"], ["y"], "b"]

    def test_unsupported_entry_is_rejected(self) -> None:
        with pytest.raises(InvalidSectionEntryError, match="unsupported section entry #1"):
            normalize_tree(["a", 42])

    def test_malformed_tuple_is_rejected(self) -> None:
        with pytest.raises(InvalidSectionEntryError):
            normalize_tree([("a", "b", "c")])

    def test_input_is_not_mutated(self) -> None:
        tree = [("a", ["b"])]
        normalize_tree(tree)
        assert tree == [("a", ["b"])]


def test_subtree_after_returns_following_list_only() -> None:
    entries = ["a", ["x"], "b"]
    assert subtree_after(entries, 0) == ["x"]
    assert subtree_after(entries, 2) is None


def test_next_leaf_skips_placeholders() -> None:
    entries = ["x", ["k"], ["p"], "y"]
    assert next_leaf(entries, 0) == 0
    assert next_leaf(entries, 1) == 3
    assert next_leaf(entries, 4) == 4
    assert next_leaf(None, 2) == 2


def test_split_branch_normalizes_subtree() -> None:
    assert split_branch(("body", ("title", ("items", ["item"])))) == ("body", ["title", "items", ["item"]])
    with pytest.raises(InvalidSectionEntryError, match="branch entry #3 in page"):
        split_branch(("body",), where="page", position=3)
