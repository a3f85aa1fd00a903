from __future__ import annotations

"""
Unit tests for the Indentation Outline Parser.

Verifies:
1. Parent resolution from indentation depth.
2. Skipping of blank and comment lines, tab expansion.
3. Rejection of inconsistent dedents and invalid names.
4. Merging of duplicate siblings.
"""

import pytest

from treemason.core.parsing.indent_parser import parse_indented_text
from treemason.domain.exceptions import StructureSyntaxError
from treemason.domain.tree_models import iter_paths


def paths_of(text: str, **kwargs) -> list:
    """Helper returning the '/'-joined relative paths of a parsed outline."""
    nodes, _ = parse_indented_text(text, **kwargs)
    return [p.replace("\\", "/") for p in iter_paths(nodes)]


def test_nesting_follows_indentation() -> None:
    """Each indentation step opens one level below the previous line."""
    text = "root\n    a\n        b\n    c\nother\n"

    assert paths_of(text) == ["root", "root/a", "root/a/b", "root/c", "other"]


def test_multi_level_dedent_returns_to_open_column() -> None:
    """Dedenting several levels at once lands on the matching ancestor."""
    text = "a\n  b\n    c\n      d\n  e\n"

    assert paths_of(text) == ["a", "a/b", "a/b/c", "a/b/c/d", "a/e"]


def test_irregular_indent_steps_are_one_level() -> None:
    """Depth is determined by nesting, not by the number of columns."""
    text = "a\n  b\n         c\n"

    assert paths_of(text) == ["a", "a/b", "a/b/c"]


def test_blank_and_comment_lines_are_skipped() -> None:
    text = "# layout\n\nsrc\n\n    # nested comment\n    core\n   \n"

    assert paths_of(text) == ["src", "src/core"]


def test_tabs_expand_to_indent_width() -> None:
    """A tab counts as indent_width columns when mixed with spaces."""
    text = "a\n\tb\n  c\n"

    # With width 2 the tab and the two spaces are the same column
    assert paths_of(text, indent_width=2) == ["a", "a/b", "a/c"]


def test_trailing_slash_and_whitespace_are_stripped() -> None:
    text = "src/  \n    app/\n"

    assert paths_of(text) == ["src", "src/app"]


def test_line_numbers_are_recorded() -> None:
    nodes, _ = parse_indented_text("\n# c\nsrc\n    app\n")

    assert nodes[0].line == 3
    assert nodes[0].children[0].line == 4


def test_duplicate_siblings_are_merged_with_warning() -> None:
    """A repeated sibling name is one node that collects both child lists."""
    text = "src\n    a\nsrc\n    b\n"

    nodes, warnings = parse_indented_text(text)

    assert len(nodes) == 1
    assert [c.name for c in nodes[0].children] == ["a", "b"]
    assert len(warnings) == 1
    assert "duplicate entry 'src'" in warnings[0]


def test_empty_input_yields_no_nodes() -> None:
    nodes, warnings = parse_indented_text("\n\n# nothing here\n")

    assert nodes == []
    assert warnings == []


def test_unmatched_dedent_raises() -> None:
    """A dedent to a column that was never opened is a syntax error."""
    text = "a\n    b\n        c\n  d\n"

    with pytest.raises(StructureSyntaxError) as exc:
        parse_indented_text(text)

    assert exc.value.line == 4
    assert "Unindent" in str(exc.value)


def test_indented_first_entry_raises() -> None:
    with pytest.raises(StructureSyntaxError) as exc:
        parse_indented_text("\n    src\n")

    assert exc.value.line == 2


@pytest.mark.parametrize("bad", ["..", ".", "a/b", "a\\b", "/"])
def test_invalid_names_raise(bad: str) -> None:
    with pytest.raises(StructureSyntaxError):
        parse_indented_text(f"root\n    {bad}\n")


def test_nodes_carry_no_metadata() -> None:
    """The text format only declares directory names."""
    nodes, _ = parse_indented_text("src\n")

    assert nodes[0].permissions is None
    assert nodes[0].owner is None
    assert nodes[0].default_files == ()
