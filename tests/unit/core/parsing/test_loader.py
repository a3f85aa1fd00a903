from __future__ import annotations

"""
Unit tests for the Structure File Loader.

Verifies format detection and error propagation from disk to parsers.
"""

from pathlib import Path

import pytest

from treemason.core.parsing.loader import detect_format, load_structure
from treemason.domain.exceptions import StructureSyntaxError


@pytest.mark.parametrize(
    "path, requested, expected",
    [
        ("layout.yaml", "auto", "yaml"),
        ("layout.YML", "auto", "yaml"),
        ("layout.txt", "auto", "text"),
        ("development_structure", "auto", "text"),
        ("layout.txt", "yaml", "yaml"),
        ("layout.yaml", "text", "text"),
        ("layout.yaml", " YAML ", "yaml"),
    ],
)
def test_detect_format(path: str, requested: str, expected: str) -> None:
    assert detect_format(path, requested) == expected


def test_detect_format_rejects_unknown() -> None:
    with pytest.raises(ValueError, match="Unknown format"):
        detect_format("layout.txt", "toml")


def test_load_text_outline(outline_file: Path) -> None:
    parsed = load_structure(str(outline_file))

    assert parsed.fmt == "text"
    assert [n.name for n in parsed.nodes] == ["project"]
    assert [c.name for c in parsed.nodes[0].children] == ["src", "docs", "tests"]


def test_load_yaml_description(yaml_file: Path) -> None:
    parsed = load_structure(str(yaml_file))

    assert parsed.fmt == "yaml"
    project = parsed.nodes[0]
    assert project.permissions == "755"
    assert project.default_files == ("README.md",)


def test_forced_format_overrides_extension(tmp_path: Path) -> None:
    path = tmp_path / "layout.cfg"
    path.write_text("src:\n  subdirs: [a]\n", encoding="utf-8")

    parsed = load_structure(str(path), "yaml")

    assert parsed.fmt == "yaml"
    assert parsed.nodes[0].children[0].name == "a"


def test_missing_file_raises_file_not_found(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        load_structure(str(tmp_path / "missing.txt"))


def test_syntax_error_is_bound_to_source(tmp_path: Path) -> None:
    path = tmp_path / "broken.txt"
    path.write_text("a\n    b\n  c\n", encoding="utf-8")

    with pytest.raises(StructureSyntaxError) as exc:
        load_structure(str(path))

    assert exc.value.source == str(path)
    assert str(exc.value).startswith(f"{path}:3:")


def test_binary_file_is_a_syntax_error(tmp_path: Path) -> None:
    path = tmp_path / "blob.txt"
    path.write_bytes(b"\xff\xfe\x00garbage")

    with pytest.raises(StructureSyntaxError, match="UTF-8"):
        load_structure(str(path))


def test_byte_order_mark_is_not_part_of_the_first_name(tmp_path: Path) -> None:
    path = tmp_path / "bom.txt"
    path.write_bytes("\ufeffproject\n    src\n".encode("utf-8"))

    parsed = load_structure(str(path))

    assert parsed.nodes[0].name == "project"
    assert parsed.nodes[0].children[0].name == "src"


def test_byte_order_mark_in_yaml(tmp_path: Path) -> None:
    path = tmp_path / "bom.yaml"
    path.write_bytes("\ufeffproject:\n  subdirs: [src]\n".encode("utf-8"))

    parsed = load_structure(str(path))

    assert parsed.nodes[0].name == "project"
