from __future__ import annotations

"""
Integration tests for FileSystem Infrastructure.

Validates directory and placeholder creation, mode parsing and application,
and ownership specification handling on the real filesystem.
"""

import os
import stat
from pathlib import Path
from unittest.mock import patch

import pytest

from treemason.infra.fs import (
    apply_mode,
    apply_owner,
    create_placeholder,
    ensure_directory,
    invalid_component_reason,
    normalize_path,
    parse_mode,
    parse_owner,
)

posix_only = pytest.mark.skipif(os.name != "posix", reason="POSIX permission semantics")

# -----------------------------------------------------------------------------
# PATH HELPERS
# -----------------------------------------------------------------------------

def test_normalize_path_uses_fallback(tmp_path: Path) -> None:
    assert normalize_path("  ", str(tmp_path)) == str(tmp_path)
    assert normalize_path(None, str(tmp_path)) == str(tmp_path)


@pytest.mark.parametrize("name", ["src", ".gitkeep", "my dir", "v1.2"])
def test_valid_components(name: str) -> None:
    assert invalid_component_reason(name) is None


@pytest.mark.parametrize("name", ["", ".", "..", "a/b", "a\\b", "nul\0"])
def test_invalid_components(name: str) -> None:
    assert invalid_component_reason(name) is not None

# -----------------------------------------------------------------------------
# DIRECTORY & FILE CREATION
# -----------------------------------------------------------------------------

def test_ensure_directory_is_idempotent(tmp_path: Path) -> None:
    target = tmp_path / "new"

    assert ensure_directory(str(target)) is True
    assert target.is_dir()
    assert ensure_directory(str(target)) is False


def test_ensure_directory_rejects_existing_file(tmp_path: Path) -> None:
    blocker = tmp_path / "blocker"
    blocker.write_text("x", encoding="utf-8")

    with pytest.raises(NotADirectoryError):
        ensure_directory(str(blocker))


def test_ensure_directory_missing_parent(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        ensure_directory(str(tmp_path / "missing" / "child"))


@posix_only
def test_ensure_directory_refuses_symlinks(tmp_path: Path) -> None:
    target = tmp_path / "real"
    target.mkdir()
    link = tmp_path / "link"
    link.symlink_to(target, target_is_directory=True)

    with pytest.raises(OSError, match="symbolic link"):
        ensure_directory(str(link))


def test_create_placeholder_never_overwrites(tmp_path: Path) -> None:
    target = tmp_path / "README.md"

    assert create_placeholder(str(target)) is True
    assert target.read_text(encoding="utf-8") == ""

    target.write_text("keep me", encoding="utf-8")
    assert create_placeholder(str(target)) is False
    assert target.read_text(encoding="utf-8") == "keep me"

# -----------------------------------------------------------------------------
# MODE HANDLING
# -----------------------------------------------------------------------------

@pytest.mark.parametrize(
    "spec, expected",
    [
        ("755", 0o755),
        ("0750", 0o750),
        ("2775", 0o2775),
        (0o700, 0o700),
    ],
)
def test_parse_octal_modes(spec, expected: int) -> None:
    assert parse_mode(spec) == expected


@pytest.mark.parametrize(
    "spec, current, expected",
    [
        ("u=rwx,g=rx,o=", 0o777, 0o750),
        ("a+x", 0o644, 0o755),
        ("go-w", 0o777, 0o755),
        ("+r", 0o000, 0o444),
        ("g=u", 0o740, 0o770),
        ("u+s", 0o755, 0o4755),
        ("+t", 0o777, 0o1777),
    ],
)
def test_parse_symbolic_modes(spec: str, current: int, expected: int) -> None:
    assert parse_mode(spec, current) == expected


def test_symbolic_capital_x_applies_to_directories() -> None:
    assert parse_mode("a+X", stat.S_IFDIR | 0o600) == 0o711
    assert parse_mode("a+X", stat.S_IFREG | 0o600) == 0o600


@pytest.mark.parametrize("spec", ["", "rwx", "8755", "u*x", "z=r", 0o17777])
def test_parse_mode_rejects_garbage(spec) -> None:
    with pytest.raises(ValueError):
        parse_mode(spec)


@posix_only
def test_apply_mode_changes_permissions(tmp_path: Path) -> None:
    target = tmp_path / "secret"
    target.mkdir()

    apply_mode(str(target), "0700")
    assert stat.S_IMODE(target.stat().st_mode) == 0o700

    apply_mode(str(target), "g+rx")
    assert stat.S_IMODE(target.stat().st_mode) == 0o750


@posix_only
def test_apply_mode_can_keep_owner_access(tmp_path: Path) -> None:
    target = tmp_path / "shared"
    target.mkdir()

    resolved = apply_mode(str(target), "2555", keep_owner_access=True)

    assert resolved == 0o2555
    assert stat.S_IMODE(target.stat().st_mode) == 0o2755

# -----------------------------------------------------------------------------
# OWNERSHIP HANDLING
# -----------------------------------------------------------------------------

@pytest.mark.parametrize(
    "spec, expected",
    [
        ("alice", ("alice", None)),
        ("alice:staff", ("alice", "staff")),
        (":staff", (None, "staff")),
        ("alice:", ("alice", None)),
        ("1000:100", (1000, 100)),
        ("john.doe", ("john.doe", None)),
    ],
)
def test_parse_owner(spec: str, expected) -> None:
    assert parse_owner(spec) == expected


@pytest.mark.parametrize("spec", ["", ":", "  "])
def test_parse_owner_rejects_empty(spec: str) -> None:
    with pytest.raises(ValueError):
        parse_owner(spec)


def test_apply_owner_delegates_to_shutil(tmp_path: Path) -> None:
    with patch("treemason.infra.fs.shutil.chown") as mock_chown:
        apply_owner(str(tmp_path), "alice:staff")

    mock_chown.assert_called_once_with(str(tmp_path), user="alice", group="staff")


@posix_only
def test_apply_owner_unknown_user_raises_lookup_error(tmp_path: Path) -> None:
    with pytest.raises(LookupError):
        apply_owner(str(tmp_path), "treemason-no-such-user-xyz")
