from __future__ import annotations

"""
Global Pytest Configuration and Fixtures.

This module sets up the testing environment, including:
1. Path manipulation to ensure the 'src' directory is importable.
2. Shared fixtures for structure files and run configurations.
"""

import os
import sys
from pathlib import Path
from typing import Any, Dict

import pytest

# -----------------------------------------------------------------------------
# Path Configuration
# -----------------------------------------------------------------------------
_SRC_PATH = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "src"))
if _SRC_PATH not in sys.path:
    sys.path.insert(0, _SRC_PATH)


# -----------------------------------------------------------------------------
# Shared Fixtures
# -----------------------------------------------------------------------------
SAMPLE_OUTLINE = """\
project
    src
        app
        lib
    docs
    tests
        unit
"""

SAMPLE_YAML = """\
project:
  permissions: "755"
  default_files: [README.md]
  subdirs:
    src:
      subdirs:
        app:
        lib:
          default_files:
            - __init__.py
    logs:
      permissions: "0700"
"""


@pytest.fixture
def base_dir(tmp_path: Path) -> Path:
    """Return an empty, writable base directory."""
    target = tmp_path / "base"
    target.mkdir()
    return target


@pytest.fixture
def outline_file(tmp_path: Path) -> Path:
    """Write the sample indentation outline to disk."""
    path = tmp_path / "development_structure.txt"
    path.write_text(SAMPLE_OUTLINE, encoding="utf-8")
    return path


@pytest.fixture
def yaml_file(tmp_path: Path) -> Path:
    """Write the sample YAML description to disk."""
    path = tmp_path / "structure.yaml"
    path.write_text(SAMPLE_YAML, encoding="utf-8")
    return path


@pytest.fixture
def run_config(outline_file: Path, base_dir: Path) -> Dict[str, Any]:
    """
    Return a complete run configuration dictionary.

    Reflects the keys defined in 'treemason.domain.config'.
    """
    return {
        "config_file": str(outline_file),
        "base_dir": str(base_dir),
        "fmt": "auto",
        "indent_width": 4,
        "strict": False,
        "dry_run": False,
        "print_tree": False,
    }
