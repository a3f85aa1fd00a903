from __future__ import annotations

"""
Run Configuration Defaults.

Holds the constants of the structure formats and the default runtime
configuration dictionary that CLI overrides are merged into.
"""

import os
from typing import Any, Dict, Tuple

# -----------------------------------------------------------------------------
# Constants & Defaults
# -----------------------------------------------------------------------------
CURRENT_VERSION = "1.0.0"

DEFAULT_STRUCTURE_FILE = "development_structure.txt"
DEFAULT_INDENT_WIDTH = 4
DEFAULT_FORMAT = "auto"

FORMAT_AUTO = "auto"
FORMAT_TEXT = "text"
FORMAT_YAML = "yaml"
SUPPORTED_FORMATS: Tuple[str, ...] = (FORMAT_AUTO, FORMAT_TEXT, FORMAT_YAML)

YAML_EXTENSIONS: Tuple[str, ...] = (".yaml", ".yml")
COMMENT_PREFIX = "#"

# Per-node keys accepted by the YAML format
KEY_PERMISSIONS = "permissions"
KEY_OWNER = "owner"
KEY_DEFAULT_FILES = "default_files"
KEY_SUBDIRS = "subdirs"
NODE_KEYS: Tuple[str, ...] = (KEY_PERMISSIONS, KEY_OWNER, KEY_DEFAULT_FILES, KEY_SUBDIRS)


# -----------------------------------------------------------------------------
# Configuration Models (Dict-based)
# -----------------------------------------------------------------------------
def get_default_config() -> Dict[str, Any]:
    """
    Generate the default runtime configuration.

    Returns:
        Dict[str, Any]: Default configuration values.
    """
    return {
        # IO Paths
        "config_file": DEFAULT_STRUCTURE_FILE,
        "base_dir": os.getcwd(),

        # Parsing
        "fmt": DEFAULT_FORMAT,
        "indent_width": DEFAULT_INDENT_WIDTH,
        "strict": False,

        # Execution
        "dry_run": False,
        "print_tree": False,
    }
