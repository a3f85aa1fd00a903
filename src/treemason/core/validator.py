from __future__ import annotations

"""
Configuration Validation Service.

Gatekeeper for the build engine: normalizes the run configuration
dictionary (type coercion and default injection) and performs the
pre-flight checks on the structure file and the base directory.
"""

import logging
import os
from typing import Any, Dict, List, Optional, Tuple

from treemason.domain.config import SUPPORTED_FORMATS, get_default_config
from treemason.infra.fs import is_writable_dir, normalize_path

logger = logging.getLogger(__name__)

MIN_INDENT_WIDTH = 1
MAX_INDENT_WIDTH = 16


# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def validate_config(
        config: Any,
        *,
        strict: bool = False,
) -> Tuple[Dict[str, Any], List[str]]:
    """
    Validate and normalize the run configuration dictionary.

    Converts untrusted values (CLI strings, JSON numbers) into strictly
    typed parameters and fills missing keys with defaults. Paths are
    returned absolute.

    Args:
        config: Raw configuration data (usually a dictionary).
        strict: If True, raise on type mismatch instead of coercing.

    Returns:
        Tuple[Dict[str, Any], List[str]]: Normalized configuration and warnings.
    """
    warnings: List[str] = []
    defaults = get_default_config()

    if not isinstance(config, dict):
        msg = f"Invalid config type: expected dict, received {type(config).__name__}."
        if strict:
            raise TypeError(msg)
        warnings.append(f"{msg} Using defaults.")
        config = {}

    merged: Dict[str, Any] = dict(defaults)
    merged.update({k: v for k, v in config.items() if v is not None})

    for field in ("config_file", "base_dir", "fmt"):
        merged[field] = _as_str(merged.get(field), defaults[field], field, warnings, strict)

    for field in ("dry_run", "strict", "print_tree"):
        merged[field] = _as_bool(merged.get(field), defaults[field], field, warnings, strict)

    merged["indent_width"] = _as_int_range(
        merged.get("indent_width"), defaults["indent_width"], "indent_width",
        MIN_INDENT_WIDTH, MAX_INDENT_WIDTH, warnings, strict,
    )

    fmt = merged["fmt"].lower()
    if fmt not in SUPPORTED_FORMATS:
        msg = f"Invalid field 'fmt': '{merged['fmt']}' is not one of {', '.join(SUPPORTED_FORMATS)}."
        if strict:
            raise ValueError(msg)
        warnings.append(f"{msg} Using '{defaults['fmt']}'.")
        fmt = defaults["fmt"]
    merged["fmt"] = fmt

    merged["config_file"] = normalize_path(merged["config_file"], defaults["config_file"])
    merged["base_dir"] = normalize_path(merged["base_dir"], defaults["base_dir"])

    return merged, warnings


def check_config_file(path: str) -> Optional[str]:
    """
    Verify the structure file can be read.

    Returns:
        Optional[str]: Error message, or None if the file is usable.
    """
    if not os.path.exists(path):
        return f"Structure file does not exist: {path}"
    if not os.path.isfile(path):
        return f"Structure file is not a regular file: {path}"
    if not os.access(path, os.R_OK):
        return f"Structure file is not readable: {path}"
    return None


def check_base_directory(path: str) -> Optional[str]:
    """
    Verify the base directory exists and accepts new entries.

    Returns:
        Optional[str]: Error message, or None if the directory is usable.
    """
    if not os.path.exists(path):
        return f"Base directory does not exist: {path}"
    if not os.path.isdir(path):
        return f"Base directory is not a directory: {path}"
    if not is_writable_dir(path):
        return f"Base directory is not writable: {path}"
    return None


# -----------------------------------------------------------------------------
# PRIVATE HELPERS: TYPE COERCION
# -----------------------------------------------------------------------------

def _as_str(value: Any, fallback: str, field: str, warnings: List[str], strict: bool) -> str:
    """Validate and sanitize string inputs."""
    if value is None:
        return fallback
    if isinstance(value, str):
        v = value.strip()
        return v if v else fallback

    msg = f"Invalid field '{field}': expected str, received {type(value).__name__}."
    if strict:
        raise TypeError(msg)
    warnings.append(f"{msg} Using fallback.")
    return fallback


def _as_bool(value: Any, fallback: bool, field: str, warnings: List[str], strict: bool) -> bool:
    """Coerce various input types into native booleans."""
    if isinstance(value, bool):
        return value
    if value is None:
        return fallback

    if not strict:
        if isinstance(value, (int, float)) and value in (0, 1):
            warnings.append(f"Field '{field}' converted from number {value} to bool.")
            return bool(value)
        if isinstance(value, str):
            s = value.strip().lower()
            if s in ("true", "1", "yes", "y", "on"):
                warnings.append(f"Field '{field}' converted from '{value}' to True.")
                return True
            if s in ("false", "0", "no", "n", "off"):
                warnings.append(f"Field '{field}' converted from '{value}' to False.")
                return False

    msg = f"Invalid field '{field}': expected bool, received {type(value).__name__}."
    if strict:
        raise TypeError(msg)
    warnings.append(f"{msg} Using fallback.")
    return fallback


def _as_int_range(
        value: Any,
        fallback: int,
        field: str,
        low: int,
        high: int,
        warnings: List[str],
        strict: bool,
) -> int:
    """Coerce an integer and clamp it into [low, high]."""
    if value is None:
        return fallback

    if isinstance(value, bool):
        number = None
    elif isinstance(value, int):
        number = value
    elif isinstance(value, str) and not strict and value.strip().isdigit():
        number = int(value.strip())
        warnings.append(f"Field '{field}' converted from '{value}' to {number}.")
    else:
        number = None

    if number is None:
        msg = f"Invalid field '{field}': expected int, received {type(value).__name__}."
        if strict:
            raise TypeError(msg)
        warnings.append(f"{msg} Using fallback.")
        return fallback

    if not low <= number <= high:
        msg = f"Field '{field}' out of range [{low}, {high}]: {number}."
        if strict:
            raise ValueError(msg)
        clamped = min(max(number, low), high)
        warnings.append(f"{msg} Clamped to {clamped}.")
        return clamped

    return number
