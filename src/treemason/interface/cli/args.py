from __future__ import annotations

"""
CLI Argument Definition and Mapping.

Defines the command-line interface schema and translates the parsed
argparse namespace into run configuration overrides.
"""

import argparse
from typing import Any, Dict

from treemason.domain.config import CURRENT_VERSION, DEFAULT_INDENT_WIDTH, SUPPORTED_FORMATS
from treemason.infra.logging.config import DEFAULT_LOG_BACKUP_COUNT, DEFAULT_LOG_MAX_BYTES

# -----------------------------------------------------------------------------
# ARGUMENT DEFINITION
# -----------------------------------------------------------------------------

def build_parser() -> argparse.ArgumentParser:
    """
    Construct the argument parser for the treemason CLI.

    Returns:
        argparse.ArgumentParser: Configured parser instance.
    """
    p = argparse.ArgumentParser(
        prog="treemason",
        description=(
            "Create a directory hierarchy from an indented text outline or a "
            "YAML description with permissions, owners and placeholder files."
        ),
    )

    # --- Path Management ---
    p.add_argument(
        "config_file",
        help="Structure description (indented text, or YAML for .yaml/.yml files).",
    )
    p.add_argument(
        "base_directory",
        nargs="?",
        default=None,
        help="Existing directory to create the structure in (default: current directory).",
    )

    # --- Parsing ---
    p.add_argument(
        "--format",
        dest="fmt",
        choices=SUPPORTED_FORMATS,
        default=None,
        help="Force the input format instead of detecting it from the file extension.",
    )
    p.add_argument(
        "--indent-width",
        dest="indent_width",
        type=int,
        default=None,
        help=f"Columns per tab in text outlines (default: {DEFAULT_INDENT_WIDTH}).",
    )
    p.add_argument(
        "--strict",
        action="store_true",
        help="Treat unknown YAML node keys as errors.",
    )

    # --- Runtime Constraints and Safety ---
    p.add_argument(
        "--dry-run",
        action="store_true",
        help="Report what would be created without touching the filesystem.",
    )

    # --- Output ---
    p.add_argument(
        "--print-tree",
        action="store_true",
        help="Print the parsed structure before building it.",
    )
    p.add_argument(
        "--json",
        dest="json_output",
        action="store_true",
        help="Print the build result as JSON.",
    )

    # --- Diagnostics ---
    p.add_argument(
        "--debug",
        action="store_true",
        help="Elevate logging verbosity to DEBUG.",
    )
    p.add_argument(
        "--log-file",
        dest="log_file",
        default=None,
        help="Also write log records to this rotating file.",
    )
    p.add_argument(
        "--log-max-bytes",
        dest="log_max_bytes",
        type=_non_negative_int,
        default=None,
        help=f"Roll the log file over at this size; 0 disables rotation (default: {DEFAULT_LOG_MAX_BYTES}).",
    )
    p.add_argument(
        "--log-backups",
        dest="log_backups",
        type=_non_negative_int,
        default=None,
        help=f"Rolled-over log files to keep (default: {DEFAULT_LOG_BACKUP_COUNT}).",
    )
    p.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {CURRENT_VERSION}",
    )

    return p

# -----------------------------------------------------------------------------
# ARGUMENT MAPPING
# -----------------------------------------------------------------------------

def args_to_overrides(args: argparse.Namespace) -> Dict[str, Any]:
    """
    Translate the argparse Namespace into a configuration dictionary.

    Args:
        args: Parsed command-line arguments.

    Returns:
        Dict[str, Any]: Configuration overrides subset.
    """
    overrides: Dict[str, Any] = {}

    overrides["config_file"] = args.config_file
    overrides["base_dir"] = args.base_directory
    overrides["fmt"] = args.fmt
    overrides["indent_width"] = args.indent_width

    if args.strict:
        overrides["strict"] = True
    if args.dry_run:
        overrides["dry_run"] = True
    if args.print_tree:
        overrides["print_tree"] = True

    return overrides

# -----------------------------------------------------------------------------
# ARGUMENT TYPES
# -----------------------------------------------------------------------------

def _non_negative_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected an integer, got '{value}'")
    if number < 0:
        raise argparse.ArgumentTypeError(f"must be 0 or greater, got {number}")
    return number
