from __future__ import annotations

"""
Structure File Loader.

Resolves the input format of a structure file, reads it and dispatches to
the matching parser.
"""

import logging
import os
from dataclasses import dataclass, field
from typing import List

from treemason.core.parsing.indent_parser import parse_indented_text
from treemason.core.parsing.yaml_parser import parse_yaml_structure
from treemason.domain.config import (
    DEFAULT_INDENT_WIDTH,
    FORMAT_AUTO,
    FORMAT_TEXT,
    FORMAT_YAML,
    SUPPORTED_FORMATS,
    YAML_EXTENSIONS,
)
from treemason.domain.exceptions import StructureSyntaxError
from treemason.domain.tree_models import StructureNode

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ParsedStructure:
    """
    Outcome of loading a structure file.

    Attributes:
        nodes: Top-level directory nodes.
        fmt: Format actually used ('text' or 'yaml').
        warnings: Non-fatal parser observations.
    """
    nodes: List[StructureNode]
    fmt: str
    warnings: List[str] = field(default_factory=list)


def detect_format(path: str, requested: str = FORMAT_AUTO) -> str:
    """
    Resolve the parser to use for a structure file.

    Args:
        path: Structure file path.
        requested: 'auto', 'text' or 'yaml'.

    Returns:
        str: 'text' or 'yaml'.

    Raises:
        ValueError: If the requested format is unknown.
    """
    fmt = (requested or FORMAT_AUTO).strip().lower()
    if fmt not in SUPPORTED_FORMATS:
        raise ValueError(f"Unknown format '{requested}'. Expected one of: {', '.join(SUPPORTED_FORMATS)}")
    if fmt != FORMAT_AUTO:
        return fmt
    ext = os.path.splitext(path)[1].lower()
    return FORMAT_YAML if ext in YAML_EXTENSIONS else FORMAT_TEXT


def load_structure(
        path: str,
        fmt: str = FORMAT_AUTO,
        *,
        indent_width: int = DEFAULT_INDENT_WIDTH,
        strict: bool = False,
) -> ParsedStructure:
    """
    Read and parse a structure file.

    Args:
        path: Structure file path.
        fmt: Requested format ('auto', 'text' or 'yaml').
        indent_width: Tab width for the text format.
        strict: Reject unknown YAML node keys.

    Returns:
        ParsedStructure: Parsed nodes, resolved format and warnings.

    Raises:
        FileNotFoundError: If the file does not exist.
        OSError: If the file cannot be read.
        StructureSyntaxError: If the content cannot be parsed.
    """
    resolved = detect_format(path, fmt)
    logger.debug(f"Reading structure file '{path}' as {resolved}.")

    try:
        with open(path, "r", encoding="utf-8-sig") as f:
            text = f.read()
    except UnicodeDecodeError as e:
        raise StructureSyntaxError(f"File is not valid UTF-8 text ({e.reason})", source=path) from e

    try:
        if resolved == FORMAT_YAML:
            nodes, warnings = parse_yaml_structure(text, strict=strict)
        else:
            nodes, warnings = parse_indented_text(text, indent_width=indent_width)
    except StructureSyntaxError as e:
        raise e.with_source(path) from e

    return ParsedStructure(nodes=nodes, fmt=resolved, warnings=warnings)
