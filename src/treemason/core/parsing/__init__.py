from __future__ import annotations

from .indent_parser import parse_indented_text
from .loader import ParsedStructure, detect_format, load_structure
from .yaml_parser import parse_yaml_structure

__all__ = [
    "ParsedStructure",
    "detect_format",
    "load_structure",
    "parse_indented_text",
    "parse_yaml_structure",
]
