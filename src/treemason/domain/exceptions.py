from __future__ import annotations

"""
Domain Exceptions.

Parsing failures are reported as ValueError subclasses so callers that only
know about built-in exceptions still handle them correctly.
"""

from typing import Optional


class StructureSyntaxError(ValueError):
    """
    Raised when a structure description cannot be turned into a node tree.

    Attributes:
        message: Human readable description of the problem.
        line: 1-based source line, if known.
        source: Path of the offending file, if known.
    """

    def __init__(self, message: str, line: Optional[int] = None, source: Optional[str] = None):
        self.message = message
        self.line = line
        self.source = source
        super().__init__(self._format())

    def _format(self) -> str:
        location = ""
        if self.source:
            location = self.source
        if self.line:
            location = f"{location}:{self.line}" if location else f"line {self.line}"
        return f"{location}: {self.message}" if location else self.message

    def with_source(self, source: str) -> "StructureSyntaxError":
        """Return a copy of the error bound to the given file path."""
        return StructureSyntaxError(self.message, self.line, source)
