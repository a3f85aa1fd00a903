from __future__ import annotations

"""
Indentation-Based Structure Parser.

Turns a plain text outline (one directory per line, nesting expressed by
leading whitespace) into a StructureNode tree. Parent resolution uses a
stack of open indentation columns, the same way Python resolves blocks:
deeper lines open a child level, and a dedent must land on a column that
is already open.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from treemason.domain.config import COMMENT_PREFIX, DEFAULT_INDENT_WIDTH
from treemason.domain.exceptions import StructureSyntaxError
from treemason.domain.tree_models import StructureNode
from treemason.infra.fs import invalid_component_reason


@dataclass
class _Draft:
    """Mutable node used while the outline is still being read."""
    name: str
    line: int
    children: List["_Draft"] = field(default_factory=list)

    def child(self, name: str) -> Optional["_Draft"]:
        for c in self.children:
            if c.name == name:
                return c
        return None

    def freeze(self) -> StructureNode:
        return StructureNode(
            name=self.name,
            children=tuple(c.freeze() for c in self.children),
            line=self.line,
        )


# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def parse_indented_text(
        text: str,
        *,
        indent_width: int = DEFAULT_INDENT_WIDTH,
) -> Tuple[List[StructureNode], List[str]]:
    """
    Parse an indentation outline into structure nodes.

    Blank lines and '#' comment lines are skipped. Tabs expand to
    ``indent_width`` columns. A trailing '/' on a name is ignored.
    Repeated sibling names are merged so each path is declared once.

    Args:
        text: Full outline content.
        indent_width: Column width of a tab character.

    Returns:
        Tuple[List[StructureNode], List[str]]: Top-level nodes and warnings.

    Raises:
        StructureSyntaxError: On inconsistent dedents, an indented first
            entry or an invalid directory name.
    """
    warnings: List[str] = []
    root = _Draft(name="", line=0)

    # Each level pairs the column its entries sit at with their parent draft
    stack: List[Tuple[int, _Draft]] = [(0, root)]
    last: Optional[_Draft] = None

    for lineno, raw in enumerate(text.splitlines(), start=1):
        expanded = raw.expandtabs(indent_width)
        stripped = expanded.strip()
        if not stripped or stripped.startswith(COMMENT_PREFIX):
            continue

        indent = len(expanded) - len(expanded.lstrip(" "))
        name = stripped.rstrip("/").rstrip()

        reason = invalid_component_reason(name)
        if reason:
            raise StructureSyntaxError(f"Invalid directory name: {reason}", lineno)

        if last is None and indent > 0:
            raise StructureSyntaxError("First entry must not be indented", lineno)

        if indent > stack[-1][0]:
            stack.append((indent, last))
        elif indent < stack[-1][0]:
            while stack[-1][0] > indent:
                stack.pop()
            if stack[-1][0] != indent:
                raise StructureSyntaxError(
                    "Unindent does not match any outer indentation level", lineno
                )

        parent = stack[-1][1]
        existing = parent.child(name)
        if existing is not None:
            warnings.append(
                f"line {lineno}: duplicate entry '{name}' merged with line {existing.line}"
            )
            last = existing
        else:
            last = _Draft(name=name, line=lineno)
            parent.children.append(last)

    return [c.freeze() for c in root.children], warnings

