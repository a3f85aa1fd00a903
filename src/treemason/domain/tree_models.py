from __future__ import annotations

"""
Directory Tree Structure Data Models.

Provides the recursive node type produced by the structure parsers and
consumed by the builder and renderer.
"""

import os
from dataclasses import dataclass, field
from typing import Iterator, Optional, Sequence, Tuple

# -----------------------------------------------------------------------------
# STRUCTURAL COMPONENTS
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class StructureNode:
    """
    Represents one declared directory in the structure description.

    Attributes:
        name: Single path component of the directory.
        permissions: Mode string applied with chmod (octal or symbolic).
        owner: Ownership spec applied with chown ('user', 'user:group', ':group').
        default_files: Placeholder files created inside the directory when absent.
        children: Nested directories in declaration order.
        line: Source line number of the declaration (0 when unknown).
    """
    name: str
    permissions: Optional[str] = None
    owner: Optional[str] = None
    default_files: Tuple[str, ...] = ()
    children: Tuple["StructureNode", ...] = field(default_factory=tuple)
    line: int = 0


# -----------------------------------------------------------------------------
# TRAVERSAL HELPERS
# -----------------------------------------------------------------------------

def iter_paths(nodes: Sequence[StructureNode], parent: str = "") -> Iterator[str]:
    """
    Yield the relative path of every node, depth-first in declaration order.

    Args:
        nodes: Top-level nodes of the structure.
        parent: Relative path prefix of the current level.

    Yields:
        str: Relative directory path using the OS separator.
    """
    for node in nodes:
        rel_path = os.path.join(parent, node.name) if parent else node.name
        yield rel_path
        yield from iter_paths(node.children, rel_path)


def count_nodes(nodes: Sequence[StructureNode]) -> int:
    """Count every node in the structure."""
    return sum(1 + count_nodes(n.children) for n in nodes)
