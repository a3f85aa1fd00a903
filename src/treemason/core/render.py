from __future__ import annotations

"""
Structure Renderer.

Converts parsed StructureNode trees into ASCII lines for previews.
Directories keep their declaration order; default files are listed
before subdirectories, and node metadata is shown in brackets.
"""

from typing import List, Optional, Sequence

from treemason.domain.tree_models import StructureNode

# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def render_structure(
        nodes: Sequence[StructureNode],
        root_label: Optional[str] = None,
) -> List[str]:
    """
    Render the structure with standard ASCII connectors (├──, └──).

    Args:
        nodes: Top-level structure nodes.
        root_label: Optional first line (typically the base directory).

    Returns:
        List[str]: Rendered lines.
    """
    lines: List[str] = []
    if root_label:
        lines.append(root_label)
    _render_level(nodes, (), lines, prefix="")
    return lines


# -----------------------------------------------------------------------------
# PRIVATE HELPERS
# -----------------------------------------------------------------------------

def _render_level(
        nodes: Sequence[StructureNode],
        files: Sequence[str],
        lines: List[str],
        prefix: str,
) -> None:
    entries = [(f, None) for f in files] + [(n.name, n) for n in nodes]
    total = len(entries)

    for i, (label, node) in enumerate(entries):
        is_last = (i == total - 1)
        connector = "└── " if is_last else "├── "

        # Scenario A: Placeholder file
        if node is None:
            lines.append(f"{prefix}{connector}{label}")
            continue

        # Scenario B: Directory
        lines.append(f"{prefix}{connector}{label}/{_describe_metadata(node)}")
        new_prefix = prefix + ("    " if is_last else "│   ")
        _render_level(node.children, node.default_files, lines, new_prefix)


def _describe_metadata(node: StructureNode) -> str:
    parts = [p for p in (node.permissions, node.owner) if p]
    return f" [{', '.join(parts)}]" if parts else ""
