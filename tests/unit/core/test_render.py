from __future__ import annotations

"""
Unit tests for the Structure Renderer.
"""

from treemason.core.render import render_structure
from treemason.domain.tree_models import StructureNode


def test_render_connectors_and_metadata() -> None:
    nodes = [
        StructureNode(
            name="project",
            permissions="755",
            owner="dev:dev",
            default_files=("README.md",),
            children=(
                StructureNode(name="src", children=(StructureNode(name="app"),)),
                StructureNode(name="docs"),
            ),
        ),
        StructureNode(name="logs", permissions="700"),
    ]

    lines = render_structure(nodes, root_label="/srv")

    assert lines == [
        "/srv",
        "├── project/ [755, dev:dev]",
        "│   ├── README.md",
        "│   ├── src/",
        "│   │   └── app/",
        "│   └── docs/",
        "└── logs/ [700]",
    ]


def test_render_empty_structure() -> None:
    assert render_structure([]) == []
