from __future__ import annotations

"""
YAML Structure Parser.

Reads a YAML document whose root mapping declares directories by name.
Each directory may carry 'permissions', 'owner', 'default_files' and
'subdirs' keys. Scalars are loaded as strings (only 'null' is resolved)
so that modes such as 0755 and names such as 2024 keep their spelling.
"""

import stat
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Set, Tuple

import yaml
from yaml.constructor import ConstructorError

from treemason.domain.config import (
    KEY_DEFAULT_FILES,
    KEY_OWNER,
    KEY_PERMISSIONS,
    KEY_SUBDIRS,
    NODE_KEYS,
)
from treemason.domain.exceptions import StructureSyntaxError
from treemason.domain.tree_models import StructureNode
from treemason.infra.fs import invalid_component_reason, parse_mode, parse_owner

# -----------------------------------------------------------------------------
# LOADER
# -----------------------------------------------------------------------------

_MERGE_TAG = "tag:yaml.org,2002:merge"
_KEPT_RESOLVER_TAGS = ("tag:yaml.org,2002:null", _MERGE_TAG)


class StructureLoader(yaml.SafeLoader):
    """
    SafeLoader that resolves only nulls and merge keys; every other scalar
    stays a str. Repeated keys in one mapping are rejected instead of the
    last one silently winning.
    """

    def construct_mapping(self, node, deep=False):
        if isinstance(node, yaml.MappingNode):
            seen: Dict[str, yaml.Node] = {}
            for key_node, _ in node.value:
                if key_node.tag == _MERGE_TAG or not isinstance(key_node, yaml.ScalarNode):
                    continue
                first = seen.setdefault(key_node.value, key_node)
                if first is not key_node:
                    raise ConstructorError(
                        "while constructing a mapping", node.start_mark,
                        f"found duplicate key '{key_node.value}' "
                        f"(first defined on line {first.start_mark.line + 1})",
                        key_node.start_mark,
                    )
        return super().construct_mapping(node, deep=deep)


StructureLoader.yaml_implicit_resolvers = {
    first: [(tag, regexp) for tag, regexp in resolvers if tag in _KEPT_RESOLVER_TAGS]
    for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}


@dataclass
class _ParseContext:
    """State shared by one document walk."""
    strict: bool
    warnings: List[str] = field(default_factory=list)
    # ids of the mappings and lists on the path being parsed
    active: Set[int] = field(default_factory=set)

# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def parse_yaml_structure(
        text: str,
        *,
        strict: bool = False,
) -> Tuple[List[StructureNode], List[str]]:
    """
    Parse a YAML structure document into structure nodes.

    Args:
        text: YAML document content.
        strict: Reject unknown node keys instead of ignoring them.

    Returns:
        Tuple[List[StructureNode], List[str]]: Top-level nodes and warnings.

    Raises:
        StructureSyntaxError: On YAML syntax errors, repeated keys,
            self-referencing aliases or an unexpected shape.
    """
    ctx = _ParseContext(strict=strict)

    try:
        data = yaml.load(text, Loader=StructureLoader)
    except yaml.MarkedYAMLError as e:
        line = e.problem_mark.line + 1 if e.problem_mark is not None else None
        problem = e.problem or e.context or "malformed document"
        raise StructureSyntaxError(f"Invalid YAML: {problem}", line) from e
    except yaml.YAMLError as e:
        raise StructureSyntaxError(f"Invalid YAML: {e}") from e

    if data is None:
        ctx.warnings.append("Structure document is empty; nothing to create.")
        return [], ctx.warnings

    if not isinstance(data, dict):
        raise StructureSyntaxError(
            f"Document root must be a mapping of directory names, got {_kind(data)}"
        )

    nodes = _parse_mapping(data, "", ctx)
    return nodes, ctx.warnings


# -----------------------------------------------------------------------------
# PRIVATE HELPERS: NODE CONSTRUCTION
# -----------------------------------------------------------------------------

def _parse_mapping(mapping: Dict[Any, Any], where: str, ctx: _ParseContext) -> List[StructureNode]:
    nodes = [_parse_node(name, value, where, ctx) for name, value in mapping.items()]
    return _merge_siblings(nodes, where, ctx)


def _parse_sequence(items: List[Any], where: str, ctx: _ParseContext) -> List[StructureNode]:
    nodes: List[StructureNode] = []
    for i, item in enumerate(items):
        if isinstance(item, dict):
            if len(item) != 1:
                raise StructureSyntaxError(
                    f"'{where or '/'}' entry #{i + 1}: list items must be a name or a single-key mapping"
                )
            name, value = next(iter(item.items()))
            nodes.append(_parse_node(name, value, where, ctx))
        else:
            nodes.append(_parse_node(item, None, where, ctx))
    return _merge_siblings(nodes, where, ctx)


def _parse_node(raw_name: Any, value: Any, where: str, ctx: _ParseContext) -> StructureNode:
    name = _as_component(raw_name, where, "directory")
    path = f"{where}/{name}" if where else name

    if value is None or value == "":
        return StructureNode(name=name)

    if not isinstance(value, (dict, list)):
        raise StructureSyntaxError(
            f"'{path}': expected a mapping of node keys, got {_kind(value)}"
        )

    if id(value) in ctx.active:
        raise StructureSyntaxError(f"'{path}': recursive alias refers back to an enclosing node")
    ctx.active.add(id(value))
    try:
        return _node_from_value(name, value, path, ctx)
    finally:
        ctx.active.discard(id(value))


def _node_from_value(name: str, value: Any, path: str, ctx: _ParseContext) -> StructureNode:
    # Shorthand: a bare list is the subdirectory list
    if isinstance(value, list):
        return StructureNode(name=name, children=tuple(_parse_sequence(value, path, ctx)))

    unknown = [str(k) for k in value if k not in NODE_KEYS]
    if unknown:
        msg = f"'{path}': unknown key(s) {', '.join(sorted(unknown))}"
        if ctx.strict:
            raise StructureSyntaxError(msg)
        ctx.warnings.append(f"{msg} ignored.")

    return StructureNode(
        name=name,
        permissions=_as_permissions(value.get(KEY_PERMISSIONS), path),
        owner=_as_owner(value.get(KEY_OWNER), path),
        default_files=_as_default_files(value.get(KEY_DEFAULT_FILES), path),
        children=tuple(_as_children(value.get(KEY_SUBDIRS), path, ctx)),
    )


def _as_children(value: Any, path: str, ctx: _ParseContext) -> List[StructureNode]:
    if value is None or value == "":
        return []
    if isinstance(value, dict):
        return _parse_mapping(value, path, ctx)
    if isinstance(value, list):
        return _parse_sequence(value, path, ctx)
    raise StructureSyntaxError(
        f"'{path}': '{KEY_SUBDIRS}' must be a mapping or a list, got {_kind(value)}"
    )


def _merge_siblings(nodes: List[StructureNode], where: str, ctx: _ParseContext) -> List[StructureNode]:
    """Fold repeated sibling names into the first declaration, keeping its position."""
    merged: Dict[str, StructureNode] = {}
    for node in nodes:
        first = merged.get(node.name)
        if first is None:
            merged[node.name] = node
            continue
        path = f"{where}/{node.name}" if where else node.name
        ctx.warnings.append(f"'{path}': duplicate entry merged with the earlier declaration.")
        merged[node.name] = _combine(first, node, path, ctx)
    return list(merged.values())


def _combine(first: StructureNode, later: StructureNode, path: str, ctx: _ParseContext) -> StructureNode:
    # Metadata set by the later declaration wins
    for key, old, new in ((KEY_PERMISSIONS, first.permissions, later.permissions),
                          (KEY_OWNER, first.owner, later.owner)):
        if old and new and old != new:
            ctx.warnings.append(f"'{path}': '{key}' {new} overrides {old}.")

    files = first.default_files + tuple(f for f in later.default_files if f not in first.default_files)
    return StructureNode(
        name=first.name,
        permissions=later.permissions or first.permissions,
        owner=later.owner or first.owner,
        default_files=files,
        children=tuple(_merge_siblings(list(first.children) + list(later.children), path, ctx)),
        line=first.line,
    )

# -----------------------------------------------------------------------------
# PRIVATE HELPERS: FIELD COERCION
# -----------------------------------------------------------------------------

def _as_component(value: Any, where: str, what: str) -> str:
    if not isinstance(value, str):
        raise StructureSyntaxError(
            f"'{where or '/'}': {what} name must be a string, got {_kind(value)}"
        )
    name = value.strip()
    reason = invalid_component_reason(name)
    if reason:
        raise StructureSyntaxError(f"'{where or '/'}': invalid {what} name: {reason}")
    return name


def _as_permissions(value: Any, path: str) -> Optional[str]:
    if value is None or value == "":
        return None
    if not isinstance(value, str):
        raise StructureSyntaxError(f"'{path}': '{KEY_PERMISSIONS}' must be a string")
    spec = value.strip()
    try:
        parse_mode(spec, stat.S_IFDIR)
    except ValueError as e:
        raise StructureSyntaxError(f"'{path}': {e}") from e
    return spec


def _as_owner(value: Any, path: str) -> Optional[str]:
    if value is None or value == "":
        return None
    if not isinstance(value, str):
        raise StructureSyntaxError(f"'{path}': '{KEY_OWNER}' must be a string")
    spec = value.strip()
    try:
        parse_owner(spec)
    except ValueError as e:
        raise StructureSyntaxError(f"'{path}': {e}") from e
    return spec


def _as_default_files(value: Any, path: str) -> Tuple[str, ...]:
    if value is None or value == "":
        return ()
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, list):
        raise StructureSyntaxError(
            f"'{path}': '{KEY_DEFAULT_FILES}' must be a list of file names, got {_kind(value)}"
        )

    files: List[str] = []
    for item in value:
        name = _as_component(item, path, "file")
        if name not in files:
            files.append(name)
    return tuple(files)


def _kind(value: Any) -> str:
    if isinstance(value, dict):
        return "mapping"
    if isinstance(value, list):
        return "list"
    if value is None:
        return "null"
    return type(value).__name__
