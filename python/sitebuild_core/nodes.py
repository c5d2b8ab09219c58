"""Generic tree node model.

A node is one of three shapes:

- a mapping (``collections.abc.Mapping``) from string keys to nodes,
- a sequence (``list`` or ``tuple``) of nodes,
- a scalar: anything else, including ``str`` and ``bytes``.

Only mappings and sequences have an identity worth memoizing; scalars are
resolved to themselves.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from enum import Enum
from typing import Any, Union

PathKey = Union[str, int]
NodePath = tuple[PathKey, ...]

ROOT_PATH: NodePath = ()

# Field of a map node that selects its type handler.
TYPE_FIELD = "type"


class NodeKind(str, Enum):
    """Shape of a tree node."""

    SCALAR = "scalar"
    SEQUENCE = "sequence"
    MAPPING = "mapping"


def node_kind(node: Any) -> NodeKind:
    """Classify a node.

    Example:
        >>> node_kind({"type": "x"})
        <NodeKind.MAPPING: 'mapping'>
        >>> node_kind(["a"])
        <NodeKind.SEQUENCE: 'sequence'>
        >>> node_kind("a")
        <NodeKind.SCALAR: 'scalar'>
    """
    if isinstance(node, Mapping):
        return NodeKind.MAPPING
    if isinstance(node, (list, tuple)):
        return NodeKind.SEQUENCE
    return NodeKind.SCALAR


def is_container(node: Any) -> bool:
    """Return True for mappings and sequences."""
    return node_kind(node) is not NodeKind.SCALAR


def child_path(path: NodePath, key: PathKey) -> NodePath:
    """Return the path of a child node."""
    return (*path, key)


def format_path(path: NodePath) -> str:
    """Render a path the way diagnostics show it.

    Example:
        >>> format_path(("items", 0))
        '["items", 0]'
    """
    return json.dumps(list(path), default=str)


def describe_source(source_id: str | None, root: Any = None) -> str:
    """Name the document an error came from.

    Falls back to a JSON dump of the root when no identifier is known.
    """
    if source_id:
        return source_id
    return json.dumps(root, default=str)


__all__ = [
    "PathKey",
    "NodePath",
    "ROOT_PATH",
    "TYPE_FIELD",
    "NodeKind",
    "node_kind",
    "is_container",
    "child_path",
    "format_path",
    "describe_source",
]
