"""Tree data model — node kinds for JSON-serialized ASTs.

Nodes are kept as the values produced by ``json.loads`` so that key order
and leaf types survive a load/dump cycle untouched. Traversal code never
inspects Python types directly; it asks ``node_kind`` and dispatches on
the returned ``NodeKind``.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

Node = dict[str, Any] | list[Any] | str | int | float | bool | None

# Field names with a fixed meaning in Fluent AST fixtures
TYPE_FIELD = "type"
NAME_FIELD = "name"
VALUE_FIELD = "value"

TEXT_ELEMENT = "TextElement"
TERM_PREFIX = "-"


class NodeKind(Enum):
    KEYED = "keyed"  # Mapping of field name -> node
    SEQUENCE = "sequence"  # Ordered list of nodes
    LEAF = "leaf"  # str, number, bool or null


def node_kind(node: Node) -> NodeKind:
    """Classify a node into one of the three kinds."""
    if isinstance(node, dict):
        return NodeKind.KEYED
    if isinstance(node, list):
        return NodeKind.SEQUENCE
    return NodeKind.LEAF


def node_type(node: Node) -> str | None:
    """Return the ``type`` discriminator of a keyed node, if it has one."""
    if node_kind(node) is not NodeKind.KEYED:
        return None
    value = node.get(TYPE_FIELD)
    return value if isinstance(value, str) else None


def is_text_element(node: Node) -> bool:
    return node_type(node) == TEXT_ELEMENT


def text_element(value: str) -> dict[str, str]:
    """Build a fresh ``TextElement`` node."""
    return {TYPE_FIELD: TEXT_ELEMENT, VALUE_FIELD: value}
