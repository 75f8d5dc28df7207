"""Tree transforms — the three normalization passes over fixture ASTs.

Each pass returns a new tree and leaves its input untouched. All three are
built on ``_rebuild``, which copies a tree with an explicit stack (no
recursion, so fixture depth is unbounded) and lets a pass rewrite leaf
fields of keyed nodes or expand the items of sequences.
"""

from __future__ import annotations

from typing import Any, Callable, Iterable

from astnorm.config import PruneRules
from astnorm.tree.models import (
    NAME_FIELD,
    TERM_PREFIX,
    TYPE_FIELD,
    VALUE_FIELD,
    Node,
    NodeKind,
    is_text_element,
    node_kind,
    text_element,
)

# Returned by a field rewriter to delete the field
DROP = object()

ParentKey = str | int | None
FieldRewriter = Callable[[str, Any, ParentKey], Any]
ItemExpander = Callable[[Node], Iterable[Node]]


def strip_term_dashes(tree: Node) -> Node:
    """Remove the leading ``-`` from every ``name`` value that has one.

    Term identifiers are serialized as ``-brand-name``; fixtures store them
    as ``brand-name``.
    """

    def rewrite(key: str, value: Any, parent_key: ParentKey) -> Any:
        if key == NAME_FIELD and isinstance(value, str) and value.startswith(TERM_PREFIX):
            return value[len(TERM_PREFIX):]
        return value

    return _rebuild(tree, rewrite_field=rewrite)


def prune_unambiguous_types(tree: Node, rules: PruneRules | None = None) -> Node:
    """Delete ``type`` fields that the node's position already implies.

    The parent key of a node is the field name (or list index) it was
    reached through. Which types may be dropped, and under which parent
    keys, comes entirely from ``rules``.
    """
    rules = rules or PruneRules()

    def rewrite(key: str, value: Any, parent_key: ParentKey) -> Any:
        if key == TYPE_FIELD and isinstance(value, str) and rules.should_prune(value, parent_key):
            return DROP
        return value

    return _rebuild(tree, rewrite_field=rewrite)


def split_multiline_text(tree: Node, keep_blank_lines: bool = False) -> Node:
    """Replace each multi-line ``TextElement`` in a sequence with one element per line."""

    def expand(item: Node) -> Iterable[Node]:
        if not is_text_element(item):
            return (item,)
        value = item[VALUE_FIELD]
        if "\n" not in value:
            return (item,)
        return [text_element(line) for line in split_text(value, keep_blank_lines)]

    return _rebuild(tree, expand_item=expand)


def split_text(value: str, keep_blank_lines: bool = False) -> list[str]:
    """Split text on newlines, keeping each line's own trailing newline.

    Every segment but the final one gets its ``\\n`` back. Empty segments
    are dropped unless ``keep_blank_lines`` is set, in which case each
    blank line survives as a bare ``"\\n"``.

    >>> split_text("a\\nb\\n\\nc")
    ['a\\n', 'b\\n', 'c']
    """
    segments = value.split("\n")
    last = len(segments) - 1
    lines = []
    for i, segment in enumerate(segments):
        if segment:
            lines.append(segment if i == last else segment + "\n")
        elif keep_blank_lines and i != last:
            lines.append("\n")
    return lines


def _rebuild(
    tree: Node,
    rewrite_field: FieldRewriter | None = None,
    expand_item: ItemExpander | None = None,
) -> Node:
    """Copy ``tree`` iteratively, applying the given callbacks on the way."""
    if node_kind(tree) is NodeKind.LEAF:
        return tree

    root = _empty_like(tree)
    stack: list[tuple[Node, Node, ParentKey]] = [(tree, root, None)]

    while stack:
        source, target, parent_key = stack.pop()

        if node_kind(source) is NodeKind.KEYED:
            for key, value in source.items():
                if node_kind(value) is NodeKind.LEAF:
                    if rewrite_field:
                        value = rewrite_field(key, value, parent_key)
                    if value is not DROP:
                        target[key] = value
                else:
                    # Placeholder keeps the field in its original position
                    child = _empty_like(value)
                    target[key] = child
                    stack.append((value, child, key))
            continue

        for item in source:
            for new_item in expand_item(item) if expand_item else (item,):
                if node_kind(new_item) is NodeKind.LEAF:
                    target.append(new_item)
                else:
                    child = _empty_like(new_item)
                    stack.append((new_item, child, len(target)))
                    target.append(child)

    return root


def _empty_like(node: Node) -> Node:
    return {} if node_kind(node) is NodeKind.KEYED else []
