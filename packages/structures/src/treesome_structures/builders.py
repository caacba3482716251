"""Helpers that construct Trees from other representations.

Three input shapes are supported:

- nested lists, ``["root", ["a", "b"], "c"]``, where the first element of a
  list is the payload and the remaining elements are its children
- parenthesized strings, ``"(root (a b) c)"``, as produced by
  ``render.as_string``
- dense child-index arrays, where ``nodes[m][i]`` is the index of the m-th
  child of node ``i`` (or ``LEAF_NODE``) and ``values[i]`` is its payload;
  node 0 is the root

Typical usage example:

    ```python
    tree = build_tree_from_string("(root (a b) c)")
    tree = build_tree_from_list(["root", ["a", "b"], "c"])
    tree = build_tree_from_arrays(
        [[1, 3, -1, -1], [2, -1, -1, -1]],
        ["root", "a", "c", "b"],
    )
    ```
"""

from __future__ import annotations

import logging
from collections import deque
from typing import Any, Deque, List, Sequence, Tuple

from pyparsing import OneOrMore, ParseException, nested_expr

from treesome_structures.config import TreeConfig
from treesome_structures.exceptions import CorruptedTreeError, TreeParseError
from treesome_structures.tree import Tree

logger = logging.getLogger(__name__)

LEAF_NODE = -1
ROOT_NODE = 0


def build_tree_from_string(from_string: str, config: TreeConfig | None = None) -> Tree:
    """Build a Tree from a parenthesized string representation.

    Args:
        from_string: The tree string, e.g. ``"(root (child1 leaf1 leaf2) child2)"``.
            A string that does not start with ``(`` becomes a single-node tree.
        config: Optional configuration for the new tree.

    Returns:
        The reconstructed Tree. All payloads are strings.

    Raises:
        TreeParseError: If the parentheses are unbalanced, a group is empty,
            or the string holds more than one top-level group.

    Example:
        ```python
        tree = build_tree_from_string("(root (child1 leaf1 leaf2) child2)")
        tree[tree.root]                               # "root"
        tree.num_children(tree.root)                  # 2
        ```
    """
    if not from_string.strip().startswith("("):
        return Tree(from_string, config=config)
    try:
        data = OneOrMore(nested_expr()).parse_string(from_string, parse_all=True)
    except ParseException as e:
        raise TreeParseError(
            f"Cannot parse tree string: {e.msg}",
            context={"text": from_string, "line": e.lineno, "column": e.col},
        ) from e

    groups = data.as_list()
    if len(groups) != 1:
        raise TreeParseError(
            "Tree string must hold exactly one top-level group",
            context={"text": from_string, "groups": len(groups)},
        )
    if _has_empty_group(groups[0]):
        raise TreeParseError("Tree string holds an empty group", context={"text": from_string})
    return build_tree_from_list(groups[0], config=config)


def build_tree_from_list(data: Any, config: TreeConfig | None = None) -> Tree:
    """Build a Tree from a nested list representation.

    The first element of a list is the node's payload and the remaining
    elements are its children, each either a plain value (a leaf) or another
    list. When the first element is itself a list, the subtree it describes
    becomes the node and the remaining elements are appended to its children.
    Anything that is not a non-empty list becomes a single leaf.

    Args:
        data: The tree data as nested lists.
        config: Optional configuration for the new tree.

    Returns:
        The constructed Tree.

    Example:
        ```python
        tree = build_tree_from_list(["root", ["child1", "leaf1", "leaf2"], "child2"])
        [tree[h] for h in tree.children(tree.root)]   # ["child1", "child2"]
        ```
    """
    payload, children = _split(data)
    tree = Tree(payload, config=config)
    pending: List[Tuple[Any, List[Any]]] = [(tree.root, children)]
    while pending:
        parent, items = pending.pop()
        for item in items:
            item_payload, item_children = _split(item)
            handle = tree.insert_child(parent, item_payload)
            if item_children:
                pending.append((handle, item_children))
    return tree


def build_tree_from_arrays(
    nodes: Sequence[Sequence[int]],
    values: Sequence[Any],
    config: TreeConfig | None = None,
) -> Tree:
    """Build a Tree from a dense child-index array representation.

    Args:
        nodes: One row per child slot. ``nodes[m][i]`` is the index of node
            ``i``'s m-th child, or ``LEAF_NODE`` (-1) if it has none there.
            Every row must have ``len(values)`` entries.
        values: Node payloads; ``values[0]`` is the root.
        config: Optional configuration for the new tree.

    Returns:
        The constructed Tree, children ordered by row.

    Raises:
        CorruptedTreeError: If row lengths do not match the values, an index
            is out of range, a node is referenced as a child more than once,
            the root is referenced as a child, or a node is unreachable from
            the root.

    Example:
        ```python
        left = [1, 3, -1, -1]
        right = [2, -1, -1, -1]
        tree = build_tree_from_arrays([left, right], ["r", "a", "b", "c"])
        # (r (a c) b)
        ```
    """
    size = len(values)
    if size == 0:
        raise CorruptedTreeError("Tree needs at least a root value", context={"values": 0})
    if any(len(row) != size for row in nodes):
        raise CorruptedTreeError(
            f"Tree nodes and values length do not match. Expected length: {size}",
            context={"expected": size, "row_lengths": [len(row) for row in nodes]},
        )

    tree = Tree(values[ROOT_NODE], config=config)
    handles = {ROOT_NODE: tree.root}
    queue: Deque[int] = deque([ROOT_NODE])
    while queue:
        node_id = queue.popleft()
        for row in nodes:
            child_id = row[node_id]
            if child_id == LEAF_NODE:
                continue
            if not 0 < child_id < size:
                raise CorruptedTreeError(
                    f"Child index {child_id} of node {node_id} is out of range",
                    context={"node": node_id, "child": child_id, "size": size},
                )
            if child_id in handles:
                raise CorruptedTreeError(
                    f"Node {child_id} is referenced as a child more than once",
                    context={"node": node_id, "child": child_id},
                )
            handles[child_id] = tree.insert_child(handles[node_id], values[child_id])
            queue.append(child_id)

    if len(handles) != size:
        unreachable = sorted(set(range(size)) - set(handles))
        raise CorruptedTreeError(
            "Some nodes are not reachable from the root",
            context={"unreachable": unreachable},
        )
    logger.debug("Built tree of %d nodes from %d child rows", size, len(nodes))
    return tree


def _split(data: Any) -> Tuple[Any, List[Any]]:
    children: List[Any] = []
    while isinstance(data, list) and data:
        children = list(data[1:]) + children
        data = data[0]
    return data, children


def _has_empty_group(data: Any) -> bool:
    stack = [data]
    while stack:
        item = stack.pop()
        if isinstance(item, list):
            if not item:
                return True
            stack.extend(item)
    return False
