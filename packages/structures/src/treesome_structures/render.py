"""Read-only renderings of tree shape.

Everything here is a consumer of the public ``Tree`` API: it reads roots,
children, payloads and traversals, and never mutates the tree.

Typical usage example:

    ```python
    from treesome_structures import Tree
    from treesome_structures.render import as_indented_text, as_string, build_dot

    tree = Tree("root")
    a = tree.insert_child(tree.root, "a")
    tree.insert_child(a, "b")
    tree.insert_child(tree.root, "c")

    as_string(tree)          # "(root (a b) c)"
    print(as_indented_text(tree))
    # root
    #   a
    #     b
    #   c

    dot = build_dot(tree, name="MyTree", format="png")
    print(dot.source)
    ```
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Any, Dict, List, Tuple, Union

import graphviz

from treesome_structures.traversal import TraversalOrder

if TYPE_CHECKING:
    from treesome_structures.arena import NodeHandle
    from treesome_structures.tree import Tree

_CLOSE = object()


def as_string(
    tree: Tree,
    start: NodeHandle | None = None,
    delim: str = " ",
    multiline: bool = False,
) -> str:
    """Get a parenthesized string representation of a (sub)tree.

    A leaf renders as its payload; a node with children renders as
    ``(payload child1 child2 ...)``. The output can be read back with
    ``build_tree_from_string`` when payloads are strings without spaces or
    parentheses.

    Args:
        tree: The tree to render.
        start: Root of the subtree to render. Defaults to the tree's root.
        delim: The delimiter/indentation to use between levels.
        multiline: If True, puts each child on its own line, indented by
            ``delim`` once per level below ``start``.

    Returns:
        String representation of the subtree.

    Example:
        ```python
        print(as_string(tree))
        # (root (a b) c)

        print(as_string(tree, delim="  ", multiline=True))
        # (root
        #   (a
        #     b)
        #   c)
        ```
    """
    start = tree.root if start is None else start
    btwn = "\n" if multiline else ""
    parts: List[str] = []
    stack: List[Union[object, Tuple[NodeHandle, int]]] = [(start, 0)]
    while stack:
        item = stack.pop()
        if item is _CLOSE:
            parts.append(")")
            continue
        handle, level = item  # type: ignore[misc]
        if level > 0:
            parts.append(btwn + (level if multiline else 1) * delim)
        children = tree.children(handle)
        if children:
            parts.append("(" + str(tree[handle]))
            stack.append(_CLOSE)
            stack.extend((child, level + 1) for child in reversed(children))
        else:
            parts.append(str(tree[handle]))
    return "".join(parts)


def as_indented_text(
    tree: Tree,
    start: NodeHandle | None = None,
    indent: str = "  ",
    label_fn: Callable[[Any], str] | None = None,
) -> str:
    """Get an indented listing of a (sub)tree, one node per line.

    Args:
        tree: The tree to render.
        start: Root of the subtree to render. Defaults to the tree's root.
        indent: Indentation added per level below ``start``.
        label_fn: Function turning a payload into its label. Defaults to ``str``.

    Returns:
        The listing, lines joined with newlines.
    """
    label = label_fn if label_fn is not None else str
    lines: List[str] = []
    levels: Dict[NodeHandle, int] = {}
    for handle, payload in tree.preorder(start):
        parent = tree.parent(handle)
        level = levels[parent] + 1 if parent in levels else 0
        levels[handle] = level
        lines.append(indent * level + label(payload))
    return "\n".join(lines)


def build_dot(
    tree: Tree,
    start: NodeHandle | None = None,
    label_fn: Callable[[Any], str] | None = None,
    **kwargs: Any,
) -> graphviz.Digraph:
    """Build a Graphviz Digraph for visualizing a (sub)tree.

    Args:
        tree: The tree to render.
        start: Root of the subtree to render. Defaults to the tree's root.
        label_fn: Optional function turning a payload into a node label.
            Defaults to ``str``.
        **kwargs: Additional keyword arguments passed to the graphviz.Digraph
            constructor (e.g., name, format, node_attr, edge_attr).

    Returns:
        A graphviz.Digraph with one node per tree node (named ``N_000``,
        ``N_001``, ... in level order) and one edge per parent/child link.

    Example:
        ```python
        dot = build_dot(tree, node_attr={"shape": "box"})
        dot.render("/tmp/tree", format="png")
        ```

    Note:
        Building the graph only needs the graphviz package; rendering to an
        image also needs the Graphviz system installation.
    """
    label = label_fn if label_fn is not None else str
    dot = graphviz.Digraph(**kwargs)
    ids: Dict[NodeHandle, int] = {}
    for idx, (handle, payload) in enumerate(tree.levelorder(start)):
        ids[handle] = idx
        dot.node(f"N_{idx:03}", label(payload))
    for parent, child in tree.edges(start, order=TraversalOrder.LEVEL):
        dot.edge(f"N_{ids[parent]:03}", f"N_{ids[child]:03}")
    return dot
