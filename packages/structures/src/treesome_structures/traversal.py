"""Iterative traversal algorithms over an arena.

Every walk here is driven by an explicit stack or queue, so arbitrarily deep
(even fully linear) trees never hit the interpreter's recursion limit. The
functions are generators: nothing is computed until the caller pulls, and a
caller may stop pulling at any time.

These generators read the arena directly and perform no validation of their
own; ``Tree`` validates the starting handle and wraps them with its borrow
accounting before handing them out.
"""

from __future__ import annotations

from collections import deque
from enum import Enum
from typing import TYPE_CHECKING, Any, Deque, Iterator, List, Tuple, Union

if TYPE_CHECKING:
    from treesome_structures.arena import Arena, NodeHandle


class TraversalOrder(str, Enum):
    """The traversal orders a Tree supports."""

    PRE = "pre"
    POST = "post"
    LEVEL = "level"

    @classmethod
    def parse(cls, value: Union[TraversalOrder, str]) -> TraversalOrder:
        """Resolve an order given as an enum member or its name/value.

        Accepts ``"pre"``, ``"post"``, ``"level"`` (or the member names, in
        any case), plus the ``"dfs"``/``"bfs"`` aliases.

        Raises:
            ValueError: If the value names no known order.
        """
        if isinstance(value, cls):
            return value
        key = str(value).strip().lower()
        key = {"dfs": "pre", "bfs": "level", "preorder": "pre",
               "postorder": "post", "levelorder": "level"}.get(key, key)
        try:
            return cls(key)
        except ValueError:
            raise ValueError(f"Unknown traversal order: {value!r}") from None


def iter_preorder(arena: Arena, start: NodeHandle) -> Iterator[Tuple[NodeHandle, Any]]:
    """Visit a node, then each child subtree left to right."""
    stack: List[NodeHandle] = [start]
    while stack:
        handle = stack.pop()
        node = arena.node(handle)
        yield handle, node.payload
        stack.extend(reversed(node.children))


def iter_postorder(arena: Arena, start: NodeHandle) -> Iterator[Tuple[NodeHandle, Any]]:
    """Visit each child subtree left to right, then the node."""
    stack: List[Tuple[NodeHandle, bool]] = [(start, False)]
    while stack:
        handle, expanded = stack.pop()
        node = arena.node(handle)
        if expanded:
            yield handle, node.payload
        else:
            stack.append((handle, True))
            stack.extend((child, False) for child in reversed(node.children))


def iter_levelorder(arena: Arena, start: NodeHandle) -> Iterator[Tuple[NodeHandle, Any]]:
    """Visit each depth fully before the next, siblings in insertion order."""
    queue: Deque[NodeHandle] = deque([start])
    while queue:
        handle = queue.popleft()
        node = arena.node(handle)
        yield handle, node.payload
        queue.extend(node.children)


def iter_ancestors(arena: Arena, start: NodeHandle) -> Iterator[NodeHandle]:
    """Walk from a node up to the root, both inclusive."""
    handle: NodeHandle | None = start
    while handle is not None:
        yield handle
        handle = arena.node(handle).parent


_WALKERS = {
    TraversalOrder.PRE: iter_preorder,
    TraversalOrder.POST: iter_postorder,
    TraversalOrder.LEVEL: iter_levelorder,
}


def walk(
    arena: Arena, start: NodeHandle, order: Union[TraversalOrder, str] = TraversalOrder.PRE
) -> Iterator[Tuple[NodeHandle, Any]]:
    """Dispatch to the walker for the given order."""
    return _WALKERS[TraversalOrder.parse(order)](arena, start)
