"""Step-wise, read-only navigation over a Tree."""

from __future__ import annotations

from typing import Any, Generic, TypeVar

from treesome_structures.arena import NodeHandle
from treesome_structures.tree import Tree

T = TypeVar("T")


class TreeCursor(Generic[T]):
    """A position in a tree that can step to neighboring nodes.

    Each ``go_*`` method moves the cursor and returns the payload of the node
    it lands on. When the move is impossible (no parent, no such child, no
    further sibling) the cursor stays where it is and the method returns None.
    A cursor never mutates its tree; if the node under it is removed, the next
    move raises ``InvalidHandleError``.

    Example:
        ```python
        cursor = TreeCursor(tree)
        cursor.go_first_child()   # payload of the root's first child
        cursor.go_next_sibling()  # payload of the root's second child
        cursor.go_parent()        # root payload
        cursor.go_parent()        # None, the cursor stays on the root
        ```
    """

    def __init__(self, tree: Tree[T], start: NodeHandle | None = None):
        self._tree = tree
        self._node = tree.root if start is None else start
        tree.get(self._node)

    def __repr__(self) -> str:
        return f"TreeCursor(node={self._node!r})"

    @property
    def node(self) -> NodeHandle:
        return self._node

    @property
    def payload(self) -> T:
        return self._tree.get(self._node)

    @property
    def depth(self) -> int:
        return self._tree.depth(self._node)

    def go_root(self) -> T:
        self._node = self._tree.root
        return self.payload

    def go_parent(self) -> T | None:
        return self._go(self._tree.parent(self._node))

    def go_child(self, index: int = 0) -> T | None:
        """Move to the child at ``index`` (negative indices count from the end)."""
        children = self._tree.children(self._node)
        if -len(children) <= index < len(children):
            return self._go(children[index])
        return None

    def go_first_child(self) -> T | None:
        return self.go_child(0)

    def go_last_child(self) -> T | None:
        return self.go_child(-1)

    def go_next_sibling(self) -> T | None:
        return self._go(self._tree.next_sibling(self._node))

    def go_prev_sibling(self) -> T | None:
        return self._go(self._tree.prev_sibling(self._node))

    def _go(self, target: NodeHandle | None) -> Any:
        if target is None:
            return None
        self._node = target
        return self.payload
