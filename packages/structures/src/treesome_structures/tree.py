"""Rooted N-ary tree with stable node handles.

This module provides the ``Tree`` engine. A Tree owns one ``Arena`` holding
all of its nodes, and callers name nodes only through the ``NodeHandle``
values the tree hands out. Handles stay valid until their node is removed;
after that every lookup with them fails with ``InvalidHandleError``, even if
the storage has since been reused for another node.

The Tree class supports:
- Inserting children at any sibling position
- Removing and moving whole subtrees (moves are checked for cycles)
- Deep-copying subtrees into independent trees
- Lazy pre-order, post-order, level-order and ancestor traversals
- Structural queries (depth, size, ancestry, siblings, leaves, edges)

Typical usage example:

    ```python
    from treesome_structures import Tree

    tree = Tree("root")
    a = tree.insert_child(tree.root, "a")
    b = tree.insert_child(tree.root, "b")
    c = tree.insert_child(a, "c")

    [payload for _, payload in tree.levelorder()]   # ["root", "a", "b", "c"]

    tree.move_subtree(c, b)
    tree.remove_subtree(a)                          # ["a"]
    ```
"""

from __future__ import annotations

import copy
import logging
from collections.abc import Callable
from contextlib import closing
from typing import Any, Dict, Generic, Iterator, List, Tuple, TypeVar, Union

from treesome_structures.arena import Arena, NodeHandle
from treesome_structures.config import TreeConfig
from treesome_structures.exceptions import (
    CannotMoveRootError,
    CannotRemoveRootError,
    ConcurrentModificationError,
    CycleDetectedError,
)
from treesome_structures.render import as_string
from treesome_structures.traversal import (
    TraversalOrder,
    iter_ancestors,
    iter_levelorder,
    iter_postorder,
    iter_preorder,
    walk,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


class Tree(Generic[T]):
    """A rooted tree of payloads, addressed by generation-checked handles.

    A Tree always has a root; it is seeded by the constructor and can never be
    removed or moved. Every other node has exactly one parent, and the
    children of a node are kept in insertion order, which is the sibling order
    every traversal follows.

    Traversal methods return lazy generators of ``(handle, payload)`` pairs.
    While such a generator is being consumed, structural mutations of the tree
    (insert, remove, move) raise ``ConcurrentModificationError``; replacing a
    payload in place is allowed. Finish, ``close()`` or drop the generator to
    release the tree.

    The borrow starts with the first pull, not when the traversal method is
    called. The starting handle is checked at the call, but a generator that
    has not been pulled yet holds nothing: mutations made before its first
    pull are visible to it, and if its starting node is removed in between,
    the first pull raises ``InvalidHandleError``.

    Attributes:
        root: Handle of the root node.
        config: The configuration this tree was created with.

    Example:
        ```python
        tree = Tree("root")
        x = tree.insert_child(tree.root, "x")
        y = tree.insert_child(tree.root, "y")
        first = tree.insert_child(tree.root, "first", position=0)

        [tree[h] for h in tree.children(tree.root)]   # ["first", "x", "y"]
        tree.depth(x)                                 # 1
        len(tree)                                     # 4
        ```
    """

    def __init__(self, root_payload: T, config: TreeConfig | None = None):
        """Create a tree holding a single root node.

        Args:
            root_payload: The root's payload.
            config: Optional configuration. Defaults to ``TreeConfig()``.
        """
        self._config = config if config is not None else TreeConfig()
        self._arena = Arena(reuse_slots=self._config.reuse_slots)
        self._root = self._arena.allocate(root_payload)
        self._active_traversals = 0

    def __repr__(self) -> str:
        return as_string(self, delim="  ", multiline=True)

    def __len__(self) -> int:
        return len(self._arena)

    def __contains__(self, handle: object) -> bool:
        return isinstance(handle, NodeHandle) and self._arena.contains(handle)

    def __iter__(self) -> Iterator[NodeHandle]:
        return (handle for handle, _ in self.traverse())

    def __getitem__(self, handle: NodeHandle) -> T:
        return self._arena.get(handle)

    def __setitem__(self, handle: NodeHandle, payload: T) -> None:
        self._arena.set(handle, payload)

    def __copy__(self) -> Tree[T]:
        return self.clone_subtree(self._root)

    def __deepcopy__(self, memo: Dict[int, Any]) -> Tree[T]:
        return self._clone(self._root, memo)

    @property
    def root(self) -> NodeHandle:
        return self._root

    @property
    def config(self) -> TreeConfig:
        return self._config

    # Structural queries

    def size(self) -> int:
        """Number of live nodes in this tree."""
        return len(self._arena)

    def contains(self, handle: NodeHandle) -> bool:
        """Check whether a handle names a live node of this tree."""
        return handle in self

    def get(self, handle: NodeHandle) -> T:
        """Get a node's payload.

        Raises:
            InvalidHandleError: If the handle is stale or from another tree.
        """
        return self._arena.get(handle)

    def set(self, handle: NodeHandle, payload: T) -> None:
        """Replace a node's payload."""
        self._arena.set(handle, payload)

    def parent(self, handle: NodeHandle) -> NodeHandle | None:
        """Get a node's parent, or None for the root."""
        return self._arena.parent(handle)

    def children(self, handle: NodeHandle) -> Tuple[NodeHandle, ...]:
        """Get a node's children in sibling order."""
        return self._arena.children(handle)

    def num_children(self, handle: NodeHandle) -> int:
        return len(self._arena.node(handle).children)

    def is_leaf(self, handle: NodeHandle) -> bool:
        return not self._arena.node(handle).children

    def is_root(self, handle: NodeHandle) -> bool:
        self._arena.node(handle)
        return handle == self._root

    def depth(self, handle: NodeHandle) -> int:
        """Number of hops from the root to a node (the root has depth 0)."""
        result = 0
        current = self._arena.parent(handle)
        while current is not None:
            current = self._arena.parent(current)
            result += 1
        return result

    def height(self, start: NodeHandle | None = None) -> int:
        """Number of hops on the longest downward path from ``start`` (a leaf has height 0)."""
        start = self._resolve_start(start)
        levels: Dict[NodeHandle, int] = {start: 0}
        result = 0
        for handle, _ in iter_levelorder(self._arena, start):
            level = levels.pop(handle)
            result = level
            for child in self._arena.node(handle).children:
                levels[child] = level + 1
        return result

    def sibling_index(self, handle: NodeHandle) -> int:
        """A node's position among its siblings (0 for the root)."""
        parent = self._arena.parent(handle)
        if parent is None:
            return 0
        return self._arena.node(parent).children.index(handle)

    def next_sibling(self, handle: NodeHandle) -> NodeHandle | None:
        """The sibling after this node, or None if it is last or the root."""
        parent = self._arena.parent(handle)
        if parent is None:
            return None
        siblings = self._arena.node(parent).children
        idx = siblings.index(handle) + 1
        return siblings[idx] if idx < len(siblings) else None

    def prev_sibling(self, handle: NodeHandle) -> NodeHandle | None:
        """The sibling before this node, or None if it is first or the root."""
        parent = self._arena.parent(handle)
        if parent is None:
            return None
        siblings = self._arena.node(parent).children
        idx = siblings.index(handle) - 1
        return siblings[idx] if idx >= 0 else None

    def path(self, handle: NodeHandle) -> List[NodeHandle]:
        """Handles from the root down to this node, both inclusive."""
        result = list(iter_ancestors(self._arena, self._resolve_start(handle)))
        result.reverse()
        return result

    def is_ancestor(
        self, ancestor: NodeHandle, node: NodeHandle, include_self: bool = False
    ) -> bool:
        """Check if ``ancestor`` is on the path from ``node`` to the root.

        Args:
            ancestor: The potential ancestor.
            node: The potential descendant.
            include_self: If True, a node counts as its own ancestor.
        """
        return self._arena.is_ancestor(ancestor, node, include_self=include_self)

    def common_ancestor(self, first: NodeHandle, second: NodeHandle) -> NodeHandle:
        """Find the deepest node that is an ancestor (or self) of both nodes."""
        result = self._root
        for mine, theirs in zip(self.path(first), self.path(second)):
            if mine != theirs:
                break
            result = mine
        return result

    def leaves(self, start: NodeHandle | None = None) -> List[NodeHandle]:
        """Collect the nodes without children below ``start``, in pre-order."""
        start = self._resolve_start(start)
        return [
            handle
            for handle, _ in iter_preorder(self._arena, start)
            if not self._arena.node(handle).children
        ]

    def edges(
        self,
        start: NodeHandle | None = None,
        order: Union[TraversalOrder, str] = TraversalOrder.LEVEL,
    ) -> List[Tuple[NodeHandle, NodeHandle]]:
        """Get all ``(parent, child)`` links below ``start``.

        Edges are listed in the order their child nodes are visited by the
        given traversal.
        """
        start = self._resolve_start(start)
        result: List[Tuple[NodeHandle, NodeHandle]] = []
        for handle, _ in walk(self._arena, start, order):
            if handle != start:
                result.append((self._arena.node(handle).parent, handle))  # type: ignore[arg-type]
        return result

    def find(
        self,
        predicate: Callable[[NodeHandle, T], bool],
        order: Union[TraversalOrder, str, None] = None,
        start: NodeHandle | None = None,
        first_only: bool = False,
    ) -> List[NodeHandle]:
        """Find nodes matching a condition.

        Args:
            predicate: Function called with each node's handle and payload;
                returns True to include the node.
            order: Traversal order to search in. Defaults to the configured
                default order.
            start: Root of the subtree to search. Defaults to the tree's root.
            first_only: If True, stops after the first match.

        Returns:
            Handles of the matching nodes, in visit order.

        Example:
            ```python
            tree.find(lambda h, p: p.startswith("a"))
            tree.find(lambda h, p: tree.is_leaf(h), order="level", first_only=True)
            ```
        """
        found: List[NodeHandle] = []
        with closing(self.traverse(order, start)) as pairs:
            for handle, payload in pairs:
                if predicate(handle, payload):
                    found.append(handle)
                    if first_only:
                        break
        return found

    def deepest_left(self, start: NodeHandle | None = None) -> NodeHandle:
        """Follow first children from ``start`` down to a leaf."""
        node = self._resolve_start(start)
        while self._arena.node(node).children:
            node = self._arena.node(node).children[0]
        return node

    def deepest_right(self, start: NodeHandle | None = None) -> NodeHandle:
        """Follow last children from ``start`` down to a leaf."""
        node = self._resolve_start(start)
        while self._arena.node(node).children:
            node = self._arena.node(node).children[-1]
        return node

    # Traversals

    def traverse(
        self,
        order: Union[TraversalOrder, str, None] = None,
        start: NodeHandle | None = None,
    ) -> Iterator[Tuple[NodeHandle, T]]:
        """Lazily walk a subtree in the given order.

        Args:
            order: A ``TraversalOrder`` (or ``"pre"``, ``"post"``, ``"level"``).
                Defaults to the configured default order (pre-order unless
                configured otherwise).
            start: Root of the subtree to walk. Defaults to the tree's root.

        Returns:
            A single-pass generator of ``(handle, payload)`` pairs. Call this
            method again for a fresh pass.

        Raises:
            InvalidHandleError: If ``start`` is not a live node of this tree.
        """
        resolved = TraversalOrder.parse(order if order is not None else self._config.default_order)
        start = self._resolve_start(start)
        return self._borrow(walk(self._arena, start, resolved))

    def preorder(self, start: NodeHandle | None = None) -> Iterator[Tuple[NodeHandle, T]]:
        """Visit each node, then its children left to right."""
        return self._borrow(iter_preorder(self._arena, self._resolve_start(start)))

    def postorder(self, start: NodeHandle | None = None) -> Iterator[Tuple[NodeHandle, T]]:
        """Visit each node's children left to right, then the node."""
        return self._borrow(iter_postorder(self._arena, self._resolve_start(start)))

    def levelorder(self, start: NodeHandle | None = None) -> Iterator[Tuple[NodeHandle, T]]:
        """Visit nodes breadth-first, one depth at a time."""
        return self._borrow(iter_levelorder(self._arena, self._resolve_start(start)))

    def ancestors(self, handle: NodeHandle) -> Iterator[NodeHandle]:
        """Walk from a node up to the root, both inclusive."""
        return self._borrow(iter_ancestors(self._arena, self._resolve_start(handle)))

    def collect(
        self,
        order: Union[TraversalOrder, str, None] = None,
        start: NodeHandle | None = None,
    ) -> List[Tuple[NodeHandle, T]]:
        """Eagerly gather a full traversal into a list."""
        return list(self.traverse(order, start))

    # Mutations

    def insert_child(
        self, parent: NodeHandle, payload: T, position: int | None = None
    ) -> NodeHandle:
        """Add a new node below ``parent``.

        Args:
            parent: The node to attach to.
            payload: The new node's payload.
            position: Sibling index for the new node, clamped to
                ``[0, num_children(parent)]``. None appends.

        Returns:
            The new node's handle.

        Raises:
            InvalidHandleError: If ``parent`` is not a live node of this tree.
            ConcurrentModificationError: If a traversal is in progress.
        """
        self._check_mutable("insert_child")
        self._arena.node(parent)
        handle = self._arena.allocate(payload)
        self._arena.link(parent, handle, position)
        logger.debug("Inserted %r under %r at position %s", handle, parent, position)
        return handle

    def remove_subtree(self, handle: NodeHandle) -> List[T]:
        """Detach and destroy a node together with all of its descendants.

        Returns:
            The removed payloads in pre-order, starting with ``handle``'s.

        Raises:
            InvalidHandleError: If the handle is not a live node of this tree.
            CannotRemoveRootError: If ``handle`` is the root.
            ConcurrentModificationError: If a traversal is in progress.
        """
        self._check_mutable("remove_subtree")
        self._arena.node(handle)
        if handle == self._root:
            raise CannotRemoveRootError(
                "The root of a tree cannot be removed", context={"handle": handle}
            )
        payloads = self._arena.free_subtree(handle)
        logger.debug("Removed subtree at %r (%d nodes)", handle, len(payloads))
        return payloads

    def move_subtree(
        self, handle: NodeHandle, new_parent: NodeHandle, position: int | None = None
    ) -> None:
        """Re-attach a node, with its subtree, below another node.

        All checks run before anything changes, so a rejected move leaves the
        tree exactly as it was. Moving a node within its current parent puts
        it at ``position`` among the remaining siblings.

        Args:
            handle: The node to move.
            new_parent: The node to attach it to.
            position: Sibling index below ``new_parent``, clamped. None appends.

        Raises:
            InvalidHandleError: If either handle is not a live node of this tree.
            CannotMoveRootError: If ``handle`` is the root.
            CycleDetectedError: If ``new_parent`` is ``handle`` or one of its
                descendants.
            ConcurrentModificationError: If a traversal is in progress.
        """
        self._check_mutable("move_subtree")
        self._arena.node(handle)
        self._arena.node(new_parent)
        if handle == self._root:
            raise CannotMoveRootError(
                "The root of a tree cannot be moved", context={"handle": handle}
            )
        if self._arena.is_ancestor(handle, new_parent, include_self=True):
            raise CycleDetectedError(
                "Cannot move a subtree below itself",
                context={"handle": handle, "new_parent": new_parent},
            )
        self._arena.unlink(handle)
        self._arena.link(new_parent, handle, position)
        logger.debug("Moved %r under %r at position %s", handle, new_parent, position)

    def clone_subtree(self, handle: NodeHandle) -> Tree[T]:
        """Deep-copy a node and its descendants into a new, independent tree.

        The copy's root holds a copy of ``handle``'s payload; its nodes get new
        handles that are only valid for the copy. Payloads are deep-copied
        unless the tree is configured with ``copy_payloads=False``. The copy
        inherits this tree's configuration.

        Raises:
            InvalidHandleError: If the handle is not a live node of this tree.
        """
        return self._clone(handle, {})

    def _clone(self, handle: NodeHandle, memo: Dict[int, Any]) -> Tree[T]:
        source = self._arena.node(handle)
        clone: Tree[T] = Tree(self._copy_payload(source.payload, memo), config=self._config)
        pending = [(handle, clone.root)]
        while pending:
            original, copied = pending.pop()
            for child in self._arena.node(original).children:
                child_copy = clone._arena.allocate(
                    self._copy_payload(self._arena.node(child).payload, memo)
                )
                clone._arena.link(copied, child_copy)
                pending.append((child, child_copy))
        logger.debug("Cloned subtree at %r (%d nodes)", handle, len(clone))
        return clone

    def copy(self) -> Tree[T]:
        """Deep-copy the whole tree."""
        return self.clone_subtree(self._root)

    # Internals

    def _resolve_start(self, start: NodeHandle | None) -> NodeHandle:
        if start is None:
            return self._root
        self._arena.node(start)
        return start

    def _copy_payload(self, payload: Any, memo: Dict[int, Any]) -> Any:
        return copy.deepcopy(payload, memo) if self._config.copy_payloads else payload

    def _check_mutable(self, operation: str) -> None:
        if self._active_traversals:
            raise ConcurrentModificationError(
                f"Cannot {operation} while a traversal of this tree is in progress",
                context={"operation": operation, "active_traversals": self._active_traversals},
            )

    def _borrow(self, pairs: Iterator[Any]) -> Iterator[Any]:
        if not self._config.guard_traversals:
            return pairs
        return self._guarded(pairs)

    def _guarded(self, pairs: Iterator[Any]) -> Iterator[Any]:
        self._active_traversals += 1
        try:
            yield from pairs
        finally:
            self._active_traversals -= 1
