"""Slot storage and identity management for tree nodes.

An ``Arena`` owns every node of one tree. Nodes live in a growable list of
slots and are named from the outside only by ``NodeHandle`` values. A handle
records the arena that issued it, the slot index and the slot's generation at
the time of issue. Freeing a slot bumps its generation, so a handle kept past
the removal of its node can never resolve to whatever occupies the slot next.

The arena knows nothing about roots or traversal orders; it only keeps the
parent/child links of its slots consistent:

- every live node's parent and children are live nodes of the same arena
- a node is listed in its parent's children exactly once
- a node with children is never linked below one of its own descendants

Typical usage example:

    ```python
    arena = Arena()
    root = arena.allocate("root")
    child = arena.allocate("child")
    arena.link(root, child)

    arena.children(root)     # (child,)
    arena.free_subtree(child)
    arena.contains(child)    # False
    ```
"""

from __future__ import annotations

import itertools
import logging
from typing import Any, Iterator, List, NamedTuple, Tuple

from treesome_structures.exceptions import (
    AlreadyAttachedError,
    CycleDetectedError,
    InvalidHandleError,
    NoParentError,
)

logger = logging.getLogger(__name__)

_arena_ids = itertools.count(1)


class NodeHandle(NamedTuple):
    """Opaque, generation-checked reference to a node slot.

    Attributes:
        arena_id: Identifier of the arena that issued the handle.
        index: Position of the node's slot in the arena.
        generation: Generation of the slot when the handle was issued.
    """

    arena_id: int
    index: int
    generation: int

    def __repr__(self) -> str:
        return f"NodeHandle({self.arena_id}:{self.index}@{self.generation})"


class Node:
    """A storage slot: a node's payload and links, live or free."""

    __slots__ = ("payload", "parent", "children", "generation", "occupied")

    def __init__(self, payload: Any):
        self.payload = payload
        self.parent: NodeHandle | None = None
        self.children: List[NodeHandle] = []
        self.generation = 0
        self.occupied = True


class Arena:
    """Owned storage for all nodes of one tree.

    Attributes:
        arena_id: Process-unique identifier stamped into every issued handle.
        capacity: Number of slots, live or free.
    """

    def __init__(self, reuse_slots: bool = True):
        """Create an empty arena.

        Args:
            reuse_slots: Recycle freed slots for new nodes. When False every
                allocation takes a fresh slot.
        """
        self._id = next(_arena_ids)
        self._slots: List[Node] = []
        self._free: List[int] = []
        self._live = 0
        self._reuse_slots = reuse_slots

    def __len__(self) -> int:
        return self._live

    def __repr__(self) -> str:
        return f"Arena(id={self._id}, live={self._live}, capacity={self.capacity})"

    @property
    def arena_id(self) -> int:
        return self._id

    @property
    def capacity(self) -> int:
        return len(self._slots)

    def allocate(self, payload: Any) -> NodeHandle:
        """Store a new node with no parent and no children.

        Args:
            payload: The value the node owns.

        Returns:
            A fresh handle for the node.
        """
        if self._reuse_slots and self._free:
            index = self._free.pop()
            node = self._slots[index]
            node.payload = payload
            node.occupied = True
            logger.debug("Reusing slot %d at generation %d", index, node.generation)
        else:
            index = len(self._slots)
            node = Node(payload)
            self._slots.append(node)
        self._live += 1
        return NodeHandle(self._id, index, node.generation)

    def node(self, handle: NodeHandle) -> Node:
        """Resolve a handle to its live slot.

        Raises:
            InvalidHandleError: If the handle is foreign, out of range, or stale.
        """
        if not isinstance(handle, NodeHandle) or handle.arena_id != self._id:
            raise InvalidHandleError(
                "Handle does not belong to this tree",
                context={"handle": handle, "arena_id": self._id},
            )
        if not 0 <= handle.index < len(self._slots):
            raise InvalidHandleError(
                "Handle refers to a slot that does not exist",
                context={"handle": handle, "capacity": len(self._slots)},
            )
        node = self._slots[handle.index]
        if not node.occupied or node.generation != handle.generation:
            raise InvalidHandleError(
                "Handle refers to a removed node",
                context={"handle": handle, "generation": node.generation},
            )
        return node

    def contains(self, handle: NodeHandle) -> bool:
        """Check whether a handle names a live node of this arena."""
        try:
            self.node(handle)
        except InvalidHandleError:
            return False
        return True

    def get(self, handle: NodeHandle) -> Any:
        return self.node(handle).payload

    def set(self, handle: NodeHandle, payload: Any) -> None:
        self.node(handle).payload = payload

    def parent(self, handle: NodeHandle) -> NodeHandle | None:
        return self.node(handle).parent

    def children(self, handle: NodeHandle) -> Tuple[NodeHandle, ...]:
        return tuple(self.node(handle).children)

    def handles(self) -> Iterator[NodeHandle]:
        """Iterate over the handles of all live nodes in slot order."""
        for index, node in enumerate(self._slots):
            if node.occupied:
                yield NodeHandle(self._id, index, node.generation)

    def is_ancestor(
        self, ancestor: NodeHandle, node: NodeHandle, include_self: bool = False
    ) -> bool:
        """Check whether ``ancestor`` lies on the path from ``node`` to its root.

        Walks parent links upward from ``node``, so the cost is proportional
        to the depth of ``node``.
        """
        self.node(ancestor)
        node_slot = self.node(node)
        current = node if include_self else node_slot.parent
        while current is not None:
            if current == ancestor:
                return True
            current = self._slots[current.index].parent
        return False

    def link(self, parent: NodeHandle, child: NodeHandle, position: int | None = None) -> None:
        """Attach an unparented node below ``parent``.

        Args:
            parent: The new parent.
            child: The node to attach; it must not have a parent.
            position: Sibling index to insert at, clamped to the valid range.
                None appends.

        Raises:
            InvalidHandleError: If either handle is not live.
            AlreadyAttachedError: If ``child`` already has a parent.
            CycleDetectedError: If ``parent`` is ``child`` or one of its descendants.
        """
        parent_node = self.node(parent)
        child_node = self.node(child)
        if child_node.parent is not None:
            raise AlreadyAttachedError(
                "Node already has a parent; detach it first",
                context={"child": child, "current_parent": child_node.parent},
            )
        if parent == child or (
            child_node.children and self.is_ancestor(child, parent)
        ):
            raise CycleDetectedError(
                "Cannot attach a node below itself or its own descendant",
                context={"parent": parent, "child": child},
            )

        siblings = parent_node.children
        if position is None:
            siblings.append(child)
        else:
            siblings.insert(max(0, min(position, len(siblings))), child)
        child_node.parent = parent

    def unlink(self, child: NodeHandle) -> int:
        """Detach a node (and its subtree) from its parent without freeing it.

        Returns:
            The sibling index the node held before detaching.

        Raises:
            InvalidHandleError: If the handle is not live.
            NoParentError: If the node has no parent.
        """
        child_node = self.node(child)
        if child_node.parent is None:
            raise NoParentError("Node has no parent to detach from", context={"child": child})
        siblings = self._slots[child_node.parent.index].children
        position = siblings.index(child)
        del siblings[position]
        child_node.parent = None
        return position

    def free_subtree(self, handle: NodeHandle) -> List[Any]:
        """Reclaim a node and all of its descendants.

        A node that is still attached is detached from its parent first. Every
        handle into the subtree becomes invalid.

        Returns:
            The payloads of the freed nodes, in pre-order.

        Raises:
            InvalidHandleError: If the handle is not live (including when it
                was already freed).
        """
        node = self.node(handle)
        if node.parent is not None:
            self.unlink(handle)

        payloads: List[Any] = []
        stack = [handle]
        while stack:
            current = stack.pop()
            current_node = self._slots[current.index]
            payloads.append(current_node.payload)
            stack.extend(reversed(current_node.children))
            self._release(current.index)
        return payloads

    def _release(self, index: int) -> None:
        node = self._slots[index]
        node.payload = None
        node.parent = None
        node.children = []
        node.occupied = False
        node.generation += 1
        self._live -= 1
        if self._reuse_slots:
            self._free.append(index)
