"""Exceptions raised by the tree engine.

Every error is built on the common exception framework from treesome_common,
so callers can catch a specific structural error, its generic category
(``NotFoundError``, ``OperationError``, ...), or ``TreesomeError`` itself.
"""

from treesome_common import (
    ConcurrencyError,
    NotFoundError,
    OperationError,
    TreesomeError,
    ValidationError,
)


class TreeError(TreesomeError):
    """Base exception for tree engine errors."""

    pass


class InvalidHandleError(TreeError, NotFoundError):
    """Raised when a handle does not name a live node of this tree.

    The handle is either stale (its node was removed) or foreign (it was
    issued by a different tree).
    """

    pass


class AlreadyAttachedError(TreeError, OperationError):
    """Raised when linking a node that already has a parent."""

    pass


class NoParentError(TreeError, OperationError):
    """Raised when unlinking a node that has no parent."""

    pass


class CannotRemoveRootError(TreeError, OperationError):
    """Raised when asked to remove the root of a tree."""

    pass


class CannotMoveRootError(TreeError, OperationError):
    """Raised when asked to move the root of a tree."""

    pass


class CycleDetectedError(TreeError, OperationError):
    """Raised when a move target lies inside the subtree being moved."""

    pass


class ConcurrentModificationError(TreeError, ConcurrencyError):
    """Raised when a tree is mutated while a traversal over it is live."""

    pass


class TreeParseError(TreeError, ValidationError):
    """Raised when a textual tree description cannot be parsed."""

    pass


class CorruptedTreeError(TreeError, ValidationError):
    """Raised when a dense array tree description is inconsistent."""

    pass


__all__ = [
    "TreeError",
    "InvalidHandleError",
    "AlreadyAttachedError",
    "NoParentError",
    "CannotRemoveRootError",
    "CannotMoveRootError",
    "CycleDetectedError",
    "ConcurrentModificationError",
    "TreeParseError",
    "CorruptedTreeError",
]
