"""Common exception hierarchy for all treesome packages.

This module provides the exception framework that every treesome package
extends. Exceptions carry an optional context dictionary so callers can
inspect what went wrong without parsing messages.

Example:
    ```python
    from treesome_common.exceptions import NotFoundError, TreesomeError

    # Simple exception
    raise NotFoundError("Node not found")

    # Context-rich exception
    raise NotFoundError(
        "Node not found",
        context={"index": 3, "generation": 1}
    )

    # Catch any treesome error
    try:
        operation()
    except TreesomeError as e:
        logger.error(f"Error: {e}")
        if e.context:
            logger.error(f"Context: {e.context}")
    ```

Package-Specific Extensions:
    ```python
    from treesome_common.exceptions import OperationError

    class MyOperationError(OperationError):
        '''Raised when my operation cannot be applied.'''
        pass
    ```
"""

from typing import Any, Dict


class TreesomeError(Exception):
    """Base exception for all treesome packages.

    Attributes:
        context: Dictionary containing contextual information about the error
        details: Alias for context

    Args:
        message: Human-readable error message
        context: Optional dictionary with error context (handles, positions, etc.)
        details: Alternative to context (both are supported)

    Example:
        ```python
        error = TreesomeError(
            "Operation failed",
            context={"operation": "move", "handle": "NodeHandle(1, 3, 0)"}
        )
        str(error)
        # 'Operation failed'
        error.context
        # {'operation': 'move', 'handle': 'NodeHandle(1, 3, 0)'}
        ```
    """

    def __init__(
        self,
        message: str,
        context: Dict[str, Any] | None = None,
        details: Dict[str, Any] | None = None,
    ):
        """Initialize the exception with optional context.

        Args:
            message: Error message
            context: Optional context dictionary
            details: Optional details dictionary (takes precedence over context)
        """
        super().__init__(message)
        self.context = details or context or {}
        self.details = self.context


class ValidationError(TreesomeError):
    """Raised when input data fails validation.

    Common scenarios include malformed tree descriptions handed to a builder
    and inconsistent dense array representations.
    """

    pass


class ConfigurationError(TreesomeError):
    """Raised when configuration is invalid.

    Example:
        ```python
        raise ConfigurationError(
            "Unknown configuration key",
            context={"key": "reuse_slot", "known_keys": ["reuse_slots"]}
        )
        ```
    """

    pass


class NotFoundError(TreesomeError):
    """Raised when a requested item does not exist.

    Use this exception when looking items up by identity and they are gone
    or were never there.
    """

    pass


class OperationError(TreesomeError):
    """Raised when an operation cannot be applied.

    Use this exception for requests that are well formed but would violate
    a structural rule if carried out.
    """

    pass


class ConcurrencyError(TreesomeError):
    """Raised when overlapping operations conflict.

    Example:
        ```python
        raise ConcurrencyError(
            "Structure modified while being read",
            context={"active_readers": 1}
        )
        ```
    """

    pass


__all__ = [
    "TreesomeError",
    "ValidationError",
    "ConfigurationError",
    "NotFoundError",
    "OperationError",
    "ConcurrencyError",
]
