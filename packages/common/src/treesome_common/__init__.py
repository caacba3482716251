"""Common utilities and base classes for treesome packages.

This package provides shared functionality used across treesome packages:

- **Exceptions**: Unified exception hierarchy with context support
- **Testing**: Test utilities and pytest markers

Example:
    ```python
    from treesome_common import TreesomeError

    raise TreesomeError("Something went wrong", context={"details": "here"})
    ```
"""

from treesome_common.exceptions import (
    ConcurrencyError,
    ConfigurationError,
    NotFoundError,
    OperationError,
    TreesomeError,
    ValidationError,
)
from treesome_common.testing import (
    is_package_available,
    requires_package,
)

__version__ = "0.1.0"

__all__ = [
    # Version
    "__version__",
    # Exceptions
    "TreesomeError",
    "ValidationError",
    "ConfigurationError",
    "NotFoundError",
    "OperationError",
    "ConcurrencyError",
    # Testing
    "is_package_available",
    "requires_package",
]
