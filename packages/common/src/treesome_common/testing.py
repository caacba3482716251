"""Test utilities for treesome packages.

Example:
    ```python
    from treesome_common.testing import requires_package

    @requires_package("graphviz")
    def test_render_dot():
        ...
    ```
"""

import importlib.util
from typing import Any


def is_package_available(package_name: str) -> bool:
    """Check if a Python package is available.

    Args:
        package_name: Name of the package to check

    Returns:
        True if package can be imported, False otherwise
    """
    return importlib.util.find_spec(package_name) is not None


# Pytest Markers


try:
    import pytest

    def requires_package(package_name: str) -> Any:
        """Create a skip marker for a required package.

        Args:
            package_name: Name of the required package

        Returns:
            pytest.mark.skipif marker
        """
        return pytest.mark.skipif(
            not is_package_available(package_name),
            reason=f"{package_name} not installed",
        )

except ImportError:
    # pytest not installed - provide a placeholder marker
    def requires_package(package_name: str) -> Any:  # type: ignore
        return None


__all__ = [
    "is_package_available",
    "requires_package",
]
