"""Tests for the exception framework."""

import pytest

from treesome_common.exceptions import (
    ConcurrencyError,
    ConfigurationError,
    NotFoundError,
    OperationError,
    TreesomeError,
    ValidationError,
)


class TestTreesomeError:
    """Test the base TreesomeError class."""

    def test_basic_exception(self):
        """Test basic exception without context."""
        error = TreesomeError("Something went wrong")
        assert str(error) == "Something went wrong"
        assert error.context == {}
        assert error.details == {}

    def test_exception_with_context(self):
        """Test exception with context dictionary."""
        error = TreesomeError(
            "Operation failed",
            context={"operation": "move", "index": 3}
        )
        assert str(error) == "Operation failed"
        assert error.context == {"operation": "move", "index": 3}
        assert error.details == {"operation": "move", "index": 3}

    def test_details_takes_precedence(self):
        """Test that details parameter takes precedence over context."""
        error = TreesomeError(
            "Error",
            context={"key": "context_value"},
            details={"key": "details_value"}
        )
        assert error.context == {"key": "details_value"}
        assert error.details == {"key": "details_value"}

    def test_exception_catchable_as_base(self):
        """Test that specific exceptions can be caught as base."""
        with pytest.raises(TreesomeError):
            raise ValidationError("Invalid data")


@pytest.mark.parametrize(
    "error_class",
    [ValidationError, ConfigurationError, NotFoundError, OperationError, ConcurrencyError],
)
def test_subclasses_carry_context(error_class):
    """Every category keeps its message and context."""
    error = error_class("Failed", context={"handle": "h1"})
    assert str(error) == "Failed"
    assert error.context["handle"] == "h1"
    assert isinstance(error, TreesomeError)


class TestCustomExceptions:
    """Test creating custom exceptions from the base classes."""

    def test_multiple_inheritance(self):
        """A package error can belong to its own family and a common category."""

        class PackageError(TreesomeError):
            pass

        class MissingThing(PackageError, NotFoundError):
            pass

        error = MissingThing("gone", context={"id": 1})
        assert isinstance(error, PackageError)
        assert isinstance(error, NotFoundError)
        assert error.context == {"id": 1}
