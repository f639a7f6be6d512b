"""
Tests for helper.task module.
"""

import unittest
import pytest

from .task import (
    check_operation_arguments,
    check_valid_task,
    get_task_name_from_function,
    get_task_name_from_interface,
)


class TestTaskValidation:
    """Test task validation functions."""

    def test_check_valid_task_with_function(self):
        """Test valid function passes validation."""

        def sample_function():
            pass

        check_valid_task(sample_function)

    def test_check_valid_task_with_none(self):
        """Test None task raises ValueError."""
        with pytest.raises(ValueError, match="task must not be None"):
            check_valid_task(None)

    def test_check_valid_task_with_non_callable(self):
        """Test non-callable task raises ValueError."""
        with pytest.raises(ValueError, match="task must be a function"):
            check_valid_task("not a function")

    def test_check_operation_arguments_matching(self):
        """Test an operation taking its arguments and the context passes."""

        def import_rows(offset, limit, context):
            pass

        check_operation_arguments(import_rows, 2)

    def test_check_operation_arguments_with_varargs(self):
        """Test an operation with *args accepts any count."""

        def flexible(*args):
            pass

        check_operation_arguments(flexible, 5)

    def test_check_operation_arguments_missing_context(self):
        """Test an operation without room for the context fails."""

        def import_rows(offset, limit):
            pass

        with pytest.raises(ValueError, match="cannot take 2 arguments and a context"):
            check_operation_arguments(import_rows, 2)

    def test_check_operation_arguments_too_few(self):
        """Test an operation requiring more arguments fails."""

        def import_rows(offset, limit, context):
            pass

        with pytest.raises(ValueError):
            check_operation_arguments(import_rows, 1)


class TestTaskNameExtraction(unittest.TestCase):
    """Test task name extraction functions."""

    def test_get_task_name_from_function(self):
        """Test getting name from function."""

        def sample_function():
            pass

        self.assertEqual(get_task_name_from_function(sample_function), "sample_function")

    def test_get_task_name_from_callable_object(self):
        """Test getting name from a callable instance."""

        class Handler:
            def __call__(self, context):
                pass

        self.assertEqual(get_task_name_from_function(Handler()), "Handler")

    def test_get_task_name_from_interface_string(self):
        """Test a string is used as it is."""
        self.assertEqual(get_task_name_from_interface("import_rows"), "import_rows")

    def test_get_task_name_from_interface_function(self):
        """Test a function is named after itself."""

        def import_rows():
            pass

        self.assertEqual(get_task_name_from_interface(import_rows), "import_rows")


if __name__ == "__main__":
    unittest.main()
