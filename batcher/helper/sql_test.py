"""
Test cases for SQL loader functionality.
"""

import shutil
import unittest
from unittest.mock import Mock, patch, MagicMock
import os
import tempfile
from pathlib import Path
from psycopg import errors

from .sql import SQLLoader, run_ddl


def _mock_connection():
    mock_conn = Mock()
    mock_cursor = MagicMock()
    mock_conn.cursor.return_value = mock_cursor
    mock_cursor.__enter__.return_value = mock_cursor
    mock_cursor.__exit__.return_value = None
    return mock_conn, mock_cursor


class TestRunDDL(unittest.TestCase):
    """Test cases for run_ddl function."""

    def test_run_ddl_success(self):
        """Test successful DDL execution."""
        mock_conn, mock_cursor = _mock_connection()

        run_ddl(mock_conn, "SELECT init_batch();")

        mock_conn.rollback.assert_called_once()
        mock_cursor.execute.assert_called_once_with(b"SELECT init_batch();")
        mock_conn.commit.assert_called_once()

    @patch("batcher.helper.sql.time.sleep")
    def test_run_ddl_retry_on_deadlock(self, mock_sleep: MagicMock):
        """Test DDL retry on deadlock."""
        mock_conn, mock_cursor = _mock_connection()
        mock_cursor.execute.side_effect = [errors.DeadlockDetected("deadlock"), None]

        run_ddl(mock_conn, "SELECT init_batch();", max_retries=3)

        self.assertEqual(mock_cursor.execute.call_count, 2)
        mock_sleep.assert_called_once_with(0.5)

    @patch("batcher.helper.sql.time.sleep")
    def test_run_ddl_max_retries_exceeded(self, mock_sleep: MagicMock):
        """Test max retries exceeded."""
        mock_conn, mock_cursor = _mock_connection()
        mock_cursor.execute.side_effect = errors.DeadlockDetected("deadlock")

        with self.assertRaises(errors.DeadlockDetected):
            run_ddl(mock_conn, "SELECT init_batch();", max_retries=2)

        self.assertEqual(mock_cursor.execute.call_count, 2)

    def test_run_ddl_other_exception(self):
        """Test DDL with other exception."""
        mock_conn, mock_cursor = _mock_connection()
        mock_cursor.execute.side_effect = ValueError("some error")

        with self.assertRaises(ValueError):
            run_ddl(mock_conn, "SELECT init_batch();")

        mock_conn.rollback.assert_called()


class TestSQLLoader(unittest.TestCase):
    """Test cases for SQLLoader class."""

    def setUp(self):
        """Set up test fixtures."""
        self.temp_dir = tempfile.mkdtemp()
        self.sql_loader = SQLLoader(self.temp_dir)

    def tearDown(self):
        """Clean up test fixtures."""
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def test_default_path_contains_sql_files(self):
        """Test the default path holds the shipped SQL files."""
        loader = SQLLoader()
        self.assertTrue(loader.sql_base_path.endswith("sql"))
        for file_name in ("queue.sql", "batch.sql", "sequence.sql"):
            self.assertTrue(
                os.path.isfile(os.path.join(loader.sql_base_path, file_name))
            )

    def test_shipped_files_define_functions(self):
        """Test every checked function is defined in its SQL file."""
        loader = SQLLoader()
        files = {
            "queue.sql": loader.QUEUE_FUNCTIONS,
            "batch.sql": loader.BATCH_FUNCTIONS,
            "sequence.sql": loader.SEQUENCE_FUNCTIONS,
        }
        for file_name, functions in files.items():
            content = loader.load_sql_file(os.path.join(loader.sql_base_path, file_name))
            for function in functions:
                self.assertIn(f"CREATE OR REPLACE FUNCTION {function}(", content)

    def test_load_sql_file_success(self):
        """Test loading SQL file content."""
        sql_content = "SELECT 1;"
        sql_file = Path(self.temp_dir) / "test.sql"
        sql_file.write_text(sql_content)

        self.assertEqual(self.sql_loader.load_sql_file(str(sql_file)), sql_content)

    def test_load_sql_file_not_found(self):
        """Test loading non-existent SQL file."""
        with self.assertRaises(ValueError) as cm:
            self.sql_loader.load_sql_file("/nonexistent/file.sql")
        self.assertIn("SQL file not found", str(cm.exception))

    def test_check_functions_some_missing(self):
        """Test checking functions when some are missing."""
        mock_conn, mock_cursor = _mock_connection()
        mock_cursor.fetchone.side_effect = [[True], [False]]

        self.assertFalse(self.sql_loader.check_functions(mock_conn, ["f1", "f2"]))

    @patch.object(SQLLoader, "execute_sql_file")
    @patch.object(SQLLoader, "check_functions")
    def test_load_queue_sql_functions_exist(
        self, mock_check: MagicMock, mock_execute: MagicMock
    ):
        """Test loading queue SQL when functions already exist."""
        mock_check.return_value = True

        mock_conn = Mock()
        self.sql_loader.load_queue_sql(mock_conn, force=False)

        mock_check.assert_called_once_with(mock_conn, self.sql_loader.QUEUE_FUNCTIONS)
        mock_execute.assert_not_called()

    @patch.object(SQLLoader, "execute_sql_file")
    @patch.object(SQLLoader, "check_functions")
    def test_load_batch_sql_force_reload(
        self, mock_check: MagicMock, mock_execute: MagicMock
    ):
        """Test loading batch SQL with force=True."""
        mock_check.return_value = True

        mock_conn = Mock()
        self.sql_loader.load_batch_sql(mock_conn, force=True)

        mock_execute.assert_called_once_with(
            mock_conn, os.path.join(self.temp_dir, "batch.sql")
        )

    @patch.object(SQLLoader, "execute_sql_file")
    @patch.object(SQLLoader, "check_functions")
    def test_load_sequence_sql_verification_fails(
        self, mock_check: MagicMock, mock_execute: MagicMock
    ):
        """Test loading sequence SQL when verification fails."""
        mock_check.side_effect = [False, False]

        with self.assertRaises(RuntimeError) as cm:
            self.sql_loader.load_sequence_sql(Mock())

        self.assertIn("sequence.sql were created", str(cm.exception))

    def test_execute_sql_file(self):
        """Test executing SQL file."""
        sql_content = "SELECT 1;"
        sql_file = Path(self.temp_dir) / "test.sql"
        sql_file.write_text(sql_content)

        mock_conn = Mock()

        with patch("batcher.helper.sql.run_ddl") as mock_run_ddl:
            self.sql_loader.execute_sql_file(mock_conn, str(sql_file))
            mock_run_ddl.assert_called_once_with(mock_conn, sql_content)


if __name__ == "__main__":
    unittest.main()
