"""Tests for the logging helpers: scoped context and capped row-error logging."""

import os
import sys
import unittest
from pathlib import Path

os.environ["DATABASE_URL"] = "sqlite:///:memory:"
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

import structlog

from fieldsales.models.outcomes import RowValidationError
from fieldsales.utils.logger import clear_context, log_context, log_row_errors


class RecordingLogger:
    def __init__(self):
        self.warnings = []

    def warning(self, event, **kw):
        self.warnings.append((event, kw))


class TestLogContext(unittest.TestCase):
    def tearDown(self):
        clear_context()

    def test_context_is_scoped_to_block(self):
        structlog.contextvars.bind_contextvars(command="outer")
        with log_context(command="upload-msl", upload_path="msl.csv"):
            self.assertEqual(
                structlog.contextvars.get_contextvars(),
                {"command": "upload-msl", "upload_path": "msl.csv"},
            )
        self.assertEqual(structlog.contextvars.get_contextvars(), {"command": "outer"})

    def test_context_restored_after_error(self):
        with self.assertRaises(RuntimeError):
            with log_context(upload_path="x.csv"):
                raise RuntimeError("boom")
        self.assertNotIn("upload_path", structlog.contextvars.get_contextvars())


class TestLogRowErrors(unittest.TestCase):
    def _errors(self, count):
        return [RowValidationError(line_number=n + 2, reason="Invalid price") for n in range(count)]

    def test_logs_each_row_under_limit(self):
        logger = RecordingLogger()
        self.assertEqual(log_row_errors(logger, self._errors(3), limit=5), 3)
        self.assertEqual([e for e, _ in logger.warnings], ["upload.row_rejected"] * 3)
        self.assertEqual(logger.warnings[0][1], {"line": 2, "reason": "Invalid price"})

    def test_truncates_with_summary(self):
        logger = RecordingLogger()
        self.assertEqual(log_row_errors(logger, self._errors(7), limit=2), 7)
        self.assertEqual(len(logger.warnings), 3)
        self.assertEqual(logger.warnings[-1], ("upload.rows_rejected_truncated", {"total": 7, "logged": 2}))


if __name__ == "__main__":
    unittest.main()
