"""Errors raised by the reconciliation engine.

Structural problems (empty file, missing header) stop the whole parse. Row
problems are never raised to callers: validators raise RowRejected and the
parser turns it into a RowValidationError inside the result.
"""

from typing import Optional

from fieldsales.models.outcomes import RowValidationError

__all__ = [
    "ReconcileError",
    "EmptyInputError",
    "SchemaMismatchError",
    "RowRejected",
    "RowValidationError",
    "CommitError",
]


class ReconcileError(ValueError):
    """Base class for structural upload errors."""


class EmptyInputError(ReconcileError):
    def __init__(self, message: str = "CSV file must have at least a header row and one data row"):
        super().__init__(message)


class SchemaMismatchError(ReconcileError):
    def __init__(self, missing_columns: list[str]):
        self.missing_columns = list(missing_columns)
        super().__init__(f"Missing required columns: {', '.join(self.missing_columns)}")


class RowRejected(Exception):
    """Raised by a row validator; reason is shown to the user as-is."""

    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason


class CommitError(Exception):
    """A group replacement failed. Groups in `completed` were already written; later ones were not attempted."""

    def __init__(self, group: str, completed: Optional[dict[str, int]] = None, cause: str = ""):
        self.group = group
        self.completed = dict(completed or {})
        self.cause = cause
        super().__init__(f"Failed to replace {group!r}: {cause}" if cause else f"Failed to replace {group!r}")
