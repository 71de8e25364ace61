"""Parse and commit result models for the CSV reconciliation engine."""

from enum import Enum
from typing import Any, Literal, Optional, Union

from pydantic import BaseModel


class RowAction(str, Enum):
    """What a valid row will do to the store on commit."""

    INSERT = "INSERT"
    UPDATE = "UPDATE"
    REPLACE = "REPLACE"


class CommitMode(str, Enum):
    """REPLACE_BY_GROUP: delete+insert per group. UPSERT_BY_KEY: update or insert per row."""

    REPLACE_BY_GROUP = "REPLACE_BY_GROUP"
    UPSERT_BY_KEY = "UPSERT_BY_KEY"


class Record(BaseModel):
    """One CSV data line: declared column -> trimmed cell, plus its physical line number."""

    line_number: int
    cells: dict[str, str]

    def get(self, column: str) -> str:
        return self.cells.get(column, "")


class RowValidationError(BaseModel):
    """Row-level problem. Collected in the parse result, never raised."""

    line_number: int
    reason: str

    def __str__(self) -> str:
        return f"Row {self.line_number}: {self.reason}"


class ValidRow(BaseModel):
    """Row that passed every check; item is the decoded domain model."""

    kind: Literal["valid"] = "valid"
    record: Record
    item: Any
    action: RowAction

    @property
    def is_valid(self) -> bool:
        return True

    @property
    def line_number(self) -> int:
        return self.record.line_number


class InvalidRow(BaseModel):
    kind: Literal["invalid"] = "invalid"
    record: Record
    error: RowValidationError

    @property
    def is_valid(self) -> bool:
        return False

    @property
    def line_number(self) -> int:
        return self.record.line_number

    @property
    def reason(self) -> str:
        return self.error.reason


RowOutcome = Union[ValidRow, InvalidRow]


class ParseResult(BaseModel):
    """Outcome of parsing one upload: one row per data line, in input order."""

    schema_name: str
    group_field: Optional[str] = None
    rows: list[RowOutcome] = []

    @property
    def valid_count(self) -> int:
        return sum(1 for r in self.rows if r.is_valid)

    @property
    def invalid_count(self) -> int:
        return sum(1 for r in self.rows if not r.is_valid)

    def valid_rows(self) -> list[ValidRow]:
        return [r for r in self.rows if isinstance(r, ValidRow)]

    def errors(self) -> list[RowValidationError]:
        return [r.error for r in self.rows if isinstance(r, InvalidRow)]

    def groups(self) -> dict[str, list[Any]]:
        """Valid items by group in first-appearance order, each sorted by priority when items carry one."""
        if not self.group_field:
            return {}
        grouped: dict[str, list[Any]] = {}
        for row in self.valid_rows():
            grouped.setdefault(getattr(row.item, self.group_field), []).append(row.item)
        for items in grouped.values():
            if items and hasattr(items[0], "priority"):
                items.sort(key=lambda i: i.priority)
        return grouped


class CommitResult(BaseModel):
    """Aggregate summary of a commit; errors hold short messages, never tracebacks."""

    mode: CommitMode
    collection: str
    added: int = 0
    updated: int = 0
    failed: int = 0
    replaced: dict[str, int] = {}
    errors: list[str] = []

    @property
    def written(self) -> int:
        return self.added + self.updated + sum(self.replaced.values())


class UploadReport(BaseModel):
    """Preview of an upload plus the commit summary when it was written."""

    parse: ParseResult
    commit: Optional[CommitResult] = None

    @property
    def committed(self) -> bool:
        return self.commit is not None
