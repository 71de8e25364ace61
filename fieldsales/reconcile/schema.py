"""Column schema: declared columns, row validator, dedup key and store mapping for one upload kind."""

from collections.abc import Callable
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict

from fieldsales.models.outcomes import CommitMode, Record
from fieldsales.store.protocol import Row


class ColumnSchema(BaseModel):
    """Everything the engine needs to parse, validate and commit one kind of CSV."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    name: str
    collection: str
    mode: CommitMode
    required_columns: tuple[str, ...]
    optional_columns: tuple[str, ...] = ()
    # Record -> typed item; raises RowRejected on the first failing rule
    row_validator: Callable[[Record], Any]
    dedup_columns: tuple[str, ...]
    # Store field names, parallel to dedup_columns
    key_fields: tuple[str, ...]
    missing_reason: str
    duplicate_reason: str
    to_store_row: Callable[[Any], Row]
    group_field: Optional[str] = None
    insert_only_fields: tuple[str, ...] = ()

    @property
    def columns(self) -> tuple[str, ...]:
        return self.required_columns + self.optional_columns

    def key_of(self, record: Record) -> tuple[str, ...]:
        return tuple(record.get(c) for c in self.dedup_columns)

    def store_key_of(self, row: Row) -> tuple[str, ...]:
        return tuple(row.get(f) for f in self.key_fields)
