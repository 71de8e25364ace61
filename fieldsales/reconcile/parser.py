"""CSV parsing: header check, schema-driven decode and per-row validation.

parse() only raises for whole-file problems (EmptyInputError,
SchemaMismatchError). Every data line yields exactly one outcome, in input
order; blank lines are skipped but physical line numbers are kept so errors
point at the right line of the file.
"""

import csv
import re
from collections.abc import Callable
from typing import Optional

from fieldsales.config import CSV_PARSER_MODE
from fieldsales.models.outcomes import (
    CommitMode,
    InvalidRow,
    ParseResult,
    Record,
    RowAction,
    RowOutcome,
    RowValidationError,
    ValidRow,
)
from fieldsales.reconcile.errors import EmptyInputError, RowRejected, SchemaMismatchError
from fieldsales.reconcile.schema import ColumnSchema
from fieldsales.utils.logger import get_logger

logger = get_logger("fieldsales.reconcile.parser")

MALFORMED_LINE_REASON = "Malformed CSV line"

# Only CR, LF and CRLF end a line; str.splitlines also breaks on U+2028, \x0c and friends
_LINE_BREAK = re.compile(r"\r\n|\r|\n")


def strip_quotes(value: str) -> str:
    """Remove one pair of enclosing double quotes."""
    if len(value) >= 2 and value.startswith('"') and value.endswith('"'):
        return value[1:-1]
    return value


def split_naive(line: str) -> list[str]:
    """Split on every comma. Quoted fields cannot contain commas."""
    return [strip_quotes(cell.strip()) for cell in line.split(",")]


def split_csv(line: str) -> list[str]:
    """Split one line with a conformant CSV reader (quoted fields may contain commas)."""
    cells = next(csv.reader([line], skipinitialspace=True), [])
    return [cell.strip() for cell in cells]


SPLITTERS: dict[str, Callable[[str], list[str]]] = {
    "csv": split_csv,
    "naive": split_naive,
}


def get_splitter(mode: Optional[str] = None) -> Callable[[str], list[str]]:
    name = (mode or CSV_PARSER_MODE).lower()
    if name not in SPLITTERS:
        raise ValueError(f"Unknown CSV parser mode {name!r}. Expected one of: {', '.join(SPLITTERS)}")
    return SPLITTERS[name]


def _data_lines(raw_text: str) -> list[tuple[int, str]]:
    text = raw_text.lstrip("\ufeff")
    return [(n, line) for n, line in enumerate(_LINE_BREAK.split(text), start=1) if line.strip()]


def _read_header(line: str, splitter: Callable[[str], list[str]]) -> list[str]:
    return [strip_quotes(h.strip()).upper() for h in splitter(line)]


def parse(
    raw_text: str,
    schema: ColumnSchema,
    existing_keys: Optional[set[tuple[str, ...]]] = None,
    parser_mode: Optional[str] = None,
) -> ParseResult:
    """Parse raw CSV text against schema.

    existing_keys is a snapshot of keys already in the store; valid rows whose
    key is in it are tagged UPDATE, others INSERT. Replace-mode schemas tag
    every valid row REPLACE.
    """
    splitter = get_splitter(parser_mode)
    lines = _data_lines(raw_text)
    if len(lines) < 2:
        raise EmptyInputError()

    headers = _read_header(lines[0][1], splitter)
    missing = [c for c in schema.required_columns if c not in headers]
    if missing:
        logger.warning("reconcile.parse.schema_mismatch", schema=schema.name, missing=missing)
        raise SchemaMismatchError(missing)

    positions = {col: (headers.index(col) if col in headers else -1) for col in schema.columns}
    seen_keys: set[tuple[str, ...]] = set()
    rows: list[RowOutcome] = []

    for line_number, line in lines[1:]:
        try:
            cells = splitter(line)
        except csv.Error:
            record = Record(line_number=line_number, cells={col: "" for col in schema.columns})
            rows.append(_invalid(record, MALFORMED_LINE_REASON))
            continue

        record = Record(
            line_number=line_number,
            cells={col: (cells[i] if 0 <= i < len(cells) else "") for col, i in positions.items()},
        )
        rows.append(_check_row(record, schema, seen_keys, existing_keys))

    result = ParseResult(schema_name=schema.name, group_field=schema.group_field, rows=rows)
    logger.info(
        "reconcile.parse.complete",
        schema=schema.name,
        rows=len(rows),
        valid=result.valid_count,
        invalid=result.invalid_count,
    )
    return result


def _check_row(
    record: Record,
    schema: ColumnSchema,
    seen_keys: set[tuple[str, ...]],
    existing_keys: Optional[set[tuple[str, ...]]],
) -> RowOutcome:
    """Required fields, then duplicate key, then domain rules. First failure wins."""
    if any(not record.get(c) for c in schema.required_columns):
        return _invalid(record, schema.missing_reason)

    key = schema.key_of(record)
    if key in seen_keys:
        return _invalid(record, schema.duplicate_reason)
    seen_keys.add(key)

    try:
        item = schema.row_validator(record)
    except RowRejected as e:
        return _invalid(record, e.reason)

    if schema.mode is CommitMode.REPLACE_BY_GROUP:
        action = RowAction.REPLACE
    elif existing_keys is not None and key in existing_keys:
        action = RowAction.UPDATE
    else:
        action = RowAction.INSERT
    return ValidRow(record=record, item=item, action=action)


def _invalid(record: Record, reason: str) -> InvalidRow:
    logger.debug("reconcile.parse.row_invalid", line=record.line_number, reason=reason)
    return InvalidRow(record=record, error=RowValidationError(line_number=record.line_number, reason=reason))
