"""CSV reconciliation engine: parse, validate, classify and commit bulk uploads."""

from fieldsales.reconcile.commit import commit, fetch_existing_keys
from fieldsales.reconcile.errors import (
    CommitError,
    EmptyInputError,
    ReconcileError,
    RowRejected,
    RowValidationError,
    SchemaMismatchError,
)
from fieldsales.reconcile.export import export_msl, msl_export_filename, template_csv
from fieldsales.reconcile.parser import parse, split_csv, split_naive
from fieldsales.reconcile.schema import ColumnSchema
from fieldsales.reconcile.schemas import MSL_SCHEMA, PRODUCT_SCHEMA, STORE_SCHEMA, get_schema

__all__ = [
    "ColumnSchema",
    "MSL_SCHEMA",
    "PRODUCT_SCHEMA",
    "STORE_SCHEMA",
    "get_schema",
    "parse",
    "split_csv",
    "split_naive",
    "commit",
    "fetch_existing_keys",
    "export_msl",
    "msl_export_filename",
    "template_csv",
    "ReconcileError",
    "EmptyInputError",
    "SchemaMismatchError",
    "RowRejected",
    "RowValidationError",
    "CommitError",
]
