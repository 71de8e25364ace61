"""Utility modules."""

from fieldsales.utils.csv_loader import read_csv_text, write_csv_text
from fieldsales.utils.logger import clear_context, get_logger, log_context, log_row_errors

__all__ = [
    "read_csv_text",
    "write_csv_text",
    "get_logger",
    "log_row_errors",
    "log_context",
    "clear_context",
]
