"""Create the database tables for DATABASE_URL."""

from fieldsales.config import DATABASE_URL
from fieldsales.db import init_db as create_tables

from .shared import console, logger


def init_db() -> None:
    """Create all tables (existing tables are left as they are)."""
    create_tables()
    console.print(f"[green]Database ready: {DATABASE_URL}[/green]")
    logger.info("db.initialized", url=DATABASE_URL)
