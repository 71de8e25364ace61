"""Configuration and settings."""

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

# Paths
PROJECT_ROOT = Path(__file__).resolve().parent.parent
DATA_DIR = PROJECT_ROOT / "data"
OUTPUT_DIR = PROJECT_ROOT / "output"
EXPORT_DIR = Path(os.getenv("EXPORT_DIR", str(OUTPUT_DIR / "exports")))

# Ensure directories exist
DATA_DIR.mkdir(parents=True, exist_ok=True)
OUTPUT_DIR.mkdir(parents=True, exist_ok=True)

# Database
DATABASE_URL = os.getenv("DATABASE_URL", f"sqlite:///{DATA_DIR / 'fieldsales.db'}")

# Logging
LOG_DIR = OUTPUT_DIR / "logs"
LOG_FILE = LOG_DIR / "app.jsonl"
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
VERBOSE_LOGGING = os.getenv("VERBOSE_LOGGING", "false").lower() == "true"
LOG_TO_FILE = os.getenv("LOG_TO_FILE", "true").lower() == "true"
# Rejected rows listed individually in the upload log before summarizing
LOG_ROW_ERROR_LIMIT = int(os.getenv("LOG_ROW_ERROR_LIMIT", "20"))

# Ensure log directory exists
LOG_DIR.mkdir(parents=True, exist_ok=True)

# CSV parsing: "csv" uses a conformant reader (quoted fields may contain commas),
# "naive" splits on every comma and strips one pair of enclosing quotes.
CSV_PARSER_MODE = os.getenv("CSV_PARSER_MODE", "csv").lower()

# Store defaults applied when a column is left blank
DEFAULT_STORE_ROUTE = os.getenv("DEFAULT_STORE_ROUTE", "A")
DEFAULT_STORE_CATEGORY = os.getenv("DEFAULT_STORE_CATEGORY", "General")
