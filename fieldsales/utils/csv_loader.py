"""Read uploaded CSV files and write exports/templates to disk."""

from pathlib import Path

from fieldsales.config import EXPORT_DIR
from fieldsales.utils.logger import get_logger

logger = get_logger("fieldsales.utils.csv_loader")


def read_csv_text(path: Path) -> str:
    """Read an uploaded CSV file as text. Missing file raises FileNotFoundError."""
    if not path.exists():
        raise FileNotFoundError(f"CSV file not found: {path}")
    text = path.read_text(encoding="utf-8")
    logger.debug("csv_loader.read", path=str(path), size=len(text))
    return text


def write_csv_text(filename: str, content: str, output_dir: Path | None = None) -> Path:
    """Write CSV content under output_dir (EXPORT_DIR by default) and return the path."""
    target_dir = output_dir or EXPORT_DIR
    target_dir.mkdir(parents=True, exist_ok=True)
    path = target_dir / filename
    with path.open("w", encoding="utf-8", newline="") as f:
        f.write(content)
    logger.info("csv_loader.write", path=str(path), size=len(content))
    return path
