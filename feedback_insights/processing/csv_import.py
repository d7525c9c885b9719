"""Load feedback rows from CSV exports."""

import csv
import logging
from dataclasses import dataclass
from pathlib import Path

from ..constants import CSV_IMPORT_SOURCE
from ..exceptions import ValidationError

logger = logging.getLogger(__name__)

# First column present wins
TEXT_COLUMNS = ("content", "feedback", "text", "comment")
DATE_COLUMNS = ("date", "feedback_date", "feedbackDate", "created_at")


@dataclass
class FeedbackRow:
    """A single feedback row read from a CSV file."""

    content: str
    source: str = CSV_IMPORT_SOURCE
    feedback_date: str | None = None


def _find_column(fieldnames: list[str], candidates: tuple[str, ...]) -> str | None:
    lookup = {name.strip().lower(): name for name in fieldnames}
    for candidate in candidates:
        if candidate.lower() in lookup:
            return lookup[candidate.lower()]
    return None


def load_feedback_csv(path: Path | str) -> list[FeedbackRow]:
    """Read feedback rows from a CSV file with a header row.

    Rows without text are skipped.

    Raises:
        ValidationError: If the file has no recognizable text column

    """
    path = Path(path)
    with path.open(newline="", encoding="utf-8-sig") as f:
        reader = csv.DictReader(f)
        fieldnames = reader.fieldnames or []

        text_column = _find_column(fieldnames, TEXT_COLUMNS)
        if text_column is None:
            raise ValidationError(
                f"{path.name} has no feedback column (expected one of: {', '.join(TEXT_COLUMNS)})"
            )
        source_column = _find_column(fieldnames, ("source",))
        date_column = _find_column(fieldnames, DATE_COLUMNS)

        rows = []
        skipped = 0
        for record in reader:
            content = (record.get(text_column) or "").strip()
            if not content:
                skipped += 1
                continue
            source = (record.get(source_column) or "").strip() if source_column else ""
            feedback_date = (record.get(date_column) or "").strip() if date_column else ""
            rows.append(
                FeedbackRow(
                    content=content,
                    source=source or CSV_IMPORT_SOURCE,
                    feedback_date=feedback_date or None,
                )
            )

    logger.info(f"Loaded {len(rows)} feedback rows from {path.name} ({skipped} blank rows skipped)")
    return rows
