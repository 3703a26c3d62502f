"""Respaldo y restauracion del historial diario en CSV."""

from __future__ import annotations

import logging
import re
from pathlib import Path

import pandas as pd

from stepsy.errors import InvalidArgument, NotFound
from stepsy.storage import SQLiteDailyStore
from stepsy.summary import entries_to_frame

logger = logging.getLogger(__name__)


def export_csv(store: SQLiteDailyStore, out_path: Path) -> int:
    """Write every stored day as ``date,steps`` rows. Returns rows written."""
    out_path.parent.mkdir(parents=True, exist_ok=True)
    try:
        entries = store.get_entries(store.first_entry(), store.last_entry())
    except NotFound:
        entries = []
    df = entries_to_frame(entries)
    df.to_csv(out_path, index=False)
    logger.info("Exported %s days to %s", len(df), out_path)
    return len(df)


def import_csv(store: SQLiteDailyStore, csv_path: Path) -> int:
    """Upsert days from a CSV backup.

    Column names are matched loosely (``date``/``fecha``, ``steps``/``pasos``).
    Rows with an unreadable date or step count are skipped.

    Returns:
        Number of days written.

    Raises:
        FileNotFoundError: If the file does not exist.
        InvalidArgument: If no date or steps column is found.
    """
    if not csv_path.exists():
        raise FileNotFoundError(str(csv_path))
    df = pd.read_csv(csv_path)
    df = df.rename(columns={c: str(c).strip() for c in df.columns})
    cols = list(df.columns)

    date_col = _find_col(cols, [r"^date$", r"\bfecha\b", r"\bdate"])
    steps_col = _find_col(cols, [r"^steps$", r"\bpasos\b", r"\bstep"])
    if not date_col or not steps_col:
        raise InvalidArgument(f"CSV needs date and steps columns, got {cols}")

    dates = pd.to_datetime(df[date_col], errors="coerce")
    steps = pd.to_numeric(df[steps_col], errors="coerce")
    valid = dates.notna() & steps.notna() & (steps >= 0)
    skipped = int((~valid).sum())
    if skipped:
        logger.warning("Skipping %s unreadable rows in %s", skipped, csv_path)

    rows = [
        (ts.date(), int(value))
        for ts, value in zip(dates[valid], steps[valid], strict=True)
    ]
    written = store.add_entries(rows)
    logger.info("Imported %s days from %s", written, csv_path)
    return written


def _find_col(columns: list[str], patterns: list[str]) -> str | None:
    for pat in patterns:
        rx = re.compile(pat, re.IGNORECASE)
        for c in columns:
            if rx.search(c):
                return c
    return None
