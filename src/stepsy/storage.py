"""Persistencia SQLite de pasos por dia y configuracion de la app."""

from __future__ import annotations

import logging
import sqlite3
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, fields
from datetime import date, datetime, tzinfo
from pathlib import Path

from dateutil import tz

from stepsy.dates import start_of_day
from stepsy.errors import InvalidArgument, NotFound, StorageFault
from stepsy.model import DayEntry, is_step_count

logger = logging.getLogger(__name__)

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS app_config (
    key TEXT PRIMARY KEY,
    value TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS day_entries (
    date TEXT PRIMARY KEY,
    steps INTEGER NOT NULL CHECK (steps >= 0)
);
"""


@dataclass(frozen=True)
class AppConfig:
    """Configuracion persistida de la app."""

    timezone: str = ""
    export_dir: str = ""
    daily_goal: int = 10000
    step_length_cm: int = 70


class SQLiteDailyStore:
    """Repositorio SQLite: un total de pasos por dia calendario."""

    def __init__(self, db_path: Path, zone: tzinfo | None = None) -> None:
        """Create store and ensure schema exists.

        Args:
            db_path: SQLite file, created with its parent folder if missing.
            zone: Zone used to normalize keys (default: device local zone).
        """
        self._db_path = db_path
        self._zone = zone or tz.tzlocal()
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._init_schema()

    @property
    def zone(self) -> tzinfo:
        return self._zone

    @contextmanager
    def _connect(self) -> Iterator[sqlite3.Connection]:
        try:
            conn = sqlite3.connect(self._db_path, timeout=10.0)
        except sqlite3.Error as exc:
            raise StorageFault(f"Cannot open {self._db_path}: {exc}") from exc
        conn.row_factory = sqlite3.Row
        try:
            yield conn
        except sqlite3.Error as exc:
            raise StorageFault(str(exc)) from exc
        finally:
            conn.close()

    def _init_schema(self) -> None:
        with self._connect() as conn:
            # WAL lets readers run while a write is in flight.
            conn.execute("PRAGMA journal_mode=WAL")
            conn.executescript(SCHEMA_SQL)
            conn.commit()

    def _key(self, day: datetime | date) -> str:
        return start_of_day(day, self._zone).date().isoformat()

    def _to_datetime(self, key: str) -> datetime:
        return start_of_day(date.fromisoformat(key), self._zone)

    def add_entry(self, day: datetime | date, steps: int) -> None:
        """Insert or replace the total for one calendar day.

        Raises:
            InvalidArgument: If steps is not a non-negative integer.
            StorageFault: If the write fails.
        """
        if not is_step_count(steps):
            raise InvalidArgument(f"steps must be a non-negative int, got {steps!r}")
        key = self._key(day)
        with self._connect() as conn, conn:
            conn.execute(
                """
                INSERT INTO day_entries(date, steps) VALUES(?, ?)
                ON CONFLICT(date) DO UPDATE SET steps=excluded.steps
                """,
                (key, steps),
            )
        logger.debug("Stored %s steps for %s", steps, key)

    def add_entries(self, entries: list[tuple[datetime | date, int]]) -> int:
        """Upsert many days in a single transaction. Returns rows written."""
        rows: list[tuple[str, int]] = []
        for day, steps in entries:
            if not is_step_count(steps):
                raise InvalidArgument(
                    f"steps must be a non-negative int, got {steps!r} for {day}"
                )
            rows.append((self._key(day), steps))
        if not rows:
            return 0
        with self._connect() as conn, conn:
            conn.executemany(
                """
                INSERT INTO day_entries(date, steps) VALUES(?, ?)
                ON CONFLICT(date) DO UPDATE SET steps=excluded.steps
                """,
                rows,
            )
        return len(rows)

    def get_entries(
        self, from_day: datetime | date, to_day: datetime | date
    ) -> list[DayEntry]:
        """Entries between both days (inclusive), ascending by date."""
        with self._connect() as conn:
            rows = conn.execute(
                """
                SELECT date, steps FROM day_entries
                WHERE date BETWEEN ? AND ?
                ORDER BY date
                """,
                (self._key(from_day), self._key(to_day)),
            ).fetchall()
        return [
            DayEntry(date=self._to_datetime(row["date"]), steps=int(row["steps"]))
            for row in rows
        ]

    def first_entry(self) -> datetime:
        """Earliest stored day.

        Raises:
            NotFound: If the store is empty.
        """
        return self._edge_entry("MIN")

    def last_entry(self) -> datetime:
        """Latest stored day.

        Raises:
            NotFound: If the store is empty.
        """
        return self._edge_entry("MAX")

    def _edge_entry(self, func: str) -> datetime:
        with self._connect() as conn:
            row = conn.execute(f"SELECT {func}(date) AS d FROM day_entries").fetchone()
        if row is None or row["d"] is None:
            raise NotFound("No day entries stored yet")
        return self._to_datetime(row["d"])

    def load_config(self) -> AppConfig:
        """Devuelve configuracion guardada o defaults."""
        defaults = AppConfig()
        with self._connect() as conn:
            rows = conn.execute("SELECT key, value FROM app_config").fetchall()
        values = {row["key"]: row["value"] for row in rows}
        return AppConfig(
            timezone=_parse_timezone(values.get("timezone"), defaults.timezone),
            export_dir=values.get("export_dir", defaults.export_dir),
            daily_goal=_parse_positive_int(
                values.get("daily_goal"), defaults.daily_goal
            ),
            step_length_cm=_parse_positive_int(
                values.get("step_length_cm"), defaults.step_length_cm
            ),
        )

    def save_config(self, config: AppConfig) -> None:
        """Guarda la configuracion en tabla key/value."""
        payload = {f.name: str(getattr(config, f.name)) for f in fields(config)}
        with self._connect() as conn, conn:
            conn.executemany(
                """
                INSERT INTO app_config(key, value) VALUES(?, ?)
                ON CONFLICT(key) DO UPDATE SET value=excluded.value
                """,
                payload.items(),
            )


def _parse_timezone(raw: str | None, default: str) -> str:
    if not raw:
        return default
    if tz.gettz(raw) is None:
        logger.warning("Unknown stored timezone %r, using local zone", raw)
        return default
    return raw


def _parse_positive_int(raw: str | None, default: int) -> int:
    if raw is None:
        return default
    try:
        value = int(raw)
    except ValueError:
        return default
    return value if value > 0 else default
