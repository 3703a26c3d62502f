"""Resumenes del historial diario (calendario, totales por periodo, stats)."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import date

import pandas as pd

from stepsy.model import DayEntry

_PERIODS: tuple[str, ...] = ("W", "M", "Y")


@dataclass(frozen=True)
class HistoryStats:
    """Aggregates over a range of stored days."""

    days: int
    total_steps: int
    average_steps: float
    best_day: date | None
    best_steps: int
    days_at_goal: int
    distance_m: float


def entries_to_frame(entries: Sequence[DayEntry]) -> pd.DataFrame:
    """Convert stored entries to a DataFrame with ``date`` and ``steps``."""
    rows = [{"date": e.date.date(), "steps": int(e.steps)} for e in entries]
    if not rows:
        return pd.DataFrame(columns=["date", "steps"])
    return pd.DataFrame(rows).sort_values("date").reset_index(drop=True)


def build_calendar(min_day: date, max_day: date) -> pd.DataFrame:
    """Build inclusive day calendar DataFrame."""
    days = pd.date_range(start=min_day, end=max_day, freq="D")
    return pd.DataFrame({"date": days.date})


def fill_missing_days(df: pd.DataFrame) -> pd.DataFrame:
    """Add a zero-step row for every day missing between first and last."""
    if df.empty:
        return df
    cal = build_calendar(min_day=min(df["date"]), max_day=max(df["date"]))
    out = cal.merge(df, on="date", how="left")
    out["steps"] = out["steps"].fillna(0).astype(int)
    return out.sort_values("date").reset_index(drop=True)


def period_totals(df: pd.DataFrame, freq: str) -> pd.DataFrame:
    """Sum steps per week (``W``), month (``M``) or year (``Y``).

    Returns:
        DataFrame with ``period`` (first day of the period), ``steps`` and
        ``days`` (stored days inside the period).

    Raises:
        ValueError: If freq is not one of W, M, Y.
    """
    if freq not in _PERIODS:
        raise ValueError(f"freq must be one of {_PERIODS}, got {freq!r}")
    if df.empty:
        return pd.DataFrame(columns=["period", "steps", "days"])

    work = df.copy()
    work["date"] = pd.to_datetime(work["date"])
    if freq == "W":
        # Weeks start on Monday.
        work["period"] = work["date"] - pd.to_timedelta(
            work["date"].dt.weekday, unit="D"
        )
    else:
        work["period"] = work["date"].dt.to_period(freq).dt.start_time
    g = work.groupby("period", as_index=False).agg(
        steps=("steps", "sum"),
        days=("steps", "count"),
    )
    g["period"] = g["period"].dt.date
    g["steps"] = g["steps"].astype(int)
    return g.sort_values("period").reset_index(drop=True)


def history_stats(
    df: pd.DataFrame, *, daily_goal: int, step_length_cm: int
) -> HistoryStats:
    """Aggregate totals, average, best day and distance.

    Args:
        df: Daily DataFrame (``date``, ``steps``).
        daily_goal: Steps that count a day as reached.
        step_length_cm: Average step length used for distance.
    """
    if df.empty:
        return HistoryStats(
            days=0,
            total_steps=0,
            average_steps=0.0,
            best_day=None,
            best_steps=0,
            days_at_goal=0,
            distance_m=0.0,
        )
    steps = df["steps"].astype(int)
    total = int(steps.sum())
    best_idx = steps.idxmax()
    return HistoryStats(
        days=len(df),
        total_steps=total,
        average_steps=round(float(steps.mean()), 2),
        best_day=df.loc[best_idx, "date"],
        best_steps=int(steps[best_idx]),
        days_at_goal=int((steps >= daily_goal).sum()),
        distance_m=round(total * step_length_cm / 100.0, 2),
    )
