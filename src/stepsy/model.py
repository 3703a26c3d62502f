"""Modelos tipados para dias persistidos y sesiones de actividad."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class DayEntry:
    """Total steps for one calendar day (date is local midnight)."""

    date: datetime
    steps: int


@dataclass
class ActivitySession:
    """Toggleable accumulation window, independent of calendar days."""

    id: int
    steps: int = 0
    active: bool = True

    def toggle(self) -> None:
        self.active = not self.active


def is_step_count(value: object) -> bool:
    """True for non-negative ints (bools excluded)."""
    return isinstance(value, int) and not isinstance(value, bool) and value >= 0
