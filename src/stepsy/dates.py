"""Normalizacion de fechas a medianoche local y reloj inyectable."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, timedelta, tzinfo
from typing import Protocol

from dateutil import tz


def resolve_tz(name: str | None = None) -> tzinfo:
    """Return the zone for an IANA name, or the device local zone.

    Raises:
        ValueError: If the name is not a known zone.
    """
    if not name:
        return tz.tzlocal()
    zone = tz.gettz(name)
    if zone is None:
        raise ValueError(f"Unknown timezone: {name}")
    return zone


def start_of_day(ts: datetime | date, zone: tzinfo | None = None) -> datetime:
    """Return 00:00:00 of the same local calendar day as ``ts``.

    Naive datetimes and plain dates are read as wall time in ``zone``;
    aware datetimes are converted to ``zone`` first.

    Args:
        ts: Any timestamp.
        zone: Target zone (default: device local zone).

    Returns:
        Timezone-aware datetime at local midnight.
    """
    zone = zone or tz.tzlocal()
    if not isinstance(ts, datetime):
        ts = datetime.combine(ts, datetime.min.time())
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=zone)
    local = ts.astimezone(zone)
    midnight = datetime.combine(local.date(), datetime.min.time())
    return tz.resolve_imaginary(midnight.replace(tzinfo=zone))


class Clock(Protocol):
    """Wall clock consumed by the step counter."""

    @property
    def zone(self) -> tzinfo: ...

    def now(self) -> datetime: ...


class SystemClock:
    """Real wall clock in a fixed or local zone."""

    def __init__(self, zone: tzinfo | None = None) -> None:
        self._zone = zone

    @property
    def zone(self) -> tzinfo:
        # Local zone is re-read on every call.
        return self._zone or tz.tzlocal()

    def now(self) -> datetime:
        return datetime.now(tz=self.zone)


@dataclass
class FixedClock:
    """Manually driven clock for deterministic runs."""

    current: datetime
    zone: tzinfo = field(default_factory=tz.tzlocal)

    def now(self) -> datetime:
        if self.current.tzinfo is None:
            return self.current.replace(tzinfo=self.zone)
        return self.current

    def advance(self, delta: timedelta) -> None:
        self.current = self.current + delta
