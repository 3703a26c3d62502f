"""Conversion de lecturas del sensor en pasos diarios con cambio de dia."""

from __future__ import annotations

import logging
import threading
from datetime import date, datetime
from typing import Protocol

from stepsy.activity import ActivityTracker
from stepsy.dates import Clock, start_of_day
from stepsy.errors import InvalidArgument, StorageFault
from stepsy.model import ActivitySession, is_step_count

logger = logging.getLogger(__name__)


class DailyStore(Protocol):
    """Write side of the per-day store used on rollover."""

    def add_entry(self, day: datetime | date, steps: int) -> None: ...


class StepCounter:
    """Turns raw cumulative sensor readings into per-day step totals.

    Events are serialized with an internal lock, so the host may call
    ``handle_event``, ``toggle_activity`` and ``remove_activity`` from any
    thread. The ``tracker`` property is for reading sessions only.
    """

    def __init__(
        self,
        store: DailyStore,
        clock: Clock,
        tracker: ActivityTracker | None = None,
    ) -> None:
        self._store = store
        self._clock = clock
        self._tracker = tracker if tracker is not None else ActivityTracker()
        self._lock = threading.Lock()
        self._last_raw_value: int | None = None
        self._current_date: datetime | None = None
        self._todays_steps = 0

    @property
    def tracker(self) -> ActivityTracker:
        return self._tracker

    @property
    def last_raw_value(self) -> int | None:
        return self._last_raw_value

    @property
    def current_date(self) -> datetime | None:
        return self._current_date

    @property
    def todays_steps(self) -> int:
        return self._todays_steps

    def handle_event(self, raw_value: int) -> int:
        """Process one raw sensor reading.

        The first reading only calibrates the baseline. A reading lower than
        the previous one means the sensor restarted from zero, so the reading
        itself is the delta.

        Args:
            raw_value: Cumulative step count reported by the sensor.

        Returns:
            Steps accrued since the previous reading.

        Raises:
            InvalidArgument: If raw_value is not a non-negative int.
            StorageFault: If persisting the finished day fails. State is left
                untouched so the next event retries the write.
        """
        if not is_step_count(raw_value):
            raise InvalidArgument(
                f"raw sensor value must be a non-negative int, got {raw_value!r}"
            )

        with self._lock:
            today = start_of_day(self._clock.now(), self._clock.zone)

            if self._last_raw_value is None or self._current_date is None:
                self._last_raw_value = raw_value
                self._current_date = today
                self._todays_steps = 0
                logger.debug("Sensor calibrated at %s for %s", raw_value, today.date())
                self._tracker.add_delta(0)
                return 0

            delta = raw_value - self._last_raw_value
            if delta < 0:
                logger.info(
                    "Sensor reset detected (%s -> %s)", self._last_raw_value, raw_value
                )
                delta = raw_value

            if today.date() != self._current_date.date():
                self._roll_over(self._current_date, today)

            self._last_raw_value = raw_value
            self._todays_steps += delta
            self._tracker.add_delta(delta)
            logger.debug("delta=%s todays_steps=%s", delta, self._todays_steps)
            return delta

    def _roll_over(self, finished: datetime, today: datetime) -> None:
        # Days skipped between two events get no entry.
        try:
            # The calendar day, not the instant: the store may use another zone.
            self._store.add_entry(finished.date(), self._todays_steps)
        except StorageFault:
            logger.error(
                "Could not store %s steps for %s", self._todays_steps, finished.date()
            )
            raise
        logger.info(
            "Day rollover %s -> %s, stored %s steps",
            finished.date(),
            today.date(),
            self._todays_steps,
        )
        self._todays_steps = 0
        self._current_date = today

    def toggle_activity(self, session_id: int) -> ActivitySession:
        """Start, pause or resume an activity without racing sensor events."""
        with self._lock:
            return self._tracker.toggle(session_id)

    def remove_activity(self, session_id: int) -> ActivitySession:
        """Drop an activity without racing sensor events."""
        with self._lock:
            return self._tracker.remove(session_id)
