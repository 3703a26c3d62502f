from __future__ import annotations

import pytest

from stepsy.activity import ActivityTracker
from stepsy.errors import InvalidArgument, NotFound


def test_toggle_creates_active_session() -> None:
    tracker = ActivityTracker()
    session = tracker.toggle(3)
    assert session.id == 3
    assert session.active is True
    assert session.steps == 0
    assert 3 in tracker
    assert len(tracker) == 1


def test_add_delta_only_reaches_active_sessions() -> None:
    tracker = ActivityTracker()
    tracker.toggle(0)
    tracker.toggle(1)
    tracker.toggle(1)  # paused

    tracker.add_delta(120)
    assert tracker.get(0).steps == 120
    assert tracker.get(1).steps == 0

    tracker.toggle(1)
    tracker.add_delta(5)
    assert tracker.get(0).steps == 125
    assert tracker.get(1).steps == 5


def test_paused_session_keeps_total_across_toggles() -> None:
    tracker = ActivityTracker()
    tracker.toggle(7)
    delivered_while_active = 0
    for i, delta in enumerate([10, 20, 30, 40, 50, 60]):
        if i in (2, 4):
            tracker.toggle(7)
        if tracker.get(7).active:
            delivered_while_active += delta
        tracker.add_delta(delta)
    assert tracker.get(7).steps == delivered_while_active


def test_add_delta_rejects_negative() -> None:
    tracker = ActivityTracker()
    tracker.toggle(0)
    with pytest.raises(InvalidArgument):
        tracker.add_delta(-1)
    assert tracker.get(0).steps == 0


def test_sessions_sorted_and_remove() -> None:
    tracker = ActivityTracker()
    for session_id in (5, 1, 3):
        tracker.toggle(session_id)
    assert [s.id for s in tracker.sessions()] == [1, 3, 5]

    removed = tracker.remove(3)
    assert removed.id == 3
    assert 3 not in tracker
    with pytest.raises(NotFound):
        tracker.remove(3)
    with pytest.raises(NotFound):
        tracker.get(42)
