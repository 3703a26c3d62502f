"""Sesiones de actividad que acumulan pasos mientras estan activas."""

from __future__ import annotations

import logging

from stepsy.errors import InvalidArgument, NotFound
from stepsy.model import ActivitySession

logger = logging.getLogger(__name__)


class ActivityTracker:
    """Fan-out of step deltas to every active session.

    Session ids are chosen by the caller. Sessions are never reset at
    midnight; creation and removal belong to whoever owns the ids.
    """

    def __init__(self) -> None:
        self._sessions: dict[int, ActivitySession] = {}

    def toggle(self, session_id: int) -> ActivitySession:
        """Start a new session, or flip an existing one on/off."""
        session = self._sessions.get(session_id)
        if session is None:
            session = ActivitySession(id=session_id)
            self._sessions[session_id] = session
            logger.info("Activity %s started", session_id)
        else:
            session.toggle()
            logger.info(
                "Activity %s %s at %s steps",
                session_id,
                "resumed" if session.active else "paused",
                session.steps,
            )
        return session

    def add_delta(self, delta: int) -> None:
        if delta < 0:
            raise InvalidArgument(f"delta must be non-negative, got {delta}")
        if delta == 0:
            return
        for session in list(self._sessions.values()):
            if session.active:
                session.steps += delta

    def get(self, session_id: int) -> ActivitySession:
        try:
            return self._sessions[session_id]
        except KeyError:
            raise NotFound(f"No activity with id {session_id}") from None

    def remove(self, session_id: int) -> ActivitySession:
        try:
            session = self._sessions.pop(session_id)
        except KeyError:
            raise NotFound(f"No activity with id {session_id}") from None
        logger.info("Activity %s removed with %s steps", session_id, session.steps)
        return session

    def sessions(self) -> list[ActivitySession]:
        """All sessions ordered by id."""
        return [self._sessions[k] for k in sorted(self._sessions)]

    def __contains__(self, session_id: object) -> bool:
        return session_id in self._sessions

    def __len__(self) -> int:
        return len(self._sessions)
