"""Coding-session accounting: activity, idle gaps and session history.

Time only moves through the injected clock, so sessions are fully
deterministic under a fake clock.

Idle accounting:
    check_idle() compares now with the last activity. When the gap exceeds
    the idle threshold, the whole gap is added to the current session's
    idle time and the last-activity time is moved to now, so the same gap
    is never counted twice.
"""

from __future__ import annotations

from typing import Callable, Optional

from ..logging_config import get_logger
from .models import SessionRecord

logger = get_logger(__name__)


class SessionTracker:
    """Owns the current SessionRecord and the records closed before it.

    Args:
        clock: Time source returning seconds
        idle_threshold_seconds: Activity gap above which time counts as idle
    """

    def __init__(self, clock: Callable[[], float], idle_threshold_seconds: float) -> None:
        self._clock = clock
        self.idle_threshold_seconds = idle_threshold_seconds
        self.history: list[SessionRecord] = []
        self.last_activity: float = clock()
        self.start_session()

    @property
    def current(self) -> SessionRecord:
        return self.history[-1]

    def start_session(self) -> SessionRecord:
        session = SessionRecord(started_at=self._clock())
        self.history.append(session)
        logger.info(f"Session {len(self.history)} started")
        return session

    def record_activity(self, identity: Optional[str] = None) -> None:
        """Mark activity now, adding ``identity`` to the session's active files."""
        if identity:
            self.current.touch(identity)
        self.last_activity = self._clock()

    def check_idle(self) -> float:
        """Fold an idle gap into the current session.

        Returns:
            Seconds added to the idle accumulator (0.0 when not idle)
        """
        now = self._clock()
        gap = now - self.last_activity
        if gap <= self.idle_threshold_seconds:
            return 0.0

        self.current.add_idle(gap)
        self.last_activity = now
        logger.debug(f"Idle gap of {gap / 60:.1f} min added to current session")
        return gap

    def rotate(self) -> SessionRecord:
        """Close the current session and start a fresh one.

        Returns:
            The session that was closed
        """
        closed = self.current
        closed.close(self._clock())
        self.start_session()
        return closed
