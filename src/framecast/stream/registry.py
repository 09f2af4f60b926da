"""
Session Registry
================

Tracks live stream sessions so the server can report on them and close
them on shutdown. Sessions never read from the registry; it is written
only by the dispatcher.
"""

import logging
from typing import Dict, List

from framecast.stream.session import StreamSession


logger = logging.getLogger(__name__)


class SessionRegistry:
    """
    Live session set plus lifetime totals.

    Attributes:
        opened: Sessions ever registered
        closed: Sessions ever released
    """

    def __init__(self) -> None:
        self._sessions: Dict[int, StreamSession] = {}
        self.opened: int = 0
        self.closed: int = 0
        self._frames_sent: int = 0
        self._render_errors: int = 0

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, session: StreamSession) -> bool:
        return session.session_id in self._sessions

    @property
    def active(self) -> List[StreamSession]:
        return list(self._sessions.values())

    def add(self, session: StreamSession) -> None:
        self._sessions[session.session_id] = session
        self.opened += 1

    def release(self, session: StreamSession) -> None:
        """Forget a session and fold its counters into the totals."""
        if self._sessions.pop(session.session_id, None) is None:
            return
        self.closed += 1
        self._frames_sent += session.metrics.frames_sent
        self._render_errors += session.metrics.render_errors

    def close_all(self, reason: str = "shutdown") -> int:
        """
        Close every live session.

        Returns:
            Number of sessions closed by this call.
        """
        count = 0
        for session in self.active:
            if session.close(reason):
                count += 1
        if count:
            logger.info(f"Closed {count} active session(s) ({reason})")
        return count

    def metrics(self) -> dict:
        live = self.active
        return {
            "active_sessions": len(live),
            "sessions_opened": self.opened,
            "sessions_closed": self.closed,
            "frames_sent": self._frames_sent + sum(s.metrics.frames_sent for s in live),
            "render_errors": self._render_errors + sum(s.metrics.render_errors for s in live),
        }
