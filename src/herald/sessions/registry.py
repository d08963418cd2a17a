"""Heartbeat-based registry of admin dashboard sessions."""

import logging
from dataclasses import dataclass, field
from typing import Any

from herald.services.id_generator import Clock, now_ms

logger = logging.getLogger(__name__)

DEFAULT_INACTIVITY_MS = 30 * 60 * 1000


@dataclass
class AdminSession:
    """A registered admin and the time of their last heartbeat."""

    admin_id: str
    last_active: int
    info: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {**self.info, "admin_id": self.admin_id, "last_active": self.last_active}


class AdminSessionRegistry:
    """In-memory session map keyed by admin id.

    Staleness is computed on read. Sessions idle past the window stay in the
    map until ``remove_session`` or ``evict_inactive`` drops them.
    """

    def __init__(self, clock: Clock = now_ms, inactivity_ms: int = DEFAULT_INACTIVITY_MS) -> None:
        self.clock = clock
        self.inactivity_ms = inactivity_ms
        self._sessions: dict[str, AdminSession] = {}

    def init(self) -> None:
        self.reset()

    def reset(self) -> None:
        self._sessions.clear()

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, admin_id: str) -> bool:
        return admin_id in self._sessions

    def _is_fresh(self, session: AdminSession, now: int) -> bool:
        return session.last_active > now - self.inactivity_ms

    def add_session(self, admin_id: str, info: dict[str, Any] | None = None) -> AdminSession:
        info = {k: v for k, v in (info or {}).items() if k not in ("admin_id", "last_active")}
        session = AdminSession(admin_id=admin_id, last_active=self.clock(), info=info)
        self._sessions[admin_id] = session
        logger.debug("Admin session registered (admin=%s)", admin_id)
        return session

    def update_session(self, admin_id: str, patch: dict[str, Any] | None = None) -> bool:
        """Merge ``patch`` into the session and refresh its heartbeat."""
        session = self._sessions.get(admin_id)
        if session is None:
            return False
        session.info.update({k: v for k, v in (patch or {}).items() if k not in ("admin_id", "last_active")})
        session.last_active = self.clock()
        return True

    def remove_session(self, admin_id: str) -> bool:
        return self._sessions.pop(admin_id, None) is not None

    def get_session(self, admin_id: str) -> AdminSession | None:
        return self._sessions.get(admin_id)

    def get_active_sessions(self) -> list[AdminSession]:
        now = self.clock()
        return [s for s in self._sessions.values() if self._is_fresh(s, now)]

    def is_admin_active(self, admin_id: str) -> bool:
        session = self._sessions.get(admin_id)
        return session is not None and self._is_fresh(session, self.clock())

    def evict_inactive(self) -> int:
        """Drop sessions idle past the inactivity window. Returns count evicted."""
        now = self.clock()
        stale = [admin_id for admin_id, s in self._sessions.items() if not self._is_fresh(s, now)]
        for admin_id in stale:
            del self._sessions[admin_id]
        if stale:
            logger.info("Evicted %d inactive admin sessions", len(stale))
        return len(stale)
