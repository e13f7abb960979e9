from __future__ import annotations

import logging
import secrets
import threading
import time
from typing import Optional

from ..core.constants import DEFAULT_SESSION_IDLE_MINUTES
from ..scope.model import SessionIdentity
from ..scope.resolver import ScopeResolver
from ..store.base import DocumentStore
from .live import LiveSession

LOGGER = logging.getLogger("cleantrack.sessions")


class SessionRegistry:
    """Token -> LiveSession. Idle sessions are closed so their subscriptions stop."""

    def __init__(
        self,
        store: DocumentStore,
        resolver: ScopeResolver,
        *,
        idle_minutes: int = DEFAULT_SESSION_IDLE_MINUTES,
    ):
        self._store = store
        self._resolver = resolver
        self._idle_seconds = max(1, int(idle_minutes)) * 60
        self._lock = threading.Lock()
        self._sessions: dict[str, LiveSession] = {}

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)

    def open(self, identity: SessionIdentity) -> LiveSession:
        self.prune()
        live = LiveSession(secrets.token_urlsafe(24), identity, self._resolver, self._store)
        live.open()
        with self._lock:
            self._sessions[live.token] = live
        LOGGER.info(
            "Session opened for %s",
            identity.role.value,
            extra={"session": live.token[:8], "department_id": identity.department_id},
        )
        return live

    def get(self, token: Optional[str]) -> Optional[LiveSession]:
        if not token:
            return None
        self.prune()
        with self._lock:
            live = self._sessions.get(token)
        if live:
            live.touch()
        return live

    def close(self, token: Optional[str]) -> None:
        with self._lock:
            live = self._sessions.pop(token or "", None)
        if live:
            live.close()
            LOGGER.info("Session closed", extra={"session": live.token[:8]})

    def close_all(self) -> None:
        with self._lock:
            sessions, self._sessions = list(self._sessions.values()), {}
        for live in sessions:
            live.close()

    def prune(self) -> int:
        cutoff = time.monotonic() - self._idle_seconds
        with self._lock:
            expired = [t for t, s in self._sessions.items() if s.last_seen < cutoff]
            closing = [self._sessions.pop(t) for t in expired]
        for live in closing:
            live.close()
        if closing:
            LOGGER.info("Pruned %d idle sessions", len(closing))
        return len(closing)
