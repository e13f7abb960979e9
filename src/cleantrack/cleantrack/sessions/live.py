from __future__ import annotations

import logging
import threading
import time
from typing import Optional

from ..core.enums import Role
from ..core.exceptions import AuthorizationError, ValidationError
from ..scope.model import Scope, SessionIdentity
from ..scope.resolver import ScopeResolver
from ..store.base import DocumentStore
from ..sync.manager import SubscriptionManager
from ..sync.state import SessionState

LOGGER = logging.getLogger("cleantrack.sessions")


def needed_collections(scope: Optional[Scope]) -> tuple:
    """Collections a session mirrors: everything its scope may read."""

    if scope is None:
        return ()
    return tuple(sorted(scope.readable))


class LiveSession:
    """One logged-in session and its live mirror of scoped data.

    The scope is re-resolved on every request; if it changed (department
    deleted, worker removed, admin drilled in or out) the subscriptions are
    rebuilt before the request proceeds.
    """

    def __init__(self, token: str, identity: SessionIdentity, resolver: ScopeResolver, store: DocumentStore):
        self.token = token
        self.identity = identity
        self._resolver = resolver
        self._lock = threading.RLock()
        self._selected_department_id: Optional[str] = None
        self.manager = SubscriptionManager(store, SessionState(), label=token[:8])
        self.last_seen = time.monotonic()

    @property
    def state(self) -> SessionState:
        return self.manager.state

    @property
    def selected_department_id(self) -> Optional[str]:
        return self._selected_department_id

    def touch(self) -> None:
        self.last_seen = time.monotonic()

    def _resolve(self, selected: Optional[str]) -> Optional[Scope]:
        return self._resolver.resolve(self.identity.role, self.identity, selected_department_id=selected)

    def open(self) -> Optional[Scope]:
        with self._lock:
            scope = self._resolve(self._selected_department_id)
            self.manager.set_context(scope, needed_collections(scope))
            return scope

    def current_scope(self) -> Scope:
        with self._lock:
            scope = self._resolve(self._selected_department_id)
            if scope is None and self._selected_department_id:
                # Drilled-in department is gone; fall back to the department list.
                self._selected_department_id = None
                scope = self._resolve(None)
            if scope != self.manager.scope:
                self.manager.set_context(scope, needed_collections(scope))
            if scope is None:
                raise AuthorizationError("Session no longer has access")
            return scope

    def select_department(self, department_id: str) -> Scope:
        if self.identity.role != Role.TOP_ADMIN:
            raise AuthorizationError("Only the top administrator can switch departments")
        with self._lock:
            scope = self._resolve(department_id)
            if scope is None:
                raise ValidationError("Department not found")
            self._selected_department_id = department_id
            self.manager.set_context(scope, needed_collections(scope))
        LOGGER.info("Drilled into department", extra={"session": self.token[:8], "department_id": department_id})
        return scope

    def clear_department(self) -> Optional[Scope]:
        if self.identity.role != Role.TOP_ADMIN:
            raise AuthorizationError("Only the top administrator can switch departments")
        with self._lock:
            self._selected_department_id = None
            return self.open()

    def close(self) -> None:
        with self._lock:
            self.manager.close()
