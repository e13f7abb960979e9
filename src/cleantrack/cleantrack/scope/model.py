from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from ..core.constants import (
    COLLECTION_CHECKINS,
    COLLECTION_DELETION_REQUESTS,
    COLLECTION_DEPARTMENTS,
    COLLECTION_LOCATIONS,
    COLLECTION_WORKERS,
    DEPARTMENT_FIELD,
    TENANT_COLLECTIONS,
)
from ..core.enums import Role
from ..core.exceptions import AuthorizationError, ScopeError
from ..store.base import Query


@dataclass(frozen=True)
class SessionIdentity:
    """Who is logged in. ``subject_id`` is the worker id, department id or ``top-admin``."""

    role: Role
    subject_id: str
    display_name: str
    department_id: Optional[str] = None
    department_name: Optional[str] = None


@dataclass(frozen=True)
class Scope:
    """Tenant filter and permissions governing every query of a session."""

    role: Role
    department_id: Optional[str]
    readable: frozenset = field(default_factory=frozenset)
    can_write: bool = False
    can_delete_locations: bool = False

    def query_for(self, collection: str) -> Query:
        if collection not in self.readable:
            raise ScopeError(f"{collection} is not readable in this scope")
        if collection in TENANT_COLLECTIONS:
            if not self.department_id:
                raise ScopeError(f"{collection} requires a department scope")
            return Query.where(DEPARTMENT_FIELD, self.department_id)
        return Query.all()

    def require_department(self, department_id: Optional[str] = None) -> str:
        """Return the scoped department, refusing writes aimed at any other tenant."""

        if not self.department_id:
            raise AuthorizationError("No department selected")
        if department_id is not None and department_id != self.department_id:
            raise AuthorizationError("Record belongs to another department")
        return self.department_id

    def require_writer(self, department_id: Optional[str] = None) -> str:
        if not self.can_write:
            raise AuthorizationError("This session is read-only")
        return self.require_department(department_id)


WORKER_COLLECTIONS = frozenset({COLLECTION_LOCATIONS})
DEPARTMENT_COLLECTIONS = frozenset({COLLECTION_WORKERS, COLLECTION_LOCATIONS, COLLECTION_CHECKINS})
ADMIN_LIST_COLLECTIONS = frozenset({COLLECTION_DEPARTMENTS, COLLECTION_DELETION_REQUESTS})
