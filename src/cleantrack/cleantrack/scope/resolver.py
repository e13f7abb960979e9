from __future__ import annotations

import logging
from typing import Optional

from ..core.enums import Role
from ..core.exceptions import ScopeError
from ..departments.repository import DepartmentRepository
from ..workers.repository import WorkerRepository
from .model import (
    ADMIN_LIST_COLLECTIONS,
    DEPARTMENT_COLLECTIONS,
    WORKER_COLLECTIONS,
    Scope,
    SessionIdentity,
)

LOGGER = logging.getLogger("cleantrack.scope")


class ScopeResolver:
    """Turn (role, identity) into the tenant scope for a session.

    Logged-out sessions get no scope; the login screen reads workers through
    ``WorkerDirectory`` instead. An invalid or stale identity also resolves to
    ``None`` and callers subscribe to nothing.
    """

    def __init__(self, departments: DepartmentRepository, workers: WorkerRepository):
        self._departments = departments
        self._workers = workers

    def resolve(
        self,
        role: Optional[Role],
        identity: Optional[SessionIdentity],
        *,
        selected_department_id: Optional[str] = None,
    ) -> Optional[Scope]:
        try:
            return self._resolve(role, identity, selected_department_id)
        except ScopeError as e:
            LOGGER.info("Scope denied: %s", e, extra={"component": "ScopeResolver"})
            return None

    def _resolve(
        self,
        role: Optional[Role],
        identity: Optional[SessionIdentity],
        selected_department_id: Optional[str],
    ) -> Optional[Scope]:
        if role is None or identity is None:
            return None
        if identity.role != role:
            raise ScopeError(f"Identity {identity.subject_id} does not hold role {role.value}")

        if role == Role.WORKER:
            worker = self._workers.get_by_id(identity.subject_id)
            if not worker:
                raise ScopeError(f"Worker {identity.subject_id} no longer exists")
            if identity.department_id and worker.department_id != identity.department_id:
                raise ScopeError(f"Worker {identity.subject_id} moved department")
            self._require_department(worker.department_id)
            return Scope(role=role, department_id=worker.department_id, readable=WORKER_COLLECTIONS)

        if role == Role.MANAGER:
            department_id = self._require_department(identity.department_id)
            return Scope(
                role=role,
                department_id=department_id,
                readable=DEPARTMENT_COLLECTIONS,
                can_write=True,
            )

        if role == Role.TOP_ADMIN:
            if selected_department_id:
                department_id = self._require_department(selected_department_id)
                return Scope(
                    role=role,
                    department_id=department_id,
                    readable=DEPARTMENT_COLLECTIONS,
                    can_write=True,
                    can_delete_locations=True,
                )
            return Scope(role=role, department_id=None, readable=ADMIN_LIST_COLLECTIONS)

        raise ScopeError(f"Unsupported role: {role!r}")

    def _require_department(self, department_id: Optional[str]) -> str:
        if not department_id:
            raise ScopeError("No department on identity")
        if not self._departments.get_by_id(department_id):
            raise ScopeError(f"Department {department_id} no longer exists")
        return department_id
