from __future__ import annotations

import hmac
from typing import Optional

from werkzeug.security import check_password_hash

from ..core.enums import Role
from ..core.exceptions import AuthenticationError
from ..departments.repository import DepartmentRepository
from ..scope.model import SessionIdentity
from ..workers.directory import WorkerDirectory

TOP_ADMIN_SUBJECT = "top-admin"


def _check_hash(secret_hash: str, password: str) -> bool:
    try:
        return check_password_hash(secret_hash, password or "")
    except (ValueError, TypeError):
        return False


class AuthService:
    """Use case: authenticate a session for one of the three roles."""

    def __init__(
        self,
        departments: DepartmentRepository,
        directory: WorkerDirectory,
        *,
        top_admin_password: Optional[str] = None,
    ):
        self._departments = departments
        self._directory = directory
        self._top_admin_password = top_admin_password or ""

    def login_top_admin(self, password: str) -> SessionIdentity:
        # An unset password disables top-admin login entirely.
        if not self._top_admin_password or not hmac.compare_digest(
            self._top_admin_password.encode("utf-8"), (password or "").encode("utf-8")
        ):
            raise AuthenticationError("Invalid administrator password")
        return SessionIdentity(role=Role.TOP_ADMIN, subject_id=TOP_ADMIN_SUBJECT, display_name="Administrator")

    def login_manager(self, department_id: str, password: str) -> SessionIdentity:
        department = self._departments.get_by_id(department_id or "")
        if not department or not _check_hash(department.secret_hash, password):
            raise AuthenticationError("Invalid department or password")
        return SessionIdentity(
            role=Role.MANAGER,
            subject_id=department.department_id,
            display_name=department.owner_name,
            department_id=department.department_id,
            department_name=department.display_name,
        )

    def login_worker(self, worker_id: str, password: str) -> SessionIdentity:
        worker = self._directory.verify(worker_id or "", password)
        if not worker:
            raise AuthenticationError("Invalid worker or password")
        department = self._departments.get_by_id(worker.department_id)
        return SessionIdentity(
            role=Role.WORKER,
            subject_id=worker.worker_id,
            display_name=worker.display_name,
            department_id=worker.department_id,
            department_name=department.display_name if department else None,
        )

    def login(self, role: Role, *, password: str, subject_id: Optional[str] = None) -> SessionIdentity:
        if role == Role.TOP_ADMIN:
            return self.login_top_admin(password)
        if role == Role.MANAGER:
            return self.login_manager(subject_id or "", password)
        return self.login_worker(subject_id or "", password)
