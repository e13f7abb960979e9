from __future__ import annotations

import logging
from typing import Optional, Sequence

from werkzeug.security import generate_password_hash

from ..common.ids import new_id
from ..common.validators import require_non_empty
from ..core.enums import Role
from ..core.exceptions import AuthorizationError, ValidationError
from ..scope.model import Scope
from .model import Department
from .repository import DepartmentRepository

LOGGER = logging.getLogger("cleantrack.departments")


class DepartmentService:
    """Use case: top-admin manages departments (tenants)."""

    def __init__(self, departments: DepartmentRepository):
        self._departments = departments

    @staticmethod
    def _require_top_admin(scope: Scope) -> None:
        if scope.role != Role.TOP_ADMIN:
            raise AuthorizationError("Only the top administrator can manage departments")

    def list_all(self, *, scope: Scope) -> Sequence[Department]:
        self._require_top_admin(scope)
        return self._departments.list_all()

    def create(self, *, scope: Scope, display_name: str, owner_name: str, password: str) -> Department:
        self._require_top_admin(scope)
        department = Department(
            department_id=new_id("dept"),
            display_name=require_non_empty(display_name, "Department name"),
            owner_name=require_non_empty(owner_name, "Manager name"),
            secret_hash=generate_password_hash(require_non_empty(password, "Password")),
        )
        self._departments.save(department)
        LOGGER.info("Created department %s", department.department_id, extra={"department_id": department.department_id})
        return department

    def update(
        self,
        *,
        scope: Scope,
        department_id: str,
        display_name: Optional[str] = None,
        owner_name: Optional[str] = None,
        password: Optional[str] = None,
    ) -> Department:
        self._require_top_admin(scope)
        current = self._departments.get_by_id(department_id)
        if not current:
            raise ValidationError("Department not found")

        updated = Department(
            department_id=current.department_id,
            display_name=require_non_empty(display_name, "Department name") if display_name is not None else current.display_name,
            owner_name=require_non_empty(owner_name, "Manager name") if owner_name is not None else current.owner_name,
            secret_hash=generate_password_hash(require_non_empty(password, "Password")) if password is not None else current.secret_hash,
        )
        self._departments.save(updated)
        return updated

    def delete(self, *, scope: Scope, department_id: str, purge: bool = False) -> None:
        """Delete a department.

        Without ``purge`` the delete is refused while any worker, location,
        check-in or pending deletion request still belongs to the department.
        With ``purge`` the department and all of its scoped records, deletion
        requests included, go in one atomic write.
        """

        self._require_top_admin(scope)
        if not self._departments.get_by_id(department_id):
            raise ValidationError("Department not found")
        if not purge and self._departments.has_children(department_id):
            raise ValidationError("Department still has workers, locations, check-ins or open requests; purge it explicitly")

        self._departments.delete(department_id, purge=purge)
        LOGGER.info(
            "Deleted department %s (purge=%s)",
            department_id,
            purge,
            extra={"department_id": department_id},
        )
