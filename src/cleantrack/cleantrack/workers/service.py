from __future__ import annotations

import random
from typing import Optional, Sequence

from werkzeug.security import generate_password_hash

from ..common.ids import new_id
from ..common.validators import require_non_empty
from ..core.exceptions import ValidationError
from ..departments.repository import DepartmentRepository
from ..scope.model import Scope
from .model import Worker
from .repository import WorkerRepository


def default_avatar() -> str:
    return f"https://i.pravatar.cc/150?img={random.randint(1, 70)}"


class WorkerService:
    """Use case: a department's manager (or drilled-in top-admin) manages its workers."""

    def __init__(self, workers: WorkerRepository, departments: DepartmentRepository):
        self._workers = workers
        self._departments = departments

    def list_for_scope(self, *, scope: Scope) -> Sequence[Worker]:
        return self._workers.list_for_department(scope.require_department())

    def create(self, *, scope: Scope, display_name: str, password: str, avatar: str = "") -> Worker:
        department_id = scope.require_writer()
        if not self._departments.get_by_id(department_id):
            raise ValidationError("Department does not exist")

        worker = Worker(
            worker_id=new_id("w"),
            department_id=department_id,
            display_name=require_non_empty(display_name, "Name"),
            secret_hash=generate_password_hash(require_non_empty(password, "Password")),
            avatar=(avatar or "").strip() or default_avatar(),
        )
        self._workers.save(worker)
        return worker

    def _get_owned(self, scope: Scope, worker_id: str) -> Worker:
        worker = self._workers.get_by_id(worker_id)
        if not worker:
            raise ValidationError("Worker not found")
        scope.require_writer(worker.department_id)
        return worker

    def update(
        self,
        *,
        scope: Scope,
        worker_id: str,
        display_name: Optional[str] = None,
        password: Optional[str] = None,
        avatar: Optional[str] = None,
    ) -> Worker:
        current = self._get_owned(scope, worker_id)
        updated = Worker(
            worker_id=current.worker_id,
            department_id=current.department_id,
            display_name=require_non_empty(display_name, "Name") if display_name is not None else current.display_name,
            secret_hash=generate_password_hash(require_non_empty(password, "Password")) if password is not None else current.secret_hash,
            avatar=avatar.strip() if avatar is not None else current.avatar,
        )
        self._workers.save(updated)
        return updated

    def delete(self, *, scope: Scope, worker_id: str) -> None:
        self._get_owned(scope, worker_id)
        self._workers.delete_by_id(worker_id)
