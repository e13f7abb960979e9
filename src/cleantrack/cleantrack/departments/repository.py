from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Department


class DepartmentRepository(Protocol):
    def get_by_id(self, department_id: str) -> Optional[Department]:
        raise NotImplementedError

    def list_all(self) -> Sequence[Department]:
        raise NotImplementedError

    def save(self, department: Department) -> None:
        raise NotImplementedError

    def has_children(self, department_id: str) -> bool:
        """True when any worker, location, check-in or pending deletion request references the department."""

        raise NotImplementedError

    def delete(self, department_id: str, *, purge: bool = False) -> None:
        """Remove the department and its deletion requests; ``purge`` also removes every scoped record."""

        raise NotImplementedError
