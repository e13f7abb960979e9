from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Worker


class WorkerRepository(Protocol):
    """Worker storage. Lists are always department-scoped; see ``WorkerDirectory`` for the login lookup."""

    def get_by_id(self, worker_id: str) -> Optional[Worker]:
        raise NotImplementedError

    def list_for_department(self, department_id: str) -> Sequence[Worker]:
        raise NotImplementedError

    def save(self, worker: Worker) -> None:
        raise NotImplementedError

    def delete_by_id(self, worker_id: str) -> None:
        raise NotImplementedError
