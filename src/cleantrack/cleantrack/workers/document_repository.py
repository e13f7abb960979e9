from __future__ import annotations

from typing import Optional, Sequence

from ..core.constants import COLLECTION_WORKERS, DEPARTMENT_FIELD
from ..store.base import DocumentStore, Query
from .model import Worker
from .repository import WorkerRepository


def worker_from_doc(doc: dict) -> Worker:
    return Worker(
        worker_id=str(doc["id"]),
        department_id=str(doc.get(DEPARTMENT_FIELD) or ""),
        display_name=doc.get("display_name", ""),
        secret_hash=doc.get("secret_hash", ""),
        avatar=doc.get("avatar", ""),
    )


def worker_to_doc(worker: Worker) -> dict:
    return {
        DEPARTMENT_FIELD: worker.department_id,
        "display_name": worker.display_name,
        "secret_hash": worker.secret_hash,
        "avatar": worker.avatar,
    }


class DocumentWorkerRepository(WorkerRepository):
    def __init__(self, store: DocumentStore):
        self._store = store

    def get_by_id(self, worker_id: str) -> Optional[Worker]:
        doc = self._store.get(COLLECTION_WORKERS, worker_id)
        return worker_from_doc(doc) if doc else None

    def list_for_department(self, department_id: str) -> Sequence[Worker]:
        docs = self._store.read(COLLECTION_WORKERS, Query.where(DEPARTMENT_FIELD, department_id))
        items = [worker_from_doc(d) for d in docs]
        items.sort(key=lambda w: w.display_name.lower())
        return items

    def save(self, worker: Worker) -> None:
        self._store.write(COLLECTION_WORKERS, worker.worker_id, worker_to_doc(worker))

    def delete_by_id(self, worker_id: str) -> None:
        self._store.delete(COLLECTION_WORKERS, worker_id)
