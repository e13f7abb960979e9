from __future__ import annotations

from typing import Optional, Sequence

from werkzeug.security import check_password_hash

from ..core.constants import COLLECTION_WORKERS
from ..store.base import DocumentStore
from .document_repository import worker_from_doc
from .model import Worker, WorkerDirectoryEntry


class WorkerDirectory:
    """Login-time lookup of workers across all departments.

    This is the only unscoped read in the system. It is bound to the workers
    collection and never returns credential hashes.
    """

    def __init__(self, store: DocumentStore):
        self._store = store

    def list_entries(self) -> Sequence[WorkerDirectoryEntry]:
        workers = [worker_from_doc(d) for d in self._store.read(COLLECTION_WORKERS)]
        workers.sort(key=lambda w: (w.display_name.lower(), w.worker_id))
        return [
            WorkerDirectoryEntry(
                worker_id=w.worker_id,
                department_id=w.department_id,
                display_name=w.display_name,
                avatar=w.avatar,
            )
            for w in workers
        ]

    def verify(self, worker_id: str, password: str) -> Optional[Worker]:
        doc = self._store.get(COLLECTION_WORKERS, worker_id)
        if not doc:
            return None
        worker = worker_from_doc(doc)
        try:
            ok = check_password_hash(worker.secret_hash, password or "")
        except (ValueError, TypeError):
            # Placeholder or corrupted hash values.
            ok = False
        return worker if ok else None
