from __future__ import annotations

from typing import Optional, Sequence

from ..core.constants import (
    COLLECTION_DELETION_REQUESTS,
    COLLECTION_DEPARTMENTS,
    DEPARTMENT_FIELD,
    TENANT_COLLECTIONS,
)
from ..core.enums import RequestStatus
from ..store.base import BatchOp, DocumentStore, Query
from .model import Department
from .repository import DepartmentRepository


def department_from_doc(doc: dict) -> Department:
    return Department(
        department_id=str(doc["id"]),
        display_name=doc.get("display_name", ""),
        owner_name=doc.get("owner_name", ""),
        secret_hash=doc.get("secret_hash", ""),
    )


def department_to_doc(department: Department) -> dict:
    return {
        "display_name": department.display_name,
        "owner_name": department.owner_name,
        "secret_hash": department.secret_hash,
    }


class DocumentDepartmentRepository(DepartmentRepository):
    def __init__(self, store: DocumentStore):
        self._store = store

    def get_by_id(self, department_id: str) -> Optional[Department]:
        doc = self._store.get(COLLECTION_DEPARTMENTS, department_id)
        return department_from_doc(doc) if doc else None

    def list_all(self) -> Sequence[Department]:
        items = [department_from_doc(d) for d in self._store.read(COLLECTION_DEPARTMENTS)]
        items.sort(key=lambda d: d.display_name.lower())
        return items

    def save(self, department: Department) -> None:
        self._store.write(COLLECTION_DEPARTMENTS, department.department_id, department_to_doc(department))

    def has_children(self, department_id: str) -> bool:
        query = Query.where(DEPARTMENT_FIELD, department_id)
        if any(self._store.read(collection, query) for collection in sorted(TENANT_COLLECTIONS)):
            return True
        pending = Query(equals=((DEPARTMENT_FIELD, department_id), ("status", RequestStatus.PENDING.value)))
        return bool(self._store.read(COLLECTION_DELETION_REQUESTS, pending))

    def delete(self, department_id: str, *, purge: bool = False) -> None:
        query = Query.where(DEPARTMENT_FIELD, department_id)
        # Request history goes with its department; open requests only reach here under purge.
        collections = [COLLECTION_DELETION_REQUESTS]
        if purge:
            collections.extend(sorted(TENANT_COLLECTIONS))
        ops = []
        for collection in collections:
            ops.extend(BatchOp.delete(collection, d["id"]) for d in self._store.read(collection, query))
        ops.append(BatchOp.delete(COLLECTION_DEPARTMENTS, department_id))
        self._store.atomic_batch(ops)
