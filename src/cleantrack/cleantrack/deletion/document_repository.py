from __future__ import annotations

from typing import Optional, Sequence

from ..core.constants import COLLECTION_DELETION_REQUESTS, COLLECTION_LOCATIONS, DEPARTMENT_FIELD
from ..core.enums import RequestStatus
from ..store.base import BatchOp, DocumentStore, PreconditionFailed, Query
from .model import DeletionRequest, ResolutionWrite
from .repository import DeletionRequestRepository


def deletion_request_from_doc(doc: dict) -> DeletionRequest:
    resolved_at = doc.get("resolved_at")
    return DeletionRequest(
        request_id=str(doc["id"]),
        location_id=str(doc.get("location_id") or ""),
        location_name=doc.get("location_name", ""),
        department_id=str(doc.get(DEPARTMENT_FIELD) or ""),
        manager_name=doc.get("manager_name", ""),
        department_name=doc.get("department_name", ""),
        timestamp=int(doc.get("timestamp") or 0),
        status=RequestStatus(doc.get("status") or RequestStatus.PENDING.value),
        resolved_at=int(resolved_at) if resolved_at is not None else None,
    )


def deletion_request_to_doc(request: DeletionRequest) -> dict:
    return {
        "location_id": request.location_id,
        "location_name": request.location_name,
        DEPARTMENT_FIELD: request.department_id,
        "manager_name": request.manager_name,
        "department_name": request.department_name,
        "timestamp": int(request.timestamp),
        "status": request.status.value,
        "resolved_at": request.resolved_at,
    }


class DocumentDeletionRequestRepository(DeletionRequestRepository):
    def __init__(self, store: DocumentStore):
        self._store = store

    def create(self, request: DeletionRequest) -> None:
        self._store.write(COLLECTION_DELETION_REQUESTS, request.request_id, deletion_request_to_doc(request))

    def get_by_id(self, request_id: str) -> Optional[DeletionRequest]:
        doc = self._store.get(COLLECTION_DELETION_REQUESTS, request_id)
        return deletion_request_from_doc(doc) if doc else None

    def list_all(self, *, status: Optional[RequestStatus] = None) -> Sequence[DeletionRequest]:
        query = Query.where("status", status.value) if status is not None else Query.all()
        items = [deletion_request_from_doc(d) for d in self._store.read(COLLECTION_DELETION_REQUESTS, query)]
        items.sort(key=lambda r: (r.timestamp, r.request_id), reverse=True)
        return items

    def list_pending_for_location(self, location_id: str) -> Sequence[DeletionRequest]:
        query = Query(equals=(("location_id", location_id), ("status", RequestStatus.PENDING.value)))
        items = [deletion_request_from_doc(d) for d in self._store.read(COLLECTION_DELETION_REQUESTS, query)]
        items.sort(key=lambda r: (r.timestamp, r.request_id))
        return items

    def resolve(self, request: DeletionRequest, *, status: RequestStatus, resolved_at: int) -> ResolutionWrite:
        ops = [
            BatchOp.update(
                COLLECTION_DELETION_REQUESTS,
                request.request_id,
                {"status": status.value, "resolved_at": int(resolved_at)},
                expect={"status": RequestStatus.PENDING.value},
            )
        ]
        if status == RequestStatus.APPROVED:
            # Deleting an already-missing location is a no-op in the store.
            ops.append(BatchOp.delete(COLLECTION_LOCATIONS, request.location_id))
        try:
            removed = self._store.atomic_batch(ops)
        except PreconditionFailed:
            return ResolutionWrite(applied=False)
        return ResolutionWrite(applied=True, location_deleted=(COLLECTION_LOCATIONS, request.location_id) in removed)
