from __future__ import annotations

from typing import Sequence

from ..core.constants import COLLECTION_CHECKINS, DEPARTMENT_FIELD
from ..core.enums import CheckInStatus
from ..store.base import BatchOp, DocumentStore, Query
from .model import CheckInEvent
from .repository import CheckInRepository


def checkin_from_doc(doc: dict) -> CheckInEvent:
    return CheckInEvent(
        event_id=str(doc["id"]),
        department_id=str(doc.get(DEPARTMENT_FIELD) or ""),
        location_id=str(doc.get("location_id") or ""),
        worker_id=str(doc.get("worker_id") or ""),
        timestamp=int(doc.get("timestamp") or 0),
        status=CheckInStatus(doc.get("status") or CheckInStatus.COMPLETED.value),
    )


def checkin_to_doc(event: CheckInEvent) -> dict:
    return {
        DEPARTMENT_FIELD: event.department_id,
        "location_id": event.location_id,
        "worker_id": event.worker_id,
        "timestamp": int(event.timestamp),
        "status": event.status.value,
    }


class DocumentCheckInRepository(CheckInRepository):
    def __init__(self, store: DocumentStore):
        self._store = store

    def append(self, event: CheckInEvent) -> None:
        self._store.write(COLLECTION_CHECKINS, event.event_id, checkin_to_doc(event))

    def list_for_department(self, department_id: str) -> Sequence[CheckInEvent]:
        docs = self._store.read(COLLECTION_CHECKINS, Query.where(DEPARTMENT_FIELD, department_id))
        items = [checkin_from_doc(d) for d in docs]
        items.sort(key=lambda e: (e.timestamp, e.event_id), reverse=True)
        return items

    def delete_all_for_department(self, department_id: str) -> int:
        docs = self._store.read(COLLECTION_CHECKINS, Query.where(DEPARTMENT_FIELD, department_id))
        removed = self._store.atomic_batch([BatchOp.delete(COLLECTION_CHECKINS, d["id"]) for d in docs])
        return len(removed)
