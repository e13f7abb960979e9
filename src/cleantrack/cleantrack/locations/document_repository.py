from __future__ import annotations

from typing import Optional, Sequence

from ..core.constants import COLLECTION_LOCATIONS, DEPARTMENT_FIELD
from ..store.base import DocumentStore, Query
from .model import Location
from .repository import LocationRepository


def location_from_doc(doc: dict) -> Location:
    return Location(
        location_id=str(doc["id"]),
        department_id=str(doc.get(DEPARTMENT_FIELD) or ""),
        name_en=doc.get("name_en", ""),
        name_zh=doc.get("name_zh", ""),
        zone=doc.get("zone", ""),
        target_daily_frequency=int(doc.get("target_daily_frequency") or 0),
    )


def location_to_doc(location: Location) -> dict:
    return {
        DEPARTMENT_FIELD: location.department_id,
        "name_en": location.name_en,
        "name_zh": location.name_zh,
        "zone": location.zone,
        "target_daily_frequency": int(location.target_daily_frequency),
    }


class DocumentLocationRepository(LocationRepository):
    def __init__(self, store: DocumentStore):
        self._store = store

    def get_by_id(self, location_id: str) -> Optional[Location]:
        doc = self._store.get(COLLECTION_LOCATIONS, location_id)
        return location_from_doc(doc) if doc else None

    def list_for_department(self, department_id: str) -> Sequence[Location]:
        docs = self._store.read(COLLECTION_LOCATIONS, Query.where(DEPARTMENT_FIELD, department_id))
        items = [location_from_doc(d) for d in docs]
        items.sort(key=lambda l: (l.zone.lower(), l.name_en.lower(), l.location_id))
        return items

    def save(self, location: Location) -> None:
        self._store.write(COLLECTION_LOCATIONS, location.location_id, location_to_doc(location))

    def delete_by_id(self, location_id: str) -> None:
        self._store.delete(COLLECTION_LOCATIONS, location_id)
