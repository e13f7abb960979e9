from __future__ import annotations

from typing import Callable

from ..checkins.document_repository import checkin_from_doc
from ..core.constants import (
    COLLECTION_CHECKINS,
    COLLECTION_DELETION_REQUESTS,
    COLLECTION_DEPARTMENTS,
    COLLECTION_LOCATIONS,
    COLLECTION_WORKERS,
)
from ..deletion.document_repository import deletion_request_from_doc
from ..departments.document_repository import department_from_doc
from ..locations.document_repository import location_from_doc
from ..workers.document_repository import worker_from_doc

DECODERS: dict[str, Callable[[dict], object]] = {
    COLLECTION_DEPARTMENTS: department_from_doc,
    COLLECTION_WORKERS: worker_from_doc,
    COLLECTION_LOCATIONS: location_from_doc,
    COLLECTION_CHECKINS: checkin_from_doc,
    COLLECTION_DELETION_REQUESTS: deletion_request_from_doc,
}

SORT_KEYS: dict[str, Callable[[object], object]] = {
    COLLECTION_DEPARTMENTS: lambda d: d.display_name.lower(),
    COLLECTION_WORKERS: lambda w: w.display_name.lower(),
    COLLECTION_LOCATIONS: lambda l: (l.zone.lower(), l.name_en.lower(), l.location_id),
    COLLECTION_CHECKINS: lambda e: (-e.timestamp, e.event_id),
    COLLECTION_DELETION_REQUESTS: lambda r: (-r.timestamp, r.request_id),
}


def decode_snapshot(collection: str, docs: list) -> tuple:
    items = [DECODERS[collection](d) for d in docs]
    items.sort(key=SORT_KEYS[collection])
    return tuple(items)
