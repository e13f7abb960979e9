from __future__ import annotations

import logging
from typing import Optional

from ..common.datetime_utils import now_millis
from ..common.ids import new_id
from ..core.enums import CheckInStatus, Role
from ..core.exceptions import AuthorizationError, ValidationError
from ..locations.repository import LocationRepository
from ..scope.model import Scope, SessionIdentity
from ..workers.repository import WorkerRepository
from .model import CheckInEvent
from .repository import CheckInRepository

LOGGER = logging.getLogger("cleantrack.checkins")


class CheckInService:
    """Use case: a worker records completed cleaning; managers may reset the log."""

    def __init__(self, checkins: CheckInRepository, locations: LocationRepository, workers: WorkerRepository):
        self._checkins = checkins
        self._locations = locations
        self._workers = workers

    def check_in(
        self,
        *,
        scope: Scope,
        identity: SessionIdentity,
        location_id: str,
        timestamp: Optional[int] = None,
    ) -> CheckInEvent:
        if scope.role != Role.WORKER:
            raise AuthorizationError("Only workers check in")

        worker = self._workers.get_by_id(identity.subject_id)
        if not worker:
            raise AuthorizationError("Worker no longer exists")
        department_id = scope.require_department(worker.department_id)

        location = self._locations.get_by_id(location_id)
        if not location:
            raise ValidationError("Location not found")
        if location.department_id != department_id:
            raise ValidationError("Location belongs to another department")

        event = CheckInEvent(
            event_id=new_id("log"),
            department_id=department_id,
            location_id=location.location_id,
            worker_id=worker.worker_id,
            timestamp=int(timestamp) if timestamp is not None else now_millis(),
            status=CheckInStatus.COMPLETED,
        )
        self._checkins.append(event)
        return event

    def reset(self, *, scope: Scope) -> int:
        department_id = scope.require_writer()
        removed = self._checkins.delete_all_for_department(department_id)
        LOGGER.info("Cleared %d check-ins", removed, extra={"department_id": department_id})
        return removed
