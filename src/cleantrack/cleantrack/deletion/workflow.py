from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Sequence

from ..common.datetime_utils import now_millis
from ..common.ids import new_id
from ..common.validators import require_non_empty
from ..core.enums import RequestStatus, Role
from ..core.exceptions import AuthorizationError, ValidationError, WorkflowConflictError
from ..locations.repository import LocationRepository
from ..scope.model import Scope
from .model import DeletionRequest, ResolutionWrite
from .repository import DeletionRequestRepository

LOGGER = logging.getLogger("cleantrack.deletion")


@dataclass(frozen=True)
class ResolutionOutcome:
    request: DeletionRequest
    applied: bool
    location_deleted: bool = False


class DeletionWorkflow:
    """Two-step location removal: a manager asks, the top-admin decides.

    A drilled-in top-admin may also bypass the queue and delete directly.
    """

    def __init__(self, requests: DeletionRequestRepository, locations: LocationRepository):
        self._requests = requests
        self._locations = locations

    def request_deletion(
        self,
        *,
        scope: Scope,
        location_id: str,
        location_name: str,
        department_id: str,
        manager_name: str,
        department_name: str,
    ) -> DeletionRequest:
        if scope.role != Role.MANAGER:
            raise AuthorizationError("Only managers file deletion requests")
        scope.require_writer(department_id)

        location = self._locations.get_by_id(location_id)
        if not location:
            raise ValidationError("Location not found")
        scope.require_department(location.department_id)

        # One open request per location. Two concurrent filings can both get
        # through; resolving either one closes the other.
        existing = self._requests.list_pending_for_location(location_id)
        if existing:
            return existing[0]

        request = DeletionRequest(
            request_id=new_id("req"),
            location_id=location_id,
            location_name=require_non_empty(location_name or location.display_name(), "Location name"),
            department_id=department_id,
            manager_name=manager_name or "",
            department_name=department_name or "",
            timestamp=now_millis(),
        )
        self._requests.create(request)
        LOGGER.info(
            "Deletion requested for location %s",
            location_id,
            extra={"department_id": department_id, "component": "DeletionWorkflow"},
        )
        return request

    def resolve(self, *, scope: Scope, request_id: str, approve: bool) -> ResolutionOutcome:
        """Approve or reject a pending request.

        Resolving a request that is already approved or rejected changes
        nothing and reports ``applied=False``. Approving a request whose
        location is already gone still closes the request.
        """

        if scope.role != Role.TOP_ADMIN:
            raise AuthorizationError("Only the top administrator resolves deletion requests")

        request = self._requests.get_by_id(request_id)
        if not request:
            raise ValidationError("Deletion request not found")
        if request.is_terminal:
            return ResolutionOutcome(request=request, applied=False)

        status = RequestStatus.APPROVED if approve else RequestStatus.REJECTED
        resolved_at = now_millis()
        write = self._requests.resolve(request, status=status, resolved_at=resolved_at)
        if not write.applied:
            latest = self._requests.get_by_id(request_id) or request
            return ResolutionOutcome(request=latest, applied=False)

        if approve:
            try:
                self._confirm_removed(request, write)
            except WorkflowConflictError as e:
                LOGGER.info("%s; request closed anyway", e, extra={"component": "DeletionWorkflow"})
        self._close_duplicates(request, status=status, resolved_at=resolved_at)

        LOGGER.info(
            "Deletion request %s %s",
            request_id,
            status.value,
            extra={"department_id": request.department_id, "component": "DeletionWorkflow"},
        )
        resolved = DeletionRequest(
            request_id=request.request_id,
            location_id=request.location_id,
            location_name=request.location_name,
            department_id=request.department_id,
            manager_name=request.manager_name,
            department_name=request.department_name,
            timestamp=request.timestamp,
            status=status,
            resolved_at=resolved_at,
        )
        return ResolutionOutcome(request=resolved, applied=True, location_deleted=write.location_deleted)

    def _confirm_removed(self, request: DeletionRequest, write: ResolutionWrite) -> None:
        if not write.location_deleted:
            raise WorkflowConflictError(f"Location {request.location_id} was already gone")

    def _close_duplicates(self, request: DeletionRequest, *, status: RequestStatus, resolved_at: int) -> int:
        """Give every other open request for the same location the same outcome."""

        closed = 0
        for other in self._requests.list_pending_for_location(request.location_id):
            if other.request_id == request.request_id:
                continue
            if self._requests.resolve(other, status=status, resolved_at=resolved_at).applied:
                closed += 1
        if closed:
            LOGGER.info(
                "Closed %s duplicate request(s) for location %s",
                closed,
                request.location_id,
                extra={"department_id": request.department_id, "component": "DeletionWorkflow"},
            )
        return closed

    def delete_location_directly(self, *, scope: Scope, location_id: str) -> None:
        if not scope.can_delete_locations:
            raise AuthorizationError("Direct deletion requires the top administrator inside a department")
        location = self._locations.get_by_id(location_id)
        if not location:
            raise ValidationError("Location not found")
        scope.require_department(location.department_id)
        self._locations.delete_by_id(location_id)
        LOGGER.info(
            "Location %s deleted directly",
            location_id,
            extra={"department_id": location.department_id, "component": "DeletionWorkflow"},
        )

    def list_requests(self, *, scope: Scope, status: Optional[RequestStatus] = None) -> Sequence[DeletionRequest]:
        if scope.role != Role.TOP_ADMIN:
            raise AuthorizationError("Only the top administrator reviews deletion requests")
        return self._requests.list_all(status=status)
