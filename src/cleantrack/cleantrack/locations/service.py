from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence

from ..common.ids import new_id
from ..common.validators import require_positive_int
from ..core.constants import DEFAULT_ZONE
from ..core.enums import Role
from ..core.exceptions import ValidationError
from ..deletion.model import DeletionRequest
from ..deletion.workflow import DeletionWorkflow
from ..scope.model import Scope, SessionIdentity
from .model import Location
from .repository import LocationRepository


@dataclass(frozen=True)
class RemovalOutcome:
    deleted: bool
    request: Optional[DeletionRequest] = None


class LocationService:
    def __init__(self, locations: LocationRepository, workflow: DeletionWorkflow):
        self._locations = locations
        self._workflow = workflow

    def list_for_scope(self, *, scope: Scope) -> Sequence[Location]:
        return self._locations.list_for_department(scope.require_department())

    def create(
        self,
        *,
        scope: Scope,
        name_en: str = "",
        name_zh: str = "",
        zone: str = "",
        target_daily_frequency=1,
    ) -> Location:
        department_id = scope.require_writer()
        name_en, name_zh = self._names(name_en, name_zh)
        location = Location(
            location_id=new_id("loc"),
            department_id=department_id,
            name_en=name_en,
            name_zh=name_zh,
            zone=(zone or "").strip() or DEFAULT_ZONE,
            target_daily_frequency=require_positive_int(target_daily_frequency, "Target frequency"),
        )
        self._locations.save(location)
        return location

    def update(
        self,
        *,
        scope: Scope,
        location_id: str,
        name_en: Optional[str] = None,
        name_zh: Optional[str] = None,
        zone: Optional[str] = None,
        target_daily_frequency=None,
    ) -> Location:
        current = self._get_owned(scope, location_id)
        new_en, new_zh = self._names(
            current.name_en if name_en is None else name_en,
            current.name_zh if name_zh is None else name_zh,
        )
        updated = Location(
            location_id=current.location_id,
            department_id=current.department_id,
            name_en=new_en,
            name_zh=new_zh,
            zone=current.zone if zone is None else ((zone or "").strip() or DEFAULT_ZONE),
            target_daily_frequency=(
                current.target_daily_frequency
                if target_daily_frequency is None
                else require_positive_int(target_daily_frequency, "Target frequency")
            ),
        )
        self._locations.save(updated)
        return updated

    def remove_location(self, *, scope: Scope, identity: SessionIdentity, location_id: str) -> RemovalOutcome:
        """Top-admin deletes at once; a manager files a deletion request instead."""

        location = self._get_owned(scope, location_id)
        if scope.can_delete_locations:
            self._workflow.delete_location_directly(scope=scope, location_id=location_id)
            return RemovalOutcome(deleted=True)

        if scope.role != Role.MANAGER:
            raise ValidationError("Locations cannot be removed from this session")
        request = self._workflow.request_deletion(
            scope=scope,
            location_id=location.location_id,
            location_name=location.display_name(),
            department_id=location.department_id,
            manager_name=identity.display_name,
            department_name=identity.department_name or "",
        )
        return RemovalOutcome(deleted=False, request=request)

    def _get_owned(self, scope: Scope, location_id: str) -> Location:
        location = self._locations.get_by_id(location_id)
        if not location:
            raise ValidationError("Location not found")
        scope.require_writer(location.department_id)
        return location

    @staticmethod
    def _names(name_en: str, name_zh: str):
        name_en = (name_en or "").strip()
        name_zh = (name_zh or "").strip()
        if not name_en and not name_zh:
            raise ValidationError("Location name is required")
        return name_en or name_zh, name_zh or name_en
