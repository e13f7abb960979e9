from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import RequestStatus


@dataclass(frozen=True)
class DeletionRequest:
    """A manager's request to remove a location, resolved once by the top-admin.

    ``location_name`` is captured at request time so it stays readable after
    the location itself is gone.
    """

    request_id: str
    location_id: str
    location_name: str
    department_id: str
    manager_name: str
    department_name: str
    timestamp: int
    status: RequestStatus = RequestStatus.PENDING
    resolved_at: Optional[int] = None

    @property
    def is_terminal(self) -> bool:
        return self.status != RequestStatus.PENDING


@dataclass(frozen=True)
class ResolutionWrite:
    """What a conditional resolve actually changed in the store."""

    applied: bool
    location_deleted: bool = False
