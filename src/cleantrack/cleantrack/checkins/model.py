from __future__ import annotations

from dataclasses import dataclass

from ..core.enums import CheckInStatus


@dataclass(frozen=True)
class CheckInEvent:
    """Append-only record that a worker completed a task at a location."""

    event_id: str
    department_id: str
    location_id: str
    worker_id: str
    timestamp: int  # epoch millis
    status: CheckInStatus = CheckInStatus.COMPLETED
