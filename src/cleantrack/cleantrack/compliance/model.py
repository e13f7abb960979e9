from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from ..checkins.model import CheckInEvent
from ..core.enums import Classification
from ..locations.model import Location


@dataclass(frozen=True)
class DateRange:
    """Closed interval of calendar days, both ends inclusive."""

    start: date
    end: date


@dataclass(frozen=True)
class LocationStats:
    location: Location
    count: int
    period_target: int
    percentage: int
    classification: Classification
    last_completed_at: Optional[int]  # epoch millis, None means never

    @property
    def is_at_risk(self) -> bool:
        return self.classification == Classification.AT_RISK


@dataclass(frozen=True)
class ComplianceReport:
    period_days: int
    locations: tuple  # LocationStats, same order as the input locations
    total_target: int
    total_completed: int
    overall_progress: int
    at_risk_count: int


@dataclass(frozen=True)
class CheckInDetail:
    """One row of a location drill-down, with the worker resolved for display."""

    event: CheckInEvent
    worker_name: str
    worker_avatar: str
    worker_known: bool
