"""Compliance aggregation.

Pure functions over one department's locations and check-in events. Nothing
here touches the store, so results can be recomputed on every snapshot or
range change; input event order never affects the output.
"""

from __future__ import annotations

from datetime import tzinfo
from typing import Iterable, Mapping, Optional, Sequence

from ..checkins.model import CheckInEvent
from ..common.datetime_utils import end_of_day_ms, round_half_up, start_of_day_ms
from ..core.constants import ONE_DAY_MS, UNKNOWN_WORKER_NAME
from ..core.enums import Classification
from ..core.exceptions import AggregationInputError
from ..locations.model import Location
from ..workers.model import Worker
from .model import CheckInDetail, ComplianceReport, DateRange, LocationStats
from .policy import CompliancePolicy, FullPeriodPolicy


def validate_inputs(locations: Sequence[Location], date_range: DateRange) -> None:
    if date_range.end < date_range.start:
        raise AggregationInputError(
            f"End date {date_range.end.isoformat()} is before start date {date_range.start.isoformat()}"
        )
    for loc in locations:
        if int(loc.target_daily_frequency) < 1:
            raise AggregationInputError(
                f"Location {loc.location_id} has a non-positive daily target ({loc.target_daily_frequency})"
            )


def range_bounds(date_range: DateRange, tz: Optional[tzinfo] = None) -> tuple[int, int]:
    return start_of_day_ms(date_range.start, tz), end_of_day_ms(date_range.end, tz)


def period_days(date_range: DateRange, tz: Optional[tzinfo] = None) -> int:
    start_ms, end_ms = range_bounds(date_range, tz)
    return max(1, round_half_up((end_ms - start_ms) / ONE_DAY_MS))


def percentage_of(count: int, target: int) -> int:
    return round_half_up(count / target * 100) if target > 0 else 0


def _events_by_location(events: Iterable[CheckInEvent], start_ms: int, end_ms: int) -> dict[str, list]:
    grouped: dict[str, list] = {}
    for e in events:
        if start_ms <= e.timestamp <= end_ms:
            grouped.setdefault(e.location_id, []).append(e)
    return grouped


def build_report(
    locations: Sequence[Location],
    events: Iterable[CheckInEvent],
    date_range: DateRange,
    *,
    tz: Optional[tzinfo] = None,
    policy: Optional[CompliancePolicy] = None,
) -> ComplianceReport:
    validate_inputs(locations, date_range)
    policy = policy or FullPeriodPolicy()

    start_ms, end_ms = range_bounds(date_range, tz)
    days = period_days(date_range, tz)
    in_range = _events_by_location(events, start_ms, end_ms)

    stats: list[LocationStats] = []
    for loc in locations:
        hits = in_range.get(loc.location_id, [])
        count = len(hits)
        period_target = int(loc.target_daily_frequency) * days
        percentage = percentage_of(count, period_target)
        stats.append(
            LocationStats(
                location=loc,
                count=count,
                period_target=period_target,
                percentage=percentage,
                classification=policy.classify(count=count, period_target=period_target, percentage=percentage),
                last_completed_at=max((e.timestamp for e in hits), default=None),
            )
        )

    total_target = sum(s.period_target for s in stats)
    total_completed = sum(s.count for s in stats)
    return ComplianceReport(
        period_days=days,
        locations=tuple(stats),
        total_target=total_target,
        total_completed=total_completed,
        overall_progress=percentage_of(total_completed, total_target),
        # Zero-target locations never count as active issues.
        at_risk_count=sum(1 for s in stats if s.classification == Classification.AT_RISK and s.period_target > 0),
    )


def location_details(
    location_id: str,
    events: Iterable[CheckInEvent],
    workers: Iterable[Worker],
    date_range: DateRange,
    *,
    tz: Optional[tzinfo] = None,
) -> list[CheckInDetail]:
    """Events of one location within the range, newest first, each resolved against its worker."""

    if date_range.end < date_range.start:
        raise AggregationInputError("End date is before start date")
    start_ms, end_ms = range_bounds(date_range, tz)
    by_id: Mapping[str, Worker] = {w.worker_id: w for w in workers}

    hits = [e for e in events if e.location_id == location_id and start_ms <= e.timestamp <= end_ms]
    hits.sort(key=lambda e: (-e.timestamp, e.event_id))

    out: list[CheckInDetail] = []
    for e in hits:
        worker = by_id.get(e.worker_id)
        out.append(
            CheckInDetail(
                event=e,
                worker_name=worker.display_name if worker else UNKNOWN_WORKER_NAME,
                worker_avatar=worker.avatar if worker else "",
                worker_known=worker is not None,
            )
        )
    return out
