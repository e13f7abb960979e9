from datetime import date, datetime, time

import pytest

from cleantrack.checkins.model import CheckInEvent
from cleantrack.compliance.aggregator import build_report, location_details, period_days
from cleantrack.compliance.model import DateRange
from cleantrack.core.enums import Classification
from cleantrack.core.exceptions import AggregationInputError
from cleantrack.locations.model import Location
from cleantrack.workers.model import Worker

DAY = date(2024, 1, 1)


def _ms(day: date, hour: int = 12) -> int:
    return int(datetime.combine(day, time(hour, 0)).timestamp() * 1000)


def _loc(location_id: str = "loc-1", target: int = 10) -> Location:
    return Location(location_id, "dept-a", location_id, location_id, "General", target)


def _events(n: int, location_id: str = "loc-1", day: date = DAY, worker_id: str = "w-1"):
    return [CheckInEvent(f"e-{location_id}-{i}", "dept-a", location_id, worker_id, _ms(day) + i) for i in range(n)]


def _one_day() -> DateRange:
    return DateRange(DAY, DAY)


@pytest.mark.parametrize(
    "count,percentage,classification",
    [
        (7, 70, Classification.AT_RISK),
        (8, 80, Classification.ON_TRACK),
        (10, 100, Classification.ON_TRACK),
        (11, 110, Classification.OVERACHIEVED),
        (0, 0, Classification.AT_RISK),
    ],
)
def test_single_day_classification(count, percentage, classification):
    report = build_report([_loc()], _events(count), _one_day())
    stats = report.locations[0]

    assert stats.period_target == 10
    assert stats.count == count
    assert stats.percentage == percentage
    assert stats.classification == classification


def test_multi_day_target_scales_with_period():
    start = date(2024, 3, 1)
    end = date(2024, 3, 3)
    events = _events(5, day=start) + _events(15, day=end, worker_id="w-2")
    events = [CheckInEvent(f"x{i}", e.department_id, e.location_id, e.worker_id, e.timestamp) for i, e in enumerate(events)]

    report = build_report([_loc(target=5)], events, DateRange(start, end))

    assert report.period_days == 3
    stats = report.locations[0]
    assert stats.period_target == 15
    assert stats.count == 20
    assert stats.percentage == 133
    assert stats.classification == Classification.OVERACHIEVED


def test_percentage_rounds_half_up():
    report = build_report([_loc(target=8)], _events(1), _one_day())

    # 1/8 = 12.5%
    assert report.locations[0].percentage == 13


def test_events_outside_range_or_other_locations_are_ignored():
    events = _events(3) + _events(4, day=date(2024, 1, 2)) + _events(2, location_id="loc-2")

    report = build_report([_loc()], events, _one_day())

    assert report.locations[0].count == 3


def test_range_is_inclusive_to_the_last_millisecond():
    end_ms = int(datetime.combine(DAY, time.max).timestamp() * 1000)
    start_ms = int(datetime.combine(DAY, time.min).timestamp() * 1000)
    events = [
        CheckInEvent("first", "dept-a", "loc-1", "w-1", start_ms),
        CheckInEvent("last", "dept-a", "loc-1", "w-1", end_ms),
        CheckInEvent("next", "dept-a", "loc-1", "w-1", end_ms + 1),
    ]

    assert build_report([_loc()], events, _one_day()).locations[0].count == 2


def test_event_order_does_not_change_the_report():
    events = _events(6) + _events(3, location_id="loc-2")
    locations = [_loc(), _loc("loc-2", target=4)]

    forward = build_report(locations, events, _one_day())
    backward = build_report(locations, list(reversed(events)), _one_day())

    assert forward == backward


def test_totals_and_at_risk_count():
    locations = [_loc("loc-1", target=10), _loc("loc-2", target=4), _loc("loc-3", target=2)]
    events = _events(7, "loc-1") + _events(4, "loc-2") + _events(3, "loc-3")

    report = build_report(locations, events, _one_day())

    assert report.total_target == 16
    assert report.total_completed == 14
    assert report.overall_progress == 88
    assert report.at_risk_count == 1
    assert [s.location.location_id for s in report.locations] == ["loc-1", "loc-2", "loc-3"]


def test_last_completed_at_is_latest_event():
    report = build_report([_loc(), _loc("loc-2")], _events(3), _one_day())

    assert report.locations[0].last_completed_at == _ms(DAY) + 2
    assert report.locations[1].last_completed_at is None


def test_zero_target_is_rejected():
    with pytest.raises(AggregationInputError):
        build_report([_loc(target=0)], [], _one_day())


def test_end_before_start_is_rejected():
    with pytest.raises(AggregationInputError):
        build_report([_loc()], [], DateRange(date(2024, 3, 2), date(2024, 3, 1)))


def test_empty_inputs_give_empty_report():
    report = build_report([], [], _one_day())

    assert report.locations == ()
    assert report.overall_progress == 0
    assert report.at_risk_count == 0


def test_period_days_is_at_least_one():
    assert period_days(_one_day()) == 1
    assert period_days(DateRange(date(2024, 1, 1), date(2024, 1, 31))) == 31


def test_location_details_resolves_workers_and_marks_unknown():
    workers = [Worker("w-1", "dept-a", "Ann", "hash", "ann.png")]
    events = _events(2) + _events(1, worker_id="w-gone")
    events[-1] = CheckInEvent("orphan", "dept-a", "loc-1", "w-gone", _ms(DAY, hour=18))

    details = location_details("loc-1", events, workers, _one_day())

    assert [d.event.event_id for d in details] == ["orphan", "e-loc-1-1", "e-loc-1-0"]
    assert details[0].worker_name == "Unknown"
    assert not details[0].worker_known
    assert details[1].worker_name == "Ann"
    assert details[1].worker_avatar == "ann.png"
