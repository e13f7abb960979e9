from __future__ import annotations

from datetime import date

from flask import Flask, g, jsonify, request

from ..common.datetime_utils import parse_iso_date
from ..common.web import session_required, to_json
from ..container import Container
from ..core.constants import COLLECTION_CHECKINS, COLLECTION_LOCATIONS, COLLECTION_WORKERS
from ..core.exceptions import AuthorizationError
from . import aggregator
from .model import DateRange, LocationStats


def _date_range() -> DateRange:
    today = date.today()
    start_s = request.args.get("start")
    end_s = request.args.get("end")
    start = parse_iso_date(start_s) if start_s else today
    end = parse_iso_date(end_s) if end_s else start
    return DateRange(start=start, end=end)


def _stats_json(stats: LocationStats) -> dict:
    payload = to_json(stats)
    payload["is_at_risk"] = stats.is_at_risk
    return payload


def register(app: Flask, container: Container) -> None:
    login_required = session_required(container.sessions)

    def _scoped_state():
        scope = g.live.current_scope()
        if COLLECTION_CHECKINS not in scope.readable:
            raise AuthorizationError("Compliance reports need a department scope")
        return g.live.state

    @app.route("/api/compliance", methods=["GET"], endpoint="api_compliance")
    @login_required
    def compliance_report():
        state = _scoped_state()
        date_range = _date_range()
        report = aggregator.build_report(
            state.get(COLLECTION_LOCATIONS),
            state.get(COLLECTION_CHECKINS),
            date_range,
            tz=container.report_tz,
            policy=container.compliance_policy,
        )
        return jsonify(
            {
                "start": date_range.start.isoformat(),
                "end": date_range.end.isoformat(),
                "period_days": report.period_days,
                "total_target": report.total_target,
                "total_completed": report.total_completed,
                "overall_progress": report.overall_progress,
                "at_risk_count": report.at_risk_count,
                "locations": [_stats_json(s) for s in report.locations],
                "stale": state.stale,
            }
        )

    @app.route("/api/compliance/locations/<location_id>", methods=["GET"], endpoint="api_compliance_location")
    @login_required
    def location_history(location_id: str):
        state = _scoped_state()
        details = aggregator.location_details(
            location_id,
            state.get(COLLECTION_CHECKINS),
            state.get(COLLECTION_WORKERS),
            _date_range(),
            tz=container.report_tz,
        )
        return jsonify({"location_id": location_id, "checkins": to_json(details), "stale": state.stale})
