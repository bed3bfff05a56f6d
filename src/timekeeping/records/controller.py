from __future__ import annotations

from flask import Flask, jsonify, request, session

from ..common.datetime_utils import parse_iso_date, parse_iso_datetime, to_iso
from ..common.web import admin_required, json_errors, login_required
from ..container import Container
from ..core.enums import Role
from ..core.exceptions import ValidationError


def register(app: Flask, container: Container) -> None:
    @app.route("/api/records/mine", methods=["GET"], endpoint="my_records")
    @login_required
    @json_errors
    def my_records():
        rows = container.record_service.recent_for_actor(int(session["actor_id"]))
        return jsonify(
            {
                "success": True,
                "records": [
                    {
                        "record_id": r.record_id,
                        "project_id": r.project_id,
                        "start_time": to_iso(r.start_time),
                        "end_time": to_iso(r.end_time),
                        "duration_minutes": r.duration_minutes,
                        "lunch_deducted": r.lunch_deducted,
                    }
                    for r in rows
                ],
            }
        )

    @app.route("/api/records/<int:record_id>", methods=["PUT"], endpoint="edit_record")
    @admin_required
    @json_errors
    def edit_record(record_id: int):
        data = request.get_json(silent=True) or {}
        try:
            start_time = parse_iso_datetime(str(data["start_time"]))
            end_time = parse_iso_datetime(str(data["end_time"]))
            paused_minutes = int(data.get("paused_minutes", 0))
        except (KeyError, ValueError):
            raise ValidationError("start_time and end_time must be ISO timestamps")

        record = container.record_service.admin_edit(
            current_role=Role(session["role"]),
            record_id=record_id,
            start_time=start_time,
            end_time=end_time,
            paused_minutes=paused_minutes,
        )
        return jsonify(
            {
                "success": True,
                "record_id": record.record_id,
                "duration_minutes": record.duration_minutes,
                "lunch_deducted": record.lunch_deducted,
            }
        )

    @app.route("/api/reports/summary", methods=["GET"], endpoint="report_summary")
    @admin_required
    @json_errors
    def report_summary():
        try:
            start = parse_iso_date(request.args["start"])
            end = parse_iso_date(request.args["end"])
            actor_id = request.args.get("actor_id", type=int)
            project_id = request.args.get("project_id", type=int)
        except (KeyError, ValueError):
            raise ValidationError("start and end must be YYYY-MM-DD")

        report = container.report_service.build_summary(start=start, end=end, actor_id=actor_id, project_id=project_id)
        return jsonify({"success": True, "rows": report.rows, "summary": report.summary})
