from __future__ import annotations

from flask import Flask, jsonify, request, session

from ..common.datetime_utils import parse_iso_date
from ..common.web import admin_required, json_errors, login_required
from ..container import Container
from ..core.enums import RequestStatus, Role
from ..core.exceptions import ValidationError
from .model import VacationRequest


def _vacation_payload(v: VacationRequest) -> dict:
    return {
        "request_id": v.request_id,
        "actor_id": v.actor_id,
        "start_date": v.start_date.isoformat(),
        "end_date": v.end_date.isoformat(),
        "days": v.days,
        "note": v.note,
        "status": v.status.value,
        "admin_note": v.admin_note or "",
    }


def register(app: Flask, container: Container) -> None:
    service = container.vacation_service

    @app.route("/api/vacations", methods=["POST"], endpoint="request_vacation")
    @login_required
    @json_errors
    def request_vacation():
        data = request.get_json(silent=True) or {}
        try:
            start_date = parse_iso_date(str(data["start_date"]))
            end_date = parse_iso_date(str(data["end_date"]))
        except (KeyError, ValueError):
            raise ValidationError("start_date and end_date must be YYYY-MM-DD")

        created = service.request_vacation(
            current_role=Role(session["role"]),
            actor_id=int(session["actor_id"]),
            start_date=start_date,
            end_date=end_date,
            note=str(data.get("note", "")),
        )
        return jsonify({"success": True, "vacation": _vacation_payload(created)}), 201

    @app.route("/api/vacations/mine", methods=["GET"], endpoint="my_vacations")
    @login_required
    @json_errors
    def my_vacations():
        rows = service.list_mine(int(session["actor_id"]))
        return jsonify({"success": True, "vacations": [_vacation_payload(v) for v in rows]})

    @app.route("/api/admin/vacations", methods=["GET"], endpoint="admin_vacations")
    @admin_required
    @json_errors
    def admin_vacations():
        raw = request.args.get("status", RequestStatus.PENDING.value)
        try:
            status = None if raw.lower() == "all" else RequestStatus(raw.upper())
        except ValueError:
            raise ValidationError("status must be PENDING, APPROVED, REJECTED or all")

        rows = service.list_for_admin(current_role=Role(session["role"]), status=status)
        return jsonify({"success": True, "vacations": [_vacation_payload(v) for v in rows]})

    @app.route("/api/admin/vacations/<int:request_id>/approve", methods=["POST"], endpoint="approve_vacation")
    @admin_required
    @json_errors
    def approve_vacation(request_id: int):
        data = request.get_json(silent=True) or {}
        decided = service.approve(
            current_role=Role(session["role"]),
            request_id=request_id,
            admin_note=str(data.get("admin_note", "")),
        )
        return jsonify({"success": True, "vacation": _vacation_payload(decided)})

    @app.route("/api/admin/vacations/<int:request_id>/reject", methods=["POST"], endpoint="reject_vacation")
    @admin_required
    @json_errors
    def reject_vacation(request_id: int):
        data = request.get_json(silent=True) or {}
        decided = service.reject(
            current_role=Role(session["role"]),
            request_id=request_id,
            admin_note=str(data.get("admin_note", "")),
        )
        return jsonify({"success": True, "vacation": _vacation_payload(decided)})
