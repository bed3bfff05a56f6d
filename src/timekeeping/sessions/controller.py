from __future__ import annotations

from typing import Optional

from flask import Flask, jsonify, request, session

from ..common.datetime_utils import format_hms, to_iso
from ..common.web import json_errors, login_required
from ..container import Container
from ..records.model import TimeRecord
from .model import WorkSession


def _session_payload(work_session: Optional[WorkSession], container: Container) -> dict:
    if work_session is None:
        return {"running": False}
    elapsed = container.session_engine.elapsed(work_session.actor_id)
    return {
        "running": True,
        "project_id": work_session.project_id,
        "record_id": work_session.record_id,
        "start_time": to_iso(work_session.start_time),
        "paused": work_session.is_paused,
        "elapsed": format_hms(elapsed),
        "elapsed_seconds": int(elapsed.total_seconds()),
    }


def _record_payload(record: TimeRecord) -> dict:
    return {
        "record_id": record.record_id,
        "project_id": record.project_id,
        "start_time": to_iso(record.start_time),
        "end_time": to_iso(record.end_time),
        "duration_minutes": record.duration_minutes,
        "lunch_deducted": record.lunch_deducted,
    }


def register(app: Flask, container: Container) -> None:
    engine = container.session_engine

    def _actor_id() -> int:
        return int(session["actor_id"])

    @app.route("/api/session", methods=["GET"], endpoint="session_status")
    @login_required
    @json_errors
    def session_status():
        return jsonify({"success": True, **_session_payload(engine.resolve_session(_actor_id()), container)})

    @app.route("/api/session/start", methods=["POST"], endpoint="session_start")
    @login_required
    @json_errors
    def session_start():
        data = request.get_json(silent=True) or {}
        started = engine.start(_actor_id(), data.get("project_id"))
        return jsonify({"success": True, **_session_payload(started, container)}), 201

    @app.route("/api/session/pause", methods=["POST"], endpoint="session_pause")
    @login_required
    @json_errors
    def session_pause():
        return jsonify({"success": True, **_session_payload(engine.pause(_actor_id()), container)})

    @app.route("/api/session/resume", methods=["POST"], endpoint="session_resume")
    @login_required
    @json_errors
    def session_resume():
        return jsonify({"success": True, **_session_payload(engine.resume(_actor_id()), container)})

    @app.route("/api/session/toggle-pause", methods=["POST"], endpoint="session_toggle_pause")
    @login_required
    @json_errors
    def session_toggle_pause():
        return jsonify({"success": True, **_session_payload(engine.toggle_pause(_actor_id()), container)})

    @app.route("/api/session/stop", methods=["POST"], endpoint="session_stop")
    @login_required
    @json_errors
    def session_stop():
        record = engine.stop(_actor_id())
        return jsonify({"success": True, "record": _record_payload(record)})
