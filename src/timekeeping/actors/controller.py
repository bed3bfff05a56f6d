from __future__ import annotations

from flask import Flask, jsonify, request, session

from ..common.web import json_errors
from ..container import Container
from ..core.enums import Role


def register(app: Flask, container: Container) -> None:
    @app.route("/api/login", methods=["POST"], endpoint="login")
    @json_errors
    def login():
        data = request.get_json(silent=True) or {}
        user = container.auth_service.authenticate_employee(data.get("name", ""), data.get("password", ""))

        # Pick up a session that was running before a restart or on another device.
        # A store failure here must leave the browser logged out.
        session.clear()
        outcome = container.session_engine.recover(user.actor_id)

        session["role"] = user.role.value
        session["actor_id"] = user.actor_id
        session["name"] = user.name
        return jsonify(
            {
                "success": True,
                "name": user.name,
                "running": outcome.session is not None,
                "auto_stopped_record_id": outcome.finalized.record_id if outcome.finalized else None,
            }
        )

    @app.route("/api/admin/login", methods=["POST"], endpoint="admin_login")
    @json_errors
    def admin_login():
        data = request.get_json(silent=True) or {}
        user = container.auth_service.authenticate_admin(data.get("password", ""))
        session.clear()
        session["role"] = user.role.value
        session["name"] = user.name
        return jsonify({"success": True})

    @app.route("/api/logout", methods=["POST"], endpoint="logout")
    def logout():
        if session.get("role") == Role.EMPLOYEE.value and "actor_id" in session:
            container.session_engine.detach(int(session["actor_id"]))
        session.clear()
        return jsonify({"success": True})
