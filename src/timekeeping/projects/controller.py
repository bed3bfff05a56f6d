from __future__ import annotations

from flask import Flask, jsonify

from ..common.web import json_errors, login_required
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/projects", methods=["GET"], endpoint="list_projects")
    @login_required
    @json_errors
    def list_projects():
        projects = container.projects_repo.list_all()
        return jsonify(
            {
                "success": True,
                "projects": [{"project_id": p.project_id, "name": p.name, "note": p.note} for p in projects],
            }
        )
