from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Project
from .repository import ProjectRepository


class MySQLProjectRepository(ProjectRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_all(self) -> Sequence[Project]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT project_id, name, note FROM projects ORDER BY name")
            return [self._to_model(r) for r in fetchall(cur)]

    def get_by_id(self, project_id: int) -> Optional[Project]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT project_id, name, note FROM projects WHERE project_id=%s", (int(project_id),))
            r = fetchone(cur)
            return self._to_model(r) if r else None

    def get_by_name(self, name: str) -> Optional[Project]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT project_id, name, note FROM projects WHERE name=%s", (name,))
            r = fetchone(cur)
            return self._to_model(r) if r else None

    @staticmethod
    def _to_model(r: dict) -> Project:
        return Project(project_id=int(r["project_id"]), name=r["name"], note=r.get("note") or "")
