from __future__ import annotations

from typing import Optional

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .model import Actor
from .repository import ActorRepository


class MySQLActorRepository(ActorRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, actor_id: int) -> Optional[Actor]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT actor_id, name, password_hash, is_active FROM actors WHERE actor_id=%s",
                (int(actor_id),),
            )
            r = fetchone(cur)
            return self._to_model(r) if r else None

    def get_by_name(self, name: str) -> Optional[Actor]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT actor_id, name, password_hash, is_active FROM actors WHERE name=%s",
                (name,),
            )
            r = fetchone(cur)
            return self._to_model(r) if r else None

    @staticmethod
    def _to_model(r: dict) -> Actor:
        return Actor(
            actor_id=int(r["actor_id"]),
            name=r["name"],
            password_hash=r["password_hash"],
            is_active=bool(r.get("is_active", 1)),
        )
