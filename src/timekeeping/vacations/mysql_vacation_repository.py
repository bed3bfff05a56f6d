from __future__ import annotations

from datetime import date
from typing import Any, Optional, Sequence

from ..core.enums import RequestStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import VacationRequest
from .repository import VacationRepository

_COLUMNS = "request_id, actor_id, start_date, end_date, note, status, created_at, decided_at, admin_note"


def _to_request(r: dict[str, Any]) -> VacationRequest:
    return VacationRequest(
        request_id=int(r["request_id"]),
        actor_id=int(r["actor_id"]),
        start_date=r["start_date"],
        end_date=r["end_date"],
        status=RequestStatus(r["status"]),
        created_at=r["created_at"],
        note=r.get("note") or "",
        decided_at=r.get("decided_at"),
        admin_note=r.get("admin_note"),
    )


class MySQLVacationRepository(VacationRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(self, *, actor_id: int, start_date: date, end_date: date, note: str) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO vacation_requests(actor_id, start_date, end_date, note, status)
                VALUES(%s,%s,%s,%s,%s)
                """,
                (int(actor_id), start_date, end_date, note, RequestStatus.PENDING.value),
            )
            return int(cur.lastrowid)

    def get_by_id(self, request_id: int) -> Optional[VacationRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM vacation_requests WHERE request_id=%s", (int(request_id),))
            r = fetchone(cur)
            return _to_request(r) if r else None

    def list_requests(
        self,
        *,
        status: Optional[RequestStatus] = None,
        actor_id: Optional[int] = None,
        limit: int = 200,
    ) -> Sequence[VacationRequest]:
        clauses = ["1=1"]
        params: list[object] = []

        if status is not None:
            clauses.append("status=%s")
            params.append(status.value)
        if actor_id is not None:
            clauses.append("actor_id=%s")
            params.append(int(actor_id))

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM vacation_requests
                WHERE {where}
                ORDER BY created_at DESC, request_id DESC
                LIMIT %s
                """,
                tuple(params + [int(limit)]),
            )
            return [_to_request(r) for r in fetchall(cur)]

    def decide(self, *, request_id: int, status: RequestStatus, admin_note: Optional[str] = None) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE vacation_requests
                SET status=%s, decided_at=NOW(), admin_note=%s
                WHERE request_id=%s AND status=%s
                """,
                (status.value, admin_note, int(request_id), RequestStatus.PENDING.value),
            )
            return cur.rowcount > 0
