from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Any, Optional, Sequence

from ..core.exceptions import RecordNotOpen
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import TimeRecord, TimeRecordReportRow
from .repository import TimeRecordRepository

_COLUMNS = "record_id, actor_id, project_id, start_time, end_time, duration_minutes, lunch_deducted, created_at"


def _to_record(r: dict[str, Any]) -> TimeRecord:
    return TimeRecord(
        record_id=int(r["record_id"]),
        actor_id=int(r["actor_id"]),
        project_id=int(r["project_id"]),
        start_time=r["start_time"],
        end_time=r.get("end_time"),
        duration_minutes=int(r.get("duration_minutes") or 0),
        lunch_deducted=bool(r.get("lunch_deducted")),
        created_at=r.get("created_at"),
    )


class MySQLTimeRecordRepository(TimeRecordRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create_open_record(self, *, actor_id: int, project_id: int, start_time: datetime) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO time_records(actor_id, project_id, start_time, end_time, duration_minutes, lunch_deducted)
                VALUES(%s,%s,%s,NULL,0,0)
                """,
                (int(actor_id), int(project_id), start_time),
            )
            return int(cur.lastrowid)

    def finalize_record(
        self,
        *,
        record_id: int,
        end_time: datetime,
        duration_minutes: int,
        lunch_deducted: bool,
    ) -> TimeRecord:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE time_records
                SET end_time=%s, duration_minutes=%s, lunch_deducted=%s
                WHERE record_id=%s AND end_time IS NULL
                """,
                (end_time, int(duration_minutes), int(bool(lunch_deducted)), int(record_id)),
            )
            if cur.rowcount == 0:
                raise RecordNotOpen(f"Record {record_id} is missing or already finalized")
            cur.execute(f"SELECT {_COLUMNS} FROM time_records WHERE record_id=%s", (int(record_id),))
            return _to_record(fetchone(cur))

    def find_open_record(self, actor_id: int) -> Optional[TimeRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM time_records
                WHERE actor_id=%s AND end_time IS NULL
                ORDER BY start_time DESC
                LIMIT 1
                """,
                (int(actor_id),),
            )
            r = fetchone(cur)
            return _to_record(r) if r else None

    def find_open_records(self) -> Sequence[TimeRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM time_records WHERE end_time IS NULL ORDER BY start_time")
            return [_to_record(r) for r in fetchall(cur)]

    def get_by_id(self, record_id: int) -> Optional[TimeRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM time_records WHERE record_id=%s", (int(record_id),))
            r = fetchone(cur)
            return _to_record(r) if r else None

    def create_finalized_record(
        self,
        *,
        actor_id: int,
        project_id: int,
        start_time: datetime,
        end_time: datetime,
        duration_minutes: int,
        lunch_deducted: bool,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO time_records(actor_id, project_id, start_time, end_time, duration_minutes, lunch_deducted)
                VALUES(%s,%s,%s,%s,%s,%s)
                """,
                (int(actor_id), int(project_id), start_time, end_time, int(duration_minutes), int(bool(lunch_deducted))),
            )
            return int(cur.lastrowid)

    def admin_update_record(
        self,
        *,
        record_id: int,
        start_time: datetime,
        end_time: datetime,
        duration_minutes: int,
        lunch_deducted: bool,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE time_records
                SET start_time=%s, end_time=%s, duration_minutes=%s, lunch_deducted=%s
                WHERE record_id=%s
                """,
                (start_time, end_time, int(duration_minutes), int(bool(lunch_deducted)), int(record_id)),
            )
            return cur.rowcount > 0

    def get_recent_for_actor(self, actor_id: int, limit: int) -> Sequence[TimeRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM time_records
                WHERE actor_id=%s
                ORDER BY start_time DESC
                LIMIT %s
                """,
                (int(actor_id), int(limit)),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def get_report_rows(
        self,
        *,
        start_date: date,
        end_date: date,
        actor_id: Optional[int] = None,
        project_id: Optional[int] = None,
    ) -> Sequence[TimeRecordReportRow]:
        where = ["r.end_time IS NOT NULL", "r.start_time >= %s", "r.start_time < %s"]
        params: list[Any] = [
            datetime.combine(start_date, datetime.min.time()),
            datetime.combine(end_date + timedelta(days=1), datetime.min.time()),
        ]
        if actor_id is not None:
            where.append("r.actor_id=%s")
            params.append(int(actor_id))
        if project_id is not None:
            where.append("r.project_id=%s")
            params.append(int(project_id))

        sql = f"""
            SELECT r.record_id, r.actor_id, a.name AS actor_name, r.project_id, p.name AS project_name,
                   r.start_time, r.end_time, r.duration_minutes, r.lunch_deducted
            FROM time_records r
            JOIN actors a ON a.actor_id = r.actor_id
            JOIN projects p ON p.project_id = r.project_id
            WHERE {' AND '.join(where)}
            ORDER BY r.start_time ASC, a.name ASC
        """

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, tuple(params))
            return [
                TimeRecordReportRow(
                    record_id=int(r["record_id"]),
                    actor_id=int(r["actor_id"]),
                    actor_name=r["actor_name"],
                    project_id=int(r["project_id"]),
                    project_name=r["project_name"],
                    start_time=r["start_time"],
                    end_time=r["end_time"],
                    duration_minutes=int(r["duration_minutes"]),
                    lunch_deducted=bool(r["lunch_deducted"]),
                )
                for r in fetchall(cur)
            ]
