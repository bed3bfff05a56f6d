from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from .model import TimeRecord, TimeRecordReportRow


class TimeRecordRepository(Protocol):
    """Durable record store.

    Implementations raise ``StoreError`` when the backing store fails, and
    ``RecordNotOpen`` from ``finalize_record`` when the record is not open.
    """

    def create_open_record(self, *, actor_id: int, project_id: int, start_time: datetime) -> int:
        raise NotImplementedError

    def finalize_record(
        self,
        *,
        record_id: int,
        end_time: datetime,
        duration_minutes: int,
        lunch_deducted: bool,
    ) -> TimeRecord:
        raise NotImplementedError

    def find_open_record(self, actor_id: int) -> Optional[TimeRecord]:
        raise NotImplementedError

    def find_open_records(self) -> Sequence[TimeRecord]:
        """Open records of all actors, oldest first."""
        raise NotImplementedError

    def get_by_id(self, record_id: int) -> Optional[TimeRecord]:
        raise NotImplementedError

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
        raise NotImplementedError

    def admin_update_record(
        self,
        *,
        record_id: int,
        start_time: datetime,
        end_time: datetime,
        duration_minutes: int,
        lunch_deducted: bool,
    ) -> bool:
        """Admin-only override; duration must already be recomputed."""

        raise NotImplementedError

    def get_recent_for_actor(self, actor_id: int, limit: int) -> Sequence[TimeRecord]:
        raise NotImplementedError

    def get_report_rows(
        self,
        *,
        start_date: date,
        end_date: date,
        actor_id: Optional[int] = None,
        project_id: Optional[int] = None,
    ) -> Sequence[TimeRecordReportRow]:
        raise NotImplementedError
