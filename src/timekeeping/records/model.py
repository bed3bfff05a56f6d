from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class TimeRecord:
    """Domain entity: one worked interval on a project.

    ``end_time`` is None while the session is still running; such a record
    carries ``duration_minutes == 0`` until it is finalized.
    """

    record_id: int
    actor_id: int
    project_id: int
    start_time: datetime
    end_time: Optional[datetime]
    duration_minutes: int = 0
    lunch_deducted: bool = False
    created_at: Optional[datetime] = None

    @property
    def is_open(self) -> bool:
        return self.end_time is None


@dataclass(frozen=True)
class TimeRecordReportRow:
    """Read-model for reports (joined with actor and project names)."""

    record_id: int
    actor_id: int
    actor_name: str
    project_id: int
    project_name: str
    start_time: datetime
    end_time: datetime
    duration_minutes: int
    lunch_deducted: bool
