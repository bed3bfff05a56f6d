from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import RequestStatus


@dataclass(frozen=True)
class VacationRequest:
    request_id: int
    actor_id: int
    start_date: date
    end_date: date
    status: RequestStatus
    created_at: datetime
    note: str = ""
    decided_at: Optional[datetime] = None
    admin_note: Optional[str] = None

    @property
    def days(self) -> int:
        """Calendar days covered, both ends included."""
        return (self.end_date - self.start_date).days + 1
