from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from ..core.enums import RequestStatus
from .model import VacationRequest


class VacationRepository(Protocol):
    def create(self, *, actor_id: int, start_date: date, end_date: date, note: str) -> int:
        raise NotImplementedError

    def get_by_id(self, request_id: int) -> Optional[VacationRequest]:
        raise NotImplementedError

    def list_requests(
        self,
        *,
        status: Optional[RequestStatus] = None,
        actor_id: Optional[int] = None,
        limit: int = 200,
    ) -> Sequence[VacationRequest]:
        raise NotImplementedError

    def decide(self, *, request_id: int, status: RequestStatus, admin_note: Optional[str] = None) -> bool:
        """Move a PENDING request to ``status``; False if it was not pending."""
        raise NotImplementedError
