from __future__ import annotations

import logging
from datetime import date
from typing import Optional, Sequence

from ..core.enums import RequestStatus, Role
from ..core.exceptions import AuthorizationError, ValidationError
from .model import VacationRequest
from .repository import VacationRepository

logger = logging.getLogger(__name__)


class VacationService:
    """Use case: employees file vacation requests, the admin approves or rejects them."""

    def __init__(self, vacations: VacationRepository):
        self._vacations = vacations

    def request_vacation(
        self,
        *,
        current_role: Role,
        actor_id: int,
        start_date: date,
        end_date: date,
        note: str = "",
    ) -> VacationRequest:
        if current_role != Role.EMPLOYEE:
            raise AuthorizationError("Only employees can request vacation")
        if end_date < start_date:
            raise ValidationError("End date must not be before start date")

        for existing in self._vacations.list_requests(actor_id=int(actor_id), limit=500):
            if existing.status == RequestStatus.REJECTED:
                continue
            if existing.start_date <= end_date and start_date <= existing.end_date:
                raise ValidationError(
                    f"Overlaps request {existing.request_id} ({existing.start_date} to {existing.end_date})"
                )

        request_id = self._vacations.create(
            actor_id=int(actor_id),
            start_date=start_date,
            end_date=end_date,
            note=(note or "").strip(),
        )
        logger.info("Vacation request %s filed by actor %s: %s to %s", request_id, actor_id, start_date, end_date)
        return self._vacations.get_by_id(request_id)

    def approve(self, *, current_role: Role, request_id: int, admin_note: str = "") -> VacationRequest:
        return self._decide(current_role, request_id, RequestStatus.APPROVED, admin_note)

    def reject(self, *, current_role: Role, request_id: int, admin_note: str = "") -> VacationRequest:
        return self._decide(current_role, request_id, RequestStatus.REJECTED, admin_note)

    def list_mine(self, actor_id: int) -> Sequence[VacationRequest]:
        return self._vacations.list_requests(actor_id=int(actor_id))

    def list_for_admin(self, *, current_role: Role, status: Optional[RequestStatus] = RequestStatus.PENDING):
        if current_role != Role.ADMIN:
            raise AuthorizationError("Admin only")
        return self._vacations.list_requests(status=status, limit=500)

    def _decide(self, current_role: Role, request_id: int, status: RequestStatus, admin_note: str) -> VacationRequest:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Admin only")

        ok = self._vacations.decide(
            request_id=int(request_id),
            status=status,
            admin_note=(admin_note or "").strip() or None,
        )
        if not ok:
            raise ValidationError(f"Vacation request {request_id} does not exist or was already decided")

        logger.info("Vacation request %s %s", request_id, status.value.lower())
        return self._vacations.get_by_id(int(request_id))
