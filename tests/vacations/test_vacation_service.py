from __future__ import annotations

from datetime import date

import pytest

from timekeeping.core.enums import RequestStatus, Role
from timekeeping.core.exceptions import AuthorizationError, ValidationError
from timekeeping.vacations.service import VacationService


@pytest.fixture
def service(vacations) -> VacationService:
    return VacationService(vacations)


def test_employee_files_pending_request(service):
    created = service.request_vacation(
        current_role=Role.EMPLOYEE,
        actor_id=7,
        start_date=date(2026, 3, 2),
        end_date=date(2026, 3, 6),
        note="  ski trip ",
    )

    assert created.status == RequestStatus.PENDING
    assert created.note == "ski trip"
    assert created.days == 5
    assert [v.request_id for v in service.list_mine(7)] == [created.request_id]
    assert service.list_mine(8) == []


def test_single_day_request_is_allowed(service):
    created = service.request_vacation(
        current_role=Role.EMPLOYEE, actor_id=7, start_date=date(2026, 3, 2), end_date=date(2026, 3, 2)
    )

    assert created.days == 1


def test_end_before_start_is_rejected(service, vacations):
    with pytest.raises(ValidationError):
        service.request_vacation(
            current_role=Role.EMPLOYEE, actor_id=7, start_date=date(2026, 3, 6), end_date=date(2026, 3, 2)
        )
    assert vacations.by_id == {}


def test_admin_cannot_file_requests(service):
    with pytest.raises(AuthorizationError):
        service.request_vacation(
            current_role=Role.ADMIN, actor_id=7, start_date=date(2026, 3, 2), end_date=date(2026, 3, 3)
        )


def test_overlapping_request_is_rejected_unless_previous_was_rejected(service):
    first = service.request_vacation(
        current_role=Role.EMPLOYEE, actor_id=7, start_date=date(2026, 3, 2), end_date=date(2026, 3, 6)
    )

    with pytest.raises(ValidationError):
        service.request_vacation(
            current_role=Role.EMPLOYEE, actor_id=7, start_date=date(2026, 3, 6), end_date=date(2026, 3, 9)
        )

    service.reject(current_role=Role.ADMIN, request_id=first.request_id)
    again = service.request_vacation(
        current_role=Role.EMPLOYEE, actor_id=7, start_date=date(2026, 3, 6), end_date=date(2026, 3, 9)
    )
    assert again.status == RequestStatus.PENDING


def test_other_actors_do_not_overlap(service):
    service.request_vacation(
        current_role=Role.EMPLOYEE, actor_id=7, start_date=date(2026, 3, 2), end_date=date(2026, 3, 6)
    )
    other = service.request_vacation(
        current_role=Role.EMPLOYEE, actor_id=8, start_date=date(2026, 3, 2), end_date=date(2026, 3, 6)
    )

    assert other.actor_id == 8


def test_admin_approves_and_pending_list_shrinks(service):
    created = service.request_vacation(
        current_role=Role.EMPLOYEE, actor_id=7, start_date=date(2026, 3, 2), end_date=date(2026, 3, 6)
    )
    assert [v.request_id for v in service.list_for_admin(current_role=Role.ADMIN)] == [created.request_id]

    approved = service.approve(current_role=Role.ADMIN, request_id=created.request_id, admin_note=" ok ")

    assert approved.status == RequestStatus.APPROVED
    assert approved.admin_note == "ok"
    assert approved.decided_at is not None
    assert service.list_for_admin(current_role=Role.ADMIN) == []
    assert len(service.list_for_admin(current_role=Role.ADMIN, status=None)) == 1


def test_decisions_require_admin(service):
    created = service.request_vacation(
        current_role=Role.EMPLOYEE, actor_id=7, start_date=date(2026, 3, 2), end_date=date(2026, 3, 6)
    )

    with pytest.raises(AuthorizationError):
        service.approve(current_role=Role.EMPLOYEE, request_id=created.request_id)
    with pytest.raises(AuthorizationError):
        service.list_for_admin(current_role=Role.EMPLOYEE)


def test_request_can_only_be_decided_once(service):
    created = service.request_vacation(
        current_role=Role.EMPLOYEE, actor_id=7, start_date=date(2026, 3, 2), end_date=date(2026, 3, 6)
    )
    service.reject(current_role=Role.ADMIN, request_id=created.request_id)

    with pytest.raises(ValidationError):
        service.approve(current_role=Role.ADMIN, request_id=created.request_id)
    with pytest.raises(ValidationError):
        service.reject(current_role=Role.ADMIN, request_id=999)
