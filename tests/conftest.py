from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import date, datetime, timedelta
from typing import Any, Optional

import pytest
from werkzeug.security import generate_password_hash

from timekeeping.actors.model import Actor
from timekeeping.core.enums import RequestStatus
from timekeeping.core.exceptions import RecordNotOpen, StoreError
from timekeeping.projects.model import Project
from timekeeping.records.model import TimeRecord, TimeRecordReportRow
from timekeeping.sessions.service import SessionEngine
from timekeeping.vacations.model import VacationRequest


class FakeClock:
    def __init__(self, now: datetime):
        self.current = now

    def now(self) -> datetime:
        return self.current

    def advance(self, **kwargs) -> datetime:
        self.current = self.current + timedelta(**kwargs)
        return self.current


@dataclass
class InMemoryProjects:
    projects: dict[int, Project]

    def list_all(self):
        return sorted(self.projects.values(), key=lambda p: p.name)

    def get_by_id(self, project_id: int) -> Optional[Project]:
        return self.projects.get(project_id)

    def get_by_name(self, name: str) -> Optional[Project]:
        return next((p for p in self.projects.values() if p.name == name), None)


@dataclass
class InMemoryActors:
    actors: dict[int, Actor]

    def get_by_id(self, actor_id: int) -> Optional[Actor]:
        return self.actors.get(actor_id)

    def get_by_name(self, name: str) -> Optional[Actor]:
        return next((a for a in self.actors.values() if a.name == name), None)


class InMemoryRecords:
    def __init__(self):
        self.by_id: dict[int, TimeRecord] = {}
        self._id = 0
        self.fail_writes = False
        self.fail_reads = False
        self.actor_names: dict[int, str] = {}
        self.project_names: dict[int, str] = {}

    def _check_write(self):
        if self.fail_writes:
            raise StoreError("store offline")

    def _check_read(self):
        if self.fail_reads:
            raise StoreError("store offline")

    def create_open_record(self, *, actor_id: int, project_id: int, start_time: datetime) -> int:
        self._check_write()
        self._id += 1
        self.by_id[self._id] = TimeRecord(
            record_id=self._id,
            actor_id=actor_id,
            project_id=project_id,
            start_time=start_time,
            end_time=None,
        )
        return self._id

    def finalize_record(self, *, record_id: int, end_time: datetime, duration_minutes: int, lunch_deducted: bool):
        self._check_write()
        rec = self.by_id.get(record_id)
        if rec is None or rec.end_time is not None:
            raise RecordNotOpen(f"Record {record_id} is missing or already finalized")
        rec = replace(rec, end_time=end_time, duration_minutes=duration_minutes, lunch_deducted=lunch_deducted)
        self.by_id[record_id] = rec
        return rec

    def find_open_record(self, actor_id: int) -> Optional[TimeRecord]:
        self._check_read()
        open_records = [r for r in self.by_id.values() if r.actor_id == actor_id and r.end_time is None]
        open_records.sort(key=lambda r: r.start_time, reverse=True)
        return open_records[0] if open_records else None

    def find_open_records(self):
        self._check_read()
        return sorted((r for r in self.by_id.values() if r.end_time is None), key=lambda r: r.start_time)

    def get_by_id(self, record_id: int) -> Optional[TimeRecord]:
        self._check_read()
        return self.by_id.get(record_id)

    def create_finalized_record(self, *, actor_id, project_id, start_time, end_time, duration_minutes, lunch_deducted):
        self._check_write()
        self._id += 1
        self.by_id[self._id] = TimeRecord(
            record_id=self._id,
            actor_id=actor_id,
            project_id=project_id,
            start_time=start_time,
            end_time=end_time,
            duration_minutes=duration_minutes,
            lunch_deducted=lunch_deducted,
        )
        return self._id

    def admin_update_record(self, *, record_id, start_time, end_time, duration_minutes, lunch_deducted) -> bool:
        self._check_write()
        rec = self.by_id.get(record_id)
        if rec is None:
            return False
        self.by_id[record_id] = replace(
            rec,
            start_time=start_time,
            end_time=end_time,
            duration_minutes=duration_minutes,
            lunch_deducted=lunch_deducted,
        )
        return True

    def get_recent_for_actor(self, actor_id: int, limit: int):
        items = [r for r in self.by_id.values() if r.actor_id == actor_id]
        items.sort(key=lambda r: r.start_time, reverse=True)
        return items[:limit]

    def get_report_rows(self, *, start_date: date, end_date: date, actor_id=None, project_id=None):
        rows = []
        for r in sorted(self.by_id.values(), key=lambda r: r.start_time):
            if r.end_time is None or not (start_date <= r.start_time.date() <= end_date):
                continue
            if actor_id is not None and r.actor_id != actor_id:
                continue
            if project_id is not None and r.project_id != project_id:
                continue
            rows.append(
                TimeRecordReportRow(
                    record_id=r.record_id,
                    actor_id=r.actor_id,
                    actor_name=self.actor_names.get(r.actor_id, f"actor-{r.actor_id}"),
                    project_id=r.project_id,
                    project_name=self.project_names.get(r.project_id, f"project-{r.project_id}"),
                    start_time=r.start_time,
                    end_time=r.end_time,
                    duration_minutes=r.duration_minutes,
                    lunch_deducted=r.lunch_deducted,
                )
            )
        return rows


class InMemorySnapshots:
    def __init__(self):
        self.data: dict[int, dict[str, Any]] = {}
        self.fail_writes = False

    def save(self, actor_id: int, snapshot: dict[str, Any]) -> None:
        if self.fail_writes:
            raise StoreError("disk full")
        self.data[actor_id] = dict(snapshot)

    def load(self, actor_id: int) -> Optional[dict[str, Any]]:
        snap = self.data.get(actor_id)
        return dict(snap) if snap is not None else None

    def clear(self, actor_id: int) -> None:
        if self.fail_writes:
            raise StoreError("disk full")
        self.data.pop(actor_id, None)


class InMemoryVacations:
    def __init__(self):
        self._next_id = 1
        self.by_id: dict[int, VacationRequest] = {}

    def create(self, *, actor_id, start_date, end_date, note):
        rid = self._next_id
        self._next_id += 1
        self.by_id[rid] = VacationRequest(
            request_id=rid,
            actor_id=actor_id,
            start_date=start_date,
            end_date=end_date,
            status=RequestStatus.PENDING,
            created_at=datetime(2026, 2, 1, 10, 0, 0),
            note=note,
        )
        return rid

    def get_by_id(self, request_id):
        return self.by_id.get(int(request_id))

    def list_requests(self, *, status=None, actor_id=None, limit=200):
        items = [
            v
            for v in self.by_id.values()
            if (status is None or v.status == status) and (actor_id is None or v.actor_id == actor_id)
        ]
        items.sort(key=lambda v: v.request_id, reverse=True)
        return items[:limit]

    def decide(self, *, request_id, status, admin_note=None):
        req = self.by_id.get(int(request_id))
        if not req or req.status != RequestStatus.PENDING:
            return False
        self.by_id[int(request_id)] = replace(
            req, status=status, decided_at=datetime(2026, 2, 1, 11, 0, 0), admin_note=admin_note
        )
        return True


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2026, 2, 2, 9, 0, 0)


@pytest.fixture
def clock(fixed_now) -> FakeClock:
    return FakeClock(fixed_now)


@pytest.fixture
def projects() -> InMemoryProjects:
    return InMemoryProjects({1: Project(project_id=1, name="Internal"), 2: Project(project_id=2, name="Customer A")})


@pytest.fixture
def actors() -> InMemoryActors:
    return InMemoryActors(
        {
            7: Actor(actor_id=7, name="anna", password_hash=generate_password_hash("pw-anna")),
            8: Actor(actor_id=8, name="ben", password_hash=generate_password_hash("pw-ben"), is_active=False),
        }
    )


@pytest.fixture
def records() -> InMemoryRecords:
    return InMemoryRecords()


@pytest.fixture
def snapshots() -> InMemorySnapshots:
    return InMemorySnapshots()


@pytest.fixture
def engine(records, snapshots, projects, clock) -> SessionEngine:
    return SessionEngine(records, snapshots, projects, clock=clock)


@pytest.fixture
def make_engine(projects):
    """Fresh engine and fakes per call (for hypothesis examples and policy variants)."""

    def _make(now: datetime, **engine_kwargs):
        records = InMemoryRecords()
        snaps = InMemorySnapshots()
        fake_clock = FakeClock(now)
        engine = SessionEngine(records, snaps, projects, clock=fake_clock, **engine_kwargs)
        return engine, records, snaps, fake_clock

    return _make


@pytest.fixture
def vacations() -> InMemoryVacations:
    return InMemoryVacations()
