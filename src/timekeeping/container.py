from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from .accounting.calculator.standard_calculator import StandardDurationCalculator
from .accounting.policy import WorkdayPolicy
from .actors.mysql_actor_repository import MySQLActorRepository
from .actors.repository import ActorRepository
from .actors.service import AuthService
from .common.clock import Clock
from .database.connection import DatabaseConnection, DBConfig
from .projects.mysql_project_repository import MySQLProjectRepository
from .projects.repository import ProjectRepository
from .records.mysql_record_repository import MySQLTimeRecordRepository
from .records.repository import TimeRecordRepository
from .records.service import RecordService
from .reports.service import TimesheetReportService
from .sessions.monitor import CutoffMonitor
from .sessions.service import SessionEngine
from .sessions.snapshot_store import JsonFileSnapshotStore, SnapshotStore
from .vacations.mysql_vacation_repository import MySQLVacationRepository
from .vacations.repository import VacationRepository
from .vacations.service import VacationService


@dataclass(frozen=True)
class Container:
    actors_repo: ActorRepository
    projects_repo: ProjectRepository
    records_repo: TimeRecordRepository
    snapshot_store: SnapshotStore
    vacations_repo: VacationRepository

    auth_service: AuthService
    session_engine: SessionEngine
    record_service: RecordService
    report_service: TimesheetReportService
    vacation_service: VacationService
    cutoff_monitor: CutoffMonitor


def build_services(
    *,
    actors_repo: ActorRepository,
    projects_repo: ProjectRepository,
    records_repo: TimeRecordRepository,
    snapshot_store: SnapshotStore,
    vacations_repo: VacationRepository,
    policy: WorkdayPolicy,
    admin_password: str,
    clock: Optional[Clock] = None,
) -> Container:
    calculator = StandardDurationCalculator(policy)
    engine = SessionEngine(
        records_repo,
        snapshot_store,
        projects_repo,
        clock=clock,
        policy=policy,
        calculator=calculator,
    )
    return Container(
        actors_repo=actors_repo,
        projects_repo=projects_repo,
        records_repo=records_repo,
        snapshot_store=snapshot_store,
        vacations_repo=vacations_repo,
        auth_service=AuthService(actors_repo, admin_password=admin_password),
        session_engine=engine,
        record_service=RecordService(records_repo, actors_repo, projects_repo, calculator=calculator),
        report_service=TimesheetReportService(records_repo),
        vacation_service=VacationService(vacations_repo),
        cutoff_monitor=CutoffMonitor(engine),
    )


def build_container(settings: Any, *, clock: Optional[Clock] = None) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(getattr(settings, "DB_CONFIG")))

    return build_services(
        actors_repo=MySQLActorRepository(conn),
        projects_repo=MySQLProjectRepository(conn),
        records_repo=MySQLTimeRecordRepository(conn),
        snapshot_store=JsonFileSnapshotStore(getattr(settings, "SNAPSHOT_DIR")),
        vacations_repo=MySQLVacationRepository(conn),
        policy=WorkdayPolicy.from_settings(settings),
        admin_password=str(getattr(settings, "ADMIN_PASSWORD", "")),
        clock=clock,
    )
