from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field, replace
from datetime import datetime, timedelta
from typing import Optional

from ..accounting.calculator.base import DurationCalculator
from ..accounting.calculator.standard_calculator import StandardDurationCalculator
from ..accounting.policy import WorkdayPolicy
from ..common.clock import Clock, SystemClock
from ..common.validators import require_positive_int
from ..core.enums import CutoffPolicy, StopReason
from ..core.exceptions import (
    InvalidStateTransition,
    NoActiveSession,
    NoProjectSelected,
    ProjectNotFound,
    RecordNotOpen,
    SessionAlreadyRunning,
    StoreError,
    ValidationError,
)
from ..projects.repository import ProjectRepository
from ..records.model import TimeRecord
from ..records.repository import TimeRecordRepository
from .model import RecoveryOutcome, WorkSession
from .snapshot_store import SnapshotStore

logger = logging.getLogger(__name__)


@dataclass
class _ActorContext:
    lock: threading.RLock = field(default_factory=threading.RLock)
    session: Optional[WorkSession] = None
    # False until reconciled with the record store in this process
    loaded: bool = False


class SessionEngine:
    """Use case: start/pause/resume/stop one work session per actor.

    The durable record store is authoritative: start and stop only change
    in-memory state after it acknowledged the write. The snapshot store is a
    crash-recovery hint only; its failures are logged, not raised.
    Mutations on one actor are serialized by that actor's lock.

    An actor seen for the first time in this process (e.g. after a restart
    with the browser still logged in) is reconciled with the stores before
    the first operation on it.
    """

    def __init__(
        self,
        records: TimeRecordRepository,
        snapshots: SnapshotStore,
        projects: ProjectRepository,
        *,
        clock: Optional[Clock] = None,
        policy: Optional[WorkdayPolicy] = None,
        calculator: Optional[DurationCalculator] = None,
    ):
        self._records = records
        self._snapshots = snapshots
        self._projects = projects
        self._clock = clock or SystemClock()
        self._policy = policy or WorkdayPolicy()
        self._calculator = calculator or StandardDurationCalculator(self._policy)
        self._contexts: dict[int, _ActorContext] = {}
        self._registry_lock = threading.Lock()

    @property
    def policy(self) -> WorkdayPolicy:
        return self._policy

    def current_session(self, actor_id: int) -> Optional[WorkSession]:
        """In-memory session only; never touches the stores."""
        with self._registry_lock:
            ctx = self._contexts.get(int(actor_id))
        return ctx.session if ctx else None

    def resolve_session(self, actor_id: int, *, now: Optional[datetime] = None) -> Optional[WorkSession]:
        """Like ``current_session`` but reconciles an unseen actor with the stores first."""
        actor_id = int(actor_id)
        now = self._now(now)
        ctx = self._context(actor_id)
        with ctx.lock:
            self._ensure_loaded(ctx, actor_id, now)
            return ctx.session

    def active_actor_ids(self) -> list[int]:
        with self._registry_lock:
            return [actor_id for actor_id, ctx in self._contexts.items() if ctx.session is not None]

    def elapsed(self, actor_id: int, *, now: Optional[datetime] = None) -> timedelta:
        """Worked time so far for the display tick; never mutates state."""
        session = self.current_session(actor_id)
        if session is None:
            return timedelta(0)
        return session.elapsed(self._now(now))

    def start(self, actor_id: int, project_id, *, now: Optional[datetime] = None) -> WorkSession:
        if project_id is None or (isinstance(project_id, str) and not project_id.strip()):
            raise NoProjectSelected("Please select a project")
        try:
            project_id = require_positive_int(project_id, "Project")
        except ValidationError:
            raise ProjectNotFound(f"Project {project_id!r} not found")

        actor_id = int(actor_id)
        now = self._now(now)
        ctx = self._context(actor_id)
        with ctx.lock:
            self._ensure_loaded(ctx, actor_id, now)
            if ctx.session is not None:
                raise SessionAlreadyRunning("A session is already running")
            open_record = self._records.find_open_record(actor_id)
            if open_record is not None:
                raise SessionAlreadyRunning(f"Record {open_record.record_id} is still open")
            if self._projects.get_by_id(project_id) is None:
                raise ProjectNotFound(f"Project {project_id} not found")

            record_id = self._records.create_open_record(actor_id=actor_id, project_id=project_id, start_time=now)
            session = WorkSession(actor_id=actor_id, project_id=project_id, record_id=record_id, start_time=now)
            self._save_snapshot(session)
            ctx.session = session

        logger.info("Started session for actor %s on project %s (record %s)", actor_id, project_id, record_id)
        return session

    def pause(self, actor_id: int, *, now: Optional[datetime] = None) -> WorkSession:
        now = self._now(now)
        ctx = self._context(actor_id)
        with ctx.lock:
            session = self._require_session(ctx, int(actor_id), now)
            if session.is_paused:
                raise InvalidStateTransition("Session is already paused")
            return self._replace_session(ctx, session.paused(now))

    def resume(self, actor_id: int, *, now: Optional[datetime] = None) -> WorkSession:
        now = self._now(now)
        ctx = self._context(actor_id)
        with ctx.lock:
            session = self._require_session(ctx, int(actor_id), now)
            if not session.is_paused:
                raise InvalidStateTransition("Session is not paused")
            return self._replace_session(ctx, session.resumed(now))

    def toggle_pause(self, actor_id: int, *, now: Optional[datetime] = None) -> WorkSession:
        now = self._now(now)
        ctx = self._context(actor_id)
        with ctx.lock:
            session = self._require_session(ctx, int(actor_id), now)
            if session.is_paused:
                return self._replace_session(ctx, session.resumed(now))
            return self._replace_session(ctx, session.paused(now))

    def stop(
        self,
        actor_id: int,
        *,
        now: Optional[datetime] = None,
        reason: StopReason = StopReason.MANUAL,
    ) -> TimeRecord:
        actor_id = int(actor_id)
        now = self._now(now)
        ctx = self._context(actor_id)
        with ctx.lock:
            outcome = self._ensure_loaded(ctx, actor_id, now)
            if outcome is not None and outcome.finalized is not None:
                # the stale session was closed by the cutoff while loading
                return outcome.finalized
            session = self._require_session(ctx, actor_id, now)
            return self._finalize(ctx, session, now, reason)

    def detach(self, actor_id: int) -> None:
        """Forget the in-memory session (logout); the store and snapshot keep it."""
        with self._registry_lock:
            ctx = self._contexts.pop(int(actor_id), None)
        if ctx is not None:
            with ctx.lock:
                ctx.session = None
                ctx.loaded = False

    def check_cutoff(self, actor_id: int, *, now: Optional[datetime] = None) -> Optional[TimeRecord]:
        actor_id = int(actor_id)
        now = self._now(now)
        ctx = self._context(actor_id)
        with ctx.lock:
            outcome = self._ensure_loaded(ctx, actor_id, now)
            if outcome is not None and outcome.finalized is not None:
                return outcome.finalized
            session = ctx.session
            if session is None or not self._policy.is_past_cutoff(session.start_time, now):
                return None
            logger.info("Automatic cutoff reached for actor %s (started %s)", session.actor_id, session.start_time)
            return self._finalize(ctx, session, now, StopReason.AUTOMATIC_CUTOFF)

    def check_all_cutoffs(self, *, now: Optional[datetime] = None) -> list[TimeRecord]:
        """Stop every overdue session, in memory or only in the record store."""
        now = self._now(now)
        actor_ids = set(self.active_actor_ids())
        try:
            open_records = self._records.find_open_records()
        except StoreError:
            logger.warning("Could not list open records; checking in-memory sessions only", exc_info=True)
            open_records = []
        actor_ids.update(r.actor_id for r in open_records if self._policy.is_past_cutoff(r.start_time, now))

        finalized: list[TimeRecord] = []
        for actor_id in sorted(actor_ids):
            try:
                record = self.check_cutoff(actor_id, now=now)
            except StoreError:
                logger.warning("Automatic cutoff for actor %s failed; will retry", actor_id, exc_info=True)
                continue
            except NoActiveSession:
                logger.info("Session of actor %s was already closed elsewhere", actor_id)
                continue
            if record is not None:
                finalized.append(record)
        return finalized

    def recover(self, actor_id: int, *, now: Optional[datetime] = None) -> RecoveryOutcome:
        """Rebuild the running session after a restart.

        The durable open record decides whether a session exists at all; the
        local snapshot (or a session still held in memory) only contributes
        pause state for the same record.
        """
        actor_id = int(actor_id)
        now = self._now(now)
        ctx = self._context(actor_id)
        with ctx.lock:
            return self._recover_locked(ctx, actor_id, now)

    def _recover_locked(self, ctx: _ActorContext, actor_id: int, now: datetime) -> RecoveryOutcome:
        durable = self._records.find_open_record(actor_id)
        local, had_snapshot = self._load_local(ctx, actor_id)

        if durable is None:
            discarded = had_snapshot or ctx.session is not None
            if discarded:
                logger.warning("Discarding local session state for actor %s: no open record in the store", actor_id)
                self._clear_snapshot(actor_id)
            ctx.session = None
            ctx.loaded = True
            return RecoveryOutcome(snapshot_discarded=discarded)

        session = WorkSession.from_open_record(durable)
        discarded = False
        if local is not None and local.record_id == durable.record_id:
            pause_start = local.current_pause_start
            if pause_start is not None and pause_start < session.start_time:
                pause_start = session.start_time
            session = replace(
                session,
                pause_accumulated=local.pause_accumulated,
                current_pause_start=pause_start,
            )
        elif local is not None or had_snapshot:
            logger.warning(
                "Local session snapshot for actor %s does not match open record %s; using the store",
                actor_id,
                durable.record_id,
            )
            discarded = True

        if self._policy.is_past_cutoff(session.start_time, now):
            logger.info(
                "Recovered session for actor %s started %s is past its cutoff; finalizing",
                actor_id,
                session.start_time,
            )
            record = self._finalize(ctx, session, now, StopReason.AUTOMATIC_CUTOFF, cap_at_cutoff=True)
            ctx.loaded = True
            return RecoveryOutcome(finalized=record, snapshot_discarded=discarded)

        ctx.session = session
        ctx.loaded = True
        self._save_snapshot(session)
        logger.info("Recovered running session for actor %s (record %s)", actor_id, session.record_id)
        return RecoveryOutcome(session=session, snapshot_discarded=discarded)

    def _now(self, now: Optional[datetime]) -> datetime:
        return now or self._clock.now()

    def _context(self, actor_id: int) -> _ActorContext:
        with self._registry_lock:
            ctx = self._contexts.get(int(actor_id))
            if ctx is None:
                ctx = _ActorContext()
                self._contexts[int(actor_id)] = ctx
            return ctx

    def _ensure_loaded(self, ctx: _ActorContext, actor_id: int, now: datetime) -> Optional[RecoveryOutcome]:
        if ctx.loaded:
            return None
        return self._recover_locked(ctx, actor_id, now)

    def _require_session(self, ctx: _ActorContext, actor_id: int, now: datetime) -> WorkSession:
        self._ensure_loaded(ctx, actor_id, now)
        if ctx.session is None:
            raise NoActiveSession("No running session")
        return ctx.session

    def _replace_session(self, ctx: _ActorContext, session: WorkSession) -> WorkSession:
        ctx.session = session
        self._save_snapshot(session)
        return session

    def _end_time_for(
        self,
        session: WorkSession,
        now: datetime,
        reason: StopReason,
        *,
        cap_at_cutoff: bool = False,
    ) -> datetime:
        if reason != StopReason.AUTOMATIC_CUTOFF:
            return now
        stale = now.date() > session.start_time.date()
        if cap_at_cutoff or stale or self._policy.cutoff_policy == CutoffPolicy.CUTOFF_TIME:
            cutoff = self._policy.cutoff_at(session.start_time)
            return max(min(now, cutoff), session.start_time)
        return now

    def _finalize(
        self,
        ctx: _ActorContext,
        session: WorkSession,
        now: datetime,
        reason: StopReason,
        *,
        cap_at_cutoff: bool = False,
    ) -> TimeRecord:
        end_time = self._end_time_for(session, now, reason, cap_at_cutoff=cap_at_cutoff)
        closed = session.resumed(end_time)
        breakdown = self._calculator.breakdown(closed.start_time, end_time, closed.pause_accumulated)

        try:
            record = self._records.finalize_record(
                record_id=closed.record_id,
                end_time=end_time,
                duration_minutes=breakdown.billable_minutes,
                lunch_deducted=breakdown.lunch_deducted,
            )
        except RecordNotOpen:
            return self._drop_closed_elsewhere(ctx, closed)

        ctx.session = None
        self._clear_snapshot(closed.actor_id)
        logger.info(
            "Stopped session for actor %s (%s): %s min billable, lunch deducted=%s",
            closed.actor_id,
            reason.value,
            breakdown.billable_minutes,
            breakdown.lunch_deducted,
        )
        return record

    def _drop_closed_elsewhere(self, ctx: _ActorContext, session: WorkSession) -> TimeRecord:
        logger.warning(
            "Record %s of actor %s is no longer open in the store; dropping the local session",
            session.record_id,
            session.actor_id,
        )
        ctx.session = None
        self._clear_snapshot(session.actor_id)
        stored = self._records.get_by_id(session.record_id)
        if stored is None or stored.is_open:
            raise NoActiveSession("The session was already closed elsewhere")
        return stored

    def _load_local(self, ctx: _ActorContext, actor_id: int) -> tuple[Optional[WorkSession], bool]:
        if ctx.session is not None:
            return ctx.session, False
        try:
            data = self._snapshots.load(actor_id)
        except StoreError:
            logger.warning("Could not read session snapshot for actor %s", actor_id, exc_info=True)
            return None, False
        if data is None:
            return None, False
        try:
            session = WorkSession.from_snapshot(data)
        except (KeyError, TypeError, ValueError):
            logger.warning("Ignoring malformed session snapshot for actor %s", actor_id)
            return None, True
        if session.actor_id != actor_id:
            logger.warning("Ignoring session snapshot of actor %s stored for actor %s", session.actor_id, actor_id)
            return None, True
        return session, True

    def _save_snapshot(self, session: WorkSession) -> None:
        try:
            self._snapshots.save(session.actor_id, session.to_snapshot())
        except StoreError:
            logger.warning("Could not persist session snapshot for actor %s", session.actor_id, exc_info=True)

    def _clear_snapshot(self, actor_id: int) -> None:
        try:
            self._snapshots.clear(actor_id)
        except StoreError:
            logger.warning("Could not clear session snapshot for actor %s", actor_id, exc_info=True)
