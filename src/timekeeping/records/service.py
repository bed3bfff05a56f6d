from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Iterable, Optional, Sequence

from ..accounting.calculator.base import DurationCalculator
from ..accounting.calculator.standard_calculator import StandardDurationCalculator
from ..actors.repository import ActorRepository
from ..common.datetime_utils import parse_iso_datetime
from ..core.constants import DEFAULT_HISTORY_LIMIT
from ..core.enums import Role
from ..core.exceptions import AuthorizationError, StoreError, ValidationError
from ..projects.repository import ProjectRepository
from .model import TimeRecord
from .repository import TimeRecordRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ImportSummary:
    imported: int
    skipped: int


class RecordService:
    """Use cases on finalized records: admin correction and legacy import."""

    def __init__(
        self,
        records: TimeRecordRepository,
        actors: ActorRepository,
        projects: ProjectRepository,
        *,
        calculator: Optional[DurationCalculator] = None,
    ):
        self._records = records
        self._actors = actors
        self._projects = projects
        self._calculator = calculator or StandardDurationCalculator()

    def recent_for_actor(self, actor_id: int, *, limit: int = DEFAULT_HISTORY_LIMIT) -> Sequence[TimeRecord]:
        return self._records.get_recent_for_actor(int(actor_id), int(limit))

    def admin_edit(
        self,
        *,
        current_role: Role,
        record_id: int,
        start_time: datetime,
        end_time: datetime,
        paused_minutes: int = 0,
    ) -> TimeRecord:
        """Correct a finalized record; duration and lunch flag are recomputed."""
        if current_role != Role.ADMIN:
            raise AuthorizationError("Only the admin may edit records")

        record = self._records.get_by_id(int(record_id))
        if not record:
            raise ValidationError("Record not found")
        if record.is_open:
            raise ValidationError("A running session cannot be edited")
        if end_time < start_time:
            raise ValidationError("End time must not be before start time")
        if paused_minutes < 0:
            raise ValidationError("Paused minutes must not be negative")

        breakdown = self._calculator.breakdown(start_time, end_time, timedelta(minutes=paused_minutes))
        ok = self._records.admin_update_record(
            record_id=record.record_id,
            start_time=start_time,
            end_time=end_time,
            duration_minutes=breakdown.billable_minutes,
            lunch_deducted=breakdown.lunch_deducted,
        )
        if not ok:
            raise ValidationError("Updating the record failed")

        logger.info("Record %s edited by admin: %s min", record.record_id, breakdown.billable_minutes)
        return TimeRecord(
            record_id=record.record_id,
            actor_id=record.actor_id,
            project_id=record.project_id,
            start_time=start_time,
            end_time=end_time,
            duration_minutes=breakdown.billable_minutes,
            lunch_deducted=breakdown.lunch_deducted,
            created_at=record.created_at,
        )

    def import_legacy_records(self, entries: Iterable[dict[str, Any]]) -> ImportSummary:
        """Move records kept on a device (``employee``/``project`` names, ``startISO``/``endISO``) into the store.

        Entries that cannot be resolved or parsed are skipped, not fatal.
        """
        actor_ids: dict[str, Optional[int]] = {}
        project_ids: dict[str, Optional[int]] = {}
        imported = skipped = 0

        for entry in entries:
            try:
                name = str(entry.get("employee") or "")
                project = str(entry.get("project") or "")
                start_raw = entry.get("startISO")
                end_raw = entry.get("endISO")
                if not name or not project or not start_raw or not end_raw:
                    skipped += 1
                    continue

                if name not in actor_ids:
                    actor = self._actors.get_by_name(name)
                    actor_ids[name] = actor.actor_id if actor else None
                if project not in project_ids:
                    proj = self._projects.get_by_name(project)
                    project_ids[project] = proj.project_id if proj else None
                actor_id = actor_ids[name]
                project_id = project_ids[project]
                if actor_id is None or project_id is None:
                    skipped += 1
                    continue

                start_time = parse_iso_datetime(str(start_raw))
                end_time = parse_iso_datetime(str(end_raw))
            except (AttributeError, TypeError, ValueError):
                skipped += 1
                continue

            lunch = self._calculator.adjust_for_lunch(start_time, end_time)
            try:
                self._records.create_finalized_record(
                    actor_id=actor_id,
                    project_id=project_id,
                    start_time=start_time,
                    end_time=end_time,
                    duration_minutes=lunch.minutes,
                    lunch_deducted=lunch.lunch_deducted,
                )
            except StoreError:
                logger.warning("Could not import record %s -> %s for %s", start_raw, end_raw, name, exc_info=True)
                skipped += 1
                continue
            imported += 1

        logger.info("Legacy import finished: %d imported, %d skipped", imported, skipped)
        return ImportSummary(imported=imported, skipped=skipped)
