from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime, timedelta
from typing import Any, Optional

from ..common.datetime_utils import parse_iso_datetime, to_iso
from ..records.model import TimeRecord


@dataclass(frozen=True)
class WorkSession:
    """The running interval of one actor.

    Immutable: pause/resume return a new value, so a failed write can never
    leave a half-applied transition behind.
    """

    actor_id: int
    project_id: int
    record_id: int
    start_time: datetime
    pause_accumulated: timedelta = timedelta(0)
    current_pause_start: Optional[datetime] = None

    @property
    def is_paused(self) -> bool:
        return self.current_pause_start is not None

    def paused(self, now: datetime) -> "WorkSession":
        return replace(self, current_pause_start=max(now, self.start_time))

    def resumed(self, now: datetime) -> "WorkSession":
        if self.current_pause_start is None:
            return self
        # clock skew must not shrink the accumulated pause
        extra = max(now - self.current_pause_start, timedelta(0))
        return replace(self, pause_accumulated=self.pause_accumulated + extra, current_pause_start=None)

    def elapsed(self, now: datetime) -> timedelta:
        running = now - self.start_time - self.pause_accumulated
        if self.current_pause_start is not None:
            running -= max(now - self.current_pause_start, timedelta(0))
        return max(running, timedelta(0))

    def to_snapshot(self) -> dict[str, Any]:
        return {
            "actor_id": self.actor_id,
            "project_id": self.project_id,
            "record_id": self.record_id,
            "start_time": to_iso(self.start_time),
            "pause_accumulated_seconds": self.pause_accumulated.total_seconds(),
            "current_pause_start": to_iso(self.current_pause_start),
        }

    @classmethod
    def from_snapshot(cls, data: dict[str, Any]) -> "WorkSession":
        """Rebuild from a snapshot; raises KeyError/ValueError/TypeError when malformed."""
        pause_start = data.get("current_pause_start")
        session = cls(
            actor_id=int(data["actor_id"]),
            project_id=int(data["project_id"]),
            record_id=int(data["record_id"]),
            start_time=parse_iso_datetime(str(data["start_time"])),
            pause_accumulated=timedelta(seconds=max(0.0, float(data.get("pause_accumulated_seconds") or 0))),
            current_pause_start=parse_iso_datetime(str(pause_start)) if pause_start else None,
        )
        if session.current_pause_start is not None and session.current_pause_start < session.start_time:
            raise ValueError("current_pause_start precedes start_time")
        return session

    @classmethod
    def from_open_record(cls, record: TimeRecord) -> "WorkSession":
        return cls(
            actor_id=record.actor_id,
            project_id=record.project_id,
            record_id=record.record_id,
            start_time=record.start_time,
        )


@dataclass(frozen=True)
class RecoveryOutcome:
    """Result of reconciling the snapshot with the durable store after a restart."""

    session: Optional[WorkSession] = None
    finalized: Optional[TimeRecord] = None
    snapshot_discarded: bool = False
