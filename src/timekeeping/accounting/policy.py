from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time
from typing import Any

from ..common.datetime_utils import parse_hhmm
from ..core.constants import (
    DEFAULT_CUTOFF_CHECK_SECONDS,
    DEFAULT_CUTOFF_TIME,
    DEFAULT_LUNCH_END,
    DEFAULT_LUNCH_START,
)
from ..core.enums import CutoffPolicy
from ..core.exceptions import ValidationError


@dataclass(frozen=True)
class WorkdayPolicy:
    """Fixed daily rules: unpaid lunch window and the automatic cutoff hour."""

    lunch_start: time = DEFAULT_LUNCH_START
    lunch_end: time = DEFAULT_LUNCH_END
    cutoff_time: time = DEFAULT_CUTOFF_TIME
    cutoff_policy: CutoffPolicy = CutoffPolicy.CUTOFF_TIME
    cutoff_check_seconds: int = DEFAULT_CUTOFF_CHECK_SECONDS

    def __post_init__(self) -> None:
        if self.lunch_end <= self.lunch_start:
            raise ValidationError("Lunch window must end after it starts")
        if self.cutoff_check_seconds <= 0:
            raise ValidationError("Cutoff check interval must be positive")

    def lunch_window(self, day: date) -> tuple[datetime, datetime]:
        return datetime.combine(day, self.lunch_start), datetime.combine(day, self.lunch_end)

    def cutoff_at(self, start_time: datetime) -> datetime:
        """Cutoff timestamp on the calendar day the session started."""
        return datetime.combine(start_time.date(), self.cutoff_time)

    def is_past_cutoff(self, start_time: datetime, now: datetime) -> bool:
        return now.date() > start_time.date() or now >= self.cutoff_at(start_time)

    @classmethod
    def from_settings(cls, settings: Any) -> "WorkdayPolicy":
        def _time(name: str, default: time) -> time:
            raw = getattr(settings, name, None)
            if not raw:
                return default
            try:
                return parse_hhmm(str(raw))
            except ValueError:
                raise ValidationError(f"{name} must be HH:MM, got {raw!r}")

        raw_policy = str(getattr(settings, "CUTOFF_POLICY", CutoffPolicy.CUTOFF_TIME.value)).lower()
        try:
            policy = CutoffPolicy(raw_policy)
        except ValueError:
            raise ValidationError(f"Unknown CUTOFF_POLICY {raw_policy!r}")

        return cls(
            lunch_start=_time("LUNCH_START", DEFAULT_LUNCH_START),
            lunch_end=_time("LUNCH_END", DEFAULT_LUNCH_END),
            cutoff_time=_time("CUTOFF_TIME", DEFAULT_CUTOFF_TIME),
            cutoff_policy=policy,
            cutoff_check_seconds=int(getattr(settings, "CUTOFF_CHECK_SECONDS", DEFAULT_CUTOFF_CHECK_SECONDS)),
        )
