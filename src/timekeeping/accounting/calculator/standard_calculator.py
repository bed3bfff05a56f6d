from __future__ import annotations

from datetime import datetime, timedelta
from typing import Optional

from ...common.datetime_utils import round_minutes
from ..policy import WorkdayPolicy
from .base import DurationBreakdown, DurationCalculator, LunchAdjustment


class StandardDurationCalculator(DurationCalculator):
    """Standard rule: round(end - start) - lunch overlap - own pauses, not below 0.

    The lunch window only applies when start and end are on the same calendar
    day; overnight spans are not split per day. Any overlap is charged in full.
    """

    def __init__(self, policy: Optional[WorkdayPolicy] = None):
        self._policy = policy or WorkdayPolicy()

    def adjust_for_lunch(self, start_time: datetime, end_time: datetime) -> LunchAdjustment:
        if end_time <= start_time:
            return LunchAdjustment(minutes=0, lunch_deducted=False)

        gross = round_minutes(end_time - start_time)
        if start_time.date() != end_time.date():
            return LunchAdjustment(minutes=gross, lunch_deducted=False)

        lunch_start, lunch_end = self._policy.lunch_window(start_time.date())
        overlap = min(end_time, lunch_end) - max(start_time, lunch_start)
        overlap_minutes = round_minutes(max(overlap, timedelta(0)))
        if overlap_minutes > 0:
            return LunchAdjustment(minutes=max(0, gross - overlap_minutes), lunch_deducted=True)
        return LunchAdjustment(minutes=gross, lunch_deducted=False)

    def breakdown(self, start_time: datetime, end_time: datetime, paused: timedelta) -> DurationBreakdown:
        gross = round_minutes(end_time - start_time) if end_time > start_time else 0
        lunch = self.adjust_for_lunch(start_time, end_time)
        paused_minutes = round_minutes(max(paused, timedelta(0)))
        return DurationBreakdown(
            gross_minutes=gross,
            lunch_adjusted_minutes=lunch.minutes,
            lunch_deducted=lunch.lunch_deducted,
            paused_minutes=paused_minutes,
            billable_minutes=max(0, lunch.minutes - paused_minutes),
        )
