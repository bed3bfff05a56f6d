from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, timedelta


@dataclass(frozen=True)
class LunchAdjustment:
    minutes: int
    lunch_deducted: bool


@dataclass(frozen=True)
class DurationBreakdown:
    gross_minutes: int
    lunch_adjusted_minutes: int
    lunch_deducted: bool
    paused_minutes: int
    billable_minutes: int


class DurationCalculator(ABC):
    """Calculator interface (Strategy Pattern for billable time)."""

    @abstractmethod
    def adjust_for_lunch(self, start_time: datetime, end_time: datetime) -> LunchAdjustment:
        raise NotImplementedError

    @abstractmethod
    def breakdown(self, start_time: datetime, end_time: datetime, paused: timedelta) -> DurationBreakdown:
        raise NotImplementedError
