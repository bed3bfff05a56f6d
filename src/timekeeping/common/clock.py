from __future__ import annotations

from datetime import datetime
from typing import Protocol

from .datetime_utils import now_local


class Clock(Protocol):
    def now(self) -> datetime:
        raise NotImplementedError


class SystemClock:
    """Wall clock in local naive time."""

    def now(self) -> datetime:
        return now_local()
