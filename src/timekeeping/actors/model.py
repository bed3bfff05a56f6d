from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Actor:
    """Domain entity: an employee who clocks time.

    Note: Plain data object (no DB access code).
    """

    actor_id: int
    name: str
    password_hash: str
    is_active: bool = True
