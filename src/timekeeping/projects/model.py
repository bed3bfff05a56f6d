from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Project:
    """Domain entity: a project time is booked against."""

    project_id: int
    name: str
    note: str = ""
