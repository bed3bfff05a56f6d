from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Project


class ProjectRepository(Protocol):
    def list_all(self) -> Sequence[Project]:
        raise NotImplementedError

    def get_by_id(self, project_id: int) -> Optional[Project]:
        raise NotImplementedError

    def get_by_name(self, name: str) -> Optional[Project]:
        raise NotImplementedError
