from __future__ import annotations

from typing import Optional, Protocol

from .model import Actor


class ActorRepository(Protocol):
    """Repository interface for Actor.

    Note (DIP): services depend on this interface, not on a concrete DB.
    """

    def get_by_id(self, actor_id: int) -> Optional[Actor]:
        raise NotImplementedError

    def get_by_name(self, name: str) -> Optional[Actor]:
        raise NotImplementedError
