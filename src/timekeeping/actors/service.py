from __future__ import annotations

import hmac
from dataclasses import dataclass
from typing import Optional

from werkzeug.security import check_password_hash

from ..common.validators import require_non_empty
from ..core.enums import Role
from ..core.exceptions import AuthenticationError
from .repository import ActorRepository


@dataclass(frozen=True)
class SessionUser:
    """What we store into the Flask session after login."""

    role: Role
    actor_id: Optional[int] = None
    name: str = ""


class AuthService:
    """Use case: employee and admin login."""

    def __init__(self, actors: ActorRepository, *, admin_password: str):
        self._actors = actors
        self._admin_password = admin_password

    def authenticate_employee(self, name: str, password: str) -> SessionUser:
        name = require_non_empty(name, "Name")
        actor = self._actors.get_by_name(name)
        if not actor or not actor.is_active:
            raise AuthenticationError("Employee not found or deactivated")

        try:
            ok = check_password_hash(actor.password_hash, password or "")
        except ValueError:
            # e.g. placeholder hashes or corrupted values
            ok = False

        if not ok:
            raise AuthenticationError("Wrong password")

        return SessionUser(role=Role.EMPLOYEE, actor_id=actor.actor_id, name=actor.name)

    def authenticate_admin(self, password: str) -> SessionUser:
        if not self._admin_password or not hmac.compare_digest(
            (password or "").encode("utf-8"), self._admin_password.encode("utf-8")
        ):
            raise AuthenticationError("Wrong admin password")
        return SessionUser(role=Role.ADMIN, name="admin")
