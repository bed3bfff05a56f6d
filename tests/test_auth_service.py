from __future__ import annotations

import pytest

from timekeeping.actors.service import AuthService
from timekeeping.core.enums import Role
from timekeeping.core.exceptions import AuthenticationError, ValidationError


def test_employee_login(actors):
    auth = AuthService(actors, admin_password="secret")

    user = auth.authenticate_employee("anna", "pw-anna")

    assert user.role == Role.EMPLOYEE
    assert user.actor_id == 7


@pytest.mark.parametrize("name,password", [("anna", "wrong"), ("ben", "pw-ben"), ("nobody", "x")])
def test_employee_login_failures(actors, name, password):
    auth = AuthService(actors, admin_password="secret")

    with pytest.raises(AuthenticationError):
        auth.authenticate_employee(name, password)


def test_employee_login_requires_name(actors):
    with pytest.raises(ValidationError):
        AuthService(actors, admin_password="secret").authenticate_employee("  ", "pw")


def test_admin_login(actors):
    auth = AuthService(actors, admin_password="secret")

    assert auth.authenticate_admin("secret").role == Role.ADMIN
    with pytest.raises(AuthenticationError):
        auth.authenticate_admin("Secret")


def test_admin_login_disabled_without_password(actors):
    with pytest.raises(AuthenticationError):
        AuthService(actors, admin_password="").authenticate_admin("")
