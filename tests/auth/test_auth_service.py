from __future__ import annotations

from typing import Optional

import pytest

from hrms_portal.api.tokens import MemoryTokenStore
from hrms_portal.auth.model import AuthResult, User
from hrms_portal.auth.service import AuthService
from hrms_portal.core.enums import Role
from hrms_portal.core.exceptions import ApiNoResponseError, ApiResponseError, AuthenticationError, ValidationError


def make_user(**overrides) -> User:
    data = {"id": "u1", "name": "Asha Rao", "email": "asha@example.com", "mobileNumber": "9876543210", "role": "hr"}
    data.update(overrides)
    return User.from_api(data)


class InMemoryAuth:
    def __init__(self, *, password: str = "secret1"):
        self.password = password
        self.registered: list[dict] = []
        self.logged_out: list[str] = []
        self.logout_error: Optional[Exception] = None
        self.password_changes: list[tuple[str, str]] = []

    def login(self, *, email: str, password: str) -> AuthResult:
        if password != self.password:
            raise ApiResponseError(401, {"message": "Invalid credentials"})
        return AuthResult(make_user(email=email), "access-1", "refresh-1")

    def register(self, payload: dict) -> AuthResult:
        self.registered.append(payload)
        return AuthResult(make_user(name=payload["name"], email=payload["email"]), "access-1", "refresh-1")

    def logout(self, *, refresh_token: str) -> None:
        if self.logout_error:
            raise self.logout_error
        self.logged_out.append(refresh_token)

    def current_user(self) -> User:
        return make_user()

    def change_password(self, *, old_password: str, new_password: str) -> Optional[str]:
        self.password_changes.append((old_password, new_password))
        return "Password changed successfully"

    def forgot_password(self, *, email: str) -> Optional[str]:
        return f"Reset link sent to {email}"

    def reset_password(self, *, reset_token: str, new_password: str) -> Optional[str]:
        return "Password reset successfully"

    def update_user(self, user_id: str, payload: dict) -> User:
        return make_user(id=user_id, **payload)


def test_login_stores_tokens_and_returns_session_user():
    tokens = MemoryTokenStore()
    service = AuthService(InMemoryAuth(), tokens)

    user = service.login(" asha@example.com ", "secret1")

    assert user.email == "asha@example.com"
    assert user.role == Role.HR
    assert tokens.access_token == "access-1"
    assert service.is_authenticated()


def test_login_rejects_bad_credentials():
    service = AuthService(InMemoryAuth(), MemoryTokenStore())
    with pytest.raises(AuthenticationError, match="Invalid credentials"):
        service.login("asha@example.com", "wrong")


def test_login_requires_email_and_password():
    service = AuthService(InMemoryAuth(), MemoryTokenStore())
    with pytest.raises(ValidationError) as exc:
        service.login("not-an-email", "")
    assert set(exc.value.errors) == {"email", "password"}


def test_signup_validates_fields():
    service = AuthService(InMemoryAuth(), MemoryTokenStore())
    with pytest.raises(ValidationError) as exc:
        service.signup(name="", mobile_number="123", email="x", password="123", department_id="")
    assert set(exc.value.errors) == {"name", "mobileNumber", "email", "password", "departmentId"}


def test_signup_registers_and_starts_session():
    auth = InMemoryAuth()
    tokens = MemoryTokenStore()
    user = AuthService(auth, tokens).signup(
        name=" Ravi ", mobile_number="9876543210", email="ravi@example.com", password="secret1", department_id="d1"
    )
    assert user.name == "Ravi"
    assert auth.registered[0]["name"] == "Ravi"
    assert "role" not in auth.registered[0]
    assert tokens.refresh_token == "refresh-1"


def test_logout_clears_tokens_even_when_backend_fails():
    auth = InMemoryAuth()
    auth.logout_error = ApiNoResponseError("down")
    tokens = MemoryTokenStore("access-1", "refresh-1")

    AuthService(auth, tokens).logout()

    assert tokens.access_token is None
    assert tokens.refresh_token is None


def test_logout_sends_refresh_token():
    auth = InMemoryAuth()
    AuthService(auth, MemoryTokenStore("access-1", "refresh-1")).logout()
    assert auth.logged_out == ["refresh-1"]


def test_change_password_rules():
    service = AuthService(InMemoryAuth(), MemoryTokenStore())
    with pytest.raises(ValidationError) as exc:
        service.change_password(old_password="secret1", new_password="secret1", confirm_password="secret1")
    assert exc.value.errors == {"newPassword": "New password must differ from the current one"}

    with pytest.raises(ValidationError) as exc:
        service.change_password(old_password="", new_password="abc", confirm_password="abd")
    assert set(exc.value.errors) == {"oldPassword", "newPassword", "confirmPassword"}


def test_change_password_calls_backend():
    auth = InMemoryAuth()
    message = AuthService(auth, MemoryTokenStore()).change_password(
        old_password="secret1", new_password="secret2", confirm_password="secret2"
    )
    assert message == "Password changed successfully"
    assert auth.password_changes == [("secret1", "secret2")]


def test_forgot_and_reset_password():
    service = AuthService(InMemoryAuth(), MemoryTokenStore())
    with pytest.raises(ValidationError):
        service.forgot_password("nope")
    assert service.forgot_password("asha@example.com") == "Reset link sent to asha@example.com"

    with pytest.raises(ValidationError) as exc:
        service.reset_password(reset_token="", new_password="secret2", confirm_password="other")
    assert set(exc.value.errors) == {"resetToken", "confirmPassword"}
    assert service.reset_password(reset_token="tok", new_password="secret2", confirm_password="secret2")


def test_update_profile_validates_mobile():
    service = AuthService(InMemoryAuth(), MemoryTokenStore())
    with pytest.raises(ValidationError):
        service.update_profile("u1", name="Asha", mobile_number="12", email="asha@example.com")
    user = service.update_profile("u1", name=" Asha ", mobile_number="9876543210", email="asha@example.com")
    assert user.name == "Asha"


def test_unknown_role_falls_back_to_user():
    assert make_user(role="superhero").role == Role.USER
