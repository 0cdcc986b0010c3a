from __future__ import annotations

import logging
from typing import Optional

from ..api.errors import get_error_message
from ..api.tokens import TokenStore
from ..common.forms import drop_empty
from ..common.validators import FormValidator
from ..core.constants import EMAIL_PATTERN, MIN_PASSWORD_LENGTH, MOBILE_NUMBER_PATTERN
from ..core.enums import Role, enum_values
from ..core.exceptions import ApiError, ApiResponseError, AuthenticationError
from .model import AuthResult, SessionUser, User
from .repository import AuthRepository

logger = logging.getLogger(__name__)


class AuthService:
    """Use cases: sign in/out, registration and password management."""

    def __init__(self, auth: AuthRepository, tokens: TokenStore):
        self._auth = auth
        self._tokens = tokens

    def _start_session(self, result: AuthResult) -> SessionUser:
        self._tokens.set_tokens(result.access_token, result.refresh_token)
        user = result.user
        return SessionUser(
            user_id=user.user_id,
            name=user.name,
            email=user.email,
            role=user.role,
            department_id=user.department_id,
        )

    def login(self, email: str, password: str) -> SessionUser:
        v = FormValidator({"email": email, "password": password})
        v.pattern("email", EMAIL_PATTERN, "Please enter a valid email address")
        v.required("password", "Password is required")
        v.raise_if_errors()

        try:
            result = self._auth.login(email=email.strip(), password=password)
        except ApiResponseError as e:
            if e.status_code in (400, 401, 404):
                raise AuthenticationError(get_error_message(e)) from e
            raise
        return self._start_session(result)

    def signup(
        self,
        *,
        name: str,
        mobile_number: str,
        email: str,
        password: str,
        department_id: str,
        role: Optional[str] = None,
    ) -> SessionUser:
        data = {
            "name": name,
            "mobileNumber": mobile_number,
            "email": email,
            "password": password,
            "departmentId": department_id,
            "role": role,
        }
        v = FormValidator(data)
        v.required("name", "Name is required")
        v.pattern("mobileNumber", MOBILE_NUMBER_PATTERN, "Invalid mobile number")
        v.pattern("email", EMAIL_PATTERN, "Please enter a valid email address")
        v.min_length("password", MIN_PASSWORD_LENGTH, f"Password must be at least {MIN_PASSWORD_LENGTH} characters")
        v.required("departmentId", "Department is required")
        v.one_of("role", enum_values(Role), "Invalid role", optional=True)
        v.raise_if_errors()

        payload = drop_empty({k: (val.strip() if isinstance(val, str) and k != "password" else val) for k, val in data.items()})
        return self._start_session(self._auth.register(payload))

    def logout(self) -> None:
        refresh_token = self._tokens.get_refresh_token()
        try:
            if refresh_token:
                self._auth.logout(refresh_token=refresh_token)
        except ApiError as e:
            # the local session is dropped regardless
            logger.warning("Logout call failed: %s", get_error_message(e))
        finally:
            self._tokens.clear()

    def current_user(self) -> User:
        return self._auth.current_user()

    def is_authenticated(self) -> bool:
        return bool(self._tokens.get_access_token())

    def change_password(self, *, old_password: str, new_password: str, confirm_password: str) -> Optional[str]:
        v = FormValidator({"oldPassword": old_password, "newPassword": new_password})
        v.required("oldPassword", "Current password is required")
        v.min_length("newPassword", MIN_PASSWORD_LENGTH, f"Password must be at least {MIN_PASSWORD_LENGTH} characters")
        v.check(new_password == confirm_password, "confirmPassword", "Passwords do not match")
        v.check(not old_password or new_password != old_password, "newPassword", "New password must differ from the current one")
        v.raise_if_errors()
        return self._auth.change_password(old_password=old_password, new_password=new_password)

    def forgot_password(self, email: str) -> Optional[str]:
        v = FormValidator({"email": email})
        v.pattern("email", EMAIL_PATTERN, "Please enter a valid email address")
        v.raise_if_errors()
        return self._auth.forgot_password(email=email.strip())

    def reset_password(self, *, reset_token: str, new_password: str, confirm_password: str) -> Optional[str]:
        v = FormValidator({"resetToken": reset_token, "newPassword": new_password})
        v.required("resetToken", "Reset token is missing or invalid")
        v.min_length("newPassword", MIN_PASSWORD_LENGTH, f"Password must be at least {MIN_PASSWORD_LENGTH} characters")
        v.check(new_password == confirm_password, "confirmPassword", "Passwords do not match")
        v.raise_if_errors()
        return self._auth.reset_password(reset_token=reset_token.strip(), new_password=new_password)

    def update_profile(self, user_id: str, *, name: str, mobile_number: str, email: str) -> User:
        data = {"name": name, "mobileNumber": mobile_number, "email": email}
        v = FormValidator(data)
        v.required("name", "Name is required")
        v.pattern("mobileNumber", MOBILE_NUMBER_PATTERN, "Invalid mobile number")
        v.pattern("email", EMAIL_PATTERN, "Please enter a valid email address")
        v.raise_if_errors()
        return self._auth.update_user(user_id, {k: val.strip() for k, val in data.items()})
