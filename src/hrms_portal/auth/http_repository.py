from __future__ import annotations

from typing import Optional

from ..api.client import ApiClient, extract_tokens, unwrap
from .model import AuthResult, User
from .repository import AuthRepository

AUTH_ENDPOINTS = {
    "LOGIN": "/users/login",
    "SIGNUP": "/users/register",
    "LOGOUT": "/users/logout",
    "CURRENT_USER": "/users/me",
    "REFRESH_TOKEN": "/users/refresh-token",
    "CHANGE_PASSWORD": "/users/change-password",
    "FORGOT_PASSWORD": "/users/forgot-password",
    "RESET_PASSWORD": "/users/reset-password",
    "UPDATE_USER": "/users/update",
}


def _auth_result(body) -> AuthResult:
    data = unwrap(body) or {}
    access_token, refresh_token = extract_tokens(body)
    return AuthResult(
        user=User.from_api(data.get("user") or {}),
        access_token=access_token,
        refresh_token=refresh_token,
    )


class HttpAuthRepository(AuthRepository):
    def __init__(self, client: ApiClient):
        self._client = client

    def login(self, *, email: str, password: str) -> AuthResult:
        body = self._client.post(AUTH_ENDPOINTS["LOGIN"], {"email": email, "password": password})
        return _auth_result(body)

    def register(self, payload: dict) -> AuthResult:
        return _auth_result(self._client.post(AUTH_ENDPOINTS["SIGNUP"], payload))

    def logout(self, *, refresh_token: str) -> None:
        self._client.post(AUTH_ENDPOINTS["LOGOUT"], {"refreshToken": refresh_token})

    def current_user(self) -> User:
        return User.from_api(unwrap(self._client.get(AUTH_ENDPOINTS["CURRENT_USER"])) or {})

    def refresh(self, *, refresh_token: str) -> AuthResult:
        return _auth_result(self._client.post(f"{AUTH_ENDPOINTS['REFRESH_TOKEN']}/{refresh_token}"))

    def change_password(self, *, old_password: str, new_password: str) -> Optional[str]:
        body = self._client.put(
            AUTH_ENDPOINTS["CHANGE_PASSWORD"],
            {"oldPassword": old_password, "newPassword": new_password},
        )
        return body.get("message") if isinstance(body, dict) else None

    def forgot_password(self, *, email: str) -> Optional[str]:
        body = self._client.post(AUTH_ENDPOINTS["FORGOT_PASSWORD"], {"email": email})
        return body.get("message") if isinstance(body, dict) else None

    def reset_password(self, *, reset_token: str, new_password: str) -> Optional[str]:
        body = self._client.put(
            AUTH_ENDPOINTS["RESET_PASSWORD"],
            {"resetToken": reset_token, "newPassword": new_password},
        )
        return body.get("message") if isinstance(body, dict) else None

    def update_user(self, user_id: str, payload: dict) -> User:
        body = self._client.put(f"{AUTH_ENDPOINTS['UPDATE_USER']}/{user_id}", payload)
        return User.from_api(unwrap(body) or {})
