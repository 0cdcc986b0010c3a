from __future__ import annotations

from typing import Optional, Protocol

from .model import AuthResult, User


class AuthRepository(Protocol):
    def login(self, *, email: str, password: str) -> AuthResult:
        raise NotImplementedError

    def register(self, payload: dict) -> AuthResult:
        raise NotImplementedError

    def logout(self, *, refresh_token: str) -> None:
        raise NotImplementedError

    def current_user(self) -> User:
        raise NotImplementedError

    def refresh(self, *, refresh_token: str) -> AuthResult:
        raise NotImplementedError

    def change_password(self, *, old_password: str, new_password: str) -> Optional[str]:
        raise NotImplementedError

    def forgot_password(self, *, email: str) -> Optional[str]:
        raise NotImplementedError

    def reset_password(self, *, reset_token: str, new_password: str) -> Optional[str]:
        raise NotImplementedError

    def update_user(self, user_id: str, payload: dict) -> User:
        raise NotImplementedError
