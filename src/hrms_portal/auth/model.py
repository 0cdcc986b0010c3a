from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from ..core.enums import Role


def _role(value: Any) -> Role:
    try:
        return Role(str(value).upper())
    except ValueError:
        return Role.USER


@dataclass(frozen=True)
class User:
    """Portal account as returned by ``/users/me``."""

    user_id: str
    name: str
    email: str
    mobile_number: str
    role: Role
    department_id: Optional[str] = None
    avatar: Optional[str] = None
    created_at: Optional[str] = None

    @classmethod
    def from_api(cls, data: dict) -> "User":
        return cls(
            user_id=str(data.get("id", "")),
            name=data.get("name") or "",
            email=data.get("email") or "",
            mobile_number=data.get("mobileNumber") or "",
            role=_role(data.get("role")),
            department_id=data.get("departmentId"),
            avatar=data.get("avatar"),
            created_at=data.get("createdAt"),
        )


@dataclass(frozen=True)
class AuthResult:
    user: User
    access_token: Optional[str]
    refresh_token: Optional[str]


@dataclass(frozen=True)
class SessionUser:
    """What we store into Flask session after login."""

    user_id: str
    name: str
    email: str
    role: Role
    department_id: Optional[str]
