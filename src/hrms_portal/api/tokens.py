from __future__ import annotations

from typing import Optional, Protocol

from flask import has_request_context, session

ACCESS_TOKEN_KEY = "access_token"
REFRESH_TOKEN_KEY = "refresh_token"


class TokenStore(Protocol):
    def get_access_token(self) -> Optional[str]:
        raise NotImplementedError

    def get_refresh_token(self) -> Optional[str]:
        raise NotImplementedError

    def set_tokens(self, access_token: Optional[str] = None, refresh_token: Optional[str] = None) -> None:
        raise NotImplementedError

    def clear(self) -> None:
        raise NotImplementedError


class SessionTokenStore(TokenStore):
    """Keeps backend tokens in the signed Flask session cookie.

    Outside a request context there is no session, so reads return None.
    """

    def get_access_token(self) -> Optional[str]:
        return session.get(ACCESS_TOKEN_KEY) if _has_session() else None

    def get_refresh_token(self) -> Optional[str]:
        return session.get(REFRESH_TOKEN_KEY) if _has_session() else None

    def set_tokens(self, access_token: Optional[str] = None, refresh_token: Optional[str] = None) -> None:
        if not _has_session():
            return
        if access_token:
            session[ACCESS_TOKEN_KEY] = access_token
        if refresh_token:
            session[REFRESH_TOKEN_KEY] = refresh_token

    def clear(self) -> None:
        if not _has_session():
            return
        session.pop(ACCESS_TOKEN_KEY, None)
        session.pop(REFRESH_TOKEN_KEY, None)


class MemoryTokenStore(TokenStore):
    def __init__(self, access_token: Optional[str] = None, refresh_token: Optional[str] = None):
        self.access_token = access_token
        self.refresh_token = refresh_token

    def get_access_token(self) -> Optional[str]:
        return self.access_token

    def get_refresh_token(self) -> Optional[str]:
        return self.refresh_token

    def set_tokens(self, access_token: Optional[str] = None, refresh_token: Optional[str] = None) -> None:
        if access_token:
            self.access_token = access_token
        if refresh_token:
            self.refresh_token = refresh_token

    def clear(self) -> None:
        self.access_token = None
        self.refresh_token = None


def _has_session() -> bool:
    return has_request_context()
