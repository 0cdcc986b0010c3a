from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Mapping, Optional

import requests

from ..core.constants import REFRESH_TOKEN_PATH
from ..core.exceptions import (
    ApiError,
    ApiNoResponseError,
    ApiRequestError,
    ApiResponseError,
    AuthenticationError,
)
from .errors import get_error_message
from .tokens import TokenStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ApiConfig:
    base_url: str
    timeout: float = 20.0


def unwrap(body: Any) -> Any:
    """Return the ``data`` member of a ``{statusCode, message, data}`` envelope."""
    if isinstance(body, dict) and "data" in body:
        return body["data"]
    return body


def extract_tokens(body: Any) -> tuple[Optional[str], Optional[str]]:
    data = unwrap(body) or {}
    tokens = data.get("tokens") if isinstance(data, dict) else None
    if not isinstance(tokens, dict):
        return None, None
    return tokens.get("accessToken"), tokens.get("refreshToken")


def file_part(storage: Any) -> tuple:
    """(filename, stream, mimetype) tuple for a werkzeug FileStorage upload."""
    return (storage.filename, storage.stream, getattr(storage, "mimetype", None) or "application/octet-stream")


def _rewind(files: Optional[Mapping[str, Any]]) -> None:
    """Seek upload streams back to the start; the first send read them to the end."""
    for part in (files or {}).values():
        stream = part[1] if isinstance(part, tuple) and len(part) > 1 else part
        if hasattr(stream, "seek"):
            stream.seek(0)


def _clean_params(params: Optional[Mapping[str, Any]]) -> Optional[dict[str, Any]]:
    if not params:
        return None
    out: dict[str, Any] = {}
    for key, value in params.items():
        if value is None or value == "":
            continue
        if isinstance(value, bool):
            value = "true" if value else "false"
        elif hasattr(value, "value"):
            value = value.value
        out[key] = value
    return out


def _decode(response: requests.Response) -> Any:
    if not response.content:
        return {}
    try:
        return response.json()
    except ValueError:
        return {"message": response.text}


class ApiClient:
    """Thin HTTP wrapper around the backend REST API.

    One instance is shared by all repositories. Tokens are read per request
    from the ``TokenStore`` so a single client serves every browser session.
    """

    def __init__(self, config: ApiConfig, tokens: TokenStore, *, session: Optional[requests.Session] = None):
        self._config = config
        self._tokens = tokens
        self._session = session or requests.Session()

    @property
    def tokens(self) -> TokenStore:
        return self._tokens

    def _url(self, path: str) -> str:
        return f"{self._config.base_url.rstrip('/')}/{path.lstrip('/')}"

    @staticmethod
    def _is_refresh(path: str) -> bool:
        return REFRESH_TOKEN_PATH in path

    def request(
        self,
        method: str,
        path: str,
        *,
        params: Optional[Mapping[str, Any]] = None,
        json: Any = None,
        data: Optional[Mapping[str, Any]] = None,
        files: Optional[Mapping[str, Any]] = None,
        _retried: bool = False,
    ) -> Any:
        headers = {"Accept": "application/json"}
        token = self._tokens.get_access_token()
        if token:
            headers["Authorization"] = f"Bearer {token}"

        kwargs: dict[str, Any] = {"params": _clean_params(params), "timeout": self._config.timeout}
        if files or data is not None:
            # requests builds the multipart boundary header itself
            kwargs["data"] = data
            kwargs["files"] = files
        elif json is not None:
            kwargs["json"] = json

        try:
            response = self._session.request(method, self._url(path), headers=headers, **kwargs)
        except (requests.ConnectionError, requests.Timeout) as e:
            logger.error("Network error on %s %s: %s", method, path, e)
            raise ApiNoResponseError(str(e) or "Network Error") from e
        except requests.RequestException as e:
            logger.error("Could not send %s %s: %s", method, path, e)
            raise ApiRequestError(str(e)) from e

        if response.status_code == 401:
            if self._is_refresh(path):
                self._tokens.clear()
            elif not _retried and self._refresh():
                _rewind(files)
                return self.request(method, path, params=params, json=json, data=data, files=files, _retried=True)

        body = _decode(response)
        if not response.ok:
            error = ApiResponseError(response.status_code, body)
            if response.status_code in (403, 404) or response.status_code >= 500:
                logger.error("%s %s failed (%s): %s", method, path, response.status_code, get_error_message(error))
            raise error
        return body

    def _refresh(self) -> bool:
        refresh_token = self._tokens.get_refresh_token()
        if not refresh_token:
            return False
        try:
            body = self.request("POST", f"{REFRESH_TOKEN_PATH}/{refresh_token}", _retried=True)
        except ApiError as e:
            self._tokens.clear()
            logger.info("Session refresh failed: %s", get_error_message(e))
            raise AuthenticationError(get_error_message(e)) from e

        access_token, new_refresh_token = extract_tokens(body)
        self._tokens.set_tokens(access_token, new_refresh_token)
        logger.info("Access token refreshed")
        return True

    def get(self, path: str, *, params: Optional[Mapping[str, Any]] = None) -> Any:
        return self.request("GET", path, params=params)

    def post(self, path: str, json: Any = None, **kwargs: Any) -> Any:
        return self.request("POST", path, json=json, **kwargs)

    def put(self, path: str, json: Any = None, **kwargs: Any) -> Any:
        return self.request("PUT", path, json=json, **kwargs)

    def patch(self, path: str, json: Any = None, **kwargs: Any) -> Any:
        return self.request("PATCH", path, json=json, **kwargs)

    def delete(self, path: str, json: Any = None, **kwargs: Any) -> Any:
        return self.request("DELETE", path, json=json, **kwargs)
