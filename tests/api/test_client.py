from __future__ import annotations

import io
import json as jsonlib
from enum import Enum

import pytest
import requests

from hrms_portal.api.client import ApiClient, ApiConfig, _clean_params, extract_tokens, file_part, unwrap
from hrms_portal.api.tokens import MemoryTokenStore
from hrms_portal.core.exceptions import (
    ApiNoResponseError,
    ApiRequestError,
    ApiResponseError,
    AuthenticationError,
)


class FakeResponse:
    def __init__(self, status_code: int, body=None):
        self.status_code = status_code
        self._body = body
        self.content = b"" if body is None else jsonlib.dumps(body).encode()
        self.text = self.content.decode()

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 400

    def json(self):
        return self._body


class FakeSession:
    """Replays queued responses and records each call."""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.calls: list[dict] = []

    def request(self, method, url, headers=None, **kwargs):
        self.calls.append({"method": method, "url": url, "headers": dict(headers or {}), **kwargs})
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


def make_client(session: FakeSession, tokens: MemoryTokenStore | None = None) -> ApiClient:
    return ApiClient(ApiConfig(base_url="http://backend.test/api/"), tokens or MemoryTokenStore(), session=session)


def test_get_sends_bearer_token_and_returns_envelope():
    session = FakeSession(FakeResponse(200, {"statusCode": 200, "message": "ok", "data": {"id": "e1"}}))
    client = make_client(session, MemoryTokenStore("access-1", "refresh-1"))

    body = client.get("/employees/e1")

    assert unwrap(body) == {"id": "e1"}
    call = session.calls[0]
    assert call["method"] == "GET"
    assert call["url"] == "http://backend.test/api/employees/e1"
    assert call["headers"]["Authorization"] == "Bearer access-1"


def test_no_authorization_header_without_token():
    session = FakeSession(FakeResponse(200, {"data": []}))
    make_client(session).get("/companies")
    assert "Authorization" not in session.calls[0]["headers"]


def test_empty_body_decodes_to_empty_dict():
    session = FakeSession(FakeResponse(204))
    assert make_client(session).delete("/employees/e1") == {}


def test_multipart_sends_data_and_files_instead_of_json():
    session = FakeSession(FakeResponse(201, {"data": {"id": "e1"}}))
    make_client(session).post("/employees", data={"firstName": "Asha"}, files={"photo": ("a.png", b"x", "image/png")})
    call = session.calls[0]
    assert call["data"] == {"firstName": "Asha"}
    assert "photo" in call["files"]
    assert "json" not in call


def test_401_refreshes_tokens_and_retries_once():
    session = FakeSession(
        FakeResponse(401, {"message": "jwt expired"}),
        FakeResponse(200, {"data": {"tokens": {"accessToken": "access-2", "refreshToken": "refresh-2"}}}),
        FakeResponse(200, {"data": {"ok": True}}),
    )
    tokens = MemoryTokenStore("access-1", "refresh-1")

    body = make_client(session, tokens).get("/users/me")

    assert unwrap(body) == {"ok": True}
    assert session.calls[1]["method"] == "POST"
    assert session.calls[1]["url"].endswith("/users/refresh-token/refresh-1")
    assert session.calls[2]["headers"]["Authorization"] == "Bearer access-2"
    assert (tokens.access_token, tokens.refresh_token) == ("access-2", "refresh-2")


class Upload:
    def __init__(self, filename: str, content: bytes):
        self.filename = filename
        self.stream = io.BytesIO(content)
        self.mimetype = "application/vnd.ms-excel"


class ReadingSession(FakeSession):
    """Reads each upload stream the way requests encodes a multipart body."""

    def request(self, method, url, headers=None, **kwargs):
        files = kwargs.get("files") or {}
        kwargs["uploaded"] = {name: part[1].read() for name, part in files.items()}
        return super().request(method, url, headers=headers, **kwargs)


def test_multipart_retry_after_refresh_resends_file_content():
    session = ReadingSession(
        FakeResponse(401, {"message": "jwt expired"}),
        FakeResponse(200, {"data": {"tokens": {"accessToken": "access-2", "refreshToken": "refresh-2"}}}),
        FakeResponse(201, {"data": {"id": "s1"}}),
    )
    upload = Upload("sheet.xlsx", b"sheet-bytes")

    make_client(session, MemoryTokenStore("access-1", "refresh-1")).post(
        "/attendance/upload", data={"companyId": "c1"}, files={"attendanceSheet": file_part(upload)}
    )

    first, retry = session.calls[0], session.calls[2]
    assert first["uploaded"] == {"attendanceSheet": b"sheet-bytes"}
    assert retry["uploaded"] == {"attendanceSheet": b"sheet-bytes"}
    assert retry["headers"]["Authorization"] == "Bearer access-2"


def test_failed_refresh_clears_tokens_and_raises_authentication_error():
    session = FakeSession(
        FakeResponse(401, {"message": "jwt expired"}),
        FakeResponse(401, {"message": "Invalid refresh token"}),
    )
    tokens = MemoryTokenStore("access-1", "refresh-1")

    with pytest.raises(AuthenticationError, match="Invalid refresh token"):
        make_client(session, tokens).get("/users/me")

    assert tokens.access_token is None
    assert tokens.refresh_token is None


def test_401_without_refresh_token_is_a_response_error():
    session = FakeSession(FakeResponse(401, {"message": "Unauthorized"}))
    with pytest.raises(ApiResponseError) as exc:
        make_client(session, MemoryTokenStore("access-1")).get("/users/me")
    assert exc.value.status_code == 401
    assert len(session.calls) == 1


def test_non_ok_status_raises_response_error_with_payload():
    session = FakeSession(FakeResponse(400, {"message": ["name should not be empty"]}))
    with pytest.raises(ApiResponseError) as exc:
        make_client(session).post("/companies", {"name": ""})
    assert exc.value.status_code == 400
    assert exc.value.payload == {"message": ["name should not be empty"]}


def test_connection_error_raises_no_response_error():
    session = FakeSession(requests.ConnectionError("connection refused"))
    with pytest.raises(ApiNoResponseError):
        make_client(session).get("/companies")


def test_timeout_raises_no_response_error():
    session = FakeSession(requests.Timeout("read timed out"))
    with pytest.raises(ApiNoResponseError):
        make_client(session).get("/companies")


def test_invalid_url_raises_request_error():
    session = FakeSession(requests.exceptions.InvalidURL("bad url"))
    with pytest.raises(ApiRequestError):
        make_client(session).get("/companies")


class Status(Enum):
    ACTIVE = "ACTIVE"


def test_clean_params_drops_blanks_and_converts_values():
    params = _clean_params({"page": 1, "searchText": "", "companyId": None, "isActive": True, "status": Status.ACTIVE})
    assert params == {"page": 1, "isActive": "true", "status": "ACTIVE"}


def test_clean_params_empty_is_none():
    assert _clean_params({}) is None


def test_extract_tokens_reads_nested_tokens():
    body = {"data": {"user": {"id": "u1"}, "tokens": {"accessToken": "a", "refreshToken": "r"}}}
    assert extract_tokens(body) == ("a", "r")
    assert extract_tokens({"data": {"user": {}}}) == (None, None)
