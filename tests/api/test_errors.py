from __future__ import annotations

import pytest

from hrms_portal.api.errors import get_error_message, handle_api_error
from hrms_portal.core.exceptions import ApiNoResponseError, ApiRequestError, ApiResponseError


def test_message_from_payload():
    assert get_error_message(ApiResponseError(400, {"message": "Email already exists"})) == "Email already exists"


def test_first_message_of_a_list():
    error = ApiResponseError(400, {"message": ["mobileNumber must be 10 digits", "email must be an email"]})
    assert get_error_message(error) == "mobileNumber must be 10 digits"


def test_error_field_when_no_message():
    assert get_error_message(ApiResponseError(500, {"error": "Internal Server Error"})) == "Internal Server Error"


def test_status_fallback():
    assert get_error_message(ApiResponseError(502, None)) == "Request failed with status 502"


def test_network_and_setup_errors():
    assert get_error_message(ApiNoResponseError("down")) == "Network error. Please check your internet connection."
    assert get_error_message(ApiRequestError("Invalid URL")) == "Invalid URL"
    assert get_error_message(ApiRequestError("")) == "An unexpected error occurred."


@pytest.mark.parametrize(
    "status, expected",
    [
        (401, "Unauthorized. Please login again."),
        (403, "You don't have permission to access this resource."),
        (404, "The requested resource was not found."),
        (429, "Too many requests. Please try again later."),
    ],
)
def test_status_aware_messages(status, expected):
    assert handle_api_error(ApiResponseError(status, {"message": "ignored"})) == expected


def test_status_aware_falls_back_to_payload_then_generic():
    assert handle_api_error(ApiResponseError(409, {"message": "Company already exists"})) == "Company already exists"
    assert handle_api_error(ApiResponseError(500, {})) == "An error occurred. Please try again."
    assert handle_api_error(ApiNoResponseError()) == "No response from server. Please check your internet connection."
    assert handle_api_error(ApiRequestError("")) == "An unexpected error occurred. Please try again."
