from __future__ import annotations

from typing import Any

from ..core.exceptions import ApiNoResponseError, ApiResponseError

UNEXPECTED = "An unexpected error occurred."


def _payload_message(payload: Any) -> Any:
    if not isinstance(payload, dict):
        return None
    message = payload.get("message")
    if isinstance(message, list):
        return message[0] if message else None
    return message


def get_error_message(error: BaseException) -> str:
    """User-facing message for any failure raised while calling the backend."""
    if isinstance(error, ApiResponseError):
        message = _payload_message(error.payload)
        if message:
            return str(message)
        if isinstance(error.payload, dict) and error.payload.get("error"):
            return str(error.payload["error"])
        return f"Request failed with status {error.status_code}"
    if isinstance(error, ApiNoResponseError):
        return "Network error. Please check your internet connection."
    return str(error) or UNEXPECTED


_STATUS_MESSAGES = {
    401: "Unauthorized. Please login again.",
    403: "You don't have permission to access this resource.",
    404: "The requested resource was not found.",
    429: "Too many requests. Please try again later.",
}


def handle_api_error(error: BaseException) -> str:
    """Status-aware variant used for company, master-data and report calls."""
    if isinstance(error, ApiResponseError):
        if error.status_code in _STATUS_MESSAGES:
            return _STATUS_MESSAGES[error.status_code]
        message = _payload_message(error.payload)
        return str(message) if message else "An error occurred. Please try again."
    if isinstance(error, ApiNoResponseError):
        return "No response from server. Please check your internet connection."
    return str(error) or "An unexpected error occurred. Please try again."
