from __future__ import annotations

from io import BytesIO
from typing import Any, Optional

from flask import flash, request, send_file

from ..api.errors import get_error_message, handle_api_error
from ..core.constants import DEFAULT_PAGE_SIZE, XLSX_MIMETYPE
from ..core.exceptions import ApiError, ValidationError
from .forms import to_int


def error_message(error: Exception, *, status_aware: bool = False) -> str:
    if isinstance(error, ApiError):
        return handle_api_error(error) if status_aware else get_error_message(error)
    return str(error) or "An unexpected error occurred."


def flash_error(error: Exception, category: str = "danger", *, status_aware: bool = False) -> None:
    flash(error_message(error, status_aware=status_aware), category)


def form_errors(error: Exception) -> dict[str, str]:
    return dict(error.errors) if isinstance(error, ValidationError) else {}


def page_args(default_limit: int = DEFAULT_PAGE_SIZE) -> tuple[int, int]:
    page = max(to_int(request.args.get("page"), 1) or 1, 1)
    limit = max(to_int(request.args.get("limit"), default_limit) or default_limit, 1)
    return page, limit


def send_xlsx(content: bytes, filename: str):
    return send_file(BytesIO(content), mimetype=XLSX_MIMETYPE, as_attachment=True, download_name=filename)


def send_pdf(content: bytes, filename: str, *, inline: bool = False):
    return send_file(
        BytesIO(content),
        mimetype="application/pdf",
        as_attachment=not inline,
        download_name=filename,
    )


def uploaded_file(field: str) -> Optional[Any]:
    storage = request.files.get(field)
    if storage is None or not storage.filename:
        return None
    return storage
