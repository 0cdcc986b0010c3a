from __future__ import annotations

import re
from datetime import date, datetime
from typing import Optional, Union

DateLike = Union[str, date, datetime, None]


def parse_api_date(value: DateLike) -> Optional[date]:
    """Parse dates as the backend sends them.

    Accepts ``DD-MM-YYYY``, ``YYYY-MM-DD`` and full ISO timestamps; returns
    None for empty or unparseable input.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value).strip()
    if re.match(r"^\d{2}-\d{2}-\d{4}$", text):
        return datetime.strptime(text, "%d-%m-%Y").date()
    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
    except ValueError:
        return None


def to_api_date(value: DateLike) -> Optional[str]:
    """Format a date as YYYY-MM-DD for request payloads."""
    parsed = parse_api_date(value)
    return parsed.strftime("%Y-%m-%d") if parsed else None


def to_ddmmyyyy(value: DateLike) -> Optional[str]:
    parsed = parse_api_date(value)
    return parsed.strftime("%d-%m-%Y") if parsed else None


def month_key(value: date) -> str:
    return value.strftime("%Y-%m")


def month_label(month: str) -> str:
    """'2025-03' -> 'March 2025'. Unknown formats are returned unchanged."""
    try:
        return datetime.strptime(month, "%Y-%m").strftime("%B %Y")
    except (TypeError, ValueError):
        return month or ""


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def timestamp_for_filename(now: Optional[datetime] = None) -> str:
    """ISO timestamp safe for file names: 2025-03-01T10-20-30."""
    now = now or now_local()
    return now.strftime("%Y-%m-%dT%H-%M-%S")
