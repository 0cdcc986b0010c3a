from __future__ import annotations

import math
from typing import Any, Iterable, Mapping, Optional

_TRUE_VALUES = {"1", "true", "on", "yes", "y"}


def clean_form(form: Mapping[str, Any], fields: Iterable[str]) -> dict[str, str]:
    """Pick ``fields`` from a submitted form, stripping whitespace."""
    out: dict[str, str] = {}
    for field in fields:
        value = form.get(field)
        out[field] = value.strip() if isinstance(value, str) else ("" if value is None else str(value))
    return out


def to_int(value: Any, default: Optional[int] = None) -> Optional[int]:
    if value is None or (isinstance(value, str) and not value.strip()):
        return default
    try:
        return int(float(value))
    except (TypeError, ValueError, OverflowError):
        return default


def to_float(value: Any, default: Optional[float] = None) -> Optional[float]:
    if value is None or (isinstance(value, str) and not value.strip()):
        return default
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    return number if math.isfinite(number) else default


def to_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return str(value or "").strip().lower() in _TRUE_VALUES


def drop_empty(data: Mapping[str, Any]) -> dict[str, Any]:
    """Remove None and blank-string entries (partial PATCH payloads)."""
    return {k: v for k, v in data.items() if v is not None and not (isinstance(v, str) and not v.strip())}
