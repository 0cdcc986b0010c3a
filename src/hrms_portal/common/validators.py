from __future__ import annotations

import math
import re
from datetime import date
from typing import Any, Iterable, Mapping, Optional

from ..core.constants import MONTH_PATTERN
from ..core.exceptions import ValidationError
from .datetime_utils import parse_api_date


def is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return False


class FormValidator:
    """Collects field errors for one form submission.

    Mirrors shallow client-side schemas: every check records at most one
    message per field, and ``raise_if_errors`` reports them all at once.
    """

    def __init__(self, data: Mapping[str, Any]):
        self._data = data
        self.errors: dict[str, str] = {}

    def value(self, field: str) -> Any:
        return self._data.get(field)

    def _fail(self, field: str, message: str) -> None:
        self.errors.setdefault(field, message)

    def required(self, field: str, message: str) -> "FormValidator":
        if is_blank(self._data.get(field)):
            self._fail(field, message)
        return self

    def required_all(self, fields: Mapping[str, str]) -> "FormValidator":
        for field, message in fields.items():
            self.required(field, message)
        return self

    def pattern(self, field: str, regex: str, message: str, *, optional: bool = False) -> "FormValidator":
        value = self._data.get(field)
        if is_blank(value):
            if not optional:
                self._fail(field, message)
            return self
        if not re.match(regex, str(value).strip()):
            self._fail(field, message)
        return self

    def max_length(self, field: str, max_len: int, message: str) -> "FormValidator":
        value = self._data.get(field)
        if value is not None and len(str(value)) > max_len:
            self._fail(field, message)
        return self

    def min_length(self, field: str, min_len: int, message: str) -> "FormValidator":
        value = self._data.get(field)
        if value is None or len(str(value)) < min_len:
            self._fail(field, message)
        return self

    def one_of(self, field: str, allowed: Iterable[str], message: str, *, optional: bool = False) -> "FormValidator":
        value = self._data.get(field)
        if is_blank(value):
            if not optional:
                self._fail(field, message)
            return self
        if str(value) not in set(allowed):
            self._fail(field, message)
        return self

    def number_range(
        self,
        field: str,
        message: str,
        *,
        min_value: Optional[float] = None,
        max_value: Optional[float] = None,
        exclusive_min: bool = False,
        optional: bool = False,
    ) -> "FormValidator":
        value = self._data.get(field)
        if is_blank(value):
            if not optional:
                self._fail(field, message)
            return self
        try:
            number = float(value)
        except (TypeError, ValueError):
            self._fail(field, message)
            return self
        if not math.isfinite(number):
            self._fail(field, message)
            return self
        if min_value is not None and (number <= min_value if exclusive_min else number < min_value):
            self._fail(field, message)
        elif max_value is not None and number > max_value:
            self._fail(field, message)
        return self

    def month(self, field: str, message: str) -> "FormValidator":
        return self.pattern(field, MONTH_PATTERN, message)

    def date_value(self, field: str, message: str, *, optional: bool = False) -> "FormValidator":
        value = self._data.get(field)
        if is_blank(value):
            if not optional:
                self._fail(field, message)
            return self
        if not isinstance(value, date) and parse_api_date(value) is None:
            self._fail(field, message)
        return self

    def check(self, condition: bool, field: str, message: str) -> "FormValidator":
        if not condition:
            self._fail(field, message)
        return self

    def raise_if_errors(self) -> None:
        if self.errors:
            raise ValidationError(errors=self.errors)
