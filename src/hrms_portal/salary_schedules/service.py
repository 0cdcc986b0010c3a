from __future__ import annotations

from typing import Any, Optional

from ..common.datetime_utils import DateLike, parse_api_date, to_api_date
from ..common.forms import to_float
from ..common.pagination import Page
from ..common.validators import FormValidator
from ..core.constants import DEFAULT_PAGE_SIZE
from ..core.enums import SalaryCategory, SalarySubCategory, enum_values
from .model import SalaryRateSchedule
from .repository import SalaryRateScheduleRepository

RATE_CATEGORIES = (SalaryCategory.CENTRAL.value, SalaryCategory.STATE.value)


def _check_dates(v: FormValidator, effective_from: DateLike, effective_to: DateLike) -> None:
    start = parse_api_date(effective_from)
    end = parse_api_date(effective_to)
    if start and end:
        v.check(end >= start, "effectiveTo", "Effective to date cannot be before effective from date")


class SalaryRateScheduleService:
    def __init__(self, schedules: SalaryRateScheduleRepository):
        self._schedules = schedules

    def create(
        self,
        *,
        category: str,
        sub_category: str,
        rate_per_day: Any,
        effective_from: DateLike,
        effective_to: DateLike = None,
        is_active: bool = True,
    ) -> SalaryRateSchedule:
        v = FormValidator(
            {
                "category": category,
                "subCategory": sub_category,
                "ratePerDay": rate_per_day,
                "effectiveFrom": effective_from,
                "effectiveTo": effective_to,
            }
        )
        v.one_of("category", RATE_CATEGORIES, "Rate schedules only apply to CENTRAL or STATE categories")
        v.one_of("subCategory", enum_values(SalarySubCategory), "Please select a sub category")
        v.number_range("ratePerDay", "Rate per day must be greater than 0", min_value=0, exclusive_min=True)
        v.date_value("effectiveFrom", "Effective from date is required")
        v.date_value("effectiveTo", "Invalid effective to date", optional=True)
        _check_dates(v, effective_from, effective_to)
        v.raise_if_errors()

        payload = {
            "category": category,
            "subCategory": sub_category,
            "ratePerDay": float(rate_per_day),
            "effectiveFrom": to_api_date(effective_from),
            "effectiveTo": to_api_date(effective_to),
            "isActive": bool(is_active),
        }
        return self._schedules.create(payload)

    def update(
        self,
        schedule_id: str,
        *,
        rate_per_day: Any = None,
        effective_from: DateLike = None,
        effective_to: DateLike = None,
        is_active: Optional[bool] = None,
        category: Optional[str] = None,
        sub_category: Optional[str] = None,
    ) -> SalaryRateSchedule:
        """Update rate, dates or the active flag.

        Category and subcategory cannot change once a schedule exists.
        """
        v = FormValidator(
            {"ratePerDay": rate_per_day, "effectiveFrom": effective_from, "effectiveTo": effective_to}
        )
        if category is not None or sub_category is not None:
            current = self._schedules.get(schedule_id)
            v.check(
                category is None or category == current.category.value,
                "category",
                "Category cannot be changed",
            )
            v.check(
                sub_category is None or sub_category == current.sub_category.value,
                "subCategory",
                "Sub category cannot be changed",
            )
        v.number_range("ratePerDay", "Rate per day must be greater than 0", min_value=0, exclusive_min=True, optional=True)
        v.date_value("effectiveFrom", "Invalid effective from date", optional=True)
        v.date_value("effectiveTo", "Invalid effective to date", optional=True)
        _check_dates(v, effective_from, effective_to)
        v.raise_if_errors()

        payload: dict[str, Any] = {}
        if to_float(rate_per_day) is not None:
            payload["ratePerDay"] = float(rate_per_day)
        if effective_from:
            payload["effectiveFrom"] = to_api_date(effective_from)
        if effective_to:
            payload["effectiveTo"] = to_api_date(effective_to)
        if is_active is not None:
            payload["isActive"] = bool(is_active)
        return self._schedules.update(schedule_id, payload)

    def list(
        self,
        *,
        category: Optional[str] = None,
        sub_category: Optional[str] = None,
        is_active: Optional[bool] = None,
        page: int = 1,
        limit: int = DEFAULT_PAGE_SIZE,
    ) -> Page[SalaryRateSchedule]:
        params = {
            "category": category,
            "subCategory": sub_category,
            "isActive": is_active,
            "page": page,
            "limit": limit,
        }
        return self._schedules.list(params)

    def get(self, schedule_id: str) -> SalaryRateSchedule:
        return self._schedules.get(schedule_id)

    def delete(self, schedule_id: str) -> None:
        self._schedules.delete(schedule_id)

    def active_rate(self, category: str, sub_category: str, on: DateLike = None) -> Optional[SalaryRateSchedule]:
        v = FormValidator({"category": category, "subCategory": sub_category})
        v.one_of("category", RATE_CATEGORIES, "Rate schedules only apply to CENTRAL or STATE categories")
        v.one_of("subCategory", enum_values(SalarySubCategory), "Please select a sub category")
        v.raise_if_errors()
        return self._schedules.active_rate(
            {"category": category, "subCategory": sub_category, "date": to_api_date(on)}
        )
