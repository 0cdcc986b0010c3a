from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from ..common.datetime_utils import parse_api_date
from ..common.forms import to_bool, to_float
from ..core.enums import SalaryCategory, SalarySubCategory


@dataclass(frozen=True)
class SalaryRateSchedule:
    """Per-day wage rate for a CENTRAL/STATE category over a date range."""

    id: str
    category: SalaryCategory
    sub_category: SalarySubCategory
    rate_per_day: float
    effective_from: Optional[date]
    effective_to: Optional[date]
    is_active: bool
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    @property
    def is_ongoing(self) -> bool:
        return self.effective_to is None

    @classmethod
    def from_api(cls, data: dict) -> "SalaryRateSchedule":
        return cls(
            id=str(data.get("id", "")),
            category=SalaryCategory(data.get("category") or SalaryCategory.CENTRAL.value),
            sub_category=SalarySubCategory(data.get("subCategory") or SalarySubCategory.UNSKILLED.value),
            rate_per_day=to_float(data.get("ratePerDay"), 0.0) or 0.0,
            effective_from=parse_api_date(data.get("effectiveFrom")),
            effective_to=parse_api_date(data.get("effectiveTo")),
            is_active=to_bool(data.get("isActive", True)),
            created_at=data.get("createdAt"),
            updated_at=data.get("updatedAt"),
        )
