from __future__ import annotations

from typing import Any, Optional

import pytest

from hrms_portal.common.pagination import Page
from hrms_portal.core.exceptions import ValidationError
from hrms_portal.salary_schedules.model import SalaryRateSchedule
from hrms_portal.salary_schedules.service import SalaryRateScheduleService


class InMemorySchedules:
    def __init__(self):
        self.created: list[dict] = []
        self.updated: list[tuple[str, dict]] = []
        self.lookups: list[dict] = []
        self.existing = SalaryRateSchedule.from_api(
            {"id": "s1", "category": "CENTRAL", "subCategory": "SKILLED", "ratePerDay": 700, "effectiveFrom": "2024-04-01"}
        )

    def create(self, payload: dict) -> SalaryRateSchedule:
        self.created.append(payload)
        return SalaryRateSchedule.from_api({"id": "s2", **payload})

    def list(self, params: dict[str, Any]) -> Page[SalaryRateSchedule]:
        return Page(items=[self.existing], total=1)

    def get(self, schedule_id: str) -> SalaryRateSchedule:
        return self.existing

    def update(self, schedule_id: str, payload: dict) -> SalaryRateSchedule:
        self.updated.append((schedule_id, payload))
        return self.existing

    def delete(self, schedule_id: str) -> None:
        pass

    def active_rate(self, params: dict[str, Any]) -> Optional[SalaryRateSchedule]:
        self.lookups.append(params)
        return self.existing


def test_create_builds_payload():
    repo = InMemorySchedules()
    schedule = SalaryRateScheduleService(repo).create(
        category="STATE", sub_category="UNSKILLED", rate_per_day="512.5", effective_from="01-04-2024"
    )
    assert repo.created[0] == {
        "category": "STATE",
        "subCategory": "UNSKILLED",
        "ratePerDay": 512.5,
        "effectiveFrom": "2024-04-01",
        "effectiveTo": None,
        "isActive": True,
    }
    assert schedule.is_ongoing


def test_create_rejects_specialized_and_bad_dates():
    with pytest.raises(ValidationError) as exc:
        SalaryRateScheduleService(InMemorySchedules()).create(
            category="SPECIALIZED",
            sub_category="",
            rate_per_day="0",
            effective_from="2024-04-01",
            effective_to="2024-03-01",
        )
    assert set(exc.value.errors) == {"category", "subCategory", "ratePerDay", "effectiveTo"}


def test_update_sends_only_given_values():
    repo = InMemorySchedules()
    SalaryRateScheduleService(repo).update("s1", rate_per_day="720", is_active=False)
    assert repo.updated == [("s1", {"ratePerDay": 720.0, "isActive": False})]


def test_update_cannot_change_category():
    with pytest.raises(ValidationError) as exc:
        SalaryRateScheduleService(InMemorySchedules()).update("s1", category="STATE", sub_category="SKILLED")
    assert exc.value.errors == {"category": "Category cannot be changed"}


def test_active_rate_lookup():
    repo = InMemorySchedules()
    rate = SalaryRateScheduleService(repo).active_rate("CENTRAL", "SKILLED", "2024-05-10")
    assert rate.rate_per_day == 700
    assert repo.lookups == [{"category": "CENTRAL", "subCategory": "SKILLED", "date": "2024-05-10"}]
    with pytest.raises(ValidationError):
        SalaryRateScheduleService(repo).active_rate("SPECIALIZED", "SKILLED")


@pytest.mark.parametrize("rate", ["inf", "nan"])
def test_create_rejects_non_finite_rate(rate):
    repo = InMemorySchedules()
    with pytest.raises(ValidationError) as exc:
        SalaryRateScheduleService(repo).create(
            category="CENTRAL", sub_category="SKILLED", rate_per_day=rate, effective_from="2024-04-01"
        )
    assert set(exc.value.errors) == {"ratePerDay"}
    assert repo.created == []
