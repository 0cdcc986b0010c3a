from __future__ import annotations

from typing import Any, Optional, Protocol

from ..common.pagination import Page
from .model import SalaryRateSchedule


class SalaryRateScheduleRepository(Protocol):
    def create(self, payload: dict) -> SalaryRateSchedule:
        raise NotImplementedError

    def list(self, params: dict[str, Any]) -> Page[SalaryRateSchedule]:
        raise NotImplementedError

    def get(self, schedule_id: str) -> SalaryRateSchedule:
        raise NotImplementedError

    def update(self, schedule_id: str, payload: dict) -> SalaryRateSchedule:
        raise NotImplementedError

    def delete(self, schedule_id: str) -> None:
        raise NotImplementedError

    def active_rate(self, params: dict[str, Any]) -> Optional[SalaryRateSchedule]:
        raise NotImplementedError
