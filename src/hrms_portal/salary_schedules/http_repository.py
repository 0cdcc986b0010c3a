from __future__ import annotations

from typing import Any, Optional

from ..api.client import ApiClient, unwrap
from ..common.pagination import Page
from .model import SalaryRateSchedule
from .repository import SalaryRateScheduleRepository

BASE = "/salary-rate-schedule"


class HttpSalaryRateScheduleRepository(SalaryRateScheduleRepository):
    def __init__(self, client: ApiClient):
        self._client = client

    def create(self, payload: dict) -> SalaryRateSchedule:
        return SalaryRateSchedule.from_api(unwrap(self._client.post(BASE, payload)) or {})

    def list(self, params: dict[str, Any]) -> Page[SalaryRateSchedule]:
        # records are nested: data.data
        data = unwrap(self._client.get(BASE, params=params))
        return Page.from_api(
            data,
            SalaryRateSchedule.from_api,
            page=int(params.get("page") or 1),
            limit=int(params.get("limit") or 10),
        )

    def get(self, schedule_id: str) -> SalaryRateSchedule:
        return SalaryRateSchedule.from_api(unwrap(self._client.get(f"{BASE}/{schedule_id}")) or {})

    def update(self, schedule_id: str, payload: dict) -> SalaryRateSchedule:
        return SalaryRateSchedule.from_api(unwrap(self._client.put(f"{BASE}/{schedule_id}", payload)) or {})

    def delete(self, schedule_id: str) -> None:
        self._client.delete(f"{BASE}/{schedule_id}")

    def active_rate(self, params: dict[str, Any]) -> Optional[SalaryRateSchedule]:
        data = unwrap(self._client.get(f"{BASE}/active", params=params))
        return SalaryRateSchedule.from_api(data) if isinstance(data, dict) and data else None
