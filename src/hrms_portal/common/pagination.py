from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Callable, Generic, Iterable, Optional, TypeVar

T = TypeVar("T")

_LIST_KEYS = ("data", "items", "records", "results")


def _extract_items(data: Any, key: Optional[str]) -> list:
    if isinstance(data, list):
        return data
    if not isinstance(data, dict):
        return []
    for k in ((key,) if key else ()) + _LIST_KEYS:
        value = data.get(k)
        if isinstance(value, list):
            return value
    return []


@dataclass(frozen=True)
class Page(Generic[T]):
    items: list[T] = field(default_factory=list)
    total: int = 0
    page: int = 1
    limit: int = 10

    @property
    def total_pages(self) -> int:
        if self.limit <= 0:
            return 1
        return max(1, math.ceil(self.total / self.limit))

    @property
    def has_prev(self) -> bool:
        return self.page > 1

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages

    @classmethod
    def from_api(
        cls,
        data: Any,
        factory: Callable[[dict], T],
        *,
        key: Optional[str] = None,
        page: int = 1,
        limit: int = 10,
    ) -> "Page[T]":
        """Build a page from ``[...]`` or ``{<key>: [...], total, page, limit}``.

        List endpoints are not uniform: employees come back under ``data``,
        companies under ``companies``, payroll reports under ``records``.
        """
        raw = _extract_items(data, key)
        items = [factory(item) for item in raw if isinstance(item, dict)]
        meta = data if isinstance(data, dict) else {}
        if isinstance(meta.get("pagination"), dict):
            meta = {**meta, **meta["pagination"]}
        total = meta.get("total", meta.get("totalCount", len(items)))
        try:
            total = int(total)
        except (TypeError, ValueError):
            total = len(items)
        return cls(
            items=items,
            total=total,
            page=int(meta.get("page") or page),
            limit=int(meta.get("limit") or limit),
        )


def page_numbers(page: Page, window: int = 2) -> Iterable[int]:
    start = max(1, page.page - window)
    end = min(page.total_pages, page.page + window)
    return range(start, end + 1)
