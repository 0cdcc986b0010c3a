from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Department:
    id: str
    name: str

    @classmethod
    def from_api(cls, data: dict) -> "Department":
        return cls(id=str(data.get("id", "")), name=data.get("name") or "")
