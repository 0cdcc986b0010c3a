from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Designation:
    id: str
    name: str

    @classmethod
    def from_api(cls, data: dict) -> "Designation":
        return cls(id=str(data.get("id", "")), name=data.get("name") or "")
