from __future__ import annotations

from urllib.parse import quote

from ..api.client import ApiClient, unwrap
from .model import Designation
from .repository import DesignationRepository

BASE = "/designations"


class HttpDesignationRepository(DesignationRepository):
    def __init__(self, client: ApiClient):
        self._client = client

    def list_all(self) -> list[Designation]:
        rows = unwrap(self._client.get(BASE)) or []
        return [Designation.from_api(r) for r in rows if isinstance(r, dict)]

    def get_by_id(self, designation_id: str) -> Designation:
        return Designation.from_api(unwrap(self._client.get(f"{BASE}/{designation_id}")) or {})

    def get_by_name(self, name: str) -> Designation:
        return Designation.from_api(unwrap(self._client.get(f"{BASE}/name/{quote(name, safe='')}")) or {})

    def create(self, name: str) -> Designation:
        return Designation.from_api(unwrap(self._client.post(BASE, {"name": name})) or {})

    def delete_by_id(self, designation_id: str) -> None:
        self._client.delete(f"{BASE}/{designation_id}")

    def delete_by_name(self, name: str) -> None:
        self._client.delete(f"{BASE}/name/{quote(name, safe='')}")
