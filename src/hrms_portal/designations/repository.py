from __future__ import annotations

from typing import Protocol

from .model import Designation


class DesignationRepository(Protocol):
    def list_all(self) -> list[Designation]:
        raise NotImplementedError

    def get_by_id(self, designation_id: str) -> Designation:
        raise NotImplementedError

    def get_by_name(self, name: str) -> Designation:
        raise NotImplementedError

    def create(self, name: str) -> Designation:
        raise NotImplementedError

    def delete_by_id(self, designation_id: str) -> None:
        raise NotImplementedError

    def delete_by_name(self, name: str) -> None:
        raise NotImplementedError
