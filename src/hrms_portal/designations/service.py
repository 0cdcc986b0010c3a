from __future__ import annotations

from ..common.validators import FormValidator
from ..core.constants import MAX_DESIGNATION_NAME_LENGTH
from .model import Designation
from .repository import DesignationRepository


class DesignationService:
    def __init__(self, designations: DesignationRepository):
        self._designations = designations

    def list_all(self) -> list[Designation]:
        return sorted(self._designations.list_all(), key=lambda d: d.name.lower())

    def get(self, designation_id: str) -> Designation:
        return self._designations.get_by_id(designation_id)

    def find_by_name(self, name: str) -> Designation:
        return self._designations.get_by_name(name.strip())

    def create(self, name: str) -> Designation:
        name = (name or "").strip()
        v = FormValidator({"name": name})
        v.required("name", "Designation name is required")
        v.max_length("name", MAX_DESIGNATION_NAME_LENGTH, f"Designation name must be at most {MAX_DESIGNATION_NAME_LENGTH} characters")
        v.raise_if_errors()
        return self._designations.create(name)

    def delete(self, designation_id: str) -> None:
        self._designations.delete_by_id(designation_id)

    def delete_by_name(self, name: str) -> None:
        self._designations.delete_by_name(name.strip())
