from abc import ABC, abstractmethod
from collections.abc import Iterable
from uuid import UUID

from family_kinship_ledger.domain.family import Family


class FamilyRepository(ABC):
    @abstractmethod
    def add(self, family: Family) -> None:
        pass

    @abstractmethod
    def get(self, family_id: UUID) -> Family | None:
        pass

    @abstractmethod
    def list_all(self) -> Iterable[Family]:
        pass

    @abstractmethod
    def list_active(self) -> Iterable[Family]:
        pass

    @abstractmethod
    def update(self, family: Family, expected_version: int) -> None:
        """Persist family if the stored version still equals expected_version."""
        pass

    @abstractmethod
    def delete(self, family_id: UUID) -> None:
        pass
