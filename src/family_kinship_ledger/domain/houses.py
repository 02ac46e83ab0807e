"""PolygamousHouse domain model for S.40 estate distribution units.

Under section 40 of the Law of Succession Act an intestate polygamous estate
is first divided between houses, one per wife, weighted by the number of
children in each house. A house records the wife it was founded on, the
members who belong to it and the evidence supporting its recognition.
"""

from dataclasses import dataclass, field
from datetime import UTC, date, datetime
from decimal import Decimal
from uuid import UUID, uuid4

from family_kinship_ledger.domain.value_objects import (
    HouseDissolutionReason,
    HouseEstablishmentType,
)
from family_kinship_ledger.exceptions import FutureDateError, InvalidRecordError


def _utc_now() -> datetime:
    return datetime.now(UTC)


@dataclass
class PolygamousHouse:
    family_id: UUID
    house_name: str
    house_order: int
    original_wife_id: UUID
    established_date: date
    id: UUID = field(default_factory=uuid4)
    house_head_id: UUID | None = None
    member_ids: list[UUID] = field(default_factory=list)
    establishment_type: HouseEstablishmentType = HouseEstablishmentType.CUSTOMARY
    distribution_weight: Decimal = Decimal("1")
    wives_consent_obtained: bool = False
    wives_consent_document_id: str | None = None
    court_recognized: bool = False
    s40_certificate_number: str | None = None
    is_active: bool = True
    dissolution_date: date | None = None
    dissolution_reason: HouseDissolutionReason | None = None
    created_at: datetime = field(default_factory=_utc_now, compare=False)
    updated_at: datetime = field(default_factory=_utc_now, compare=False)

    def __post_init__(self) -> None:
        if not isinstance(self.distribution_weight, Decimal):
            object.__setattr__(
                self, "distribution_weight", Decimal(str(self.distribution_weight))
            )
        if not self.house_name or not self.house_name.strip():
            raise InvalidRecordError("house", "house name is required")
        if self.house_order < 1:
            raise InvalidRecordError(
                "house", "house order must be at least 1", house_order=self.house_order
            )
        if self.established_date > date.today():
            raise FutureDateError("established_date", self.established_date)
        if self.distribution_weight < 0:
            raise InvalidRecordError("house", "distribution weight cannot be negative")
        if self.court_recognized and not self.s40_certificate_number:
            raise InvalidRecordError(
                "house", "a court-recognized house needs an S.40 certificate number"
            )
        if not self.is_active and self.dissolution_date is None:
            raise InvalidRecordError("house", "a dissolved house needs a dissolution date")
        if self.original_wife_id not in self.member_ids:
            self.member_ids.insert(0, self.original_wife_id)

    @property
    def has_documented_consent(self) -> bool:
        return self.wives_consent_obtained and bool(self.wives_consent_document_id)

    @property
    def is_certified(self) -> bool:
        return self.court_recognized and bool(self.s40_certificate_number)

    def referenced_member_ids(self) -> set[UUID]:
        referenced = {self.original_wife_id, *self.member_ids}
        if self.house_head_id is not None:
            referenced.add(self.house_head_id)
        return referenced

    def assign_member(self, member_id: UUID) -> bool:
        if member_id in self.member_ids:
            return False
        self.member_ids.append(member_id)
        self.updated_at = _utc_now()
        return True

    def dissolve(self, dissolution_date: date, reason: HouseDissolutionReason) -> None:
        if not self.is_active:
            raise InvalidRecordError(
                "house", "house is already dissolved", house_id=str(self.id)
            )
        if dissolution_date < self.established_date:
            raise InvalidRecordError(
                "house", "dissolution date precedes establishment date"
            )
        self.is_active = False
        self.dissolution_date = dissolution_date
        self.dissolution_reason = reason
        self.updated_at = _utc_now()


__all__ = ["PolygamousHouse"]
