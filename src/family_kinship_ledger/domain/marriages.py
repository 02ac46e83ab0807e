"""Marriage domain model: an undirected union between two family members."""

from dataclasses import dataclass, field
from datetime import UTC, date, datetime
from uuid import UUID, uuid4

from family_kinship_ledger.domain.value_objects import (
    MarriageEndReason,
    MarriageStatus,
    MarriageType,
)
from family_kinship_ledger.exceptions import InvalidRecordError, SelfMarriageError


def _utc_now() -> datetime:
    return datetime.now(UTC)


@dataclass
class Marriage:
    family_id: UUID
    spouse1_id: UUID
    spouse2_id: UUID
    marriage_type: MarriageType
    start_date: date
    id: UUID = field(default_factory=uuid4)
    status: MarriageStatus = MarriageStatus.MARRIED
    end_date: date | None = None
    end_reason: MarriageEndReason | None = None
    registration_number: str | None = None
    s40_certificate_number: str | None = None
    bride_price_paid: bool = False
    witnesses: list[str] = field(default_factory=list)
    created_at: datetime = field(default_factory=_utc_now, compare=False)
    updated_at: datetime = field(default_factory=_utc_now, compare=False)

    def __post_init__(self) -> None:
        if self.spouse1_id == self.spouse2_id:
            raise SelfMarriageError(self.spouse1_id)
        if self.status is MarriageStatus.MARRIED:
            if self.end_date is not None:
                raise InvalidRecordError(
                    "marriage",
                    "an active marriage cannot have an end date",
                    marriage_id=str(self.id),
                )
        elif self.end_date is None:
            raise InvalidRecordError(
                "marriage",
                f"a {self.status.value} marriage requires an end date",
                marriage_id=str(self.id),
            )
        if self.end_date is not None and self.end_date < self.start_date:
            raise InvalidRecordError(
                "marriage",
                "end date precedes start date",
                marriage_id=str(self.id),
            )

    @property
    def is_active(self) -> bool:
        return self.status is MarriageStatus.MARRIED

    @property
    def spouse_ids(self) -> frozenset[UUID]:
        return frozenset((self.spouse1_id, self.spouse2_id))

    def involves(self, member_id: UUID) -> bool:
        return member_id in (self.spouse1_id, self.spouse2_id)

    def other_spouse(self, member_id: UUID) -> UUID:
        if member_id == self.spouse1_id:
            return self.spouse2_id
        if member_id == self.spouse2_id:
            return self.spouse1_id
        raise ValueError(f"Member {member_id} is not a spouse in marriage {self.id}")

    def is_active_on(self, as_of_date: date) -> bool:
        if self.start_date > as_of_date:
            return False
        if self.end_date is not None and as_of_date >= self.end_date:
            return False
        return True

    def end(
        self,
        status: MarriageStatus,
        end_date: date,
        reason: MarriageEndReason | None = None,
    ) -> None:
        if not self.is_active:
            raise InvalidRecordError(
                "marriage", "marriage has already ended", marriage_id=str(self.id)
            )
        if status is MarriageStatus.MARRIED:
            raise InvalidRecordError(
                "marriage", "an ended marriage needs a terminal status"
            )
        if end_date < self.start_date:
            raise InvalidRecordError(
                "marriage", "end date precedes start date", marriage_id=str(self.id)
            )
        self.status = status
        self.end_date = end_date
        self.end_reason = reason
        self.updated_at = _utc_now()

    def advisories(self) -> list[str]:
        """Soft documentation gaps that do not block registration."""
        notes: list[str] = []
        if self.marriage_type is MarriageType.CUSTOMARY and not self.bride_price_paid:
            notes.append("customary marriage has no bride price documented")
        if self.marriage_type.is_registrable and not self.registration_number:
            notes.append(
                f"{self.marriage_type.value} marriage has no registration number"
            )
        return notes


__all__ = ["Marriage"]
