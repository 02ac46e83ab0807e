"""Adoption records; a recorded adoption also yields a legal PARENT edge."""

from dataclasses import dataclass, field
from datetime import UTC, date, datetime
from uuid import UUID, uuid4

from family_kinship_ledger.domain.value_objects import (
    AdoptionStatus,
    AdoptionType,
    LawSection,
    ParentalConsentStatus,
)
from family_kinship_ledger.exceptions import (
    FutureDateError,
    InvalidRecordError,
    SelfRelationshipError,
)


def _utc_now() -> datetime:
    return datetime.now(UTC)


@dataclass
class AdoptionRecord:
    family_id: UUID
    adoptee_id: UUID
    adoptive_parent_id: UUID
    adoption_type: AdoptionType
    application_date: date
    id: UUID = field(default_factory=uuid4)
    adoption_status: AdoptionStatus = AdoptionStatus.PENDING
    finalization_date: date | None = None
    court_order_number: str | None = None
    court_station: str | None = None
    legal_basis: list[LawSection] = field(default_factory=list)
    parental_consent_status: ParentalConsentStatus = ParentalConsentStatus.UNKNOWN
    consent_documents: list[str] = field(default_factory=list)
    created_at: datetime = field(default_factory=_utc_now, compare=False)

    def __post_init__(self) -> None:
        if self.adoptee_id == self.adoptive_parent_id:
            raise SelfRelationshipError(self.adoptee_id)
        if self.application_date > date.today():
            raise FutureDateError("application_date", self.application_date)
        if (
            self.finalization_date is not None
            and self.finalization_date < self.application_date
        ):
            raise InvalidRecordError(
                "adoption",
                "finalization date precedes application date",
                adoption_id=str(self.id),
            )
        if self.adoption_status is AdoptionStatus.FINALIZED and self.finalization_date is None:
            raise InvalidRecordError(
                "adoption",
                "a finalized adoption requires a finalization date",
                adoption_id=str(self.id),
            )

    @property
    def is_finalized(self) -> bool:
        return self.adoption_status is AdoptionStatus.FINALIZED

    @property
    def has_court_order(self) -> bool:
        return bool(self.court_order_number)

    def involves(self, member_id: UUID) -> bool:
        return member_id in (self.adoptee_id, self.adoptive_parent_id)


__all__ = ["AdoptionRecord"]
