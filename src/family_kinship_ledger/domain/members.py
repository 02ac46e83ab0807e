"""FamilyMember: a person node in a family's kinship graph."""

from dataclasses import dataclass, field, fields, replace
from datetime import UTC, date, datetime
from typing import Any
from uuid import UUID, uuid4

from family_kinship_ledger.domain.value_objects import (
    Gender,
    PersonName,
    VerificationStatus,
    VitalStatus,
    age_on,
)
from family_kinship_ledger.exceptions import FutureDateError, InvalidRecordError


def _utc_now() -> datetime:
    return datetime.now(UTC)


@dataclass
class FamilyMember:
    family_id: UUID
    name: PersonName
    gender: Gender
    id: UUID = field(default_factory=uuid4)
    date_of_birth: date | None = None
    date_of_birth_estimated: bool = False
    vital_status: VitalStatus = VitalStatus.ALIVE
    date_of_death: date | None = None
    has_disability: bool = False
    is_mentally_incapacitated: bool = False
    national_id: str | None = None
    verification_status: VerificationStatus = VerificationStatus.UNVERIFIED
    created_at: datetime = field(default_factory=_utc_now, compare=False)
    updated_at: datetime = field(default_factory=_utc_now, compare=False)

    def __post_init__(self) -> None:
        today = date.today()
        if self.date_of_birth is not None and self.date_of_birth > today:
            raise FutureDateError("date_of_birth", self.date_of_birth)
        if self.vital_status is VitalStatus.DECEASED:
            if self.date_of_death is None:
                raise InvalidRecordError(
                    "member",
                    "date of death is required for a deceased member",
                    member_id=str(self.id),
                )
        elif self.date_of_death is not None:
            raise InvalidRecordError(
                "member",
                "only deceased members carry a date of death",
                member_id=str(self.id),
            )
        if self.date_of_death is not None:
            if self.date_of_death > today:
                raise FutureDateError("date_of_death", self.date_of_death)
            if self.date_of_birth is not None and self.date_of_death < self.date_of_birth:
                raise InvalidRecordError(
                    "member",
                    "date of death precedes date of birth",
                    member_id=str(self.id),
                )

    @property
    def is_alive(self) -> bool:
        return self.vital_status is VitalStatus.ALIVE

    @property
    def is_deceased(self) -> bool:
        return self.vital_status is VitalStatus.DECEASED

    @property
    def is_living(self) -> bool:
        """Alive or missing; a missing member is presumed living."""
        return not self.is_deceased

    def age(self, as_of: date | None = None) -> int | None:
        if self.date_of_birth is None:
            return None
        on_date = as_of or date.today()
        if self.date_of_death is not None and self.date_of_death < on_date:
            on_date = self.date_of_death
        return age_on(self.date_of_birth, on_date)

    def is_minor(self, adult_age: int = 18, as_of: date | None = None) -> bool:
        age = self.age(as_of)
        return age is not None and age < adult_age

    def is_elder(self, elder_age: int = 65, as_of: date | None = None) -> bool:
        age = self.age(as_of)
        return age is not None and age >= elder_age

    def is_potential_dependant(
        self,
        adult_age: int = 18,
        elder_age: int = 65,
        as_of: date | None = None,
    ) -> bool:
        if not self.is_living:
            return False
        return (
            self.is_minor(adult_age, as_of)
            or self.has_disability
            or self.is_mentally_incapacitated
            or self.is_elder(elder_age, as_of)
        )

    def apply_update(self, update: "MemberUpdate") -> dict[str, Any]:
        """Apply a partial update, returning the fields that actually changed."""
        changes = {
            name: value
            for name, value in update.changes().items()
            if getattr(self, name) != value
        }
        if not changes:
            return {}
        candidate = replace(self, **changes)
        for name in changes:
            setattr(self, name, getattr(candidate, name))
        self.updated_at = _utc_now()
        return changes

    def mark_deceased(self, date_of_death: date) -> None:
        if self.is_deceased:
            raise InvalidRecordError(
                "member", "member is already deceased", member_id=str(self.id)
            )
        candidate = replace(
            self, vital_status=VitalStatus.DECEASED, date_of_death=date_of_death
        )
        self.vital_status = candidate.vital_status
        self.date_of_death = candidate.date_of_death
        self.updated_at = _utc_now()


@dataclass(frozen=True)
class MemberUpdate:
    """Typed partial update for a member; None leaves a field untouched."""

    name: PersonName | None = None
    gender: Gender | None = None
    date_of_birth: date | None = None
    date_of_birth_estimated: bool | None = None
    vital_status: VitalStatus | None = None
    has_disability: bool | None = None
    is_mentally_incapacitated: bool | None = None
    national_id: str | None = None
    verification_status: VerificationStatus | None = None

    def __post_init__(self) -> None:
        if self.vital_status is VitalStatus.DECEASED:
            raise InvalidRecordError(
                "member update", "use mark_member_deceased to record a death"
            )

    def changes(self) -> dict[str, Any]:
        return {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if getattr(self, f.name) is not None
        }


__all__ = ["FamilyMember", "MemberUpdate"]
