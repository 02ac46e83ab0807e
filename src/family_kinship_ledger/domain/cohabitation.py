"""Cohabitation records supporting S.29 dependency claims."""

from dataclasses import dataclass, field
from datetime import UTC, date, datetime
from uuid import UUID, uuid4

from family_kinship_ledger.domain.value_objects import (
    CohabitationStability,
    CohabitationType,
    KenyanCounty,
    years_between,
)
from family_kinship_ledger.exceptions import (
    FutureDateError,
    InvalidRecordError,
    SelfRelationshipError,
)

QUALIFYING_COHABITATION_TYPES = frozenset(
    {CohabitationType.COME_WE_STAY, CohabitationType.LONG_TERM_PARTNERSHIP}
)


def _utc_now() -> datetime:
    return datetime.now(UTC)


@dataclass
class CohabitationRecord:
    family_id: UUID
    partner1_id: UUID
    partner2_id: UUID
    cohabitation_type: CohabitationType
    start_date: date
    witnesses: list[str]
    id: UUID = field(default_factory=uuid4)
    end_date: date | None = None
    stability: CohabitationStability = CohabitationStability.UNKNOWN
    shared_residence: bool = True
    residence_county: KenyanCounty | None = None
    has_children: bool = False
    financial_support_provided: bool = False
    community_acknowledged: bool = False
    affidavit_id: str | None = None
    created_at: datetime = field(default_factory=_utc_now, compare=False)

    def __post_init__(self) -> None:
        if self.partner1_id == self.partner2_id:
            raise SelfRelationshipError(self.partner1_id)
        if self.start_date > date.today():
            raise FutureDateError("start_date", self.start_date)
        if self.end_date is not None and self.end_date <= self.start_date:
            raise InvalidRecordError(
                "cohabitation",
                "end date must be after start date",
                cohabitation_id=str(self.id),
            )
        if not [witness for witness in self.witnesses if witness.strip()]:
            raise InvalidRecordError(
                "cohabitation",
                "at least one witness is required",
                cohabitation_id=str(self.id),
            )

    @property
    def is_active(self) -> bool:
        return self.end_date is None

    def involves(self, member_id: UUID) -> bool:
        return member_id in (self.partner1_id, self.partner2_id)

    def duration_years(self, as_of: date | None = None) -> int:
        end = self.end_date or as_of or date.today()
        return years_between(self.start_date, end)

    def qualifies_for_dependency_claim(
        self, as_of: date | None = None, min_years: int = 2
    ) -> bool:
        if self.cohabitation_type not in QUALIFYING_COHABITATION_TYPES:
            return False
        if self.duration_years(as_of) < min_years:
            return False
        return self.community_acknowledged or bool(self.affidavit_id)

    def missing_evidence(
        self, as_of: date | None = None, min_years: int = 2
    ) -> list[str]:
        missing: list[str] = []
        if self.cohabitation_type not in QUALIFYING_COHABITATION_TYPES:
            missing.append(
                f"{self.cohabitation_type.value} cohabitation does not support a claim"
            )
        if self.duration_years(as_of) < min_years:
            missing.append(f"cohabitation shorter than {min_years} years")
        if not (self.community_acknowledged or self.affidavit_id):
            missing.append("no community acknowledgement or affidavit")
        return missing


__all__ = ["CohabitationRecord", "QUALIFYING_COHABITATION_TYPES"]
