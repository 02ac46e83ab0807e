"""KinshipEdge: a directed, typed relationship between two family members."""

from dataclasses import dataclass, field
from datetime import UTC, date, datetime
from uuid import UUID, uuid4

from family_kinship_ledger.domain.value_objects import (
    LawSection,
    RelationshipType,
    VerificationLevel,
    VerificationMethod,
)
from family_kinship_ledger.exceptions import (
    FutureDateError,
    InvalidRecordError,
    SelfRelationshipError,
)


def _utc_now() -> datetime:
    return datetime.now(UTC)


@dataclass
class KinshipEdge:
    family_id: UUID
    from_member_id: UUID
    to_member_id: UUID
    relationship_type: RelationshipType
    id: UUID = field(default_factory=uuid4)
    is_biological: bool = True
    is_legal: bool = False
    is_customary: bool = False
    verification_level: VerificationLevel = VerificationLevel.UNVERIFIED
    verification_method: VerificationMethod | None = None
    legal_basis: list[LawSection] = field(default_factory=list)
    legal_documents: list[str] = field(default_factory=list)
    court_order_id: str | None = None
    adoption_order_id: str | None = None
    start_date: date | None = None
    notes: str | None = None
    created_at: datetime = field(default_factory=_utc_now, compare=False)
    updated_at: datetime = field(default_factory=_utc_now, compare=False)

    def __post_init__(self) -> None:
        if self.from_member_id == self.to_member_id:
            raise SelfRelationshipError(self.from_member_id)
        if not (self.is_biological or self.is_legal or self.is_customary):
            raise InvalidRecordError(
                "relationship",
                "a relationship needs a biological, legal or customary basis",
                edge_id=str(self.id),
            )
        if self.start_date is not None and self.start_date > date.today():
            raise FutureDateError("start_date", self.start_date)

    @property
    def key(self) -> tuple[UUID, UUID, RelationshipType]:
        return (self.from_member_id, self.to_member_id, self.relationship_type)

    @property
    def lineage_pair(self) -> tuple[UUID, UUID] | None:
        """(parent, child) for lineage edges, None otherwise."""
        if self.relationship_type.is_parent_to_child:
            return (self.from_member_id, self.to_member_id)
        if self.relationship_type.is_child_to_parent:
            return (self.to_member_id, self.from_member_id)
        return None

    @property
    def is_fully_verified(self) -> bool:
        return self.verification_level is VerificationLevel.FULLY_VERIFIED

    def involves(self, member_id: UUID) -> bool:
        return member_id in (self.from_member_id, self.to_member_id)

    def verify(
        self,
        method: VerificationMethod,
        level: VerificationLevel = VerificationLevel.FULLY_VERIFIED,
        documents: list[str] | None = None,
    ) -> None:
        self.verification_method = method
        self.verification_level = level
        for document in documents or []:
            if document not in self.legal_documents:
                self.legal_documents.append(document)
        self.updated_at = _utc_now()


__all__ = ["KinshipEdge"]
