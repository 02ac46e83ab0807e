"""Data-health indicators: how complete and trustworthy a family graph is."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any
from uuid import UUID

from family_kinship_ledger.domain.family import Family
from family_kinship_ledger.domain.graph import KinshipGraph
from family_kinship_ledger.domain.value_objects import RelationshipType

MEMBERS_WEIGHT = 40
MARRIAGES_WEIGHT = 30
RELATIONSHIPS_WEIGHT = 30


class VerificationBucket(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class IntegrityTier(str, Enum):
    STRONG = "strong"
    GOOD = "good"
    WEAK = "weak"
    POOR = "poor"


@dataclass(frozen=True)
class HealthIndicators:
    family_id: UUID
    completeness_score: int
    verification_ratio: float
    verification_bucket: VerificationBucket
    integrity_tier: IntegrityTier
    isolated_member_ids: list[UUID] = field(default_factory=list)
    single_parent_child_ids: list[UUID] = field(default_factory=list)
    missing_elements: list[str] = field(default_factory=list)

    @property
    def integrity_issue_count(self) -> int:
        return len(self.isolated_member_ids) + len(self.single_parent_child_ids)

    def to_dict(self) -> dict[str, Any]:
        return {
            "family_id": str(self.family_id),
            "completeness_score": self.completeness_score,
            "verification_ratio": round(self.verification_ratio, 4),
            "verification_bucket": self.verification_bucket.value,
            "integrity_tier": self.integrity_tier.value,
            "isolated_member_ids": [str(mid) for mid in self.isolated_member_ids],
            "single_parent_child_ids": [str(mid) for mid in self.single_parent_child_ids],
            "missing_elements": list(self.missing_elements),
        }


def verification_bucket(ratio: float) -> VerificationBucket:
    if ratio >= 0.8:
        return VerificationBucket.HIGH
    if ratio >= 0.5:
        return VerificationBucket.MEDIUM
    return VerificationBucket.LOW


def integrity_tier(issue_count: int) -> IntegrityTier:
    if issue_count == 0:
        return IntegrityTier.STRONG
    if issue_count <= 2:
        return IntegrityTier.GOOD
    if issue_count <= 5:
        return IntegrityTier.WEAK
    return IntegrityTier.POOR


def assess_health(family: Family) -> HealthIndicators:
    members = family.members()
    marriages = family.marriages()
    edges = family.relationships()

    score = 0
    missing: list[str] = []
    if members:
        score += MEMBERS_WEIGHT
    else:
        missing.append("no members recorded")
    if marriages:
        score += MARRIAGES_WEIGHT
    else:
        missing.append("no marriages recorded")
    if edges:
        score += RELATIONSHIPS_WEIGHT
    else:
        missing.append("no relationships recorded")

    verified = sum(1 for edge in edges if edge.is_fully_verified)
    ratio = verified / len(edges) if edges else 0.0

    graph = KinshipGraph(edges)
    connected: set[UUID] = set()
    for edge in edges:
        if edge.lineage_pair is not None or edge.relationship_type in (
            RelationshipType.SPOUSE,
            RelationshipType.EX_SPOUSE,
        ):
            connected.update((edge.from_member_id, edge.to_member_id))
    for marriage in marriages:
        connected.update(marriage.spouse_ids)
    isolated = [m.id for m in members if m.id not in connected]

    living = {m.id for m in members if m.is_living}
    single_parent = [
        m.id
        for m in members
        if m.id in living
        and graph.parents_of(m.id)
        and sum(1 for pid in graph.parents_of(m.id) if pid in living) == 1
    ]

    return HealthIndicators(
        family_id=family.id,
        completeness_score=score,
        verification_ratio=ratio,
        verification_bucket=verification_bucket(ratio),
        integrity_tier=integrity_tier(len(isolated) + len(single_parent)),
        isolated_member_ids=isolated,
        single_parent_child_ids=single_parent,
        missing_elements=missing,
    )


__all__ = [
    "HealthIndicators",
    "IntegrityTier",
    "VerificationBucket",
    "assess_health",
    "integrity_tier",
    "verification_bucket",
]
