"""Succession readiness: is the family graph ready to support a probate claim?

Three concerns are assessed independently, each with a tri-state label:

- dependency claims: potential dependants (S.29) and the records backing
  cohabitation and adoption claims;
- polygamous distribution: whether S.40 houses are established, consented
  and certified, and every wife is assigned to one;
- legal clarity: how many critical lineage and spousal edges are unverified.

The overall level is the worst of the three; the score is their average.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Any
from uuid import UUID

from family_kinship_ledger.domain.family import Family
from family_kinship_ledger.domain.graph import KinshipGraph
from family_kinship_ledger.domain.policies import FamilyStructurePolicy
from family_kinship_ledger.domain.value_objects import (
    Gender,
    RelationshipType,
    VerificationLevel,
)


class ReadinessLevel(str, Enum):
    READY = "ready"
    PARTIAL = "partial"
    NOT_READY = "not_ready"

    @property
    def score(self) -> int:
        return _LEVEL_SCORES[self]


_LEVEL_SCORES = {
    ReadinessLevel.READY: 100,
    ReadinessLevel.PARTIAL: 50,
    ReadinessLevel.NOT_READY: 0,
}

_LEVEL_RANK = {
    ReadinessLevel.READY: 0,
    ReadinessLevel.PARTIAL: 1,
    ReadinessLevel.NOT_READY: 2,
}


class RecommendationPriority(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


CRITICAL_RELATIONSHIP_TYPES = frozenset(
    {
        RelationshipType.PARENT,
        RelationshipType.CHILD,
        RelationshipType.ADOPTED_CHILD,
        RelationshipType.SPOUSE,
    }
)

_UNVERIFIED_LEVELS = frozenset({VerificationLevel.UNVERIFIED, VerificationLevel.DISPUTED})


@dataclass(frozen=True)
class Recommendation:
    priority: RecommendationPriority
    title: str
    description: str

    def to_dict(self) -> dict[str, str]:
        return {
            "priority": self.priority.value,
            "title": self.title,
            "description": self.description,
        }


@dataclass(frozen=True)
class ConcernAssessment:
    concern: str
    level: ReadinessLevel
    missing_elements: list[str] = field(default_factory=list)
    recommendations: list[Recommendation] = field(default_factory=list)
    applicable: bool = True

    def to_dict(self) -> dict[str, Any]:
        return {
            "concern": self.concern,
            "level": self.level.value,
            "applicable": self.applicable,
            "missing_elements": list(self.missing_elements),
            "recommendations": [r.to_dict() for r in self.recommendations],
        }


@dataclass(frozen=True)
class SuccessionReadiness:
    family_id: UUID
    as_of: date
    overall_level: ReadinessLevel
    overall_score: int
    dependency: ConcernAssessment
    polygamous_distribution: ConcernAssessment
    legal_clarity: ConcernAssessment
    potential_dependant_ids: list[UUID] = field(default_factory=list)

    @property
    def concerns(self) -> list[ConcernAssessment]:
        return [self.dependency, self.polygamous_distribution, self.legal_clarity]

    @property
    def recommendations(self) -> list[Recommendation]:
        ordered = sorted(
            (r for concern in self.concerns for r in concern.recommendations),
            key=lambda r: list(RecommendationPriority).index(r.priority),
        )
        return ordered

    @property
    def missing_elements(self) -> list[str]:
        return [item for concern in self.concerns for item in concern.missing_elements]

    def to_dict(self) -> dict[str, Any]:
        return {
            "family_id": str(self.family_id),
            "as_of": self.as_of.isoformat(),
            "overall_level": self.overall_level.value,
            "overall_score": self.overall_score,
            "concerns": [concern.to_dict() for concern in self.concerns],
            "potential_dependant_ids": [str(mid) for mid in self.potential_dependant_ids],
        }


def assess_dependency(
    family: Family, as_of: date, policy: FamilyStructurePolicy
) -> tuple[ConcernAssessment, list[UUID]]:
    members = family.members()
    dependants = [
        m.id
        for m in members
        if m.is_potential_dependant(policy.adult_age, policy.elder_age, as_of)
    ]
    missing: list[str] = []
    recommendations: list[Recommendation] = []
    critical = False

    for record in family.cohabitations():
        if record.is_active and not record.qualifies_for_dependency_claim(
            as_of, policy.cohabitation_min_years
        ):
            gaps = record.missing_evidence(as_of, policy.cohabitation_min_years)
            missing.append(f"cohabitation {record.id}: {'; '.join(gaps)}")
            recommendations.append(
                Recommendation(
                    RecommendationPriority.MEDIUM,
                    "Strengthen cohabitation evidence",
                    "Obtain a community acknowledgement or affidavit for the "
                    "cohabitation so it can support an S.29 claim.",
                )
            )

    for adoption in family.adoptions():
        if not adoption.is_finalized:
            missing.append(f"adoption {adoption.id} is not finalized")
            recommendations.append(
                Recommendation(
                    RecommendationPriority.MEDIUM,
                    "Finalize pending adoption",
                    "Obtain the adoption order so the adoptee is recognised as a child.",
                )
            )

    graph = KinshipGraph(family.relationships())
    living = {m.id for m in members if m.is_living}
    guarded = {
        edge.to_member_id
        for edge in family.relationships()
        if edge.relationship_type is RelationshipType.GUARDIAN
        and edge.from_member_id in living
    }
    for member in members:
        if not (member.is_living and member.is_minor(policy.adult_age, as_of)):
            continue
        has_living_parent = any(pid in living for pid in graph.parents_of(member.id))
        if not has_living_parent and member.id not in guarded:
            critical = True
            missing.append(f"minor {member.id} has no living parent or guardian recorded")
            recommendations.append(
                Recommendation(
                    RecommendationPriority.HIGH,
                    "Appoint a guardian",
                    f"Record a guardian for {member.name.full_name} (S.70-S.73).",
                )
            )

    if critical:
        level = ReadinessLevel.NOT_READY
    elif missing:
        level = ReadinessLevel.PARTIAL
    else:
        level = ReadinessLevel.READY
    return (
        ConcernAssessment("dependency", level, missing, recommendations),
        dependants,
    )


def assess_polygamous_distribution(family: Family) -> ConcernAssessment:
    if not family.is_polygamous():
        return ConcernAssessment(
            "polygamous_distribution", ReadinessLevel.READY, applicable=False
        )

    houses = [h for h in family.houses() if h.is_active]
    if not houses:
        return ConcernAssessment(
            "polygamous_distribution",
            ReadinessLevel.NOT_READY,
            ["no polygamous houses established"],
            [
                Recommendation(
                    RecommendationPriority.HIGH,
                    "Establish polygamous houses",
                    "Record one house per wife so the estate can be divided under S.40.",
                )
            ],
        )

    missing: list[str] = []
    recommendations: list[Recommendation] = []
    for house in houses:
        if house.house_order > 1 and not house.has_documented_consent:
            missing.append(f"house #{house.house_order} lacks documented wives' consent")
        if house.house_order > 1 and not house.is_certified:
            missing.append(f"house #{house.house_order} has no S.40 certificate")
    if missing:
        recommendations.append(
            Recommendation(
                RecommendationPriority.MEDIUM,
                "Complete house documentation",
                "Obtain consent records and S.40 certificates for subsequent houses.",
            )
        )

    assigned = {mid for house in houses for mid in house.member_ids}
    members = {m.id: m for m in family.members()}
    wives = {
        spouse_id
        for marriage in family.active_marriages()
        for spouse_id in marriage.spouse_ids
        if members[spouse_id].gender is Gender.FEMALE
    }
    unassigned = sorted(wives - assigned, key=str)
    for wife_id in unassigned:
        missing.append(f"wife {wife_id} is not assigned to a house")
    if unassigned:
        recommendations.append(
            Recommendation(
                RecommendationPriority.HIGH,
                "Assign wives to houses",
                "Every wife in a subsisting marriage must belong to a house.",
            )
        )

    level = ReadinessLevel.PARTIAL if missing else ReadinessLevel.READY
    return ConcernAssessment("polygamous_distribution", level, missing, recommendations)


def assess_legal_clarity(family: Family) -> ConcernAssessment:
    critical_edges = [
        edge
        for edge in family.relationships()
        if edge.relationship_type in CRITICAL_RELATIONSHIP_TYPES
    ]
    unverified = [e for e in critical_edges if e.verification_level in _UNVERIFIED_LEVELS]
    ratio = len(unverified) / len(critical_edges) if critical_edges else 0.0

    if ratio == 0:
        level = ReadinessLevel.READY
    elif ratio <= 0.5:
        level = ReadinessLevel.PARTIAL
    else:
        level = ReadinessLevel.NOT_READY

    missing = [
        f"{edge.relationship_type.value} relationship {edge.id} is "
        f"{edge.verification_level.value}"
        for edge in unverified
    ]
    recommendations: list[Recommendation] = []
    if unverified:
        recommendations.append(
            Recommendation(
                RecommendationPriority.HIGH if level is ReadinessLevel.NOT_READY
                else RecommendationPriority.LOW,
                "Verify critical relationships",
                f"{len(unverified)} of {len(critical_edges)} parent, child or spouse "
                "relationships lack verification.",
            )
        )
    return ConcernAssessment("legal_clarity", level, missing, recommendations)


def assess_succession_readiness(
    family: Family,
    as_of: date | None = None,
    policy: FamilyStructurePolicy | None = None,
) -> SuccessionReadiness:
    as_of = as_of or date.today()
    policy = policy or family.policy
    dependency, dependants = assess_dependency(family, as_of, policy)
    distribution = assess_polygamous_distribution(family)
    clarity = assess_legal_clarity(family)

    concerns = [dependency, distribution, clarity]
    overall = max((c.level for c in concerns), key=lambda level: _LEVEL_RANK[level])
    score = round(sum(c.level.score for c in concerns) / len(concerns))
    return SuccessionReadiness(
        family_id=family.id,
        as_of=as_of,
        overall_level=overall,
        overall_score=score,
        dependency=dependency,
        polygamous_distribution=distribution,
        legal_clarity=clarity,
        potential_dependant_ids=dependants,
    )


__all__ = [
    "ConcernAssessment",
    "ReadinessLevel",
    "Recommendation",
    "RecommendationPriority",
    "SuccessionReadiness",
    "assess_succession_readiness",
]
