"""Structural classification of a family graph."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any
from uuid import UUID

from family_kinship_ledger.domain.family import Family
from family_kinship_ledger.domain.value_objects import MarriageType

MAX_COMPLEXITY_SCORE = 100
COMPLEX_THRESHOLD = 50
EXTENDED_MEMBER_THRESHOLD = 8


class StructureType(str, Enum):
    NUCLEAR = "nuclear"
    EXTENDED = "extended"
    POLYGAMOUS = "polygamous"
    BLENDED = "blended"
    COMPLEX = "complex"


class PolygamyTier(str, Enum):
    NONE = "none"
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class PolygamyStatus(str, Enum):
    MONOGAMOUS = "monogamous"
    POLYGAMOUS = "polygamous"
    POTENTIALLY_POLYGAMOUS = "potentially_polygamous"


@dataclass(frozen=True)
class StructureClassification:
    family_id: UUID
    structure_type: StructureType
    polygamy_status: PolygamyStatus
    polygamy_tier: PolygamyTier
    complexity_score: int
    member_count: int
    house_count: int
    relationship_type_count: int
    generation_count: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "family_id": str(self.family_id),
            "structure_type": self.structure_type.value,
            "polygamy_status": self.polygamy_status.value,
            "polygamy_tier": self.polygamy_tier.value,
            "complexity_score": self.complexity_score,
            "member_count": self.member_count,
            "house_count": self.house_count,
            "relationship_type_count": self.relationship_type_count,
            "generation_count": self.generation_count,
        }


def polygamy_tier(house_count: int) -> PolygamyTier:
    if house_count == 0:
        return PolygamyTier.NONE
    if house_count <= 2:
        return PolygamyTier.LOW
    if house_count <= 4:
        return PolygamyTier.MEDIUM
    return PolygamyTier.HIGH


def complexity_score(member_count: int, relationship_type_count: int, house_count: int) -> int:
    raw = member_count * 2 + relationship_type_count * 5 + house_count * 10
    return min(MAX_COMPLEXITY_SCORE, raw)


def polygamy_status(family: Family) -> PolygamyStatus:
    if family.is_polygamous():
        return PolygamyStatus.POLYGAMOUS
    potentially = bool(family.houses()) or any(
        marriage.marriage_type in (MarriageType.CUSTOMARY, MarriageType.ISLAMIC)
        for marriage in family.active_marriages()
    )
    if potentially:
        return PolygamyStatus.POTENTIALLY_POLYGAMOUS
    return PolygamyStatus.MONOGAMOUS


def classify_structure(family: Family) -> StructureClassification:
    """Classify the family; never mutates it."""
    counters = family.counters
    house_count = counters.house_count
    relationship_types = {edge.relationship_type for edge in family.relationships()}
    score = complexity_score(counters.member_count, len(relationship_types), house_count)

    if score > COMPLEX_THRESHOLD:
        structure = StructureType.COMPLEX
    elif house_count > 0:
        structure = StructureType.POLYGAMOUS
    elif counters.member_count > EXTENDED_MEMBER_THRESHOLD:
        structure = StructureType.EXTENDED
    elif family.adoptions() or family.cohabitations():
        structure = StructureType.BLENDED
    else:
        structure = StructureType.NUCLEAR

    return StructureClassification(
        family_id=family.id,
        structure_type=structure,
        polygamy_status=polygamy_status(family),
        polygamy_tier=polygamy_tier(house_count),
        complexity_score=score,
        member_count=counters.member_count,
        house_count=house_count,
        relationship_type_count=len(relationship_types),
        generation_count=family.generation_count(),
    )


__all__ = [
    "PolygamyStatus",
    "PolygamyTier",
    "StructureClassification",
    "StructureType",
    "classify_structure",
    "complexity_score",
    "polygamy_tier",
]
