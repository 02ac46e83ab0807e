"""Read-model projection of a family for dashboards and the CLI."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Any
from uuid import UUID

from family_kinship_ledger.config import Settings
from family_kinship_ledger.domain.family import Family
from family_kinship_ledger.domain.policies import FamilyStructurePolicy
from family_kinship_ledger.domain.value_objects import VerificationStatus
from family_kinship_ledger.logging_config import get_logger
from family_kinship_ledger.services.health_indicators import (
    HealthIndicators,
    assess_health,
)
from family_kinship_ledger.services.structure_analysis import (
    StructureClassification,
    classify_structure,
)
from family_kinship_ledger.services.succession_readiness import (
    SuccessionReadiness,
    assess_succession_readiness,
)

logger = get_logger(__name__)

DEFAULT_TIMELINE_LIMIT = 10


@dataclass(frozen=True)
class TimelineEntry:
    occurred_on: date
    kind: str
    description: str
    record_id: UUID

    def to_dict(self) -> dict[str, str]:
        return {
            "date": self.occurred_on.isoformat(),
            "kind": self.kind,
            "description": self.description,
            "record_id": str(self.record_id),
        }


@dataclass(frozen=True)
class FamilyDashboard:
    family_id: UUID
    name: str
    version: int
    is_archived: bool
    stats: dict[str, int]
    structure: StructureClassification
    health: HealthIndicators
    readiness: SuccessionReadiness
    timeline: list[TimelineEntry] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "family_id": str(self.family_id),
            "name": self.name,
            "version": self.version,
            "is_archived": self.is_archived,
            "stats": dict(self.stats),
            "structure": self.structure.to_dict(),
            "health": self.health.to_dict(),
            "readiness": self.readiness.to_dict(),
            "timeline": [entry.to_dict() for entry in self.timeline],
        }


class DashboardBuilder:
    def __init__(
        self,
        timeline_limit: int = DEFAULT_TIMELINE_LIMIT,
        policy: FamilyStructurePolicy | None = None,
    ) -> None:
        self._timeline_limit = timeline_limit
        self._policy = policy

    @classmethod
    def from_settings(cls, settings: Settings) -> DashboardBuilder:
        return cls(
            timeline_limit=settings.dashboard_timeline_limit,
            policy=FamilyStructurePolicy.from_settings(settings),
        )

    def build(self, family: Family, as_of: date | None = None) -> FamilyDashboard:
        as_of = as_of or date.today()
        policy = self._policy or family.policy
        counters = family.counters
        structure = classify_structure(family)
        readiness = assess_succession_readiness(family, as_of, policy)
        stats = {
            **counters.to_dict(),
            "verified_member_count": sum(
                1
                for member in family.members()
                if member.verification_status is VerificationStatus.VERIFIED
            ),
            "generation_count": structure.generation_count,
            "potential_dependant_count": len(readiness.potential_dependant_ids),
        }
        dashboard = FamilyDashboard(
            family_id=family.id,
            name=family.name,
            version=family.version,
            is_archived=family.is_archived,
            stats=stats,
            structure=structure,
            health=assess_health(family),
            readiness=readiness,
            timeline=self.build_timeline(family),
        )
        logger.debug(
            "dashboard_built",
            family_id=family.id,
            version=family.version,
            timeline_entries=len(dashboard.timeline),
        )
        return dashboard

    def build_timeline(self, family: Family) -> list[TimelineEntry]:
        """Dated events derived from the graph, newest first, capped."""
        members = {m.id: m for m in family.members()}

        def name(member_id: UUID) -> str:
            return members[member_id].name.full_name

        entries: list[TimelineEntry] = []
        for member in members.values():
            if member.date_of_birth is not None:
                entries.append(
                    TimelineEntry(
                        member.date_of_birth, "birth", f"{name(member.id)} born", member.id
                    )
                )
            if member.date_of_death is not None:
                entries.append(
                    TimelineEntry(
                        member.date_of_death, "death", f"{name(member.id)} died", member.id
                    )
                )
        for marriage in family.marriages():
            couple = f"{name(marriage.spouse1_id)} and {name(marriage.spouse2_id)}"
            entries.append(
                TimelineEntry(
                    marriage.start_date,
                    "marriage",
                    f"{couple} married ({marriage.marriage_type.value})",
                    marriage.id,
                )
            )
            if marriage.end_date is not None:
                entries.append(
                    TimelineEntry(
                        marriage.end_date,
                        "marriage_ended",
                        f"Marriage of {couple} ended ({marriage.status.value})",
                        marriage.id,
                    )
                )
        for house in family.houses():
            entries.append(
                TimelineEntry(
                    house.established_date,
                    "house_established",
                    f"House #{house.house_order} ({house.house_name}) established",
                    house.id,
                )
            )
            if house.dissolution_date is not None:
                entries.append(
                    TimelineEntry(
                        house.dissolution_date,
                        "house_dissolved",
                        f"House #{house.house_order} ({house.house_name}) dissolved",
                        house.id,
                    )
                )
        for record in family.cohabitations():
            entries.append(
                TimelineEntry(
                    record.start_date,
                    "cohabitation",
                    f"{name(record.partner1_id)} and {name(record.partner2_id)} "
                    "began cohabiting",
                    record.id,
                )
            )
        for adoption in family.adoptions():
            entries.append(
                TimelineEntry(
                    adoption.finalization_date or adoption.application_date,
                    "adoption",
                    f"{name(adoption.adoptive_parent_id)} adopted "
                    f"{name(adoption.adoptee_id)}",
                    adoption.id,
                )
            )

        entries.sort(
            key=lambda entry: (entry.occurred_on, entry.kind, str(entry.record_id)),
            reverse=True,
        )
        return entries[: self._timeline_limit]


__all__ = ["DashboardBuilder", "FamilyDashboard", "TimelineEntry"]
