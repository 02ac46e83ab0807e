"""Statutory and customary rules that shape a family's structure.

The aggregate consults FamilyStructurePolicy while checking preconditions.
Hard rules raise PreconditionError subclasses; soft rules return advisory
strings that the aggregate logs without blocking the mutation.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date
from typing import TYPE_CHECKING
from uuid import UUID

from family_kinship_ledger.domain.adoption import AdoptionRecord
from family_kinship_ledger.domain.graph import KinshipGraph
from family_kinship_ledger.domain.houses import PolygamousHouse
from family_kinship_ledger.domain.marriages import Marriage
from family_kinship_ledger.domain.members import FamilyMember
from family_kinship_ledger.domain.value_objects import Gender, MarriageType
from family_kinship_ledger.exceptions import (
    IneligibleSpouseError,
    MarriageRegimeViolationError,
    ProhibitedUnionError,
)

if TYPE_CHECKING:
    from family_kinship_ledger.config import Settings


@dataclass(frozen=True)
class FamilyStructurePolicy:
    adult_age: int = 18
    elder_age: int = 65
    cohabitation_min_years: int = 2
    adoption_min_age_gap: int = 18
    enforce_marriage_regime: bool = True
    islamic_max_wives: int = 4
    customary_max_wives: int | None = None

    @classmethod
    def from_settings(cls, settings: Settings) -> FamilyStructurePolicy:
        return cls(
            adult_age=settings.adult_age,
            elder_age=settings.elder_age,
            cohabitation_min_years=settings.cohabitation_min_years,
            adoption_min_age_gap=settings.adoption_min_age_gap,
            enforce_marriage_regime=settings.enforce_marriage_regime,
            islamic_max_wives=settings.islamic_max_wives,
            customary_max_wives=settings.customary_max_wives,
        )

    def max_wives(self, marriage_type: MarriageType) -> int | None:
        if marriage_type.is_monogamous:
            return 1
        if marriage_type is MarriageType.ISLAMIC:
            return self.islamic_max_wives
        if marriage_type is MarriageType.CUSTOMARY:
            return self.customary_max_wives
        return None

    def check_spouse_eligibility(
        self, member: FamilyMember, marriage_date: date
    ) -> list[str]:
        """Raise if the member cannot marry on marriage_date; return advisories."""
        if member.date_of_death is not None and member.date_of_death <= marriage_date:
            raise IneligibleSpouseError(member.id, "deceased before the marriage date")
        if member.date_of_birth is None:
            return [f"age of spouse {member.id} is unknown"]
        if member.is_minor(self.adult_age, as_of=marriage_date):
            raise IneligibleSpouseError(
                member.id, f"under {self.adult_age} on the marriage date"
            )
        return []

    def check_marriage_regime(
        self,
        marriage: Marriage,
        spouses: Iterable[FamilyMember],
        active_marriages: Iterable[Marriage],
    ) -> None:
        if not self.enforce_marriage_regime:
            return
        active = [m for m in active_marriages if m.id != marriage.id]
        for spouse in spouses:
            existing = [m for m in active if m.involves(spouse.id)]
            if not existing:
                continue
            monogamous = [m for m in existing if m.marriage_type.is_monogamous]
            if monogamous:
                raise MarriageRegimeViolationError(
                    spouse.id,
                    marriage.marriage_type.value,
                    f"already in a subsisting {monogamous[0].marriage_type.value} marriage",
                )
            if marriage.marriage_type.is_monogamous:
                raise MarriageRegimeViolationError(
                    spouse.id,
                    marriage.marriage_type.value,
                    "a monogamous marriage requires both spouses to be unmarried",
                )
            if spouse.gender is Gender.FEMALE:
                raise MarriageRegimeViolationError(
                    spouse.id,
                    marriage.marriage_type.value,
                    "a wife may only have one subsisting marriage",
                )
            cap = self.max_wives(marriage.marriage_type)
            if cap is not None and len(existing) + 1 > cap:
                raise MarriageRegimeViolationError(
                    spouse.id,
                    marriage.marriage_type.value,
                    f"more than {cap} wives",
                )

    def check_prohibited_union(
        self, spouse1_id: UUID, spouse2_id: UUID, graph: KinshipGraph
    ) -> None:
        if not self.enforce_marriage_regime:
            return
        if graph.is_reachable(spouse1_id, spouse2_id) or graph.is_reachable(
            spouse2_id, spouse1_id
        ):
            raise ProhibitedUnionError(spouse1_id, spouse2_id, "lineal relatives")
        shared_parents = set(graph.parents_of(spouse1_id)) & set(
            graph.parents_of(spouse2_id)
        )
        if shared_parents:
            raise ProhibitedUnionError(spouse1_id, spouse2_id, "siblings")

    def house_advisories(
        self, house: PolygamousHouse, existing_houses: Iterable[PolygamousHouse]
    ) -> list[str]:
        notes: list[str] = []
        orders = [h.house_order for h in existing_houses]
        max_order = max(orders, default=0)
        if house.house_order > max_order + 1:
            notes.append(
                f"house #{house.house_order} skips order {max_order + 1}"
            )
        if house.house_order > 1 and not house.is_certified:
            notes.append(f"house #{house.house_order} has no S.40 certificate")
        return notes

    def polygamous_marriage_advisories(self, marriage: Marriage) -> list[str]:
        if not (marriage.s40_certificate_number or marriage.registration_number):
            return ["polygamous marriage has no certificate or registration number"]
        return []

    def adoption_advisories(
        self,
        adoption: AdoptionRecord,
        adoptee: FamilyMember,
        parent: FamilyMember,
        existing_parent_count: int,
    ) -> list[str]:
        notes: list[str] = []
        if adoptee.date_of_birth and parent.date_of_birth:
            adoptee_age = adoptee.age(adoption.application_date) or 0
            parent_age = parent.age(adoption.application_date) or 0
            if parent_age - adoptee_age < self.adoption_min_age_gap:
                notes.append(
                    f"adoptive parent is less than {self.adoption_min_age_gap} "
                    "years older than the adoptee"
                )
        if existing_parent_count >= 2:
            notes.append("adoptee already has two recorded parents")
        return notes


__all__ = ["FamilyStructurePolicy"]
