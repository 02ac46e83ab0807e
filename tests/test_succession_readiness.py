"""Tests for succession readiness assessment."""

from datetime import date

import pytest

from family_kinship_ledger.domain.adoption import AdoptionRecord
from family_kinship_ledger.domain.cohabitation import CohabitationRecord
from family_kinship_ledger.domain.houses import PolygamousHouse
from family_kinship_ledger.domain.value_objects import (
    AdoptionType,
    CohabitationType,
    Gender,
    RelationshipType,
    VerificationMethod,
)
from family_kinship_ledger.services.succession_readiness import (
    ReadinessLevel,
    RecommendationPriority,
    assess_succession_readiness,
)

AS_OF = date(2020, 1, 1)


def house(family_id, wife, order, **kwargs) -> PolygamousHouse:
    return PolygamousHouse(
        family_id=family_id,
        house_name=f"House {order}",
        house_order=order,
        original_wife_id=wife.id,
        established_date=date(1996, 1, 1),
        **kwargs,
    )


@pytest.fixture
def orphan(household, make_member):
    minor = make_member("Wambui", gender=Gender.FEMALE, date_of_birth=date(2012, 5, 5))
    household.add_member(minor)
    return minor


class TestReadinessLevel:
    def test_scores(self) -> None:
        assert ReadinessLevel.READY.score == 100
        assert ReadinessLevel.PARTIAL.score == 50
        assert ReadinessLevel.NOT_READY.score == 0


class TestDependency:
    def test_simple_family_is_ready(self, household) -> None:
        result = assess_succession_readiness(household, AS_OF)

        assert result.overall_level is ReadinessLevel.READY
        assert result.overall_score == 100
        assert result.potential_dependant_ids == []
        assert result.recommendations == []

    def test_minor_without_parent_or_guardian(self, household, orphan) -> None:
        result = assess_succession_readiness(household, AS_OF)

        assert result.dependency.level is ReadinessLevel.NOT_READY
        assert result.potential_dependant_ids == [orphan.id]
        assert result.overall_level is ReadinessLevel.NOT_READY
        assert result.overall_score == 67
        assert result.recommendations[0].priority is RecommendationPriority.HIGH

    def test_guardian_satisfies_minor(self, household, orphan, husband, make_edge) -> None:
        household.define_relationship(
            make_edge(
                husband,
                orphan,
                RelationshipType.GUARDIAN,
                is_biological=False,
                is_legal=True,
            )
        )

        assert assess_succession_readiness(household, AS_OF).dependency.level is (
            ReadinessLevel.READY
        )

    def test_living_parent_satisfies_minor(self, household, orphan, first_wife, make_edge) -> None:
        household.define_relationship(make_edge(first_wife, orphan))

        result = assess_succession_readiness(household, AS_OF)

        assert result.dependency.level is ReadinessLevel.READY

    def test_pending_adoption_is_partial(
        self, household, family_id, husband, adult_child
    ) -> None:
        household.record_adoption(
            AdoptionRecord(
                family_id=family_id,
                adoptee_id=adult_child.id,
                adoptive_parent_id=husband.id,
                adoption_type=AdoptionType.KINSHIP,
                application_date=date(1995, 1, 1),
            )
        )

        result = assess_succession_readiness(household, AS_OF)

        assert result.dependency.level is ReadinessLevel.PARTIAL
        assert any("not finalized" in item for item in result.missing_elements)

    def test_unproven_cohabitation_is_partial(
        self, household, family_id, adult_child, second_wife
    ) -> None:
        household.record_cohabitation(
            CohabitationRecord(
                family_id=family_id,
                partner1_id=adult_child.id,
                partner2_id=second_wife.id,
                cohabitation_type=CohabitationType.COME_WE_STAY,
                start_date=date(2016, 1, 1),
                witnesses=["Elder"],
            )
        )

        result = assess_succession_readiness(household, AS_OF)

        assert result.dependency.level is ReadinessLevel.PARTIAL
        assert "no community acknowledgement or affidavit" in result.missing_elements[0]

    def test_elders_counted_as_dependants(self, household, husband) -> None:
        result = assess_succession_readiness(household, date(2021, 1, 1))

        assert husband.id in result.potential_dependant_ids


class TestPolygamousDistribution:
    def test_not_applicable_when_monogamous(self, household) -> None:
        concern = assess_succession_readiness(household, AS_OF).polygamous_distribution

        assert concern.level is ReadinessLevel.READY
        assert not concern.applicable

    def test_no_houses_is_not_ready(self, polygamous_family) -> None:
        concern = assess_succession_readiness(polygamous_family, AS_OF).polygamous_distribution

        assert concern.applicable
        assert concern.level is ReadinessLevel.NOT_READY
        assert concern.recommendations[0].title == "Establish polygamous houses"

    def test_unassigned_wife_is_partial(
        self, polygamous_family, family_id, first_wife, second_wife
    ) -> None:
        polygamous_family.establish_polygamous_house(house(family_id, first_wife, 1))

        concern = assess_succession_readiness(polygamous_family, AS_OF).polygamous_distribution

        assert concern.level is ReadinessLevel.PARTIAL
        assert concern.missing_elements == [f"wife {second_wife.id} is not assigned to a house"]

    def test_uncertified_second_house_is_partial(
        self, polygamous_family, family_id, first_wife, second_wife
    ) -> None:
        polygamous_family.establish_polygamous_house(house(family_id, first_wife, 1))
        polygamous_family.establish_polygamous_house(
            house(
                family_id,
                second_wife,
                2,
                wives_consent_obtained=True,
                wives_consent_document_id="CONSENT-2",
            )
        )

        concern = assess_succession_readiness(polygamous_family, AS_OF).polygamous_distribution

        assert concern.missing_elements == ["house #2 has no S.40 certificate"]
        assert concern.level is ReadinessLevel.PARTIAL

    def test_documented_houses_are_ready(
        self, polygamous_family, family_id, first_wife, second_wife
    ) -> None:
        polygamous_family.establish_polygamous_house(house(family_id, first_wife, 1))
        polygamous_family.establish_polygamous_house(
            house(
                family_id,
                second_wife,
                2,
                wives_consent_obtained=True,
                wives_consent_document_id="CONSENT-2",
                court_recognized=True,
                s40_certificate_number="S40/2001/3",
            )
        )

        concern = assess_succession_readiness(polygamous_family, AS_OF).polygamous_distribution

        assert concern.level is ReadinessLevel.READY


class TestLegalClarity:
    def test_half_unverified_is_partial(
        self, household, husband, first_wife, adult_child, make_edge
    ) -> None:
        verified = make_edge(husband, adult_child)
        household.define_relationship(verified)
        household.define_relationship(make_edge(first_wife, adult_child))
        household.verify_relationship(verified.id, VerificationMethod.DNA)

        concern = assess_succession_readiness(household, AS_OF).legal_clarity

        assert concern.level is ReadinessLevel.PARTIAL
        assert concern.recommendations[0].priority is RecommendationPriority.LOW

    def test_mostly_unverified_is_not_ready(
        self, household, husband, first_wife, adult_child, make_edge
    ) -> None:
        household.define_relationship(make_edge(husband, adult_child))
        household.define_relationship(make_edge(first_wife, adult_child))

        concern = assess_succession_readiness(household, AS_OF).legal_clarity

        assert concern.level is ReadinessLevel.NOT_READY
        assert len(concern.missing_elements) == 2

    def test_non_critical_edges_ignored(self, household, adult_child, second_wife, make_edge) -> None:
        household.define_relationship(
            make_edge(adult_child, second_wife, RelationshipType.COUSIN)
        )

        assert assess_succession_readiness(household, AS_OF).legal_clarity.level is (
            ReadinessLevel.READY
        )

    def test_to_dict(self, household) -> None:
        data = assess_succession_readiness(household, AS_OF).to_dict()

        assert data["as_of"] == "2020-01-01"
        assert [c["concern"] for c in data["concerns"]] == [
            "dependency",
            "polygamous_distribution",
            "legal_clarity",
        ]
