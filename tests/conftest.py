from collections.abc import Callable
from datetime import date, timedelta
from typing import Any
from uuid import UUID, uuid4

import pytest

from family_kinship_ledger.domain.family import Family
from family_kinship_ledger.domain.marriages import Marriage
from family_kinship_ledger.domain.members import FamilyMember
from family_kinship_ledger.domain.relationships import KinshipEdge
from family_kinship_ledger.domain.value_objects import (
    Gender,
    MarriageType,
    PersonName,
    RelationshipType,
)
from family_kinship_ledger.repositories.sqlite import (
    SQLiteDatabase,
    SQLiteFamilyRepository,
)

MemberFactory = Callable[..., FamilyMember]
MarriageFactory = Callable[..., Marriage]
EdgeFactory = Callable[..., KinshipEdge]


def years_ago(years: int) -> date:
    return date.today() - timedelta(days=round(years * 365.25))


@pytest.fixture
def family_id() -> UUID:
    return uuid4()


@pytest.fixture
def make_member(family_id: UUID) -> MemberFactory:
    def _make(
        first: str,
        last: str = "Kamau",
        gender: Gender = Gender.MALE,
        date_of_birth: date | None = date(1960, 3, 1),
        **kwargs: Any,
    ) -> FamilyMember:
        return FamilyMember(
            family_id=kwargs.pop("family_id", family_id),
            name=PersonName(first=first, last=last),
            gender=gender,
            date_of_birth=date_of_birth,
            **kwargs,
        )

    return _make


@pytest.fixture
def make_marriage(family_id: UUID) -> MarriageFactory:
    def _make(
        spouse1: FamilyMember,
        spouse2: FamilyMember,
        marriage_type: MarriageType = MarriageType.CUSTOMARY,
        start_date: date = date(1985, 6, 1),
        **kwargs: Any,
    ) -> Marriage:
        return Marriage(
            family_id=family_id,
            spouse1_id=spouse1.id,
            spouse2_id=spouse2.id,
            marriage_type=marriage_type,
            start_date=start_date,
            bride_price_paid=kwargs.pop("bride_price_paid", True),
            **kwargs,
        )

    return _make


@pytest.fixture
def make_edge(family_id: UUID) -> EdgeFactory:
    def _make(
        source: FamilyMember,
        target: FamilyMember,
        relationship_type: RelationshipType = RelationshipType.PARENT,
        **kwargs: Any,
    ) -> KinshipEdge:
        return KinshipEdge(
            family_id=family_id,
            from_member_id=source.id,
            to_member_id=target.id,
            relationship_type=relationship_type,
            **kwargs,
        )

    return _make


@pytest.fixture
def husband(make_member: MemberFactory) -> FamilyMember:
    return make_member("Joseph", date_of_birth=date(1955, 4, 12))


@pytest.fixture
def first_wife(make_member: MemberFactory) -> FamilyMember:
    return make_member("Wanjiru", gender=Gender.FEMALE, date_of_birth=date(1960, 8, 2))


@pytest.fixture
def second_wife(make_member: MemberFactory) -> FamilyMember:
    return make_member("Njeri", gender=Gender.FEMALE, date_of_birth=date(1968, 1, 20))


@pytest.fixture
def adult_child(make_member: MemberFactory) -> FamilyMember:
    return make_member("Kariuki", date_of_birth=date(1988, 11, 5))


@pytest.fixture
def minor_child(make_member: MemberFactory) -> FamilyMember:
    return make_member("Wambui", gender=Gender.FEMALE, date_of_birth=years_ago(9))


@pytest.fixture
def family(family_id: UUID, husband: FamilyMember) -> Family:
    return Family.create("Kamau Family", founder=husband, family_id=family_id)


@pytest.fixture
def household(
    family: Family,
    first_wife: FamilyMember,
    second_wife: FamilyMember,
    adult_child: FamilyMember,
) -> Family:
    """Founder plus two women and an adult son, no marriages yet."""
    family.add_member(first_wife)
    family.add_member(second_wife)
    family.add_member(adult_child)
    family.pull_events()
    return family


@pytest.fixture
def polygamous_family(
    household: Family,
    husband: FamilyMember,
    first_wife: FamilyMember,
    second_wife: FamilyMember,
    make_marriage: MarriageFactory,
) -> Family:
    household.register_marriage(make_marriage(husband, first_wife))
    household.register_marriage(
        make_marriage(husband, second_wife, start_date=date(1995, 2, 14))
    )
    household.pull_events()
    return household


@pytest.fixture
def db() -> SQLiteDatabase:
    database = SQLiteDatabase(":memory:")
    database.initialize()
    return database


@pytest.fixture
def family_repo(db: SQLiteDatabase) -> SQLiteFamilyRepository:
    return SQLiteFamilyRepository(db)
