from datetime import date
from uuid import uuid4

import pytest

from family_kinship_ledger.domain.marriages import Marriage
from family_kinship_ledger.domain.value_objects import (
    MarriageEndReason,
    MarriageStatus,
    MarriageType,
)
from family_kinship_ledger.exceptions import InvalidRecordError, SelfMarriageError


def marriage(**kwargs) -> Marriage:
    return Marriage(
        family_id=uuid4(),
        spouse1_id=kwargs.pop("spouse1_id", uuid4()),
        spouse2_id=kwargs.pop("spouse2_id", uuid4()),
        marriage_type=kwargs.pop("marriage_type", MarriageType.CUSTOMARY),
        start_date=kwargs.pop("start_date", date(1990, 1, 1)),
        **kwargs,
    )


class TestMarriageValidation:
    def test_self_marriage_rejected(self):
        spouse = uuid4()

        with pytest.raises(SelfMarriageError):
            marriage(spouse1_id=spouse, spouse2_id=spouse)

    def test_active_marriage_cannot_have_end_date(self):
        with pytest.raises(InvalidRecordError):
            marriage(end_date=date(2000, 1, 1))

    def test_ended_marriage_needs_end_date(self):
        with pytest.raises(InvalidRecordError, match="requires an end date"):
            marriage(status=MarriageStatus.DIVORCED)

    def test_end_before_start_rejected(self):
        with pytest.raises(InvalidRecordError):
            marriage(status=MarriageStatus.WIDOWED, end_date=date(1980, 1, 1))


class TestMarriageQueries:
    def test_spouse_ids_are_unordered(self):
        a, b = uuid4(), uuid4()

        assert marriage(spouse1_id=a, spouse2_id=b).spouse_ids == marriage(
            spouse1_id=b, spouse2_id=a
        ).spouse_ids

    def test_other_spouse(self):
        a, b = uuid4(), uuid4()
        m = marriage(spouse1_id=a, spouse2_id=b)

        assert m.other_spouse(a) == b
        assert m.other_spouse(b) == a
        with pytest.raises(ValueError):
            m.other_spouse(uuid4())

    def test_is_active_on(self):
        m = marriage(
            status=MarriageStatus.DIVORCED,
            start_date=date(1990, 1, 1),
            end_date=date(2000, 1, 1),
        )

        assert not m.is_active
        assert not m.is_active_on(date(1989, 12, 31))
        assert m.is_active_on(date(1995, 1, 1))
        assert not m.is_active_on(date(2000, 1, 1))


class TestMarriageEnd:
    def test_end_sets_terminal_state(self):
        m = marriage()

        m.end(MarriageStatus.WIDOWED, date(2015, 5, 5), MarriageEndReason.DEATH_OF_SPOUSE)

        assert m.status is MarriageStatus.WIDOWED
        assert m.end_date == date(2015, 5, 5)
        assert m.end_reason is MarriageEndReason.DEATH_OF_SPOUSE

    def test_cannot_end_twice(self):
        m = marriage()
        m.end(MarriageStatus.DIVORCED, date(2015, 5, 5))

        with pytest.raises(InvalidRecordError, match="already ended"):
            m.end(MarriageStatus.DIVORCED, date(2016, 5, 5))

    def test_end_requires_terminal_status(self):
        with pytest.raises(InvalidRecordError):
            marriage().end(MarriageStatus.MARRIED, date(2015, 5, 5))


class TestMarriageAdvisories:
    def test_customary_without_bride_price(self):
        assert marriage().advisories() == [
            "customary marriage has no bride price documented"
        ]

    def test_civil_without_registration(self):
        m = marriage(marriage_type=MarriageType.CIVIL)

        assert m.advisories() == ["civil marriage has no registration number"]

    def test_documented_marriage_has_no_advisories(self):
        m = marriage(marriage_type=MarriageType.CHRISTIAN, registration_number="CH/77")

        assert m.advisories() == []
