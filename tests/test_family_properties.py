"""Property-based tests for the Family aggregate's structural invariants."""

from datetime import date
from uuid import uuid4

from hypothesis import given, settings
from hypothesis import strategies as st
from hypothesis.stateful import (
    RuleBasedStateMachine,
    initialize,
    invariant,
    precondition,
    rule,
)

from family_kinship_ledger.domain.family import Family
from family_kinship_ledger.domain.graph import KinshipGraph, is_polygamous
from family_kinship_ledger.domain.marriages import Marriage
from family_kinship_ledger.domain.members import FamilyMember
from family_kinship_ledger.domain.policies import FamilyStructurePolicy
from family_kinship_ledger.domain.relationships import KinshipEdge
from family_kinship_ledger.domain.value_objects import (
    Gender,
    MarriageStatus,
    MarriageType,
    PersonName,
    RelationshipType,
)
from family_kinship_ledger.exceptions import FamilyKinshipError, LineageCycleError

POOL_SIZE = 6
LINEAGE_TYPES = [
    RelationshipType.PARENT,
    RelationshipType.CHILD,
    RelationshipType.ADOPTED_CHILD,
]

member_index = st.integers(min_value=0, max_value=POOL_SIZE - 1)
distinct_pair = st.tuples(member_index, member_index).filter(lambda p: p[0] != p[1])


def build_family() -> tuple[Family, list[FamilyMember]]:
    family_id = uuid4()
    members = [
        FamilyMember(
            family_id=family_id,
            name=PersonName(f"Member{i}", "Kamau"),
            gender=Gender.MALE if i % 2 == 0 else Gender.FEMALE,
            date_of_birth=date(1950 + i, 1, 1),
        )
        for i in range(POOL_SIZE)
    ]
    family = Family.create(
        "Property Family",
        family_id=family_id,
        policy=FamilyStructurePolicy(enforce_marriage_regime=False),
    )
    for member in members:
        family.add_member(member)
    return family, members


class TestLineageAcyclicity:
    @given(st.lists(st.tuples(distinct_pair, st.sampled_from(LINEAGE_TYPES)), max_size=25))
    @settings(max_examples=60, deadline=None)
    def test_accepted_edges_never_form_a_cycle(self, requests) -> None:
        family, members = build_family()

        for (i, j), relationship_type in requests:
            edge = KinshipEdge(
                family_id=family.id,
                from_member_id=members[i].id,
                to_member_id=members[j].id,
                relationship_type=relationship_type,
            )
            parent_id, child_id = edge.lineage_pair
            expect_cycle = KinshipGraph(family.relationships()).would_create_cycle(
                parent_id, child_id
            )
            edges_before = family.relationships()
            try:
                family.define_relationship(edge)
            except LineageCycleError:
                assert expect_cycle
                assert family.relationships() == edges_before
            else:
                assert not expect_cycle

        assert KinshipGraph(family.relationships()).find_cycle() is None
        family.validate()


class FamilyStateMachine(RuleBasedStateMachine):
    """Random mutation sequences keep the aggregate structurally valid."""

    @initialize()
    def setup(self) -> None:
        self.family, self.members = build_family()
        self.last_version = self.family.version

    def _edge(self, i: int, j: int, relationship_type: RelationshipType) -> KinshipEdge:
        return KinshipEdge(
            family_id=self.family.id,
            from_member_id=self.members[i].id,
            to_member_id=self.members[j].id,
            relationship_type=relationship_type,
        )

    @rule(pair=distinct_pair, relationship_type=st.sampled_from(LINEAGE_TYPES))
    def define_lineage(self, pair, relationship_type) -> None:
        version = self.family.version
        try:
            added = self.family.define_relationship(self._edge(*pair, relationship_type))
        except LineageCycleError:
            assert self.family.version == version
        else:
            assert self.family.version == version + (1 if added else 0)

    @rule(pair=distinct_pair)
    def define_sibling(self, pair) -> None:
        self.family.define_relationship(self._edge(*pair, RelationshipType.SIBLING))

    @rule(pair=distinct_pair)
    def register_marriage(self, pair) -> None:
        i, j = pair
        was_polygamous = self.family.is_polygamous()
        version = self.family.version
        marriage = Marriage(
            family_id=self.family.id,
            spouse1_id=self.members[i].id,
            spouse2_id=self.members[j].id,
            marriage_type=MarriageType.CUSTOMARY,
            start_date=date(2000, 1, 1),
        )
        try:
            self.family.register_marriage(marriage)
        except FamilyKinshipError:
            assert self.family.version == version
            return
        if was_polygamous:
            assert self.family.is_polygamous()

    @precondition(lambda self: self.family.active_marriages())
    @rule(data=st.data())
    def end_marriage(self, data) -> None:
        marriage = data.draw(st.sampled_from(self.family.active_marriages()))
        self.family.end_marriage(marriage.id, MarriageStatus.DIVORCED, date(2010, 1, 1))

    @rule()
    def drain_events(self) -> None:
        self.family.pull_events()
        assert self.family.pending_events == ()

    @invariant()
    def lineage_is_acyclic(self) -> None:
        assert KinshipGraph(self.family.relationships()).find_cycle() is None

    @invariant()
    def edge_keys_are_unique(self) -> None:
        keys = [edge.key for edge in self.family.relationships()]
        assert len(keys) == len(set(keys))

    @invariant()
    def references_stay_inside_family(self) -> None:
        member_ids = {m.id for m in self.family.members()}
        for edge in self.family.relationships():
            assert {edge.from_member_id, edge.to_member_id} <= member_ids
        for marriage in self.family.marriages():
            assert marriage.spouse_ids <= member_ids

    @invariant()
    def version_is_monotonic(self) -> None:
        assert self.family.version >= self.last_version
        self.last_version = self.family.version

    @invariant()
    def polygamy_flag_matches_marriages(self) -> None:
        expected = is_polygamous(self.family.marriages(), len(self.family.houses()))
        assert self.family.polygamy_status == expected

    @invariant()
    def counters_match_collections(self) -> None:
        counters = self.family.counters
        assert counters.member_count == POOL_SIZE
        assert counters.active_marriage_count == len(self.family.active_marriages())


FamilyStateMachine.TestCase.settings = settings(
    max_examples=30, stateful_step_count=25, deadline=None
)
TestFamilyStateMachine = FamilyStateMachine.TestCase
