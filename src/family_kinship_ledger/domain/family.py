"""Family aggregate root: the consistency boundary of a kinship graph.

Every mutation goes through ``Family._commit``. The commit snapshots the
owned state, runs the operation (which checks its preconditions before it
touches anything), recomputes the denormalised counters and polygamy flag,
and then runs the full ``validate`` sweep. Any failure restores the
snapshot, so a rejected mutation leaves no trace. Only a successful commit
appends facts to the pending list and bumps ``version``.

Queries hand out detached copies; holding on to a returned member or
marriage never lets a caller change the family behind the aggregate's back.
"""

from __future__ import annotations

import copy
from collections.abc import Callable
from dataclasses import dataclass, fields
from datetime import UTC, date, datetime
from typing import Any
from uuid import UUID, uuid4

from family_kinship_ledger.domain.adoption import AdoptionRecord
from family_kinship_ledger.domain.cohabitation import CohabitationRecord
from family_kinship_ledger.domain.events import FamilyEvent, FamilyEventType
from family_kinship_ledger.domain.graph import KinshipGraph, active_marriage_tally
from family_kinship_ledger.domain.graph import is_polygamous as _is_polygamous
from family_kinship_ledger.domain.houses import PolygamousHouse
from family_kinship_ledger.domain.marriages import Marriage
from family_kinship_ledger.domain.members import FamilyMember, MemberUpdate
from family_kinship_ledger.domain.policies import FamilyStructurePolicy
from family_kinship_ledger.domain.relationships import KinshipEdge
from family_kinship_ledger.domain.snapshots import FamilySnapshot
from family_kinship_ledger.domain.value_objects import (
    HouseDissolutionReason,
    KenyanCounty,
    LawSection,
    MarriageEndReason,
    MarriageStatus,
    RelationshipType,
    VerificationLevel,
    VerificationMethod,
    VerificationStatus,
)
from family_kinship_ledger.exceptions import (
    ArchiveNotAllowedError,
    CounterMismatchError,
    DuplicateActiveMarriageError,
    DuplicateHouseOrderError,
    DuplicateMemberError,
    DuplicateRecordError,
    DuplicateRelationshipError,
    FamilyArchivedError,
    FamilyMismatchError,
    FutureDateError,
    HouseWithoutPolygamyError,
    InvalidRecordError,
    LineageCycleError,
    MemberReferencedError,
    MissingConsentError,
    NotPolygamousError,
    OrphanedReferenceError,
    RecordNotFoundError,
    UnknownMemberError,
)
from family_kinship_ledger.logging_config import LogContext, get_logger

logger = get_logger(__name__)

POLYGAMY_REASON = "Multiple active marriages detected for a member"


def _utc_now() -> datetime:
    return datetime.now(UTC)


@dataclass
class FamilyCounters:
    """Denormalised tallies, recomputed from the owned collections."""

    as_of: date
    member_count: int = 0
    living_count: int = 0
    deceased_count: int = 0
    minor_count: int = 0
    dependant_count: int = 0
    marriage_count: int = 0
    active_marriage_count: int = 0
    house_count: int = 0
    active_house_count: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if f.name != "as_of"
        }


class Family:
    def __init__(
        self,
        name: str,
        *,
        id: UUID | None = None,
        description: str | None = None,
        creator_id: UUID | None = None,
        clan_name: str | None = None,
        home_county: KenyanCounty | None = None,
        created_at: datetime | None = None,
        policy: FamilyStructurePolicy | None = None,
    ) -> None:
        if not name or not name.strip():
            raise InvalidRecordError("family", "family name is required")
        self.id = id or uuid4()
        self.name = name
        self.description = description
        self.creator_id = creator_id
        self.clan_name = clan_name
        self.home_county = home_county
        self.created_at = created_at or _utc_now()
        self.updated_at = self.created_at
        self.is_archived = False
        self.archived_at: datetime | None = None
        self.archive_reason: str | None = None

        self._policy = policy or FamilyStructurePolicy()
        self._members: dict[UUID, FamilyMember] = {}
        self._marriages: dict[UUID, Marriage] = {}
        self._houses: dict[UUID, PolygamousHouse] = {}
        self._relationships: dict[UUID, KinshipEdge] = {}
        self._cohabitations: dict[UUID, CohabitationRecord] = {}
        self._adoptions: dict[UUID, AdoptionRecord] = {}
        self._counters = FamilyCounters(as_of=date.today())
        self._polygamous = False
        self._polygamy_detected = False
        self._version = 0
        self._pending_events: list[FamilyEvent] = []
        self._advisories: list[tuple[str, str, dict[str, Any]]] = []

    # =========================================================================
    # Factories
    # =========================================================================

    @classmethod
    def create(
        cls,
        name: str,
        *,
        founder: FamilyMember | None = None,
        creator_id: UUID | None = None,
        family_id: UUID | None = None,
        description: str | None = None,
        clan_name: str | None = None,
        home_county: KenyanCounty | None = None,
        policy: FamilyStructurePolicy | None = None,
    ) -> Family:
        """Create a new family, optionally seeded with its founding member."""
        if family_id is None and founder is not None:
            family_id = founder.family_id
        family = cls(
            name,
            id=family_id,
            description=description,
            creator_id=creator_id,
            clan_name=clan_name,
            home_county=home_county,
            policy=policy,
        )

        def mutate() -> list[FamilyEvent]:
            events = [
                family._event(
                    FamilyEventType.FAMILY_CREATED,
                    payload={
                        "name": family.name,
                        "creator_id": str(creator_id) if creator_id else None,
                    },
                )
            ]
            if founder is not None:
                events.extend(family._add_member(founder))
            return events

        family._commit("create", mutate)
        return family

    @classmethod
    def reconstitute(
        cls, snapshot: FamilySnapshot, policy: FamilyStructurePolicy | None = None
    ) -> Family:
        """Rebuild a stored family; emits nothing and fails closed if corrupt."""
        family = cls(
            snapshot.name,
            id=snapshot.id,
            description=snapshot.description,
            creator_id=snapshot.creator_id,
            clan_name=snapshot.clan_name,
            home_county=snapshot.home_county,
            created_at=snapshot.created_at,
            policy=policy,
        )
        family.updated_at = snapshot.updated_at
        family.is_archived = snapshot.is_archived
        family.archived_at = snapshot.archived_at
        family.archive_reason = snapshot.archive_reason
        family._members = _index("member", snapshot.members)
        family._marriages = _index("marriage", snapshot.marriages)
        family._houses = _index("house", snapshot.houses)
        family._relationships = _index("relationship", snapshot.relationships)
        family._cohabitations = _index("cohabitation", snapshot.cohabitations)
        family._adoptions = _index("adoption", snapshot.adoptions)
        family._version = snapshot.version
        family._recompute()
        family._polygamy_detected = snapshot.polygamy_detected or family._polygamous
        family.validate()
        return family

    def snapshot(self) -> FamilySnapshot:
        return FamilySnapshot(
            id=self.id,
            name=self.name,
            version=self._version,
            description=self.description,
            creator_id=self.creator_id,
            clan_name=self.clan_name,
            home_county=self.home_county,
            created_at=self.created_at,
            updated_at=self.updated_at,
            is_archived=self.is_archived,
            archived_at=self.archived_at,
            archive_reason=self.archive_reason,
            polygamy_detected=self._polygamy_detected,
            members=self.members(),
            marriages=self.marriages(),
            houses=self.houses(),
            relationships=self.relationships(),
            cohabitations=self.cohabitations(),
            adoptions=self.adoptions(),
        )

    # =========================================================================
    # Commit path
    # =========================================================================

    def _commit(
        self, operation: str, mutate: Callable[[], list[FamilyEvent]]
    ) -> list[FamilyEvent]:
        self._ensure_not_archived()
        saved = self._capture()
        with LogContext(family_id=str(self.id), operation=operation):
            try:
                events = mutate()
                self._recompute()
                self.validate()
            except Exception as exc:
                self._restore(saved)
                self._advisories.clear()
                logger.warning(
                    "family_mutation_rejected",
                    error=getattr(exc, "error_code", type(exc).__name__),
                    reason=str(exc),
                )
                raise

            for category, message, context in self._advisories:
                logger.warning(category, advisory=message, **context)
            self._advisories.clear()
            self._pending_events.extend(events)
            self._version += 1
            self.updated_at = _utc_now()
            logger.info(
                "family_mutation_committed",
                version=self._version,
                events=[event.event_type.value for event in events],
            )
        return events

    def _capture(self) -> dict[str, Any]:
        return copy.deepcopy(
            {
                "members": self._members,
                "marriages": self._marriages,
                "houses": self._houses,
                "relationships": self._relationships,
                "cohabitations": self._cohabitations,
                "adoptions": self._adoptions,
                "counters": self._counters,
                "polygamous": self._polygamous,
                "polygamy_detected": self._polygamy_detected,
                "is_archived": self.is_archived,
                "archived_at": self.archived_at,
                "archive_reason": self.archive_reason,
            }
        )

    def _restore(self, saved: dict[str, Any]) -> None:
        self._members = saved["members"]
        self._marriages = saved["marriages"]
        self._houses = saved["houses"]
        self._relationships = saved["relationships"]
        self._cohabitations = saved["cohabitations"]
        self._adoptions = saved["adoptions"]
        self._counters = saved["counters"]
        self._polygamous = saved["polygamous"]
        self._polygamy_detected = saved["polygamy_detected"]
        self.is_archived = saved["is_archived"]
        self.archived_at = saved["archived_at"]
        self.archive_reason = saved["archive_reason"]

    def _recompute(self) -> None:
        self._counters = self._count(date.today())
        self._polygamous = self.is_polygamous()

    def _count(self, as_of: date) -> FamilyCounters:
        policy = self._policy
        members = self._members.values()
        return FamilyCounters(
            as_of=as_of,
            member_count=len(self._members),
            living_count=sum(1 for m in members if m.is_living),
            deceased_count=sum(1 for m in members if m.is_deceased),
            minor_count=sum(
                1 for m in members if m.is_living and m.is_minor(policy.adult_age, as_of)
            ),
            dependant_count=sum(
                1
                for m in members
                if m.is_potential_dependant(policy.adult_age, policy.elder_age, as_of)
            ),
            marriage_count=len(self._marriages),
            active_marriage_count=sum(1 for m in self._marriages.values() if m.is_active),
            house_count=len(self._houses),
            active_house_count=sum(1 for h in self._houses.values() if h.is_active),
        )

    def _event(
        self,
        event_type: FamilyEventType,
        payload: dict[str, Any] | None = None,
        **entity_ids: UUID,
    ) -> FamilyEvent:
        return FamilyEvent(
            event_type=event_type,
            family_id=self.id,
            entity_ids=entity_ids,
            payload=payload or {},
        )

    def _advise(self, category: str, message: str, **context: Any) -> None:
        self._advisories.append((category, message, context))

    def _ensure_not_archived(self) -> None:
        if self.is_archived:
            raise FamilyArchivedError(self.id)

    def _check_family(self, record_type: str, family_id: UUID) -> None:
        if family_id != self.id:
            raise FamilyMismatchError(record_type, self.id, family_id)

    def _require_member(self, member_id: UUID) -> FamilyMember:
        member = self._members.get(member_id)
        if member is None:
            raise UnknownMemberError(member_id)
        return member

    def _require(self, record_type: str, records: dict[UUID, Any], record_id: UUID) -> Any:
        record = records.get(record_id)
        if record is None:
            raise RecordNotFoundError(record_type, record_id)
        return record

    def _graph(self) -> KinshipGraph:
        return KinshipGraph(self._relationships.values())

    # =========================================================================
    # Members
    # =========================================================================

    def add_member(self, member: FamilyMember) -> bool:
        """Add a member; re-adding an identical member is a no-op (False)."""
        self._ensure_not_archived()
        self._check_family("member", member.family_id)
        existing = self._members.get(member.id)
        if existing is not None:
            if existing == member:
                logger.debug("member_already_present", member_id=str(member.id))
                return False
            raise DuplicateMemberError(member.id)
        self._commit("add_member", lambda: self._add_member(member))
        return True

    def _add_member(self, member: FamilyMember) -> list[FamilyEvent]:
        self._check_family("member", member.family_id)
        if member.id in self._members:
            raise DuplicateMemberError(member.id)
        self._members[member.id] = copy.deepcopy(member)
        if (
            member.is_living
            and member.verification_status is not VerificationStatus.VERIFIED
            and not member.is_minor(self._policy.adult_age)
        ):
            self._advise(
                "member_advisory",
                "adult member identity is not verified",
                member_id=str(member.id),
            )
        return [
            self._event(
                FamilyEventType.MEMBER_ADDED,
                payload={"name": member.name.full_name},
                member_id=member.id,
            )
        ]

    def update_member(self, member_id: UUID, update: MemberUpdate) -> bool:
        self._ensure_not_archived()
        member = self._require_member(member_id)
        if all(getattr(member, name) == value for name, value in update.changes().items()):
            return False

        def mutate() -> list[FamilyEvent]:
            changed = self._members[member_id].apply_update(update)
            return [
                self._event(
                    FamilyEventType.MEMBER_UPDATED,
                    payload={"fields": sorted(changed)},
                    member_id=member_id,
                )
            ]

        self._commit("update_member", mutate)
        return True

    def mark_member_deceased(self, member_id: UUID, date_of_death: date) -> None:
        def mutate() -> list[FamilyEvent]:
            member = self._require_member(member_id)
            member.mark_deceased(date_of_death)
            for marriage in self._marriages.values():
                if marriage.is_active and marriage.involves(member_id):
                    self._advise(
                        "marriage_advisory",
                        "deceased member still has an active marriage",
                        member_id=str(member_id),
                        marriage_id=str(marriage.id),
                    )
            return [
                self._event(
                    FamilyEventType.MEMBER_DECEASED,
                    payload={"date_of_death": date_of_death.isoformat()},
                    member_id=member_id,
                )
            ]

        self._commit("mark_member_deceased", mutate)

    def remove_member(self, member_id: UUID) -> None:
        """Remove a member who is not referenced by any other record."""

        def mutate() -> list[FamilyEvent]:
            self._require_member(member_id)
            references = self._references_to(member_id)
            if references:
                record_type, record_id = references[0]
                raise MemberReferencedError(member_id, record_type, record_id)
            del self._members[member_id]
            return [self._event(FamilyEventType.MEMBER_REMOVED, member_id=member_id)]

        self._commit("remove_member", mutate)

    def _references_to(self, member_id: UUID) -> list[tuple[str, UUID]]:
        references: list[tuple[str, UUID]] = []
        references.extend(
            ("marriage", m.id) for m in self._marriages.values() if m.involves(member_id)
        )
        references.extend(
            ("relationship", e.id)
            for e in self._relationships.values()
            if e.involves(member_id)
        )
        references.extend(
            ("house", h.id)
            for h in self._houses.values()
            if member_id in h.referenced_member_ids()
        )
        references.extend(
            ("cohabitation", c.id)
            for c in self._cohabitations.values()
            if c.involves(member_id)
        )
        references.extend(
            ("adoption", a.id) for a in self._adoptions.values() if a.involves(member_id)
        )
        return references

    # =========================================================================
    # Marriages
    # =========================================================================

    def register_marriage(self, marriage: Marriage) -> None:
        self._commit("register_marriage", lambda: self._register_marriage(marriage))

    def _register_marriage(self, marriage: Marriage) -> list[FamilyEvent]:
        self._check_family("marriage", marriage.family_id)
        spouse1 = self._require_member(marriage.spouse1_id)
        spouse2 = self._require_member(marriage.spouse2_id)
        if marriage.start_date > date.today():
            raise FutureDateError("start_date", marriage.start_date)
        if marriage.id in self._marriages:
            raise DuplicateRecordError("marriage", marriage.id)
        if marriage.is_active and any(
            existing.is_active and existing.spouse_ids == marriage.spouse_ids
            for existing in self._marriages.values()
        ):
            raise DuplicateActiveMarriageError(marriage.spouse1_id, marriage.spouse2_id)

        advisories: list[str] = []
        for spouse in (spouse1, spouse2):
            advisories.extend(
                self._policy.check_spouse_eligibility(spouse, marriage.start_date)
            )
        if marriage.is_active:
            self._policy.check_marriage_regime(
                marriage, (spouse1, spouse2), self._active_marriages()
            )
        self._policy.check_prohibited_union(spouse1.id, spouse2.id, self._graph())

        self._marriages[marriage.id] = copy.deepcopy(marriage)
        advisories.extend(marriage.advisories())

        tally = active_marriage_tally(self._marriages.values())
        shared = [
            spouse_id
            for spouse_id in (marriage.spouse1_id, marriage.spouse2_id)
            if tally[spouse_id] > 1
        ]
        if marriage.is_active and shared:
            advisories.extend(self._policy.polygamous_marriage_advisories(marriage))
        for advisory in advisories:
            self._advise("marriage_advisory", advisory, marriage_id=str(marriage.id))

        events = [
            self._event(
                FamilyEventType.MARRIAGE_REGISTERED,
                payload={
                    "marriage_type": marriage.marriage_type.value,
                    "status": marriage.status.value,
                },
                marriage_id=marriage.id,
                spouse1_id=marriage.spouse1_id,
                spouse2_id=marriage.spouse2_id,
            )
        ]
        if not self._polygamy_detected and self.is_polygamous():
            self._polygamy_detected = True
            events.append(
                self._event(
                    FamilyEventType.POLYGAMY_DETECTED,
                    payload={
                        "reason": POLYGAMY_REASON,
                        "member_ids": [str(member_id) for member_id in shared],
                    },
                    marriage_id=marriage.id,
                )
            )
        return events

    def end_marriage(
        self,
        marriage_id: UUID,
        status: MarriageStatus,
        end_date: date,
        reason: MarriageEndReason | None = None,
    ) -> None:
        def mutate() -> list[FamilyEvent]:
            marriage = self._require("marriage", self._marriages, marriage_id)
            if end_date > date.today():
                raise FutureDateError("end_date", end_date)
            marriage.end(status, end_date, reason)
            return [
                self._event(
                    FamilyEventType.MARRIAGE_ENDED,
                    payload={
                        "status": status.value,
                        "reason": reason.value if reason else None,
                        "end_date": end_date.isoformat(),
                    },
                    marriage_id=marriage_id,
                )
            ]

        self._commit("end_marriage", mutate)

    def _active_marriages(self) -> list[Marriage]:
        return [m for m in self._marriages.values() if m.is_active]

    # =========================================================================
    # Polygamous houses
    # =========================================================================

    def establish_polygamous_house(self, house: PolygamousHouse) -> None:
        self._commit(
            "establish_polygamous_house", lambda: self._establish_house(house)
        )

    def _establish_house(self, house: PolygamousHouse) -> list[FamilyEvent]:
        self._check_family("house", house.family_id)
        if house.id in self._houses:
            raise DuplicateRecordError("house", house.id)
        if not self.is_polygamous():
            raise NotPolygamousError(self.id)
        if any(h.house_order == house.house_order for h in self._houses.values()):
            raise DuplicateHouseOrderError(house.house_order)
        if house.house_order > 1 and not house.has_documented_consent:
            raise MissingConsentError(house.house_order)
        for member_id in house.referenced_member_ids():
            self._require_member(member_id)

        for advisory in self._policy.house_advisories(house, self._houses.values()):
            self._advise("house_advisory", advisory, house_id=str(house.id))
        if not any(m.involves(house.original_wife_id) for m in self._active_marriages()):
            self._advise(
                "house_advisory",
                "original wife has no active marriage",
                house_id=str(house.id),
            )

        self._houses[house.id] = copy.deepcopy(house)
        return [
            self._event(
                FamilyEventType.HOUSE_ESTABLISHED,
                payload={"house_order": house.house_order, "house_name": house.house_name},
                house_id=house.id,
                original_wife_id=house.original_wife_id,
            )
        ]

    def assign_member_to_house(self, house_id: UUID, member_id: UUID) -> bool:
        self._ensure_not_archived()
        house = self._require("house", self._houses, house_id)
        self._require_member(member_id)
        if member_id in house.member_ids:
            return False

        def mutate() -> list[FamilyEvent]:
            target = self._houses[house_id]
            if not target.is_active:
                raise InvalidRecordError(
                    "house", "cannot assign members to a dissolved house"
                )
            target.assign_member(member_id)
            return [
                self._event(
                    FamilyEventType.HOUSE_MEMBER_ASSIGNED,
                    house_id=house_id,
                    member_id=member_id,
                )
            ]

        self._commit("assign_member_to_house", mutate)
        return True

    def dissolve_house(
        self,
        house_id: UUID,
        dissolution_date: date,
        reason: HouseDissolutionReason,
    ) -> None:
        def mutate() -> list[FamilyEvent]:
            house = self._require("house", self._houses, house_id)
            if dissolution_date > date.today():
                raise FutureDateError("dissolution_date", dissolution_date)
            house.dissolve(dissolution_date, reason)
            return [
                self._event(
                    FamilyEventType.HOUSE_DISSOLVED,
                    payload={"reason": reason.value},
                    house_id=house_id,
                )
            ]

        self._commit("dissolve_house", mutate)

    # =========================================================================
    # Kinship edges
    # =========================================================================

    def define_relationship(self, edge: KinshipEdge) -> bool:
        """Add a kinship edge; an identical edge already present is a no-op."""
        self._ensure_not_archived()
        self._check_family("relationship", edge.family_id)
        existing = self._relationships.get(edge.id)
        if existing is not None:
            if existing == edge:
                return False
            raise DuplicateRelationshipError(
                edge.from_member_id,
                edge.to_member_id,
                edge.relationship_type.value,
                edge.id,
            )
        if self._find_edge(edge.key) is not None:
            logger.debug("relationship_already_present", edge_key=[str(k) for k in edge.key])
            return False
        self._commit("define_relationship", lambda: self._define_relationship(edge))
        return True

    def _define_relationship(self, edge: KinshipEdge) -> list[FamilyEvent]:
        self._check_family("relationship", edge.family_id)
        self._require_member(edge.from_member_id)
        self._require_member(edge.to_member_id)
        if edge.id in self._relationships or self._find_edge(edge.key) is not None:
            raise DuplicateRelationshipError(
                edge.from_member_id,
                edge.to_member_id,
                edge.relationship_type.value,
                edge.id,
            )
        pair = edge.lineage_pair
        if pair is not None:
            parent_id, child_id = pair
            graph = self._graph()
            if graph.would_create_cycle(parent_id, child_id):
                raise LineageCycleError(graph.path_between(child_id, parent_id) + [child_id])

        self._relationships[edge.id] = copy.deepcopy(edge)
        return [
            self._event(
                FamilyEventType.RELATIONSHIP_DEFINED,
                payload={"relationship_type": edge.relationship_type.value},
                relationship_id=edge.id,
                from_member_id=edge.from_member_id,
                to_member_id=edge.to_member_id,
            )
        ]

    def _find_edge(self, key: tuple[UUID, UUID, RelationshipType]) -> KinshipEdge | None:
        for edge in self._relationships.values():
            if edge.key == key:
                return edge
        return None

    def verify_relationship(
        self,
        edge_id: UUID,
        method: VerificationMethod,
        level: VerificationLevel = VerificationLevel.FULLY_VERIFIED,
        documents: list[str] | None = None,
    ) -> None:
        def mutate() -> list[FamilyEvent]:
            edge = self._require("relationship", self._relationships, edge_id)
            edge.verify(method, level, documents)
            return [
                self._event(
                    FamilyEventType.RELATIONSHIP_VERIFIED,
                    payload={"method": method.value, "level": level.value},
                    relationship_id=edge_id,
                )
            ]

        self._commit("verify_relationship", mutate)

    # =========================================================================
    # Cohabitation and adoption
    # =========================================================================

    def record_cohabitation(self, record: CohabitationRecord) -> None:
        def mutate() -> list[FamilyEvent]:
            self._check_family("cohabitation", record.family_id)
            self._require_member(record.partner1_id)
            self._require_member(record.partner2_id)
            if record.id in self._cohabitations:
                raise DuplicateRecordError("cohabitation", record.id)
            partners = frozenset((record.partner1_id, record.partner2_id))
            if any(m.spouse_ids == partners for m in self._active_marriages()):
                self._advise(
                    "member_advisory",
                    "cohabiting partners are also married to each other",
                    cohabitation_id=str(record.id),
                )
            self._cohabitations[record.id] = copy.deepcopy(record)
            return [
                self._event(
                    FamilyEventType.COHABITATION_RECORDED,
                    payload={"cohabitation_type": record.cohabitation_type.value},
                    cohabitation_id=record.id,
                    partner1_id=record.partner1_id,
                    partner2_id=record.partner2_id,
                )
            ]

        self._commit("record_cohabitation", mutate)

    def record_adoption(self, record: AdoptionRecord) -> None:
        """Record an adoption together with its legal PARENT edge."""

        def mutate() -> list[FamilyEvent]:
            self._check_family("adoption", record.family_id)
            adoptee = self._require_member(record.adoptee_id)
            parent = self._require_member(record.adoptive_parent_id)
            if record.id in self._adoptions:
                raise DuplicateRecordError("adoption", record.id)
            existing_parents = len(self._graph().parents_of(record.adoptee_id))
            for advisory in self._policy.adoption_advisories(
                record, adoptee, parent, existing_parents
            ):
                self._advise("adoption_advisory", advisory, adoption_id=str(record.id))

            self._adoptions[record.id] = copy.deepcopy(record)
            events = [
                self._event(
                    FamilyEventType.ADOPTION_RECORDED,
                    payload={
                        "adoption_type": record.adoption_type.value,
                        "status": record.adoption_status.value,
                    },
                    adoption_id=record.id,
                    adoptee_id=record.adoptee_id,
                    adoptive_parent_id=record.adoptive_parent_id,
                )
            ]
            edge = self._adoption_edge(record)
            if self._find_edge(edge.key) is None:
                events.extend(self._define_relationship(edge))
            return events

        self._commit("record_adoption", mutate)

    def _adoption_edge(self, record: AdoptionRecord) -> KinshipEdge:
        if record.is_finalized and record.has_court_order:
            level = VerificationLevel.FULLY_VERIFIED
        else:
            level = VerificationLevel.PARTIALLY_VERIFIED
        if record.has_court_order:
            method: VerificationMethod | None = VerificationMethod.COURT_ORDER
        elif record.consent_documents:
            method = VerificationMethod.DOCUMENT
        else:
            method = None
        documents = list(record.consent_documents)
        if record.court_order_number:
            documents.insert(0, record.court_order_number)
        return KinshipEdge(
            family_id=self.id,
            from_member_id=record.adoptive_parent_id,
            to_member_id=record.adoptee_id,
            relationship_type=RelationshipType.PARENT,
            is_biological=False,
            is_legal=True,
            verification_level=level,
            verification_method=method,
            legal_basis=list(record.legal_basis) or [LawSection.S29_DEPENDANTS],
            legal_documents=documents,
            adoption_order_id=record.court_order_number,
            start_date=record.finalization_date,
        )

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def archive(self, reason: str) -> None:
        def mutate() -> list[FamilyEvent]:
            if self._counters.living_count:
                raise ArchiveNotAllowedError(self.id, self._counters.living_count)
            self.is_archived = True
            self.archived_at = _utc_now()
            self.archive_reason = reason
            return [
                self._event(FamilyEventType.FAMILY_ARCHIVED, payload={"reason": reason})
            ]

        self._commit("archive", mutate)

    # =========================================================================
    # Validation
    # =========================================================================

    def validate(self) -> None:
        """Sweep every structural invariant; raise the first violation."""
        self._validate_identities()
        self._validate_references()
        cycle = self._graph().find_cycle()
        if cycle is not None:
            raise LineageCycleError(cycle)
        if not self.is_polygamous():
            for house in self._houses.values():
                if house.is_active:
                    raise HouseWithoutPolygamyError(house.id)
        self._validate_counters()

    def _validate_identities(self) -> None:
        for member_id, member in self._members.items():
            if member.id != member_id:
                raise DuplicateMemberError(member.id)
        seen_keys: set[tuple[UUID, UUID, RelationshipType]] = set()
        for edge in self._relationships.values():
            if edge.key in seen_keys:
                raise DuplicateRelationshipError(
                    edge.from_member_id,
                    edge.to_member_id,
                    edge.relationship_type.value,
                    edge.id,
                )
            seen_keys.add(edge.key)
        seen_orders: set[int] = set()
        for house in self._houses.values():
            if house.house_order in seen_orders:
                raise DuplicateHouseOrderError(house.house_order)
            seen_orders.add(house.house_order)
        seen_pairs: set[frozenset[UUID]] = set()
        for marriage in self._active_marriages():
            if marriage.spouse_ids in seen_pairs:
                raise DuplicateActiveMarriageError(
                    marriage.spouse1_id, marriage.spouse2_id
                )
            seen_pairs.add(marriage.spouse_ids)

    def _validate_references(self) -> None:
        records: list[tuple[str, Any, set[UUID]]] = []
        records.extend(
            ("marriage", m, {m.spouse1_id, m.spouse2_id})
            for m in self._marriages.values()
        )
        records.extend(
            ("relationship", e, {e.from_member_id, e.to_member_id})
            for e in self._relationships.values()
        )
        records.extend(
            ("house", h, h.referenced_member_ids()) for h in self._houses.values()
        )
        records.extend(
            ("cohabitation", c, {c.partner1_id, c.partner2_id})
            for c in self._cohabitations.values()
        )
        records.extend(
            ("adoption", a, {a.adoptee_id, a.adoptive_parent_id})
            for a in self._adoptions.values()
        )
        for member in self._members.values():
            self._check_family("member", member.family_id)
        for record_type, record, member_ids in records:
            self._check_family(record_type, record.family_id)
            for member_id in member_ids:
                if member_id not in self._members:
                    raise OrphanedReferenceError(record_type, record.id, member_id)

    def _validate_counters(self) -> None:
        actual = self._count(self._counters.as_of)
        for f in fields(actual):
            stored_value = getattr(self._counters, f.name)
            actual_value = getattr(actual, f.name)
            if stored_value != actual_value:
                raise CounterMismatchError(f.name, stored_value, actual_value)

    # =========================================================================
    # Queries
    # =========================================================================

    @property
    def version(self) -> int:
        return self._version

    @property
    def policy(self) -> FamilyStructurePolicy:
        return self._policy

    @property
    def counters(self) -> FamilyCounters:
        return copy.copy(self._counters)

    @property
    def polygamy_status(self) -> bool:
        """Polygamy flag as of the last commit."""
        return self._polygamous

    @property
    def polygamy_detected(self) -> bool:
        """Whether POLYGAMY_DETECTED has ever been emitted for this family."""
        return self._polygamy_detected

    @property
    def pending_events(self) -> tuple[FamilyEvent, ...]:
        return tuple(self._pending_events)

    def pull_events(self) -> list[FamilyEvent]:
        """Drain the pending facts in emission order."""
        events, self._pending_events = self._pending_events, []
        return events

    def is_polygamous(self) -> bool:
        return _is_polygamous(self._marriages.values(), len(self._houses))

    def get_member(self, member_id: UUID) -> FamilyMember | None:
        member = self._members.get(member_id)
        return copy.deepcopy(member) if member is not None else None

    def has_member(self, member_id: UUID) -> bool:
        return member_id in self._members

    def members(self) -> list[FamilyMember]:
        return copy.deepcopy(list(self._members.values()))

    def marriages(self) -> list[Marriage]:
        return copy.deepcopy(list(self._marriages.values()))

    def active_marriages(self) -> list[Marriage]:
        return copy.deepcopy(self._active_marriages())

    def houses(self) -> list[PolygamousHouse]:
        return copy.deepcopy(sorted(self._houses.values(), key=lambda h: h.house_order))

    def relationships(self) -> list[KinshipEdge]:
        return copy.deepcopy(list(self._relationships.values()))

    def cohabitations(self) -> list[CohabitationRecord]:
        return copy.deepcopy(list(self._cohabitations.values()))

    def adoptions(self) -> list[AdoptionRecord]:
        return copy.deepcopy(list(self._adoptions.values()))

    def get_spouses(self, member_id: UUID) -> list[FamilyMember]:
        self._require_member(member_id)
        return [
            copy.deepcopy(self._members[marriage.other_spouse(member_id)])
            for marriage in self._active_marriages()
            if marriage.involves(member_id)
        ]

    def get_children(self, member_id: UUID) -> list[FamilyMember]:
        self._require_member(member_id)
        return self._detached(self._graph().children_of(member_id))

    def get_parents(self, member_id: UUID) -> list[FamilyMember]:
        self._require_member(member_id)
        return self._detached(self._graph().parents_of(member_id))

    def get_siblings(self, member_id: UUID) -> list[FamilyMember]:
        self._require_member(member_id)
        graph = self._graph()
        sibling_ids: list[UUID] = []
        for parent_id in graph.parents_of(member_id):
            for child_id in graph.children_of(parent_id):
                if child_id != member_id and child_id not in sibling_ids:
                    sibling_ids.append(child_id)
        return self._detached(sibling_ids)

    def members_with_multiple_active_marriages(self) -> list[UUID]:
        tally = active_marriage_tally(self._marriages.values())
        return [member_id for member_id, count in tally.items() if count > 1]

    def generation_count(self) -> int:
        if not self._members:
            return 0
        return max(self._graph().generation_count(), 1)

    def _detached(self, member_ids: list[UUID]) -> list[FamilyMember]:
        return [copy.deepcopy(self._members[mid]) for mid in member_ids]

    def __repr__(self) -> str:
        return (
            f"Family(id={self.id!s}, name={self.name!r}, "
            f"members={len(self._members)}, version={self._version})"
        )


def _index(record_type: str, records: list[Any]) -> dict[UUID, Any]:
    indexed: dict[UUID, Any] = {}
    for record in records:
        if record.id in indexed:
            if record_type == "member":
                raise DuplicateMemberError(record.id)
            raise DuplicateRecordError(record_type, record.id)
        indexed[record.id] = copy.deepcopy(record)
    return indexed


__all__ = ["Family", "FamilyCounters", "POLYGAMY_REASON"]
