"""Point-in-time snapshot of a family, and its JSON-safe serialisation.

Snapshots are what the repository stores and what ``Family.reconstitute``
consumes. Serialisation goes through a pydantic ``TypeAdapter`` so the
entity dataclasses are validated (and their ``__post_init__`` checks rerun)
on the way back in.
"""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any
from uuid import UUID

from pydantic import TypeAdapter

from family_kinship_ledger.domain.adoption import AdoptionRecord
from family_kinship_ledger.domain.cohabitation import CohabitationRecord
from family_kinship_ledger.domain.houses import PolygamousHouse
from family_kinship_ledger.domain.marriages import Marriage
from family_kinship_ledger.domain.members import FamilyMember
from family_kinship_ledger.domain.relationships import KinshipEdge
from family_kinship_ledger.domain.value_objects import KenyanCounty


def _utc_now() -> datetime:
    return datetime.now(UTC)


@dataclass
class FamilySnapshot:
    id: UUID
    name: str
    version: int
    description: str | None = None
    creator_id: UUID | None = None
    clan_name: str | None = None
    home_county: KenyanCounty | None = None
    created_at: datetime = field(default_factory=_utc_now)
    updated_at: datetime = field(default_factory=_utc_now)
    is_archived: bool = False
    archived_at: datetime | None = None
    archive_reason: str | None = None
    polygamy_detected: bool = False
    members: list[FamilyMember] = field(default_factory=list)
    marriages: list[Marriage] = field(default_factory=list)
    houses: list[PolygamousHouse] = field(default_factory=list)
    relationships: list[KinshipEdge] = field(default_factory=list)
    cohabitations: list[CohabitationRecord] = field(default_factory=list)
    adoptions: list[AdoptionRecord] = field(default_factory=list)


_snapshot_adapter: TypeAdapter[FamilySnapshot] = TypeAdapter(FamilySnapshot)


def snapshot_to_dict(snapshot: FamilySnapshot) -> dict[str, Any]:
    return _snapshot_adapter.dump_python(snapshot, mode="json")


def snapshot_from_dict(data: dict[str, Any]) -> FamilySnapshot:
    return _snapshot_adapter.validate_python(data)


def snapshot_to_json(snapshot: FamilySnapshot, *, indent: int | None = None) -> str:
    return _snapshot_adapter.dump_json(snapshot, indent=indent).decode("utf-8")


def snapshot_from_json(payload: str | bytes) -> FamilySnapshot:
    return _snapshot_adapter.validate_json(payload)


__all__ = [
    "FamilySnapshot",
    "snapshot_from_dict",
    "snapshot_from_json",
    "snapshot_to_dict",
    "snapshot_to_json",
]
