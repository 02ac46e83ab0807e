"""Domain facts emitted by the Family aggregate for callers to drain."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from typing import Any
from uuid import UUID, uuid4


def _utc_now() -> datetime:
    return datetime.now(UTC)


class FamilyEventType(str, Enum):
    FAMILY_CREATED = "family_created"
    FAMILY_ARCHIVED = "family_archived"
    MEMBER_ADDED = "member_added"
    MEMBER_UPDATED = "member_updated"
    MEMBER_DECEASED = "member_deceased"
    MEMBER_REMOVED = "member_removed"
    MARRIAGE_REGISTERED = "marriage_registered"
    MARRIAGE_ENDED = "marriage_ended"
    POLYGAMY_DETECTED = "polygamy_detected"
    HOUSE_ESTABLISHED = "house_established"
    HOUSE_MEMBER_ASSIGNED = "house_member_assigned"
    HOUSE_DISSOLVED = "house_dissolved"
    RELATIONSHIP_DEFINED = "relationship_defined"
    RELATIONSHIP_VERIFIED = "relationship_verified"
    COHABITATION_RECORDED = "cohabitation_recorded"
    ADOPTION_RECORDED = "adoption_recorded"


@dataclass(frozen=True)
class FamilyEvent:
    event_type: FamilyEventType
    family_id: UUID
    entity_ids: dict[str, UUID] = field(default_factory=dict)
    payload: dict[str, Any] = field(default_factory=dict)
    id: UUID = field(default_factory=uuid4)
    occurred_at: datetime = field(default_factory=_utc_now)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": str(self.id),
            "event_type": self.event_type.value,
            "family_id": str(self.family_id),
            "entity_ids": {role: str(value) for role, value in self.entity_ids.items()},
            "payload": self.payload,
            "occurred_at": self.occurred_at.isoformat(),
        }


__all__ = ["FamilyEvent", "FamilyEventType"]
