"""Domain exception hierarchy for Family Kinship Ledger.

All domain-specific exceptions inherit from FamilyKinshipError. Three kinds
matter to callers of the Family aggregate:

- StructuralInvariantError: the mutation would leave the kinship graph
  inconsistent (duplicates, cycles, orphaned references).
- PreconditionError: the request is not allowed in the family's current
  state (unknown member, self-marriage, missing consent, archived family).
- InvalidRecordError: a record failed its own field validation.

Persistence errors (FamilyNotFoundError, VersionConflictError) sit beside
them.
"""

from datetime import date
from typing import Any
from uuid import UUID


class FamilyKinshipError(Exception):
    """Base exception for all Family Kinship Ledger errors.

    Includes an error_code, an HTTP-style status_code and extra context so
    callers can render any failure uniformly.
    """

    error_code: str = "FKL_ERROR"
    status_code: int = 500

    def __init__(
        self,
        message: str,
        *,
        error_code: str | None = None,
        status_code: int | None = None,
        context: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        if error_code:
            self.error_code = error_code
        if status_code:
            self.status_code = status_code
        self.context = context or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to dictionary for API or CLI output."""
        return {
            "error": self.error_code,
            "message": self.message,
            "context": self.context,
        }


# =============================================================================
# Structural Invariant Errors
# =============================================================================


class StructuralInvariantError(FamilyKinshipError):
    """Base exception for violations of the kinship graph's invariants."""

    error_code = "STRUCTURAL_INVARIANT_VIOLATION"
    status_code = 409


class DuplicateMemberError(StructuralInvariantError):
    error_code = "DUPLICATE_MEMBER"

    def __init__(self, member_id: UUID) -> None:
        super().__init__(
            f"Member {member_id} is already part of this family with different details",
            context={"member_id": str(member_id)},
        )


class DuplicateRelationshipError(StructuralInvariantError):
    error_code = "DUPLICATE_RELATIONSHIP"

    def __init__(
        self,
        from_member_id: UUID,
        to_member_id: UUID,
        relationship_type: str,
        edge_id: UUID | None = None,
    ) -> None:
        super().__init__(
            f"Relationship {relationship_type} from {from_member_id} "
            f"to {to_member_id} conflicts with an existing edge",
            context={
                "from_member_id": str(from_member_id),
                "to_member_id": str(to_member_id),
                "relationship_type": relationship_type,
                "edge_id": str(edge_id) if edge_id else None,
            },
        )


class DuplicateHouseOrderError(StructuralInvariantError):
    error_code = "DUPLICATE_HOUSE_ORDER"

    def __init__(self, house_order: int) -> None:
        super().__init__(
            f"House #{house_order} already exists",
            context={"house_order": house_order},
        )


class DuplicateActiveMarriageError(StructuralInvariantError):
    error_code = "DUPLICATE_ACTIVE_MARRIAGE"

    def __init__(self, spouse1_id: UUID, spouse2_id: UUID) -> None:
        super().__init__(
            f"An active marriage already exists between {spouse1_id} and {spouse2_id}",
            context={"spouse1_id": str(spouse1_id), "spouse2_id": str(spouse2_id)},
        )


class DuplicateRecordError(StructuralInvariantError):
    error_code = "DUPLICATE_RECORD"

    def __init__(self, record_type: str, record_id: UUID) -> None:
        super().__init__(
            f"{record_type} {record_id} is already recorded",
            context={"record_type": record_type, "record_id": str(record_id)},
        )


class OrphanedReferenceError(StructuralInvariantError):
    """Raised when a record references a member outside the family."""

    error_code = "ORPHANED_REFERENCE"

    def __init__(self, record_type: str, record_id: UUID, member_id: UUID) -> None:
        super().__init__(
            f"{record_type} {record_id} references member {member_id} "
            "who is not part of this family",
            context={
                "record_type": record_type,
                "record_id": str(record_id),
                "member_id": str(member_id),
            },
        )


class LineageCycleError(StructuralInvariantError):
    """Raised when a parent/child edge would make someone their own ancestor."""

    error_code = "LINEAGE_CYCLE"

    def __init__(self, cycle_path: list[UUID]) -> None:
        self.cycle_path = cycle_path
        path_str = " -> ".join(str(member_id) for member_id in cycle_path)
        super().__init__(
            f"Lineage cycle detected: {path_str}",
            context={"cycle_path": [str(member_id) for member_id in cycle_path]},
        )


class HouseWithoutPolygamyError(StructuralInvariantError):
    error_code = "HOUSE_WITHOUT_POLYGAMY"

    def __init__(self, house_id: UUID) -> None:
        super().__init__(
            f"Active house {house_id} exists but the family is not polygamous",
            context={"house_id": str(house_id)},
        )


class CounterMismatchError(StructuralInvariantError):
    error_code = "COUNTER_MISMATCH"

    def __init__(self, counter: str, stored: int, actual: int) -> None:
        super().__init__(
            f"Counter {counter} is {stored} but the family holds {actual}",
            context={"counter": counter, "stored": stored, "actual": actual},
        )


class MemberReferencedError(StructuralInvariantError):
    error_code = "MEMBER_REFERENCED"

    def __init__(self, member_id: UUID, record_type: str, record_id: UUID) -> None:
        super().__init__(
            f"Member {member_id} is still referenced by {record_type} {record_id}",
            context={
                "member_id": str(member_id),
                "record_type": record_type,
                "record_id": str(record_id),
            },
        )


# =============================================================================
# Precondition Errors
# =============================================================================


class PreconditionError(FamilyKinshipError):
    """Base exception for requests the family's current state does not allow."""

    error_code = "PRECONDITION_FAILED"
    status_code = 422


class FamilyMismatchError(PreconditionError):
    error_code = "FAMILY_MISMATCH"

    def __init__(self, record_type: str, expected: UUID, actual: UUID) -> None:
        super().__init__(
            f"{record_type} belongs to family {actual}, not {expected}",
            context={
                "record_type": record_type,
                "expected_family_id": str(expected),
                "actual_family_id": str(actual),
            },
        )


class UnknownMemberError(PreconditionError):
    error_code = "UNKNOWN_MEMBER"

    def __init__(self, member_id: UUID) -> None:
        super().__init__(
            f"Member {member_id} is not part of this family",
            context={"member_id": str(member_id)},
        )


class SelfMarriageError(PreconditionError):
    error_code = "SELF_MARRIAGE"

    def __init__(self, member_id: UUID) -> None:
        super().__init__(
            f"Member {member_id} cannot marry themselves",
            context={"member_id": str(member_id)},
        )


class SelfRelationshipError(PreconditionError):
    error_code = "SELF_RELATIONSHIP"

    def __init__(self, member_id: UUID) -> None:
        super().__init__(
            f"Member {member_id} cannot be related to themselves",
            context={"member_id": str(member_id)},
        )


class FutureDateError(PreconditionError):
    error_code = "FUTURE_DATE"

    def __init__(self, field_name: str, value: date) -> None:
        super().__init__(
            f"{field_name} cannot be in the future: {value.isoformat()}",
            context={"field": field_name, "value": value.isoformat()},
        )


class IneligibleSpouseError(PreconditionError):
    error_code = "INELIGIBLE_SPOUSE"

    def __init__(self, member_id: UUID, reason: str) -> None:
        super().__init__(
            f"Member {member_id} cannot be married: {reason}",
            context={"member_id": str(member_id), "reason": reason},
        )


class MissingConsentError(PreconditionError):
    error_code = "MISSING_WIVES_CONSENT"

    def __init__(self, house_order: int) -> None:
        super().__init__(
            f"House #{house_order} requires documented consent of the existing wives",
            context={"house_order": house_order},
        )


class MarriageRegimeViolationError(PreconditionError):
    error_code = "MARRIAGE_REGIME_VIOLATION"

    def __init__(self, member_id: UUID, marriage_type: str, reason: str) -> None:
        super().__init__(
            f"{marriage_type} marriage not allowed for member {member_id}: {reason}",
            context={
                "member_id": str(member_id),
                "marriage_type": marriage_type,
                "reason": reason,
            },
        )


class ProhibitedUnionError(PreconditionError):
    error_code = "PROHIBITED_UNION"

    def __init__(self, spouse1_id: UUID, spouse2_id: UUID, reason: str) -> None:
        super().__init__(
            f"Marriage between {spouse1_id} and {spouse2_id} is prohibited: {reason}",
            context={
                "spouse1_id": str(spouse1_id),
                "spouse2_id": str(spouse2_id),
                "reason": reason,
            },
        )


class NotPolygamousError(PreconditionError):
    error_code = "NOT_POLYGAMOUS"

    def __init__(self, family_id: UUID) -> None:
        super().__init__(
            f"Family {family_id} has no polygamous marriage to found a house on",
            context={"family_id": str(family_id)},
        )


class FamilyArchivedError(PreconditionError):
    error_code = "FAMILY_ARCHIVED"

    def __init__(self, family_id: UUID) -> None:
        super().__init__(
            f"Family {family_id} is archived and cannot be modified",
            context={"family_id": str(family_id)},
        )


class ArchiveNotAllowedError(PreconditionError):
    error_code = "ARCHIVE_NOT_ALLOWED"

    def __init__(self, family_id: UUID, living_members: int) -> None:
        super().__init__(
            f"Family {family_id} still has {living_members} living member(s)",
            context={"family_id": str(family_id), "living_members": living_members},
        )


# =============================================================================
# Record Errors
# =============================================================================


class InvalidRecordError(FamilyKinshipError):
    """Raised when a record fails its own field validation."""

    error_code = "INVALID_RECORD"
    status_code = 422

    def __init__(self, record_type: str, reason: str, **context: Any) -> None:
        super().__init__(
            f"Invalid {record_type}: {reason}",
            context={"record_type": record_type, "reason": reason, **context},
        )


class RecordNotFoundError(FamilyKinshipError):
    error_code = "RECORD_NOT_FOUND"
    status_code = 404

    def __init__(self, record_type: str, record_id: UUID) -> None:
        super().__init__(
            f"{record_type} not found: {record_id}",
            context={"record_type": record_type, "record_id": str(record_id)},
        )


# =============================================================================
# Persistence Errors
# =============================================================================


class FamilyNotFoundError(FamilyKinshipError):
    error_code = "FAMILY_NOT_FOUND"
    status_code = 404

    def __init__(self, family_id: UUID | str) -> None:
        super().__init__(
            f"Family not found: {family_id}",
            context={"family_id": str(family_id)},
        )


class VersionConflictError(FamilyKinshipError):
    """Raised when a family was changed by someone else since it was loaded."""

    error_code = "VERSION_CONFLICT"
    status_code = 409

    def __init__(self, family_id: UUID, expected: int, actual: int | None) -> None:
        super().__init__(
            f"Family {family_id} is at version {actual}, expected {expected}",
            context={
                "family_id": str(family_id),
                "expected_version": expected,
                "actual_version": actual,
            },
        )
