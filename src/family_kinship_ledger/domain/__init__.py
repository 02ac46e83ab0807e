from family_kinship_ledger.domain.adoption import AdoptionRecord
from family_kinship_ledger.domain.cohabitation import CohabitationRecord
from family_kinship_ledger.domain.events import FamilyEvent, FamilyEventType
from family_kinship_ledger.domain.family import Family, FamilyCounters
from family_kinship_ledger.domain.graph import KinshipGraph
from family_kinship_ledger.domain.houses import PolygamousHouse
from family_kinship_ledger.domain.marriages import Marriage
from family_kinship_ledger.domain.members import FamilyMember, MemberUpdate
from family_kinship_ledger.domain.policies import FamilyStructurePolicy
from family_kinship_ledger.domain.relationships import KinshipEdge
from family_kinship_ledger.domain.snapshots import FamilySnapshot

__all__ = [
    "AdoptionRecord",
    "CohabitationRecord",
    "Family",
    "FamilyCounters",
    "FamilyEvent",
    "FamilyEventType",
    "FamilyMember",
    "FamilySnapshot",
    "FamilyStructurePolicy",
    "KinshipEdge",
    "KinshipGraph",
    "Marriage",
    "MemberUpdate",
    "PolygamousHouse",
]
