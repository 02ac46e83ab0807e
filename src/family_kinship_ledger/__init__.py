from family_kinship_ledger.domain.adoption import AdoptionRecord
from family_kinship_ledger.domain.cohabitation import CohabitationRecord
from family_kinship_ledger.domain.events import FamilyEvent, FamilyEventType
from family_kinship_ledger.domain.family import Family
from family_kinship_ledger.domain.houses import PolygamousHouse
from family_kinship_ledger.domain.marriages import Marriage
from family_kinship_ledger.domain.members import FamilyMember, MemberUpdate
from family_kinship_ledger.domain.relationships import KinshipEdge
from family_kinship_ledger.domain.value_objects import PersonName

__all__ = [
    "AdoptionRecord",
    "CohabitationRecord",
    "Family",
    "FamilyEvent",
    "FamilyEventType",
    "FamilyMember",
    "KinshipEdge",
    "Marriage",
    "MemberUpdate",
    "PersonName",
    "PolygamousHouse",
]

__version__ = "0.1.0"
