from family_kinship_ledger.repositories.interfaces import FamilyRepository
from family_kinship_ledger.repositories.sqlite import (
    SQLiteDatabase,
    SQLiteFamilyRepository,
)

__all__ = [
    "FamilyRepository",
    "SQLiteDatabase",
    "SQLiteFamilyRepository",
]
