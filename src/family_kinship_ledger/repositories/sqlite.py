"""SQLite implementation of the family repository.

Each family is stored as one JSON snapshot row next to its version. Writes
are an optimistic compare-and-set on that version; reads rebuild the
aggregate through ``Family.reconstitute``.
"""

from __future__ import annotations

import sqlite3
from collections.abc import Iterable
from pathlib import Path
from uuid import UUID

from family_kinship_ledger.domain.family import Family
from family_kinship_ledger.domain.policies import FamilyStructurePolicy
from family_kinship_ledger.domain.snapshots import (
    snapshot_from_json,
    snapshot_to_json,
)
from family_kinship_ledger.exceptions import (
    DuplicateRecordError,
    FamilyNotFoundError,
    VersionConflictError,
)
from family_kinship_ledger.logging_config import get_logger
from family_kinship_ledger.repositories.interfaces import FamilyRepository

logger = get_logger(__name__)


class SQLiteDatabase:
    """SQLite database connection manager."""

    def __init__(
        self, path: str | Path = ":memory:", check_same_thread: bool = True
    ) -> None:
        self._path = str(path)
        self._check_same_thread = check_same_thread
        self._connection: sqlite3.Connection | None = None

    def get_connection(self) -> sqlite3.Connection:
        """Get or create the database connection."""
        if self._connection is None:
            self._connection = sqlite3.connect(
                self._path, check_same_thread=self._check_same_thread
            )
            self._connection.row_factory = sqlite3.Row
        return self._connection

    def initialize(self) -> None:
        """Create all database tables."""
        conn = self.get_connection()
        conn.executescript(
            """
            CREATE TABLE IF NOT EXISTS families (
                id TEXT PRIMARY KEY,
                name TEXT NOT NULL,
                version INTEGER NOT NULL,
                is_archived INTEGER NOT NULL DEFAULT 0,
                member_count INTEGER NOT NULL DEFAULT 0,
                is_polygamous INTEGER NOT NULL DEFAULT 0,
                snapshot TEXT NOT NULL,
                created_at TEXT NOT NULL,
                updated_at TEXT NOT NULL
            );

            CREATE INDEX IF NOT EXISTS idx_families_name ON families(name);
            CREATE INDEX IF NOT EXISTS idx_families_archived ON families(is_archived);
            """
        )
        conn.commit()

    def close(self) -> None:
        """Close the database connection."""
        if self._connection is not None:
            self._connection.close()
            self._connection = None


class SQLiteFamilyRepository(FamilyRepository):
    def __init__(
        self, database: SQLiteDatabase, policy: FamilyStructurePolicy | None = None
    ) -> None:
        self._db = database
        self._policy = policy

    def add(self, family: Family) -> None:
        conn = self._db.get_connection()
        try:
            conn.execute(
                """
                INSERT INTO families (id, name, version, is_archived, member_count,
                    is_polygamous, snapshot, created_at, updated_at)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    str(family.id),
                    family.name,
                    family.version,
                    1 if family.is_archived else 0,
                    family.counters.member_count,
                    1 if family.polygamy_status else 0,
                    snapshot_to_json(family.snapshot()),
                    family.created_at.isoformat(),
                    family.updated_at.isoformat(),
                ),
            )
        except sqlite3.IntegrityError as exc:
            raise DuplicateRecordError("family", family.id) from exc
        conn.commit()
        logger.info("family_saved", family_id=family.id, version=family.version)

    def get(self, family_id: UUID) -> Family | None:
        conn = self._db.get_connection()
        row = conn.execute(
            "SELECT snapshot FROM families WHERE id = ?", (str(family_id),)
        ).fetchone()
        if row is None:
            return None
        return self._row_to_family(row)

    def list_all(self) -> Iterable[Family]:
        conn = self._db.get_connection()
        rows = conn.execute("SELECT snapshot FROM families ORDER BY name").fetchall()
        return [self._row_to_family(row) for row in rows]

    def list_active(self) -> Iterable[Family]:
        conn = self._db.get_connection()
        rows = conn.execute(
            "SELECT snapshot FROM families WHERE is_archived = 0 ORDER BY name"
        ).fetchall()
        return [self._row_to_family(row) for row in rows]

    def update(self, family: Family, expected_version: int) -> None:
        conn = self._db.get_connection()
        cursor = conn.execute(
            """
            UPDATE families SET
                name = ?,
                version = ?,
                is_archived = ?,
                member_count = ?,
                is_polygamous = ?,
                snapshot = ?,
                updated_at = ?
            WHERE id = ? AND version = ?
            """,
            (
                family.name,
                family.version,
                1 if family.is_archived else 0,
                family.counters.member_count,
                1 if family.polygamy_status else 0,
                snapshot_to_json(family.snapshot()),
                family.updated_at.isoformat(),
                str(family.id),
                expected_version,
            ),
        )
        if cursor.rowcount == 0:
            conn.rollback()
            stored = conn.execute(
                "SELECT version FROM families WHERE id = ?", (str(family.id),)
            ).fetchone()
            if stored is None:
                raise FamilyNotFoundError(family.id)
            logger.warning(
                "version_conflict",
                family_id=family.id,
                expected_version=expected_version,
                actual_version=stored["version"],
            )
            raise VersionConflictError(family.id, expected_version, stored["version"])
        conn.commit()
        logger.info("family_saved", family_id=family.id, version=family.version)

    def delete(self, family_id: UUID) -> None:
        conn = self._db.get_connection()
        conn.execute("DELETE FROM families WHERE id = ?", (str(family_id),))
        conn.commit()

    def _row_to_family(self, row: sqlite3.Row) -> Family:
        return Family.reconstitute(snapshot_from_json(row["snapshot"]), self._policy)
