"""Command-line interface for Family Kinship Ledger."""

import argparse
import json
import sys
from pathlib import Path
from uuid import UUID

from family_kinship_ledger import __version__
from family_kinship_ledger.config import get_settings
from family_kinship_ledger.domain.family import Family
from family_kinship_ledger.domain.policies import FamilyStructurePolicy
from family_kinship_ledger.domain.snapshots import snapshot_from_json, snapshot_to_json
from family_kinship_ledger.domain.value_objects import KenyanCounty
from family_kinship_ledger.exceptions import FamilyKinshipError, FamilyNotFoundError
from family_kinship_ledger.logging_config import configure_logging
from family_kinship_ledger.repositories.sqlite import (
    SQLiteDatabase,
    SQLiteFamilyRepository,
)
from family_kinship_ledger.services.dashboard import DashboardBuilder, FamilyDashboard


def get_default_db_path() -> Path:
    """Get the database path from settings (FKL_SQLITE_PATH)."""
    return get_settings().sqlite_path


def _db_path(args: argparse.Namespace) -> Path:
    return Path(args.database) if args.database else get_default_db_path()


def create_repository(
    db_path: Path | None = None,
) -> tuple[SQLiteDatabase, SQLiteFamilyRepository]:
    """Open the snapshot store, creating its tables if needed."""
    if db_path is None:
        db_path = get_default_db_path()
    db_path.parent.mkdir(parents=True, exist_ok=True)

    db = SQLiteDatabase(str(db_path))
    db.initialize()
    policy = FamilyStructurePolicy.from_settings(get_settings())
    return db, SQLiteFamilyRepository(db, policy)


def _load_family(repo: SQLiteFamilyRepository, raw_id: str) -> Family:
    try:
        family_id = UUID(raw_id)
    except ValueError:
        raise FamilyNotFoundError(raw_id) from None
    family = repo.get(family_id)
    if family is None:
        raise FamilyNotFoundError(family_id)
    return family


def _print_error(error: FamilyKinshipError) -> None:
    print(f"Error [{error.error_code}]: {error.message}")


def cmd_init(args: argparse.Namespace) -> int:
    """Initialize a new database."""
    db_path = _db_path(args)

    if db_path.exists() and not args.force:
        print(f"Database already exists at {db_path}")
        print("Use --force to reinitialize (WARNING: will delete existing data)")
        return 1

    if db_path.exists() and args.force:
        db_path.unlink()

    db, _ = create_repository(db_path)
    db.close()
    print(f"Initialized database at {db_path}")
    return 0


def cmd_status(args: argparse.Namespace) -> int:
    """Show database status."""
    db_path = _db_path(args)

    if not db_path.exists():
        print(f"No database found at {db_path}")
        print("Run 'fkl init' to create a new database")
        return 1

    db, repo = create_repository(db_path)
    try:
        families = list(repo.list_all())
    except FamilyKinshipError as e:
        _print_error(e)
        return 1
    finally:
        db.close()

    print(f"Database: {db_path}")
    print(f"Families: {len(families)}")
    for family in families:
        state = "archived" if family.is_archived else "active"
        print(
            f"  - {family.name} ({family.id}) [{state}]: "
            f"{family.counters.member_count} members, version {family.version}"
        )
    return 0


def cmd_version(args: argparse.Namespace) -> int:
    """Show version information."""
    print(f"Family Kinship Ledger v{__version__}")
    return 0


def cmd_create(args: argparse.Namespace) -> int:
    """Create an empty family."""
    db, repo = create_repository(_db_path(args))
    try:
        county = KenyanCounty(args.county) if args.county else None
        family = Family.create(
            args.name,
            description=args.description,
            clan_name=args.clan,
            home_county=county,
            policy=FamilyStructurePolicy.from_settings(get_settings()),
        )
        repo.add(family)
    except ValueError:
        print(f"Error: unknown county '{args.county}'")
        return 1
    except FamilyKinshipError as e:
        _print_error(e)
        return 1
    finally:
        db.close()

    print(f"Created family {family.name} ({family.id})")
    return 0


def cmd_import(args: argparse.Namespace) -> int:
    """Import a family snapshot from a JSON file."""
    file_path = Path(args.file)
    if not file_path.exists():
        print(f"Error: File not found: {file_path}")
        return 1

    db, repo = create_repository(_db_path(args))
    try:
        snapshot = snapshot_from_json(file_path.read_text(encoding="utf-8"))
        family = Family.reconstitute(
            snapshot, FamilyStructurePolicy.from_settings(get_settings())
        )
        repo.add(family)
    except FamilyKinshipError as e:
        _print_error(e)
        return 1
    except ValueError as e:
        print(f"Error: invalid snapshot: {e}")
        return 1
    finally:
        db.close()

    print(
        f"Imported family {family.name} ({family.id}) with "
        f"{family.counters.member_count} members at version {family.version}"
    )
    return 0


def cmd_export(args: argparse.Namespace) -> int:
    """Export a family snapshot as JSON."""
    db, repo = create_repository(_db_path(args))
    try:
        family = _load_family(repo, args.family_id)
    except FamilyKinshipError as e:
        _print_error(e)
        return 1
    finally:
        db.close()

    payload = snapshot_to_json(family.snapshot(), indent=2)
    if args.output:
        Path(args.output).write_text(payload, encoding="utf-8")
        print(f"Exported family {family.id} to {args.output}")
    else:
        print(payload)
    return 0


def cmd_validate(args: argparse.Namespace) -> int:
    """Re-run every structural invariant on a stored family."""
    db, repo = create_repository(_db_path(args))
    try:
        family = _load_family(repo, args.family_id)
        family.validate()
    except FamilyKinshipError as e:
        _print_error(e)
        return 1
    finally:
        db.close()

    print(f"Family {family.name} ({family.id}) is valid at version {family.version}")
    return 0


def cmd_archive(args: argparse.Namespace) -> int:
    """Archive a family whose members are all deceased."""
    db, repo = create_repository(_db_path(args))
    try:
        family = _load_family(repo, args.family_id)
        loaded_version = family.version
        family.archive(args.reason)
        repo.update(family, expected_version=loaded_version)
    except FamilyKinshipError as e:
        _print_error(e)
        return 1
    finally:
        db.close()

    print(f"Archived family {family.name} ({family.id})")
    return 0


def _print_dashboard(dashboard: FamilyDashboard) -> None:
    stats = dashboard.stats
    print(f"Family: {dashboard.name} ({dashboard.family_id}) v{dashboard.version}")
    print(
        f"Members: {stats['member_count']} "
        f"(living {stats['living_count']}, deceased {stats['deceased_count']}, "
        f"minors {stats['minor_count']})"
    )
    print(
        f"Structure: {dashboard.structure.structure_type.value}, "
        f"{dashboard.structure.polygamy_status.value}, "
        f"complexity {dashboard.structure.complexity_score}"
    )
    print(
        f"Health: completeness {dashboard.health.completeness_score}, "
        f"verification {dashboard.health.verification_bucket.value}, "
        f"integrity {dashboard.health.integrity_tier.value}"
    )
    readiness = dashboard.readiness
    print(
        f"Succession readiness: {readiness.overall_level.value} "
        f"({readiness.overall_score}/100)"
    )
    for concern in readiness.concerns:
        print(f"  - {concern.concern}: {concern.level.value}")
    for recommendation in readiness.recommendations:
        print(f"  * [{recommendation.priority.value}] {recommendation.title}")
    if dashboard.timeline:
        print("Recent events:")
        for entry in dashboard.timeline:
            print(f"  {entry.occurred_on.isoformat()}  {entry.description}")


def cmd_dashboard(args: argparse.Namespace) -> int:
    """Show the succession dashboard for a family."""
    db, repo = create_repository(_db_path(args))
    try:
        family = _load_family(repo, args.family_id)
    except FamilyKinshipError as e:
        _print_error(e)
        return 1
    finally:
        db.close()

    dashboard = DashboardBuilder.from_settings(get_settings()).build(family)
    if args.json:
        print(json.dumps(dashboard.to_dict(), indent=2))
    else:
        _print_dashboard(dashboard)
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="fkl",
        description="Family Kinship Ledger - Kinship graphs for succession processing",
    )
    parser.add_argument(
        "--database",
        "-d",
        help="Path to SQLite database file",
        default=None,
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Log at DEBUG level regardless of FKL_LOG_LEVEL",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    init_parser = subparsers.add_parser("init", help="Initialize a new database")
    init_parser.add_argument(
        "--force",
        "-f",
        action="store_true",
        help="Force reinitialization (deletes existing data)",
    )
    init_parser.set_defaults(func=cmd_init)

    status_parser = subparsers.add_parser("status", help="Show database status")
    status_parser.set_defaults(func=cmd_status)

    version_parser = subparsers.add_parser("version", help="Show version")
    version_parser.set_defaults(func=cmd_version)

    create_parser = subparsers.add_parser("create", help="Create an empty family")
    create_parser.add_argument("name", help="Family name")
    create_parser.add_argument("--county", default=None, help="Home county, e.g. nyeri")
    create_parser.add_argument("--clan", default=None, help="Clan name")
    create_parser.add_argument("--description", default=None, help="Description")
    create_parser.set_defaults(func=cmd_create)

    import_parser = subparsers.add_parser("import", help="Import a family snapshot")
    import_parser.add_argument("file", help="JSON snapshot file")
    import_parser.set_defaults(func=cmd_import)

    export_parser = subparsers.add_parser("export", help="Export a family snapshot")
    export_parser.add_argument("family_id", help="Family ID")
    export_parser.add_argument("--output", "-o", default=None, help="Output file")
    export_parser.set_defaults(func=cmd_export)

    validate_parser = subparsers.add_parser(
        "validate", help="Check a family's structural invariants"
    )
    validate_parser.add_argument("family_id", help="Family ID")
    validate_parser.set_defaults(func=cmd_validate)

    archive_parser = subparsers.add_parser("archive", help="Archive a family")
    archive_parser.add_argument("family_id", help="Family ID")
    archive_parser.add_argument("--reason", required=True, help="Archive reason")
    archive_parser.set_defaults(func=cmd_archive)

    dashboard_parser = subparsers.add_parser(
        "dashboard", help="Show the succession dashboard"
    )
    dashboard_parser.add_argument("family_id", help="Family ID")
    dashboard_parser.add_argument(
        "--json", action="store_true", help="Print the dashboard as JSON"
    )
    dashboard_parser.set_defaults(func=cmd_dashboard)

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    configure_logging(get_settings(), verbose=args.verbose)

    result: int = args.func(args)
    return result


if __name__ == "__main__":
    sys.exit(main())
