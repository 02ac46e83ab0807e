"""Tests for CLI module."""

import json
from datetime import date
from pathlib import Path
from uuid import uuid4

import pytest

from family_kinship_ledger.cli import (
    cmd_create,
    cmd_init,
    cmd_status,
    cmd_version,
    create_repository,
    get_default_db_path,
    main,
)
from family_kinship_ledger.domain.snapshots import snapshot_to_json
from family_kinship_ledger.domain.value_objects import KenyanCounty


@pytest.fixture(autouse=True)
def logging_calls(monkeypatch) -> list:
    calls: list = []
    monkeypatch.setattr(
        "family_kinship_ledger.cli.configure_logging",
        lambda settings, verbose=False: calls.append(verbose),
    )
    return calls


@pytest.fixture
def db_path(tmp_path) -> Path:
    return tmp_path / "families.db"


@pytest.fixture
def snapshot_file(tmp_path, polygamous_family) -> Path:
    path = tmp_path / "kamau.json"
    path.write_text(snapshot_to_json(polygamous_family.snapshot()), encoding="utf-8")
    return path


def stored_families(db_path: Path) -> list:
    db, repo = create_repository(db_path)
    try:
        return list(repo.list_all())
    finally:
        db.close()


class TestGetDefaultDbPath:
    def test_returns_settings_path(self):
        result = get_default_db_path()

        assert isinstance(result, Path)
        assert result.name.endswith(".db")


class TestCreateRepository:
    def test_creates_database(self, db_path):
        db, repo = create_repository(db_path)
        db.close()

        assert repo is not None
        assert db_path.exists()

    def test_creates_parent_directories(self, tmp_path):
        db_path = tmp_path / "nested" / "dirs" / "families.db"

        db, _ = create_repository(db_path)
        db.close()

        assert db_path.exists()


class TestCmdInit:
    def test_creates_new_database(self, db_path, capsys):
        class Args:
            database = str(db_path)
            force = False

        result = cmd_init(Args())

        assert result == 0
        assert db_path.exists()
        assert "Initialized database" in capsys.readouterr().out

    def test_refuses_to_overwrite_existing_without_force(self, db_path, capsys):
        db_path.touch()

        class Args:
            database = str(db_path)
            force = False

        result = cmd_init(Args())

        assert result == 1
        assert "already exists" in capsys.readouterr().out

    def test_overwrites_existing_with_force(self, db_path, capsys):
        db_path.write_text("old data")

        class Args:
            database = str(db_path)
            force = True

        result = cmd_init(Args())

        assert result == 0
        assert db_path.read_bytes() != b"old data"


class TestCmdStatus:
    def test_reports_missing_database(self, db_path, capsys):
        class Args:
            database = str(db_path)

        result = cmd_status(Args())

        assert result == 1
        assert "No database found" in capsys.readouterr().out

    def test_lists_families(self, db_path, snapshot_file, capsys):
        main(["--database", str(db_path), "import", str(snapshot_file)])
        capsys.readouterr()

        class Args:
            database = str(db_path)

        result = cmd_status(Args())

        output = capsys.readouterr().out
        assert result == 0
        assert "Families: 1" in output
        assert "Kamau Family" in output
        assert "4 members" in output


class TestCmdVersion:
    def test_prints_version(self, capsys):
        class Args:
            pass

        assert cmd_version(Args()) == 0
        assert "Family Kinship Ledger v0.1.0" in capsys.readouterr().out


class TestCmdCreate:
    def test_creates_empty_family(self, db_path, capsys):
        class Args:
            database = str(db_path)
            name = "Otieno Family"
            county = "kisumu"
            clan = "Joka-Jok"
            description = None

        result = cmd_create(Args())

        assert result == 0
        assert "Created family Otieno Family" in capsys.readouterr().out
        [family] = stored_families(db_path)
        assert family.home_county is KenyanCounty.KISUMU
        assert family.clan_name == "Joka-Jok"
        assert family.version == 1

    def test_unknown_county(self, db_path, capsys):
        class Args:
            database = str(db_path)
            name = "Otieno Family"
            county = "atlantis"
            clan = None
            description = None

        result = cmd_create(Args())

        assert result == 1
        assert "unknown county 'atlantis'" in capsys.readouterr().out
        assert stored_families(db_path) == []


class TestImportExport:
    def test_import_then_export(self, db_path, snapshot_file, polygamous_family, tmp_path, capsys):
        assert main(["--database", str(db_path), "import", str(snapshot_file)]) == 0
        assert "Imported family Kamau Family" in capsys.readouterr().out

        output = tmp_path / "exported.json"
        result = main(
            [
                "--database",
                str(db_path),
                "export",
                str(polygamous_family.id),
                "--output",
                str(output),
            ]
        )

        assert result == 0
        assert json.loads(output.read_text(encoding="utf-8")) == json.loads(
            snapshot_file.read_text(encoding="utf-8")
        )

    def test_import_missing_file(self, db_path, tmp_path, capsys):
        result = main(["--database", str(db_path), "import", str(tmp_path / "nope.json")])

        assert result == 1
        assert "File not found" in capsys.readouterr().out

    def test_import_invalid_snapshot(self, db_path, tmp_path, capsys):
        bad = tmp_path / "bad.json"
        bad.write_text('{"id": "not-a-family"}', encoding="utf-8")

        result = main(["--database", str(db_path), "import", str(bad)])

        assert result == 1
        assert "invalid snapshot" in capsys.readouterr().out

    def test_import_twice_is_rejected(self, db_path, snapshot_file, capsys):
        main(["--database", str(db_path), "import", str(snapshot_file)])

        result = main(["--database", str(db_path), "import", str(snapshot_file)])

        assert result == 1
        assert "Error [DUPLICATE_RECORD]" in capsys.readouterr().out

    def test_export_unknown_family(self, db_path, capsys):
        result = main(["--database", str(db_path), "export", str(uuid4())])

        assert result == 1
        assert "Error [FAMILY_NOT_FOUND]" in capsys.readouterr().out

    def test_export_malformed_id(self, db_path, capsys):
        result = main(["--database", str(db_path), "export", "kamau"])

        assert result == 1
        assert "Error [FAMILY_NOT_FOUND]" in capsys.readouterr().out


class TestCmdValidate:
    def test_valid_family(self, db_path, snapshot_file, polygamous_family, capsys):
        main(["--database", str(db_path), "import", str(snapshot_file)])

        result = main(["--database", str(db_path), "validate", str(polygamous_family.id)])

        assert result == 0
        assert "is valid at version" in capsys.readouterr().out


class TestCmdArchive:
    def test_archives_family_with_no_living_members(
        self, db_path, tmp_path, family, husband, capsys
    ):
        family.mark_member_deceased(husband.id, date(2021, 7, 1))
        path = tmp_path / "family.json"
        path.write_text(snapshot_to_json(family.snapshot()), encoding="utf-8")
        main(["--database", str(db_path), "import", str(path)])

        result = main(
            ["--database", str(db_path), "archive", str(family.id), "--reason", "estate closed"]
        )

        assert result == 0
        assert "Archived family Kamau Family" in capsys.readouterr().out
        [stored] = stored_families(db_path)
        assert stored.is_archived
        assert stored.version == family.version + 1

    def test_refuses_family_with_living_members(self, db_path, snapshot_file, polygamous_family, capsys):
        main(["--database", str(db_path), "import", str(snapshot_file)])

        result = main(
            [
                "--database",
                str(db_path),
                "archive",
                str(polygamous_family.id),
                "--reason",
                "estate closed",
            ]
        )

        assert result == 1
        assert "Error [ARCHIVE_NOT_ALLOWED]" in capsys.readouterr().out
        [stored] = stored_families(db_path)
        assert not stored.is_archived


class TestCmdDashboard:
    def test_text_dashboard(self, db_path, snapshot_file, polygamous_family, capsys):
        main(["--database", str(db_path), "import", str(snapshot_file)])
        capsys.readouterr()

        result = main(["--database", str(db_path), "dashboard", str(polygamous_family.id)])

        output = capsys.readouterr().out
        assert result == 0
        assert "Succession readiness: not_ready" in output
        assert "Establish polygamous houses" in output
        assert "Recent events:" in output

    def test_json_dashboard(self, db_path, snapshot_file, polygamous_family, capsys):
        main(["--database", str(db_path), "import", str(snapshot_file)])
        capsys.readouterr()

        result = main(
            ["--database", str(db_path), "dashboard", str(polygamous_family.id), "--json"]
        )

        output = capsys.readouterr().out
        assert result == 0
        assert '"polygamy_status": "polygamous"' in output


class TestMain:
    def test_no_command_prints_help(self, capsys):
        assert main([]) == 0
        assert "usage: fkl" in capsys.readouterr().out

    def test_version_command(self, capsys):
        assert main(["version"]) == 0
        assert "Family Kinship Ledger" in capsys.readouterr().out

    def test_configures_logging_once(self, logging_calls):
        main(["version"])
        main(["--verbose", "version"])

        assert logging_calls == [False, True]
