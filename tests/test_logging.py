"""Tests for structured logging of family mutations."""

import logging
from datetime import date
from uuid import uuid4

import pytest
import structlog

from family_kinship_ledger.config import Settings
from family_kinship_ledger.domain.value_objects import Gender
from family_kinship_ledger.exceptions import UnknownMemberError
from family_kinship_ledger.logging_config import (
    LogContext,
    _add_app_context,
    _add_log_level,
    _stringify_domain_values,
    bind_context,
    clear_context,
    get_console_processors,
    get_json_processors,
    get_logger,
    resolve_log_level,
)


def log_output(capsys, caplog) -> str:
    # structlog writes to stdout unless configured to go through logging
    captured = capsys.readouterr()
    return captured.out + captured.err + caplog.text


class TestLogContext:
    def test_binds_and_unbinds(self) -> None:
        with LogContext(family_id="fam-1", operation="add_member"):
            bound = structlog.contextvars.get_contextvars()
            assert bound["family_id"] == "fam-1"
            assert bound["operation"] == "add_member"

        bound = structlog.contextvars.get_contextvars()
        assert "family_id" not in bound
        assert "operation" not in bound

    def test_preserves_outer_context(self) -> None:
        bind_context(request_id="r-1")
        try:
            with LogContext(family_id="fam-1"):
                pass
            assert structlog.contextvars.get_contextvars() == {"request_id": "r-1"}
        finally:
            clear_context()


class TestProcessors:
    def test_get_logger_returns_bound_logger(self) -> None:
        logger = get_logger("family_kinship_ledger.tests")

        assert hasattr(logger, "info")
        assert hasattr(logger, "warning")

    def test_warn_normalised_to_warning(self) -> None:
        assert _add_log_level(None, "warn", {})["level"] == "WARNING"

    def test_app_context_added(self) -> None:
        event = _add_app_context(None, "info", {})

        assert event["app"] == "Family Kinship Ledger"
        assert "environment" in event

    def test_renderers(self) -> None:
        assert isinstance(get_json_processors()[-1], structlog.processors.JSONRenderer)
        assert isinstance(get_console_processors()[-1], structlog.dev.ConsoleRenderer)

    def test_domain_values_rendered_plain(self) -> None:
        member_id = uuid4()

        event = _stringify_domain_values(
            None,
            "info",
            {
                "member_id": member_id,
                "gender": Gender.FEMALE,
                "date_of_death": date(2020, 5, 1),
                "spouse_ids": (member_id,),
                "version": 3,
            },
        )

        assert event == {
            "member_id": str(member_id),
            "gender": "female",
            "date_of_death": "2020-05-01",
            "spouse_ids": [str(member_id)],
            "version": 3,
        }

    def test_verbose_forces_debug(self) -> None:
        settings = Settings(_env_file=None, log_level="WARNING")

        assert resolve_log_level(settings) == logging.WARNING
        assert resolve_log_level(settings, verbose=True) == logging.DEBUG


class TestFamilyMutationLogging:
    def test_commit_is_logged(self, family, make_member, capsys, caplog) -> None:
        family.add_member(make_member("Wanjiku"))

        assert "family_mutation_committed" in log_output(capsys, caplog)

    def test_rejection_is_logged(self, family, capsys, caplog) -> None:
        capsys.readouterr()

        with pytest.raises(UnknownMemberError):
            family.remove_member(uuid4())

        assert "family_mutation_rejected" in log_output(capsys, caplog)

    def test_advisory_is_logged(
        self, household, husband, first_wife, make_marriage, capsys, caplog
    ) -> None:
        household.register_marriage(make_marriage(husband, first_wife))
        capsys.readouterr()

        household.mark_member_deceased(husband.id, date(2022, 2, 2))

        output = log_output(capsys, caplog)
        assert "marriage_advisory" in output
        assert "deceased member still has an active marriage" in output
