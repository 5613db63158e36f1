"""Tests for mapping template service."""

import pytest

from bankimport.cli.main import cli
from bankimport.domain.column_mapping import ColumnMapping, DebitCredit
from bankimport.domain.errors import TemplateNotFoundError, ValidationError


def _debit_credit_mapping():
    return ColumnMapping.from_indices(
        date_column=0, description_column=1, debit_column=2, credit_column=3, category_column=4
    )


def test_save_and_get_mapping(template_service):
    template_service.save_template("Chase", _debit_credit_mapping())

    mapping = template_service.get_mapping("chase")

    assert mapping.amount == DebitCredit(debit_column=2, credit_column=3)
    assert mapping.category_column == 4
    assert mapping.bank_name == "Chase"


def test_save_replaces_previous_template(template_service):
    template_service.save_template("Chase", _debit_credit_mapping())
    template_service.save_template(
        "Chase", ColumnMapping.from_indices(date_column=2, description_column=0, amount_column=1)
    )

    templates = template_service.list_templates()

    assert len(templates) == 1
    assert templates[0].amount_column == 1
    assert templates[0].debit_column is None


def test_save_requires_bank_name(template_service):
    with pytest.raises(ValidationError):
        template_service.save_template("  ", _debit_credit_mapping())


def test_get_mapping_missing(template_service):
    with pytest.raises(TemplateNotFoundError):
        template_service.get_mapping("Nobody")


def test_delete_template(template_service):
    template_service.save_template("Chase", _debit_credit_mapping())

    template_service.delete_template("Chase")

    assert template_service.get_template("Chase") is None
    with pytest.raises(TemplateNotFoundError):
        template_service.delete_template("Chase")


def test_template_commands(cli_runner, temp_db, template_service):
    """Test listing, showing and deleting templates from the CLI."""
    template_service.save_template("Chase", _debit_credit_mapping())
    db_args = ["--db-path", temp_db.database_path]

    listed = cli_runner.invoke(cli, db_args + ["template", "list"])
    shown = cli_runner.invoke(cli, db_args + ["template", "show", "Chase"])
    deleted = cli_runner.invoke(cli, db_args + ["template", "delete", "Chase", "--yes"])
    listed_after = cli_runner.invoke(cli, db_args + ["template", "list"])

    assert listed.exit_code == 0
    assert "Chase" in listed.output
    assert shown.exit_code == 0
    assert "Debit column: 2" in shown.output
    assert "Credit column: 3" in shown.output
    assert deleted.exit_code == 0
    assert "Deleted mapping template for 'Chase'" in deleted.output
    assert "No mapping templates found" in listed_after.output


def test_template_show_missing(cli_runner, temp_db):
    result = cli_runner.invoke(cli, ["--db-path", temp_db.database_path, "template", "show", "Nope"])

    assert result.exit_code == 1
    assert "No mapping template found" in result.output


def test_template_delete_missing(cli_runner, temp_db):
    result = cli_runner.invoke(
        cli, ["--db-path", temp_db.database_path, "template", "delete", "Nope", "--yes"]
    )

    assert result.exit_code == 1
    assert "TEMPLATE_NOT_FOUND" in result.output
