"""Tests for transactions."""

from datetime import date
from decimal import Decimal

import pytest
from bankimport.cli.main import cli
from bankimport.domain.errors import AccountNotFoundError, NotFoundError


def test_create_transaction(transaction_service, sample_account, sample_categories):
    """Test creating a categorized transaction."""
    txn_id = transaction_service.create_transaction(
        account_id=sample_account.id,
        date=date(2024, 1, 15),
        amount=Decimal("2500.00"),
        description="Salary",
        category_id=sample_categories["Salary"],
    )

    txn = transaction_service.get_transaction(txn_id)
    assert txn.amount == Decimal("2500.00")
    assert txn.transaction_type == "INCOME"
    assert txn.category_id == sample_categories["Salary"]


def test_create_transaction_missing_account(transaction_service):
    """Transactions need an existing account."""
    with pytest.raises(AccountNotFoundError):
        transaction_service.create_transaction(
            account_id=99, date=date(2024, 1, 15), amount=Decimal("1")
        )


def test_create_transaction_missing_category(transaction_service, sample_account):
    """An unknown category ID is rejected."""
    with pytest.raises(NotFoundError):
        transaction_service.create_transaction(
            account_id=sample_account.id,
            date=date(2024, 1, 15),
            amount=Decimal("1"),
            category_id=99,
        )


def test_zero_amount_is_income(transaction_service, sample_account):
    """Zero amounts count as income."""
    txn_id = transaction_service.create_transaction(
        account_id=sample_account.id, date=date(2024, 1, 15), amount=Decimal("0")
    )

    assert transaction_service.get_transaction(txn_id).transaction_type == "INCOME"


def test_transactions_command_lists_with_filters(cli_runner, temp_db, transaction_service, sample_account):
    """Test listing transactions with an account and date range."""
    transaction_service.create_transaction(
        account_id=sample_account.id,
        date=date(2024, 1, 15),
        amount=Decimal("-4.50"),
        description="Coffee Shop",
    )
    transaction_service.create_transaction(
        account_id=sample_account.id,
        date=date(2024, 3, 1),
        amount=Decimal("-80.00"),
        description="Power Company",
    )

    result = cli_runner.invoke(
        cli,
        [
            "--db-path",
            temp_db.database_path,
            "transactions",
            "--account",
            "Test Account",
            "--start-date",
            "2024-01-01",
            "--end-date",
            "2024-01-31",
        ],
    )

    assert result.exit_code == 0
    assert "Found 1 transaction(s)" in result.output
    assert "Coffee Shop" in result.output
    assert "Power Company" not in result.output


def test_transactions_command_unknown_account(cli_runner, temp_db):
    """An unknown account name exits with an error."""
    result = cli_runner.invoke(
        cli, ["--db-path", temp_db.database_path, "transactions", "--account", "Nope"]
    )

    assert result.exit_code == 1
    assert "ACCOUNT_NOT_FOUND" in result.output


def test_transactions_command_invalid_date(cli_runner, temp_db):
    """An unparseable date filter exits with an error."""
    result = cli_runner.invoke(
        cli, ["--db-path", temp_db.database_path, "transactions", "--start-date", "not a date"]
    )

    assert result.exit_code == 1
    assert "Invalid start date" in result.output
