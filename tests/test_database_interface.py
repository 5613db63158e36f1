"""Tests for Database interface returning domain models."""

import pytest
from datetime import date, datetime
from decimal import Decimal

from bankimport.domain import entities


class TestDatabaseInterface:
    """Tests to verify Database interface returns domain models."""

    def test_get_account_returns_domain_model(self, temp_db):
        """Test that get_account returns a domain Account entity."""
        account_id = temp_db.create_account(name="Test Account", bank_name="Test Bank")

        account = temp_db.get_account(account_id)

        assert isinstance(account, entities.Account)
        assert account.id == account_id
        assert account.name == "Test Account"
        assert account.bank_name == "Test Bank"
        assert isinstance(account.created_at, datetime)

    def test_get_missing_account_returns_none(self, temp_db):
        """Unknown IDs return None rather than raising."""
        assert temp_db.get_account(999) is None

    def test_list_accounts_returns_domain_models(self, temp_db):
        """Test that list_accounts returns domain Account entities."""
        temp_db.create_account(name="Account 1", bank_name="Bank 1")
        temp_db.create_account(name="Account 2", bank_name="Bank 2")

        accounts = temp_db.list_accounts()

        assert len(accounts) == 2
        for account in accounts:
            assert isinstance(account, entities.Account)

    def test_get_category_by_name_ignores_case(self, temp_db):
        """Category lookup by name is case-insensitive."""
        category_id = temp_db.create_category(name="Groceries")

        category = temp_db.get_category_by_name("GROCERIES")

        assert isinstance(category, entities.Category)
        assert category.id == category_id
        assert temp_db.get_category_by_name("Rent") is None

    def test_get_transaction_returns_domain_model(self, temp_db, sample_account):
        """Stored amounts come back as Decimal with their sign."""
        txn_id = temp_db.create_transaction(
            account_id=sample_account.id,
            date=date(2024, 1, 15),
            amount=Decimal("-42.50"),
            description="Coffee",
        )

        txn = temp_db.get_transaction(txn_id)

        assert isinstance(txn, entities.Transaction)
        assert txn.account_id == sample_account.id
        assert txn.date == date(2024, 1, 15)
        assert txn.amount == Decimal("-42.50")
        assert isinstance(txn.amount, Decimal)
        assert txn.transaction_type == "EXPENSE"
        assert txn.category_id is None
        assert isinstance(txn.imported_at, datetime)

    def test_list_transactions_filters_and_orders(self, temp_db, sample_account):
        """Date and account filters are inclusive; results are oldest first."""
        other_account = temp_db.create_account(name="Other", bank_name="Other Bank")
        late = temp_db.create_transaction(
            account_id=sample_account.id, date=date(2024, 1, 20), amount=Decimal("10")
        )
        early = temp_db.create_transaction(
            account_id=sample_account.id, date=date(2024, 1, 10), amount=Decimal("20")
        )
        temp_db.create_transaction(
            account_id=sample_account.id, date=date(2024, 2, 1), amount=Decimal("30")
        )
        temp_db.create_transaction(
            account_id=other_account, date=date(2024, 1, 15), amount=Decimal("40")
        )

        transactions = temp_db.list_transactions(
            account_id=sample_account.id,
            start_date=date(2024, 1, 10),
            end_date=date(2024, 1, 20),
        )

        assert [t.id for t in transactions] == [early, late]

    def test_save_mapping_template_replaces_existing(self, temp_db):
        """Saving twice for the same bank keeps one template with the new columns."""
        first_id = temp_db.save_mapping_template(
            bank_name="Chase", date_column=0, description_column=1, amount_column=2
        )
        second_id = temp_db.save_mapping_template(
            bank_name="chase",
            date_column=1,
            description_column=2,
            debit_column=3,
            credit_column=4,
        )

        templates = temp_db.list_mapping_templates()

        assert first_id == second_id
        assert len(templates) == 1
        template = templates[0]
        assert isinstance(template, entities.MappingTemplate)
        assert template.bank_name == "Chase"
        assert template.amount_column is None
        assert (template.debit_column, template.credit_column) == (3, 4)
        assert template.updated_at is not None

    def test_delete_mapping_template(self, temp_db):
        """Deleting reports whether a template existed."""
        temp_db.save_mapping_template(
            bank_name="Chase", date_column=0, description_column=1, amount_column=2
        )

        assert temp_db.delete_mapping_template("CHASE") is True
        assert temp_db.get_mapping_template("Chase") is None
        assert temp_db.delete_mapping_template("Chase") is False
