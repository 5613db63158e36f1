"""Abstract database interface."""

from abc import ABC, abstractmethod
from typing import Optional
from datetime import date
from decimal import Decimal

# Import entities directly to avoid circular import through domain/__init__.py
from bankimport.domain.entities import (
    Account,
    Category,
    MappingTemplate,
    Transaction,
)


class Database(ABC):
    """Abstract database interface for bankimport."""

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    # Account operations
    @abstractmethod
    def create_account(self, name: str, bank_name: str) -> int:
        """Create a new account. Returns account ID."""
        pass

    @abstractmethod
    def get_account(self, account_id: int) -> Optional[Account]:
        """Get account by ID."""
        pass

    @abstractmethod
    def list_accounts(self) -> list[Account]:
        """List all accounts."""
        pass

    # Category operations
    @abstractmethod
    def create_category(self, name: str) -> int:
        """Create a category. Returns category ID."""
        pass

    @abstractmethod
    def get_category(self, category_id: int) -> Optional[Category]:
        """Get category by ID."""
        pass

    @abstractmethod
    def get_category_by_name(self, name: str) -> Optional[Category]:
        """Get category by name, ignoring case."""
        pass

    @abstractmethod
    def list_categories(self) -> list[Category]:
        """List all categories."""
        pass

    # Transaction operations
    @abstractmethod
    def create_transaction(
        self,
        account_id: int,
        date: date,
        amount: Decimal,
        description: Optional[str] = None,
        category_id: Optional[int] = None,
    ) -> int:
        """Create a transaction. Returns transaction ID."""
        pass

    @abstractmethod
    def get_transaction(self, transaction_id: int) -> Optional[Transaction]:
        """Get transaction by ID."""
        pass

    @abstractmethod
    def list_transactions(
        self,
        account_id: Optional[int] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> list[Transaction]:
        """List transactions with optional filters.

        Args:
            account_id: Optional account ID filter
            start_date: Optional start date filter (inclusive)
            end_date: Optional end date filter (inclusive)
        """
        pass

    # Mapping template operations
    @abstractmethod
    def save_mapping_template(
        self,
        bank_name: str,
        date_column: int,
        description_column: int,
        amount_column: Optional[int] = None,
        debit_column: Optional[int] = None,
        credit_column: Optional[int] = None,
        category_column: Optional[int] = None,
    ) -> int:
        """Create or replace the template for a bank. Returns template ID."""
        pass

    @abstractmethod
    def get_mapping_template(self, bank_name: str) -> Optional[MappingTemplate]:
        """Get the template for a bank, ignoring case."""
        pass

    @abstractmethod
    def list_mapping_templates(self) -> list[MappingTemplate]:
        """List all mapping templates."""
        pass

    @abstractmethod
    def delete_mapping_template(self, bank_name: str) -> bool:
        """Delete the template for a bank. Returns True if one existed."""
        pass
