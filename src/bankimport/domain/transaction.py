"""Transaction domain service."""

from typing import Optional
from datetime import date
from decimal import Decimal
from bankimport.database.base import Database
from bankimport.domain.entities import Transaction as TransactionEntity
from bankimport.domain.errors import (
    AccountNotFoundError,
    NotFoundError,
    account_not_found,
    category_not_found,
)


class TransactionService:
    """Service for managing transactions."""

    def __init__(self, db: Database):
        """Initialize transaction service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_transaction(
        self,
        account_id: int,
        date: date,
        amount: Decimal,
        description: Optional[str] = None,
        category_id: Optional[int] = None,
    ) -> int:
        """Create a transaction.

        Args:
            account_id: Account ID
            date: Transaction date
            amount: Signed amount (income positive, expense negative)
            description: Optional description
            category_id: Optional category ID

        Returns:
            Transaction ID

        Raises:
            AccountNotFoundError: If account doesn't exist
            NotFoundError: If category doesn't exist
        """
        account = self.db.get_account(account_id)
        if account is None:
            raise AccountNotFoundError(account_not_found(account_id))

        if category_id is not None:
            category = self.db.get_category(category_id)
            if category is None:
                raise NotFoundError(category_not_found(category_id))

        return self.db.create_transaction(
            account_id=account_id,
            date=date,
            amount=amount,
            description=description,
            category_id=category_id,
        )

    def get_transaction(self, transaction_id: int) -> Optional[TransactionEntity]:
        """Get transaction by ID.

        Args:
            transaction_id: Transaction ID

        Returns:
            Transaction entity or None if not found
        """
        return self.db.get_transaction(transaction_id)

    def list_transactions(
        self,
        account_id: Optional[int] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> list[TransactionEntity]:
        """List transactions, oldest first.

        Args:
            account_id: Optional account ID filter
            start_date: Optional start date filter (inclusive)
            end_date: Optional end date filter (inclusive)

        Returns:
            List of transaction entities
        """
        return self.db.list_transactions(
            account_id=account_id, start_date=start_date, end_date=end_date
        )
