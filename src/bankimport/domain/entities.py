"""Domain model entities for bankimport.

These are pure data classes representing business concepts, independent of
database schema. Stored amounts are signed: income is positive, expenses are
negative.
"""

from dataclasses import dataclass
from datetime import datetime, date
from decimal import Decimal
from typing import Optional


@dataclass(frozen=True)
class Account:
    """Bank account domain entity."""

    id: int
    name: str
    bank_name: str
    created_at: datetime


@dataclass(frozen=True)
class Category:
    """Category domain entity."""

    id: int
    name: str
    created_at: datetime


@dataclass(frozen=True)
class Transaction:
    """Transaction domain entity."""

    id: int
    account_id: int
    date: date
    amount: Decimal
    description: Optional[str]
    category_id: Optional[int]
    imported_at: datetime

    @property
    def transaction_type(self) -> str:
        return "INCOME" if self.amount >= 0 else "EXPENSE"


@dataclass(frozen=True)
class MappingTemplate:
    """Saved column mapping for statements from one bank.

    Exactly one of ``amount_column`` or the ``debit_column``/``credit_column``
    pair is set.
    """

    id: int
    bank_name: str
    date_column: int
    description_column: int
    amount_column: Optional[int]
    debit_column: Optional[int]
    credit_column: Optional[int]
    category_column: Optional[int]
    created_at: datetime
    updated_at: Optional[datetime] = None
