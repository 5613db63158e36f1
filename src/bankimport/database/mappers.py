"""Mapper functions to convert between domain models and SQLAlchemy models.

This layer isolates the conversion logic, so the domain entities stay the
same when the table layout changes.
"""

from bankimport.domain import entities as domain
from bankimport.database.models import (
    Account as ORMAccount,
    Category as ORMCategory,
    Transaction as ORMTransaction,
    MappingTemplate as ORMMappingTemplate,
)


def account_to_domain(orm_account: ORMAccount) -> domain.Account:
    """Convert SQLAlchemy Account model to domain Account entity."""
    return domain.Account(
        id=orm_account.id,
        name=orm_account.name,
        bank_name=orm_account.bank_name,
        created_at=orm_account.created_at,
    )


def category_to_domain(orm_category: ORMCategory) -> domain.Category:
    """Convert SQLAlchemy Category model to domain Category entity."""
    return domain.Category(
        id=orm_category.id,
        name=orm_category.name,
        created_at=orm_category.created_at,
    )


def transaction_to_domain(orm_transaction: ORMTransaction) -> domain.Transaction:
    """Convert SQLAlchemy Transaction model to domain Transaction entity."""
    return domain.Transaction(
        id=orm_transaction.id,
        account_id=orm_transaction.account_id,
        date=orm_transaction.date,
        amount=orm_transaction.amount,
        description=orm_transaction.description,
        category_id=orm_transaction.category_id,
        imported_at=orm_transaction.imported_at,
    )


def mapping_template_to_domain(orm_template: ORMMappingTemplate) -> domain.MappingTemplate:
    """Convert SQLAlchemy MappingTemplate model to domain MappingTemplate entity."""
    return domain.MappingTemplate(
        id=orm_template.id,
        bank_name=orm_template.bank_name,
        date_column=orm_template.date_column,
        description_column=orm_template.description_column,
        amount_column=orm_template.amount_column,
        debit_column=orm_template.debit_column,
        credit_column=orm_template.credit_column,
        category_column=orm_template.category_column,
        created_at=orm_template.created_at,
        updated_at=orm_template.updated_at,
    )
