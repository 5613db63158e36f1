"""Mapping template domain service."""

from typing import Optional
from bankimport.database.base import Database
from bankimport.domain.column_mapping import ColumnMapping
from bankimport.domain.entities import MappingTemplate as MappingTemplateEntity
from bankimport.domain.errors import (
    TemplateNotFoundError,
    ValidationError,
    template_not_found,
)


def template_to_mapping(template: MappingTemplateEntity) -> ColumnMapping:
    """Rebuild a column mapping from a stored template."""
    return ColumnMapping.from_indices(
        date_column=template.date_column,
        description_column=template.description_column,
        amount_column=template.amount_column,
        debit_column=template.debit_column,
        credit_column=template.credit_column,
        category_column=template.category_column,
        bank_name=template.bank_name,
    )


class MappingTemplateService:
    """Service for saved per-bank column mappings."""

    def __init__(self, db: Database):
        """Initialize mapping template service.

        Args:
            db: Database instance
        """
        self.db = db

    def save_template(self, bank_name: str, mapping: ColumnMapping) -> int:
        """Save a mapping for a bank, replacing any earlier one.

        Args:
            bank_name: Bank the mapping applies to
            mapping: Column mapping to store

        Returns:
            Template ID

        Raises:
            ValidationError: If the bank name is blank
        """
        if not bank_name or not bank_name.strip():
            raise ValidationError("Bank name is required to save a mapping template")

        return self.db.save_mapping_template(
            bank_name=bank_name.strip(),
            date_column=mapping.date_column,
            description_column=mapping.description_column,
            amount_column=mapping.amount_column,
            debit_column=mapping.debit_column,
            credit_column=mapping.credit_column,
            category_column=mapping.category_column,
        )

    def get_template(self, bank_name: str) -> Optional[MappingTemplateEntity]:
        return self.db.get_mapping_template(bank_name)

    def get_mapping(self, bank_name: str) -> ColumnMapping:
        """Get the saved mapping for a bank.

        Raises:
            TemplateNotFoundError: If no template exists for the bank
        """
        template = self.db.get_mapping_template(bank_name)
        if template is None:
            raise TemplateNotFoundError(template_not_found(bank_name))
        return template_to_mapping(template)

    def list_templates(self) -> list[MappingTemplateEntity]:
        return self.db.list_mapping_templates()

    def delete_template(self, bank_name: str) -> None:
        """Delete the template for a bank.

        Raises:
            TemplateNotFoundError: If no template exists for the bank
        """
        if not self.db.delete_mapping_template(bank_name):
            raise TemplateNotFoundError(template_not_found(bank_name))
