"""Category domain service."""

from typing import Optional
from bankimport.database.base import Database
from bankimport.domain.entities import Category as CategoryEntity
from bankimport.domain.errors import ConflictError, ValidationError


class CategoryService:
    """Service for managing categories."""

    def __init__(self, db: Database):
        """Initialize category service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_category(self, name: str) -> int:
        """Create a category.

        Args:
            name: Category name

        Returns:
            Category ID

        Raises:
            ValidationError: If the name is blank
            ConflictError: If a category with the same name exists (ignoring case)
        """
        name = name.strip()
        if not name:
            raise ValidationError("Category name cannot be empty")
        if self.db.get_category_by_name(name) is not None:
            raise ConflictError(f"Category '{name}' already exists")

        return self.db.create_category(name=name)

    def get_category(self, category_id: int) -> Optional[CategoryEntity]:
        return self.db.get_category(category_id)

    def find_by_name(self, name: Optional[str]) -> Optional[CategoryEntity]:
        """Look up a category by exact name, ignoring case.

        Returns:
            Category entity or None if the name is blank or unknown
        """
        if name is None or not name.strip():
            return None
        return self.db.get_category_by_name(name)

    def list_categories(self) -> list[CategoryEntity]:
        return self.db.list_categories()
