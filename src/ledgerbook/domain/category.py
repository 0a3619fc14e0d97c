"""Category domain service."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Optional

from ledgerbook.domain.entities import Category as CategoryEntity, CategoryType
from ledgerbook.domain.errors import (
    ConflictError,
    NotFoundError,
    ValidationError,
    book_not_found,
    category_path_not_found,
)

if TYPE_CHECKING:
    from ledgerbook.database.base import Database


class CategoryService:
    """Service for managing categories."""

    def __init__(self, db: Database):
        """Initialize category service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_category(
        self,
        book_id: int,
        name: str,
        category_type: CategoryType,
        parent_path: Optional[str] = None,
    ) -> int:
        """Create a category.

        Args:
            book_id: Owning book
            name: Category name
            category_type: INCOME or EXPENSE
            parent_path: Optional parent category path (e.g., "Food & Dining")

        Returns:
            Category ID

        Raises:
            ValidationError: If the name is empty or the type is unknown
            NotFoundError: If the book or parent category doesn't exist
            ConflictError: If a sibling with the same name exists
        """
        if not name or not name.strip():
            raise ValidationError("Category name is required")
        if ">" in name:
            raise ValidationError("Category name cannot contain '>'")
        try:
            category_type = CategoryType(category_type)
        except ValueError:
            raise ValidationError(f"Unknown category type: {category_type!r}") from None

        if self.db.get_book(book_id) is None:
            raise NotFoundError(book_not_found(book_id))

        parent_id = None
        if parent_path is not None:
            parent = self.db.get_category_by_path(book_id, parent_path)
            if parent is None:
                raise NotFoundError(f"Parent category '{parent_path}' not found")
            parent_id = parent.id

        for sibling in self.db.list_categories(book_id, parent_id=parent_id):
            if sibling.name == name:
                raise ConflictError(f"Category '{name}' already exists")

        return self.db.create_category(
            book_id=book_id, name=name, category_type=category_type, parent_id=parent_id
        )

    def get_category(self, category_id: int) -> Optional[CategoryEntity]:
        """Get category by ID.

        Args:
            category_id: Category ID

        Returns:
            Category entity or None if not found
        """
        return self.db.get_category(category_id)

    def get_category_by_path(self, book_id: int, path: str) -> Optional[CategoryEntity]:
        """Get category by path.

        Args:
            book_id: Book ID
            path: Category path (e.g., "Food & Dining > Groceries")

        Returns:
            Category entity or None if not found
        """
        return self.db.get_category_by_path(book_id, path)

    def require_category_by_path(self, book_id: int, path: str) -> CategoryEntity:
        """Get category by path, raising NotFoundError when missing."""
        category = self.db.get_category_by_path(book_id, path)
        if category is None:
            raise NotFoundError(category_path_not_found(path))
        return category

    def list_categories(self, book_id: int, parent_id: Optional[int] = None) -> list[CategoryEntity]:
        """List categories.

        Args:
            book_id: Book ID
            parent_id: Optional parent category ID to filter by

        Returns:
            List of category entities
        """
        return self.db.list_categories(book_id, parent_id=parent_id)

    def get_category_tree(self, book_id: int) -> list[dict[str, Any]]:
        """Get full category tree.

        Returns:
            List of root categories with nested children
        """
        return self.db.get_category_tree(book_id)

    def format_category_path(self, category_id: int) -> str:
        """Get full path for a category.

        Args:
            category_id: Category ID

        Returns:
            Full category path (e.g., "Food & Dining > Groceries")
        """
        cat = self.get_category(category_id)
        if cat is None:
            return ""

        path_parts = [cat.name]
        current_parent_id = cat.parent_id

        while current_parent_id is not None:
            parent = self.get_category(current_parent_id)
            if parent is None:
                break
            path_parts.append(parent.name)
            current_parent_id = parent.parent_id

        return " > ".join(reversed(path_parts))
