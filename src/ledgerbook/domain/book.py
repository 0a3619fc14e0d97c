"""Book domain service."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Optional

from ledgerbook.domain.entities import AccountKind, Book as BookEntity, CategoryType
from ledgerbook.domain.errors import ConflictError, ValidationError

if TYPE_CHECKING:
    from ledgerbook.database.base import Database

logger = logging.getLogger(__name__)

DEFAULT_CURRENCY = "USD"

DEFAULT_ACCOUNTS = [
    ("Cash", AccountKind.ASSET),
]

# Flat category list every new book starts with
DEFAULT_CATEGORIES = [
    # Expenses
    ("Food & Dining", CategoryType.EXPENSE),
    ("Transportation", CategoryType.EXPENSE),
    ("Bills & Utilities", CategoryType.EXPENSE),
    ("Shopping", CategoryType.EXPENSE),
    ("Entertainment", CategoryType.EXPENSE),
    ("Health & Fitness", CategoryType.EXPENSE),
    ("Education", CategoryType.EXPENSE),
    ("Family", CategoryType.EXPENSE),
    ("Gifts & Donations", CategoryType.EXPENSE),
    ("Other Expenses", CategoryType.EXPENSE),
    # Income
    ("Salary", CategoryType.INCOME),
    ("Bonus", CategoryType.INCOME),
    ("Investment", CategoryType.INCOME),
    ("Gifts Received", CategoryType.INCOME),
    ("Sales", CategoryType.INCOME),
    ("Other Income", CategoryType.INCOME),
]


class BookService:
    """Service for managing books."""

    def __init__(self, db: Database):
        self.db = db

    def create_book(self, name: str, currency: str = DEFAULT_CURRENCY, seed_defaults: bool = True) -> int:
        """Create a book.

        With ``seed_defaults`` the book starts with a cash account and the
        default categories, written in the same transaction as the book.

        Args:
            name: Unique book name
            currency: ISO 4217 currency code
            seed_defaults: Seed default account and categories

        Returns:
            Book ID

        Raises:
            ValidationError: If the name or currency is malformed
            ConflictError: If a book with this name exists
        """
        if not name or not name.strip():
            raise ValidationError("Book name is required")
        currency = (currency or "").strip().upper()
        if len(currency) != 3 or not currency.isalpha():
            raise ValidationError(f"Currency must be a three-letter code, got {currency!r}")
        if self.db.get_book_by_name(name) is not None:
            raise ConflictError(f"Book with name '{name}' already exists")

        book_id = self.db.create_book(
            name=name,
            currency=currency,
            accounts=DEFAULT_ACCOUNTS if seed_defaults else (),
            categories=DEFAULT_CATEGORIES if seed_defaults else (),
        )
        logger.info("Created book %s '%s' (%s)", book_id, name, currency)
        return book_id

    def get_book(self, book_id: int) -> Optional[BookEntity]:
        """Get book by ID, or None if not found."""
        return self.db.get_book(book_id)

    def get_book_by_name(self, name: str) -> Optional[BookEntity]:
        """Get book by its unique name, or None if not found."""
        return self.db.get_book_by_name(name)

    def list_books(self) -> list[BookEntity]:
        """List all books ordered by name."""
        return self.db.list_books()
