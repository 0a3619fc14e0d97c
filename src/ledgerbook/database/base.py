"""Abstract database interface."""

from abc import ABC, abstractmethod
from contextlib import AbstractContextManager
from datetime import date
from typing import Any, Iterable, Optional

# Import entities directly to avoid circular import through domain/__init__.py
from ledgerbook.domain.entities import (
    Account,
    AccountKind,
    Book,
    Category,
    CategoryType,
    SplitDraft,
    Transaction,
    TransactionIntent,
    TransactionType,
)


class LedgerUnit(ABC):
    """Writes that commit or roll back together.

    Obtained from ``Database.unit_of_work()``. Nothing done through a unit is
    visible to other readers until the ``with`` block exits normally.
    """

    @abstractmethod
    def get_transaction(self, transaction_id: int, for_update: bool = False) -> Optional[Transaction]:
        """Get transaction with its splits, optionally locking the header row."""
        pass

    @abstractmethod
    def insert_transaction(self, intent: TransactionIntent, creator: str) -> int:
        """Insert a transaction header. Returns transaction ID."""
        pass

    @abstractmethod
    def update_transaction_header(self, transaction_id: int, intent: TransactionIntent, editor: str) -> None:
        """Overwrite header fields (type, description, date, counterparty, notes, tags)."""
        pass

    @abstractmethod
    def delete_transaction(self, transaction_id: int) -> None:
        """Delete a transaction header and anything still attached to it."""
        pass

    @abstractmethod
    def insert_splits(self, book_id: int, transaction_id: int, splits: Iterable[SplitDraft]) -> None:
        """Insert splits for a transaction in the given order.

        Raises:
            ReferenceNotFound: If a category does not belong to the book
        """
        pass

    @abstractmethod
    def delete_splits(self, transaction_id: int) -> None:
        """Delete every split of a transaction."""
        pass

    @abstractmethod
    def adjust_balance(self, book_id: int, account_id: int, delta: int) -> None:
        """Add delta to an account balance.

        Raises:
            ReferenceNotFound: If the account does not exist in the book
        """
        pass


class Database(ABC):
    """Abstract database interface for ledgerbook."""

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

    @abstractmethod
    def unit_of_work(self) -> AbstractContextManager[LedgerUnit]:
        """Open an atomic unit.

        Commits when the block exits normally and rolls back on any exception.

        Raises:
            ReferenceNotFound: If a foreign key is violated
            StorageFailure: If the unit cannot be committed
        """
        pass

    # Book operations
    @abstractmethod
    def create_book(
        self,
        name: str,
        currency: str,
        accounts: Iterable[tuple[str, AccountKind]] = (),
        categories: Iterable[tuple[str, CategoryType]] = (),
    ) -> int:
        """Create a book with optional seed accounts and categories. Returns book ID."""
        pass

    @abstractmethod
    def get_book(self, book_id: int) -> Optional[Book]:
        """Get book by ID."""
        pass

    @abstractmethod
    def get_book_by_name(self, name: str) -> Optional[Book]:
        """Get book by name."""
        pass

    @abstractmethod
    def list_books(self) -> list[Book]:
        """List all books."""
        pass

    # Account operations
    @abstractmethod
    def create_account(
        self,
        book_id: int,
        name: str,
        kind: AccountKind,
        bank_name: Optional[str] = None,
        account_number: Optional[str] = None,
    ) -> int:
        """Create an account with a zero balance. Returns account ID."""
        pass

    @abstractmethod
    def get_account(self, account_id: int) -> Optional[Account]:
        """Get account by ID."""
        pass

    @abstractmethod
    def list_accounts(self, book_id: int, include_archived: bool = False) -> list[Account]:
        """List accounts of a book."""
        pass

    @abstractmethod
    def update_account(
        self,
        account_id: int,
        name: Optional[str] = None,
        bank_name: Optional[str] = None,
        is_archived: Optional[bool] = None,
    ) -> None:
        """Update descriptive account fields. The balance is never touched here."""
        pass

    @abstractmethod
    def delete_account(self, account_id: int) -> None:
        """Delete an account."""
        pass

    @abstractmethod
    def get_account_split_count(self, account_id: int) -> int:
        """Count splits posted to an account."""
        pass

    @abstractmethod
    def list_account_transactions(self, account_id: int) -> list[Transaction]:
        """List every transaction with at least one split on the account."""
        pass

    # Category operations
    @abstractmethod
    def create_category(
        self, book_id: int, name: str, category_type: CategoryType, parent_id: Optional[int] = None
    ) -> int:
        """Create a category. Returns category ID."""
        pass

    @abstractmethod
    def get_category(self, category_id: int) -> Optional[Category]:
        """Get category by ID."""
        pass

    @abstractmethod
    def get_category_by_path(self, book_id: int, path: str) -> Optional[Category]:
        """Get category by path (e.g., 'Food & Dining > Groceries')."""
        pass

    @abstractmethod
    def list_categories(self, book_id: int, parent_id: Optional[int] = None) -> list[Category]:
        """List categories of a book, optionally filtered by parent."""
        pass

    @abstractmethod
    def get_category_tree(self, book_id: int) -> list[dict[str, Any]]:
        """Get full category tree with hierarchy.

        Returns a list of dictionaries with category data and nested 'children' lists.
        """
        pass

    # Transaction reads (writes go through unit_of_work)
    @abstractmethod
    def get_transaction(self, transaction_id: int) -> Optional[Transaction]:
        """Get transaction with its splits."""
        pass

    @abstractmethod
    def list_transactions(
        self,
        book_id: int,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        transaction_type: Optional[TransactionType] = None,
        account_id: Optional[int] = None,
        category_id: Optional[int] = None,
    ) -> list[Transaction]:
        """List transactions of a book with optional filters.

        Args:
            book_id: Book to list
            start_date: Optional start date filter
            end_date: Optional end date filter
            transaction_type: Optional type filter
            account_id: Only transactions with a split on this account
            category_id: Only transactions with a split in this category
        """
        pass
