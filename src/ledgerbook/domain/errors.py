"""Shared domain error messages and error types."""

from typing import Optional


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling. ``status`` is the
    HTTP-equivalent code a route layer should answer with.
    """

    status = 400


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class InvalidIntent(ValidationError):
    """Malformed transaction intent. Raised before any storage write."""

    def __init__(self, message: str, index: Optional[int] = None):
        super().__init__(message)
        self.index = index


class NotFoundError(DomainError):
    """Requested domain entity or path does not exist."""

    status = 404


class NotFound(NotFoundError):
    """Update or delete targets a transaction that does not exist."""


class ReferenceNotFound(DomainError):
    """Referenced account, category or transaction is missing or in another book."""


class ConflictError(DomainError):
    """Domain conflict, such as uniqueness violations."""

    status = 409


class DependencyError(DomainError):
    """Operation blocked due to dependent domain data."""


class StorageFailure(DomainError):
    """The atomic unit could not be committed. Nothing was written."""

    status = 500


def book_not_found(book_id: int) -> str:
    """Return message for missing book."""
    return f"Book {book_id} not found"


def account_not_found(account_id: int) -> str:
    """Return message for missing account."""
    return f"Account {account_id} not found"


def account_not_in_book(account_id: int, book_id: int) -> str:
    """Return message for an account reference outside the book."""
    return f"Account {account_id} does not exist in book {book_id}"


def category_not_found(category_id: int) -> str:
    """Return message for missing category by ID."""
    return f"Category {category_id} not found"


def category_not_in_book(category_id: int, book_id: int) -> str:
    """Return message for a category reference outside the book."""
    return f"Category {category_id} does not exist in book {book_id}"


def category_path_not_found(path: str) -> str:
    """Return message for missing category by path."""
    return f"Category '{path}' not found"


def transaction_not_found(transaction_id: int) -> str:
    """Return message for missing transaction."""
    return f"Transaction {transaction_id} not found or has no splits"


def account_delete_blocked(account_id: int, balance: int, split_count: int) -> str:
    """Return message when account still carries a balance or postings."""
    parts = []
    if balance != 0:
        parts.append(f"a non-zero balance ({balance})")
    if split_count > 0:
        parts.append(f"{split_count} posting{'s' if split_count != 1 else ''}")
    return (
        f"Cannot delete account {account_id}: it has {' and '.join(parts)}. "
        "Archive it instead or delete its transactions first."
    )
