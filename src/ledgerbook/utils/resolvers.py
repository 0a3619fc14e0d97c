"""Resolve user-supplied names or IDs to book-scoped entities."""

from ledgerbook.domain.account import AccountService
from ledgerbook.domain.book import BookService
from ledgerbook.domain.category import CategoryService
from ledgerbook.domain.entities import Book
from ledgerbook.domain.errors import NotFoundError, category_path_not_found


def _as_id(value: str | int) -> int | None:
    if isinstance(value, int):
        return value
    try:
        return int(value)
    except (ValueError, TypeError):
        return None


def resolve_book(book_service: BookService, book: str | int) -> Book:
    """Resolve book name or ID to a book.

    Raises:
        NotFoundError: If book is not found
    """
    book_id = _as_id(book)
    if book_id is not None:
        found = book_service.get_book(book_id)
        if found is not None:
            return found

    found = book_service.get_book_by_name(str(book))
    if found is None:
        raise NotFoundError(f"Book '{book}' not found")
    return found


def resolve_account(account_service: AccountService, book_id: int, account: str | int) -> int:
    """Resolve account name or ID to an account ID within a book.

    Args:
        account_service: AccountService instance
        book_id: Book the account must belong to
        account: Account name or ID (int or string representation of int)

    Returns:
        Account ID

    Raises:
        NotFoundError: If account is not found in the book
    """
    account_id = _as_id(account)
    if account_id is not None:
        account_obj = account_service.get_account(account_id)
        if account_obj is None or account_obj.book_id != book_id:
            raise NotFoundError(f"Account ID {account_id} not found")
        return account_id

    for acc in account_service.list_accounts(book_id, include_archived=True):
        if acc.name == account:
            return acc.id

    raise NotFoundError(f"Account '{account}' not found")


def resolve_category(category_service: CategoryService, book_id: int, category: str | int) -> int:
    """Resolve category path or ID to a category ID within a book.

    Raises:
        NotFoundError: If category is not found in the book
    """
    category_id = _as_id(category)
    if category_id is not None:
        category_obj = category_service.get_category(category_id)
        if category_obj is None or category_obj.book_id != book_id:
            raise NotFoundError(f"Category ID {category_id} not found")
        return category_id

    category_obj = category_service.get_category_by_path(book_id, str(category))
    if category_obj is None:
        raise NotFoundError(category_path_not_found(str(category)))
    return category_obj.id
