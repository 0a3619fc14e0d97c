"""Account domain service."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Optional

from ledgerbook.domain.entities import Account as AccountEntity, AccountKind, BalanceMismatch
from ledgerbook.domain.errors import (
    ConflictError,
    DependencyError,
    NotFoundError,
    ValidationError,
    account_delete_blocked,
    account_not_found,
    book_not_found,
)
from ledgerbook.domain.splits import posted_deltas

if TYPE_CHECKING:
    from ledgerbook.database.base import Database

logger = logging.getLogger(__name__)


class AccountService:
    """Service for managing accounts."""

    def __init__(self, db: Database):
        """Initialize account service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_account(
        self,
        book_id: int,
        name: str,
        kind: AccountKind = AccountKind.ASSET,
        bank_name: Optional[str] = None,
        account_number: Optional[str] = None,
    ) -> int:
        """Create a new account with a zero balance.

        Args:
            book_id: Owning book
            name: Account name, unique within the book
            kind: ASSET, LIABILITY or EQUITY
            bank_name: Optional bank name
            account_number: Optional account number

        Returns:
            Account ID

        Raises:
            ValidationError: If the name is empty or the kind is unknown
            NotFoundError: If the book doesn't exist
            ConflictError: If account name already exists in the book
        """
        if not name or not name.strip():
            raise ValidationError("Account name is required")
        try:
            kind = AccountKind(kind)
        except ValueError:
            raise ValidationError(f"Unknown account kind: {kind!r}") from None

        if self.db.get_book(book_id) is None:
            raise NotFoundError(book_not_found(book_id))

        for acc in self.db.list_accounts(book_id, include_archived=True):
            if acc.name == name:
                raise ConflictError(f"Account with name '{name}' already exists")

        account_id = self.db.create_account(
            book_id=book_id, name=name, kind=kind, bank_name=bank_name, account_number=account_number
        )
        logger.info("Created %s account %s '%s' in book %s", kind.value, account_id, name, book_id)
        return account_id

    def get_account(self, account_id: int) -> Optional[AccountEntity]:
        """Get account by ID.

        Args:
            account_id: Account ID

        Returns:
            Account entity or None if not found
        """
        return self.db.get_account(account_id)

    def list_accounts(self, book_id: int, include_archived: bool = False) -> list[AccountEntity]:
        """List accounts of a book.

        Args:
            book_id: Book ID
            include_archived: Also return archived accounts

        Returns:
            List of account entities
        """
        return self.db.list_accounts(book_id, include_archived=include_archived)

    def rename_account(self, account_id: int, name: str, bank_name: Optional[str] = None) -> None:
        """Rename an account.

        Args:
            account_id: Account ID to rename
            name: New account name
            bank_name: Optional new bank name (if None, bank_name is not updated)

        Raises:
            NotFoundError: If account not found
            ConflictError: If name already exists in the book
        """
        if not name or not name.strip():
            raise ValidationError("Account name is required")
        self._require(account_id)
        self.db.update_account(account_id, name=name, bank_name=bank_name)
        logger.info("Renamed account %s to '%s'", account_id, name)

    def archive_account(self, account_id: int) -> None:
        """Hide an account from default listings. Its postings are kept."""
        self._require(account_id)
        self.db.update_account(account_id, is_archived=True)
        logger.info("Archived account %s", account_id)

    def unarchive_account(self, account_id: int) -> None:
        """Return an archived account to default listings."""
        self._require(account_id)
        self.db.update_account(account_id, is_archived=False)
        logger.info("Unarchived account %s", account_id)

    def delete_account(self, account_id: int) -> None:
        """Delete an account.

        Args:
            account_id: Account ID to delete

        Raises:
            NotFoundError: If account not found
            DependencyError: If the account has a non-zero balance or postings
        """
        account = self._require(account_id)

        split_count = self.db.get_account_split_count(account_id)
        if account.balance != 0 or split_count > 0:
            raise DependencyError(account_delete_blocked(account_id, account.balance, split_count))

        self.db.delete_account(account_id)
        logger.info("Deleted account %s", account_id)

    def recompute_balance(self, account_id: int) -> int:
        """Replay every posting on an account and return the balance it implies.

        Raises:
            NotFoundError: If account not found
        """
        self._require(account_id)
        balance = 0
        for txn in self.db.list_account_transactions(account_id):
            balance += sum(d.delta for d in posted_deltas(txn) if d.account_id == account_id)
        return balance

    def verify_balances(self, book_id: int) -> list[BalanceMismatch]:
        """Compare each account's stored balance with a replay of its postings.

        Returns:
            Accounts whose balances disagree; empty when the book is consistent
        """
        mismatches = []
        for account in self.db.list_accounts(book_id, include_archived=True):
            expected = self.recompute_balance(account.id)
            if expected != account.balance:
                logger.warning(
                    "Account %s balance %s differs from replayed %s", account.id, account.balance, expected
                )
                mismatches.append(
                    BalanceMismatch(
                        account_id=account.id, name=account.name, stored=account.balance, expected=expected
                    )
                )
        return mismatches

    def _require(self, account_id: int) -> AccountEntity:
        account = self.db.get_account(account_id)
        if account is None:
            raise NotFoundError(account_not_found(account_id))
        return account
