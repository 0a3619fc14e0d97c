"""Transaction domain service.

Every write runs inside exactly one ledger unit: the header, its splits and
the balance changes commit together or not at all.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import TYPE_CHECKING, Iterable, Optional

from ledgerbook.domain.balances import BalanceApplier
from ledgerbook.domain.entities import (
    SplitPlan,
    Transaction as TransactionEntity,
    TransactionIntent,
    TransactionPatch,
    TransactionType,
)
from ledgerbook.domain.errors import (
    InvalidIntent,
    NotFound,
    ReferenceNotFound,
    transaction_not_found,
)
from ledgerbook.domain.splits import build_splits, intent_from_transaction, posted_deltas

if TYPE_CHECKING:
    from ledgerbook.database.base import Database, LedgerUnit

logger = logging.getLogger(__name__)


def _require_actor(actor: Optional[str], role: str) -> None:
    if not actor or not actor.strip():
        raise InvalidIntent(f"Transaction {role} is required")


class TransactionService:
    """Service for posting, editing and removing transactions."""

    def __init__(self, db: Database):
        """Initialize transaction service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_transaction(self, intent: TransactionIntent, creator: str) -> TransactionEntity:
        """Create a transaction with its splits and apply its balance deltas.

        Args:
            intent: What to record
            creator: Identity recorded as the creator

        Returns:
            The stored transaction with its splits

        Raises:
            InvalidIntent: If the intent is malformed (nothing is written)
            ReferenceNotFound: If an account or category is missing or in another book
            StorageFailure: If the unit cannot be committed
        """
        _require_actor(creator, "creator")
        plan = build_splits(intent)

        with self.db.unit_of_work() as unit:
            transaction_id = self._post(unit, intent, plan, creator)
            created = unit.get_transaction(transaction_id)

        logger.info(
            "Created %s transaction %s in book %s",
            created.transaction_type.value,
            transaction_id,
            intent.book_id,
        )
        return created

    def create_batch(self, intents: Iterable[TransactionIntent], creator: str) -> list[TransactionEntity]:
        """Create several transactions in one atomic unit.

        All intents are validated before anything is written. One invalid
        intent rejects the whole batch.

        Args:
            intents: Intents to record, in order
            creator: Identity recorded as the creator

        Returns:
            Created transactions in input order

        Raises:
            InvalidIntent: If the batch is empty or any intent is malformed.
                ``index`` is the position of the first offending intent.
            ReferenceNotFound: If any intent references a missing account or category
            StorageFailure: If the unit cannot be committed
        """
        _require_actor(creator, "creator")
        intents = list(intents)
        if not intents:
            raise InvalidIntent("Batch contains no transactions")

        plans = []
        for index, intent in enumerate(intents):
            try:
                plans.append(build_splits(intent))
            except InvalidIntent as e:
                raise InvalidIntent(f"Item {index}: {e}", index=index) from e

        with self.db.unit_of_work() as unit:
            transaction_ids = [
                self._post(unit, intent, plan, creator) for intent, plan in zip(intents, plans)
            ]
            created = [unit.get_transaction(transaction_id) for transaction_id in transaction_ids]

        logger.info("Created batch of %d transactions", len(created))
        return created

    def get_transaction(self, transaction_id: int) -> Optional[TransactionEntity]:
        """Get transaction by ID.

        Args:
            transaction_id: Transaction ID

        Returns:
            Transaction entity with splits, or None if not found
        """
        return self.db.get_transaction(transaction_id)

    def update_transaction(
        self, transaction_id: int, intent: TransactionIntent, editor: str
    ) -> TransactionEntity:
        """Replace a transaction with a new intent.

        The stored splits are reversed and removed, then the new intent is
        posted in their place, in one unit.

        Args:
            transaction_id: Transaction ID to update
            intent: Full replacement intent
            editor: Identity recorded as the last editor

        Returns:
            The updated transaction with its new splits

        Raises:
            InvalidIntent: If the intent is malformed (nothing is written)
            NotFound: If the transaction or its splits do not exist
            ReferenceNotFound: If the intent points at another book, or references
                a missing account or category
            StorageFailure: If the unit cannot be committed
        """
        _require_actor(editor, "editor")
        plan = build_splits(intent)

        with self.db.unit_of_work() as unit:
            existing = self._load_for_change(unit, transaction_id)
            if existing.book_id != intent.book_id:
                raise ReferenceNotFound(
                    f"Transaction {transaction_id} does not belong to book {intent.book_id}"
                )
            self._rebuild(unit, existing, intent, plan, editor)
            updated = unit.get_transaction(transaction_id)

        logger.info("Updated transaction %s", transaction_id)
        return updated

    def amend_transaction(
        self, transaction_id: int, patch: TransactionPatch, editor: str
    ) -> TransactionEntity:
        """Apply a partial update to a transaction.

        Fields not set on the patch keep their stored values. The merged
        intent then goes through the same reverse-and-rebuild path as
        update_transaction.

        Raises:
            InvalidIntent: If the patch is empty or the merged intent is malformed
            NotFound: If the transaction or its splits do not exist
            ReferenceNotFound: If a referenced account or category is missing
            StorageFailure: If the unit cannot be committed
        """
        _require_actor(editor, "editor")
        if patch.is_empty():
            raise InvalidIntent("Nothing to update")

        with self.db.unit_of_work() as unit:
            existing = self._load_for_change(unit, transaction_id)
            intent = patch.apply_to(intent_from_transaction(existing))
            plan = build_splits(intent)
            self._rebuild(unit, existing, intent, plan, editor)
            updated = unit.get_transaction(transaction_id)

        logger.info(
            "Amended transaction %s (%s)", transaction_id, ", ".join(sorted(patch.changed_fields()))
        )
        return updated

    def delete_transaction(self, transaction_id: int, book_id: Optional[int] = None) -> None:
        """Delete a transaction and reverse its balance effect.

        Args:
            transaction_id: Transaction ID to delete
            book_id: If given, the transaction must belong to this book

        Raises:
            NotFound: If the transaction or its splits do not exist
            ReferenceNotFound: If the transaction belongs to another book
            StorageFailure: If the unit cannot be committed
        """
        with self.db.unit_of_work() as unit:
            existing = self._load_for_change(unit, transaction_id)
            if book_id is not None and existing.book_id != book_id:
                raise ReferenceNotFound(f"Transaction {transaction_id} does not belong to book {book_id}")

            BalanceApplier(unit).reverse(existing.book_id, posted_deltas(existing))
            unit.delete_splits(transaction_id)
            unit.delete_transaction(transaction_id)

        logger.info("Deleted transaction %s", transaction_id)

    def list_transactions(
        self,
        book_id: int,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        transaction_type: Optional[TransactionType] = None,
        account_id: Optional[int] = None,
        category_id: Optional[int] = None,
    ) -> list[TransactionEntity]:
        """List transactions of a book with filters.

        Args:
            book_id: Book to list
            start_date: Optional start date filter
            end_date: Optional end date filter
            transaction_type: Optional type filter
            account_id: Optional account ID filter
            category_id: Optional category ID filter

        Returns:
            List of transaction entities, newest first
        """
        return self.db.list_transactions(
            book_id=book_id,
            start_date=start_date,
            end_date=end_date,
            transaction_type=transaction_type,
            account_id=account_id,
            category_id=category_id,
        )

    def _post(self, unit: LedgerUnit, intent: TransactionIntent, plan: SplitPlan, creator: str) -> int:
        transaction_id = unit.insert_transaction(intent, creator)
        unit.insert_splits(intent.book_id, transaction_id, plan.splits)
        BalanceApplier(unit).apply(intent.book_id, plan.deltas)
        return transaction_id

    def _load_for_change(self, unit: LedgerUnit, transaction_id: int) -> TransactionEntity:
        existing = unit.get_transaction(transaction_id, for_update=True)
        if existing is None or not existing.splits:
            raise NotFound(transaction_not_found(transaction_id))
        return existing

    def _rebuild(
        self,
        unit: LedgerUnit,
        existing: TransactionEntity,
        intent: TransactionIntent,
        plan: SplitPlan,
        editor: str,
    ) -> None:
        applier = BalanceApplier(unit)
        applier.reverse(existing.book_id, posted_deltas(existing))
        unit.delete_splits(existing.id)
        unit.insert_splits(intent.book_id, existing.id, plan.splits)
        applier.apply(intent.book_id, plan.deltas)
        unit.update_transaction_header(existing.id, intent, editor)
