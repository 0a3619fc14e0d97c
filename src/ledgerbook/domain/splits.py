"""Split builder.

Pure functions that turn a transaction intent into its signed split records,
and read the posting back out of a persisted split set. Nothing here touches
storage.

Sign conventions, for an amount ``A``:

- INCOME and EXPENSE post two splits on the same account: ``+A`` DEBIT
  carrying the category and ``-A`` CREDIT without one. The split amounts are
  display magnitudes; the balance effect comes from the balance applier.
- TRANSFER posts ``+A`` DEBIT on the destination and ``-A`` CREDIT on the
  source.
"""

import logging
from datetime import date
from typing import Optional, Sequence

from ledgerbook.domain.balances import balance_deltas
from ledgerbook.domain.entities import (
    BalanceDelta,
    Split,
    SplitDirection,
    SplitDraft,
    SplitPlan,
    Transaction,
    TransactionIntent,
    TransactionType,
)
from ledgerbook.domain.errors import InvalidIntent, StorageFailure

logger = logging.getLogger(__name__)

MAX_TAGS = 10


def _is_id(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def validate_intent(intent: TransactionIntent) -> None:
    """Check an intent against the posting rules of its type.

    Raises:
        InvalidIntent: If the intent cannot be posted
    """
    try:
        transaction_type = TransactionType(intent.transaction_type)
    except ValueError:
        raise InvalidIntent(f"Unknown transaction type: {intent.transaction_type!r}") from None

    amount = intent.amount
    if not _is_id(amount):
        raise InvalidIntent(f"Amount must be an integer in minor units, got {amount!r}")
    if amount <= 0:
        raise InvalidIntent(f"Amount must be positive, got {amount}")

    if not _is_id(intent.book_id):
        raise InvalidIntent("Transaction requires a book")
    if not intent.description or not intent.description.strip():
        raise InvalidIntent("Description is required")
    if not isinstance(intent.transaction_date, date):
        raise InvalidIntent(f"Invalid transaction date: {intent.transaction_date!r}")
    if len(intent.tags) > MAX_TAGS:
        raise InvalidIntent(f"At most {MAX_TAGS} tags are allowed")
    if any(not isinstance(tag, str) or not tag.strip() for tag in intent.tags):
        raise InvalidIntent("Tags must be non-empty strings")

    if not _is_id(intent.source_account_id):
        raise InvalidIntent(f"{transaction_type.value} requires an account")

    if transaction_type == TransactionType.TRANSFER:
        if not _is_id(intent.destination_account_id):
            raise InvalidIntent("TRANSFER requires a destination account")
        if intent.destination_account_id == intent.source_account_id:
            raise InvalidIntent("TRANSFER source and destination accounts must differ")
        if intent.category_id is not None:
            raise InvalidIntent("TRANSFER cannot have a category")
    else:
        if intent.destination_account_id is not None:
            raise InvalidIntent(
                f"{transaction_type.value} cannot have a destination account"
            )
        if intent.category_id is not None and not _is_id(intent.category_id):
            raise InvalidIntent(f"Invalid category: {intent.category_id!r}")


def build_splits(intent: TransactionIntent) -> SplitPlan:
    """Produce the split set and balance deltas for an intent.

    Args:
        intent: Transaction intent

    Returns:
        SplitPlan with splits ordered DEBIT then CREDIT

    Raises:
        InvalidIntent: If the intent violates the posting rules
    """
    validate_intent(intent)
    transaction_type = TransactionType(intent.transaction_type)
    amount = intent.amount

    if transaction_type == TransactionType.TRANSFER:
        splits = (
            SplitDraft(intent.destination_account_id, None, amount, SplitDirection.DEBIT),
            SplitDraft(intent.source_account_id, None, -amount, SplitDirection.CREDIT),
        )
    else:
        splits = (
            SplitDraft(intent.source_account_id, intent.category_id, amount, SplitDirection.DEBIT),
            SplitDraft(intent.source_account_id, None, -amount, SplitDirection.CREDIT),
        )

    deltas = balance_deltas(
        transaction_type,
        amount,
        intent.source_account_id,
        intent.destination_account_id,
    )
    logger.debug("Built %d splits for %s of %d", len(splits), transaction_type.value, amount)
    return SplitPlan(splits=splits, deltas=deltas)


def read_posting(
    transaction_type: TransactionType, splits: Sequence[Split]
) -> tuple[int, int, Optional[int], Optional[int]]:
    """Recover the posting from a persisted split set.

    Returns:
        Tuple of (amount, source_account_id, destination_account_id, category_id)

    Raises:
        StorageFailure: If the split set does not have the shape build_splits produces
    """
    debits = [s for s in splits if s.direction == SplitDirection.DEBIT]
    credits = [s for s in splits if s.direction == SplitDirection.CREDIT]
    if len(splits) != 2 or len(debits) != 1 or len(credits) != 1:
        raise StorageFailure(f"Malformed split set: expected one DEBIT and one CREDIT, got {len(splits)} splits")

    debit, credit = debits[0], credits[0]
    if debit.amount <= 0 or debit.amount + credit.amount != 0:
        raise StorageFailure(f"Unbalanced split set: {debit.amount} and {credit.amount}")

    if TransactionType(transaction_type) == TransactionType.TRANSFER:
        return debit.amount, credit.account_id, debit.account_id, None

    if debit.account_id != credit.account_id:
        raise StorageFailure(
            f"{TransactionType(transaction_type).value} splits must post to one account, got "
            f"{debit.account_id} and {credit.account_id}"
        )
    return debit.amount, debit.account_id, None, debit.category_id


def intent_from_transaction(transaction: Transaction) -> TransactionIntent:
    """Rebuild the intent that produced a stored transaction."""
    amount, source_id, destination_id, category_id = read_posting(
        transaction.transaction_type, transaction.splits
    )
    return TransactionIntent(
        book_id=transaction.book_id,
        transaction_type=transaction.transaction_type,
        amount=amount,
        source_account_id=source_id,
        description=transaction.description,
        transaction_date=transaction.transaction_date,
        destination_account_id=destination_id,
        category_id=category_id,
        counterparty=transaction.counterparty,
        notes=transaction.notes,
        tags=transaction.tags,
    )


def posted_deltas(transaction: Transaction) -> tuple[BalanceDelta, ...]:
    """Return the balance deltas a stored transaction applied when it was posted."""
    amount, source_id, destination_id, _ = read_posting(transaction.transaction_type, transaction.splits)
    return balance_deltas(TransactionType(transaction.transaction_type), amount, source_id, destination_id)
