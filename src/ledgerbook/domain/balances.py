"""Balance applier.

Turns a transaction type, an amount and the accounts involved into signed
per-account balance deltas, and applies them through a storage unit. This is
the only code path that changes ``accounts.balance``.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from typing import TYPE_CHECKING, Iterable, Optional

from ledgerbook.domain.entities import BalanceDelta, TransactionType

if TYPE_CHECKING:
    from ledgerbook.database.base import LedgerUnit

logger = logging.getLogger(__name__)


def balance_deltas(
    transaction_type: TransactionType,
    amount: int,
    source_account_id: int,
    destination_account_id: Optional[int] = None,
) -> tuple[BalanceDelta, ...]:
    """Return the balance deltas a transaction applies.

    INCOME credits its account, EXPENSE debits it, TRANSFER moves the amount
    from the source account to the destination account.
    """
    if transaction_type == TransactionType.INCOME:
        return (BalanceDelta(source_account_id, amount),)
    if transaction_type == TransactionType.EXPENSE:
        return (BalanceDelta(source_account_id, -amount),)
    if transaction_type == TransactionType.TRANSFER:
        if destination_account_id is None:
            raise ValueError("TRANSFER deltas need a destination account")
        return (
            BalanceDelta(destination_account_id, amount),
            BalanceDelta(source_account_id, -amount),
        )
    raise ValueError(f"Unknown transaction type: {transaction_type!r}")


def reverse_deltas(deltas: Iterable[BalanceDelta]) -> tuple[BalanceDelta, ...]:
    """Return the exact inverse of a set of deltas."""
    return tuple(BalanceDelta(d.account_id, -d.delta) for d in deltas)


def net_deltas(deltas: Iterable[BalanceDelta]) -> tuple[BalanceDelta, ...]:
    """Collapse deltas to one entry per account, dropping zero entries.

    Result is ordered by account ID so concurrent units touch rows in the
    same order.
    """
    totals: dict[int, int] = defaultdict(int)
    for d in deltas:
        totals[d.account_id] += d.delta
    return tuple(
        BalanceDelta(account_id, total)
        for account_id, total in sorted(totals.items())
        if total != 0
    )


class BalanceApplier:
    """Applies balance deltas inside an open ledger unit."""

    def __init__(self, unit: LedgerUnit):
        """Initialize balance applier.

        Args:
            unit: Open ledger unit the writes belong to
        """
        self.unit = unit

    def apply(self, book_id: int, deltas: Iterable[BalanceDelta]) -> None:
        """Apply deltas to account balances.

        Raises:
            ReferenceNotFound: If an account does not exist in the book
        """
        for d in net_deltas(deltas):
            logger.debug("Adjusting account %s balance by %s", d.account_id, d.delta)
            self.unit.adjust_balance(book_id, d.account_id, d.delta)

    def reverse(self, book_id: int, deltas: Iterable[BalanceDelta]) -> None:
        """Apply the negation of deltas previously applied."""
        self.apply(book_id, reverse_deltas(deltas))
