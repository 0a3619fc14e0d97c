"""Domain model entities for ledgerbook.

These are pure data classes representing ledger concepts, independent of the
database schema. Amounts are always integers in minor currency units.
"""

from dataclasses import dataclass, fields, replace
from datetime import datetime, date
from enum import Enum
from typing import Any, Optional, Union


class AccountKind(str, Enum):
    """Kind of store of value an account represents."""

    ASSET = "ASSET"
    LIABILITY = "LIABILITY"
    EQUITY = "EQUITY"


class CategoryType(str, Enum):
    """Whether a category classifies income or expenses."""

    INCOME = "INCOME"
    EXPENSE = "EXPENSE"


class TransactionType(str, Enum):
    """User-level kind of a transaction."""

    INCOME = "INCOME"
    EXPENSE = "EXPENSE"
    TRANSFER = "TRANSFER"


class SplitDirection(str, Enum):
    """Display tag of a split. The signed amount is authoritative."""

    DEBIT = "DEBIT"
    CREDIT = "CREDIT"


@dataclass(frozen=True)
class Book:
    """Tenant-scoped ledger owning accounts, categories and transactions."""

    id: int
    name: str
    currency: str
    created_at: datetime


@dataclass(frozen=True)
class Account:
    """Account domain entity with its maintained running balance."""

    id: int
    book_id: int
    name: str
    kind: AccountKind
    balance: int
    is_archived: bool
    bank_name: Optional[str]
    account_number: Optional[str]
    created_at: datetime


@dataclass(frozen=True)
class Category:
    """Category domain entity with hierarchical structure."""

    id: int
    book_id: int
    name: str
    category_type: CategoryType
    parent_id: Optional[int]
    created_at: datetime


@dataclass(frozen=True)
class SplitDraft:
    """A split record produced by the split builder, not yet persisted."""

    account_id: int
    category_id: Optional[int]
    amount: int
    direction: SplitDirection


@dataclass(frozen=True)
class Split:
    """One persisted signed leg of a transaction."""

    id: int
    transaction_id: int
    account_id: int
    category_id: Optional[int]
    amount: int
    direction: SplitDirection
    position: int


@dataclass(frozen=True)
class Transaction:
    """Transaction header hydrated with its ordered splits."""

    id: int
    book_id: int
    transaction_type: TransactionType
    description: str
    transaction_date: date
    counterparty: Optional[str]
    notes: Optional[str]
    tags: tuple[str, ...]
    created_by: str
    updated_by: Optional[str]
    created_at: datetime
    updated_at: datetime
    splits: tuple[Split, ...] = ()

    @property
    def amount(self) -> int:
        """Magnitude of the transaction (the DEBIT leg)."""
        return max((split.amount for split in self.splits), default=0)


@dataclass(frozen=True)
class BalanceDelta:
    """Signed change to apply to one account's balance."""

    account_id: int
    delta: int


@dataclass(frozen=True)
class SplitPlan:
    """Output of the split builder: splits to insert and deltas to apply."""

    splits: tuple[SplitDraft, ...]
    deltas: tuple[BalanceDelta, ...]


@dataclass(frozen=True)
class BalanceMismatch:
    """An account whose stored balance differs from a replay of its postings."""

    account_id: int
    name: str
    stored: int
    expected: int


@dataclass(frozen=True)
class TransactionIntent:
    """What the caller wants to record.

    For INCOME and EXPENSE the single account is ``source_account_id``.
    For TRANSFER money moves from ``source_account_id`` to
    ``destination_account_id``.
    """

    book_id: int
    transaction_type: TransactionType
    amount: int
    source_account_id: Optional[int]
    description: str
    transaction_date: date
    destination_account_id: Optional[int] = None
    category_id: Optional[int] = None
    counterparty: Optional[str] = None
    notes: Optional[str] = None
    tags: tuple[str, ...] = ()


class _Unset:
    """Marker for a patch field the caller did not provide."""

    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False


UNSET = _Unset()


@dataclass(frozen=True)
class TransactionPatch:
    """Partial update of a transaction.

    Every mutable field is listed explicitly. Fields left as ``UNSET`` keep
    their current value; ``None`` clears an optional field.
    """

    transaction_type: Union[TransactionType, _Unset] = UNSET
    amount: Union[int, _Unset] = UNSET
    source_account_id: Union[int, _Unset] = UNSET
    destination_account_id: Union[Optional[int], _Unset] = UNSET
    category_id: Union[Optional[int], _Unset] = UNSET
    description: Union[str, _Unset] = UNSET
    transaction_date: Union[date, _Unset] = UNSET
    counterparty: Union[Optional[str], _Unset] = UNSET
    notes: Union[Optional[str], _Unset] = UNSET
    tags: Union[Optional[tuple[str, ...]], _Unset] = UNSET

    def changed_fields(self) -> dict[str, Any]:
        """Return the fields that were set on this patch."""
        return {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if getattr(self, f.name) is not UNSET
        }

    def is_empty(self) -> bool:
        """Return True when no field was set."""
        return not self.changed_fields()

    def apply_to(self, intent: TransactionIntent) -> TransactionIntent:
        """Overlay this patch on an existing intent."""
        changes = self.changed_fields()
        if "tags" in changes and changes["tags"] is not None:
            changes["tags"] = tuple(changes["tags"])
        elif "tags" in changes:
            changes["tags"] = ()
        return replace(intent, **changes)
