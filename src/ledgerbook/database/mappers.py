"""Mapper functions to convert between domain models and SQLAlchemy models.

This layer isolates the conversion logic, including decoding of the JSON
``tags`` column into a typed tuple.
"""

import json

from ledgerbook.domain import entities as domain
from ledgerbook.database.models import (
    Book as ORMBook,
    Account as ORMAccount,
    Category as ORMCategory,
    Transaction as ORMTransaction,
    TransactionSplit as ORMTransactionSplit,
)


def encode_tags(tags) -> str:
    """Serialize tags for the ``transactions.tags`` column."""
    return json.dumps(list(tags or ()))


def decode_tags(raw: str | None) -> tuple[str, ...]:
    """Deserialize the ``transactions.tags`` column."""
    if not raw:
        return ()
    return tuple(str(tag) for tag in json.loads(raw))


def book_to_domain(orm_book: ORMBook) -> domain.Book:
    """Convert SQLAlchemy Book model to domain Book entity."""
    return domain.Book(
        id=orm_book.id,
        name=orm_book.name,
        currency=orm_book.currency,
        created_at=orm_book.created_at,
    )


def account_to_domain(orm_account: ORMAccount) -> domain.Account:
    """Convert SQLAlchemy Account model to domain Account entity."""
    return domain.Account(
        id=orm_account.id,
        book_id=orm_account.book_id,
        name=orm_account.name,
        kind=domain.AccountKind(orm_account.kind),
        balance=orm_account.balance,
        is_archived=bool(orm_account.is_archived),
        bank_name=orm_account.bank_name,
        account_number=orm_account.account_number,
        created_at=orm_account.created_at,
    )


def category_to_domain(orm_category: ORMCategory) -> domain.Category:
    """Convert SQLAlchemy Category model to domain Category entity."""
    return domain.Category(
        id=orm_category.id,
        book_id=orm_category.book_id,
        name=orm_category.name,
        category_type=domain.CategoryType(orm_category.category_type),
        parent_id=orm_category.parent_id,
        created_at=orm_category.created_at,
    )


def split_to_domain(orm_split: ORMTransactionSplit) -> domain.Split:
    """Convert SQLAlchemy TransactionSplit model to domain Split entity."""
    return domain.Split(
        id=orm_split.id,
        transaction_id=orm_split.transaction_id,
        account_id=orm_split.account_id,
        category_id=orm_split.category_id,
        amount=orm_split.amount,
        direction=domain.SplitDirection(orm_split.direction),
        position=orm_split.position,
    )


def transaction_to_domain(orm_transaction: ORMTransaction) -> domain.Transaction:
    """Convert SQLAlchemy Transaction model (with splits) to domain Transaction entity."""
    splits = sorted(orm_transaction.splits, key=lambda s: s.position)
    return domain.Transaction(
        id=orm_transaction.id,
        book_id=orm_transaction.book_id,
        transaction_type=domain.TransactionType(orm_transaction.transaction_type),
        description=orm_transaction.description,
        transaction_date=orm_transaction.transaction_date,
        counterparty=orm_transaction.counterparty,
        notes=orm_transaction.notes,
        tags=decode_tags(orm_transaction.tags),
        created_by=orm_transaction.created_by,
        updated_by=orm_transaction.updated_by,
        created_at=orm_transaction.created_at,
        updated_at=orm_transaction.updated_at,
        splits=tuple(split_to_domain(s) for s in splits),
    )
