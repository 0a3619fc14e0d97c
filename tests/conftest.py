"""Shared pytest fixtures for ledgerbook tests."""

import os
import tempfile
from datetime import date

import pytest

from ledgerbook.database.factories import create_sqlite_database
from ledgerbook.domain.account import AccountService
from ledgerbook.domain.book import BookService
from ledgerbook.domain.category import CategoryService
from ledgerbook.domain.entities import AccountKind, CategoryType, TransactionIntent, TransactionType
from ledgerbook.domain.transaction import TransactionService


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    db = create_sqlite_database(database_path=db_path)
    # Store the path for CLI tests
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def book_service(temp_db):
    """Create a BookService with a temporary database."""
    return BookService(temp_db)


@pytest.fixture
def account_service(temp_db):
    """Create an AccountService with a temporary database."""
    return AccountService(temp_db)


@pytest.fixture
def category_service(temp_db):
    """Create a CategoryService with a temporary database."""
    return CategoryService(temp_db)


@pytest.fixture
def transaction_service(temp_db):
    """Create a TransactionService with a temporary database."""
    return TransactionService(temp_db)


@pytest.fixture
def sample_book(book_service):
    """Create an empty USD book."""
    book_id = book_service.create_book("Household", currency="USD", seed_defaults=False)
    return book_service.get_book(book_id)


@pytest.fixture
def sample_accounts(account_service, sample_book):
    """Create accounts in the sample book. Returns name -> ID."""
    return {
        "Checking": account_service.create_account(sample_book.id, "Checking", AccountKind.ASSET, bank_name="Chase"),
        "Savings": account_service.create_account(sample_book.id, "Savings", AccountKind.ASSET),
        "Card": account_service.create_account(sample_book.id, "Card", AccountKind.LIABILITY),
    }


@pytest.fixture
def sample_categories(category_service, sample_book):
    """Create categories in the sample book. Returns path -> ID."""
    food = category_service.create_category(sample_book.id, "Food", CategoryType.EXPENSE)
    groceries = category_service.create_category(
        sample_book.id, "Groceries", CategoryType.EXPENSE, parent_path="Food"
    )
    salary = category_service.create_category(sample_book.id, "Salary", CategoryType.INCOME)
    return {"Food": food, "Food > Groceries": groceries, "Salary": salary}


@pytest.fixture
def make_intent(sample_book):
    """Build transaction intents for the sample book."""

    def _make(transaction_type, amount, source, destination=None, category=None, **fields):
        fields.setdefault("book_id", sample_book.id)
        fields.setdefault("description", f"{TransactionType(transaction_type).value.title()} entry")
        fields.setdefault("transaction_date", date(2024, 1, 15))
        return TransactionIntent(
            transaction_type=TransactionType(transaction_type),
            amount=amount,
            source_account_id=source,
            destination_account_id=destination,
            category_id=category,
            **fields,
        )

    return _make


@pytest.fixture
def balance_of(account_service):
    """Return a function reading an account's stored balance."""

    def _balance(account_id):
        return account_service.get_account(account_id).balance

    return _balance


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()
