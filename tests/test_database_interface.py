"""Tests for Database interface returning domain models."""

from datetime import datetime

import pytest

from ledgerbook.database.factories import create_database, create_sqlite_database
from ledgerbook.domain import entities
from ledgerbook.domain.entities import AccountKind, CategoryType, SplitDirection, SplitDraft
from ledgerbook.domain.errors import (
    ConflictError,
    DependencyError,
    InvalidIntent,
    NotFoundError,
    ReferenceNotFound,
    StorageFailure,
)


class TestDatabaseInterface:
    """Tests to verify Database interface returns domain models."""

    def test_get_book_returns_domain_model(self, temp_db):
        book_id = temp_db.create_book(name="Household", currency="EUR")

        book = temp_db.get_book(book_id)

        assert isinstance(book, entities.Book)
        assert book.currency == "EUR"
        assert isinstance(book.created_at, datetime)
        assert temp_db.get_book_by_name("Household") == book
        assert temp_db.get_book(999) is None

    def test_create_book_with_seed_rows(self, temp_db):
        book_id = temp_db.create_book(
            name="Seeded",
            currency="USD",
            accounts=[("Cash", AccountKind.ASSET)],
            categories=[("Salary", CategoryType.INCOME)],
        )

        accounts = temp_db.list_accounts(book_id)
        categories = temp_db.list_categories(book_id)

        assert [(a.name, a.kind, a.balance) for a in accounts] == [("Cash", AccountKind.ASSET, 0)]
        assert [(c.name, c.category_type) for c in categories] == [("Salary", CategoryType.INCOME)]

    def test_get_account_returns_domain_model(self, temp_db, sample_book):
        account_id = temp_db.create_account(sample_book.id, "Test Account", AccountKind.ASSET, bank_name="Test Bank")

        account = temp_db.get_account(account_id)

        assert isinstance(account, entities.Account)
        assert account.name == "Test Account"
        assert account.bank_name == "Test Bank"
        assert account.balance == 0
        assert account.is_archived is False

    def test_list_accounts_orders_by_kind_then_name(self, temp_db, sample_book):
        temp_db.create_account(sample_book.id, "Zeta", AccountKind.ASSET)
        temp_db.create_account(sample_book.id, "Loan", AccountKind.LIABILITY)
        temp_db.create_account(sample_book.id, "Alpha", AccountKind.ASSET)

        names = [a.name for a in temp_db.list_accounts(sample_book.id)]

        assert names == ["Alpha", "Zeta", "Loan"]

    def test_duplicate_account_name_is_conflict(self, temp_db, sample_book):
        temp_db.create_account(sample_book.id, "Cash", AccountKind.ASSET)

        with pytest.raises(ConflictError):
            temp_db.create_account(sample_book.id, "Cash", AccountKind.ASSET)

    def test_update_missing_account(self, temp_db):
        with pytest.raises(NotFoundError):
            temp_db.update_account(999, name="Nope")

    def test_delete_account_with_splits_is_blocked(
        self, temp_db, transaction_service, make_intent, sample_accounts
    ):
        transaction_service.create_transaction(
            make_intent("INCOME", 100, sample_accounts["Savings"]), creator="alice"
        )

        with pytest.raises(DependencyError):
            temp_db.delete_account(sample_accounts["Savings"])

        assert temp_db.get_account(sample_accounts["Savings"]) is not None

    def test_category_tree(self, temp_db, sample_book, sample_categories):
        tree = temp_db.get_category_tree(sample_book.id)

        assert [node["name"] for node in tree] == ["Food", "Salary"]
        food = tree[0]
        assert food["parent_id"] is None
        assert [child["name"] for child in food["children"]] == ["Groceries"]
        assert food["children"][0]["children"] == []

    def test_category_by_path_tolerates_spacing(self, temp_db, sample_book, sample_categories):
        category = temp_db.get_category_by_path(sample_book.id, "Food>Groceries")

        assert isinstance(category, entities.Category)
        assert category.id == sample_categories["Food > Groceries"]


class TestLedgerUnit:
    """Tests for the atomic ledger unit."""

    def test_commit_on_exit(self, temp_db, make_intent, sample_accounts, balance_of):
        intent = make_intent("EXPENSE", 250, sample_accounts["Checking"], tags=("a", "b"))

        with temp_db.unit_of_work() as unit:
            transaction_id = unit.insert_transaction(intent, creator="alice")
            unit.insert_splits(
                intent.book_id,
                transaction_id,
                [
                    SplitDraft(sample_accounts["Checking"], None, 250, SplitDirection.DEBIT),
                    SplitDraft(sample_accounts["Checking"], None, -250, SplitDirection.CREDIT),
                ],
            )
            unit.adjust_balance(intent.book_id, sample_accounts["Checking"], -250)

        txn = temp_db.get_transaction(transaction_id)
        assert txn.tags == ("a", "b")
        assert [s.position for s in txn.splits] == [0, 1]
        assert balance_of(sample_accounts["Checking"]) == -250

    def test_domain_error_rolls_back(self, temp_db, make_intent, sample_book, sample_accounts, balance_of):
        intent = make_intent("INCOME", 500, sample_accounts["Checking"])

        with pytest.raises(InvalidIntent):
            with temp_db.unit_of_work() as unit:
                unit.insert_transaction(intent, creator="alice")
                unit.adjust_balance(intent.book_id, sample_accounts["Checking"], 500)
                raise InvalidIntent("stop")

        assert temp_db.list_transactions(sample_book.id) == []
        assert balance_of(sample_accounts["Checking"]) == 0

    def test_adjust_unknown_account(self, temp_db, sample_book):
        with pytest.raises(ReferenceNotFound):
            with temp_db.unit_of_work() as unit:
                unit.adjust_balance(sample_book.id, 999, 100)

    def test_adjust_account_from_other_book(self, temp_db, book_service, sample_accounts, balance_of):
        other_book = book_service.create_book("Business", seed_defaults=False)

        with pytest.raises(ReferenceNotFound):
            with temp_db.unit_of_work() as unit:
                unit.adjust_balance(other_book, sample_accounts["Checking"], 100)

        assert balance_of(sample_accounts["Checking"]) == 0

    def test_split_on_unknown_account(self, temp_db, make_intent, sample_book, sample_accounts):
        intent = make_intent("INCOME", 500, sample_accounts["Checking"])

        with pytest.raises(ReferenceNotFound):
            with temp_db.unit_of_work() as unit:
                transaction_id = unit.insert_transaction(intent, creator="alice")
                unit.insert_splits(
                    intent.book_id, transaction_id, [SplitDraft(999, None, 500, SplitDirection.DEBIT)]
                )

        assert temp_db.list_transactions(sample_book.id) == []

    def test_read_for_update(self, temp_db, transaction_service, make_intent, sample_accounts):
        created = transaction_service.create_transaction(
            make_intent("INCOME", 500, sample_accounts["Checking"]), creator="alice"
        )

        with temp_db.unit_of_work() as unit:
            locked = unit.get_transaction(created.id, for_update=True)
            missing = unit.get_transaction(999, for_update=True)

        assert locked == created
        assert missing is None


class TestFactories:
    """Tests for database factory configuration."""

    def test_sqlite_path_from_environment(self, monkeypatch, tmp_path):
        db_path = tmp_path / "env.db"
        monkeypatch.setenv("LEDGERBOOK_DB_PATH", str(db_path))

        db = create_sqlite_database()

        assert db.database_url == f"sqlite:///{db_path}"
        db.disconnect()

    def test_database_url_from_environment(self, monkeypatch, tmp_path):
        url = f"sqlite:///{tmp_path / 'url.db'}"
        monkeypatch.setenv("LEDGERBOOK_DATABASE_URL", url)

        db = create_database()
        db.initialize_schema()

        assert db.database_url == url
        assert db.list_books() == []
        db.disconnect()

    def test_explicit_path_without_url(self, monkeypatch, tmp_path):
        monkeypatch.delenv("LEDGERBOOK_DATABASE_URL", raising=False)
        db_path = tmp_path / "explicit.db"

        db = create_database(database_path=str(db_path))

        assert db.database_url == f"sqlite:///{db_path}"
        db.disconnect()

    def test_read_failure_is_typed(self, tmp_path):
        # Schema never created, so every query fails
        db = create_sqlite_database(str(tmp_path / "blank.db"))

        with pytest.raises(StorageFailure, match="Database read failed"):
            db.get_book(1)

        db.disconnect()
