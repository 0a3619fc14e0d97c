"""Tests for name and ID resolution."""

import pytest

from ledgerbook.domain.entities import AccountKind, CategoryType
from ledgerbook.domain.errors import NotFoundError
from ledgerbook.utils.resolvers import resolve_account, resolve_book, resolve_category


@pytest.fixture
def other_book(book_service):
    book_id = book_service.create_book("Business", seed_defaults=False)
    return book_service.get_book(book_id)


class TestResolveBook:
    def test_by_name(self, book_service, sample_book):
        assert resolve_book(book_service, "Household").id == sample_book.id

    def test_by_id(self, book_service, sample_book):
        assert resolve_book(book_service, str(sample_book.id)).id == sample_book.id
        assert resolve_book(book_service, sample_book.id).id == sample_book.id

    def test_missing(self, book_service, sample_book):
        with pytest.raises(NotFoundError, match="Book 'Nope' not found"):
            resolve_book(book_service, "Nope")


class TestResolveAccount:
    def test_by_name(self, account_service, sample_book, sample_accounts):
        assert resolve_account(account_service, sample_book.id, "Savings") == sample_accounts["Savings"]

    def test_by_id(self, account_service, sample_book, sample_accounts):
        checking = sample_accounts["Checking"]
        assert resolve_account(account_service, sample_book.id, str(checking)) == checking

    def test_archived_account_resolves(self, account_service, sample_book, sample_accounts):
        account_service.archive_account(sample_accounts["Card"])
        assert resolve_account(account_service, sample_book.id, "Card") == sample_accounts["Card"]

    def test_missing_name(self, account_service, sample_book, sample_accounts):
        with pytest.raises(NotFoundError, match="Account 'Nope' not found"):
            resolve_account(account_service, sample_book.id, "Nope")

    def test_id_from_other_book(self, account_service, other_book, sample_accounts):
        with pytest.raises(NotFoundError):
            resolve_account(account_service, other_book.id, sample_accounts["Checking"])

    def test_name_from_other_book(self, account_service, other_book, sample_accounts):
        account_service.create_account(other_book.id, "Till", AccountKind.ASSET)
        with pytest.raises(NotFoundError):
            resolve_account(account_service, other_book.id, "Checking")


class TestResolveCategory:
    def test_by_path(self, category_service, sample_book, sample_categories):
        assert (
            resolve_category(category_service, sample_book.id, "Food > Groceries")
            == sample_categories["Food > Groceries"]
        )

    def test_by_id(self, category_service, sample_book, sample_categories):
        salary = sample_categories["Salary"]
        assert resolve_category(category_service, sample_book.id, str(salary)) == salary

    def test_missing_path(self, category_service, sample_book, sample_categories):
        with pytest.raises(NotFoundError):
            resolve_category(category_service, sample_book.id, "Food > Takeout")

    def test_id_from_other_book(self, category_service, other_book, sample_categories):
        category_service.create_category(other_book.id, "Food", CategoryType.EXPENSE)
        with pytest.raises(NotFoundError):
            resolve_category(category_service, other_book.id, sample_categories["Salary"])
