"""Tests for batch creation (all-or-nothing)."""

import pytest

from ledgerbook.domain.entities import TransactionType
from ledgerbook.domain.errors import InvalidIntent, ReferenceNotFound


@pytest.fixture
def funded_checking(transaction_service, make_intent, sample_accounts):
    transaction_service.create_transaction(
        make_intent(TransactionType.INCOME, 100000, sample_accounts["Checking"]), creator="alice"
    )
    return sample_accounts["Checking"]


class TestCreateBatch:
    """CreateBatch commits every intent or none."""

    def test_creates_all_in_order(self, transaction_service, make_intent, sample_accounts, balance_of):
        intents = [
            make_intent(TransactionType.INCOME, 1000, sample_accounts["Checking"], description="first"),
            make_intent(TransactionType.EXPENSE, 300, sample_accounts["Checking"], description="second"),
            make_intent(
                TransactionType.TRANSFER,
                200,
                sample_accounts["Checking"],
                sample_accounts["Savings"],
                description="third",
            ),
        ]

        created = transaction_service.create_batch(intents, creator="alice")

        assert [t.description for t in created] == ["first", "second", "third"]
        assert all(sum(s.amount for s in t.splits) == 0 for t in created)
        assert balance_of(sample_accounts["Checking"]) == 500
        assert balance_of(sample_accounts["Savings"]) == 200

    def test_invalid_item_aborts_whole_batch(
        self, transaction_service, make_intent, funded_checking, sample_book, balance_of
    ):
        intents = [
            make_intent(TransactionType.EXPENSE, 10000, funded_checking),
            make_intent(TransactionType.EXPENSE, 0, funded_checking),
            make_intent(TransactionType.EXPENSE, 20000, funded_checking),
        ]

        with pytest.raises(InvalidIntent) as excinfo:
            transaction_service.create_batch(intents, creator="alice")

        assert excinfo.value.index == 1
        assert "Item 1" in str(excinfo.value)
        assert balance_of(funded_checking) == 100000
        # Only the funding deposit exists
        assert len(transaction_service.list_transactions(sample_book.id)) == 1

    def test_first_invalid_item_is_reported(self, transaction_service, make_intent, sample_accounts):
        intents = [
            make_intent(TransactionType.EXPENSE, 100, sample_accounts["Checking"]),
            make_intent(TransactionType.TRANSFER, 100, sample_accounts["Checking"]),
            make_intent(TransactionType.EXPENSE, -1, sample_accounts["Checking"]),
        ]

        with pytest.raises(InvalidIntent) as excinfo:
            transaction_service.create_batch(intents, creator="alice")

        assert excinfo.value.index == 1

    def test_storage_rejection_aborts_whole_batch(
        self, transaction_service, make_intent, funded_checking, sample_book, balance_of
    ):
        intents = [
            make_intent(TransactionType.EXPENSE, 10000, funded_checking),
            make_intent(TransactionType.EXPENSE, 10000, 9999),
        ]

        with pytest.raises(ReferenceNotFound):
            transaction_service.create_batch(intents, creator="alice")

        assert balance_of(funded_checking) == 100000
        assert len(transaction_service.list_transactions(sample_book.id)) == 1

    def test_same_account_many_times(self, transaction_service, make_intent, funded_checking, balance_of):
        intents = [make_intent(TransactionType.EXPENSE, 1000, funded_checking) for _ in range(25)]

        created = transaction_service.create_batch(intents, creator="alice")

        assert len(created) == 25
        assert balance_of(funded_checking) == 75000

    def test_empty_batch(self, transaction_service):
        with pytest.raises(InvalidIntent, match="no transactions"):
            transaction_service.create_batch([], creator="alice")

    def test_accepts_generator(self, transaction_service, make_intent, sample_accounts):
        created = transaction_service.create_batch(
            (make_intent(TransactionType.INCOME, n, sample_accounts["Checking"]) for n in (1, 2)),
            creator="alice",
        )
        assert [t.amount for t in created] == [1, 2]
