"""Tests for CSV import service."""

from datetime import date

import pytest

from ledgerbook.domain.csv_import import CSVImportService
from ledgerbook.domain.entities import TransactionType
from ledgerbook.domain.errors import InvalidIntent, NotFoundError, ValidationError

HEADER = "date,type,amount,account,description,to_account,category,counterparty,notes,tags\n"


@pytest.fixture
def csv_import_service(temp_db):
    return CSVImportService(temp_db)


@pytest.fixture
def write_csv(tmp_path):
    def _write(content, name="import.csv"):
        path = tmp_path / name
        path.write_text(content, encoding="utf-8")
        return str(path)

    return _write


class TestCSVImportService:
    """Tests for CSVImportService."""

    def test_import_all_types(
        self, csv_import_service, transaction_service, write_csv, sample_book, sample_accounts, sample_categories, balance_of
    ):
        path = write_csv(
            HEADER
            + "2024-01-01,income,1000.00,Checking,Paycheck,,Salary,Acme,,work\n"
            + "2024-01-02,EXPENSE,42.50,Checking,Groceries,,Food > Groceries,Market,weekly,food;home\n"
            + "2024-01-03,transfer,100,Checking,Save,Savings,,,,\n"
        )

        created = csv_import_service.import_csv(path, sample_book.id, creator="alice")

        assert [t.transaction_type for t in created] == [
            TransactionType.INCOME,
            TransactionType.EXPENSE,
            TransactionType.TRANSFER,
        ]
        assert created[1].amount == 4250
        assert created[1].tags == ("food", "home")
        assert created[1].notes == "weekly"
        assert created[1].transaction_date == date(2024, 1, 2)
        assert created[0].created_by == "alice"
        assert balance_of(sample_accounts["Checking"]) == 100000 - 4250 - 10000
        assert balance_of(sample_accounts["Savings"]) == 10000
        assert len(transaction_service.list_transactions(sample_book.id)) == 3

    def test_optional_columns_may_be_absent(self, csv_import_service, write_csv, sample_book, sample_accounts):
        path = write_csv("Date,Type,Amount,Account,Description\n2024-01-05,expense,3.25,Checking,Coffee\n")

        created = csv_import_service.import_csv(path, sample_book.id, creator="alice")

        assert len(created) == 1
        assert created[0].category_id is None
        assert created[0].counterparty is None
        assert created[0].tags == ()

    def test_bad_row_imports_nothing(
        self, csv_import_service, transaction_service, write_csv, sample_book, sample_accounts, balance_of
    ):
        path = write_csv(
            HEADER
            + "2024-01-01,income,10.00,Checking,Fine,,,,,\n"
            + "2024-01-02,expense,abc,Checking,Broken,,,,,\n"
        )

        with pytest.raises(InvalidIntent, match="Row 3") as excinfo:
            csv_import_service.import_csv(path, sample_book.id, creator="alice")

        assert excinfo.value.index == 1
        assert transaction_service.list_transactions(sample_book.id) == []
        assert balance_of(sample_accounts["Checking"]) == 0

    def test_unknown_account_row(self, csv_import_service, write_csv, sample_book, sample_accounts):
        path = write_csv(HEADER + "2024-01-01,expense,1.00,Wallet,Snack,,,,,\n")

        with pytest.raises(InvalidIntent, match="Account 'Wallet' not found") as excinfo:
            csv_import_service.read_intents(path, sample_book.id)

        assert excinfo.value.index == 0

    def test_unknown_type_row(self, csv_import_service, write_csv, sample_book, sample_accounts):
        path = write_csv(HEADER + "2024-01-01,refund,1.00,Checking,Snack,,,,,\n")

        with pytest.raises(InvalidIntent, match="Unknown transaction type"):
            csv_import_service.read_intents(path, sample_book.id)

    def test_transfer_without_destination_rejects_batch(
        self, csv_import_service, transaction_service, write_csv, sample_book, sample_accounts
    ):
        path = write_csv(
            HEADER
            + "2024-01-01,income,10.00,Checking,Fine,,,,,\n"
            + "2024-01-02,transfer,5.00,Checking,Nowhere,,,,,\n"
        )

        with pytest.raises(InvalidIntent) as excinfo:
            csv_import_service.import_csv(path, sample_book.id, creator="alice")

        assert excinfo.value.index == 1
        assert transaction_service.list_transactions(sample_book.id) == []

    def test_missing_columns(self, csv_import_service, write_csv, sample_book):
        path = write_csv("date,amount,description\n2024-01-01,1.00,Snack\n")

        with pytest.raises(ValidationError, match="account, type"):
            csv_import_service.read_intents(path, sample_book.id)

    def test_missing_file(self, csv_import_service, tmp_path, sample_book):
        with pytest.raises(FileNotFoundError):
            csv_import_service.read_intents(str(tmp_path / "missing.csv"), sample_book.id)

    def test_unknown_book(self, csv_import_service, write_csv):
        path = write_csv(HEADER)

        with pytest.raises(NotFoundError):
            csv_import_service.read_intents(path, 999)

    def test_header_only_file(self, csv_import_service, write_csv, sample_book):
        path = write_csv(HEADER)

        assert csv_import_service.read_intents(path, sample_book.id) == []
        with pytest.raises(InvalidIntent, match="no transactions"):
            csv_import_service.import_csv(path, sample_book.id, creator="alice")

    def test_whole_currency_book(self, csv_import_service, book_service, account_service, write_csv):
        book_id = book_service.create_book("Jakarta", currency="IDR", seed_defaults=False)
        account_service.create_account(book_id, "Dompet")
        path = write_csv(HEADER + '2024-01-01,income,"50,000",Dompet,Gift,,,,,\n')

        created = csv_import_service.import_csv(path, book_id, creator="alice")

        assert created[0].amount == 50000
