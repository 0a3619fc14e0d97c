"""CSV import domain service.

Every row becomes one transaction intent and the whole file is posted as a
single batch, so a file either imports completely or not at all.

Expected columns (header row required, names are case-insensitive):

    date, type, amount, account, description   required
    to_account, category, counterparty, notes, tags   optional

``tags`` holds semicolon-separated values.
"""

from __future__ import annotations

import csv
import logging
from pathlib import Path
from typing import TYPE_CHECKING

from ledgerbook.domain.account import AccountService
from ledgerbook.domain.category import CategoryService
from ledgerbook.domain.entities import Transaction, TransactionIntent, TransactionType
from ledgerbook.domain.errors import InvalidIntent, NotFoundError, ValidationError, book_not_found
from ledgerbook.domain.transaction import TransactionService
from ledgerbook.utils.amount_parser import currency_exponent, parse_amount
from ledgerbook.utils.date_parser import parse_date

if TYPE_CHECKING:
    from ledgerbook.database.base import Database

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = {"date", "type", "amount", "account", "description"}


class CSVImportService:
    """Service for importing CSV files."""

    def __init__(self, db: Database):
        """Initialize CSV import service.

        Args:
            db: Database instance
        """
        self.db = db
        self.transaction_service = TransactionService(db)
        self.account_service = AccountService(db)
        self.category_service = CategoryService(db)

    def read_intents(self, csv_file_path: str, book_id: int) -> list[TransactionIntent]:
        """Read a CSV file into transaction intents.

        Raises:
            FileNotFoundError: If CSV file doesn't exist
            ValidationError: If required columns are missing
            InvalidIntent: If a row cannot be read. ``index`` is the zero-based data row.
        """
        book = self.db.get_book(book_id)
        if book is None:
            raise NotFoundError(book_not_found(book_id))
        exponent = currency_exponent(book.currency)

        csv_path = Path(csv_file_path)
        if not csv_path.exists():
            raise FileNotFoundError(f"CSV file not found: {csv_file_path}")

        accounts = {acc.name: acc.id for acc in self.account_service.list_accounts(book_id, include_archived=True)}

        intents = []
        with open(csv_path, "r", encoding="utf-8-sig", newline="") as f:
            reader = csv.DictReader(f)
            if reader.fieldnames is None:
                raise ValidationError("CSV file has no columns")

            columns = {name.strip().lower(): name for name in reader.fieldnames}
            missing = REQUIRED_COLUMNS - set(columns)
            if missing:
                raise ValidationError(f"CSV file missing required columns: {', '.join(sorted(missing))}")

            for index, row in enumerate(reader):
                values = {key: (row.get(name) or "").strip() for key, name in columns.items()}
                try:
                    intents.append(self._row_to_intent(values, book_id, exponent, accounts))
                except (ValueError, NotFoundError) as e:
                    # CSV line numbers start at 1 and the header takes line 1
                    raise InvalidIntent(f"Row {index + 2}: {e}", index=index) from e

        return intents

    def import_csv(self, csv_file_path: str, book_id: int, creator: str) -> list[Transaction]:
        """Import every row of a CSV file in one batch.

        Args:
            csv_file_path: Path to CSV file
            book_id: Book to import into
            creator: Identity recorded as the creator

        Returns:
            Created transactions in file order

        Raises:
            FileNotFoundError: If CSV file doesn't exist
            InvalidIntent: If any row is invalid; nothing is imported
        """
        intents = self.read_intents(csv_file_path, book_id)
        created = self.transaction_service.create_batch(intents, creator)
        logger.info("Imported %d transactions from %s", len(created), csv_file_path)
        return created

    def _row_to_intent(
        self, values: dict[str, str], book_id: int, exponent: int, accounts: dict[str, int]
    ) -> TransactionIntent:
        try:
            transaction_type = TransactionType(values["type"].upper())
        except ValueError:
            raise ValueError(f"Unknown transaction type '{values['type']}'") from None

        def account_id(name: str) -> int:
            if name not in accounts:
                raise NotFoundError(f"Account '{name}' not found")
            return accounts[name]

        destination_id = None
        if values.get("to_account"):
            destination_id = account_id(values["to_account"])

        category_id = None
        if values.get("category"):
            category_id = self.category_service.require_category_by_path(book_id, values["category"]).id

        tags = tuple(tag.strip() for tag in values.get("tags", "").split(";") if tag.strip())

        return TransactionIntent(
            book_id=book_id,
            transaction_type=transaction_type,
            amount=parse_amount(values["amount"], exponent),
            source_account_id=account_id(values["account"]),
            description=values["description"],
            transaction_date=parse_date(values["date"]),
            destination_account_id=destination_id,
            category_id=category_id,
            counterparty=values.get("counterparty") or None,
            notes=values.get("notes") or None,
            tags=tags,
        )
