"""Domain layer for ledgerbook application."""

from ledgerbook.domain.transaction import TransactionService
from ledgerbook.domain.book import BookService
from ledgerbook.domain.account import AccountService
from ledgerbook.domain.category import CategoryService
from ledgerbook.domain.csv_import import CSVImportService

__all__ = [
    "TransactionService",
    "BookService",
    "AccountService",
    "CategoryService",
    "CSVImportService",
]
