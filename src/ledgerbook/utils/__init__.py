"""Utility functions for ledgerbook."""

from ledgerbook.utils.date_parser import parse_date
from ledgerbook.utils.amount_parser import currency_exponent, format_amount, parse_amount

__all__ = ["parse_date", "parse_amount", "format_amount", "currency_exponent"]
