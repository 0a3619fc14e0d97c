"""Amount parsing utilities.

Amounts are held as integers in minor currency units. Text is parsed through
Decimal so no floating point is involved.
"""

from decimal import Decimal, InvalidOperation
import re

DEFAULT_EXPONENT = 2

# Currencies whose minor unit is the major unit
ZERO_EXPONENT_CURRENCIES = {"IDR", "JPY", "KRW", "VND"}


def currency_exponent(currency: str | None) -> int:
    """Return the number of decimal places used by a currency."""
    if currency and currency.upper() in ZERO_EXPONENT_CURRENCIES:
        return 0
    return DEFAULT_EXPONENT


def parse_amount(amount_str: str, exponent: int = DEFAULT_EXPONENT) -> int:
    """Parse an amount string into integer minor units.

    Handles various formats:
    - "123.45"
    - "$123.45"
    - "-123.45"
    - "1,234.56"
    - "(123.45)" (negative in parentheses)

    Args:
        amount_str: Amount string
        exponent: Decimal places of the currency (2 gives cents)

    Returns:
        Signed amount in minor units (e.g. "12.34" -> 1234)

    Raises:
        ValueError: If amount string cannot be parsed or is more precise than
            the currency allows
    """
    if not amount_str or not amount_str.strip():
        raise ValueError("Empty amount string")

    amount_str = amount_str.strip()

    # Handle parentheses notation (negative)
    is_negative = False
    if amount_str.startswith("(") and amount_str.endswith(")"):
        is_negative = True
        amount_str = amount_str[1:-1]

    # Remove currency symbols and thousands separators
    amount_str = re.sub(r"[$€£¥₩]|Rp", "", amount_str)
    amount_str = amount_str.replace(",", "").strip()

    try:
        amount = Decimal(amount_str)
    except InvalidOperation:
        raise ValueError(f"Could not parse amount '{amount_str}'") from None
    if not amount.is_finite():
        raise ValueError(f"Could not parse amount '{amount_str}'")

    minor = amount.scaleb(exponent)
    if minor != minor.to_integral_value():
        raise ValueError(f"Amount '{amount_str}' has more than {exponent} decimal places")

    result = int(minor)
    return -result if is_negative else result


def format_amount(minor_units: int, exponent: int = DEFAULT_EXPONENT) -> str:
    """Format integer minor units as decimal text (e.g. 1234 -> "12.34")."""
    if exponent == 0:
        return f"{minor_units:,}"
    value = Decimal(minor_units).scaleb(-exponent)
    return f"{value:,.{exponent}f}"
