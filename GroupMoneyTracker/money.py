"""
Money Module

This module holds the money helpers used by the group money tracker.
All amounts are integer cents; floats never enter a calculation.

Features:
    - Lenient parsing of user-entered amounts into cents
    - Fixed two-decimal dollar formatting
    - Plain decimal strings for tabular exports

Functions:
    parse_to_cents: Convert free text such as "$15.50" into cents.
    format_currency: Render cents as "$15.50" / "-$5.00".
    cents_to_amount_str: Render cents as "15.50" / "-5.00".
"""

import re
from decimal import Decimal, ROUND_HALF_UP, localcontext


# Characters that survive cleaning are digits and dots only
_NON_NUMERIC = re.compile(r"[^0-9.]")

# Leading decimal number in the cleaned text ("12.5.3" -> "12.5")
_LEADING_NUMBER = re.compile(r"^(\d+\.?\d*|\.\d+)")

CURRENCY_SYMBOL = "$"


def parse_to_cents(text) -> int:
    """
    Parse user-entered money text into integer cents.

    Everything except digits and dots is stripped, the leading decimal
    number is read and rounded half-up to the nearest cent.

    Args:
        text: Raw text (e.g. "$1,234.56", " 3.5 ", "abc").

    Returns:
        int: Amount in cents. Empty or unparseable input yields 0.

    Notes:
        - Never raises; "no value entered" is treated as 0
        - Minus signs are stripped, so the result is never negative
    """
    if text is None:
        return 0

    cleaned = _NON_NUMERIC.sub("", str(text))
    match = _LEADING_NUMBER.match(cleaned)
    if match is None:
        return 0

    number = match.group(1)
    # Precision must cover every digit entered, or quantize raises
    with localcontext() as ctx:
        ctx.prec = len(number) + 3
        cents = Decimal(number) * 100
        return int(cents.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def cents_to_amount_str(cents: int) -> str:
    """Render cents as a bare two-decimal string, e.g. 1550 -> "15.50"."""
    sign = "-" if cents < 0 else ""
    whole, frac = divmod(abs(int(cents)), 100)
    return f"{sign}{whole}.{frac:02d}"


def format_currency(cents: int, symbol: str = CURRENCY_SYMBOL) -> str:
    """
    Format cents with the currency symbol.

    Args:
        cents: Amount in cents.
        symbol: Currency symbol (default: $).

    Returns:
        str: Formatted string like "$15.50", or "-$5.00" for negatives.
    """
    amount = cents_to_amount_str(cents)
    if amount.startswith("-"):
        return f"-{symbol}{amount[1:]}"
    return f"{symbol}{amount}"
