"""Amount parsing utilities."""

import re
from decimal import Decimal, InvalidOperation

CURRENCY_SYMBOLS = re.compile(r"[$€£¥]|\b(?:USD|EUR|COP|MXN)\b", re.IGNORECASE)


def parse_amount(amount_str: str, allow_negative: bool = False) -> Decimal:
    """Parse a money string such as "$1,234.50" into a Decimal.

    Currency symbols and codes, thousands separators and surrounding
    whitespace are ignored. A leading minus or accounting parentheses make
    the amount negative, which is rejected unless ``allow_negative`` is set.

    Args:
        amount_str: Amount string
        allow_negative: Accept negative amounts

    Returns:
        Decimal amount

    Raises:
        ValueError: If the string is empty, malformed or negative
    """
    if amount_str is None or not str(amount_str).strip():
        raise ValueError("Empty amount string")

    text = str(amount_str).strip()
    negative = False
    if text.startswith("(") and text.endswith(")"):
        negative = True
        text = text[1:-1]

    text = CURRENCY_SYMBOLS.sub("", text).replace(",", "").replace(" ", "")
    if text.startswith("-"):
        negative = not negative
        text = text[1:]

    try:
        amount = Decimal(text)
    except InvalidOperation:
        raise ValueError(f"Could not parse amount '{amount_str}'") from None
    if not amount.is_finite():
        raise ValueError(f"Could not parse amount '{amount_str}'")

    if negative:
        amount = -amount
    if amount < 0 and not allow_negative:
        raise ValueError(f"Amount cannot be negative: '{amount_str}'")
    return amount
