"""Amount parsing utilities."""

from decimal import Decimal, InvalidOperation
import re

_DECIMAL_COMMA = re.compile(r"^[+-]?[\d.]*\d,\d{1,2}$")


def parse_amount(amount_str: str) -> Decimal:
    """Parse an amount string into a Decimal.

    Handles various formats:
    - "123.45"
    - "$123.45"
    - "-123.45"
    - "-$123.45"
    - "1,234.56"
    - "(123.45)" (negative in parentheses)
    - "123.45-" (trailing minus)
    - "1.234,56" and "12,5" (decimal comma)

    Args:
        amount_str: Amount string

    Returns:
        Decimal amount

    Raises:
        ValueError: If amount string cannot be parsed
    """
    if amount_str is None or not amount_str.strip():
        raise ValueError("Empty amount string")

    amount_str = amount_str.strip()

    # Handle parentheses notation (negative)
    is_negative = False
    if amount_str.startswith("(") and amount_str.endswith(")"):
        is_negative = True
        amount_str = amount_str[1:-1]

    # Remove currency symbols and any whitespace, including non-breaking spaces
    amount_str = re.sub(r"[$€£¥\s]", "", amount_str)

    if amount_str.endswith("-") and not amount_str.startswith("-"):
        is_negative = not is_negative
        amount_str = amount_str[:-1]

    if _DECIMAL_COMMA.match(amount_str):
        amount_str = amount_str.replace(".", "").replace(",", ".")
    else:
        amount_str = amount_str.replace(",", "")

    try:
        amount = Decimal(amount_str)
    except InvalidOperation:
        raise ValueError(f"Could not parse amount '{amount_str}'")

    if not amount.is_finite():
        raise ValueError(f"Could not parse amount '{amount_str}'")

    if is_negative:
        amount = -amount
    return amount
