"""Money parsing and rounding utilities.

All monetary values are handled as Decimal. Two rounding policies exist:
standard rounding (half away from zero) for computed amounts and rates, and
truncating rounding for the balance brokerage, which must never show
near-zero negative noise.
"""

import re
from decimal import Decimal, InvalidOperation, ROUND_FLOOR, ROUND_HALF_UP
from typing import Union

MoneyInput = Union[Decimal, int, float, str]

CENT = Decimal("0.01")
ZERO = Decimal("0.00")


def to_decimal(value: MoneyInput) -> Decimal:
    """Convert a number to Decimal without picking up float representation error.

    Floats are converted through their shortest repr, so 1.005 becomes
    Decimal("1.005") rather than 1.00499999999999989...

    Raises:
        ValueError: If the value is not a finite number
    """
    if isinstance(value, bool):
        raise ValueError(f"Not a number: {value!r}")
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, float):
        result = Decimal(repr(value))
    elif isinstance(value, int):
        result = Decimal(value)
    else:
        return parse_money(value)

    if not result.is_finite():
        raise ValueError(f"Not a finite number: {value!r}")
    return result


def standard_round(value: MoneyInput) -> Decimal:
    """Round to two decimals, halves away from zero.

    Examples:
        standard_round(2.345) -> Decimal("2.35")
        standard_round(-2.345) -> Decimal("-2.35")
    """
    return to_decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def truncate_round(value: MoneyInput) -> Decimal:
    """Floor to two decimals; magnitudes below 0.01 become exactly 0.00."""
    amount = to_decimal(value)
    if abs(amount) < CENT:
        return ZERO
    return amount.quantize(CENT, rounding=ROUND_FLOOR)


def format_money(value: MoneyInput) -> str:
    """Serialize an amount with exactly two fractional digits ("1234.50")."""
    return f"{standard_round(value):.2f}"


def decimal_places(value: Decimal) -> int:
    """Number of fractional digits carried by a Decimal (0 for integers)."""
    exponent = value.normalize().as_tuple().exponent
    return max(0, -exponent) if isinstance(exponent, int) else 0


def parse_money(amount_str: str) -> Decimal:
    """Parse an amount string into a Decimal.

    Handles various formats:
    - "123.45"
    - "₹123.45", "$123.45"
    - "-123.45"
    - "1,234.56"
    - "(123.45)" (negative in parentheses)

    Args:
        amount_str: Amount string

    Returns:
        Decimal amount

    Raises:
        ValueError: If amount string cannot be parsed
    """
    if amount_str is None or not str(amount_str).strip():
        raise ValueError("Empty amount string")

    amount_str = str(amount_str).strip()

    is_negative = False
    if amount_str.startswith("(") and amount_str.endswith(")"):
        is_negative = True
        amount_str = amount_str[1:-1]

    amount_str = re.sub(r"[$€£¥₹]", "", amount_str)
    amount_str = amount_str.replace(",", "").strip()

    try:
        amount = Decimal(amount_str)
    except InvalidOperation:
        raise ValueError(f"Could not parse amount '{amount_str}'")

    if not amount.is_finite():
        raise ValueError(f"Could not parse amount '{amount_str}': not a finite number")
    return -amount if is_negative else amount
