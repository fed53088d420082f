"""Money helpers

All amounts are ``Decimal`` in major units (dollars). Arithmetic rounds the
final result half-up to cents so repeated edits never drift.
"""

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Iterable, Optional, Union

CENT = Decimal("0.01")
ZERO = Decimal("0.00")

Number = Union[Decimal, int, float, str]


def to_money(value: Optional[Number]) -> Decimal:
    """Coerce a number (or None) to an unrounded Decimal; None becomes 0"""
    if value is None:
        return Decimal("0")
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        # str() first so 0.1 stays 0.1 instead of its binary expansion
        return Decimal(str(value))
    return Decimal(value)


def round2(value: Number) -> Decimal:
    return to_money(value).quantize(CENT, rounding=ROUND_HALF_UP)


def multiply_money(a: Number, b: Number) -> Decimal:
    """
    Multiply two money values and round once to cents

    Example:
        multiply_money("0.1", "0.2") == Decimal("0.02")
    """
    return round2(to_money(a) * to_money(b))


def add_money(a: Number, b: Number) -> Decimal:
    return round2(to_money(a) + to_money(b))


def sum_money(values: Iterable[Number]) -> Decimal:
    """Sum exactly, round the total once"""
    total = Decimal("0")
    for value in values:
        total += to_money(value)
    return round2(total)


def cents_to_dollars(cents: Number) -> Decimal:
    return round2(to_money(cents).quantize(Decimal("1"), rounding=ROUND_HALF_UP) / 100)


def parse_money_input(value: Optional[str], allow_negative: bool = False) -> Optional[Decimal]:
    """
    Parse user-typed money text

    Strips "$" and thousands separators. Returns None for blank, non-numeric
    or (unless allowed) negative input.
    """
    if value is None or not str(value).strip():
        return None

    cleaned = str(value).replace("$", "").replace(",", "").strip()
    try:
        parsed = Decimal(cleaned)
    except InvalidOperation:
        return None

    if not parsed.is_finite():
        return None
    if not allow_negative and parsed < 0:
        return None

    return round2(parsed)


def format_currency(amount: Optional[Number]) -> str:
    if amount is None:
        return "$0.00"
    rounded = round2(amount)
    sign = "-" if rounded < 0 else ""
    return f"{sign}${abs(rounded):,.2f}"
