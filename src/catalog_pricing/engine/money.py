"""
Money and quantity helpers shared by every pricing step.

Currency math runs on Decimal and rounds half-up to cents at each assignment,
so derived figures match what the product form displays to the cent.
"""
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP, getcontext
from typing import Any, Optional

MONEY_PLACES = 2
CENTS = Decimal(1).scaleb(-MONEY_PLACES)
ZERO = Decimal("0.00")


def parse_decimal(value: Any) -> Optional[Decimal]:
    """
    Parse a raw form value into a Decimal.

    Returns None for blanks, booleans, non-numeric text, NaN, infinity and
    amounts too large to hold in cents at the context precision.
    Floats go through ``str`` so 1.1 parses as Decimal("1.1").
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, Decimal):
        number = value
    elif isinstance(value, int):
        number = Decimal(value)
    else:
        text = str(value).strip().replace(",", "").replace("$", "")
        if not text:
            return None
        try:
            number = Decimal(text)
        except InvalidOperation:
            return None
    if not number.is_finite():
        return None
    # quantize(CENTS) needs integer digits + MONEY_PLACES <= precision, with room for a carry
    if number and number.adjusted() >= getcontext().prec - MONEY_PLACES - 1:
        return None
    return number


def round_money(value: Any) -> Decimal:
    """Round to cents, half-up. Anything that does not parse becomes 0.00."""
    number = parse_decimal(value)
    if number is None:
        return ZERO
    return number.quantize(CENTS, rounding=ROUND_HALF_UP)


def round_amount(value: Any) -> Decimal:
    """Like ``round_money`` for prices and costs, which are never negative."""
    return max(ZERO, round_money(value))


def decimal_places(value: Any) -> Optional[int]:
    """Number of significant decimal places in a raw value (trailing zeros ignored)."""
    number = parse_decimal(value)
    if number is None:
        return None
    exponent = number.normalize().as_tuple().exponent
    return max(0, -exponent)


def parse_quantity(value: Any) -> int:
    """Parse a stock quantity: truncate toward zero, non-numeric and negatives become 0."""
    number = parse_decimal(value)
    if number is None:
        return 0
    return max(0, int(number))


def parse_count(value: Any) -> Optional[int]:
    """Parse a packaging quantity; None unless it is a positive whole count."""
    number = parse_decimal(value)
    if number is None:
        return None
    count = int(number)
    return count if count > 0 else None


def to_wire(value: Decimal) -> float:
    """Currency as it goes on the wire: a float rounded to cents."""
    return float(round_money(value))
