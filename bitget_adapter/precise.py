"""
Exact decimal helpers.

Venue payloads encode prices and amounts as base-10 strings. Everything here
works on decimal.Decimal under a wide context so additions and products of
those strings never lose digits and never pass through binary floats.
Quotients are the one rounded operation, kept to 40 significant digits.
"""

from datetime import datetime, timedelta, timezone
from decimal import ROUND_DOWN, ROUND_HALF_UP, Context, Decimal, InvalidOperation
from typing import Any, Optional

# Wide enough that add/sub/mul of venue strings (<= 40 digits each) are exact.
EXACT = Context(prec=200)

# Quotients rarely terminate; they are rounded half-even to this width.
QUOTIENT = Context(prec=40)


def to_decimal(value: Any) -> Optional[Decimal]:
    """
    Convert a venue value to Decimal.

    Strings and integers convert exactly. Floats (some endpoints send JSON
    numbers) are converted through their shortest repr so that 7.457467
    becomes Decimal("7.457467") rather than its binary expansion.

    Args:
        value: Raw value from a decoded payload.

    Returns:
        Optional[Decimal]: Parsed value, or None for None / empty string.

    Raises:
        ValueError: If the value is not a finite number.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, int):
        result = Decimal(value)
    elif isinstance(value, float):
        result = Decimal(repr(value))
    else:
        text = str(value).strip()
        if text == "":
            return None
        try:
            result = Decimal(text)
        except InvalidOperation as e:
            raise ValueError(f"Not a decimal value: {value!r}") from e
    if not result.is_finite():
        raise ValueError(f"Not a finite decimal value: {value!r}")
    return result


def to_int(value: Any) -> Optional[int]:
    """
    Convert a venue integer (often a string of milliseconds) to int.

    Values that are not finite numbers decode to None.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    text = str(value).strip()
    if text == "":
        return None
    try:
        return int(text)
    except ValueError:
        pass
    try:
        number = to_decimal(text)
    except ValueError:
        return None
    return None if number is None else int(number)


def ms_to_datetime(value: Any) -> Optional[datetime]:
    """Convert epoch milliseconds to an aware UTC datetime."""
    ms = to_int(value)
    if ms is None:
        return None
    seconds, millis = divmod(ms, 1000)
    return datetime.fromtimestamp(seconds, tz=timezone.utc) + timedelta(milliseconds=millis)


def step_size(decimal_places: Any) -> Optional[str]:
    """
    Convert a count of decimal places into an exact step-size string.

    Example:
        >>> step_size(0)
        '1'
        >>> step_size(4)
        '0.0001'

    Args:
        decimal_places: Integer (or integer string) n >= 0.

    Returns:
        Optional[str]: "10^-n" written out in plain notation, or None if the
        input is missing.

    Raises:
        ValueError: If the input is negative or not an integer.
    """
    if decimal_places is None or decimal_places == "":
        return None
    n = int(str(decimal_places).strip())
    if n < 0:
        raise ValueError(f"Decimal places must be >= 0, got {n}")
    if n == 0:
        return "1"
    return "0." + "0" * (n - 1) + "1"


def add(a: Optional[Decimal], b: Optional[Decimal]) -> Optional[Decimal]:
    """Exact sum; None is treated as absent, not zero."""
    if a is None:
        return b
    if b is None:
        return a
    return EXACT.add(a, b)


def sub(a: Optional[Decimal], b: Optional[Decimal]) -> Optional[Decimal]:
    """Exact difference, None if either side is missing."""
    if a is None or b is None:
        return None
    return EXACT.subtract(a, b)


def mul(a: Optional[Decimal], b: Optional[Decimal]) -> Optional[Decimal]:
    """Exact product, None if either side is missing."""
    if a is None or b is None:
        return None
    return EXACT.multiply(a, b)


def neg(a: Optional[Decimal]) -> Optional[Decimal]:
    """Sign inversion without rounding; zero stays unsigned."""
    if a is None:
        return None
    if a == 0:
        return abs(a)
    return a.copy_negate()


def div(a: Optional[Decimal], b: Optional[Decimal]) -> Optional[Decimal]:
    """Quotient to 40 significant digits; None on missing input or zero divisor."""
    if a is None or b is None or b == 0:
        return None
    return QUOTIENT.divide(a, b)


def truncate_to_step(value: Decimal, step: str) -> Decimal:
    """Round a value down to a multiple of a power-of-ten step."""
    return value.quantize(Decimal(step), rounding=ROUND_DOWN, context=EXACT)


def round_to_step(value: Decimal, step: str) -> Decimal:
    """Round a value half-up to a multiple of a power-of-ten step."""
    return value.quantize(Decimal(step), rounding=ROUND_HALF_UP, context=EXACT)


def to_plain_string(value: Decimal) -> str:
    """Render a Decimal without exponent notation, as the venue expects."""
    return format(value, "f")
