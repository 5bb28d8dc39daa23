"""Conversions between display amounts and exact nano-unit integers.

Amounts are never routed through floating point: display strings are parsed
with Decimal and scaled to integers.
"""

from decimal import Decimal, InvalidOperation

from .exceptions import ValidationError
from .types import NANO_DECIMALS, NanoAmount


def to_nano(amount: str | int | Decimal, decimals: int = NANO_DECIMALS) -> NanoAmount:
    """
    Convert a display amount to nano units.

    Args:
        amount: Display amount, e.g. "66000000000" or "0.3". Floats are rejected.
        decimals: Number of fractional digits in one display unit

    Returns:
        Exact integer amount in nano units
    """
    if isinstance(amount, bool) or isinstance(amount, float):
        raise ValidationError("amount", repr(amount), "floats are not accepted")

    try:
        value = Decimal(str(amount).replace("_", "").strip())
    except InvalidOperation as e:
        raise ValidationError("amount", str(amount), "not a decimal number") from e

    if not value.is_finite():
        raise ValidationError("amount", str(amount), "must be finite")

    # Integer arithmetic on the coefficient; Decimal ops round at 28 digits
    sign, digits, exponent = value.as_tuple()
    coefficient = 0
    for digit in digits:
        coefficient = coefficient * 10 + digit

    shift = exponent + decimals
    if shift >= 0:
        scaled = coefficient * 10**shift
    else:
        scaled, rest = divmod(coefficient, 10**-shift)
        if rest:
            raise ValidationError(
                "amount", str(amount), f"more than {decimals} fractional digits"
            )
    return -scaled if sign else scaled


def format_nano(amount: NanoAmount, decimals: int = NANO_DECIMALS) -> str:
    """
    Format a nano amount for display with thousands separators.

    Trailing fractional zeros are dropped: 1_500_000_000 -> "1.5".
    """
    sign = "-" if amount < 0 else ""
    whole, fraction = divmod(abs(amount), 10**decimals)
    text = f"{sign}{whole:,}"
    if fraction:
        text += "." + f"{fraction:0{decimals}d}".rstrip("0")
    return text
