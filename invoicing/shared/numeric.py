"""Numeric coercion for money and percentage inputs.

Form values arrive as raw strings. Nothing here raises on malformed input:
anything that does not parse to a finite number within MAX_AMOUNT is treated
as zero.
"""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation, localcontext
from typing import Any

ZERO = Decimal("0")
CENT = Decimal("0.01")
HUNDRED = Decimal("100")

# Largest magnitude read from raw input; products of two such values stay
# far below the Decimal exponent limit
MAX_AMOUNT = Decimal("1e100")
# Working precision for money arithmetic and rounding to cents
MONEY_PRECISION = 64


def is_present(value: Any) -> bool:
    """Return True unless value is None or a blank string."""
    if value is None:
        return False
    if isinstance(value, str):
        return value.strip() != ""
    return True


def to_decimal(value: Any) -> Decimal:
    """Convert a raw input to Decimal, coercing malformed values to zero.

    Thousands separators and digit-group underscores are not accepted, so
    "1,5" and "1_0" are malformed rather than 15 and 10.

    Args:
        value: String, number, Decimal or None

    Returns:
        Finite Decimal value, or Decimal("0") if value cannot be parsed or its
        magnitude exceeds MAX_AMOUNT (Decimal inputs are taken as computed)
    """
    if value is None or isinstance(value, bool):
        return ZERO

    if isinstance(value, Decimal):
        # Already-computed values are only checked for finiteness
        return value if value.is_finite() else ZERO

    text = str(value).strip()
    if "_" in text:
        return ZERO
    try:
        result = Decimal(text)
    except (InvalidOperation, ValueError):
        return ZERO

    if not result.is_finite() or abs(result) > MAX_AMOUNT:
        return ZERO
    return result


def quantize_money(value: Decimal) -> Decimal:
    """Round a Decimal half-up to two places."""
    if not value.is_finite():
        return ZERO
    with localcontext(prec=max(MONEY_PRECISION, value.adjusted() + 3)):
        return value.quantize(CENT, rounding=ROUND_HALF_UP)


def format_money(value: Any) -> str:
    """Render a value as a fixed two-decimal string (e.g. '110.00')."""
    amount = quantize_money(to_decimal(value))
    if amount == ZERO:
        amount = abs(amount)
    return f"{amount:.2f}"


def percentage_of(base: Decimal, percentage: Decimal) -> Decimal:
    """Return base x percentage / 100 rounded to cents."""
    with localcontext(prec=MONEY_PRECISION):
        return quantize_money(base * percentage / HUNDRED)
