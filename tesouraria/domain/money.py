"""Pure functions for reading and displaying money amounts.

Operator input is typed incrementally, so parsing is lenient: the longest
numeric prefix wins and anything unreadable becomes zero. Both "12.50" and
the Brazilian "12,50" / "1.234,56" forms are accepted.

All monetary amounts are in centavos (Money type).
"""

import math
import re
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from tesouraria.domain.models import Money

CENTAVOS = Decimal(100)

_DECIMAL_PREFIX = re.compile(r"[+-]?(\d+(\.\d*)?|\.\d+)")
_INTEGER_PREFIX = re.compile(r"[+-]?\d+")
_STRICT_INTEGER = re.compile(r"\+?\d+")


def normalize_amount_text(text: str) -> str:
    """Normalize operator amount text to a dot-decimal string.

    Args:
        text: Raw amount text (e.g., "R$ 1.234,56", "12.5", " -3 ").

    Returns:
        Text with currency symbol and spaces removed, comma as decimal point.
    """
    cleaned = text.replace("R$", "").replace(" ", "").strip()
    if "," in cleaned:
        # pt-BR: dots group thousands, comma separates decimals
        cleaned = cleaned.replace(".", "").replace(",", ".")
    return cleaned


def decimal_to_money(amount: Decimal) -> Money:
    """Convert a decimal amount in reais to centavos.

    Args:
        amount: Amount in reais.

    Returns:
        Amount in centavos, rounded half-up to the nearest centavo.
    """
    centavos = (amount * CENTAVOS).quantize(Decimal(1), rounding=ROUND_HALF_UP)
    return Money(int(centavos))


def parse_money(value: str | int | float | Decimal | None) -> Money:
    """Parse operator money input to centavos.

    Integers are taken as centavos already. Floats and Decimals are reais.
    Text uses the longest numeric prefix; non-numeric text parses as zero.
    Sign is preserved. Unsupported types and out-of-range amounts parse as zero.

    Args:
        value: Amount text in reais, a float or Decimal in reais, or Money.

    Returns:
        Amount in centavos.
    """
    if value is None or isinstance(value, bool):
        return Money(0)
    if isinstance(value, int):
        return Money(value)
    if isinstance(value, float):
        if not math.isfinite(value):
            return Money(0)
        value = Decimal(str(value))
    if isinstance(value, Decimal):
        if not value.is_finite():
            return Money(0)
        try:
            return decimal_to_money(value)
        except InvalidOperation:
            return Money(0)
    if not isinstance(value, str):
        return Money(0)

    match = _DECIMAL_PREFIX.match(normalize_amount_text(value))
    if not match:
        return Money(0)
    try:
        return decimal_to_money(Decimal(match.group(0)))
    except InvalidOperation:
        return Money(0)


def parse_count(value: str | int | float | None) -> int:
    """Parse a unit count from operator input.

    Args:
        value: Count as int, float or text (e.g., "12", "12 un", "abc").

    Returns:
        Integer count; text without a readable leading integer parses as zero.
    """
    if value is None or isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else 0
    if not isinstance(value, str):
        return 0

    match = _INTEGER_PREFIX.match(value.strip())
    if not match:
        return 0
    try:
        return int(match.group(0))
    except ValueError:
        # digit run beyond the interpreter's int conversion limit
        return 0


def parse_quantity(value: str | int | float | None) -> int | None:
    """Parse a transaction quantity, which must be a positive integer.

    Args:
        value: Quantity as int, whole float or text.

    Returns:
        The quantity, or None if it is missing, non-integer, zero or negative.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value if value > 0 else None
    if isinstance(value, float):
        if not value.is_integer() or value <= 0:
            return None
        return int(value)
    if not isinstance(value, str):
        return None

    text = value.strip()
    if not _STRICT_INTEGER.fullmatch(text):
        return None
    try:
        quantity = int(text)
    except ValueError:
        return None
    return quantity if quantity > 0 else None


def format_money_display(amount: Money, symbol: str = "R$", include_sign: bool = False) -> str:
    """Format money amount for display in pt-BR style.

    Args:
        amount: Amount in centavos.
        symbol: Currency symbol prefix.
        include_sign: Whether to include + for positive amounts.

    Returns:
        Formatted string (e.g., "R$ 1.234,56" or "-R$ 20,00").
    """
    reais, centavos = divmod(abs(amount), 100)
    grouped = f"{reais:,}".replace(",", ".")
    formatted = f"{symbol} {grouped},{centavos:02d}"

    if amount < 0:
        return f"-{formatted}"
    if include_sign and amount > 0:
        return f"+{formatted}"
    return formatted


def format_money_plain(amount: Money) -> str:
    """Format money as a plain decimal string suitable for re-entry (e.g., "-12.50")."""
    reais, centavos = divmod(abs(amount), 100)
    sign = "-" if amount < 0 else ""
    return f"{sign}{reais}.{centavos:02d}"
