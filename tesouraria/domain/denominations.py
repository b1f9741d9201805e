"""Denomination table: the static set of banknotes and coins in the drawer.

The table is fixed for a working session. It is built either from the
built-in Brazilian real defaults or from the configuration file, and is
validated on construction so the rest of the domain can rely on it.

All monetary amounts are in centavos (Money type).
"""

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from typing import Any

from tesouraria.domain.models import COIN, NOTE, DenominationCategory, Money
from tesouraria.domain.money import decimal_to_money, format_money_display

CATEGORIES: tuple[DenominationCategory, ...] = (NOTE, COIN)


class DenominationConfigError(ValueError):
    """Raised when a denomination table is malformed."""


@dataclass(frozen=True)
class Denomination:
    """Immutable banknote or coin definition."""

    value: Money
    category: DenominationCategory
    label: str


@dataclass(frozen=True)
class DenominationTable:
    """Immutable, ordered set of configured denominations.

    Notes come first in configured order, followed by coins.
    """

    denominations: tuple[Denomination, ...]
    _by_value: dict[Money, Denomination] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        if not self.denominations:
            raise DenominationConfigError("Denomination table is empty")

        by_value: dict[Money, Denomination] = {}
        for denomination in self.denominations:
            if denomination.value <= 0:
                raise DenominationConfigError(f"Denomination value must be positive: {denomination.value}")
            if denomination.category not in CATEGORIES:
                raise DenominationConfigError(f"Unknown denomination category: {denomination.category!r}")
            if denomination.value in by_value:
                raise DenominationConfigError(
                    f"Duplicate denomination value: {format_money_display(denomination.value)}"
                )
            by_value[denomination.value] = denomination

        ordered = tuple(d for d in self.denominations if d.category == NOTE) + tuple(
            d for d in self.denominations if d.category == COIN
        )
        object.__setattr__(self, "denominations", ordered)
        object.__setattr__(self, "_by_value", by_value)

    def __iter__(self) -> Iterator[Denomination]:
        return iter(self.denominations)

    def __len__(self) -> int:
        return len(self.denominations)

    def __contains__(self, value: object) -> bool:
        return value in self._by_value

    def values(self) -> list[Money]:
        """Return configured values in table order."""
        return [d.value for d in self.denominations]

    def get(self, value: Money) -> Denomination | None:
        """Return the denomination configured for a value, if any."""
        return self._by_value.get(value)

    def notes(self) -> list[Denomination]:
        return [d for d in self.denominations if d.category == NOTE]

    def coins(self) -> list[Denomination]:
        return [d for d in self.denominations if d.category == COIN]

    def label_for(self, value: Money) -> str:
        """Return the display label for a value, falling back to the formatted amount."""
        denomination = self.get(value)
        return denomination.label if denomination else format_money_display(value)

    def category_for(self, value: Money) -> DenominationCategory:
        denomination = self.get(value)
        return denomination.category if denomination else NOTE


def default_label(value: Money, category: DenominationCategory, symbol: str = "R$") -> str:
    """Build the display label for a denomination.

    Notes show whole reais ("R$ 100"); coins always show centavos ("R$ 0,50").

    Args:
        value: Denomination value in centavos.
        category: Note or coin.
        symbol: Currency symbol prefix.

    Returns:
        Label string.
    """
    if category == NOTE and value % 100 == 0:
        return f"{symbol} {value // 100}"
    return format_money_display(value, symbol)


def build_table(entries: Iterable[tuple[Money, DenominationCategory]], symbol: str = "R$") -> DenominationTable:
    """Build a table from (value, category) pairs using default labels."""
    return DenominationTable(
        tuple(
            Denomination(value=value, category=category, label=default_label(value, category, symbol))
            for value, category in entries
        )
    )


DEFAULT_BANKNOTES: tuple[Money, ...] = tuple(Money(v) for v in (20000, 10000, 5000, 2000, 1000, 500, 200))
DEFAULT_COINS: tuple[Money, ...] = tuple(Money(v) for v in (100, 50, 25, 10, 5))


def default_table() -> DenominationTable:
    """Return the built-in Brazilian real denomination table."""
    return build_table([(v, NOTE) for v in DEFAULT_BANKNOTES] + [(v, COIN) for v in DEFAULT_COINS])


def parse_denomination_entry(entry: dict[str, Any], symbol: str = "R$") -> Denomination:
    """Parse one ``[[denominations]]`` table from the configuration file.

    Args:
        entry: Mapping with ``value`` (decimal string or number in reais),
            ``category`` ("note" or "coin") and optional ``label``.
        symbol: Currency symbol used for generated labels.

    Returns:
        Denomination.

    Raises:
        DenominationConfigError: If the entry is missing fields or malformed.
    """
    if not isinstance(entry, dict):
        raise DenominationConfigError(f"Denomination entry must be a table: {entry!r}")

    raw_value = entry.get("value")
    if raw_value is None or isinstance(raw_value, bool):
        raise DenominationConfigError(f"Denomination entry missing 'value': {entry!r}")

    try:
        amount = Decimal(str(raw_value).replace(",", "."))
    except InvalidOperation as e:
        raise DenominationConfigError(f"Invalid denomination value: {raw_value!r}") from e
    if not amount.is_finite():
        raise DenominationConfigError(f"Invalid denomination value: {raw_value!r}")

    try:
        value = decimal_to_money(amount)
    except InvalidOperation as e:
        raise DenominationConfigError(f"Denomination value out of range: {raw_value!r}") from e
    if Decimal(value) != amount * 100:
        raise DenominationConfigError(f"Denomination value has fractions of a centavo: {raw_value!r}")

    category = entry.get("category")
    if category not in CATEGORIES:
        raise DenominationConfigError(f"Unknown denomination category: {category!r}")

    label = entry.get("label") or default_label(value, category, symbol)
    return Denomination(value=value, category=category, label=str(label))


def table_from_config(entries: list[dict[str, Any]], symbol: str = "R$") -> DenominationTable:
    """Build a validated table from configuration entries.

    Raises:
        DenominationConfigError: If any entry is malformed or the table is invalid.
    """
    if not isinstance(entries, list):
        raise DenominationConfigError("'denominations' must be a list of tables")
    return DenominationTable(tuple(parse_denomination_entry(entry, symbol) for entry in entries))


def table_to_config(table: DenominationTable) -> list[dict[str, str]]:
    """Serialize a table to configuration entries (values as decimal strings)."""
    return [
        {
            "value": str(Decimal(d.value) / 100),
            "category": d.category,
            "label": d.label,
        }
        for d in table
    ]
