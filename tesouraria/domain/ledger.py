"""In-memory ledger store for a cash-drawer working session.

The store holds the mutable session state:
- Physical counts per configured denomination
- Damaged currency values for notes and coins
- Extra cash entries (two seeded entries, editable)
- Manual in/out transactions tied to a denomination

Mutations never raise for operator input. Malformed values are clamped or
coerced to zero, and references to unknown denominations, extras or
transactions are ignored. Every applied mutation bumps ``version`` so
derived totals can be cached against it.

All monetary amounts are in centavos (Money type).
"""

import itertools
from collections.abc import Mapping
from dataclasses import dataclass, replace
from decimal import Decimal
from types import MappingProxyType
from typing import Literal

from tesouraria.domain.denominations import DenominationTable
from tesouraria.domain.models import DIRECTION_IN, DIRECTION_OUT, Direction, Money
from tesouraria.domain.money import parse_count, parse_money, parse_quantity
from tesouraria.logging_utils import get_logger

logger = get_logger(__name__)

DamagedField = Literal["notes", "coins"]
ExtraField = Literal["description", "value"]

DEFAULT_TRANSACTION_DESCRIPTION = "Sem descrição"
DEFAULT_EXTRA_DESCRIPTIONS: tuple[str, ...] = ("Entrada Extra 1", "Entrada Extra 2")


@dataclass(frozen=True)
class DamagedCurrency:
    """Immutable free-form values of unusable notes and coins."""

    notes_value: Money = Money(0)
    coins_value: Money = Money(0)


@dataclass(frozen=True)
class ExtraEntry:
    """Immutable ad-hoc cash entry (value may be negative)."""

    id: str
    description: str
    value: Money = Money(0)


@dataclass(frozen=True)
class Transaction:
    """Immutable manual adjustment of a denomination's unit count."""

    id: int
    description: str
    denomination_value: Money
    quantity: int
    direction: Direction
    total_value: Money


@dataclass(frozen=True)
class LedgerSnapshot:
    """Immutable view of the store at a given version."""

    counts: Mapping[Money, int]
    damaged: DamagedCurrency
    extras: tuple[ExtraEntry, ...]
    transactions: tuple[Transaction, ...]
    version: int


def seed_extras(descriptions: tuple[str, ...] = DEFAULT_EXTRA_DESCRIPTIONS) -> tuple[ExtraEntry, ...]:
    """Create the default extra entries, numbered from "1"."""
    return tuple(ExtraEntry(id=str(idx), description=desc) for idx, desc in enumerate(descriptions, 1))


def normalize_direction(direction: str) -> Direction | None:
    """Coerce direction text to "in" or "out".

    Args:
        direction: Raw direction (case and surrounding whitespace ignored).

    Returns:
        Direction, or None if unrecognised.
    """
    normalized = direction.strip().lower() if isinstance(direction, str) else ""
    if normalized == DIRECTION_IN:
        return DIRECTION_IN
    if normalized == DIRECTION_OUT:
        return DIRECTION_OUT
    return None


class LedgerStore:
    """Mutable session state for one drawer count."""

    def __init__(
        self,
        table: DenominationTable,
        extra_descriptions: tuple[str, ...] = DEFAULT_EXTRA_DESCRIPTIONS,
        transaction_placeholder: str = DEFAULT_TRANSACTION_DESCRIPTION,
    ) -> None:
        self._table = table
        self._extra_descriptions = tuple(extra_descriptions)
        self._transaction_placeholder = transaction_placeholder
        self._transaction_ids = itertools.count(1)
        self._version = 0

        self._counts: dict[Money, int] = {value: 0 for value in table.values()}
        self._damaged = DamagedCurrency()
        self._extras: list[ExtraEntry] = list(seed_extras(self._extra_descriptions))
        self._transactions: list[Transaction] = []

    @property
    def table(self) -> DenominationTable:
        return self._table

    @property
    def version(self) -> int:
        return self._version

    def _touch(self) -> None:
        self._version += 1

    def snapshot(self) -> LedgerSnapshot:
        """Return an immutable copy of the current state."""
        return LedgerSnapshot(
            counts=MappingProxyType(dict(self._counts)),
            damaged=self._damaged,
            extras=tuple(self._extras),
            transactions=tuple(self._transactions),
            version=self._version,
        )

    def get_count(self, denomination_value: Money) -> int:
        return self._counts.get(denomination_value, 0)

    def get_extra(self, extra_id: str) -> ExtraEntry | None:
        for extra in self._extras:
            if extra.id == extra_id:
                return extra
        return None

    def set_count(self, denomination_value: Money, count: str | int | float | None) -> None:
        """Replace the physical count of a configured denomination.

        Args:
            denomination_value: Denomination value in centavos.
            count: New count (int or operator text); negatives clamp to 0.
        """
        if denomination_value not in self._counts:
            logger.debug("Ignoring count for unconfigured denomination %s", denomination_value)
            return

        self._counts[denomination_value] = max(0, parse_count(count))
        self._touch()

    def set_damaged(self, field: DamagedField, value: str | int | float | Decimal | None) -> None:
        """Set the damaged notes or coins value.

        Args:
            field: "notes" or "coins".
            value: Amount (Money or operator text in reais); negatives clamp to 0.
        """
        amount = Money(max(0, parse_money(value)))

        if field == "notes":
            self._damaged = replace(self._damaged, notes_value=amount)
        elif field == "coins":
            self._damaged = replace(self._damaged, coins_value=amount)
        else:
            logger.debug("Ignoring unknown damaged field %r", field)
            return
        self._touch()

    def set_extra_field(self, extra_id: str, field: ExtraField, value: str | int | float | Decimal | None) -> None:
        """Update the description or value of an extra entry.

        Args:
            extra_id: Identity of the extra entry.
            field: "description" or "value".
            value: New description text, or amount (Money or operator text, signed).
        """
        for idx, extra in enumerate(self._extras):
            if extra.id != extra_id:
                continue

            if field == "description":
                self._extras[idx] = replace(extra, description="" if value is None else str(value))
            elif field == "value":
                self._extras[idx] = replace(extra, value=parse_money(value))
            else:
                logger.debug("Ignoring unknown extra field %r", field)
                return
            self._touch()
            return

        logger.debug("Ignoring update for unknown extra %r", extra_id)

    def add_transaction(
        self,
        description: str,
        denomination_value: Money,
        quantity: str | int | float | None,
        direction: str,
    ) -> Transaction | None:
        """Record a manual in/out adjustment.

        Args:
            description: Free text; blank becomes the placeholder description.
            denomination_value: Configured denomination value in centavos.
            quantity: Positive integer number of units.
            direction: "in" or "out".

        Returns:
            The created Transaction, or None if it was rejected.
        """
        parsed_quantity = parse_quantity(quantity)
        if parsed_quantity is None:
            logger.debug("Rejecting transaction with invalid quantity %r", quantity)
            return None

        if denomination_value not in self._table:
            logger.debug("Rejecting transaction for unconfigured denomination %s", denomination_value)
            return None

        parsed_direction = normalize_direction(direction)
        if parsed_direction is None:
            logger.debug("Rejecting transaction with invalid direction %r", direction)
            return None

        transaction = Transaction(
            id=next(self._transaction_ids),
            description=(description or "").strip() or self._transaction_placeholder,
            denomination_value=denomination_value,
            quantity=parsed_quantity,
            direction=parsed_direction,
            total_value=Money(denomination_value * parsed_quantity),
        )
        self._transactions.append(transaction)
        self._touch()
        logger.debug("Added transaction %s", transaction)
        return transaction

    def remove_transaction(self, transaction_id: int) -> bool:
        """Remove a transaction by identity.

        Returns:
            True if a transaction was removed, False if none matched.
        """
        for idx, transaction in enumerate(self._transactions):
            if transaction.id == transaction_id:
                del self._transactions[idx]
                self._touch()
                return True

        logger.debug("Ignoring removal of unknown transaction %r", transaction_id)
        return False

    def reset_all(self) -> None:
        """Discard all session data and restore the initial state.

        Transaction ids keep increasing across resets.
        """
        self._counts = {value: 0 for value in self._table.values()}
        self._damaged = DamagedCurrency()
        self._extras = list(seed_extras(self._extra_descriptions))
        self._transactions = []
        self._touch()
        logger.debug("Session reset")
