"""Pure functions for reconciling a drawer count into totals.

This module contains the functional core for reconciliation:
- No I/O operations (no console, no files)
- No side effects
- Pure data transformations
- Easy to test

Effective count per denomination is the physical count plus the net
in/out adjustment from transactions, floored at zero. Totals are always
recomputed from the inputs.

All monetary amounts are in centavos (Money type).
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass

from tesouraria.domain.denominations import DenominationTable
from tesouraria.domain.ledger import DamagedCurrency, ExtraEntry, LedgerSnapshot, LedgerStore, Transaction
from tesouraria.domain.models import COIN, DIRECTION_IN, DIRECTION_OUT, NOTE, DenominationCategory, Money


@dataclass(frozen=True)
class DenominationLine:
    """Immutable reconciliation result for a single denomination."""

    value: Money
    category: DenominationCategory
    label: str
    physical: int
    adjustment: int
    effective: int
    subtotal: Money

    @property
    def over_withdrawn(self) -> bool:
        """True when transactions take out more units than were counted."""
        return self.physical + self.adjustment < 0


@dataclass(frozen=True)
class Totals:
    """Immutable totals for a drawer count."""

    lines: tuple[DenominationLine, ...]
    notes_total: Money
    coins_total: Money
    damaged_total: Money
    extras_total: Money
    physical_total: Money
    grand_total: Money

    @property
    def adjustments(self) -> dict[Money, int]:
        return {line.value: line.adjustment for line in self.lines}

    @property
    def over_withdrawn(self) -> list[DenominationLine]:
        return [line for line in self.lines if line.over_withdrawn]

    def line_for(self, value: Money) -> DenominationLine | None:
        for line in self.lines:
            if line.value == value:
                return line
        return None


def compute_net_adjustments(table: DenominationTable, transactions: Iterable[Transaction]) -> dict[Money, int]:
    """Calculate the net unit adjustment per configured denomination.

    Args:
        table: Configured denominations.
        transactions: Manual transactions ("in" adds units, "out" removes them).

    Returns:
        Dictionary of denomination value to net adjustment (0 when untouched).
        Transactions for unconfigured denominations are ignored.
    """
    adjustments = {value: 0 for value in table.values()}

    for transaction in transactions:
        if transaction.denomination_value not in adjustments:
            continue
        if transaction.direction == DIRECTION_IN:
            adjustments[transaction.denomination_value] += transaction.quantity
        elif transaction.direction == DIRECTION_OUT:
            adjustments[transaction.denomination_value] -= transaction.quantity

    return adjustments


def compute_effective_count(physical: int, adjustment: int) -> int:
    """Calculate effective units, floored at zero.

    Over-withdrawal is capped rather than reported as a negative quantity.
    """
    return max(0, physical + adjustment)


def compute_denomination_lines(
    table: DenominationTable,
    counts: Mapping[Money, int],
    adjustments: dict[Money, int],
) -> tuple[DenominationLine, ...]:
    """Build one reconciliation line per configured denomination, in table order."""
    lines: list[DenominationLine] = []

    for denomination in table:
        physical = max(0, counts.get(denomination.value, 0))
        adjustment = adjustments.get(denomination.value, 0)
        effective = compute_effective_count(physical, adjustment)

        lines.append(
            DenominationLine(
                value=denomination.value,
                category=denomination.category,
                label=denomination.label,
                physical=physical,
                adjustment=adjustment,
                effective=effective,
                subtotal=Money(effective * denomination.value),
            )
        )

    return tuple(lines)


def calculate_category_total(lines: Iterable[DenominationLine], category: DenominationCategory) -> Money:
    """Sum the subtotals of one category."""
    return Money(sum(line.subtotal for line in lines if line.category == category))


def calculate_damaged_total(damaged: DamagedCurrency) -> Money:
    return Money(damaged.notes_value + damaged.coins_value)


def calculate_extras_total(extras: Iterable[ExtraEntry]) -> Money:
    """Sum extra entries (negative entries reduce the total)."""
    return Money(sum(extra.value for extra in extras))


def compute_totals(table: DenominationTable, snapshot: LedgerSnapshot) -> Totals:
    """Compute all totals for a ledger snapshot.

    Args:
        table: Configured denominations.
        snapshot: Ledger state to reconcile.

    Returns:
        Totals with per-denomination lines and aggregates.
    """
    adjustments = compute_net_adjustments(table, snapshot.transactions)
    lines = compute_denomination_lines(table, snapshot.counts, adjustments)

    notes_total = calculate_category_total(lines, NOTE)
    coins_total = calculate_category_total(lines, COIN)
    damaged_total = calculate_damaged_total(snapshot.damaged)
    extras_total = calculate_extras_total(snapshot.extras)
    physical_total = Money(notes_total + coins_total + damaged_total)

    return Totals(
        lines=lines,
        notes_total=notes_total,
        coins_total=coins_total,
        damaged_total=damaged_total,
        extras_total=extras_total,
        physical_total=physical_total,
        grand_total=Money(physical_total + extras_total),
    )


class TotalsCache:
    """Memoize totals for one store instance, keyed by its version counter."""

    def __init__(self) -> None:
        self._store: LedgerStore | None = None
        self._version: int | None = None
        self._totals: Totals | None = None

    def get(self, store: LedgerStore) -> Totals:
        """Return totals for the store's current state, recomputing only after a mutation."""
        if self._totals is None or self._store is not store or self._version != store.version:
            self._totals = compute_totals(store.table, store.snapshot())
            self._store = store
            self._version = store.version
        return self._totals
