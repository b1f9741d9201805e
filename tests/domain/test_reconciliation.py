"""Tests for tesouraria.domain.reconciliation pure functions."""

import itertools

import pytest

from tesouraria.domain.denominations import default_table
from tesouraria.domain.ledger import DamagedCurrency, ExtraEntry, LedgerSnapshot, LedgerStore, Transaction
from tesouraria.domain.models import Money
from tesouraria.domain.reconciliation import (
    TotalsCache,
    calculate_extras_total,
    compute_effective_count,
    compute_net_adjustments,
    compute_totals,
)

R100 = Money(10000)
R1 = Money(100)


@pytest.fixture
def store() -> LedgerStore:
    return LedgerStore(default_table())


def make_transaction(txn_id: int, value: Money, quantity: int, direction: str) -> Transaction:
    return Transaction(
        id=txn_id,
        description="t",
        denomination_value=value,
        quantity=quantity,
        direction=direction,  # type: ignore[arg-type]
        total_value=Money(value * quantity),
    )


class TestComputeNetAdjustments:
    """Tests for compute_net_adjustments."""

    def test_zero_for_every_denomination(self) -> None:
        """Should include every configured denomination."""
        adjustments = compute_net_adjustments(default_table(), [])

        assert adjustments == {value: 0 for value in default_table().values()}

    def test_in_adds_and_out_subtracts(self) -> None:
        """Should add quantity for in and subtract it for out."""
        adjustments = compute_net_adjustments(
            default_table(),
            [
                make_transaction(1, R100, 3, "in"),
                make_transaction(2, R100, 1, "out"),
                make_transaction(3, R1, 4, "out"),
            ],
        )

        assert adjustments[R100] == 2
        assert adjustments[R1] == -4

    def test_ignores_unconfigured_denominations(self) -> None:
        """Should skip transactions outside the configured set."""
        adjustments = compute_net_adjustments(default_table(), [make_transaction(1, Money(300), 2, "in")])

        assert Money(300) not in adjustments
        assert all(adj == 0 for adj in adjustments.values())


class TestComputeEffectiveCount:
    """Tests for compute_effective_count."""

    def test_adds_adjustment(self) -> None:
        assert compute_effective_count(2, 3) == 5
        assert compute_effective_count(5, -2) == 3

    def test_floors_at_zero(self) -> None:
        """Should cap over-withdrawal at zero."""
        assert compute_effective_count(0, -3) == 0
        assert compute_effective_count(1, -5) == 0


class TestComputeTotals:
    """Tests for compute_totals."""

    def test_empty_store_totals_zero(self, store: LedgerStore) -> None:
        """Should total zero with no input."""
        totals = compute_totals(store.table, store.snapshot())

        assert totals.grand_total == Money(0)
        assert len(totals.lines) == len(store.table)

    def test_note_out_scenario(self, store: LedgerStore) -> None:
        """2×R$100 and 5×R$1 counted, one R$100 out: grand total R$105."""
        store.set_count(R100, 2)
        store.set_count(R1, 5)
        store.add_transaction("", R100, 1, "out")

        totals = compute_totals(store.table, store.snapshot())
        line = totals.line_for(R100)

        assert line is not None
        assert line.effective == 1
        assert totals.notes_total == Money(10000)
        assert totals.coins_total == Money(500)
        assert totals.damaged_total == Money(0)
        assert totals.physical_total == Money(10500)
        assert totals.extras_total == Money(0)
        assert totals.grand_total == Money(10500)

    def test_over_withdrawal_is_clamped(self, store: LedgerStore) -> None:
        """No R$100 counted, three taken out: contributes zero, not -R$300."""
        store.add_transaction("", R100, 3, "out")

        totals = compute_totals(store.table, store.snapshot())
        line = totals.line_for(R100)

        assert line is not None
        assert line.adjustment == -3
        assert line.effective == 0
        assert line.subtotal == Money(0)
        assert line.over_withdrawn is True
        assert totals.notes_total == Money(0)
        assert totals.over_withdrawn == [line]

    def test_extras_are_signed(self, store: LedgerStore) -> None:
        """Extras of 50 and -20 total 30."""
        store.set_extra_field("1", "value", "50")
        store.set_extra_field("2", "value", "-20")

        totals = compute_totals(store.table, store.snapshot())

        assert totals.extras_total == Money(3000)
        assert totals.grand_total == Money(3000)

    def test_damaged_counts_as_physical(self, store: LedgerStore) -> None:
        """Should add damaged notes and coins into physical cash."""
        store.set_damaged("notes", "20")
        store.set_damaged("coins", "0,35")

        totals = compute_totals(store.table, store.snapshot())

        assert totals.damaged_total == Money(2035)
        assert totals.physical_total == Money(2035)

    def test_coin_arithmetic_is_exact(self, store: LedgerStore) -> None:
        """Should not accumulate floating point error for small coins."""
        store.set_count(Money(10), 3)
        store.set_count(Money(5), 7)

        totals = compute_totals(store.table, store.snapshot())

        assert totals.coins_total == Money(65)

    def test_category_total_matches_lines(self, store: LedgerStore) -> None:
        """Should equal the value-weighted sum of effective counts per category."""
        for idx, value in enumerate(store.table.values(), 1):
            store.set_count(value, idx)
        store.add_transaction("", Money(50), 4, "out")
        store.add_transaction("", Money(2000), 2, "in")

        totals = compute_totals(store.table, store.snapshot())

        for category, total in (("note", totals.notes_total), ("coin", totals.coins_total)):
            expected = sum(line.effective * line.value for line in totals.lines if line.category == category)
            assert total == expected

    def test_transaction_value_frozen_at_creation(self) -> None:
        """Should use quantities, not stored total values, for adjustments."""
        snapshot = LedgerSnapshot(
            counts={R100: 1},
            damaged=DamagedCurrency(),
            extras=(),
            transactions=(
                Transaction(
                    id=1,
                    description="t",
                    denomination_value=R100,
                    quantity=1,
                    direction="in",
                    total_value=Money(1),
                ),
            ),
            version=1,
        )

        totals = compute_totals(default_table(), snapshot)

        assert totals.notes_total == Money(20000)


class TestProperties:
    """Reconciliation invariants over many inputs."""

    @pytest.mark.parametrize(
        ("physical", "quantity", "direction"),
        list(itertools.product([0, 1, 5], [1, 3, 10], ["in", "out"])),
    )
    def test_effective_count_never_negative(
        self, store: LedgerStore, physical: int, quantity: int, direction: str
    ) -> None:
        """Should never report a negative effective count."""
        store.set_count(R100, physical)
        store.add_transaction("", R100, quantity, direction)
        store.add_transaction("", R100, quantity, "out")

        totals = compute_totals(store.table, store.snapshot())

        assert all(line.effective >= 0 for line in totals.lines)

    def test_grand_total_identity(self, store: LedgerStore) -> None:
        """Grand total equals notes + coins + damaged + extras."""
        store.set_count(Money(5000), 3)
        store.set_count(Money(25), 9)
        store.set_damaged("notes", "7")
        store.set_extra_field("1", "value", "-12.30")
        store.add_transaction("", Money(5000), 5, "out")

        totals = compute_totals(store.table, store.snapshot())

        assert totals.grand_total == (
            totals.notes_total + totals.coins_total + totals.damaged_total + totals.extras_total
        )
        assert totals.physical_total == totals.notes_total + totals.coins_total + totals.damaged_total

    def test_adjustment_changes_by_exact_quantity(self, store: LedgerStore) -> None:
        """In raises the adjustment by q; out lowers it by q."""
        before = compute_totals(store.table, store.snapshot()).adjustments[Money(2000)]

        store.add_transaction("", Money(2000), 7, "in")
        after_in = compute_totals(store.table, store.snapshot()).adjustments[Money(2000)]
        store.add_transaction("", Money(2000), 4, "out")
        after_out = compute_totals(store.table, store.snapshot()).adjustments[Money(2000)]

        assert after_in == before + 7
        assert after_out == after_in - 4

    def test_remove_restores_adjustment(self, store: LedgerStore) -> None:
        """Removing transactions in any order restores the earlier adjustments."""
        baseline = compute_totals(store.table, store.snapshot()).adjustments
        first = store.add_transaction("", Money(1000), 2, "in")
        second = store.add_transaction("", Money(10), 3, "out")
        assert first is not None and second is not None

        store.remove_transaction(first.id)
        store.remove_transaction(second.id)

        assert compute_totals(store.table, store.snapshot()).adjustments == baseline

    def test_reset_yields_zero(self, store: LedgerStore) -> None:
        """Reset leaves a zero grand total and the seeded extras."""
        store.set_count(R100, 4)
        store.set_extra_field("1", "value", "25")
        store.add_transaction("", R1, 2, "in")

        store.reset_all()
        totals = compute_totals(store.table, store.snapshot())

        assert totals.grand_total == Money(0)
        assert len(store.snapshot().extras) == 2

    def test_idempotent(self, store: LedgerStore) -> None:
        """Computing twice on the same snapshot gives identical totals."""
        store.set_count(Money(50), 11)
        store.add_transaction("", Money(50), 2, "out")
        snapshot = store.snapshot()

        assert compute_totals(store.table, snapshot) == compute_totals(store.table, snapshot)


class TestCalculateExtrasTotal:
    """Tests for calculate_extras_total."""

    def test_sums_signed_values(self) -> None:
        extras = [ExtraEntry("1", "a", Money(5000)), ExtraEntry("2", "b", Money(-2000))]

        assert calculate_extras_total(extras) == Money(3000)


class TestTotalsCache:
    """Tests for TotalsCache."""

    def test_reuses_result_until_mutation(self, store: LedgerStore) -> None:
        """Should return the cached object while the version is unchanged."""
        cache = TotalsCache()

        first = cache.get(store)
        assert cache.get(store) is first

        store.set_count(R100, 1)
        second = cache.get(store)

        assert second is not first
        assert second.notes_total == Money(10000)

    def test_matches_fresh_computation(self, store: LedgerStore) -> None:
        """Should never diverge from computing from scratch."""
        cache = TotalsCache()
        store.set_count(R1, 3)
        cache.get(store)
        store.add_transaction("", R1, 1, "out")
        store.set_extra_field("2", "value", "9")

        assert cache.get(store) == compute_totals(store.table, store.snapshot())

    def test_separate_stores(self) -> None:
        """Should not serve one store's totals for another."""
        cache = TotalsCache()
        first = LedgerStore(default_table())
        second = LedgerStore(default_table())
        second.set_count(R100, 1)
        first.set_count(R1, 1)

        assert cache.get(first).grand_total == Money(100)
        assert cache.get(second).grand_total == Money(10000)

    def test_recomputes_for_new_store_at_same_version(self) -> None:
        """Should recompute when handed a different store with an equal version."""
        cache = TotalsCache()
        first = LedgerStore(default_table())
        first.set_count(R1, 1)
        assert cache.get(first).grand_total == Money(100)

        second = LedgerStore(default_table())
        second.set_count(R100, 1)

        assert second.version == first.version
        assert cache.get(second).grand_total == Money(10000)

    def test_recomputes_after_store_is_replaced(self) -> None:
        """Should not reuse totals of a discarded store whose identity may be recycled."""
        cache = TotalsCache()
        store = LedgerStore(default_table())
        store.set_count(R100, 2)
        cache.get(store)

        del store
        replacement = LedgerStore(default_table())
        replacement.set_count(R1, 3)

        assert cache.get(replacement) == compute_totals(replacement.table, replacement.snapshot())
