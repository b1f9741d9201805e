"""One-shot reconciliation from command-line options."""

import sys
from pathlib import Path
from typing import NoReturn

from rich.console import Console

from tesouraria.commands.display import load_settings_or_exit, new_store, render_report, resolve_denomination
from tesouraria.domain.denominations import DenominationTable
from tesouraria.domain.ledger import LedgerStore
from tesouraria.domain.models import DIRECTION_IN, DIRECTION_OUT, Direction, Money
from tesouraria.domain.reconciliation import compute_totals

console = Console()


def parse_count_option(option: str, table: DenominationTable) -> tuple[Money, str] | None:
    """Parse a ``VALUE=QTY`` count option.

    Args:
        option: Option text (e.g., "100=2", "0,50=13").
        table: Configured denominations.

    Returns:
        Tuple of (denomination value, count text), or None if malformed or unknown.
    """
    value_text, sep, count_text = option.partition("=")
    if not sep:
        return None

    value = resolve_denomination(value_text, table)
    if value is None:
        return None
    return value, count_text


def parse_extra_option(option: str) -> tuple[str, str] | None:
    """Parse a ``DESCRIPTION=AMOUNT`` extra option.

    The last ``=`` separates the amount, so descriptions may contain ``=``.

    Returns:
        Tuple of (description, amount text), or None if malformed.
    """
    description, sep, amount_text = option.rpartition("=")
    if not sep:
        return None
    return description.strip(), amount_text


def parse_transaction_option(option: str, table: DenominationTable) -> tuple[Money, str, str] | None:
    """Parse a ``VALUE:QTY[:DESCRIPTION]`` transaction option.

    Returns:
        Tuple of (denomination value, quantity text, description), or None if malformed or unknown.
    """
    parts = option.split(":", 2)
    if len(parts) < 2:
        return None

    value = resolve_denomination(parts[0], table)
    if value is None:
        return None

    description = parts[2] if len(parts) == 3 else ""
    return value, parts[1], description


def fail(message: str) -> NoReturn:
    """Print an error and exit with status 1."""
    console.print(f"[red]{message}[/red]", style="bold")
    sys.exit(1)


def apply_transactions(store: LedgerStore, options: list[str], direction: Direction) -> None:
    """Add one transaction per option, exiting on the first invalid one."""
    for option in options:
        parsed = parse_transaction_option(option, store.table)
        if parsed is None:
            fail(
                f"Invalid --{direction} option {option!r} "
                "(expected VALUE:QTY[:DESCRIPTION] for a known denomination)"
            )

        value, quantity, description = parsed
        if store.add_transaction(description, value, quantity, direction) is None:
            fail(f"Invalid quantity in --{direction} option {option!r} (must be a positive integer)")


def calc_command(
    counts: list[str],
    damaged_notes: str | None = None,
    damaged_coins: str | None = None,
    extras: list[str] | None = None,
    ins: list[str] | None = None,
    outs: list[str] | None = None,
    config_path: Path | None = None,
) -> None:
    """Reconcile a drawer count given entirely on the command line."""
    settings = load_settings_or_exit(config_path)
    store = new_store(settings)

    for option in counts:
        parsed = parse_count_option(option, store.table)
        if parsed is None:
            fail(f"Invalid --count option {option!r} (expected VALUE=QTY for a known denomination)")
        value, count = parsed
        store.set_count(value, count)

    if damaged_notes is not None:
        store.set_damaged("notes", damaged_notes)
    if damaged_coins is not None:
        store.set_damaged("coins", damaged_coins)

    seeded = store.snapshot().extras
    extras = extras or []
    if len(extras) > len(seeded):
        fail(f"Too many --extra options (at most {len(seeded)})")

    for extra, option in zip(seeded, extras):
        parsed_extra = parse_extra_option(option)
        if parsed_extra is None:
            fail(f"Invalid --extra option {option!r} (expected DESCRIPTION=AMOUNT)")
        description, amount = parsed_extra
        if description:
            store.set_extra_field(extra.id, "description", description)
        store.set_extra_field(extra.id, "value", amount)

    apply_transactions(store, ins or [], DIRECTION_IN)
    apply_transactions(store, outs or [], DIRECTION_OUT)

    totals = compute_totals(store.table, store.snapshot())
    render_report(store, totals, settings.currency_symbol)
