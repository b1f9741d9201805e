"""Interactive working session for counting a drawer."""

from pathlib import Path

import typer
from rich.console import Console

from tesouraria.commands.display import (
    load_settings_or_exit,
    new_store,
    render_extras,
    render_report,
    render_transactions,
    render_warnings,
)
from tesouraria.domain.denominations import Denomination
from tesouraria.domain.ledger import DamagedField, LedgerStore, normalize_direction
from tesouraria.domain.models import DIRECTION_OUT
from tesouraria.domain.money import format_money_display, format_money_plain
from tesouraria.domain.reconciliation import TotalsCache

console = Console()

MENU = "c count | d damaged | e extra | t transaction | x remove | s show | z reset | q quit"


def prompt_denomination(store: LedgerStore, default_index: int = 1) -> Denomination | None:
    """Show numbered denominations with current counts and prompt for one.

    Args:
        store: Ledger store.
        default_index: 1-based default selection.

    Returns:
        Selected denomination, or None if the choice is invalid.
    """
    denominations = list(store.table)
    for idx, denomination in enumerate(denominations, 1):
        console.print(f"  {idx:2}. {denomination.label:12} [dim]{store.get_count(denomination.value)} un[/dim]")

    choice: str = typer.prompt(f"Select denomination (1-{len(denominations)})", type=str, default=str(default_index))
    try:
        idx = int(choice) - 1
    except ValueError:
        console.print("[red]Invalid selection[/red]\n")
        return None

    if idx < 0 or idx >= len(denominations):
        console.print("[red]Invalid selection[/red]\n")
        return None
    return denominations[idx]


def handle_count(store: LedgerStore) -> None:
    """Set the physical count of one denomination."""
    denomination = prompt_denomination(store)
    if denomination is None:
        return

    current = store.get_count(denomination.value)
    count: str = typer.prompt(f"Count for {denomination.label}", type=str, default=str(current))
    store.set_count(denomination.value, count)
    console.print(f"[green]✓ {denomination.label}: {store.get_count(denomination.value)} un[/green]\n")


def handle_damaged(store: LedgerStore, symbol: str) -> None:
    """Set the damaged notes or coins value."""
    kind: str = typer.prompt("Damaged (n notes / c coins)", type=str)
    field: DamagedField
    if kind.lower() == "n":
        field = "notes"
    elif kind.lower() == "c":
        field = "coins"
    else:
        console.print("[red]Invalid option[/red]\n")
        return

    damaged = store.snapshot().damaged
    current = damaged.notes_value if field == "notes" else damaged.coins_value
    amount: str = typer.prompt(f"Damaged {field} value", type=str, default=format_money_plain(current))
    store.set_damaged(field, amount)

    damaged = store.snapshot().damaged
    updated = damaged.notes_value if field == "notes" else damaged.coins_value
    console.print(f"[green]✓ Damaged {field}: {format_money_display(updated, symbol)}[/green]\n")


def handle_extra(store: LedgerStore, symbol: str) -> None:
    """Edit the description and value of an extra entry."""
    extras = store.snapshot().extras
    render_extras(extras, symbol)

    extra_id: str = typer.prompt(f"Select extra (1-{len(extras)})", type=str)
    extra = store.get_extra(extra_id.strip())
    if extra is None:
        console.print("[red]Invalid selection[/red]\n")
        return

    description: str = typer.prompt("Description", type=str, default=extra.description)
    amount: str = typer.prompt("Value (negative to subtract)", type=str, default=format_money_plain(extra.value))
    store.set_extra_field(extra.id, "description", description)
    store.set_extra_field(extra.id, "value", amount)

    updated = store.get_extra(extra.id)
    if updated is not None:
        amount_display = format_money_display(updated.value, symbol, include_sign=True)
        console.print(f"[green]✓ {updated.description}: {amount_display}[/green]\n")


def handle_add_transaction(store: LedgerStore, symbol: str) -> None:
    """Record a manual in/out transaction."""
    direction_text: str = typer.prompt("Direction (in/out)", type=str, default=DIRECTION_OUT)
    direction = normalize_direction(direction_text)
    if direction is None:
        console.print("[red]Direction must be 'in' or 'out'[/red]\n")
        return

    denomination = prompt_denomination(store)
    if denomination is None:
        return

    quantity: str = typer.prompt("Quantity (units)", type=str, default="")
    description: str = typer.prompt("Description", type=str, default="")

    transaction = store.add_transaction(description, denomination.value, quantity, direction)
    if transaction is None:
        console.print("[red]Quantity must be a positive integer, transaction not added[/red]\n")
        return

    sign = "+" if transaction.direction != DIRECTION_OUT else "-"
    console.print(
        f"[green]✓ #{transaction.id} {transaction.description}: {sign}{transaction.quantity} × "
        f"{denomination.label} ({format_money_display(transaction.total_value, symbol)})[/green]\n"
    )


def handle_remove_transaction(store: LedgerStore, symbol: str) -> None:
    """Remove a transaction by id."""
    transactions = store.snapshot().transactions
    render_transactions(transactions, store.table, symbol)
    if not transactions:
        console.print()
        return

    choice: str = typer.prompt("Transaction ID to remove", type=str)
    try:
        transaction_id = int(choice)
    except ValueError:
        console.print("[red]Invalid ID[/red]\n")
        return

    if store.remove_transaction(transaction_id):
        console.print(f"[green]✓ Removed transaction #{transaction_id}[/green]\n")
    else:
        console.print(f"[yellow]No transaction #{transaction_id}[/yellow]\n")


def handle_reset(store: LedgerStore) -> None:
    """Clear the session after explicit confirmation."""
    if not typer.confirm("Clear all data for this session? This cannot be undone", default=False):
        console.print("[dim]Reset cancelled[/dim]\n")
        return

    store.reset_all()
    console.print("[green]✓ Session cleared[/green]\n")


def session_command(config_path: Path | None = None) -> None:
    """Run an interactive drawer count."""
    settings = load_settings_or_exit(config_path)
    symbol = settings.currency_symbol
    store = new_store(settings)
    cache = TotalsCache()

    console.print("[bold cyan]Drawer count session[/bold cyan] [dim](data is kept in memory only)[/dim]\n")

    while True:
        totals = cache.get(store)
        console.print(
            f"[bold]Physical:[/bold] {format_money_display(totals.physical_total, symbol)}  "
            f"[bold]Grand total:[/bold] [green]{format_money_display(totals.grand_total, symbol)}[/green]"
        )
        render_warnings(totals)

        choice: str = typer.prompt(MENU, type=str)
        action = choice.strip().lower()

        if action == "q":
            console.print()
            render_report(store, cache.get(store), symbol)
            console.print("[green]Session closed[/green]", style="bold")
            return
        elif action == "c":
            handle_count(store)
        elif action == "d":
            handle_damaged(store, symbol)
        elif action == "e":
            handle_extra(store, symbol)
        elif action == "t":
            handle_add_transaction(store, symbol)
        elif action == "x":
            handle_remove_transaction(store, symbol)
        elif action == "s":
            console.print()
            render_report(store, totals, symbol)
            render_extras(store.snapshot().extras, symbol)
            console.print()
        elif action == "z":
            handle_reset(store)
        else:
            console.print("[red]Invalid option[/red]\n")
