"""Shared console rendering and input helpers for commands."""

import sys
import tomllib
from pathlib import Path

from rich.console import Console
from rich.table import Table

from tesouraria.config import ConfigError, Settings, load_settings
from tesouraria.domain.denominations import DenominationConfigError, DenominationTable
from tesouraria.domain.ledger import ExtraEntry, LedgerStore, Transaction
from tesouraria.domain.models import DIRECTION_IN, Money
from tesouraria.domain.money import format_money_display, parse_money
from tesouraria.domain.reconciliation import Totals

console = Console()


def load_settings_or_exit(config_path: Path | None) -> Settings:
    """Load settings, printing the error and exiting on failure.

    Args:
        config_path: Explicit config file, or None for the default location.

    Returns:
        Settings for the session.
    """
    try:
        return load_settings(config_path)
    except FileNotFoundError:
        console.print(f"[red]Config not found: {config_path}[/red]", style="bold")
        console.print("[dim]Run 'tesouraria init' to create one[/dim]")
        sys.exit(1)
    except OSError as e:
        console.print(f"[red]Cannot read config: {e}[/red]", style="bold")
        sys.exit(1)
    except tomllib.TOMLDecodeError as e:
        console.print(f"[red]Invalid config file: {e}[/red]", style="bold")
        sys.exit(1)
    except (DenominationConfigError, ConfigError) as e:
        console.print(f"[red]Configuration error: {e}[/red]", style="bold")
        sys.exit(1)


def new_store(settings: Settings) -> LedgerStore:
    """Create an empty ledger store for the configured session."""
    return LedgerStore(
        settings.table,
        extra_descriptions=settings.extra_descriptions,
        transaction_placeholder=settings.transaction_placeholder,
    )


def resolve_denomination(text: str, table: DenominationTable) -> Money | None:
    """Resolve operator text to a configured denomination value.

    Args:
        text: Amount in reais (e.g., "100", "0,50").
        table: Configured denominations.

    Returns:
        Denomination value in centavos, or None if not configured.
    """
    value = parse_money(text.strip())
    if value not in table:
        return None
    return value


def format_adjustment(adjustment: int) -> str:
    """Format a unit adjustment with sign and color."""
    if adjustment > 0:
        return f"[green]+{adjustment}[/green]"
    if adjustment < 0:
        return f"[red]{adjustment}[/red]"
    return "[dim]-[/dim]"


def render_denominations(totals: Totals, symbol: str) -> None:
    """Render the per-denomination count table.

    Args:
        totals: Computed totals.
        symbol: Currency symbol.
    """
    table = Table(title="Drawer count")
    table.add_column("Denomination", style="cyan")
    table.add_column("Type", style="dim")
    table.add_column("Physical", justify="right")
    table.add_column("Adjustment", justify="right")
    table.add_column("Effective", justify="right")
    table.add_column("Subtotal", justify="right")

    for line in totals.lines:
        effective = f"[yellow]{line.effective} ![/yellow]" if line.over_withdrawn else str(line.effective)
        subtotal = format_money_display(line.subtotal, symbol)
        if line.subtotal == 0:
            subtotal = f"[dim]{subtotal}[/dim]"

        table.add_row(
            line.label,
            line.category,
            str(line.physical),
            format_adjustment(line.adjustment),
            effective,
            subtotal,
        )

    console.print(table)


def render_summary(totals: Totals, symbol: str) -> None:
    """Render category subtotals and the grand total."""
    table = Table(title="Summary", show_header=False)
    table.add_column("Item", style="white")
    table.add_column("Amount", justify="right")

    table.add_row("Notes", format_money_display(totals.notes_total, symbol))
    table.add_row("Coins", format_money_display(totals.coins_total, symbol))
    table.add_row("Damaged", format_money_display(totals.damaged_total, symbol))
    table.add_row("[bold]Physical cash[/bold]", f"[bold]{format_money_display(totals.physical_total, symbol)}[/bold]")
    table.add_row("Extras", format_money_display(totals.extras_total, symbol, include_sign=True))
    table.add_row(
        "[bold]Grand total[/bold]",
        f"[bold green]{format_money_display(totals.grand_total, symbol)}[/bold green]",
    )

    console.print(table)


def render_warnings(totals: Totals) -> None:
    """Warn about denominations where transactions exceed the counted units."""
    for line in totals.over_withdrawn:
        shortfall = -(line.physical + line.adjustment)
        console.print(
            f"[yellow]Warning: {line.label} withdrawals exceed the physical count by {shortfall} "
            f"(effective count capped at 0)[/yellow]"
        )


def render_transactions(transactions: tuple[Transaction, ...], table: DenominationTable, symbol: str) -> None:
    """Render the manual transaction list."""
    if not transactions:
        console.print("[dim]No transactions[/dim]")
        return

    listing = Table(title=f"Transactions ({len(transactions)})")
    listing.add_column("ID", justify="right", style="dim")
    listing.add_column("Description", style="white")
    listing.add_column("Denomination", style="cyan")
    listing.add_column("Qty", justify="right")
    listing.add_column("Value", justify="right")

    for txn in transactions:
        amount = format_money_display(txn.total_value, symbol)
        if txn.direction == DIRECTION_IN:
            qty_display = f"[green]+{txn.quantity}[/green]"
            value_display = f"[green]+{amount}[/green]"
        else:
            qty_display = f"[red]-{txn.quantity}[/red]"
            value_display = f"[red]-{amount}[/red]"

        listing.add_row(
            str(txn.id), txn.description, table.label_for(txn.denomination_value), qty_display, value_display
        )

    console.print(listing)


def render_extras(extras: tuple[ExtraEntry, ...], symbol: str) -> None:
    """Render the extra cash entries."""
    for extra in extras:
        description = extra.description or "[dim](no description)[/dim]"
        console.print(f"  {extra.id}. {description}: {format_money_display(extra.value, symbol, include_sign=True)}")


def render_report(store: LedgerStore, totals: Totals, symbol: str) -> None:
    """Render the full reconciliation report for a store."""
    snapshot = store.snapshot()

    render_denominations(totals, symbol)
    render_warnings(totals)

    if snapshot.transactions:
        console.print()
        render_transactions(snapshot.transactions, store.table, symbol)

    console.print()
    render_summary(totals, symbol)
