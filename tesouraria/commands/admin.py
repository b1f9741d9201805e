"""Admin commands for configuration and the denomination table."""

import sys
from pathlib import Path

from rich.console import Console
from rich.table import Table

from tesouraria.commands.display import load_settings_or_exit
from tesouraria.config import create_default_config, get_config_path
from tesouraria.domain.money import format_money_display

console = Console()


def init_command(force: bool = False, config_path: Path | None = None) -> None:
    """Write the default configuration file."""
    if config_path is None:
        config_path = get_config_path()

    if config_path.exists() and not force:
        console.print("[red]Initialization failed:[/red]", style="bold")
        console.print(f"  Config already exists: {config_path}")
        console.print("\n[yellow]Use 'tesouraria init --force' to overwrite[/yellow]")
        sys.exit(1)

    try:
        console.print(f"[cyan]Creating config file at {config_path}...[/cyan]")
        create_default_config(config_path)
        console.print("[green]✓[/green] Config file created (permissions: 600)")
    except OSError as e:
        console.print(f"[red]Filesystem error: {e}[/red]", style="bold")
        sys.exit(1)


def denominations_command(config_path: Path | None = None) -> None:
    """List the configured banknotes and coins."""
    settings = load_settings_or_exit(config_path)

    table = Table(title=f"Denominations ({len(settings.table)})")
    table.add_column("Label", style="cyan")
    table.add_column("Type", style="magenta")
    table.add_column("Value", justify="right")

    for denomination in settings.table:
        table.add_row(
            denomination.label,
            denomination.category,
            format_money_display(denomination.value, settings.currency_symbol),
        )

    console.print(table)
