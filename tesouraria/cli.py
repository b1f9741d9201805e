"""CLI entry point for tesouraria."""

from pathlib import Path

import typer

from tesouraria.commands.admin import denominations_command, init_command
from tesouraria.commands.calc import calc_command
from tesouraria.commands.session import session_command
from tesouraria.logging_utils import configure_logging

app = typer.Typer(
    name="tesouraria",
    help="Tesouraria - cash-drawer reconciliation for end-of-shift balancing",
    add_completion=False,
)


@app.callback()
def main(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging"),
    config: Path = typer.Option(None, "--config", help="Config file (default: ~/.config/tesouraria/config.toml)"),
) -> None:
    """Tesouraria - cash-drawer reconciliation for end-of-shift balancing."""
    configure_logging(verbose)
    ctx.obj = {"config_path": config}


@app.command(name="init")
def init(
    ctx: typer.Context,
    force: bool = typer.Option(False, "--force", "-f", help="Overwrite existing config"),
) -> None:
    """Write the default configuration file."""
    init_command(force, ctx.obj["config_path"])


@app.command(name="denominations")
def denominations(ctx: typer.Context) -> None:
    """List the configured banknotes and coins."""
    denominations_command(ctx.obj["config_path"])


@app.command()
def calc(
    ctx: typer.Context,
    count: list[str] = typer.Option([], "--count", "-c", help="Physical count as VALUE=QTY (e.g. 100=2, 0,50=13)"),
    damaged_notes: str = typer.Option(None, "--damaged-notes", help="Value of damaged notes (in R$)"),
    damaged_coins: str = typer.Option(None, "--damaged-coins", help="Value of damaged coins (in R$)"),
    extra: list[str] = typer.Option([], "--extra", "-e", help="Extra entry as DESCRIPTION=AMOUNT (negative allowed)"),
    cash_in: list[str] = typer.Option([], "--in", help="Units put in as VALUE:QTY[:DESCRIPTION]"),
    cash_out: list[str] = typer.Option([], "--out", help="Units taken out as VALUE:QTY[:DESCRIPTION]"),
) -> None:
    """Reconcile a drawer count given on the command line."""
    calc_command(count, damaged_notes, damaged_coins, extra, cash_in, cash_out, ctx.obj["config_path"])


@app.command()
def session(ctx: typer.Context) -> None:
    """Count a drawer interactively (data is kept in memory only)."""
    session_command(ctx.obj["config_path"])


if __name__ == "__main__":
    app()
