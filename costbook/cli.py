"""CLI entry point for costbook."""

import typer

from costbook.commands.admin import init_command
from costbook.commands.costs import add_command, delete_command, list_command
from costbook.commands.rates import fetch_command, show_command, url_command
from costbook.commands.report import report_command, year_command
from costbook.logging_setup import configure_logging

app = typer.Typer(
    name="costbook",
    help="Costbook - a personal multi-currency expense tracker",
    add_completion=False,
)

rates_app = typer.Typer(help="Manage exchange rates used for reports.")
app.add_typer(rates_app, name="rates")


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging"),
) -> None:
    """Costbook - a personal multi-currency expense tracker."""
    configure_logging("DEBUG" if verbose else None)


@app.command(name="init")
def init(
    force: bool = typer.Option(False, "--force", "-f", help="Overwrite existing database and config"),
    migrate: bool = typer.Option(False, "--migrate", help="Upgrade the database schema only"),
) -> None:
    """Initialize costbook database and configuration."""
    init_command(force, migrate)


@app.command()
def add(
    amount: float,
    currency: str = typer.Option("USD", "--currency", "-c", help="USD, ILS, GBP or EURO"),
    category: str = typer.Option("Other", "--category", help="Food, Transportation, Rent, Utilities, ..."),
    description: str = typer.Option("", "--description", "-d", help="What the cost was for"),
) -> None:
    """Add a cost dated now."""
    add_command(amount, currency, category, description)


@app.command(name="list")
def list_costs(
    limit: int = typer.Option(15, help="Maximum costs to show"),
) -> None:
    """List your most recent costs."""
    list_command(limit)


@app.command()
def delete(
    entry_id: int,
    yes: bool = typer.Option(False, "--yes", "-y", help="Do not ask for confirmation"),
) -> None:
    """Delete a cost by its ID."""
    delete_command(entry_id, yes)


@app.command(name="report")
def report(
    month: str = typer.Option(None, "--month", help="Specific month (YYYY-MM)"),
    currency: str = typer.Option("USD", "--currency", "-c", help="Currency of the total"),
    breakdown: bool = typer.Option(True, help="Show totals by category"),
) -> None:
    """Show your costs for a month."""
    report_command(month, currency, breakdown)


@app.command(name="year")
def yearly(
    year: int = typer.Option(None, "--year", help="Year to report (default: this year)"),
    currency: str = typer.Option("USD", "--currency", "-c", help="Currency of the totals"),
) -> None:
    """Show your month totals for a year."""
    year_command(year, currency)


@rates_app.command(name="url")
def rates_url(url: str = typer.Argument(None, help="Rates JSON URL to save")) -> None:
    """Show or save the rates URL."""
    url_command(url)


@rates_app.command(name="fetch")
def rates_fetch(url: str = typer.Argument(None, help="Rates JSON URL (default: saved URL)")) -> None:
    """Fetch exchange rates and save them."""
    fetch_command(url)


@rates_app.command(name="show")
def rates_show() -> None:
    """Show the saved exchange rates."""
    show_command()


if __name__ == "__main__":
    app()
