"""Cost management commands (add, list, delete)."""

import asyncio
import sys

import typer
from rich.console import Console
from rich.table import Table

from costbook.config import get_config_path
from costbook.domain.models import CATEGORIES, CURRENCIES
from costbook.errors import CostbookError
from costbook.ledger import open_ledger
from costbook.store.schema import StorageError, get_db_path

console = Console()


def add_command(
    amount: float,
    currency: str = "USD",
    category: str = "Other",
    description: str = "",
) -> None:
    """Add a cost dated now.

    Args:
        amount: Cost amount in ``currency`` units.
        currency: One of USD, ILS, GBP, EURO.
        category: Category label.
        description: Free text description.
    """
    if amount <= 0:
        console.print("[red]Amount must be positive[/red]")
        sys.exit(1)

    code = currency.strip().upper()
    if code not in CURRENCIES:
        console.print(f"[red]Unknown currency '{currency}'. Choose from: {', '.join(CURRENCIES)}[/red]")
        sys.exit(1)

    if category not in CATEGORIES:
        console.print(f"[yellow]Note: '{category}' is not one of {', '.join(CATEGORIES)}[/yellow]")

    ledger = open_ledger(get_db_path(), get_config_path())

    try:
        cost = asyncio.run(
            ledger.repository.insert(
                {"amount": amount, "currency": code, "category": category, "description": description}
            )
        )
    except (StorageError, CostbookError) as e:
        console.print(f"[red]Database error: {e}[/red]", style="bold")
        sys.exit(1)

    console.print(f"[green]✓[/green] Added {cost.amount:,.2f} {cost.currency} ({cost.category}) {cost.description}")


def list_command(limit: int = 15) -> None:
    """List the most recently added costs."""
    ledger = open_ledger(get_db_path(), get_config_path())

    try:
        entries = asyncio.run(ledger.repository.find_recent(limit))
    except (StorageError, CostbookError) as e:
        console.print(f"[red]Database error: {e}[/red]", style="bold")
        sys.exit(1)

    if not entries:
        console.print("[yellow]No costs found[/yellow]")
        return

    table = Table(title=f"Recent costs (showing {len(entries)})")
    table.add_column("ID", style="dim", justify="right")
    table.add_column("Date", style="cyan")
    table.add_column("Category", style="magenta")
    table.add_column("Description", style="white")
    table.add_column("Amount", justify="right")
    table.add_column("Currency")

    for entry in entries:
        date = entry.created_at[:10] if entry.created_at else entry.date or "-"
        table.add_row(
            str(entry.id),
            date,
            entry.category or "[dim]-[/dim]",
            entry.description,
            f"{entry.amount:,.2f}",
            entry.currency,
        )

    console.print(table)


def delete_command(entry_id: int, yes: bool = False) -> None:
    """Delete a cost by id."""
    if not yes and not typer.confirm(f"Are you sure you want to delete cost {entry_id}?"):
        console.print("[dim]Cancelled[/dim]")
        return

    ledger = open_ledger(get_db_path(), get_config_path())

    try:
        asyncio.run(ledger.repository.delete_by_id(entry_id))
    except (StorageError, CostbookError) as e:
        console.print(f"[red]Database error: {e}[/red]", style="bold")
        sys.exit(1)

    console.print(f"[green]✓[/green] Cost {entry_id} deleted")
