"""Report commands for monthly and yearly spending."""

import asyncio
import sys
from datetime import datetime

from rich.console import Console
from rich.table import Table

from costbook.config import get_config_path
from costbook.dates import month_abbr, month_label, parse_month
from costbook.domain.models import CURRENCIES
from costbook.domain.report import CategoryTotal, calculate_histogram_bar_length
from costbook.errors import CostbookError, RatesUnavailableError
from costbook.ledger import open_ledger
from costbook.store.schema import StorageError, get_db_path

console = Console()


def compute_report_month(month: str | None) -> tuple[int, int]:
    """Resolve the report month.

    Args:
        month: Optional specific month (YYYY-MM format).

    Returns:
        Tuple of (year, month), the current month when none is given.
    """
    if month:
        return parse_month(month)
    now = datetime.now()
    return now.year, now.month


def _check_currency(currency: str) -> str:
    code = currency.strip().upper()
    if code not in CURRENCIES:
        console.print(f"[red]Unknown currency '{currency}'. Choose from: {', '.join(CURRENCIES)}[/red]")
        sys.exit(1)
    return code


def _fail(e: Exception) -> None:
    if isinstance(e, RatesUnavailableError):
        console.print(f"[yellow]{e}[/yellow]")
        console.print("[dim]Run 'costbook rates fetch <url>' first.[/dim]")
    else:
        console.print(f"[red]Database error: {e}[/red]", style="bold")
    sys.exit(1)


def render_category_line(cat_total: CategoryTotal, currency: str, max_amount: float, bar_width: int) -> None:
    """Render single category line with a histogram bar.

    Args:
        cat_total: Category total.
        currency: Currency of the amount.
        max_amount: Maximum amount for histogram scaling.
        bar_width: Width of histogram bar in characters.
    """
    amount_display = f"{cat_total.amount:,.2f} {currency}"
    bar = "█" * calculate_histogram_bar_length(cat_total.amount, max_amount, bar_width)
    console.print(f"  {cat_total.category or '-':20} {amount_display:>16} {bar}")


def report_command(month: str | None = None, currency: str = "USD", breakdown: bool = True) -> None:
    """Show the costs of one month with a total in ``currency``."""
    try:
        year, month_int = compute_report_month(month)
    except ValueError:
        console.print(f"[red]Invalid month '{month}', expected YYYY-MM[/red]")
        sys.exit(1)

    code = _check_currency(currency)
    ledger = open_ledger(get_db_path(), get_config_path())

    try:
        report, categories = asyncio.run(ledger.reports.get_category_breakdown(year, month_int, code))
    except (StorageError, CostbookError) as e:
        _fail(e)
        return

    console.print(f"[bold cyan]{month_label(year, month_int)}[/bold cyan]\n")

    if not report.entries:
        console.print("[dim]No costs recorded this month[/dim]")
        return

    table = Table()
    table.add_column("Day", style="cyan", justify="right")
    table.add_column("Category", style="magenta")
    table.add_column("Description", style="white")
    table.add_column("Amount", justify="right")
    table.add_column("Currency")

    for item in report.entries:
        table.add_row(
            str(item.day),
            item.category or "[dim]-[/dim]",
            item.description,
            f"{item.amount:,.2f}",
            item.currency,
        )

    console.print(table)

    if breakdown and categories:
        console.print("\n[bold]By category:[/bold]\n")
        max_amount = max(c.amount for c in categories)
        for cat_total in categories:
            render_category_line(cat_total, code, max_amount, 30)

    console.print(f"\n[bold]Total:[/bold] {report.total.amount:,.2f} {report.total.currency}")


def year_command(year: int | None = None, currency: str = "USD") -> None:
    """Show twelve month totals for a year."""
    year = year or datetime.now().year
    code = _check_currency(currency)
    ledger = open_ledger(get_db_path(), get_config_path())

    try:
        report = asyncio.run(ledger.reports.get_yearly_report(year, code))
    except (StorageError, CostbookError) as e:
        _fail(e)
        return

    console.print(f"[bold cyan]{year}[/bold cyan] ({code})\n")

    max_amount = max(m.total for m in report.months)
    for month_total in report.months:
        bar = "█" * calculate_histogram_bar_length(month_total.total, max_amount, 40)
        console.print(f"  {month_abbr(month_total.month):4} {month_total.total:>14,.2f} {bar}")

    console.print(f"\n[bold]Total:[/bold] {report.total:,.2f} {code}")
