"""Exchange rate settings commands."""

import json
import sys

from rich.console import Console

from costbook.config import get_config_path, get_rates_url, get_saved_rates, save_rates_url
from costbook.domain.conversion import CurrencyConverter
from costbook.errors import RatesFetchError, RatesValidationError
from costbook.rates import refresh_rates

console = Console()


def url_command(url: str | None = None) -> None:
    """Show or save the rates URL."""
    config_path = get_config_path()

    if url is None:
        saved = get_rates_url(config_path)
        console.print(saved or "[dim]No rates URL saved[/dim]")
        return

    save_rates_url(url, config_path)
    console.print("[green]✓[/green] Saved URL")


def fetch_command(url: str | None = None) -> None:
    """Fetch rates from ``url`` (or the saved URL) and save them."""
    config_path = get_config_path()
    url = (url or get_rates_url(config_path)).strip()

    if not url:
        console.print("[red]No rates URL given or saved[/red]")
        console.print('[dim]Expected JSON: {"USD":A,"GBP":B,"EURO":C,"ILS":D}[/dim]')
        sys.exit(1)

    try:
        rates = refresh_rates(url, CurrencyConverter(), config_path)
    except (RatesFetchError, RatesValidationError) as e:
        console.print(f"[red]Error: {e}[/red]", style="bold")
        sys.exit(1)

    save_rates_url(url, config_path)
    console.print("[green]✓[/green] Rates fetched & saved")
    console.print(json.dumps(rates, indent=2))


def show_command() -> None:
    """Show the saved rate table."""
    rates = get_saved_rates(get_config_path())
    if rates is None:
        console.print("[yellow]No rates saved. Run 'costbook rates fetch <url>'.[/yellow]")
        return
    console.print(json.dumps(rates, indent=2))
