"""Admin commands for initializing and migrating the store."""

import sys
from pathlib import Path

from rich.console import Console

from costbook.config import create_default_config, get_config_path
from costbook.errors import CostbookError
from costbook.store.schema import DB_VERSION, StorageError, get_db_path, get_schema_version, open_database

console = Console()


def run_migration(db_path: Path) -> None:
    """Upgrade an existing database to the current schema version in place."""
    before = get_schema_version(db_path)
    handle = open_database(db_path, DB_VERSION)
    if handle.version == before:
        console.print(f"[green]✓[/green] {db_path} is already at schema version {before}")
    else:
        console.print(f"[green]✓[/green] Upgraded {db_path}: schema version {before} → {handle.version}")


def run_full_init(db_path: Path, config_path: Path) -> None:
    """Create a fresh database and a default config, replacing any old ones."""
    db_path.unlink(missing_ok=True)
    open_database(db_path, DB_VERSION)
    console.print(f"[green]✓[/green] Database: {db_path}")

    create_default_config(config_path)
    console.print(f"[green]✓[/green] Config: {config_path} (mode 600)")

    console.print("[dim]Set a rates source next: costbook rates fetch <url>[/dim]")


def init_command(force: bool = False, migrate: bool = False) -> None:
    """Initialize or migrate the costbook store.

    ``--migrate`` touches only the database and needs one to exist.
    A plain init refuses to replace files left by an earlier one
    unless ``force`` is set.
    """
    db_path = get_db_path()
    config_path = get_config_path()

    if migrate:
        if not db_path.exists():
            console.print(f"[red]Nothing to migrate: {db_path} does not exist[/red]")
            sys.exit(1)
        action = run_migration, (db_path,)
    else:
        leftovers = [p for p in (db_path, config_path) if p.exists()]
        if leftovers and not force:
            console.print("[red]Refusing to overwrite existing files:[/red]")
            for path in leftovers:
                console.print(f"  {path}")
            console.print("[yellow]Rerun with --force to start over, or --migrate to upgrade the database.[/yellow]")
            sys.exit(1)
        action = run_full_init, (db_path, config_path)

    func, args = action
    try:
        func(*args)
    except (StorageError, CostbookError, OSError) as e:
        console.print(f"[red]Init failed: {e}[/red]", style="bold")
        sys.exit(1)
