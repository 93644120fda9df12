"""Settings command for viewing and changing configuration."""

import logging
import sqlite3
import sys
import tomllib
from datetime import date
from typing import Any

from rich.console import Console
from rich.table import Table

from croissant.commands.report import render_monthly_chart
from croissant.config import Settings, SettingsStore, get_config_path
from croissant.domain.report import monthly_expense_series
from croissant.store.queries import fetch_transactions
from croissant.store.schema import database_exists, get_db_path

logger = logging.getLogger(__name__)

console = Console()


def render_settings(settings: Settings) -> None:
    table = Table(title="Settings")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", justify="right")
    table.add_row("month_start_day", str(settings.month_start_day))
    table.add_row("default_currency", settings.default_currency)
    console.print(table)


def refresh_monthly_chart(settings: Settings) -> None:
    """Redraw the monthly expense chart after a settings change.

    The new settings are already saved when this runs, so a database
    failure is reported without failing the command.
    """
    db_path = get_db_path()
    if not database_exists(db_path):
        return

    try:
        transactions = fetch_transactions(db_path)
    except sqlite3.Error as e:
        logger.debug("Chart refresh failed", exc_info=True)
        console.print(f"[yellow]Could not refresh the monthly chart: {e}[/yellow]")
        return

    if not transactions:
        return

    buckets = monthly_expense_series(transactions, settings.month_start_day, date.today())
    render_monthly_chart(buckets, settings.default_currency)


def settings_command(
    month_start_day: int | None = None,
    currency: str | None = None,
) -> None:
    """Show settings, or change them when options are given.

    Args:
        month_start_day: New day of month that reporting months start on (1-28).
        currency: New default currency code.
    """
    try:
        store = SettingsStore(get_config_path())

        changes: dict[str, Any] = {}
        if month_start_day is not None:
            changes["month_start_day"] = month_start_day
        if currency is not None:
            if not currency.strip():
                console.print("[red]Currency cannot be empty[/red]")
                sys.exit(1)
            changes["default_currency"] = currency.strip()

        if not changes:
            render_settings(store.current)
            return

        unsubscribe = store.subscribe(refresh_monthly_chart)
        try:
            before = store.current
            updated = store.update(**changes)
        finally:
            unsubscribe()

        if updated == before:
            console.print("[dim]Settings unchanged[/dim]")
        else:
            console.print("[green]✓[/green] Settings saved")
        render_settings(updated)

    except tomllib.TOMLDecodeError as e:
        console.print(f"[red]Invalid config file: {e}[/red]", style="bold")
        sys.exit(1)
    except ValueError as e:
        console.print(f"[red]{e}[/red]")
        sys.exit(1)
    except OSError as e:
        console.print(f"[red]Could not write config: {e}[/red]", style="bold")
        sys.exit(1)
