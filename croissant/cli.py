"""CLI entry point for croissant."""

import logging

import typer
from rich.console import Console
from rich.logging import RichHandler

from croissant.commands.admin import backup_command, init_command
from croissant.commands.categories import (
    category_add_command,
    category_delete_command,
    category_edit_command,
    category_list_command,
)
from croissant.commands.report import dashboard_command
from croissant.commands.settings import settings_command
from croissant.commands.transactions import add_command, delete_command, edit_command, list_command

app = typer.Typer(
    name="croissant",
    help="Croissant - personal income and expense tracker",
    add_completion=False,
)

category_app = typer.Typer(help="Manage your budget categories.")
app.add_typer(category_app, name="category")


def configure_logging(verbose: bool) -> None:
    """Send log records to stderr through rich."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging"),
) -> None:
    """Croissant - personal income and expense tracker."""
    configure_logging(verbose)


@app.command(name="backup")
def backup(
    output_dir: str = typer.Option(None, "--output", "-o", help="Backup directory (default: next to the database)"),
) -> None:
    """Backup your database and configuration files."""
    backup_command(output_dir)


@app.command(name="init")
def init(
    force: bool = typer.Option(False, "--force", "-f", help="Overwrite existing database and config"),
    migrate: bool = typer.Option(False, "--migrate", help="Update the database schema only"),
) -> None:
    """Initialize croissant database and configuration."""
    init_command(force, migrate)


@app.command()
def add(
    amount: str = typer.Argument(..., help="Amount (negative for expenses; put -- before negative numbers)"),
    expense: bool = typer.Option(False, "--expense", "-x", help="Record the amount as an expense"),
    currency: str = typer.Option(None, "--currency", help="Currency code (default: from settings)"),
    category: str = typer.Option(None, "--category", "-c", help="Category name"),
    note: str = typer.Option(None, "--note", "-n", help="Note"),
    date: str = typer.Option(None, "--date", "-d", help="Date (default: today)"),
) -> None:
    """Add a transaction."""
    add_command(amount, expense, currency, category, note, date)


@app.command()
def edit(
    transaction_id: str = typer.Argument(..., help="Transaction ID or prefix (from 'croissant list')"),
    amount: str = typer.Option(None, "--amount", "-a", help="New amount"),
    expense: bool = typer.Option(False, "--expense", "-x", help="Record the amount as an expense"),
    currency: str = typer.Option(None, "--currency", help="New currency code"),
    category: str = typer.Option(None, "--category", "-c", help="New category name"),
    uncategorize: bool = typer.Option(False, "--uncategorize", help="Remove the category"),
    note: str = typer.Option(None, "--note", "-n", help="New note (empty string clears it)"),
    date: str = typer.Option(None, "--date", "-d", help="New date"),
) -> None:
    """Edit a transaction."""
    edit_command(transaction_id, amount, expense, currency, category, uncategorize, note, date)


@app.command()
def delete(
    transaction_id: str = typer.Argument(..., help="Transaction ID or prefix (from 'croissant list')"),
) -> None:
    """Delete a transaction."""
    delete_command(transaction_id)


@app.command(name="list")
def list_transactions(
    limit: int = typer.Option(50, help="Maximum transactions to show"),
    all: bool = typer.Option(False, "--all", "-a", help="Show all your transactions"),
) -> None:
    """List your transactions, newest first."""
    list_command(limit, all)


@app.command()
def dashboard(
    months: int = typer.Option(3, "--months", "-m", help="Number of months in the expense chart"),
) -> None:
    """Show your income and expense totals, monthly expenses, and category breakdown."""
    dashboard_command(months)


@app.command()
def settings(
    month_start_day: int = typer.Option(None, "--month-start-day", help="Day of month reporting months start on (1-28)"),
    currency: str = typer.Option(None, "--currency", help="Default currency code"),
) -> None:
    """Show or change your settings."""
    settings_command(month_start_day, currency)


@category_app.command(name="add")
def category_add(
    name: str,
    budget: str = typer.Option(None, "--budget", "-b", help="Budget limit"),
) -> None:
    """Add a category."""
    category_add_command(name, budget)


@category_app.command(name="edit")
def category_edit(
    category: str = typer.Argument(..., help="Category name or ID"),
    name: str = typer.Option(None, "--name", help="New name"),
    budget: str = typer.Option(None, "--budget", "-b", help="New budget limit"),
    no_budget: bool = typer.Option(False, "--no-budget", help="Remove the budget limit"),
) -> None:
    """Rename a category or change its budget."""
    category_edit_command(category, name, budget, no_budget)


@category_app.command(name="delete")
def category_delete(
    category: str = typer.Argument(..., help="Category name or ID"),
) -> None:
    """Delete a category. Its transactions become uncategorized."""
    category_delete_command(category)


@category_app.command(name="list")
def category_list() -> None:
    """List categories with spending and budget progress."""
    category_list_command()


if __name__ == "__main__":
    app()
