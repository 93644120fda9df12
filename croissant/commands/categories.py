"""Category management commands (add, edit, delete, list)."""

import sqlite3
import sys
import tomllib
from dataclasses import replace
from typing import Any

from rich.console import Console
from rich.table import Table

from croissant.commands.admin import require_database
from croissant.commands.display import format_money, format_progress, format_spend
from croissant.config import load_settings
from croissant.domain.models import CategoryName, new_category
from croissant.domain.report import category_summaries, category_transactions
from croissant.domain.transactions import find_category, parse_budget_limit
from croissant.store.queries import (
    delete_category,
    fetch_categories,
    fetch_transactions,
    save_category,
)
from croissant.store.schema import get_db_path

console = Console()


def category_add_command(name: str, budget: str | None = None) -> None:
    """Add a category.

    Args:
        name: Category name.
        budget: Optional budget limit.
    """
    db_path = get_db_path()
    require_database(db_path)

    if not name.strip():
        console.print("[red]Category name cannot be empty[/red]")
        sys.exit(1)

    try:
        if find_category(fetch_categories(db_path), name) is not None:
            console.print(f"[yellow]Category '{name}' already exists[/yellow]")
            sys.exit(1)

        category = new_category(CategoryName(name.strip()), parse_budget_limit(budget))
        save_category(category, db_path)

        console.print(f"[green]✓[/green] Created category: {category.display_name}")
        if category.budget_limit is not None:
            console.print(f"  Budget: {category.budget_limit:,.2f}")

    except sqlite3.Error as e:
        console.print(f"[red]Error saving category: {e}[/red]", style="bold")
        sys.exit(1)


def category_edit_command(
    token: str,
    name: str | None = None,
    budget: str | None = None,
    no_budget: bool = False,
) -> None:
    """Rename a category or change its budget.

    Args:
        token: Category name or ID.
        name: New name.
        budget: New budget limit.
        no_budget: Remove the budget limit.
    """
    db_path = get_db_path()
    require_database(db_path)

    if budget is not None and no_budget:
        console.print("[red]Use either --budget or --no-budget, not both[/red]")
        sys.exit(1)

    try:
        categories = fetch_categories(db_path)
        category = find_category(categories, token)
        if category is None:
            console.print(f"[yellow]No category matching '{token}'[/yellow]")
            sys.exit(1)

        changes: dict[str, Any] = {}
        if name is not None:
            existing = find_category(categories, name)
            if existing is not None and existing.id != category.id:
                console.print(f"[yellow]Category '{name}' already exists[/yellow]")
                sys.exit(1)
            changes["name"] = CategoryName(name.strip()) if name.strip() else None
        if no_budget:
            changes["budget_limit"] = None
        elif budget is not None:
            changes["budget_limit"] = parse_budget_limit(budget)

        if not changes:
            console.print("[dim]Nothing to change[/dim]")
            return

        updated = replace(category, **changes)
        save_category(updated, db_path)

        budget_display = f"{updated.budget_limit:,.2f}" if updated.budget_limit is not None else "none"
        console.print(f"[green]✓[/green] Updated category: {updated.display_name} (budget: {budget_display})")

    except sqlite3.Error as e:
        console.print(f"[red]Error saving category: {e}[/red]", style="bold")
        sys.exit(1)


def category_delete_command(token: str) -> None:
    """Delete a category. Its transactions become uncategorized.

    Args:
        token: Category name or ID.
    """
    db_path = get_db_path()
    require_database(db_path)

    try:
        category = find_category(fetch_categories(db_path), token)
        if category is None:
            console.print(f"[yellow]No category matching '{token}'[/yellow]")
            sys.exit(1)

        affected = len(category_transactions(category, fetch_transactions(db_path)))
        delete_category(category.id, db_path)

        console.print(f"[green]✓[/green] Deleted category: {category.display_name}")
        if affected:
            console.print(f"[dim]{affected} transaction(s) are now uncategorized[/dim]")

    except sqlite3.Error as e:
        console.print(f"[red]Error deleting category: {e}[/red]", style="bold")
        sys.exit(1)


def category_list_command() -> None:
    """List categories with their spend and budget progress."""
    db_path = get_db_path()
    require_database(db_path)

    try:
        settings = load_settings()
        categories = fetch_categories(db_path)

        if not categories:
            console.print("[yellow]No categories yet[/yellow]")
            return

        summaries = category_summaries(categories, fetch_transactions(db_path))

        table = Table(title=f"Categories ({len(categories)})")
        table.add_column("ID", style="dim")
        table.add_column("Name", style="magenta")
        table.add_column("Spent", justify="right")
        table.add_column("Budget", justify="right")
        table.add_column("Progress")

        for summary in summaries:
            category = summary.category
            budget_display = (
                format_money(category.budget_limit, settings.default_currency)
                if category.budget_limit is not None
                else "[dim]-[/dim]"
            )
            table.add_row(
                category.id[:8],
                category.display_name,
                format_spend(summary.spend, settings.default_currency),
                budget_display,
                format_progress(summary.progress),
            )

        console.print(table)

        over = [s.category.display_name for s in summaries if s.over_budget]
        if over:
            console.print(f"\n[red]At or over budget:[/red] {', '.join(over)}")

    except sqlite3.Error as e:
        console.print(f"[red]Database error: {e}[/red]", style="bold")
        sys.exit(1)
    except tomllib.TOMLDecodeError as e:
        console.print(f"[red]Invalid config file: {e}[/red]", style="bold")
        sys.exit(1)
