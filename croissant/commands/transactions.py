"""Transaction management commands (add, edit, delete, list)."""

import sqlite3
import sys
import tomllib
from dataclasses import replace
from datetime import date
from pathlib import Path
from typing import Any

import pandas as pd
import typer
from rich.console import Console
from rich.table import Table

from croissant.commands.admin import require_database
from croissant.commands.display import format_signed
from croissant.config import load_settings
from croissant.domain.models import (
    ZERO,
    Category,
    CategoryName,
    Money,
    Transaction,
    new_category,
    new_transaction,
)
from croissant.domain.transactions import find_category, find_transaction, parse_amount_or_none
from croissant.store.queries import (
    delete_transaction,
    fetch_categories,
    fetch_transactions,
    save_category,
    save_transaction,
)
from croissant.store.schema import get_db_path

console = Console()


def parse_date(text: str) -> date:
    """Parse a user supplied date.

    Args:
        text: Date text (YYYY-MM-DD, DD/MM/YYYY, or other formats).

    Returns:
        Parsed calendar date.

    Raises:
        ValueError: If the text is not a recognisable date.
    """
    return pd.to_datetime(text, dayfirst=True).date()


def resolve_amount(amount: str, expense: bool) -> Money:
    """Parse an amount argument, forcing it negative for expenses.

    Unparsable or out-of-range amounts are recorded as zero.
    """
    value = parse_amount_or_none(amount)
    if value is None:
        console.print(f"[yellow]Amount '{amount}' not understood, recording 0[/yellow]")
        value = ZERO

    if expense:
        return Money(-abs(value))
    return value


def resolve_category(name: str, db_path: Path) -> Category | None:
    """Look up a category, offering to create it if it doesn't exist.

    Returns:
        The category, or None if the user declined to create it.
    """
    category = find_category(fetch_categories(db_path), name)
    if category is not None:
        return category

    console.print(f"[yellow]Category '{name}' doesn't exist yet[/yellow]")
    if not typer.confirm("Create it?", default=True):
        return None

    category = new_category(CategoryName(name))
    save_category(category, db_path)
    console.print(f"[green]✓[/green] Created category: {name}")
    return category


def print_transaction(txn: Transaction) -> None:
    console.print(f"  ID: {txn.id[:8]}")
    console.print(f"  Date: {txn.date.isoformat()}")
    console.print(f"  Amount: {format_signed(txn.amount, txn.currency)}")
    console.print(f"  Category: {txn.category.display_name if txn.category else '-'}")
    if txn.note:
        console.print(f"  Note: {txn.note}")


def add_command(
    amount: str,
    expense: bool = False,
    currency: str | None = None,
    category: str | None = None,
    note: str | None = None,
    date_text: str | None = None,
) -> None:
    """Add a transaction.

    Args:
        amount: Amount text (negative for expenses, positive for income).
        expense: Record the amount as an expense regardless of sign.
        currency: Currency code. Defaults to the configured currency.
        category: Optional category name.
        note: Optional note.
        date_text: Transaction date. Defaults to today.
    """
    db_path = get_db_path()
    require_database(db_path)

    txn_date = None
    if date_text:
        try:
            txn_date = parse_date(date_text)
        except (ValueError, OverflowError) as e:
            console.print(f"[red]Invalid date format: {e}[/red]")
            console.print("[dim]Accepted formats: YYYY-MM-DD, DD/MM/YYYY, DD-MM-YYYY, etc.[/dim]")
            sys.exit(1)

    try:
        settings = load_settings()
        selected = resolve_category(category, db_path) if category else None

        txn = new_transaction(
            amount=resolve_amount(amount, expense),
            txn_date=txn_date,
            currency=currency or settings.default_currency,
            note=note or None,
            category=selected,
        )
        save_transaction(txn, db_path)

        console.print("[green]✓[/green] Transaction added:")
        print_transaction(txn)

    except sqlite3.Error as e:
        console.print(f"[red]Failed to save transaction: {e}[/red]", style="bold")
        sys.exit(1)
    except tomllib.TOMLDecodeError as e:
        console.print(f"[red]Invalid config file: {e}[/red]", style="bold")
        sys.exit(1)


def edit_command(
    token: str,
    amount: str | None = None,
    expense: bool = False,
    currency: str | None = None,
    category: str | None = None,
    uncategorize: bool = False,
    note: str | None = None,
    date_text: str | None = None,
) -> None:
    """Edit an existing transaction.

    Args:
        token: Transaction ID or unique ID prefix.
        amount: New amount text.
        expense: Record the new amount as an expense regardless of sign.
        currency: New currency code.
        category: New category name.
        uncategorize: Remove the category reference.
        note: New note. An empty string clears it.
        date_text: New date.
    """
    db_path = get_db_path()
    require_database(db_path)

    if category and uncategorize:
        console.print("[red]Use either --category or --uncategorize, not both[/red]")
        sys.exit(1)

    try:
        txn = find_transaction(fetch_transactions(db_path), token)
        if txn is None:
            console.print(f"[yellow]No transaction matching '{token}'[/yellow]")
            sys.exit(1)

        changes: dict[str, Any] = {}
        if amount is not None:
            changes["amount"] = resolve_amount(amount, expense)
        elif expense:
            changes["amount"] = Money(-abs(txn.amount))
        if currency:
            changes["currency"] = currency
        if note is not None:
            changes["note"] = note or None
        if date_text:
            try:
                changes["date"] = parse_date(date_text)
            except (ValueError, OverflowError) as e:
                console.print(f"[red]Invalid date format: {e}[/red]")
                sys.exit(1)
        if uncategorize:
            changes["category"] = None
        elif category:
            selected = resolve_category(category, db_path)
            if selected is None:
                console.print("[dim]Category left unchanged[/dim]")
            else:
                changes["category"] = selected

        if not changes:
            console.print("[dim]Nothing to change[/dim]")
            return

        updated = replace(txn, **changes)
        save_transaction(updated, db_path)

        console.print("[green]✓[/green] Transaction updated:")
        print_transaction(updated)

    except sqlite3.Error as e:
        console.print(f"[red]Failed to save transaction: {e}[/red]", style="bold")
        sys.exit(1)


def delete_command(token: str) -> None:
    """Delete a transaction.

    Args:
        token: Transaction ID or unique ID prefix.
    """
    db_path = get_db_path()
    require_database(db_path)

    try:
        txn = find_transaction(fetch_transactions(db_path), token)
        if txn is None:
            console.print(f"[yellow]No transaction matching '{token}'[/yellow]")
            sys.exit(1)

        delete_transaction(txn.id, db_path)
        console.print(
            f"[green]✓[/green] Deleted transaction {txn.id[:8]} "
            f"({txn.date.isoformat()}, {format_signed(txn.amount, txn.currency)})"
        )

    except sqlite3.Error as e:
        console.print(f"[red]Failed to delete transaction: {e}[/red]", style="bold")
        sys.exit(1)


def list_command(
    limit: int = 50,
    all: bool = False,
) -> None:
    """List transactions, newest first."""
    db_path = get_db_path()
    require_database(db_path)

    try:
        actual_limit = None if all else limit
        transactions = fetch_transactions(db_path, actual_limit)

        if not transactions:
            console.print("[yellow]No transactions found[/yellow]")
            return

        title = (
            f"Transactions (showing all {len(transactions)})" if all else f"Transactions (showing {len(transactions)})"
        )
        table = Table(title=title)
        table.add_column("ID", style="dim")
        table.add_column("Date", style="cyan")
        table.add_column("Category", style="magenta")
        table.add_column("Note", style="white")
        table.add_column("Amount", justify="right")

        for txn in transactions:
            category = txn.category.display_name if txn.category else "[dim]-[/dim]"
            table.add_row(
                txn.id[:8],
                txn.date.isoformat(),
                category,
                txn.note or "",
                format_signed(txn.amount, txn.currency),
            )

        console.print(table)

        net = sum((txn.amount for txn in transactions), ZERO)
        if len({txn.currency for txn in transactions}) == 1:
            console.print(f"\n[bold]Net:[/bold] {format_signed(Money(net), transactions[0].currency)}")
        else:
            console.print(f"\n[bold]Net:[/bold] {net:,.2f} [dim](mixed currencies)[/dim]")

    except sqlite3.Error as e:
        console.print(f"[red]Database error: {e}[/red]", style="bold")
        sys.exit(1)
