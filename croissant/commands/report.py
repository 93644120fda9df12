"""Dashboard command for viewing totals and expense charts."""

import sqlite3
import sys
import tomllib
from datetime import date

from rich.console import Console

from croissant.commands.admin import require_database
from croissant.commands.display import BAR_CHAR, format_money
from croissant.config import Settings, load_settings
from croissant.domain.models import Money, Transaction
from croissant.domain.report import (
    ExpenseBreakdown,
    ExpenseBucket,
    Totals,
    calculate_histogram_bar_length,
    category_expense_breakdown,
    monthly_expense_series,
    summarize,
)
from croissant.store.queries import fetch_transactions
from croissant.store.schema import get_db_path

console = Console()


def render_totals(totals: Totals, currency: str) -> None:
    """Render income and expense totals."""
    console.print(f"[bold]Income:[/bold]  [green]{format_money(totals.income, currency)}[/green]")
    console.print(f"[bold]Expense:[/bold] [red]{format_money(totals.expense, currency)}[/red]")

    net_color = "red" if totals.net < 0 else "green"
    sign = "-" if totals.net < 0 else ""
    net_display = f"[{net_color}]{sign}{format_money(totals.net, currency)}[/{net_color}]"
    console.print(f"[bold cyan]Net:[/bold cyan]     {net_display}\n")


def render_monthly_chart(buckets: list[ExpenseBucket], currency: str, bar_width: int = 30) -> None:
    """Render expense buckets as a horizontal bar chart, oldest first.

    Args:
        buckets: Expense buckets from monthly_expense_series.
        currency: Currency code for amounts.
        bar_width: Width of the longest bar in characters.
    """
    console.print("[bold red]Monthly expenses:[/bold red]\n")

    max_amount = Money(max((bucket.total for bucket in buckets), default=0))
    for bucket in buckets:
        bar = BAR_CHAR * calculate_histogram_bar_length(bucket.total, max_amount, bar_width)
        period = f"{bucket.start.isoformat()}..{bucket.end.isoformat()}"
        console.print(
            f"  {bucket.label:8} {format_money(bucket.total, currency):>16} {bar} [dim]{period}[/dim]"
        )
    console.print()


def render_breakdown(breakdown: ExpenseBreakdown, currency: str, bar_width: int = 30) -> None:
    """Render the expense breakdown by category with each slice's share."""
    console.print("[bold red]Expenses by category:[/bold red]\n")

    if not breakdown.slices:
        console.print("  [dim]No expenses yet[/dim]\n")
        return

    max_amount = breakdown.slices[0].amount
    for expense in breakdown.slices:
        bar = BAR_CHAR * calculate_histogram_bar_length(expense.amount, max_amount, bar_width)
        amount_display = format_money(expense.amount, currency)
        console.print(f"  {expense.label:20} {amount_display:>16} {expense.share * 100:5.1f}% {bar}")

    console.print(f"\n  [bold]Total:[/bold] {format_money(breakdown.total_expenses, currency)}\n")


def render_dashboard(
    transactions: list[Transaction],
    settings: Settings,
    reference_date: date,
    months: int = 3,
) -> None:
    """Render totals, the monthly expense chart, and the category breakdown."""
    currency = settings.default_currency
    day = settings.month_start_day
    start_display = "the 1st" if day == 1 else f"day {day}"

    console.print(f"[bold cyan]Dashboard[/bold cyan] [dim](months start on {start_display})[/dim]\n")
    render_totals(summarize(transactions), currency)
    render_monthly_chart(monthly_expense_series(transactions, day, reference_date, months), currency)
    render_breakdown(category_expense_breakdown(transactions), currency)


def dashboard_command(months: int = 3) -> None:
    """Show income and expense totals with monthly and category charts."""
    db_path = get_db_path()
    require_database(db_path)

    if months < 1:
        console.print("[red]--months must be at least 1[/red]")
        sys.exit(1)

    try:
        settings = load_settings()
        transactions = fetch_transactions(db_path)

        if not transactions:
            console.print("[dim]No transactions yet[/dim]")
            return

        render_dashboard(transactions, settings, date.today(), months)

    except sqlite3.Error as e:
        console.print(f"[red]Database error: {e}[/red]", style="bold")
        sys.exit(1)
    except tomllib.TOMLDecodeError as e:
        console.print(f"[red]Invalid config file: {e}[/red]", style="bold")
        sys.exit(1)
