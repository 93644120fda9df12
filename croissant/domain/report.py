"""Pure functions for report calculations and aggregations.

This module contains the functional core for reporting operations:
- No I/O operations (no database, no console, no files)
- No side effects
- Pure data transformations
- Easy to test

Amounts are signed Money values: negative for expenses, positive for income.
"""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from croissant.dates import month_windows, window_label
from croissant.domain.models import UNCATEGORIZED_LABEL, ZERO, Category, Money, Transaction


@dataclass(frozen=True)
class Totals:
    """Immutable income and expense totals."""

    income: Money
    expense: Money
    net: Money


@dataclass(frozen=True)
class CategorySummary:
    """Immutable per-category spend and budget progress."""

    category: Category
    spend: Money
    progress: float | None = None

    @property
    def over_budget(self) -> bool:
        return self.progress is not None and self.progress >= 1.0


@dataclass(frozen=True)
class ExpenseBucket:
    """Expense total for one custom month window."""

    label: str
    start: date
    end: date
    total: Money


@dataclass(frozen=True)
class CategoryExpense:
    """Expense total for one category slice."""

    label: str
    amount: Money
    share: float


@dataclass(frozen=True)
class ExpenseBreakdown:
    """Immutable expense breakdown by category."""

    slices: list[CategoryExpense]
    total_expenses: Money


def total_income(transactions: Iterable[Transaction]) -> Money:
    """Sum amounts of income transactions.

    Args:
        transactions: Transactions to total.

    Returns:
        Sum of positive amounts, zero for no transactions.
    """
    return Money(sum((txn.amount for txn in transactions if txn.is_income), ZERO))


def total_expense(transactions: Iterable[Transaction]) -> Money:
    """Sum magnitudes of expense transactions.

    Args:
        transactions: Transactions to total.

    Returns:
        Sum of abs(amount) over negative amounts, zero for no transactions.
    """
    return Money(sum((abs(txn.amount) for txn in transactions if txn.is_expense), ZERO))


def summarize(transactions: Sequence[Transaction]) -> Totals:
    """Calculate income, expense, and net totals."""
    income = total_income(transactions)
    expense = total_expense(transactions)
    return Totals(income=income, expense=expense, net=Money(income - expense))


def category_transactions(category: Category, transactions: Iterable[Transaction]) -> list[Transaction]:
    """Select the transactions that reference a category."""
    return [txn for txn in transactions if txn.category_id == category.id]


def category_spend(category: Category, transactions: Iterable[Transaction]) -> Money:
    """Sum amounts of all transactions referencing a category.

    The sum is signed. Callers decide how to display the sign; expenses
    produce a negative spend.

    Args:
        category: Category to total.
        transactions: Transactions to search.

    Returns:
        Signed sum of matching amounts.
    """
    return Money(sum((txn.amount for txn in category_transactions(category, transactions)), ZERO))


def calculate_budget_progress(spend: Money, budget_limit: Money | None) -> float | None:
    """Calculate the fraction of a budget used, capped at 1.0.

    Args:
        spend: Signed category spend.
        budget_limit: Budget limit, or None for no budget.

    Returns:
        Ratio in [0, 1], or None when there is no positive budget.
    """
    if budget_limit is None or budget_limit <= 0:
        return None
    return float(min(abs(spend) / budget_limit, Decimal(1)))


def budget_progress(category: Category, transactions: Iterable[Transaction]) -> float | None:
    """Calculate budget progress for a category.

    Args:
        category: Category with an optional budget limit.
        transactions: Transactions to search.

    Returns:
        min(abs(spend) / limit, 1.0), or None when no budget is set.
        A value of 1.0 means at or over budget.
    """
    if not category.has_budget:
        return None
    return calculate_budget_progress(category_spend(category, transactions), category.budget_limit)


def category_summaries(
    categories: Iterable[Category], transactions: Sequence[Transaction]
) -> list[CategorySummary]:
    """Create spend and progress summaries for each category, in input order."""
    summaries = []
    for category in categories:
        spend = category_spend(category, transactions)
        summaries.append(
            CategorySummary(
                category=category,
                spend=spend,
                progress=calculate_budget_progress(spend, category.budget_limit),
            )
        )
    return summaries


def monthly_expense_series(
    transactions: Iterable[Transaction],
    month_start_day: int,
    reference_date: date,
    months_back: int = 3,
) -> list[ExpenseBucket]:
    """Bucket expenses into consecutive custom month windows.

    Args:
        transactions: Transactions to bucket. Only expenses are counted.
        month_start_day: Day of month each window starts on.
        reference_date: Date inside the newest window.
        months_back: Number of windows, including the current one.

    Returns:
        Exactly months_back buckets ordered oldest first, with zero totals
        for windows without expenses.
    """
    windows = month_windows(reference_date, month_start_day, months_back)
    totals = [ZERO] * len(windows)

    for txn in transactions:
        if not txn.is_expense:
            continue
        for idx, window in enumerate(windows):
            if window.contains(txn.date):
                totals[idx] = Money(totals[idx] + abs(txn.amount))
                break

    return [
        ExpenseBucket(label=window_label(window), start=window.start, end=window.end, total=total)
        for window, total in zip(windows, totals)
    ]


def expense_label(txn: Transaction) -> str:
    """Label an expense by its category name, or Uncategorized when it has none."""
    if txn.category is None or not txn.category.name:
        return UNCATEGORIZED_LABEL
    return txn.category.name


def category_expense_breakdown(transactions: Iterable[Transaction]) -> ExpenseBreakdown:
    """Group expenses by category name.

    Args:
        transactions: Transactions to group. Only expenses are counted.

    Returns:
        ExpenseBreakdown with slices sorted by descending total and the
        overall expense total.
    """
    grouped: dict[str, Money] = {}
    for txn in transactions:
        if not txn.is_expense:
            continue
        label = expense_label(txn)
        grouped[label] = Money(grouped.get(label, ZERO) + abs(txn.amount))

    total = Money(sum(grouped.values(), ZERO))
    ordered = sorted(grouped.items(), key=lambda x: (-x[1], x[0]))

    slices = [
        CategoryExpense(
            label=label,
            amount=amount,
            share=float(amount / total) if total > 0 else 0.0,
        )
        for label, amount in ordered
    ]
    return ExpenseBreakdown(slices=slices, total_expenses=total)


def calculate_histogram_bar_length(amount: Money, max_amount: Money, bar_width: int) -> int:
    """Calculate histogram bar length.

    Args:
        amount: Amount to display.
        max_amount: Maximum amount in dataset.
        bar_width: Maximum bar width in characters.

    Returns:
        Bar length in characters.
    """
    if max_amount <= 0:
        return 0
    return int((abs(amount) / max_amount) * bar_width)
