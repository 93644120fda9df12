"""Domain type definitions for croissant.

These NewTypes provide semantic clarity and help with type checking:
- Money: Signed decimal amount in major units (negative = expense)
- TransactionId / CategoryId: Unique identifier tokens
- CategoryName: Name of a budget category
"""

import uuid
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import NewType

# Money amounts are Decimals to avoid floating point errors
Money = NewType("Money", Decimal)

TransactionId = NewType("TransactionId", str)

CategoryId = NewType("CategoryId", str)

# Category name for budget categories
CategoryName = NewType("CategoryName", str)

DEFAULT_CURRENCY = "MYR"
UNNAMED_LABEL = "Unnamed"
UNCATEGORIZED_LABEL = "Uncategorized"

ZERO = Money(Decimal(0))


def new_id() -> str:
    """Generate a fresh identifier token."""
    return uuid.uuid4().hex


@dataclass(frozen=True)
class Category:
    """A named grouping of transactions with an optional budget ceiling."""

    id: CategoryId
    name: CategoryName | None = None
    budget_limit: Money | None = None

    @property
    def display_name(self) -> str:
        return self.name or UNNAMED_LABEL

    @property
    def has_budget(self) -> bool:
        return self.budget_limit is not None and self.budget_limit > 0


@dataclass(frozen=True)
class Transaction:
    """A single recorded monetary movement."""

    id: TransactionId
    amount: Money
    date: date
    currency: str = DEFAULT_CURRENCY
    note: str | None = None
    category: Category | None = None

    @property
    def is_expense(self) -> bool:
        return self.amount < 0

    @property
    def is_income(self) -> bool:
        return self.amount > 0

    @property
    def category_id(self) -> CategoryId | None:
        return self.category.id if self.category else None


def new_category(name: CategoryName | None, budget_limit: Money | None = None) -> Category:
    """Create a category with a freshly assigned identifier."""
    return Category(id=CategoryId(new_id()), name=name, budget_limit=budget_limit)


def new_transaction(
    amount: Money,
    txn_date: date | None = None,
    currency: str = DEFAULT_CURRENCY,
    note: str | None = None,
    category: Category | None = None,
) -> Transaction:
    """Create a transaction with a freshly assigned identifier.

    Args:
        amount: Signed amount (negative for expenses, positive for income).
        txn_date: Transaction date. Defaults to today when unset.
        currency: Free-text currency code.
        note: Optional note.
        category: Optional category reference.

    Returns:
        New Transaction.
    """
    return Transaction(
        id=TransactionId(new_id()),
        amount=amount,
        date=txn_date or date.today(),
        currency=currency,
        note=note,
        category=category,
    )
