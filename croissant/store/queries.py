"""Database query functions."""

import logging
import sqlite3
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import date
from pathlib import Path

from croissant.domain.models import (
    Category,
    CategoryId,
    CategoryName,
    Money,
    Transaction,
    TransactionId,
)
from croissant.domain.transactions import default_date, parse_amount
from croissant.store.schema import get_db_path

logger = logging.getLogger(__name__)

_TRANSACTION_SELECT = """
    SELECT t.id, t.amount, t.currency, t.note, t.date, t.category_id,
           c.name AS category_name, c.budget_limit AS category_budget_limit
    FROM transactions t
    LEFT JOIN categories c ON c.id = t.category_id
"""


@contextmanager
def _connect(db_path: Path | None = None) -> Iterator[sqlite3.Connection]:
    """Open a database connection with row factory and foreign keys enabled.

    Args:
        db_path: Path to the database file. If None, uses default location.

    Yields:
        Database connection, closed on exit.
    """
    if db_path is None:
        db_path = get_db_path()
    conn = sqlite3.connect(db_path)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON")
    try:
        yield conn
    finally:
        conn.close()


def _money_to_db(amount: Money | None) -> str | None:
    return None if amount is None else str(amount)


def _budget_from_db(value: str | None) -> Money | None:
    if value is None:
        return None
    limit = parse_amount(value)
    return limit if limit > 0 else None


def _date_from_db(value: str | None) -> date:
    return default_date(date.fromisoformat(value) if value else None)


def _row_to_category(row: sqlite3.Row) -> Category:
    return Category(
        id=CategoryId(row["id"]),
        name=CategoryName(row["name"]) if row["name"] is not None else None,
        budget_limit=_budget_from_db(row["budget_limit"]),
    )


def _row_to_transaction(row: sqlite3.Row) -> Transaction:
    category = None
    if row["category_id"] is not None:
        category = Category(
            id=CategoryId(row["category_id"]),
            name=CategoryName(row["category_name"]) if row["category_name"] is not None else None,
            budget_limit=_budget_from_db(row["category_budget_limit"]),
        )

    return Transaction(
        id=TransactionId(row["id"]),
        amount=parse_amount(row["amount"]),
        date=_date_from_db(row["date"]),
        currency=row["currency"],
        note=row["note"],
        category=category,
    )


def fetch_transactions(db_path: Path | None = None, limit: int | None = None) -> list[Transaction]:
    """Get all transactions with their categories resolved.

    Args:
        db_path: Path to the database file. If None, uses default location.
        limit: Maximum number of transactions to return. If None, returns all.

    Returns:
        List of transactions ordered by date descending.

    Raises:
        sqlite3.Error: If database operation fails.
    """
    with _connect(db_path) as conn:
        query = _TRANSACTION_SELECT + " ORDER BY t.date DESC, t.rowid DESC"
        params: list[int] = []

        if limit is not None:
            query += " LIMIT ?"
            params.append(limit)

        rows = conn.execute(query, params).fetchall()
        return [_row_to_transaction(row) for row in rows]


def get_transaction(txn_id: TransactionId, db_path: Path | None = None) -> Transaction | None:
    """Get a single transaction by id.

    Args:
        txn_id: Transaction ID.
        db_path: Path to the database file. If None, uses default location.

    Returns:
        The transaction, or None if not found.

    Raises:
        sqlite3.Error: If database operation fails.
    """
    with _connect(db_path) as conn:
        row = conn.execute(_TRANSACTION_SELECT + " WHERE t.id = ?", (txn_id,)).fetchone()
        return _row_to_transaction(row) if row else None


def save_transaction(txn: Transaction, db_path: Path | None = None) -> None:
    """Insert a transaction, or update it if the id already exists.

    Args:
        txn: Transaction to save.
        db_path: Path to the database file. If None, uses default location.

    Raises:
        sqlite3.Error: If database operation fails, including a reference
            to a category that does not exist.
    """
    with _connect(db_path) as conn:
        try:
            conn.execute(
                """
                INSERT INTO transactions (id, amount, currency, note, date, category_id)
                VALUES (?, ?, ?, ?, ?, ?)
                ON CONFLICT(id) DO UPDATE SET
                    amount = excluded.amount,
                    currency = excluded.currency,
                    note = excluded.note,
                    date = excluded.date,
                    category_id = excluded.category_id
                """,
                (txn.id, _money_to_db(txn.amount), txn.currency, txn.note, txn.date.isoformat(), txn.category_id),
            )
            conn.commit()
            logger.debug("Saved transaction %s", txn.id)
        except sqlite3.Error:
            conn.rollback()
            raise


def delete_transaction(txn_id: TransactionId, db_path: Path | None = None) -> bool:
    """Delete a transaction.

    Args:
        txn_id: Transaction ID.
        db_path: Path to the database file. If None, uses default location.

    Returns:
        True if a transaction was deleted, False if it did not exist.

    Raises:
        sqlite3.Error: If database operation fails.
    """
    with _connect(db_path) as conn:
        try:
            cursor = conn.execute("DELETE FROM transactions WHERE id = ?", (txn_id,))
            conn.commit()
            logger.debug("Deleted transaction %s (%d rows)", txn_id, cursor.rowcount)
            return cursor.rowcount > 0
        except sqlite3.Error:
            conn.rollback()
            raise


def fetch_categories(db_path: Path | None = None) -> list[Category]:
    """Get all categories.

    Args:
        db_path: Path to the database file. If None, uses default location.

    Returns:
        List of categories sorted by name, unnamed categories last.

    Raises:
        sqlite3.Error: If database operation fails.
    """
    with _connect(db_path) as conn:
        rows = conn.execute(
            "SELECT id, name, budget_limit FROM categories "
            "ORDER BY name IS NULL OR name = '', name COLLATE NOCASE, id"
        ).fetchall()
        return [_row_to_category(row) for row in rows]


def get_category(category_id: CategoryId, db_path: Path | None = None) -> Category | None:
    """Get a single category by id.

    Args:
        category_id: Category ID.
        db_path: Path to the database file. If None, uses default location.

    Returns:
        The category, or None if not found.

    Raises:
        sqlite3.Error: If database operation fails.
    """
    with _connect(db_path) as conn:
        row = conn.execute(
            "SELECT id, name, budget_limit FROM categories WHERE id = ?", (category_id,)
        ).fetchone()
        return _row_to_category(row) if row else None


def save_category(category: Category, db_path: Path | None = None) -> None:
    """Insert a category, or update its name and budget if the id exists.

    Updates happen in place so transactions keep their reference.

    Args:
        category: Category to save.
        db_path: Path to the database file. If None, uses default location.

    Raises:
        sqlite3.Error: If database operation fails.
    """
    with _connect(db_path) as conn:
        try:
            conn.execute(
                """
                INSERT INTO categories (id, name, budget_limit) VALUES (?, ?, ?)
                ON CONFLICT(id) DO UPDATE SET
                    name = excluded.name,
                    budget_limit = excluded.budget_limit
                """,
                (category.id, category.name, _money_to_db(category.budget_limit)),
            )
            conn.commit()
            logger.debug("Saved category %s", category.id)
        except sqlite3.Error:
            conn.rollback()
            raise


def delete_category(category_id: CategoryId, db_path: Path | None = None) -> bool:
    """Delete a category, leaving its transactions uncategorized.

    Args:
        category_id: Category ID.
        db_path: Path to the database file. If None, uses default location.

    Returns:
        True if a category was deleted, False if it did not exist.

    Raises:
        sqlite3.Error: If database operation fails.
    """
    with _connect(db_path) as conn:
        try:
            conn.execute("UPDATE transactions SET category_id = NULL WHERE category_id = ?", (category_id,))
            cursor = conn.execute("DELETE FROM categories WHERE id = ?", (category_id,))
            conn.commit()
            logger.debug("Deleted category %s (%d rows)", category_id, cursor.rowcount)
            return cursor.rowcount > 0
        except sqlite3.Error:
            conn.rollback()
            raise
