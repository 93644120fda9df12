"""Database schema initialization and migrations."""

import logging
import os
import sqlite3
from pathlib import Path

logger = logging.getLogger(__name__)


def get_xdg_data_home() -> Path:
    """Get XDG data directory, with fallback to ~/.local/share."""
    xdg_data = os.environ.get("XDG_DATA_HOME")
    if xdg_data:
        return Path(xdg_data)
    return Path.home() / ".local" / "share"


def get_db_path() -> Path:
    """Get the default database path (XDG compliant)."""
    return get_xdg_data_home() / "croissant" / "croissant.db"


def database_exists(db_path: Path | None = None) -> bool:
    """Check if the database file exists.

    Args:
        db_path: Path to check. If None, uses default location.

    Returns:
        True if database exists, False otherwise.
    """
    if db_path is None:
        db_path = get_db_path()
    return db_path.exists()


def init_database(db_path: Path | None = None) -> None:
    """Initialize the database with the required schema.

    Args:
        db_path: Path to the database file. If None, uses default location.

    Raises:
        sqlite3.Error: If database initialization fails.
    """
    if db_path is None:
        db_path = get_db_path()

    db_path.parent.mkdir(parents=True, exist_ok=True)

    conn = sqlite3.connect(db_path)
    cursor = conn.cursor()

    try:
        cursor.execute(
            """
            CREATE TABLE IF NOT EXISTS categories (
                id TEXT PRIMARY KEY,
                name TEXT,
                budget_limit TEXT
            )
        """
        )

        cursor.execute(
            """
            CREATE TABLE IF NOT EXISTS transactions (
                id TEXT PRIMARY KEY,
                amount TEXT,
                currency TEXT NOT NULL DEFAULT 'MYR',
                note TEXT,
                date TEXT,
                category_id TEXT REFERENCES categories(id) ON DELETE SET NULL
            )
        """
        )

        # Migrations for older databases (must run before creating indexes on new columns)
        cursor.execute("PRAGMA table_info(categories)")
        category_columns = [row[1] for row in cursor.fetchall()]

        # Migration: Add 'budget_limit' column if missing
        if "budget_limit" not in category_columns:
            logger.info("Adding budget_limit column to categories")
            cursor.execute("ALTER TABLE categories ADD COLUMN budget_limit TEXT")

        cursor.execute("PRAGMA table_info(transactions)")
        columns = [row[1] for row in cursor.fetchall()]

        # Migration: Add 'currency' column if missing
        if "currency" not in columns:
            logger.info("Adding currency column to transactions")
            cursor.execute("ALTER TABLE transactions ADD COLUMN currency TEXT NOT NULL DEFAULT 'MYR'")

        # Migration: Add 'note' column if missing
        if "note" not in columns:
            logger.info("Adding note column to transactions")
            cursor.execute("ALTER TABLE transactions ADD COLUMN note TEXT")

        cursor.execute("CREATE INDEX IF NOT EXISTS idx_txn_date ON transactions(date)")
        cursor.execute("CREATE INDEX IF NOT EXISTS idx_txn_category ON transactions(category_id)")
        cursor.execute("CREATE INDEX IF NOT EXISTS idx_category_name ON categories(name)")

        conn.commit()

    except sqlite3.Error:
        conn.rollback()
        raise
    finally:
        conn.close()
