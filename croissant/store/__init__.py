"""Database store layer - provides persistence for the application.

This module re-exports all public database functions for easy importing.
"""

from croissant.store.queries import (
    delete_category,
    delete_transaction,
    fetch_categories,
    fetch_transactions,
    get_category,
    get_transaction,
    save_category,
    save_transaction,
)
from croissant.store.schema import database_exists, get_db_path, init_database

__all__ = [
    # Schema
    "database_exists",
    "get_db_path",
    "init_database",
    # Queries
    "delete_category",
    "delete_transaction",
    "fetch_categories",
    "fetch_transactions",
    "get_category",
    "get_transaction",
    "save_category",
    "save_transaction",
]
