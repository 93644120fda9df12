"""Domain models and types for croissant.

This package contains the functional core:
- Pure functions with no side effects
- No I/O operations
- Easy to test
- Business logic separated from infrastructure
"""

from croissant.domain.models import (
    Category,
    CategoryId,
    CategoryName,
    Money,
    Transaction,
    TransactionId,
)

__all__ = ["Category", "CategoryId", "CategoryName", "Money", "Transaction", "TransactionId"]
