"""Pure functions for normalising transaction and category input.

Missing or invalid values are defaulted here, before anything reaches the
report functions:
- Unset, unparsable, or out-of-range amounts become zero
- Unset dates become today
- Blank or non-positive budget limits mean "no budget"
"""

from collections.abc import Iterable
from datetime import date
from decimal import Decimal, InvalidOperation

from croissant.domain.models import ZERO, Category, Money, Transaction

# Accepted magnitudes, as adjusted exponents: up to 999 billion, down to 1e-8.
# Keeps every sum and ratio in the report functions inside the decimal context.
MAX_AMOUNT_EXPONENT = 11
MIN_AMOUNT_EXPONENT = -8


def parse_amount_or_none(text: str | None) -> Money | None:
    """Parse an amount string to Money.

    Args:
        text: Amount text (e.g. "-12.50", "1,200").

    Returns:
        Parsed amount, or None if the text is blank, not a finite number,
        or outside the accepted range.
    """
    if text is None:
        return None

    cleaned = text.strip().replace(",", "")
    if not cleaned:
        return None

    try:
        value = Decimal(cleaned)
    except InvalidOperation:
        return None

    if not value.is_finite():
        return None
    if value and not MIN_AMOUNT_EXPONENT <= value.adjusted() <= MAX_AMOUNT_EXPONENT:
        return None
    return Money(value)


def parse_amount(text: str | None) -> Money:
    """Parse an amount string, defaulting to zero when it can't be used."""
    value = parse_amount_or_none(text)
    return ZERO if value is None else value


def parse_budget_limit(text: str | None) -> Money | None:
    """Parse a budget limit string.

    Args:
        text: Budget limit text.

    Returns:
        Budget limit, or None when blank, invalid, or not positive.
    """
    limit = parse_amount(text)
    if limit <= 0:
        return None
    return limit


def default_date(value: date | None) -> date:
    """Return value, or today's date when unset."""
    return value if value is not None else date.today()


def _match_id(token: str, ids: list[str]) -> str | None:
    token = token.strip().lower()
    if not token:
        return None
    if token in ids:
        return token
    matches = [i for i in ids if i.startswith(token)]
    if len(matches) == 1:
        return matches[0]
    return None


def find_transaction(transactions: Iterable[Transaction], token: str) -> Transaction | None:
    """Find a transaction by full id or unique id prefix.

    Args:
        transactions: Transactions to search.
        token: Identifier or prefix supplied by the user.

    Returns:
        Matching transaction, or None if unknown or ambiguous.
    """
    by_id = {txn.id: txn for txn in transactions}
    match = _match_id(token, list(by_id))
    return by_id[match] if match else None


def find_category(categories: Iterable[Category], token: str) -> Category | None:
    """Find a category by id, unique id prefix, or case-insensitive name.

    Names take precedence over id prefixes.

    Args:
        categories: Categories to search.
        token: Name or identifier supplied by the user.

    Returns:
        Matching category, or None if unknown or ambiguous.
    """
    categories = list(categories)
    wanted = token.strip().lower()

    named = [cat for cat in categories if cat.name and cat.name.strip().lower() == wanted]
    if len(named) == 1:
        return named[0]
    if len(named) > 1:
        return None

    by_id = {cat.id: cat for cat in categories}
    match = _match_id(token, list(by_id))
    return by_id[match] if match else None
