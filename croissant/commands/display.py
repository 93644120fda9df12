"""Shared rich formatting helpers for command output."""

from croissant.domain.models import Money

BAR_CHAR = "█"
EMPTY_BAR_CHAR = "░"


def format_money(amount: Money, currency: str) -> str:
    """Format an unsigned amount with its currency code."""
    return f"{currency} {abs(amount):,.2f}"


def format_signed(amount: Money, currency: str) -> str:
    """Format a signed amount, green for income and red for expenses.

    Args:
        amount: Signed amount.
        currency: Currency code.

    Returns:
        Rich markup string.
    """
    if amount < 0:
        return f"[red]-{format_money(amount, currency)}[/red]"
    if amount > 0:
        return f"[green]+{format_money(amount, currency)}[/green]"
    return f"[dim]{format_money(amount, currency)}[/dim]"


def format_spend(spend: Money, currency: str) -> str:
    """Format a category spend as its magnitude, red when negative."""
    if spend < 0:
        return f"[red]{format_money(spend, currency)}[/red]"
    return format_money(spend, currency)


def format_progress(progress: float | None, width: int = 20) -> str:
    """Render a budget progress bar.

    Args:
        progress: Ratio in [0, 1], or None when there is no budget.
        width: Bar width in characters.

    Returns:
        Rich markup string. Empty when there is no budget; red when at or
        over budget, yellow above 90%, green otherwise.
    """
    if progress is None:
        return ""

    filled = int(progress * width)
    bar = BAR_CHAR * filled + EMPTY_BAR_CHAR * (width - filled)
    label = f"{progress * 100:.0f}%"

    if progress >= 1.0:
        return f"[red]{bar} {label}[/red]"
    elif progress > 0.9:
        return f"[yellow]{bar} {label}[/yellow]"
    else:
        return f"[green]{bar} {label}[/green]"
