"""
Formatting utilities for display.
"""
from datetime import datetime, timezone
from typing import Iterable, Optional
from database.models import HistoryRecord, Outcome


def format_amount(amount: int, denom: str = "", decimals: int = 6) -> str:
    """Format a base-unit amount for display."""
    value = f"{amount / 10 ** decimals:,.{decimals}f}" if decimals else f"{amount:,}"
    return f"{value} {denom}".strip()


def format_outcome(outcome: Optional[Outcome]) -> str:
    """Format a recorded outcome."""
    if outcome is None:
        return "N/A"
    return outcome.name.capitalize()


def format_timestamp(seconds: Optional[int]) -> str:
    """Format unix seconds for display."""
    if seconds is None:
        return "N/A"
    return datetime.fromtimestamp(seconds, tz=timezone.utc).strftime("%Y-%m-%d %H:%M:%S UTC")


def truncate_address(address: str, start: int = 4, end: int = 4) -> str:
    """Truncate an address for display."""
    if len(address) <= start + end:
        return address
    return f"{address[:start]}...{address[-end:]}"


def format_win_rate(records: Iterable[HistoryRecord]) -> str:
    """Format the win percentage of a set of settled bets."""
    records = list(records)
    if not records:
        return "0.0%"
    wins = sum(1 for r in records if r.win == Outcome.WIN)
    return f"{wins / len(records) * 100:.1f}%"
