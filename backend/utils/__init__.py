"""Utility modules for the settlement engine."""
from .formatting import (
    format_amount,
    format_outcome,
    format_timestamp,
    truncate_address,
    format_win_rate,
)

__all__ = [
    "format_amount",
    "format_outcome",
    "format_timestamp",
    "truncate_address",
    "format_win_rate",
]
