"""Utility helpers: identifier shape, milliunits, error messages."""

from ynab_mcp.utils.currency import (
    MILLIUNITS_PER_UNIT,
    amount_to_milliunits,
    milliunits_to_amount,
)
from ynab_mcp.utils.errors import get_error_message
from ynab_mcp.utils.identifiers import looks_like_id

__all__ = [
    "MILLIUNITS_PER_UNIT",
    "amount_to_milliunits",
    "get_error_message",
    "looks_like_id",
    "milliunits_to_amount",
]
