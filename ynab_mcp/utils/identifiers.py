"""
Identifier Shape Heuristic

YNAB identifiers are UUIDs. Names almost never contain a hyphen AND run
past 30 characters, so anything that does is treated as an identifier
and passed through untouched.

This is the single place that decides "name or id?". Budgets, accounts,
categories and payees all go through it.
"""

ID_LENGTH_THRESHOLD = 30


def looks_like_id(value: str) -> bool:
    """True if value is shaped like an upstream identifier rather than a name."""
    return "-" in value and len(value) > ID_LENGTH_THRESHOLD
