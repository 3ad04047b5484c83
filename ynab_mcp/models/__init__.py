"""
Data Models Package

Pydantic models for YNAB entities and for the name resolution cache.
"""

from ynab_mcp.models.cache import (
    CacheEntry,
    EntityKind,
    ResolutionBucket,
    normalize_name,
)
from ynab_mcp.models.entities import (
    Account,
    BudgetSummary,
    Category,
    CategoryGroup,
    CurrencyFormat,
    Payee,
    YnabEntity,
)

__all__ = [
    # Cache models
    "CacheEntry",
    "EntityKind",
    "ResolutionBucket",
    "normalize_name",
    # Entity models
    "Account",
    "BudgetSummary",
    "Category",
    "CategoryGroup",
    "CurrencyFormat",
    "Payee",
    "YnabEntity",
]
