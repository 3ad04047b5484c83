"""
Budget API Package

Provides the abstract interface the resolution layer depends on and the
httpx-backed YNAB implementation.
"""

from ynab_mcp.services.api.interface import BudgetApiInterface
from ynab_mcp.services.api.ynab_client import YnabApiClient

__all__ = [
    "BudgetApiInterface",
    "YnabApiClient",
]
