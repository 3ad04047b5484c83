"""Services package."""

from ynab_mcp.services.api import BudgetApiInterface, YnabApiClient

__all__ = [
    "BudgetApiInterface",
    "YnabApiClient",
]
