"""
Abstract Budget API Interface

DESIGN DECISION: The resolution layer talks to YNAB only through this
interface. This allows us to:
1. Use an in-memory fake in tests (and count calls against it)
2. Swap the HTTP client without touching resolution logic
3. Keep transport concerns (retries, timeouts) out of the cache

Every operation is scoped by a budget identifier. Callers are expected
to have resolved aliases to identifiers already.
"""

from abc import ABC, abstractmethod

from ynab_mcp.models.entities import (
    Account,
    BudgetSummary,
    CategoryGroup,
    Payee,
)


class BudgetApiInterface(ABC):
    """
    Read operations the resolution layer and tool handlers rely on.

    List operations return deleted entities too; filtering is the
    caller's job.
    """

    @abstractmethod
    async def list_budgets(self) -> list[BudgetSummary]:
        """List every budget the token can see."""
        pass

    @abstractmethod
    async def get_budget_by_id(self, budget_id: str) -> BudgetSummary:
        """
        Fetch a single budget.

        Raises:
            ApiError: If the budget does not exist
        """
        pass

    @abstractmethod
    async def list_accounts(self, budget_id: str) -> list[Account]:
        """List accounts in a budget."""
        pass

    @abstractmethod
    async def get_account_by_id(self, budget_id: str, account_id: str) -> Account:
        """
        Fetch a single account.

        Raises:
            ApiError: If the account does not exist
        """
        pass

    @abstractmethod
    async def list_categories(self, budget_id: str) -> list[CategoryGroup]:
        """List category groups, each with its categories."""
        pass

    @abstractmethod
    async def list_payees(self, budget_id: str) -> list[Payee]:
        """List payees in a budget."""
        pass
