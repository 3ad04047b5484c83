"""
Shared fixtures.

No real API calls in tests: FakeBudgetApi serves canned entities and
counts every listing call so cache behaviour can be asserted exactly.
"""

from collections import Counter
from typing import Optional

import pytest

from ynab_mcp.config import Configuration, get_config, load_config
from ynab_mcp.exceptions import ApiError
from ynab_mcp.models.entities import (
    Account,
    BudgetSummary,
    Category,
    CategoryGroup,
    Payee,
)
from ynab_mcp.registry import ClientRegistry
from ynab_mcp.resolution import ResolutionContext
from ynab_mcp.services.api import BudgetApiInterface


CAD_BUDGET_ID = "11111111-1111-1111-1111-111111111111"
USD_BUDGET_ID = "22222222-2222-2222-2222-222222222222"
BUSINESS_BUDGET_ID = "33333333-3333-3333-3333-333333333333"

MAIN_CHECKING_ID = "acct-1234-5678-9abc-def0-1234567890ab"
JOINT_CHECKING_ID = "acct-2234-5678-9abc-def0-1234567890ab"
RBC_CHEQUING_ID = "acct-3234-5678-9abc-def0-1234567890ab"


class FakeBudgetApi(BudgetApiInterface):
    """In-memory BudgetApiInterface that records listing calls."""

    def __init__(
        self,
        accounts: Optional[list[Account]] = None,
        category_groups: Optional[list[CategoryGroup]] = None,
        payees: Optional[list[Payee]] = None,
    ):
        self.accounts = accounts or []
        self.category_groups = category_groups or []
        self.payees = payees or []
        self.calls: Counter = Counter()
        self.budget_ids: list[str] = []

    async def list_budgets(self) -> list[BudgetSummary]:
        self.calls["budgets"] += 1
        return [BudgetSummary(id=CAD_BUDGET_ID, name="CAD Budget")]

    async def get_budget_by_id(self, budget_id: str) -> BudgetSummary:
        self.calls["budget"] += 1
        return BudgetSummary(id=budget_id, name="CAD Budget")

    async def list_accounts(self, budget_id: str) -> list[Account]:
        self.calls["accounts"] += 1
        self.budget_ids.append(budget_id)
        return list(self.accounts)

    async def get_account_by_id(self, budget_id: str, account_id: str) -> Account:
        self.calls["account"] += 1
        for account in self.accounts:
            if account.id == account_id:
                return account
        raise ApiError(404, "404.2", "resource_not_found", "Account not found")

    async def list_categories(self, budget_id: str) -> list[CategoryGroup]:
        self.calls["categories"] += 1
        self.budget_ids.append(budget_id)
        return list(self.category_groups)

    async def list_payees(self, budget_id: str) -> list[Payee]:
        self.calls["payees"] += 1
        self.budget_ids.append(budget_id)
        return list(self.payees)


class FakeClock:
    """Manually advanced clock, in seconds."""

    def __init__(self, now: float = 1_700_000_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture(autouse=True)
def isolated_config():
    """Never let a cached process-wide configuration leak between tests."""
    get_config.cache_clear()
    yield
    get_config.cache_clear()


@pytest.fixture
def multi_profile_env() -> dict[str, str]:
    return {
        "YNAB_PROFILES": "personal,business",
        "YNAB_TOKEN_PERSONAL": "T",
        "YNAB_BUDGETS_PERSONAL": f"cad:{CAD_BUDGET_ID},usd:{USD_BUDGET_ID}",
        "YNAB_TOKEN_BUSINESS": "B",
        "YNAB_BUDGETS_BUSINESS": f"ops:{BUSINESS_BUDGET_ID}",
        "YNAB_DEFAULT_PROFILE": "personal",
        "YNAB_DEFAULT_ACCOUNT_CAD": "Main Checking",
        "PATH": "/usr/bin",
    }


@pytest.fixture
def config(multi_profile_env) -> Configuration:
    return load_config(multi_profile_env)


@pytest.fixture
def fake_api() -> FakeBudgetApi:
    return FakeBudgetApi(
        accounts=[
            Account(id=MAIN_CHECKING_ID, name="Main Checking"),
            Account(id=RBC_CHEQUING_ID, name="RBC Chequing"),
            Account(id="acct-closed", name="Old Savings", deleted=True),
        ],
        category_groups=[
            CategoryGroup(
                id="grp-bills",
                name="Bills",
                categories=[
                    Category(id="cat-rent", name="Rent"),
                    Category(id="cat-hydro", name="Hydro"),
                    Category(id="cat-gone", name="Cable", deleted=True),
                    Category(id="cat-hidden", name="Storage", hidden=True),
                ],
            ),
            CategoryGroup(
                id="grp-everyday",
                name="Everyday",
                categories=[
                    Category(id="cat-groceries", name="Groceries"),
                    Category(id="cat-rent-2", name="Rent"),
                ],
            ),
        ],
        payees=[
            Payee(id="payee-costco", name="Costco"),
            Payee(id="payee-amazon", name="Amazon Prime"),
            Payee(id="payee-old", name="Blockbuster", deleted=True),
        ],
    )


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def registry(config, fake_api) -> ClientRegistry:
    return ClientRegistry(config=config, client_factory=lambda profile: fake_api)


@pytest.fixture
def context(config, registry, clock) -> ResolutionContext:
    return ResolutionContext(
        config=config,
        registry=registry,
        ttl_seconds=300,
        clock=clock,
    )
