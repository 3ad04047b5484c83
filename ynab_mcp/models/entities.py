"""
YNAB Entity Models

Typed views of the entities the YNAB API returns. Only the fields the
resolution layer and its callers read are declared; everything else in
the payload is ignored.

Amounts are in milliunits (1/1000 of the currency unit), exactly as the
API sends them. Conversion lives in ynab_mcp.utils.currency.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class YnabEntity(BaseModel):
    """Fields every listed YNAB entity carries."""
    model_config = ConfigDict(extra="ignore")

    id: str = Field(..., description="YNAB identifier (UUID)")
    name: str = Field(..., description="Display name")
    deleted: bool = Field(
        default=False,
        description="Deleted entities still appear in list responses"
    )


class Account(YnabEntity):
    """A budget account (checking, credit card, tracking...)."""

    type: Optional[str] = None
    on_budget: bool = True
    closed: bool = False
    balance: int = 0
    cleared_balance: int = 0
    uncleared_balance: int = 0
    transfer_payee_id: Optional[str] = None


class Category(YnabEntity):
    """A single budget category."""

    category_group_id: Optional[str] = None
    hidden: bool = False
    budgeted: int = 0
    activity: int = 0
    balance: int = 0
    goal_type: Optional[str] = None
    goal_target: Optional[int] = None


class CategoryGroup(YnabEntity):
    """A category group with its nested categories."""

    hidden: bool = False
    categories: list[Category] = Field(default_factory=list)


class Payee(YnabEntity):
    """A payee. Transfer payees carry the account they transfer to."""

    transfer_account_id: Optional[str] = None


class CurrencyFormat(BaseModel):
    """Budget currency display settings."""
    model_config = ConfigDict(extra="ignore")

    iso_code: str = "USD"
    decimal_digits: int = 2
    currency_symbol: str = "$"


class BudgetSummary(BaseModel):
    """A budget as returned by the budgets endpoints."""
    model_config = ConfigDict(extra="ignore")

    id: str
    name: str
    last_modified_on: Optional[str] = None
    first_month: Optional[str] = None
    last_month: Optional[str] = None
    currency_format: Optional[CurrencyFormat] = None
