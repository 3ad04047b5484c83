"""
Budget Reference Resolution

Turns what a user calls a budget ("cad", "personal", a UUID, nothing at
all) into the identifier YNAB expects.

RESOLUTION ORDER (deliberate):
1. No reference -> profile default alias, then global default alias
2. Alias of the profile (case-insensitive)
3. Identifier-shaped string -> passed through
4. YNAB shortcuts "last-used" / "default" -> passed through

Alias lookup comes before the identifier check so that an alias which
happens to look like an identifier is still resolved by name.
"""

from typing import Optional

from ynab_mcp.config import Configuration, get_config, get_profile
from ynab_mcp.exceptions import BudgetNotFoundError, NoBudgetConfiguredError
from ynab_mcp.utils.identifiers import looks_like_id


RESERVED_BUDGET_IDS = frozenset({"last-used", "default"})


def resolve_budget_id(
    budget_ref: Optional[str] = None,
    profile_name: Optional[str] = None,
    config: Optional[Configuration] = None,
) -> str:
    """
    Resolve a budget alias or identifier to a budget identifier.

    Raises:
        ProfileNotFoundError: Unknown profile
        NoBudgetConfiguredError: No reference and no default to use
        BudgetNotFoundError: Reference is not an alias, id or shortcut
    """
    if config is None:
        config = get_config()
    profile = get_profile(profile_name, config)

    if not budget_ref:
        default_alias = profile.default_budget or config.default_budget
        if not default_alias:
            raise NoBudgetConfiguredError(profile.name)
        budget_ref = default_alias

    budget = profile.find_budget(budget_ref)
    if budget is not None:
        return budget.id

    if looks_like_id(budget_ref):
        return budget_ref

    if budget_ref in RESERVED_BUDGET_IDS:
        return budget_ref

    raise BudgetNotFoundError(budget_ref, profile.budget_aliases, profile.name)


def get_default_account(
    budget_alias: Optional[str] = None,
    profile_name: Optional[str] = None,
    config: Optional[Configuration] = None,
) -> Optional[str]:
    """Default account name configured for a budget alias, if any."""
    profile = get_profile(profile_name, config)
    return profile.default_accounts.get((budget_alias or "").strip().lower())


def get_profile_info(
    profile_name: Optional[str] = None,
    config: Optional[Configuration] = None,
) -> dict:
    """Summary of one profile. Never includes the token."""
    profile = get_profile(profile_name, config)
    return {
        "name": profile.name,
        "budgets": [budget.model_dump() for budget in profile.budgets],
        "default_budget": profile.default_budget,
        "default_accounts": dict(profile.default_accounts),
    }


def get_all_profiles(config: Optional[Configuration] = None) -> list[dict]:
    """Summary of every configured profile."""
    if config is None:
        config = get_config()
    return [
        {
            "name": name,
            "is_default": name == config.default_profile,
            "budget_count": len(profile.budgets),
            "budgets": profile.budget_aliases,
        }
        for name, profile in config.profiles.items()
    ]
