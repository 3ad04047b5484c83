"""Configuration package."""

from ynab_mcp.config.settings import ServerSettings, get_settings
from ynab_mcp.config.profiles import (
    BudgetAlias,
    Configuration,
    Profile,
    YnabEnvironment,
    get_config,
    get_profile,
    list_profiles,
    load_config,
    parse_budget_aliases,
    read_environment,
    validate_configuration,
)

__all__ = [
    "BudgetAlias",
    "Configuration",
    "Profile",
    "ServerSettings",
    "YnabEnvironment",
    "get_config",
    "get_profile",
    "get_settings",
    "list_profiles",
    "load_config",
    "parse_budget_aliases",
    "read_environment",
    "validate_configuration",
]
