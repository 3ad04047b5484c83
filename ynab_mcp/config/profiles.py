"""
Profile Configuration

Loads YNAB credentials, budget aliases and default accounts from
environment-style key/value input.

Two shapes are supported:

LEGACY (single profile):
    YNAB_API_TOKEN=...
    YNAB_BUDGET_ALIASES=cad:uuid1,usd:uuid2   (or YNAB_BUDGET_ID=uuid)

MULTI-PROFILE:
    YNAB_PROFILES=personal,business
    YNAB_TOKEN_PERSONAL=...
    YNAB_BUDGETS_PERSONAL=cad:uuid1,usd:uuid2
    YNAB_DEFAULT_PROFILE=personal
    YNAB_DEFAULT_BUDGET=cad

Shared by both:
    YNAB_DEFAULT_ACCOUNT_{BUDGET}=Main Checking

DESIGN DECISION: Default accounts are keyed by budget alias and shared
by every profile. Two profiles pointing at the same aliased budget get
the same default account.

The raw key/value source is deserialized once into YnabEnvironment,
a typed schema whose mapping fields hold the suffixed key families.
Nothing downstream looks at raw environment keys.
"""

import os
from functools import lru_cache
from typing import Mapping, Optional

from dotenv import dotenv_values
from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from ynab_mcp.audit import get_logger
from ynab_mcp.exceptions import ConfigurationError, ProfileNotFoundError


ENV_PREFIX = "YNAB_"

# Exact keys -> YnabEnvironment field
_SCALAR_KEYS = {
    "YNAB_API_TOKEN": "api_token",
    "YNAB_BUDGET_ID": "budget_id",
    "YNAB_BUDGET_ALIASES": "budget_aliases",
    "YNAB_PROFILES": "profiles",
    "YNAB_DEFAULT_PROFILE": "default_profile",
    "YNAB_DEFAULT_BUDGET": "default_budget",
}

# Key prefix -> YnabEnvironment mapping field, keyed by lowercased suffix
_MAPPED_PREFIXES = (
    ("YNAB_DEFAULT_ACCOUNT_", "default_accounts"),
    ("YNAB_TOKEN_", "tokens"),
    ("YNAB_BUDGETS_", "budgets"),
)

DEFAULT_PROFILE_NAME = "default"

logger = get_logger(__name__)


# =============================================================================
# RAW ENVIRONMENT SCHEMA
# =============================================================================

class YnabEnvironment(BaseModel):
    """Typed view of every YNAB_* key relevant to profile loading."""
    model_config = ConfigDict(frozen=True)

    api_token: Optional[str] = None
    budget_id: Optional[str] = None
    budget_aliases: Optional[str] = None
    profiles: Optional[str] = None
    default_profile: Optional[str] = None
    default_budget: Optional[str] = None

    tokens: dict[str, str] = Field(
        default_factory=dict,
        description="YNAB_TOKEN_{PROFILE}, keyed by lowercased profile"
    )
    budgets: dict[str, str] = Field(
        default_factory=dict,
        description="YNAB_BUDGETS_{PROFILE}, keyed by lowercased profile"
    )
    default_accounts: dict[str, str] = Field(
        default_factory=dict,
        description="YNAB_DEFAULT_ACCOUNT_{BUDGET}, keyed by lowercased alias"
    )

    @classmethod
    def from_mapping(cls, env: Mapping[str, str]) -> "YnabEnvironment":
        """Deserialize a key/value source in a single pass. Empty values are ignored."""
        fields: dict = {"tokens": {}, "budgets": {}, "default_accounts": {}}

        for key, value in env.items():
            if not value or not key.startswith(ENV_PREFIX):
                continue
            if key in _SCALAR_KEYS:
                fields[_SCALAR_KEYS[key]] = value
                continue
            for prefix, field_name in _MAPPED_PREFIXES:
                if key.startswith(prefix) and len(key) > len(prefix):
                    fields[field_name][key[len(prefix):].lower()] = value
                    break

        return cls.model_validate(fields)


# =============================================================================
# CONFIGURATION MODELS
# =============================================================================

class BudgetAlias(BaseModel):
    """A short, human-chosen name for a budget identifier."""
    model_config = ConfigDict(frozen=True)

    alias: str = Field(..., min_length=1)
    id: str = Field(..., min_length=1)


class Profile(BaseModel):
    """
    A named credential context.

    Immutable after load. The token is excluded from repr so it never
    ends up in a log line.
    """
    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1)
    token: str = Field(..., min_length=1, repr=False)
    budgets: tuple[BudgetAlias, ...] = ()
    default_budget: Optional[str] = None
    default_accounts: dict[str, str] = Field(default_factory=dict)

    @property
    def budget_aliases(self) -> list[str]:
        return [budget.alias for budget in self.budgets]

    def find_budget(self, alias: str) -> Optional[BudgetAlias]:
        """Case-insensitive alias lookup."""
        wanted = alias.strip().lower()
        for budget in self.budgets:
            if budget.alias == wanted:
                return budget
        return None


class Configuration(BaseModel):
    """
    All profiles plus the process-wide defaults.

    INVARIANTS:
    - At least one profile exists
    - The default profile is one of them
    """
    model_config = ConfigDict(frozen=True)

    profiles: dict[str, Profile]
    default_profile: str
    default_budget: str = ""

    @model_validator(mode="after")
    def validate_defaults(self) -> "Configuration":
        if not self.profiles:
            raise ValueError("No valid profiles configured")
        if self.default_profile not in self.profiles:
            raise ValueError(
                f"Default profile '{self.default_profile}' is not configured. "
                f"Available: {', '.join(self.profiles)}"
            )
        return self


# =============================================================================
# LOADING
# =============================================================================

def parse_budget_aliases(value: Optional[str]) -> tuple[BudgetAlias, ...]:
    """
    Parse "alias1:uuid1,alias2:uuid2".

    Pairs missing either side are dropped. Aliases are lowercased.
    """
    if not value:
        return ()

    aliases = []
    for pair in value.split(","):
        alias, _, budget_id = pair.strip().partition(":")
        alias = alias.strip().lower()
        budget_id = budget_id.strip()
        if alias and budget_id:
            aliases.append(BudgetAlias(alias=alias, id=budget_id))
    return tuple(aliases)


def _split_names(value: Optional[str]) -> list[str]:
    names = []
    for raw in (value or "").split(","):
        name = raw.strip().lower()
        if name and name not in names:
            names.append(name)
    return names


def _load_legacy(source: YnabEnvironment) -> Configuration:
    if not source.api_token:
        raise ConfigurationError("No YNAB_PROFILES or YNAB_API_TOKEN configured")

    budgets = parse_budget_aliases(source.budget_aliases)
    if not budgets and source.budget_id:
        budgets = (BudgetAlias(alias=DEFAULT_PROFILE_NAME, id=source.budget_id.strip()),)

    default_budget = budgets[0].alias if budgets else None
    profile = Profile(
        name=DEFAULT_PROFILE_NAME,
        token=source.api_token,
        budgets=budgets,
        default_budget=default_budget,
        default_accounts=source.default_accounts,
    )
    return Configuration(
        profiles={DEFAULT_PROFILE_NAME: profile},
        default_profile=DEFAULT_PROFILE_NAME,
        default_budget=default_budget or "",
    )


def _load_profiles(source: YnabEnvironment, profile_names: list[str]) -> Configuration:
    profiles: dict[str, Profile] = {}

    for name in profile_names:
        token = source.tokens.get(name)
        if not token:
            logger.warning(
                "profile_skipped",
                profile=name,
                reason=f"no token found ({ENV_PREFIX}TOKEN_{name.upper()})",
            )
            continue

        budgets = parse_budget_aliases(source.budgets.get(name))
        profiles[name] = Profile(
            name=name,
            token=token,
            budgets=budgets,
            default_budget=budgets[0].alias if budgets else None,
            default_accounts=source.default_accounts,
        )

    if not profiles:
        raise ConfigurationError("No valid profiles configured")

    default_profile = (source.default_profile or "").strip().lower() or next(iter(profiles))
    if default_profile not in profiles:
        raise ConfigurationError(
            f"Default profile '{default_profile}' is not configured. "
            f"Available: {', '.join(profiles)}"
        )

    default_budget = (
        (source.default_budget or "").strip().lower()
        or profiles[default_profile].default_budget
        or ""
    )
    return Configuration(
        profiles=profiles,
        default_profile=default_profile,
        default_budget=default_budget,
    )


def load_config(env: Mapping[str, str]) -> Configuration:
    """
    Build the configuration from a key/value source.

    Pure function of its input. Multi-profile mode is used whenever
    YNAB_PROFILES names at least one profile; otherwise the legacy
    single-token shape is expected.

    Raises:
        ConfigurationError: No profile could be built
    """
    source = env if isinstance(env, YnabEnvironment) else YnabEnvironment.from_mapping(env)
    profile_names = _split_names(source.profiles)

    try:
        if not profile_names:
            return _load_legacy(source)
        return _load_profiles(source, profile_names)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid configuration: {e}") from e


def read_environment(env_file: str = ".env") -> dict[str, str]:
    """Values from the .env file, overridden by the process environment."""
    values = {
        key: value
        for key, value in dotenv_values(env_file).items()
        if value is not None
    }
    values.update(os.environ)
    return values


@lru_cache()
def get_config() -> Configuration:
    """
    Get the process-wide configuration (cached).

    Built on first access. Call get_config.cache_clear() to rebuild,
    e.g. between tests.
    """
    config = load_config(read_environment())
    logger.info(
        "configuration_loaded",
        profiles=list(config.profiles),
        default_profile=config.default_profile,
        default_budget=config.default_budget,
    )
    return config


def get_profile(
    profile_name: Optional[str] = None,
    config: Optional[Configuration] = None,
) -> Profile:
    """
    Look up a profile by name, case-insensitively.

    Falls back to the configuration's default profile when no name is given.

    Raises:
        ProfileNotFoundError: No profile with that name
    """
    if config is None:
        config = get_config()
    name = (profile_name or "").strip().lower() or config.default_profile
    profile = config.profiles.get(name)
    if profile is None:
        raise ProfileNotFoundError(name, list(config.profiles))
    return profile


def list_profiles(config: Optional[Configuration] = None) -> list[str]:
    """Configured profile names, in declaration order."""
    if config is None:
        config = get_config()
    return list(config.profiles)


def validate_configuration() -> dict:
    """
    Check that configuration loads.

    Returns a summary dict. Useful for startup checks.
    """
    try:
        config = get_config()
    except ConfigurationError as e:
        return {"valid": False, "error": str(e)}

    return {
        "valid": True,
        "profiles": list(config.profiles),
        "default_profile": config.default_profile,
        "default_budget": config.default_budget,
    }
