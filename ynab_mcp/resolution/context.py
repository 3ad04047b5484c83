"""
Name Resolution Cache

Translates the names people use ("RBC Chequing", "Groceries",
"Bills: Rent", "Costco") into YNAB identifiers, per (profile, budget).

One algorithm, three entity kinds:

1. Identifier-shaped input is returned untouched (no API call)
2. Budget reference -> budget id; bucket key = "{profile}:{budget_id}"
3. Missing or stale bucket -> list from YNAB, rebuild, replace wholesale
4. Exact match on the normalized name
5. Fuzzy match (accounts, categories): first entry whose key contains
   the query or is contained in it, in insertion order. No ranking.
6. Miss: accounts and categories raise EntityNotFoundError. Payees
   return the input unchanged; YNAB creates a payee from an unknown
   name when the transaction is written. Callers tell the two apart
   with looks_like_id().

CONCURRENCY: Runs on a single event loop with no locks. Two coroutines
that both find a bucket stale will both refresh it; both refreshes
produce the same bucket and each replaces it whole, so the cost is a
duplicate API call, never a half-built bucket. A multi-threaded caller
would need a lock around check-refresh-store per bucket.
"""

import time
from typing import Awaitable, Callable, Iterable, Optional

from pydantic import BaseModel, ConfigDict

from ynab_mcp.audit import get_logger
from ynab_mcp.budgets import resolve_budget_id
from ynab_mcp.config import Configuration, get_config, get_settings
from ynab_mcp.exceptions import EntityNotFoundError, UpstreamError
from ynab_mcp.models.cache import (
    CacheEntry,
    EntityKind,
    ResolutionBucket,
    normalize_name,
)
from ynab_mcp.registry import ClientRegistry
from ynab_mcp.services.api import BudgetApiInterface
from ynab_mcp.utils.errors import get_error_message
from ynab_mcp.utils.identifiers import looks_like_id


# (display name, id) pairs, in the order they should be cached
NamedIds = list[tuple[str, str]]
Loader = Callable[[BudgetApiInterface, str], Awaitable[NamedIds]]

logger = get_logger(__name__)


class KindPolicy(BaseModel):
    """How one entity kind behaves on a near miss and a total miss."""
    model_config = ConfigDict(frozen=True)

    fuzzy: bool
    pass_through_on_miss: bool


KIND_POLICIES = {
    EntityKind.ACCOUNT: KindPolicy(fuzzy=True, pass_through_on_miss=False),
    EntityKind.CATEGORY: KindPolicy(fuzzy=True, pass_through_on_miss=False),
    EntityKind.PAYEE: KindPolicy(fuzzy=False, pass_through_on_miss=True),
}


async def load_accounts(client: BudgetApiInterface, budget_id: str) -> NamedIds:
    accounts = await client.list_accounts(budget_id)
    return [(a.name, a.id) for a in accounts if not a.deleted]


async def load_categories(client: BudgetApiInterface, budget_id: str) -> NamedIds:
    """
    Each visible category is cached twice: "Group: Name" and bare "Name".

    The group-qualified key is always unique, so a category whose bare
    name collides with another group's can still be reached by it.
    """
    groups = await client.list_categories(budget_id)
    named: NamedIds = []
    for group in groups:
        for category in group.categories:
            if category.deleted or category.hidden:
                continue
            named.append((f"{group.name}: {category.name}", category.id))
            named.append((category.name, category.id))
    return named


async def load_payees(client: BudgetApiInterface, budget_id: str) -> NamedIds:
    payees = await client.list_payees(budget_id)
    return [(p.name, p.id) for p in payees if not p.deleted]


DEFAULT_LOADERS: dict[EntityKind, Loader] = {
    EntityKind.ACCOUNT: load_accounts,
    EntityKind.CATEGORY: load_categories,
    EntityKind.PAYEE: load_payees,
}


def build_bucket(kind: EntityKind, named: Iterable[tuple[str, str]], now: float) -> ResolutionBucket:
    """
    Build a bucket in one pass.

    First-seen wins on a normalized-key collision.
    """
    entries: dict[str, CacheEntry] = {}
    for name, entity_id in named:
        key = normalize_name(name)
        existing = entries.get(key)
        if existing is not None:
            if existing.id != entity_id:
                logger.debug(
                    "name_collision",
                    kind=kind.value,
                    name=name,
                    kept_id=existing.id,
                    ignored_id=entity_id,
                )
            continue
        entries[key] = CacheEntry(id=entity_id, name=name, fetched_at=now)
    return ResolutionBucket(kind=kind, fetched_at=now, entries=entries)


def bucket_key(profile_name: Optional[str], budget_id: str) -> str:
    return f"{profile_name or 'default'}:{budget_id}"


class ResolutionContext:
    """
    Owns everything resolution shares across calls: the configuration,
    the client registry and the three name caches.

    Construct one per process (or per test) and pass it to every tool
    handler. Two contexts never share cached state.
    """

    def __init__(
        self,
        config: Optional[Configuration] = None,
        registry: Optional[ClientRegistry] = None,
        ttl_seconds: Optional[float] = None,
        clock: Callable[[], float] = time.time,
        loaders: Optional[dict[EntityKind, Loader]] = None,
    ):
        """
        Initialize the context.

        Args:
            config: Profile configuration. If None, the process-wide
                    configuration is loaded on first use.
            registry: Client registry. If None, one is built over config.
            ttl_seconds: Bucket freshness window. Defaults to settings.
            clock: Returns the current time in seconds.
            loaders: Per-kind listing functions, for overriding in tests.
        """
        self._config = config
        self._registry = registry or ClientRegistry(config=config)
        self._ttl = (
            ttl_seconds if ttl_seconds is not None
            else get_settings().cache_ttl_seconds
        )
        self._clock = clock
        self._loaders = {**DEFAULT_LOADERS, **(loaders or {})}
        self._caches: dict[EntityKind, dict[str, ResolutionBucket]] = {
            kind: {} for kind in EntityKind
        }

    @property
    def config(self) -> Configuration:
        if self._config is None:
            self._config = get_config()
        return self._config

    @property
    def registry(self) -> ClientRegistry:
        return self._registry

    @property
    def ttl_seconds(self) -> float:
        return self._ttl

    # -------------------------------------------------------------------------
    # Budgets
    # -------------------------------------------------------------------------

    def resolve_budget_id(
        self,
        budget_ref: Optional[str] = None,
        profile_name: Optional[str] = None,
    ) -> str:
        return resolve_budget_id(budget_ref, profile_name, self.config)

    # -------------------------------------------------------------------------
    # Entities
    # -------------------------------------------------------------------------

    async def resolve_id(
        self,
        kind: EntityKind,
        name_or_id: str,
        budget_ref: Optional[str] = None,
        profile_name: Optional[str] = None,
    ) -> str:
        """
        Resolve a name (or pass through an id) for one entity kind.

        Raises:
            ProfileNotFoundError, NoBudgetConfiguredError, BudgetNotFoundError:
                From profile/budget resolution
            EntityNotFoundError: Account or category matched nothing
            UpstreamError: Listing call failed (propagated as-is)
        """
        kind = EntityKind(kind)
        if looks_like_id(name_or_id):
            return name_or_id

        budget_id = self.resolve_budget_id(budget_ref, profile_name)
        bucket = await self._fresh_bucket(kind, budget_id, profile_name)
        policy = KIND_POLICIES[kind]
        normalized = normalize_name(name_or_id)

        exact = bucket.get(normalized)
        if exact is not None:
            return exact.id

        if policy.fuzzy and normalized:
            for key, entry in bucket.items():
                if key in normalized or normalized in key:
                    logger.debug(
                        "fuzzy_match",
                        kind=kind.value,
                        requested=name_or_id,
                        matched=entry.name,
                    )
                    return entry.id

        if policy.pass_through_on_miss:
            logger.info(
                "unresolved_name_passed_through",
                kind=kind.value,
                name=name_or_id,
            )
            return name_or_id

        raise EntityNotFoundError(kind, name_or_id, bucket.display_names())

    async def resolve_account_id(
        self,
        account_ref: str,
        budget_ref: Optional[str] = None,
        profile_name: Optional[str] = None,
    ) -> str:
        return await self.resolve_id(EntityKind.ACCOUNT, account_ref, budget_ref, profile_name)

    async def resolve_category_id(
        self,
        category_ref: str,
        budget_ref: Optional[str] = None,
        profile_name: Optional[str] = None,
    ) -> str:
        """Accepts "Group: Category" or just "Category"."""
        return await self.resolve_id(EntityKind.CATEGORY, category_ref, budget_ref, profile_name)

    async def resolve_payee_id(
        self,
        payee_ref: str,
        budget_ref: Optional[str] = None,
        profile_name: Optional[str] = None,
    ) -> str:
        """Returns the name unchanged when no payee has it (YNAB creates one on write)."""
        return await self.resolve_id(EntityKind.PAYEE, payee_ref, budget_ref, profile_name)

    async def get_account_name(
        self,
        account_id: str,
        budget_ref: Optional[str] = None,
        profile_name: Optional[str] = None,
    ) -> str:
        """Display name for an account id, or the id itself if YNAB can't say."""
        client = self._registry.get_client(profile_name)
        budget_id = self.resolve_budget_id(budget_ref, profile_name)
        try:
            account = await client.get_account_by_id(budget_id, account_id)
        except UpstreamError as e:
            logger.warning(
                "account_name_lookup_failed",
                account_id=account_id,
                error=get_error_message(e),
            )
            return account_id
        return account.name

    # -------------------------------------------------------------------------
    # Cache management
    # -------------------------------------------------------------------------

    def get_bucket(self, kind: EntityKind, key: str) -> Optional[ResolutionBucket]:
        """Current bucket for a kind and bucket key, fresh or not."""
        return self._caches[EntityKind(kind)].get(key)

    def clear_caches(self) -> None:
        """Drop every cached bucket. Clients and configuration are kept."""
        for cache in self._caches.values():
            cache.clear()

    async def _fresh_bucket(
        self,
        kind: EntityKind,
        budget_id: str,
        profile_name: Optional[str],
    ) -> ResolutionBucket:
        key = bucket_key(profile_name, budget_id)
        now = self._clock()

        bucket = self._caches[kind].get(key)
        if bucket is None or bucket.is_stale(now, self._ttl):
            client = self._registry.get_client(profile_name)
            named = await self._loaders[kind](client, budget_id)
            bucket = build_bucket(kind, named, now)
            self._caches[kind][key] = bucket
            logger.info(
                "bucket_refreshed",
                kind=kind.value,
                key=key,
                entries=bucket.size,
            )

        return bucket
