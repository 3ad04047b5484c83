"""
Resolution Cache Models

A bucket is the cached name -> identifier mapping for one
(profile, budget, entity kind) triple.

INVARIANTS:
1. A bucket is built in one pass and replaced wholesale, never patched
2. Every entry in a bucket shares the bucket's fetched_at
3. Keys are normalized names (trimmed, lowercased)
"""

from enum import Enum
from typing import Iterator, Optional

from pydantic import BaseModel, ConfigDict, Field


class EntityKind(str, Enum):
    """Entity kinds the resolution layer can translate names for."""
    ACCOUNT = "account"
    CATEGORY = "category"
    PAYEE = "payee"


def normalize_name(name: str) -> str:
    """Normalize a name for cache lookup."""
    return name.strip().lower()


class CacheEntry(BaseModel):
    """One resolvable name within a bucket."""
    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Upstream identifier")
    name: str = Field(..., description="Display name as returned by YNAB")
    fetched_at: float = Field(..., description="Timestamp of the bucket refresh")


class ResolutionBucket(BaseModel):
    """
    Cached names for one (profile, budget, kind).

    The bucket carries its own fetched_at so that an empty bucket
    (budget genuinely has no payees, say) still ages out on the TTL
    instead of being re-fetched on every call.
    """
    model_config = ConfigDict(frozen=True)

    kind: EntityKind
    fetched_at: float
    entries: dict[str, CacheEntry] = Field(default_factory=dict)

    def is_stale(self, now: float, ttl_seconds: float) -> bool:
        return now - self.fetched_at > ttl_seconds

    def get(self, normalized: str) -> Optional[CacheEntry]:
        return self.entries.get(normalized)

    def items(self) -> Iterator[tuple[str, CacheEntry]]:
        """Entries in insertion order."""
        return iter(self.entries.items())

    def display_names(self) -> list[str]:
        """Distinct display names, in insertion order."""
        seen: dict[str, None] = {}
        for entry in self.entries.values():
            seen.setdefault(entry.name, None)
        return list(seen)

    @property
    def size(self) -> int:
        return len(self.entries)
