"""Name resolution package."""

from ynab_mcp.resolution.context import (
    DEFAULT_LOADERS,
    KIND_POLICIES,
    KindPolicy,
    ResolutionContext,
    bucket_key,
    build_bucket,
    load_accounts,
    load_categories,
    load_payees,
)

__all__ = [
    "DEFAULT_LOADERS",
    "KIND_POLICIES",
    "KindPolicy",
    "ResolutionContext",
    "bucket_key",
    "build_bucket",
    "load_accounts",
    "load_categories",
    "load_payees",
]
