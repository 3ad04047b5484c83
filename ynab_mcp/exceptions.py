"""
Error Taxonomy

Every failure the resolution layer can produce is one of these types.
None of them are retried here: they are surfaced to the tool handler,
which turns them into a message the assistant can act on.

Each error carries the alternatives the caller could have used
(available profiles, aliases, names) so the assistant can self-correct.
"""

from typing import Optional

from ynab_mcp.models.cache import EntityKind


class YnabMcpError(Exception):
    """Base exception for all errors raised by this package."""
    pass


class ConfigurationError(YnabMcpError):
    """No usable profile or token could be loaded. Fatal at startup."""
    pass


class ProfileNotFoundError(YnabMcpError):
    """Caller asked for a profile that is not configured."""

    def __init__(self, requested: str, available: list[str]):
        self.requested = requested
        self.available = list(available)
        super().__init__(
            f"Profile '{requested}' not found. "
            f"Available: {', '.join(self.available)}"
        )


class NoBudgetConfiguredError(YnabMcpError):
    """No budget reference given and no default budget to fall back on."""

    def __init__(self, profile_name: str):
        self.profile_name = profile_name
        super().__init__(
            f"No budget specified and no default budget configured "
            f"for profile '{profile_name}'"
        )


class BudgetNotFoundError(YnabMcpError):
    """Budget reference is neither a known alias nor an identifier."""

    def __init__(
        self,
        requested: str,
        available_aliases: list[str],
        profile_name: Optional[str] = None,
    ):
        self.requested = requested
        self.available_aliases = list(available_aliases)
        self.profile_name = profile_name
        super().__init__(
            f"Budget '{requested}' not found for profile '{profile_name}'. "
            f"Available: {', '.join(self.available_aliases)}"
        )


class EntityNotFoundError(YnabMcpError):
    """Account or category name matched nothing, exactly or fuzzily."""

    def __init__(
        self,
        kind: EntityKind,
        requested: str,
        available_names: list[str],
    ):
        self.kind = kind
        self.requested = requested
        self.available_names = list(available_names)
        super().__init__(
            f"{kind.value.capitalize()} '{requested}' not found. "
            f"Available: {', '.join(self.available_names)}"
        )


class UpstreamError(YnabMcpError):
    """Base exception for failures talking to the YNAB API."""
    pass


class ApiError(UpstreamError):
    """YNAB answered with an error response."""

    def __init__(
        self,
        status_code: int,
        error_id: Optional[str] = None,
        error_name: Optional[str] = None,
        detail: Optional[str] = None,
    ):
        self.status_code = status_code
        self.error_id = error_id
        self.error_name = error_name
        self.detail = detail
        super().__init__(
            detail or error_name or f"YNAB API returned HTTP {status_code}"
        )


class TransportError(UpstreamError):
    """Could not reach the YNAB API after retries."""
    pass


class MalformedResponseError(UpstreamError):
    """YNAB answered 2xx but the body was not the expected shape."""
    pass
