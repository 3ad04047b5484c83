"""
Client Registry

Maps a profile name to one long-lived API client.

INVARIANT: At most one client per profile. Callers must never build a
client themselves; they ask the registry.

Clients are created on first request and kept for the life of the
registry. They are never closed here: the HTTP client holds no state
worth tearing down between calls.
"""

from typing import Callable, Optional

from ynab_mcp.audit import get_logger
from ynab_mcp.config import Configuration, Profile, get_config, get_profile
from ynab_mcp.services.api import BudgetApiInterface, YnabApiClient


ClientFactory = Callable[[Profile], BudgetApiInterface]

logger = get_logger(__name__)


def _default_client_factory(profile: Profile) -> BudgetApiInterface:
    return YnabApiClient(token=profile.token)


class ClientRegistry:
    """Lazily builds and memoizes one API client per profile."""

    def __init__(
        self,
        config: Optional[Configuration] = None,
        client_factory: Optional[ClientFactory] = None,
    ):
        """
        Args:
            config: Configuration to resolve profiles against.
                    If None, the process-wide configuration is used.
            client_factory: Builds a client for a profile.
                            Tests pass a factory returning fakes.
        """
        self._config = config
        self._client_factory = client_factory or _default_client_factory
        self._clients: dict[str, BudgetApiInterface] = {}

    @property
    def config(self) -> Configuration:
        if self._config is None:
            self._config = get_config()
        return self._config

    @property
    def cached_profiles(self) -> list[str]:
        """Profiles that already have a client."""
        return list(self._clients)

    def get_client(self, profile_name: Optional[str] = None) -> BudgetApiInterface:
        """
        Get the client for a profile, building it on first use.

        Raises:
            ProfileNotFoundError: Unknown profile
        """
        profile = get_profile(profile_name, self.config)

        client = self._clients.get(profile.name)
        if client is None:
            client = self._client_factory(profile)
            self._clients[profile.name] = client
            logger.info("client_created", profile=profile.name)

        return client
