"""Data-provider interface and the provider selector.

Every profile-data backend (Proxycurl, LinkedIn Talent API) implements the
``DataProvider`` protocol so tool handlers never depend on a concrete
provider.  ``ProviderSelector`` picks the configured one and keeps it
until the configured provider type changes.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Protocol, runtime_checkable

from .config import ProviderConfig, load_provider_config
from .errors import ConfigurationError
from .linkedin_provider import LinkedInProvider
from .models import CandidateDetailed, ProviderStatus, ProviderType, SearchFilters, SearchResult
from .proxycurl_provider import ProxycurlProvider

logger = logging.getLogger(__name__)


@runtime_checkable
class DataProvider(Protocol):
    """Pluggable interface for candidate-data backends."""

    name: str
    """Provider tag, ``"proxycurl"`` or ``"linkedin"``."""

    async def search_candidates(self, filters: SearchFilters) -> SearchResult:
        """Run one search page.

        ``filters.page_size`` is an upper bound on the returned candidates
        and ``filters.cursor`` is forwarded to the remote API untouched.
        Filters the remote API cannot apply are applied to the fetched page.
        """
        ...

    async def get_candidate_details(self, source_id: str) -> CandidateDetailed | None:
        """Fetch a full profile by id or profile URL; None if not found."""
        ...

    def is_configured(self) -> bool:
        """True when credentials are present. Never touches the network."""
        ...

    def get_status(self) -> ProviderStatus:
        """Configuration state and cached usage hints. Never raises."""
        ...


# ---------------------------------------------------------------------------
# Construction
# ---------------------------------------------------------------------------


def _build_linkedin(config: ProviderConfig) -> DataProvider:
    creds = config.linkedin
    if not creds.client_id or not creds.client_secret:
        raise ConfigurationError(
            "LinkedIn provider selected but credentials not configured. "
            "Set LINKEDIN_CLIENT_ID, LINKEDIN_CLIENT_SECRET, and LINKEDIN_ACCESS_TOKEN "
            "or switch to Proxycurl by setting DATA_PROVIDER=proxycurl"
        )
    if not creds.access_token and not creds.refresh_token:
        raise ConfigurationError(
            "LinkedIn provider selected but no access token configured. "
            "Set LINKEDIN_ACCESS_TOKEN (or LINKEDIN_REFRESH_TOKEN) "
            "or switch to Proxycurl by setting DATA_PROVIDER=proxycurl"
        )
    return LinkedInProvider(
        client_id=creds.client_id,
        client_secret=creds.client_secret,
        access_token=creds.access_token,
        refresh_token=creds.refresh_token,
    )


def _build_proxycurl(config: ProviderConfig) -> DataProvider:
    if not config.proxycurl.api_key:
        raise ConfigurationError(
            "Proxycurl provider selected but API key not configured. "
            "Set PROXYCURL_API_KEY environment variable. "
            "Get your API key from https://nubela.co/proxycurl"
        )
    return ProxycurlProvider(api_key=config.proxycurl.api_key)


PROVIDER_FACTORIES: dict[ProviderType, Callable[[ProviderConfig], DataProvider]] = {
    "linkedin": _build_linkedin,
    "proxycurl": _build_proxycurl,
}


def create_provider(config: ProviderConfig) -> DataProvider:
    """Build the provider selected by *config*, failing fast on missing credentials."""
    return PROVIDER_FACTORIES[config.type](config)


# ---------------------------------------------------------------------------
# Status
# ---------------------------------------------------------------------------


def get_all_provider_statuses(config: ProviderConfig) -> list[ProviderStatus]:
    """Configuration state of both providers, whichever one is active."""
    linkedin_ok = config.linkedin.is_complete()
    proxycurl_ok = bool(config.proxycurl.api_key)
    return [
        ProviderStatus(
            provider="linkedin",
            configured=linkedin_ok,
            message="LinkedIn Talent API credentials configured"
            if linkedin_ok
            else "LinkedIn Talent API not configured (requires partnership)",
        ),
        ProviderStatus(
            provider="proxycurl",
            configured=proxycurl_ok,
            message="Proxycurl API key configured"
            if proxycurl_ok
            else "Proxycurl API key not set (get one at https://nubela.co/proxycurl)",
        ),
    ]


# ---------------------------------------------------------------------------
# Selector
# ---------------------------------------------------------------------------


class ProviderSelector:
    """Lazily builds and caches the active ``DataProvider``.

    The configuration is re-read on every call; the cached provider is
    replaced only when the configured provider type changes or
    :meth:`reset` is called.
    """

    def __init__(
        self,
        config_loader: Callable[[], ProviderConfig] = load_provider_config,
        factory: Callable[[ProviderConfig], DataProvider] = create_provider,
    ) -> None:
        self._config_loader = config_loader
        self._factory = factory
        self._provider: DataProvider | None = None
        self._provider_type: ProviderType | None = None

    def config(self) -> ProviderConfig:
        return self._config_loader()

    def active_provider_type(self) -> ProviderType:
        return self.config().type

    def get_provider(self) -> DataProvider:
        """Return the active provider, building it on first use or type change.

        Raises:
            ConfigurationError: The selected provider lacks credentials.
        """
        config = self.config()
        if self._provider is not None and self._provider_type == config.type:
            return self._provider

        if self._provider is not None:
            logger.info("Provider changed from %s to %s", self._provider_type, config.type)
        self._provider = None
        self._provider_type = None

        provider = self._factory(config)
        self._provider = provider
        self._provider_type = config.type
        logger.info("Using data provider: %s", config.type)
        return provider

    def cached_provider(self) -> DataProvider | None:
        return self._provider

    def all_statuses(self) -> list[ProviderStatus]:
        return get_all_provider_statuses(self.config())

    def reset(self) -> None:
        """Drop the cached provider so the next call rebuilds it."""
        self._provider = None
        self._provider_type = None
