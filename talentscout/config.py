"""Provider selection and credentials, read from environment variables."""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from pathlib import Path

from pydantic import BaseModel

from .models import ProviderType

logger = logging.getLogger(__name__)

DEFAULT_PROVIDER: ProviderType = "proxycurl"
DEFAULT_STORE_DIR = Path.home() / ".candidate-sourcing"
BOOKMARKS_FILENAME = "bookmarks.json"


class LinkedInCredentials(BaseModel):
    client_id: str = ""
    client_secret: str = ""
    access_token: str | None = None
    refresh_token: str | None = None

    def is_complete(self) -> bool:
        """Client id and secret plus an access or refresh token."""
        return bool(self.client_id and self.client_secret and (self.access_token or self.refresh_token))


class ProxycurlCredentials(BaseModel):
    api_key: str = ""


class ProviderConfig(BaseModel):
    """Which provider is active plus the credentials for both."""

    type: ProviderType = DEFAULT_PROVIDER
    linkedin: LinkedInCredentials = LinkedInCredentials()
    proxycurl: ProxycurlCredentials = ProxycurlCredentials()


def _read(env: Mapping[str, str], key: str) -> str:
    return (env.get(key) or "").strip()


def load_provider_config(env: Mapping[str, str] | None = None) -> ProviderConfig:
    """Build a ``ProviderConfig`` from *env* (defaults to ``os.environ``).

    Recognised variables:
        DATA_PROVIDER: ``proxycurl`` (default) or ``linkedin``
        PROXYCURL_API_KEY: Proxycurl API key
        LINKEDIN_CLIENT_ID, LINKEDIN_CLIENT_SECRET,
        LINKEDIN_ACCESS_TOKEN, LINKEDIN_REFRESH_TOKEN: LinkedIn OAuth
    """
    env = os.environ if env is None else env

    provider = _read(env, "DATA_PROVIDER").lower() or DEFAULT_PROVIDER
    if provider not in ("linkedin", "proxycurl"):
        logger.warning("Unknown DATA_PROVIDER '%s', falling back to %s", provider, DEFAULT_PROVIDER)
        provider = DEFAULT_PROVIDER

    return ProviderConfig(
        type=provider,
        linkedin=LinkedInCredentials(
            client_id=_read(env, "LINKEDIN_CLIENT_ID"),
            client_secret=_read(env, "LINKEDIN_CLIENT_SECRET"),
            access_token=_read(env, "LINKEDIN_ACCESS_TOKEN") or None,
            refresh_token=_read(env, "LINKEDIN_REFRESH_TOKEN") or None,
        ),
        proxycurl=ProxycurlCredentials(api_key=_read(env, "PROXYCURL_API_KEY")),
    )


def bookmarks_path(env: Mapping[str, str] | None = None) -> Path:
    """Location of the bookmark file; ``CANDIDATE_SOURCING_HOME`` overrides the directory."""
    env = os.environ if env is None else env
    override = _read(env, "CANDIDATE_SOURCING_HOME")
    directory = Path(override).expanduser() if override else DEFAULT_STORE_DIR
    return directory / BOOKMARKS_FILENAME
