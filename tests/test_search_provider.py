"""Tests for the provider selector and aggregate status."""

from __future__ import annotations

import pytest

from talentscout.config import ProviderConfig, load_provider_config
from talentscout.errors import ConfigurationError
from talentscout.linkedin_provider import LinkedInProvider
from talentscout.proxycurl_provider import ProxycurlProvider
from talentscout.search_provider import (
    DataProvider,
    ProviderSelector,
    create_provider,
    get_all_provider_statuses,
)

_PROXYCURL_ENV = {"PROXYCURL_API_KEY": "pc-key"}
_LINKEDIN_ENV = {
    "DATA_PROVIDER": "linkedin",
    "LINKEDIN_CLIENT_ID": "id",
    "LINKEDIN_CLIENT_SECRET": "secret",  # pragma: allowlist secret
    "LINKEDIN_ACCESS_TOKEN": "token",
}


def _selector(env: dict[str, str]) -> ProviderSelector:
    return ProviderSelector(config_loader=lambda: load_provider_config(env))


class TestCreateProvider:
    def test_proxycurl(self):
        provider = create_provider(load_provider_config(_PROXYCURL_ENV))
        assert isinstance(provider, ProxycurlProvider)
        assert isinstance(provider, DataProvider)

    def test_linkedin(self):
        provider = create_provider(load_provider_config(_LINKEDIN_ENV))
        assert isinstance(provider, LinkedInProvider)

    def test_missing_proxycurl_key_names_variable(self):
        with pytest.raises(ConfigurationError, match="PROXYCURL_API_KEY"):
            create_provider(ProviderConfig())

    def test_missing_linkedin_client_names_variables(self):
        with pytest.raises(ConfigurationError, match="LINKEDIN_CLIENT_ID.*DATA_PROVIDER=proxycurl"):
            create_provider(load_provider_config({"DATA_PROVIDER": "linkedin"}))

    def test_missing_linkedin_token(self):
        env = {k: v for k, v in _LINKEDIN_ENV.items() if k != "LINKEDIN_ACCESS_TOKEN"}
        with pytest.raises(ConfigurationError, match="LINKEDIN_ACCESS_TOKEN"):
            create_provider(load_provider_config(env))


class TestProviderSelector:
    def test_caches_provider(self):
        selector = _selector(_PROXYCURL_ENV)
        first = selector.get_provider()
        assert selector.get_provider() is first
        assert selector.cached_provider() is first

    def test_rebuilds_when_type_changes(self):
        env = {**_PROXYCURL_ENV, **_LINKEDIN_ENV, "DATA_PROVIDER": "proxycurl"}
        selector = _selector(env)
        first = selector.get_provider()
        assert isinstance(first, ProxycurlProvider)

        env["DATA_PROVIDER"] = "linkedin"
        second = selector.get_provider()
        assert isinstance(second, LinkedInProvider)
        assert selector.active_provider_type() == "linkedin"

    def test_same_type_keeps_instance_even_if_key_changes(self):
        env = dict(_PROXYCURL_ENV)
        selector = _selector(env)
        first = selector.get_provider()
        env["PROXYCURL_API_KEY"] = "rotated"
        assert selector.get_provider() is first

    def test_reset_forces_rebuild(self):
        selector = _selector(_PROXYCURL_ENV)
        first = selector.get_provider()
        selector.reset()
        assert selector.cached_provider() is None
        assert selector.get_provider() is not first

    def test_failed_build_leaves_no_cache(self):
        env = dict(_PROXYCURL_ENV)
        selector = _selector(env)
        selector.get_provider()
        env["DATA_PROVIDER"] = "linkedin"
        with pytest.raises(ConfigurationError):
            selector.get_provider()
        assert selector.cached_provider() is None

    def test_custom_factory(self):
        built = []

        def factory(config: ProviderConfig):
            built.append(config.type)
            return ProxycurlProvider("x")

        selector = ProviderSelector(config_loader=ProviderConfig, factory=factory)
        selector.get_provider()
        selector.get_provider()
        assert built == ["proxycurl"]


class TestAllProviderStatuses:
    def test_reports_both_providers(self):
        statuses = get_all_provider_statuses(load_provider_config(_PROXYCURL_ENV))
        by_name = {s.provider: s for s in statuses}
        assert set(by_name) == {"linkedin", "proxycurl"}
        assert by_name["proxycurl"].configured is True
        assert by_name["linkedin"].configured is False

    def test_linkedin_needs_a_token(self):
        env = {k: v for k, v in _LINKEDIN_ENV.items() if k != "LINKEDIN_ACCESS_TOKEN"}
        statuses = _selector(env).all_statuses()
        assert not next(s for s in statuses if s.provider == "linkedin").configured

    def test_linkedin_refresh_token_only_is_configured(self):
        env = {k: v for k, v in _LINKEDIN_ENV.items() if k != "LINKEDIN_ACCESS_TOKEN"}
        env["LINKEDIN_REFRESH_TOKEN"] = "refresh"
        selector = _selector(env)
        status = next(s for s in selector.all_statuses() if s.provider == "linkedin")
        assert status.configured is True
        assert status.configured == selector.get_provider().is_configured()
