"""Exception types raised by providers, configuration and the bookmark store."""

from __future__ import annotations


class TalentScoutError(Exception):
    """Base class for all TalentScout errors."""


class ConfigurationError(TalentScoutError, ValueError):
    """A required credential or setting is missing."""


class ProviderAPIError(TalentScoutError):
    """A remote provider answered with a non-2xx status."""

    def __init__(self, message: str, *, provider: str, status_code: int, body: str = "") -> None:
        super().__init__(message)
        self.provider = provider
        self.status_code = status_code
        self.body = body


class InvalidCredentialsError(ProviderAPIError):
    """401: the API key or access token was rejected."""


class AccessForbiddenError(ProviderAPIError):
    """403: credentials are valid but lack access to the endpoint."""


class RateLimitedError(ProviderAPIError):
    """429: too many requests or no credits left."""


class NotFoundError(ProviderAPIError):
    """404 on a lookup. Lookup operations turn this into ``None``."""


def raise_for_provider_status(provider: str, label: str, status_code: int, body: str) -> None:
    """Map a non-2xx provider response onto the error hierarchy.

    Args:
        provider: Provider tag, e.g. ``"proxycurl"``.
        label: Human-readable provider name used in messages.
        status_code: HTTP status of the response.
        body: Raw response text, kept on the exception for diagnosis.
    """
    if status_code == 401:
        raise InvalidCredentialsError(
            f"Invalid {label} credentials. Please check your API key or access token.",
            provider=provider,
            status_code=status_code,
            body=body,
        )
    if status_code == 403:
        raise AccessForbiddenError(
            f"{label} API access forbidden. Check your credential permissions.",
            provider=provider,
            status_code=status_code,
            body=body,
        )
    if status_code == 429:
        raise RateLimitedError(
            f"{label} rate limit exceeded. Please wait before making more requests.",
            provider=provider,
            status_code=status_code,
            body=body,
        )
    if status_code == 404:
        raise NotFoundError(f"{label} resource not found (404)", provider=provider, status_code=status_code, body=body)
    raise ProviderAPIError(
        f"{label} API error ({status_code}): {body}",
        provider=provider,
        status_code=status_code,
        body=body,
    )


class ToolCallError(TalentScoutError):
    """A tool call finished with ``success: False``; the message is the failure text."""
