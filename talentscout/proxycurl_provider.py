"""Proxycurl enrichment-API data provider.

Proxycurl resells LinkedIn profile data through a credit-metered REST API.
It needs nothing but an API key, which makes it the default provider.

API docs: https://nubela.co/proxycurl/docs
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from .errors import ConfigurationError, NotFoundError, raise_for_provider_status
from .filters import ALL_POST_FILTERS, apply_post_filters
from .models import (
    Candidate,
    CandidateDetailed,
    Education,
    Pagination,
    ProviderStatus,
    SearchFilters,
    SearchMeta,
    SearchResult,
    WorkExperience,
)
from .normalize import (
    assemble_location,
    estimate_experience_years,
    format_year_month,
    infer_seniority_from_title,
    profile_slug,
)

logger = logging.getLogger(__name__)

BASE_URL = "https://nubela.co/proxycurl/api"
PROFILE_URL_PREFIX = "https://www.linkedin.com/in/"

_LABEL = "Proxycurl"

# ---------------------------------------------------------------------------
# Country names → ISO codes for the person-search ``country`` parameter
# ---------------------------------------------------------------------------

COUNTRY_CODES: dict[str, str] = {
    "india": "IN",
    "united states": "US",
    "usa": "US",
    "us": "US",
    "united kingdom": "GB",
    "uk": "GB",
    "england": "GB",
    "ireland": "IE",
    "germany": "DE",
    "deutschland": "DE",
    "france": "FR",
    "netherlands": "NL",
    "spain": "ES",
    "italy": "IT",
    "portugal": "PT",
    "poland": "PL",
    "sweden": "SE",
    "switzerland": "CH",
    "austria": "AT",
    "canada": "CA",
    "australia": "AU",
    "singapore": "SG",
    "japan": "JP",
    "brazil": "BR",
    "mexico": "MX",
    "united arab emirates": "AE",
    "uae": "AE",
    "israel": "IL",
}


def location_params(location: str) -> dict[str, str]:
    """Translate a free-form location into Proxycurl ``city``/``country`` params.

    The first comma-separated part is taken as the city.  A trailing part
    that names a known country becomes the ISO ``country`` parameter.
    """
    parts = [p.strip() for p in location.split(",") if p.strip()]
    params: dict[str, str] = {}
    if not parts:
        return params

    code = COUNTRY_CODES.get(parts[-1].lower())
    if code is not None:
        params["country"] = code
        if len(parts) > 1:
            params["city"] = parts[0]
    else:
        params["city"] = parts[0]
    return params


# ---------------------------------------------------------------------------
# Response parsing
# ---------------------------------------------------------------------------


def find_current_experience(experiences: list[dict] | None) -> dict | None:
    """Return the first experience without an end date, in provider order."""
    for exp in experiences or []:
        if not exp.get("ends_at"):
            return exp
    return None


def _source_id(profile: dict, profile_url: str) -> str:
    if identifier := profile.get("public_identifier"):
        return identifier
    return profile_slug(profile_url)


def _full_name(profile: dict) -> str:
    if full_name := profile.get("full_name"):
        return full_name
    return f"{profile.get('first_name') or ''} {profile.get('last_name') or ''}".strip()


def parse_profile(profile: dict, profile_url: str) -> Candidate:
    """Map a Proxycurl person profile onto a ``Candidate``."""
    return Candidate(**_candidate_fields(profile, profile_url))


def _candidate_fields(profile: dict, profile_url: str) -> dict[str, Any]:
    experiences = profile.get("experiences") or []
    current = find_current_experience(experiences)
    current_title = current.get("title") if current else None

    return {
        "source_id": _source_id(profile, profile_url),
        "full_name": _full_name(profile),
        "headline": profile.get("headline"),
        "current_title": current_title or profile.get("occupation"),
        "current_company": current.get("company") if current else None,
        "location": assemble_location(profile.get("city"), profile.get("state"), profile.get("country_full_name")),
        "experience_years": estimate_experience_years((e.get("starts_at"), e.get("ends_at")) for e in experiences),
        "skills": profile.get("skills"),
        "profile_url": profile_url,
        "seniority_level": infer_seniority_from_title(current_title or profile.get("headline")),
        "industries": [profile["industry"]] if profile.get("industry") else None,
        "summary": profile.get("summary"),
    }


def parse_profile_detailed(profile: dict, profile_url: str) -> CandidateDetailed:
    """Map a Proxycurl person profile onto a ``CandidateDetailed``."""
    fields = _candidate_fields(profile, profile_url)

    experiences = profile.get("experiences")
    if experiences is not None:
        fields["experience"] = [
            WorkExperience(
                title=exp.get("title") or "Unknown",
                company=exp.get("company") or "Unknown",
                location=exp.get("location"),
                start_date=format_year_month(exp.get("starts_at")),
                end_date=format_year_month(exp.get("ends_at")),
                description=exp.get("description"),
                is_current=not exp.get("ends_at"),
            )
            for exp in experiences
        ]

    education = profile.get("education")
    if education is not None:
        fields["education"] = [
            Education(
                school=edu.get("school") or "Unknown",
                degree=edu.get("degree_name"),
                field_of_study=edu.get("field_of_study"),
                start_date=format_year_month(edu.get("starts_at")),
                end_date=format_year_month(edu.get("ends_at")),
            )
            for edu in education
        ]

    certifications = profile.get("certifications")
    if certifications is not None:
        fields["certifications"] = [c["name"] for c in certifications if c.get("name")]
    fields["languages"] = profile.get("languages")

    return CandidateDetailed(**fields)


def build_search_params(filters: SearchFilters) -> dict[str, str | int]:
    """Translate the natively supported filters into person-search params."""
    params: dict[str, str | int] = {
        "page_size": filters.page_size,
        "enrich_profiles": "enrich",
    }
    if filters.locations:
        params.update(location_params(filters.locations[0]))
    if filters.titles:
        params["current_role_title"] = " OR ".join(filters.titles)
    if filters.include_companies:
        params["current_company_name"] = " OR ".join(filters.include_companies)
    if filters.industries:
        params["industries"] = " OR ".join(filters.industries)
    keywords = [*(filters.skills or []), *(filters.must_have_keywords or [])]
    if keywords:
        params["keyword"] = " ".join(keywords)
    if filters.cursor:
        params["next_page"] = filters.cursor
    return params


# ---------------------------------------------------------------------------
# ProxycurlProvider (DataProvider protocol)
# ---------------------------------------------------------------------------


class ProxycurlProvider:
    """Candidate search and profile enrichment via Proxycurl.

    Satisfies the :class:`~talentscout.search_provider.DataProvider` protocol.
    """

    name: str = "proxycurl"

    def __init__(
        self,
        api_key: str,
        *,
        base_url: str = BASE_URL,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._api_key = api_key
        self._base_url = base_url.rstrip("/")
        self._transport = transport
        self.credits_remaining: int | None = None

    # ------------------------------------------------------------------
    # Public API (DataProvider protocol)
    # ------------------------------------------------------------------

    def is_configured(self) -> bool:
        return bool(self._api_key)

    def get_status(self) -> ProviderStatus:
        configured = self.is_configured()
        return ProviderStatus(
            provider="proxycurl",
            configured=configured,
            credits_remaining=self.credits_remaining,
            message="Proxycurl API configured and ready"
            if configured
            else "Missing PROXYCURL_API_KEY environment variable",
        )

    async def search_candidates(self, filters: SearchFilters) -> SearchResult:
        """Run one person search with profiles enriched inline.

        Hits without profile data are dropped.  Exclude-company,
        exclude-keyword, experience-range and seniority filters are applied
        in memory afterwards; the pagination block still reflects the
        unfiltered page.
        """
        data = await self._get("/v2/search/person", build_search_params(filters))

        candidates = [
            parse_profile(hit["profile"], hit.get("linkedin_profile_url", ""))
            for hit in data.get("results") or []
            if hit.get("profile")
        ]
        candidates = apply_post_filters(candidates, filters, ALL_POST_FILTERS)

        next_page = data.get("next_page")
        return SearchResult(
            candidates=candidates[: filters.page_size],
            pagination=Pagination(
                next_cursor=next_page or None,
                has_more=bool(next_page),
                total_estimated=data.get("total_result_count"),
            ),
            meta=SearchMeta(),
        )

    async def get_candidate_details(self, source_id: str) -> CandidateDetailed | None:
        """Fetch a full profile by public identifier or profile URL.

        Returns None when Proxycurl has no such profile.
        """
        profile_url = source_id if source_id.startswith("http") else f"{PROFILE_URL_PREFIX}{source_id}"
        try:
            profile = await self._get(
                "/v2/linkedin",
                {
                    "linkedin_profile_url": profile_url,
                    "skills": "include",
                    "inferred_salary": "include",
                    "personal_email": "include",
                    "personal_contact_number": "include",
                },
            )
        except NotFoundError:
            logger.info("Proxycurl profile %s not found", profile_url)
            return None
        return parse_profile_detailed(profile, profile_url)

    # ------------------------------------------------------------------
    # Proxycurl-only lookups
    # ------------------------------------------------------------------

    async def lookup_by_role(self, role: str, company_name: str) -> Candidate | None:
        """Find the person holding *role* at *company_name*."""
        try:
            data = await self._get(
                "/find/company/role",
                {"role": role, "company_name": company_name, "enrich_profile": "enrich"},
            )
        except NotFoundError:
            return None
        if not data.get("profile"):
            return None
        return parse_profile(data["profile"], data.get("linkedin_profile_url", ""))

    async def lookup_by_name_and_company(
        self,
        first_name: str,
        company_domain: str,
        last_name: str | None = None,
        title: str | None = None,
    ) -> str | None:
        """Resolve a person to their profile URL, or None if unknown."""
        try:
            data = await self._get(
                "/linkedin/profile/resolve",
                {
                    "first_name": first_name,
                    "company_domain": company_domain,
                    "last_name": last_name,
                    "title": title,
                },
            )
        except NotFoundError:
            return None
        return data.get("url") or None

    async def get_credit_balance(self) -> int:
        """Fetch the remaining credit balance and remember it for ``get_status``."""
        data = await self._get("/credit-balance", {})
        self.credits_remaining = int(data["credit_balance"])
        return self.credits_remaining

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    async def _get(self, endpoint: str, params: dict[str, Any]) -> dict:
        """Authenticated GET; raises the mapped error for any non-2xx status."""
        if not self.is_configured():
            raise ConfigurationError("Proxycurl API key not configured. Set PROXYCURL_API_KEY environment variable.")

        query = {k: str(v) for k, v in params.items() if v is not None and v != ""}
        async with httpx.AsyncClient(
            base_url=self._base_url,
            headers={"Authorization": f"Bearer {self._api_key}", "Accept": "application/json"},
            timeout=None,
            transport=self._transport,
        ) as client:
            resp = await client.get(endpoint, params=query)

        logger.debug("Proxycurl GET %s returned %s", endpoint, resp.status_code)
        if not resp.is_success:
            logger.warning("Proxycurl %s failed with status %s", endpoint, resp.status_code)
            raise_for_provider_status("proxycurl", _LABEL, resp.status_code, resp.text)
        return resp.json()  # type: ignore[no-any-return]
