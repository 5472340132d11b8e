"""LinkedIn Talent Solutions partner-API data provider.

Requires a LinkedIn partnership: OAuth client credentials plus an access
token (or a refresh token to obtain one).  The partner search supports
most filters server-side; exclude keywords and seniority are applied in
memory after the page is fetched.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from .errors import ConfigurationError, NotFoundError, raise_for_provider_status
from .filters import EXCLUDE_KEYWORDS, SENIORITY, apply_post_filters
from .models import (
    Candidate,
    CandidateDetailed,
    Education,
    Pagination,
    ProviderStatus,
    SearchFilters,
    SearchMeta,
    SearchResult,
    SeniorityLevel,
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

BASE_URL = "https://api.linkedin.com/v2"
TOKEN_URL = "https://www.linkedin.com/oauth/v2/accessToken"
PROFILE_URL_PREFIX = "https://www.linkedin.com/in/"

_LABEL = "LinkedIn"

_POST_FILTERS = (EXCLUDE_KEYWORDS, SENIORITY)

# LinkedIn's standardized seniority taxonomy.
SENIORITY_CODES: dict[int, SeniorityLevel] = {
    1: "entry",  # Unpaid
    2: "entry",  # Training
    3: "entry",
    4: "senior",
    5: "manager",
    6: "director",
    7: "vp",
    8: "c-level",  # CXO
    9: "c-level",  # Partner
    10: "owner",
}


# ---------------------------------------------------------------------------
# Response parsing
# ---------------------------------------------------------------------------


def _names(items: list[Any] | None) -> list[str] | None:
    """Flatten ``[{"name": ...}]`` or plain string lists."""
    if items is None:
        return None
    names = [item.get("name") if isinstance(item, dict) else item for item in items]
    return [n for n in names if n]


def _current_position(positions: list[dict]) -> dict | None:
    for position in positions:
        if not position.get("endedOn"):
            return position
    return None


def _member_fields(member: dict) -> dict[str, Any]:
    positions = member.get("positions") or []
    current = _current_position(positions)
    current_title = current.get("title") if current else None

    vanity = member.get("vanityName")
    source_id = vanity or str(member.get("id", ""))
    profile_url = member.get("publicProfileUrl") or f"{PROFILE_URL_PREFIX}{source_id}"

    seniority: SeniorityLevel | None = SENIORITY_CODES.get(member.get("seniority") or 0)
    if seniority is None:
        seniority = infer_seniority_from_title(current_title or member.get("headline"))

    experience_years = member.get("yearsOfExperience")
    if experience_years is None and positions:
        experience_years = estimate_experience_years((p.get("startedOn"), p.get("endedOn")) for p in positions)

    location = member.get("location") or {}
    full_name = f"{member.get('firstName') or ''} {member.get('lastName') or ''}".strip()

    return {
        "source_id": source_id,
        "full_name": full_name,
        "headline": member.get("headline"),
        "current_title": current_title,
        "current_company": current.get("companyName") if current else None,
        "location": assemble_location(location.get("city"), location.get("region"), location.get("country")),
        "experience_years": experience_years,
        "skills": _names(member.get("skills")),
        "profile_url": profile_url,
        "seniority_level": seniority,
        "industries": [member["industryName"]] if member.get("industryName") else None,
        "summary": member.get("summary"),
        "last_updated": member.get("lastModified"),
    }


def parse_member(member: dict) -> Candidate:
    """Map a LinkedIn talent-search member onto a ``Candidate``."""
    return Candidate(**_member_fields(member))


def parse_member_detailed(member: dict) -> CandidateDetailed:
    """Map a LinkedIn talent profile onto a ``CandidateDetailed``."""
    fields = _member_fields(member)

    if (positions := member.get("positions")) is not None:
        fields["experience"] = [
            WorkExperience(
                title=p.get("title") or "Unknown",
                company=p.get("companyName") or "Unknown",
                location=p.get("location"),
                start_date=format_year_month(p.get("startedOn")),
                end_date=format_year_month(p.get("endedOn")),
                description=p.get("description"),
                is_current=not p.get("endedOn"),
            )
            for p in positions
        ]
    if (educations := member.get("educations")) is not None:
        fields["education"] = [
            Education(
                school=e.get("schoolName") or "Unknown",
                degree=e.get("degreeName"),
                field_of_study=e.get("fieldOfStudy"),
                start_date=format_year_month(e.get("startedOn")),
                end_date=format_year_month(e.get("endedOn")),
            )
            for e in educations
        ]
    fields["certifications"] = _names(member.get("certifications"))
    fields["languages"] = _names(member.get("languages"))

    return CandidateDetailed(**fields)


def build_search_params(filters: SearchFilters) -> dict[str, str | int]:
    """Translate the natively supported filters into talent-search params."""
    params: dict[str, str | int] = {"q": "search", "count": filters.page_size}
    if filters.cursor:
        params["start"] = filters.cursor
    if filters.titles:
        params["titles"] = ",".join(filters.titles)
    if filters.locations:
        params["locations"] = "|".join(filters.locations)
    if filters.skills:
        params["skills"] = ",".join(filters.skills)
    if filters.include_companies:
        params["currentCompanies"] = ",".join(filters.include_companies)
    if filters.exclude_companies:
        params["excludedCompanies"] = ",".join(filters.exclude_companies)
    if filters.industries:
        params["industries"] = ",".join(filters.industries)
    if filters.must_have_keywords:
        params["keywords"] = " ".join(filters.must_have_keywords)
    if filters.min_experience_years is not None:
        params["yearsOfExperienceMin"] = filters.min_experience_years
    if filters.max_experience_years is not None:
        params["yearsOfExperienceMax"] = filters.max_experience_years
    return params


def _next_cursor(paging: dict) -> str | None:
    start = int(paging.get("start") or 0)
    count = int(paging.get("count") or 0)
    total = paging.get("total")
    if count <= 0 or total is None or start + count >= int(total):
        return None
    return str(start + count)


def _int_header(resp: httpx.Response, name: str) -> int | None:
    value = resp.headers.get(name)
    try:
        return int(value) if value is not None else None
    except ValueError:
        return None


# ---------------------------------------------------------------------------
# LinkedInProvider (DataProvider protocol)
# ---------------------------------------------------------------------------


class LinkedInProvider:
    """Candidate search via the LinkedIn Talent Solutions partner API.

    Satisfies the :class:`~talentscout.search_provider.DataProvider` protocol.
    """

    name: str = "linkedin"

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        access_token: str | None = None,
        refresh_token: str | None = None,
        *,
        base_url: str = BASE_URL,
        token_url: str = TOKEN_URL,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._client_id = client_id
        self._client_secret = client_secret
        self._access_token = access_token
        self._refresh_token = refresh_token
        self._base_url = base_url.rstrip("/")
        self._token_url = token_url
        self._transport = transport
        self.rate_limit_remaining: int | None = None
        self.rate_limit_reset: str | None = None

    # ------------------------------------------------------------------
    # Public API (DataProvider protocol)
    # ------------------------------------------------------------------

    def is_configured(self) -> bool:
        return bool(self._client_id and self._client_secret and (self._access_token or self._refresh_token))

    def get_status(self) -> ProviderStatus:
        configured = self.is_configured()
        return ProviderStatus(
            provider="linkedin",
            configured=configured,
            rate_limit_remaining=self.rate_limit_remaining,
            rate_limit_reset=self.rate_limit_reset,
            message="LinkedIn Talent API credentials configured"
            if configured
            else "LinkedIn Talent API not configured (requires partnership)",
        )

    async def search_candidates(self, filters: SearchFilters) -> SearchResult:
        """Run one talent search page; the cursor is passed through as ``start``."""
        data, resp = await self._get("/talentSearch", build_search_params(filters))

        candidates = [parse_member(m) for m in data.get("elements") or []]
        candidates = apply_post_filters(candidates, filters, _POST_FILTERS)

        paging = data.get("paging") or {}
        next_cursor = _next_cursor(paging)
        total = paging.get("total")
        return SearchResult(
            candidates=candidates[: filters.page_size],
            pagination=Pagination(
                next_cursor=next_cursor,
                has_more=next_cursor is not None,
                total_estimated=int(total) if total is not None else None,
            ),
            meta=SearchMeta(
                search_id=(data.get("metadata") or {}).get("searchId"),
                rate_limit_remaining=_int_header(resp, "X-RateLimit-Remaining"),
                rate_limit_reset=resp.headers.get("X-RateLimit-Reset"),
            ),
        )

    async def get_candidate_details(self, source_id: str) -> CandidateDetailed | None:
        """Fetch a full talent profile by member id, vanity name or profile URL.

        Returns None when the member does not exist.
        """
        member_id = profile_slug(source_id)
        try:
            data, _ = await self._get(f"/talentProfiles/{member_id}", {})
        except NotFoundError:
            logger.info("LinkedIn member %s not found", member_id)
            return None
        return parse_member_detailed(data)

    async def refresh_access_token(self) -> str:
        """Exchange the refresh token for a new access token."""
        if not self._refresh_token:
            raise ConfigurationError("LinkedIn refresh token not configured. Set LINKEDIN_REFRESH_TOKEN.")

        async with httpx.AsyncClient(timeout=None, transport=self._transport) as client:
            resp = await client.post(
                self._token_url,
                data={
                    "grant_type": "refresh_token",
                    "refresh_token": self._refresh_token,
                    "client_id": self._client_id,
                    "client_secret": self._client_secret,
                },
            )
        if not resp.is_success:
            raise_for_provider_status("linkedin", _LABEL, resp.status_code, resp.text)

        payload = resp.json()
        self._access_token = payload["access_token"]
        if new_refresh := payload.get("refresh_token"):
            self._refresh_token = new_refresh
        logger.info("Refreshed LinkedIn access token")
        return self._access_token

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    async def _get(self, endpoint: str, params: dict[str, Any]) -> tuple[dict, httpx.Response]:
        """Authenticated GET returning the decoded body and the raw response."""
        if not self.is_configured():
            raise ConfigurationError(
                "LinkedIn API credentials not configured. Set LINKEDIN_CLIENT_ID, "
                "LINKEDIN_CLIENT_SECRET and LINKEDIN_ACCESS_TOKEN."
            )
        if not self._access_token:
            await self.refresh_access_token()

        async with httpx.AsyncClient(
            base_url=self._base_url,
            headers={
                "Authorization": f"Bearer {self._access_token}",
                "X-Restli-Protocol-Version": "2.0.0",
                "Accept": "application/json",
            },
            timeout=None,
            transport=self._transport,
        ) as client:
            resp = await client.get(endpoint, params={k: str(v) for k, v in params.items()})

        logger.debug("LinkedIn GET %s returned %s", endpoint, resp.status_code)
        self.rate_limit_remaining = _int_header(resp, "X-RateLimit-Remaining")
        self.rate_limit_reset = resp.headers.get("X-RateLimit-Reset")
        if not resp.is_success:
            logger.warning("LinkedIn %s failed with status %s", endpoint, resp.status_code)
            raise_for_provider_status("linkedin", _LABEL, resp.status_code, resp.text)
        return resp.json(), resp
