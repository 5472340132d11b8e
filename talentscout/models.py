"""Pydantic models for TalentScout data structures."""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

SeniorityLevel = Literal[
    "entry",
    "junior",
    "mid",
    "senior",
    "lead",
    "manager",
    "director",
    "vp",
    "c-level",
    "owner",
]

# "owner" is deliberately absent: it has no position in the ranking.
SENIORITY_ORDER: tuple[str, ...] = (
    "entry",
    "junior",
    "mid",
    "senior",
    "lead",
    "manager",
    "director",
    "vp",
    "c-level",
)

ProviderType = Literal["linkedin", "proxycurl"]

MIN_PAGE_SIZE = 1
MAX_PAGE_SIZE = 50
DEFAULT_PAGE_SIZE = 20


def seniority_rank(level: str | None) -> int | None:
    """Return the ordinal position of *level*, or None for unranked tags."""
    if level is None or level not in SENIORITY_ORDER:
        return None
    return SENIORITY_ORDER.index(level)


class WorkExperience(BaseModel):
    """A single position from a candidate's work history."""

    title: str = Field(default="Unknown", description="Job title held")
    company: str = Field(default="Unknown", description="Employer name")
    location: str | None = None
    start_date: str | None = Field(default=None, description="Start date as 'YYYY-MM'")
    end_date: str | None = Field(default=None, description="End date as 'YYYY-MM', null if ongoing")
    description: str | None = None
    is_current: bool = False


class Education(BaseModel):
    """A single education entry."""

    school: str = Field(default="Unknown", description="University or school name")
    degree: str | None = None
    field_of_study: str | None = None
    start_date: str | None = None
    end_date: str | None = None


class Candidate(BaseModel):
    """Canonical profile summary shared by every provider."""

    source: Literal["linkedin"] = "linkedin"
    source_id: str = Field(description="Provider identifier, unique per source")
    full_name: str
    headline: str | None = Field(default=None, description="Profile headline or title line")
    current_title: str | None = None
    current_company: str | None = None
    location: str | None = Field(default=None, description="Free-text location, e.g. 'Berlin, Germany'")
    experience_years: int | None = Field(default=None, ge=0)
    skills: list[str] | None = None
    profile_url: str
    seniority_level: SeniorityLevel | None = None
    industries: list[str] | None = None
    summary: str | None = None
    last_updated: str | None = None

    @property
    def identity(self) -> tuple[str, str]:
        return (self.source, self.source_id)

    def merge(self, other: Candidate) -> Candidate:
        """Combine two fetches of the same candidate, *other* winning per field.

        Fields that *other* leaves unset keep their current value.
        """
        if other.identity != self.identity:
            raise ValueError(f"Cannot merge candidate {other.identity} into {self.identity}")
        updates = {name: value for name, value in other if value is not None and name in type(self).model_fields}
        return self.model_copy(update=updates)


class CandidateDetailed(Candidate):
    """Candidate plus full work history, education and credentials."""

    experience: list[WorkExperience] | None = None
    education: list[Education] | None = None
    certifications: list[str] | None = None
    languages: list[str] | None = None


class SearchFilters(BaseModel):
    """Optional predicates for a candidate search. Nothing is required."""

    titles: list[str] | None = None
    locations: list[str] | None = None
    skills: list[str] | None = None
    min_experience_years: int | None = Field(default=None, ge=0)
    max_experience_years: int | None = Field(default=None, ge=0)
    seniority_levels: list[SeniorityLevel] | None = None
    include_companies: list[str] | None = None
    exclude_companies: list[str] | None = None
    industries: list[str] | None = None
    must_have_keywords: list[str] | None = None
    exclude_keywords: list[str] | None = None
    page_size: int = Field(default=DEFAULT_PAGE_SIZE, ge=MIN_PAGE_SIZE, le=MAX_PAGE_SIZE)
    cursor: str | None = Field(default=None, description="Opaque provider pagination token")


class Pagination(BaseModel):
    next_cursor: str | None = None
    has_more: bool = False
    total_estimated: int | None = None


class SearchMeta(BaseModel):
    search_id: str | None = None
    rate_limit_remaining: int | None = None
    rate_limit_reset: str | None = None


class SearchResult(BaseModel):
    """One page of candidates in provider relevance order."""

    candidates: list[Candidate] = Field(default_factory=list)
    pagination: Pagination = Field(default_factory=Pagination)
    meta: SearchMeta = Field(default_factory=SearchMeta)


class BookmarkedCandidate(Candidate):
    """A candidate saved by the user, with notes and tags."""

    bookmarked_at: datetime
    notes: str | None = None
    tags: list[str] | None = None


class BookmarkDocument(BaseModel):
    """The on-disk bookmark file."""

    bookmarks: list[BookmarkedCandidate] = Field(default_factory=list)
    last_updated: datetime | None = None


class ProviderStatus(BaseModel):
    """Configuration state and usage hints of one data provider."""

    provider: ProviderType
    configured: bool
    rate_limit_remaining: int | None = None
    rate_limit_reset: str | None = None
    credits_remaining: int | None = None
    message: str | None = None
