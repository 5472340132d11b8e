"""Shared pytest fixtures for TalentScout tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from talentscout.bookmark_store import BookmarkStore
from talentscout.models import Candidate

_ENV_VARS = (
    "DATA_PROVIDER",
    "PROXYCURL_API_KEY",
    "LINKEDIN_CLIENT_ID",
    "LINKEDIN_CLIENT_SECRET",
    "LINKEDIN_ACCESS_TOKEN",
    "LINKEDIN_REFRESH_TOKEN",
)


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Keep real credentials and the real bookmark file out of every test."""
    for var in _ENV_VARS:
        monkeypatch.delenv(var, raising=False)
    monkeypatch.setenv("CANDIDATE_SOURCING_HOME", str(tmp_path / "home"))


@pytest.fixture()
def store(tmp_path: Path) -> BookmarkStore:
    return BookmarkStore(path=tmp_path / "bookmarks.json")


@pytest.fixture()
def sample_candidate() -> Candidate:
    return Candidate(
        source_id="jane-doe",
        full_name="Jane Doe",
        headline="Senior Data Engineer at Acme",
        current_title="Senior Data Engineer",
        current_company="Acme",
        location="Bengaluru, Karnataka, India",
        experience_years=10,
        skills=["Python", "Spark", "AWS"],
        profile_url="https://www.linkedin.com/in/jane-doe",
        seniority_level="senior",
        industries=["Financial Services"],
        summary="Builds data platforms.",
    )


@pytest.fixture()
def proxycurl_profile() -> dict:
    return {
        "public_identifier": "jane-doe",
        "first_name": "Jane",
        "last_name": "Doe",
        "full_name": "Jane Doe",
        "headline": "Senior Data Engineer at Acme",
        "summary": "Builds data platforms.",
        "city": "Bengaluru",
        "state": "Karnataka",
        "country_full_name": "India",
        "occupation": "Data Engineer at Acme",
        "industry": "Financial Services",
        "skills": ["Python", "Spark"],
        "experiences": [
            {
                "title": "Senior Data Engineer",
                "company": "Acme",
                "location": "Bengaluru",
                "starts_at": {"day": 1, "month": 3, "year": 2019},
                "ends_at": None,
                "description": "Leads the ingestion team.",
            },
            {
                "title": "Data Engineer",
                "company": "Globex",
                "starts_at": {"day": 1, "month": 1, "year": 2015},
                "ends_at": {"day": 28, "month": 2, "year": 2019},
            },
        ],
        "education": [
            {
                "school": "IIT Madras",
                "degree_name": "B.Tech",
                "field_of_study": "Computer Science",
                "starts_at": {"year": 2011},
                "ends_at": {"month": 6, "year": 2015},
            },
            {"degree_name": "Online course"},
        ],
        "certifications": [{"name": "AWS Certified Data Analytics"}, {"authority": "Nobody"}],
        "languages": ["English", "Hindi"],
    }
