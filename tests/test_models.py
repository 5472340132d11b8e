"""Tests for talentscout.models: Pydantic model validation."""

from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from talentscout.models import (
    BookmarkDocument,
    BookmarkedCandidate,
    Candidate,
    CandidateDetailed,
    SearchFilters,
    SearchResult,
    seniority_rank,
)


class TestSearchFilters:
    def test_defaults(self):
        f = SearchFilters()
        assert f.page_size == 20
        assert f.cursor is None
        assert f.titles is None

    def test_page_size_bounds(self):
        assert SearchFilters(page_size=1).page_size == 1
        assert SearchFilters(page_size=50).page_size == 50
        with pytest.raises(ValidationError):
            SearchFilters(page_size=0)
        with pytest.raises(ValidationError):
            SearchFilters(page_size=51)

    def test_negative_experience_rejected(self):
        with pytest.raises(ValidationError):
            SearchFilters(min_experience_years=-1)

    def test_unknown_seniority_rejected(self):
        with pytest.raises(ValidationError):
            SearchFilters(seniority_levels=["wizard"])


class TestCandidate:
    def test_minimal(self):
        c = Candidate(source_id="x", full_name="X", profile_url="https://www.linkedin.com/in/x")
        assert c.source == "linkedin"
        assert c.skills is None
        assert c.seniority_level is None

    def test_requires_name_and_url(self):
        with pytest.raises(ValidationError):
            Candidate(source_id="x", profile_url="https://example.com")
        with pytest.raises(ValidationError):
            Candidate(source_id="x", full_name="X")

    def test_merge_last_write_wins(self, sample_candidate: Candidate):
        newer = Candidate(
            source_id="jane-doe",
            full_name="Jane Q. Doe",
            profile_url=sample_candidate.profile_url,
            current_company="Initech",
        )
        merged = sample_candidate.merge(newer)
        assert merged.full_name == "Jane Q. Doe"
        assert merged.current_company == "Initech"
        # Fields the newer fetch left unset survive
        assert merged.skills == ["Python", "Spark", "AWS"]
        assert merged.seniority_level == "senior"

    def test_merge_accepts_detailed(self, sample_candidate: Candidate):
        detailed = CandidateDetailed(
            source_id="jane-doe",
            full_name="Jane Doe",
            profile_url=sample_candidate.profile_url,
            languages=["English"],
            summary="Updated.",
        )
        merged = sample_candidate.merge(detailed)
        assert type(merged) is Candidate
        assert merged.summary == "Updated."

    def test_merge_rejects_other_identity(self, sample_candidate: Candidate):
        other = Candidate(source_id="john", full_name="John", profile_url="https://www.linkedin.com/in/john")
        with pytest.raises(ValueError, match="Cannot merge"):
            sample_candidate.merge(other)


class TestSeniorityRank:
    def test_ordering(self):
        assert seniority_rank("entry") < seniority_rank("junior") < seniority_rank("mid")
        assert seniority_rank("lead") < seniority_rank("manager") < seniority_rank("director")
        assert seniority_rank("vp") < seniority_rank("c-level")

    def test_owner_is_unranked(self):
        assert seniority_rank("owner") is None
        assert seniority_rank(None) is None


class TestSearchResult:
    def test_empty_defaults(self):
        r = SearchResult()
        assert r.candidates == []
        assert r.pagination.has_more is False
        assert r.meta.search_id is None


class TestBookmarkDocument:
    def test_round_trip(self, sample_candidate: Candidate):
        bookmark = BookmarkedCandidate(
            **sample_candidate.model_dump(),
            bookmarked_at=datetime(2026, 1, 2, 3, 4, 5, tzinfo=timezone.utc),
            notes="Strong Spark background",
            tags=["shortlist"],
        )
        doc = BookmarkDocument(bookmarks=[bookmark], last_updated=bookmark.bookmarked_at)
        assert BookmarkDocument.model_validate_json(doc.model_dump_json()) == doc
