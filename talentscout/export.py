"""CSV and JSON rendering of candidate lists."""

from __future__ import annotations

import json
from collections.abc import Iterable, Sequence

from .models import BookmarkedCandidate, Candidate

CANDIDATE_CSV_HEADERS = [
    "Full Name",
    "Current Title",
    "Current Company",
    "Location",
    "Experience Years",
    "Skills",
    "Profile URL",
    "Seniority",
    "Industries",
]

BOOKMARK_CSV_HEADERS = [
    "Full Name",
    "Current Title",
    "Current Company",
    "Location",
    "Experience Years",
    "Skills",
    "Profile URL",
    "Seniority",
    "Notes",
    "Tags",
    "Bookmarked At",
]


def escape_csv_field(field: str) -> str:
    """Quote *field* iff it contains a comma, a double quote or a newline."""
    if "," in field or '"' in field or "\n" in field:
        return '"' + field.replace('"', '""') + '"'
    return field


def _join(values: list[str] | None) -> str:
    return "; ".join(values or [])


def _years(value: int | None) -> str:
    return "" if value is None else str(value)


def _render(headers: Sequence[str], rows: Iterable[Sequence[str]]) -> str:
    lines = [",".join(headers)]
    lines.extend(",".join(escape_csv_field(field) for field in row) for row in rows)
    return "\n".join(lines)


def candidate_row(c: Candidate) -> dict:
    """The snake_case summary shape shared by search output and JSON export."""
    return {
        "source": c.source,
        "source_id": c.source_id,
        "full_name": c.full_name,
        "headline": c.headline,
        "current_title": c.current_title,
        "current_company": c.current_company,
        "location": c.location,
        "experience_years": c.experience_years,
        "skills": c.skills,
        "profile_url": c.profile_url,
        "seniority_level": c.seniority_level,
        "industries": c.industries,
    }


def candidates_to_csv(candidates: Iterable[Candidate]) -> str:
    return _render(
        CANDIDATE_CSV_HEADERS,
        (
            [
                c.full_name,
                c.current_title or "",
                c.current_company or "",
                c.location or "",
                _years(c.experience_years),
                _join(c.skills),
                c.profile_url,
                c.seniority_level or "",
                _join(c.industries),
            ]
            for c in candidates
        ),
    )


def bookmarks_to_csv(bookmarks: Iterable[BookmarkedCandidate]) -> str:
    return _render(
        BOOKMARK_CSV_HEADERS,
        (
            [
                b.full_name,
                b.current_title or "",
                b.current_company or "",
                b.location or "",
                _years(b.experience_years),
                _join(b.skills),
                b.profile_url,
                b.seniority_level or "",
                b.notes or "",
                _join(b.tags),
                b.bookmarked_at.isoformat(),
            ]
            for b in bookmarks
        ),
    )


def candidates_to_json(candidates: Iterable[Candidate]) -> str:
    return json.dumps([candidate_row(c) for c in candidates], indent=2, ensure_ascii=False)


def bookmarks_to_json(bookmarks: Iterable[BookmarkedCandidate]) -> str:
    return json.dumps([b.model_dump(mode="json") for b in bookmarks], indent=2, ensure_ascii=False)
