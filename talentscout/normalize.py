"""Field inference shared by the provider adapters.

Providers differ in what they report natively.  These helpers derive the
canonical fields a provider leaves out: seniority from a job title, total
years of experience from dated positions, and a display location from its
components.
"""

from __future__ import annotations

import math
import re
from collections.abc import Iterable, Mapping
from datetime import datetime
from urllib.parse import urlsplit

from .models import SeniorityLevel

# Ordered: the first matching pattern wins.
_SENIORITY_PATTERNS: list[tuple[re.Pattern[str], SeniorityLevel]] = [
    (re.compile(r"\b(?:ceo|cto|cfo|coo|chief|co-founder|founder)\b", re.IGNORECASE), "c-level"),
    (re.compile(r"\b(?:vp|vice president)\b", re.IGNORECASE), "vp"),
    (re.compile(r"\bdirector\b", re.IGNORECASE), "director"),
    (re.compile(r"\b(?:manager|head of)\b", re.IGNORECASE), "manager"),
    (re.compile(r"\b(?:lead|principal|staff|architect)\b", re.IGNORECASE), "lead"),
    (re.compile(r"\bsenior\b", re.IGNORECASE), "senior"),
    (re.compile(r"\b(?:junior|jr|associate)\b", re.IGNORECASE), "junior"),
    (re.compile(r"\b(?:intern|trainee|entry|graduate)\b", re.IGNORECASE), "entry"),
]

DateParts = Mapping[str, int | None]


def infer_seniority_from_title(title: str | None) -> SeniorityLevel | None:
    """Infer a seniority level from a job title or headline.

    Returns None when there is no text to look at, ``"mid"`` when the text
    matches none of the known patterns.
    """
    if not title or not title.strip():
        return None
    for pattern, level in _SENIORITY_PATTERNS:
        if pattern.search(title):
            return level
    return "mid"


def estimate_experience_years(
    periods: Iterable[tuple[DateParts | None, DateParts | None]],
    now: datetime | None = None,
) -> int | None:
    """Estimate total years of experience from ``(start, end)`` date parts.

    Each date is a mapping with ``year`` and optional ``month``.  Periods
    without a start year are skipped.  A missing start month counts as
    January, a missing end month as December, and a missing end as *now*.
    Negative intervals count as zero.  The month total is divided by 12
    and rounded half up.

    Returns None when *periods* is empty.
    """
    periods = list(periods)
    if not periods:
        return None

    now = now or datetime.now()
    total_months = 0
    for start, end in periods:
        if not start or not start.get("year"):
            continue
        start_year = int(start["year"])  # type: ignore[arg-type]
        start_month = int(start.get("month") or 1)

        if end and end.get("year"):
            end_year = int(end["year"])  # type: ignore[arg-type]
            end_month = int(end.get("month") or 12)
        else:
            end_year = now.year
            end_month = now.month

        months = (end_year - start_year) * 12 + (end_month - start_month)
        total_months += max(0, months)

    return math.floor(total_months / 12 + 0.5)


def format_year_month(date: DateParts | None) -> str | None:
    """Format date parts as ``YYYY-MM``; a missing month becomes ``01``."""
    if not date or not date.get("year"):
        return None
    month = date.get("month") or 1
    return f"{int(date['year']):04d}-{int(month):02d}"  # type: ignore[arg-type]


def assemble_location(*parts: str | None) -> str | None:
    """Join the non-empty location components with ``", "``."""
    present = [p.strip() for p in parts if p and p.strip()]
    return ", ".join(present) if present else None


def profile_slug(value: str) -> str:
    """Reduce a profile URL to the member identifier it ends with.

    ``/in/<slug>`` URLs yield the slug.  Any other http(s) URL yields its last
    non-empty path segment; query and fragment are ignored.  Anything else
    is returned unchanged.
    """
    if not value.startswith(("http://", "https://")) and "/in/" not in value:
        return value
    segments = [s for s in urlsplit(value).path.split("/") if s]
    if "in" in segments[:-1]:
        return segments[segments.index("in") + 1]
    return segments[-1] if segments else value
