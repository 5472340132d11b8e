"""Post-fetch filters for predicates a provider cannot apply server-side.

Every predicate keeps a candidate whose corresponding field is unset:
missing data is never a reason to drop someone.  Filters run over the page
that was already fetched, so pagination totals still describe the
unfiltered page.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Collection

from .models import Candidate, SearchFilters

logger = logging.getLogger(__name__)

Predicate = Callable[[Candidate], bool]

EXCLUDE_COMPANIES = "exclude_companies"
EXCLUDE_KEYWORDS = "exclude_keywords"
MIN_EXPERIENCE = "min_experience_years"
MAX_EXPERIENCE = "max_experience_years"
SENIORITY = "seniority_levels"

ALL_POST_FILTERS: tuple[str, ...] = (
    EXCLUDE_COMPANIES,
    EXCLUDE_KEYWORDS,
    MIN_EXPERIENCE,
    MAX_EXPERIENCE,
    SENIORITY,
)


def _keyword_text(candidate: Candidate) -> str:
    parts = [candidate.full_name, candidate.headline, candidate.current_title, candidate.summary]
    return " ".join(p for p in parts if p).lower()


def _build_predicates(filters: SearchFilters, dimensions: Collection[str]) -> list[tuple[str, Predicate]]:
    predicates: list[tuple[str, Predicate]] = []

    if EXCLUDE_COMPANIES in dimensions and filters.exclude_companies:
        excluded = {c.lower() for c in filters.exclude_companies}
        predicates.append(
            (
                EXCLUDE_COMPANIES,
                lambda c: not c.current_company or c.current_company.lower() not in excluded,
            )
        )

    if EXCLUDE_KEYWORDS in dimensions and filters.exclude_keywords:
        keywords = [kw.lower() for kw in filters.exclude_keywords]
        predicates.append(
            (
                EXCLUDE_KEYWORDS,
                lambda c: not any(kw in _keyword_text(c) for kw in keywords),
            )
        )

    if MIN_EXPERIENCE in dimensions and filters.min_experience_years is not None:
        minimum = filters.min_experience_years
        predicates.append(
            (
                MIN_EXPERIENCE,
                lambda c: c.experience_years is None or c.experience_years >= minimum,
            )
        )

    if MAX_EXPERIENCE in dimensions and filters.max_experience_years is not None:
        maximum = filters.max_experience_years
        predicates.append(
            (
                MAX_EXPERIENCE,
                lambda c: c.experience_years is None or c.experience_years <= maximum,
            )
        )

    if SENIORITY in dimensions and filters.seniority_levels:
        levels = set(filters.seniority_levels)
        predicates.append(
            (
                SENIORITY,
                lambda c: c.seniority_level is None or c.seniority_level in levels,
            )
        )

    return predicates


def apply_post_filters(
    candidates: list[Candidate],
    filters: SearchFilters,
    dimensions: Collection[str] = ALL_POST_FILTERS,
) -> list[Candidate]:
    """Drop candidates that fail any of the requested filter *dimensions*.

    Relative order of the survivors is preserved.

    Args:
        candidates: One fetched page, in provider relevance order.
        filters: The search filters the caller asked for.
        dimensions: Names of the filter fields to apply in memory; see
            ``ALL_POST_FILTERS``.
    """
    result = candidates
    for name, predicate in _build_predicates(filters, dimensions):
        before = len(result)
        result = [c for c in result if predicate(c)]
        if len(result) != before:
            logger.debug("Post-filter %s dropped %d of %d candidates", name, before - len(result), before)
    return result
