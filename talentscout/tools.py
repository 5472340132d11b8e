"""Tool handlers: validate call arguments, run the operation, shape output.

Each tool pairs a pydantic input model with an async handler.
:func:`call_tool` is the single entry point used by every transport: it
never raises, and reports failures as ``{"success": False, "error": ...}``.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import Any, Literal

import httpx
from pydantic import BaseModel, Field, ValidationError

from .bookmark_store import BookmarkStore
from .errors import TalentScoutError
from .export import (
    bookmarks_to_csv,
    bookmarks_to_json,
    candidate_row,
    candidates_to_csv,
    candidates_to_json,
)
from .models import BookmarkedCandidate, Candidate, SearchFilters
from .proxycurl_provider import ProxycurlProvider
from .search_provider import ProviderSelector

logger = logging.getLogger(__name__)


@dataclass
class ToolContext:
    """State shared by all tool calls of one process."""

    selector: ProviderSelector = field(default_factory=ProviderSelector)
    store: BookmarkStore = field(default_factory=BookmarkStore)
    last_search_results: list[Candidate] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Input models
# ---------------------------------------------------------------------------


class SearchCandidatesInput(SearchFilters):
    """Structured candidate-search filters."""


class GetCandidateDetailsInput(BaseModel):
    source_id: str = Field(min_length=1, description="Public identifier / member id, or a full profile URL")


class BookmarkCandidateInput(BaseModel):
    candidate: Candidate = Field(description="The candidate object from search results")
    notes: str | None = Field(default=None, description="Optional notes about this candidate")
    tags: list[str] | None = Field(default=None, description="Optional tags, e.g. ['shortlist', 'java-expert']")


class UpdateBookmarkInput(BaseModel):
    source_id: str = Field(min_length=1)
    notes: str | None = Field(default=None, description="New notes (replaces existing)")
    tags: list[str] | None = Field(default=None, description="New tags (replaces existing)")


class RemoveBookmarkInput(BaseModel):
    source_id: str = Field(min_length=1)


class ListBookmarksInput(BaseModel):
    tags: list[str] | None = Field(default=None, description="Keep candidates with any of these tags")
    search_query: str | None = Field(default=None, description="Search name, title, company, skills, notes, tags")


class ExportCandidatesInput(BaseModel):
    format: Literal["json", "csv"]
    source: Literal["last_search", "bookmarks"] = Field(
        description="'last_search' for the most recent search results, 'bookmarks' for saved candidates"
    )
    bookmark_tags: list[str] | None = Field(
        default=None, description="When source is 'bookmarks', only export candidates with any of these tags"
    )


class NoInput(BaseModel):
    pass


# ---------------------------------------------------------------------------
# Output shaping
# ---------------------------------------------------------------------------


def _bookmark_row(b: BookmarkedCandidate, index: int) -> dict:
    return {
        "index": index,
        "source_id": b.source_id,
        "full_name": b.full_name,
        "current_title": b.current_title,
        "current_company": b.current_company,
        "location": b.location,
        "experience_years": b.experience_years,
        "skills": b.skills,
        "profile_url": b.profile_url,
        "seniority_level": b.seniority_level,
        "notes": b.notes,
        "tags": b.tags,
        "bookmarked_at": b.bookmarked_at.isoformat(),
    }


# ---------------------------------------------------------------------------
# Handlers
# ---------------------------------------------------------------------------


async def search_candidates(context: ToolContext, params: SearchCandidatesInput) -> dict:
    provider = context.selector.get_provider()
    result = await provider.search_candidates(SearchFilters.model_validate(params.model_dump()))
    context.last_search_results = list(result.candidates)

    return {
        "candidates": [{"index": i, **candidate_row(c)} for i, c in enumerate(result.candidates, 1)],
        "pagination": {
            "next_cursor": result.pagination.next_cursor,
            "has_more": result.pagination.has_more,
            "total_estimated": result.pagination.total_estimated,
        },
        "meta": result.meta.model_dump(),
    }


async def get_candidate_details(context: ToolContext, params: GetCandidateDetailsInput) -> dict:
    provider = context.selector.get_provider()
    candidate = await provider.get_candidate_details(params.source_id)
    if candidate is None:
        return {"found": False, "source_id": params.source_id, "message": "Candidate not found"}
    return {"found": True, **candidate.model_dump(mode="json")}


async def bookmark_candidate(context: ToolContext, params: BookmarkCandidateInput) -> dict:
    bookmark = context.store.add_bookmark(params.candidate, params.notes, params.tags)
    return {
        "message": f"Bookmarked {bookmark.full_name}",
        "bookmark": {
            "source_id": bookmark.source_id,
            "full_name": bookmark.full_name,
            "bookmarked_at": bookmark.bookmarked_at.isoformat(),
            "notes": bookmark.notes,
            "tags": bookmark.tags,
        },
    }


async def update_bookmark(context: ToolContext, params: UpdateBookmarkInput) -> dict:
    bookmark = context.store.update_bookmark(params.source_id, notes=params.notes, tags=params.tags)
    if bookmark is None:
        return {"updated": False, "message": "Candidate not found in bookmarks"}
    return {
        "updated": True,
        "message": "Bookmark updated",
        "bookmark": {
            "source_id": bookmark.source_id,
            "full_name": bookmark.full_name,
            "notes": bookmark.notes,
            "tags": bookmark.tags,
        },
    }


async def remove_bookmark(context: ToolContext, params: RemoveBookmarkInput) -> dict:
    removed = context.store.remove_bookmark(params.source_id)
    return {
        "removed": removed,
        "message": "Candidate removed from bookmarks" if removed else "Candidate was not in bookmarks",
    }


async def list_bookmarks(context: ToolContext, params: ListBookmarksInput) -> dict:
    bookmarks = context.store.list_bookmarks(tags=params.tags, query=params.search_query)
    return {
        "count": len(bookmarks),
        "bookmarks": [_bookmark_row(b, i) for i, b in enumerate(bookmarks, 1)],
    }


async def get_bookmark_tags(context: ToolContext, params: NoInput) -> dict:
    tags = context.store.all_tags()
    return {"tags": tags, "count": len(tags)}


async def export_candidates(context: ToolContext, params: ExportCandidatesInput) -> dict:
    if params.source == "bookmarks":
        bookmarks = context.store.list_bookmarks(tags=params.bookmark_tags)
        count = len(bookmarks)
        data = bookmarks_to_json(bookmarks) if params.format == "json" else bookmarks_to_csv(bookmarks)
    else:
        candidates = context.last_search_results
        count = len(candidates)
        data = candidates_to_json(candidates) if params.format == "json" else candidates_to_csv(candidates)

    return {
        "format": params.format,
        "source": params.source,
        "count": count,
        "data": data,
        "message": f"Exported {count} candidates as {params.format.upper()}",
    }


async def get_provider_status(context: ToolContext, params: NoInput) -> dict:
    active = context.selector.active_provider_type()

    credit_balance: int | None = None
    active_status = None
    try:
        provider = context.selector.get_provider()
        if isinstance(provider, ProxycurlProvider):
            credit_balance = await provider.get_credit_balance()
        active_status = provider.get_status()
    except (TalentScoutError, httpx.HTTPError, KeyError, ValueError) as exc:
        logger.warning("Could not read usage for %s provider: %s", active, exc)

    providers = []
    for status in context.selector.all_statuses():
        entry: dict[str, Any] = {
            "name": status.provider,
            "configured": status.configured,
            "is_active": status.provider == active,
            "message": status.message,
        }
        if active_status is not None and status.provider == active:
            entry["rate_limit_remaining"] = active_status.rate_limit_remaining
            entry["rate_limit_reset"] = active_status.rate_limit_reset
        providers.append(entry)

    return {
        "active_provider": active,
        "credit_balance": credit_balance,
        "providers": providers,
        "usage_notes": {
            "proxycurl": {
                "cost_per_search_result": "3 credits",
                "cost_per_profile_detail": "1 credit",
                "cost_per_role_lookup": "3 credits",
                "signup_url": "https://nubela.co/proxycurl",
            },
            "linkedin": {
                "requirement": "LinkedIn Talent Solutions API partnership",
                "note": "Requires enterprise agreement with LinkedIn",
            },
        },
        "switch_provider_instruction": "Set the DATA_PROVIDER environment variable to 'linkedin' or 'proxycurl'",
    }


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------

Handler = Callable[[ToolContext, Any], Awaitable[dict]]


@dataclass(frozen=True)
class Tool:
    name: str
    description: str
    input_model: type[BaseModel]
    handler: Handler

    def input_schema(self) -> dict:
        return self.input_model.model_json_schema()


TOOLS: dict[str, Tool] = {
    tool.name: tool
    for tool in (
        Tool(
            "search_candidates",
            "Search for candidates by titles, locations, skills, experience, seniority, companies, "
            "industries and keywords. Use the cursor from a previous result to fetch the next page.",
            SearchCandidatesInput,
            search_candidates,
        ),
        Tool(
            "get_candidate_details",
            "Fetch full work history, education, skills, certifications and languages for one "
            "candidate, by source_id or profile URL.",
            GetCandidateDetailsInput,
            get_candidate_details,
        ),
        Tool(
            "bookmark_candidate",
            "Save a candidate to your bookmarks with optional notes and tags. "
            "Saving the same candidate again replaces its notes and tags.",
            BookmarkCandidateInput,
            bookmark_candidate,
        ),
        Tool(
            "update_bookmark",
            "Replace the notes and/or tags of a bookmarked candidate.",
            UpdateBookmarkInput,
            update_bookmark,
        ),
        Tool("remove_bookmark", "Remove a candidate from your bookmarks.", RemoveBookmarkInput, remove_bookmark),
        Tool(
            "list_bookmarks",
            "List bookmarked candidates, newest first, optionally filtered by tags or a search query.",
            ListBookmarksInput,
            list_bookmarks,
        ),
        Tool("get_bookmark_tags", "List all tags used across bookmarks.", NoInput, get_bookmark_tags),
        Tool(
            "export_candidates",
            "Export the last search results or your bookmarks as JSON or CSV text.",
            ExportCandidatesInput,
            export_candidates,
        ),
        Tool(
            "get_provider_status",
            "Show which data provider is active, whether each provider is configured, "
            "and the remaining Proxycurl credit balance.",
            NoInput,
            get_provider_status,
        ),
    )
}


def list_tools() -> list[dict]:
    return [{"name": t.name, "description": t.description, "input_schema": t.input_schema()} for t in TOOLS.values()]


async def call_tool(context: ToolContext, name: str, arguments: dict | None = None) -> dict:
    """Validate *arguments*, run tool *name* and wrap the outcome.

    Returns ``{"success": True, "result": ...}`` or
    ``{"success": False, "error": "<message>"}``; never raises.
    """
    tool = TOOLS.get(name)
    if tool is None:
        return {"success": False, "error": f"Unknown tool: {name}"}

    try:
        params = tool.input_model.model_validate(arguments or {})
    except ValidationError as exc:
        logger.warning("Rejected %s call: %s", name, exc)
        return {"success": False, "error": f"Invalid input for {name}: {exc}"}

    try:
        result = await tool.handler(context, params)
    except TalentScoutError as exc:
        logger.warning("Tool %s failed: %s", name, exc)
        return {"success": False, "error": str(exc)}
    except Exception as exc:
        logger.exception("Tool %s failed unexpectedly", name)
        return {"success": False, "error": str(exc) or type(exc).__name__}

    return {"success": True, "result": result}
