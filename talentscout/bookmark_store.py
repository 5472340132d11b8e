"""JSON file store for bookmarked candidates.

The whole document is read, changed in memory and written back on every
mutation.  There is no locking: two concurrent writers can lose an update
(last writer wins).  Fine for one user in one process.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path

from pydantic import ValidationError

from .config import bookmarks_path
from .models import BookmarkDocument, BookmarkedCandidate, Candidate

logger = logging.getLogger(__name__)

_CANDIDATE_FIELDS = set(Candidate.model_fields)


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _search_text(bookmark: BookmarkedCandidate) -> str:
    parts = [
        bookmark.full_name,
        bookmark.current_title,
        bookmark.current_company,
        bookmark.headline,
        bookmark.notes,
        *(bookmark.skills or []),
        *(bookmark.tags or []),
    ]
    return " ".join(p for p in parts if p).lower()


class BookmarkStore:
    """Bookmarks persisted as a single JSON document."""

    def __init__(self, path: Path | None = None):
        self.path = path or bookmarks_path()

    # ------------------------------------------------------------------
    # helpers
    # ------------------------------------------------------------------

    def _load(self) -> BookmarkDocument:
        if not self.path.exists():
            return BookmarkDocument()
        try:
            return BookmarkDocument.model_validate(json.loads(self.path.read_text(encoding="utf-8")))
        except (json.JSONDecodeError, OSError, ValidationError) as exc:
            logger.warning("Ignoring unreadable bookmark file %s: %s", self.path, exc)
            return BookmarkDocument()

    def _save(self, document: BookmarkDocument) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        document.last_updated = _now()
        self.path.write_text(
            json.dumps(document.model_dump(mode="json"), indent=2, ensure_ascii=False),
            encoding="utf-8",
        )

    @staticmethod
    def _bookmark(candidate: Candidate, notes: str | None, tags: list[str] | None) -> BookmarkedCandidate:
        return BookmarkedCandidate(**candidate.model_dump(), bookmarked_at=_now(), notes=notes, tags=tags)

    # ------------------------------------------------------------------
    # mutations
    # ------------------------------------------------------------------

    def add_bookmark(
        self,
        candidate: Candidate,
        notes: str | None = None,
        tags: list[str] | None = None,
    ) -> BookmarkedCandidate:
        """Save *candidate*, replacing any bookmark with the same source id.

        ``bookmarked_at`` is stamped on every call; notes and tags replace
        whatever was stored before.  Profile fields the new snapshot leaves
        unset keep their stored values.
        """
        snapshot = Candidate(**candidate.model_dump(include=_CANDIDATE_FIELDS))

        document = self._load()
        for i, existing in enumerate(document.bookmarks):
            if existing.source_id == candidate.source_id:
                stored = Candidate(**existing.model_dump(include=_CANDIDATE_FIELDS))
                bookmark = self._bookmark(stored.merge(snapshot), notes, tags)
                document.bookmarks[i] = bookmark
                break
        else:
            bookmark = self._bookmark(snapshot, notes, tags)
            document.bookmarks.append(bookmark)

        self._save(document)
        logger.debug("Bookmarked %s", candidate.source_id)
        return bookmark

    def remove_bookmark(self, source_id: str) -> bool:
        """Delete the bookmark for *source_id*. Returns False if there was none."""
        document = self._load()
        remaining = [b for b in document.bookmarks if b.source_id != source_id]
        if len(remaining) == len(document.bookmarks):
            return False
        document.bookmarks = remaining
        self._save(document)
        return True

    def update_bookmark(
        self,
        source_id: str,
        notes: str | None = None,
        tags: list[str] | None = None,
    ) -> BookmarkedCandidate | None:
        """Replace the notes and/or tags of an existing bookmark.

        Only the arguments that are given are replaced.  Returns None when
        *source_id* is not bookmarked.
        """
        document = self._load()
        for bookmark in document.bookmarks:
            if bookmark.source_id == source_id:
                if notes is not None:
                    bookmark.notes = notes
                if tags is not None:
                    bookmark.tags = tags
                self._save(document)
                return bookmark
        return None

    # ------------------------------------------------------------------
    # queries
    # ------------------------------------------------------------------

    def list_bookmarks(
        self,
        tags: list[str] | None = None,
        query: str | None = None,
    ) -> list[BookmarkedCandidate]:
        """Return bookmarks, newest first.

        Args:
            tags: Keep bookmarks carrying any of these tags.
            query: Case-insensitive substring matched against name, title,
                company, headline, notes, skills and tags.
        """
        bookmarks = self._load().bookmarks

        if tags:
            wanted = set(tags)
            bookmarks = [b for b in bookmarks if wanted.intersection(b.tags or [])]

        if query:
            needle = query.lower()
            bookmarks = [b for b in bookmarks if needle in _search_text(b)]

        return sorted(bookmarks, key=lambda b: b.bookmarked_at, reverse=True)

    def get_bookmark(self, source_id: str) -> BookmarkedCandidate | None:
        for bookmark in self._load().bookmarks:
            if bookmark.source_id == source_id:
                return bookmark
        return None

    def is_bookmarked(self, source_id: str) -> bool:
        return self.get_bookmark(source_id) is not None

    def all_tags(self) -> list[str]:
        """Sorted unique tags across all bookmarks."""
        return sorted({tag for b in self._load().bookmarks for tag in (b.tags or [])})
