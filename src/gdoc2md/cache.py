#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Converted-content cache and the fetch/convert service built on it.

The converter is a pure function. Freshness is decided here: a cached entry
older than the configured time-to-live is refetched and reconverted on the
next request. Fetch failures propagate unchanged and leave the previous entry
in place.
"""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable, Optional

from gdoc2md.constants import DEFAULT_CACHE_TTL_SECONDS
from gdoc2md.converter import convert
from gdoc2md.document import Document
from gdoc2md.options import ConversionOptions

logger = logging.getLogger(__name__)

DocumentFetcher = Callable[[str], Document]


@dataclass(frozen=True)
class CachedContent:
    """A converted document as stored in the cache.

    Attributes
    ----------
    title : str
        Document title.
    content : str
        Markdown body.
    doc_id : str
        Document id the entry is keyed by.
    fetched_at : float
        Clock reading, in seconds, when the entry was stored.

    """

    title: str
    content: str
    doc_id: str
    fetched_at: float

    @property
    def last_update(self) -> datetime:
        """Time the entry was stored, as an aware UTC datetime."""
        return datetime.fromtimestamp(self.fetched_at, tz=timezone.utc)

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON shape served by the content endpoint."""
        return {
            "title": self.title,
            "content": self.content,
            "docId": self.doc_id,
            "lastUpdate": self.last_update.isoformat(),
        }


class ContentCache:
    """Thread-safe mapping of document id to converted content.

    Parameters
    ----------
    ttl_seconds : float, default 300
        Age after which an entry is stale.
    clock : callable, default time.time
        Source of the current time in seconds.

    """

    def __init__(self, ttl_seconds: float = DEFAULT_CACHE_TTL_SECONDS, clock: Callable[[], float] = time.time):
        if ttl_seconds <= 0:
            raise ValueError(f"ttl_seconds must be positive, got {ttl_seconds}")
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: dict[str, CachedContent] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def now(self) -> float:
        """Current clock reading."""
        return self._clock()

    def get(self, doc_id: str) -> Optional[CachedContent]:
        """Return the entry for ``doc_id``, fresh or stale, or None."""
        with self._lock:
            return self._entries.get(doc_id)

    def set(self, doc_id: str, title: str, content: str) -> CachedContent:
        """Store converted content for ``doc_id`` stamped with the current time."""
        entry = CachedContent(title=title, content=content, doc_id=doc_id, fetched_at=self._clock())
        with self._lock:
            self._entries[doc_id] = entry
        return entry

    def is_fresh(self, entry: Optional[CachedContent]) -> bool:
        """Whether ``entry`` exists and is younger than the time-to-live."""
        return entry is not None and (self._clock() - entry.fetched_at) <= self.ttl_seconds

    def invalidate(self, doc_id: str) -> None:
        """Drop the entry for ``doc_id`` if present."""
        with self._lock:
            self._entries.pop(doc_id, None)

    def clear(self) -> None:
        """Drop every entry."""
        with self._lock:
            self._entries.clear()


class DocumentService:
    """Serve converted documents, refetching when the cached copy is stale.

    Parameters
    ----------
    fetcher : callable
        Takes a document id and returns a parsed :class:`Document`. Typically
        ``GoogleDocsClient.fetch_document``.
    cache : ContentCache, optional
        Cache to use. A new one with the default time-to-live if omitted.
    options : ConversionOptions, optional
        Options passed to every conversion.

    """

    def __init__(
        self,
        fetcher: DocumentFetcher,
        cache: Optional[ContentCache] = None,
        options: Optional[ConversionOptions] = None,
    ) -> None:
        self.fetcher = fetcher
        self.cache = cache if cache is not None else ContentCache()
        self.options = options or ConversionOptions()

    def refresh(self, doc_id: str) -> CachedContent:
        """Fetch and convert ``doc_id`` unconditionally, then cache the result."""
        document = self.fetcher(doc_id)
        result = convert(document, self.options)
        return self.cache.set(doc_id, result.title, result.content)

    def get_content(self, doc_id: str) -> CachedContent:
        """Return converted content for ``doc_id``.

        Raises
        ------
        FetchError
            Propagated from the fetcher when a refresh is needed and fails.

        """
        entry = self.cache.get(doc_id)
        logger.info("Content requested for document %s (cache hit: %s)", doc_id, entry is not None)

        if self.cache.is_fresh(entry):
            return entry  # type: ignore[return-value]

        logger.info("Fetching fresh content for %s", doc_id)
        return self.refresh(doc_id)


__all__ = ["CachedContent", "ContentCache", "DocumentFetcher", "DocumentService"]
