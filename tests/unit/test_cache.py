"""Unit tests for the content cache and document service."""

from datetime import datetime, timezone

import pytest
from conftest import StubFetcher

from gdoc2md.cache import CachedContent, ContentCache, DocumentService
from gdoc2md.exceptions import AuthenticationError, DocumentNotFoundError, FetchError


@pytest.mark.unit
class TestContentCache:
    """Tests for ContentCache."""

    def test_empty_cache(self, fake_clock):
        cache = ContentCache(clock=fake_clock)
        assert cache.get("missing") is None
        assert not cache.is_fresh(None)
        assert len(cache) == 0

    def test_set_stamps_current_time(self, fake_clock):
        cache = ContentCache(clock=fake_clock)
        entry = cache.set("doc", "Title", "Body")
        assert entry.fetched_at == fake_clock.now
        assert cache.get("doc") == entry

    def test_entry_is_fresh_until_ttl(self, fake_clock):
        cache = ContentCache(ttl_seconds=300, clock=fake_clock)
        entry = cache.set("doc", "Title", "Body")

        fake_clock.advance(300)
        assert cache.is_fresh(entry)

        fake_clock.advance(1)
        assert not cache.is_fresh(entry)
        assert cache.get("doc") is entry

    def test_invalidate_and_clear(self, fake_clock):
        cache = ContentCache(clock=fake_clock)
        cache.set("a", "A", "a")
        cache.set("b", "B", "b")

        cache.invalidate("a")
        cache.invalidate("never-cached")
        assert cache.get("a") is None
        assert len(cache) == 1

        cache.clear()
        assert len(cache) == 0

    @pytest.mark.parametrize("ttl", [0, -5])
    def test_non_positive_ttl_rejected(self, ttl):
        with pytest.raises(ValueError, match="ttl_seconds"):
            ContentCache(ttl_seconds=ttl)


@pytest.mark.unit
class TestCachedContent:
    """Tests for the cached entry payload."""

    def test_to_dict(self):
        entry = CachedContent(title="T", content="# T", doc_id="abc", fetched_at=0.0)
        assert entry.to_dict() == {
            "title": "T",
            "content": "# T",
            "docId": "abc",
            "lastUpdate": "1970-01-01T00:00:00+00:00",
        }

    def test_last_update_is_utc(self):
        entry = CachedContent(title="", content="", doc_id="abc", fetched_at=86400.0)
        assert entry.last_update == datetime(1970, 1, 2, tzinfo=timezone.utc)


@pytest.mark.unit
class TestDocumentService:
    """Tests for fetch-on-miss and refetch-when-stale behavior."""

    def test_first_request_fetches(self, document_service, stub_fetcher):
        entry = document_service.get_content("sample-doc")

        assert stub_fetcher.calls == ["sample-doc"]
        assert entry.title == "Release Notes"
        assert entry.doc_id == "sample-doc"
        assert entry.content.startswith("# Release Notes")

    def test_fresh_entry_is_served_from_cache(self, document_service, stub_fetcher, fake_clock):
        first = document_service.get_content("sample-doc")
        fake_clock.advance(120)
        second = document_service.get_content("sample-doc")

        assert second is first
        assert stub_fetcher.calls == ["sample-doc"]

    def test_stale_entry_is_refetched(self, document_service, stub_fetcher, fake_clock):
        first = document_service.get_content("sample-doc")
        fake_clock.advance(301)
        second = document_service.get_content("sample-doc")

        assert stub_fetcher.calls == ["sample-doc", "sample-doc"]
        assert second.fetched_at > first.fetched_at
        assert second.content == first.content

    def test_refresh_ignores_freshness(self, document_service, stub_fetcher):
        document_service.get_content("sample-doc")
        document_service.refresh("sample-doc")
        assert len(stub_fetcher.calls) == 2

    def test_documents_are_cached_independently(self, sample_payload, fake_clock):
        other = dict(sample_payload, title="Other")
        fetcher = StubFetcher({"a": sample_payload, "b": other})
        service = DocumentService(fetcher, ContentCache(clock=fake_clock))

        assert service.get_content("a").title == "Release Notes"
        assert service.get_content("b").title == "Other"
        assert len(service.cache) == 2

    def test_unknown_document_propagates(self, document_service):
        with pytest.raises(DocumentNotFoundError) as exc_info:
            document_service.get_content("missing")
        assert exc_info.value.document_id == "missing"
        assert document_service.cache.get("missing") is None

    def test_failed_refetch_keeps_previous_entry(self, sample_payload, fake_clock):
        fetcher = StubFetcher({"doc": sample_payload})
        service = DocumentService(fetcher, ContentCache(ttl_seconds=10, clock=fake_clock))
        first = service.get_content("doc")

        fetcher.error = AuthenticationError("token revoked")
        fake_clock.advance(11)
        with pytest.raises(FetchError):
            service.get_content("doc")

        assert service.cache.get("doc") is first

    def test_default_cache(self, stub_fetcher):
        service = DocumentService(stub_fetcher)
        assert service.cache.ttl_seconds == 300
