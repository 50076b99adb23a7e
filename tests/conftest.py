"""Pytest configuration and shared fixtures for the gdoc2md test suite."""

import logging
from typing import Optional

import pytest
from utils import load_fixture

from gdoc2md.cache import ContentCache, DocumentService
from gdoc2md.document import Document
from gdoc2md.exceptions import DocumentNotFoundError
from gdoc2md.ingest import parse_document
from gdoc2md.logging_utils import LIBRARY_LOGGERS


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests - fast, isolated component tests")
    config.addinivalue_line("markers", "integration: Integration tests - component interaction tests")
    config.addinivalue_line("markers", "cli: Tests related to command-line interface")


class FakeClock:
    """Manually advanced clock for cache tests."""

    def __init__(self, start: float = 1_700_000_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class StubFetcher:
    """Document fetcher serving in-memory payloads and counting calls."""

    def __init__(self, documents: Optional[dict[str, dict]] = None, error: Optional[Exception] = None):
        self.documents = documents or {}
        self.error = error
        self.calls: list[str] = []

    def __call__(self, doc_id: str) -> Document:
        self.calls.append(doc_id)
        if self.error is not None:
            raise self.error
        if doc_id not in self.documents:
            raise DocumentNotFoundError(doc_id)
        return parse_document(self.documents[doc_id])


@pytest.fixture
def sample_payload() -> dict:
    """Docs API response covering headings, lists, code, links and a table."""
    return load_fixture("sample_document.json")


@pytest.fixture
def fake_clock() -> FakeClock:
    """Provide a controllable clock."""
    return FakeClock()


@pytest.fixture
def stub_fetcher(sample_payload) -> StubFetcher:
    """Fetcher that knows the sample document under the id ``sample-doc``."""
    return StubFetcher({"sample-doc": sample_payload})


@pytest.fixture
def document_service(stub_fetcher, fake_clock) -> DocumentService:
    """DocumentService backed by the stub fetcher and the fake clock."""
    return DocumentService(stub_fetcher, ContentCache(ttl_seconds=300, clock=fake_clock))


@pytest.fixture
def restore_logging():
    """Restore root logger handlers and level changed by configure_logging."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    library_levels = {name: logging.getLogger(name).level for name in LIBRARY_LOGGERS}
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)
    for name, library_level in library_levels.items():
        logging.getLogger(name).setLevel(library_level)
