#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Google Docs API client.

Documents are fetched from the Docs REST API with ``httpx``. Access tokens
come from a service account key file through ``google-auth``. The client
never retries: every failure is raised as a
:class:`~gdoc2md.exceptions.FetchError` subclass and left to the caller.

Examples
--------
    >>> client = GoogleDocsClient.from_service_account_file("credentials.json")
    >>> document = client.fetch_document("1hfLONQb1TJdHQ5Sm044gvi9UJtzhjlOMiXVymwFQgmA")
    >>> document.title
    'Release notes'

"""

from __future__ import annotations

import json
import logging
import threading
from pathlib import Path
from typing import Any, Callable, Optional, Sequence

import httpx
from google.auth.exceptions import GoogleAuthError
from google.auth.transport.requests import Request
from google.oauth2 import service_account

from gdoc2md.constants import DEFAULT_FETCH_TIMEOUT, DEFAULT_USER_AGENT, GOOGLE_DOCS_API_URL, GOOGLE_DOCS_SCOPES
from gdoc2md.document import Document
from gdoc2md.exceptions import AuthenticationError, DocumentNotFoundError, FetchError
from gdoc2md.ingest import parse_document
from gdoc2md.options import ConversionOptions

logger = logging.getLogger(__name__)

TokenProvider = Callable[[], str]


def load_service_email(credentials_path: str | Path) -> Optional[str]:
    """Read the service account e-mail from a key file.

    Users share documents with this address so the service can read them.
    Returns None, after logging the problem, when the file cannot be read.
    """
    try:
        with open(credentials_path, encoding="utf-8") as f:
            credentials = json.load(f)
    except (OSError, ValueError) as e:
        logger.error("Error loading credentials file %s: %s", credentials_path, e)
        return None

    email = credentials.get("client_email") if isinstance(credentials, dict) else None
    if email:
        logger.info("Loaded service email: %s", email)
    return email


class ServiceAccountTokenProvider:
    """Produce OAuth access tokens for a service account key file.

    Credentials are loaded on first use and refreshed whenever the cached
    token is no longer valid.

    Parameters
    ----------
    credentials_path : str or Path
        Path to the service account JSON key.
    scopes : sequence of str
        OAuth scopes to request.

    """

    def __init__(self, credentials_path: str | Path, scopes: Sequence[str] = GOOGLE_DOCS_SCOPES) -> None:
        self.credentials_path = Path(credentials_path)
        self.scopes = tuple(scopes)
        self._credentials: Optional[service_account.Credentials] = None
        self._lock = threading.Lock()

    def _load_credentials(self) -> service_account.Credentials:
        try:
            return service_account.Credentials.from_service_account_file(
                str(self.credentials_path), scopes=list(self.scopes)
            )
        except (OSError, ValueError) as e:
            raise AuthenticationError(
                f"Could not load service account credentials from {self.credentials_path}: {e}",
                original_error=e,
            ) from e

    def __call__(self) -> str:
        """Return a valid access token, refreshing it if needed."""
        with self._lock:
            if self._credentials is None:
                self._credentials = self._load_credentials()
            if not self._credentials.valid:
                try:
                    self._credentials.refresh(Request())
                except GoogleAuthError as e:
                    raise AuthenticationError(f"Could not refresh access token: {e}", original_error=e) from e
            return self._credentials.token


class GoogleDocsClient:
    """Fetch Google Docs documents over the Docs REST API.

    Parameters
    ----------
    token_provider : callable
        Zero-argument callable returning a bearer token.
    http_client : httpx.Client, optional
        Client used for requests. One is created, and owned, if omitted.
    base_url : str
        Documents endpoint, without a trailing slash.
    timeout : float
        Request timeout in seconds for the owned client.

    """

    def __init__(
        self,
        token_provider: TokenProvider,
        http_client: Optional[httpx.Client] = None,
        base_url: str = GOOGLE_DOCS_API_URL,
        timeout: float = DEFAULT_FETCH_TIMEOUT,
    ) -> None:
        self.token_provider = token_provider
        self.base_url = base_url.rstrip("/")
        self._owns_client = http_client is None
        self._client = http_client or httpx.Client(timeout=timeout, headers={"User-Agent": DEFAULT_USER_AGENT})

    @classmethod
    def from_service_account_file(cls, credentials_path: str | Path, **kwargs: Any) -> "GoogleDocsClient":
        """Create a client authenticated with a service account key file."""
        return cls(ServiceAccountTokenProvider(credentials_path), **kwargs)

    def close(self) -> None:
        """Close the underlying HTTP client if this instance created it."""
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> "GoogleDocsClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def fetch_document_json(self, document_id: str) -> dict[str, Any]:
        """Fetch the raw document resource.

        Parameters
        ----------
        document_id : str
            Google Docs document id.

        Returns
        -------
        dict
            Decoded JSON document resource.

        Raises
        ------
        AuthenticationError
            If credentials cannot be obtained or the API answers 401/403.
        DocumentNotFoundError
            If the API answers 404.
        FetchError
            For any other HTTP or transport failure, or an undecodable body.

        """
        if not document_id:
            raise FetchError("A document id is required", document_id=document_id)

        url = f"{self.base_url}/{document_id}"
        token = self.token_provider()
        logger.info("Fetching document from Google: %s", document_id)

        try:
            response = self._client.get(url, headers={"Authorization": f"Bearer {token}"})
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            if status == 404:
                raise DocumentNotFoundError(document_id, status_code=status, original_error=e) from e
            if status in (401, 403):
                raise AuthenticationError(
                    f"Access to document {document_id} was denied (HTTP {status})",
                    document_id=document_id,
                    status_code=status,
                    original_error=e,
                ) from e
            raise FetchError(
                f"Google Docs API returned HTTP {status} for {document_id}",
                document_id=document_id,
                status_code=status,
                original_error=e,
            ) from e
        except httpx.HTTPError as e:
            raise FetchError(
                f"Request for document {document_id} failed: {e}", document_id=document_id, original_error=e
            ) from e

        try:
            payload = response.json()
        except ValueError as e:
            raise FetchError(
                f"Google Docs API returned invalid JSON for {document_id}",
                document_id=document_id,
                status_code=response.status_code,
                original_error=e,
            ) from e

        logger.info("Received document from Google: %s", payload.get("title") if isinstance(payload, dict) else None)
        return payload

    def fetch_document(self, document_id: str, options: ConversionOptions | None = None) -> Document:
        """Fetch a document and parse it into the document model."""
        return parse_document(self.fetch_document_json(document_id), options)


__all__ = ["GoogleDocsClient", "ServiceAccountTokenProvider", "TokenProvider", "load_service_email"]
