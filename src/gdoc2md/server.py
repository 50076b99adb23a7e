#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Flask application serving converted Google Docs.

Routes
------
- ``GET /api/service-email``: the service account address documents must be
  shared with.
- ``GET /api/content?docId=<id>``: the converted document as JSON, fetched
  through the cache. The configured default document is used when ``docId``
  is omitted.
- ``GET /<path>``: a Google Docs URL anywhere in the path redirects to the
  clean ``/<id>``; paths under ``api/`` or with a file extension are served
  from the static directory; everything else gets the ``index.html`` shell,
  which loads the document client-side.

Usage:
    gdoc2md serve --port 50400 --credentials ./credentials.json

"""

from __future__ import annotations

import logging
import re
from typing import Optional

from flask import Flask, abort, jsonify, redirect, request, send_from_directory

from gdoc2md.cache import ContentCache, DocumentService
from gdoc2md.config import ServerConfig
from gdoc2md.constants import DOCUMENT_ID_PATTERN, DOCUMENT_URL_PATTERN
from gdoc2md.exceptions import Gdoc2MdError
from gdoc2md.fetch import GoogleDocsClient, load_service_email

logger = logging.getLogger(__name__)

_DOCUMENT_ID_RE = re.compile(DOCUMENT_ID_PATTERN)
_DOCUMENT_URL_RE = re.compile(DOCUMENT_URL_PATTERN)

SERVICE_EMAIL_ERROR = "Error loading service email"


def extract_document_id(path: str) -> tuple[Optional[str], bool]:
    """Extract a document id from a request path.

    Parameters
    ----------
    path : str
        Request path without the leading slash. May be a bare id or a full or
        partial Google Docs URL.

    Returns
    -------
    tuple[str or None, bool]
        The document id, or None if the path holds none, and whether the
        client should be redirected to the clean ``/<id>`` form.

    Examples
    --------
        >>> extract_document_id("docs.google.com/document/d/abc123/edit")
        ('abc123', True)
        >>> extract_document_id("1hfLONQb1TJdHQ5Sm044gvi9UJtzhjlOMiXVymwFQgmA")
        ('1hfLONQb1TJdHQ5Sm044gvi9UJtzhjlOMiXVymwFQgmA', False)

    """
    match = _DOCUMENT_URL_RE.search(path)
    if match:
        return match.group(1), True
    if _DOCUMENT_ID_RE.match(path):
        return path, False
    return None, False


def create_document_service(config: ServerConfig) -> DocumentService:
    """Wire a Google Docs client and a cache into a DocumentService."""
    client = GoogleDocsClient.from_service_account_file(config.credentials_path)
    return DocumentService(client.fetch_document, ContentCache(ttl_seconds=config.cache_ttl_seconds))


def create_app(
    config: Optional[ServerConfig] = None,
    service: Optional[DocumentService] = None,
    service_email: Optional[str] = None,
) -> Flask:
    """Create the Flask application.

    Parameters
    ----------
    config : ServerConfig, optional
        Server configuration. Defaults are used if None.
    service : DocumentService, optional
        Source of converted content. Built from ``config`` if None.
    service_email : str, optional
        Address reported by ``/api/service-email``. Read from the credentials
        file if None.

    Returns
    -------
    Flask
        The configured application.

    """
    config = config or ServerConfig()
    service = service or create_document_service(config)
    if service_email is None:
        service_email = load_service_email(config.credentials_path) or SERVICE_EMAIL_ERROR

    static_dir = str(config.static_dir)
    app = Flask(__name__, static_folder=None)
    app.config["GDOC2MD"] = config

    @app.get("/api/service-email")
    def get_service_email():
        logger.info("Service email requested")
        return jsonify({"email": service_email})

    @app.get("/api/content")
    def get_content():
        doc_id = request.args.get("docId") or config.default_doc_id
        try:
            entry = service.get_content(doc_id)
        except Gdoc2MdError as e:
            logger.exception("Error serving content for %s", doc_id)
            return jsonify({"error": "Failed to fetch document", "message": e.message}), 500
        return jsonify(entry.to_dict())

    @app.get("/")
    def index():
        return send_from_directory(static_dir, "index.html")

    @app.get("/<path:doc_path>")
    def serve_path(doc_path: str):
        doc_id, needs_redirect = extract_document_id(doc_path)
        if doc_id and needs_redirect:
            return redirect(f"/{doc_id}")

        if doc_path.startswith("api/"):
            abort(404)
        if doc_id is None and "." in doc_path:
            return send_from_directory(static_dir, doc_path)

        return send_from_directory(static_dir, "index.html")

    return app


def run_server(config: ServerConfig) -> None:
    """Run the development server until interrupted."""
    app = create_app(config)
    logger.info("Server running at http://%s:%d", config.host, config.port)
    logger.info("Default document ID: %s", config.default_doc_id)
    app.run(host=config.host, port=config.port)


__all__ = ["create_app", "create_document_service", "extract_document_id", "run_server"]
