#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Constants and default values for the gdoc2md library.

This module centralizes the defaults used by the converter, the Google Docs
client, the result cache and the HTTP layer so they can be shared between the
options classes, the CLI and the tests.
"""

from __future__ import annotations

# Code detection heuristics
DEFAULT_CODE_FONT_FAMILY = "Consolas"
DEFAULT_CODE_BACKGROUND_RED_THRESHOLD = 0.9
DEFAULT_CODE_LANGUAGE_HINTS: tuple[str, ...] = ("powershell",)

# Unordered bullet glyphs. The second entry is the UTF-8 encoding of the
# black circle decoded as cp1252, which is how the glyph arrives from some
# exports.
DEFAULT_UNORDERED_GLYPH_MARKERS: tuple[str, ...] = ("●", "â—")

DEFAULT_LIST_INDENT = "  "

# Markdown tokens
CODE_FENCE = "```"
TABLE_SEPARATOR_CELL = "---"
EMPTY_TABLE_CELL = " "

# Google Docs API
GOOGLE_DOCS_API_URL = "https://docs.googleapis.com/v1/documents"
GOOGLE_DOCS_SCOPES: tuple[str, ...] = ("https://www.googleapis.com/auth/documents.readonly",)
DEFAULT_FETCH_TIMEOUT = 30.0
DEFAULT_USER_AGENT = "gdoc2md-fetcher/1.0"

# Server and cache
DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 50400
DEFAULT_DOC_ID = "1hfLONQb1TJdHQ5Sm044gvi9UJtzhjlOMiXVymwFQgmA"
DEFAULT_CREDENTIALS_PATH = "./credentials.json"
DEFAULT_CACHE_TTL_SECONDS = 5 * 60
DEFAULT_LOG_LEVEL = "INFO"

DOCUMENT_ID_PATTERN = r"^[a-zA-Z0-9_-]{25,}$"
DOCUMENT_URL_PATTERN = r"document/d/([a-zA-Z0-9_-]+)"
