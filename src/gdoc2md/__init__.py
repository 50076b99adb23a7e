"""gdoc2md - Google Docs to Markdown conversion.

gdoc2md renders the document tree returned by the Google Docs API into
Markdown. The conversion engine is a pure function over an immutable document
model; around it sit an API client, a time-based result cache and a small
Flask server that serves converted documents as JSON.

Key Features
------------
- Headings, ordered and unordered lists with running numbering
- Bold, italic, strikethrough and links
- Heuristic code detection (code font or highlighted background) with
  fenced blocks and PowerShell language tagging
- Pipe tables

Examples
--------
Converting a saved API response:

    >>> import json
    >>> from gdoc2md import convert_json
    >>> with open("document.json", encoding="utf-8") as f:
    ...     result = convert_json(json.load(f))
    >>> print(result.content)

Fetching and converting a live document:

    >>> from gdoc2md import GoogleDocsClient, convert
    >>> with GoogleDocsClient.from_service_account_file("credentials.json") as client:
    ...     result = convert(client.fetch_document("1hfLONQb1TJdHQ5Sm044gvi9UJtzhjlOMiXVymwFQgmA"))

"""

#  Copyright (c) 2025 Tom Villani, Ph.D.

__version__ = "1.0.0"

from gdoc2md.converter import RenderState, convert, convert_json
from gdoc2md.document import (
    Bullet,
    ConversionResult,
    Document,
    ListKind,
    Paragraph,
    ParagraphStyle,
    RgbColor,
    Table,
    TableCell,
    TableRow,
    TextRun,
    TextStyle,
)
from gdoc2md.exceptions import (
    AuthenticationError,
    ConfigurationError,
    DocumentNotFoundError,
    FetchError,
    Gdoc2MdError,
    InputError,
)
from gdoc2md.fetch import GoogleDocsClient
from gdoc2md.ingest import parse_document
from gdoc2md.options import ConversionOptions

__all__ = [
    "__version__",
    "AuthenticationError",
    "Bullet",
    "ConfigurationError",
    "ConversionOptions",
    "ConversionResult",
    "Document",
    "DocumentNotFoundError",
    "FetchError",
    "Gdoc2MdError",
    "GoogleDocsClient",
    "InputError",
    "ListKind",
    "Paragraph",
    "ParagraphStyle",
    "RenderState",
    "RgbColor",
    "Table",
    "TableCell",
    "TableRow",
    "TextRun",
    "TextStyle",
    "convert",
    "convert_json",
    "parse_document",
]
