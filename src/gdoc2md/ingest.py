#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Build the document model from Google Docs API JSON.

The Docs API returns a ``Document`` resource whose ``body.content`` is a list
of structural elements. This module maps the parts the converter understands
onto :mod:`gdoc2md.document` and drops the rest (section breaks, tables of
contents, inline objects). Named styles and bullet glyphs are classified
here, once, so rendering never inspects raw style strings.

Missing optional fields are never an error. Only a payload that is not a
document resource at all raises :class:`~gdoc2md.exceptions.InputError`.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, Optional

from gdoc2md.document import (
    Block,
    Bullet,
    Document,
    Paragraph,
    ParagraphStyle,
    RgbColor,
    Table,
    TableCell,
    TableRow,
    TextRun,
    TextStyle,
)
from gdoc2md.exceptions import InputError
from gdoc2md.options import ConversionOptions

logger = logging.getLogger(__name__)


def _as_mapping(value: Any) -> Mapping[str, Any]:
    return value if isinstance(value, Mapping) else {}


def _as_list(value: Any) -> list[Any]:
    return list(value) if isinstance(value, list) else []


def _parse_color(style: Mapping[str, Any]) -> Optional[RgbColor]:
    rgb = style.get("backgroundColor", {}).get("color", {}).get("rgbColor")
    if not isinstance(rgb, Mapping):
        return None
    return RgbColor(
        red=float(rgb.get("red", 0.0)),
        green=float(rgb.get("green", 0.0)),
        blue=float(rgb.get("blue", 0.0)),
    )


def parse_text_style(style: Any) -> TextStyle:
    """Convert a Docs API ``TextStyle`` object into a :class:`TextStyle`.

    The font family is read from ``weightedFontFamily.fontFamily``, falling
    back to a flat ``fontFamily`` key.
    """
    style = _as_mapping(style)
    font_family = _as_mapping(style.get("weightedFontFamily")).get("fontFamily") or style.get("fontFamily")
    link = _as_mapping(style.get("link")).get("url")
    try:
        background = _parse_color(style)
    except (AttributeError, TypeError, ValueError):
        logger.debug("Ignoring malformed background color: %r", style.get("backgroundColor"))
        background = None

    return TextStyle(
        bold=bool(style.get("bold", False)),
        italic=bool(style.get("italic", False)),
        strikethrough=bool(style.get("strikethrough", False)),
        font_family=font_family,
        background_color=background,
        link=link,
    )


def _list_glyph(lists: Mapping[str, Any], list_id: str, nesting_level: int) -> Optional[str]:
    """Look up the glyph symbol declared for a list nesting level."""
    levels = _as_list(_as_mapping(_as_mapping(lists.get(list_id)).get("listProperties")).get("nestingLevels"))
    if 0 <= nesting_level < len(levels):
        return _as_mapping(levels[nesting_level]).get("glyphSymbol")
    return None


def parse_bullet(bullet: Any, lists: Mapping[str, Any], options: ConversionOptions) -> Optional[Bullet]:
    """Convert a Docs API ``Bullet`` into a classified :class:`Bullet`.

    The glyph comes from the bullet itself when present, otherwise from the
    document's list definition for the bullet's nesting level.
    """
    if not isinstance(bullet, Mapping):
        return None

    list_id = str(bullet.get("listId", ""))
    nesting_level = max(0, int(bullet.get("nestingLevel") or 0))
    glyph = bullet.get("glyph") or _list_glyph(lists, list_id, nesting_level)

    return Bullet.from_glyph(
        list_id,
        nesting_level=nesting_level,
        glyph=glyph,
        markers=options.unordered_glyph_markers,
    )


def parse_paragraph(paragraph: Any, lists: Mapping[str, Any], options: ConversionOptions) -> Paragraph:
    """Convert a Docs API ``Paragraph`` into a :class:`Paragraph`.

    Only ``textRun`` elements become runs. A paragraph without elements
    yields a paragraph without runs, which the converter skips.
    """
    paragraph = _as_mapping(paragraph)
    runs = []
    for element in _as_list(paragraph.get("elements")):
        text_run = _as_mapping(element).get("textRun")
        if not isinstance(text_run, Mapping):
            continue
        runs.append(
            TextRun(content=str(text_run.get("content") or ""), style=parse_text_style(text_run.get("textStyle")))
        )

    named_style = _as_mapping(paragraph.get("paragraphStyle")).get("namedStyleType")

    return Paragraph(
        runs=tuple(runs),
        style=ParagraphStyle.from_named_style(named_style),
        bullet=parse_bullet(paragraph.get("bullet"), lists, options),
    )


def parse_table(table: Any, lists: Mapping[str, Any], options: ConversionOptions) -> Table:
    """Convert a Docs API ``Table``. Cells keep only their paragraphs."""
    rows = []
    for row in _as_list(_as_mapping(table).get("tableRows")):
        cells = []
        for cell in _as_list(_as_mapping(row).get("tableCells")):
            paragraphs = tuple(
                parse_paragraph(element["paragraph"], lists, options)
                for element in _as_list(_as_mapping(cell).get("content"))
                if isinstance(element, Mapping) and "paragraph" in element
            )
            cells.append(TableCell(content=paragraphs))
        rows.append(TableRow(cells=tuple(cells)))
    return Table(rows=tuple(rows))


def parse_structural_element(
    element: Any, lists: Mapping[str, Any], options: ConversionOptions | None = None
) -> Optional[Block]:
    """Convert one body element, or return None for kinds that are not rendered."""
    options = options or ConversionOptions()
    element = _as_mapping(element)
    if "paragraph" in element:
        return parse_paragraph(element["paragraph"], lists, options)
    if "table" in element:
        return parse_table(element["table"], lists, options)
    return None


def parse_document(payload: Any, options: ConversionOptions | None = None) -> Document:
    """Build a :class:`Document` from a Docs API document resource.

    Parameters
    ----------
    payload : Mapping
        Decoded JSON returned by ``documents.get``.
    options : ConversionOptions, optional
        Supplies the unordered glyph markers used to classify bullets.

    Returns
    -------
    Document
        The parsed document. Missing ``body`` or ``content`` give an empty
        document.

    Raises
    ------
    InputError
        If ``payload`` is not a mapping or ``body.content`` is not a list.

    """
    if payload is None:
        raise InputError("No document provided", parameter_name="payload")
    if not isinstance(payload, Mapping):
        raise InputError(
            f"Document payload must be a JSON object, got {type(payload).__name__}",
            parameter_name="payload",
            parameter_value=payload,
        )

    options = options or ConversionOptions()
    content = _as_mapping(payload.get("body")).get("content")
    if content is None:
        content = []
    elif not isinstance(content, list):
        raise InputError(
            f"Document body content must be a list, got {type(content).__name__}",
            parameter_name="body.content",
            parameter_value=content,
        )

    lists = _as_mapping(payload.get("lists"))
    blocks = []
    skipped = 0
    for element in content:
        block = parse_structural_element(element, lists, options)
        if block is None:
            skipped += 1
            continue
        blocks.append(block)

    if skipped:
        logger.debug("Skipped %d structural elements without a Markdown rendering", skipped)

    return Document(title=str(payload.get("title") or ""), blocks=tuple(blocks))


__all__ = [
    "parse_bullet",
    "parse_document",
    "parse_paragraph",
    "parse_structural_element",
    "parse_table",
    "parse_text_style",
]
