"""Test utilities for the gdoc2md test suite.

Helpers for building document trees and Google Docs API payloads tersely.
"""

import json
from pathlib import Path
from typing import Optional

from gdoc2md.document import (
    Bullet,
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

FIXTURES_DIR = Path(__file__).parent / "fixtures" / "documents"

UNORDERED_GLYPH = "●"


def run(content: str, **style) -> TextRun:
    """Build a text run; keyword arguments become TextStyle fields."""
    if "background_red" in style:
        style["background_color"] = RgbColor(red=style.pop("background_red"))
    return TextRun(content=content, style=TextStyle(**style))


def code_run(content: str) -> TextRun:
    """Build a run set in the code font."""
    return run(content, font_family="Consolas")


def bullet(list_id: str, level: int = 0, unordered: bool = False) -> Bullet:
    """Build a bullet of the requested kind."""
    return Bullet(
        list_id=list_id,
        nesting_level=level,
        kind=ListKind.UNORDERED if unordered else ListKind.ORDERED,
    )


def para(*runs, named_style: Optional[str] = None, list_bullet: Optional[Bullet] = None) -> Paragraph:
    """Build a paragraph from runs or plain strings."""
    text_runs = tuple(r if isinstance(r, TextRun) else run(r) for r in runs)
    return Paragraph(runs=text_runs, style=ParagraphStyle.from_named_style(named_style), bullet=list_bullet)


def table(rows: list[list[str]]) -> Table:
    """Build a table whose cells each hold a single plain paragraph."""
    return Table(
        rows=tuple(
            TableRow(cells=tuple(TableCell(content=(para(text),) if text else ()) for text in row)) for row in rows
        )
    )


def doc(*blocks, title: str = "Test Document") -> Document:
    """Build a document from blocks."""
    return Document(title=title, blocks=tuple(blocks))


def load_fixture(name: str) -> dict:
    """Load a Docs API JSON fixture by file name."""
    return json.loads((FIXTURES_DIR / name).read_text(encoding="utf-8"))


def api_paragraph(*runs, named_style: str = "NORMAL_TEXT", bullet: Optional[dict] = None) -> dict:
    """Build a Docs API structural element holding a paragraph.

    Each run is either a string or a ``(content, textStyle)`` tuple.
    """
    elements = []
    for r in runs:
        content, text_style = (r, {}) if isinstance(r, str) else r
        elements.append({"textRun": {"content": content, "textStyle": text_style}})
    paragraph = {"elements": elements, "paragraphStyle": {"namedStyleType": named_style}}
    if bullet is not None:
        paragraph["bullet"] = bullet
    return {"paragraph": paragraph}
