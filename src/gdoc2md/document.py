#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/gdoc2md/document.py
"""Document model for Google Docs content.

This module defines the immutable tree that the converter walks. It mirrors
the subset of the Google Docs API document resource that survives conversion
to Markdown:

    - Document: title plus an ordered sequence of blocks
    - Paragraph: styled text runs with an optional list bullet
    - Table: rows of cells, each cell holding paragraphs

Raw style strings from the API (named paragraph styles, bullet glyphs) are
parsed once when the model is built, so the renderer only ever looks at
``ParagraphStyle.heading_level`` and ``Bullet.kind``.

"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterable, Optional, Union

from gdoc2md.constants import DEFAULT_UNORDERED_GLYPH_MARKERS

_HEADING_LEVEL_RE = re.compile(r"(\d+)$")


class ListKind(Enum):
    """Rendering style of a list item."""

    UNORDERED = "unordered"
    ORDERED = "ordered"


@dataclass(frozen=True)
class RgbColor:
    """RGB color with channels in the 0.0-1.0 range, as the Docs API reports them."""

    red: float = 0.0
    green: float = 0.0
    blue: float = 0.0


@dataclass(frozen=True)
class TextStyle:
    """Character formatting of a text run.

    Parameters
    ----------
    bold, italic, strikethrough : bool, default False
        Emphasis flags.
    font_family : str or None
        Font family name, e.g. ``"Consolas"``.
    background_color : RgbColor or None
        Highlight color behind the text.
    link : str or None
        Target URL when the run is a hyperlink.

    """

    bold: bool = False
    italic: bool = False
    strikethrough: bool = False
    font_family: Optional[str] = None
    background_color: Optional[RgbColor] = None
    link: Optional[str] = None


@dataclass(frozen=True)
class TextRun:
    """A contiguous span of identically styled text."""

    content: str
    style: TextStyle = field(default_factory=TextStyle)


def parse_heading_level(named_style: Optional[str]) -> Optional[int]:
    """Extract the heading level from a named paragraph style.

    ``"HEADING_2"`` gives 2. Names without ``HEADING`` or without a trailing
    number (``"TITLE"``, ``"NORMAL_TEXT"``) give None.
    """
    if not named_style or "HEADING" not in named_style:
        return None
    match = _HEADING_LEVEL_RE.search(named_style)
    if match is None:
        return None
    return int(match.group(1))


@dataclass(frozen=True)
class ParagraphStyle:
    """Paragraph-level style.

    Parameters
    ----------
    heading_level : int or None
        Markdown heading level, or None for body text.
    named_style : str or None
        The raw named style the level was parsed from, kept for reference.

    """

    heading_level: Optional[int] = None
    named_style: Optional[str] = None

    @classmethod
    def from_named_style(cls, named_style: Optional[str]) -> "ParagraphStyle":
        """Build a style from a Docs API ``namedStyleType`` value."""
        return cls(heading_level=parse_heading_level(named_style), named_style=named_style)


def classify_glyph(glyph: Optional[str], markers: Iterable[str] = DEFAULT_UNORDERED_GLYPH_MARKERS) -> ListKind:
    """Classify a bullet glyph as unordered or ordered.

    A glyph containing any of ``markers`` is unordered. Everything else,
    including a missing glyph, is ordered.
    """
    if glyph and any(marker in glyph for marker in markers):
        return ListKind.UNORDERED
    return ListKind.ORDERED


@dataclass(frozen=True)
class Bullet:
    """List membership of a paragraph.

    Parameters
    ----------
    list_id : str
        Identity of the logical list. Paragraphs sharing an id continue the
        same numbering.
    nesting_level : int, default 0
        Zero-based nesting depth.
    kind : ListKind, default ListKind.ORDERED
        Whether the item renders with a dash or a number.
    glyph : str or None
        The raw glyph the kind was classified from.

    """

    list_id: str
    nesting_level: int = 0
    kind: ListKind = ListKind.ORDERED
    glyph: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate the nesting level."""
        if self.nesting_level < 0:
            raise ValueError(f"nesting_level must be >= 0, got {self.nesting_level}")

    @classmethod
    def from_glyph(
        cls,
        list_id: str,
        nesting_level: int = 0,
        glyph: Optional[str] = None,
        markers: Iterable[str] = DEFAULT_UNORDERED_GLYPH_MARKERS,
    ) -> "Bullet":
        """Build a bullet, classifying ``glyph`` into a ``ListKind``."""
        return cls(list_id=list_id, nesting_level=nesting_level, kind=classify_glyph(glyph, markers), glyph=glyph)


@dataclass(frozen=True)
class Paragraph:
    """A paragraph block: text runs plus paragraph style and optional bullet."""

    runs: tuple[TextRun, ...] = field(default_factory=tuple)
    style: ParagraphStyle = field(default_factory=ParagraphStyle)
    bullet: Optional[Bullet] = None

    @property
    def text(self) -> str:
        """Concatenated, unstyled run content."""
        return "".join(run.content for run in self.runs)


@dataclass(frozen=True)
class TableCell:
    """A table cell. Only the flattened text of its paragraphs is rendered."""

    content: tuple[Paragraph, ...] = field(default_factory=tuple)

    @property
    def text(self) -> str:
        """Concatenated run content of every paragraph in the cell."""
        return "".join(paragraph.text for paragraph in self.content)


@dataclass(frozen=True)
class TableRow:
    """An ordered sequence of cells."""

    cells: tuple[TableCell, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class Table:
    """A table block. The first row is always treated as the header."""

    rows: tuple[TableRow, ...] = field(default_factory=tuple)


Block = Union[Paragraph, Table]


@dataclass(frozen=True)
class Document:
    """A parsed document: its title and top-level blocks in document order."""

    title: str = ""
    blocks: tuple[Block, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class ConversionResult:
    """Output of a conversion: the document title and its Markdown body."""

    title: str
    content: str

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-serializable mapping."""
        return {"title": self.title, "content": self.content}


__all__ = [
    "Block",
    "Bullet",
    "ConversionResult",
    "Document",
    "ListKind",
    "Paragraph",
    "ParagraphStyle",
    "RgbColor",
    "Table",
    "TableCell",
    "TableRow",
    "TextRun",
    "TextStyle",
    "classify_glyph",
    "parse_heading_level",
]
