#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Google Docs document tree to Markdown conversion.

This module renders a parsed :class:`~gdoc2md.document.Document` into a single
Markdown string. The walk is a single pass over the document blocks in order.
A :class:`RenderState` is created for every call and threaded through the
paragraph renderer, so list numbering and open code fences carry from one
paragraph to the next but never from one document to another.

Conversion Rules
----------------
- Headings: ``HEADING_N`` styles become ``N`` hash marks.
- Lists: unordered glyphs render as ``- item``, everything else as
  ``N. item`` with a counter that runs across the whole list id, regardless
  of nesting level.
- Inline styles: bold, italic and strikethrough wrap each run independently;
  links wrap outermost.
- Code: runs set in the code font, or with a strongly red background, become
  inline code or open a fenced block. A fenced block stays open until a
  non-code run with blank content follows it. A block still open at the end
  of the document is left unterminated.
- Tables: pipe tables with the first row as header and cell styling dropped.

Examples
--------
    >>> from gdoc2md.converter import convert
    >>> from gdoc2md.document import Document, Paragraph, ParagraphStyle, TextRun
    >>> doc = Document(
    ...     title="Notes",
    ...     blocks=(Paragraph(runs=(TextRun("Intro"),), style=ParagraphStyle.from_named_style("HEADING_1")),),
    ... )
    >>> convert(doc).content
    '# Intro'

"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional

from gdoc2md.constants import CODE_FENCE, EMPTY_TABLE_CELL, TABLE_SEPARATOR_CELL
from gdoc2md.document import ConversionResult, ListKind, Paragraph, Table, TextRun, TextStyle
from gdoc2md.exceptions import InputError
from gdoc2md.ingest import parse_document
from gdoc2md.options import ConversionOptions

logger = logging.getLogger(__name__)


@dataclass
class RenderState:
    """Mutable state threaded through one conversion.

    Attributes
    ----------
    in_code_block : bool
        Whether a fenced code block is currently open.
    code_block_lang : str or None
        Language tag of the open block, if any.
    current_list_id : str or None
        Identity of the list the previous paragraph belonged to.
    list_ordinal : int
        Last number emitted for an ordered item of ``current_list_id``.

    """

    in_code_block: bool = False
    code_block_lang: Optional[str] = None
    current_list_id: Optional[str] = None
    list_ordinal: int = 0

    def enter_list(self, list_id: str) -> None:
        """Make ``list_id`` the current list, restarting numbering if it changed."""
        if list_id != self.current_list_id:
            self.current_list_id = list_id
            self.list_ordinal = 0

    def leave_list(self) -> None:
        """Record that the current paragraph is not a list item."""
        self.current_list_id = None
        self.list_ordinal = 0

    def next_ordinal(self) -> int:
        """Advance and return the ordered-list counter."""
        self.list_ordinal += 1
        return self.list_ordinal

    def open_code_block(self, language: Optional[str] = None) -> None:
        """Mark a fenced code block as open."""
        self.in_code_block = True
        self.code_block_lang = language

    def close_code_block(self) -> None:
        """Mark the open fenced code block as closed."""
        self.in_code_block = False
        self.code_block_lang = None


def is_code_style(style: TextStyle, options: ConversionOptions | None = None) -> bool:
    """Decide whether a run's style marks it as code.

    This is a heuristic: a run is code when it is set in the code font family
    or when its background red channel is above the configured threshold.

    Parameters
    ----------
    style : TextStyle
        Style of the run.
    options : ConversionOptions, optional
        Supplies the font family and threshold. Defaults are used if None.

    Returns
    -------
    bool
        True if the run should be rendered as code.

    """
    options = options or ConversionOptions()
    if style.font_family == options.code_font_family:
        return True
    background = style.background_color
    return background is not None and background.red > options.code_background_red_threshold


def detect_code_language(content: str, options: ConversionOptions | None = None) -> Optional[str]:
    """Return the first language hint found in ``content``, case-insensitively."""
    options = options or ConversionOptions()
    lowered = content.lower()
    for hint in options.code_language_hints:
        if hint in lowered:
            return hint
    return None


def wrap_text_style(content: str, style: TextStyle) -> str:
    """Wrap run content in emphasis markers.

    Bold is applied first, then italic, then strikethrough, so strikethrough
    ends up outermost: ``~~***text***~~``.
    """
    if style.bold:
        content = f"**{content}**"
    if style.italic:
        content = f"*{content}*"
    if style.strikethrough:
        content = f"~~{content}~~"
    return content


def _render_code_run(content: str, state: RenderState, options: ConversionOptions) -> str:
    """Render a code-classified run, opening a fenced block when needed."""
    if state.in_code_block:
        return content

    language = detect_code_language(content, options)
    if language is not None:
        state.open_code_block(language)
        return f"{CODE_FENCE}{language}\n{content.strip()}"

    if "\n" in content:
        state.open_code_block()
        return f"{CODE_FENCE}\n{content.strip()}"

    if content.strip():
        return f"`{content.strip()}`"

    return content


def render_run(run: TextRun, state: RenderState, options: ConversionOptions | None = None) -> str:
    """Render one text run to Markdown, updating the code block state.

    Parameters
    ----------
    run : TextRun
        The run to render.
    state : RenderState
        Conversion state, mutated when a code block opens or closes.
    options : ConversionOptions, optional
        Code detection settings.

    Returns
    -------
    str
        Markdown text for the run.

    """
    options = options or ConversionOptions()
    style = run.style
    content = wrap_text_style(run.content, style)

    if is_code_style(style, options):
        content = _render_code_run(content, state, options)
    elif state.in_code_block and not content.strip():
        state.close_code_block()
        content = f"\n{CODE_FENCE}\n\n"

    if style.link:
        content = f"[{content.strip()}]({style.link})"

    return content


def _list_prefix(paragraph: Paragraph, state: RenderState, options: ConversionOptions) -> str:
    bullet = paragraph.bullet
    if bullet is None:
        state.leave_list()
        return ""

    state.enter_list(bullet.list_id)
    indent = options.list_indent * bullet.nesting_level

    if bullet.kind is ListKind.UNORDERED:
        return f"{indent}- "

    # One counter per list id; nested ordered items keep counting.
    return f"{indent}{state.next_ordinal()}. "


def render_paragraph(paragraph: Paragraph, state: RenderState, options: ConversionOptions | None = None) -> str:
    """Render a paragraph to Markdown.

    Parameters
    ----------
    paragraph : Paragraph
        The paragraph to render.
    state : RenderState
        Conversion state. List tracking is updated even when the paragraph
        renders to blank text.
    options : ConversionOptions, optional
        Conversion settings.

    Returns
    -------
    str
        The Markdown to append, including its trailing newlines, or an empty
        string when nothing visible was produced.

    """
    options = options or ConversionOptions()

    if not paragraph.runs:
        return ""

    text = ""
    level = paragraph.style.heading_level if paragraph.style is not None else None
    if level:
        text = "#" * level + " "

    # List state advances even when the paragraph turns out blank.
    list_prefix = _list_prefix(paragraph, state, options)
    if list_prefix:
        text = list_prefix
    is_list_item = paragraph.bullet is not None

    body = "".join(render_run(run, state, options) for run in paragraph.runs)
    if not body.strip():
        return ""
    text += body

    if is_list_item or state.in_code_block:
        return text + "\n"
    return text + "\n\n"


def _cell_text(cell: Any) -> str:
    return cell.text.strip() or EMPTY_TABLE_CELL


def render_table(table: Table) -> str:
    """Render a table as a Markdown pipe table.

    The first row is the header. Cell styling is dropped and blank cells
    become a single space so the pipes stay well formed. A table without
    rows renders to an empty string.
    """
    if not table.rows:
        return ""

    lines = ["\n"]
    for row_index, row in enumerate(table.rows):
        cells = [_cell_text(cell) for cell in row.cells]
        lines.append("| " + " | ".join(cells) + " |\n")
        if row_index == 0:
            lines.append("|" + "|".join(TABLE_SEPARATOR_CELL for _ in cells) + "|\n")
    lines.append("\n")
    return "".join(lines)


def convert(document: Any, options: ConversionOptions | None = None) -> ConversionResult:
    """Convert a document tree to Markdown.

    Parameters
    ----------
    document : Document
        The parsed document. Any object with ``title`` and an iterable
        ``blocks`` attribute is accepted.
    options : ConversionOptions, optional
        Conversion settings. Defaults are used if None.

    Returns
    -------
    ConversionResult
        The document title and the Markdown content with surrounding
        whitespace removed.

    Raises
    ------
    InputError
        If ``document`` is None or its blocks cannot be iterated.

    Notes
    -----
    Malformed but well-typed content never raises: paragraphs without runs
    and unknown block kinds are skipped.

    """
    if document is None:
        raise InputError("No document provided for conversion", parameter_name="document")

    try:
        blocks = list(document.blocks)
    except (AttributeError, TypeError) as e:
        raise InputError(
            f"Document blocks are not iterable: {type(getattr(document, 'blocks', None)).__name__}",
            parameter_name="document",
            parameter_value=document,
            original_error=e,
        ) from e

    options = options or ConversionOptions()
    state = RenderState()
    parts: list[str] = []

    for block in blocks:
        if isinstance(block, Paragraph):
            parts.append(render_paragraph(block, state, options))
        elif isinstance(block, Table):
            parts.append(render_table(block))
        else:
            logger.debug("Skipping unsupported block type: %s", type(block).__name__)

    title = getattr(document, "title", "") or ""
    markdown = "".join(parts).strip()

    if state.in_code_block:
        logger.debug("Document %r ends inside an open code block", title)
    logger.debug("Converted document %r: %d blocks, %d characters", title, len(blocks), len(markdown))

    return ConversionResult(title=title, content=markdown)


def convert_json(payload: Any, options: ConversionOptions | None = None) -> ConversionResult:
    """Parse a Google Docs API document resource and convert it to Markdown.

    Raises
    ------
    InputError
        If the payload is not a document resource.

    """
    return convert(parse_document(payload, options), options)


__all__ = [
    "RenderState",
    "convert",
    "convert_json",
    "detect_code_language",
    "is_code_style",
    "render_paragraph",
    "render_run",
    "render_table",
    "wrap_text_style",
]
