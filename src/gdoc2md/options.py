#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Configuration options for Google Docs to Markdown conversion.

The options are immutable. Use ``create_updated`` to derive a modified copy::

    >>> options = ConversionOptions().create_updated(code_font_family="Courier New")

"""

from __future__ import annotations

import sys
from dataclasses import dataclass, field, replace
from typing import Any

if sys.version_info >= (3, 11):
    from typing import Self
else:
    from typing_extensions import Self

from gdoc2md.constants import (
    DEFAULT_CODE_BACKGROUND_RED_THRESHOLD,
    DEFAULT_CODE_FONT_FAMILY,
    DEFAULT_CODE_LANGUAGE_HINTS,
    DEFAULT_LIST_INDENT,
    DEFAULT_UNORDERED_GLYPH_MARKERS,
)


@dataclass(frozen=True)
class CloneFrozenMixin:
    """Mixin providing frozen dataclass cloning capabilities."""

    def create_updated(self, **kwargs: Any) -> Self:
        """Create a new instance with updated field values.

        Parameters
        ----------
        **kwargs : Any
            Field names and their new values

        Returns
        -------
        Self
            New instance with specified fields updated

        """
        return replace(self, **kwargs)


@dataclass(frozen=True)
class ConversionOptions(CloneFrozenMixin):
    """Options controlling how a document tree is rendered to Markdown.

    The code detection settings are heuristics: Google Docs has no notion of a
    code span, so runs are treated as code when they look like code.

    Parameters
    ----------
    code_font_family : str, default "Consolas"
        Font family that marks a run as code.
    code_background_red_threshold : float, default 0.9
        A run whose background color has a red channel strictly above this
        value is treated as code.
    code_language_hints : tuple[str, ...], default ("powershell",)
        Lower-case keywords that, when found in a code run, open a fenced
        block tagged with that keyword.
    unordered_glyph_markers : tuple[str, ...]
        Substrings of a bullet glyph that make the item unordered.
    list_indent : str, default two spaces
        Indentation emitted per list nesting level.

    """

    code_font_family: str = field(
        default=DEFAULT_CODE_FONT_FAMILY,
        metadata={"help": "Font family that marks a text run as code"},
    )
    code_background_red_threshold: float = field(
        default=DEFAULT_CODE_BACKGROUND_RED_THRESHOLD,
        metadata={"help": "Background red channel above which a run is treated as code", "type": float},
    )
    code_language_hints: tuple[str, ...] = field(
        default=DEFAULT_CODE_LANGUAGE_HINTS,
        metadata={"help": "Keywords that open a language-tagged code fence"},
    )
    unordered_glyph_markers: tuple[str, ...] = field(
        default=DEFAULT_UNORDERED_GLYPH_MARKERS,
        metadata={"help": "Glyph substrings that render a bullet as an unordered item"},
    )
    list_indent: str = field(
        default=DEFAULT_LIST_INDENT,
        metadata={"help": "Indentation per list nesting level"},
    )

    def __post_init__(self) -> None:
        """Validate option values.

        Raises
        ------
        ValueError
            If any field value is outside its valid range.

        """
        if not 0.0 <= self.code_background_red_threshold <= 1.0:
            raise ValueError(
                f"code_background_red_threshold must be between 0 and 1, got {self.code_background_red_threshold}"
            )
        if any(hint != hint.lower() for hint in self.code_language_hints):
            raise ValueError(f"code_language_hints must be lower-case, got {self.code_language_hints!r}")


__all__ = ["CloneFrozenMixin", "ConversionOptions"]
