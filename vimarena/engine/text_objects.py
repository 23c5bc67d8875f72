"""Vim text object functions.

Text objects define ranges of text for operators and visual mode to act
on. They're the "iw" in "diw", the "i(" in "vi(", etc. Only the inner
variants exist; ranges are half-open.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable

from .state import Position, TextObjectType

if TYPE_CHECKING:
    from .document import Buffer


@dataclass
class TextObjectResult:
    """Result of a text object computation."""

    start: Position  # Start position (row, col)
    end: Position    # End position (row, col) - exclusive
    type: TextObjectType = TextObjectType.EXCLUSIVE
    failed: bool = False

    @property
    def empty(self) -> bool:
        return self.start >= self.end


# Type alias for text object functions
TextObjectFunc = Callable[["Buffer", Position], TextObjectResult]


def _result(bounds: tuple[Position, Position] | None, anchor: Position) -> TextObjectResult:
    if bounds is None:
        return TextObjectResult(start=anchor, end=anchor, failed=True)
    start, end = bounds
    return TextObjectResult(start=start, end=end)


# ─────────────────────────────────────────────────────────────────
# Word Objects (iw, iW)
# ─────────────────────────────────────────────────────────────────


def textobj_inner_word(buf: Buffer, anchor: Position) -> TextObjectResult:
    """Inner word text object (iw)."""
    return _result(buf.word_boundaries(anchor, big_word=False), anchor)


def textobj_inner_word_big(buf: Buffer, anchor: Position) -> TextObjectResult:
    """Inner WORD text object (iW)."""
    return _result(buf.word_boundaries(anchor, big_word=True), anchor)


# ─────────────────────────────────────────────────────────────────
# Quote Objects (i", i', i`)
# ─────────────────────────────────────────────────────────────────


def _make_quote_textobj(quote_char: str) -> TextObjectFunc:
    """Factory for quote text object functions."""

    def textobj(buf: Buffer, anchor: Position) -> TextObjectResult:
        return _result(buf.quote_boundaries(anchor, quote_char), anchor)

    return textobj


textobj_inner_double_quote = _make_quote_textobj('"')
textobj_inner_single_quote = _make_quote_textobj("'")
textobj_inner_backtick = _make_quote_textobj("`")


# ─────────────────────────────────────────────────────────────────
# Bracket Objects (i(, i[, i{, i<)
# ─────────────────────────────────────────────────────────────────


def _make_bracket_textobj(open_char: str, close_char: str) -> TextObjectFunc:
    """Factory for bracket text object functions."""

    def textobj(buf: Buffer, anchor: Position) -> TextObjectResult:
        return _result(buf.bracket_boundaries(anchor, open_char, close_char), anchor)

    return textobj


textobj_inner_paren = _make_bracket_textobj("(", ")")
textobj_inner_bracket = _make_bracket_textobj("[", "]")
textobj_inner_brace = _make_bracket_textobj("{", "}")
textobj_inner_angle = _make_bracket_textobj("<", ">")


# ─────────────────────────────────────────────────────────────────
# Text Object Registry
# ─────────────────────────────────────────────────────────────────

TEXT_OBJECT_HANDLERS: dict[str, TextObjectFunc] = {
    # Word objects
    "textobj_inner_word": textobj_inner_word,
    "textobj_inner_word_big": textobj_inner_word_big,
    # Quote objects
    "textobj_inner_double_quote": textobj_inner_double_quote,
    "textobj_inner_single_quote": textobj_inner_single_quote,
    "textobj_inner_backtick": textobj_inner_backtick,
    # Bracket objects
    "textobj_inner_paren": textobj_inner_paren,
    "textobj_inner_bracket": textobj_inner_bracket,
    "textobj_inner_brace": textobj_inner_brace,
    "textobj_inner_angle": textobj_inner_angle,
}


def get_text_object_handler(name: str) -> TextObjectFunc | None:
    """Get a text object function by handler name."""
    return TEXT_OBJECT_HANDLERS.get(name)
