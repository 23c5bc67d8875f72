"""In-memory line buffer.

Provides vim-style navigation and manipulation methods on top of a plain
list of lines, similar to prompt_toolkit's Document class. Navigation
methods take a position and return a new one; they never move the cursor.
"""

from __future__ import annotations

import re
from collections.abc import Iterator
from enum import IntEnum

from .state import Position

# Word characters for vim's definition of a "word" vs "WORD".
# Python's \w is Unicode-aware: letters, digits and underscore.
WORD_CHARS = re.compile(r"\w")
LINE_BREAKS = re.compile(r"\r\n?")
TRAILING_NEWLINES = re.compile(r"\n+$")


class CharClass(IntEnum):
    """Character classes used by word motions and text objects."""

    SPACE = 0
    WORD = 1
    PUNCTUATION = 2


def is_space_char(char: str) -> bool:
    return char == " " or char == "\t"


def is_word_char(char: str) -> bool:
    return bool(char) and WORD_CHARS.match(char) is not None


def char_class(char: str, big_word: bool = False) -> CharClass:
    """Classify a character; WORD mode only separates space from non-space."""
    if is_space_char(char):
        return CharClass.SPACE
    if big_word or is_word_char(char):
        return CharClass.WORD
    return CharClass.PUNCTUATION


def normalize_text(raw: str) -> str:
    """Unify line terminators and drop trailing newlines."""
    return TRAILING_NEWLINES.sub("", LINE_BREAKS.sub("\n", raw))


def split_lines(raw: str) -> list[str]:
    normalized = normalize_text(raw)
    return normalized.split("\n") if normalized else [""]


class Buffer:
    """Ordered, mutable sequence of text lines. Never empty."""

    def __init__(self, text: str = "") -> None:
        self.lines: list[str] = split_lines(text)

    def reset(self, text: str) -> None:
        """Replace the content in place, keeping the same list object."""
        self.lines[:] = split_lines(text)

    # ─────────────────────────────────────────────────────────────────
    # Properties
    # ─────────────────────────────────────────────────────────────────

    @property
    def text(self) -> str:
        return "\n".join(self.lines)

    @property
    def line_count(self) -> int:
        return len(self.lines)

    def line(self, row: int) -> str:
        if 0 <= row < len(self.lines):
            return self.lines[row]
        return ""

    def last_col(self, row: int) -> int:
        """Last column a resting cursor may occupy on row (0 if empty)."""
        return max(0, len(self.line(row)) - 1)

    def char_at(self, pos: Position) -> str:
        line = self.line(pos.row)
        if 0 <= pos.col < len(line):
            return line[pos.col]
        return ""

    def clamp(self, row: int, col: int) -> Position:
        """Clamp (row, col) to a valid resting position."""
        row = max(0, min(row, self.line_count - 1))
        col = max(0, min(col, self.last_col(row)))
        return Position(row, col)

    def first_non_blank(self, row: int) -> int:
        line = self.line(row)
        for i, char in enumerate(line):
            if not is_space_char(char):
                return i
        return 0

    # ─────────────────────────────────────────────────────────────────
    # Position iteration
    # ─────────────────────────────────────────────────────────────────

    def iter_forward(self, pos: Position) -> Iterator[tuple[Position, str]]:
        """Yield (position, char) from pos (inclusive) to buffer end."""
        for row in range(pos.row, self.line_count):
            line = self.lines[row]
            start = pos.col if row == pos.row else 0
            for col in range(max(0, start), len(line)):
                yield Position(row, col), line[col]

    def iter_backward(self, pos: Position) -> Iterator[tuple[Position, str]]:
        """Yield (position, char) from pos (inclusive) back to buffer start."""
        for row in range(pos.row, -1, -1):
            line = self.lines[row]
            start = min(pos.col, len(line) - 1) if row == pos.row else len(line) - 1
            for col in range(start, -1, -1):
                yield Position(row, col), line[col]

    # ─────────────────────────────────────────────────────────────────
    # Word Navigation
    # ─────────────────────────────────────────────────────────────────

    def word_start_forward(self, pos: Position, count: int = 1, big_word: bool = False) -> Position:
        """Position of the count-th next word start (w/W).

        Stops on the last character of the buffer when no word is left.
        """
        for _ in range(count):
            target = self.next_word_start(pos, big_word)
            if target is None:
                last_row = self.line_count - 1
                return Position(last_row, self.last_col(last_row))
            pos = target
        return pos

    def next_word_start(self, pos: Position, big_word: bool = False) -> Position | None:
        """Start of the word after pos, None at the end of the buffer."""
        row, col = pos
        line = self.lines[row]

        # Skip the rest of the current word
        if col < len(line) and not is_space_char(line[col]):
            start_class = char_class(line[col], big_word)
            while col < len(line) and char_class(line[col], big_word) == start_class:
                col += 1

        # Skip whitespace and line breaks; an empty line is a word of its own
        while True:
            if col >= len(line):
                if row >= self.line_count - 1:
                    return None
                row += 1
                col = 0
                line = self.lines[row]
                if not line:
                    return Position(row, 0)
                continue
            if is_space_char(line[col]):
                col += 1
                continue
            return Position(row, col)

    def word_end_forward(self, pos: Position, count: int = 1, big_word: bool = False) -> Position | None:
        """Position of the count-th next word end (e/E), None if there is none."""
        moved = None
        for _ in range(count):
            target = self._next_word_end(pos, big_word)
            if target is None:
                break
            pos = moved = target
        return moved

    def _next_word_end(self, pos: Position, big_word: bool) -> Position | None:
        row, col = pos
        line = self.lines[row]
        col += 1

        while True:
            if col >= len(line):
                if row >= self.line_count - 1:
                    return None
                row += 1
                col = 0
                line = self.lines[row]
                continue
            if is_space_char(line[col]):
                col += 1
                continue
            break

        current = char_class(line[col], big_word)
        while col < len(line) - 1 and char_class(line[col + 1], big_word) == current:
            col += 1
        return Position(row, col)

    def word_start_backward(self, pos: Position, count: int = 1, big_word: bool = False) -> Position:
        """Position of the count-th previous word start (b/B)."""
        for _ in range(count):
            pos = self._prev_word_start(pos, big_word)
        return pos

    def _prev_word_start(self, pos: Position, big_word: bool) -> Position:
        row, col = pos
        line = self.lines[row]
        col = min(col, len(line)) - 1

        # Skip whitespace and line breaks backward; empty lines stop the scan
        while True:
            if col < 0:
                if row == 0:
                    return Position(0, 0)
                row -= 1
                line = self.lines[row]
                col = len(line) - 1
                if not line:
                    return Position(row, 0)
                continue
            if is_space_char(line[col]):
                col -= 1
                continue
            break

        current = char_class(line[col], big_word)
        while col > 0 and char_class(line[col - 1], big_word) == current:
            col -= 1
        return Position(row, col)

    # ─────────────────────────────────────────────────────────────────
    # Find Character (f/F/t/T motions)
    # ─────────────────────────────────────────────────────────────────

    def find_char(
        self,
        pos: Position,
        char: str,
        count: int = 1,
        reverse: bool = False,
        till: bool = False,
        skip_adjacent: bool = False,
    ) -> Position | None:
        """Find character on the current line only.

        Args:
            pos: Starting position
            char: Character to find
            count: Number of occurrences to skip
            reverse: Search toward the line start (F/T)
            till: Stop one column short of the match (t/T)
            skip_adjacent: Ignore a match right next to pos (repeated t/T)

        Returns:
            New position or None if not found
        """
        line = self.line(pos.row)
        step = -1 if reverse else 1
        col = pos.col + step

        if till and skip_adjacent and 0 <= col < len(line) and line[col] == char:
            col += step

        found = 0
        while 0 <= col < len(line):
            if line[col] == char:
                found += 1
                if found >= count:
                    return Position(pos.row, col - step if till else col)
            col += step

        return None

    # ─────────────────────────────────────────────────────────────────
    # Text Object Boundaries (half-open: end is exclusive)
    # ─────────────────────────────────────────────────────────────────

    def word_boundaries(self, pos: Position, big_word: bool = False) -> tuple[Position, Position] | None:
        """Inner word (iw/iW) around pos; a lone whitespace char on blanks."""
        line = self.line(pos.row)
        col = pos.col
        if col >= len(line):
            return None

        if is_space_char(line[col]):
            return Position(pos.row, col), Position(pos.row, col + 1)

        current = char_class(line[col], big_word)
        start = col
        end = col
        while start > 0 and char_class(line[start - 1], big_word) == current:
            start -= 1
        while end < len(line) - 1 and char_class(line[end + 1], big_word) == current:
            end += 1

        return Position(pos.row, start), Position(pos.row, end + 1)

    def quote_boundaries(self, pos: Position, quote: str) -> tuple[Position, Position] | None:
        """Inside of the quoted string around pos, or the next one (i"/i'/i`)."""
        row, col = pos
        line = self.line(row)
        quotes = [i for i, char in enumerate(line) if char == quote]
        before = [i for i in quotes if i < col]

        # An odd number of quotes before the cursor means we are inside a string
        opener = None
        if len(before) % 2 == 1:
            opener = before[-1]
        elif col < len(line) and line[col] == quote:
            opener = col

        resume = pos
        if opener is not None:
            closer = next((i for i in quotes if i > opener and i >= col), None)
            if closer is not None:
                if closer - opener > 1:
                    return Position(row, opener + 1), Position(row, closer)
                resume = Position(row, closer + 1)

        return self._next_quote_pair(resume, quote)

    def _next_quote_pair(self, pos: Position, quote: str) -> tuple[Position, Position] | None:
        for row in range(pos.row, self.line_count):
            line = self.lines[row]
            col = pos.col if row == pos.row else 0
            while True:
                opener = line.find(quote, col)
                if opener < 0:
                    break
                closer = line.find(quote, opener + 1)
                if closer < 0:
                    break
                if closer - opener > 1:
                    return Position(row, opener + 1), Position(row, closer)
                col = closer + 1
        return None

    def bracket_boundaries(
        self, pos: Position, open_char: str, close_char: str
    ) -> tuple[Position, Position] | None:
        """Inside of the outermost bracket pair around pos, or the next one.

        Depth tracking skips balanced groups on the way out, so on
        ``a(b(c)d)e`` every position between the outer brackets resolves
        to ``b(c)d``. Openers that are never closed are passed over.
        """
        resume = pos
        for opener in reversed(self._enclosing_opens(pos, open_char, close_char)):
            closer = self._find_matching_close(opener, open_char, close_char)
            if closer is None:
                continue
            if not self._is_empty_pair(opener, closer):
                return Position(opener.row, opener.col + 1), closer
            resume = Position(closer.row, closer.col + 1)
            break

        return self._next_bracket_pair(resume, open_char, close_char)

    def _enclosing_opens(self, pos: Position, open_char: str, close_char: str) -> list[Position]:
        """Unmatched openers before pos, innermost first."""
        depth = 0
        openers: list[Position] = []
        for here, char in self.iter_backward(pos):
            if char == open_char:
                if depth == 0:
                    openers.append(here)
                else:
                    depth -= 1
            elif char == close_char and here != pos:
                # A closer under the cursor belongs to an enclosing pair
                depth += 1
        return openers

    def _find_matching_close(self, opener: Position, open_char: str, close_char: str) -> Position | None:
        depth = 0
        for here, char in self.iter_forward(Position(opener.row, opener.col + 1)):
            if char == open_char:
                depth += 1
            elif char == close_char:
                if depth == 0:
                    return here
                depth -= 1
        return None

    def _next_bracket_pair(
        self, pos: Position, open_char: str, close_char: str
    ) -> tuple[Position, Position] | None:
        for here, char in self.iter_forward(pos):
            if char != open_char:
                continue
            closer = self._find_matching_close(here, open_char, close_char)
            if closer is not None and not self._is_empty_pair(here, closer):
                return Position(here.row, here.col + 1), closer
        return None

    @staticmethod
    def _is_empty_pair(opener: Position, closer: Position) -> bool:
        return opener.row == closer.row and closer.col == opener.col + 1

    # ─────────────────────────────────────────────────────────────────
    # Text Manipulation
    # ─────────────────────────────────────────────────────────────────

    def delete_range(self, start: Position, end: Position) -> str:
        """Delete the half-open range [start, end). Returns the deleted text."""
        if start > end:
            start, end = end, start

        first = self.lines[start.row]
        last = self.lines[end.row]

        if start.row == end.row:
            deleted = first[start.col : end.col]
            self.lines[start.row] = first[: start.col] + first[end.col :]
            return deleted

        deleted = "\n".join(
            [first[start.col :], *self.lines[start.row + 1 : end.row], last[: end.col]]
        )
        self.lines[start.row : end.row + 1] = [first[: start.col] + last[end.col :]]
        return deleted

    def delete_lines(self, start_row: int, count: int) -> int:
        """Delete up to count whole lines from start_row. Returns lines removed."""
        end_row = min(self.line_count, start_row + max(1, count))
        removed = end_row - start_row
        del self.lines[start_row:end_row]
        if not self.lines:
            self.lines.append("")
        return removed

    def insert_text(self, pos: Position, text: str) -> None:
        line = self.lines[pos.row]
        self.lines[pos.row] = line[: pos.col] + text + line[pos.col :]

    def insert_line(self, row: int, text: str = "") -> None:
        self.lines.insert(row, text)

    def split_line(self, pos: Position) -> None:
        """Break the line at pos; the tail becomes the next line."""
        line = self.lines[pos.row]
        self.lines[pos.row : pos.row + 1] = [line[: pos.col], line[pos.col :]]

    def join_with_previous(self, row: int) -> Position:
        """Append line row onto row - 1. Returns the join point."""
        previous = self.lines[row - 1]
        self.lines[row - 1 : row + 1] = [previous + self.lines[row]]
        return Position(row - 1, len(previous))
