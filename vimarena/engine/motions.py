"""Vim motion functions.

Motions compute cursor destinations without modifying text. They're used
both for navigation and, evaluated without being applied ("ghost"
motions), as targets for operators.

Motion functions are registered by name and looked up via the keymap.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable

from .state import LastSearch, Position, TextObjectType

if TYPE_CHECKING:
    from .document import Buffer
    from .state import Cursor, VimState


@dataclass
class MotionResult:
    """Result of a motion computation."""

    position: Position  # Target cursor position (row, col)
    type: TextObjectType = TextObjectType.EXCLUSIVE
    failed: bool = False  # True if motion couldn't be performed
    goal_col: int | None = None  # Sticky column to keep (vertical motions)


# Type alias for motion functions; count is None when no count was typed
MotionFunc = Callable[["Buffer", "VimState", "Cursor", "int | None"], MotionResult]


def _failed(cursor: Cursor) -> MotionResult:
    return MotionResult(position=cursor.position, failed=True)


# ─────────────────────────────────────────────────────────────────
# Basic Cursor Motions (h, j, k, l)
# ─────────────────────────────────────────────────────────────────


def motion_left(buf: Buffer, state: VimState, cursor: Cursor, count: int | None) -> MotionResult:
    """Move cursor left (h motion)."""
    col = max(0, min(cursor.col - (count or 1), buf.last_col(cursor.row)))
    return MotionResult(position=Position(cursor.row, col))


def motion_right(buf: Buffer, state: VimState, cursor: Cursor, count: int | None) -> MotionResult:
    """Move cursor right (l motion); vim stops on the last character.

    At the line edge the column stays put and the goal column is still
    replaced.
    """
    col = max(0, min(cursor.col + (count or 1), buf.last_col(cursor.row)))
    return MotionResult(position=Position(cursor.row, col))


def _vertical(buf: Buffer, cursor: Cursor, row: int) -> MotionResult:
    # The goal column survives passing through shorter lines
    goal = cursor.goal_col if cursor.goal_col is not None else cursor.col
    row = max(0, min(row, buf.line_count - 1))
    col = max(0, min(goal, buf.last_col(row)))
    return MotionResult(position=Position(row, col), type=TextObjectType.LINEWISE, goal_col=goal)


def motion_up(buf: Buffer, state: VimState, cursor: Cursor, count: int | None) -> MotionResult:
    """Move cursor up (k motion)."""
    if cursor.row == 0:
        return _failed(cursor)
    return _vertical(buf, cursor, cursor.row - (count or 1))


def motion_down(buf: Buffer, state: VimState, cursor: Cursor, count: int | None) -> MotionResult:
    """Move cursor down (j motion)."""
    if cursor.row >= buf.line_count - 1:
        return _failed(cursor)
    return _vertical(buf, cursor, cursor.row + (count or 1))


# ─────────────────────────────────────────────────────────────────
# Line Position Motions (0, ^, $)
# ─────────────────────────────────────────────────────────────────


def motion_line_start(buf: Buffer, state: VimState, cursor: Cursor, count: int | None) -> MotionResult:
    """Move to start of line (0 motion)."""
    return MotionResult(position=Position(cursor.row, 0))


def motion_first_non_blank(buf: Buffer, state: VimState, cursor: Cursor, count: int | None) -> MotionResult:
    """Move to first non-blank character (^ motion)."""
    return MotionResult(position=Position(cursor.row, buf.first_non_blank(cursor.row)))


def motion_line_end(buf: Buffer, state: VimState, cursor: Cursor, count: int | None) -> MotionResult:
    """Move to end of line ($ motion)."""
    return MotionResult(
        position=Position(cursor.row, buf.last_col(cursor.row)),
        type=TextObjectType.INCLUSIVE,
    )


# ─────────────────────────────────────────────────────────────────
# Word Motions (w, W, e, E, b, B)
# ─────────────────────────────────────────────────────────────────


def motion_word_forward(buf: Buffer, state: VimState, cursor: Cursor, count: int | None) -> MotionResult:
    """Move to next word start (w motion)."""
    return MotionResult(position=buf.word_start_forward(cursor.position, count or 1))


def motion_word_forward_big(buf: Buffer, state: VimState, cursor: Cursor, count: int | None) -> MotionResult:
    """Move to next WORD start (W motion)."""
    return MotionResult(position=buf.word_start_forward(cursor.position, count or 1, big_word=True))


def motion_word_end(buf: Buffer, state: VimState, cursor: Cursor, count: int | None) -> MotionResult:
    """Move to next word end (e motion)."""
    pos = buf.word_end_forward(cursor.position, count or 1)
    if pos is None:
        return _failed(cursor)
    return MotionResult(position=pos, type=TextObjectType.INCLUSIVE)


def motion_word_end_big(buf: Buffer, state: VimState, cursor: Cursor, count: int | None) -> MotionResult:
    """Move to next WORD end (E motion)."""
    pos = buf.word_end_forward(cursor.position, count or 1, big_word=True)
    if pos is None:
        return _failed(cursor)
    return MotionResult(position=pos, type=TextObjectType.INCLUSIVE)


def motion_word_backward(buf: Buffer, state: VimState, cursor: Cursor, count: int | None) -> MotionResult:
    """Move to previous word start (b motion)."""
    return MotionResult(position=buf.word_start_backward(cursor.position, count or 1))


def motion_word_backward_big(buf: Buffer, state: VimState, cursor: Cursor, count: int | None) -> MotionResult:
    """Move to previous WORD start (B motion)."""
    return MotionResult(position=buf.word_start_backward(cursor.position, count or 1, big_word=True))


# ─────────────────────────────────────────────────────────────────
# Document Position Motions (gg, G, [count]G)
# ─────────────────────────────────────────────────────────────────


def motion_document_start(buf: Buffer, state: VimState, cursor: Cursor, count: int | None) -> MotionResult:
    """Move to first line, or line N with a count (gg motion)."""
    return _vertical(buf, cursor, count - 1 if count else 0)


def motion_document_end(buf: Buffer, state: VimState, cursor: Cursor, count: int | None) -> MotionResult:
    """Move to last line, or line N with a count (G motion)."""
    return _vertical(buf, cursor, count - 1 if count else buf.line_count - 1)


# ─────────────────────────────────────────────────────────────────
# Find Character Motions (f, F, t, T, ;, ,)
# ─────────────────────────────────────────────────────────────────

FIND_COMMANDS = {
    "f": LastSearch("", reverse=False, kind="find"),
    "F": LastSearch("", reverse=True, kind="find"),
    "t": LastSearch("", reverse=False, kind="to"),
    "T": LastSearch("", reverse=True, kind="to"),
}


def find_command_search(cmd: str, char: str) -> LastSearch:
    """Build the search a f/F/t/T command describes."""
    template = FIND_COMMANDS[cmd]
    return LastSearch(char, reverse=template.reverse, kind=template.kind)


def motion_search(
    buf: Buffer,
    cursor: Cursor,
    count: int | None,
    search: LastSearch,
    repeat: bool = False,
) -> MotionResult:
    """Find a character on the current line, as described by search."""
    till = search.kind == "to"
    pos = buf.find_char(
        cursor.position,
        search.char,
        count or 1,
        reverse=search.reverse,
        till=till,
        skip_adjacent=repeat,
    )
    if pos is None:
        return _failed(cursor)

    motion_type = TextObjectType.EXCLUSIVE if search.reverse else TextObjectType.INCLUSIVE
    return MotionResult(position=pos, type=motion_type)


def motion_find_char(
    buf: Buffer,
    state: VimState,
    cursor: Cursor,
    count: int | None,
    cmd: str,
    char: str,
) -> MotionResult:
    """Find character on current line (f/F/t/T motion)."""
    search = find_command_search(cmd, char)
    # Store for ; and , repeat, even when nothing is found
    state.last_search = search
    return motion_search(buf, cursor, count, search)


def motion_repeat_find(buf: Buffer, state: VimState, cursor: Cursor, count: int | None) -> MotionResult:
    """Repeat last f/F/t/T motion (; motion)."""
    if state.last_search is None:
        return _failed(cursor)
    return motion_search(buf, cursor, count, state.last_search, repeat=True)


def motion_repeat_find_reverse(buf: Buffer, state: VimState, cursor: Cursor, count: int | None) -> MotionResult:
    """Repeat last f/F/t/T motion in reverse (, motion)."""
    last = state.last_search
    if last is None:
        return _failed(cursor)
    reverse = LastSearch(last.char, reverse=not last.reverse, kind=last.kind)
    return motion_search(buf, cursor, count, reverse, repeat=True)


# ─────────────────────────────────────────────────────────────────
# Motion Registry - maps handler names from keymap to functions
# ─────────────────────────────────────────────────────────────────

MOTION_HANDLERS: dict[str, MotionFunc] = {
    "motion_left": motion_left,
    "motion_right": motion_right,
    "motion_up": motion_up,
    "motion_down": motion_down,
    "motion_line_start": motion_line_start,
    "motion_first_non_blank": motion_first_non_blank,
    "motion_line_end": motion_line_end,
    "motion_word_forward": motion_word_forward,
    "motion_word_forward_big": motion_word_forward_big,
    "motion_word_end": motion_word_end,
    "motion_word_end_big": motion_word_end_big,
    "motion_word_backward": motion_word_backward,
    "motion_word_backward_big": motion_word_backward_big,
    "motion_document_start": motion_document_start,
    "motion_document_end": motion_document_end,
    "motion_repeat_find": motion_repeat_find,
    "motion_repeat_find_reverse": motion_repeat_find_reverse,
}


def get_motion_handler(name: str) -> MotionFunc | None:
    """Get a motion function by handler name."""
    return MOTION_HANDLERS.get(name)
