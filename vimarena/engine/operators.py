"""Vim operator functions.

Operators act on a range of text (defined by a motion or text object).
They're the d in "dw", "di(" and "dd". Only delete is implemented;
deleted text is returned to the caller and not kept anywhere.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable

from .state import Position, TextObjectType

if TYPE_CHECKING:
    from .document import Buffer
    from .motions import MotionResult


@dataclass
class OperatorResult:
    """Result of an operator execution."""

    cursor: Position  # Where the cursor rests afterwards
    deleted_text: str = ""
    success: bool = True


# Type alias for operator functions
OperatorFunc = Callable[["Buffer", Position, Position, TextObjectType], OperatorResult]


# ─────────────────────────────────────────────────────────────────
# Range helpers
# ─────────────────────────────────────────────────────────────────


def normalize_range(start: Position, end: Position) -> tuple[Position, Position]:
    """Order a range by position, however it was derived."""
    if start > end:
        return end, start
    return start, end


def motion_range(origin: Position, motion: MotionResult) -> tuple[Position, Position]:
    """Half-open range covered by an operator moving from origin to motion."""
    start, end = normalize_range(origin, motion.position)
    if motion.type == TextObjectType.INCLUSIVE:
        end = Position(end.row, end.col + 1)
    return start, end


def word_operator_end(buf: Buffer, origin: Position, count: int, big_word: bool = False) -> Position:
    """End of the text "dw" removes.

    When the last word moved over ends its line, the operation stops at
    the end of that line instead of reaching the next line's first word.
    """
    pos = origin
    for i in range(count):
        target = buf.next_word_start(pos, big_word)
        if target is None:
            last_row = buf.line_count - 1
            return Position(last_row, len(buf.line(last_row)))
        if i == count - 1 and target.row > pos.row:
            return Position(pos.row, len(buf.line(pos.row)))
        pos = target
    return pos


# ─────────────────────────────────────────────────────────────────
# Core Operators
# ─────────────────────────────────────────────────────────────────


def operator_delete(
    buf: Buffer,
    start: Position,
    end: Position,
    obj_type: TextObjectType,
) -> OperatorResult:
    """Delete text in range (d operator).

    Charwise ranges are half-open. Linewise ranges cover every row from
    start.row to end.row inclusive.
    """
    start, end = normalize_range(start, end)

    if obj_type == TextObjectType.LINEWISE:
        deleted = "\n".join(buf.lines[start.row : end.row + 1])
        buf.delete_lines(start.row, end.row - start.row + 1)
        return OperatorResult(cursor=buf.clamp(start.row, 0), deleted_text=deleted)

    if obj_type == TextObjectType.INCLUSIVE:
        end = Position(end.row, end.col + 1)

    if start == end:
        return OperatorResult(cursor=buf.clamp(*start), success=False)

    deleted = buf.delete_range(start, end)
    return OperatorResult(cursor=buf.clamp(*start), deleted_text=deleted)


# ─────────────────────────────────────────────────────────────────
# Operator Registry
# ─────────────────────────────────────────────────────────────────

OPERATOR_HANDLERS: dict[str, OperatorFunc] = {
    "operator_delete": operator_delete,
}


def get_operator_handler(name: str) -> OperatorFunc | None:
    """Get an operator function by handler name."""
    return OPERATOR_HANDLERS.get(name)
