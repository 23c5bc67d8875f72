"""Vim state management.

Tracks the current mode, the cursor, pending combo/count input, the
visual anchors and the last character search.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import NamedTuple, Union


class TextObjectType(Enum):
    """Selection types for motions and text objects."""

    EXCLUSIVE = auto()  # Motion excludes final character
    INCLUSIVE = auto()  # Motion includes final character
    LINEWISE = auto()   # Operates on whole lines


class VimMode(Enum):
    """Vim editing modes."""

    NORMAL = "normal"
    INSERT = "insert"
    VISUAL = "visual"
    VISUAL_LINE = "line"
    VISUAL_BLOCK = "block"  # Reserved, never entered
    COMMAND = "command"


VISUAL_MODES = (VimMode.VISUAL, VimMode.VISUAL_LINE)


class Position(NamedTuple):
    """A (row, col) buffer position, ordered lexicographically."""

    row: int
    col: int


@dataclass
class Cursor:
    """Cursor position plus the sticky goal column for vertical motions."""

    row: int = 0
    col: int = 0
    goal_col: int | None = None

    @property
    def position(self) -> Position:
        return Position(self.row, self.col)

    def move_to(self, row: int, col: int) -> None:
        """Move to (row, col) and remember col as the goal column."""
        self.row = row
        self.col = col
        self.goal_col = col


@dataclass(frozen=True)
class LineSelection:
    """Line-wise selection, both rows inclusive."""

    start_row: int
    end_row: int
    type: str = "line"


@dataclass(frozen=True)
class CharSelection:
    """Character-wise selection; ``end`` is one column past the last char."""

    start: Position
    end: Position
    type: str = "char"


Selection = Union[LineSelection, CharSelection]


@dataclass(frozen=True)
class UiState:
    """Pending input the host shows next to the editor."""

    pending_combo: str = ""
    pending_count: int | None = None
    command_buffer: str = ""


@dataclass(frozen=True)
class LastSearch:
    """Last f/F/t/T search, replayed by ; and ,"""

    char: str
    reverse: bool  # True for F/T
    kind: str  # "find" (f/F) or "to" (t/T)


@dataclass
class VimState:
    """Tracks all vim editing state owned by one engine.

    - Current mode (NORMAL, INSERT, VISUAL, ...)
    - Pending combo (e.g. "d", "di", "g") and count prefix
    - Count captured when an operator key was pressed
    - Visual anchors and the current selection
    - Last f/F/t/T search
    """

    mode: VimMode = VimMode.NORMAL

    # Multi-key input
    pending_combo: str = ""
    pending_count: int | None = None
    pending_operator_count: int | None = None

    # Visual mode anchors
    visual_line_start: int | None = None
    visual_char_anchor: Position | None = None
    selection: Selection | None = field(default=None)

    last_search: LastSearch | None = None

    def accumulate_digit(self, key: str) -> bool:
        """Accumulate a digit for the count prefix. Returns True if consumed."""
        if len(key) != 1 or not "0" <= key <= "9":
            return False
        if key == "0" and self.pending_count is None:
            # 0 at start is a motion (go to line start), not a count
            return False
        digit = ord(key) - ord("0")
        self.pending_count = digit if self.pending_count is None else self.pending_count * 10 + digit
        return True

    def consume_count(self) -> int | None:
        """Take the pending count, leaving none behind."""
        count = self.pending_count
        self.pending_count = None
        return count

    def get_effective_count(self) -> int:
        """Combined operator and motion count (2d3d -> 6)."""
        operator_count = self.pending_operator_count or 1
        motion_count = self.pending_count or 1
        return operator_count * motion_count

    def reset_pending(self) -> None:
        """Drop every partially typed command."""
        self.pending_combo = ""
        self.pending_count = None
        self.pending_operator_count = None

    def clear_visual(self) -> None:
        """Forget the selection and both anchors."""
        self.visual_line_start = None
        self.visual_char_anchor = None
        self.selection = None

    def is_visual_mode(self) -> bool:
        """Check if currently in any visual mode."""
        return self.mode in VISUAL_MODES

    def ui_state(self, command_buffer: str = "") -> UiState:
        return UiState(self.pending_combo, self.pending_count, command_buffer)
