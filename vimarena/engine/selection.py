"""Visual selection tracking.

Character-wise selections run from min(anchor, cursor) to one column past
max(anchor, cursor). Line-wise selections cover every row between the
anchor row and the cursor row.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from .state import CharSelection, LineSelection, Position, TextObjectType

if TYPE_CHECKING:
    from .document import Buffer
    from .state import VimState


class SelectionManager:
    """Keeps ``VimState.selection`` in sync with the anchor and the cursor."""

    def __init__(self, state: VimState) -> None:
        self._state = state

    def start_line(self, anchor: Position) -> None:
        """Anchor a line-wise selection at anchor's row.

        The full position is kept so switching back to character mode
        restores the original anchor.
        """
        self._state.visual_char_anchor = anchor
        self._state.visual_line_start = anchor.row
        self.update_line(anchor.row)

    def update_line(self, cursor_row: int) -> None:
        anchor = self._state.visual_line_start
        if anchor is None:
            return
        self._state.selection = LineSelection(min(anchor, cursor_row), max(anchor, cursor_row))

    def start_char(self, anchor: Position) -> None:
        """Anchor a character-wise selection at anchor."""
        self._state.visual_line_start = None
        self._state.visual_char_anchor = anchor
        self.update_char(anchor)

    def update_char(self, cursor: Position) -> None:
        anchor = self._state.visual_char_anchor
        if anchor is None or self._state.visual_line_start is not None:
            return
        start = min(anchor, cursor)
        end = max(anchor, cursor)
        self._state.selection = CharSelection(start, Position(end.row, end.col + 1))

    def select_range(self, buf: Buffer, start: Position, end: Position) -> Position:
        """Replace the selection with [start, end). Returns the new cursor."""
        if end.col > 0:
            head = Position(end.row, end.col - 1)
        else:
            # Range ends with a line break
            head = Position(end.row - 1, buf.last_col(end.row - 1))
        self._state.visual_line_start = None
        self._state.visual_char_anchor = start
        self.update_char(head)
        return head

    def clear(self) -> None:
        self._state.clear_visual()

    def selected_range(self) -> tuple[Position, Position, TextObjectType] | None:
        """The current selection as an operator range."""
        selection = self._state.selection
        if isinstance(selection, LineSelection):
            return (
                Position(selection.start_row, 0),
                Position(selection.end_row, 0),
                TextObjectType.LINEWISE,
            )
        if isinstance(selection, CharSelection):
            return selection.start, selection.end, TextObjectType.EXCLUSIVE
        return None
