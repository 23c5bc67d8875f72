"""Vim emulation engine.

The VimEngine is the main controller that:
- Takes key events from the host
- Manages vim state (mode, pending combo, counts, selection)
- Dispatches to motions, operators, and text objects
- Notifies the host of mode and pending-input changes

Each mode has one handler; ``handle_key_down`` looks the handler up from
the current mode and forwards the key.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Callable

from ..config import EngineOptions
from .command import VimCommandHandler
from .document import Buffer
from .keymap import BindingType, VimBinding, VimKeymapProvider, get_vim_keymap
from .keys import BACKSPACE, ENTER, ESCAPE, IGNORED_KEYS, SCROLL_KEYS, KeyEvent, has_command_modifier, is_printable
from .motions import get_motion_handler, motion_document_end, motion_find_char
from .operators import get_operator_handler, motion_range, word_operator_end
from .selection import SelectionManager
from .state import Cursor, Position, TextObjectType, UiState, VimMode, VimState
from .text_objects import get_text_object_handler

if TYPE_CHECKING:
    from .motions import MotionResult
    from .state import Selection

logger = logging.getLogger(__name__)

# Motions whose operator range differs from the plain cursor movement
WORD_FORWARD_HANDLERS = {
    "motion_word_forward": False,
    "motion_word_forward_big": True,
}

# Prefix of the inner text objects (iw, i", i( ...)
TEXT_OBJECT_PREFIX = "i"


class VimEngine:
    """Main vim emulation controller.

    Owns the buffer, the cursor and all vim state for one session.
    ``handle_key_down`` is the only way keys reach it.
    """

    def __init__(
        self,
        options: EngineOptions | None = None,
        *,
        keymap: VimKeymapProvider | None = None,
        **overrides: Any,
    ) -> None:
        options = options or EngineOptions()
        if overrides:
            options = options.with_overrides(**overrides)
        options.validate()
        self._options = options

        self._buffer = Buffer(options.initial_text)
        self._cursor = Cursor()
        self._state = VimState()
        self._selection = SelectionManager(self._state)
        self._keymap = keymap or get_vim_keymap()
        self._keymap.validate()

        # Command mode handler
        self._command_handler = VimCommandHandler()

        # Callbacks for mode changes, pending input and commands
        self._on_mode_change: Callable[[VimMode], None] | None = options.on_mode_change
        self._on_ui_state_change: Callable[[UiState], None] | None = options.on_ui_state_change
        self._on_command: Callable[[str], None] | None = options.on_command
        self._last_ui_state: UiState | None = None

        self._handlers: dict[VimMode, Callable[[KeyEvent], bool]] = {
            VimMode.NORMAL: self._handle_normal_mode,
            VimMode.INSERT: self._handle_insert_mode,
            VimMode.VISUAL: self._handle_visual_mode,
            VimMode.VISUAL_LINE: self._handle_visual_mode,
            VimMode.COMMAND: self._handle_command_mode,
        }

        self._notify_mode_change()
        self._notify_ui_state(force=True)

    # ─────────────────────────────────────────────────────────────────
    # Read surface
    # ─────────────────────────────────────────────────────────────────

    @property
    def lines(self) -> list[str]:
        """The live buffer lines. Treat as read-only."""
        return self._buffer.lines

    @property
    def text(self) -> str:
        return self._buffer.text

    @property
    def buffer(self) -> Buffer:
        return self._buffer

    @property
    def cursor(self) -> Cursor:
        return self._cursor

    @property
    def mode(self) -> VimMode:
        """Current vim mode."""
        return self._state.mode

    @property
    def state(self) -> VimState:
        """Current vim state."""
        return self._state

    @property
    def options(self) -> EngineOptions:
        return self._options

    @property
    def command_buffer(self) -> str:
        """Get the current command buffer."""
        return self._command_handler.buffer

    def get_mode(self) -> VimMode:
        return self._state.mode

    def get_ui_state(self) -> UiState:
        return self._state.ui_state(self._command_handler.buffer)

    def get_selection(self) -> Selection | None:
        return self._state.selection

    def get_visual_line_start(self) -> int | None:
        return self._state.visual_line_start

    def view_base(self) -> int:
        """First visible row of a max_rows high viewport centred on the cursor."""
        max_rows = self._options.max_rows
        max_base = max(0, self._buffer.line_count - max_rows)
        return max(0, min(self._cursor.row - max_rows // 2, max_base))

    # ─────────────────────────────────────────────────────────────────
    # Callbacks
    # ─────────────────────────────────────────────────────────────────

    def set_mode_callback(self, callback: Callable[[VimMode], None] | None) -> None:
        """Set callback for mode changes."""
        self._on_mode_change = callback

    def set_ui_state_callback(self, callback: Callable[[UiState], None] | None) -> None:
        """Set callback for pending combo/count/command line changes."""
        self._on_ui_state_change = callback

    def set_command_callback(self, callback: Callable[[str], None] | None) -> None:
        """Set callback for commands entered on the ":" line."""
        self._on_command = callback

    def _notify_mode_change(self) -> None:
        """Notify callback of mode change."""
        if self._on_mode_change:
            self._on_mode_change(self._state.mode)

    def _notify_ui_state(self, force: bool = False) -> None:
        ui_state = self.get_ui_state()
        if not force and ui_state == self._last_ui_state:
            return
        self._last_ui_state = ui_state
        if self._on_ui_state_change:
            self._on_ui_state_change(ui_state)

    # ─────────────────────────────────────────────────────────────────
    # Public API
    # ─────────────────────────────────────────────────────────────────

    def handle_key_down(self, event: KeyEvent) -> bool:
        """Process a key event.

        Returns True if the engine handled the key; unhandled keys are
        left to the host.
        """
        key = event.key

        if key in SCROLL_KEYS:
            event.prevent_default()

        handled = False
        if not key or key in IGNORED_KEYS:
            pass
        elif len(key) == 1 and has_command_modifier(event):
            # Host shortcut such as ctrl+c
            pass
        else:
            handler = self._handlers.get(self._state.mode)
            if handler is not None:
                handled = handler(event)

        if handled:
            event.prevent_default()

        # The command line reports its own changes
        self._notify_ui_state(force=self._state.mode != VimMode.COMMAND)
        return handled

    def handle_key(self, key: str, **modifiers: bool) -> bool:
        """Shorthand for ``handle_key_down(KeyEvent.of(key, ...))``."""
        return self.handle_key_down(KeyEvent.of(key, **modifiers))

    def reset_document(self, text: str, position: tuple[int, int] | None = None) -> None:
        """Replace the buffer and drop all pending and visual state.

        The cursor goes to position (clamped) or (0, 0); the mode is
        always normal afterwards.
        """
        self._buffer.reset(text)
        self._state.reset_pending()
        self._state.last_search = None
        self._selection.clear()
        self._command_handler.cancel()

        row, col = position if position is not None else (0, 0)
        self._cursor.move_to(*self._buffer.clamp(row, col))
        logger.debug(
            "Document reset: %d line(s), cursor at %s",
            self._buffer.line_count,
            self._cursor.position,
        )

        self._set_mode(VimMode.NORMAL)
        self._notify_ui_state()

    def jump_to_line(self, line: int) -> None:
        """Move to a 1-indexed line, keeping the goal column."""
        result = motion_document_end(self._buffer, self._state, self._cursor, max(1, line))
        self._move_cursor(result)
        self._refresh_selection()

    # ─────────────────────────────────────────────────────────────────
    # Mode transitions
    # ─────────────────────────────────────────────────────────────────

    def _set_mode(self, mode: VimMode) -> None:
        if self._state.mode == mode:
            return
        logger.debug("Mode change: %s -> %s", self._state.mode.value, mode.value)
        self._state.mode = mode
        self._notify_mode_change()

    def _enter_normal_mode(self) -> None:
        """Return to normal mode, dropping any selection."""
        self._state.reset_pending()
        self._selection.clear()
        self._set_mode(VimMode.NORMAL)
        # A resting cursor sits on a character
        self._cursor.col = min(self._cursor.col, self._buffer.last_col(self._cursor.row))

    def _enter_insert_mode(self) -> None:
        self._state.reset_pending()
        self._set_mode(VimMode.INSERT)

    def _enter_visual_mode(self) -> None:
        self._state.reset_pending()
        self._selection.start_char(self._cursor.position)
        self._set_mode(VimMode.VISUAL)

    def _enter_visual_line_mode(self) -> None:
        self._state.reset_pending()
        self._selection.start_line(self._cursor.position)
        self._set_mode(VimMode.VISUAL_LINE)

    def _enter_command_mode(self) -> None:
        self._state.reset_pending()
        self._command_handler.start()
        self._set_mode(VimMode.COMMAND)
        self._notify_ui_state(force=True)

    def _abandon_combo(self, key: str) -> None:
        """Drop a partially typed command without editing anything."""
        logger.debug("Abandoned combo %r on key %r", self._state.pending_combo, key)
        self._state.reset_pending()

    # ─────────────────────────────────────────────────────────────────
    # Cursor helpers
    # ─────────────────────────────────────────────────────────────────

    def _move_cursor(self, result: MotionResult) -> None:
        """Apply a motion result to the cursor."""
        if result.failed:
            return
        row, col = result.position
        if result.goal_col is not None:
            # Vertical motions keep the remembered column
            self._cursor.row = row
            self._cursor.col = col
            self._cursor.goal_col = result.goal_col
        else:
            self._cursor.move_to(row, col)

    def _refresh_selection(self) -> None:
        if not self._state.is_visual_mode():
            return
        if self._state.mode == VimMode.VISUAL_LINE:
            self._selection.update_line(self._cursor.row)
        else:
            self._selection.update_char(self._cursor.position)

    def _combined_count(self) -> int | None:
        """Operator count times motion count, or None if neither was typed."""
        if self._state.pending_operator_count is None and self._state.pending_count is None:
            return None
        return self._state.get_effective_count()

    # ─────────────────────────────────────────────────────────────────
    # Normal Mode
    # ─────────────────────────────────────────────────────────────────

    def _handle_normal_mode(self, event: KeyEvent) -> bool:
        """Handle keys in normal mode."""
        key = event.key
        state = self._state

        if key == ESCAPE:
            if state.pending_combo:
                self._abandon_combo(key)
            self._enter_normal_mode()
            return True

        # Handle multi-key combos (d..., g, f/t/F/T)
        if state.pending_combo:
            return self._handle_pending_combo(event)

        # Check for count prefix (0 at start is a motion, not a count)
        if state.accumulate_digit(key):
            return True

        if self._keymap.get_motion(key) is None and self._keymap.starts_sequence(key):
            state.pending_combo = key
            return True

        binding = self._keymap.lookup(key, VimMode.NORMAL.value)
        if binding is None:
            return False

        # Handle based on binding type
        if binding.type == BindingType.MOTION:
            return self._execute_motion(binding.handler)

        elif binding.type == BindingType.OPERATOR:
            state.pending_operator_count = state.consume_count()
            state.pending_combo = key
            return True

        elif binding.type == BindingType.ACTION:
            return self._execute_action(binding)

        elif binding.type == BindingType.MODE_SWITCH:
            return self._execute_mode_switch(binding.handler)

        elif binding.type == BindingType.PENDING:
            # The count stays pending for f/t
            state.pending_combo = key
            return True

        return False

    def _handle_pending_combo(self, event: KeyEvent) -> bool:
        """Route the next key of a combo started in normal or visual mode."""
        key = event.key
        combo = self._state.pending_combo

        operator = self._keymap.get_operator(combo[0])
        if operator is not None and self._state.mode == VimMode.NORMAL:
            return self._handle_operator_pending(event, operator)

        if self._keymap.get_pending(combo) is not None:
            return self._handle_pending_char(event)

        if combo == TEXT_OBJECT_PREFIX and self._state.mode == VimMode.VISUAL:
            return self._select_text_object(key)

        # Multi-char motion sequence (gg)
        binding = self._keymap.get_motion(combo + key)
        self._state.pending_combo = ""
        if binding is None:
            self._abandon_combo(key)
            return True
        return self._execute_motion(binding.handler)

    def _handle_pending_char(self, event: KeyEvent) -> bool:
        """Handle character input after f/t/F/T."""
        if not is_printable(event):
            # Wait for a real character
            return True

        cmd = self._state.pending_combo
        count = self._state.consume_count()
        self._state.pending_combo = ""

        result = motion_find_char(self._buffer, self._state, self._cursor, count, cmd, event.key)
        self._move_cursor(result)
        self._refresh_selection()
        return True

    # ─────────────────────────────────────────────────────────────────
    # Motion Execution
    # ─────────────────────────────────────────────────────────────────

    def _execute_motion(self, handler_name: str) -> bool:
        """Execute a motion command."""
        handler = get_motion_handler(handler_name)
        if not handler:
            return False

        count = self._state.consume_count()
        result = handler(self._buffer, self._state, self._cursor, count)
        self._move_cursor(result)
        self._refresh_selection()
        return True

    # ─────────────────────────────────────────────────────────────────
    # Operator Handling
    # ─────────────────────────────────────────────────────────────────

    def _handle_operator_pending(self, event: KeyEvent, operator: VimBinding) -> bool:
        """Handle keys while an operator waits for its target."""
        key = event.key
        state = self._state
        suffix = state.pending_combo[1:]

        if suffix == TEXT_OBJECT_PREFIX:
            binding = self._keymap.get_text_object(suffix + key)
            if binding is None:
                self._abandon_combo(key)
                return True
            return self._execute_operator_with_text_object(operator, binding.handler)

        if suffix and self._keymap.get_pending(suffix) is not None:
            if not is_printable(event):
                return True
            return self._execute_operator_with_find(operator, suffix, key)

        if suffix:
            # Multi-char motion (dgg)
            binding = self._keymap.get_motion(suffix + key)
            if binding is None:
                self._abandon_combo(key)
                return True
            return self._execute_operator_with_motion(operator, binding.handler)

        # Counts typed after the operator multiply (2d3d)
        if state.accumulate_digit(key):
            return True

        # Double operator (dd) operates on whole lines
        if key == operator.key:
            return self._execute_line_operator(operator)

        if key == TEXT_OBJECT_PREFIX or self._keymap.get_pending(key) is not None:
            state.pending_combo += key
            return True

        binding = self._keymap.get_motion(key)
        if binding is not None:
            return self._execute_operator_with_motion(operator, binding.handler)

        if self._keymap.starts_sequence(key):
            state.pending_combo += key
            return True

        # Invalid key - cancel operator
        self._abandon_combo(key)
        return True

    def _execute_operator_with_motion(self, operator: VimBinding, motion_handler: str) -> bool:
        """Execute pending operator over the range a motion would cover."""
        origin = self._cursor.position
        count = self._combined_count()

        if motion_handler in WORD_FORWARD_HANDLERS:
            end = word_operator_end(self._buffer, origin, count or 1, WORD_FORWARD_HANDLERS[motion_handler])
            return self._apply_operator(operator.handler, origin, end, TextObjectType.EXCLUSIVE)

        motion_func = get_motion_handler(motion_handler)
        if motion_func is None:
            self._abandon_combo(motion_handler)
            return True

        # Ghost motion: computed but never applied to the cursor
        motion_result = motion_func(self._buffer, self._state, self._cursor, count)
        if motion_result.failed:
            self._abandon_combo(motion_handler)
            return True

        if motion_result.type == TextObjectType.LINEWISE:
            return self._apply_operator(operator.handler, origin, motion_result.position, TextObjectType.LINEWISE)

        start, end = motion_range(origin, motion_result)
        return self._apply_operator(operator.handler, start, end, TextObjectType.EXCLUSIVE)

    def _execute_operator_with_find(self, operator: VimBinding, cmd: str, char: str) -> bool:
        """Execute pending operator up to a found character (df, dt, ...)."""
        origin = self._cursor.position
        count = self._combined_count()
        motion_result = motion_find_char(self._buffer, self._state, self._cursor, count, cmd, char)
        if motion_result.failed:
            self._abandon_combo(char)
            return True

        start, end = motion_range(origin, motion_result)
        return self._apply_operator(operator.handler, start, end, TextObjectType.EXCLUSIVE)

    def _execute_operator_with_text_object(self, operator: VimBinding, textobj_handler: str) -> bool:
        """Execute pending operator with a text object."""
        textobj_func = get_text_object_handler(textobj_handler)
        if textobj_func is None:
            self._abandon_combo(textobj_handler)
            return True

        result = textobj_func(self._buffer, self._cursor.position)
        if result.failed or result.empty:
            self._abandon_combo(textobj_handler)
            return True

        return self._apply_operator(operator.handler, result.start, result.end, result.type)

    def _execute_line_operator(self, operator: VimBinding) -> bool:
        """Execute operator on whole lines (dd)."""
        count = self._state.get_effective_count()
        start_row = self._cursor.row
        end_row = min(self._buffer.line_count - 1, start_row + count - 1)
        return self._apply_operator(
            operator.handler,
            Position(start_row, 0),
            Position(end_row, 0),
            TextObjectType.LINEWISE,
        )

    def _apply_operator(
        self,
        operator_handler: str,
        start: Position,
        end: Position,
        obj_type: TextObjectType,
    ) -> bool:
        """Run the operator over a range, then settle in normal mode."""
        op_func = get_operator_handler(operator_handler)
        if op_func is None:
            self._abandon_combo(operator_handler)
            return True

        result = op_func(self._buffer, start, end, obj_type)
        if result.success:
            self._cursor.move_to(*result.cursor)
        self._enter_normal_mode()
        return True

    # ─────────────────────────────────────────────────────────────────
    # Actions
    # ─────────────────────────────────────────────────────────────────

    def _execute_action(self, binding: VimBinding) -> bool:
        """Execute an immediate action."""
        if binding.insert and not self._options.insert_mode_enabled:
            # Navigation-only rounds keep the keys but ignore them
            return True

        action = binding.handler
        row, col = self._cursor.position
        line = self._buffer.line(row)

        if action == "action_insert":
            self._enter_insert_mode()

        elif action == "action_insert_line_start":
            self._cursor.move_to(row, self._buffer.first_non_blank(row))
            self._enter_insert_mode()

        elif action == "action_append":
            if line:
                self._cursor.move_to(row, col + 1)
            self._enter_insert_mode()

        elif action == "action_append_line_end":
            self._cursor.move_to(row, len(line))
            self._enter_insert_mode()

        elif action == "action_open_below":
            self._buffer.insert_line(row + 1)
            self._cursor.move_to(row + 1, 0)
            self._enter_insert_mode()

        elif action == "action_open_above":
            self._buffer.insert_line(row)
            self._cursor.move_to(row, 0)
            self._enter_insert_mode()

        elif action == "action_delete_char":
            return self._delete_chars()

        elif action == "action_delete_to_eol":
            self._state.reset_pending()
            self._buffer.delete_range(Position(row, col), Position(row, len(line)))
            self._cursor.move_to(*self._buffer.clamp(row, col))

        else:
            return False

        return True

    def _delete_chars(self) -> bool:
        """Delete count characters under the cursor (x)."""
        count = self._state.consume_count() or 1
        row, col = self._cursor.position
        end = min(len(self._buffer.line(row)), col + count)
        if end > col:
            self._buffer.delete_range(Position(row, col), Position(row, end))
            self._cursor.move_to(*self._buffer.clamp(row, col))
        return True

    def _execute_mode_switch(self, mode_handler: str) -> bool:
        """Execute a mode switch command from normal mode."""
        if mode_handler == "mode_visual":
            self._enter_visual_mode()
        elif mode_handler == "mode_visual_line":
            self._enter_visual_line_mode()
        elif mode_handler == "mode_command":
            self._enter_command_mode()
        else:
            return False
        return True

    # ─────────────────────────────────────────────────────────────────
    # Visual Mode
    # ─────────────────────────────────────────────────────────────────

    def _handle_visual_mode(self, event: KeyEvent) -> bool:
        """Handle keys in visual and visual line mode."""
        key = event.key
        state = self._state
        mode = state.mode

        if key == ESCAPE:
            self._enter_normal_mode()
            return True

        if state.pending_combo:
            return self._handle_pending_combo(event)

        if state.accumulate_digit(key):
            return True

        if self._keymap.get_motion(key) is None and self._keymap.starts_sequence(key):
            state.pending_combo = key
            return True

        if key == TEXT_OBJECT_PREFIX and mode == VimMode.VISUAL:
            state.pending_combo = key
            return True

        binding = self._keymap.lookup(key, mode.value)
        if binding is None:
            return False

        if binding.type == BindingType.MOTION:
            return self._execute_motion(binding.handler)

        if binding.type == BindingType.OPERATOR or binding.handler == "action_delete_char":
            return self._delete_selection(binding)

        if binding.type == BindingType.MODE_SWITCH:
            return self._toggle_visual_mode(binding.handler)

        if binding.type == BindingType.PENDING:
            state.pending_combo = key
            return True

        return False

    def _toggle_visual_mode(self, mode_handler: str) -> bool:
        """v/V inside a visual mode: leave it, or switch to the other one."""
        target = {
            "mode_visual": VimMode.VISUAL,
            "mode_visual_line": VimMode.VISUAL_LINE,
        }.get(mode_handler)
        if target is None:
            return False

        if target == self._state.mode:
            self._enter_normal_mode()
            return True

        self._state.reset_pending()
        anchor = self._state.visual_char_anchor or Position(self._state.visual_line_start or 0, 0)
        if target == VimMode.VISUAL:
            self._selection.start_char(anchor)
            self._selection.update_char(self._cursor.position)
        else:
            self._selection.start_line(anchor)
            self._selection.update_line(self._cursor.row)
        self._set_mode(target)
        return True

    def _select_text_object(self, key: str) -> bool:
        """vi{obj}: replace the selection with an inner text object."""
        self._state.pending_combo = ""
        binding = self._keymap.get_text_object(TEXT_OBJECT_PREFIX + key)
        if binding is None:
            self._abandon_combo(key)
            return True

        textobj_func = get_text_object_handler(binding.handler)
        if textobj_func is None:
            return True

        self._state.pending_count = None
        result = textobj_func(self._buffer, self._cursor.position)
        if result.failed or result.empty:
            # Selection stays as it was
            return True

        head = self._selection.select_range(self._buffer, result.start, result.end)
        self._cursor.move_to(*head)
        return True

    def _delete_selection(self, binding: VimBinding) -> bool:
        """Delete the visual selection (d or x)."""
        selected = self._selection.selected_range()
        if selected is None:
            self._enter_normal_mode()
            return True

        start, end, obj_type = selected
        # x has no operator of its own; it deletes like d
        handler = binding.handler if binding.type == BindingType.OPERATOR else "operator_delete"
        return self._apply_operator(handler, start, end, obj_type)

    # ─────────────────────────────────────────────────────────────────
    # Insert Mode
    # ─────────────────────────────────────────────────────────────────

    def _handle_insert_mode(self, event: KeyEvent) -> bool:
        """Handle keys in insert mode."""
        key = event.key
        row, col = self._cursor.position

        if key == ESCAPE:
            self._enter_normal_mode()
            return True

        if key == ENTER:
            self._buffer.split_line(Position(row, col))
            self._cursor.move_to(row + 1, 0)
            return True

        if key == BACKSPACE:
            if col > 0:
                self._buffer.delete_range(Position(row, col - 1), Position(row, col))
                self._cursor.move_to(row, col - 1)
            elif row > 0:
                # Backspace at column 0 joins with the previous line
                self._cursor.move_to(*self._buffer.join_with_previous(row))
            return True

        if is_printable(event):
            self._buffer.insert_text(Position(row, col), key)
            self._cursor.move_to(row, col + 1)
            return True

        return False

    # ─────────────────────────────────────────────────────────────────
    # Command Mode
    # ─────────────────────────────────────────────────────────────────

    def _handle_command_mode(self, event: KeyEvent) -> bool:
        """Handle keys in command mode."""
        key = event.key

        if key == ESCAPE:
            self._command_handler.cancel()
            self._set_mode(VimMode.NORMAL)
            return True

        if key == ENTER:
            cmd = self._command_handler.take()
            if cmd and self._on_command:
                logger.debug("Command entered: %r", cmd)
                self._on_command(cmd)
            self._set_mode(VimMode.NORMAL)
            return True

        if key == BACKSPACE:
            self._command_handler.backspace()
            self._notify_ui_state()
            return True

        if is_printable(event):
            self._command_handler.add_char(key)
            self._notify_ui_state()
            return True

        return False
