"""Vim emulation engine for vimarena.

A deterministic simulator of vim navigation, selection and editing over
an in-memory buffer. The training game feeds it key events and scores
the resulting cursor, selection and buffer.

Architecture:
    VimEngine - Main controller that handles key events
    VimState - Tracks mode, pending combo/count, selection, last search
    Buffer - Line store with vim-style navigation helpers
    VimKeymapConfig - Configurable key bindings

Usage:
    from vimarena.engine import KeyEvent, VimEngine

    engine = VimEngine(initial_text="hello world")
    engine.set_mode_callback(on_mode_change)

    # In key handler:
    if engine.handle_key_down(KeyEvent("w")):
        ...
"""

from .command import CommandAction, CommandResult, VimCommandHandler, parse_command, route_commands
from .document import Buffer
from .engine import VimEngine
from .keymap import (
    BindingType,
    VimBinding,
    VimKeymapConfig,
    VimKeymapProvider,
    get_vim_keymap,
    reset_vim_keymap,
    set_vim_keymap,
)
from .keys import KeyEvent, is_printable
from .state import (
    CharSelection,
    Cursor,
    LineSelection,
    Position,
    TextObjectType,
    UiState,
    VimMode,
    VimState,
)

__all__ = [
    # Core
    "VimEngine",
    "VimState",
    "VimMode",
    "KeyEvent",
    "is_printable",
    # Document
    "Buffer",
    # State types
    "Cursor",
    "Position",
    "LineSelection",
    "CharSelection",
    "UiState",
    "TextObjectType",
    # Keymap
    "BindingType",
    "VimBinding",
    "VimKeymapConfig",
    "VimKeymapProvider",
    "get_vim_keymap",
    "set_vim_keymap",
    "reset_vim_keymap",
    # Command mode
    "CommandAction",
    "CommandResult",
    "VimCommandHandler",
    "parse_command",
    "route_commands",
]
