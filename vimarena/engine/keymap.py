"""Vim keymap configuration.

Defines all vim key bindings in a configurable way, handling vim-specific
concepts like:
- Motions (can be used standalone or as operator targets)
- Operators (wait for motion/text object)
- Text objects (two-char sequences like iw, i")
- Multi-char motions (gg)
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum, auto

from ..exceptions import KeymapError
from .keys import is_key_sequence


class BindingType(Enum):
    """Type of vim key binding."""

    MOTION = auto()          # Movement command (h, j, w, etc.)
    OPERATOR = auto()        # Operates on range (d)
    TEXT_OBJECT = auto()     # Text object (iw, i", etc.)
    ACTION = auto()          # Immediate action (i, a, o, x, etc.)
    MODE_SWITCH = auto()     # Mode change (v, V, :)
    PENDING = auto()         # Waits for next char (f, t, etc.)


@dataclass
class VimBinding:
    """Definition of a vim key binding."""

    key: str                          # Key or key sequence (e.g., "w", "gg", "iw")
    type: BindingType                 # Type of binding
    handler: str                      # Handler function name
    description: str = ""             # Human-readable description
    modes: tuple[str, ...] = ("normal", "visual", "line")  # Which modes this applies to
    insert: bool = False              # Belongs to the insert family (feature-gated)


@dataclass
class VimKeymapConfig:
    """Configuration for vim keybindings."""

    # ─────────────────────────────────────────────────────────────────
    # Motions - cursor movement commands
    # ─────────────────────────────────────────────────────────────────
    motions: dict[str, VimBinding] = field(default_factory=lambda: {
        # Basic cursor movement
        "h": VimBinding("h", BindingType.MOTION, "motion_left", "Left", modes=("normal", "visual")),
        "l": VimBinding("l", BindingType.MOTION, "motion_right", "Right", modes=("normal", "visual")),
        "j": VimBinding("j", BindingType.MOTION, "motion_down", "Down"),
        "k": VimBinding("k", BindingType.MOTION, "motion_up", "Up"),
        "ArrowLeft": VimBinding("ArrowLeft", BindingType.MOTION, "motion_left", "Left", modes=("normal", "visual")),
        "ArrowRight": VimBinding("ArrowRight", BindingType.MOTION, "motion_right", "Right", modes=("normal", "visual")),
        "ArrowDown": VimBinding("ArrowDown", BindingType.MOTION, "motion_down", "Down"),
        "ArrowUp": VimBinding("ArrowUp", BindingType.MOTION, "motion_up", "Up"),

        # Line position
        "0": VimBinding("0", BindingType.MOTION, "motion_line_start", "Line start", modes=("normal", "visual")),
        "^": VimBinding("^", BindingType.MOTION, "motion_first_non_blank", "First non-blank", modes=("normal", "visual")),
        "$": VimBinding("$", BindingType.MOTION, "motion_line_end", "Line end", modes=("normal", "visual")),

        # Word motions
        "w": VimBinding("w", BindingType.MOTION, "motion_word_forward", "Next word", modes=("normal", "visual")),
        "W": VimBinding("W", BindingType.MOTION, "motion_word_forward_big", "Next WORD", modes=("normal", "visual")),
        "e": VimBinding("e", BindingType.MOTION, "motion_word_end", "Word end", modes=("normal", "visual")),
        "E": VimBinding("E", BindingType.MOTION, "motion_word_end_big", "WORD end", modes=("normal", "visual")),
        "b": VimBinding("b", BindingType.MOTION, "motion_word_backward", "Previous word", modes=("normal", "visual")),
        "B": VimBinding("B", BindingType.MOTION, "motion_word_backward_big", "Previous WORD", modes=("normal", "visual")),

        # Document position
        "gg": VimBinding("gg", BindingType.MOTION, "motion_document_start", "Document start"),
        "G": VimBinding("G", BindingType.MOTION, "motion_document_end", "Document end"),

        # Find char repeat
        ";": VimBinding(";", BindingType.MOTION, "motion_repeat_find", "Repeat f/t", modes=("normal", "visual")),
        ",": VimBinding(",", BindingType.MOTION, "motion_repeat_find_reverse", "Repeat f/t reverse", modes=("normal", "visual")),
    })

    # ─────────────────────────────────────────────────────────────────
    # Operators - commands that operate on a range
    # ─────────────────────────────────────────────────────────────────
    operators: dict[str, VimBinding] = field(default_factory=lambda: {
        "d": VimBinding("d", BindingType.OPERATOR, "operator_delete", "Delete"),
    })

    # ─────────────────────────────────────────────────────────────────
    # Text Objects - selections for operators and visual mode
    # ─────────────────────────────────────────────────────────────────
    text_objects: dict[str, VimBinding] = field(default_factory=lambda: {
        # Word objects
        "iw": VimBinding("iw", BindingType.TEXT_OBJECT, "textobj_inner_word", "Inner word"),
        "iW": VimBinding("iW", BindingType.TEXT_OBJECT, "textobj_inner_word_big", "Inner WORD"),

        # Quote objects
        'i"': VimBinding('i"', BindingType.TEXT_OBJECT, "textobj_inner_double_quote", 'Inner "..."'),
        "i'": VimBinding("i'", BindingType.TEXT_OBJECT, "textobj_inner_single_quote", "Inner '...'"),
        "i`": VimBinding("i`", BindingType.TEXT_OBJECT, "textobj_inner_backtick", "Inner `...`"),

        # Bracket objects
        "i(": VimBinding("i(", BindingType.TEXT_OBJECT, "textobj_inner_paren", "Inner (...)"),
        "i)": VimBinding("i)", BindingType.TEXT_OBJECT, "textobj_inner_paren", "Inner (...)"),
        "ib": VimBinding("ib", BindingType.TEXT_OBJECT, "textobj_inner_paren", "Inner (...)"),  # Alias
        "i[": VimBinding("i[", BindingType.TEXT_OBJECT, "textobj_inner_bracket", "Inner [...]"),
        "i]": VimBinding("i]", BindingType.TEXT_OBJECT, "textobj_inner_bracket", "Inner [...]"),
        "i{": VimBinding("i{", BindingType.TEXT_OBJECT, "textobj_inner_brace", "Inner {...}"),
        "i}": VimBinding("i}", BindingType.TEXT_OBJECT, "textobj_inner_brace", "Inner {...}"),
        "iB": VimBinding("iB", BindingType.TEXT_OBJECT, "textobj_inner_brace", "Inner {...}"),  # Alias
        "i<": VimBinding("i<", BindingType.TEXT_OBJECT, "textobj_inner_angle", "Inner <...>"),
        "i>": VimBinding("i>", BindingType.TEXT_OBJECT, "textobj_inner_angle", "Inner <...>"),
    })

    # ─────────────────────────────────────────────────────────────────
    # Actions - immediate commands
    # ─────────────────────────────────────────────────────────────────
    actions: dict[str, VimBinding] = field(default_factory=lambda: {
        # Insert mode entry
        "i": VimBinding("i", BindingType.ACTION, "action_insert", "Insert", modes=("normal",), insert=True),
        "I": VimBinding("I", BindingType.ACTION, "action_insert_line_start", "Insert at line start", modes=("normal",), insert=True),
        "a": VimBinding("a", BindingType.ACTION, "action_append", "Append", modes=("normal",), insert=True),
        "A": VimBinding("A", BindingType.ACTION, "action_append_line_end", "Append at line end", modes=("normal",), insert=True),
        "o": VimBinding("o", BindingType.ACTION, "action_open_below", "Open line below", modes=("normal",), insert=True),
        "O": VimBinding("O", BindingType.ACTION, "action_open_above", "Open line above", modes=("normal",), insert=True),

        # Deletion shortcuts
        "x": VimBinding("x", BindingType.ACTION, "action_delete_char", "Delete char"),
        "D": VimBinding("D", BindingType.ACTION, "action_delete_to_eol", "Delete to EOL", modes=("normal",)),
    })

    # ─────────────────────────────────────────────────────────────────
    # Mode switches
    # ─────────────────────────────────────────────────────────────────
    mode_switches: dict[str, VimBinding] = field(default_factory=lambda: {
        "v": VimBinding("v", BindingType.MODE_SWITCH, "mode_visual", "Visual mode"),
        "V": VimBinding("V", BindingType.MODE_SWITCH, "mode_visual_line", "Visual line mode"),
        ":": VimBinding(":", BindingType.MODE_SWITCH, "mode_command", "Command mode", modes=("normal",)),
    })

    # ─────────────────────────────────────────────────────────────────
    # Pending commands (wait for next char)
    # ─────────────────────────────────────────────────────────────────
    pending: dict[str, VimBinding] = field(default_factory=lambda: {
        "f": VimBinding("f", BindingType.PENDING, "pending_find_forward", "Find forward", modes=("normal", "visual")),
        "F": VimBinding("F", BindingType.PENDING, "pending_find_backward", "Find backward", modes=("normal", "visual")),
        "t": VimBinding("t", BindingType.PENDING, "pending_till_forward", "Till forward", modes=("normal", "visual")),
        "T": VimBinding("T", BindingType.PENDING, "pending_till_backward", "Till backward", modes=("normal", "visual")),
    })


class VimKeymapProvider(ABC):
    """Abstract base class for vim keymap providers."""

    @abstractmethod
    def get_config(self) -> VimKeymapConfig:
        """Get the keymap configuration."""
        pass

    def get_motion(self, key: str) -> VimBinding | None:
        """Get motion binding for a key."""
        return self.get_config().motions.get(key)

    def get_operator(self, key: str) -> VimBinding | None:
        """Get operator binding for a key."""
        return self.get_config().operators.get(key)

    def get_text_object(self, key: str) -> VimBinding | None:
        """Get text object binding for a key sequence."""
        return self.get_config().text_objects.get(key)

    def get_pending(self, key: str) -> VimBinding | None:
        """Get pending command binding for a key."""
        return self.get_config().pending.get(key)

    def lookup(self, key: str, mode: str = "normal") -> VimBinding | None:
        """Look up any binding for a key in the given mode."""
        config = self.get_config()

        # Check each category
        for bindings in [
            config.motions,
            config.operators,
            config.actions,
            config.mode_switches,
            config.pending,
        ]:
            if key in bindings:
                binding = bindings[key]
                if mode in binding.modes or not binding.modes:
                    return binding

        return None

    def starts_sequence(self, key: str) -> bool:
        """Check if key is the first keystroke of a multi-key motion (g of gg)."""
        if len(key) != 1:
            return False
        return any(is_key_sequence(k) and k.startswith(key) for k in self.get_config().motions)

    def validate(self) -> None:
        """Raise KeymapError if a binding names a handler that doesn't exist."""
        from .motions import MOTION_HANDLERS
        from .operators import OPERATOR_HANDLERS
        from .text_objects import TEXT_OBJECT_HANDLERS

        config = self.get_config()
        for bindings, registry in (
            (config.motions, MOTION_HANDLERS),
            (config.operators, OPERATOR_HANDLERS),
            (config.text_objects, TEXT_OBJECT_HANDLERS),
        ):
            for binding in bindings.values():
                if binding.handler not in registry:
                    raise KeymapError(f"Unknown handler {binding.handler!r} for key {binding.key!r}")


class DefaultVimKeymapProvider(VimKeymapProvider):
    """Default vim keymap with standard bindings."""

    def __init__(self, config: VimKeymapConfig | None = None) -> None:
        self._config = config or VimKeymapConfig()

    def get_config(self) -> VimKeymapConfig:
        return self._config


# Global vim keymap instance
_vim_keymap_provider: VimKeymapProvider | None = None


def get_vim_keymap() -> VimKeymapProvider:
    """Get the current vim keymap provider."""
    global _vim_keymap_provider
    if _vim_keymap_provider is None:
        _vim_keymap_provider = DefaultVimKeymapProvider()
    return _vim_keymap_provider


def set_vim_keymap(provider: VimKeymapProvider) -> None:
    """Set the vim keymap provider (for testing or custom keymaps)."""
    global _vim_keymap_provider
    _vim_keymap_provider = provider


def reset_vim_keymap() -> None:
    """Reset to default vim keymap provider."""
    global _vim_keymap_provider
    _vim_keymap_provider = None
