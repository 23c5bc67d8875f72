"""Key events consumed by the engine.

Key names follow the browser KeyboardEvent convention ("j", "Escape",
"Enter", "Backspace", "ArrowLeft", ...). Hosts built on other toolkits
convert their events first (see ``vimarena.adapters``).
"""

from __future__ import annotations

from dataclasses import dataclass, field

# Keys that only report a modifier or a dead-key state
IGNORED_KEYS = frozenset(
    {
        "Shift",
        "Control",
        "Alt",
        "Meta",
        "CapsLock",
        "NumLock",
        "ScrollLock",
        "OS",
        "Dead",
        "Compose",
    }
)

ESCAPE = "Escape"
ENTER = "Enter"
BACKSPACE = "Backspace"

ARROW_KEYS = frozenset({"ArrowLeft", "ArrowRight", "ArrowUp", "ArrowDown"})

# Keys reported by name rather than by the character they type
NAMED_KEYS = (
    IGNORED_KEYS
    | ARROW_KEYS
    | {ESCAPE, ENTER, BACKSPACE, "Tab", "Delete", "Home", "End", "PageUp", "PageDown", "Insert"}
)

# Raw navigation keys whose default host behaviour (scrolling) is blocked
SCROLL_KEYS = frozenset("hjkl")


@dataclass
class KeyEvent:
    """A single key press."""

    key: str
    ctrl_key: bool = False
    alt_key: bool = False
    meta_key: bool = False
    shift_key: bool = False
    modifiers: frozenset[str] = field(default_factory=frozenset)
    default_prevented: bool = field(default=False, compare=False)

    @classmethod
    def of(cls, key: str, **modifiers: bool) -> KeyEvent:
        return cls(key, **modifiers)

    def get_modifier_state(self, name: str) -> bool:
        """Whether the named modifier (e.g. "AltGraph") is active."""
        return name in self.modifiers

    def prevent_default(self) -> None:
        self.default_prevented = True


def has_command_modifier(event: KeyEvent) -> bool:
    """True when a modifier turns the key into a host shortcut."""
    if event.ctrl_key or event.meta_key:
        return True
    return event.alt_key and not event.get_modifier_state("AltGraph")


def is_printable(event: KeyEvent) -> bool:
    """Whether the event produces a single character of text."""
    if event.key in IGNORED_KEYS:
        return False
    if has_command_modifier(event):
        return False
    return len(event.key) == 1


def is_key_sequence(name: str) -> bool:
    """Whether a binding name is typed as several keystrokes ("gg", not "ArrowUp")."""
    return len(name) > 1 and name not in NAMED_KEYS
