"""Convert Textual key events into engine key events."""

from __future__ import annotations

from typing import TYPE_CHECKING

from ..engine.keys import BACKSPACE, ENTER, ESCAPE, KeyEvent

if TYPE_CHECKING:
    from textual.events import Key

# Textual key names that differ from the engine's
SPECIAL_KEYS = {
    "escape": ESCAPE,
    "ctrl+left_square_bracket": ESCAPE,
    "enter": ENTER,
    "return": ENTER,
    "backspace": BACKSPACE,
    "ctrl+h": BACKSPACE,
    "tab": "Tab",
    "left": "ArrowLeft",
    "right": "ArrowRight",
    "up": "ArrowUp",
    "down": "ArrowDown",
    "home": "Home",
    "end": "End",
    "delete": "Delete",
    "space": " ",
}

COMMAND_MODIFIERS = ("ctrl", "alt", "meta")


def key_event_from_textual(event: Key) -> KeyEvent:
    """Convert a Textual Key event to an engine KeyEvent."""
    key = event.key

    if key in SPECIAL_KEYS:
        return KeyEvent(SPECIAL_KEYS[key])

    *modifiers, name = key.split("+")
    held = set(modifiers)

    # Handle character keys; the character already reflects shift
    if not held.intersection(COMMAND_MODIFIERS) and event.character and len(event.character) == 1:
        name = event.character
    else:
        name = SPECIAL_KEYS.get(name, name)

    return KeyEvent(
        name,
        ctrl_key="ctrl" in held,
        alt_key="alt" in held,
        meta_key="meta" in held,
        shift_key="shift" in held,
    )
