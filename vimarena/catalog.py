"""Motion catalog for the training game.

Motions unlock one level at a time; a round at level N drills the
newest motion the player has unlocked.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class MotionKind(str, Enum):
    """What a catalog motion does to the buffer."""

    MOVEMENT = "movement"
    DELETE = "delete"
    VISUAL = "visual"
    UNDO = "undo"


@dataclass(frozen=True)
class Motion:
    """One unlockable motion."""

    keys: tuple[str, ...]
    label: str
    desc: str
    kind: MotionKind
    level: int


MOTIONS: tuple[Motion, ...] = (
    Motion(("h j k l",), "basic movement", "left, down, up, right", MotionKind.MOVEMENT, 1),
    Motion(("w",), "move word", "jump to start of next word", MotionKind.MOVEMENT, 1),
    Motion(("b",), "move back", "jump to first char of current word or start of previous word", MotionKind.MOVEMENT, 2),
    Motion(("0",), "start of line", "teleport to the start of current line", MotionKind.MOVEMENT, 3),
    Motion(("^",), "current line", "teleport to first char of current line", MotionKind.MOVEMENT, 4),
    Motion(("e",), "move end", "jump to last char of current word or end of next word", MotionKind.MOVEMENT, 5),
    Motion(("$",), "end of line", "teleport to end of line", MotionKind.MOVEMENT, 6),
    Motion(("gg",), "first line", "teleport to first line of file", MotionKind.MOVEMENT, 7),
    Motion(("G",), "last line", "teleport to last line of file", MotionKind.MOVEMENT, 8),
    Motion(("f{char}",), "find {char}", "teleport cursor to the next instance {char}", MotionKind.MOVEMENT, 9),
    Motion(("F{char}",), "find previous {char}", "teleport cursor to the previous instance {char}", MotionKind.MOVEMENT, 10),
    Motion(("t{char}",), "to {char}", "teleport cursor right before the next instance of {char}", MotionKind.MOVEMENT, 11),
    Motion(("T{char}",), "to previous {char}", "teleport cursor right before the previous instance of {char}", MotionKind.MOVEMENT, 12),
    Motion(("Shift + v",), "select line", "highlight the current line", MotionKind.VISUAL, 13),
    Motion(("viw",), "select in word", "highlight the current word", MotionKind.VISUAL, 14),
    Motion(("vi(", "vi)"), "select in ()", "highlight content inside of current or next ()", MotionKind.VISUAL, 15),
    Motion(("vi<", "vi>"), "select in <>", "highlight content inside of current or next <>", MotionKind.VISUAL, 16),
    Motion(("d",), "delete", "deletes current selection", MotionKind.DELETE, 17),
    Motion(("di(", "di)"), "delete in ()", "delete the contents of the current or next ()", MotionKind.DELETE, 18),
    Motion(("di<", "di>"), "delete in <>", "delete the contents of the current or next <>", MotionKind.DELETE, 19),
    Motion(("dd",), "delete line", "deletes the current line", MotionKind.DELETE, 20),
    # Listed for the game's level ladder; the engine keeps no undo history
    Motion(("u",), "Undo", "undo your most recent edit", MotionKind.UNDO, 21),
)


def get_motion_by_level(level: int) -> Motion | None:
    """The first motion unlocked exactly at level."""
    return next((motion for motion in MOTIONS if motion.level == level), None)


def get_latest_motion_for_level(level: int) -> Motion | None:
    """The newest motion whose level does not exceed level."""
    latest = None
    for motion in MOTIONS:
        if motion.level > level:
            break
        latest = motion
    return latest
