"""Vim command mode handler.

The engine only collects the ":" command line and hands the finished
string to the host. ``parse_command`` is the host-side interpreter the
game uses for ":N", ":$" and ":q".
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Callable

if TYPE_CHECKING:
    from .engine import VimEngine


class CommandAction(Enum):
    """Actions that can result from command execution."""

    NONE = "none"
    GOTO_LINE = "goto_line"  # Jump to a 1-indexed line
    QUIT = "quit"  # Leave the round


@dataclass
class CommandResult:
    """Result of executing a command."""

    action: CommandAction = CommandAction.NONE
    line: int | None = None
    message: str = ""
    error: bool = False


class VimCommandHandler:
    """Holds the text typed after ":"."""

    def __init__(self) -> None:
        self._command_buffer: str = ""

    @property
    def buffer(self) -> str:
        """Get the current command buffer."""
        return self._command_buffer

    def start(self) -> None:
        """Start command mode."""
        self._command_buffer = ""

    def add_char(self, char: str) -> None:
        """Add a character to the command buffer."""
        if len(char) == 1:
            self._command_buffer += char

    def backspace(self) -> bool:
        """Remove last character. Returns False if there was nothing to remove."""
        if self._command_buffer:
            self._command_buffer = self._command_buffer[:-1]
            return True
        return False

    def cancel(self) -> None:
        """Cancel command mode."""
        self._command_buffer = ""

    def take(self) -> str:
        """Return the trimmed command and clear the buffer."""
        cmd = self._command_buffer.strip()
        self._command_buffer = ""
        return cmd


def parse_command(cmd: str, line_count: int | None = None) -> CommandResult:
    """Parse a command string entered on the ":" line.

    ``$`` needs ``line_count`` to know where the last line is.
    """
    cmd = cmd.strip()
    if not cmd:
        return CommandResult()

    if cmd.isdigit():
        return CommandResult(action=CommandAction.GOTO_LINE, line=int(cmd))

    if cmd == "$":
        if line_count is None:
            return CommandResult(error=True, message="Unknown last line")
        return CommandResult(action=CommandAction.GOTO_LINE, line=line_count)

    base_cmd = cmd.split(None, 1)[0].lower()
    if base_cmd in ("q", "quit"):
        return CommandResult(action=CommandAction.QUIT)

    # Unknown command
    return CommandResult(
        error=True,
        message=f"Unknown command: {cmd}",
    )


def route_commands(
    engine: VimEngine,
    on_result: Callable[[CommandResult], None] | None = None,
) -> None:
    """Interpret the engine's commands, applying line jumps directly."""

    def handle(cmd: str) -> None:
        result = parse_command(cmd, len(engine.lines))
        if result.action == CommandAction.GOTO_LINE and result.line is not None:
            engine.jump_to_line(result.line)
        if on_result:
            on_result(result)

    engine.set_command_callback(handle)
