#!/usr/bin/env python3
"""vimarena - vim motion drills from the command line."""

from __future__ import annotations

import argparse
import logging
import re
import sys
from pathlib import Path

from rich.console import Console
from rich.markup import escape as escape_markup
from rich.table import Table
from rich.text import Text

from .catalog import MOTIONS, Motion, get_latest_motion_for_level
from .config import EngineOptions, load_engine_options
from .engine import CommandAction, CommandResult, KeyEvent, VimEngine, VimMode, route_commands
from .engine.keys import BACKSPACE, ENTER, ESCAPE
from .engine.state import CharSelection, LineSelection
from .exceptions import VimArenaError

# Named keys accepted inside --keys, written the way vim mappings spell them
KEY_NOTATION = re.compile(r"<(esc|cr|bs|lt)>", re.IGNORECASE)
KEY_NAMES = {
    "esc": ESCAPE,
    "cr": ENTER,
    "bs": BACKSPACE,
    "lt": "<",
}

CURSOR_STYLE = "reverse"
SELECTION_STYLE = "on dark_blue"


def parse_keys(keys_text: str) -> list[str]:
    """Split a key string like ``"dw<Esc>ix<CR>"`` into engine key names."""
    keys: list[str] = []
    pos = 0
    for match in KEY_NOTATION.finditer(keys_text):
        keys.extend(keys_text[pos : match.start()])
        keys.append(KEY_NAMES[match.group(1).lower()])
        pos = match.end()
    keys.extend(keys_text[pos:])
    return keys


def parse_position(value: str) -> tuple[int, int]:
    """Parse ``ROW,COL`` (0-indexed)."""
    try:
        row, col = (int(part) for part in value.split(","))
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"Expected ROW,COL, got {value!r}") from exc
    return row, col


def _is_selected(engine: VimEngine, row: int, col: int) -> bool:
    selection = engine.get_selection()
    if isinstance(selection, LineSelection):
        return selection.start_row <= row <= selection.end_row
    if isinstance(selection, CharSelection):
        return selection.start <= (row, col) < selection.end
    return False


def render_buffer(engine: VimEngine) -> Text:
    """Render the visible buffer rows with cursor and selection highlighted."""
    result = Text()
    base = engine.view_base()
    visible = engine.lines[base : base + engine.options.max_rows]
    cursor = engine.cursor

    for offset, line in enumerate(visible):
        row = base + offset
        result.append(f"{row + 1:>4} ", style="dim")
        # Empty lines still show the cursor or the line selection
        cells = line or " "
        for col, char in enumerate(cells):
            style = ""
            if _is_selected(engine, row, col):
                style = SELECTION_STYLE
            if row == cursor.row and col == cursor.col:
                style = CURSOR_STYLE
            result.append(char, style=style or None)
        if row == cursor.row and cursor.col >= len(cells):
            result.append(" ", style=CURSOR_STYLE)
        result.append("\n")

    return result


def render_status(engine: VimEngine) -> Text:
    """One-line status: mode, cursor and pending input."""
    ui = engine.get_ui_state()
    status = Text()
    status.append(f" {engine.mode.value.upper()} ", style="bold black on green")
    status.append(f"  {engine.cursor.row + 1}:{engine.cursor.col + 1}")
    pending = f"{ui.pending_count or ''}{ui.pending_combo}"
    if pending:
        status.append(f"  pending {pending}", style="yellow")
    if engine.mode == VimMode.COMMAND:
        status.append(f"  :{ui.command_buffer}")
    return status


def cmd_replay(args: argparse.Namespace, console: Console) -> int:
    """Replay a key sequence over a text and print the result."""
    if args.text_file is not None:
        text = args.text_file.read_text(encoding="utf-8")
    else:
        text = args.inline_text

    options = load_engine_options(args.settings) if args.settings else EngineOptions()
    overrides: dict[str, object] = {"initial_text": text}
    if args.no_insert:
        overrides["insert_mode_enabled"] = False
    if args.max_rows is not None:
        overrides["max_rows"] = args.max_rows

    engine = VimEngine(options, **overrides)
    results: list[CommandResult] = []
    route_commands(engine, results.append)
    if args.position is not None:
        engine.reset_document(text, args.position)

    unhandled = [key for key in parse_keys(args.keys) if not engine.handle_key_down(KeyEvent(key))]

    console.print(render_buffer(engine), end="")
    console.print(render_status(engine))
    for result in results:
        if result.error:
            console.print(f"[red]{escape_markup(result.message)}[/red]")
        elif result.action != CommandAction.NONE:
            console.print(f"[dim]command: {result.action.value}[/dim]")
    if unhandled:
        console.print(f"[dim]unhandled keys: {escape_markup(' '.join(unhandled))}[/dim]")
    return 0


def _motion_row(motion: Motion) -> tuple[str, ...]:
    return (str(motion.level), ", ".join(motion.keys), motion.label, motion.kind.value, motion.desc)


def cmd_motions(args: argparse.Namespace, console: Console) -> int:
    """Print the motion catalog, or the motion drilled at a level."""
    if args.level is not None:
        motion = get_latest_motion_for_level(args.level)
        if motion is None:
            console.print(f"No motion unlocked at level {args.level}")
            return 1
        motions: tuple[Motion, ...] = (motion,)
    else:
        motions = MOTIONS

    table = Table(title="Motions")
    for column in ("Level", "Keys", "Label", "Kind"):
        table.add_column(column, no_wrap=True)
    table.add_column("Description")
    for motion in motions:
        table.add_row(*(escape_markup(cell) for cell in _motion_row(motion)))
    console.print(table)
    return 0


def main(argv: list[str] | None = None) -> int:
    """Entry point for the CLI."""
    parser = argparse.ArgumentParser(
        prog="vimarena",
        description="Vim motion drills",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Log engine activity to stderr")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # replay
    replay_parser = subparsers.add_parser("replay", help="Replay keys over a text and show the result")
    source = replay_parser.add_mutually_exclusive_group(required=True)
    source.add_argument("--text", dest="text_file", type=Path, metavar="FILE", help="Read the text from FILE")
    source.add_argument("-t", dest="inline_text", metavar="TEXT", help="Use TEXT as the buffer")
    replay_parser.add_argument(
        "--keys",
        "-k",
        required=True,
        help="Keys to press; <Esc>, <CR>, <BS> and <lt> name special keys",
    )
    replay_parser.add_argument("--position", type=parse_position, metavar="ROW,COL", help="Start position (0-indexed)")
    replay_parser.add_argument("--no-insert", action="store_true", help="Disable the insert commands (i I a A o O)")
    replay_parser.add_argument("--max-rows", type=int, metavar="N", help="Viewport height")
    replay_parser.add_argument("--settings", type=Path, metavar="FILE", help="JSON settings file")

    # motions
    motions_parser = subparsers.add_parser("motions", help="List the motion catalog")
    motions_parser.add_argument("--level", type=int, metavar="N", help="Show the motion drilled at level N")

    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    console = Console()
    try:
        if args.command == "replay":
            return cmd_replay(args, console)
        if args.command == "motions":
            return cmd_motions(args, console)
    except (VimArenaError, OSError) as exc:
        Console(stderr=True).print(f"[red]Error:[/red] {escape_markup(str(exc))}")
        return 2

    parser.print_help()
    return 1


if __name__ == "__main__":
    sys.exit(main())
