"""Engine configuration.

``EngineOptions`` holds everything a host passes when it builds an
engine. Hosts that keep their settings on disk use
``load_engine_options`` to read them from a JSON file.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import TYPE_CHECKING, Any, Callable

from .exceptions import ConfigError

if TYPE_CHECKING:
    from .engine.state import UiState, VimMode

DEFAULT_MAX_ROWS = 20

# Options a settings file may set; callbacks only come from code
FILE_OPTIONS = ("initial_text", "max_rows", "insert_mode_enabled")


@dataclass
class EngineOptions:
    """Construction options for a VimEngine."""

    initial_text: str = ""
    max_rows: int = DEFAULT_MAX_ROWS  # Viewport height used by view_base()
    insert_mode_enabled: bool = True  # Gates i I a A o O
    on_mode_change: Callable[[VimMode], None] | None = None
    on_ui_state_change: Callable[[UiState], None] | None = None
    on_command: Callable[[str], None] | None = None

    def validate(self) -> None:
        """Raise ConfigError if the options can't build an engine."""
        if not isinstance(self.initial_text, str):
            raise ConfigError("initial_text must be a string")
        if isinstance(self.max_rows, bool) or not isinstance(self.max_rows, int):
            raise ConfigError("max_rows must be an integer")
        if self.max_rows < 1:
            raise ConfigError(f"max_rows must be at least 1, got {self.max_rows}")
        if not isinstance(self.insert_mode_enabled, bool):
            raise ConfigError("insert_mode_enabled must be a boolean")

    def with_overrides(self, **overrides: Any) -> EngineOptions:
        """Return a copy with the given fields replaced."""
        known = {f.name for f in fields(self)}
        unknown = sorted(set(overrides) - known)
        if unknown:
            raise ConfigError(f"Unknown engine option(s): {', '.join(unknown)}")
        return replace(self, **overrides)


def load_engine_options(path: Path | str, base: EngineOptions | None = None) -> EngineOptions:
    """Load engine options from a JSON settings file.

    The file holds an object with an ``"engine"`` section, e.g.
    ``{"engine": {"max_rows": 12, "insert_mode_enabled": false}}``.
    A missing file yields the defaults.

    Raises:
        ConfigError: If the file is unreadable or holds unknown/invalid options.
    """
    options = base or EngineOptions()
    path = Path(path).expanduser()
    if not path.exists():
        return options

    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        raise ConfigError(f"Failed to read settings JSON: {exc}") from exc

    if not isinstance(payload, dict):
        raise ConfigError("Settings file must contain a JSON object.")

    engine_data = payload.get("engine", {})
    if not isinstance(engine_data, dict):
        raise ConfigError('Settings file "engine" must be a JSON object.')

    unknown = sorted(set(engine_data) - set(FILE_OPTIONS))
    if unknown:
        raise ConfigError(f"Unknown engine setting(s): {', '.join(unknown)}")

    options = replace(options, **engine_data)
    options.validate()
    return options
