"""vimarena - a vim motion engine for scored training rounds."""

from .config import EngineOptions, load_engine_options
from .engine import KeyEvent, VimEngine, VimMode
from .exceptions import ConfigError, KeymapError, VimArenaError

__version__ = "0.1.0"

__all__ = [
    "ConfigError",
    "EngineOptions",
    "KeyEvent",
    "KeymapError",
    "VimArenaError",
    "VimEngine",
    "VimMode",
    "load_engine_options",
]
