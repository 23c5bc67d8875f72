"""Custom exceptions for vimarena.

Key handling never raises; these only surface while building an engine
or loading settings.
"""


class VimArenaError(Exception):
    """Base class for vimarena errors."""


class ConfigError(VimArenaError):
    """Exception raised when engine options or a settings file are invalid."""


class KeymapError(VimArenaError):
    """Exception raised when a key binding names a handler that doesn't exist."""
