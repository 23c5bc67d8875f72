"""Pytest fixtures for vimarena tests."""

from __future__ import annotations

from collections.abc import Iterable

import pytest

from vimarena.engine import KeyEvent, VimEngine, reset_vim_keymap


@pytest.fixture(autouse=True)
def reset_keymap_after_test():
    """Reset keymap after each test to avoid cross-test pollution."""
    yield
    reset_vim_keymap()


@pytest.fixture
def make_engine():
    """Build an engine over text, optionally starting at a position."""

    def _make(text: str = "", position: tuple[int, int] | None = None, **options) -> VimEngine:
        engine = VimEngine(initial_text=text, **options)
        if position is not None:
            engine.reset_document(text, position)
        return engine

    return _make


@pytest.fixture
def press():
    """Press keys in order; a string is split into single characters."""

    def _press(engine: VimEngine, keys: str | Iterable[str]) -> list[bool]:
        return [engine.handle_key_down(KeyEvent(key)) for key in keys]

    return _press
