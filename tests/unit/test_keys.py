"""Tests for key event helpers."""

import pytest

from vimarena.engine.keys import KeyEvent, has_command_modifier, is_printable


class TestIsPrintable:
    """Tests for deciding whether a key types a character."""

    @pytest.mark.parametrize("key", ["a", "Z", "0", " ", "(", "é"])
    def test_single_characters(self, key):
        """Test characters that type text."""
        assert is_printable(KeyEvent(key))

    @pytest.mark.parametrize("key", ["Enter", "Escape", "ArrowLeft", "Tab", "Shift", "Dead"])
    def test_named_keys(self, key):
        """Test keys with names instead of characters."""
        assert not is_printable(KeyEvent(key))

    def test_ctrl_and_meta(self):
        """Test that ctrl and meta make shortcuts."""
        assert not is_printable(KeyEvent("a", ctrl_key=True))
        assert not is_printable(KeyEvent("a", meta_key=True))

    def test_alt(self):
        """Alt alone is a shortcut; AltGr types characters."""
        assert not is_printable(KeyEvent("a", alt_key=True))
        assert is_printable(KeyEvent("@", alt_key=True, modifiers=frozenset({"AltGraph"})))

    def test_shift_is_not_a_command_modifier(self):
        """Test that shift only changes the character."""
        event = KeyEvent("A", shift_key=True)
        assert not has_command_modifier(event)
        assert is_printable(event)


class TestKeyEvent:
    """Tests for the event object itself."""

    def test_prevent_default(self):
        """Test marking an event handled."""
        event = KeyEvent.of("j")
        assert not event.default_prevented
        event.prevent_default()
        assert event.default_prevented

    def test_modifier_state(self):
        """Test querying extra modifiers."""
        event = KeyEvent("x", modifiers=frozenset({"AltGraph"}))
        assert event.get_modifier_state("AltGraph")
        assert not event.get_modifier_state("CapsLock")
