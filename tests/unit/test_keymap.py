"""Tests for the vim keymap."""

import pytest

from vimarena import KeymapError, VimEngine
from vimarena.engine import (
    BindingType,
    KeyEvent,
    VimBinding,
    VimKeymapConfig,
    get_vim_keymap,
    reset_vim_keymap,
    set_vim_keymap,
)
from vimarena.engine.keymap import DefaultVimKeymapProvider


class TestLookup:
    """Tests for finding bindings by key and mode."""

    def test_motion_in_normal_mode(self):
        """Test looking up a motion."""
        binding = get_vim_keymap().lookup("w")
        assert binding.type == BindingType.MOTION
        assert binding.handler == "motion_word_forward"

    def test_horizontal_motions_not_linewise(self):
        """Test that only vertical motions apply in line mode."""
        keymap = get_vim_keymap()
        assert keymap.lookup("h", "line") is None
        assert keymap.lookup("j", "line") is not None

    def test_insert_keys_normal_only(self):
        """Test that insert keys are normal mode only."""
        keymap = get_vim_keymap()
        assert keymap.lookup("i", "normal").insert is True
        assert keymap.lookup("i", "visual") is None

    def test_sequence_start(self):
        """Test detecting the first key of gg."""
        keymap = get_vim_keymap()
        assert keymap.starts_sequence("g")
        assert not keymap.starts_sequence("d")

    @pytest.mark.parametrize("key", ["A", "ArrowUp", ""])
    def test_named_keys_are_not_sequences(self, key):
        """Arrow key names don't make A a combo prefix."""
        assert not get_vim_keymap().starts_sequence(key)

    def test_text_object_aliases(self):
        """Test ib and iB."""
        keymap = get_vim_keymap()
        assert keymap.get_text_object("ib").handler == keymap.get_text_object("i(").handler
        assert keymap.get_text_object("iB").handler == keymap.get_text_object("i{").handler


class TestValidation:
    """Tests for handler name checks."""

    def test_default_keymap_is_valid(self):
        """Test that every default binding has a handler."""
        get_vim_keymap().validate()

    def test_unknown_handler(self):
        """Test that a binding to a missing handler is rejected."""
        config = VimKeymapConfig()
        config.motions["n"] = VimBinding("n", BindingType.MOTION, "motion_next_match")
        provider = DefaultVimKeymapProvider(config)
        with pytest.raises(KeymapError):
            provider.validate()
        with pytest.raises(KeymapError):
            VimEngine(keymap=provider)


class TestCustomKeymap:
    """Tests for replacing the keymap."""

    def test_injected_keymap(self):
        """Test an engine built with its own keymap."""
        config = VimKeymapConfig()
        config.motions["n"] = VimBinding("n", BindingType.MOTION, "motion_down", "Down")
        engine = VimEngine(initial_text="a\nb", keymap=DefaultVimKeymapProvider(config))
        assert engine.handle_key_down(KeyEvent("n")) is True
        assert engine.cursor.row == 1

    def test_global_keymap(self):
        """Test replacing and resetting the global keymap."""
        config = VimKeymapConfig()
        del config.motions["w"]
        provider = DefaultVimKeymapProvider(config)
        set_vim_keymap(provider)
        assert get_vim_keymap() is provider

        engine = VimEngine(initial_text="foo bar")
        assert engine.handle_key_down(KeyEvent("w")) is False

        reset_vim_keymap()
        assert get_vim_keymap() is not provider
