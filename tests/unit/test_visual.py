"""Tests for visual and visual line mode."""

from vimarena.engine import CharSelection, LineSelection, Position, VimMode


def cursor_of(engine):
    return (engine.cursor.row, engine.cursor.col)


class TestCharacterwise:
    """Tests for v selections."""

    def test_selection_follows_cursor(self, make_engine, press):
        """Test that the selection grows with l."""
        engine = make_engine("abcdef")
        press(engine, "v")
        assert engine.mode == VimMode.VISUAL
        assert engine.get_selection() == CharSelection(Position(0, 0), Position(0, 1))
        press(engine, "lll")
        assert engine.get_selection() == CharSelection(Position(0, 0), Position(0, 4))

    def test_selection_backwards_keeps_anchor_char(self, make_engine, press):
        """Moving left of the anchor still includes the anchor character."""
        engine = make_engine("abcdefg", (0, 5))
        press(engine, "vhh")
        assert engine.get_selection() == CharSelection(Position(0, 3), Position(0, 6))

    def test_v_again_exits(self, make_engine, press):
        """Test that v leaves visual mode."""
        engine = make_engine("abc")
        press(engine, "vlv")
        assert engine.mode == VimMode.NORMAL
        assert engine.get_selection() is None
        assert cursor_of(engine) == (0, 1)

    def test_escape_clears_selection(self, make_engine, press):
        """Test that Escape drops the selection."""
        engine = make_engine("abc")
        press(engine, ["v", "l", "Escape"])
        assert engine.mode == VimMode.NORMAL
        assert engine.get_selection() is None

    def test_find_motion_extends_selection(self, make_engine, press):
        """Test f in visual mode."""
        engine = make_engine("foo(bar)")
        press(engine, "vf(")
        assert engine.get_selection() == CharSelection(Position(0, 0), Position(0, 4))

    def test_selection_across_lines(self, make_engine, press):
        """Test a selection over two lines."""
        engine = make_engine("abc\ndef", (0, 1))
        press(engine, "vj")
        assert engine.get_selection() == CharSelection(Position(0, 1), Position(1, 2))


class TestVisualDelete:
    """Tests for d and x on a selection."""

    def test_d_deletes_selection(self, make_engine, press):
        """Test d on a selection."""
        engine = make_engine("abc")
        press(engine, "vld")
        assert engine.lines == ["c"]
        assert engine.mode == VimMode.NORMAL
        assert engine.get_selection() is None

    def test_x_deletes_selection(self, make_engine, press):
        """Test x on a selection."""
        engine = make_engine("abc")
        press(engine, "vlx")
        assert engine.lines == ["c"]

    def test_delete_across_lines(self, make_engine, press):
        """Test deleting a selection over two lines."""
        engine = make_engine("abc\ndef", (0, 1))
        press(engine, "vjd")
        assert engine.lines == ["af"]
        assert cursor_of(engine) == (0, 1)


class TestLinewise:
    """Tests for V selections."""

    def test_rows_follow_cursor(self, make_engine, press):
        """Test that V selects whole rows around the anchor."""
        engine = make_engine("a\nb\nc\nd", (1, 0))
        press(engine, "V")
        assert engine.mode == VimMode.VISUAL_LINE
        assert engine.get_selection() == LineSelection(1, 1)
        assert engine.get_visual_line_start() == 1

        press(engine, "j")
        assert engine.get_selection() == LineSelection(1, 2)
        press(engine, "kk")
        assert engine.get_selection() == LineSelection(0, 1)

        press(engine, "d")
        assert engine.lines == ["c", "d"]
        assert engine.mode == VimMode.NORMAL

    def test_switch_to_charwise_keeps_anchor(self, make_engine, press):
        """Test v from line mode."""
        engine = make_engine("a\nbb\ncc\nd", (1, 0))
        press(engine, "Vjv")
        assert engine.mode == VimMode.VISUAL
        assert engine.get_selection() == CharSelection(Position(1, 0), Position(2, 1))
        assert engine.get_visual_line_start() is None

    def test_switch_to_linewise(self, make_engine, press):
        """Test V from visual mode."""
        engine = make_engine("abc\ndef\nghi", (0, 1))
        press(engine, "vjV")
        assert engine.mode == VimMode.VISUAL_LINE
        assert engine.get_selection() == LineSelection(0, 1)

    def test_state_reports_visual_modes(self, make_engine, press):
        """Test is_visual_mode across v, V and Escape."""
        engine = make_engine("abc\ndef")
        assert not engine.state.is_visual_mode()
        press(engine, "v")
        assert engine.state.is_visual_mode()
        press(engine, "V")
        assert engine.state.is_visual_mode()
        press(engine, ["Escape"])
        assert not engine.state.is_visual_mode()

    def test_horizontal_motions_unhandled(self, make_engine, press):
        """Test that l is unavailable in line mode."""
        engine = make_engine("abc")
        press(engine, "V")
        assert press(engine, "l") == [False]
        assert cursor_of(engine) == (0, 0)

    def test_big_g_extends_to_last_line(self, make_engine, press):
        """Test VG."""
        engine = make_engine("a\nb\nc")
        press(engine, "VG")
        assert engine.get_selection() == LineSelection(0, 2)


class TestTextObjectSelection:
    """Tests for vi{obj}."""

    def test_viw(self, make_engine, press):
        """Test viw followed by d."""
        engine = make_engine("foo bar", (0, 5))
        press(engine, "viw")
        assert engine.get_selection() == CharSelection(Position(0, 4), Position(0, 7))
        assert cursor_of(engine) == (0, 6)
        press(engine, "d")
        assert engine.lines == ["foo "]

    def test_vi_paren(self, make_engine, press):
        """Test vi(."""
        engine = make_engine("f(a, b)", (0, 3))
        press(engine, "vi(")
        assert engine.get_selection() == CharSelection(Position(0, 2), Position(0, 6))

    def test_vi_paren_multiline_ending_at_line_break(self, make_engine, press):
        """When the inside ends with a line break the cursor rests on the line before."""
        engine = make_engine("(\nabc\n)", (1, 1))
        press(engine, "vi(")
        assert engine.get_selection() == CharSelection(Position(0, 1), Position(1, 3))
        assert cursor_of(engine) == (1, 2)

    def test_missing_object_keeps_selection(self, make_engine, press):
        """Test vi( with no brackets."""
        engine = make_engine("abc", (0, 1))
        press(engine, "vi(")
        assert engine.get_selection() == CharSelection(Position(0, 1), Position(0, 2))
        assert engine.mode == VimMode.VISUAL

    def test_text_objects_unavailable_linewise(self, make_engine, press):
        """Test that i is unavailable in line mode."""
        engine = make_engine("foo bar")
        press(engine, "V")
        assert press(engine, "i") == [False]


class TestVisualRestrictions:
    """Keys that only work in normal mode."""

    def test_colon_unhandled(self, make_engine, press):
        """Test that : is unavailable in visual mode."""
        engine = make_engine("abc")
        press(engine, "v")
        assert press(engine, ":") == [False]
        assert engine.mode == VimMode.VISUAL

    def test_insert_keys_unhandled(self, make_engine, press):
        """Test that o is unavailable in visual mode."""
        engine = make_engine("abc")
        press(engine, "v")
        assert press(engine, "o") == [False]
        assert engine.mode == VimMode.VISUAL
