"""Tests for the line buffer and character classification."""

import pytest

from vimarena.engine.document import (
    Buffer,
    CharClass,
    char_class,
    normalize_text,
    split_lines,
)
from vimarena.engine.state import Position


class TestTextNormalization:
    """Tests for turning raw text into buffer lines."""

    def test_line_terminators_unified(self):
        """CRLF and lone CR become LF and trailing newlines are dropped."""
        assert normalize_text("a\r\nb\rc\n\n") == "a\nb\nc"

    def test_empty_text_is_one_empty_line(self):
        """The buffer is never empty."""
        assert split_lines("") == [""]
        assert split_lines("\n\n") == [""]

    def test_inner_blank_lines_kept(self):
        """Only trailing blank lines are trimmed."""
        assert Buffer("a\n\nb\n").lines == ["a", "", "b"]


class TestCharClass:
    """Tests for the word/punctuation/space classifier."""

    @pytest.mark.parametrize("char", ["a", "Z", "_", "9", "é", "ж"])
    def test_word_chars(self, char):
        """Letters, digits and underscore are word characters, including non-ASCII."""
        assert char_class(char) == CharClass.WORD

    @pytest.mark.parametrize("char", [".", "(", "-", "\"", "<"])
    def test_punctuation(self, char):
        """Everything else that isn't blank is punctuation."""
        assert char_class(char) == CharClass.PUNCTUATION

    @pytest.mark.parametrize("char", [" ", "\t"])
    def test_space(self, char):
        """Space and tab are blanks."""
        assert char_class(char) == CharClass.SPACE

    def test_big_word_merges_punctuation(self):
        """WORD mode only separates blanks from non-blanks."""
        assert char_class(".", big_word=True) == CharClass.WORD
        assert char_class(" ", big_word=True) == CharClass.SPACE


class TestBufferBasics:
    """Tests for positions and clamping."""

    def test_clamp_to_resting_position(self):
        """Rows clamp to the buffer and columns to the last character."""
        buf = Buffer("abc\nde")
        assert buf.clamp(5, 10) == Position(1, 1)
        assert buf.clamp(-1, -1) == Position(0, 0)

    def test_clamp_on_empty_line(self):
        """An empty line only has column 0."""
        buf = Buffer("abc\n\nx")
        assert buf.clamp(1, 3) == Position(1, 0)

    def test_first_non_blank(self):
        """Leading blanks are skipped."""
        buf = Buffer("   foo\n\t bar\n   ")
        assert buf.first_non_blank(0) == 3
        assert buf.first_non_blank(1) == 2
        assert buf.first_non_blank(2) == 0

    def test_reset_keeps_list_identity(self):
        """Hosts holding the lines list see the new content."""
        buf = Buffer("one\ntwo")
        lines = buf.lines
        buf.reset("three")
        assert lines is buf.lines
        assert lines == ["three"]


class TestWordNavigation:
    """Tests for word start/end scanning."""

    def test_next_word_start_skips_blanks(self):
        """Test that blanks between words are skipped."""
        buf = Buffer("foo bar")
        assert buf.next_word_start(Position(0, 0)) == Position(0, 4)

    def test_punctuation_starts_a_word(self):
        """A class change starts a new word; WORD ignores it."""
        buf = Buffer("foo.bar baz")
        assert buf.next_word_start(Position(0, 0)) == Position(0, 3)
        assert buf.next_word_start(Position(0, 0), big_word=True) == Position(0, 8)

    def test_empty_line_is_a_word(self):
        """w stops on an empty line, then continues past it."""
        buf = Buffer("foo\n\nbar")
        assert buf.next_word_start(Position(0, 0)) == Position(1, 0)
        assert buf.next_word_start(Position(1, 0)) == Position(2, 0)

    def test_no_word_left(self):
        """The end of the buffer is a hard stop."""
        buf = Buffer("foo")
        assert buf.next_word_start(Position(0, 1)) is None
        assert buf.word_start_forward(Position(0, 0)) == Position(0, 2)

    def test_word_end_forward(self):
        """Test moving to word ends, with a count."""
        buf = Buffer("foo bar")
        assert buf.word_end_forward(Position(0, 0)) == Position(0, 2)
        assert buf.word_end_forward(Position(0, 2)) == Position(0, 6)
        assert buf.word_end_forward(Position(0, 0), count=2) == Position(0, 6)

    def test_word_end_at_buffer_end(self):
        """No further word end means no movement."""
        buf = Buffer("foo bar")
        assert buf.word_end_forward(Position(0, 6)) is None
        assert buf.word_end_forward(Position(0, 0), count=5) == Position(0, 6)

    def test_word_start_backward(self):
        """Test moving back to word starts."""
        buf = Buffer("foo bar")
        assert buf.word_start_backward(Position(0, 5)) == Position(0, 4)
        assert buf.word_start_backward(Position(0, 4)) == Position(0, 0)
        assert buf.word_start_backward(Position(0, 0)) == Position(0, 0)

    def test_word_start_backward_stops_on_empty_line(self):
        """Test that b stops on an empty line."""
        buf = Buffer("foo\n\nbar")
        assert buf.word_start_backward(Position(2, 0)) == Position(1, 0)
        assert buf.word_start_backward(Position(1, 0)) == Position(0, 0)


class TestFindChar:
    """Tests for f/F/t/T scanning on the current line."""

    def test_find_forward_and_count(self):
        """Test finding the first and second match."""
        buf = Buffer("a,b,c")
        assert buf.find_char(Position(0, 0), ",") == Position(0, 1)
        assert buf.find_char(Position(0, 0), ",", count=2) == Position(0, 3)

    def test_find_backward(self):
        """Test finding a match to the left."""
        buf = Buffer("a,b,c")
        assert buf.find_char(Position(0, 4), ",", reverse=True) == Position(0, 3)

    def test_till_stops_short(self):
        """Test that till stops next to the match."""
        buf = Buffer("a,b,c")
        assert buf.find_char(Position(0, 4), ",", reverse=True, till=True) == Position(0, 4)
        assert buf.find_char(Position(0, 2), ",", till=True) == Position(0, 2)
        assert buf.find_char(Position(0, 0), "c", till=True) == Position(0, 3)

    def test_skip_adjacent_for_repeated_till(self):
        """A repeated t moves past the match it is already next to."""
        buf = Buffer("a,b,c")
        assert buf.find_char(Position(0, 0), ",", till=True, skip_adjacent=True) == Position(0, 2)

    def test_not_found(self):
        """The search never leaves the line."""
        buf = Buffer("abc\nxyz")
        assert buf.find_char(Position(0, 0), "x") is None


class TestTextObjectBoundaries:
    """Tests for inner word, quote and bracket ranges."""

    def test_word_boundaries(self):
        """Test the inner word around the cursor."""
        buf = Buffer("foo(bar_baz)qux")
        assert buf.word_boundaries(Position(0, 5)) == (Position(0, 4), Position(0, 11))

    def test_word_boundaries_on_blank(self):
        """On whitespace the object is that one character."""
        buf = Buffer("foo   bar")
        assert buf.word_boundaries(Position(0, 4)) == (Position(0, 4), Position(0, 5))

    def test_word_boundaries_on_empty_line(self):
        """Test that an empty line has no word."""
        buf = Buffer("")
        assert buf.word_boundaries(Position(0, 0)) is None

    def test_quote_inside(self):
        """Test the inside of a quoted string."""
        buf = Buffer('say "hi there" ok')
        assert buf.quote_boundaries(Position(0, 6), '"') == (Position(0, 5), Position(0, 13))

    def test_quote_on_closing_quote(self):
        """Test that the closing quote belongs to its pair."""
        buf = Buffer('say "hi there" ok')
        assert buf.quote_boundaries(Position(0, 13), '"') == (Position(0, 5), Position(0, 13))

    def test_quote_forward_fallback(self):
        """Before any quote, the next complete pair is used."""
        buf = Buffer('say "hi there" ok')
        assert buf.quote_boundaries(Position(0, 0), '"') == (Position(0, 5), Position(0, 13))

    def test_quote_empty_pair_rejected(self):
        """Test that an empty quote pair is skipped."""
        buf = Buffer('a "" "xy"')
        assert buf.quote_boundaries(Position(0, 2), '"') == (Position(0, 6), Position(0, 8))

    def test_quote_fallback_crosses_lines(self):
        """Test that the next pair may be on a later line."""
        buf = Buffer("none here\nx 'q' y")
        assert buf.quote_boundaries(Position(0, 0), "'") == (Position(1, 3), Position(1, 4))

    def test_quote_missing(self):
        """Test a quote character that isn't in the buffer."""
        buf = Buffer("no quotes")
        assert buf.quote_boundaries(Position(0, 3), "`") is None

    def test_bracket_nested_resolves_outer_pair(self):
        """Depth tracking walks past the inner group to the outer pair."""
        buf = Buffer("a(b(c)d)e")
        assert buf.bracket_boundaries(Position(0, 4), "(", ")") == (Position(0, 2), Position(0, 7))

    def test_bracket_outer_from_between_groups(self):
        """Depth tracking skips the nested group on either side."""
        buf = Buffer("a(b(c)d)e")
        assert buf.bracket_boundaries(Position(0, 2), "(", ")") == (Position(0, 2), Position(0, 7))
        assert buf.bracket_boundaries(Position(0, 6), "(", ")") == (Position(0, 2), Position(0, 7))

    def test_bracket_on_closing_bracket(self):
        """Test a cursor resting on an inner closing bracket."""
        buf = Buffer("a(b(c)d)e")
        assert buf.bracket_boundaries(Position(0, 5), "(", ")") == (Position(0, 2), Position(0, 7))

    def test_bracket_unclosed_opener_skipped(self):
        """An opener with no closer doesn't hide the pair inside it."""
        buf = Buffer("((x)")
        assert buf.bracket_boundaries(Position(0, 2), "(", ")") == (Position(0, 2), Position(0, 3))

    def test_bracket_empty_pair_rejected(self):
        """Test that an empty bracket pair is skipped."""
        buf = Buffer("f() (x)")
        assert buf.bracket_boundaries(Position(0, 1), "(", ")") == (Position(0, 5), Position(0, 6))

    def test_bracket_forward_fallback(self):
        """Test using the next pair when none encloses the cursor."""
        buf = Buffer("x (y)")
        assert buf.bracket_boundaries(Position(0, 0), "(", ")") == (Position(0, 3), Position(0, 4))

    def test_bracket_spans_lines(self):
        """Test a bracket pair over several lines."""
        buf = Buffer("if (\n  x\n)")
        assert buf.bracket_boundaries(Position(1, 2), "(", ")") == (Position(0, 4), Position(2, 0))

    def test_bracket_missing(self):
        """Test a bracket that isn't in the buffer."""
        buf = Buffer("abc")
        assert buf.bracket_boundaries(Position(0, 1), "{", "}") is None


class TestMutations:
    """Tests for in-place buffer edits."""

    def test_delete_range_same_line(self):
        """Test deleting part of one line."""
        buf = Buffer("hello")
        assert buf.delete_range(Position(0, 1), Position(0, 3)) == "el"
        assert buf.lines == ["hlo"]

    def test_delete_range_across_lines(self):
        """Head of the first line and tail of the last are merged."""
        buf = Buffer("abc\ndef\nghi")
        assert buf.delete_range(Position(2, 1), Position(0, 1)) == "bc\ndef\ng"
        assert buf.lines == ["ahi"]

    def test_delete_lines_never_empties_buffer(self):
        """Test that deleting every line leaves one empty line."""
        buf = Buffer("a\nb")
        assert buf.delete_lines(0, 5) == 2
        assert buf.lines == [""]

    def test_split_and_join(self):
        """Test splitting a line and joining it back."""
        buf = Buffer("hello")
        buf.split_line(Position(0, 2))
        assert buf.lines == ["he", "llo"]
        assert buf.join_with_previous(1) == Position(0, 2)
        assert buf.lines == ["hello"]

    def test_insert_text_and_line(self):
        """Test inserting text and a whole line."""
        buf = Buffer("ac")
        buf.insert_text(Position(0, 1), "b")
        buf.insert_line(0, "top")
        assert buf.lines == ["top", "abc"]
