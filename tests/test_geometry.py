"""Tests for buffer-to-screen geometry."""

from __future__ import annotations

from pi.prompt.geometry import (
    line_index_at,
    relative_position,
    rendered_line_count,
    screen_offset,
    word_before,
    wrap_position,
)


class TestLineIndex:
    def test_no_newlines(self) -> None:
        assert line_index_at(list("abc"), 2) == 0

    def test_counts_newline_at_position(self) -> None:
        buffer = list("a\nb")
        assert line_index_at(buffer, 0) == 0
        assert line_index_at(buffer, 1) == 1
        assert line_index_at(buffer, 3) == 1


class TestRelativePosition:
    def test_first_line_includes_prompt(self) -> None:
        assert relative_position(list("ab\ncd"), 2, 2) == (4, 0)

    def test_later_line_starts_at_zero(self) -> None:
        assert relative_position(list("ab\ncd"), 4, 2) == (1, 1)
        assert relative_position(list("ab\ncd"), 3, 2) == (0, 1)


class TestWrapArithmetic:
    def test_wrap_position(self) -> None:
        assert wrap_position(5, 8, 10) == (3, 1)

    def test_screen_offset_wraps(self) -> None:
        assert screen_offset(list("abcde"), 5, 8, 10) == (3, 1)

    def test_full_row_puts_cursor_on_next_row(self) -> None:
        assert screen_offset(list("abcdefgh"), 8, 2, 10) == (0, 1)

    def test_wrapped_line_before_newline(self) -> None:
        buffer = list("abcdefghij\nx")
        assert screen_offset(buffer, len(buffer), 2, 10) == (1, 2)

    def test_full_row_before_newline_adds_no_blank_row(self) -> None:
        buffer = list("abcdefgh\nx")
        assert screen_offset(buffer, len(buffer), 2, 10) == (1, 1)

    def test_position_inside_first_line(self) -> None:
        buffer = list("abcdefghij\nx")
        assert screen_offset(buffer, 9, 2, 10) == (1, 1)


class TestRenderedLineCount:
    def test_single_row(self) -> None:
        assert rendered_line_count(list("abc"), 2, 80) == 1

    def test_hard_newlines(self) -> None:
        assert rendered_line_count(list("a\nb"), 2, 80) == 2
        assert rendered_line_count(list("a\n"), 2, 80) == 2

    def test_wrapped_rows(self) -> None:
        assert rendered_line_count(list("abcdefgh"), 2, 10) == 2
        assert rendered_line_count(list("abcdefg"), 2, 10) == 1

    def test_empty_buffer(self) -> None:
        assert rendered_line_count([], 2, 80) == 1


class TestWordBefore:
    def test_fragment_at_end(self) -> None:
        assert word_before(list("say ge"), 6) == "ge"

    def test_after_space(self) -> None:
        assert word_before(list("say "), 4) == ""

    def test_mid_buffer(self) -> None:
        assert word_before(list("ab cd"), 2) == "ab"

    def test_stops_at_newline(self) -> None:
        assert word_before(list("a\nbc"), 4) == "bc"
