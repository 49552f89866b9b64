"""Translation between logical buffer positions and screen coordinates.

All functions are pure. Positions are indices into the input buffer
(``0 <= pos <= len(buffer)``); screen results are ``(column, row_offset)``
pairs where ``row_offset`` is relative to the row the prompt starts on.
The prompt occupies the first ``prompt_length`` cells of logical line 0.
"""

from __future__ import annotations

from typing import Sequence

NEWLINE = "\n"


def line_index_at(buffer: Sequence[str], pos: int) -> int:
    """Count the hard newlines in ``buffer[0 : pos + 1]``."""
    end = min(pos + 1, len(buffer))
    return sum(1 for ch in buffer[:end] if ch == NEWLINE)


def relative_position(buffer: Sequence[str], pos: int, prompt_length: int) -> tuple[int, int]:
    """Return ``(column, line)`` of *pos* within its logical line.

    The column restarts at 0 after every hard newline and includes the
    prompt on line 0. Terminal width is not taken into account.
    """
    column = 0
    line = 0
    for ch in buffer[:pos]:
        if ch == NEWLINE:
            line += 1
            column = 0
        else:
            column += 1
    if line == 0:
        column += prompt_length
    return column, line


def wrap_position(pos: int, prompt_length: int, width: int) -> tuple[int, int]:
    """Screen offset of *pos* in a buffer without hard newlines."""
    cells = pos + prompt_length
    return cells % width, cells // width


def _line_rows(cells: int, width: int) -> int:
    # A line filling the last column leaves the terminal in its pending-wrap
    # state, so the newline that follows does not add a blank row.
    return max(cells - 1, 0) // width + 1


def screen_offset(
    buffer: Sequence[str],
    pos: int,
    prompt_length: int,
    width: int,
) -> tuple[int, int]:
    """Screen ``(column, row_offset)`` of *pos*, honouring wraps and hard newlines."""
    column, line = relative_position(buffer, pos, prompt_length)
    rows = 0
    cells = prompt_length
    seen = 0
    for ch in buffer:
        if seen == line:
            break
        if ch == NEWLINE:
            rows += _line_rows(cells, width)
            cells = 0
            seen += 1
        else:
            cells += 1
    return column % width, rows + column // width


def rendered_line_count(buffer: Sequence[str], prompt_length: int, width: int) -> int:
    """Number of screen rows the prompt and *buffer* occupy."""
    newlines = line_index_at(buffer, len(buffer))
    _, last_row = screen_offset(buffer, len(buffer), prompt_length, width)
    return max(newlines, last_row) + 1


def word_before(buffer: Sequence[str], pos: int) -> str:
    """The run of non-whitespace characters immediately left of *pos*."""
    start = pos
    while start > 0 and not buffer[start - 1].isspace():
        start -= 1
    return "".join(buffer[start:pos])
