"""Virtual terminal for testing -- implements the Terminal protocol in-memory.

This module provides a ``VirtualTerminal`` class that satisfies the
``pi.prompt.terminal.Terminal`` protocol without performing any real I/O.
Output is applied to a character grid that models an xterm-like screen
(deferred wrap, scrolling at the bottom row) and also recorded verbatim.

Input is queued in batches. Keys in one batch "arrive together", so
``key_available`` reports ``True`` while the batch being read still has keys
left, which is how typeahead and unbracketed pastes look to the editor.
"""

from __future__ import annotations

from collections import deque

from pi.prompt.keys import Key, KeyEvent, char_event
from pi.prompt.terminal import TerminalError


class VirtualTerminal:
    """In-memory terminal with a screen grid and a scripted key queue.

    Parameters
    ----------
    rows:
        Number of terminal rows (height).
    columns:
        Number of terminal columns (width).
    """

    def __init__(self, rows: int = 24, columns: int = 80) -> None:
        self._rows = rows
        self._columns = columns
        self._grid: list[list[str]] = [[" "] * columns for _ in range(rows)]
        self._column = 0
        self._row = 0
        self._pending_wrap = False
        self._buffer: list[str] = []
        self._batches: deque[deque[KeyEvent]] = deque()
        self._arrived: deque[KeyEvent] = deque()
        self.scroll_count = 0

    # -- Terminal protocol: properties --------------------------------------

    @property
    def rows(self) -> int:
        return self._rows

    @property
    def columns(self) -> int:
        return self._columns

    # -- Terminal protocol: cursor ------------------------------------------

    def get_cursor(self) -> tuple[int, int]:
        return self._column, self._row

    def set_cursor(self, column: int, row: int) -> None:
        if not (0 <= column < self._columns and 0 <= row < self._rows):
            raise TerminalError(
                f"cursor position ({column}, {row}) outside "
                f"{self._columns}x{self._rows} terminal"
            )
        self._column = column
        self._row = row
        self._pending_wrap = False

    # -- Terminal protocol: output ------------------------------------------

    def write(self, data: str) -> None:
        """Record *data* and apply it to the screen grid."""
        self._buffer.append(data)
        for ch in data:
            if ch == "\n":
                self._column = 0
                self._pending_wrap = False
                self._line_feed()
            elif ch == "\r":
                self._column = 0
                self._pending_wrap = False
            else:
                self._put(ch)

    def _put(self, ch: str) -> None:
        if self._pending_wrap:
            self._column = 0
            self._pending_wrap = False
            self._line_feed()
        self._grid[self._row][self._column] = ch
        if self._column == self._columns - 1:
            self._pending_wrap = True
        else:
            self._column += 1

    def _line_feed(self) -> None:
        if self._row == self._rows - 1:
            self._grid.pop(0)
            self._grid.append([" "] * self._columns)
            self.scroll_count += 1
        else:
            self._row += 1

    # -- Terminal protocol: input -------------------------------------------

    def read_key(self) -> KeyEvent:
        if not self._arrived:
            if not self._batches:
                raise RuntimeError("no more scripted input")
            self._arrived = self._batches.popleft()
        return self._arrived.popleft()

    def key_available(self) -> bool:
        return bool(self._arrived)

    # -- Test helpers: input ------------------------------------------------

    def type_text(self, text: str) -> None:
        """Queue *text* one key at a time, as a person typing; ``"\\n"`` is Enter."""
        for ch in text:
            self._batches.append(deque([_event_for(ch)]))

    def press(self, *keys: KeyEvent | str) -> None:
        """Queue each key as its own arrival. Strings name ``Key`` constants."""
        for key in keys:
            event = key if isinstance(key, KeyEvent) else KeyEvent(key)
            self._batches.append(deque([event]))

    def burst(self, text: str) -> None:
        """Queue *text* as a single arrival, like an unbracketed paste."""
        self._batches.append(deque(_event_for(ch) for ch in text))

    def simulate_paste(self, text: str) -> None:
        """Queue *text* as a bracketed paste."""
        events: deque[KeyEvent] = deque()
        for ch in text:
            if ch == "\n":
                events.append(KeyEvent(Key.enter, pasted=True))
            elif ch == "\t":
                events.append(KeyEvent(Key.tab, pasted=True))
            else:
                events.append(char_event(ch, pasted=True))
        self._batches.append(events)

    @property
    def pending_keys(self) -> int:
        return len(self._arrived) + sum(len(batch) for batch in self._batches)

    # -- Test helpers: output -----------------------------------------------

    @property
    def output(self) -> str:
        """Return everything written to the terminal as a single string."""
        return "".join(self._buffer)

    def line(self, row: int) -> str:
        """Text on screen row *row*, without trailing blanks."""
        return "".join(self._grid[row]).rstrip()

    def screen(self) -> list[str]:
        """All screen rows, without trailing blanks."""
        return [self.line(row) for row in range(self._rows)]

    def resize(self, rows: int | None = None, columns: int | None = None) -> None:
        """Change the dimensions, keeping the top-left part of the screen."""
        rows = self._rows if rows is None else rows
        columns = self._columns if columns is None else columns
        grid = [[" "] * columns for _ in range(rows)]
        for r in range(min(rows, self._rows)):
            for c in range(min(columns, self._columns)):
                grid[r][c] = self._grid[r][c]
        self._grid = grid
        self._rows = rows
        self._columns = columns
        self._column = min(self._column, columns - 1)
        self._row = min(self._row, rows - 1)
        self._pending_wrap = False


def _event_for(ch: str) -> KeyEvent:
    if ch == "\n":
        return KeyEvent(Key.enter)
    if ch == "\t":
        return KeyEvent(Key.tab)
    return char_event(ch)
