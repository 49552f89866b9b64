"""Terminal abstraction for raw-mode, cursor-addressed line editing.

Provides the ``Terminal`` protocol consumed by the line editor and a concrete
``ProcessTerminal`` implementation backed by the process's controlling tty.
``ProcessTerminal`` manages raw mode, bracketed paste and xterm's
modifyOtherKeys mode, answers cursor position queries with DSR, and decodes
stdin into ``KeyEvent`` objects.
"""

from __future__ import annotations

import logging
import os
import re
import select
import sys
import termios
import time
import tty
from collections import deque
from typing import Protocol, TextIO

from pi.prompt.keys import Key, KeyEvent, char_event, parse_key_event
from pi.prompt.stdin_buffer import StdinBuffer

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# ANSI escape constants
# ---------------------------------------------------------------------------

_BRACKETED_PASTE_ENABLE = "\x1b[?2004h"
_BRACKETED_PASTE_DISABLE = "\x1b[?2004l"

_MODIFY_OTHER_KEYS_ENABLE = "\x1b[>4;1m"
_MODIFY_OTHER_KEYS_DISABLE = "\x1b[>4m"

_REPORT_CURSOR = "\x1b[6n"
_SET_CURSOR_FMT = "\x1b[{};{}H"

_CURSOR_REPORT_RE = re.compile(r"^\x1b\[(\d+);(\d+)R$")


class TerminalError(Exception):
    """A terminal operation could not be carried out."""


# ---------------------------------------------------------------------------
# Terminal protocol
# ---------------------------------------------------------------------------


class Terminal(Protocol):
    """Interface for the terminal operations the line editor needs.

    Coordinates are zero-based ``(column, row)`` pairs. ``write`` treats
    ``"\\n"`` as carriage return plus line feed.
    """

    @property
    def columns(self) -> int: ...

    @property
    def rows(self) -> int: ...

    def get_cursor(self) -> tuple[int, int]: ...

    def set_cursor(self, column: int, row: int) -> None: ...

    def write(self, data: str) -> None: ...

    def read_key(self) -> KeyEvent: ...

    def key_available(self) -> bool: ...


# ---------------------------------------------------------------------------
# ProcessTerminal implementation
# ---------------------------------------------------------------------------


class ProcessTerminal:
    """Concrete terminal backed by ``sys.stdin``/``sys.stdout``.

    Use as a context manager (or call ``start``/``stop``) so the tty is put
    back into its original mode whatever way the prompt ends.

    Parameters
    ----------
    escape_timeout:
        Seconds to wait for the rest of an escape sequence before treating a
        lone ESC as the Escape key.
    report_timeout:
        Seconds to wait for the terminal's answer to a cursor position query.
    """

    def __init__(
        self,
        stdin: TextIO | None = None,
        stdout: TextIO | None = None,
        *,
        escape_timeout: float = 0.025,
        report_timeout: float = 0.5,
    ) -> None:
        self._stdin = stdin or sys.stdin
        self._stdout = stdout or sys.stdout
        self._escape_timeout = escape_timeout
        self._report_timeout = report_timeout
        self._original_termios: list | None = None
        self._events: deque[KeyEvent] = deque()
        self._cursor_report: tuple[int, int] | None = None

        self._stdin_buffer = StdinBuffer()
        self._stdin_buffer.on_data(self._on_sequence)
        self._stdin_buffer.on_paste(self._on_paste)

    # -- properties ---------------------------------------------------------

    @property
    def columns(self) -> int:
        try:
            return os.get_terminal_size(self._stdout.fileno()).columns
        except (ValueError, OSError):
            return 80

    @property
    def rows(self) -> int:
        try:
            return os.get_terminal_size(self._stdout.fileno()).lines
        except (ValueError, OSError):
            return 24

    # -- start / stop -------------------------------------------------------

    def start(self) -> None:
        """Enable raw mode, bracketed paste and modifyOtherKeys."""
        try:
            fd = self._stdin.fileno()
            self._original_termios = termios.tcgetattr(fd)
        except (termios.error, OSError, ValueError) as exc:
            raise TerminalError(f"stdin is not a terminal: {exc}") from exc

        tty.setraw(fd)
        self._raw_write(_BRACKETED_PASTE_ENABLE + _MODIFY_OTHER_KEYS_ENABLE)
        logger.debug("terminal started (%dx%d)", self.columns, self.rows)

    def stop(self) -> None:
        """Restore the terminal attributes saved by ``start``."""
        self._raw_write(_MODIFY_OTHER_KEYS_DISABLE + _BRACKETED_PASTE_DISABLE)
        self._stdin_buffer.clear()
        self._events.clear()

        if self._original_termios is not None:
            termios.tcsetattr(self._stdin.fileno(), termios.TCSADRAIN, self._original_termios)
            self._original_termios = None
        logger.debug("terminal stopped")

    def __enter__(self) -> ProcessTerminal:
        self.start()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.stop()

    # -- output -------------------------------------------------------------

    def write(self, data: str) -> None:
        """Write text; raw mode needs an explicit carriage return per newline."""
        self._raw_write(data.replace("\r\n", "\n").replace("\n", "\r\n"))

    # -- cursor -------------------------------------------------------------

    def get_cursor(self) -> tuple[int, int]:
        """Ask the terminal where the cursor is (DSR) and wait for the answer."""
        self._cursor_report = None
        self._raw_write(_REPORT_CURSOR)

        deadline = time.monotonic() + self._report_timeout
        while self._cursor_report is None:
            remaining = deadline - time.monotonic()
            if remaining <= 0 or not self._fill(remaining):
                raise TerminalError("terminal did not report the cursor position")

        report = self._cursor_report
        self._cursor_report = None
        return report

    def set_cursor(self, column: int, row: int) -> None:
        columns, rows = self.columns, self.rows
        if not (0 <= column < columns and 0 <= row < rows):
            raise TerminalError(
                f"cursor position ({column}, {row}) outside {columns}x{rows} terminal"
            )
        self._raw_write(_SET_CURSOR_FMT.format(row + 1, column + 1))

    # -- input --------------------------------------------------------------

    def read_key(self) -> KeyEvent:
        """Block until a key event is available and return it."""
        while not self._events:
            self._fill(None)
        return self._events.popleft()

    def key_available(self) -> bool:
        """Whether another key event is already buffered, without blocking."""
        if self._events:
            return True
        self._fill(0)
        return bool(self._events)

    def _fill(self, timeout: float | None) -> bool:
        """Read whatever stdin has within *timeout* seconds.

        Returns ``False`` when nothing arrived in time.
        """
        fd = self._stdin.fileno()
        ready, _, _ = select.select([fd], [], [], timeout)
        if not ready:
            return False

        raw = os.read(fd, 4096)
        if not raw:
            raise EOFError("stdin closed")

        self._stdin_buffer.process(raw.decode("utf-8", errors="replace"))

        # A lone ESC is only the Escape key if nothing follows it quickly;
        # an open paste gets the same grace period for its next chunk
        while self._stdin_buffer.pending:
            ready, _, _ = select.select([fd], [], [], self._escape_timeout)
            if not ready:
                for sequence in self._stdin_buffer.flush():
                    self._on_sequence(sequence)
                break
            raw = os.read(fd, 4096)
            if not raw:
                raise EOFError("stdin closed")
            self._stdin_buffer.process(raw.decode("utf-8", errors="replace"))
        return True

    def _on_sequence(self, data: str) -> None:
        match = _CURSOR_REPORT_RE.match(data)
        if match:
            self._cursor_report = (int(match.group(2)) - 1, int(match.group(1)) - 1)
            return

        if data == "\x1b\x1b":
            self._events.extend([KeyEvent(Key.escape), KeyEvent(Key.escape)])
            return

        event = parse_key_event(data)
        if event is None:
            logger.debug("ignoring unrecognised input %r", data)
            return
        self._events.append(event)

    def _on_paste(self, data: str) -> None:
        for ch in data.replace("\r\n", "\n").replace("\r", "\n"):
            if ch == "\n":
                self._events.append(KeyEvent(Key.enter, pasted=True))
            elif ch == "\t":
                self._events.append(KeyEvent(Key.tab, pasted=True))
            else:
                self._events.append(char_event(ch, pasted=True))

    # -- private: raw write ------------------------------------------------

    def _raw_write(self, data: str) -> None:
        """Write directly to stdout, bypassing buffering."""
        try:
            self._stdout.write(data)
            self._stdout.flush()
        except OSError:
            pass
