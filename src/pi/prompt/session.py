"""Keystroke state machine for editing one line of input.

A ``LineSession`` owns the input buffer and the ``SessionState`` for a single
line: it captures the anchor, reads key events until the line is committed,
and keeps the screen in step with every edit through the ``Renderer``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Sequence

from pi.prompt.completion import CompletionCycler
from pi.prompt.config import PromptConfig
from pi.prompt.geometry import NEWLINE, word_before
from pi.prompt.history import History
from pi.prompt.keys import Key, KeyEvent
from pi.prompt.renderer import Renderer, RenderResult
from pi.prompt.terminal import Terminal, TerminalError

logger = logging.getLogger(__name__)


@dataclass
class SessionState:
    """Where the current line lives on screen and where its cursor is."""

    prompt: str
    anchor_left: int
    anchor_top: int
    cursor: int = 0
    last_key: KeyEvent | None = None
    # Text written by the most recent redraw
    rendered: str = ""

    @property
    def prompt_length(self) -> int:
        return len(self.prompt)


class LineSession:
    """Reads key events and edits one line until it is committed."""

    def __init__(
        self,
        terminal: Terminal,
        renderer: Renderer,
        history: History,
        prompt: str,
        candidates: Sequence[str] | None = None,
        config: PromptConfig | None = None,
    ) -> None:
        self._terminal = terminal
        self._renderer = renderer
        self._history = history
        self._prompt = prompt
        self._candidates = candidates if candidates is not None else []
        self._config = config or PromptConfig()

        self.buffer: list[str] = []
        self.state = SessionState(prompt=prompt, anchor_left=len(prompt), anchor_top=0)
        self._completion: CompletionCycler | None = None

    # -- lifecycle ----------------------------------------------------------

    def begin(self) -> None:
        """Anchor the session at the start of a row and print the prompt."""
        self.state.anchor_top = self._capture_row()
        self._terminal.write(self._prompt)
        self._settle_anchor()
        self._history.begin()

    def _settle_anchor(self) -> None:
        # A prompt wider than the screen may have scrolled it on the way down
        try:
            _, row = self._terminal.get_cursor()
        except TerminalError as exc:
            logger.debug("cursor position unavailable after prompt (%s)", exc)
            return
        width = self._terminal.columns
        self.state.anchor_top = row - max(self.state.prompt_length - 1, 0) // width

    def _capture_row(self) -> int:
        try:
            column, row = self._terminal.get_cursor()
            if column != 0:
                self._terminal.write(NEWLINE)
                _, row = self._terminal.get_cursor()
        except TerminalError as exc:
            # Assume a fresh row at the bottom of the screen
            logger.warning("cursor position unavailable (%s); anchoring at bottom row", exc)
            self._terminal.write(NEWLINE)
            row = self._terminal.rows - 1
        return row

    def read_line(self) -> list[str]:
        """Edit until commit and return a copy of the committed buffer."""
        self.begin()
        while not self.handle_key(self._terminal.read_key()):
            pass
        self._completion = None
        self._report(self._renderer.move_below(self.state, self.buffer))
        return list(self.buffer)

    # -- key dispatch -------------------------------------------------------

    def handle_key(self, event: KeyEvent) -> bool:  # noqa: C901
        """Apply one key event. Returns ``True`` when the line is committed."""
        logger.debug("key %s", event.key_id)
        is_tab = event.key == Key.tab and not event.pasted
        if not is_tab:
            self._completion = None

        committed = False
        key = event.key

        if key == Key.left:
            if self.state.cursor > 0:
                self.state.cursor -= 1
                self._place()
        elif key == Key.right:
            if self.state.cursor < len(self.buffer):
                self.state.cursor += 1
                self._place()
        elif key == Key.home or (event.ctrl and key == "h"):
            self.state.cursor = 0
            self._place()
        elif key == Key.end or (event.ctrl and key == "e"):
            self.state.cursor = len(self.buffer)
            self._place()
        elif key == Key.delete:
            if self.state.cursor < len(self.buffer):
                del self.buffer[self.state.cursor]
                self._redraw()
        elif key == Key.backspace:
            if self.state.cursor > 0:
                self.state.cursor -= 1
                del self.buffer[self.state.cursor]
                self._redraw()
        elif key == Key.up:
            self._recall(self._history.recall_backward())
        elif key == Key.down:
            self._recall(self._history.recall_forward())
        elif is_tab and self._candidates:
            self._complete(backward=event.shift)
        elif key == Key.tab:
            self._insert(" " * self._config.tab_width)
        elif key == Key.escape:
            self._escape()
        elif event.ctrl and key == "c":
            raise KeyboardInterrupt
        elif key == Key.enter:
            if self._is_soft_return(event):
                self._insert(NEWLINE)
            else:
                committed = True
        elif event.is_printable():
            self._insert(event.char)

        self.state.last_key = event
        return committed

    def _is_soft_return(self, event: KeyEvent) -> bool:
        if event.shift or event.alt or event.pasted:
            return True
        # Best effort: an Enter with more keys already queued is taken to be
        # part of a paste. Very fast typing can look the same.
        return self._config.detect_paste and self._terminal.key_available()

    # -- editing ------------------------------------------------------------

    def _insert(self, text: str) -> None:
        cursor = self.state.cursor
        self.buffer[cursor:cursor] = list(text)
        self.state.cursor = cursor + len(text)
        self._redraw()

    def _recall(self, entry: list[str] | None) -> None:
        if entry is None:
            return
        self.buffer = entry
        self.state.cursor = len(entry)
        self._redraw()

    def _complete(self, *, backward: bool) -> None:
        cycler = self._completion
        last_key = self.state.last_key
        if cycler is not None and last_key is not None and last_key.key == Key.tab:
            replaced = cycler.current or ""
        else:
            fragment = word_before(self.buffer, self.state.cursor)
            cycler = CompletionCycler(
                self._candidates,
                fragment,
                include_fragment=self._config.complete_with_fragment,
            )
            replaced = fragment

        match = cycler.next(backward)
        if match is None:
            self._completion = None
            logger.info("no completion matches %r", cycler.fragment)
            self._notify(f"No completion matches '{cycler.fragment}'.")
            return

        self._completion = cycler
        end = self.state.cursor
        start = end - len(replaced)
        self.buffer[start:end] = list(match)
        self.state.cursor = start + len(match)
        self._redraw()

    def _escape(self) -> None:
        last_key = self.state.last_key
        if last_key is not None and last_key.key == Key.escape:
            logger.info("double escape; exiting")
            self._renderer.move_below(self.state, self.buffer)
            raise SystemExit(0)
        self._notify(self._config.escape_warning)

    # -- rendering ----------------------------------------------------------

    def _place(self) -> None:
        self._report(self._renderer.place_cursor(self.state, self.buffer, self.state.cursor))

    def _redraw(self) -> None:
        cleared = self._renderer.clear_line(self.state)
        drawn = self._renderer.rewrite_line(self.state, self.buffer, self.state.cursor)
        self._report(cleared)
        self._report(drawn)

    def _notify(self, message: str) -> None:
        self._report(self._renderer.notice(self.state, self.buffer, self.state.cursor, message))

    def _report(self, failure: RenderResult) -> None:
        if failure is None:
            return
        logger.warning("render failure: %s", failure.message)
        second = self._renderer.notice(self.state, self.buffer, self.state.cursor, failure.message)
        if second is not None:
            logger.error("could not show render failure: %s", second.message)
