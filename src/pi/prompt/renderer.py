"""Redraws the input buffer on screen relative to the session anchor.

Every operation returns ``None`` on success or a ``RenderFailure`` describing
what went wrong while talking to the terminal. Failures are values, not
exceptions: a resize racing a redraw must not end the session.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional, Sequence

from pi.prompt.config import PromptConfig
from pi.prompt.geometry import NEWLINE, rendered_line_count, screen_offset
from pi.prompt.terminal import Terminal, TerminalError

if TYPE_CHECKING:
    from pi.prompt.session import SessionState

logger = logging.getLogger(__name__)

_TERMINAL_ERRORS = (TerminalError, OSError, ValueError)


@dataclass
class RenderFailure:
    """A redraw that could not be completed."""

    message: str
    error: Exception | None = None


RenderResult = Optional[RenderFailure]


class Renderer:
    """Draws the prompt buffer for one terminal."""

    def __init__(self, terminal: Terminal, config: PromptConfig | None = None) -> None:
        self._terminal = terminal
        self._config = config or PromptConfig()

    # -- clearing -----------------------------------------------------------

    def clear_line(self, state: SessionState) -> RenderResult:
        """Blank out the text drawn by the previous redraw.

        The blanks keep the old text's hard newlines so they land on exactly
        the cells that were written, followed by a margin that stops at the
        end of the row.
        """
        try:
            width = self._terminal.columns
            if self._fit_anchor(state, width) or not state.rendered:
                return None
            drawn = state.rendered
            end_column, _ = screen_offset(drawn, len(drawn), state.prompt_length, width)
            margin = min(self._config.clear_margin, width - end_column)
            blanks = "".join(NEWLINE if ch == NEWLINE else " " for ch in drawn)
            self._set_origin(state, width)
            self._terminal.write(blanks + " " * margin)
            state.rendered = ""
        except _TERMINAL_ERRORS as exc:
            return RenderFailure(f"clear failed: {exc}", exc)
        return None

    # -- drawing ------------------------------------------------------------

    def rewrite_line(self, state: SessionState, buffer: Sequence[str], pos: int) -> RenderResult:
        """Write *buffer* from the anchor and put the cursor at *pos*.

        Scrolls the screen first when the buffer would run past the bottom
        row, then redraws once more against the moved anchor.
        """
        return self._rewrite(state, buffer, pos, retry=True)

    def _rewrite(
        self,
        state: SessionState,
        buffer: Sequence[str],
        pos: int,
        *,
        retry: bool,
    ) -> RenderResult:
        try:
            width = self._terminal.columns
            height = self._terminal.rows
            self._fit_anchor(state, width)
            _, last_row = screen_offset(buffer, len(buffer), state.prompt_length, width)
            bottom = state.anchor_top + last_row

            if bottom >= height:
                overflow = bottom - height + 1
                if not retry or overflow > state.anchor_top:
                    return RenderFailure(
                        f"input needs {last_row + 1} rows but the terminal has {height}"
                    )
                self.scroll_buffer(state, overflow)
                return self._rewrite(state, buffer, pos, retry=False)

            text = "".join(buffer)
            column, row = screen_offset(buffer, pos, state.prompt_length, width)
            self._set_origin(state, width)
            self._terminal.write(text)
            state.rendered = text
            self._terminal.set_cursor(column % width, state.anchor_top + row)
        except _TERMINAL_ERRORS as exc:
            return RenderFailure(f"redraw failed: {exc}", exc)
        return None

    def scroll_buffer(self, state: SessionState, lines: int) -> None:
        """Scroll the screen up by *lines* rows and move the anchor with it."""
        bottom = self._terminal.rows - 1
        self._terminal.set_cursor(0, bottom)
        self._terminal.write(NEWLINE * lines)
        self._terminal.set_cursor(0, bottom - lines)
        state.anchor_top -= lines
        logger.debug("scrolled %d line(s); anchor row now %d", lines, state.anchor_top)

    def _fit_anchor(self, state: SessionState, width: int) -> bool:
        """Pull the anchor back on screen after the terminal lost rows.

        Reprints the prompt on the new anchor row. Returns ``True`` when the
        anchor had to move, in which case nothing of the buffer is drawn.
        """
        height = self._terminal.rows
        prompt_rows = max(state.prompt_length - 1, 0) // width
        if state.anchor_top + prompt_rows < height:
            return False
        state.anchor_top = max(height - 1 - prompt_rows, 0)
        self._terminal.set_cursor(0, state.anchor_top)
        self._terminal.write(state.prompt)
        state.rendered = ""
        logger.debug("anchor off screen; re-anchored at row %d", state.anchor_top)
        return True

    def _set_origin(self, state: SessionState, width: int) -> None:
        """Move to the first cell after the prompt."""
        self._terminal.set_cursor(
            state.anchor_left % width,
            state.anchor_top + state.anchor_left // width,
        )

    def place_cursor(self, state: SessionState, buffer: Sequence[str], pos: int) -> RenderResult:
        """Move the terminal cursor to *pos* without redrawing."""
        try:
            width = self._terminal.columns
            column, row = screen_offset(buffer, pos, state.prompt_length, width)
            self._terminal.set_cursor(column, state.anchor_top + row)
        except _TERMINAL_ERRORS as exc:
            return RenderFailure(f"cursor move failed: {exc}", exc)
        return None

    def move_below(self, state: SessionState, buffer: Sequence[str]) -> RenderResult:
        """Leave the cursor at the start of the row under the rendered input."""
        try:
            last = rendered_line_count(buffer, state.prompt_length, self._terminal.columns) - 1
            self._terminal.set_cursor(0, state.anchor_top + last)
        except _TERMINAL_ERRORS as exc:
            self._terminal.write(NEWLINE)
            return RenderFailure(f"could not move below the input: {exc}", exc)
        self._terminal.write(NEWLINE)
        return None

    # -- messages -----------------------------------------------------------

    def notice(
        self,
        state: SessionState,
        buffer: Sequence[str],
        pos: int,
        message: str,
    ) -> RenderResult:
        """Print *message* under the input and redraw the prompt below it."""
        try:
            width = self._terminal.columns
            column, row = screen_offset(buffer, len(buffer), state.prompt_length, width)
            self._terminal.set_cursor(column, state.anchor_top + row)
            self._terminal.write(NEWLINE + message + NEWLINE)
            self._terminal.write(state.prompt)
            _, row = self._terminal.get_cursor()
            state.anchor_top = row - max(state.prompt_length - 1, 0) // width
            state.rendered = ""
        except _TERMINAL_ERRORS as exc:
            return RenderFailure(f"notice failed: {exc}", exc)
        return self.rewrite_line(state, buffer, pos)
