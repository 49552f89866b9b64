"""The read-dispatch-print loop.

``InteractivePrompt`` runs one ``LineSession`` per input line, hands each
committed line to a dispatcher and prints whatever it answers, until the
dispatcher returns the quit sentinel.
"""

from __future__ import annotations

import logging
from typing import Callable

from pi.prompt.config import PromptConfig
from pi.prompt.history import History
from pi.prompt.renderer import Renderer
from pi.prompt.session import LineSession
from pi.prompt.terminal import ProcessTerminal, Terminal

logger = logging.getLogger(__name__)

# (line, buffer, candidates) -> response text
Dispatcher = Callable[[str, list[str], list[str]], str]


class InteractivePrompt:
    """Reads lines from a terminal and dispatches them."""

    def __init__(
        self,
        dispatch: Dispatcher,
        prompt: str,
        startup_message: str = "",
        candidates: list[str] | None = None,
        *,
        terminal: Terminal,
        config: PromptConfig | None = None,
    ) -> None:
        self.dispatch = dispatch
        self.prompt = prompt
        self.startup_message = startup_message
        self.candidates = candidates if candidates is not None else []
        self.terminal = terminal
        self.config = config or PromptConfig()
        self.history = History()
        self._renderer = Renderer(terminal, self.config)

    def run(self) -> None:
        """Loop until the dispatcher answers with the quit sentinel."""
        if self.startup_message:
            self.terminal.write(self.startup_message + "\n")

        while True:
            session = LineSession(
                self.terminal,
                self._renderer,
                self.history,
                self.prompt,
                self.candidates,
                self.config,
            )
            buffer = session.read_line()
            line = "".join(buffer)
            if not line.strip():
                continue

            self.history.record(buffer)
            logger.debug("dispatching %r", line)
            response = self.dispatch(line, list(buffer), self.candidates)

            if response == self.config.quit_sentinel:
                self.terminal.write(self.config.farewell + "\n")
                logger.info("quit requested")
                return
            self.terminal.write(response)


def run(
    dispatch: Dispatcher,
    prompt: str,
    startup_message: str,
    candidates: list[str] | None = None,
    *,
    terminal: Terminal | None = None,
    config: PromptConfig | None = None,
) -> None:
    """Run an interactive prompt, owning the process terminal if none is given."""
    if terminal is not None:
        InteractivePrompt(
            dispatch, prompt, startup_message, candidates, terminal=terminal, config=config
        ).run()
        return

    with ProcessTerminal() as process_terminal:
        InteractivePrompt(
            dispatch, prompt, startup_message, candidates, terminal=process_terminal, config=config
        ).run()
