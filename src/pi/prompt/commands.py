"""Name-to-handler dispatch table for the demo prompt."""

from __future__ import annotations

from typing import Callable, Mapping

Handler = Callable[[], str]

QUIT = "quit"


class CommandTable:
    """Dispatches a committed line to the handler registered under its name.

    The table is callable with the prompt's dispatcher signature. Handlers
    take no arguments and return the text to print.
    """

    def __init__(self, commands: Mapping[str, Handler] | None = None) -> None:
        self._commands: dict[str, Handler] = dict(commands or {})
        # Commands whose output is the whole answer, without "executed."
        self._quiet: set[str] = set()

    def register(self, name: str, handler: Handler, *, announce: bool = True) -> None:
        self._commands[name] = handler
        if announce:
            self._quiet.discard(name)
        else:
            self._quiet.add(name)

    @property
    def names(self) -> list[str]:
        """Registered command names, in registration order."""
        return list(self._commands)

    def __contains__(self, name: object) -> bool:
        return name in self._commands

    def __call__(self, line: str, buffer: list[str], candidates: list[str]) -> str:
        name = line.strip()
        if name.lower() == QUIT:
            return QUIT

        handler = self._commands.get(name)
        if handler is None:
            return f"{name} not found.\n"
        output = handler()
        if name in self._quiet:
            return output
        return output + f"{name} executed.\n"
