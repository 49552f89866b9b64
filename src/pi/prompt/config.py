"""Configuration for the interactive prompt."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class PromptConfig:
    """Prompt behaviour settings."""

    escape_warning: str = "Press Escape again to exit."
    farewell: str = "GoodBye!"
    quit_sentinel: str = "quit"
    # Blanks written past the old text when clearing
    clear_margin: int = 5
    # Enter with more input already queued inserts a newline instead of committing
    detect_paste: bool = True
    # The typed fragment takes part in the completion cycle
    complete_with_fragment: bool = True
    # Spaces inserted for a pasted tab
    tab_width: int = 4
