"""pi-prompt: Interactive terminal line editor with history and tab completion."""

# Tab completion
from pi.prompt.completion import CompletionCycler

# Configuration
from pi.prompt.config import PromptConfig

# History
from pi.prompt.history import History

# Keyboard input handling
from pi.prompt.keys import Key, KeyEvent, KeyId, parse_key_event

# Read-dispatch-print loop
from pi.prompt.prompt import Dispatcher, InteractivePrompt, run

# Rendering
from pi.prompt.renderer import Renderer, RenderFailure, RenderResult

# Line editing
from pi.prompt.session import LineSession, SessionState

# Stdin buffering
from pi.prompt.stdin_buffer import StdinBuffer

# Terminal
from pi.prompt.terminal import ProcessTerminal, Terminal, TerminalError

__all__ = [
    # Completion
    "CompletionCycler",
    # Config
    "PromptConfig",
    # History
    "History",
    # Keys
    "Key",
    "KeyEvent",
    "KeyId",
    "parse_key_event",
    # Prompt loop
    "Dispatcher",
    "InteractivePrompt",
    "run",
    # Rendering
    "RenderFailure",
    "RenderResult",
    "Renderer",
    # Session
    "LineSession",
    "SessionState",
    # Stdin
    "StdinBuffer",
    # Terminal
    "ProcessTerminal",
    "Terminal",
    "TerminalError",
]
