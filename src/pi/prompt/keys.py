"""Key events and decoding of raw terminal input.

Turns one complete input sequence (as split by ``StdinBuffer``) into a
``KeyEvent``. Understands legacy VT sequences, xterm modifier parameters,
the kitty CSI-u encoding, modifyOtherKeys, ESC-prefixed Alt combinations and
C0 control characters.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

# ---------------------------------------------------------------------------
# Key identifiers
# ---------------------------------------------------------------------------

KeyId = str


class Key:
    """Named key constants."""

    char = "char"
    escape = "escape"
    enter = "enter"
    tab = "tab"
    backspace = "backspace"
    delete = "delete"
    insert = "insert"
    home = "home"
    end = "end"
    page_up = "pageUp"
    page_down = "pageDown"
    up = "up"
    down = "down"
    left = "left"
    right = "right"


# ---------------------------------------------------------------------------
# KeyEvent
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class KeyEvent:
    """One key press.

    ``key`` is a ``Key`` constant. Printable characters use ``Key.char`` with
    the character in ``char``; control combinations such as Ctrl-E use the
    lower-case letter as ``key`` with ``ctrl`` set.
    """

    key: KeyId
    char: str = ""
    shift: bool = False
    alt: bool = False
    ctrl: bool = False
    pasted: bool = False

    @property
    def key_id(self) -> str:
        """Return the ``"ctrl+shift+alt+name"`` form of this event."""
        name = self.char if self.key == Key.char else self.key
        prefix = ""
        if self.ctrl:
            prefix += "ctrl+"
        if self.shift:
            prefix += "shift+"
        if self.alt:
            prefix += "alt+"
        return prefix + name

    def is_printable(self) -> bool:
        return (
            self.key == Key.char
            and not self.ctrl
            and len(self.char) == 1
            and self.char.isprintable()
        )


def char_event(ch: str, *, pasted: bool = False) -> KeyEvent:
    """Build the event for a literal character."""
    return KeyEvent(Key.char, char=ch, pasted=pasted)


# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

MODIFIERS: dict[str, int] = {
    "shift": 1,
    "alt": 2,
    "ctrl": 4,
}

LOCK_MASK = 64 + 128

CODEPOINTS: dict[int, KeyId] = {
    27: Key.escape,
    9: Key.tab,
    13: Key.enter,
    127: Key.backspace,
    57414: Key.enter,  # keypad enter
}

# Legacy escape sequences -> key names
LEGACY_KEY_SEQUENCES: dict[str, KeyId] = {
    "\x1b[A": Key.up,
    "\x1b[B": Key.down,
    "\x1b[C": Key.right,
    "\x1b[D": Key.left,
    "\x1b[H": Key.home,
    "\x1b[F": Key.end,
    "\x1bOA": Key.up,
    "\x1bOB": Key.down,
    "\x1bOC": Key.right,
    "\x1bOD": Key.left,
    "\x1bOH": Key.home,
    "\x1bOF": Key.end,
    "\x1b[1~": Key.home,
    "\x1b[2~": Key.insert,
    "\x1b[3~": Key.delete,
    "\x1b[4~": Key.end,
    "\x1b[5~": Key.page_up,
    "\x1b[6~": Key.page_down,
    "\x1b[7~": Key.home,
    "\x1b[8~": Key.end,
}

_LETTER_KEYS: dict[str, KeyId] = {
    "A": Key.up,
    "B": Key.down,
    "C": Key.right,
    "D": Key.left,
    "H": Key.home,
    "F": Key.end,
}

_TILDE_KEYS: dict[int, KeyId] = {
    1: Key.home,
    2: Key.insert,
    3: Key.delete,
    4: Key.end,
    5: Key.page_up,
    6: Key.page_down,
    7: Key.home,
    8: Key.end,
}

# ---------------------------------------------------------------------------
# Regex patterns
# ---------------------------------------------------------------------------

# CSI u format: \x1b[<codepoint>(:<shifted>(:<base>))?(;<modifier>(:<event>))?u
_KITTY_CSI_U_RE = re.compile(
    r"^\x1b\[(\d+)(?::\d*(?::\d+)?)?(?:;(\d+)(?::(\d+))?)?u$"
)

# Arrows / Home / End with modifier: \x1b[1;<modifier>(:<event>)?[ABCDHF]
_MODIFIED_LETTER_RE = re.compile(r"^\x1b\[1;(\d+)(?::(\d+))?([ABCDHF])$")

# Functional keys with modifier: \x1b[<number>;<modifier>(:<event>)?~
_MODIFIED_TILDE_RE = re.compile(r"^\x1b\[(\d+);(\d+)(?::(\d+))?~$")

# modifyOtherKeys: \x1b[27;<modifier>;<keycode>~
_MODIFY_OTHER_KEYS_RE = re.compile(r"^\x1b\[27;(\d+);(\d+)~$")


def _modifier_flags(modifier: int) -> dict[str, bool]:
    mod = (modifier - 1) & ~LOCK_MASK
    return {
        "shift": bool(mod & MODIFIERS["shift"]),
        "alt": bool(mod & MODIFIERS["alt"]),
        "ctrl": bool(mod & MODIFIERS["ctrl"]),
    }


def _codepoint_event(codepoint: int, modifier: int) -> KeyEvent | None:
    flags = _modifier_flags(modifier)
    name = CODEPOINTS.get(codepoint)
    if name is not None:
        return KeyEvent(name, **flags)
    if codepoint <= 0:
        return None
    ch = chr(codepoint)
    if not ch.isprintable():
        return None
    if flags["ctrl"] or flags["alt"]:
        return KeyEvent(ch.lower(), **flags)
    # Shift is already folded into the character itself
    return KeyEvent(Key.char, char=ch.upper() if flags["shift"] else ch)


# ---------------------------------------------------------------------------
# parse_key_event
# ---------------------------------------------------------------------------


def parse_key_event(data: str) -> KeyEvent | None:  # noqa: C901
    """Parse one complete input sequence into a ``KeyEvent``.

    Returns ``None`` for sequences that do not describe a key press (release
    events, unknown escape sequences).
    """
    if not data:
        return None

    # --- kitty protocol ---
    match = _KITTY_CSI_U_RE.match(data)
    if match:
        if match.group(3) == "3":  # release
            return None
        modifier = int(match.group(2)) if match.group(2) else 1
        return _codepoint_event(int(match.group(1)), modifier)

    # --- modifyOtherKeys ---
    match = _MODIFY_OTHER_KEYS_RE.match(data)
    if match:
        return _codepoint_event(int(match.group(2)), int(match.group(1)))

    # --- modified arrows / home / end ---
    match = _MODIFIED_LETTER_RE.match(data)
    if match:
        if match.group(2) == "3":
            return None
        return KeyEvent(_LETTER_KEYS[match.group(3)], **_modifier_flags(int(match.group(1))))

    # --- modified functional keys ---
    match = _MODIFIED_TILDE_RE.match(data)
    if match:
        name = _TILDE_KEYS.get(int(match.group(1)))
        if name is None or match.group(3) == "3":
            return None
        return KeyEvent(name, **_modifier_flags(int(match.group(2))))

    # --- legacy escape sequences ---
    name = LEGACY_KEY_SEQUENCES.get(data)
    if name is not None:
        return KeyEvent(name)
    if data == "\x1b[Z":
        return KeyEvent(Key.tab, shift=True)

    # --- simple single-byte keys ---
    if data == "\x1b":
        return KeyEvent(Key.escape)
    if data == "\r" or data == "\n":
        return KeyEvent(Key.enter)
    if data == "\t":
        return KeyEvent(Key.tab)
    if data == "\x7f":
        return KeyEvent(Key.backspace)
    if data == "\x00":
        return KeyEvent(" ", ctrl=True)

    # --- Ctrl + letter (0x01 - 0x1a); \x08 is Ctrl-H, not Backspace ---
    if len(data) == 1 and 1 <= ord(data) <= 26:
        return KeyEvent(chr(ord(data) + ord("a") - 1), ctrl=True)

    # --- Alt + key (ESC prefix) ---
    if len(data) == 2 and data[0] == "\x1b":
        ch = data[1]
        if ch == "\r" or ch == "\n":
            return KeyEvent(Key.enter, alt=True)
        if ch == "\t":
            return KeyEvent(Key.tab, alt=True)
        if ch == "\x7f":
            return KeyEvent(Key.backspace, alt=True)
        if 1 <= ord(ch) <= 26:
            return KeyEvent(chr(ord(ch) + ord("a") - 1), ctrl=True, alt=True)
        if ch.isprintable():
            return KeyEvent(ch.lower(), shift=ch.isupper(), alt=True)
        return None

    # --- Plain printable character ---
    if len(data) == 1 and data.isprintable():
        return char_event(data)

    return None
