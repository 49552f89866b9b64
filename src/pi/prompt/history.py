"""History of committed input buffers with copy-out recall."""

from __future__ import annotations

from typing import Sequence


class History:
    """Committed buffers in submission order.

    Entries are stored and handed out as copies, so editing a recalled
    buffer never changes the stored one. ``position`` is the browsing
    cursor; ``len(history)`` means "the fresh, uncommitted line".
    """

    def __init__(self) -> None:
        self._entries: list[list[str]] = []
        self.position: int = 0

    def __len__(self) -> int:
        return len(self._entries)

    @property
    def entries(self) -> list[list[str]]:
        return [list(entry) for entry in self._entries]

    def record(self, buffer: Sequence[str]) -> bool:
        """Store a copy of *buffer* unless an equal entry already exists."""
        entry = list(buffer)
        if entry in self._entries:
            return False
        self._entries.append(entry)
        return True

    def begin(self) -> None:
        """Start browsing from a fresh line."""
        self.position = len(self._entries)

    def recall_backward(self) -> list[str] | None:
        """Step to the previous entry, or return ``None`` at the oldest one."""
        if self.position <= 0:
            return None
        self.position -= 1
        return list(self._entries[self.position])

    def recall_forward(self) -> list[str]:
        """Step to the next entry; past the newest one, return an empty buffer."""
        if self.position < len(self._entries) - 1:
            self.position += 1
            return list(self._entries[self.position])
        self.position = len(self._entries)
        return []
