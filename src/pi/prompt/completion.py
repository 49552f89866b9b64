"""Tab-completion cycling over a fixed candidate list."""

from __future__ import annotations

from typing import Sequence


class CompletionCycler:
    """Cycles through the candidates that contain a fragment.

    Matching is a case-insensitive substring test. The literal fragment is
    appended to a working copy of the candidates (unless *include_fragment*
    is false), so cycling eventually comes back to what was typed. The
    caller's candidate list is never modified.

    The cursor starts one position before the first entry; each ``next``
    call moves it forward (or backward) until it lands on a match, giving up
    after one full pass.
    """

    def __init__(
        self,
        candidates: Sequence[str],
        fragment: str,
        *,
        include_fragment: bool = True,
    ) -> None:
        self._entries: list[str] = list(candidates)
        if include_fragment:
            self._entries.append(fragment)
        self._needle = fragment.lower()
        self._index = -1
        self.fragment = fragment
        # Text of the candidate currently inserted in the buffer
        self.current: str | None = None

    @property
    def entries(self) -> list[str]:
        return list(self._entries)

    def next(self, backward: bool = False) -> str | None:
        """Advance to the next matching entry, or return ``None`` if none match."""
        size = len(self._entries)
        step = -1 if backward else 1
        index = self._index
        for _ in range(size):
            index = (index + step) % size
            if self._needle in self._entries[index].lower():
                self._index = index
                self.current = self._entries[index]
                return self.current
        return None
