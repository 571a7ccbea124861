"""Bounded kill ring: the clipboard shared by every chooser session."""

from __future__ import annotations

KILL_RING_MAX = 120


class KillRing:
    """Most recent entry last; the oldest entry falls off when full."""

    def __init__(self, max_entries: int = KILL_RING_MAX) -> None:
        self._ring: list[str] = []
        self._max_entries = max(1, max_entries)

    def push(self, text: str) -> None:
        if not text:
            return
        # Copying the same text twice in a row keeps one entry
        if self._ring and self._ring[-1] == text:
            return
        self._ring.append(text)
        if len(self._ring) > self._max_entries:
            del self._ring[0]

    def peek(self) -> str | None:
        return self._ring[-1] if self._ring else None

    def rotate(self) -> None:
        """Bring the previous entry to the top."""
        if len(self._ring) > 1:
            self._ring.insert(0, self._ring.pop())

    @property
    def length(self) -> int:
        return len(self._ring)


_global_kill_ring: KillRing | None = None


def get_kill_ring() -> KillRing:
    global _global_kill_ring
    if _global_kill_ring is None:
        _global_kill_ring = KillRing()
    return _global_kill_ring


def set_kill_ring(ring: KillRing) -> None:
    global _global_kill_ring
    _global_kill_ring = ring
