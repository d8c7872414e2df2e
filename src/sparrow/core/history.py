"""Bounded snapshot history with a cursor for undo/redo."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import List, Optional

import numpy as np

from ..config import DEFAULT_HISTORY_LIMIT
from .pixel_buffer import PixelBuffer

_LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class HistoryEntry:
    """Serialised pixels of one committed raster."""

    width: int
    height: int
    data: bytes

    @classmethod
    def capture(cls, buffer: PixelBuffer) -> "HistoryEntry":
        return cls(buffer.width, buffer.height, buffer.tobytes())

    def restore(self) -> PixelBuffer:
        """Return a fresh, writable buffer holding the stored pixels."""

        array = np.frombuffer(self.data, dtype=np.uint8).reshape((self.height, self.width, 4))
        return PixelBuffer._adopt(array.copy())


class HistoryStack:
    """Cursor-based stack of :class:`HistoryEntry` snapshots.

    The cursor points at the entry that matches what the user currently sees,
    ``-1`` when the stack is empty.  Pushing while the cursor sits below the
    top discards every entry above it, and the oldest entries are evicted once
    the stack grows past ``limit``.  All operations take the same lock, so a
    commit from the GUI thread and one from a background task cannot
    interleave.
    """

    def __init__(self, limit: int = DEFAULT_HISTORY_LIMIT) -> None:
        if int(limit) < 1:
            raise ValueError("History limit must be at least 1")
        self._limit = int(limit)
        self._entries: List[HistoryEntry] = []
        self._cursor = -1
        self._lock = threading.Lock()

    # ------------------------------------------------------------------
    @property
    def limit(self) -> int:
        return self._limit

    @property
    def cursor(self) -> int:
        with self._lock:
            return self._cursor

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    @property
    def can_undo(self) -> bool:
        with self._lock:
            return self._cursor > 0

    @property
    def can_redo(self) -> bool:
        with self._lock:
            return self._cursor < len(self._entries) - 1

    # ------------------------------------------------------------------
    def push(self, buffer: PixelBuffer) -> None:
        """Commit *buffer* as the newest entry, dropping any redo branch."""

        entry = HistoryEntry.capture(buffer)
        with self._lock:
            discarded = len(self._entries) - (self._cursor + 1)
            del self._entries[self._cursor + 1 :]
            self._entries.append(entry)
            evicted = max(0, len(self._entries) - self._limit)
            if evicted:
                del self._entries[:evicted]
            self._cursor = len(self._entries) - 1
            cursor = self._cursor
        if discarded or evicted:
            _LOGGER.debug(
                "History push discarded %d redo entries, evicted %d old entries",
                discarded,
                evicted,
            )
        _LOGGER.debug("History cursor now at %d", cursor)

    def undo(self) -> Optional[PixelBuffer]:
        """Step back one entry; ``None`` when already at the oldest one."""

        with self._lock:
            if self._cursor <= 0:
                return None
            self._cursor -= 1
            entry = self._entries[self._cursor]
        return entry.restore()

    def redo(self) -> Optional[PixelBuffer]:
        """Step forward one entry; ``None`` when already at the newest one."""

        with self._lock:
            if self._cursor >= len(self._entries) - 1:
                return None
            self._cursor += 1
            entry = self._entries[self._cursor]
        return entry.restore()

    def current(self) -> Optional[PixelBuffer]:
        with self._lock:
            if self._cursor < 0:
                return None
            entry = self._entries[self._cursor]
        return entry.restore()

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
            self._cursor = -1


__all__ = ["HistoryEntry", "HistoryStack"]
