"""A bounded byte queue shared between producers and consumers."""

from __future__ import annotations

import threading
from collections import deque
from typing import Deque

INTQ_BUFSIZE = 64
"""Size of the queue's ring, in bytes; one slot always stays free."""

CAPACITY = INTQ_BUFSIZE - 1
"""Number of bytes the queue holds when full."""


class IntQueue:
    """A FIFO of bytes that blocks readers when empty and writers when full."""

    def __init__(self) -> None:
        self._items: Deque[int] = deque()
        self._cond = threading.Condition()

    def __len__(self) -> int:
        with self._cond:
            return len(self._items)

    def empty(self) -> bool:
        """Returns True if the queue holds no bytes."""
        with self._cond:
            return not self._items

    def full(self) -> bool:
        """Returns True if no more bytes fit in the queue."""
        with self._cond:
            return len(self._items) >= CAPACITY

    def get(self) -> int:
        """Removes and returns the oldest byte, waiting for one if needed."""
        with self._cond:
            while not self._items:
                self._cond.wait()
            byte = self._items.popleft()
            self._cond.notify_all()
            return byte

    def put(self, byte: int) -> None:
        """Adds BYTE at the end, waiting for room if needed."""
        if not 0 <= byte <= 0xFF:
            raise ValueError(f"{byte} is not a byte value")
        with self._cond:
            while len(self._items) >= CAPACITY:
                self._cond.wait()
            self._items.append(byte)
            self._cond.notify_all()