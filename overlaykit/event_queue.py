"""A shared first-in, first-out message queue."""

from __future__ import annotations

from collections import deque
from typing import Generic, TypeVar

T = TypeVar("T")


class SyncEventQueue(Generic[T]):
    """FIFO queue; share one instance between producer and consumer."""

    def __init__(self) -> None:
        self._queue: deque[T] = deque()

    def __len__(self) -> int:
        return len(self._queue)

    def send(self, message: T) -> None:
        self._queue.append(message)

    def read(self) -> T | None:
        """Pop the oldest message, or return None when the queue is empty."""
        return self._queue.popleft() if self._queue else None