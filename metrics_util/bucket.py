"""A thread-safe, append-only bucket of values with snapshot and drain support."""

from __future__ import annotations

import threading
from collections.abc import Callable, Sequence
from typing import Generic, TypeVar

__all__ = ["AtomicBucket", "BLOCK_SIZE"]

T = TypeVar("T")

BLOCK_SIZE = 64
"""Number of values held by each internal block."""


class AtomicBucket(Generic[T]):
    """An unbounded bucket of values, stored as a chain of fixed-size blocks.

    Values cannot be removed one at a time: callers either read the whole
    bucket or clear it, observing every block as it is cleared.  Reading
    proceeds from the newest block to the oldest, while values within a block
    keep the order they were written in.  With a block size of 4 and the values
    0 to 9 pushed, the blocks are visited as ``[8 9] [4 5 6 7] [0 1 2 3]``.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._blocks: list[list[T]] = []

    def is_empty(self) -> bool:
        """Whether the bucket holds no values."""
        with self._lock:
            return not any(self._blocks)

    def push(self, value: T) -> None:
        """Append a value to the bucket."""
        with self._lock:
            if not self._blocks or len(self._blocks[-1]) >= BLOCK_SIZE:
                self._blocks.append([])
            self._blocks[-1].append(value)

    def record(self, value: T) -> None:
        """Record a histogram sample; the same as :meth:`push`."""
        self.push(value)

    def _snapshot(self) -> list[tuple[T, ...]]:
        with self._lock:
            return [tuple(block) for block in reversed(self._blocks)]

    def data(self) -> list[T]:
        """All values in the bucket, newest block first."""
        values: list[T] = []
        self.data_with(values.extend)
        return values

    def data_with(self, f: Callable[[Sequence[T]], object]) -> None:
        """Call ``f`` with the values of each block, newest block first."""
        for block in self._snapshot():
            f(block)

    def clear(self) -> None:
        """Remove every value from the bucket."""
        self.clear_with(lambda _values: None)

    def clear_with(self, f: Callable[[Sequence[T]], object]) -> None:
        """Remove every value, calling ``f`` with each cleared block, newest first.

        Values pushed while ``f`` runs land in the emptied bucket and are left
        for the next read or clear.
        """
        with self._lock:
            blocks, self._blocks = self._blocks, []
        for block in reversed(blocks):
            f(tuple(block))