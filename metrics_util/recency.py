"""Tracking how recently metrics were updated, so that idle ones can be removed.

Metrics are wrapped in :class:`Generational`, which counts every mutating
operation.  :class:`Recency` remembers the last generation and the time it was
observed for each key, and removes a metric from its registry once it has gone
unchanged for longer than an idle timeout.
"""

from __future__ import annotations

import threading
from collections.abc import Callable
from dataclasses import dataclass
from datetime import timedelta
from typing import Any, Generic, Optional, TypeVar, Union

from .key import Key
from .kind import MetricKind, MetricKindMask
from .registry import Registry, StandardPrimitives

__all__ = ["Generation", "Generational", "GenerationalPrimitives", "Recency"]

T = TypeVar("T")
V = TypeVar("V")


@dataclass(frozen=True, order=True)
class Generation:
    """An opaque generation number, meant only for comparison with others."""

    value: int


class Generational(Generic[T]):
    """Wraps a metric and counts every mutating access to it.

    Comparing generations tells whether a metric changed between two
    observations, even when its value is the same at both.
    """

    __slots__ = ("_inner", "_gen", "_lock")

    def __init__(self, inner: T) -> None:
        self._inner = inner
        self._gen = 0
        self._lock = threading.Lock()

    def get_inner(self) -> T:
        """The wrapped metric."""
        return self._inner

    def get_generation(self) -> Generation:
        """The current generation."""
        with self._lock:
            return Generation(self._gen)

    def with_increment(self, f: Callable[[T], V]) -> V:
        """Call ``f`` with the wrapped metric, then advance the generation."""
        result = f(self._inner)
        with self._lock:
            self._gen += 1
        return result

    def increment(self, value: Any) -> None:
        """Increment the wrapped counter or gauge."""
        self.with_increment(lambda inner: inner.increment(value))

    def absolute(self, value: int) -> None:
        """Set the wrapped counter to an absolute value."""
        self.with_increment(lambda inner: inner.absolute(value))

    def decrement(self, value: float) -> None:
        """Decrement the wrapped gauge."""
        self.with_increment(lambda inner: inner.decrement(value))

    def set(self, value: float) -> None:
        """Set the wrapped gauge."""
        self.with_increment(lambda inner: inner.set(value))

    def record(self, value: float) -> None:
        """Record a sample into the wrapped histogram."""
        self.with_increment(lambda inner: inner.record(value))

    def __repr__(self) -> str:
        return f"Generational({self._inner!r}, gen={self._gen})"


class GenerationalPrimitives:
    """Standard metric storage, each wrapped for generation tracking."""

    @staticmethod
    def counter() -> Generational[Any]:
        """A fresh generation-tracked counter."""
        return Generational(StandardPrimitives.counter())

    @staticmethod
    def gauge() -> Generational[Any]:
        """A fresh generation-tracked gauge."""
        return Generational(StandardPrimitives.gauge())

    @staticmethod
    def histogram() -> Generational[Any]:
        """A fresh generation-tracked histogram."""
        return Generational(StandardPrimitives.histogram())


class Recency:
    """Tracks the last update of metrics by generation and time.

    ``clock`` is a callable returning the current time in seconds.  If
    ``idle_timeout`` is ``None`` no recency checking happens; otherwise any
    metric whose kind is in ``mask`` and that has not changed for longer than
    ``idle_timeout`` is deleted from the registry the next time it is checked.
    """

    def __init__(
        self,
        clock: Callable[[], float],
        mask: MetricKindMask,
        idle_timeout: Optional[Union[float, timedelta]],
    ) -> None:
        if isinstance(idle_timeout, timedelta):
            idle_timeout = idle_timeout.total_seconds()
        self._clock = clock
        self._mask = mask
        self._idle_timeout = idle_timeout
        self._lock = threading.Lock()
        self._entries: dict[Key, tuple[Generation, float]] = {}

    def should_store_counter(self, key: Key, gen: Generation, registry: Registry) -> bool:
        """Whether the counter should be kept; deletes it from ``registry`` if idle."""
        return self._should_store(key, gen, registry, MetricKind.COUNTER, registry.delete_counter)

    def should_store_gauge(self, key: Key, gen: Generation, registry: Registry) -> bool:
        """Whether the gauge should be kept; deletes it from ``registry`` if idle."""
        return self._should_store(key, gen, registry, MetricKind.GAUGE, registry.delete_gauge)

    def should_store_histogram(self, key: Key, gen: Generation, registry: Registry) -> bool:
        """Whether the histogram should be kept; deletes it from ``registry`` if idle."""
        return self._should_store(
            key, gen, registry, MetricKind.HISTOGRAM, registry.delete_histogram
        )

    def _should_store(
        self,
        key: Key,
        gen: Generation,
        registry: Registry,
        kind: MetricKind,
        delete_op: Callable[[Key], bool],
    ) -> bool:
        if self._idle_timeout is None or not self._mask.matches(kind):
            return True

        with self._lock:
            now = self._clock()
            entry = self._entries.get(key)
            if entry is None:
                self._entries[key] = (gen, now)
                return True

            last_gen, last_update = entry
            if last_gen == gen:
                # A failed delete means the metric changed since, so keep it.
                if now - last_update > self._idle_timeout and delete_op(key):
                    return False
            else:
                self._entries[key] = (gen, now)
        return True