"""A sharded, thread-safe registry of metric handles keyed by metric key."""

from __future__ import annotations

import os
import threading
from collections.abc import Callable
from typing import Any, Generic, TypeVar

from .bucket import AtomicBucket
from .key import Key

__all__ = ["AtomicCounter", "AtomicGauge", "StandardPrimitives", "Registry"]

V = TypeVar("V")
H = TypeVar("H")

_U64_MASK = (1 << 64) - 1


class AtomicCounter:
    """A thread-safe unsigned 64-bit counter that wraps on overflow."""

    __slots__ = ("_lock", "_value")

    def __init__(self, value: int = 0) -> None:
        self._lock = threading.Lock()
        self._value = value & _U64_MASK

    def increment(self, value: int) -> None:
        """Add ``value`` to the counter."""
        with self._lock:
            self._value = (self._value + value) & _U64_MASK

    def absolute(self, value: int) -> None:
        """Raise the counter to ``value`` if that is larger than its current value."""
        with self._lock:
            self._value = max(self._value, value & _U64_MASK)

    def load(self) -> int:
        """The current counter value."""
        with self._lock:
            return self._value

    def __repr__(self) -> str:
        return f"AtomicCounter({self.load()})"


class AtomicGauge:
    """A thread-safe floating-point gauge."""

    __slots__ = ("_lock", "_value")

    def __init__(self, value: float = 0.0) -> None:
        self._lock = threading.Lock()
        self._value = float(value)

    def increment(self, value: float) -> None:
        """Raise the gauge by ``value``."""
        with self._lock:
            self._value += value

    def decrement(self, value: float) -> None:
        """Lower the gauge by ``value``."""
        with self._lock:
            self._value -= value

    def set(self, value: float) -> None:
        """Set the gauge to ``value``."""
        with self._lock:
            self._value = float(value)

    def load(self) -> float:
        """The current gauge value."""
        with self._lock:
            return self._value

    def __repr__(self) -> str:
        return f"AtomicGauge({self.load()!r})"


class StandardPrimitives:
    """Standard metric storage: atomic counters and gauges, bucketed histograms."""

    @staticmethod
    def counter() -> AtomicCounter:
        """A fresh counter starting at zero."""
        return AtomicCounter()

    @staticmethod
    def gauge() -> AtomicGauge:
        """A fresh gauge starting at zero."""
        return AtomicGauge()

    @staticmethod
    def histogram() -> AtomicBucket[float]:
        """A fresh, empty histogram bucket."""
        return AtomicBucket()


class _Shard(Generic[H]):
    __slots__ = ("lock", "entries")

    def __init__(self) -> None:
        self.lock = threading.Lock()
        self.entries: dict[Key, H] = {}


def _shard_count() -> int:
    cpus = max(1, os.cpu_count() or 1)
    return 1 << (cpus - 1).bit_length()


class _Storage(Generic[H]):
    """One kind of metric, spread across power-of-two shards by key hash."""

    def __init__(self, count: int, factory: Callable[[], H]) -> None:
        self._shards: list[_Shard[H]] = [_Shard() for _ in range(count)]
        self._mask = count - 1
        self._factory = factory

    def _shard(self, key: Key) -> _Shard[H]:
        return self._shards[key.hashable() & self._mask]

    def get_or_create(self, key: Key, op: Callable[[H], V]) -> V:
        shard = self._shard(key)
        with shard.lock:
            handle = shard.entries.get(key)
            if handle is None:
                handle = self._factory()
                shard.entries[key] = handle
        return op(handle)

    def delete(self, key: Key) -> bool:
        shard = self._shard(key)
        with shard.lock:
            return shard.entries.pop(key, None) is not None

    def clear(self) -> None:
        for shard in self._shards:
            with shard.lock:
                shard.entries.clear()

    def visit(self, collect: Callable[[Key, H], object]) -> None:
        for shard in self._shards:
            with shard.lock:
                items = list(shard.entries.items())
            for key, handle in items:
                collect(key, handle)

    def handles(self) -> dict[Key, H]:
        result: dict[Key, H] = {}
        self.visit(result.__setitem__)
        return result


class Registry:
    """A central listing of counters, gauges and histograms, keyed by metric key.

    Storage for each kind is created by ``primitives``, an object with
    ``counter()``, ``gauge()`` and ``histogram()`` factories.
    """

    def __init__(self, primitives: Any = StandardPrimitives) -> None:
        count = _shard_count()
        self.primitives = primitives
        self._counters: _Storage[Any] = _Storage(count, primitives.counter)
        self._gauges: _Storage[Any] = _Storage(count, primitives.gauge)
        self._histograms: _Storage[Any] = _Storage(count, primitives.histogram)

    def clear(self) -> None:
        """Remove every metric, shard by shard."""
        self._counters.clear()
        self._gauges.clear()
        self._histograms.clear()

    def get_or_create_counter(self, key: Key, op: Callable[[Any], V]) -> V:
        """Call ``op`` with the counter for ``key``, creating it first if needed."""
        return self._counters.get_or_create(key, op)

    def get_or_create_gauge(self, key: Key, op: Callable[[Any], V]) -> V:
        """Call ``op`` with the gauge for ``key``, creating it first if needed."""
        return self._gauges.get_or_create(key, op)

    def get_or_create_histogram(self, key: Key, op: Callable[[Any], V]) -> V:
        """Call ``op`` with the histogram for ``key``, creating it first if needed."""
        return self._histograms.get_or_create(key, op)

    def delete_counter(self, key: Key) -> bool:
        """Remove a counter; return whether it existed."""
        return self._counters.delete(key)

    def delete_gauge(self, key: Key) -> bool:
        """Remove a gauge; return whether it existed."""
        return self._gauges.delete(key)

    def delete_histogram(self, key: Key) -> bool:
        """Remove a histogram; return whether it existed."""
        return self._histograms.delete(key)

    def visit_counters(self, collect: Callable[[Key, Any], object]) -> None:
        """Call ``collect`` with every counter key and handle."""
        self._counters.visit(collect)

    def visit_gauges(self, collect: Callable[[Key, Any], object]) -> None:
        """Call ``collect`` with every gauge key and handle."""
        self._gauges.visit(collect)

    def visit_histograms(self, collect: Callable[[Key, Any], object]) -> None:
        """Call ``collect`` with every histogram key and handle."""
        self._histograms.visit(collect)

    def get_counter_handles(self) -> dict[Key, Any]:
        """A point-in-time map of all counters."""
        return self._counters.handles()

    def get_gauge_handles(self) -> dict[Key, Any]:
        """A point-in-time map of all gauges."""
        return self._gauges.handles()

    def get_histogram_handles(self) -> dict[Key, Any]:
        """A point-in-time map of all histograms."""
        return self._histograms.handles()