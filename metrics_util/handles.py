"""Metric units and the handles through which metrics are updated."""

from __future__ import annotations

import enum
from typing import Any, Optional

__all__ = ["Unit", "Counter", "Gauge", "Histogram"]


class Unit(enum.Enum):
    """The unit a metric is measured in."""

    COUNT = "count"
    PERCENT = "percent"
    SECONDS = "seconds"
    MILLISECONDS = "milliseconds"
    MICROSECONDS = "microseconds"
    NANOSECONDS = "nanoseconds"
    TEBIBYTES = "tebibytes"
    GIGIBYTES = "gigibytes"
    MEBIBYTES = "mebibytes"
    KIBIBYTES = "kibibytes"
    BYTES = "bytes"
    TERABITS_PER_SECOND = "terabits_per_second"
    GIGABITS_PER_SECOND = "gigabits_per_second"
    MEGABITS_PER_SECOND = "megabits_per_second"
    KILOBITS_PER_SECOND = "kilobits_per_second"
    BITS_PER_SECOND = "bits_per_second"
    COUNT_PER_SECOND = "count_per_second"


class Counter:
    """A counter handle forwarding to any object with ``increment``/``absolute``.

    A handle with no backing object discards every update.
    """

    __slots__ = ("_inner",)

    def __init__(self, inner: Optional[Any] = None) -> None:
        self._inner = inner

    @classmethod
    def noop(cls) -> Counter:
        """A counter that discards every update."""
        return cls()

    def increment(self, value: int) -> None:
        """Increase the counter by ``value``."""
        if self._inner is not None:
            self._inner.increment(value)

    def absolute(self, value: int) -> None:
        """Set the counter to ``value`` if that is larger than its current value."""
        if self._inner is not None:
            self._inner.absolute(value)


class Gauge:
    """A gauge handle forwarding to any object with ``increment``/``decrement``/``set``."""

    __slots__ = ("_inner",)

    def __init__(self, inner: Optional[Any] = None) -> None:
        self._inner = inner

    @classmethod
    def noop(cls) -> Gauge:
        """A gauge that discards every update."""
        return cls()

    def increment(self, value: float) -> None:
        """Raise the gauge by ``value``."""
        if self._inner is not None:
            self._inner.increment(value)

    def decrement(self, value: float) -> None:
        """Lower the gauge by ``value``."""
        if self._inner is not None:
            self._inner.decrement(value)

    def set(self, value: float) -> None:
        """Set the gauge to ``value``."""
        if self._inner is not None:
            self._inner.set(value)


class Histogram:
    """A histogram handle forwarding to any object with ``record``."""

    __slots__ = ("_inner",)

    def __init__(self, inner: Optional[Any] = None) -> None:
        self._inner = inner

    @classmethod
    def noop(cls) -> Histogram:
        """A histogram that discards every sample."""
        return cls()

    def record(self, value: float) -> None:
        """Record a sample."""
        if self._inner is not None:
            self._inner.record(value)