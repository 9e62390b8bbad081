"""A recorder that fans every metric out to several recorders."""

from __future__ import annotations

from typing import Any, Optional

from ..handles import Counter, Gauge, Histogram, Unit
from ..key import Key
from .stack import Recorder

__all__ = ["Fanout", "FanoutBuilder"]


class _FanoutCounter:
    __slots__ = ("_counters",)

    def __init__(self, counters: list[Counter]) -> None:
        self._counters = counters

    def increment(self, value: int) -> None:
        for counter in self._counters:
            counter.increment(value)

    def absolute(self, value: int) -> None:
        for counter in self._counters:
            counter.absolute(value)


class _FanoutGauge:
    __slots__ = ("_gauges",)

    def __init__(self, gauges: list[Gauge]) -> None:
        self._gauges = gauges

    def increment(self, value: float) -> None:
        for gauge in self._gauges:
            gauge.increment(value)

    def decrement(self, value: float) -> None:
        for gauge in self._gauges:
            gauge.decrement(value)

    def set(self, value: float) -> None:
        for gauge in self._gauges:
            gauge.set(value)


class _FanoutHistogram:
    __slots__ = ("_histograms",)

    def __init__(self, histograms: list[Histogram]) -> None:
        self._histograms = histograms

    def record(self, value: float) -> None:
        for histogram in self._histograms:
            histogram.record(value)


class Fanout(Recorder):
    """Passes every description and registration on to each of its recorders.

    Registered handles forward each update to the handles of all recorders.
    """

    def __init__(self, recorders: list[Any]) -> None:
        self._recorders = list(recorders)

    def describe_counter(self, key_name: str, unit: Optional[Unit], description: str) -> None:
        for recorder in self._recorders:
            recorder.describe_counter(key_name, unit, description)

    def describe_gauge(self, key_name: str, unit: Optional[Unit], description: str) -> None:
        for recorder in self._recorders:
            recorder.describe_gauge(key_name, unit, description)

    def describe_histogram(self, key_name: str, unit: Optional[Unit], description: str) -> None:
        for recorder in self._recorders:
            recorder.describe_histogram(key_name, unit, description)

    def register_counter(self, key: Key) -> Counter:
        return Counter(_FanoutCounter([r.register_counter(key) for r in self._recorders]))

    def register_gauge(self, key: Key) -> Gauge:
        return Gauge(_FanoutGauge([r.register_gauge(key) for r in self._recorders]))

    def register_histogram(self, key: Key) -> Histogram:
        return Histogram(_FanoutHistogram([r.register_histogram(key) for r in self._recorders]))


class FanoutBuilder:
    """Collects recorders and builds a :class:`Fanout` over them."""

    def __init__(self) -> None:
        self._recorders: list[Any] = []

    def add_recorder(self, recorder: Any) -> FanoutBuilder:
        """Add a recorder to the fanout list."""
        self._recorders.append(recorder)
        return self

    def build(self) -> Fanout:
        """Build the fanout recorder."""
        return Fanout(self._recorders)