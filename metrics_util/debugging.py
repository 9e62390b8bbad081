"""A recorder that keeps raw metric values for inspection in tests and debugging."""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import Any, Optional, Union

from .handles import Counter, Gauge, Histogram, Unit
from .key import CompositeKey, Key
from .kind import MetricKind
from .layers.stack import Recorder
from .registry import Registry

__all__ = ["DebugValue", "Snapshot", "Snapshotter", "DebuggingRecorder"]


@dataclass(frozen=True)
class DebugValue:
    """A point-in-time raw value of a metric.

    ``value`` is an int for counters, a float for gauges and a tuple of floats
    for histograms.
    """

    kind: MetricKind
    value: Union[int, float, tuple[float, ...]]


SnapshotEntry = tuple[CompositeKey, Optional[Unit], Optional[str], DebugValue]


class Snapshot:
    """The metrics captured by a :class:`Snapshotter` at one moment."""

    def __init__(self, entries: list[SnapshotEntry]) -> None:
        self._entries = entries

    def into_dict(self) -> dict[CompositeKey, tuple[Optional[Unit], Optional[str], DebugValue]]:
        """Map each composite key to its unit, description and value."""
        return {key: (unit, desc, value) for key, unit, desc, value in self._entries}

    def into_list(self) -> list[SnapshotEntry]:
        """Entries in the order their metrics were first registered."""
        return list(self._entries)


@dataclass
class _SharedState:
    registry: Registry = field(default_factory=Registry)
    lock: threading.Lock = field(default_factory=threading.Lock)
    seen: dict[CompositeKey, None] = field(default_factory=dict)
    metadata: dict[tuple[MetricKind, str], tuple[Optional[Unit], str]] = field(
        default_factory=dict
    )


class Snapshotter:
    """Takes snapshots of a :class:`DebuggingRecorder`."""

    def __init__(self, state: _SharedState) -> None:
        self._state = state

    def snapshot(self) -> Snapshot:
        """Capture current values; histogram samples are drained as they are read."""
        registry = self._state.registry
        counters = registry.get_counter_handles()
        gauges = registry.get_gauge_handles()
        histograms = registry.get_histogram_handles()

        with self._state.lock:
            seen = list(self._state.seen)
            metadata = dict(self._state.metadata)

        entries: list[SnapshotEntry] = []
        for ck in seen:
            value = self._value_for(ck, counters, gauges, histograms)
            if value is None:
                continue
            described = metadata.get((ck.kind, ck.key.name))
            unit, desc = described if described is not None else (None, None)
            entries.append((ck, unit, desc, value))
        return Snapshot(entries)

    @staticmethod
    def _value_for(
        ck: CompositeKey,
        counters: dict[Key, Any],
        gauges: dict[Key, Any],
        histograms: dict[Key, Any],
    ) -> Optional[DebugValue]:
        if ck.kind is MetricKind.COUNTER:
            counter = counters.get(ck.key)
            return None if counter is None else DebugValue(ck.kind, counter.load())
        if ck.kind is MetricKind.GAUGE:
            gauge = gauges.get(ck.key)
            return None if gauge is None else DebugValue(ck.kind, gauge.load())
        bucket = histograms.get(ck.key)
        if bucket is None:
            return None
        values: list[float] = []
        bucket.clear_with(lambda block: values.extend(float(x) for x in block))
        return DebugValue(ck.kind, tuple(values))


class DebuggingRecorder(Recorder):
    """A simple recorder whose raw values can be read back through snapshots."""

    def __init__(self) -> None:
        self._state = _SharedState()

    def snapshotter(self) -> Snapshotter:
        """A snapshotter attached to this recorder."""
        return Snapshotter(self._state)

    def _describe(
        self, kind: MetricKind, key_name: str, unit: Optional[Unit], description: str
    ) -> None:
        name = str(key_name)
        with self._state.lock:
            old_unit, _ = self._state.metadata.get((kind, name), (None, description))
            self._state.metadata[(kind, name)] = (
                unit if unit is not None else old_unit,
                description,
            )

    def _track(self, kind: MetricKind, key: Key) -> None:
        with self._state.lock:
            self._state.seen.setdefault(CompositeKey(kind, key), None)

    def describe_counter(self, key_name: str, unit: Optional[Unit], description: str) -> None:
        self._describe(MetricKind.COUNTER, key_name, unit, description)

    def describe_gauge(self, key_name: str, unit: Optional[Unit], description: str) -> None:
        self._describe(MetricKind.GAUGE, key_name, unit, description)

    def describe_histogram(self, key_name: str, unit: Optional[Unit], description: str) -> None:
        self._describe(MetricKind.HISTOGRAM, key_name, unit, description)

    def register_counter(self, key: Key) -> Counter:
        self._track(MetricKind.COUNTER, key)
        return self._state.registry.get_or_create_counter(key, Counter)

    def register_gauge(self, key: Key) -> Gauge:
        self._track(MetricKind.GAUGE, key)
        return self._state.registry.get_or_create_gauge(key, Gauge)

    def register_histogram(self, key: Key) -> Histogram:
        self._track(MetricKind.HISTOGRAM, key)
        return self._state.registry.get_or_create_histogram(key, Histogram)