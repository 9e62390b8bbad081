"""Recorders, layers that wrap them, and stacks composing layers."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Optional

from ..handles import Counter, Gauge, Histogram, Unit
from ..key import Key

__all__ = ["Recorder", "Layer", "Stack"]


class Recorder:
    """Receives metric descriptions and registrations.

    The base implementation discards descriptions and hands out no-op handles;
    subclasses override what they need.
    """

    def describe_counter(self, key_name: str, unit: Optional[Unit], description: str) -> None:
        """Describe a counter."""

    def describe_gauge(self, key_name: str, unit: Optional[Unit], description: str) -> None:
        """Describe a gauge."""

    def describe_histogram(self, key_name: str, unit: Optional[Unit], description: str) -> None:
        """Describe a histogram."""

    def register_counter(self, key: Key) -> Counter:
        """Register a counter and return its handle."""
        return Counter.noop()

    def register_gauge(self, key: Key) -> Gauge:
        """Register a gauge and return its handle."""
        return Gauge.noop()

    def register_histogram(self, key: Key) -> Histogram:
        """Register a histogram and return its handle."""
        return Histogram.noop()


class Layer(ABC):
    """Decorates an object by wrapping it within another."""

    @abstractmethod
    def layer(self, inner: Any) -> Any:
        """Wrap ``inner`` and return the wrapper."""


class Stack(Recorder):
    """Composes layers around an inner recorder, innermost first."""

    def __init__(self, inner: Any) -> None:
        self.inner = inner

    def push(self, layer: Layer) -> Stack:
        """Wrap the current stack contents in ``layer`` and return the new stack."""
        return Stack(layer.layer(self.inner))

    def describe_counter(self, key_name: str, unit: Optional[Unit], description: str) -> None:
        self.inner.describe_counter(key_name, unit, description)

    def describe_gauge(self, key_name: str, unit: Optional[Unit], description: str) -> None:
        self.inner.describe_gauge(key_name, unit, description)

    def describe_histogram(self, key_name: str, unit: Optional[Unit], description: str) -> None:
        self.inner.describe_histogram(key_name, unit, description)

    def register_counter(self, key: Key) -> Counter:
        return self.inner.register_counter(key)

    def register_gauge(self, key: Key) -> Gauge:
        return self.inner.register_gauge(key)

    def register_histogram(self, key: Key) -> Histogram:
        return self.inner.register_histogram(key)