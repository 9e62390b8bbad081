"""A layer that prefixes every metric name."""

from __future__ import annotations

from typing import Any, Optional

from ..handles import Counter, Gauge, Histogram, Unit
from ..key import Key
from .stack import Layer, Recorder

__all__ = ["Prefix", "PrefixLayer"]


class Prefix(Recorder):
    """Prefixes every metric key as ``<prefix>.<name>`` before passing it on."""

    def __init__(self, prefix: str, inner: Any) -> None:
        self.prefix = str(prefix)
        self.inner = inner

    def prefix_key(self, key: Key) -> Key:
        """The key with the prefix applied to its name; labels are kept."""
        return Key.from_parts(f"{self.prefix}.{key.name}", key.labels)

    def prefix_key_name(self, key_name: str) -> str:
        """The key name with the prefix applied."""
        return f"{self.prefix}.{key_name}"

    def describe_counter(self, key_name: str, unit: Optional[Unit], description: str) -> None:
        self.inner.describe_counter(self.prefix_key_name(key_name), unit, description)

    def describe_gauge(self, key_name: str, unit: Optional[Unit], description: str) -> None:
        self.inner.describe_gauge(self.prefix_key_name(key_name), unit, description)

    def describe_histogram(self, key_name: str, unit: Optional[Unit], description: str) -> None:
        self.inner.describe_histogram(self.prefix_key_name(key_name), unit, description)

    def register_counter(self, key: Key) -> Counter:
        return self.inner.register_counter(self.prefix_key(key))

    def register_gauge(self, key: Key) -> Gauge:
        return self.inner.register_gauge(self.prefix_key(key))

    def register_histogram(self, key: Key) -> Histogram:
        return self.inner.register_histogram(self.prefix_key(key))


class PrefixLayer(Layer):
    """A layer wrapping recorders in :class:`Prefix`."""

    def __init__(self, prefix: str) -> None:
        self.prefix = str(prefix)

    def layer(self, inner: Any) -> Prefix:
        """Wrap ``inner`` so every metric name carries this layer's prefix."""
        return Prefix(self.prefix, inner)