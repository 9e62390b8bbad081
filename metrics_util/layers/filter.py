"""A layer that discards metrics whose names contain certain patterns."""

from __future__ import annotations

import string
from collections.abc import Iterable
from typing import Any, Optional

from ..handles import Counter, Gauge, Histogram, Unit
from ..key import Key
from .stack import Layer, Recorder

__all__ = ["Filter", "FilterLayer"]

_ASCII_FOLD = str.maketrans(string.ascii_uppercase, string.ascii_lowercase)


def _fold(text: str) -> str:
    """Lower-case ASCII letters only, leaving every other character alone."""
    return text.translate(_ASCII_FOLD)


class Filter(Recorder):
    """Discards metrics whose name contains any of the patterns.

    Filtered descriptions are dropped, and filtered registrations return
    no-op handles; everything else is passed on to ``inner``.
    """

    def __init__(self, inner: Any, patterns: Iterable[str], case_insensitive: bool = False) -> None:
        self.inner = inner
        self._case_insensitive = case_insensitive
        self._patterns = tuple(
            _fold(p) if case_insensitive else p for p in (str(p) for p in patterns)
        )

    def _should_filter(self, name: str) -> bool:
        haystack = _fold(name) if self._case_insensitive else name
        return any(pattern in haystack for pattern in self._patterns)

    def describe_counter(self, key_name: str, unit: Optional[Unit], description: str) -> None:
        if not self._should_filter(str(key_name)):
            self.inner.describe_counter(key_name, unit, description)

    def describe_gauge(self, key_name: str, unit: Optional[Unit], description: str) -> None:
        if not self._should_filter(str(key_name)):
            self.inner.describe_gauge(key_name, unit, description)

    def describe_histogram(self, key_name: str, unit: Optional[Unit], description: str) -> None:
        if not self._should_filter(str(key_name)):
            self.inner.describe_histogram(key_name, unit, description)

    def register_counter(self, key: Key) -> Counter:
        if self._should_filter(key.name):
            return Counter.noop()
        return self.inner.register_counter(key)

    def register_gauge(self, key: Key) -> Gauge:
        if self._should_filter(key.name):
            return Gauge.noop()
        return self.inner.register_gauge(key)

    def register_histogram(self, key: Key) -> Histogram:
        if self._should_filter(key.name):
            return Histogram.noop()
        return self.inner.register_histogram(key)


class FilterLayer(Layer):
    """A layer wrapping recorders in :class:`Filter`.

    Patterns are matched as substrings anywhere in the metric name.  Matching
    is case sensitive unless :meth:`case_insensitive` is enabled, in which case
    ASCII letters are compared without regard to case.
    """

    def __init__(self) -> None:
        self.patterns: list[str] = []
        self._case_insensitive = False
        self._use_dfa = False

    @classmethod
    def from_patterns(cls, patterns: Iterable[str]) -> FilterLayer:
        """Create a layer from an existing set of patterns."""
        layer = cls()
        layer.patterns = [str(p) for p in patterns]
        layer._use_dfa = True
        return layer

    def add_pattern(self, pattern: str) -> FilterLayer:
        """Add a pattern to match."""
        self.patterns.append(str(pattern))
        return self

    def case_insensitive(self, case_insensitive: bool) -> FilterLayer:
        """Set whether ASCII letters match regardless of case (default: case sensitive)."""
        self._case_insensitive = bool(case_insensitive)
        return self

    def use_dfa(self, dfa: bool) -> FilterLayer:
        """Set the matcher-construction preference; matching results are unaffected."""
        self._use_dfa = bool(dfa)
        return self

    @property
    def is_case_insensitive(self) -> bool:
        """Whether matching ignores ASCII case."""
        return self._case_insensitive

    @property
    def uses_dfa(self) -> bool:
        """The current matcher-construction preference."""
        return self._use_dfa

    def layer(self, inner: Any) -> Filter:
        """Wrap ``inner`` in a filter over this layer's patterns."""
        return Filter(inner, list(self.patterns), self._case_insensitive)