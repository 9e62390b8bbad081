"""Metric kinds and masks for matching against them."""

from __future__ import annotations

import enum

__all__ = ["MetricKind", "MetricKindMask"]


class MetricKind(enum.IntEnum):
    """The kind, or type, of a metric: counter, gauge or histogram."""

    COUNTER = 0
    GAUGE = 1
    HISTOGRAM = 2


class MetricKindMask(enum.Flag):
    """A bitmask over metric kinds.

    Masks combine with ``|`` and are checked against a single kind with
    :meth:`matches`.
    """

    NONE = 0
    COUNTER = 1
    GAUGE = 2
    HISTOGRAM = 4
    ALL = 7

    def matches(self, kind: MetricKind) -> bool:
        """Whether this mask contains the given kind."""
        return bool(self.value & _KIND_BITS[MetricKind(kind)].value)

    def __or__(self, other: object) -> MetricKindMask:
        if not isinstance(other, MetricKindMask):
            return NotImplemented
        return MetricKindMask(self.value | other.value)


_KIND_BITS = {
    MetricKind.COUNTER: MetricKindMask.COUNTER,
    MetricKind.GAUGE: MetricKindMask.GAUGE,
    MetricKind.HISTOGRAM: MetricKindMask.HISTOGRAM,
}