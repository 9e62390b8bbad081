"""A bucketed histogram with cumulative, less-than-or-equal buckets."""

from __future__ import annotations

from collections.abc import Iterable
from itertools import accumulate

__all__ = ["Histogram"]


class Histogram:
    """Counts samples falling at or below each of a fixed list of bounds.

    Each bucket counts every sample that is less than or equal to its bound,
    as in Prometheus histograms.
    """

    def __init__(self, bounds: Iterable[float]) -> None:
        self._bounds = [float(bound) for bound in bounds]
        if not self._bounds:
            raise ValueError("a histogram needs at least one bucket bound")
        self._buckets = [0] * len(self._bounds)
        self._count = 0
        self._sum = 0.0

    @property
    def sum(self) -> float:
        """The sum of all samples."""
        return self._sum

    @property
    def count(self) -> int:
        """The number of samples recorded."""
        return self._count

    def buckets(self) -> list[tuple[float, int]]:
        """Pairs of bucket bound and the number of samples within it."""
        return list(zip(self._bounds, self._buckets))

    def record(self, sample: float) -> None:
        """Record a single sample."""
        self._sum += sample
        self._count += 1
        for idx, bound in enumerate(self._bounds):
            if sample <= bound:
                self._buckets[idx] += 1

    def record_many(self, samples: Iterable[float]) -> None:
        """Record many samples at once."""
        bucketed = [0] * len(self._buckets)
        total = 0.0
        count = 0
        for sample in samples:
            total += sample
            count += 1
            idx = next((i for i, bound in enumerate(self._bounds) if sample <= bound), None)
            if idx is not None:
                bucketed[idx] += 1

        for idx, local in enumerate(accumulate(bucketed)):
            self._buckets[idx] += local
        self._sum += total
        self._count += count