"""A quantile sketch with relative-error guarantees over positive and negative values."""

from __future__ import annotations

import math
from typing import Optional

__all__ = ["Summary"]

# Approximate fixed footprint of a summary, excluding its bins.
_BASE_SIZE = 160
_BIN_SIZE = 8


class _Sketch:
    """A logarithmically bucketed sketch of strictly positive values.

    Values map to bins by ``ceil(log_gamma(v))``, giving a relative error of at
    most ``alpha``.  When the span of bins would exceed ``max_bins`` the lowest
    bins are collapsed together.
    """

    __slots__ = (
        "_gamma",
        "_gamma_ln",
        "_max_bins",
        "_bins",
        "_count",
        "_min",
        "_max",
        "_min_key",
        "_max_key",
        "_floor",
    )

    def __init__(self, alpha: float, max_bins: int) -> None:
        ratio = 2.0 * alpha / (1.0 - alpha)
        self._gamma = 1.0 + ratio
        self._gamma_ln = math.log1p(ratio)
        self._max_bins = max(1, int(max_bins))
        self._bins: dict[int, int] = {}
        self._count = 0
        self._min = math.inf
        self._max = -math.inf
        self._min_key: Optional[int] = None
        self._max_key: Optional[int] = None
        self._floor: Optional[int] = None

    def copy(self) -> _Sketch:
        clone = _Sketch.__new__(_Sketch)
        for name in self.__slots__:
            setattr(clone, name, getattr(self, name))
        clone._bins = dict(self._bins)
        return clone

    @property
    def count(self) -> int:
        return self._count

    def length(self) -> int:
        """The number of bins spanned by the sketch."""
        if self._min_key is None or self._max_key is None:
            return 0
        return self._max_key - self._min_key + 1

    def _key(self, value: float) -> int:
        return math.ceil(math.log(value) / self._gamma_ln)

    def _value(self, key: int) -> float:
        return math.exp(key * self._gamma_ln) * 2.0 / (1.0 + self._gamma)

    def add(self, value: float) -> None:
        key = self._key(value)
        if self._floor is not None and key < self._floor:
            key = self._floor
        self._bins[key] = self._bins.get(key, 0) + 1
        self._count += 1
        self._min = min(self._min, value)
        self._max = max(self._max, value)
        if self._min_key is None or key < self._min_key:
            self._min_key = key
        if self._max_key is None or key > self._max_key:
            self._max_key = key
        if self.length() > self._max_bins:
            self._collapse()

    def _collapse(self) -> None:
        assert self._max_key is not None
        floor = self._max_key - self._max_bins + 1
        merged = 0
        for key in [k for k in self._bins if k < floor]:
            merged += self._bins.pop(key)
        if merged:
            self._bins[floor] = self._bins.get(floor, 0) + merged
        self._min_key = floor
        self._floor = floor if self._floor is None else max(self._floor, floor)

    def quantile(self, q: float) -> Optional[float]:
        if not 0.0 <= q <= 1.0:
            raise ValueError(f"quantile out of range: {q}")
        if self._count == 0:
            return None
        if q == 0.0:
            return self._min
        if q == 1.0:
            return self._max

        rank = int(q * (self._count - 1) + 1.0)
        cumulative = 0
        chosen = max(self._bins)
        for key in sorted(self._bins):
            cumulative += self._bins[key]
            if cumulative >= rank:
                chosen = key
                break
        return min(max(self._value(chosen), self._min), self._max)


class Summary:
    """Quantiles over an arbitrary distribution of floats, with relative error ``alpha``.

    Negative and positive values are kept in two separate sketches placed back
    to back; values whose magnitude is at most ``min_value`` count as zero.
    Infinite values are ignored.  Low quantiles (around q=0.05 and below), and
    quantiles near the boundary between negative and positive values, may
    exceed the relative-error bound because of bin collapsing.
    """

    def __init__(self, alpha: float, max_buckets: int, min_value: float) -> None:
        self._alpha = float(alpha)
        self._max_buckets = int(max_buckets)
        self._min_value = abs(float(min_value))
        self._negative = _Sketch(self._alpha, self._max_buckets)
        self._positive = _Sketch(self._alpha, self._max_buckets)
        self._zeroes = 0
        self._min = math.inf
        self._max = -math.inf

    @classmethod
    def with_defaults(cls) -> Summary:
        """A summary with ``alpha`` 0.0001, 32,768 buckets and ``min_value`` 1.0e-9."""
        return cls(0.0001, 32_768, 1.0e-9)

    def copy(self) -> Summary:
        """An independent copy of this summary."""
        clone = Summary(self._alpha, self._max_buckets, self._min_value)
        clone._negative = self._negative.copy()
        clone._positive = self._positive.copy()
        clone._zeroes = self._zeroes
        clone._min = self._min
        clone._max = self._max
        return clone

    def add(self, value: float) -> None:
        """Add a sample; magnitudes up to ``min_value`` are counted as zero."""
        value = float(value)
        if math.isinf(value):
            return
        if value < self._min:
            self._min = value
        if value > self._max:
            self._max = value

        if value > self._min_value:
            self._positive.add(value)
        elif value < -self._min_value:
            self._negative.add(-value)
        else:
            self._zeroes += 1

    def quantile(self, q: float) -> Optional[float]:
        """The estimated value at quantile ``q``, or ``None`` if empty or out of [0, 1]."""
        if not 0.0 <= q <= 1.0 or self.count() == 0:
            return None

        ncount = self._negative.count
        pcount = self._positive.count
        zcount = self._zeroes
        total = ncount + pcount + zcount
        rank = int(q * (total - 1))

        if rank < ncount:
            nq = 1.0 - rank / ncount
            value = self._negative.quantile(nq)
            return None if value is None else -value
        if rank < ncount + zcount:
            return 0.0
        pq = (rank - (ncount + zcount)) / pcount
        return self._positive.quantile(pq)

    def min(self) -> float:
        """The smallest value seen so far."""
        return self._min

    def max(self) -> float:
        """The largest value seen so far."""
        return self._max

    def is_empty(self) -> bool:
        """Whether no samples have been added."""
        return self.count() == 0

    def count(self) -> int:
        """The number of samples in this summary."""
        return self._negative.count + self._positive.count + self._zeroes

    def detailed_count(self) -> tuple[int, int, int]:
        """Sample counts as ``(zeroes, negative, positive)``."""
        return self._zeroes, self._negative.count, self._positive.count

    def estimated_size(self) -> int:
        """The approximate size of this summary in bytes."""
        bins = self._positive.length() + self._negative.length()
        return _BASE_SIZE + bins * _BIN_SIZE