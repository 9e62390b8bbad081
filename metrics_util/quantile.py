"""Quantiles with human-friendly percentile labels."""

from __future__ import annotations

import math
from collections.abc import Iterable
from decimal import Decimal

__all__ = ["Quantile", "parse_quantiles"]


def _format_float(value: float) -> str:
    """Shortest round-trip decimal form, without exponent or trailing ``.0``."""
    text = repr(value)
    if "e" in text or "E" in text:
        text = format(Decimal(text), "f")
    if text.endswith(".0"):
        text = text[:-2]
    return text


class Quantile:
    """A quantile value in [0, 1] with a display label such as ``p99``.

    ``0.0`` is labelled ``min`` and ``1.0`` is labelled ``max``; values outside
    the range are clamped.
    """

    __slots__ = ("_value", "_label")

    def __init__(self, quantile: float) -> None:
        quantile = float(quantile)
        clamped = 0.0 if math.isnan(quantile) else min(max(quantile, 0.0), 1.0)
        if clamped == 0.0:
            clamped, label = 0.0, "min"
        elif clamped == 1.0:
            label = "max"
        else:
            label = "p" + _format_float(clamped * 100.0).replace(".", "")
        self._value = clamped
        self._label = label

    @property
    def value(self) -> float:
        """The raw quantile value."""
        return self._value

    @property
    def label(self) -> str:
        """The human-friendly display label."""
        return self._label

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Quantile):
            return NotImplemented
        return self._value == other._value and self._label == other._label

    def __hash__(self) -> int:
        return hash((self._value, self._label))

    def __repr__(self) -> str:
        return f"Quantile({self._value!r}, {self._label!r})"


def parse_quantiles(quantiles: Iterable[float]) -> list[Quantile]:
    """Turn floating-point values into quantiles."""
    return [Quantile(q) for q in quantiles]