"""A recorder that routes metrics to different recorders by name prefix and kind."""

from __future__ import annotations

from typing import Any, Optional

from ..handles import Counter, Gauge, Histogram, Unit
from ..key import Key
from ..kind import MetricKind, MetricKindMask
from .stack import Recorder

__all__ = ["Router", "RouterBuilder"]


def _longest_prefix(routes: dict[str, int], name: str) -> Optional[int]:
    for end in range(len(name), -1, -1):
        idx = routes.get(name[:end])
        if idx is not None:
            return idx
    return None


class Router(Recorder):
    """Sends each metric to the recorder of its longest matching route.

    Metrics with no matching route go to the default recorder.
    """

    def __init__(
        self,
        default: Any,
        global_mask: MetricKindMask,
        targets: list[Any],
        routes: dict[MetricKind, dict[str, int]],
    ) -> None:
        self._default = default
        self._global_mask = global_mask
        self._targets = list(targets)
        self._routes = {kind: dict(routes.get(kind, {})) for kind in MetricKind}

    def _route(self, kind: MetricKind, name: str) -> Any:
        # The global mask tells at once whether any route exists for this kind.
        if not self._global_mask.matches(kind):
            return self._default
        idx = _longest_prefix(self._routes[kind], str(name))
        return self._default if idx is None else self._targets[idx]

    def describe_counter(self, key_name: str, unit: Optional[Unit], description: str) -> None:
        self._route(MetricKind.COUNTER, key_name).describe_counter(key_name, unit, description)

    def describe_gauge(self, key_name: str, unit: Optional[Unit], description: str) -> None:
        self._route(MetricKind.GAUGE, key_name).describe_gauge(key_name, unit, description)

    def describe_histogram(self, key_name: str, unit: Optional[Unit], description: str) -> None:
        self._route(MetricKind.HISTOGRAM, key_name).describe_histogram(
            key_name, unit, description
        )

    def register_counter(self, key: Key) -> Counter:
        return self._route(MetricKind.COUNTER, key.name).register_counter(key)

    def register_gauge(self, key: Key) -> Gauge:
        return self._route(MetricKind.GAUGE, key.name).register_gauge(key)

    def register_histogram(self, key: Key) -> Histogram:
        return self._route(MetricKind.HISTOGRAM, key.name).register_histogram(key)


_MASK_KINDS = {
    MetricKindMask.ALL: (MetricKind.COUNTER, MetricKind.GAUGE, MetricKind.HISTOGRAM),
    MetricKindMask.COUNTER: (MetricKind.COUNTER,),
    MetricKindMask.GAUGE: (MetricKind.GAUGE,),
    MetricKindMask.HISTOGRAM: (MetricKind.HISTOGRAM,),
}


class RouterBuilder:
    """Builds a :class:`Router` from a default recorder and a set of routes.

    A route is a name prefix plus a kind mask: the pattern ``foo`` matches
    ``foo`` and ``foo.submetric`` but not ``something.foo``.
    """

    def __init__(self, default: Any) -> None:
        self._default = default
        self._global_mask = MetricKindMask.NONE
        self._targets: list[Any] = []
        self._routes: dict[MetricKind, dict[str, int]] = {kind: {} for kind in MetricKind}

    @classmethod
    def from_recorder(cls, recorder: Any) -> RouterBuilder:
        """Create a builder whose default route is ``recorder``."""
        return cls(recorder)

    def add_route(self, mask: MetricKindMask, pattern: str, recorder: Any) -> RouterBuilder:
        """Route metrics of the kinds in ``mask`` whose names start with ``pattern``.

        ``mask`` must be exactly one kind or ``ALL``; an existing route with the
        same pattern is overwritten.
        """
        kinds = _MASK_KINDS.get(mask)
        if kinds is None:
            raise ValueError("cannot add route for unknown or empty metric kind mask")

        target_idx = len(self._targets)
        self._targets.append(recorder)
        self._global_mask = self._global_mask | mask
        for kind in kinds:
            self._routes[kind][str(pattern)] = target_idx
        return self

    def build(self) -> Router:
        """Build the configured router."""
        return Router(self._default, self._global_mask, self._targets, self._routes)