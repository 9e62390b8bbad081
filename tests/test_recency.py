from datetime import timedelta

from metrics_util.handles import Counter
from metrics_util.key import Key
from metrics_util.kind import MetricKindMask
from metrics_util.recency import (
    Generation,
    Generational,
    GenerationalPrimitives,
    Recency,
)
from metrics_util.registry import AtomicCounter, Registry


class _FakeClock:
    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


def _counter_gen(registry: Registry, key: Key) -> Generation:
    return registry.get_or_create_counter(key, lambda c: c.get_generation())


def test_generational_starts_at_zero_and_advances():
    gen = Generational(AtomicCounter())
    assert gen.get_generation() == Generation(0)
    gen.increment(3)
    assert gen.get_generation() > Generation(0)
    assert gen.get_inner().load() == 3


def test_with_increment_returns_result_and_advances():
    gen = Generational(AtomicCounter())
    before = gen.get_generation()
    result = gen.with_increment(lambda c: "seen")
    assert result == "seen"
    assert gen.get_generation() > before


def test_generational_primitives_wrap_standard_storage():
    registry = Registry(GenerationalPrimitives)
    key = Key.from_name("requests")
    registry.get_or_create_counter(key, lambda c: c.increment(2))
    registry.get_or_create_gauge(key, lambda g: g.set(4.5))
    registry.get_or_create_histogram(key, lambda h: h.record(1.5))

    counter = registry.get_counter_handles()[key]
    gauge = registry.get_gauge_handles()[key]
    histogram = registry.get_histogram_handles()[key]
    assert counter.get_inner().load() == 2
    assert gauge.get_inner().load() == 4.5
    assert histogram.get_inner().data() == [1.5]


def test_generational_gauge_operations_each_advance():
    gauge = GenerationalPrimitives.gauge()
    seen = [gauge.get_generation()]
    gauge.set(10.0)
    seen.append(gauge.get_generation())
    gauge.increment(2.0)
    seen.append(gauge.get_generation())
    gauge.decrement(5.0)
    seen.append(gauge.get_generation())
    assert seen == sorted(set(seen))
    assert gauge.get_inner().load() == 7.0


def test_counter_handle_over_generational():
    inner = GenerationalPrimitives.counter()
    handle = Counter(inner)
    handle.increment(4)
    handle.absolute(10)
    assert inner.get_inner().load() == 10
    assert inner.get_generation() > Generation(1)


def test_no_timeout_always_stores():
    registry = Registry(GenerationalPrimitives)
    clock = _FakeClock()
    recency = Recency(clock, MetricKindMask.ALL, None)
    key = Key.from_name("idle")
    gen = _counter_gen(registry, key)
    assert recency.should_store_counter(key, gen, registry)
    clock.now = 1e9
    assert recency.should_store_counter(key, gen, registry)
    assert key in registry.get_counter_handles()


def test_idle_counter_is_removed():
    registry = Registry(GenerationalPrimitives)
    clock = _FakeClock()
    recency = Recency(clock, MetricKindMask.ALL, 10.0)
    key = Key.from_name("idle")
    gen = _counter_gen(registry, key)

    assert recency.should_store_counter(key, gen, registry)
    clock.now = 5.0
    assert recency.should_store_counter(key, gen, registry)
    clock.now = 10.0
    assert recency.should_store_counter(key, gen, registry)
    clock.now = 10.5
    assert not recency.should_store_counter(key, gen, registry)
    assert key not in registry.get_counter_handles()


def test_updated_metric_resets_timer():
    registry = Registry(GenerationalPrimitives)
    clock = _FakeClock()
    recency = Recency(clock, MetricKindMask.ALL, timedelta(seconds=10))
    key = Key.from_name("busy")
    gen = _counter_gen(registry, key)
    assert recency.should_store_gauge(key, gen, registry)

    clock.now = 20.0
    registry.get_or_create_counter(key, lambda c: c.increment(1))
    new_gen = _counter_gen(registry, key)
    assert recency.should_store_counter(key, new_gen, registry)

    clock.now = 25.0
    assert recency.should_store_counter(key, new_gen, registry)
    assert key in registry.get_counter_handles()


def test_masked_out_kind_is_never_removed():
    registry = Registry(GenerationalPrimitives)
    clock = _FakeClock()
    recency = Recency(clock, MetricKindMask.COUNTER | MetricKindMask.HISTOGRAM, 1.0)
    key = Key.from_name("level")
    gen = registry.get_or_create_gauge(key, lambda g: g.get_generation())
    assert recency.should_store_gauge(key, gen, registry)
    clock.now = 100.0
    assert recency.should_store_gauge(key, gen, registry)
    assert key in registry.get_gauge_handles()


def test_none_mask_never_removes():
    registry = Registry(GenerationalPrimitives)
    clock = _FakeClock()
    recency = Recency(clock, MetricKindMask.NONE, 1.0)
    key = Key.from_name("latency")
    gen = registry.get_or_create_histogram(key, lambda h: h.get_generation())
    assert recency.should_store_histogram(key, gen, registry)
    clock.now = 100.0
    assert recency.should_store_histogram(key, gen, registry)
    assert key in registry.get_histogram_handles()


def test_idle_histogram_is_removed():
    registry = Registry(GenerationalPrimitives)
    clock = _FakeClock()
    recency = Recency(clock, MetricKindMask.HISTOGRAM, 1.0)
    key = Key.from_name("latency")
    gen = registry.get_or_create_histogram(key, lambda h: h.get_generation())
    assert recency.should_store_histogram(key, gen, registry)
    clock.now = 2.0
    assert not recency.should_store_histogram(key, gen, registry)
    assert key not in registry.get_histogram_handles()


def test_failed_delete_keeps_metric():
    registry = Registry(GenerationalPrimitives)
    clock = _FakeClock()
    recency = Recency(clock, MetricKindMask.ALL, 1.0)
    key = Key.from_name("gone")
    gen = Generation(0)
    assert recency.should_store_counter(key, gen, registry)
    clock.now = 5.0
    # Nothing under this key in the registry, so deletion fails and it is kept.
    assert recency.should_store_counter(key, gen, registry)