from metrics_util.debugging import DebuggingRecorder, DebugValue
from metrics_util.handles import Unit
from metrics_util.key import CompositeKey, Key
from metrics_util.kind import MetricKind


def test_counter_value_in_snapshot():
    recorder = DebuggingRecorder()
    key = Key.from_name("requests")
    counter = recorder.register_counter(key)
    counter.increment(3)
    counter.increment(4)
    entries = recorder.snapshotter().snapshot().into_list()
    assert len(entries) == 1
    ck, unit, desc, value = entries[0]
    assert ck == CompositeKey(MetricKind.COUNTER, key)
    assert unit is None
    assert desc is None
    assert value == DebugValue(MetricKind.COUNTER, 7)


def test_gauge_value_in_snapshot():
    recorder = DebuggingRecorder()
    key = Key.from_name("temperature")
    gauge = recorder.register_gauge(key)
    gauge.set(20.5)
    gauge.increment(1.5)
    snapshot = recorder.snapshotter().snapshot().into_dict()
    _, _, value = snapshot[CompositeKey(MetricKind.GAUGE, key)]
    assert value.value == 22.0


def test_histogram_drained_by_snapshot():
    recorder = DebuggingRecorder()
    key = Key.from_name("latency")
    histogram = recorder.register_histogram(key)
    for sample in (1.0, 2.0, 3.0):
        histogram.record(sample)
    snapshotter = recorder.snapshotter()
    ck = CompositeKey(MetricKind.HISTOGRAM, key)
    first = snapshotter.snapshot().into_dict()[ck][2]
    assert sorted(first.value) == [1.0, 2.0, 3.0]
    second = snapshotter.snapshot().into_dict()[ck][2]
    assert second.value == ()


def test_description_and_unit_attached():
    recorder = DebuggingRecorder()
    recorder.describe_counter("counter_key", Unit.COUNT, "counter desc")
    recorder.register_counter(Key.from_name("counter_key"))
    ((_, unit, desc, _),) = recorder.snapshotter().snapshot().into_list()
    assert unit is Unit.COUNT
    assert desc == "counter desc"


def test_redescribe_keeps_unit_when_none():
    recorder = DebuggingRecorder()
    recorder.describe_gauge("gauge_key", Unit.BYTES, "first")
    recorder.describe_gauge("gauge_key", None, "second")
    recorder.register_gauge(Key.from_name("gauge_key"))
    ((_, unit, desc, _),) = recorder.snapshotter().snapshot().into_list()
    assert unit is Unit.BYTES
    assert desc == "second"


def test_description_is_per_kind():
    recorder = DebuggingRecorder()
    recorder.describe_histogram("shared", Unit.NANOSECONDS, "histogram desc")
    recorder.register_counter(Key.from_name("shared"))
    ((ck, unit, desc, _),) = recorder.snapshotter().snapshot().into_list()
    assert ck.kind is MetricKind.COUNTER
    assert unit is None
    assert desc is None


def test_described_only_not_emitted():
    recorder = DebuggingRecorder()
    recorder.describe_counter("ghost", Unit.COUNT, "never registered")
    assert recorder.snapshotter().snapshot().into_list() == []


def test_registration_order_preserved():
    recorder = DebuggingRecorder()
    names = ["zeta", "alpha", "mid"]
    for name in names:
        recorder.register_counter(Key.from_name(name))
    recorder.register_counter(Key.from_name("alpha"))
    entries = recorder.snapshotter().snapshot().into_list()
    assert [ck.key.name for ck, _, _, _ in entries] == names


def test_same_handle_state_for_repeat_registration():
    recorder = DebuggingRecorder()
    key = Key.from_parts("hits", [("route", "/")])
    recorder.register_counter(key).increment(2)
    recorder.register_counter(key).increment(5)
    value = recorder.snapshotter().snapshot().into_dict()[CompositeKey(MetricKind.COUNTER, key)][2]
    assert value.value == 7


def test_into_dict_matches_into_list():
    recorder = DebuggingRecorder()
    recorder.register_counter(Key.from_name("c")).increment(1)
    recorder.register_gauge(Key.from_name("g")).set(2.0)
    snapshotter = recorder.snapshotter()
    entries = snapshotter.snapshot().into_list()
    as_dict = snapshotter.snapshot().into_dict()
    assert {ck: (u, d, v) for ck, u, d, v in entries} == as_dict