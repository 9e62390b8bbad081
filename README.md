# metrics-util

Building blocks for collecting application metrics:

- `metrics_util.kind`: `MetricKind` (`COUNTER`, `GAUGE`, `HISTOGRAM`) and
  `MetricKindMask`, a flag that combines with `|` and checks kinds with
  `matches()`.
- `metrics_util.key`: `Key`, `Label` and `CompositeKey` to name metrics, and
  `key_hash()` for a stable 64-bit hash.
- `metrics_util.handles`: `Unit` and the `Counter`, `Gauge` and `Histogram`
  handles returned by recorders (each has a `noop()` variant).
- `metrics_util.bucket`: `AtomicBucket`, a thread-safe bucket that collects
  values and can be read or drained in one sweep.
- `metrics_util.registry`: `Registry`, a sharded store of counters, gauges and
  histograms keyed by `Key`, built from `StandardPrimitives`
  (`AtomicCounter`, `AtomicGauge`, `AtomicBucket`).
- `metrics_util.debugging`: `DebuggingRecorder`, whose state can be captured
  with a `Snapshotter`.
- `metrics_util.recency`: `Generational`, `GenerationalPrimitives` and
  `Recency` to drop metrics that have gone idle.
- `metrics_util.histogram`: `Histogram` with fixed, cumulative buckets.
- `metrics_util.summary`: `Summary`, a quantile sketch with relative error.
- `metrics_util.quantile`: `Quantile` and `parse_quantiles` for `p99`-style
  labels.
- `metrics_util.layers`: `stack` (`Recorder`, `Layer`, `Stack`), `prefix`,
  `fanout`, `filter` and `router`.

The package has no runtime dependencies.

## Installation

```
pip install .
```

For running the test suite:

```
pip install ".[test]"
pytest
```

## Quick tour

### Keys and kinds

```python
from metrics_util.key import Key, CompositeKey
from metrics_util.kind import MetricKind, MetricKindMask

key = Key.from_parts("requests", {"method": "GET"})
counter_key = CompositeKey(MetricKind.COUNTER, key)

mask = MetricKindMask.COUNTER | MetricKindMask.HISTOGRAM
mask.matches(MetricKind.GAUGE)      # False
mask.matches(MetricKind.COUNTER)    # True
```

### Registry

```python
from metrics_util.key import Key
from metrics_util.registry import Registry

registry = Registry()
key = Key.from_name("requests")

registry.get_or_create_counter(key, lambda c: c.increment(1))
registry.get_or_create_counter(key, lambda c: c.increment(1))

registry.get_counter_handles()[key].load()   # 2
registry.delete_counter(key)                 # True
```

### Atomic bucket

```python
from metrics_util.bucket import AtomicBucket

bucket = AtomicBucket()
for value in range(100):
    bucket.push(value)

blocks = []
bucket.clear_with(blocks.append)    # visits every block, then empties the bucket
sum(map(sum, blocks))               # 4950
bucket.is_empty()                   # True
```

Blocks hold 64 values each and are visited newest first; values inside a
block keep the order they were pushed in. `data()` and `data_with()` read the
values without removing them.

### Debugging recorder

```python
from metrics_util.debugging import DebuggingRecorder
from metrics_util.handles import Unit
from metrics_util.key import Key

recorder = DebuggingRecorder()
snapshotter = recorder.snapshotter()

recorder.describe_counter("hits", Unit.COUNT, "number of hits")
recorder.register_counter(Key.from_name("hits")).increment(3)

for composite_key, unit, description, value in snapshotter.snapshot().into_list():
    print(composite_key, unit, description, value)
```

Taking a snapshot drains histogram samples; counters and gauges are read as
they stand.

### Recency

```python
import time

from metrics_util.kind import MetricKindMask
from metrics_util.recency import GenerationalPrimitives, Recency
from metrics_util.registry import Registry

registry = Registry(GenerationalPrimitives)
recency = Recency(time.monotonic, MetricKindMask.ALL, 300.0)

for key, counter in registry.get_counter_handles().items():
    if recency.should_store_counter(key, counter.get_generation(), registry):
        print(key, counter.get_inner().load())
```

A metric that has not changed for longer than the idle timeout is deleted
from the registry and `should_store_*` returns `False`.

### Layers

Layers wrap a recorder to change what reaches it. A `Stack` applies them in
order, each one wrapping what came before:

```python
from metrics_util.debugging import DebuggingRecorder
from metrics_util.layers.stack import Stack
from metrics_util.layers.prefix import PrefixLayer
from metrics_util.layers.filter import FilterLayer

stack = (
    Stack(DebuggingRecorder())
    .push(FilterLayer.from_patterns(["tokio", "bb8"]))
    .push(PrefixLayer("app"))
)
```

`PrefixLayer` renames every metric to `<prefix>.<name>`. `FilterLayer` drops
any metric whose name contains one of its patterns; `case_insensitive(True)`
makes ASCII letters match regardless of case. `FanoutBuilder` sends
everything to several recorders:

```python
from metrics_util.layers.fanout import FanoutBuilder

fanout = FanoutBuilder().add_recorder(DebuggingRecorder()).add_recorder(DebuggingRecorder()).build()
```

`RouterBuilder` sends metrics whose name starts with a given prefix to a
chosen recorder, per metric kind; the longest matching prefix wins and the
rest go to the default recorder:

```python
from metrics_util.kind import MetricKindMask
from metrics_util.layers.router import RouterBuilder

builder = RouterBuilder.from_recorder(DebuggingRecorder())
builder.add_route(MetricKindMask.COUNTER, "http", DebuggingRecorder())
router = builder.build()
```

`add_route` accepts a single kind or `MetricKindMask.ALL`; any other mask
raises `ValueError`.

### Histograms, summaries and quantiles

```python
from metrics_util.histogram import Histogram
from metrics_util.summary import Summary
from metrics_util.quantile import Quantile, parse_quantiles

histogram = Histogram([10.0, 25.0, 100.0])
histogram.record_many([3.0, 12.0, 56.0])
histogram.buckets()                 # [(10.0, 1), (25.0, 2), (100.0, 3)]

summary = Summary.with_defaults()
for value in (1.0, 2.0, 3.0):
    summary.add(value)
summary.quantile(0.5)               # close to 2.0

Quantile(0.99).label                # "p99"
[q.label for q in parse_quantiles([0.0, 0.5, 1.0])]   # ["min", "p50", "max"]
```

`Histogram` raises `ValueError` when given no bounds. `Summary.quantile`
returns `None` for an empty summary or a quantile outside [0, 1].

## Stress test

`bucket-crusher` hammers an `AtomicBucket` with producer threads while a
consumer drains it once a second, then logs the totals from both sides:

```
bucket-crusher --duration 10 --producers 4
bucket-crusher --help
```

`--duration` defaults to 60 seconds (an invalid or negative value also means
60) and `--producers` to 1.

## What it does not do

There is no global recorder to install and no exporter: recorders, layers
and stacks are ordinary objects that the caller creates and passes around,
and reading values out (for example through `DebuggingRecorder` snapshots or
`Registry` handles) is left to the caller.