import pytest

from metrics_util.kind import MetricKind, MetricKindMask


@pytest.mark.parametrize(
    "mask, counter, gauge, histogram",
    [
        (MetricKindMask.COUNTER, True, False, False),
        (MetricKindMask.GAUGE, False, True, False),
        (MetricKindMask.HISTOGRAM, False, False, True),
        (MetricKindMask.ALL, True, True, True),
        (MetricKindMask.NONE, False, False, False),
    ],
)
def test_matching(mask, counter, gauge, histogram):
    assert mask.matches(MetricKind.COUNTER) is counter
    assert mask.matches(MetricKind.GAUGE) is gauge
    assert mask.matches(MetricKind.HISTOGRAM) is histogram


def test_combined_mask():
    mask = MetricKindMask.COUNTER.__or__(MetricKindMask.HISTOGRAM)
    assert not mask.matches(MetricKind.GAUGE)
    assert mask.matches(MetricKind.COUNTER)
    assert mask.matches(MetricKind.HISTOGRAM)


def test_or_of_all_kinds_is_all():
    combined = MetricKindMask.COUNTER.__or__(MetricKindMask.GAUGE).__or__(
        MetricKindMask.HISTOGRAM
    )
    assert combined == MetricKindMask.ALL
    assert all(
        combined.matches(kind)
        for kind in (MetricKind.COUNTER, MetricKind.GAUGE, MetricKind.HISTOGRAM)
    )


def test_or_with_none_is_identity():
    combined = MetricKindMask.GAUGE.__or__(MetricKindMask.NONE)
    assert combined == MetricKindMask.GAUGE
    assert combined.matches(MetricKind.GAUGE)
    assert not combined.matches(MetricKind.COUNTER)