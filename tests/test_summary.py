import math
import random

import pytest
from hypothesis import given
from hypothesis import strategies as st

from metrics_util.summary import Summary


def _linear_quantile(sorted_values, q):
    position = q * (len(sorted_values) - 1)
    lower = math.floor(position)
    upper = math.ceil(position)
    fraction = position - lower
    return sorted_values[lower] + (sorted_values[upper] - sorted_values[lower]) * fraction


def test_basics():
    summary = Summary.with_defaults()
    assert summary.is_empty()

    summary.add(-420.42)
    assert summary.count() == 1
    assert summary.min() == pytest.approx(-420.42)
    assert summary.max() == pytest.approx(-420.42)
    assert summary.quantile(0.1) == -420.42
    assert summary.quantile(0.5) == -420.42
    assert summary.quantile(0.99) == -420.42

    summary.add(420.42)
    assert summary.count() == 2
    assert summary.min() == pytest.approx(-420.42)
    assert summary.max() == pytest.approx(420.42)
    assert summary.quantile(0.49) == -420.42

    summary.add(42.42)
    assert summary.count() == 3
    assert summary.min() == pytest.approx(-420.42)
    assert summary.max() == pytest.approx(420.42)
    assert summary.quantile(0.4999999999) == -420.42
    assert summary.quantile(0.5) == 42.42
    assert summary.quantile(0.9999999999) == 42.42


def test_positive_uniform():
    alpha = 0.0001
    rng = random.Random(12345)
    summary = Summary(alpha, 32_768, 1.0e-9)
    values = []
    for _ in range(100_000):
        value = rng.uniform(0.0, 100.0)
        values.append(value)
        summary.add(value)
    values.sort()

    for q in (0.25, 0.5, 0.75, 0.99):
        aval = _linear_quantile(values, q)
        sval = summary.quantile(q)
        distance = (aval * alpha) * 2.0
        assert math.isclose(aval, sval, rel_tol=distance)


def test_negative_positive_uniform():
    alpha = 0.0001
    rng = random.Random(54321)
    summary = Summary(alpha, 65_536, 1.0e-9)
    values = []
    for _ in range(100_000):
        value = rng.uniform(-100.0, 100.0)
        values.append(value)
        summary.add(value)
    values.sort()

    for q in (0.25, 0.47, 0.75, 0.99):
        aval = _linear_quantile(values, q)
        sval = summary.quantile(q)
        distance = (abs(aval) * alpha) * 2.0
        assert math.isclose(aval, sval, rel_tol=distance)


def test_zeroes():
    summary = Summary.with_defaults()
    summary.add(0.0)
    assert summary.quantile(0.5) == 0.0


def test_values_within_min_value_count_as_zero():
    summary = Summary(0.001, 1024, -0.5)
    summary.add(0.25)
    summary.add(-0.5)
    summary.add(3.0)
    assert summary.detailed_count() == (2, 0, 1)


def test_infinities():
    summary = Summary.with_defaults()
    summary.add(math.inf)
    assert summary.quantile(0.5) is None
    summary.add(-math.inf)
    assert summary.quantile(0.5) is None
    assert summary.is_empty()


def test_quantile_out_of_range_is_none():
    summary = Summary.with_defaults()
    summary.add(1.0)
    assert summary.quantile(-0.1) is None
    assert summary.quantile(1.1) is None


def test_detailed_count_and_count_agree():
    summary = Summary.with_defaults()
    for value in (-3.0, -2.0, 0.0, 1.0, 2.0, 5.0):
        summary.add(value)
    zeroes, negative, positive = summary.detailed_count()
    assert (zeroes, negative, positive) == (1, 2, 3)
    assert summary.count() == zeroes + negative + positive


def test_estimated_size_grows_by_bins():
    summary = Summary.with_defaults()
    empty = summary.estimated_size()
    summary.add(1.0)
    summary.add(1000.0)
    summary.add(-7.0)
    grown = summary.estimated_size()
    assert grown > empty
    assert (grown - empty) % 8 == 0


def test_copy_is_independent():
    summary = Summary.with_defaults()
    summary.add(5.0)
    clone = summary.copy()
    clone.add(10.0)
    assert summary.count() == 1
    assert clone.count() == 2