import math

import numpy as np
import pytest
from scipy import stats as st

from engineering.stats import (
    aggregate_vals,
    descriptive,
    halfwidth_t,
    mean_error,
    mean_error_rows,
    sem_rows,
    t_quantile,
)


def test_t_quantile():
    assert t_quantile(9, 0.95) == pytest.approx(st.t.ppf(0.975, 9))
    with pytest.raises(ValueError):
        t_quantile(0, 0.95)
    with pytest.raises(ValueError):
        t_quantile(5, 1.0)


def test_halfwidth_t():
    vals = [1.0, 2.0, 3.0, 4.0]
    expected = st.t.ppf(0.975, 3) * np.std(vals, ddof=1) / 2.0
    assert halfwidth_t(vals) == pytest.approx(expected)
    assert math.isnan(halfwidth_t([1.0]))


def test_aggregate_vals_filters_nan():
    out = aggregate_vals("R", [1.0, float("nan"), 3.0])
    assert out["R_mean"] == pytest.approx(2.0)
    assert out["R_ci_low"] < 2.0 < out["R_ci_high"]
    empty = aggregate_vals("R", [])
    assert math.isnan(empty["R_mean"]) and empty["R_stdev"] == 0.0


def test_mean_error_rows():
    y = [[1.0, 2.0, 3.0], [2.0, 4.0, 6.0]]
    means, hws = mean_error_rows(y, 0.95)
    np.testing.assert_allclose(means, [2.0, 4.0])
    t = st.t.ppf(0.975, 2)
    np.testing.assert_allclose(hws, [t / math.sqrt(3), 2 * t / math.sqrt(3)])


def test_mean_error_single_series_matches_rows():
    vals = [3.0, 5.0, 4.0, 6.0]
    m, h = mean_error(vals, 0.9)
    ms, hs = mean_error_rows([vals], 0.9)
    assert m == pytest.approx(ms[0])
    assert h == pytest.approx(hs[0])


def test_wider_confidence_gives_wider_interval():
    y = np.arange(12, dtype=float).reshape(3, 4)
    _, h90 = mean_error_rows(y, 0.90)
    _, h99 = mean_error_rows(y, 0.99)
    assert np.all(h99 > h90)


@pytest.mark.parametrize("conf", [0.0, 1.0, -0.1, 1.5])
def test_invalid_confidence(conf):
    with pytest.raises(ValueError):
        mean_error_rows([[1.0, 2.0]], conf)
    with pytest.raises(ValueError):
        mean_error([1.0, 2.0], conf)


def test_shape_errors():
    with pytest.raises(ValueError):
        sem_rows([1.0, 2.0, 3.0])
    with pytest.raises(ValueError):
        sem_rows([[1.0], [2.0]])
    with pytest.raises(ValueError):
        mean_error([1.0])


def test_descriptive():
    d = descriptive([1.0, 2.0, 3.0])
    assert d["n"] == 3
    assert d["mean"] == pytest.approx(2.0)
    assert d["std"] == pytest.approx(1.0)
    assert (d["min"], d["max"]) == (1.0, 3.0)
    assert math.isnan(descriptive([5.0])["std"])
    assert descriptive([])["n"] == 0
