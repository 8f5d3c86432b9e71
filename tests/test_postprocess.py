"""Tests for the postprocess module."""

import numpy as np
import pytest

from lasfield.postprocess.statistics import (
    correlation_structure,
    cross_correlation,
    field_statistics,
)


class TestFieldStatistics:
    def test_values(self):
        mean, sd = field_statistics([[1.0, 2.0], [3.0, 4.0]])
        assert mean == 2.5
        assert sd == pytest.approx(np.std([1, 2, 3, 4], ddof=1))


class TestCorrelationStructure:
    def test_shapes_and_lags(self):
        raster = np.random.default_rng(0).standard_normal((6, 10))
        cx, cy, cd = correlation_structure(raster, dx=0.5, dy=2.0)
        assert cx.shape == (10, 2)
        assert cy.shape == (6, 2)
        assert cd.shape == (6, 2)
        np.testing.assert_allclose(cx[:, 0], 0.5 * np.arange(10))
        np.testing.assert_allclose(cy[:, 0], 2.0 * np.arange(6))
        assert cd[1, 0] == pytest.approx(np.hypot(0.5, 2.0))

    def test_unit_at_zero_lag(self):
        raster = np.random.default_rng(1).standard_normal((8, 12)) * 3.0 + 7.0
        for cor in correlation_structure(raster, 1.0, 1.0):
            assert cor[0, 1] == pytest.approx(1.0, abs=1e-12)

    def test_white_noise(self):
        raster = np.random.default_rng(2).standard_normal((100, 100))
        cx, cy, cd = correlation_structure(raster, 1.0, 1.0)
        assert abs(cx[1, 1]) < 0.05
        assert abs(cy[1, 1]) < 0.05
        assert abs(cd[1, 1]) < 0.05

    def test_correlated_rows(self):
        # every row is constant, so the x-direction correlation stays high
        rows = np.random.default_rng(3).standard_normal((400, 1))
        raster = np.repeat(rows, 20, axis=1)
        cx, cy, _ = correlation_structure(raster, 1.0, 1.0)
        assert cx[5, 1] > 0.9
        assert abs(cy[1, 1]) < 0.3

    def test_constant_field(self):
        with pytest.raises(ValueError):
            correlation_structure(np.ones((4, 4)), 1.0, 1.0)

    def test_not_2d(self):
        with pytest.raises(ValueError):
            correlation_structure(np.arange(5.0), 1.0, 1.0)


class TestCrossCorrelation:
    def test_identical(self):
        a = np.random.default_rng(4).standard_normal((5, 5))
        assert cross_correlation(a, a) == pytest.approx(1.0)
        assert cross_correlation(a, -a) == pytest.approx(-1.0)

    def test_constant_is_nan(self):
        a = np.random.default_rng(5).standard_normal(10)
        assert np.isnan(cross_correlation(a, np.ones(10)))
