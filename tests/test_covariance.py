"""Tests for the covariance module."""

import numpy as np
import pytest
from scipy import linalg

from lasfield.covariance.local_average import lag_weights, local_average_covariance
from lasfield.covariance.matrices import base_covariance, stage_covariance
from lasfield.covariance.models import (
    CovarianceModel,
    gaussian,
    markov,
    separable_markov,
)


def markov_variance_function(T, theta):
    """Variance reduction of a 1-D Markov process averaged over T."""
    return theta ** 2 / (2 * T ** 2) * (2 * T / theta + np.exp(-2 * T / theta) - 1)


class TestModels:
    def test_unit_at_zero_lag(self):
        for func in (markov, separable_markov, gaussian):
            assert func(0.0, 0.0, 2.0, 3.0) == pytest.approx(1.0)

    def test_markov_scale(self):
        assert markov(1.0, 0.0, 2.0, 5.0) == pytest.approx(np.exp(-1.0))
        assert markov(0.0, 2.5, 2.0, 5.0) == pytest.approx(np.exp(-1.0))

    def test_separable_is_product(self):
        assert separable_markov(1.0, 2.0, 4.0, 4.0) == pytest.approx(
            separable_markov(1.0, 0.0, 4.0, 4.0) * separable_markov(0.0, 2.0, 4.0, 4.0)
        )

    def test_model_variance(self):
        model = CovarianceModel(2.0, 2.0, variance=4.0)
        assert model.covariance(0.0, 0.0) == pytest.approx(4.0)
        assert model.isotropic

    def test_unknown_kind(self):
        with pytest.raises(ValueError, match="Unknown covariance model"):
            CovarianceModel(1.0, 1.0, kind="spherical")

    def test_invalid_theta(self):
        with pytest.raises(ValueError):
            CovarianceModel(0.0, 1.0)


class TestLocalAverage:
    def test_lag_weights_integrate_area(self):
        tau, w = lag_weights((0.0, 2.0), (1.0, 4.0))
        # integral of the overlap weight is |a| * |b|
        assert w.sum() == pytest.approx(6.0)

    def test_degenerate_interval(self):
        with pytest.raises(ValueError):
            lag_weights((1.0, 1.0), (0.0, 1.0))

    def test_separable_variance(self):
        model = CovarianceModel(3.0, 1.5, kind="separable_markov")
        v = local_average_covariance((0, 2.0), (0, 0.5), (0, 2.0), (0, 0.5), model)
        expected = markov_variance_function(2.0, 3.0) * markov_variance_function(0.5, 1.5)
        assert v == pytest.approx(expected, rel=1e-8)

    def test_separable_covariance_between_cells(self):
        model = CovarianceModel(2.0, 2.0, kind="separable_markov")
        # var over 2T = (2 var(T) + 2 cov) / 4 for two adjacent cells
        T = 1.0
        g1 = markov_variance_function(T, 2.0)
        g2 = markov_variance_function(2 * T, 2.0)
        cov_x = (4 * g2 - 2 * g1) / 2
        v = local_average_covariance((0, T), (0, T), (T, 2 * T), (0, T), model)
        assert v == pytest.approx(cov_x * g1, rel=1e-8)

    def test_symmetric(self):
        model = CovarianceModel(2.0, 1.0)
        a = local_average_covariance((0, 1), (0, 0.5), (1.5, 2.0), (2.0, 3.0), model)
        b = local_average_covariance((1.5, 2.0), (2.0, 3.0), (0, 1), (0, 0.5), model)
        assert a == pytest.approx(b, rel=1e-12)

    def test_small_cells_approach_point_covariance(self):
        model = CovarianceModel(10.0, 10.0)
        h = 0.01
        v = local_average_covariance((0, h), (0, h), (1.0, 1.0 + h), (0, h), model)
        assert v == pytest.approx(float(model.covariance(1.0, 0.0)), rel=1e-3)

    def test_variance_reduction(self):
        model = CovarianceModel(2.0, 2.0)
        small = local_average_covariance((0, 0.5), (0, 0.5), (0, 0.5), (0, 0.5), model)
        large = local_average_covariance((0, 2.0), (0, 2.0), (0, 2.0), (0, 2.0), model)
        assert 1.0 > small > large > 0.0


class TestMatrices:
    @pytest.fixture
    def model(self):
        return CovarianceModel(2.0, 2.0)

    def test_base_shapes(self, model):
        base = base_covariance(model, 1.0, 1.0, 4, 3)
        assert base.Q.shape == (12, 12)
        assert base.cell_size == (1.0, 1.0)
        np.testing.assert_array_equal(base.Q, base.Q.T)
        linalg.cholesky(base.Q, lower=True)

    def test_base_block_is_first_stage_parents(self, model):
        base = base_covariance(model, 1.0, 0.5, 3, 3)
        first = stage_covariance(model, 0.5, 0.25)
        # the 3 x 3 base lattice is the stage-1 parent neighbourhood
        np.testing.assert_array_equal(base.Q, first.R)

    def test_stage_shapes(self, model):
        cov = stage_covariance(model, 0.5, 0.5)
        assert cov.R.shape == (9, 9)
        assert cov.B.shape == (4, 4)
        assert cov.S.shape == (9, 4)
        assert cov.cell_size == (0.5, 0.5)
        np.testing.assert_array_equal(cov.R, cov.R.T)
        np.testing.assert_array_equal(cov.B, cov.B.T)

    def test_mirrored_lags_identical(self, model):
        cov = stage_covariance(model, 0.5, 0.25)
        corners = [cov.R[p, 4] for p in (0, 2, 6, 8)]
        assert corners.count(corners[0]) == 4
        assert cov.R[1, 4] == cov.R[7, 4]
        assert cov.R[3, 4] == cov.R[5, 4]

    def test_children_average_to_parent(self):
        model = CovarianceModel(2.0, 1.0, kind="separable_markov")
        cov = stage_covariance(model, 0.5, 0.5)
        # the centre parent is the mean of its four children
        np.testing.assert_allclose(cov.S.mean(axis=1), cov.R[:, 4], rtol=1e-8)
        assert cov.B.mean() == pytest.approx(cov.R[4, 4], rel=1e-8)

    @pytest.mark.parametrize("t1, t2", [(0.5, 0.5), (0.5, 0.25), (2.0, 1.0)])
    def test_children_average_to_parent_markov(self, model, t1, t2):
        cov = stage_covariance(model, t1, t2)
        np.testing.assert_allclose(cov.S.mean(axis=1), cov.R[:, 4], rtol=0, atol=1e-10)
        assert cov.B.mean() == pytest.approx(cov.R[4, 4], abs=1e-9)

    def test_custom_covariance(self):
        calls = []

        def constant(ax, ay, bx, by, model):
            calls.append((ax, ay, bx, by))
            return 0.5

        base = base_covariance(None, 1.0, 1.0, 2, 2, covariance=constant)
        np.testing.assert_array_equal(base.Q, np.full((4, 4), 0.5))
        assert calls
