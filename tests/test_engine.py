"""Tests for the sampler and the LAS generator."""

import numpy as np
import pytest

from lasfield.covariance.local_average import local_average_covariance
from lasfield.covariance.models import CovarianceModel
from lasfield.errors import (
    CovarianceError,
    InvalidGridError,
    SingularConditionalCovarianceError,
    SingularConditionalCovarianceWarning,
)
from lasfield.grid.layout import average_up
from lasfield.subdivision.engine import LASGenerator
from lasfield.subdivision.neighbourhoods import ISOLATED, STRIP_END
from lasfield.subdivision.sampler import sample_base, subdivide


@pytest.fixture(scope="module")
def model():
    return CovarianceModel(theta_x=4.0, theta_y=4.0)


@pytest.fixture(scope="module")
def generator(model):
    return LASGenerator(16, 16, 16.0, 16.0, model, max_base_cells=16)


class TestGenerator:
    def test_decomposition(self, generator):
        g = generator.grid
        assert (g.k1, g.k2, g.m) == (4, 4, 2)
        assert generator.cell_size == (1.0, 1.0)
        assert len(generator.coefficients) == 2
        assert set(generator.schedules) == {1, 2}
        assert not generator.degraded

    def test_stage_sizes(self, generator):
        stages = generator.generate_stages(seed=1)
        assert [len(s) for s in stages] == [16, 64, 256]
        assert generator.generate(seed=1).shape == (256,)

    def test_reproducible(self, generator):
        a = generator.generate(seed=123)
        b = generator.generate(seed=123)
        np.testing.assert_array_equal(a, b)
        assert not np.array_equal(a, generator.generate(seed=124))

    def test_accepts_generator(self, generator):
        a = generator.generate(np.random.default_rng(5))
        np.testing.assert_array_equal(a, generator.generate(seed=5))

    def test_upward_averaging(self, generator):
        stages = generator.generate_stages(seed=9)
        for s in range(generator.grid.m):
            width, height = generator.grid.shape_at(s + 1)
            np.testing.assert_allclose(
                average_up(stages[s + 1], width, height), stages[s], atol=1e-12
            )

    def test_direct_stage_only(self, model):
        gen = LASGenerator(4, 4, 4.0, 4.0, model)
        assert gen.grid.m == 0
        u = np.random.default_rng(7).standard_normal(16)
        np.testing.assert_array_equal(gen.generate(seed=7), gen.base_factor @ u)

    def test_base_factor(self, generator):
        L = generator.base_factor
        np.testing.assert_array_equal(np.triu(L, 1), 0.0)
        assert L.shape == (16, 16)

    def test_subdivide_draws_three_normals_per_parent(self, generator):
        rng_a = np.random.default_rng(3)
        rng_b = np.random.default_rng(3)
        parent = sample_base(generator.base_factor, rng_a)
        subdivide(parent, 4, 4, generator.coefficients[1], rng_a)
        rng_b.standard_normal(16)
        rng_b.standard_normal((16, 3))
        assert rng_a.standard_normal() == rng_b.standard_normal()

    def test_repr(self, generator):
        assert "k1=4" in repr(generator)


class TestDegenerateGrids:
    def test_strip(self, model):
        gen = LASGenerator(2, 16, 2.0, 16.0, model, max_base_cells=8)
        assert gen.grid.is_strip
        assert (STRIP_END, "start") in gen.coefficients[1]
        stages = gen.generate_stages(seed=2)
        np.testing.assert_allclose(average_up(stages[1], 2, 16), stages[0], atol=1e-12)

    def test_row_strip(self, model):
        gen = LASGenerator(32, 4, 32.0, 4.0, model, max_base_cells=16)
        assert (gen.grid.k1, gen.grid.k2, gen.grid.m) == (8, 1, 2)
        stages = gen.generate_stages(seed=2)
        np.testing.assert_allclose(average_up(stages[1], 16, 2), stages[0], atol=1e-12)
        np.testing.assert_allclose(average_up(stages[2], 32, 4), stages[1], atol=1e-12)

    def test_isolated(self, model):
        gen = LASGenerator(4, 4, 4.0, 4.0, model, max_base_cells=1)
        assert (gen.grid.k1, gen.grid.k2, gen.grid.m) == (1, 1, 2)
        assert (ISOLATED, "centre") in gen.coefficients[1]
        stages = gen.generate_stages(seed=4)
        for s in range(2):
            width, height = gen.grid.shape_at(s + 1)
            np.testing.assert_allclose(
                average_up(stages[s + 1], width, height), stages[s], atol=1e-12
            )


class TestErrors:
    def test_invalid_grid(self, model):
        with pytest.raises(InvalidGridError):
            LASGenerator(45, 45, 1.0, 1.0, model)

    def test_invalid_size(self, model):
        with pytest.raises(ValueError):
            LASGenerator(4, 4, 0.0, 1.0, model)

    def test_singular_base_covariance(self, model):
        with pytest.raises(CovarianceError):
            LASGenerator(4, 4, 4.0, 4.0, model, covariance=lambda *args: 1.0)

    @staticmethod
    def blind_children(ax, ay, bx, by, model):
        # children of the 2 x 2 base cells are 1 x 1
        if ax[1] - ax[0] < 1.5 and bx[1] - bx[0] < 1.5:
            return 0.0
        return local_average_covariance(ax, ay, bx, by, model)

    def test_degraded_factor_recorded(self, model):
        with pytest.warns(SingularConditionalCovarianceWarning):
            gen = LASGenerator(8, 8, 8.0, 8.0, model, max_base_cells=16,
                               covariance=self.blind_children)
        assert gen.degraded
        assert all(d.stage == 1 for d in gen.degraded)
        assert gen.generate(seed=1).shape == (64,)

    def test_strict(self, model):
        with pytest.raises(SingularConditionalCovarianceError):
            LASGenerator(8, 8, 8.0, 8.0, model, max_base_cells=16,
                         covariance=self.blind_children, strict=True)


class TestStatistics:
    def test_ensemble_variance_and_correlation(self, generator, model):
        n = 400
        fields = np.array([generator.generate(seed=1000 + i) for i in range(n)])
        target_var = local_average_covariance((0, 1), (0, 1), (0, 1), (0, 1), model)
        target_cov = local_average_covariance((0, 1), (0, 1), (1, 2), (0, 1), model)

        var = np.mean(fields ** 2)
        assert var == pytest.approx(target_var, rel=0.1)

        z = fields.reshape(n, 16, 16)
        cov_x = np.mean(z[:, :, :-1] * z[:, :, 1:])
        assert cov_x == pytest.approx(target_cov, rel=0.15)

    @pytest.mark.slow
    def test_ensemble_full_size(self):
        # 64 x 64 unit cells, correlation length a tenth of the extent
        model = CovarianceModel(theta_x=6.4, theta_y=6.4)
        gen = LASGenerator(64, 64, 64.0, 64.0, model)
        n = 1000
        fields = np.array([gen.generate(seed=i) for i in range(n)])
        target_var = local_average_covariance((0, 1), (0, 1), (0, 1), (0, 1), model)
        target_x = local_average_covariance((0, 1), (0, 1), (1, 2), (0, 1), model)
        target_y = local_average_covariance((0, 1), (0, 1), (0, 1), (1, 2), model)

        assert abs(fields.mean()) < 0.05
        assert np.mean(fields ** 2) == pytest.approx(target_var, rel=0.05)

        z = fields.reshape(n, 64, 64)
        assert np.mean(z[:, :, :-1] * z[:, :, 1:]) == pytest.approx(target_x, rel=0.05)
        assert np.mean(z[:, :-1, :] * z[:, 1:, :]) == pytest.approx(target_y, rel=0.05)
