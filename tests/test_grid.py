"""Tests for the grid module."""

import warnings

import numpy as np
import pytest

from lasfield.errors import GridSizeAdjustedWarning, InvalidGridError
from lasfield.grid.decompose import GridSpec, decompose_grid, normalize_grid_size
from lasfield.grid.layout import (
    average_up,
    cell_index,
    crop_raster,
    from_raster,
    to_raster,
)


class TestDecompose:
    def test_square(self):
        g = decompose_grid(64, 64)
        assert (g.k1, g.k2, g.m) == (16, 16, 2)
        assert g.base_cells == 256

    def test_rectangular(self):
        g = decompose_grid(160, 48)
        assert (g.k1, g.k2, g.m) == (20, 6, 3)

    def test_small_grid_is_direct(self):
        g = decompose_grid(10, 7)
        assert (g.k1, g.k2, g.m) == (10, 7, 0)

    def test_custom_bound(self):
        g = decompose_grid(8, 8, max_base_cells=16)
        assert (g.k1, g.k2, g.m) == (4, 4, 1)

    def test_sizes_recomposed(self):
        for n1, n2 in [(64, 64), (160, 48), (4, 1024), (96, 40)]:
            g = decompose_grid(n1, n2)
            assert g.k1 * 2 ** g.m == n1
            assert g.k2 * 2 ** g.m == n2
            assert g.k1 * g.k2 <= 256

    def test_odd_size(self):
        with pytest.raises(InvalidGridError, match="odd size"):
            decompose_grid(45, 45)

    def test_invalid_grid_is_value_error(self):
        with pytest.raises(ValueError):
            decompose_grid(45, 45)

    def test_max_depth(self):
        with pytest.raises(InvalidGridError, match="max_depth"):
            decompose_grid(1024, 1024, max_depth=2)

    def test_non_positive(self):
        with pytest.raises(ValueError):
            decompose_grid(0, 4)

    def test_strip(self):
        g = decompose_grid(2, 16, max_base_cells=8)
        assert (g.k1, g.k2, g.m) == (1, 8, 1)
        assert g.is_strip


class TestGridSpec:
    def test_inconsistent(self):
        with pytest.raises(InvalidGridError):
            GridSpec(nx=10, ny=8, k1=4, k2=4, m=1)

    def test_shape_at(self):
        g = GridSpec(nx=32, ny=16, k1=4, k2=2, m=3)
        assert g.shape_at(0) == (4, 2)
        assert g.shape_at(3) == (32, 16)
        with pytest.raises(ValueError):
            g.shape_at(4)


class TestNormalize:
    def test_adjusted(self):
        with pytest.warns(GridSizeAdjustedWarning):
            nrfx, nrfy = normalize_grid_size(150, 50)
        assert (nrfx, nrfy) == (152, 56)

    def test_exact_size_unchanged(self):
        with warnings.catch_warnings():
            warnings.simplefilter("error")
            assert normalize_grid_size(64, 64) == (64, 64)
            assert normalize_grid_size(10, 7) == (10, 7)

    def test_always_decomposable(self):
        with warnings.catch_warnings():
            warnings.simplefilter("ignore", GridSizeAdjustedWarning)
            for nxe in [1, 3, 17, 100, 255, 513]:
                for nye in [1, 7, 64, 300]:
                    nrfx, nrfy = normalize_grid_size(nxe, nye)
                    assert nrfx >= nxe and nrfy >= nye
                    g = decompose_grid(nrfx, nrfy, max_depth=20)
                    assert g.base_cells <= 256

    def test_custom_bound(self):
        with pytest.warns(GridSizeAdjustedWarning):
            assert normalize_grid_size(30, 10, max_base_cells=64) == (32, 12)


class TestLayout:
    def test_to_raster(self):
        raster = to_raster(np.arange(15), nx=5, ny=3)
        assert raster.shape == (3, 5)
        np.testing.assert_array_equal(raster[0], [10, 11, 12, 13, 14])
        np.testing.assert_array_equal(raster[2], [0, 1, 2, 3, 4])

    def test_from_raster_inverse(self):
        values = np.arange(12.0)
        np.testing.assert_array_equal(from_raster(to_raster(values, 4, 3)), values)

    def test_wrong_size(self):
        with pytest.raises(ValueError):
            to_raster(np.arange(10), 4, 3)

    def test_crop(self):
        raster = np.arange(24).reshape(4, 6)
        out = crop_raster(raster, nxe=5, nye=3)
        np.testing.assert_array_equal(out, raster[:3, :5])
        with pytest.raises(ValueError):
            crop_raster(raster, nxe=7, nye=3)

    def test_cell_index(self):
        assert cell_index(2, 1, 5) == 7

    def test_average_up(self):
        values = np.arange(16.0)
        np.testing.assert_allclose(average_up(values, 4, 4), [2.5, 4.5, 10.5, 12.5])
        with pytest.raises(ValueError):
            average_up(np.arange(6.0), 3, 2)
