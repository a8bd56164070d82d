"""
Tests for banded storage conversions.
"""

import numpy as np
import pytest

from pybanded.core.compute.band import (
    band_from_dense,
    dense_from_band,
    detect_bandwidth,
    lapack_upper_form,
)
from pybanded.core.exceptions import DimensionError, ValidationError


TRIDIAGONAL = np.array([
    [4.0, 1.0, 0.0],
    [1.0, 4.0, 1.0],
    [0.0, 1.0, 4.0],
])


class TestDetectBandwidth:

    def test_diagonal(self):
        assert detect_bandwidth(np.diag([1.0, 2.0, 3.0])) == 1

    def test_tridiagonal(self):
        assert detect_bandwidth(TRIDIAGONAL) == 2

    def test_full(self):
        assert detect_bandwidth(np.ones((4, 4))) == 4

    def test_isolated_far_entry(self):
        a = np.eye(5)
        a[0, 3] = a[3, 0] = 0.5
        assert detect_bandwidth(a) == 4

    def test_atol_ignores_tiny_entries(self):
        a = np.eye(3)
        a[0, 2] = a[2, 0] = 1e-20
        assert detect_bandwidth(a) == 3
        assert detect_bandwidth(a, atol=1e-15) == 1

    def test_rejects_non_square(self):
        with pytest.raises(DimensionError):
            detect_bandwidth(np.zeros((2, 3)))


class TestBandFromDense:

    def test_tridiagonal(self):
        band = band_from_dense(TRIDIAGONAL, 2)
        np.testing.assert_array_equal(band, [[4, 1], [4, 1], [4, 0]])

    def test_drops_entries_outside_band(self):
        band = band_from_dense(np.ones((3, 3)), 1)
        np.testing.assert_array_equal(band, [[1], [1], [1]])

    def test_bandwidth_too_large(self):
        with pytest.raises(ValidationError):
            band_from_dense(TRIDIAGONAL, 4)

    def test_bandwidth_zero(self):
        with pytest.raises(ValidationError):
            band_from_dense(TRIDIAGONAL, 0)


class TestDenseFromBand:

    def test_tridiagonal(self):
        np.testing.assert_array_equal(
            dense_from_band(np.array([[4.0, 1.0], [4.0, 1.0], [4.0, 0.0]])),
            TRIDIAGONAL,
        )

    def test_roundtrip_random(self, rng):
        a = rng.standard_normal((6, 6))
        a = a + a.T
        band = band_from_dense(a, 6)
        np.testing.assert_array_equal(dense_from_band(band), a)

    def test_rejects_wide_band(self):
        with pytest.raises(DimensionError):
            dense_from_band(np.zeros((2, 3)))


class TestLapackUpperForm:

    def test_tridiagonal_layout(self):
        ab = lapack_upper_form(np.array([[4.0, 1.0], [4.0, 1.0], [4.0, 0.0]]))
        # Row 0 holds the super-diagonal shifted right, row 1 the diagonal.
        np.testing.assert_array_equal(ab, [[0, 1, 1], [4, 4, 4]])

    def test_matches_scipy_convention(self, rng):
        a = rng.standard_normal((5, 5))
        a = a + a.T
        band = band_from_dense(a, 3)
        ab = lapack_upper_form(band)
        u = 2
        for i in range(5):
            for j in range(i, min(i + 3, 5)):
                assert ab[u + i - j, j] == a[i, j]
