"""
Tests for BandedDesign construction and validation.
"""

import numpy as np
import pytest

from pybanded.banded.design import BandedDesign
from pybanded.core.exceptions import DimensionError, ValidationError


TRIDIAGONAL = np.array([
    [4.0, 1.0, 0.0],
    [1.0, 4.0, 1.0],
    [0.0, 1.0, 4.0],
])


class TestFromBand:

    def test_basic(self, tridiagonal_band):
        d = BandedDesign.from_band(tridiagonal_band, [1, 2, 3])
        assert d.n == 3
        assert d.bandwidth == 2
        assert d.n_rhs == 1
        assert not d.is_multi_rhs
        assert d.b.dtype == np.float64

    def test_copies_inputs(self, tridiagonal_band):
        b = np.array([1.0, 2.0, 3.0])
        d = BandedDesign.from_band(tridiagonal_band, b)
        tridiagonal_band[0, 0] = 100.0
        b[0] = 100.0
        assert d.band[0, 0] == 4.0
        assert d.b[0] == 1.0

    def test_read_only(self, tridiagonal_band):
        d = BandedDesign.from_band(tridiagonal_band, [1, 2, 3])
        with pytest.raises(ValueError):
            d.band[0, 0] = 1.0

    def test_multi_rhs(self, tridiagonal_band):
        d = BandedDesign.from_band(tridiagonal_band, np.ones((3, 4)))
        assert d.is_multi_rhs
        assert d.n_rhs == 4

    def test_dense_expansion(self, tridiagonal_band):
        d = BandedDesign.from_band(tridiagonal_band, [1, 2, 3])
        np.testing.assert_array_equal(d.dense(), TRIDIAGONAL)

    def test_metadata(self, tridiagonal_band):
        d = BandedDesign.from_band(tridiagonal_band, [1, 2, 3])
        assert d.metadata() == {'n': 3, 'bandwidth': 2, 'n_rhs': 1}

    def test_rhs_length_mismatch(self, tridiagonal_band):
        with pytest.raises(DimensionError, match="Inconsistent lengths"):
            BandedDesign.from_band(tridiagonal_band, [1, 2])

    def test_wide_band_rejected(self):
        with pytest.raises(DimensionError, match="fewer rows"):
            BandedDesign.from_band(np.ones((2, 3)), [1, 2])

    def test_rhs_3d_rejected(self, tridiagonal_band):
        with pytest.raises(DimensionError):
            BandedDesign.from_band(tridiagonal_band, np.ones((3, 1, 1)))

    def test_band_1d_rejected(self):
        with pytest.raises(DimensionError):
            BandedDesign.from_band([1.0, 2.0], [1.0, 2.0])

    def test_non_finite_rejected(self, tridiagonal_band):
        with pytest.raises(ValidationError, match="non-finite"):
            BandedDesign.from_band(tridiagonal_band, [1.0, np.nan, 3.0])


class TestFromDense:

    def test_detects_bandwidth(self):
        d = BandedDesign.from_dense(TRIDIAGONAL, [1, 2, 3])
        assert d.bandwidth == 2
        np.testing.assert_array_equal(d.band, [[4, 1], [4, 1], [4, 0]])

    def test_explicit_bandwidth(self):
        d = BandedDesign.from_dense(TRIDIAGONAL, [1, 2, 3], bandwidth=3)
        assert d.bandwidth == 3

    def test_rejects_asymmetric(self):
        a = TRIDIAGONAL.copy()
        a[0, 1] = 2.0
        with pytest.raises(ValidationError, match="not symmetric"):
            BandedDesign.from_dense(a, [1, 2, 3])

    def test_asymmetric_allowed_when_unchecked(self):
        a = TRIDIAGONAL.copy()
        a[1, 0] = 9.0
        d = BandedDesign.from_dense(a, [1, 2, 3], check_symmetric_input=False)
        np.testing.assert_array_equal(d.dense(), TRIDIAGONAL)

    def test_rejects_non_square(self):
        with pytest.raises(DimensionError):
            BandedDesign.from_dense(np.ones((2, 3)), [1, 2])

    def test_bandwidth_too_large(self):
        with pytest.raises(ValidationError):
            BandedDesign.from_dense(TRIDIAGONAL, [1, 2, 3], bandwidth=4)
