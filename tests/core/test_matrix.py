"""
Tests for Matrix (dense role).

Validates construction, reallocation, element and row access, transpose,
multiply and copy semantics. The banded solve is covered in test_ldlt.py.
"""

import copy

import numpy as np
import pytest

from pybanded.core.exceptions import DimensionError, IndexOutOfRangeError, ValidationError
from pybanded.core.matrix import Matrix


# ═══════════════════════════════════════════════════════════════════════
# Construction and shape
# ═══════════════════════════════════════════════════════════════════════


class TestConstruction:

    def test_zero_initialized(self):
        m = Matrix(2, 3)
        assert m.rows == 2
        assert m.columns == 3
        assert m.shape == (2, 3)
        np.testing.assert_array_equal(m.array, np.zeros((2, 3)))

    @pytest.mark.parametrize("rows, cols", [(0, 1), (1, 0), (-1, 2)])
    def test_invalid_dimensions(self, rows, cols):
        with pytest.raises(ValidationError):
            Matrix(rows, cols)

    def test_from_array(self):
        m = Matrix.from_array([[1, 2], [3, 4], [5, 6]])
        assert m.shape == (3, 2)
        assert m[2, 1] == 6.0

    def test_from_array_rejects_1d(self):
        with pytest.raises(DimensionError):
            Matrix.from_array([1.0, 2.0])


class TestReallocation:
    """set_rows / set_columns / resize discard contents."""

    def test_set_rows(self):
        m = Matrix.from_array(np.ones((2, 2)))
        m.set_rows(4)
        assert m.shape == (4, 2)
        np.testing.assert_array_equal(m.array, np.zeros((4, 2)))

    def test_set_columns(self):
        m = Matrix.from_array(np.ones((2, 2)))
        m.set_columns(5)
        assert m.shape == (2, 5)
        np.testing.assert_array_equal(m.array, np.zeros((2, 5)))

    def test_resize(self):
        m = Matrix.from_array(np.ones((2, 2)))
        m.resize(3, 3)
        assert m.shape == (3, 3)
        np.testing.assert_array_equal(m.array, np.zeros((3, 3)))

    def test_same_shape_resize_still_discards(self):
        m = Matrix.from_array(np.ones((2, 2)))
        m.resize(2, 2)
        np.testing.assert_array_equal(m.array, np.zeros((2, 2)))

    @pytest.mark.parametrize("call", [
        lambda m: m.set_rows(0),
        lambda m: m.set_columns(0),
        lambda m: m.resize(0, 2),
        lambda m: m.resize(2, -1),
    ])
    def test_invalid_reallocation(self, call):
        m = Matrix.from_array(np.ones((2, 2)))
        with pytest.raises(ValidationError):
            call(m)
        np.testing.assert_array_equal(m.array, np.ones((2, 2)))

    def test_clear(self):
        m = Matrix.from_array(np.ones((2, 3)))
        m.clear()
        np.testing.assert_array_equal(m.array, np.zeros((2, 3)))


# ═══════════════════════════════════════════════════════════════════════
# Element and row access
# ═══════════════════════════════════════════════════════════════════════


class TestAccess:

    def test_element_get_set(self):
        m = Matrix(2, 2)
        m[1, 0] = 3.5
        assert m[1, 0] == 3.5
        assert m.array[1, 0] == 3.5

    def test_row_view_is_live(self):
        m = Matrix.from_array([[1.0, 2.0], [3.0, 4.0]])
        row = m.row(1)
        np.testing.assert_array_equal(row, [3.0, 4.0])
        row[0] = 10.0
        assert m[1, 0] == 10.0

    def test_row_out_of_range(self):
        m = Matrix(2, 2)
        with pytest.raises(IndexOutOfRangeError):
            m.row(2)
        with pytest.raises(IndexOutOfRangeError):
            m.row(-1)

    def test_row_length_is_column_count(self):
        m = Matrix(4, 3)
        assert m.row(3).shape == (3,)


# ═══════════════════════════════════════════════════════════════════════
# Transpose
# ═══════════════════════════════════════════════════════════════════════


class TestTranspose:

    def test_transpose_values(self):
        m = Matrix.from_array([[1, 2, 3], [4, 5, 6]])
        t = m.transpose()
        assert t.shape == (3, 2)
        np.testing.assert_array_equal(t.array, [[1, 4], [2, 5], [3, 6]])

    def test_transpose_reallocates_out(self):
        m = Matrix.from_array([[1, 2, 3], [4, 5, 6]])
        out = Matrix(1, 1)
        returned = m.transpose(out)
        assert returned is out
        assert out.shape == (3, 2)

    def test_transpose_into_matching_out(self):
        m = Matrix.from_array([[1, 2], [3, 4]])
        out = Matrix(2, 2)
        m.transpose(out)
        np.testing.assert_array_equal(out.array, [[1, 3], [2, 4]])

    def test_transpose_rejects_ndarray_out(self):
        m = Matrix.from_array([[1, 2], [3, 4]])
        with pytest.raises(ValidationError, match="out must be a Matrix"):
            m.transpose(np.zeros((2, 2)))

    def test_double_transpose_is_identity(self, rng):
        m = Matrix.from_array(rng.standard_normal((5, 3)))
        np.testing.assert_array_equal(m.transpose().transpose().array, m.array)

    def test_transpose_in_place_square(self):
        m = Matrix.from_array([[1, 2], [3, 4]])
        m.transpose(m)
        np.testing.assert_array_equal(m.array, [[1, 3], [2, 4]])


# ═══════════════════════════════════════════════════════════════════════
# Multiply
# ═══════════════════════════════════════════════════════════════════════


class TestMultiply:

    def test_product(self):
        a = Matrix.from_array([[1, 2], [3, 4]])
        b = Matrix.from_array([[5, 6, 7], [8, 9, 10]])
        out = a.multiply(b)
        np.testing.assert_array_equal(out.array, [[21, 24, 27], [47, 54, 61]])

    def test_matmul_operator(self):
        a = Matrix.from_array([[1, 2], [3, 4]])
        np.testing.assert_array_equal((a @ a).array, [[7, 10], [15, 22]])

    def test_identity(self, rng):
        a = Matrix.from_array(rng.standard_normal((4, 3)))
        eye = Matrix.from_array(np.eye(3))
        np.testing.assert_allclose(a.multiply(eye).array, a.array, rtol=1e-15)

    def test_inner_dimension_mismatch(self):
        a = Matrix(2, 3)
        b = Matrix(2, 3)
        out = Matrix.from_array([[7.0]])
        with pytest.raises(DimensionError):
            a.multiply(b, out)
        assert out[0, 0] == 7.0

    def test_out_reallocated(self):
        a = Matrix.from_array([[1, 2], [3, 4], [5, 6]])
        b = Matrix.from_array([[1], [1]])
        out = Matrix(1, 1)
        assert a.multiply(b, out) is out
        assert out.shape == (3, 1)
        np.testing.assert_array_equal(out.array, [[3], [7], [11]])

    def test_out_aliases_operand(self):
        a = Matrix.from_array([[1, 2], [3, 4]])
        a.multiply(a, a)
        np.testing.assert_array_equal(a.array, [[7, 10], [15, 22]])

    def test_rejects_ndarray_out(self):
        a = Matrix.from_array([[1, 2], [3, 4]])
        with pytest.raises(ValidationError, match="out must be a Matrix"):
            a.multiply(a, np.zeros((2, 2)))

    def test_rejects_non_matrix(self):
        with pytest.raises(ValidationError):
            Matrix(2, 2).multiply(np.eye(2))


# ═══════════════════════════════════════════════════════════════════════
# Copy semantics
# ═══════════════════════════════════════════════════════════════════════


class TestCopy:

    def test_copy_is_deep(self):
        m = Matrix.from_array([[1.0, 2.0]])
        for c in (m.copy(), copy.copy(m), copy.deepcopy(m)):
            c[0, 0] = 9.0
            assert m[0, 0] == 1.0

    def test_assign_reshapes(self):
        m = Matrix(1, 1)
        m.assign(Matrix.from_array([[1, 2], [3, 4]]))
        assert m.shape == (2, 2)
        np.testing.assert_array_equal(m.array, [[1, 2], [3, 4]])

    def test_to_array_is_independent(self):
        m = Matrix.from_array([[1.0]])
        arr = m.to_array()
        arr[0, 0] = 2.0
        assert m[0, 0] == 1.0

    def test_array_protocol_copy_flag(self):
        m = Matrix.from_array([[1.0, 2.0], [3.0, 4.0]])
        assert np.shares_memory(m.__array__(copy=False), m.array)
        assert not np.shares_memory(m.__array__(copy=True), m.array)
        assert m.__array__(np.float32).dtype == np.float32
        with pytest.raises(ValueError, match="requires a copy"):
            m.__array__(np.float32, copy=False)


# ═══════════════════════════════════════════════════════════════════════
# Banded storage helpers
# ═══════════════════════════════════════════════════════════════════════


class TestBandedStorage:

    def test_from_dense_symmetric_detects_bandwidth(self):
        dense = [[4.0, 1.0, 0.0], [1.0, 4.0, 1.0], [0.0, 1.0, 4.0]]
        m = Matrix.from_dense_symmetric(dense)
        assert m.shape == (3, 2)
        np.testing.assert_array_equal(m.array, [[4, 1], [4, 1], [4, 0]])

    def test_to_dense_symmetric_inverts(self, rng):
        a = rng.standard_normal((5, 5))
        a = a + a.T
        m = Matrix.from_dense_symmetric(a, bandwidth=5)
        np.testing.assert_array_equal(m.to_dense_symmetric(), a)

    def test_from_dense_symmetric_rejects_asymmetric(self):
        with pytest.raises(ValidationError):
            Matrix.from_dense_symmetric([[1.0, 2.0], [3.0, 1.0]])
