"""
Dense row-major float64 matrix.

Matrix owns one flat buffer of rows * columns doubles. Rows are exposed as
stride-based views into that buffer, which is what the banded LDLT kernel
iterates over.

The same structure serves two roles:
    - dense general matrix: entry (r, c) is the matrix value; used by
      transpose() and multiply()
    - banded symmetric matrix: entry (i, k) holds logical entry (i, i+k)
      and the column count is the bandwidth; used by solve_ldlt()
"""

from __future__ import annotations

from typing import Any

import numpy as np
from numpy.typing import ArrayLike, NDArray

from pybanded.core.compute.band import band_from_dense, dense_from_band, detect_bandwidth
from pybanded.core.compute.ldlt import LDLTStats, solve_ldlt_inplace
from pybanded.core.exceptions import DimensionError, ValidationError
from pybanded.core.validation import (
    check_array,
    check_dimension,
    check_index,
    check_ndim,
    check_square,
    check_symmetric,
)
from pybanded.core.vector import Vector


class Matrix:
    """
    Owned rows x columns matrix of doubles, row-major.

    Construction:
        Matrix(3, 2)                           # zeros
        Matrix(3, 2, zero_init=False)          # uninitialized contents
        Matrix.from_array([[4, 1], [4, 1], [4, 0]])
        Matrix.from_dense_symmetric(A)         # banded storage of A

    Element access m[r, c] goes straight to numpy indexing without any
    additional validation. row(r) is bounds-checked and returns a writable
    view of one row.

    set_rows(), set_columns() and resize() reallocate and discard the
    previous contents.
    """

    __slots__ = ('_data', '_rows', '_cols')

    def __init__(self, rows: int, cols: int, zero_init: bool = True):
        rows = check_dimension(rows, 'rows')
        cols = check_dimension(cols, 'cols')
        self._allocate(rows, cols, zero_init)

    def _allocate(self, rows: int, cols: int, zero_init: bool) -> None:
        n = rows * cols
        self._data = np.zeros(n, dtype=np.float64) if zero_init else np.empty(n, dtype=np.float64)
        self._rows = rows
        self._cols = cols

    @classmethod
    def from_array(cls, values: ArrayLike) -> Matrix:
        """Build a Matrix holding a copy of a 2D array-like."""
        arr = check_array(values, 'values')
        check_ndim(arr, 2, 'values')
        rows, cols = arr.shape
        mat = cls(rows, cols, zero_init=False)
        mat.array[:] = arr
        return mat

    @classmethod
    def from_dense_symmetric(cls, values: ArrayLike, bandwidth: int | None = None) -> Matrix:
        """
        Build banded storage from a full symmetric matrix.

        Args:
            values: Square symmetric matrix
            bandwidth: Diagonals to keep. None detects the smallest band
                       holding every nonzero of the upper triangle.

        Raises:
            DimensionError: If values is not square
            ValidationError: If values is not symmetric or bandwidth is invalid
        """
        arr = check_array(values, 'values')
        check_square(arr, 'values')
        check_symmetric(arr, 'values')
        if bandwidth is None:
            bandwidth = detect_bandwidth(arr)
        return cls.from_array(band_from_dense(arr, bandwidth))

    # === Shape ===

    @property
    def rows(self) -> int:
        return self._rows

    @property
    def columns(self) -> int:
        return self._cols

    @property
    def shape(self) -> tuple[int, int]:
        return (self._rows, self._cols)

    def set_rows(self, rows: int, zero_init: bool = True) -> None:
        """Reallocate with a new row count. Contents are discarded."""
        rows = check_dimension(rows, 'rows')
        self._allocate(rows, self._cols, zero_init)

    def set_columns(self, cols: int, zero_init: bool = True) -> None:
        """Reallocate with a new column count. Contents are discarded."""
        cols = check_dimension(cols, 'cols')
        self._allocate(self._rows, cols, zero_init)

    def resize(self, rows: int, cols: int, zero_init: bool = True) -> None:
        """Reallocate to rows x cols. Contents are discarded."""
        rows = check_dimension(rows, 'rows')
        cols = check_dimension(cols, 'cols')
        self._allocate(rows, cols, zero_init)

    def clear(self) -> None:
        """Set every entry to zero."""
        self._data[:] = 0.0

    # === Data access ===

    @property
    def array(self) -> NDArray[np.float64]:
        """Live writable (rows x columns) view. Invalidated by reallocation."""
        return self._data.reshape(self._rows, self._cols)

    def to_array(self) -> NDArray[np.float64]:
        """Independent (rows x columns) copy."""
        return self.array.copy()

    def __array__(self, dtype: Any = None, copy: bool | None = None) -> NDArray:
        arr = self.array
        if dtype is not None and np.dtype(dtype) != arr.dtype:
            if copy is False:
                raise ValueError(f"Matrix: converting to {np.dtype(dtype)} requires a copy")
            return arr.astype(dtype)
        return arr.copy() if copy else arr

    def __getitem__(self, key: tuple[int, int]) -> float:
        r, c = key
        return float(self._data[r * self._cols + c])

    def __setitem__(self, key: tuple[int, int], value: float) -> None:
        r, c = key
        self._data[r * self._cols + c] = value

    def row(self, r: int) -> NDArray[np.float64]:
        """
        Writable view of row r.

        Raises:
            IndexOutOfRangeError: If r is outside [0, rows)
        """
        r = check_index(r, self._rows, 'Matrix.row')
        start = r * self._cols
        return self._data[start:start + self._cols]

    # === Copy semantics ===

    def copy(self) -> Matrix:
        """Fully independent deep copy."""
        clone = Matrix.__new__(Matrix)
        clone._data = self._data.copy()
        clone._rows = self._rows
        clone._cols = self._cols
        return clone

    def __copy__(self) -> Matrix:
        return self.copy()

    def __deepcopy__(self, memo: dict) -> Matrix:
        return self.copy()

    def assign(self, source: Matrix) -> Matrix:
        """Overwrite shape and contents with those of source."""
        if not isinstance(source, Matrix):
            raise ValidationError(
                f"assign: expected Matrix, got {type(source).__name__}"
            )
        if source is self:
            return self
        if self.shape != source.shape:
            self._allocate(source.rows, source.columns, zero_init=False)
        self._data[:] = source._data
        return self

    # === Dense operations ===

    def transpose(self, out: Matrix | None = None) -> Matrix:
        """
        Write the transpose into out.

        out is reallocated to columns x rows if its shape differs.

        Returns:
            out (a new Matrix if out is None)

        Raises:
            ValidationError: If out is given and is not a Matrix
        """
        _check_out(out, 'transpose')
        transposed = self.array.T.copy()
        return _store(transposed, out)

    def multiply(self, b: Matrix, out: Matrix | None = None) -> Matrix:
        """
        Write the dense product self @ b into out.

        out is reallocated to rows x b.columns if its shape differs; it may
        be the same object as self or b.

        Returns:
            out (a new Matrix if out is None)

        Raises:
            ValidationError: If b is not a Matrix or out is given and is not a
                Matrix
            DimensionError: If b.rows != self.columns
        """
        if not isinstance(b, Matrix):
            raise ValidationError(
                f"multiply: expected Matrix, got {type(b).__name__}"
            )
        _check_out(out, 'multiply')
        if b.rows != self._cols:
            raise DimensionError(
                f"multiply: inner dimensions differ ({self.shape} @ {b.shape})"
            )
        product = self.array @ b.array
        return _store(product, out)

    def __matmul__(self, other: Any) -> Matrix:
        if not isinstance(other, Matrix):
            return NotImplemented
        return self.multiply(other)

    # === Banded role ===

    def to_dense_symmetric(self) -> NDArray[np.float64]:
        """
        Expand banded storage into the full symmetric matrix.

        Only meaningful before solve_ldlt(), which overwrites the band with
        its factors.
        """
        return dense_from_band(self.array)

    def solve_ldlt(self, rhs: Vector | Matrix, *, min_pivot: float | None = None) -> LDLTStats:
        """
        Solve the symmetric positive definite banded system self * x = rhs.

        self holds banded storage: entry (i, k) is logical entry (i, i+k) and
        columns is the bandwidth. On return self holds the LDLT factors
        (D in column 0, the unit upper factor L' in columns k > 0) and rhs
        holds the solution. A Matrix rhs is solved column by column against
        a single factorization.

        Positive definiteness is not verified: a zero or negative pivot
        yields inf/nan in the result rather than an exception, unless
        min_pivot is given.

        Args:
            rhs: Vector with rows entries, or Matrix with rows rows
            min_pivot: Optional pivot floor; a pivot <= min_pivot raises
                NotPositiveDefiniteError with rhs untouched

        Returns:
            LDLTStats describing the factorization

        Raises:
            ValidationError: If rhs is neither a Vector nor a Matrix
            DimensionError: If rows < columns, or rhs has the wrong row count
        """
        if isinstance(rhs, Vector):
            target = rhs.values
        elif isinstance(rhs, Matrix):
            if rhs is self:
                raise ValidationError("solve_ldlt: rhs must not be the coefficient matrix")
            target = rhs.array
        else:
            raise ValidationError(
                f"solve_ldlt: rhs must be Vector or Matrix, got {type(rhs).__name__}"
            )
        return solve_ldlt_inplace(self.array, target, min_pivot=min_pivot)

    def __repr__(self) -> str:
        return f"Matrix(rows={self._rows}, columns={self._cols})"


def _check_out(out: Any, operation: str) -> None:
    if out is not None and not isinstance(out, Matrix):
        raise ValidationError(
            f"{operation}: out must be a Matrix, got {type(out).__name__}"
        )


def _store(values: NDArray[np.float64], out: Matrix | None) -> Matrix:
    rows, cols = values.shape
    if out is None:
        out = Matrix(rows, cols, zero_init=False)
    elif out.shape != (rows, cols):
        out.resize(rows, cols, zero_init=False)
    out.array[:] = values
    return out
