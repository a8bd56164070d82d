"""
Dense float64 vector.

Vector owns a GrowableBuffer and adds bounds-checked element access and
elementwise arithmetic. All binary operations require operands of equal
size and raise DimensionError otherwise.
"""

from __future__ import annotations

from typing import Any, Iterator
import numbers

import numpy as np
from numpy.typing import ArrayLike, NDArray

from pybanded.core.buffer import GrowableBuffer
from pybanded.core.exceptions import ValidationError
from pybanded.core.validation import (
    check_array,
    check_index,
    check_ndim,
    check_same_size,
    check_size,
)


class Vector:
    """
    Growable dense vector of doubles.

    Construction:
        Vector(5)                       # five zeros
        Vector(5, zero_init=False)      # uninitialized contents
        Vector.from_array([1.0, 2.0])   # copy of array-like data

    Indexing is bounds-checked: v[i] requires 0 <= i < len(v) and raises
    IndexOutOfRangeError otherwise (negative indices are not wrapped).
    """

    __slots__ = ('_buffer',)

    def __init__(self, size: int, zero_init: bool = True):
        self._buffer = GrowableBuffer(size, zero_init=zero_init)

    @classmethod
    def from_array(cls, values: ArrayLike) -> Vector:
        """Build a Vector holding a copy of a 1D array-like."""
        arr = check_array(values, 'values')
        check_ndim(arr, 1, 'values')
        vec = cls(arr.shape[0], zero_init=False)
        vec.values[:] = arr
        return vec

    # === Size management ===

    @property
    def size(self) -> int:
        return self._buffer.size

    @property
    def capacity(self) -> int:
        return self._buffer.capacity

    def __len__(self) -> int:
        return self._buffer.size

    def resize(self, new_size: int, preserve: bool = False, zero_init: bool = True) -> None:
        """
        Change the vector size.

        Within [capacity // 2, capacity] only the logical size changes and
        the contents stay in place. Otherwise the storage is reallocated to
        exactly new_size, keeping the leading min(size, new_size) values
        when preserve is set.

        Args:
            new_size: New number of entries (>= 0)
            preserve: Keep existing values across a reallocation
            zero_init: Zero-fill entries beyond the old size

        Raises:
            ValidationError: If new_size is negative
        """
        self._buffer.resize(new_size, preserve=preserve, zero_init=zero_init)

    def clear(self) -> None:
        """Set every entry to zero."""
        self._buffer.view()[:] = 0.0

    # === Data access ===

    @property
    def values(self) -> NDArray[np.float64]:
        """Live writable view of the entries. Invalidated by reallocation."""
        return self._buffer.view()

    def to_array(self) -> NDArray[np.float64]:
        """Independent copy of the entries."""
        return self._buffer.view().copy()

    def __array__(self, dtype: Any = None, copy: bool | None = None) -> NDArray:
        arr = self._buffer.view()
        if dtype is not None and np.dtype(dtype) != arr.dtype:
            if copy is False:
                raise ValueError(f"Vector: converting to {np.dtype(dtype)} requires a copy")
            return arr.astype(dtype)
        return arr.copy() if copy else arr

    def __getitem__(self, index: int) -> float:
        idx = check_index(index, self.size, 'Vector')
        return float(self._buffer.view()[idx])

    def __setitem__(self, index: int, value: float) -> None:
        idx = check_index(index, self.size, 'Vector')
        self._buffer.view()[idx] = value

    def __iter__(self) -> Iterator[float]:
        return (float(v) for v in self._buffer.view())

    # === Copy semantics ===

    def copy(self) -> Vector:
        """Fully independent deep copy."""
        clone = Vector.__new__(Vector)
        clone._buffer = self._buffer.copy()
        return clone

    def __copy__(self) -> Vector:
        return self.copy()

    def __deepcopy__(self, memo: dict) -> Vector:
        return self.copy()

    def assign(self, source: Vector) -> Vector:
        """Overwrite size and contents with those of source."""
        if not isinstance(source, Vector):
            raise ValidationError(
                f"assign: expected Vector, got {type(source).__name__}"
            )
        if source is self:
            return self
        self._buffer.resize(source.size, preserve=False, zero_init=False)
        self.values[:] = source.values
        return self

    # === Arithmetic ===

    def _check_operand(self, other: Vector, operation: str) -> None:
        check_same_size(self.size, other.size, f"Vector.{operation}")

    def __add__(self, other: Any) -> Vector:
        if not isinstance(other, Vector):
            return NotImplemented
        self._check_operand(other, '__add__')
        return Vector.from_array(self.values + other.values)

    def __iadd__(self, other: Any) -> Vector:
        if not isinstance(other, Vector):
            return NotImplemented
        self._check_operand(other, '__iadd__')
        self.values[:] += other.values
        return self

    def __sub__(self, other: Any) -> Vector:
        if not isinstance(other, Vector):
            return NotImplemented
        self._check_operand(other, '__sub__')
        return Vector.from_array(self.values - other.values)

    def __isub__(self, other: Any) -> Vector:
        if not isinstance(other, Vector):
            return NotImplemented
        self._check_operand(other, '__isub__')
        self.values[:] -= other.values
        return self

    def __mul__(self, other: Any) -> Vector | float:
        # Vector * Vector is the dot product, Vector * scalar scales.
        if isinstance(other, Vector):
            return self.dot(other)
        if isinstance(other, numbers.Real):
            return Vector.from_array(self.values * float(other))
        return NotImplemented

    def __rmul__(self, other: Any) -> Vector:
        if isinstance(other, numbers.Real):
            return Vector.from_array(self.values * float(other))
        return NotImplemented

    def __imul__(self, other: Any) -> Vector:
        if not isinstance(other, numbers.Real):
            return NotImplemented
        self.values[:] *= float(other)
        return self

    def __matmul__(self, other: Any) -> float:
        if not isinstance(other, Vector):
            return NotImplemented
        return self.dot(other)

    def __neg__(self) -> Vector:
        return Vector.from_array(-self.values)

    def dot(self, other: Vector) -> float:
        """
        Inner product with another vector of the same size.

        Raises:
            DimensionError: If sizes differ
        """
        self._check_operand(other, 'dot')
        return float(np.dot(self.values, other.values))

    def norm(self, dims: int | None = None) -> float:
        """
        Euclidean length.

        Args:
            dims: Only include the leading dims entries (0 <= dims <= size).
                  None means all entries.

        Raises:
            ValidationError: If dims is negative or exceeds the size
        """
        values = self.values
        if dims is not None:
            dims = check_size(dims, 'dims')
            if dims > self.size:
                raise ValidationError(
                    f"dims: {dims} exceeds vector size {self.size}"
                )
            values = values[:dims]
        return float(np.sqrt(np.dot(values, values)))

    def __repr__(self) -> str:
        return f"Vector({np.array2string(self.values, separator=', ')})"
