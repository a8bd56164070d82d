"""
Input validation utilities for pybanded.

These validators follow the "fail fast, fail loud" principle. They raise
immediately with clear error messages rather than silently correcting
or making assumptions about caller intent.

Design principles:
    - No silent type coercion (except np.asarray on array-likes)
    - Clear, actionable error messages with actual values
    - Each function validates ONE thing
    - Parameter names included in all error messages
"""

import numbers

import numpy as np
from numpy.typing import ArrayLike, NDArray
from typing import Any

from pybanded.core.exceptions import (
    DimensionError,
    IndexOutOfRangeError,
    ValidationError,
)


def check_array(
    array: ArrayLike,
    name: str,
) -> NDArray[np.float64]:
    """
    Validate and convert input to a float64 numpy array.

    Accepts any array-like and converts to numpy array. Rejects inputs
    that result in object dtype (indicating mixed types or non-numeric data).

    Args:
        array: Input to validate
        name: Parameter name for error messages

    Returns:
        numpy.ndarray of dtype float64

    Raises:
        ValidationError: If input cannot be converted to numeric array
    """
    try:
        result = np.asarray(array)
    except (ValueError, TypeError) as e:
        raise ValidationError(f"{name}: cannot convert to array: {e}") from e

    if result.dtype == object:
        raise ValidationError(
            f"{name}: converted to object dtype, indicating mixed types or non-numeric data"
        )

    if not np.issubdtype(result.dtype, np.number) or np.issubdtype(result.dtype, np.complexfloating):
        raise ValidationError(
            f"{name}: non-numeric dtype {result.dtype}, expected real numeric data"
        )

    return result.astype(np.float64, copy=False)


def check_finite(array: NDArray[np.floating[Any]], name: str) -> None:
    """
    Verify array contains no NaN or Inf values.

    Args:
        array: Array to check
        name: Parameter name for error messages

    Raises:
        ValidationError: If array contains non-finite values
    """
    if not np.all(np.isfinite(array)):
        n_nan = int(np.sum(np.isnan(array)))
        n_inf = int(np.sum(np.isinf(array)))
        raise ValidationError(
            f"{name}: contains non-finite values ({n_nan} NaN, {n_inf} Inf)"
        )


def check_ndim(array: NDArray[np.floating[Any]], ndim: int, name: str) -> None:
    """
    Verify array has exactly the specified number of dimensions.

    Raises:
        DimensionError: If array has wrong number of dimensions
    """
    if array.ndim != ndim:
        raise DimensionError(
            f"{name}: expected {ndim}D array, got {array.ndim}D with shape {array.shape}"
        )


def check_integer(value: Any, name: str) -> int:
    """
    Verify value is an integer (bool excluded) and return it as int.

    Raises:
        ValidationError: If value is not integral
    """
    if isinstance(value, bool) or not isinstance(value, numbers.Integral):
        raise ValidationError(
            f"{name}: expected an integer, got {type(value).__name__}"
        )
    return int(value)


def check_size(value: Any, name: str) -> int:
    """
    Verify value is a non-negative integer size.

    Raises:
        ValidationError: If value is not integral or is negative
    """
    size = check_integer(value, name)
    if size < 0:
        raise ValidationError(f"{name}: must be non-negative, got {size}")
    return size


def check_dimension(value: Any, name: str) -> int:
    """
    Verify value is a matrix dimension (integer >= 1).

    Raises:
        ValidationError: If value is not integral or is below one
    """
    dim = check_integer(value, name)
    if dim < 1:
        raise ValidationError(f"{name}: must be at least 1, got {dim}")
    return dim


def check_index(index: Any, size: int, name: str) -> int:
    """
    Verify index lies in [0, size).

    Negative indices are rejected rather than wrapped.

    Raises:
        ValidationError: If index is not integral
        IndexOutOfRangeError: If index is outside [0, size)
    """
    idx = check_integer(index, name)
    if idx < 0 or idx >= size:
        raise IndexOutOfRangeError(
            f"{name}: index {idx} out of range [0, {size})",
            index=idx,
            size=size,
        )
    return idx


def check_same_size(a: int, b: int, operation: str) -> None:
    """
    Verify two operand sizes agree.

    Raises:
        DimensionError: If sizes differ
    """
    if a != b:
        raise DimensionError(
            f"{operation}: operand sizes differ ({a} vs {b})"
        )


def check_square(array: NDArray[np.floating[Any]], name: str) -> None:
    """
    Verify a 2D array is square.

    Raises:
        DimensionError: If array is not 2D or not square
    """
    check_ndim(array, 2, name)
    if array.shape[0] != array.shape[1]:
        raise DimensionError(
            f"{name}: expected square matrix, got shape {array.shape}"
        )


def check_symmetric(
    array: NDArray[np.floating[Any]],
    name: str,
    rtol: float = 1e-10,
    atol: float = 1e-12,
) -> None:
    """
    Verify a square matrix is symmetric within tolerance.

    Raises:
        ValidationError: If array differs from its transpose
    """
    if not np.allclose(array, array.T, rtol=rtol, atol=atol):
        max_diff = float(np.max(np.abs(array - array.T)))
        raise ValidationError(
            f"{name}: matrix is not symmetric (max |A - A'| = {max_diff:.3e})"
        )
