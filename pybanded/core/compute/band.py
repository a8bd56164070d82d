"""
Banded storage conversions.

Banded storage keeps only the diagonal and the upper band of a symmetric
matrix: logical entry (i, i+k) lives at band[i, k] for 0 <= k < bandwidth.
Slots with i + k >= n fall outside the matrix and are kept at zero.

    dense                    band (bandwidth 2)
    [[4, 1, 0],              [[4, 1],
     [1, 4, 1],      <->      [4, 1],
     [0, 1, 4]]               [4, 0]]
"""

import numpy as np
from numpy.typing import NDArray
from typing import Any

from pybanded.core.exceptions import DimensionError, ValidationError
from pybanded.core.validation import check_dimension, check_ndim, check_square


def detect_bandwidth(a: NDArray[np.floating[Any]], atol: float = 0.0) -> int:
    """
    Number of stored diagonals needed to hold the upper triangle of a.

    Args:
        a: Square matrix
        atol: Entries with |value| <= atol count as zero

    Returns:
        1 + the largest k such that super-diagonal k has an entry above atol
    """
    check_square(a, 'a')
    n = a.shape[0]
    for k in range(n - 1, 0, -1):
        if np.any(np.abs(np.diagonal(a, offset=k)) > atol):
            return k + 1
    return 1


def band_from_dense(a: NDArray[np.floating[Any]], bandwidth: int) -> NDArray[np.float64]:
    """
    Pack the upper band of a square matrix into banded storage.

    Only the diagonal and the first bandwidth - 1 super-diagonals are read;
    everything else is dropped.

    Args:
        a: Square matrix (n x n)
        bandwidth: Number of diagonals to keep, 1 <= bandwidth <= n

    Returns:
        Array of shape (n, bandwidth)

    Raises:
        ValidationError: If bandwidth is out of range
        DimensionError: If a is not square
    """
    check_square(a, 'a')
    n = a.shape[0]
    bandwidth = check_dimension(bandwidth, 'bandwidth')
    if bandwidth > n:
        raise ValidationError(
            f"bandwidth: {bandwidth} exceeds matrix order {n}"
        )

    band = np.zeros((n, bandwidth), dtype=np.float64)
    for k in range(bandwidth):
        band[:n - k, k] = np.diagonal(a, offset=k)
    return band


def dense_from_band(band: NDArray[np.floating[Any]]) -> NDArray[np.float64]:
    """
    Expand banded storage into the full symmetric matrix.

    Raises:
        DimensionError: If band is not 2D or has more columns than rows
    """
    check_ndim(band, 2, 'band')
    n, bandwidth = band.shape
    if bandwidth > n:
        raise DimensionError(
            f"band: bandwidth {bandwidth} exceeds row count {n}"
        )

    a = np.zeros((n, n), dtype=np.float64)
    idx = np.arange(n)
    a[idx, idx] = band[:, 0]
    for k in range(1, bandwidth):
        values = band[:n - k, k]
        a[idx[:n - k], idx[k:]] = values
        a[idx[k:], idx[:n - k]] = values
    return a


def lapack_upper_form(band: NDArray[np.floating[Any]]) -> NDArray[np.float64]:
    """
    Convert banded storage to LAPACK upper banded form.

    LAPACK (and scipy.linalg.solveh_banded with lower=False) expects
    ab[u + i - j, j] == a[i, j] for i <= j, with u = bandwidth - 1.

    Returns:
        Array of shape (bandwidth, n)
    """
    check_ndim(band, 2, 'band')
    n, bandwidth = band.shape
    u = bandwidth - 1
    ab = np.zeros((bandwidth, n), dtype=np.float64)
    for k in range(bandwidth):
        ab[u - k, k:] = band[:n - k, k]
    return ab
