"""
Banded system design.

A BandedDesign is a validated, immutable description of A x = b with A
symmetric and held in banded storage. It owns float64 copies of the
caller's arrays, so solving never mutates caller data.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import numpy as np
from numpy.typing import ArrayLike, NDArray

from pybanded.core.compute.band import band_from_dense, dense_from_band, detect_bandwidth
from pybanded.core.exceptions import DimensionError
from pybanded.core.validation import (
    check_array,
    check_finite,
    check_ndim,
    check_square,
    check_symmetric,
)


@dataclass(frozen=True)
class BandedDesign:
    """
    Symmetric banded linear system specification.

    Construction:
        BandedDesign.from_band(band, b)           # band is (n x bandwidth)
        BandedDesign.from_dense(A, b)             # bandwidth detected from A
        BandedDesign.from_dense(A, b, bandwidth=3)

    b may be a vector (n,) or a matrix (n, k) of k right-hand sides.
    """
    _band: NDArray[np.float64]
    _rhs: NDArray[np.float64]

    @classmethod
    def from_band(cls, band: ArrayLike, b: ArrayLike) -> BandedDesign:
        """
        Build a design from banded storage.

        Raises:
            ValidationError: If inputs are non-numeric or non-finite
            DimensionError: If band has more columns than rows, or b does
                not have one row per equation
        """
        band_arr = check_array(band, 'band')
        check_ndim(band_arr, 2, 'band')
        return cls._build(np.array(band_arr, dtype=np.float64, order='C'), b)

    @classmethod
    def from_dense(
        cls,
        a: ArrayLike,
        b: ArrayLike,
        *,
        bandwidth: int | None = None,
        check_symmetric_input: bool = True,
    ) -> BandedDesign:
        """
        Build a design from a full symmetric matrix.

        Args:
            a: Square symmetric coefficient matrix
            b: Right-hand side(s)
            bandwidth: Diagonals to keep. None keeps the smallest band that
                       holds every nonzero of the upper triangle.
            check_symmetric_input: Reject a if it is not symmetric. When
                       disabled only the upper triangle is read.

        Raises:
            ValidationError: If a is not symmetric or bandwidth is invalid
            DimensionError: If a is not square or b does not match
        """
        a_arr = check_array(a, 'A')
        check_square(a_arr, 'A')
        check_finite(a_arr, 'A')
        if check_symmetric_input:
            check_symmetric(a_arr, 'A')
        if bandwidth is None:
            bandwidth = detect_bandwidth(a_arr)
        return cls._build(band_from_dense(a_arr, bandwidth), b)

    @classmethod
    def _build(cls, band: NDArray[np.float64], b: ArrayLike) -> BandedDesign:
        """Internal builder with validation."""
        rhs = check_array(b, 'b')
        if rhs.ndim not in (1, 2):
            raise DimensionError(
                f"b: expected 1D or 2D array, got {rhs.ndim}D with shape {rhs.shape}"
            )
        check_finite(band, 'band')
        check_finite(rhs, 'b')

        n, bandwidth = band.shape
        if n < 1 or bandwidth < 1:
            raise DimensionError(f"band: empty storage with shape {band.shape}")
        if n < bandwidth:
            raise DimensionError(
                f"band: fewer rows ({n}) than bandwidth ({bandwidth})"
            )
        if rhs.shape[0] != n:
            raise DimensionError(
                f"Inconsistent lengths: band={n}, b={rhs.shape[0]}"
            )

        rhs = np.array(rhs, dtype=np.float64, order='C')
        band.setflags(write=False)
        rhs.setflags(write=False)
        return cls(_band=band, _rhs=rhs)

    # === Properties ===

    @property
    def band(self) -> NDArray[np.float64]:
        """Read-only banded storage (n x bandwidth)."""
        return self._band

    @property
    def b(self) -> NDArray[np.float64]:
        """Read-only right-hand side, (n,) or (n, k)."""
        return self._rhs

    @property
    def n(self) -> int:
        """System order."""
        return self._band.shape[0]

    @property
    def bandwidth(self) -> int:
        return self._band.shape[1]

    @property
    def is_multi_rhs(self) -> bool:
        return self._rhs.ndim == 2

    @property
    def n_rhs(self) -> int:
        """Number of right-hand sides."""
        return self._rhs.shape[1] if self._rhs.ndim == 2 else 1

    def dense(self) -> NDArray[np.float64]:
        """Full symmetric coefficient matrix (n x n)."""
        return dense_from_band(self._band)

    def metadata(self) -> dict[str, Any]:
        return {
            'n': self.n,
            'bandwidth': self.bandwidth,
            'n_rhs': self.n_rhs,
        }
