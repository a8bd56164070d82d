"""
CPU backends for banded symmetric systems.

CPULDLTBackend is the reference implementation: the in-place banded LDLT
kernel with adaptive skipping of negligible multipliers. It accepts
indefinite pivots without raising and reports them as warnings.

CPULapackBackend solves the same system through LAPACK's banded Cholesky
(via SciPy). It requires a positive definite matrix and is used to
cross-check the native kernel.
"""

from typing import Any
import warnings

import numpy as np
from scipy.linalg import LinAlgError, cho_solve_banded, cholesky_banded

from pybanded.core.compute.band import lapack_upper_form
from pybanded.core.compute.ldlt import (
    check_ldlt_operands,
    check_ldlt_storage,
    factorize_ldlt,
    ldlt_scratch,
    substitute_ldlt,
)
from pybanded.core.compute.timing import Timer
from pybanded.core.compute.tolerances import PIVOT_WARNING_THRESHOLD
from pybanded.core.exceptions import NotPositiveDefiniteError
from pybanded.core.matrix import Matrix
from pybanded.core.result import Result
from pybanded.banded.design import BandedDesign
from pybanded.banded.solution import BandedParams


class CPULDLTBackend:
    """
    CPU backend using the native banded LDLT kernel.

    Args:
        min_pivot: Optional pivot floor. When set, a pivot <= min_pivot
            raises NotPositiveDefiniteError instead of producing inf/nan.
    """

    def __init__(self, min_pivot: float | None = None):
        self._min_pivot = min_pivot

    @property
    def name(self) -> str:
        return 'cpu_ldlt'

    def solve(self, design: BandedDesign) -> Result[BandedParams]:
        """
        Solve A x = b by banded LDLT.

        Algorithm:
            1. Copy the band and right-hand side into owned storage
            2. Factorize the band in place (A = L D L')
            3. Forward substitution, diagonal scaling, back substitution

        Raises:
            NotPositiveDefiniteError: Only if min_pivot is set and violated
        """
        timer = Timer()
        timer.start()

        with timer.section('setup'):
            band = Matrix.from_array(design.band)
            rhs = np.array(design.b, dtype=np.float64, order='C')
            check_ldlt_operands(band.rows, band.columns, rhs.shape[0])
            check_ldlt_storage(band.array, rhs)

        with ldlt_scratch(band.rows, band.columns) as scratch:
            with timer.section('factorize'):
                stats = factorize_ldlt(band.array, scratch, min_pivot=self._min_pivot)
            with timer.section('substitute'):
                substitute_ldlt(band.array, rhs, scratch.lower_bounds)

        timer.stop()

        messages: list[str] = []
        if stats.min_pivot <= PIVOT_WARNING_THRESHOLD:
            msg = (
                f"Non-positive pivot {stats.min_pivot:.6g} at row {stats.min_pivot_row}: "
                f"matrix is not positive definite, solution may be meaningless"
            )
            messages.append(msg)
            warnings.warn(msg, RuntimeWarning, stacklevel=3)

        factor = band.to_array()
        params = BandedParams(
            x=rhs,
            diagonal=factor[:, 0].copy(),
            factor=factor,
        )

        info: dict[str, Any] = {
            'method': 'ldlt',
            'bandwidth': stats.bandwidth,
            'skipped_multipliers': stats.skipped_multipliers,
            'min_pivot': stats.min_pivot,
            'min_pivot_row': stats.min_pivot_row,
        }

        return Result(
            params=params,
            info=info,
            timing=timer.result(),
            backend_name=self.name,
            warnings=tuple(messages),
        )


class CPULapackBackend:
    """
    CPU backend using LAPACK banded Cholesky (pbtrf/pbtrs via SciPy).
    """

    @property
    def name(self) -> str:
        return 'cpu_lapack'

    def solve(self, design: BandedDesign) -> Result[BandedParams]:
        """
        Solve A x = b by banded Cholesky.

        Raises:
            NotPositiveDefiniteError: If LAPACK reports a non-positive pivot
        """
        timer = Timer()
        timer.start()

        with timer.section('setup'):
            ab = lapack_upper_form(design.band)

        with timer.section('factorize'):
            try:
                cb = cholesky_banded(ab, lower=False, check_finite=False)
            except LinAlgError as e:
                raise NotPositiveDefiniteError(
                    f"Banded Cholesky failed: {e}"
                ) from e

        with timer.section('substitute'):
            x = cho_solve_banded((cb, False), design.b, check_finite=False)

        timer.stop()

        u = design.bandwidth - 1
        params = BandedParams(
            x=np.asarray(x, dtype=np.float64),
            diagonal=cb[u, :] ** 2,
            factor=None,
        )

        info: dict[str, Any] = {
            'method': 'cholesky_banded',
            'bandwidth': design.bandwidth,
        }

        return Result(
            params=params,
            info=info,
            timing=timer.result(),
            backend_name=self.name,
            warnings=(),
        )
