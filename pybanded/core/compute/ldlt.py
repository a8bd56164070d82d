"""
In-place LDLT factorization and solve for symmetric banded systems.

The coefficient matrix is held in banded storage (see band.py): row i,
column k holds logical entry (i, i+k) and the number of columns is the
bandwidth. The kernel overwrites that storage with the factors of
A = L D L':

    band[i, 0]      D[i]
    band[i, k > 0]  L'[i, i+k]  (the unit upper factor, i.e. L[i+k, i])

and overwrites the right-hand side with the solution.

Adaptive sparsity:
    Each row j carries a lower bound lwb[j], the first row whose
    multiplier into row j can be nonzero. It starts at the band limit
    max(0, j - bandwidth + 1). When row i produces a negligible multiplier
    for row j and lwb[j] == i, the bound advances to i + 1, so later
    inner products skip that leading zero. Systems where most equations
    use only part of the bandwidth are solved in close to O(n) time.

Inner products along a band column:
    Logical entries L'[k, j] for consecutive k sit at flat offsets
    k * bandwidth + (j - k) = k * (bandwidth - 1) + j of the C-contiguous
    storage, so a column of the band is a strided slice of the flat buffer
    and each accumulation is one numpy dot product.
"""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Iterator

import numpy as np
from numpy.typing import NDArray

from pybanded.core.compute.tolerances import NEGLIGIBLE_MULTIPLIER
from pybanded.core.exceptions import (
    DimensionError,
    NotPositiveDefiniteError,
    ValidationError,
)


@dataclass(frozen=True)
class LDLTStats:
    """
    Diagnostics from one factorization.

    Attributes:
        rows: System order
        bandwidth: Number of stored diagonals
        skipped_multipliers: Total lower-bound advances, i.e. how many
            leading band entries were proven negligible and skipped
        min_pivot: Smallest diagonal factor D[i] produced
        min_pivot_row: Row where min_pivot occurred
    """
    rows: int
    bandwidth: int
    skipped_multipliers: int
    min_pivot: float
    min_pivot_row: int


class LDLTScratch:
    """
    Call-scoped work arrays for one factorization.

    Attributes:
        lower_bounds: Per-row first contributing row (lwb)
        multipliers: Cache of D[k] * L'[k, i] for the row being processed
    """

    __slots__ = ('lower_bounds', 'multipliers')

    def __init__(self, rows: int, bandwidth: int):
        self.lower_bounds = initial_lower_bounds(rows, bandwidth)
        self.multipliers = np.empty(rows, dtype=np.float64)

    def release(self) -> None:
        self.lower_bounds = None
        self.multipliers = None


def initial_lower_bounds(rows: int, bandwidth: int) -> NDArray[np.intp]:
    """lwb[i] = 0 for i < bandwidth, i - bandwidth + 1 afterwards."""
    return np.maximum(np.arange(rows, dtype=np.intp) - bandwidth + 1, 0)


@contextmanager
def ldlt_scratch(rows: int, bandwidth: int) -> Iterator[LDLTScratch]:
    """
    Acquire the factorization work arrays for the duration of a block.

    The arrays are released when the block exits, including when it exits
    through an exception.

    Usage:
        with ldlt_scratch(n, bw) as scratch:
            factorize_ldlt(band, scratch)
            substitute_ldlt(band, rhs, scratch.lower_bounds)
    """
    scratch = LDLTScratch(rows, bandwidth)
    try:
        yield scratch
    finally:
        scratch.release()


def check_ldlt_operands(rows: int, bandwidth: int, rhs_rows: int) -> None:
    """
    Validate solver preconditions before anything is touched.

    Raises:
        DimensionError: If rows < bandwidth or the right-hand side row
            count differs from rows
    """
    if rows < bandwidth:
        raise DimensionError(
            f"solve_ldlt: fewer rows ({rows}) than bandwidth ({bandwidth})"
        )
    if rhs_rows != rows:
        raise DimensionError(
            f"solve_ldlt: right-hand side has {rhs_rows} rows, matrix has {rows}"
        )


def check_ldlt_storage(band: NDArray[Any], rhs: NDArray[Any]) -> None:
    """
    Validate that both operands can be overwritten in place.

    The kernel reads band columns as strided slices of the flat buffer,
    so band must be C-contiguous. Both arrays must be writeable float64.

    Raises:
        ValidationError: If either array has the wrong dtype or layout
    """
    if band.dtype != np.float64 or rhs.dtype != np.float64:
        raise ValidationError(
            f"solve_ldlt: expected float64 operands, got band={band.dtype}, rhs={rhs.dtype}"
        )
    if not band.flags.c_contiguous:
        raise ValidationError("solve_ldlt: band must be C-contiguous")
    if not (band.flags.writeable and rhs.flags.writeable):
        raise ValidationError("solve_ldlt: band and rhs must be writeable")


def _flat_view(band: NDArray[np.float64]) -> NDArray[np.float64]:
    if not band.flags.c_contiguous:
        raise ValidationError("solve_ldlt: band must be C-contiguous")
    return band.ravel(order='C')


def factorize_ldlt(
    band: NDArray[np.float64],
    scratch: LDLTScratch,
    min_pivot: float | None = None,
) -> LDLTStats:
    """
    Overwrite banded storage with its LDLT factors.

    Args:
        band: C-contiguous (n x bandwidth) banded storage, modified in place
        scratch: Work arrays from ldlt_scratch(n, bandwidth)
        min_pivot: If given, raise when a pivot D[i] <= min_pivot.
            By default no check is made and a zero or negative pivot
            propagates as inf/nan.

    Returns:
        LDLTStats for the factorization

    Raises:
        ValidationError: If band is not C-contiguous
        NotPositiveDefiniteError: Only when min_pivot is given and violated.
            Rows before the offending one are already factorized.
    """
    rows, bandwidth = band.shape
    flat = _flat_view(band)
    diag = band[:, 0]
    step = bandwidth - 1
    lwb = scratch.lower_bounds
    r = scratch.multipliers

    skipped = 0
    smallest = np.inf
    smallest_row = 0

    with np.errstate(divide='ignore', invalid='ignore', over='ignore'):
        for i in range(rows):
            lo = lwb[i]
            dd = band[i, 0]

            if lo < i:
                column = flat[lo * step + i:i * step + i:step]
                r[lo:i] = diag[lo:i] * column
                dd -= np.dot(r[lo:i], column)

            if min_pivot is not None and not dd > min_pivot:
                raise NotPositiveDefiniteError(
                    f"Pivot {float(dd):.6g} at row {i} is not above min_pivot={min_pivot}",
                    row=i,
                    pivot=float(dd),
                )

            band[i, 0] = dd
            if dd < smallest:
                smallest = float(dd)
                smallest_row = i

            upper = min(i + bandwidth, rows)
            for j in range(i + 1, upper):
                m = band[i, j - i]
                start = max(lo, lwb[j])
                if start < i:
                    m -= np.dot(flat[start * step + j:i * step + j:step], r[start:i])
                m /= dd
                band[i, j - i] = m

                if abs(m) < NEGLIGIBLE_MULTIPLIER and lwb[j] == i:
                    lwb[j] = i + 1
                    skipped += 1

    return LDLTStats(
        rows=rows,
        bandwidth=bandwidth,
        skipped_multipliers=skipped,
        min_pivot=smallest,
        min_pivot_row=smallest_row,
    )


def substitute_ldlt(
    band: NDArray[np.float64],
    rhs: NDArray[np.float64],
    lower_bounds: NDArray[np.intp],
) -> None:
    """
    Solve L D L' x = rhs in place, given factors from factorize_ldlt.

    Args:
        band: Factorized banded storage (n x bandwidth)
        rhs: Right-hand side, shape (n,) or (n, k); overwritten with x
        lower_bounds: Lower bounds left by the factorization
    """
    rows, bandwidth = band.shape
    flat = _flat_view(band)
    step = bandwidth - 1

    with np.errstate(divide='ignore', invalid='ignore', over='ignore'):
        # L y = rhs
        for i in range(rows):
            lo = lower_bounds[i]
            if lo < i:
                rhs[i] -= flat[lo * step + i:i * step + i:step] @ rhs[lo:i]

        # D z = y
        if rhs.ndim == 1:
            rhs /= band[:, 0]
        else:
            rhs /= band[:, 0:1]

        # L' x = z
        for i in range(rows - 2, -1, -1):
            upper = min(i + bandwidth, rows)
            if upper > i + 1:
                rhs[i] -= band[i, 1:upper - i] @ rhs[i + 1:upper]


def solve_ldlt_inplace(
    band: NDArray[np.float64],
    rhs: NDArray[np.float64],
    *,
    min_pivot: float | None = None,
) -> LDLTStats:
    """
    Factorize banded storage and solve for one or more right-hand sides.

    Both arrays are overwritten: band with the LDLT factors, rhs with the
    solution. Preconditions are checked before either is modified.

    Args:
        band: C-contiguous float64 banded storage (n x bandwidth)
        rhs: float64 right-hand side, shape (n,) or (n, k)
        min_pivot: Optional pivot floor, see factorize_ldlt

    Returns:
        LDLTStats from the factorization

    Raises:
        DimensionError: If n < bandwidth or rhs has the wrong row count
        ValidationError: If either array is not writeable float64, or band
            is not C-contiguous
        NotPositiveDefiniteError: If min_pivot is given and violated
    """
    rows, bandwidth = band.shape
    check_ldlt_operands(rows, bandwidth, rhs.shape[0])
    check_ldlt_storage(band, rhs)

    with ldlt_scratch(rows, bandwidth) as scratch:
        stats = factorize_ldlt(band, scratch, min_pivot=min_pivot)
        substitute_ldlt(band, rhs, scratch.lower_bounds)
    return stats


def ldlt_reconstruct(factors: NDArray[Any]) -> NDArray[np.float64]:
    """
    Rebuild the dense matrix L D L' from factorized banded storage.

    Useful for checking a factorization; O(n^2) memory.
    """
    rows, bandwidth = factors.shape
    upper = np.eye(rows, dtype=np.float64)
    idx = np.arange(rows)
    for k in range(1, bandwidth):
        upper[idx[:rows - k], idx[k:]] = factors[:rows - k, k]
    return upper.T @ (factors[:, 0:1] * upper)
