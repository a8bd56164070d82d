"""
Solver dispatch for banded symmetric systems.

This module provides the solve() function (public API) and backend selection.
"""

from __future__ import annotations

from typing import Literal
from numpy.typing import ArrayLike

from pybanded.core.compute.device import select_device
from pybanded.core.exceptions import ValidationError
from pybanded.banded.design import BandedDesign
from pybanded.banded.solution import BandedSolution
from pybanded.banded.backends.cpu import CPULDLTBackend, CPULapackBackend


BackendChoice = Literal['auto', 'cpu', 'cpu_ldlt', 'cpu_lapack', 'gpu']
Layout = Literal['band', 'dense']

# Largest order backend='auto' sends to the dense GPU path (8192^2 float64 is 512 MB).
AUTO_GPU_MAX_ORDER = 8192


def solve(
    A: ArrayLike | BandedDesign,
    b: ArrayLike | None = None,
    *,
    layout: Layout = 'band',
    bandwidth: int | None = None,
    backend: BackendChoice = 'cpu',
    min_pivot: float | None = None,
) -> BandedSolution:
    """
    Solve a symmetric positive definite banded system A x = b.

    Inputs are copied; neither A nor b is modified. Use Matrix.solve_ldlt
    for the in-place variant that reuses caller storage.

    Args:
        A: Coefficient matrix, or a prebuilt BandedDesign (then b must be None).
            layout='band': banded storage (n x bandwidth), A[i, k] = a[i, i+k]
            layout='dense': full symmetric (n x n) matrix
        b: Right-hand side, (n,) or (n, k) for k systems sharing A
        layout: How A is stored, 'band' or 'dense'
        bandwidth: Only for layout='dense'. Diagonals to keep; None detects
            the smallest band holding every nonzero.
        backend: Computational backend:
            - 'cpu' / 'cpu_ldlt': native banded LDLT (default)
            - 'cpu_lapack': LAPACK banded Cholesky via SciPy
            - 'gpu': dense Cholesky on GPU via PyTorch
            - 'auto': GPU if available and n <= AUTO_GPU_MAX_ORDER, else
              native LDLT. The GPU path expands A to a dense n x n matrix.
        min_pivot: Only for the LDLT backend. Raise NotPositiveDefiniteError
            when a pivot falls to or below this value. By default
            positive definiteness is the caller's responsibility and a
            non-positive pivot only produces a warning.

    Returns:
        BandedSolution with the solution, factors and diagnostics

    Raises:
        ValidationError: If inputs or options are invalid
        DimensionError: If A and b have inconsistent dimensions
        NotPositiveDefiniteError: From Cholesky backends, or from LDLT
            when min_pivot is set

    Example:
        >>> band = [[4.0, 1.0], [4.0, 1.0], [4.0, 0.0]]
        >>> result = solve(band, [1.0, 2.0, 3.0])
        >>> result.x
        array([0.17857143, 0.28571429, 0.67857143])
    """
    design = _ensure_design(A, b, layout=layout, bandwidth=bandwidth)

    backend_impl = _get_backend(backend, min_pivot, design)

    result = backend_impl.solve(design)

    return BandedSolution(_result=result, _design=design)


def _ensure_design(
    A: ArrayLike | BandedDesign,
    b: ArrayLike | None,
    *,
    layout: Layout,
    bandwidth: int | None,
) -> BandedDesign:
    """Convert raw arrays to a BandedDesign if needed."""
    if isinstance(A, BandedDesign):
        if b is not None:
            raise ValidationError("b must be None when A is a BandedDesign")
        return A

    if b is None:
        raise ValidationError("b is required when A is an array")

    if layout == 'band':
        if bandwidth is not None:
            raise ValidationError(
                "bandwidth is implied by the column count when layout='band'"
            )
        return BandedDesign.from_band(A, b)
    if layout == 'dense':
        return BandedDesign.from_dense(A, b, bandwidth=bandwidth)

    raise ValidationError(f"Unknown layout: {layout!r}")


def _get_backend(choice: BackendChoice, min_pivot: float | None, design: BandedDesign):
    """
    Select and instantiate the appropriate backend.

    Raises:
        ValidationError: If the backend is unknown, or min_pivot is given
            for a backend that does not support it
        RuntimeError: If GPU requested but unavailable
    """
    if min_pivot is not None and choice not in ('cpu', 'cpu_ldlt'):
        raise ValidationError(
            f"min_pivot is only supported by the LDLT backend, got backend={choice!r}"
        )

    if choice in ('cpu', 'cpu_ldlt'):
        return CPULDLTBackend(min_pivot=min_pivot)

    if choice == 'cpu_lapack':
        return CPULapackBackend()

    if choice == 'auto':
        device = select_device('auto')
        # Dense expansion is O(n^2) memory, keep large systems on the band kernel
        if device.is_gpu and design.n <= AUTO_GPU_MAX_ORDER:
            from pybanded.banded.backends.gpu import GPUCholeskyBackend
            return GPUCholeskyBackend(device=device)
        return CPULDLTBackend()

    if choice == 'gpu':
        device = select_device('gpu')
        from pybanded.banded.backends.gpu import GPUCholeskyBackend
        return GPUCholeskyBackend(device=device)

    raise ValidationError(f"Unknown backend: {choice!r}")
