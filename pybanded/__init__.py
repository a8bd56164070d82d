"""
pybanded: dense vectors, matrices and symmetric banded LDLT solves.

Submodules:
    core: Vector, Matrix, exceptions, the banded LDLT kernel
    banded: Functional solve() API with CPU, LAPACK and GPU backends
"""

__version__ = "0.1.0"

from pybanded.core import (
    Vector,
    Matrix,
    PyBandedError,
    ValidationError,
    DimensionError,
    IndexOutOfRangeError,
    NumericalError,
    NotPositiveDefiniteError,
)
from pybanded import banded
from pybanded.banded import solve, BandedDesign, BandedSolution, BandedParams

__all__ = [
    "__version__",
    "Vector",
    "Matrix",
    "solve",
    "BandedDesign",
    "BandedSolution",
    "BandedParams",
    "banded",
    "PyBandedError",
    "ValidationError",
    "DimensionError",
    "IndexOutOfRangeError",
    "NumericalError",
    "NotPositiveDefiniteError",
]
