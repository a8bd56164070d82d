"""
Core infrastructure for pybanded.

Key components:
    vector: Growable dense Vector
    matrix: Row-major dense Matrix with banded LDLT solve
    buffer: Growable buffer and its capacity policy
    exceptions: Exception hierarchy
    validation: Input validators
    result: Generic Result[P] envelope
    protocols: Backend protocol
    compute: Band conversions, LDLT kernel, timing, device detection
"""

from pybanded.core.buffer import GrowableBuffer, reuses_capacity
from pybanded.core.vector import Vector
from pybanded.core.matrix import Matrix
from pybanded.core.protocols import Backend
from pybanded.core.result import Result
from pybanded.core.exceptions import (
    PyBandedError,
    ValidationError,
    DimensionError,
    IndexOutOfRangeError,
    NumericalError,
    NotPositiveDefiniteError,
)

__all__ = [
    # Storage
    "GrowableBuffer",
    "reuses_capacity",
    "Vector",
    "Matrix",
    # Protocols
    "Backend",
    # Result
    "Result",
    # Exceptions
    "PyBandedError",
    "ValidationError",
    "DimensionError",
    "IndexOutOfRangeError",
    "NumericalError",
    "NotPositiveDefiniteError",
]
