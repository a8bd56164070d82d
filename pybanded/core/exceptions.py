"""
Exception hierarchy for pybanded.

All exceptions inherit from PyBandedError to allow catching any
library-specific error. Two kinds cover almost every failure:

    - ValidationError: an argument is invalid (negative size, zero
      dimension, mismatched shapes via DimensionError)
    - IndexOutOfRangeError: a subscript lies outside the valid range

Design principles:
    - Exceptions carry diagnostic information as attributes
    - Error messages are actionable with actual vs expected values
    - Raised before any mutation of the operands
"""


class PyBandedError(Exception):
    """Base exception for all pybanded errors."""
    pass


class ValidationError(PyBandedError):
    """
    Input validation failed.

    Raised when an argument is invalid: negative sizes, matrix dimensions
    below one, unsupported operand types.
    """
    pass


class DimensionError(ValidationError):
    """
    Operand shapes are incorrect or inconsistent.

    Raised for vector size mismatches, matrix multiply inner-dimension
    mismatches, and banded solves whose right-hand side does not match
    the coefficient matrix.
    """
    pass


class IndexOutOfRangeError(PyBandedError, IndexError):
    """
    Subscript outside the valid range.

    Attributes:
        index: The offending index
        size: Number of valid positions along the indexed axis
    """

    def __init__(
        self,
        message: str,
        index: int | None = None,
        size: int | None = None,
    ):
        super().__init__(message)
        self.index = index
        self.size = size


class NumericalError(PyBandedError):
    """
    Numerical computation failed.

    Base class for errors arising from numerical issues during computation.
    """
    pass


class NotPositiveDefiniteError(NumericalError):
    """
    Matrix is not positive definite.

    Only raised when the caller opts into a pivot check (min_pivot) or by
    backends that factorize with Cholesky. The default LDLT path leaves
    positive definiteness as a caller contract.

    Attributes:
        row: Row at which the offending pivot was produced, if known
        pivot: Value of the offending pivot, if known
    """

    def __init__(
        self,
        message: str,
        row: int | None = None,
        pivot: float | None = None,
    ):
        super().__init__(message)
        self.row = row
        self.pivot = pivot
