"""
Symmetric banded linear systems.

Public API:
    solve(A, b, ...) -> BandedSolution

solve() copies its inputs, validates them, dispatches to a backend and
wraps the result. For in-place solving on caller-owned storage use
Matrix.solve_ldlt directly.

Example:
    >>> from pybanded.banded import solve
    >>> result = solve([[4, 1], [4, 1], [4, 0]], [1, 2, 3])
    >>> print(result.x)
    >>> print(result.summary())
"""

from pybanded.banded.design import BandedDesign
from pybanded.banded.solution import BandedSolution, BandedParams
from pybanded.banded.solvers import solve

__all__ = [
    "solve",
    "BandedDesign",
    "BandedSolution",
    "BandedParams",
]
