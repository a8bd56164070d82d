"""
Banded solve solution types.

Contains the parameter payload and user-facing solution wrapper.
"""

from dataclasses import dataclass
from typing import Any, TYPE_CHECKING
import numpy as np
from numpy.typing import NDArray

from pybanded.core.result import Result

if TYPE_CHECKING:
    from pybanded.banded.design import BandedDesign


@dataclass(frozen=True)
class BandedParams:
    """
    Parameter payload for a banded solve.

    Attributes:
        x: Solution, same shape as the right-hand side
        diagonal: D of A = L D L' (for Cholesky backends, the squared
            diagonal of the Cholesky factor)
        factor: Factorized banded storage (D in column 0, L' above), or
            None when the backend does not expose banded factors
    """
    x: NDArray[np.floating[Any]]
    diagonal: NDArray[np.floating[Any]]
    factor: NDArray[np.floating[Any]] | None


@dataclass
class BandedSolution:
    """
    User-facing banded solve results.

    Wraps the backend Result and provides accessors plus residual
    diagnostics computed on demand against the original system.
    """
    _result: Result[BandedParams]
    _design: 'BandedDesign'

    _residual: NDArray[np.floating[Any]] | None = None

    @property
    def x(self) -> NDArray[np.floating[Any]]:
        return self._result.params.x

    @property
    def diagonal(self) -> NDArray[np.floating[Any]]:
        return self._result.params.diagonal

    @property
    def factor(self) -> NDArray[np.floating[Any]] | None:
        return self._result.params.factor

    @property
    def residual(self) -> NDArray[np.floating[Any]]:
        """b - A x, computed once from the dense expansion of A."""
        if self._residual is None:
            self._residual = self._design.b - self._design.dense() @ self.x
        return self._residual

    @property
    def residual_norm(self) -> float:
        """Frobenius norm of the residual (Euclidean for a single rhs)."""
        return float(np.linalg.norm(self.residual))

    @property
    def relative_residual(self) -> float:
        """||b - A x|| / ||b||, or the absolute residual if b is zero."""
        b_norm = float(np.linalg.norm(self._design.b))
        if b_norm == 0.0:
            return self.residual_norm
        return self.residual_norm / b_norm

    @property
    def is_positive_definite(self) -> bool:
        """Whether every pivot of the factorization was strictly positive."""
        return bool(np.all(self.diagonal > 0))

    @property
    def info(self) -> dict[str, Any]:
        return self._result.info

    @property
    def timing(self) -> dict[str, float] | None:
        return self._result.timing

    @property
    def backend_name(self) -> str:
        return self._result.backend_name

    @property
    def warnings(self) -> tuple[str, ...]:
        return self._result.warnings

    def summary(self) -> str:
        """Plain-text report of the solve."""
        lines = [
            "Banded LDLT Solve",
            "=" * 60,
            f"Order: {self._design.n}",
            f"Bandwidth: {self._design.bandwidth}",
            f"Right-hand sides: {self._design.n_rhs}",
            f"Backend: {self.backend_name}",
            f"Min pivot: {float(np.min(self.diagonal)):.6g}",
            f"Relative residual: {self.relative_residual:.3e}",
        ]
        skipped = self.info.get('skipped_multipliers')
        if skipped is not None:
            lines.append(f"Skipped multipliers: {skipped}")
        if self.timing is not None:
            lines.append(f"Time: {self.timing['total_seconds']:.6f}s")
        if self.warnings:
            lines.append("")
            lines.append("Warnings:")
            lines.extend(f"  - {w}" for w in self.warnings)
        lines.append("=" * 60)
        return "\n".join(lines)

    def __repr__(self) -> str:
        return (
            f"BandedSolution(n={self._design.n}, bandwidth={self._design.bandwidth}, "
            f"n_rhs={self._design.n_rhs}, backend={self.backend_name!r})"
        )
