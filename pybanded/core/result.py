"""
Generic result container for backend computations.

Every backend returns a Result: the solver-specific payload plus the
metadata shared by all backends (timing, diagnostics, warnings).

Design decisions:
    - Generic over parameter payload P
    - info dict for flexible metadata (method, bandwidth, pivot diagnostics)
    - timing is optional
    - Immutable (frozen=True)
"""

from dataclasses import dataclass, field
from typing import TypeVar, Generic, Any

P = TypeVar('P')


@dataclass(frozen=True)
class Result(Generic[P]):
    """
    Immutable result envelope.

    Attributes:
        params: Backend payload (solution, factors, ...)
        info: Structured metadata
        timing: Execution timing breakdown, or None if not measured
        backend_name: Identifier of the backend that produced this result
        warnings: Non-fatal issues encountered during computation

    Example:
        >>> Result(
        ...     params=BandedParams(x=x, diagonal=d, factor=band),
        ...     info={'method': 'ldlt', 'bandwidth': 3, 'skipped_multipliers': 12},
        ...     timing={'total_seconds': 0.002, 'factorize': 0.0015},
        ...     backend_name='cpu_ldlt',
        ... )
    """
    params: P
    info: dict[str, Any]
    timing: dict[str, float] | None
    backend_name: str
    warnings: tuple[str, ...] = field(default_factory=tuple)

    def has_warning(self, substring: str) -> bool:
        """Check if any warning contains the given substring."""
        return any(substring in w for w in self.warnings)
