"""
Structural interfaces for solver backends.

Protocol (structural typing) rather than ABC, so a backend only needs the
right shape to plug into the solver dispatch.
"""

from typing import Protocol, TypeVar, runtime_checkable

from pybanded.core.result import Result

P = TypeVar('P', covariant=True)
D = TypeVar('D', contravariant=True)


@runtime_checkable
class Backend(Protocol[D, P]):
    """
    A backend turns a validated design into a Result payload.

    Backends are stateless apart from construction-time configuration
    (device, precision) and never mutate the design they are given.

    Type Parameters:
        D: The design type this backend accepts
        P: The parameter payload type this backend produces
    """

    @property
    def name(self) -> str:
        """
        Backend identifier.

        Convention: '{device}_{algorithm}', e.g. 'cpu_ldlt', 'cpu_lapack',
        'gpu_cholesky'.
        """
        ...

    def solve(self, design: D) -> Result[P]:
        """
        Run the computation.

        Raises:
            NumericalError: If the backend cannot produce a solution
            ValidationError: If the design is invalid for this backend
        """
        ...
