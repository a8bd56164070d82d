"""
Banded solve backends.

Available backends:
    CPULDLTBackend: Native in-place banded LDLT (reference)
    CPULapackBackend: LAPACK banded Cholesky via SciPy
    GPUCholeskyBackend: Dense Cholesky via PyTorch (import from .gpu)
"""

from pybanded.banded.backends.cpu import CPULDLTBackend, CPULapackBackend

__all__ = [
    "CPULDLTBackend",
    "CPULapackBackend",
]
