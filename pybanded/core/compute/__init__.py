"""
Shared numeric infrastructure for pybanded.

Submodules:
    band: Conversions between dense symmetric and banded storage
    ldlt: In-place banded LDLT factorization and substitution kernel
    tolerances: Numeric thresholds and tolerance tiers
    device: GPU detection for the optional dense backend
    timing: Execution timing utilities
"""

from pybanded.core.compute.band import (
    band_from_dense,
    dense_from_band,
    detect_bandwidth,
    lapack_upper_form,
)
from pybanded.core.compute.device import (
    DeviceInfo,
    detect_gpu,
    get_cpu_info,
    select_device,
)
from pybanded.core.compute.ldlt import (
    LDLTScratch,
    LDLTStats,
    check_ldlt_operands,
    check_ldlt_storage,
    factorize_ldlt,
    ldlt_reconstruct,
    ldlt_scratch,
    solve_ldlt_inplace,
    substitute_ldlt,
)
from pybanded.core.compute.timing import Timer, timed

__all__ = [
    # Band storage
    "band_from_dense",
    "dense_from_band",
    "detect_bandwidth",
    "lapack_upper_form",
    # Device detection
    "DeviceInfo",
    "detect_gpu",
    "get_cpu_info",
    "select_device",
    # LDLT kernel
    "LDLTScratch",
    "LDLTStats",
    "check_ldlt_operands",
    "check_ldlt_storage",
    "factorize_ldlt",
    "ldlt_reconstruct",
    "ldlt_scratch",
    "solve_ldlt_inplace",
    "substitute_ldlt",
    # Timing
    "Timer",
    "timed",
]
