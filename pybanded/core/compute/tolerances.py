"""
Numeric thresholds and tolerance tiers.

Defines the constants the banded LDLT kernel depends on and the precision
expectations for the different compute paths:
- CPU FP64 LDLT (reference): recovers a known solution to ~1e-9 relative
- CPU LAPACK: same tier as the native kernel
- GPU FP32: relaxed for single-precision arithmetic

Used by the kernel, the backends and the test suite.
"""

from dataclasses import dataclass


# Multipliers below this magnitude count as structural zeros: once a row's
# multiplier into a later row is negligible, that later row's lower bound
# may advance past it.
NEGLIGIBLE_MULTIPLIER = 1e-12

# Pivots at or below this value are reported as warnings by the backends.
# The kernel itself never raises on them unless min_pivot is requested.
PIVOT_WARNING_THRESHOLD = 0.0


@dataclass(frozen=True)
class ToleranceTier:
    """Tolerance specification for numerical comparison."""
    rtol: float
    atol: float
    name: str
    description: str


CPU_FP64 = ToleranceTier(
    rtol=1e-9,
    atol=1e-12,
    name='cpu_fp64',
    description='CPU double precision, banded LDLT or LAPACK',
)

GPU_FP64 = ToleranceTier(
    rtol=1e-9,
    atol=1e-12,
    name='gpu_fp64',
    description='GPU double precision, matches CPU reference',
)

GPU_FP32 = ToleranceTier(
    rtol=1e-4,
    atol=1e-5,
    name='gpu_fp32',
    description='GPU single precision (MPS or explicit fp32)',
)


def select_tolerance(backend_name: str) -> ToleranceTier:
    """Select appropriate tolerance tier for a given backend."""
    if 'gpu' in backend_name:
        if 'fp32' in backend_name:
            return GPU_FP32
        return GPU_FP64
    return CPU_FP64
