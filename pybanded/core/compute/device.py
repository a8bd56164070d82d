"""
Compute device detection for the GPU backend.

The native banded LDLT kernel always runs on the CPU. Only the optional
dense Cholesky backend uses a GPU, and this module decides which one.
"""

from dataclasses import dataclass
from typing import Literal
import platform


@dataclass(frozen=True)
class DeviceInfo:
    """
    Information about a compute device.

    Attributes:
        device_type: 'cpu', 'cuda' or 'mps'
        device_index: Device index (None for CPU)
        name: Human-readable device name
        supports_fp64: Whether double precision is available on the device
    """
    device_type: Literal['cpu', 'cuda', 'mps']
    device_index: int | None
    name: str
    supports_fp64: bool

    def __str__(self) -> str:
        if self.device_type == 'cpu':
            return f"CPU ({self.name})"
        return f"{self.device_type.upper()}:{self.device_index} ({self.name})"

    @property
    def is_gpu(self) -> bool:
        return self.device_type in ('cuda', 'mps')

    @property
    def torch_device(self) -> str:
        """Device string accepted by torch.device()."""
        if self.device_type == 'cuda':
            return f"cuda:{self.device_index}"
        return self.device_type


def detect_gpu() -> DeviceInfo | None:
    """
    Detect the best available GPU, if any.

    Priority: CUDA > MPS (Apple Silicon). torch is imported lazily so
    CPU-only installs never need it.
    """
    try:
        import torch
    except ImportError:
        return None

    if torch.cuda.is_available():
        idx = torch.cuda.current_device()
        return DeviceInfo(
            device_type='cuda',
            device_index=idx,
            name=torch.cuda.get_device_name(idx),
            supports_fp64=True,
        )

    if hasattr(torch.backends, 'mps') and torch.backends.mps.is_available():
        # MPS has no float64 support.
        return DeviceInfo(
            device_type='mps',
            device_index=0,
            name='Apple Silicon GPU',
            supports_fp64=False,
        )

    return None


def get_cpu_info() -> DeviceInfo:
    processor = platform.processor()
    if not processor:
        processor = platform.machine() or "Unknown CPU"

    return DeviceInfo(
        device_type='cpu',
        device_index=None,
        name=processor,
        supports_fp64=True,
    )


def select_device(prefer: Literal['cpu', 'gpu', 'auto'] = 'auto') -> DeviceInfo:
    """
    Select compute device based on preference and availability.

    Args:
        prefer: 'cpu' always uses the CPU, 'gpu' requires a GPU,
                'auto' uses a GPU when one is available

    Raises:
        RuntimeError: If 'gpu' requested but no GPU available
    """
    if prefer == 'cpu':
        return get_cpu_info()

    gpu = detect_gpu()

    if prefer == 'gpu':
        if gpu is None:
            raise RuntimeError(
                "GPU requested but no GPU available. "
                "Ensure PyTorch is installed with CUDA/MPS support."
            )
        return gpu

    return gpu if gpu is not None else get_cpu_info()
