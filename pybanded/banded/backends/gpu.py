"""
GPU backend for banded symmetric systems.

GPUs gain nothing from the row-sequential banded kernel, so this backend
expands the band to a dense matrix and runs a dense Cholesky solve in
PyTorch. The expansion costs O(n^2) device memory (8 n^2 bytes in float64)
and O(n^3) work regardless of bandwidth, so it only pays off when the
bandwidth is a sizeable fraction of n or there are many right-hand sides.
solve(backend='auto') therefore only picks it up to AUTO_GPU_MAX_ORDER.

Precision follows the device: CUDA runs in float64, MPS in float32.
"""

from typing import Any

import numpy as np

from pybanded.core.compute.device import DeviceInfo
from pybanded.core.compute.timing import Timer
from pybanded.core.exceptions import NotPositiveDefiniteError
from pybanded.core.result import Result
from pybanded.banded.design import BandedDesign
from pybanded.banded.solution import BandedParams


class GPUCholeskyBackend:
    """
    GPU backend using dense Cholesky via PyTorch.

    Args:
        device: Target GPU from select_device('gpu')
    """

    def __init__(self, device: DeviceInfo):
        import torch

        self._device = device
        self._torch_device = torch.device(device.torch_device)
        self._dtype = torch.float64 if device.supports_fp64 else torch.float32

    @property
    def name(self) -> str:
        if self._device.supports_fp64:
            return 'gpu_cholesky'
        return 'gpu_cholesky_fp32'

    def _sync(self) -> None:
        import torch

        if self._device.device_type == 'cuda':
            torch.cuda.synchronize()

    def solve(self, design: BandedDesign) -> Result[BandedParams]:
        """
        Solve A x = b by dense Cholesky on the GPU.

        Raises:
            NotPositiveDefiniteError: If the Cholesky factorization fails
        """
        import torch

        timer = Timer(sync=self._sync)
        timer.start()

        with timer.section('transfer'):
            A = torch.from_numpy(design.dense()).to(
                device=self._torch_device, dtype=self._dtype,
            )
            B = torch.from_numpy(np.array(design.b)).to(
                device=self._torch_device, dtype=self._dtype,
            )
            if B.ndim == 1:
                B = B.unsqueeze(1)

        with timer.section('factorize'):
            L, info = torch.linalg.cholesky_ex(A)
            failed_at = int(info.item())
            if failed_at > 0:
                raise NotPositiveDefiniteError(
                    f"Cholesky failed: leading minor of order {failed_at} is not positive definite",
                    row=failed_at - 1,
                )

        with timer.section('substitute'):
            X = torch.cholesky_solve(B, L)

        with timer.section('transfer_back'):
            x = X.cpu().numpy().astype(np.float64)
            diagonal = (torch.diagonal(L) ** 2).cpu().numpy().astype(np.float64)

        timer.stop()

        if not design.is_multi_rhs:
            x = x[:, 0]

        params = BandedParams(x=x, diagonal=diagonal, factor=None)

        info_dict: dict[str, Any] = {
            'method': 'cholesky_dense',
            'bandwidth': design.bandwidth,
            'device': str(self._device),
            'dtype': str(self._dtype),
        }

        return Result(
            params=params,
            info=info_dict,
            timing=timer.result(),
            backend_name=self.name,
            warnings=(),
        )
