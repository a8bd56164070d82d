"""
Growable float64 buffer with a hysteresis capacity policy.

The buffer keeps a logical size separate from its allocated capacity.
Resizing within [capacity // 2, capacity] only moves the logical size;
anything outside that window reallocates to exactly the requested size.
This avoids churn when a buffer oscillates around a working size while
still releasing memory after a large shrink.
"""

from __future__ import annotations

import numpy as np
from numpy.typing import NDArray

from pybanded.core.validation import check_size


def reuses_capacity(capacity: int, new_size: int) -> bool:
    """
    Whether a resize to new_size can keep the current allocation.

    Args:
        capacity: Currently allocated element count
        new_size: Requested logical size

    Returns:
        True if capacity // 2 <= new_size <= capacity
    """
    return capacity // 2 <= new_size <= capacity


def _allocate(size: int, zero_init: bool) -> NDArray[np.float64]:
    if zero_init:
        return np.zeros(size, dtype=np.float64)
    return np.empty(size, dtype=np.float64)


class GrowableBuffer:
    """
    Owned float64 storage with logical size and allocated capacity.

    Invariant: 0 <= size <= capacity == len(storage).

    Usage:
        buf = GrowableBuffer(8)
        buf.resize(5)                  # no reallocation, capacity stays 8
        buf.resize(20, preserve=True)  # reallocates, keeps first 5 values
    """

    __slots__ = ('_storage', '_size')

    def __init__(self, size: int = 0, zero_init: bool = True):
        size = check_size(size, 'size')
        self._storage = _allocate(size, zero_init)
        self._size = size

    @property
    def size(self) -> int:
        return self._size

    @property
    def capacity(self) -> int:
        return self._storage.shape[0]

    def view(self) -> NDArray[np.float64]:
        """Writable view of the logical region [0, size)."""
        return self._storage[:self._size]

    def resize(self, new_size: int, preserve: bool = False, zero_init: bool = True) -> bool:
        """
        Change the logical size, reallocating only outside the hysteresis window.

        Args:
            new_size: Requested logical size (>= 0)
            preserve: Keep the first min(size, new_size) values when reallocating
            zero_init: Zero-fill newly exposed entries

        Returns:
            True if the storage was reallocated

        Raises:
            ValidationError: If new_size is negative or not an integer
        """
        new_size = check_size(new_size, 'new_size')
        old_size = self._size

        if reuses_capacity(self.capacity, new_size):
            if zero_init and new_size > old_size:
                self._storage[old_size:new_size] = 0.0
            self._size = new_size
            return False

        if preserve:
            storage = np.empty(new_size, dtype=np.float64)
            kept = min(old_size, new_size)
            storage[:kept] = self._storage[:kept]
            if zero_init and new_size > kept:
                storage[kept:] = 0.0
        else:
            storage = _allocate(new_size, zero_init)

        self._storage = storage
        self._size = new_size
        return True

    def copy(self) -> GrowableBuffer:
        """Deep copy with capacity trimmed to size."""
        clone = GrowableBuffer(self._size, zero_init=False)
        clone._storage[:] = self._storage[:self._size]
        return clone

    def __repr__(self) -> str:
        return f"GrowableBuffer(size={self._size}, capacity={self.capacity})"
