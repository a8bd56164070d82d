"""
pytest configuration and shared fixtures.
"""

import pytest
import numpy as np

from pybanded.core.compute.band import band_from_dense


def random_spd_dense(rng, n, bandwidth):
    """
    Random symmetric, strictly diagonally dominant banded matrix.

    Strict diagonal dominance with a positive diagonal makes it SPD.
    """
    a = np.zeros((n, n))
    for k in range(1, bandwidth):
        off = rng.uniform(-1.0, 1.0, n - k)
        idx = np.arange(n - k)
        a[idx, idx + k] = off
        a[idx + k, idx] = off
    a[np.arange(n), np.arange(n)] = np.sum(np.abs(a), axis=1) + 1.0 + rng.uniform(0.0, 1.0, n)
    return a


@pytest.fixture
def rng():
    """Seeded random number generator for reproducible tests."""
    return np.random.default_rng(42)


@pytest.fixture
def spd_system(rng):
    """Factory: (dense A, band storage, x_true) for an SPD banded system."""
    def make(n, bandwidth, n_rhs=None):
        a = random_spd_dense(rng, n, bandwidth)
        shape = (n,) if n_rhs is None else (n, n_rhs)
        x = rng.standard_normal(shape)
        return a, band_from_dense(a, bandwidth), x
    return make


@pytest.fixture
def tridiagonal_band():
    """Banded storage of [[4,1,0],[1,4,1],[0,1,4]]."""
    return np.array([[4.0, 1.0], [4.0, 1.0], [4.0, 0.0]])


@pytest.fixture
def tridiagonal_solution():
    """Exact solution of the tridiagonal system with rhs [1, 2, 3]."""
    return np.array([5.0 / 28.0, 2.0 / 7.0, 19.0 / 28.0])
