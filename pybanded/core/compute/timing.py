"""
Execution timing for solver backends.

Backends time their phases (conversion, factorization, substitution)
with a Timer and attach the breakdown to Result.timing.
"""

import time
from contextlib import contextmanager
from typing import Callable, Iterator


class Timer:
    """
    Accumulating phase timer.

    Usage:
        timer = Timer()
        timer.start()

        with timer.section('factorize'):
            stats = factorize_ldlt(band, scratch)

        with timer.section('substitute'):
            substitute_ldlt(band, rhs, scratch.lower_bounds)

        timer.stop()
        timer.result()
        # {'total_seconds': 0.004, 'factorize': 0.003, 'substitute': 0.001}

    Args:
        sync: Optional callable run before every clock read, e.g.
              torch.cuda.synchronize for GPU backends, so that queued
              device work is included in the measured time.
    """

    def __init__(self, sync: Callable[[], None] | None = None):
        self._sync_fn = sync
        self._sections: dict[str, float] = {}
        self._start_time: float | None = None
        self._total: float | None = None

    def _sync(self) -> None:
        if self._sync_fn is not None:
            self._sync_fn()

    def start(self) -> None:
        self._sync()
        self._start_time = time.perf_counter()

    def stop(self) -> None:
        self._sync()
        if self._start_time is None:
            raise RuntimeError("Timer.stop() called before start()")
        self._total = time.perf_counter() - self._start_time

    @contextmanager
    def section(self, name: str) -> Iterator[None]:
        """
        Time a named section. Repeated sections accumulate.
        """
        self._sync()
        start = time.perf_counter()
        try:
            yield
        finally:
            self._sync()
            elapsed = time.perf_counter() - start
            self._sections[name] = self._sections.get(name, 0.0) + elapsed

    def result(self) -> dict[str, float]:
        """
        Timing breakdown with 'total_seconds' plus every section.

        Raises:
            RuntimeError: If called before stop()
        """
        if self._total is None:
            raise RuntimeError("Timer.result() called before stop()")

        result = {'total_seconds': self._total}
        result.update(self._sections)
        return result


@contextmanager
def timed(sync: Callable[[], None] | None = None) -> Iterator[Timer]:
    """
    Context manager for timing a whole block.

    Usage:
        with timed() as timer:
            matrix.solve_ldlt(rhs)
        timer.result()['total_seconds']
    """
    timer = Timer(sync=sync)
    timer.start()
    try:
        yield timer
    finally:
        timer.stop()
