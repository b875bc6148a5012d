# shenidam/analysis/correlation/transform.py
"""
Default transform provider built on ``scipy.fft``.

scipy's pocketfft runs multi-threaded through its ``workers`` argument. The
usable worker count is resolved once per process behind a lock.
"""

from __future__ import annotations

import logging
import os
import threading

import numpy as np
import scipy.fft
from numpy.typing import NDArray

logger = logging.getLogger(__name__)

_init_lock = threading.Lock()
_max_workers: int | None = None


def init_transform_threads() -> int:
    """
    Resolve the maximum number of transform workers. Idempotent.

    Returns:
        The worker cap shared by every later transform call.
    """
    global _max_workers
    with _init_lock:
        if _max_workers is None:
            _max_workers = max(1, os.cpu_count() or 1)
            logger.debug("Transform threading initialized: up to %d workers", _max_workers)
        return _max_workers


def _workers(num_threads: int) -> int:
    return max(1, min(int(num_threads), init_transform_threads()))


class ScipyTransform:
    """Real FFT pair; the inverse is scaled by 1/size."""

    name = "scipy.fft"

    def forward(self, samples: NDArray[np.float32], num_threads: int = 1) -> NDArray[np.complex64]:
        spectrum = scipy.fft.rfft(samples, workers=_workers(num_threads))
        return np.asarray(spectrum, dtype=np.complex64)

    def inverse(
        self,
        spectrum: NDArray[np.complex64],
        size: int,
        num_threads: int = 1,
    ) -> NDArray[np.float32]:
        samples = scipy.fft.irfft(spectrum, n=size, workers=_workers(num_threads))
        return np.asarray(samples, dtype=np.float32)
