# shenidam/analysis/correlation/_base.py
"""
Protocols shared by the correlation engine.

The transform provider and the spectral filters are capabilities supplied
from outside the aligner; these definitions pin down their interface.
"""

from __future__ import annotations

from typing import Any, Callable, Protocol

import numpy as np
from numpy.typing import NDArray

# (spectrum, bin_count, context) -> None; mutates spectrum in place
FilterCallback = Callable[[NDArray[np.complex64], int, Any], None]


class TransformProvider(Protocol):
    """Real-input forward/inverse spectral transform."""

    def forward(
        self,
        samples: NDArray[np.float32],
        num_threads: int = 1,
    ) -> NDArray[np.complex64]:
        """
        Transform ``len(samples)`` real samples to ``len(samples)//2 + 1`` bins.

        The returned array must be writable; filters mutate it in place.
        """
        ...

    def inverse(
        self,
        spectrum: NDArray[np.complex64],
        size: int,
        num_threads: int = 1,
    ) -> NDArray[np.float32]:
        """Transform ``size//2 + 1`` bins back to ``size`` real samples."""
        ...
