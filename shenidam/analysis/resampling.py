# shenidam/analysis/resampling.py
"""
Sample-rate conversion to the session's working rate.

The interpolation itself is delegated to a ``Resampler`` provider; the default
one is scipy's polyphase ``resample_poly`` driven by exact integer factors
for whole-number rates and a rational approximation otherwise.
"""

from __future__ import annotations

import logging
from fractions import Fraction
from math import ceil, gcd
from typing import Protocol

import numpy as np
from scipy.signal import resample_poly

from .parallel import map_ordered, split_contiguous

logger = logging.getLogger(__name__)


class Resampler(Protocol):
    """Band-limited resampler capability."""

    def resample(
        self,
        samples: np.ndarray,
        ratio: Fraction | float,
        target_count: int,
    ) -> np.ndarray:
        """
        Resample ``samples`` by ``ratio`` (output rate / input rate).

        Args:
            samples: Input float32 samples.
            ratio: Output rate divided by input rate.
            target_count: Maximum number of output samples wanted.

        Returns:
            float32 array of at most ``target_count`` samples.
        """
        ...


def rate_ratio(target_rate: float, source_rate: float) -> Fraction | float:
    """
    Ratio ``target_rate / source_rate``.

    Whole-number rates give an exact Fraction reduced by their gcd, so nearby
    rates such as 8000/7999 keep their true factors instead of collapsing to
    1/1. Any other pair falls back to a float.
    """
    if float(target_rate).is_integer() and float(source_rate).is_integer():
        target, source = int(target_rate), int(source_rate)
        g = gcd(target, source)
        return Fraction(target // g, source // g)
    return target_rate / source_rate


class PolyphaseResampler:
    """Polyphase FIR resampler backed by ``scipy.signal.resample_poly``."""

    def __init__(self, max_denominator: int = 1000, window: str | tuple = ("kaiser", 5.0)):
        self.max_denominator = max_denominator
        self.window = window

    def factors(self, ratio: Fraction | float) -> tuple[int, int]:
        """
        Return the (up, down) pair for ``ratio``.

        An exact Fraction (see ``rate_ratio``) is used as is; a float is
        approximated with a denominator of at most ``max_denominator``.
        """
        if isinstance(ratio, Fraction):
            return ratio.numerator, ratio.denominator
        frac = Fraction(ratio).limit_denominator(self.max_denominator)
        up, down = frac.numerator, frac.denominator
        if up == 0:
            up, down = 1, int(round(1.0 / ratio))
        return up, down

    def resample(self, samples: np.ndarray, ratio: Fraction | float, target_count: int) -> np.ndarray:
        if len(samples) == 0 or target_count <= 0:
            return np.zeros(0, dtype=np.float32)
        up, down = self.factors(ratio)
        out = resample_poly(samples, up, down, window=self.window)
        return np.asarray(out[:target_count], dtype=np.float32)


_DEFAULT_RESAMPLER = PolyphaseResampler()


def resample(
    samples: np.ndarray,
    ratio: Fraction | float,
    target_count: int,
    resampler: Resampler | None = None,
) -> tuple[np.ndarray, int]:
    """
    Resample a whole signal in one call.

    This is the reference path the parallel variant is measured against.

    Returns:
        Tuple of (samples, actual_count); ``actual_count`` may be lower than
        ``target_count`` when the provider produced fewer samples.
    """
    provider = resampler or _DEFAULT_RESAMPLER
    out = provider.resample(samples, ratio, target_count)
    return out, len(out)


def resample_parallel(
    samples: np.ndarray,
    ratio: Fraction | float,
    target_count: int,
    num_threads: int,
    resampler: Resampler | None = None,
) -> tuple[np.ndarray, int]:
    """
    Resample contiguous slices of the signal on separate threads.

    The input is cut into ``num_threads`` non-overlapping slices (the last one
    takes the remainder). Each slice is resampled as an independent signal
    with the same ratio, and the outputs are concatenated in slice order once
    every worker has finished.

    Each slice sees silence beyond its own edges, so samples near the cut
    points differ from the single-threaded result, and the total count can
    drift by a few samples from ``target_count``. That divergence is expected;
    ``resample`` stays the reference.

    Returns:
        Tuple of (samples, actual_count).
    """
    if num_threads <= 1 or len(samples) < num_threads:
        return resample(samples, ratio, target_count, resampler)

    provider = resampler or _DEFAULT_RESAMPLER
    bounds = split_contiguous(len(samples), num_threads)

    def _work(bound: tuple[int, int]) -> np.ndarray:
        start, stop = bound
        chunk_target = int(ceil((stop - start) * ratio))
        return provider.resample(samples[start:stop], ratio, chunk_target)

    pieces = map_ordered(_work, bounds, num_threads, thread_name_prefix="shenidam-resample")
    out = np.concatenate(pieces).astype(np.float32, copy=False)
    logger.debug(
        "Parallel resample: %d slices, %d -> %d samples (requested %d)",
        len(bounds),
        len(samples),
        len(out),
        target_count,
    )
    return out, len(out)
