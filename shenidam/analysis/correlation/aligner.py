# shenidam/analysis/correlation/aligner.py
"""
Locate a query inside a base signal by FFT cross-correlation.

Both signals are zero-padded to the smallest power of two that holds their
combined length, so the circular correlation computed through the FFT
contains the full linear correlation without overlap. The peak lag is then
mapped back to the caller's base sample rate.
"""

from __future__ import annotations

import logging
import math
from typing import TYPE_CHECKING

import numpy as np
from numpy.typing import NDArray

from ...models.results import AudioRange
from .transform import ScipyTransform

if TYPE_CHECKING:
    from ._base import TransformProvider
    from .filters import FilterChain

logger = logging.getLogger(__name__)

_DEFAULT_TRANSFORM = ScipyTransform()


def resize(signal: NDArray[np.float32], target_length: int) -> NDArray[np.float32]:
    """Return a new buffer of ``target_length`` samples, zero-padded or truncated."""
    out = np.zeros(target_length, dtype=np.float32)
    n = min(len(signal), target_length)
    out[:n] = signal[:n]
    return out


def get_common_size(minimal_size: int) -> int:
    """Smallest power of two that is >= ``minimal_size``."""
    size = 1
    while size < minimal_size:
        size <<= 1
    return size


def cross_power_spectrum(
    query_f: NDArray[np.complex64],
    base_f: NDArray[np.complex64],
) -> NDArray[np.complex64]:
    """conj(query) * base, bin by bin."""
    return np.conj(query_f) * base_f


def find_peak(correlation: NDArray[np.float32]) -> tuple[int, float]:
    """Index and value of the maximum; the first index wins on ties."""
    k = int(np.argmax(correlation))
    return k, float(correlation[k])


def correct_wraparound(peak: int, common_size: int, query_length: int) -> int:
    """
    Map lags near the end of the circular buffer to negative lags.

    Anything past ``common_size - query_length // 2`` is read as the query
    starting before the base. The threshold is empirical and kept as is.
    """
    if peak > common_size - query_length // 2:
        return peak - common_size
    return peak


def round_half_away(value: float) -> int:
    """Round to nearest, ties away from zero."""
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


def rescale(value: float, real_rate: float, working_rate: float) -> int:
    """Convert a sample count at ``working_rate`` to ``real_rate``."""
    return round_half_away(value * real_rate / working_rate)


def align(
    query: NDArray[np.float32],
    base: NDArray[np.float32],
    filters: FilterChain | None,
    real_rate: float,
    working_rate: float,
    num_threads: int = 1,
    transform: TransformProvider | None = None,
) -> AudioRange:
    """
    Find the offset of ``query`` inside ``base``.

    Both inputs must already be normalized and at ``working_rate``. ``base``
    is only read; the padded copy is a new buffer.

    Args:
        query: Query samples at the working rate.
        base: Base samples at the working rate.
        filters: Spectral filters applied to each spectrum, or None.
        real_rate: Sample rate the caller supplied the base audio with.
        working_rate: Rate both signals were brought to.
        num_threads: Thread hint for the transform provider.
        transform: Transform provider; defaults to scipy.fft.

    Returns:
        AudioRange with offset and length at ``real_rate``.
    """
    provider = transform or _DEFAULT_TRANSFORM
    query_length = len(query)

    common_size = get_common_size(query_length + len(base))
    common_bins = common_size // 2 + 1

    padded = resize(query, common_size)
    query_f = provider.forward(padded, num_threads)
    padded = resize(base, common_size)
    base_f = provider.forward(padded, num_threads)
    del padded

    if filters:
        filters.apply_each(query_f, base_f)

    cross = cross_power_spectrum(query_f[:common_bins], base_f[:common_bins])
    del query_f, base_f
    correlation = provider.inverse(cross, common_size, num_threads)
    del cross

    raw_peak, peak_value = find_peak(correlation)
    peak = correct_wraparound(raw_peak, common_size, query_length)

    result = AudioRange(
        offset=rescale(peak, real_rate, working_rate),
        length=rescale(query_length, real_rate, working_rate),
        peak_index=peak,
        peak_value=peak_value,
        common_size=common_size,
    )
    logger.debug(
        "Aligned %d query samples against %d base samples: common_size=%d, "
        "peak=%d (raw %d, value %.4g) -> offset=%d length=%d",
        query_length,
        len(base),
        common_size,
        peak,
        raw_peak,
        peak_value,
        result.offset,
        result.length,
    )
    return result
