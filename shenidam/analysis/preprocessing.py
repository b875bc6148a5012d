# shenidam/analysis/preprocessing.py
"""
Sample preparation ahead of resampling and correlation.

Pure functions that turn a raw typed buffer into a float32 array and
normalize it to zero mean and unit variance.
"""

from __future__ import annotations

import math

import numpy as np

from ..errors import InvalidArgumentError
from ..models.enums import SampleFormat
from .parallel import map_ordered, split_contiguous


def parse_sample_format(fmt: SampleFormat | int | str) -> SampleFormat:
    """
    Resolve a format tag given as enum member, integer value or name.

    Raises:
        InvalidArgumentError: If the tag is not one of the supported formats.
    """
    if isinstance(fmt, SampleFormat):
        return fmt
    try:
        if isinstance(fmt, str):
            return SampleFormat[fmt.strip().upper()]
        if isinstance(fmt, (int, np.integer)) and not isinstance(fmt, bool):
            return SampleFormat(int(fmt))
    except (KeyError, ValueError) as e:
        raise InvalidArgumentError(
            "Unrecognized sample format", argument="format", value=fmt, cause=e
        ) from e
    raise InvalidArgumentError("Unrecognized sample format", argument="format", value=fmt)


def convert_to_samples(
    fmt: SampleFormat | int | str,
    raw: bytes | bytearray | memoryview | np.ndarray,
    count: int,
) -> np.ndarray:
    """
    Convert ``count`` raw samples to a new float32 array.

    SINGLE buffers are copied as-is; every other format is cast element-wise.
    The format and the buffer size are checked before anything is allocated.

    Args:
        fmt: Sample format tag of ``raw``.
        raw: Any object exposing the buffer protocol.
        count: Number of samples to read from the start of ``raw``.

    Returns:
        1-D float32 array of length ``count`` that owns its memory.

    Raises:
        InvalidArgumentError: Unknown format, negative count, or a buffer
            holding fewer than ``count`` samples.
    """
    sample_format = parse_sample_format(fmt)
    dtype = sample_format.dtype
    if count < 0:
        raise InvalidArgumentError("Sample count must not be negative", argument="count", value=count)

    try:
        available = memoryview(raw).nbytes
    except TypeError as e:
        raise InvalidArgumentError(
            "Sample buffer does not support the buffer protocol", argument="raw", cause=e
        ) from e
    if available < count * dtype.itemsize:
        raise InvalidArgumentError(
            f"Sample buffer holds {available // dtype.itemsize} samples, {count} requested",
            argument="count",
            value=count,
        )

    try:
        view = np.frombuffer(raw, dtype=dtype, count=count)
    except (ValueError, BufferError) as e:
        raise InvalidArgumentError("Sample buffer is not contiguous", argument="raw", cause=e) from e

    if sample_format is SampleFormat.SINGLE:
        return view.copy()
    return view.astype(np.float32)


def _partial_moments(part: np.ndarray) -> tuple[float, float]:
    wide = part.astype(np.float64)
    return float(wide.sum()), float(np.dot(wide, wide))


def normalize(samples: np.ndarray, num_threads: int = 1) -> np.ndarray:
    """
    Normalize ``samples`` in place to zero mean and unit variance.

    Mean and variance come from a single pass of per-slice (sum, sum of
    squares) pairs added together, so the result does not depend on how the
    slices are distributed over threads. When the standard deviation is exactly
    zero the samples are only centred, so a constant signal becomes all zeros.

    Args:
        samples: float32 array owned by the caller's pipeline stage.
        num_threads: Worker threads for the reduction and the rescale.

    Returns:
        The same array, normalized.
    """
    n = len(samples)
    if n == 0:
        return samples

    bounds = split_contiguous(n, num_threads)
    parts = [samples[start:stop] for start, stop in bounds]
    moments = map_ordered(_partial_moments, parts, num_threads)

    total = sum(m[0] for m in moments)
    total_sq = sum(m[1] for m in moments)
    mean = total / n
    variance = max(total_sq / n - mean * mean, 0.0)
    std = math.sqrt(variance)

    def _apply(part: np.ndarray) -> None:
        part -= mean
        if std != 0.0:
            part /= std

    map_ordered(_apply, parts, num_threads)
    return samples
