# shenidam/analysis/parallel.py
"""
Data-parallel helpers.

Work is split into contiguous, non-overlapping slices and run on a short-lived
thread pool. NumPy releases the GIL inside its array loops, so threads give
real speedup for the reductions and resampling done here.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from concurrent.futures import ThreadPoolExecutor
from typing import TypeVar

T = TypeVar("T")
R = TypeVar("R")


def split_contiguous(length: int, parts: int) -> list[tuple[int, int]]:
    """
    Partition ``range(length)`` into ``parts`` contiguous (start, stop) slices.

    Every slice has ``length // parts`` items except the last, which absorbs
    the remainder. ``parts`` is clamped to ``[1, length]`` so no slice is empty
    (a zero-length input yields a single empty slice).
    """
    parts = max(1, min(int(parts), length)) if length > 0 else 1
    slice_size = length // parts
    bounds = []
    for i in range(parts):
        start = i * slice_size
        stop = length if i == parts - 1 else start + slice_size
        bounds.append((start, stop))
    return bounds


def map_ordered(
    fn: Callable[[T], R],
    items: Sequence[T],
    num_threads: int,
    thread_name_prefix: str = "shenidam-worker",
) -> list[R]:
    """
    Run ``fn`` over ``items`` and return the results in input order.

    With a single thread (or a single item) the calls run inline. Otherwise
    every item is submitted to the pool and all futures are awaited before
    returning; the first exception raised by a worker propagates.
    """
    if num_threads <= 1 or len(items) <= 1:
        return [fn(item) for item in items]

    with ThreadPoolExecutor(
        max_workers=min(num_threads, len(items)),
        thread_name_prefix=thread_name_prefix,
    ) as executor:
        futures = [executor.submit(fn, item) for item in items]
        return [fut.result() for fut in futures]
