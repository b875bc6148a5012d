# shenidam/analysis/correlation/__init__.py
"""
FFT cross-correlation engine.

Usage:
    from shenidam.analysis.correlation import FilterChain, align

    chain = FilterChain()
    chain.add(spectral_whitening)
    result = align(query, base, chain, real_rate=44100, working_rate=48000)
"""

from __future__ import annotations

from ._base import FilterCallback, TransformProvider
from .aligner import (
    align,
    correct_wraparound,
    cross_power_spectrum,
    find_peak,
    get_common_size,
    rescale,
    resize,
)
from .builtin_filters import (
    FILTERS,
    BandPassContext,
    WhitenContext,
    band_pass,
    build_filter,
    get_filter,
    spectral_whitening,
)
from .filters import FilterChain, FilterEntry
from .transform import ScipyTransform, init_transform_threads

__all__ = [
    # Main API
    "align",
    "FilterChain",
    "FilterEntry",
    # Steps
    "resize",
    "get_common_size",
    "cross_power_spectrum",
    "find_peak",
    "correct_wraparound",
    "rescale",
    # Protocols
    "FilterCallback",
    "TransformProvider",
    # Transform provider
    "ScipyTransform",
    "init_transform_threads",
    # Built-in filters
    "FILTERS",
    "BandPassContext",
    "WhitenContext",
    "band_pass",
    "spectral_whitening",
    "build_filter",
    "get_filter",
]
