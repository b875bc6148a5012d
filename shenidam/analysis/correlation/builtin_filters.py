# shenidam/analysis/correlation/builtin_filters.py
"""
Spectral filters shipped with the package.

All of them follow the filter callback contract ``(spectrum, bin_count,
context) -> None`` and work on a single spectrum, so they can be registered
on any session with ``add_frequential_filter``.

Usage:
    from shenidam.analysis.correlation.builtin_filters import build_filter

    callback, context = build_filter("bandpass", settings, sample_rate=48000)
    session.add_frequential_filter(callback, context)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

import numpy as np

from ...errors import InvalidArgumentError

if TYPE_CHECKING:
    from ...models.settings import ShenidamSettings
    from ._base import FilterCallback


@dataclass(frozen=True, slots=True)
class BandPassContext:
    """Pass band for ``band_pass``, at the session's working rate."""

    sample_rate: float
    lowcut_hz: float
    highcut_hz: float


@dataclass(frozen=True, slots=True)
class WhitenContext:
    epsilon: float = 1e-9


def spectral_whitening(spectrum: np.ndarray, bin_count: int, context: WhitenContext | None) -> None:
    """
    Equalize the magnitude of every bin while keeping its phase.

    Correlating whitened spectra focuses on timing rather than on matching
    spectral balance, which helps when the query went through different
    processing (EQ, lossy encoding) than the base.
    """
    eps = context.epsilon if context is not None else 1e-9
    bins = spectrum[:bin_count]
    bins /= np.abs(bins) + eps


def band_pass(spectrum: np.ndarray, bin_count: int, context: BandPassContext) -> None:
    """
    Zero every bin outside ``[lowcut_hz, highcut_hz]``.

    Bin ``i`` of a ``bin_count``-bin real spectrum sits at
    ``i * sample_rate / (2 * (bin_count - 1))`` Hz.
    """
    if bin_count < 2:
        return
    freqs = np.arange(bin_count) * (context.sample_rate / (2.0 * (bin_count - 1)))
    outside = (freqs < context.lowcut_hz) | (freqs > context.highcut_hz)
    spectrum[:bin_count][outside] = 0


def _whiten_context(settings: ShenidamSettings, sample_rate: float) -> WhitenContext:
    return WhitenContext(epsilon=settings.whiten_epsilon)


def _band_pass_context(settings: ShenidamSettings, sample_rate: float) -> BandPassContext:
    nyquist = sample_rate / 2.0
    low = max(0.0, settings.bandpass_lowcut_hz)
    high = min(settings.bandpass_highcut_hz, nyquist)
    if low >= high:
        raise InvalidArgumentError(
            f"Empty pass band {low:.1f}-{high:.1f} Hz at {sample_rate:g} Hz",
            argument="bandpass",
        )
    return BandPassContext(sample_rate=sample_rate, lowcut_hz=low, highcut_hz=high)


# Registry of built-in filters: name -> (callback, context builder)
FILTERS: dict[str, tuple[FilterCallback, Any]] = {
    "whiten": (spectral_whitening, _whiten_context),
    "bandpass": (band_pass, _band_pass_context),
}

_FILTER_ALIASES: dict[str, str] = {
    "phat": "whiten",
    "band-pass": "bandpass",
    "dialogue": "bandpass",
}


def get_filter(name: str) -> FilterCallback:
    """
    Look up a built-in filter callback by name or alias.

    Raises:
        InvalidArgumentError: If the name is not recognized.
    """
    key = name.strip().lower()
    key = _FILTER_ALIASES.get(key, key)
    if key not in FILTERS:
        raise InvalidArgumentError(
            f"Unknown filter: {name}. Available: {list(FILTERS.keys())}",
            argument="filter",
            value=name,
        )
    return FILTERS[key][0]


def build_filter(
    name: str,
    settings: ShenidamSettings,
    sample_rate: float,
) -> tuple[FilterCallback, Any]:
    """Return the (callback, context) pair for a built-in filter."""
    callback = get_filter(name)
    key = _FILTER_ALIASES.get(name.strip().lower(), name.strip().lower())
    context = FILTERS[key][1](settings, sample_rate)
    return callback, context
