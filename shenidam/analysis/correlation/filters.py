# shenidam/analysis/correlation/filters.py
"""
Ordered chain of frequency-domain filters.

Each entry pairs a callback with the context it was registered with. The
aligner runs every entry on the query spectrum and then on the base spectrum
before moving to the next entry, so a callback only ever sees one spectrum.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from typing import Any

import numpy as np

from ...errors import InvalidArgumentError
from ._base import FilterCallback


@dataclass(frozen=True, slots=True)
class FilterEntry:
    """One registered (callback, context) pair."""

    callback: FilterCallback
    context: Any = None

    def __call__(self, spectrum: np.ndarray) -> None:
        self.callback(spectrum, len(spectrum), self.context)


class FilterChain:
    """Filters in registration order."""

    def __init__(self) -> None:
        self._entries: list[FilterEntry] = []

    def add(self, callback: FilterCallback, context: Any = None) -> FilterEntry:
        """
        Append a filter.

        Raises:
            InvalidArgumentError: If ``callback`` is not callable.
        """
        if not callable(callback):
            raise InvalidArgumentError(
                "Filter callback must be callable", argument="callback", value=repr(callback)
            )
        entry = FilterEntry(callback, context)
        self._entries.append(entry)
        return entry

    def apply(self, spectrum: np.ndarray) -> np.ndarray:
        """Run every filter, in order, on ``spectrum`` in place."""
        for entry in self._entries:
            entry(spectrum)
        return spectrum

    def apply_each(self, *spectra: np.ndarray) -> None:
        """Run each filter, in order, on every spectrum before moving to the next filter.

        A callback is still handed one spectrum at a time; only the call order
        is interleaved (f1 on each spectrum, then f2 on each spectrum, ...).
        """
        for entry in self._entries:
            for spectrum in spectra:
                entry(spectrum)

    def clear(self) -> None:
        self._entries.clear()

    def __iter__(self) -> Iterator[FilterEntry]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __bool__(self) -> bool:
        return bool(self._entries)
