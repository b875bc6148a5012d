# shenidam/models/results.py
"""Result types returned by the alignment engine."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class AudioRange:
    """Where a query sits inside the base signal.

    ``offset`` and ``length`` are expressed in samples at the sample rate the
    base audio was supplied with. The remaining fields describe the
    correlation at the working rate and are kept for diagnostics.
    """

    offset: int  # May be negative when the query starts before the base
    length: int  # Query length converted to the base's original rate
    peak_index: int  # Lag at working rate, after wraparound correction
    peak_value: float  # Raw correlation maximum
    common_size: int  # Power-of-two correlation length

    def as_tuple(self) -> tuple[int, int]:
        return self.offset, self.length

    def to_seconds(self, sample_rate: float) -> tuple[float, float]:
        """Convert (offset, length) to seconds at ``sample_rate``."""
        return self.offset / float(sample_rate), self.length / float(sample_rate)
