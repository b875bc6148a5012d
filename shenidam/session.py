# shenidam/session.py
# -*- coding: utf-8 -*-
"""
Alignment session: one base signal, many queries.

A session is created with the working sample rate, receives its base signal
exactly once, and then answers any number of ``get_audio_range`` queries
against it. Every operation either completes or raises without touching the
session's committed state.
"""

from __future__ import annotations

import logging
import math
from datetime import datetime
from typing import TYPE_CHECKING, Any, Callable

import numpy as np

from .analysis.correlation import FilterChain, align, init_transform_threads
from .analysis.preprocessing import convert_to_samples, normalize, parse_sample_format
from .analysis.resampling import rate_ratio, resample_parallel
from .errors import (
    AlreadySetBaseSignalError,
    BaseSignalNotSetError,
    InvalidArgumentError,
    allocation_guard,
)
from .models.enums import SampleFormat, SessionState

if TYPE_CHECKING:
    from .analysis.correlation import FilterCallback, TransformProvider
    from .analysis.resampling import Resampler
    from .models.results import AudioRange

logger = logging.getLogger(__name__)


def _check_sample_rate(sample_rate: float, argument: str = "sample_rate") -> float:
    try:
        rate = float(sample_rate)
    except (TypeError, ValueError) as e:
        raise InvalidArgumentError("Sample rate must be a number", argument=argument, value=sample_rate, cause=e) from e
    if not rate > 0 or math.isinf(rate):
        raise InvalidArgumentError("Sample rate must be strictly positive", argument=argument, value=sample_rate)
    return rate


def _check_count(count: int) -> int:
    if isinstance(count, bool) or not isinstance(count, (int, np.integer)):
        raise InvalidArgumentError("Sample count must be an integer", argument="count", value=count)
    if count <= 0:
        raise InvalidArgumentError("Sample count must be non-zero", argument="count", value=count)
    return int(count)


class Session:
    """Holds a committed base signal and the spectral filter chain."""

    def __init__(
        self,
        base_sample_rate: float,
        num_threads: int = 1,
        log_callback: Callable[[str], None] | None = None,
        resampler: Resampler | None = None,
        transform: TransformProvider | None = None,
    ):
        self.base_sample_rate = _check_sample_rate(base_sample_rate, "base_sample_rate")
        self.num_threads = max(1, int(num_threads))
        self.log = log_callback
        self.resampler = resampler
        self.transform = transform

        self.base_real_sample_rate: float | None = None
        self.base_num_samples = 0
        self._base: np.ndarray | None = None
        self._filters: FilterChain | None = FilterChain()
        self._state = SessionState.CREATED

        init_transform_threads()
        self._log_message(
            f"Session created: working rate {self.base_sample_rate:g} Hz, "
            f"{self.num_threads} thread(s)"
        )

    # -- Logging ---------------------------------------------------------------

    def _log_message(self, message: str):
        """Send a message to the module logger and, if set, the log callback."""
        logger.debug(message)
        if self.log:
            ts = datetime.now().strftime('%H:%M:%S')
            self.log(f'[{ts}] {message}')

    # -- State -----------------------------------------------------------------

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def base(self) -> np.ndarray | None:
        """Committed base samples at the working rate (read-only), or None."""
        return self._base

    @property
    def filters(self) -> FilterChain:
        self._ensure_alive()
        return self._filters

    def _ensure_alive(self):
        if self._state is SessionState.DESTROYED:
            raise InvalidArgumentError("Session has been destroyed", argument="session")

    # -- Operations ------------------------------------------------------------

    def add_frequential_filter(self, callback: FilterCallback, context: Any = None):
        """
        Register a spectral filter run on both spectra before correlation.

        Args:
            callback: ``(spectrum, bin_count, context) -> None``; mutates the
                spectrum in place.
            context: Opaque value handed back to the callback.

        Raises:
            InvalidArgumentError: If ``callback`` is not callable or the
                session was destroyed.
        """
        self._ensure_alive()
        with allocation_guard("add_frequential_filter"):
            self._filters.add(callback, context)
        name = getattr(callback, "__name__", type(callback).__name__)
        self._log_message(f"Registered filter #{len(self._filters)}: {name}")

    def set_base_audio(
        self,
        fmt: SampleFormat | int | str,
        samples: Any,
        count: int,
        sample_rate: float,
    ):
        """
        Convert, normalize and resample the base signal, then commit it.

        Args:
            fmt: Sample format tag of ``samples``.
            samples: Raw buffer holding at least ``count`` samples.
            count: Number of samples.
            sample_rate: Rate of the supplied samples; results are reported
                at this rate.

        Raises:
            AlreadySetBaseSignalError: A base signal is already committed.
            InvalidArgumentError: Bad format, count or sample rate.
            AllocationError: Memory ran out; nothing was committed.
        """
        self._ensure_alive()
        if self._state is not SessionState.CREATED:
            raise AlreadySetBaseSignalError()
        rate = _check_sample_rate(sample_rate)
        count = _check_count(count)
        sample_format = parse_sample_format(fmt)

        with allocation_guard("set_base_audio"):
            base = convert_to_samples(sample_format, samples, count)
            normalize(base, self.num_threads)

            ratio = rate_ratio(self.base_sample_rate, rate)
            if ratio != 1:
                target = int(round(count * ratio))
                base, num_samples = resample_parallel(
                    base, ratio, target, self.num_threads, self.resampler
                )
                self._log_message(
                    f"Resampled base from {rate:g} Hz to {self.base_sample_rate:g} Hz: "
                    f"{count} -> {num_samples} samples"
                )
            else:
                num_samples = count

        base.flags.writeable = False
        self._base = base
        self.base_num_samples = num_samples
        self.base_real_sample_rate = rate
        self._state = SessionState.READY
        self._log_message(
            f"Base signal set: {num_samples} samples at working rate "
            f"({count} supplied at {rate:g} Hz, format {sample_format.name})"
        )

    def get_audio_range(
        self,
        fmt: SampleFormat | int | str,
        samples: Any,
        count: int,
        sample_rate: float,
    ) -> AudioRange:
        """
        Locate a query signal inside the committed base.

        Args:
            fmt: Sample format tag of ``samples``.
            samples: Raw buffer holding at least ``count`` samples.
            count: Number of query samples (non-zero).
            sample_rate: Rate of the query samples.

        Returns:
            AudioRange whose offset and length are in samples at the base
            signal's original rate. The offset may be negative.

        Raises:
            BaseSignalNotSetError: No base signal committed yet.
            InvalidArgumentError: Bad format, count or sample rate.
            AllocationError: Memory ran out during the query.
        """
        self._ensure_alive()
        if self._state is not SessionState.READY:
            raise BaseSignalNotSetError()
        rate = _check_sample_rate(sample_rate)
        count = _check_count(count)
        sample_format = parse_sample_format(fmt)

        with allocation_guard("get_audio_range"):
            track = convert_to_samples(sample_format, samples, count)
            normalize(track, self.num_threads)

            ratio = rate_ratio(self.base_sample_rate, rate)
            if ratio != 1:
                target = int(math.ceil(count * ratio))
                track, _ = resample_parallel(
                    track, ratio, target, self.num_threads, self.resampler
                )

            self._log_message(
                f"Query: {count} samples at {rate:g} Hz -> {len(track)} at working rate"
            )
            result = align(
                track,
                self._base,
                self._filters,
                real_rate=self.base_real_sample_rate,
                working_rate=self.base_sample_rate,
                num_threads=self.num_threads,
                transform=self.transform,
            )

        self._log_message(
            f"Query located: offset={result.offset:+d}, length={result.length} "
            f"(common size {result.common_size}, peak {result.peak_value:.4g})"
        )
        return result

    def destroy(self):
        """Release the base signal and the filter chain. Safe to call twice."""
        if self._state is SessionState.DESTROYED:
            return
        self._base = None
        self.base_num_samples = 0
        if self._filters is not None:
            self._filters.clear()
        self._filters = None
        self._state = SessionState.DESTROYED
        self._log_message("Session destroyed")

    def __enter__(self) -> Session:
        return self

    def __exit__(self, exc_type, exc, tb):
        self.destroy()

    def __repr__(self) -> str:
        return (
            f"Session(working_rate={self.base_sample_rate:g}, threads={self.num_threads}, "
            f"state={self._state.value}, base_samples={self.base_num_samples})"
        )
