# shenidam/__init__.py
"""
Locate a short audio clip inside a longer reference recording.

Usage:
    import shenidam

    session = shenidam.create(48000, num_threads=4)
    session.set_base_audio(shenidam.SampleFormat.SHORT, base_pcm, len(base_pcm), 48000)
    result = session.get_audio_range(shenidam.SampleFormat.SHORT, clip_pcm, len(clip_pcm), 44100)
    print(result.offset, result.length)
    session.destroy()

The module-level functions mirror the session methods for callers that prefer
a handle-passing style.
"""

from __future__ import annotations

from typing import Any, Callable

from .errors import (
    AllocationError,
    AlreadySetBaseSignalError,
    BaseSignalNotSetError,
    ErrorCode,
    InvalidArgumentError,
    ShenidamError,
    get_error_message,
)
from .models import AudioRange, SampleFormat, SessionState
from .session import Session

__version__ = "0.6.0"


def create(
    base_sample_rate: float,
    num_threads: int = 1,
    log_callback: Callable[[str], None] | None = None,
) -> Session:
    """Create a session working at ``base_sample_rate``."""
    return Session(base_sample_rate, num_threads, log_callback=log_callback)


def add_frequential_filter(session: Session, callback: Callable, context: Any = None) -> None:
    session.add_frequential_filter(callback, context)


def set_base_audio(
    session: Session,
    fmt: SampleFormat | int | str,
    samples: Any,
    count: int,
    sample_rate: float,
) -> None:
    session.set_base_audio(fmt, samples, count, sample_rate)


def get_audio_range(
    session: Session,
    fmt: SampleFormat | int | str,
    samples: Any,
    count: int,
    sample_rate: float,
) -> AudioRange:
    return session.get_audio_range(fmt, samples, count, sample_rate)


def destroy(session: Session) -> None:
    session.destroy()


__all__ = [
    # Main API
    "Session",
    "create",
    "add_frequential_filter",
    "set_base_audio",
    "get_audio_range",
    "destroy",
    # Models
    "AudioRange",
    "SampleFormat",
    "SessionState",
    # Errors
    "ErrorCode",
    "get_error_message",
    "ShenidamError",
    "InvalidArgumentError",
    "AlreadySetBaseSignalError",
    "BaseSignalNotSetError",
    "AllocationError",
]
