# shenidam/errors.py
"""
Error codes and exception hierarchy.

Every failure a session operation can report maps to one ErrorCode, and each
code has a matching exception class:

    ShenidamError (base)
    +-- InvalidArgumentError       INVALID_ARGUMENT
    +-- AlreadySetBaseSignalError  ALREADY_SET_BASE_SIGNAL
    +-- BaseSignalNotSetError      BASE_SIGNAL_NOT_SET
    +-- AllocationError            ALLOCATION_ERROR

The concrete classes also derive from the closest builtin (ValueError,
RuntimeError, MemoryError) so callers that only know the builtins still
catch them.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from enum import IntEnum
from typing import Any


class ErrorCode(IntEnum):
    SUCCESS = 0
    INVALID_ARGUMENT = 1
    ALREADY_SET_BASE_SIGNAL = 2
    BASE_SIGNAL_NOT_SET = 3
    ALLOCATION_ERROR = 4


_ERROR_MESSAGES: dict[ErrorCode, str] = {
    ErrorCode.INVALID_ARGUMENT: "Invalid argument",
    ErrorCode.ALREADY_SET_BASE_SIGNAL: "Base signal already set",
    ErrorCode.BASE_SIGNAL_NOT_SET: "Base signal not set",
    ErrorCode.ALLOCATION_ERROR: "Could not allocate memory",
}


def get_error_message(code: int) -> str:
    """Return the fixed human-readable text for an error code."""
    try:
        return _ERROR_MESSAGES.get(ErrorCode(code), "Unknown error")
    except ValueError:
        return "Unknown error"


class ShenidamError(Exception):
    """Base exception for all session errors.

    Attributes:
        message: Human-readable error description
        details: Optional dictionary with additional context
        cause: Original exception that caused this error (if any)
    """

    code: ErrorCode = ErrorCode.SUCCESS

    def __init__(
        self,
        message: str | None = None,
        details: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        message = message or get_error_message(self.code)
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.cause = cause

        if cause is not None:
            self.__cause__ = cause

    def __str__(self) -> str:
        if self.details:
            detail_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"{self.message} [{detail_str}]"
        return self.message

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to a dictionary for JSON output."""
        return {
            "error_type": self.__class__.__name__,
            "code": int(self.code),
            "message": self.message,
            "details": self.details,
            "cause": str(self.cause) if self.cause else None,
        }


class InvalidArgumentError(ShenidamError, ValueError):
    """Unrecognized format tag, non-positive sample rate or empty query."""

    code = ErrorCode.INVALID_ARGUMENT

    def __init__(
        self,
        message: str | None = None,
        argument: str | None = None,
        value: Any = None,
        cause: Exception | None = None,
    ) -> None:
        details = {}
        if argument:
            details["argument"] = argument
        if value is not None:
            details["value"] = value
        super().__init__(message, details=details, cause=cause)


class AlreadySetBaseSignalError(ShenidamError, RuntimeError):
    """A base signal was already committed to the session."""

    code = ErrorCode.ALREADY_SET_BASE_SIGNAL


class BaseSignalNotSetError(ShenidamError, RuntimeError):
    """A query was issued before any base signal was committed."""

    code = ErrorCode.BASE_SIGNAL_NOT_SET


class AllocationError(ShenidamError, MemoryError):
    """Memory exhaustion while building a buffer.

    Raised in place of the MemoryError that interrupted the operation; the
    original is kept as ``cause``.
    """

    code = ErrorCode.ALLOCATION_ERROR

    def __init__(
        self,
        message: str | None = None,
        stage: str | None = None,
        cause: Exception | None = None,
    ) -> None:
        details = {"stage": stage} if stage else {}
        super().__init__(message, details=details, cause=cause)


@contextmanager
def allocation_guard(stage: str) -> Iterator[None]:
    """Re-raise a MemoryError from the wrapped block as AllocationError."""
    try:
        yield
    except AllocationError:
        raise
    except MemoryError as e:
        raise AllocationError(stage=stage, cause=e) from e
