# shenidam/models/enums.py
# -*- coding: utf-8 -*-
from __future__ import annotations

from enum import Enum, IntEnum

import numpy as np


class SampleFormat(IntEnum):
    """Raw sample layouts accepted by the preprocessor.

    LONG follows the platform's C ``long`` width, like the other integer
    tags follow their C counterparts.
    """

    BYTE = 0
    SHORT = 1
    INT = 2
    LONG = 3
    LONG_LONG = 4
    DOUBLE = 5
    SINGLE = 6

    @property
    def dtype(self) -> np.dtype:
        return np.dtype(_FORMAT_DTYPES[self])

    @classmethod
    def from_dtype(cls, dtype: np.dtype | str) -> SampleFormat:
        """Map a NumPy dtype onto the matching format tag.

        Raises:
            KeyError: If no tag has the same kind and width.
        """
        dt = np.dtype(dtype)
        for fmt in (cls.BYTE, cls.SHORT, cls.INT, cls.LONG_LONG, cls.DOUBLE, cls.SINGLE):
            if fmt.dtype == dt:
                return fmt
        raise KeyError(f"No sample format for dtype {dt}")


_FORMAT_DTYPES: dict[SampleFormat, str] = {
    SampleFormat.BYTE: "i1",
    SampleFormat.SHORT: "i2",
    SampleFormat.INT: "i4",
    SampleFormat.LONG: "l",
    SampleFormat.LONG_LONG: "i8",
    SampleFormat.DOUBLE: "f8",
    SampleFormat.SINGLE: "f4",
}


class SessionState(Enum):
    CREATED = 'created'
    READY = 'ready'
    DESTROYED = 'destroyed'
