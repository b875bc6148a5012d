# shenidam/models/__init__.py
"""
Data models shared across the package.

    from shenidam.models import AudioRange, SampleFormat, SessionState, ShenidamSettings

Model Organization:
    - enums.py: SampleFormat tags and the session lifecycle states
    - results.py: AudioRange returned by a query
    - settings.py: ShenidamSettings built from the config file
"""

from .enums import SampleFormat, SessionState
from .results import AudioRange
from .settings import ShenidamSettings

__all__ = [
    "AudioRange",
    "SampleFormat",
    "SessionState",
    "ShenidamSettings",
]
