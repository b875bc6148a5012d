# tests/conftest.py
import numpy as np
import pytest

from shenidam import SampleFormat, Session

BASE_RATE = 8000


@pytest.fixture
def rng():
    return np.random.default_rng(1234)


@pytest.fixture
def noise(rng):
    """Four seconds of white noise at 8 kHz, float32 (stand-in for a recording)."""
    return rng.standard_normal(4 * BASE_RATE).astype(np.float32)


@pytest.fixture
def pcm16(rng):
    """Four seconds of 16-bit PCM noise at 8 kHz."""
    return rng.integers(-20000, 20000, size=4 * BASE_RATE, dtype=np.int16)


@pytest.fixture
def capture_log():
    lines = []
    def cb(msg: str):
        lines.append(msg)
    return lines, cb


@pytest.fixture
def ready_session(noise):
    """A session at 8 kHz with ``noise`` committed as its base."""
    session = Session(BASE_RATE)
    session.set_base_audio(SampleFormat.SINGLE, noise, len(noise), BASE_RATE)
    yield session
    session.destroy()


@pytest.fixture
def settings_path(tmp_path):
    return tmp_path / "settings.json"
