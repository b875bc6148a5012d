# tests/test_aligner.py
import numpy as np
import pytest

from shenidam.analysis.correlation import (
    FilterChain,
    align,
    correct_wraparound,
    cross_power_spectrum,
    find_peak,
    get_common_size,
    rescale,
    resize,
)
from shenidam.analysis.correlation.aligner import round_half_away
from shenidam.analysis.preprocessing import normalize


def _zero_all(spectrum, bin_count, context):
    spectrum[:bin_count] = 0


class NumpyTransform:
    def forward(self, samples, num_threads=1):
        return np.fft.rfft(samples).astype(np.complex64)

    def inverse(self, spectrum, size, num_threads=1):
        return np.fft.irfft(spectrum, n=size).astype(np.float32)


def test_resize_pads_with_zeros():
    out = resize(np.array([1, 2, 3], dtype=np.float32), 5)
    np.testing.assert_array_equal(out, [1, 2, 3, 0, 0])
    assert out.dtype == np.float32


def test_resize_truncates():
    src = np.array([1, 2, 3], dtype=np.float32)
    out = resize(src, 2)
    np.testing.assert_array_equal(out, [1, 2])
    assert not np.shares_memory(out, src)


@pytest.mark.parametrize("minimal, expected", [(0, 1), (1, 1), (2, 2), (5, 8), (8, 8), (9, 16), (40000, 65536)])
def test_common_size_is_next_power_of_two(minimal, expected):
    assert get_common_size(minimal) == expected


def test_cross_power_spectrum_conjugates_query():
    q = np.array([1 + 2j, 3 - 1j], dtype=np.complex64)
    b = np.array([2 + 0j, 1j], dtype=np.complex64)
    np.testing.assert_allclose(cross_power_spectrum(q, b), [2 - 4j, -1 + 3j])


def test_find_peak_first_index_wins_ties():
    assert find_peak(np.array([1.0, 3.0, 3.0, 0.0], dtype=np.float32)) == (1, 3.0)
    assert find_peak(np.zeros(8, dtype=np.float32)) == (0, 0.0)


def test_wraparound_threshold():
    # threshold is common_size - query_length // 2 = 1024 - 50 = 974
    assert correct_wraparound(974, 1024, 100) == 974
    assert correct_wraparound(975, 1024, 100) == -49
    assert correct_wraparound(1000, 1024, 101) == -24
    assert correct_wraparound(0, 1024, 100) == 0


def test_rounding_is_half_away_from_zero():
    assert round_half_away(2.5) == 3
    assert round_half_away(-2.5) == -3
    assert round_half_away(1.4) == 1
    assert round_half_away(-0.4) == 0


def test_rescale_between_rates():
    assert rescale(100, 44100, 48000) == 92  # 91.875
    assert rescale(-100, 44100, 48000) == -92
    assert rescale(1000, 8000, 8000) == 1000


def test_align_recovers_exact_slice(noise):
    base = normalize(noise.copy())
    query = normalize(noise[5000:7000].copy())
    result = align(query, base, None, real_rate=8000, working_rate=8000)
    assert result.offset == 5000
    assert result.length == 2000
    assert result.common_size == get_common_size(2000 + len(noise))


def test_align_does_not_touch_base(noise):
    base = normalize(noise.copy())
    base.flags.writeable = False
    before = base.copy()
    align(normalize(noise[100:900].copy()), base, None, 8000, 8000)
    np.testing.assert_array_equal(base, before)


def test_align_negative_lag_when_query_starts_before_base(rng, noise):
    prefix = rng.standard_normal(300).astype(np.float32)
    query = normalize(np.concatenate([prefix, noise[:1700]]))
    result = align(query, normalize(noise.copy()), None, 8000, 8000)
    assert result.offset == -300
    assert result.peak_index == -300


def test_align_rescales_to_real_rate(noise):
    base = normalize(noise.copy())
    query = normalize(noise[4000:6000].copy())
    # pretend the caller supplied the base at twice the working rate
    result = align(query, base, None, real_rate=16000, working_rate=8000)
    assert result.offset == 8000
    assert result.length == 4000
    assert result.peak_index == 4000


def test_zeroing_filter_makes_index_zero_win(noise):
    chain = FilterChain()
    chain.add(_zero_all)
    base = normalize(noise.copy())
    query = normalize(noise[5000:7000].copy())
    result = align(query, base, chain, 8000, 8000)
    assert result.peak_index == 0
    assert result.offset == 0
    assert result.peak_value == 0.0


def test_align_with_custom_transform_provider(noise):
    base = normalize(noise.copy())
    query = normalize(noise[12345:13345].copy())
    result = align(query, base, None, 8000, 8000, transform=NumpyTransform())
    assert result.offset == 12345
