# tests/test_preprocessing.py
import numpy as np
import pytest

from shenidam.analysis import preprocessing
from shenidam.analysis.preprocessing import convert_to_samples, normalize, parse_sample_format
from shenidam.errors import InvalidArgumentError
from shenidam.models import SampleFormat


@pytest.mark.parametrize("fmt, dtype", [
    (SampleFormat.BYTE, np.int8),
    (SampleFormat.SHORT, np.int16),
    (SampleFormat.INT, np.int32),
    (SampleFormat.LONG, np.dtype("l")),
    (SampleFormat.LONG_LONG, np.int64),
    (SampleFormat.DOUBLE, np.float64),
])
def test_convert_casts_each_format_to_float32(fmt, dtype):
    raw = np.array([-3, 0, 7, 100], dtype=dtype)
    out = convert_to_samples(fmt, raw, len(raw))
    assert out.dtype == np.float32
    np.testing.assert_array_equal(out, [-3.0, 0.0, 7.0, 100.0])


def test_convert_single_is_an_independent_copy():
    raw = np.array([0.25, -1.5, 3.0], dtype=np.float32)
    out = convert_to_samples(SampleFormat.SINGLE, raw, 3)
    np.testing.assert_array_equal(out, raw)
    assert not np.shares_memory(out, raw)
    out[0] = 99.0
    assert raw[0] == 0.25


def test_convert_reads_raw_bytes_and_honours_count():
    raw = np.array([1, 2, 3, 4], dtype=np.int16).tobytes()
    out = convert_to_samples(SampleFormat.SHORT, raw, 2)
    np.testing.assert_array_equal(out, [1.0, 2.0])


def test_format_accepted_by_value_and_name():
    assert parse_sample_format(1) is SampleFormat.SHORT
    assert parse_sample_format("double") is SampleFormat.DOUBLE
    assert parse_sample_format(SampleFormat.BYTE) is SampleFormat.BYTE


@pytest.mark.parametrize("tag", [99, -1, "int24", True, 2.0])
def test_unknown_format_rejected_before_allocation(monkeypatch, tag):
    def boom(*args, **kwargs):
        raise AssertionError("buffer allocated for an invalid format")
    monkeypatch.setattr(preprocessing.np, "frombuffer", boom)
    with pytest.raises(InvalidArgumentError):
        convert_to_samples(tag, b"\x00" * 16, 4)


def test_short_buffer_rejected():
    with pytest.raises(InvalidArgumentError):
        convert_to_samples(SampleFormat.INT, b"\x00" * 7, 2)


def test_normalize_gives_zero_mean_unit_variance(rng):
    x = (rng.standard_normal(10000) * 7.0 + 3.0).astype(np.float32)
    out = normalize(x)
    assert out is x
    assert abs(float(out.mean())) < 1e-4
    assert float(out.std()) == pytest.approx(1.0, abs=1e-4)


def test_normalize_constant_signal_becomes_zero():
    x = np.full(1000, 1000.0, dtype=np.float32)
    out = normalize(x)
    assert not np.isnan(out).any()
    np.testing.assert_array_equal(out, np.zeros(1000, dtype=np.float32))


def test_normalize_partitioning_does_not_change_result(rng):
    x = rng.standard_normal(10001).astype(np.float32)
    single = normalize(x.copy(), num_threads=1)
    threaded = normalize(x.copy(), num_threads=4)
    np.testing.assert_allclose(single, threaded, rtol=1e-5, atol=1e-6)


def test_normalize_empty():
    x = np.zeros(0, dtype=np.float32)
    assert len(normalize(x)) == 0
