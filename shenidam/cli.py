#!/usr/bin/env python3
# shenidam/cli.py
"""
Find where one or more audio clips sit inside a reference recording.

Usage:
    shenidam BASE_WAV QUERY_WAV [QUERY_WAV ...] [--threads N] [--rate HZ]
             [--filter NAME ...] [--channel N] [--extract [DIR]] [--config PATH] [-v]

For every query the offset and length of the matching range of BASE_WAV are
printed, in samples at BASE_WAV's rate and in seconds. With --extract the
matching base range is also written out as a WAV file per query.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

import numpy as np
from scipy.io import wavfile

from . import __version__
from .analysis.correlation import build_filter
from .config import AppConfig
from .errors import InvalidArgumentError, ShenidamError
from .models import SampleFormat, ShenidamSettings
from .session import Session

logger = logging.getLogger("shenidam")


# ---------------------------------------------------------------------------
# WAV input/output
# ---------------------------------------------------------------------------


def load_wav_channel(path: Path, channel: int) -> tuple[int, np.ndarray]:
    """
    Read one channel of a WAV file in its native sample type.

    Returns:
        (sample_rate, contiguous 1-D samples)

    Raises:
        InvalidArgumentError: If the file has no such channel.
    """
    rate, data = wavfile.read(str(path))
    channels = 1 if data.ndim == 1 else data.shape[1]
    if not 0 <= channel < channels:
        raise InvalidArgumentError(
            f"{path.name} has {channels} channel(s), channel {channel} requested",
            argument="channel",
            value=channel,
        )
    if data.ndim == 2:
        data = data[:, channel]
    return int(rate), np.ascontiguousarray(data)


def session_samples(samples: np.ndarray) -> np.ndarray:
    """Shift unsigned 8-bit WAV data to signed so it maps onto the BYTE format."""
    if samples.dtype == np.uint8:
        return (samples.astype(np.int16) - 128).astype(np.int8)
    return samples


def sample_format_for(samples: np.ndarray) -> SampleFormat:
    try:
        return SampleFormat.from_dtype(samples.dtype)
    except KeyError as e:
        raise InvalidArgumentError(
            f"Unsupported WAV sample type {samples.dtype}", argument="format", cause=e
        ) from e


def extract_range(base: np.ndarray, offset: int, length: int) -> np.ndarray:
    """Slice ``base[offset:offset + length]``, filling with silence outside the base.

    Silence is 128 for unsigned 8-bit data and 0 for everything else.
    """
    silence = 128 if base.dtype == np.uint8 else 0
    out = np.full(length, silence, dtype=base.dtype)
    src_start = max(offset, 0)
    src_stop = min(offset + length, len(base))
    if src_stop > src_start:
        dst_start = src_start - offset
        out[dst_start : dst_start + (src_stop - src_start)] = base[src_start:src_stop]
    return out


# ---------------------------------------------------------------------------
# Main
# ---------------------------------------------------------------------------


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="shenidam",
        description="Locate audio clips inside a reference recording via FFT cross-correlation",
    )
    parser.add_argument("base", type=Path, help="Reference WAV file")
    parser.add_argument("queries", type=Path, nargs="+", help="WAV file(s) to locate")
    parser.add_argument(
        "--threads", type=int, default=None, help="Worker threads (default: from config, 1)"
    )
    parser.add_argument(
        "--rate",
        type=float,
        default=None,
        help="Working sample rate in Hz (default: the base file's own rate)",
    )
    parser.add_argument(
        "--filter",
        dest="filters",
        action="append",
        default=None,
        help="Spectral filter to apply (whiten, bandpass); repeatable",
    )
    parser.add_argument(
        "--channel", type=int, default=0, help="Channel to read from each file (default: 0)"
    )
    parser.add_argument(
        "--extract",
        nargs="?",
        const="",
        default=None,
        metavar="DIR",
        help="Write the matched base range of each query as WAV (default dir: output_folder)",
    )
    parser.add_argument("--config", type=Path, default=None, help="Settings JSON path")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log progress details")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    config = AppConfig(args.config)
    settings = ShenidamSettings.from_config(config.settings)
    if args.threads is not None:
        settings.num_threads = max(1, args.threads)
    if args.rate is not None:
        settings.working_sample_rate = args.rate
    if args.filters is not None:
        settings.filters = args.filters

    level = logging.DEBUG if args.verbose else getattr(logging, settings.log_level, logging.WARNING)
    log_format = "[%(asctime)s] %(message)s" if settings.log_timestamps else "%(message)s"
    logging.basicConfig(level=level, format=log_format, datefmt="%H:%M:%S")

    extract_dir: Path | None = None
    if args.extract is not None:
        if args.extract:
            extract_dir = Path(args.extract)
            extract_dir.mkdir(parents=True, exist_ok=True)
        else:
            config.ensure_dirs_exist()
            extract_dir = Path(config.get("output_folder"))

    try:
        base_rate, base = load_wav_channel(args.base, args.channel)
        working_rate = settings.working_sample_rate or base_rate
        logger.info("Base: %s, %d samples at %d Hz", args.base.name, len(base), base_rate)

        with Session(working_rate, settings.num_threads) as session:
            for name in settings.filters:
                callback, context = build_filter(name, settings, working_rate)
                session.add_frequential_filter(callback, context)

            signed_base = session_samples(base)
            session.set_base_audio(
                sample_format_for(signed_base), signed_base, len(signed_base), base_rate
            )

            for query_path in args.queries:
                query_rate, query = load_wav_channel(query_path, args.channel)
                query = session_samples(query)
                result = session.get_audio_range(
                    sample_format_for(query), query, len(query), query_rate
                )
                offset_s, length_s = result.to_seconds(base_rate)
                print(
                    f"{query_path.name}: offset={result.offset} ({offset_s:+.3f}s) "
                    f"length={result.length} ({length_s:.3f}s)"
                )
                if extract_dir is not None:
                    out_path = extract_dir / f"{query_path.stem}.matched.wav"
                    wavfile.write(
                        str(out_path), base_rate, extract_range(base, result.offset, result.length)
                    )
                    logger.info("Wrote %s", out_path)
    except ShenidamError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except (OSError, ValueError) as e:
        print(f"Error: could not read audio: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
