# shenidam/analysis/__init__.py
# -*- coding: utf-8 -*-
from .preprocessing import convert_to_samples, normalize, parse_sample_format
from .resampling import PolyphaseResampler, Resampler, resample, resample_parallel

__all__ = [
    "convert_to_samples",
    "normalize",
    "parse_sample_format",
    "PolyphaseResampler",
    "Resampler",
    "resample",
    "resample_parallel",
]
