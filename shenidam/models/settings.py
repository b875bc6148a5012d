# shenidam/models/settings.py
"""Typed settings.

Built from the raw config dictionary so the rest of the code never reaches
into ``dict[str, Any]`` directly.

Settings are organized by category:
- Engine: worker threads and working sample rate
- Filters: which built-in spectral filters run, and their parameters
- Output: where extracted ranges are written
- Logging: level and timestamp formatting
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class ShenidamSettings:
    """Complete settings with typed fields."""

    # =========================================================================
    # Engine Settings
    # =========================================================================
    num_threads: int
    working_sample_rate: float  # 0 = use the base audio's own rate

    # =========================================================================
    # Filter Settings
    # =========================================================================
    filters: list[str] = field(default_factory=list)  # Built-in filter names
    bandpass_lowcut_hz: float = 300.0
    bandpass_highcut_hz: float = 3400.0
    whiten_epsilon: float = 1e-9

    # =========================================================================
    # Output Settings
    # =========================================================================
    output_folder: str = ""

    # =========================================================================
    # Logging Settings
    # =========================================================================
    log_level: str = "WARNING"
    log_timestamps: bool = True

    @classmethod
    def from_config(cls, cfg: dict) -> ShenidamSettings:
        """Create settings from a config dictionary, defaulting missing keys."""
        filters = cfg.get("filters") or []
        if isinstance(filters, str):
            filters = [f.strip() for f in filters.split(",") if f.strip()]

        return cls(
            # Engine Settings
            num_threads=max(1, int(cfg.get("num_threads", 1))),
            working_sample_rate=float(cfg.get("working_sample_rate", 0.0)),
            # Filter Settings
            filters=[str(f) for f in filters],
            bandpass_lowcut_hz=float(cfg.get("bandpass_lowcut_hz", 300.0)),
            bandpass_highcut_hz=float(cfg.get("bandpass_highcut_hz", 3400.0)),
            whiten_epsilon=float(cfg.get("whiten_epsilon", 1e-9)),
            # Output Settings
            output_folder=str(cfg.get("output_folder", "")),
            # Logging Settings
            log_level=str(cfg.get("log_level", "WARNING")).upper(),
            log_timestamps=bool(cfg.get("log_timestamps", True)),
        )

    def to_dict(self) -> dict:
        """Convert settings to a plain dictionary for serialization."""
        from dataclasses import fields

        result = {}
        for f in fields(self):
            value = getattr(self, f.name)
            result[f.name] = list(value) if isinstance(value, list) else value
        return result
