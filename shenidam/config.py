# shenidam/config.py
# -*- coding: utf-8 -*-
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

DEFAULT_SETTINGS_PATH = Path.home() / '.config' / 'shenidam' / 'settings.json'


class AppConfig:
    def __init__(self, settings_path: str | Path | None = None):
        self.settings_path = Path(settings_path) if settings_path else DEFAULT_SETTINGS_PATH
        self.defaults = {
            # --- Engine ---
            'num_threads': 1,
            'working_sample_rate': 0.0,

            # --- Spectral Filters ---
            'filters': [],
            'bandpass_lowcut_hz': 300.0,
            'bandpass_highcut_hz': 3400.0,
            'whiten_epsilon': 1e-9,

            # --- Output ---
            'output_folder': str(Path.cwd() / 'shenidam_output'),

            # --- Logging ---
            'log_level': 'WARNING',
            'log_timestamps': True,
        }
        self.settings = self.defaults.copy()
        self.load()

    def load(self):
        changed = False
        if self.settings_path.exists():
            try:
                with open(self.settings_path, 'r', encoding='utf-8') as f:
                    loaded_settings = json.load(f)
                if not isinstance(loaded_settings, dict):
                    raise ValueError('settings root must be an object')

                # 'threads' was the key name before num_threads
                if 'threads' in loaded_settings and 'num_threads' not in loaded_settings:
                    loaded_settings['num_threads'] = loaded_settings.pop('threads')
                    changed = True

                for key, default_value in self.defaults.items():
                    if key not in loaded_settings:
                        loaded_settings[key] = default_value
                        changed = True
                self.settings = loaded_settings
            except (json.JSONDecodeError, ValueError, IOError) as e:
                logger.warning("Ignoring unreadable settings file %s: %s", self.settings_path, e)
                self.settings = self.defaults.copy()
                changed = True
        else:
            self.settings = self.defaults.copy()
            changed = True

        if changed:
            self.save()

    def save(self):
        try:
            self.settings_path.parent.mkdir(parents=True, exist_ok=True)
            keys_to_save = self.defaults.keys()
            settings_to_save = {k: self.settings.get(k) for k in keys_to_save if k in self.settings}
            with open(self.settings_path, 'w', encoding='utf-8') as f:
                json.dump(settings_to_save, f, indent=4)
        except IOError as e:
            logger.warning("Error saving settings: %s", e)

    def get(self, key: str, default: Any = None) -> Any:
        return self.settings.get(key, default)

    def set(self, key: str, value: Any):
        self.settings[key] = value

    def ensure_dirs_exist(self):
        Path(self.get('output_folder')).mkdir(parents=True, exist_ok=True)
