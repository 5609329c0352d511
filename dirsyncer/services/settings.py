"""
Default run settings.

Settings are read from a JSON file; the engine itself never writes
anything besides the two synchronized trees.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, asdict
from pathlib import Path
from typing import Any, Optional

from dirsyncer.core.models import SyncConfiguration, SyncMode


LOG_LEVELS = ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL')


@dataclass
class SyncSettings:
    """Defaults applied to every run unless overridden."""
    mode: SyncMode = SyncMode.ONE_WAY
    verify_after_copy: bool = False
    throttle_delay: float = 0.001
    buffer_size: int = 65536
    log_level: str = "INFO"

    def to_configuration(self, source_root: str, target_root: str) -> SyncConfiguration:
        """Build the configuration for a run between two roots."""
        return SyncConfiguration(
            source_root=source_root,
            target_root=target_root,
            mode=self.mode,
            verify_after_copy=self.verify_after_copy,
            throttle_delay=self.throttle_delay,
            buffer_size=self.buffer_size,
        )


class SettingsManager:
    """Manager for loading/saving sync settings."""

    def __init__(self, settings_path: Optional[Path] = None):
        self.settings_path = Path(settings_path) if settings_path else self._get_default_path()
        self._settings: Optional[SyncSettings] = None

    @staticmethod
    def _get_default_path() -> Path:
        """Get the default settings file path."""
        if os.name == 'nt':
            # Windows
            app_data = os.environ.get('APPDATA', os.path.expanduser('~'))
            return Path(app_data) / 'DirSyncer' / 'settings.json'
        else:
            # Linux/Mac
            config_home = os.environ.get('XDG_CONFIG_HOME',
                                         os.path.expanduser('~/.config'))
            return Path(config_home) / 'dirsyncer' / 'settings.json'

    @property
    def settings(self) -> SyncSettings:
        """Get current settings, loading from disk if needed."""
        if self._settings is None:
            self._settings = self.load()
        return self._settings

    def load(self) -> SyncSettings:
        """Load settings from disk, falling back to defaults."""
        if not self.settings_path.exists():
            return SyncSettings()

        try:
            with open(self.settings_path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logging.warning(f"SettingsManager - Could not read {self.settings_path}: {e}")
            return SyncSettings()

        if not isinstance(data, dict):
            logging.warning(f"SettingsManager - Ignoring {self.settings_path}: not a JSON object")
            return SyncSettings()

        return self._from_dict(data)

    def save(self, settings: Optional[SyncSettings] = None) -> bool:
        """Save settings to disk."""
        settings = settings or self._settings
        if settings is None:
            return False

        try:
            self.settings_path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.settings_path, 'w', encoding='utf-8') as f:
                json.dump(self._to_dict(settings), f, indent=2)
        except OSError as e:
            logging.error(f"SettingsManager - Could not save {self.settings_path}: {e}")
            return False

        self._settings = settings
        return True

    def _to_dict(self, settings: SyncSettings) -> dict:
        """Convert settings to dictionary for JSON serialization."""
        data = asdict(settings)
        data['mode'] = settings.mode.value
        return data

    def _from_dict(self, data: dict) -> SyncSettings:
        """Convert dictionary back to settings, keeping defaults for bad values."""
        defaults = SyncSettings()

        def get_value(key: str, expected: type | tuple[type, ...]) -> Any:
            value = data.get(key, getattr(defaults, key))
            # bool is an int subclass; never accept it for numeric fields
            if not isinstance(value, expected) or (isinstance(value, bool) and bool not in _as_tuple(expected)):
                logging.warning(f"SettingsManager - Invalid value for '{key}': {value!r}")
                return getattr(defaults, key)
            return value

        mode = defaults.mode
        if 'mode' in data:
            try:
                mode = SyncMode.from_string(str(data['mode']))
            except ValueError as e:
                logging.warning(f"SettingsManager - {e}")

        throttle_delay = get_value('throttle_delay', (int, float))
        if throttle_delay < 0:
            logging.warning(f"SettingsManager - Invalid value for 'throttle_delay': {throttle_delay!r}")
            throttle_delay = defaults.throttle_delay

        buffer_size = get_value('buffer_size', int)
        if buffer_size <= 0:
            logging.warning(f"SettingsManager - Invalid value for 'buffer_size': {buffer_size!r}")
            buffer_size = defaults.buffer_size

        log_level = str(get_value('log_level', str)).upper()
        if log_level not in LOG_LEVELS:
            logging.warning(f"SettingsManager - Invalid value for 'log_level': {log_level!r}")
            log_level = defaults.log_level

        return SyncSettings(
            mode=mode,
            verify_after_copy=get_value('verify_after_copy', bool),
            throttle_delay=float(throttle_delay),
            buffer_size=buffer_size,
            log_level=log_level,
        )


def _as_tuple(expected: type | tuple[type, ...]) -> tuple[type, ...]:
    return expected if isinstance(expected, tuple) else (expected,)
