"""Persistent configuration: the countdown duration and UI settings."""

import json
import logging
import os
import re
from pathlib import Path

logger = logging.getLogger(__name__)

APP_NAME = "countdown"
DURATION_RE = re.compile(r"^\s*(\d+):(\d+):(\d+)\s*$")

DEFAULT_SETTINGS = {
    "wake_alarm": False,
    "topmost": False,
}


def default_config_dir():
    base = os.environ.get("XDG_CONFIG_HOME") or Path.home() / ".config"
    return Path(base) / APP_NAME


class ConfigManager:
    """Loads and saves the config files"""
    def __init__(self, config_dir=None):
        self.config_dir = Path(config_dir) if config_dir else default_config_dir()
        self.timeout_file = self.config_dir / "timeout.txt"
        self.settings_file = self.config_dir / "settings.json"
        self.data = self.load()

    # ---- Duration ----

    def read_duration(self):
        """(hours, minutes, seconds) or None if absent or malformed"""
        try:
            text = self.timeout_file.read_text()
        except OSError as e:
            logger.debug("No saved duration: %s", e)
            return None

        match = DURATION_RE.match(text)
        if not match:
            logger.debug("Malformed duration %r", text)
            return None

        return tuple(int(v) for v in match.groups())

    def write_duration(self, hours, minutes, seconds):
        if min(hours, minutes, seconds) < 0:
            logger.warning("Not saving negative duration %d:%d:%d", hours, minutes, seconds)
            return

        try:
            self.config_dir.mkdir(parents=True, exist_ok=True)
            self.timeout_file.write_text(f"{hours:02d}:{minutes:02d}:{seconds:02d}\n")
        except OSError as e:
            logger.warning("Save duration error: %s", e)

    # ---- Settings ----

    def load(self):
        data = dict(DEFAULT_SETTINGS)

        if self.settings_file.exists():
            try:
                with open(self.settings_file) as f:
                    loaded = json.load(f)
                if isinstance(loaded, dict):
                    data.update(loaded)
            except (OSError, ValueError) as e:
                logger.debug("Ignoring settings file: %s", e)

        return data

    def save(self):
        try:
            self.config_dir.mkdir(parents=True, exist_ok=True)
            with open(self.settings_file, 'w') as f:
                json.dump(self.data, f, indent=2)
        except OSError as e:
            logger.warning("Save config error: %s", e)

    def get(self, key, default=None):
        return self.data.get(key, default)

    def set(self, key, value):
        self.data[key] = value
