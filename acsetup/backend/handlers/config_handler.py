#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Configuration Handler Module
Handles acsetup settings: pinned add-on versions and working directories
"""

import json
import logging
from pathlib import Path
from typing import Optional

from ..data.game_data import DEFAULT_PROTON_GE_VERSION, DEFAULT_CSP_VERSION
from ...shared.paths import get_acsetup_config_dir

# Initialize logger
logger = logging.getLogger(__name__)

DEFAULT_SETTINGS = {
    "proton_ge_version": DEFAULT_PROTON_GE_VERSION,
    "csp_version": DEFAULT_CSP_VERSION,
    "work_dir": "temp",
    "backup_dir": "ac_configs",
}


class ConfigHandler:
    """
    Handles application configuration and settings
    Singleton pattern ensures all code shares the same instance

    Settings start from DEFAULT_SETTINGS and are overlaid with the values in
    ~/.config/acsetup/config.json when that file exists. The file is only
    read, never written.
    """
    _instance = None
    _initialized = False

    def __new__(cls, config_file: Optional[Path] = None):
        if cls._instance is None:
            cls._instance = super(ConfigHandler, cls).__new__(cls)
        return cls._instance

    def __init__(self, config_file: Optional[Path] = None):
        """Initialize configuration handler with default settings"""
        if ConfigHandler._initialized:
            return
        ConfigHandler._initialized = True

        self.config_file = Path(config_file) if config_file else get_acsetup_config_dir() / "config.json"
        self.settings = dict(DEFAULT_SETTINGS)
        self._load_config()

    @classmethod
    def reset(cls):
        """Drop the shared instance so the next call reloads from disk."""
        cls._instance = None
        cls._initialized = False

    def _load_config(self):
        """Overlay settings from the user's config file, if present."""
        if not self.config_file.is_file():
            logger.debug(f"No configuration file at {self.config_file}, using defaults")
            return
        try:
            with open(self.config_file, 'r', encoding='utf-8') as f:
                saved_config = json.load(f)
        except (OSError, ValueError) as e:
            logger.error(f"Error loading configuration from {self.config_file}: {e}")
            return

        if not isinstance(saved_config, dict):
            logger.error(f"Ignoring {self.config_file}: expected a JSON object")
            return

        for key, value in saved_config.items():
            if key not in DEFAULT_SETTINGS:
                logger.warning(f"Ignoring unknown configuration key '{key}'")
                continue
            if not isinstance(value, str) or not value.strip():
                logger.warning(f"Ignoring invalid value for '{key}': {value!r}")
                continue
            self.settings[key] = value.strip()
        logger.debug(f"Loaded configuration from {self.config_file}")

    def get_proton_ge_version(self) -> str:
        return self.settings["proton_ge_version"]

    def get_csp_version(self) -> str:
        return self.settings["csp_version"]

    def get_work_dir(self) -> Path:
        return Path(self.settings["work_dir"]).expanduser()

    def get_backup_dir(self) -> Path:
        return Path(self.settings["backup_dir"]).expanduser()
