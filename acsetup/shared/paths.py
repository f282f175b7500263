"""
Locations of acsetup's own files (logs, user configuration).

Honours XDG_DATA_HOME / XDG_CONFIG_HOME when they are set.
"""

import os
from pathlib import Path


def get_acsetup_data_dir() -> Path:
    base = os.environ.get("XDG_DATA_HOME") or str(Path.home() / ".local" / "share")
    return Path(base) / "acsetup"


def get_acsetup_logs_dir() -> Path:
    return get_acsetup_data_dir() / "logs"


def get_acsetup_config_dir() -> Path:
    base = os.environ.get("XDG_CONFIG_HOME") or str(Path.home() / ".config")
    return Path(base) / "acsetup"
