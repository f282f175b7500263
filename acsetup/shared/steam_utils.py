"""
Steam Utilities Module

Locates the native and Flatpak Steam installation directories.
"""

import os
import logging
from pathlib import Path
from typing import Optional, Tuple

logger = logging.getLogger(__name__)


def get_native_steam_dir(home: Optional[Path] = None) -> Optional[Path]:
    """
    Native Steam lives in ~/.local/share/Steam; older setups only have the
    ~/.steam/root symlink pointing somewhere else.
    """
    home = Path(home) if home else Path.home()
    steam_dir = home / ".local" / "share" / "Steam"
    if steam_dir.is_dir():
        return steam_dir

    steam_root_link = home / ".steam" / "root"
    try:
        target = Path(os.readlink(steam_root_link))
    except OSError:
        return None
    if not target.is_absolute():
        target = steam_root_link.parent / target
    if target.is_dir():
        logger.debug(f"Native Steam found through {steam_root_link} -> {target}")
        return target
    return None


def get_flatpak_steam_dir(home: Optional[Path] = None) -> Optional[Path]:
    home = Path(home) if home else Path.home()
    steam_dir = home / ".var" / "app" / "com.valvesoftware.Steam" / "data" / "Steam"
    return steam_dir if steam_dir.is_dir() else None


def detect_steam_installation_dirs(home: Optional[Path] = None) -> Tuple[Optional[Path], Optional[Path]]:
    """
    Detect Steam installation directories.

    Returns:
        Tuple[Optional[Path], Optional[Path]]: (native_dir, flatpak_dir)
    """
    native_dir = get_native_steam_dir(home)
    flatpak_dir = get_flatpak_steam_dir(home)
    logger.info(f"Steam installation detection: Native={native_dir}, Flatpak={flatpak_dir}")
    return native_dir, flatpak_dir
